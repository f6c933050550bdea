"""
The entire public API is available at root level::

    from atrium import Client, Task, Collection, NotFound, ...
"""

from . import clients, http, params
from .__about__ import __version__  # noqa
from .attributes import *  # noqa
from .client import *  # noqa
from .clients import *  # noqa
from .collection import *  # noqa
from .errors import *  # noqa
from .http import *  # noqa
from .resource import *  # noqa
from .resources import *  # noqa

__all__ = ["clients", "http", "params"]
