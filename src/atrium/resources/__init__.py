"""The concrete resources of the API"""
from .job import *  # noqa
from .project import *  # noqa
from .story import *  # noqa
from .tag import *  # noqa
from .task import *  # noqa
