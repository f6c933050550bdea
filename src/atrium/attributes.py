"""Attribute storage for hydrated resources, and field declarations"""
import typing as t
from collections.abc import Mapping
from datetime import date, datetime
from operator import attrgetter

from .errors import MalformedResponse

__all__ = ["AttributeBag", "Field", "parse_datetime", "parse_date"]

T = t.TypeVar("T")


class AttributeBag(Mapping):
    """An immutable snapshot of a resource's fields,
    as last returned by the server.

    Values are scalars, ``{gid, resource_type}`` references,
    lists of such references, or ``None``.
    Absent keys read as ``None`` through :meth:`get`.

    Parameters
    ----------
    record: ~typing.Mapping[str, object]
        the parsed record
    """

    __slots__ = "_inner"

    def __init__(self, record=()):
        self._inner = dict(record)

    __len__ = property(attrgetter("_inner.__len__"))
    __iter__ = property(attrgetter("_inner.__iter__"))
    __getitem__ = property(attrgetter("_inner.__getitem__"))

    @classmethod
    def load(cls, record, response=None):
        """Create a bag from a parsed record, checking it is usable

        Raises
        ------
        MalformedResponse
            if the record is not a mapping, or has no ``gid``
        """
        if not isinstance(record, Mapping):
            raise MalformedResponse(
                "expected a record, got {!r}".format(record),
                response=response,
            )
        if not record.get("gid"):
            raise MalformedResponse(
                "record has no gid: {!r}".format(record), response=response
            )
        return cls(record)

    def project(self, names):
        """The values for the given names, ``None`` where absent

        Parameters
        ----------
        names: ~typing.Iterable[str]
            the field names to include

        Returns
        -------
        dict
        """
        return {name: self._inner.get(name) for name in names}

    def __repr__(self):
        return "AttributeBag({!r})".format(self._inner)


def _identity(obj):
    return obj


class Field(t.Generic[T]):
    """A readable field of a resource.
    Implements python's descriptor protocol.

    Parameters
    ----------
    key: str or None
        the key in the server record.
        Defaults to the attribute name the field is assigned to.
    load: ~typing.Callable[[object], T] or None
        converts the raw value. Not called for ``None``.

    Example
    -------

    >>> class Task(Resource):
    ...     name = Field()
    ...     created_at = Field(load=parse_datetime)
    ...     tag_refs = Field('tags')
    """

    def __init__(self, key=None, load=None):
        self.key = key
        self.load = load or _identity

    def __set_name__(self, owner, name):
        self.resource, self.name = owner, name
        if self.key is None:
            self.key = name

    def __get__(self, instance, owner=None):
        """part of the descriptor protocol.
        On a class, returns the field.
        On an instance, returns the field value"""
        if instance is None:
            return self
        value = instance.attributes.get(self.key)
        return None if value is None else self.load(value)

    def __repr__(self):
        try:
            return "<{0.__class__.__name__} {0.name!r} of {1}>".format(
                self, self.resource.__name__
            )
        except AttributeError:
            return "<{0.__class__.__name__} [no name]>".format(self)


def parse_datetime(value):
    """parse an ISO 8601 timestamp, as sent by the server"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_date(value):
    """parse an ISO 8601 date (``YYYY-MM-DD``)"""
    return date.fromisoformat(value)
