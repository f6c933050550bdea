"""Turning named, possibly absent arguments into wire-ready mappings.

Every query string and request body sent by atrium passes through
:func:`build`, so none of them contain ``None`` or empty collections:
many endpoints treat an absent key differently from an explicit null.
"""
import dataclasses
import string
import typing as t

from .errors import MissingRequiredArgument

__all__ = [
    "is_blank",
    "build",
    "merge_params",
    "fill_path",
    "Arguments",
    "required",
    "free_form",
]

_COLLECTIONS = (list, tuple, set, frozenset, dict)
_formatter = string.Formatter()


def is_blank(value):
    """whether a value should be left out of a request

    >>> is_blank(None), is_blank([]), is_blank(''), is_blank(0)
    (True, True, False, False)
    """
    return value is None or (isinstance(value, _COLLECTIONS) and not value)


def build(values, required=(), one_of=()):
    """Create a wire-ready mapping from named arguments.

    Parameters
    ----------
    values: ~typing.Mapping[str, object]
        argument names and values, which may be ``None`` or empty
    required: ~typing.Iterable[str]
        names which may not be ``None``
    one_of: ~typing.Sequence[str]
        names of which at least one may not be ``None``

    Returns
    -------
    dict
        the arguments, without ``None`` or empty collection values

    Raises
    ------
    MissingRequiredArgument
        if a required argument is ``None``.
        The check happens before blank values are removed.
    """
    for name in required:
        if values.get(name) is None:
            raise MissingRequiredArgument(name)
    if one_of and all(values.get(name) is None for name in one_of):
        raise MissingRequiredArgument(*one_of)
    return {key: value for key, value in values.items() if not is_blank(value)}


def merge_params(named, extra=None):
    """Merge free-form query parameters under named ones.

    Named parameters take precedence on key collisions.
    Blank named parameters do not shadow a free-form value.
    """
    return build(dict(extra or {}, **build(named)))


def fill_path(template, values):
    """Interpolate a path template, consuming the values it uses

    >>> fill_path('/tags/{tag}/tasks', {'tag': '5', 'limit': 20})
    ('/tags/5/tasks', {'limit': 20})
    """
    names = {name for _, name, _, _ in _formatter.parse(template) if name}
    path = template.format_map(values)
    return path, {k: v for k, v in values.items() if k not in names}


def required():
    """A dataclass field for an argument which may not be ``None``"""
    return dataclasses.field(default=None, metadata={"required": True})


def free_form():
    """A dataclass field for free-form attributes,
    sent alongside the named ones"""
    return dataclasses.field(default_factory=dict, repr=False)


class Arguments:
    """Base class for the argument structure of one operation.

    Subclasses are frozen dataclasses whose fields mirror the operation's
    named arguments. Fields created with :func:`required` are checked,
    ``__one_of__`` names a group of which at least one must be given,
    and a field named ``extra`` holds free-form attributes.

    Example
    -------

    >>> @dataclass(frozen=True)
    ... class AddTag(Arguments):
    ...     tag: str = required()
    ...     extra: t.Mapping[str, t.Any] = free_form()
    ...
    >>> AddTag(tag='42', extra={'foo': None}).build()
    {'tag': '42'}
    """

    __one_of__: t.Tuple[str, ...] = ()

    def values(self):
        """all arguments as a mapping, named ones over free-form ones"""
        merged = dict(getattr(self, "extra", None) or {})
        merged.update(
            (f.name, getattr(self, f.name))
            for f in dataclasses.fields(self)
            if f.name != "extra"
        )
        return merged

    def build(self):
        """the wire-ready mapping of these arguments"""
        return build(
            self.values(),
            required=[
                f.name
                for f in dataclasses.fields(self)
                if f.metadata.get("required")
            ],
            one_of=self.__one_of__,
        )
