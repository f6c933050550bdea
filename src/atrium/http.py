"""Basic HTTP abstractions and functionality"""
import json
from base64 import b64encode
from collections.abc import Mapping
from functools import partial
from itertools import chain
from operator import attrgetter, methodcaller

from .errors import MalformedResponse

__all__ = [
    "Request",
    "Response",
    "basic_auth",
    "token_auth",
    "GET",
    "POST",
    "PUT",
    "DELETE",
]


class _FrozenDict(Mapping):
    __slots__ = "_inner"

    def __init__(self, inner=()):
        self._inner = dict(inner)

    __len__ = property(attrgetter("_inner.__len__"))
    __iter__ = property(attrgetter("_inner.__iter__"))
    __getitem__ = property(attrgetter("_inner.__getitem__"))
    __repr__ = property(attrgetter("_inner.__repr__"))


class _SlotsMixin(object):
    __slots__ = ()

    def _asdict(self):
        return {a: getattr(self, a) for a in self.__slots__}

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self._asdict() == other._asdict()
        return NotImplemented

    def replace(self, **kwargs):
        """Create a copy with replaced fields

        Parameters
        ----------
        **kwargs
            fields and values to replace
        """
        return type(self)(**_merge_maps(self._asdict(), kwargs))


def _merge_maps(m1, m2):
    """merge two Mapping objects, keeping the type of the first mapping"""
    return type(m1)(chain(m1.items(), m2.items()))


def _find_header(headers, name):
    name = name.lower()
    return next(
        (value for key, value in headers.items() if key.lower() == name),
        None,
    )


class Request(_SlotsMixin):
    """A simple HTTP request.

    Parameters
    ----------
    method: str
        The http method
    url: str
        The requested url, or a path relative to the API root
    content: bytes or None
        The request content
    params: Mapping
        The query parameters.
    headers: Mapping
        Request headers.
    """

    __slots__ = "method", "url", "content", "params", "headers"
    __hash__ = None

    def __init__(
        self,
        method,
        url,
        content=None,
        params=_FrozenDict(),
        headers=_FrozenDict(),
    ):
        self.method = method
        self.url = url
        self.content = content
        self.params = params
        self.headers = headers

    def with_headers(self, headers):
        """Create a new request with added headers

        Parameters
        ----------
        headers: Mapping
            the headers to add
        """
        return self.replace(headers=_merge_maps(self.headers, headers))

    def with_prefix(self, prefix):
        """Create a new request with added url prefix

        Parameters
        ----------
        prefix: str
            the URL prefix
        """
        return self.replace(url=prefix + self.url)

    def with_params(self, params):
        """Create a new request with added query parameters

        Parameters
        ----------
        params: Mapping
            the query parameters to add
        """
        return self.replace(params=_merge_maps(self.params, params))

    def json(self, body):
        """Create a new request carrying ``body`` encoded as JSON

        Parameters
        ----------
        body
            any JSON-serializable object
        """
        return self.replace(
            content=json.dumps(body).encode("utf-8"),
            headers=_merge_maps(
                self.headers, {"Content-Type": "application/json"}
            ),
        )

    def __repr__(self):
        return (
            "<Request: {0.method} {0.url}, params={0.params!r}, "
            "headers={0.headers!r}>"
        ).format(self)


class Response(_SlotsMixin):
    """A simple HTTP response.

    Parameters
    ----------
    status_code: int
        The HTTP status code
    content: bytes or None
        The response content
    headers: Mapping
        The headers of the response.
    """

    __slots__ = "status_code", "content", "headers"
    __hash__ = None

    def __init__(self, status_code, content=None, headers=_FrozenDict()):
        self.status_code = status_code
        self.content = content
        self.headers = headers

    @property
    def ok(self):
        """whether the status code is in the 2xx range"""
        return 200 <= self.status_code < 300

    def header(self, name):
        """Case-insensitive header lookup, ``None`` if absent"""
        return _find_header(self.headers, name)

    def json(self):
        """Decode the content as JSON

        Raises
        ------
        MalformedResponse
            if the content is empty or not valid JSON
        """
        if not self.content:
            raise MalformedResponse("empty response body", response=self)
        try:
            return json.loads(self.content)
        except ValueError as e:
            raise MalformedResponse(
                "response body is not JSON: {}".format(e), response=self
            ) from e

    def __repr__(self):
        return (
            "<Response: {0.status_code}, " "headers={0.headers!r}>"
        ).format(self)


def basic_auth(credentials):
    """Create an HTTP basic authentication callable

    Parameters
    ----------
    credentials: ~typing.Tuple[str, str]
        The (username, password)-tuple

    Returns
    -------
    ~typing.Callable[[Request], Request]
        A callable which adds basic authentication to a :class:`Request`.
    """
    encoded = b64encode(":".join(credentials).encode("ascii")).decode()
    return methodcaller("with_headers", {"Authorization": "Basic " + encoded})


def token_auth(token):
    """Create a bearer token authentication callable

    Parameters
    ----------
    token: str
        a personal access token or OAuth access token

    Returns
    -------
    ~typing.Callable[[Request], Request]
        A callable which adds the token to a :class:`Request`.
    """
    return methodcaller("with_headers", {"Authorization": "Bearer " + token})


GET = partial(Request, "GET")
GET.__doc__ = "Shortcut for a GET request"
POST = partial(Request, "POST")
POST.__doc__ = "Shortcut for a POST request"
PUT = partial(Request, "PUT")
PUT.__doc__ = "Shortcut for a PUT request"
DELETE = partial(Request, "DELETE")
DELETE.__doc__ = "Shortcut for a DELETE request"
