"""The client: sending requests to the API and parsing its responses"""
import copy
import logging
import os
import urllib.request
from functools import singledispatch

from .clients import send
from .collection import Page
from .errors import (
    MalformedResponse,
    MissingRequiredArgument,
    raise_for_status,
)
from .http import DELETE, GET, POST, PUT, basic_auth, token_auth
from .params import build, merge_params

__all__ = ["Client", "DEFAULT_BASE_URL", "DEFAULT_PAGE_SIZE"]

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.asana.com/api/1.0"
DEFAULT_PAGE_SIZE = 20

ENV_TOKEN = "ATRIUM_ACCESS_TOKEN"
ENV_BASE_URL = "ATRIUM_BASE_URL"
ENV_PAGE_SIZE = "ATRIUM_PAGE_SIZE"


def _identity(obj):
    return obj


def _make_auth(auth):
    if auth is None:
        return _identity
    elif callable(auth):
        return auth
    else:
        return basic_auth(auth)


@singledispatch
def _dump_param(value):
    """dump a query param value"""
    return str(value)


@_dump_param.register(bool)
def _dump_bool(value):
    return "true" if value else "false"


@_dump_param.register(list)
@_dump_param.register(tuple)
def _dump_sequence(value):
    return ",".join(map(_dump_param, value))


def _option_params(options):
    """the query parameters for the recognized request options"""
    return build(
        {
            "opt_fields": options.get("fields"),
            "opt_expand": options.get("expand"),
            "opt_pretty": options.get("pretty") or None,
        }
    )


class Client:
    """Sends requests to the API on behalf of resources and collections.

    Parameters
    ----------
    session
        The HTTP client to use.
        Its type must have been registered with :func:`~atrium.send`.
        If not given, the built-in :mod:`urllib` module is used.
    base_url: str
        The root of the API, prefixed to every path
    auth: ~typing.Tuple[str, str] \
        or ~typing.Callable[[Request], Request] or None
        This may be:

        * A (username, password)-tuple for basic authentication
        * A callable to authenticate requests
          (e.g. from :func:`~atrium.token_auth`).
        * ``None`` (no authentication)
    page_size: int
        The default number of records per page for list queries
    headers: ~typing.Mapping[str, str] or None
        Headers to add to every request
    options: ~typing.Mapping or None
        Default request options, overridden by per-call options.
        Recognized are ``params``, ``fields``, ``expand``, and ``pretty``.
    """

    def __init__(
        self,
        session=None,
        base_url=DEFAULT_BASE_URL,
        auth=None,
        page_size=DEFAULT_PAGE_SIZE,
        headers=None,
        options=None,
    ):
        self.session = (
            urllib.request.build_opener() if session is None else session
        )
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.headers = dict(headers or {})
        self.options = dict(options or {})
        self._authenticate = _make_auth(auth)

    @classmethod
    def access_token(cls, token, **kwargs):
        """Create a client authenticating with a bearer token

        Parameters
        ----------
        token: str
            a personal access token
        **kwargs
            passed to :class:`Client`
        """
        return cls(auth=token_auth(token), **kwargs)

    @classmethod
    def from_env(cls, environ=None, **kwargs):
        """Create a client configured from environment variables.

        ``ATRIUM_ACCESS_TOKEN`` is required.
        ``ATRIUM_BASE_URL`` and ``ATRIUM_PAGE_SIZE`` are optional.
        Explicit keyword arguments take precedence.
        """
        environ = os.environ if environ is None else environ
        token = environ.get(ENV_TOKEN)
        if not token:
            raise MissingRequiredArgument(ENV_TOKEN)
        if environ.get(ENV_BASE_URL):
            kwargs.setdefault("base_url", environ[ENV_BASE_URL])
        if environ.get(ENV_PAGE_SIZE):
            kwargs.setdefault("page_size", int(environ[ENV_PAGE_SIZE]))
        return cls.access_token(token, **kwargs)

    def with_options(self, **options):
        """A copy of this client with additional default options"""
        clone = copy.copy(self)
        clone.options = dict(self.options, **options)
        return clone

    def get(self, path, params=None, options=None):
        """GET a path, with query parameters

        Returns
        -------
        ~atrium.http.Response
        """
        return self._request(GET(path), params, options)

    def post(self, path, body=None, options=None):
        """POST a body to a path

        Returns
        -------
        ~atrium.http.Response
        """
        return self._request(POST(path), None, options, body=body)

    def put(self, path, body=None, options=None):
        """PUT a body to a path

        Returns
        -------
        ~atrium.http.Response
        """
        return self._request(PUT(path), None, options, body=body)

    def delete(self, path, options=None):
        """DELETE a path

        Returns
        -------
        ~atrium.http.Response
        """
        return self._request(DELETE(path), None, options)

    def parse(self, response):
        """Unwrap the response envelope

        Returns
        -------
        ~atrium.collection.Page
            the records and the continuation cursor.
            A single record is returned as a one-element list.

        Raises
        ------
        ~atrium.errors.MalformedResponse
            if the response has no ``data`` envelope
        """
        payload = response.json()
        if not isinstance(payload, dict) or "data" not in payload:
            raise MalformedResponse(
                "response has no data envelope", response=response
            )
        data = payload["data"]
        records = data if isinstance(data, list) else [data]
        next_page = payload.get("next_page") or {}
        return Page(records, next_page.get("offset"))

    def _request(self, request, params, options, body=None):
        options = dict(self.options, **(options or {}))
        query = merge_params(params or {}, options.get("params"))
        query.update(_option_params(options))
        request = request.with_params(
            {key: _dump_param(value) for key, value in query.items()}
        )
        if body is not None:
            request = request.json({"data": body})
        request = self._authenticate(
            request.with_prefix(self.base_url).with_headers(self.headers)
        )
        logger.debug(
            "%s %s params=%r", request.method, request.url, request.params
        )
        return raise_for_status(send(self.session, request))

    def __repr__(self):
        return "<Client: {}>".format(self.base_url)
