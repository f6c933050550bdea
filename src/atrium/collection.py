"""Lazy, cursor-paginated sequences of resources"""
import logging
import typing as t
from collections import deque
from itertools import islice

__all__ = ["Page", "Collection"]

logger = logging.getLogger(__name__)

T = t.TypeVar("T")


class Page(t.NamedTuple):
    """One parsed page of a list response.

    Unpacks as ``(content, cursor)``.

    Parameters
    ----------
    content: ~typing.List[~typing.Mapping]
        the raw records on this page
    cursor: str or None
        the continuation cursor, ``None`` on the last page
    """

    content: t.List[t.Mapping[str, t.Any]]
    cursor: t.Optional[str] = None


class Collection(t.Iterator[T]):
    """An iterator over resources of one type,
    fetching further pages as it is consumed.

    A collection keeps only the current page and the continuation cursor.
    It cannot be rewound: to iterate again, run the originating query again.

    Parameters
    ----------
    page: Page
        the first page, already retrieved
    rtype: ~typing.Type[~atrium.Resource]
        the resource type of the elements
    client: ~atrium.Client
        the client to fetch further pages with
    path: str
        the path the first page was retrieved from
    params: ~typing.Mapping or None
        the query parameters used for the first page
    options: ~typing.Mapping or None
        the request options used for the first page
    """

    __slots__ = (
        "_rtype",
        "_client",
        "_path",
        "_params",
        "_options",
        "_buffer",
        "_cursor",
    )

    def __init__(self, page, rtype, client, path, params=None, options=None):
        content, cursor = page
        self._rtype, self._client = rtype, client
        self._path = path
        self._params = dict(params or {})
        self._options = options
        self._buffer = deque(content)
        self._cursor = cursor

    @classmethod
    def fetch(cls, client, path, rtype, params=None, options=None):
        """Retrieve the first page and return the collection

        Parameters
        ----------
        client: ~atrium.Client
            the client to use
        path: str
            the list endpoint
        rtype: ~typing.Type[~atrium.Resource]
            the resource type of the elements
        params: ~typing.Mapping or None
            the query parameters
        options: ~typing.Mapping or None
            the request options
        """
        response = client.get(path, params=params, options=options)
        return cls(
            client.parse(response), rtype, client, path, params, options
        )

    @property
    def cursor(self):
        """the continuation cursor, ``None`` if this is the last page"""
        return self._cursor

    @property
    def page(self):
        """the not yet consumed elements of the current page"""
        return [self._rtype.load(r, self._client) for r in self._buffer]

    def take(self, count):
        """Consume at most ``count`` elements

        Returns
        -------
        ~typing.List[T]
        """
        return list(islice(self, count))

    def __iter__(self):
        return self

    def __next__(self):
        while not self._buffer:
            if self._cursor is None:
                raise StopIteration()
            self._fetch_next_page()
        return self._rtype.load(self._buffer.popleft(), self._client)

    def _fetch_next_page(self):
        params = dict(self._params, offset=self._cursor)
        logger.debug(
            "fetching next page of %s (offset=%s)", self._path, self._cursor
        )
        response = self._client.get(
            self._path, params=params, options=self._options
        )
        content, self._cursor = self._client.parse(response)
        self._buffer = deque(content)

    def __repr__(self):
        return "<Collection of {}: {}{}>".format(
            self._rtype.__name__,
            self._path,
            "" if self._cursor is None else " (more pages)",
        )
