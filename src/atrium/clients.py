"""Functions for dealing with HTTP clients in a unified manner"""
import logging
import urllib.request
from functools import singledispatch
from urllib.error import HTTPError
from urllib.parse import urlencode

from .http import Response

__all__ = ["send"]

logger = logging.getLogger(__name__)


@singledispatch
def send(client, request):
    """Given a client, send a :class:`~atrium.http.Request`,
    returning a :class:`~atrium.http.Response`.

    A :func:`~functools.singledispatch` function.
    Non-2xx statuses are returned, not raised.

    Parameters
    ----------
    client: any registered client type
        The client with which to send the request.

        Client types registered by default:

        * :class:`urllib.request.OpenerDirector`
          (e.g. from :func:`~urllib.request.build_opener`)
        * :class:`requests.Session`
          (if `requests <http://docs.python-requests.org/>`_ is installed)

    request: Request
        The request to send

    Returns
    -------
    Response
        the resulting response


    Example of registering a new HTTP client:

    >>> @send.register(MyClientClass)
    ... def _send(client, request: Request) -> Response:
    ...     r = client.send(request)
    ...     return Response(r.status, r.read(), headers=r.get_headers())
    """
    raise TypeError("client {!r} not registered".format(client))


@send.register(urllib.request.OpenerDirector)
def _urllib_send(opener, req, **kwargs):
    """Send a request with an :mod:`urllib` opener"""
    url = req.url + "?" + urlencode(req.params) if req.params else req.url
    raw_req = urllib.request.Request(
        url, req.content, headers=dict(req.headers), method=req.method
    )
    try:
        res = opener.open(raw_req, **kwargs)
    except HTTPError as http_err:
        res = http_err
    return Response(res.getcode(), content=res.read(), headers=res.headers)


try:
    import requests
except ImportError:  # pragma: no cover
    logger.debug("requests not installed, only urllib is available")
else:

    @send.register(requests.Session)
    def _requests_send(session, req):
        """send a request with the `requests` library"""
        res = session.request(
            req.method,
            req.url,
            data=req.content,
            params=req.params,
            headers=req.headers,
        )
        return Response(res.status_code, res.content, headers=res.headers)
