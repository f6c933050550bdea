"""Exceptions raised by atrium, and the mapping from HTTP status to error"""
import logging

__all__ = [
    "AtriumError",
    "MissingRequiredArgument",
    "TransportError",
    "InvalidRequest",
    "NoAuthorization",
    "Forbidden",
    "NotFound",
    "Conflict",
    "RateLimited",
    "ServerError",
    "MalformedResponse",
    "ResourceDeleted",
    "raise_for_status",
]

logger = logging.getLogger(__name__)


class AtriumError(Exception):
    """Base class for all errors raised by this package"""


class MissingRequiredArgument(AtriumError, TypeError):
    """A required argument was not given.
    Always raised before anything is sent.

    Parameters
    ----------
    names: ~typing.Sequence[str]
        the argument names. If more than one,
        at least one of them should have been given.
    """

    def __init__(self, *names):
        self.names = names
        if len(names) == 1:
            msg = "missing required argument: {!r}".format(names[0])
        else:
            msg = "at least one of {} is required".format(
                ", ".join(map(repr, names))
            )
        super().__init__(msg)


class TransportError(AtriumError):
    """The server answered with a non-2xx status

    Parameters
    ----------
    response: ~atrium.http.Response
        the response which caused the error
    messages: ~typing.Sequence[str]
        human readable error messages found in the response, if any
    """

    def __init__(self, response, messages=()):
        self.response = response
        self.messages = tuple(messages)
        detail = "; ".join(self.messages) or "no details given"
        super().__init__("{} {}".format(response.status_code, detail))

    @property
    def status_code(self):
        return self.response.status_code


class InvalidRequest(TransportError):
    """400: the request was malformed or missing parameters"""


class NoAuthorization(TransportError):
    """401: missing or invalid credentials"""


class Forbidden(TransportError):
    """403: the credentials do not permit this operation"""


class NotFound(TransportError):
    """404: the resource does not exist, or is not visible"""


class Conflict(TransportError):
    """409: the request conflicts with the current state of the resource"""


class RateLimited(TransportError):
    """429: too many requests

    Attributes
    ----------
    retry_after: float or None
        seconds to wait before retrying, if the server said so
    """

    def __init__(self, response, messages=()):
        super().__init__(response, messages)
        raw = response.header("Retry-After")
        try:
            self.retry_after = None if raw is None else float(raw)
        except ValueError:
            self.retry_after = None


class ServerError(TransportError):
    """5xx: the server failed to handle the request"""


class MalformedResponse(AtriumError):
    """The response lacks something needed to build the expected result

    Parameters
    ----------
    message: str
        what is missing or wrong
    response: ~atrium.http.Response or None
        the offending response, if available
    """

    def __init__(self, message, response=None):
        self.response = response
        super().__init__(message)


class ResourceDeleted(AtriumError):
    """The resource instance was deleted and may no longer be used
    for server operations"""


_STATUS_ERRORS = {
    400: InvalidRequest,
    401: NoAuthorization,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
    429: RateLimited,
}


def _messages(response):
    try:
        payload = response.json()
    except MalformedResponse:
        return ()
    if not isinstance(payload, dict):
        return ()
    return tuple(
        err["message"]
        for err in payload.get("errors") or ()
        if isinstance(err, dict) and "message" in err
    )


def raise_for_status(response):
    """Raise the appropriate :class:`TransportError` for non-2xx responses

    Parameters
    ----------
    response: ~atrium.http.Response
        the response to check

    Returns
    -------
    ~atrium.http.Response
        the response itself, if it was successful
    """
    if response.ok:
        return response
    status = response.status_code
    if status >= 500:
        error_cls = ServerError
    else:
        error_cls = _STATUS_ERRORS.get(status, TransportError)
    if error_cls in (RateLimited, ServerError):
        logger.warning("received status %d from the server", status)
    raise error_cls(response, _messages(response))
