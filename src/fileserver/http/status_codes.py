"""
=============================================================================
HTTP STATUS CODES (RFC 7231)
=============================================================================

The status codes a file server actually produces, with reason phrases.

=============================================================================
WHERE EACH CODE COMES FROM
=============================================================================

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ File contents or a generated directory listing            │
    │  301   │ Index-name redirect, or trailing slash added to a dir     │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  403   │ Directory listing disabled, or OS permission denied       │
    │  404   │ Missing file, or request outside the configured prefix    │
    │  500   │ Any other filesystem failure                              │
    └────────┴───────────────────────────────────────────────────────────┘

Anything >= 400 is an ERROR status. Error statuses are held back by the
response interceptor so a custom error handler can take over the body.

=============================================================================
"""

from enum import IntEnum


# Statuses at or above this value are routed through error dispatch.
ERROR_THRESHOLD = 400


class HTTPStatus(IntEnum):
    """
    HTTP status codes as an IntEnum.

    IntEnum members compare equal to plain ints, so handlers that receive
    ``404`` and handlers that receive ``HTTPStatus.NOT_FOUND`` behave the
    same way:

        HTTPStatus.NOT_FOUND == 404        # True
        HTTPStatus(403).phrase             # "Forbidden"
    """

    # 1xx Informational
    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101

    # 2xx Success
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206

    # 3xx Redirection
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # 4xx Client Errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    REQUEST_TIMEOUT = 408
    GONE = 410
    PAYLOAD_TOO_LARGE = 413
    URI_TOO_LONG = 414
    RANGE_NOT_SATISFIABLE = 416
    IM_A_TEAPOT = 418
    TOO_MANY_REQUESTS = 429

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line ("Not Found" for 404)."""
        return _PHRASES.get(self, "Unknown")


_PHRASES = {
    HTTPStatus.CONTINUE: "Continue",
    HTTPStatus.SWITCHING_PROTOCOLS: "Switching Protocols",
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",
    HTTPStatus.MULTIPLE_CHOICES: "Multiple Choices",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not Acceptable",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.GONE: "Gone",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.URI_TOO_LONG: "URI Too Long",
    HTTPStatus.RANGE_NOT_SATISFIABLE: "Range Not Satisfiable",
    HTTPStatus.IM_A_TEAPOT: "I'm a teapot",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}


def status_phrase(code: int) -> str:
    """
    Reason phrase for any integer code, known or not.

    Custom error handlers may write codes this enum doesn't list
    (e.g. 451), so callers building a status line go through here
    rather than ``HTTPStatus(code)``, which would raise ValueError.
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"


def is_valid_status(code: int) -> bool:
    """True for any three-digit code in the 100-599 range."""
    return 100 <= code <= 599
