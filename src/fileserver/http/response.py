"""
=============================================================================
RESPONSE WRITERS
=============================================================================

Handlers in this package don't RETURN responses, they WRITE them.

=============================================================================
WHY A WRITER INSTEAD OF A RETURN VALUE?
=============================================================================

A returned response object is finished before anyone else sees it. A
writer is a pipe: whoever holds it decides what goes through. That is
what lets the file server sit between the static file primitive and the
client and change the outcome:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       WRITER CHAIN                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   StaticFileHandler ──► ResponseInterceptor ──► real writer        │
    │        │                      │                      │              │
    │   write_header(404)     holds 404 back          (nothing yet)      │
    │   write(b"404 ...")     captures body,          (nothing yet)      │
    │                         raises                                      │
    │                         ContentNotWrittenError                      │
    │                                                                      │
    │   FileServer then picks an error handler, which writes the final   │
    │   status and body to the REAL writer.                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE WRITER CONTRACT
=============================================================================

    headers          mutable mapping, set BEFORE write_header()
    write_header(c)  sends the status line; at most once per response
    write(data)      sends body bytes; implies write_header(200) if no
                     status was written yet; returns bytes written

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Union
import logging

from .status_codes import HTTPStatus, status_phrase


logger = logging.getLogger(__name__)


class ContentNotWrittenError(IOError):
    """
    Raised by a writer that refused to forward body bytes.

    The ResponseInterceptor raises this once an error status is pending.
    Code that writes through an interceptor must treat it as "this
    response is finished": stop writing, don't retry, don't fail.
    """

    def __init__(self, message: str = "content not written"):
        super().__init__(message)


class ResponseWriter(ABC):
    """
    Abstract destination for one HTTP response.

    Implementations:
        BufferedResponseWriter  collects the response in memory
        ResponseInterceptor     wraps another writer and holds back errors
        StatusRecorder          wraps another writer and counts bytes
    """

    @property
    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """Response headers; changes after write_header() are not sent."""

    @abstractmethod
    def write_header(self, status: int) -> None:
        """Send the status code."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Send body bytes, returning how many were written."""


@dataclass
class HTTPResponse:
    """A complete response, as collected by BufferedResponseWriter."""

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def reason(self) -> str:
        """Reason phrase for ``status`` ("Not Found" for 404)."""
        return status_phrase(self.status)


class BufferedResponseWriter(ResponseWriter):
    """
    Writer that keeps the whole response in memory.

    This is the "real transport" for hosts that need the complete
    response before sending anything (WSGI, tests):

        writer = BufferedResponseWriter()
        server(writer, request)
        response = writer.to_response()
    """

    def __init__(self):
        self._headers: Dict[str, str] = {}
        self._sent_headers: Optional[Dict[str, str]] = None
        self.status: Optional[int] = None
        self._body = bytearray()

    @property
    def headers(self) -> Dict[str, str]:
        return self._headers

    def write_header(self, status: int) -> None:
        if self.status is not None:
            logger.warning(
                f"Superfluous write_header({status}), status {self.status} already sent"
            )
            return
        self.status = int(status)
        # Snapshot: later header changes don't reach the client.
        self._sent_headers = dict(self._headers)

    def write(self, data: Union[bytes, bytearray]) -> int:
        if self.status is None:
            self.write_header(HTTPStatus.OK)
        self._body.extend(data)
        return len(data)

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def to_response(self) -> HTTPResponse:
        """Collected response; an untouched writer is an empty 200."""
        headers = self._sent_headers if self._sent_headers is not None else self._headers
        return HTTPResponse(
            status=self.status if self.status is not None else HTTPStatus.OK,
            headers=dict(headers),
            body=self.body,
        )


# =============================================================================
# WRITING HELPERS
# =============================================================================
#
# Small functions for the responses the file server writes itself.
# They work on ANY ResponseWriter, including an interceptor, so an error
# written through them can still be replaced by a custom error handler.
#
# =============================================================================

def write_plain_text(writer: ResponseWriter, body: bytes, status: int) -> None:
    """
    Write ``body`` verbatim as a text/plain response with ``status``.

    Content-Length is dropped because a handler may have set it for a
    file body that is no longer being sent.
    """
    writer.headers.pop("Content-Length", None)
    writer.headers["Content-Type"] = "text/plain; charset=utf-8"
    writer.headers["X-Content-Type-Options"] = "nosniff"
    writer.write_header(status)
    writer.write(body)


def http_error(writer: ResponseWriter, message: str, status: int) -> None:
    """
    Write a plain-text error: ``message`` followed by a newline.

    Example:
        http_error(writer, "404 page not found", 404)
    """
    write_plain_text(writer, f"{message}\n".encode("utf-8"), status)


def not_found(writer: ResponseWriter) -> None:
    """Write the standard 404 reply."""
    http_error(writer, "404 page not found", HTTPStatus.NOT_FOUND)


def redirect(
    writer: ResponseWriter,
    location: str,
    status: int = HTTPStatus.MOVED_PERMANENTLY,
) -> None:
    """Redirect with a Location header and no body."""
    writer.headers["Location"] = location
    writer.write_header(status)


def format_http_date(dt: datetime) -> str:
    """
    Format a UTC datetime as an HTTP-date (RFC 7231).

    Example: "Wed, 01 Jan 2026 12:00:00 GMT"
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
