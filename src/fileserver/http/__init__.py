"""
=============================================================================
HTTP MODULE
=============================================================================

HTTP building blocks shared by the rest of the package.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       HTTPRequest (method, path, raw query, headers)     │
    │ response.py      ResponseWriter, BufferedResponseWriter,            │
    │                  HTTPResponse, error/redirect writing helpers       │
    │ status_codes.py  HTTPStatus enum and the error threshold            │
    │ mime_types.py    Content-Type for served files                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest
from .response import (
    ResponseWriter,
    BufferedResponseWriter,
    HTTPResponse,
    ContentNotWrittenError,
    http_error,
    not_found,
    redirect,
    write_plain_text,
    format_http_date,
)
from .status_codes import HTTPStatus, ERROR_THRESHOLD, status_phrase
from .mime_types import get_mime_type, get_content_type

__all__ = [
    # Requests
    "HTTPRequest",

    # Writers and responses
    "ResponseWriter",
    "BufferedResponseWriter",
    "HTTPResponse",
    "ContentNotWrittenError",

    # Writing helpers
    "http_error",
    "not_found",
    "redirect",
    "write_plain_text",
    "format_http_date",

    # Status codes
    "HTTPStatus",
    "ERROR_THRESHOLD",
    "status_phrase",

    # MIME types
    "get_mime_type",
    "get_content_type",
]
