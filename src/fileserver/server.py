"""
=============================================================================
FILE SERVER
=============================================================================

Serves a directory tree over HTTP with three additions to plain static
file serving:

    1. Per-status error handlers  (custom 404 page, catch-all handler)
    2. Directory listing control  (403 instead of a listing, by default)
    3. URL prefix stripping       (serve the tree under "/static")

=============================================================================
REQUEST FLOW
=============================================================================

    handle(writer, request)
        │
        ├── last path segment is an index name ("/docs/index.html")
        │       └──► 301 to the parent ("/docs"), query kept     [done]
        │
        └── dispatch chain, with writer wrapped in a ResponseInterceptor
              │
              ├── StripPrefixMiddleware layers (outermost first)
              │       └── path outside prefix ──► 404 ──► error dispatch
              │
              └── serve()
                    ├── IndexedDir(Dir(root)) + StaticFileHandler
                    │     file / index document / listing ──► sent  [done]
                    │
                    └── error status held by the interceptor
                          ├── adapter refused a listing ──► 403
                          └── error dispatch

    ERROR DISPATCH
    ┌─────────────────────────────────────────────────────────────────────┐
    │  1. handler registered for the exact status   handler(w, req, code) │
    │  2. default handler (registered with code 0)  handler(w, req, code) │
    │  3. neither: plain-text reply with the captured body and status     │
    └─────────────────────────────────────────────────────────────────────┘

Handlers receive the REAL writer (not the interceptor), so they have full
control over the final status, headers and body.

=============================================================================
USAGE
=============================================================================

    from fileserver import new, with_prefix, with_error_handler

    def not_found_page(writer, request, status):
        writer.headers["Content-Type"] = "text/html; charset=utf-8"
        writer.write_header(status)
        writer.write(b"<h1>Nothing here</h1>")

    server = new(
        "./public",
        with_prefix("/static"),
        with_error_handler(404, not_found_page),
    )

    server(writer, request)     # any ResponseWriter / HTTPRequest

=============================================================================
"""

import logging
import posixpath
from typing import Callable, Dict, List, Optional
from urllib.parse import quote

from .fs import Dir, IndexedDir
from .handlers.static import StaticFileHandler
from .http.request import HTTPRequest
from .http.response import ResponseWriter, redirect, write_plain_text
from .http.status_codes import HTTPStatus, is_valid_status
from .middleware.base import Handler, MiddlewarePipeline
from .middleware.intercept import ResponseInterceptor
from .middleware.prefix import StripPrefixMiddleware


logger = logging.getLogger(__name__)


# Custom error page: (real writer, request, status) → None
ErrorHandler = Callable[[ResponseWriter, HTTPRequest, int], None]

# Configuration option applied by FileServer(root, *options)
Option = Callable[["FileServer"], None]

# Key of the catch-all handler in set_error_handler()
DEFAULT_ERROR_CODE = 0


class FileServer:
    """
    HTTP handler serving the files below ``root``.

    Configure it at setup time, through options or the ``set_*``
    methods, and only then start handing it requests. Configuration is
    not synchronized: changing it while requests are in flight from
    several threads is not supported. Per-request state (interceptor,
    adapter) is created fresh for each request, so serving concurrently
    from many threads is fine.

    Attributes:
        root:       Directory being served.
        index:      Index file names, tried in order for directories.
        auto_index: Generate listings for directories without an index.
        prefix:     Most recently configured URL prefix ("" for none).
    """

    def __init__(self, root: str, *options: Option):
        self.root = root
        self.index: List[str] = ["index.html"]
        self.auto_index = False
        self.prefix = ""

        self._error_handlers: Dict[int, ErrorHandler] = {}
        self._default_error_handler: Optional[ErrorHandler] = None

        self._pipeline = MiddlewarePipeline()
        self._dispatch: Handler = self.serve

        for option in options:
            option(self)

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def set_error_handler(self, code: int, handler: ErrorHandler) -> None:
        """
        Register ``handler`` for responses with status ``code``.

        ``code=0`` registers the default handler, used for any error
        status that has no handler of its own.

        Raises:
            ValueError: ``code`` is neither 0 nor a 100-599 status.
        """
        if code == DEFAULT_ERROR_CODE:
            self.set_default_error_handler(handler)
            return
        if not is_valid_status(code):
            raise ValueError(f"Invalid status code for error handler: {code}")
        self._error_handlers[int(code)] = handler

    def set_default_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        """Register the catch-all error handler (None removes it)."""
        self._default_error_handler = handler

    def error_handler(self, status: int) -> Optional[ErrorHandler]:
        """Handler for ``status``: exact match first, then the default."""
        return self._error_handlers.get(int(status), self._default_error_handler)

    def set_auto_index(self, enabled: bool) -> None:
        """Allow (True) or refuse with 403 (False) directory listings."""
        self.auto_index = enabled

    def set_index(self, *names: str) -> None:
        """
        Replace the index file names.

        Calling with no names disables index resolution entirely.

        Raises:
            ValueError: a name is empty.
        """
        if any(not name for name in names):
            raise ValueError("Index file names must not be empty")
        self.index = list(names)

    def set_prefix(self, prefix: str) -> None:
        """
        Serve the tree under ``prefix``.

        Adds a stripping layer OUTSIDE everything configured so far, so
        calling it twice strips the second prefix first:

            set_prefix("/static"); set_prefix("/v2")
            GET /v2/static/a.txt  → serves /a.txt

        An empty prefix strips nothing and adds no layer.
        """
        self.prefix = prefix
        if not prefix:
            logger.debug("Empty prefix, no stripping layer added")
            return
        self._pipeline.prepend(StripPrefixMiddleware(prefix, self.dispatch_error))
        self._dispatch = self._pipeline.wrap(self.serve)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def __call__(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.handle(writer, request)

    def handle(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        """
        Serve one request.

        Index documents are never served under their own name: a request
        for ".../index.html" is redirected to its directory, which serves
        the same document. The Location path is percent-encoded so
        non-ASCII directory names survive the trip back.
        """
        name = posixpath.basename(request.path)
        if name in self.index:
            location = quote(posixpath.dirname(request.path), safe="/")
            if request.raw_query:
                location += "?" + request.raw_query
            logger.debug(f"Index name requested, redirecting {request.url!r} to {location!r}")
            redirect(writer, location, HTTPStatus.MOVED_PERMANENTLY)
            return

        self._dispatch(ResponseInterceptor(writer), request)

    def serve(self, writer: ResponseInterceptor, request: HTTPRequest) -> None:
        """
        Base of the dispatch chain: serve ``request`` from ``root``.

        When the outcome is an error, a refused listing is reported as
        403 (the static handler can't tell it apart from other failures),
        and the error is dispatched.
        """
        fs = IndexedDir(Dir(self.root), self.index, self.auto_index)
        StaticFileHandler(fs).serve(writer, request)

        if writer.is_error:
            if fs.forbidden:
                writer.status = HTTPStatus.FORBIDDEN
                writer.pending_body = b"403 Forbidden\n"
            self.dispatch_error(writer, request)

    def dispatch_error(self, writer: ResponseInterceptor, request: HTTPRequest) -> None:
        """Send the held error status through the matching error handler."""
        status = int(writer.status or HTTPStatus.INTERNAL_SERVER_ERROR)
        handler = self.error_handler(status)

        if handler is not None:
            logger.debug(f"Dispatching {status} for {request.path!r} to {handler!r}")
            handler(writer.writer, request, status)
            return

        write_plain_text(writer.writer, writer.pending_body, status)

    def __repr__(self) -> str:
        return (
            f"FileServer(root={self.root!r}, index={self.index!r}, "
            f"auto_index={self.auto_index}, prefix={self.prefix!r})"
        )


# =============================================================================
# OPTIONS
# =============================================================================
#
# Functions returning setup steps for FileServer(root, *options):
#
#     new("./public", with_auto_index(True), with_index("index.htm"))
#
# Options run in the order given. Order only matters for with_prefix,
# where each call adds a new outermost stripping layer.
#
# =============================================================================

def with_auto_index(enabled: bool) -> Option:
    """Allow or refuse directory listings."""
    def option(server: FileServer) -> None:
        server.set_auto_index(enabled)
    return option


def with_index(*names: str) -> Option:
    """Replace the index file names (none disables index resolution)."""
    def option(server: FileServer) -> None:
        server.set_index(*names)
    return option


def with_prefix(prefix: str) -> Option:
    """Serve the tree under a URL prefix."""
    def option(server: FileServer) -> None:
        server.set_prefix(prefix)
    return option


def with_error_handler(code: int, handler: ErrorHandler) -> Option:
    """Register an error handler; code 0 is the default handler."""
    def option(server: FileServer) -> None:
        server.set_error_handler(code, handler)
    return option


def new(root: str, *options: Option) -> FileServer:
    """
    Create a FileServer for ``root`` with ``options`` applied.

    Example:
        server = new("/var/www", with_auto_index(True))
    """
    return FileServer(root, *options)
