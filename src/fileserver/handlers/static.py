"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves a FileSystem over HTTP: files, directory listings, and the
conventional error replies. This is the plain file serving primitive the
FileServer wraps. It has no opinion about index files, error pages, or
prefixes; all of that is layered on from outside.

=============================================================================
WHAT IT DOES WITH A REQUEST
=============================================================================

    GET /docs/guide.txt
        │
        ├── clean the path ("/docs/./x/../guide.txt" → "/docs/guide.txt")
        │
        ├── fs.open() fails ──────────► plain-text error, status from
        │                                to_http_error()
        │
        ├── directory, no trailing "/" ► 301 to "<name>/"
        ├── file, trailing "/" ────────► 301 to "../<name>"
        ├── directory ─────────────────► 200 HTML listing
        └── file ──────────────────────► 200 with Content-Type,
                                          Content-Length, Last-Modified

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    EXCEPTION → STATUS                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │   FileNotFoundError, NotADirectoryError   404 page not found        │
    │   PermissionError                         403 Forbidden             │
    │   any other OSError                       500 Internal Server Error │
    └─────────────────────────────────────────────────────────────────────┘

A ForbiddenError from the indexed adapter is "any other OSError" here and
comes out as 500. Turning it into 403 is the FileServer's job, since only
the FileServer knows the adapter that raised it.

=============================================================================
WRITING THROUGH AN INTERCEPTOR
=============================================================================

The writer may refuse body bytes with ContentNotWrittenError after an
error status. The handler treats that as "response complete": it stops
and returns normally. Every opened File is closed on the way out.

=============================================================================
"""

import html
import logging
import posixpath
from datetime import datetime, timezone
from typing import List, Tuple
from urllib.parse import quote

from ..fs import File, FileInfo, FileSystem
from ..http.request import HTTPRequest
from ..http.response import (
    ResponseWriter, ContentNotWrittenError, HTTPStatus,
    http_error, redirect, format_http_date,
)
from ..http.mime_types import get_content_type


logger = logging.getLogger(__name__)


def clean_path(path: str) -> str:
    """
    Canonical form of a request path.

    Leading "/" is ensured, "." and ".." are collapsed without climbing
    above "/", duplicate slashes are merged, and a trailing "/" survives.

    >>> clean_path("docs/./a/../b/")
    '/docs/b/'
    """
    if not path.startswith("/"):
        path = "/" + path
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    if path.endswith("/") and cleaned != "/":
        cleaned += "/"
    return cleaned


def to_http_error(error: Exception) -> Tuple[str, int]:
    """Message and status for a filesystem exception."""
    if isinstance(error, (FileNotFoundError, NotADirectoryError)):
        return "404 page not found", HTTPStatus.NOT_FOUND
    if isinstance(error, PermissionError):
        return "403 Forbidden", HTTPStatus.FORBIDDEN
    return "500 Internal Server Error", HTTPStatus.INTERNAL_SERVER_ERROR


def local_redirect(writer: ResponseWriter, request: HTTPRequest, target: str) -> None:
    """
    301 to ``target``, percent-encoded, with the request's query kept.

    Example: directory "/café" requested with "?x=1" redirects to
    "caf%C3%A9/?x=1".
    """
    location = quote(target, safe="/")
    if request.raw_query:
        location += "?" + request.raw_query
    redirect(writer, location)


class StaticFileHandler:
    """
    Handler serving the contents of a FileSystem.

    Usage:
        handler = StaticFileHandler(Dir("/var/www"))
        handler(writer, request)
    """

    def __init__(self, fs: FileSystem):
        self.fs = fs

    def __call__(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.serve(writer, request)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        try:
            self._serve(writer, request)
        except ContentNotWrittenError:
            logger.debug(f"Writer refused body for {request.method} {request.path}")

    def _serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        url_path = request.path if request.path.startswith("/") else "/" + request.path
        name = clean_path(url_path)

        try:
            f = self.fs.open(name)
        except OSError as e:
            message, status = to_http_error(e)
            logger.debug(f"Open {name!r} failed ({e}), replying {status}")
            http_error(writer, message, status)
            return

        with f:
            try:
                info = f.stat()
            except OSError as e:
                message, status = to_http_error(e)
                http_error(writer, message, status)
                return

            if info.is_dir:
                # Relative links in a listing need the trailing slash
                if not url_path.endswith("/"):
                    local_redirect(writer, request, posixpath.basename(url_path) + "/")
                    return
                self._directory_listing(writer, request, f)
                return

            # "/a.txt/" names a file, not a directory. An index document
            # stood in for a directory keeps its own name and is served.
            base = posixpath.basename(name.rstrip("/"))
            if url_path.endswith("/") and info.name == base:
                local_redirect(writer, request, "../" + base)
                return
            self._serve_file(writer, request, f, info)

    def _serve_file(
        self,
        writer: ResponseWriter,
        request: HTTPRequest,
        f: File,
        info: FileInfo,
    ) -> None:
        """
        Send a regular file.

        The Content-Type comes from the opened file's own name, which for
        a resolved index document is e.g. "index.html", not the directory
        the client asked for.
        """
        try:
            content = f.read()
        except OSError as e:
            logger.error(f"Error reading {info.name!r}: {e}")
            message, status = to_http_error(e)
            http_error(writer, message, status)
            return

        headers = writer.headers
        headers.setdefault("Content-Type", get_content_type(info.name))
        headers["Content-Length"] = str(len(content))
        headers["Last-Modified"] = format_http_date(
            datetime.fromtimestamp(info.mtime, tz=timezone.utc)
        )
        writer.write_header(HTTPStatus.OK)

        if not request.is_head:
            writer.write(content)

    def _directory_listing(
        self,
        writer: ResponseWriter,
        request: HTTPRequest,
        f: File,
    ) -> None:
        """Send an HTML page linking every entry of the directory."""
        try:
            entries = sorted(f.readdir(), key=lambda e: e.name)
        except OSError as e:
            logger.error(f"Error reading directory {request.path!r}: {e}")
            http_error(writer, "Error reading directory", HTTPStatus.INTERNAL_SERVER_ERROR)
            return

        body = render_listing(request.path, entries).encode("utf-8")

        writer.headers["Content-Type"] = "text/html; charset=utf-8"
        writer.headers["Content-Length"] = str(len(body))
        writer.write_header(HTTPStatus.OK)

        if not request.is_head:
            writer.write(body)


def render_listing(url_path: str, entries: List[FileInfo]) -> str:
    """
    HTML for a directory listing.

    Directory names get a trailing "/". Link targets are percent-encoded
    and visible names are HTML-escaped, so file names like "a&b <c>.txt"
    are safe to list.
    """
    items = []
    if url_path not in ("", "/"):
        items.append('<li><a href="../">../</a></li>')

    for entry in entries:
        name = entry.name + "/" if entry.is_dir else entry.name
        items.append(f'<li><a href="{quote(name)}">{html.escape(name)}</a></li>')

    title = html.escape(url_path or "/")
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Index of {title}</title>
    <style>
        body {{ font-family: monospace; padding: 20px; }}
        h1 {{ border-bottom: 1px solid #ccc; padding-bottom: 10px; }}
        ul {{ list-style: none; padding: 0; }}
        li {{ padding: 5px 0; }}
        a {{ text-decoration: none; color: #0066cc; }}
    </style>
</head>
<body>
    <h1>Index of {title}</h1>
    <ul>
        {''.join(items)}
    </ul>
</body>
</html>
"""
