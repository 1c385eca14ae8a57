"""
=============================================================================
FILESERVER - STATIC FILES WITH ERROR PAGES, LISTING CONTROL AND PREFIXES
=============================================================================

Serves a directory tree over HTTP, on top of a plain static file handler:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Error handlers     Replace the reply for any error status, or all   │
    │                    of them at once with a default handler           │
    │                                                                      │
    │ Listing control    Directories without an index file are refused   │
    │                    with 403 unless auto-index is enabled           │
    │                                                                      │
    │ Prefix stripping   Serve the tree under "/static"; anything outside │
    │                    the prefix is a 404                              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PROJECT STRUCTURE
=============================================================================

    fileserver/
    ├── server.py          FileServer facade and its options
    ├── config.py          FileServerConfig (environment, validation)
    ├── wsgi.py            WSGIApp bridge for any WSGI host server
    ├── __main__.py        python -m fileserver
    ├── http/              request, response writers, status codes, MIME
    ├── fs/                FileSystem interface, local Dir, IndexedDir
    ├── handlers/          StaticFileHandler (plain file serving)
    └── middleware/        interceptor, prefix stripping, access logs

=============================================================================
QUICK START
=============================================================================

    from fileserver import new, with_auto_index, with_error_handler

    def page_not_found(writer, request, status):
        writer.headers["Content-Type"] = "text/plain; charset=utf-8"
        writer.write_header(status)
        writer.write(b"nothing at " + request.path.encode())

    server = new("./public", with_error_handler(404, page_not_found))

    # Under a WSGI server:
    from fileserver import WSGIApp
    app = WSGIApp(server)

=============================================================================
"""

__version__ = "1.0.0"

from .server import (
    FileServer,
    ErrorHandler,
    Option,
    new,
    with_auto_index,
    with_index,
    with_prefix,
    with_error_handler,
)
from .config import FileServerConfig
from .wsgi import WSGIApp

__all__ = [
    "FileServer",
    "ErrorHandler",
    "Option",
    "new",
    "with_auto_index",
    "with_index",
    "with_prefix",
    "with_error_handler",
    "FileServerConfig",
    "WSGIApp",
    "__version__",
]
