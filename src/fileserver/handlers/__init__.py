"""
Request handlers.

StaticFileHandler is the plain file serving primitive: it serves whatever
FileSystem it is given and writes conventional error replies. FileServer
(in fileserver.server) wraps it with index resolution, error handlers and
prefix stripping.
"""

from .static import StaticFileHandler, clean_path, to_http_error, render_listing

__all__ = [
    "StaticFileHandler",
    "clean_path",
    "to_http_error",
    "render_listing",
]
