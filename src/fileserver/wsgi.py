"""
=============================================================================
WSGI BRIDGE
=============================================================================

Runs a ``handler(writer, request)`` under any WSGI server (wsgiref,
gunicorn, uWSGI, waitress):

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   WSGI server                                                       │
    │       │  environ, start_response                                    │
    │       ▼                                                             │
    │   WSGIApp                                                           │
    │       │  environ ──► HTTPRequest                                    │
    │       │  BufferedResponseWriter as the real writer                 │
    │       ▼                                                             │
    │   middleware (LoggingMiddleware, ...) ──► FileServer               │
    │       │                                                             │
    │       ▼                                                             │
    │   start_response("404 Not Found", headers); return [body]          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The host server owns threads, sockets and lifecycle. This module only
translates between the two calling conventions.

=============================================================================
"""

from typing import Iterable, List, Optional

from .http.request import HTTPRequest
from .http.response import BufferedResponseWriter
from .middleware.base import Handler, Middleware, MiddlewarePipeline


def request_from_environ(environ: dict) -> HTTPRequest:
    """
    HTTPRequest for a WSGI environ.

    PATH_INFO arrives already URL-decoded, as latin-1 text holding the
    raw bytes (PEP 3333); it is re-decoded as UTF-8 here.
    """
    raw_path = environ.get("PATH_INFO", "") or "/"
    path = raw_path.encode("latin-1").decode("utf-8", errors="replace")

    headers = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").lower()] = value
    if environ.get("CONTENT_TYPE"):
        headers["content-type"] = environ["CONTENT_TYPE"]
    if environ.get("CONTENT_LENGTH"):
        headers["content-length"] = environ["CONTENT_LENGTH"]

    try:
        port = int(environ.get("REMOTE_PORT", 0))
    except ValueError:
        port = 0

    return HTTPRequest(
        method=environ.get("REQUEST_METHOD", "GET").upper(),
        path=path,
        raw_query=environ.get("QUERY_STRING", ""),
        version=environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
        headers=headers,
        client_address=(environ.get("REMOTE_ADDR", ""), port),
    )


class WSGIApp:
    """
    WSGI application wrapping a handler and optional middleware.

    Usage:
        from wsgiref.simple_server import make_server

        app = WSGIApp(new("./public"), middleware=[LoggingMiddleware()])
        make_server("127.0.0.1", 8080, app).serve_forever()
    """

    def __init__(self, handler: Handler, middleware: Optional[Iterable[Middleware]] = None):
        pipeline = MiddlewarePipeline()
        for layer in middleware or ():
            pipeline.add(layer)
        self.handler = handler
        self._dispatch = pipeline.wrap(handler)

    def __call__(self, environ: dict, start_response) -> List[bytes]:
        request = request_from_environ(environ)
        writer = BufferedResponseWriter()

        self._dispatch(writer, request)

        response = writer.to_response()
        headers = dict(response.headers)
        headers.setdefault("Content-Length", str(len(response.body)))

        start_response(
            f"{int(response.status)} {response.reason}",
            list(headers.items()),
        )
        return [response.body]
