"""
Prefix stripping.

Serves a directory tree under a URL prefix:

    prefix "/static"

    /static/css/site.css  → inner handler sees /css/site.css
    /static               → inner handler sees "" (served as "/")
    /other/a.txt          → 404, inner handler never runs

A request is rejected when stripping leaves the path the same length,
i.e. the path didn't start with the prefix. The 404 goes through the
same error dispatch as any other error, so a custom 404 handler covers
prefix mismatches too.
"""

import dataclasses
import logging

from .base import Handler, Middleware
from ..http.request import HTTPRequest
from ..http.response import ResponseWriter, ContentNotWrittenError, not_found


logger = logging.getLogger(__name__)


class StripPrefixMiddleware(Middleware):
    """
    Remove ``prefix`` from the request path before calling the next layer.

    Args:
        prefix:       Leading path to remove ("/static").
        on_not_found: Called with (writer, request) after the 404 has been
                      written for a path outside the prefix. The FileServer
                      passes its error dispatch here.
    """

    def __init__(self, prefix: str, on_not_found: Handler):
        self.prefix = prefix
        self.on_not_found = on_not_found

    def strip(self, path: str) -> str:
        if path.startswith(self.prefix):
            return path[len(self.prefix):]
        return path

    def __call__(
        self,
        writer: ResponseWriter,
        request: HTTPRequest,
        next: Handler,
    ) -> None:
        path = self.strip(request.path)

        if len(path) == len(request.path):
            logger.debug(f"Path {request.path!r} outside prefix {self.prefix!r}")
            try:
                not_found(writer)
            except ContentNotWrittenError:
                # Body held by the interceptor for error dispatch
                pass
            self.on_not_found(writer, request)
            return

        next(writer, dataclasses.replace(request, path=path))

    @property
    def name(self) -> str:
        return f"StripPrefixMiddleware({self.prefix!r})"
