"""
=============================================================================
MIDDLEWARE BASE CLASSES
=============================================================================

A handler here is anything with the signature

    handler(writer: ResponseWriter, request: HTTPRequest) -> None

and middleware is a layer that receives the NEXT handler and decides
whether, and with what request, to call it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     DISPATCH CHAIN                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   FileServer.handle(writer, request)                               │
    │        │                                                            │
    │        ▼                                                            │
    │   StripPrefixMiddleware("/v2")     ← added last = outermost        │
    │        │  strips "/v2", or answers 404 and stops                   │
    │        ▼                                                            │
    │   StripPrefixMiddleware("/static") ← added first                   │
    │        │                                                            │
    │        ▼                                                            │
    │   FileServer.serve                 ← base handler                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The pipeline composes its layers ONCE into a single callable; the
FileServer rebuilds it only when a layer is added during setup.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import ResponseWriter


logger = logging.getLogger(__name__)


# Signature shared by the base handler and every composed layer.
Handler = Callable[[ResponseWriter, HTTPRequest], None]


class Middleware(ABC):
    """
    Abstract base class for a dispatch layer.

        class MyMiddleware(Middleware):
            def __call__(self, writer, request, next):
                # before: inspect or rewrite the request,
                #         or answer directly and return (short-circuit)
                next(writer, request)
                # after: the response has been written
    """

    @abstractmethod
    def __call__(
        self,
        writer: ResponseWriter,
        request: HTTPRequest,
        next: Handler,
    ) -> None:
        """Handle the request, calling ``next`` to continue the chain."""

    @property
    def name(self) -> str:
        """Middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Ordered middleware, composed around a base handler.

    ``add`` appends (the new layer runs just before the base handler),
    ``prepend`` inserts at the front (the new layer runs first). In both
    cases the first entry in the pipeline is the outermost layer:

        pipeline.prepend(A).prepend(B)
        pipeline.wrap(base)  # B → A → base
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append ``middleware`` as the innermost layer."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def prepend(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Insert ``middleware`` as the outermost layer."""
        self._middleware.insert(0, middleware)
        logger.debug(f"Prepended middleware: {middleware.name}")
        return self

    def wrap(self, handler: Handler) -> Handler:
        """
        Compose every layer around ``handler``.

        Wrapping runs in reverse so the first entry ends up outermost:
        [A, B] and h give A(B(h)).
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(self, middleware: Middleware, next_handler: Handler) -> Handler:
        def wrapped(writer: ResponseWriter, request: HTTPRequest) -> None:
            middleware(writer, request, next_handler)

        return wrapped
