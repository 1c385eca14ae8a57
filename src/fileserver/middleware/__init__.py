"""
=============================================================================
MIDDLEWARE MODULE
=============================================================================

Layers that sit between the host and the static file handler.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Middleware / MiddlewarePipeline                                     │
    │     Base class and composition of the dispatch chain               │
    │                                                                      │
    │ ResponseInterceptor                                                 │
    │     Writer wrapper holding back error statuses and bodies          │
    │                                                                      │
    │ StripPrefixMiddleware                                               │
    │     Serves the tree under a URL prefix, 404 outside it             │
    │                                                                      │
    │ LoggingMiddleware                                                   │
    │     Access log line per request (text or JSON)                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .base import Handler, Middleware, MiddlewarePipeline
from .intercept import ResponseInterceptor
from .prefix import StripPrefixMiddleware
from .logging import LoggingMiddleware, StatusRecorder

__all__ = [
    "Handler",
    "Middleware",
    "MiddlewarePipeline",
    "ResponseInterceptor",
    "StripPrefixMiddleware",
    "LoggingMiddleware",
    "StatusRecorder",
]
