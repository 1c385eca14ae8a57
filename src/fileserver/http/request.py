"""
=============================================================================
HTTP REQUEST
=============================================================================

The request object handed to file server handlers.

=============================================================================
WHAT A FILE SERVER NEEDS FROM A REQUEST
=============================================================================

    GET /static/docs/index.html?v=2 HTTP/1.1
    ─┬─ ─────────┬───────────── ─┬─ ───┬────
     │           │               │     │
   method       path        raw_query version

    ┌─────────────────────────────────────────────────────────────────────┐
    │  method     GET / HEAD decide whether a body is sent                │
    │  path       URL-decoded path, rewritten by prefix stripping         │
    │  raw_query  kept VERBATIM so redirects can append it unchanged      │
    │  headers    lowercase keys (header names are case-insensitive)      │
    └─────────────────────────────────────────────────────────────────────┘

The query string is kept raw on purpose: re-encoding parsed parameters
could reorder or re-escape them, and the index redirect must hand the
client back exactly what it sent.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Tuple
from urllib.parse import urlsplit, unquote


@dataclass
class HTTPRequest:
    """
    Represents an incoming HTTP request.

    Attributes:
        method:         HTTP method ("GET", "HEAD", ...)
        path:           URL-decoded request path without query string
        raw_query:      Query string as sent, without the leading "?"
        version:        HTTP version string
        headers:        Header name (lowercase) → value
        client_address: (ip, port) of the client, used for access logs
    """

    method: str
    path: str
    raw_query: str = ""
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    client_address: Tuple[str, int] = ("", 0)

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> "HTTPRequest":
        """
        Build a request from a request-target ("/a/b?x=1").

        The path is URL-decoded and defaults to "/"; header names are
        lowercased so lookups don't depend on how the client spelled them.

        Example:
            HTTPRequest.from_target("GET", "/docs/index.html?v=2")
            # path="/docs/index.html", raw_query="v=2"
        """
        parsed = urlsplit(target)
        return cls(
            method=method.upper(),
            path=unquote(parsed.path) or "/",
            raw_query=parsed.query,
            headers={k.lower(): v for k, v in (headers or {}).items()},
            **kwargs,
        )

    @property
    def url(self) -> str:
        """Path plus "?query" when a query string is present."""
        if self.raw_query:
            return f"{self.path}?{self.raw_query}"
        return self.path

    @property
    def is_head(self) -> bool:
        """HEAD responses carry headers only."""
        return self.method == "HEAD"

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

