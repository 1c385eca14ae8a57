"""
=============================================================================
RESPONSE INTERCEPTOR
=============================================================================

A ResponseWriter that sits in front of the real one and holds back
ERROR responses, so someone else can decide what the client sees.

=============================================================================
BEHAVIOUR
=============================================================================

    ┌──────────────────────┬──────────────────────┬─────────────────────┐
    │ call                 │ status < 400 / unset │ status >= 400       │
    ├──────────────────────┼──────────────────────┼─────────────────────┤
    │ write_header(code)   │ forwarded            │ held (not sent)     │
    │ write(data)          │ forwarded, returns   │ kept in             │
    │                      │ byte count           │ pending_body,       │
    │                      │                      │ raises              │
    │                      │                      │ ContentNotWritten   │
    │ headers              │ the real writer's headers, shared           │
    └──────────────────────┴──────────────────────┴─────────────────────┘

Each write() either forwards or captures, never both. Once an error
status is held, nothing from the wrapped handler reaches the client.
The FileServer reads ``status`` and ``pending_body`` afterwards and
writes the final error response to ``writer`` (the real one).

=============================================================================
"""

from typing import Dict, Optional, Union

from ..http.response import ResponseWriter, ContentNotWrittenError
from ..http.status_codes import ERROR_THRESHOLD


class ResponseInterceptor(ResponseWriter):
    """
    Writer wrapper that captures error statuses and bodies.

    Attributes:
        writer:       The real writer being wrapped.
        status:       Last status written, None until then.
        pending_body: Body bytes captured after an error status.
    """

    def __init__(self, writer: ResponseWriter):
        self.writer = writer
        self.status: Optional[int] = None
        self.pending_body: bytes = b""

    @property
    def headers(self) -> Dict[str, str]:
        return self.writer.headers

    @property
    def is_error(self) -> bool:
        return self.status is not None and self.status >= ERROR_THRESHOLD

    def write_header(self, status: int) -> None:
        self.status = status
        if status < ERROR_THRESHOLD:
            self.writer.write_header(status)

    def write(self, data: Union[bytes, bytearray]) -> int:
        if not self.is_error:
            return self.writer.write(data)
        self.pending_body = bytes(data)
        raise ContentNotWrittenError()

    def __repr__(self) -> str:
        return f"ResponseInterceptor(status={self.status}, pending={len(self.pending_body)}B)"
