"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One log line per request, written after the response is complete.

=============================================================================
WHERE IT GOES
=============================================================================

Access logging wraps the WHOLE file server, outside the index redirect
and error dispatch, so it logs the status the client actually got:

    WSGIApp
      └── LoggingMiddleware          ← sees final status and byte count
            └── FileServer.handle
                  └── prefix layers → serve → error dispatch

To see the final status it hands the file server a StatusRecorder, a
writer that passes everything through and remembers what went by.

=============================================================================
FORMATS
=============================================================================

    text:  127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /a.txt" 200 12 0.41ms
    json:  {"request_id": "1f2e3d4c", "method": "GET", "path": "/a.txt", ...}

Messages go to the "fileserver.access" logger so access logs can be
routed separately from the package's diagnostic logs.

=============================================================================
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Union
import json
import logging
import time
import uuid

from .base import Handler, Middleware
from ..http.request import HTTPRequest
from ..http.response import ResponseWriter
from ..http.status_codes import HTTPStatus


logger = logging.getLogger("fileserver.access")


class StatusRecorder(ResponseWriter):
    """Pass-through writer that records the status and body size."""

    def __init__(self, writer: ResponseWriter):
        self.writer = writer
        self.status: Optional[int] = None
        self.bytes_written = 0

    @property
    def headers(self) -> Dict[str, str]:
        return self.writer.headers

    def write_header(self, status: int) -> None:
        if self.status is None:
            self.status = status
        self.writer.write_header(status)

    def write(self, data: Union[bytes, bytearray]) -> int:
        if self.status is None:
            self.status = HTTPStatus.OK
        written = self.writer.write(data)
        self.bytes_written += written
        return written


@dataclass
class RequestLog:
    """Structured access log entry."""

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-style line, readable by the usual log tools."""
        path = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Args:
        log_format:         "text" or "json".
        include_request_id: Add an X-Request-ID header to every response.
        log_level:          Level used for access log records.
        skip_paths:         Paths not worth logging (e.g. ["/favicon.ico"]).
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[List[str]] = None,
    ):
        if log_format not in ("text", "json"):
            raise ValueError(f"Unknown log format: {log_format!r}")
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(
        self,
        writer: ResponseWriter,
        request: HTTPRequest,
        next: Handler,
    ) -> None:
        request_id = str(uuid.uuid4())[:8]
        if self.include_request_id:
            writer.headers["X-Request-ID"] = request_id

        recorder = StatusRecorder(writer)
        start_time = time.time()

        try:
            next(recorder, request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        if request.path in self.skip_paths:
            return

        entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=request.raw_query,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(recorder.status or HTTPStatus.OK),
            content_length=recorder.bytes_written,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
