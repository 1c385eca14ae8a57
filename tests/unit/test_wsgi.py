"""
Unit tests for the WSGI bridge.
"""

from io import BytesIO, StringIO
from pathlib import Path
from typing import List, Tuple
from urllib.parse import unquote_to_bytes
from wsgiref.handlers import SimpleHandler
from wsgiref.util import setup_testing_defaults

import pytest

from fileserver import WSGIApp, new, with_auto_index, with_prefix
from fileserver.middleware import LoggingMiddleware
from fileserver.wsgi import request_from_environ


def make_environ(path: str, query: str = "", method: str = "GET", **extra) -> dict:
    environ = {"PATH_INFO": path, "QUERY_STRING": query, "REQUEST_METHOD": method}
    environ.update(extra)
    setup_testing_defaults(environ)
    return environ


class StartResponse:
    """Records what the application passed to start_response."""

    def __init__(self):
        self.status = ""
        self.headers: List[Tuple[str, str]] = []

    def __call__(self, status, headers, exc_info=None):
        self.status = status
        self.headers = headers

    @property
    def header_dict(self) -> dict:
        return dict(self.headers)


class TestRequestFromEnviron:
    """Tests for request_from_environ."""

    def test_basic_fields(self):
        """Test method, path, query and client address."""
        environ = make_environ(
            "/docs/a.txt", "v=2", "HEAD",
            REMOTE_ADDR="10.0.0.1", REMOTE_PORT="5000",
        )

        request = request_from_environ(environ)

        assert request.method == "HEAD"
        assert request.path == "/docs/a.txt"
        assert request.raw_query == "v=2"
        assert request.client_address == ("10.0.0.1", 5000)

    def test_headers(self):
        """Test HTTP_* and content headers."""
        environ = make_environ(
            "/", HTTP_USER_AGENT="pytest", HTTP_X_FORWARDED_FOR="1.2.3.4",
            CONTENT_TYPE="text/plain",
        )

        request = request_from_environ(environ)

        assert request.user_agent == "pytest"
        assert request.headers["x-forwarded-for"] == "1.2.3.4"
        assert request.headers["content-type"] == "text/plain"

    def test_utf8_path(self):
        """Test that latin-1 PATH_INFO is decoded as UTF-8."""
        raw = "/café.txt".encode("utf-8").decode("latin-1")

        request = request_from_environ(make_environ(raw))

        assert request.path == "/café.txt"

    def test_empty_path(self):
        """Test that an empty PATH_INFO means "/"."""
        environ = make_environ("")
        environ["PATH_INFO"] = ""

        assert request_from_environ(environ).path == "/"


class TestWSGIApp:
    """Tests for WSGIApp."""

    def test_serves_file(self, site: Path):
        """Test a complete WSGI round."""
        start_response = StartResponse()
        app = WSGIApp(new(str(site)))

        body = b"".join(app(make_environ("/a.txt"), start_response))

        assert start_response.status == "200 OK"
        assert start_response.header_dict["Content-Length"] == "5"
        assert body == b"hello"

    def test_error_status_line(self, site: Path):
        """Test reason phrases for error statuses."""
        start_response = StartResponse()
        app = WSGIApp(new(str(site), with_prefix("/static")))

        body = b"".join(app(make_environ("/a.txt"), start_response))

        assert start_response.status == "404 Not Found"
        assert body == b"404 page not found\n"

    def test_redirect(self, site: Path):
        """Test that redirects carry Location and an empty body."""
        start_response = StartResponse()
        app = WSGIApp(new(str(site)))

        body = b"".join(app(make_environ("/docs/index.html", "x=1"), start_response))

        assert start_response.status == "301 Moved Permanently"
        assert start_response.header_dict["Location"] == "/docs?x=1"
        assert start_response.header_dict["Content-Length"] == "0"
        assert body == b""

    def test_middleware(self, site: Path):
        """Test that middleware wraps the handler."""
        start_response = StartResponse()
        app = WSGIApp(new(str(site)), middleware=[LoggingMiddleware()])

        app(make_environ("/a.txt"), start_response)

        assert "X-Request-ID" in start_response.header_dict


class TestNonASCIIRedirects:
    """Tests for redirects to directories with non-ASCII names."""

    @staticmethod
    def run_wsgiref(app: WSGIApp, path: str, query: str = "") -> bytes:
        """Run one request through wsgiref and return the raw output."""
        stdout, stderr = BytesIO(), StringIO()
        environ = make_environ(path.encode("utf-8").decode("latin-1"), query)
        SimpleHandler(BytesIO(), stdout, stderr, environ).run(app)

        assert stderr.getvalue() == ""
        return stdout.getvalue()

    @pytest.mark.parametrize("name,encoded", [
        ("日本", "%E6%97%A5%E6%9C%AC"),
        ("café", "caf%C3%A9"),
    ])
    def test_index_redirect_is_complete(self, site: Path, name: str, encoded: str):
        """Test that the index redirect sends an encoded, complete response."""
        (site / name).mkdir()
        (site / name / "index.html").write_text("local home")
        app = WSGIApp(new(str(site)))

        output = self.run_wsgiref(app, f"/{name}/index.html", "x=1")

        assert output.startswith(b"HTTP/1.0 301 Moved Permanently\r\n")
        assert f"Location: /{encoded}?x=1\r\n".encode("ascii") in output
        assert output.endswith(b"\r\n\r\n")

    def test_redirect_target_serves_index(self, site: Path):
        """Test that following the Location reaches the index document."""
        (site / "café").mkdir()
        (site / "café" / "index.html").write_text("local home")
        app = WSGIApp(new(str(site)))

        start_response = StartResponse()
        app(make_environ("/café/index.html".encode("utf-8").decode("latin-1")), start_response)
        location = start_response.header_dict["Location"]

        # A WSGI server hands the app the percent-decoded bytes as latin-1
        start_response = StartResponse()
        path_info = unquote_to_bytes(location).decode("latin-1")
        body = b"".join(app(make_environ(path_info), start_response))

        assert start_response.status == "200 OK"
        assert body == b"local home"

    def test_trailing_slash_redirect_is_encoded(self, site: Path):
        """Test the listing redirect for a non-ASCII directory."""
        (site / "日本").mkdir()
        app = WSGIApp(new(str(site), with_auto_index(True)))

        output = self.run_wsgiref(app, "/日本")

        assert b"Location: %E6%97%A5%E6%9C%AC/\r\n" in output
        assert output.endswith(b"\r\n\r\n")
