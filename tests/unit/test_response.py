"""
Unit tests for response writers and writing helpers.
"""

from datetime import datetime, timezone
import logging

import pytest

from fileserver.http.response import (
    HTTPResponse,
    BufferedResponseWriter,
    ContentNotWrittenError,
    HTTPStatus,
    write_plain_text,
    http_error,
    not_found,
    redirect,
    format_http_date,
)
from fileserver.http.status_codes import status_phrase, is_valid_status


class TestHTTPResponse:
    """Tests for HTTPResponse."""

    def test_reason(self):
        """Test reason phrases for known and unknown codes."""
        assert HTTPResponse(status=HTTPStatus.OK).reason == "OK"
        assert HTTPResponse(status=404).reason == "Not Found"
        assert HTTPResponse(status=451).reason == "Unknown"


class TestBufferedResponseWriter:
    """Tests for BufferedResponseWriter."""

    def test_untouched_writer_is_empty_200(self):
        """Test the default response."""
        response = BufferedResponseWriter().to_response()

        assert response.status == 200
        assert response.body == b""

    def test_write_implies_200(self):
        """Test that body bytes without a status send 200."""
        writer = BufferedResponseWriter()

        assert writer.write(b"hello") == 5
        assert writer.status == 200
        assert writer.body == b"hello"

    def test_second_write_header_ignored(self, caplog):
        """Test that the first status wins."""
        writer = BufferedResponseWriter()

        with caplog.at_level(logging.WARNING):
            writer.write_header(404)
            writer.write_header(200)

        assert writer.status == 404
        assert "Superfluous" in caplog.text

    def test_headers_snapshot_at_write_header(self):
        """Test that header changes after write_header are not sent."""
        writer = BufferedResponseWriter()
        writer.headers["X-Before"] = "1"
        writer.write_header(200)
        writer.headers["X-After"] = "1"

        headers = writer.to_response().headers
        assert headers == {"X-Before": "1"}


class TestWritingHelpers:
    """Tests for the plain-text, error and redirect helpers."""

    def test_write_plain_text(self):
        """Test verbatim body with text headers."""
        writer = BufferedResponseWriter()
        writer.headers["Content-Length"] = "999"

        write_plain_text(writer, b"as is", 418)
        response = writer.to_response()

        assert response.status == 418
        assert response.body == b"as is"
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "Content-Length" not in response.headers

    def test_http_error_appends_newline(self):
        """Test the error message format."""
        writer = BufferedResponseWriter()
        http_error(writer, "500 Internal Server Error", 500)

        assert writer.body == b"500 Internal Server Error\n"

    def test_not_found(self):
        """Test the standard 404 body."""
        writer = BufferedResponseWriter()
        not_found(writer)

        assert writer.status == 404
        assert writer.body == b"404 page not found\n"

    def test_redirect(self):
        """Test redirect with Location and no body."""
        writer = BufferedResponseWriter()
        redirect(writer, "/docs?x=1")
        response = writer.to_response()

        assert response.status == 301
        assert response.headers["Location"] == "/docs?x=1"
        assert response.body == b""

    def test_format_http_date(self):
        """Test RFC 7231 date format."""
        dt = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert format_http_date(dt) == "Thu, 01 Jan 2026 12:00:00 GMT"


class TestContentNotWrittenError:
    """Tests for ContentNotWrittenError."""

    def test_is_io_error(self):
        """Test that it belongs to the I/O error family."""
        with pytest.raises(IOError, match="content not written"):
            raise ContentNotWrittenError()


class TestStatusCodes:
    """Tests for status code helpers."""

    def test_phrases(self):
        """Test phrase lookup for known and unknown codes."""
        assert HTTPStatus.FORBIDDEN.phrase == "Forbidden"
        assert status_phrase(404) == "Not Found"
        assert status_phrase(599) == "Unknown"

    @pytest.mark.parametrize("code,expected", [
        (100, True),
        (599, True),
        (0, False),
        (99, False),
        (600, False),
    ])
    def test_is_valid_status(self, code: int, expected: bool):
        """Test the accepted status range."""
        assert is_valid_status(code) is expected
