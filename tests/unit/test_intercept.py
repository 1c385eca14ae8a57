"""
Unit tests for the response interceptor.
"""

import pytest

from fileserver.http.response import BufferedResponseWriter, ContentNotWrittenError
from fileserver.middleware.intercept import ResponseInterceptor


class TestResponseInterceptor:
    """Tests for ResponseInterceptor."""

    def test_success_forwarded(self):
        """Test that a 200 response passes straight through."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)

        interceptor.write_header(200)
        assert interceptor.write(b"hello") == 5

        assert real.status == 200
        assert real.body == b"hello"
        assert interceptor.pending_body == b""
        assert not interceptor.is_error

    def test_write_without_status_forwarded(self):
        """Test that an implicit 200 is forwarded."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)

        interceptor.write(b"x")

        assert interceptor.status is None
        assert real.status == 200
        assert real.body == b"x"

    def test_redirect_forwarded(self):
        """Test that statuses below 400 reach the real writer."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)

        interceptor.write_header(301)

        assert real.status == 301

    @pytest.mark.parametrize("status", [400, 403, 404, 500])
    def test_error_status_held(self, status: int):
        """Test that error statuses never reach the real writer."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)

        interceptor.write_header(status)

        assert interceptor.status == status
        assert interceptor.is_error
        assert real.status is None

    def test_error_body_captured(self):
        """Test that the body is captured and the write refused."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)
        interceptor.write_header(404)

        with pytest.raises(ContentNotWrittenError):
            interceptor.write(b"404 page not found\n")

        assert interceptor.pending_body == b"404 page not found\n"
        assert real.body == b""
        assert real.status is None

    def test_headers_shared(self):
        """Test that headers are the real writer's headers."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)

        interceptor.headers["X-Test"] = "1"

        assert real.headers["X-Test"] == "1"
