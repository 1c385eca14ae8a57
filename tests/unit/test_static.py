"""
Unit tests for the static file handler.
"""

import errno
from pathlib import Path

import pytest

from fileserver.fs import Dir, FileInfo, FileSystem, ForbiddenError
from fileserver.handlers.static import (
    StaticFileHandler,
    clean_path,
    render_listing,
    to_http_error,
)
from fileserver.http.mime_types import get_content_type, get_mime_type
from fileserver.http.response import BufferedResponseWriter
from fileserver.middleware.intercept import ResponseInterceptor


class FailingFS(FileSystem):
    """FileSystem whose open() always raises ``error``."""

    def __init__(self, error: OSError):
        self.error = error

    def open(self, name: str):
        raise self.error


class TestCleanPath:
    """Tests for clean_path."""

    @pytest.mark.parametrize("path,expected", [
        ("/", "/"),
        ("", "/"),
        ("a.txt", "/a.txt"),
        ("/docs/./x/../guide.txt", "/docs/guide.txt"),
        ("/../../etc/passwd", "/etc/passwd"),
        ("//docs//a", "/docs/a"),
        ("/docs/", "/docs/"),
    ])
    def test_clean_path(self, path: str, expected: str):
        """Test canonical path forms."""
        assert clean_path(path) == expected


class TestToHTTPError:
    """Tests for the exception to status mapping."""

    @pytest.mark.parametrize("error,expected", [
        (FileNotFoundError(), ("404 page not found", 404)),
        (NotADirectoryError(), ("404 page not found", 404)),
        (PermissionError(), ("403 Forbidden", 403)),
        (OSError(errno.EIO, "io"), ("500 Internal Server Error", 500)),
        (ForbiddenError(), ("500 Internal Server Error", 500)),
    ])
    def test_mapping(self, error: OSError, expected):
        """Test each exception family."""
        assert to_http_error(error) == expected


class TestStaticFileHandler:
    """Tests for StaticFileHandler against a local directory."""

    def test_serves_file(self, site: Path, fetch):
        """Test a plain file response."""
        response = fetch(StaticFileHandler(Dir(str(site))), "/a.txt")

        assert response.status == 200
        assert response.body == b"hello"
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert response.headers["Content-Length"] == "5"
        assert response.headers["Last-Modified"].endswith("GMT")

    def test_head_omits_body(self, site: Path, fetch):
        """Test that HEAD sends headers only."""
        response = fetch(StaticFileHandler(Dir(str(site))), "/a.txt", "HEAD")

        assert response.status == 200
        assert response.body == b""
        assert response.headers["Content-Length"] == "5"

    def test_missing_file(self, site: Path, fetch):
        """Test the 404 reply."""
        response = fetch(StaticFileHandler(Dir(str(site))), "/missing.txt")

        assert response.status == 404
        assert response.body == b"404 page not found\n"

    def test_directory_redirects_to_trailing_slash(self, site: Path, fetch):
        """Test the relative redirect for directories, keeping the query."""
        handler = StaticFileHandler(Dir(str(site)))

        response = fetch(handler, "/docs")
        assert response.status == 301
        assert response.headers["Location"] == "docs/"

        response = fetch(handler, "/docs?sort=name")
        assert response.headers["Location"] == "docs/?sort=name"

    def test_directory_redirect_is_percent_encoded(self, site: Path, fetch):
        """Test that non-ASCII directory names are encoded in Location."""
        (site / "café").mkdir()

        response = fetch(StaticFileHandler(Dir(str(site))), "/caf%C3%A9?x=1")

        assert response.status == 301
        assert response.headers["Location"] == "caf%C3%A9/?x=1"

    def test_file_with_trailing_slash_redirects(self, site: Path, fetch):
        """Test that "/a.txt/" is sent back to "../a.txt"."""
        handler = StaticFileHandler(Dir(str(site)))

        response = fetch(handler, "/docs/guide.txt/")
        assert response.status == 301
        assert response.headers["Location"] == "../guide.txt"
        assert response.body == b""

        response = fetch(handler, "/a.txt/?v=1")
        assert response.headers["Location"] == "../a.txt?v=1"

    def test_directory_listing(self, site: Path, fetch):
        """Test the generated listing."""
        response = fetch(StaticFileHandler(Dir(str(site))), "/docs/")

        assert response.status == 200
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert b'href="guide.txt"' in response.body
        assert b'href="notes.md"' in response.body
        assert b'href="../"' in response.body

    def test_root_listing_has_no_parent_link(self, site: Path, fetch):
        """Test that "/" does not link above itself."""
        response = fetch(StaticFileHandler(Dir(str(site))), "/")

        assert b'href="../"' not in response.body
        assert b'href="docs/"' in response.body

    def test_permission_error_is_403(self, fetch):
        """Test OS permission failures."""
        response = fetch(StaticFileHandler(FailingFS(PermissionError())), "/x")

        assert response.status == 403
        assert response.body == b"403 Forbidden\n"

    def test_other_os_error_is_500(self, fetch):
        """Test unclassified filesystem failures."""
        response = fetch(StaticFileHandler(FailingFS(ForbiddenError())), "/x")

        assert response.status == 500
        assert response.body == b"500 Internal Server Error\n"

    def test_stops_when_interceptor_refuses_body(self, site: Path, request_for):
        """Test that ContentNotWrittenError ends the request quietly."""
        real = BufferedResponseWriter()
        interceptor = ResponseInterceptor(real)

        StaticFileHandler(Dir(str(site))).serve(interceptor, request_for("/missing"))

        assert interceptor.status == 404
        assert interceptor.pending_body == b"404 page not found\n"
        assert real.status is None


class TestRenderListing:
    """Tests for render_listing."""

    def test_escapes_names(self):
        """Test that odd file names are quoted and escaped."""
        entries = [FileInfo(name="a&b <c>.txt", size=1, mtime=0.0, is_dir=False)]
        page = render_listing("/", entries)

        assert 'href="a%26b%20%3Cc%3E.txt"' in page
        assert "a&amp;b &lt;c&gt;.txt" in page

    def test_directories_get_slash(self):
        """Test trailing slash on directory entries."""
        entries = [FileInfo(name="sub", size=0, mtime=0.0, is_dir=True)]
        assert 'href="sub/"' in render_listing("/docs/", entries)


class TestMimeTypes:
    """Tests for Content-Type lookup."""

    @pytest.mark.parametrize("name,expected", [
        ("index.html", "text/html; charset=utf-8"),
        ("app.js", "text/javascript; charset=utf-8"),
        ("data.json", "application/json; charset=utf-8"),
        ("logo.PNG", "image/png"),
        ("archive.unknownext", "application/octet-stream"),
        ("README", "application/octet-stream"),
    ])
    def test_get_content_type(self, name: str, expected: str):
        """Test type and charset by extension."""
        assert get_content_type(name) == expected

    def test_default(self):
        """Test the caller-supplied fallback."""
        assert get_mime_type("x.unknownext", "text/plain") == "text/plain"
