"""
pytest configuration and fixtures.
"""

from typing import Callable
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver.http import HTTPRequest, HTTPResponse, BufferedResponseWriter


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """
    Directory tree used by most tests.

        site/
        ├── index.html      "<h1>home</h1>"
        ├── a.txt           "hello"
        ├── sub/            (empty, no index)
        └── docs/
            ├── guide.txt   "guide"
            └── notes.md    "# notes"
    """
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<h1>home</h1>")
    (root / "a.txt").write_text("hello")
    (root / "sub").mkdir()
    docs = root / "docs"
    docs.mkdir()
    (docs / "guide.txt").write_text("guide")
    (docs / "notes.md").write_text("# notes")
    return root


def make_request(target: str, method: str = "GET", **kwargs) -> HTTPRequest:
    """Request for a target such as "/docs/index.html?v=2"."""
    return HTTPRequest.from_target(method, target, **kwargs)


def run(handler: Callable, target: str, method: str = "GET") -> HTTPResponse:
    """Send one request through ``handler`` and collect the response."""
    writer = BufferedResponseWriter()
    handler(writer, make_request(target, method))
    return writer.to_response()


@pytest.fixture
def request_for() -> Callable[..., HTTPRequest]:
    """Factory fixture building requests from targets."""
    return make_request


@pytest.fixture
def fetch() -> Callable[..., HTTPResponse]:
    """Factory fixture running a handler against one request."""
    return run
