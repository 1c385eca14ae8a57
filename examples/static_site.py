"""
=============================================================================
EXAMPLE: STATIC SITE WITH CUSTOM ERROR PAGES
=============================================================================

Serves a directory under "/static" with:

1. An HTML 404 page for missing files (and paths outside "/static")
2. A catch-all handler for every other error status
3. Directory listings refused with 403 (the default)
4. Access logs on stdout

REQUEST FLOW:
─────────────

    curl http://localhost:8080/static/css/site.css
        │
        ▼
    wsgiref server ──► WSGIApp ──► LoggingMiddleware ──► FileServer
                                                            │
                    ┌───────────────────────────────────────┤
                    ▼                   ▼                   ▼
              file found          missing file        directory, no index
              200 + body          not_found_page()    error_page() with 403

Run it from the repository root:

    python examples/static_site.py ./public

=============================================================================
"""

import html
import logging
import sys
from pathlib import Path
from wsgiref.simple_server import make_server

# ─────────────────────────────────────────────────────────────────────────────
# Make the package importable without installing it
# ─────────────────────────────────────────────────────────────────────────────
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import WSGIApp, new, with_error_handler, with_prefix
from fileserver.http import HTTPRequest, ResponseWriter, status_phrase
from fileserver.middleware import LoggingMiddleware


def not_found_page(writer: ResponseWriter, request: HTTPRequest, status: int) -> None:
    body = (
        "<!DOCTYPE html><html><body>"
        f"<h1>Not here</h1><p>Nothing at <code>{html.escape(request.path)}</code>.</p>"
        '<p><a href="/static/">Back to the start</a></p>'
        "</body></html>"
    ).encode("utf-8")

    writer.headers["Content-Type"] = "text/html; charset=utf-8"
    writer.headers["Content-Length"] = str(len(body))
    writer.write_header(status)
    writer.write(body)


def error_page(writer: ResponseWriter, request: HTTPRequest, status: int) -> None:
    body = f"<h1>{status} {status_phrase(status)}</h1>".encode("utf-8")

    writer.headers["Content-Type"] = "text/html; charset=utf-8"
    writer.headers["Content-Length"] = str(len(body))
    writer.write_header(status)
    writer.write(body)


def main():
    root = sys.argv[1] if len(sys.argv) > 1 else "."

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    server = new(
        root,
        with_prefix("/static"),
        with_error_handler(404, not_found_page),
        with_error_handler(0, error_page),
    )
    app = WSGIApp(server, middleware=[LoggingMiddleware()])

    print(f"Serving {root} at http://localhost:8080/static/")
    print()
    print("=" * 60)
    print("TEST COMMANDS:")
    print("=" * 60)
    print()
    print("# A file (or the index document of a directory)")
    print("curl -i http://localhost:8080/static/")
    print()
    print("# Custom 404 page")
    print("curl -i http://localhost:8080/static/missing.txt")
    print()
    print("# Outside the prefix: also the custom 404 page")
    print("curl -i http://localhost:8080/elsewhere")
    print()
    print("=" * 60)
    print()

    with make_server("127.0.0.1", 8080, app) as httpd:
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nStopped.")


if __name__ == "__main__":
    main()
