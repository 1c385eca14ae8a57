"""
=============================================================================
FILESERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on 127.0.0.1:8080
    python -m fileserver

    # Serve ./public on all interfaces, listings on
    python -m fileserver ./public --host 0.0.0.0 --autoindex

    # Serve under a prefix, with extra index names
    python -m fileserver ./public --prefix /static --index index.html index.htm

Settings not given on the command line come from FILESERVER_* environment
variables (see FileServerConfig.from_env). The stdlib wsgiref server is
the host: fine for development and internal tools. For production, hand
``WSGIApp`` to a real WSGI server instead.

=============================================================================
"""

import argparse
import logging
import sys
from wsgiref.simple_server import make_server

from . import __version__
from .config import FileServerConfig
from .middleware import LoggingMiddleware
from .wsgi import WSGIApp


logger = logging.getLogger("fileserver")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Serve a directory over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                          # Serve . on 127.0.0.1:8080
  python -m fileserver ./public --autoindex     # Allow directory listings
  python -m fileserver ./public --prefix /static
        """,
    )

    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Directory to serve (default: FILESERVER_ROOT or .)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", default=None, help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to listen on (default: 8080)")

    # ─────────────────────────────────────────────────────────────────────
    # FILE SERVING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--index", "-i",
        nargs="*",
        default=None,
        metavar="NAME",
        help="Index file names, in lookup order (default: index.html)",
    )
    parser.add_argument(
        "--autoindex",
        action="store_true",
        default=None,
        help="List directories that have no index file",
    )
    parser.add_argument("--prefix", default=None, help="URL prefix to strip, e.g. /static")

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)",
    )

    parser.add_argument("--version", "-v", action="version", version=f"fileserver {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> FileServerConfig:
    """Environment configuration, overridden by whatever was passed."""
    config = FileServerConfig.from_env()

    if args.root is not None:
        config.root = args.root
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.index is not None:
        config.index = args.index
    if args.autoindex is not None:
        config.auto_index = args.autoindex
    if args.prefix is not None:
        config.prefix = args.prefix
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def setup_logging(config: FileServerConfig) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args)

    try:
        config.validate()
    except ValueError as e:
        print(f"fileserver: {e}", file=sys.stderr)
        return 2

    setup_logging(config)

    app = WSGIApp(
        config.create_server(),
        middleware=[LoggingMiddleware(log_format=config.log_format)],
    )

    with make_server(config.host, config.port, app) as httpd:
        logger.info(
            f"Serving {config.root!r} on http://{config.host}:{httpd.server_port}"
            f"{config.prefix or '/'}"
        )
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt, stopping")

    return 0


if __name__ == "__main__":
    sys.exit(main())
