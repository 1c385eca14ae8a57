"""
=============================================================================
FILE SERVER CONFIGURATION
=============================================================================

One dataclass holding every setting needed to run a file server, with
the same three sources the CLI understands:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments   python -m fileserver ./public --port 9000
    │   2. Environment variables    FILESERVER_PORT=9000                  │
    │   3. Defaults in this class                                         │
    └─────────────────────────────────────────────────────────────────────┘

The file-serving settings (root, index, auto_index, prefix) become
FileServer options through ``options()``; host, port and the logging
settings are for whoever hosts the handler.

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .server import FileServer, Option, with_auto_index, with_index, with_prefix


_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class FileServerConfig:
    """
    Configuration for serving a directory.

    Example:
        config = FileServerConfig(root="./public", auto_index=True)
        config.validate()
        server = config.create_server()
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILE SERVING
    # ─────────────────────────────────────────────────────────────────────

    root: str = "."
    """Directory to serve."""

    index: List[str] = field(default_factory=lambda: ["index.html"])
    """Index file names tried, in order, for directory requests."""

    auto_index: bool = False
    """Generate listings for directories without an index file."""

    prefix: str = ""
    """URL prefix to strip ("" serves the tree at the URL root)."""

    # ─────────────────────────────────────────────────────────────────────
    # HOSTING
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    port: int = 8080

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG shows index resolution and error dispatch decisions."""

    log_format: str = "text"
    """Access log format: "text" (Apache style) or "json"."""

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "FileServerConfig":
        """
        Build a configuration from environment variables.

        FILESERVER_ROOT        directory to serve (default: .)
        FILESERVER_INDEX       comma-separated index names (default: index.html)
        FILESERVER_AUTOINDEX   1/true/yes/on enables listings
        FILESERVER_PREFIX      URL prefix to strip
        FILESERVER_HOST        bind address (default: 127.0.0.1)
        FILESERVER_PORT        port (default: 8080)
        FILESERVER_LOG_LEVEL   DEBUG, INFO, WARNING, ERROR
        FILESERVER_LOG_FORMAT  text or json
        """
        env = os.environ if environ is None else environ

        index_value = env.get("FILESERVER_INDEX")
        if index_value is None:
            index = ["index.html"]
        else:
            index = [name.strip() for name in index_value.split(",") if name.strip()]

        return cls(
            root=env.get("FILESERVER_ROOT", "."),
            index=index,
            auto_index=env.get("FILESERVER_AUTOINDEX", "").strip().lower() in _TRUE_VALUES,
            prefix=env.get("FILESERVER_PREFIX", ""),
            host=env.get("FILESERVER_HOST", "127.0.0.1"),
            port=int(env.get("FILESERVER_PORT", "8080")),
            log_level=env.get("FILESERVER_LOG_LEVEL", "INFO"),
            log_format=env.get("FILESERVER_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """Fail fast on settings that can't work."""
        if not os.path.isdir(self.root):
            raise ValueError(f"Root directory does not exist: {self.root}")

        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if any(not name or "/" in name for name in self.index):
            raise ValueError(f"Invalid index names: {self.index}")

        if self.prefix and not self.prefix.startswith("/"):
            raise ValueError(f"Prefix must start with '/': {self.prefix!r}")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log format: {self.log_format}")

    def options(self) -> List[Option]:
        """FileServer options equivalent to this configuration."""
        options = [with_index(*self.index), with_auto_index(self.auto_index)]
        if self.prefix:
            options.append(with_prefix(self.prefix))
        return options

    def create_server(self) -> FileServer:
        return FileServer(self.root, *self.options())
