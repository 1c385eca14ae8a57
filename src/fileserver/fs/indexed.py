"""
=============================================================================
INDEXED DIRECTORY ADAPTER
=============================================================================

Wraps another FileSystem and changes what opening a DIRECTORY returns.

=============================================================================
RESOLUTION RULES
=============================================================================

    open(name)
        │
        ├── underlying open fails ───────────► record error, re-raise
        ├── stat() fails ────────────────────► close, record, re-raise
        │
        ├── regular file ────────────────────► return it unchanged
        │
        └── directory
              │
              ├── an index name opens ───────► close dir, return index
              │   (tried in configured order, first match wins)
              │
              ├── none, auto_index=True ─────► return the directory
              │                                 (handler lists it)
              │
              └── none, auto_index=False ────► close dir,
                                                record ForbiddenError,
                                                raise it

The adapter is created fresh for every request. ``error`` holds the last
exception it recorded so the FileServer can tell, after the static file
handler has finished, WHY an error status came out.

=============================================================================
"""

import logging
import posixpath
from typing import Optional, Sequence

from .base import File, FileSystem, ForbiddenError


logger = logging.getLogger(__name__)


class IndexedDir(FileSystem):
    """
    FileSystem adapter that resolves directories to index documents.

    Args:
        fs:         The filesystem to delegate to.
        index:      Index file names, tried in order.
        auto_index: Return bare directories (for listing) when no index
                    file exists, instead of refusing them.
    """

    def __init__(
        self,
        fs: FileSystem,
        index: Sequence[str] = ("index.html",),
        auto_index: bool = False,
    ):
        self.fs = fs
        self.index = list(index)
        self.auto_index = auto_index
        self.error: Optional[Exception] = None

    @property
    def forbidden(self) -> bool:
        """True when the last recorded error is the listing refusal."""
        return isinstance(self.error, ForbiddenError)

    def open(self, name: str) -> File:
        try:
            f = self.fs.open(name)
        except OSError as e:
            self.error = e
            raise

        try:
            info = f.stat()
        except OSError as e:
            f.close()
            self.error = e
            raise

        if not info.is_dir:
            return f

        for index in self.index:
            try:
                index_file = self.fs.open(posixpath.join(name, index.lstrip("/")))
            except OSError:
                continue
            f.close()
            logger.debug(f"Resolved directory {name!r} to index {index!r}")
            return index_file

        if not self.auto_index:
            f.close()
            self.error = ForbiddenError(f"directory listing not allowed: {name}")
            raise self.error

        return f
