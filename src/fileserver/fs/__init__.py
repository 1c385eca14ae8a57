"""
Filesystem layer: the interface the static file handler reads through,
the local-disk implementation, and the index-resolving adapter.
"""

from .base import File, FileInfo, FileSystem, ForbiddenError
from .local import Dir, LocalFile
from .indexed import IndexedDir

__all__ = [
    "File",
    "FileInfo",
    "FileSystem",
    "ForbiddenError",
    "Dir",
    "LocalFile",
    "IndexedDir",
]
