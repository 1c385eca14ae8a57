"""
=============================================================================
FILESYSTEM ABSTRACTION
=============================================================================

The static file handler never touches ``os`` directly. It asks a
FileSystem to open a slash-separated name and gets back a File:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   StaticFileHandler ──open("/docs/")──► FileSystem                  │
    │                                             │                        │
    │                      ◄────── File ──────────┘                        │
    │                      stat() / read() / readdir() / close()           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Because the handler only sees this interface, a FileSystem can be
wrapped to change what "opening a directory" means (see indexed.py)
without the handler knowing.

Failures are ordinary Python exceptions from the OSError family:

    FileNotFoundError   the name doesn't exist
    NotADirectoryError  a path component is a file
    PermissionError     the OS refused access
    ForbiddenError      policy refused access (directory listing disabled)

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


class ForbiddenError(OSError):
    """
    Access refused by server policy, not by the operating system.

    Raised when a directory without an index file is opened while
    directory listing is disabled. Deliberately NOT a PermissionError:
    OS permission problems and policy refusals are reported separately.
    """

    def __init__(self, message: str = "forbidden"):
        super().__init__(message)


@dataclass(frozen=True)
class FileInfo:
    """What stat() reports about an opened entry."""

    name: str       # Base name ("index.html"), "/" for the root
    size: int       # Bytes; 0 for directories
    mtime: float    # Modification time, seconds since the epoch
    is_dir: bool


class File(ABC):
    """
    An opened file or directory.

    Whoever receives a File from ``FileSystem.open`` owns it and must
    close it. Files are context managers:

        with fs.open("/a.txt") as f:
            data = f.read()
    """

    @abstractmethod
    def stat(self) -> FileInfo:
        """Describe the opened entry."""

    @abstractmethod
    def read(self) -> bytes:
        """Whole contents of a regular file."""

    @abstractmethod
    def readdir(self) -> List[FileInfo]:
        """Entries of a directory, in no particular order."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying handle. Safe to call twice."""

    def __enter__(self) -> "File":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class FileSystem(ABC):
    """Something that can open slash-separated names."""

    @abstractmethod
    def open(self, name: str) -> File:
        """
        Open ``name`` ("/", "/docs/", "/docs/a.txt").

        Raises:
            OSError: any subclass, when the name cannot be opened.
        """
