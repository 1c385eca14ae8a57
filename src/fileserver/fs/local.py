"""
Local directory filesystem.

``Dir(root)`` maps slash-separated request names onto files below
``root``. Names are cleaned before they touch the disk, so ".." can never
climb above the root:

    Dir("/var/www").open("/docs/../a.txt")     → /var/www/a.txt
    Dir("/var/www").open("/../../etc/passwd")  → /var/www/etc/passwd

Symlinks inside the root are followed, the same as any conventional
static file server.
"""

import errno
import os
import posixpath
import stat
from typing import List

from .base import File, FileInfo, FileSystem


class LocalFile(File):
    """
    A file or directory on the local disk.

    Regular files are opened immediately so permission problems surface
    from ``Dir.open`` rather than later from ``read()``. Directories hold
    only their path until ``readdir()`` is called.
    """

    def __init__(self, path: str, name: str):
        self.path = path
        self.name = name
        self._handle = None

        st = os.stat(path)
        self._is_dir = stat.S_ISDIR(st.st_mode)
        if not self._is_dir:
            self._handle = open(path, "rb")

    def stat(self) -> FileInfo:
        if self._handle is not None:
            st = os.fstat(self._handle.fileno())
        else:
            st = os.stat(self.path)
        is_dir = stat.S_ISDIR(st.st_mode)
        return FileInfo(
            name=posixpath.basename(self.name.rstrip("/")) or "/",
            size=0 if is_dir else st.st_size,
            mtime=st.st_mtime,
            is_dir=is_dir,
        )

    def read(self) -> bytes:
        if self._handle is None:
            raise IsADirectoryError(errno.EISDIR, "is a directory", self.path)
        self._handle.seek(0)
        return self._handle.read()

    def readdir(self) -> List[FileInfo]:
        if not self._is_dir:
            raise NotADirectoryError(errno.ENOTDIR, "not a directory", self.path)

        entries = []
        with os.scandir(self.path) as it:
            for entry in it:
                try:
                    st = entry.stat()
                except OSError:
                    # Dangling symlink: describe the link itself
                    st = entry.stat(follow_symlinks=False)
                is_dir = stat.S_ISDIR(st.st_mode)
                entries.append(FileInfo(
                    name=entry.name,
                    size=0 if is_dir else st.st_size,
                    mtime=st.st_mtime,
                    is_dir=is_dir,
                ))
        return entries

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __repr__(self) -> str:
        return f"LocalFile({self.path!r})"


class Dir(FileSystem):
    """Filesystem rooted at a local directory."""

    def __init__(self, root: str):
        self.root = root or "."

    def resolve(self, name: str) -> str:
        """
        Local path for a request name.

        Raises:
            OSError: EINVAL when the name contains a NUL byte or a
                     platform separator other than "/".
        """
        if "\x00" in name or (os.sep != "/" and os.sep in name):
            raise OSError(errno.EINVAL, "invalid character in file path", name)

        relative = posixpath.normpath("/" + name.lstrip("/")).lstrip("/")
        if not relative or relative == ".":
            return self.root
        return os.path.join(self.root, *relative.split("/"))

    def open(self, name: str) -> LocalFile:
        return LocalFile(self.resolve(name), name)

    def __repr__(self) -> str:
        return f"Dir({self.root!r})"
