"""File-system helpers exposed to server scripts.

Every function raises :class:`FsError` where the operation fails and
:class:`TypeError` where an argument has the wrong type.
"""

from __future__ import annotations

import errno
import os
import shutil
import stat
from enum import Enum
from pathlib import Path

__all__ = [
    "FsError",
    "FileType",
    "ftype",
    "modtime",
    "readdir",
    "is_readable",
    "is_writeable",
    "is_executable",
    "exists",
    "unlink",
    "mkdir",
    "rmdir",
    "getcwd",
    "chdir",
    "copy_file",
    "move_file",
]

PathArg = str | os.PathLike


class FsError(Exception):
    """A file-system operation failed."""

    def __init__(self, message: str, errno_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errno = errno_code


class FileType(str, Enum):
    """Kind of a file-system entry, as reported by :func:`ftype`."""

    FILE = "FILE"
    DIRECTORY = "DIRECTORY"
    CHARDEV = "CHARDEV"
    BLOCKDEV = "BLOCKDEV"
    LINK = "LINK"
    FIFO = "FIFO"
    SOCKET = "SOCKET"
    UNKNOWN = "UNKNOWN"


_MODE_CHECKS = (
    (stat.S_ISREG, FileType.FILE),
    (stat.S_ISDIR, FileType.DIRECTORY),
    (stat.S_ISCHR, FileType.CHARDEV),
    (stat.S_ISBLK, FileType.BLOCKDEV),
    (stat.S_ISLNK, FileType.LINK),
    (stat.S_ISFIFO, FileType.FIFO),
    (stat.S_ISSOCK, FileType.SOCKET),
)


def _path(value: object, what: str, func: str) -> str:
    if isinstance(value, (str, os.PathLike)):
        return os.fspath(value)
    raise TypeError(f"'server.fs.{func}': {what} is not a string")


def _os_error(exc: OSError, suffix: str = "") -> FsError:
    message = exc.strerror or str(exc)
    return FsError(message + suffix, exc.errno)


def ftype(path: PathArg) -> FileType:
    """Return the kind of entry at *path* (symbolic links are followed)."""
    filename = _path(path, "filename", "ftype()")
    try:
        mode = os.stat(filename).st_mode
    except OSError as exc:
        raise _os_error(exc) from exc
    for check, kind in _MODE_CHECKS:
        if check(mode):
            return kind
    return FileType.UNKNOWN


def modtime(path: PathArg) -> int:
    """Return the modification time of *path* in whole seconds since the epoch."""
    filename = _path(path, "filename", "modtime()")
    try:
        return int(os.stat(filename).st_mtime)
    except OSError as exc:
        raise _os_error(exc) from exc


def readdir(path: PathArg) -> list[str]:
    """Return the names in directory *path*, leaving out names starting with a dot."""
    dirname = _path(path, "path", "readdir()")
    try:
        with os.scandir(dirname) as entries:
            return [entry.name for entry in entries if not entry.name.startswith(".")]
    except OSError as exc:
        raise _os_error(exc, f": {dirname}") from exc


def _access(path: PathArg, mode: int, func: str) -> bool:
    filename = _path(path, "filename", f"{func}(filename)")
    return os.access(filename, mode)


def is_readable(path: PathArg) -> bool:
    """Return whether *path* is readable by the current user."""
    return _access(path, os.R_OK, "is_readable")


def is_writeable(path: PathArg) -> bool:
    """Return whether *path* is writeable by the current user."""
    return _access(path, os.W_OK, "is_writeable")


def is_executable(path: PathArg) -> bool:
    """Return whether *path* is executable by the current user."""
    return _access(path, os.X_OK, "is_executable")


def exists(path: PathArg) -> bool:
    """Return whether *path* exists."""
    return _access(path, os.F_OK, "exists")


def unlink(path: PathArg) -> None:
    """Delete the file at *path*."""
    filename = _path(path, "filename", "unlink(filename)")
    try:
        os.unlink(filename)
    except OSError as exc:
        raise _os_error(exc, f" File to unlink: {filename}") from exc


def mkdir(dirname: PathArg, mode: int) -> None:
    """Create directory *dirname* with permission bits *mode*."""
    name = _path(dirname, "dirname", "mkdir(dirname, mask)")
    if not isinstance(mode, int) or isinstance(mode, bool):
        raise TypeError("'server.fs.mkdir(dirname, mask)': mask is not an integer")
    try:
        os.mkdir(name, mode)
    except OSError as exc:
        raise _os_error(exc) from exc


def rmdir(dirname: PathArg) -> None:
    """Remove the (empty) directory *dirname*."""
    name = _path(dirname, "dirname", "rmdir(dirname)")
    try:
        os.rmdir(name)
    except OSError as exc:
        raise _os_error(exc) from exc


def getcwd() -> str:
    """Return the current working directory."""
    try:
        return os.getcwd()
    except OSError as exc:
        raise _os_error(exc) from exc


def chdir(dirname: PathArg) -> str:
    """Change the working directory to *dirname* and return the previous one."""
    name = _path(dirname, "dirname", "chdir(dirname)")
    old = getcwd()
    try:
        os.chdir(name)
    except OSError as exc:
        raise _os_error(exc) from exc
    return old


def copy_file(source: PathArg, target: PathArg) -> None:
    """Copy the contents of *source* to *target*, replacing it if present."""
    prefix = "'server.fs.copyFile(from,to)'"
    src_name = _path(source, "source", "copyFile(from,to)")
    dst_name = _path(target, "target", "copyFile(from,to)")
    try:
        src = open(src_name, "rb")
    except OSError as exc:
        raise FsError(f"{prefix}: Couldn't open source file", exc.errno) from exc
    with src:
        try:
            dst = open(dst_name, "wb")
        except OSError as exc:
            raise FsError(f"{prefix}: Couldn't open output file", exc.errno) from exc
        with dst:
            try:
                shutil.copyfileobj(src, dst)
            except OSError as exc:
                raise FsError(f"{prefix}: Copying data failed", exc.errno) from exc


def move_file(source: PathArg, target: PathArg) -> None:
    """Rename *source* to *target*; moving across file systems is refused."""
    prefix = "'server.fs.moveFile(from,to)'"
    src_name = _path(source, "filename", "moveFile(from,to)")
    dst_name = _path(target, "filename", "moveFile(from,to)")
    try:
        os.rename(src_name, dst_name)
    except OSError as exc:
        if exc.errno == errno.EACCES:
            message = "no permission!"
        elif exc.errno == errno.EXDEV:
            message = "move across file systems not allowed!"
        else:
            message = "error moving file!"
        raise FsError(f"{prefix}: {message}", exc.errno) from exc


def _as_path(value: PathArg) -> Path:
    return Path(os.fspath(value))