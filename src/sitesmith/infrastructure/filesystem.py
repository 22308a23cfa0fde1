"""Filesystem primitives for reading sources and maintaining the output tree.

Everything here is synchronous and side-effect-local to the file or
directory it touches. Nothing retries and nothing logs: failures are raised
to the caller, wrapped as :class:`PathError` where the operation and path
matter for reporting.
"""

from __future__ import annotations

import errno
import os
import shutil
import stat
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

# Signature for postfix_walk visitors: (path, stat_result or None, error or None).
WalkFunc = Callable[[Path, os.stat_result | None, OSError | None], None]

_MAGIC_SIZE = 4


# ---------------------------------------------------------------------------
# Structured path errors
# ---------------------------------------------------------------------------


class PathError(OSError):
    """An error annotated with the attempted operation and the path.

    Formats as ``"<op> <path>: <cause>"``.
    """

    def __init__(self, op: str, path: str | os.PathLike[str], cause: BaseException) -> None:
        self.op = op
        self.path = os.fspath(path)
        self.cause = cause
        code = cause.errno if isinstance(cause, OSError) else None
        super().__init__(code, str(cause), self.path)

    def __str__(self) -> str:
        reason = self.cause.strerror if isinstance(self.cause, OSError) else None
        return f"{self.op} {self.path}: {reason or self.cause}"

    def __repr__(self) -> str:
        return f"PathError(op={self.op!r}, path={self.path!r}, cause={self.cause!r})"


def new_path_error(op: str, path: str | os.PathLike[str], text: str) -> PathError:
    """Return a :class:`PathError` whose cause formats as *text*."""
    return PathError(op, path, Exception(text))


def path_error(
    err: BaseException | None,
    op: str,
    path: str | os.PathLike[str],
) -> PathError | None:
    """Wrap *err* as a :class:`PathError` unless it already is one.

    Returns ``None`` for ``None`` so callers can wrap unconditionally.
    """
    if err is None:
        return None
    if isinstance(err, PathError):
        return err
    return PathError(op, path, err)


def is_not_empty(err: BaseException | None) -> bool:
    """Whether *err* reports that a directory is not empty.

    POSIX uses ``ENOTEMPTY``; some platforms report ``EEXIST`` from
    ``rmdir`` on a populated directory. On Windows the same condition is
    ``ERROR_DIR_NOT_EMPTY`` (145).
    """
    if isinstance(err, PathError):
        err = err.cause
    if not isinstance(err, OSError):
        return False
    if err.errno in (errno.ENOTEMPTY, errno.EEXIST):
        return True
    return getattr(err, "winerror", None) == 145


# ---------------------------------------------------------------------------
# File creation and copying
# ---------------------------------------------------------------------------


def visit_created_file(path: Path, write: Callable[[BinaryIO], None]) -> None:
    """Create (or truncate) *path* and hand the open stream to *write*.

    The stream is closed exactly once. If *write* raises, that exception
    propagates and any error from the close is dropped. If *write*
    succeeds, the close runs as its own step and its failure propagates,
    so a late flush error is never lost.
    """
    try:
        stream = open(path, "wb")  # noqa: SIM115
    except OSError as exc:
        raise PathError("create", path, exc) from exc

    try:
        write(stream)
    except BaseException:
        try:
            stream.close()
        except OSError:
            pass
        raise

    try:
        stream.close()
    except OSError as exc:
        raise PathError("close", path, exc) from exc


def copy_file_contents(dst: Path, src: Path) -> None:
    """Copy the bytes of *src* to *dst*, creating parent directories.

    Not atomic; permissions and timestamps are not copied. A partial
    destination is removed if the copy fails.
    """
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathError("mkdir", dst.parent, exc) from exc
    try:
        source = open(src, "rb")  # noqa: SIM115
    except OSError as exc:
        raise PathError("open", src, exc) from exc
    with source:
        try:
            with open(dst, "wb") as out:
                shutil.copyfileobj(source, out)
        except OSError as exc:
            dst.unlink(missing_ok=True)
            raise PathError("copy", dst, exc) from exc


# ---------------------------------------------------------------------------
# Sniffing
# ---------------------------------------------------------------------------


def read_file_magic(path: Path) -> bytes:
    """Return the first four bytes of *path*, with a final ``\\r`` read as ``\\n``.

    Files shorter than four bytes return exactly the bytes present. Only
    the returned buffer is normalized; the file is untouched. The fourth
    byte is the only one that needs it, since the result is compared
    against the ``---\\n`` front matter marker.
    """
    try:
        with open(path, "rb") as f:
            data = bytearray(f.read(_MAGIC_SIZE))
    except OSError as exc:
        raise PathError("read", path, exc) from exc
    if len(data) == _MAGIC_SIZE and data[3] == ord("\r"):
        data[3] = ord("\n")
    return bytes(data)


# ---------------------------------------------------------------------------
# Tree traversal and pruning
# ---------------------------------------------------------------------------


def postfix_walk(root: Path, visit: WalkFunc) -> None:
    """Walk *root*, visiting each directory after all of its subdirectories.

    Like :func:`os.walk` with ``topdown=False`` but only directories are
    visited, and a visitor may delete the directory it is handed. There is
    no way to skip a subtree. An unreadable directory is treated as having
    no children; the final stat of *root* always happens and its outcome,
    including a missing path, is passed to *visit*.
    """
    try:
        entries = sorted(os.scandir(root), key=lambda e: e.name)
    except OSError:
        entries = []
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if is_dir:
            postfix_walk(Path(entry.path), visit)

    try:
        info = os.stat(root)
    except OSError as exc:
        visit(root, None, exc)
        return
    visit(root, info, None)


def remove_empty_directories(root: Path) -> None:
    """Remove every directory under *root* (and *root*) that ends up empty.

    Missing paths and non-empty directories are left alone. Any other
    error aborts the pass.
    """

    def visit(path: Path, info: os.stat_result | None, err: OSError | None) -> None:
        if err is not None:
            if isinstance(err, FileNotFoundError):
                return
            raise PathError("stat", path, err)
        assert info is not None
        if not stat.S_ISDIR(info.st_mode):
            return
        try:
            os.rmdir(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            if is_not_empty(exc):
                return
            raise PathError("remove", path, exc) from exc

    postfix_walk(root, visit)
