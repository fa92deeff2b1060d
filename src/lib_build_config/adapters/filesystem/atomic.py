"""Atomic filesystem writer.

Purpose
-------
Implement :class:`lib_build_config.application.ports.FileWriter` so a failed
write never leaves a truncated BuildConfig behind: content goes to a temporary
file in the destination directory, is flushed to disk, then replaces the target
with :func:`os.replace`.

Contents
    - ``AtomicFileWriter``: the writer used by default.
    - ``_ensure_parent`` / ``_write_temporary`` / ``_open_temporary`` /
      ``_discard``: tiny helpers that narrate how files are written. New files
      get their mode from the process umask through ``os.open``; existing
      targets keep theirs.

Residual risk
    ``os.replace`` is atomic on POSIX and on NTFS. On filesystems without an
    atomic rename (some network shares) the replace may degrade to a
    copy; the previous file is still only touched after the new content is
    complete on disk.
"""

from __future__ import annotations

import errno
import os
import secrets
from pathlib import Path

from ...domain.errors import IOFailure
from ...observability import log_debug, log_error

_TEMPORARY_ATTEMPTS = 100


class AtomicFileWriter:
    """Write text files through a temporary sibling and an atomic replace."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def write(self, path: Path, content: str) -> int:
        """Replace *path* with *content* and return the number of bytes written.

        Raises
        ------
        IOFailure
            When the content cannot be encoded, the parent directory cannot be
            created, or the write/replace fails. The original exception is
            chained.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> target = Path(tmp.name) / "a" / "b" / "BuildConfig.kt"
        >>> AtomicFileWriter().write(target, "package a.b\\n")
        12
        >>> target.read_text(encoding="utf-8")
        'package a.b\\n'
        >>> tmp.cleanup()
        """

        try:
            payload = content.encode(self._encoding)
        except UnicodeEncodeError as exc:
            raise IOFailure(path, f"Cannot encode {path} as {self._encoding}: {exc.reason}") from exc
        _ensure_parent(path)
        temporary = _write_temporary(path, payload)
        try:
            os.replace(temporary, path)
        except OSError as exc:
            _discard(temporary)
            log_error("build_config_write_failed", stage="write", path=str(path), error=str(exc))
            raise IOFailure(path, f"Cannot replace {path}: {exc}") from exc
        log_debug("build_config_replaced", stage="write", path=str(path), size=len(payload))
        return len(payload)


def _ensure_parent(path: Path) -> None:
    """Create parent directories for *path* when missing."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log_error("directory_create_failed", stage="write", path=str(path.parent), error=str(exc))
        raise IOFailure(path.parent, f"Cannot create directory {path.parent}: {exc}") from exc
    log_debug("directory_ensured", stage="write", path=str(path.parent))


def _write_temporary(path: Path, payload: bytes) -> Path:
    """Write *payload* to a new temporary file beside *path* and return its location."""

    try:
        fd, temporary = _open_temporary(path)
    except OSError as exc:
        log_error("build_config_write_failed", stage="write", path=str(path), error=str(exc))
        raise IOFailure(path, f"Cannot create temporary file for {path}: {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            mode = _existing_mode(path)
            if mode is not None:
                os.chmod(temporary, mode)
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError as exc:
        _discard(temporary)
        log_error("build_config_write_failed", stage="write", path=str(path), error=str(exc))
        raise IOFailure(path, f"Cannot write {path}: {exc}") from exc
    return temporary


def _open_temporary(path: Path) -> tuple[int, Path]:
    """Exclusively create ``.<name>.<random>.tmp`` beside *path*.

    The file is opened with mode ``0o666`` so the kernel applies the process
    umask, exactly like a plain ``open`` would.
    """

    flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
    for _ in range(_TEMPORARY_ATTEMPTS):
        temporary = path.with_name(f".{path.name}.{secrets.token_hex(6)}.tmp")
        try:
            return os.open(temporary, flags, 0o666), temporary
        except FileExistsError:
            continue
    raise FileExistsError(errno.EEXIST, "No unused temporary file name", str(path.parent))


def _existing_mode(path: Path) -> int | None:
    """Return the permission bits of an existing target, or ``None`` for a new file."""

    try:
        return path.stat().st_mode & 0o777
    except FileNotFoundError:
        return None


def _discard(temporary: Path) -> None:
    """Remove a leftover temporary file, ignoring one that is already gone."""

    temporary.unlink(missing_ok=True)
