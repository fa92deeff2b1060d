"""Atomic writer tests: directory creation, overwrite semantics, failure cleanup."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Iterator

import pytest

from lib_build_config.adapters.filesystem import atomic as atomic_module
from lib_build_config.adapters.filesystem.atomic import AtomicFileWriter
from lib_build_config.domain.errors import IOFailure


def test_creates_missing_directories(tmp_path: Path) -> None:
    target = tmp_path / "commonMain" / "com" / "example" / "BuildConfig.kt"
    size = AtomicFileWriter().write(target, "package com.example\n")
    assert size == len("package com.example\n")
    assert target.read_text(encoding="utf-8") == "package com.example\n"


def test_existing_directory_is_fine(tmp_path: Path) -> None:
    (tmp_path / "pkg").mkdir()
    AtomicFileWriter().write(tmp_path / "pkg" / "BuildConfig.kt", "x")
    assert (tmp_path / "pkg" / "BuildConfig.kt").read_text(encoding="utf-8") == "x"


def test_overwrites_existing_file_completely(tmp_path: Path) -> None:
    target = tmp_path / "BuildConfig.kt"
    target.write_text("a much longer previous content\n" * 10, encoding="utf-8")
    AtomicFileWriter().write(target, "short\n")
    assert target.read_text(encoding="utf-8") == "short\n"


def test_size_counts_encoded_bytes(tmp_path: Path) -> None:
    assert AtomicFileWriter().write(tmp_path / "BuildConfig.kt", "größe") == len("größe".encode("utf-8"))


def test_no_temporary_files_remain(tmp_path: Path) -> None:
    AtomicFileWriter().write(tmp_path / "BuildConfig.kt", "content")
    assert [entry.name for entry in tmp_path.iterdir()] == ["BuildConfig.kt"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_existing_permissions_are_kept(tmp_path: Path) -> None:
    target = tmp_path / "BuildConfig.kt"
    target.write_text("old", encoding="utf-8")
    target.chmod(0o640)
    AtomicFileWriter().write(target, "new")
    assert stat.S_IMODE(target.stat().st_mode) == 0o640


@pytest.fixture
def process_umask() -> Iterator[int]:
    """Pin the process umask to 0o027 for the test and restore it afterwards."""

    previous = os.umask(0o027)
    try:
        yield 0o027
    finally:
        os.umask(previous)


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_new_files_follow_umask(tmp_path: Path, process_umask: int) -> None:
    target = tmp_path / "BuildConfig.kt"
    AtomicFileWriter().write(target, "new")
    assert stat.S_IMODE(target.stat().st_mode) == 0o666 & ~process_umask


def test_writing_never_touches_the_process_umask(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []

    def _record(mask: int) -> int:
        calls.append(mask)
        raise AssertionError("process umask changed during write")

    monkeypatch.setattr(atomic_module.os, "umask", _record)
    AtomicFileWriter().write(tmp_path / "new" / "BuildConfig.kt", "x")
    assert calls == []


def test_unencodable_content_raises_io_failure(tmp_path: Path) -> None:
    target = tmp_path / "BuildConfig.kt"
    with pytest.raises(IOFailure) as excinfo:
        AtomicFileWriter(encoding="ascii").write(target, "größe")
    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)
    assert not target.exists()


def test_failed_replace_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "BuildConfig.kt"
    target.write_text("previous", encoding="utf-8")

    def _refuse(_src: object, _dst: object) -> None:
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(atomic_module.os, "replace", _refuse)
    with pytest.raises(IOFailure) as excinfo:
        AtomicFileWriter().write(target, "replacement")
    assert excinfo.value.path == target
    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert target.read_text(encoding="utf-8") == "previous"
    assert [entry.name for entry in tmp_path.iterdir()] == ["BuildConfig.kt"]


def test_directory_creation_failure_raises_io_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    with pytest.raises(IOFailure) as excinfo:
        AtomicFileWriter().write(blocker / "pkg" / "BuildConfig.kt", "content")
    assert excinfo.value.path == blocker / "pkg"


def test_taken_temporary_name_is_skipped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    tokens = iter(["taken", "free"])
    monkeypatch.setattr(atomic_module.secrets, "token_hex", lambda _nbytes: next(tokens))
    foreign = tmp_path / ".BuildConfig.kt.taken.tmp"
    foreign.write_text("someone else", encoding="utf-8")

    AtomicFileWriter().write(tmp_path / "BuildConfig.kt", "content")

    assert foreign.read_text(encoding="utf-8") == "someone else"
    assert sorted(entry.name for entry in tmp_path.iterdir()) == [".BuildConfig.kt.taken.tmp", "BuildConfig.kt"]
