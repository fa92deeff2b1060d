"""Value object tests for generation requests and their default resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_build_config.domain.request import (
    DEFAULT_FILE_NAME,
    DEFAULT_SOURCE_SET_NAME,
    GenerationRequest,
    WrittenFile,
    is_identifier,
)


def test_defaults_resolve_to_common_main_and_build_config() -> None:
    request = GenerationRequest(version="1.2.3", package_name="com.example.app")
    assert request.resolved_source_set_root() == Path(DEFAULT_SOURCE_SET_NAME)
    assert request.resolved_file_name() == DEFAULT_FILE_NAME == "BuildConfig.kt"
    assert request.output_path() == Path("commonMain/com/example/app/BuildConfig.kt")


def test_explicit_root_and_file_name_are_used_verbatim(tmp_path: Path) -> None:
    request = GenerationRequest(
        version="1.0",
        package_name="org.demo",
        source_set_root=tmp_path / "jvmMain",
        file_name="Constants.kt",
    )
    assert request.output_path() == tmp_path / "jvmMain" / "org" / "demo" / "Constants.kt"


def test_properties_are_read_only_and_keep_order() -> None:
    source = {"B": "2", "A": "1"}
    request = GenerationRequest(version="1.0", package_name="demo", properties=source)
    source["C"] = "3"
    assert list(request.properties) == ["B", "A"]
    with pytest.raises(TypeError):
        request.properties["D"] = "4"  # type: ignore[index]


def test_requests_with_same_inputs_are_equal() -> None:
    first = GenerationRequest("1.0", "demo", properties={"A": "1"})
    second = GenerationRequest("1.0", "demo", properties={"A": "1"})
    assert first == second


@pytest.mark.parametrize(
    ("name", "expected"),
    [("FOO_BAR", True), ("_private", True), ("a1", True), ("1bad", False), ("with-dash", False), ("", False)],
)
def test_is_identifier(name: str, expected: bool) -> None:
    assert is_identifier(name) is expected


def test_written_file_to_dict(tmp_path: Path) -> None:
    written = WrittenFile(path=tmp_path / "BuildConfig.kt", size=42)
    assert written.to_dict() == {"path": str(tmp_path / "BuildConfig.kt"), "size": 42}
