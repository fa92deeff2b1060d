"""Composition-root tests: settings layers feeding the generator."""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_build_config import (
    GeneratorSettings,
    InvalidInput,
    SettingsError,
    generate_build_config,
    read_settings,
    read_settings_raw,
)


def _write_settings(directory: Path, body: str, name: str = "buildconfig.toml") -> Path:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_resolve_under_project_dir(tmp_path: Path) -> None:
    written = generate_build_config(
        start_dir=tmp_path,
        environ={},
        overrides={"version": "1.2.3", "package_name": "com.example.app", "properties": {"API_URL": "https://api.example.com"}},
    )
    assert written.path == tmp_path.resolve() / "commonMain" / "com" / "example" / "app" / "BuildConfig.kt"
    lines = written.path.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "package com.example.app",
        "",
        'const val VERSION = "1.2.3"',
        'const val API_URL = "https://api.example.com"',
    ]


def test_settings_file_is_discovered_in_start_dir(tmp_path: Path) -> None:
    _write_settings(
        tmp_path,
        'version = "1.0"\npackage_name = "org.demo"\nsource_set_name = "androidMain"\n[properties]\nFLAVOR = "free"\n',
    )
    written = generate_build_config(start_dir=tmp_path, environ={})
    assert written.path == tmp_path.resolve() / "androidMain" / "org" / "demo" / "BuildConfig.kt"
    assert 'const val FLAVOR = "free"' in written.path.read_text(encoding="utf-8")


def test_absolute_root_is_used_verbatim(tmp_path: Path) -> None:
    output_root = tmp_path / "elsewhere"
    written = generate_build_config(
        start_dir=tmp_path / "missing-is-fine",
        environ={},
        overrides={"version": "1.0", "package_name": "demo", "root": str(output_root)},
    )
    assert written.path == output_root / "commonMain" / "demo" / "BuildConfig.kt"


def test_yaml_settings_file(tmp_path: Path) -> None:
    config = _write_settings(
        tmp_path,
        "version: '5.0'\npackage_name: com.yaml\nproperties:\n  B: two\n  A: one\n",
        name="buildconfig.yaml",
    )
    settings = read_settings(config_file=config, environ={})
    assert settings.version == "5.0"
    assert list(settings.properties.items()) == [("B", "two"), ("A", "one")]


def test_environment_overrides_file(tmp_path: Path) -> None:
    _write_settings(tmp_path, 'version = "1.0"\npackage_name = "demo"\n')
    data, meta = read_settings_raw(start_dir=tmp_path, environ={"BUILD_CONFIG_VERSION": "1.1"})
    assert data["version"] == "1.1"
    assert meta["version"]["layer"] == "env"
    assert meta["package_name"]["layer"] == "file"


def test_none_overrides_do_not_mask_lower_layers(tmp_path: Path) -> None:
    settings = read_settings(
        start_dir=tmp_path,
        environ={"BUILD_CONFIG_PACKAGE_NAME": "demo"},
        overrides={"package_name": None, "version": "1.0"},
    )
    assert settings == GeneratorSettings(version="1.0", package_name="demo")


def test_malformed_settings_file_raises(tmp_path: Path) -> None:
    _write_settings(tmp_path, "version = \n")
    with pytest.raises(SettingsError):
        generate_build_config(start_dir=tmp_path, environ={})


def test_missing_required_values_raise_before_writing(tmp_path: Path) -> None:
    with pytest.raises(InvalidInput, match="version is required"):
        generate_build_config(start_dir=tmp_path, environ={}, overrides={"package_name": "demo"})
    assert list(tmp_path.iterdir()) == []


def test_writer_port_is_forwarded(tmp_path: Path) -> None:
    calls: list[Path] = []

    class _Writer:
        def write(self, path: Path, content: str) -> int:
            calls.append(path)
            return len(content)

    written = generate_build_config(
        start_dir=tmp_path, environ={}, overrides={"version": "1.0", "package_name": "demo"}, writer=_Writer()
    )
    assert calls == [written.path]
    assert not written.path.exists()
