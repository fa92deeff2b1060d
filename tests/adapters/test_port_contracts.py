"""Adapter contract tests: default adapters satisfy the application ports."""

from __future__ import annotations

from pathlib import Path

from lib_build_config.adapters.env.default import DefaultEnvLoader
from lib_build_config.adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader
from lib_build_config.adapters.filesystem.atomic import AtomicFileWriter
from lib_build_config.application import ports


def test_atomic_writer_is_a_file_writer(tmp_path: Path) -> None:
    writer = AtomicFileWriter()
    assert isinstance(writer, ports.FileWriter)
    assert writer.write(tmp_path / "demo" / "BuildConfig.kt", "package demo\n") == len("package demo\n")


def test_structured_loaders_are_file_loaders() -> None:
    for loader in (TOMLFileLoader(), JSONFileLoader(), YAMLFileLoader()):
        assert isinstance(loader, ports.FileLoader)


def test_env_loader_is_an_env_loader() -> None:
    loader = DefaultEnvLoader(environ={"BUILD_CONFIG_VERSION": "1.0"})
    assert isinstance(loader, ports.EnvLoader)
    assert loader.load("BUILD_CONFIG") == {"version": "1.0"}
