from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib_build_config.adapters.file_loaders.structured import (
    JSONFileLoader,
    TOMLFileLoader,
    YAMLFileLoader,
    loader_for,
)
from lib_build_config.domain.errors import SettingsError


def test_toml_loader_keeps_property_order(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.toml"
    path.write_text(
        'version = "1.2.3"\npackage_name = "com.example"\n\n[properties]\nZETA = "z"\nALPHA = "a"\n',
        encoding="utf-8",
    )
    data = TOMLFileLoader().load(str(path))
    assert data["version"] == "1.2.3"
    assert list(data["properties"]) == ["ZETA", "ALPHA"]


def test_toml_loader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SettingsError, match="not found"):
        TOMLFileLoader().load(str(tmp_path / "missing.toml"))


def test_toml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.toml"
    path.write_text("version = \n", encoding="utf-8")
    with pytest.raises(SettingsError, match="Invalid TOML"):
        TOMLFileLoader().load(str(path))


def test_json_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.json"
    path.write_text(json.dumps({"version": "1.0", "properties": {"DEBUG": True}}), encoding="utf-8")
    assert JSONFileLoader().load(str(path))["properties"] == {"DEBUG": True}


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(SettingsError, match="Invalid JSON"):
        JSONFileLoader().load(str(path))


def test_json_loader_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SettingsError, match="did not produce a mapping"):
        JSONFileLoader().load(str(path))


def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.yaml"
    path.write_text("# empty file\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path)) == {}


def test_yaml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "buildconfig.yml"
    path.write_text("version: [unclosed\n", encoding="utf-8")
    with pytest.raises(SettingsError, match="Invalid YAML"):
        YAMLFileLoader().load(str(path))


@pytest.mark.parametrize(
    ("name", "loader_type"),
    [("a.toml", TOMLFileLoader), ("a.JSON", JSONFileLoader), ("a.yaml", YAMLFileLoader), ("a.yml", YAMLFileLoader)],
)
def test_loader_for_suffix(name: str, loader_type: type) -> None:
    assert isinstance(loader_for(name), loader_type)


def test_loader_for_unknown_suffix() -> None:
    with pytest.raises(SettingsError, match="Unsupported"):
        loader_for("buildconfig.ini")
