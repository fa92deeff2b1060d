"""Structured settings file loaders.

Purpose
-------
Convert a project settings file (``buildconfig.toml`` or an explicit
``--config`` path) into a Python mapping the settings merge understands.
Adapters are small wrappers around ``tomllib``/``json``/``yaml.safe_load`` so
error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileLoader` – loader for the canonical TOML format.
* :class:`JSONFileLoader` – minimal JSON loader.
* :class:`YAMLFileLoader` – YAML loader backed by PyYAML.
* :func:`loader_for` – picks a loader from the file suffix.

System Role
-----------
Invoked by :func:`lib_build_config.core.read_settings_raw` for the lowest
precedence settings layer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import SettingsError
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format_name = "text"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`SettingsError` when the file is missing.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b"version = '1.0'")
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:7]
        b'version'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise SettingsError(f"Settings file not found: {path}")
        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            raise SettingsError(f"Cannot read settings file {path}: {exc}") from exc
        log_debug("settings_file_read", stage="settings", path=path, size=len(payload))
        return payload

    def _invalid(self, path: str, exc: Exception) -> SettingsError:
        log_error("settings_file_invalid", stage="settings", path=path, format=self.format_name, error=str(exc))
        return SettingsError(f"Invalid {self.format_name.upper()} in {path}: {exc}")

    def _accept(self, data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* is a mapping, log the load, and return it.

        Examples
        --------
        >>> BaseFileLoader()._accept({"version": "1.0"}, path="demo")
        {'version': '1.0'}
        >>> BaseFileLoader()._accept(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_build_config.domain.errors.SettingsError: Settings file demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise SettingsError(f"Settings file {path} did not produce a mapping")
        log_debug("settings_file_loaded", stage="settings", path=path, format=self.format_name)
        return data


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format_name = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the TOML file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.toml', delete=False, encoding='utf-8')
        >>> _ = tmp.write('version = "1.2.3"')
        >>> tmp.close()
        >>> TOMLFileLoader().load(tmp.name)["version"]
        '1.2.3'
        >>> Path(tmp.name).unlink()
        """

        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._accept(data, path=path)


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format_name = "json"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the JSON file at *path*."""

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._accept(data, path=path)


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document counts as an empty mapping."""

    format_name = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the YAML file at *path*."""

        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        return self._accept({} if data is None else data, path=path)


_LOADERS: dict[str, BaseFileLoader] = {
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


def loader_for(path: str | Path) -> BaseFileLoader:
    """Return the loader matching the suffix of *path*.

    Examples
    --------
    >>> type(loader_for("buildconfig.yml")).__name__
    'YAMLFileLoader'
    >>> loader_for("buildconfig.ini")
    Traceback (most recent call last):
    ...
    lib_build_config.domain.errors.SettingsError: Unsupported settings file format: buildconfig.ini
    """

    try:
        return _LOADERS[Path(path).suffix.lower()]
    except KeyError as exc:
        raise SettingsError(f"Unsupported settings file format: {path}") from exc
