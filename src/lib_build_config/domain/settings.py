"""Caller-layer settings value object.

Purpose
-------
Represent the invocation parameters of the build step (the options the Gradle
task used to expose) after all settings layers have been merged, and turn them
into a :class:`~lib_build_config.domain.request.GenerationRequest`.

Contents
    - :class:`GeneratorSettings` – immutable settings with documented defaults.
    - ``SETTING_KEYS`` – recognised top-level setting names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final, Mapping

from .errors import InvalidInput, SettingsError
from .request import DEFAULT_FILE_NAME, DEFAULT_SOURCE_SET_NAME, GenerationRequest

SETTING_KEYS: Final[frozenset[str]] = frozenset(
    {
        "version",
        "package_name",
        "root",
        "source_set_name",
        "build_config_file_name",
        "properties",
        "sort_properties",
    }
)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class GeneratorSettings:
    """Resolved invocation parameters.

    Attributes
    ----------
    version / package_name:
        Required for generation; ``None`` until some layer supplies them.
    root:
        Directory containing the source sets (relative paths resolve against
        the working directory).
    source_set_name:
        Source set receiving the file, ``commonMain`` by default.
    build_config_file_name:
        Output file name, ``BuildConfig.kt`` by default.
    properties:
        Extra constants in merge order.
    sort_properties:
        Emit properties sorted by key instead of merge order.
    """

    version: str | None = None
    package_name: str | None = None
    root: Path = Path(".")
    source_set_name: str = DEFAULT_SOURCE_SET_NAME
    build_config_file_name: str = DEFAULT_FILE_NAME
    properties: Mapping[str, str] = field(default_factory=dict)
    sort_properties: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> GeneratorSettings:
        """Build settings from a merged mapping, converting scalars to text.

        Unknown keys are ignored so shared settings files may carry entries for
        other tools.

        Examples
        --------
        >>> settings = GeneratorSettings.from_mapping({"version": "1.0", "properties": {"DEBUG": True}})
        >>> settings.version, dict(settings.properties), settings.source_set_name
        ('1.0', {'DEBUG': 'true'}, 'commonMain')
        """

        kwargs: dict[str, object] = {}
        for key in ("version", "package_name", "source_set_name", "build_config_file_name"):
            if data.get(key) is not None:
                kwargs[key] = _as_text(key, data[key])
        if data.get("root") is not None:
            kwargs["root"] = Path(_as_text("root", data["root"]))
        if data.get("sort_properties") is not None:
            kwargs["sort_properties"] = _as_bool("sort_properties", data["sort_properties"])
        raw_properties = data.get("properties") or {}
        if not isinstance(raw_properties, Mapping):
            raise SettingsError("'properties' must be a table of NAME = value entries")
        kwargs["properties"] = {
            str(name): _as_text(f"properties.{name}", value) for name, value in raw_properties.items()
        }
        return cls(**kwargs)  # type: ignore[arg-type]

    @property
    def source_set_root(self) -> Path:
        """Return ``root / source_set_name``."""

        return self.root / self.source_set_name

    def ordered_properties(self) -> dict[str, str]:
        """Return properties in rendering order (merge order, or sorted by key)."""

        if self.sort_properties:
            return dict(sorted(self.properties.items()))
        return dict(self.properties)

    def to_request(self) -> GenerationRequest:
        """Return the generator request, failing when a required value is missing.

        Examples
        --------
        >>> GeneratorSettings(version="1.2.3", package_name="com.example.app").to_request().output_path().as_posix()
        'commonMain/com/example/app/BuildConfig.kt'
        >>> GeneratorSettings(version="1.2.3").to_request()
        Traceback (most recent call last):
        ...
        lib_build_config.domain.errors.InvalidInput: package_name is required
        """

        if self.version is None:
            raise InvalidInput("version is required")
        if self.package_name is None:
            raise InvalidInput("package_name is required")
        if not self.source_set_name.strip():
            raise InvalidInput("source_set_name must not be empty")
        return GenerationRequest(
            version=self.version,
            package_name=self.package_name,
            source_set_root=self.source_set_root,
            file_name=self.build_config_file_name,
            properties=self.ordered_properties(),
        )

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly view used by ``lib_build_config settings``."""

        return {
            "version": self.version,
            "package_name": self.package_name,
            "root": str(self.root),
            "source_set_name": self.source_set_name,
            "build_config_file_name": self.build_config_file_name,
            "properties": self.ordered_properties(),
            "sort_properties": self.sort_properties,
        }


def _as_text(name: str, value: object) -> str:
    """Render a scalar setting as text the way it would read in Kotlin source."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise SettingsError(f"Setting {name!r} must be a scalar value, got {type(value).__name__}")


def _as_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise SettingsError(f"Setting {name!r} must be a boolean, got {value!r}")
