"""Value objects describing one BuildConfig generation.

Purpose
-------
Hold the typed inputs and outputs of the generator together with the naming
conventions (default source set, default file name, reserved constant) that
the caller layer applies.

Contents
--------
* ``DEFAULT_SOURCE_SET_NAME`` / ``DEFAULT_FILE_NAME`` / ``RESERVED_NAME``.
* :class:`GenerationRequest` – immutable request with default resolution.
* :class:`WrittenFile` – success report returned by the generator.
* :func:`is_identifier` – the identifier rule shared by package segments and
  property keys.

System Role
-----------
Constructed by :mod:`lib_build_config.core` (or directly by library users) and
consumed by :func:`lib_build_config.application.generator.generate`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final, Mapping

DEFAULT_SOURCE_SET_NAME: Final[str] = "commonMain"
"""Source set used when the caller does not name one."""

DEFAULT_FILE_NAME: Final[str] = "BuildConfig.kt"
"""Output file name used when the caller does not supply one."""

RESERVED_NAME: Final[str] = "VERSION"
"""Constant always emitted by the generator; property keys may not reuse it."""

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(name: str) -> bool:
    """Return ``True`` when *name* is letters, digits, underscores and does not start with a digit.

    Examples
    --------
    >>> is_identifier("FOO_BAR"), is_identifier("1bad"), is_identifier("a-b")
    (True, False, False)
    """

    return _IDENTIFIER.fullmatch(name) is not None


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Parameters for a single BuildConfig generation.

    Attributes
    ----------
    version:
        Semantic version embedded as the ``VERSION`` constant.
    package_name:
        Dot-separated package under which the constants live.
    source_set_root:
        Directory receiving the package tree. ``None`` resolves to
        :data:`DEFAULT_SOURCE_SET_NAME` relative to the working directory.
    file_name:
        Output file name. ``None`` resolves to :data:`DEFAULT_FILE_NAME`.
    properties:
        Extra constants in rendering order. Stored as a read-only view.

    Examples
    --------
    >>> request = GenerationRequest(version="1.2.3", package_name="com.example.app")
    >>> request.resolved_file_name(), request.resolved_source_set_root().name
    ('BuildConfig.kt', 'commonMain')
    >>> request.package_segments()
    ('com', 'example', 'app')
    """

    version: str
    package_name: str
    source_set_root: str | Path | None = None
    file_name: str | None = None
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def resolved_source_set_root(self) -> Path:
        """Return the source-set directory, applying the ``commonMain`` default."""

        if self.source_set_root is None:
            return Path(DEFAULT_SOURCE_SET_NAME)
        return Path(self.source_set_root)

    def resolved_file_name(self) -> str:
        """Return the output file name, applying the ``BuildConfig.kt`` default."""

        return DEFAULT_FILE_NAME if self.file_name is None else self.file_name

    def package_segments(self) -> tuple[str, ...]:
        """Split ``package_name`` into the directory segments of the output path."""

        return tuple(self.package_name.strip().split("."))

    def output_path(self) -> Path:
        """Return ``source_set_root / <package dirs> / file_name``.

        Examples
        --------
        >>> GenerationRequest("1.0", "com.example", source_set_root="out").output_path().as_posix()
        'out/com/example/BuildConfig.kt'
        """

        return self.resolved_source_set_root().joinpath(*self.package_segments(), self.resolved_file_name())


@dataclass(frozen=True, slots=True)
class WrittenFile:
    """Report returned after a successful write.

    Attributes
    ----------
    path:
        Absolute path of the generated file.
    size:
        Number of bytes written (UTF-8 encoded content).
    """

    path: Path
    size: int

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation used by the CLI."""

        return {"path": str(self.path), "size": self.size}
