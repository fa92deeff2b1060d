"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the generator and
the composition root can orchestrate behaviour without depending on concrete
implementations.

Contents
--------
* :class:`FileWriter` – persists rendered text at a path.
* :class:`FileLoader` – parses a structured settings file.
* :class:`EnvLoader` – materialises prefixed environment variables.

System Role
-----------
Each adapter implements one protocol; tests substitute fakes through the same
seams (for example a writer that fails on purpose).
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class FileWriter(Protocol):
    """Persist generated content.

    Why
    ----
    Keep the "persist" responsibility replaceable so the generator can be
    exercised against failing or in-memory writers.
    """

    def write(self, path: Path, content: str) -> int:
        """Create parent directories, replace *path* with *content*, return bytes written."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured settings file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``SettingsError``."""


@runtime_checkable
class EnvLoader(Protocol):
    """Translate prefixed environment variables into a settings mapping."""

    def load(self, prefix: str) -> Mapping[str, object]:
        """Return settings taken from variables that start with *prefix*."""
