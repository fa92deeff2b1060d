"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the generator, the adapters, the
composition root, and the CLI. The hierarchy lives in the domain layer so outer
layers may depend on it without the domain depending on them.

Contents
--------
* :class:`GenerationError` – umbrella base class for everything the library
  raises.
* :class:`InvalidInput` – a required parameter is missing or malformed.
* :class:`InvalidPropertyKey` – a property name cannot be emitted as a
  constant identifier.
* :class:`IOFailure` – directory creation or the file write failed.
* :class:`SettingsError` – a settings source could not be parsed.

System Role
-----------
The generator raises these synchronously; the CLI converts them into exit codes
through ``lib_cli_exit_tools``. Callers catch :class:`GenerationError` to handle
all library failures uniformly.
"""

from __future__ import annotations

from pathlib import Path


class GenerationError(Exception):
    """Base type for all exceptions emitted by ``lib_build_config``.

    Why
    ----
    Provide a single catch-all type for build steps that only need to know the
    invocation failed.
    """


class InvalidInput(GenerationError):
    """Raised when a required parameter is missing, empty, or malformed.

    Typical Sources
    ---------------
    Empty ``version``/``package_name``, package segments that are not
    identifiers, file names containing path separators, non-text property
    values.
    """


class InvalidPropertyKey(GenerationError):
    """Raised when a property key cannot become a constant name.

    Attributes
    ----------
    key:
        The offending key exactly as supplied by the caller.

    Examples
    --------
    >>> InvalidPropertyKey("1bad", "must not start with a digit").key
    '1bad'
    """

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Invalid property key {key!r}: {reason}")
        self.key = key
        self.reason = reason


class IOFailure(GenerationError):
    """Raised when the destination directory or file cannot be written.

    The underlying :class:`OSError` is available as ``__cause__``.

    Attributes
    ----------
    path:
        Target path the generator attempted to create or write.
    """

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class SettingsError(GenerationError):
    """Raised when a settings file or environment layer cannot be interpreted.

    Why
    ----
    Distinguish malformed caller configuration from invalid generation
    parameters so users know which file to fix.
    """
