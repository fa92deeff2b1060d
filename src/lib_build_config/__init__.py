"""Public package surface for ``lib_build_config``.

Exports the generator (:func:`generate` with :class:`GenerationRequest`), the
settings-aware composition root (:func:`generate_build_config`), the error
taxonomy, and the logging hooks so both ``import lib_build_config`` and
``python -m lib_build_config`` flows reach the same functions.
"""

from __future__ import annotations

from .application.generator import generate, validate_request
from .application.render import escape_literal, render_content
from .core import DEFAULT_SETTINGS_FILE, generate_build_config, read_settings, read_settings_raw
from .domain.errors import GenerationError, InvalidInput, InvalidPropertyKey, IOFailure, SettingsError
from .domain.request import (
    DEFAULT_FILE_NAME,
    DEFAULT_SOURCE_SET_NAME,
    RESERVED_NAME,
    GenerationRequest,
    WrittenFile,
)
from .domain.settings import GeneratorSettings
from .observability import bind_trace_id, get_logger

__all__ = [
    "DEFAULT_FILE_NAME",
    "DEFAULT_SETTINGS_FILE",
    "DEFAULT_SOURCE_SET_NAME",
    "RESERVED_NAME",
    "GenerationError",
    "GenerationRequest",
    "GeneratorSettings",
    "InvalidInput",
    "InvalidPropertyKey",
    "IOFailure",
    "SettingsError",
    "WrittenFile",
    "bind_trace_id",
    "escape_literal",
    "generate",
    "generate_build_config",
    "get_logger",
    "read_settings",
    "read_settings_raw",
    "render_content",
    "validate_request",
]
