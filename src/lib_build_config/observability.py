"""Structured logging helpers shared by the generator, adapters and CLI.

Purpose
    Keep every emission of logging data predictable and contextual without
    forcing build tools to adopt a specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``attach_stream_handler``: opt-in stderr output used by the CLI.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.

System Integration
    The generator reports validation, rendering and write events here; the
    settings layer reports which sources it loaded. The domain layer stays free
    of logging concerns.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping, TextIO

TRACE_ID: ContextVar[str | None] = ContextVar("lib_build_config_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_build_config")
_LOGGER.addHandler(logging.NullHandler())

_STREAM_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s %(context)s"


def get_logger() -> logging.Logger:
    """Expose the package logger so build tools may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('build-42')
    >>> TRACE_ID.get()
    'build-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def attach_stream_handler(level: str | int, stream: TextIO | None = None) -> logging.Handler:
    """Attach a stderr handler to the package logger and return it.

    Why
        The library is silent by default; the CLI calls this when the user asks
        for ``--log-level`` so build logs show generator events.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_STREAM_FORMAT, defaults={"context": {}}))
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(level.upper() if isinstance(level, str) else level)
    return handler


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    stage: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for generation lifecycle events.

    Inputs
        stage: Pipeline stage being observed (``validate``, ``render``, ``write``, ``settings``).
        path: Filesystem path associated with the event, if available.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('write', None, {'size': 3})
    {'stage': 'write', 'path': None, 'size': 3}
    """

    event: dict[str, Any] = {"stage": stage, "path": path}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
