"""Render BuildConfig source text.

Purpose
-------
Turn a validated :class:`~lib_build_config.domain.request.GenerationRequest`
into the exact Kotlin text written to disk. Everything here is pure so the
determinism guarantee can be tested without touching the filesystem.

Contents
    - ``render_content``: full file text (package, ``VERSION``, properties).
    - ``escape_literal``: escapes a value for a double-quoted Kotlin string.
    - ``property_key_problem``: explains why a key cannot be emitted, or
      returns ``None``.
    - ``KOTLIN_HARD_KEYWORDS``: names that can never be bare identifiers.
"""

from __future__ import annotations

from typing import Final, Mapping

from ..domain.request import RESERVED_NAME, GenerationRequest, is_identifier

KOTLIN_HARD_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "as",
        "break",
        "class",
        "continue",
        "do",
        "else",
        "false",
        "for",
        "fun",
        "if",
        "in",
        "interface",
        "is",
        "null",
        "object",
        "package",
        "return",
        "super",
        "this",
        "throw",
        "true",
        "try",
        "typealias",
        "typeof",
        "val",
        "var",
        "when",
        "while",
    }
)

_ESCAPES: Final[Mapping[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
}


def escape_literal(value: str) -> str:
    """Escape *value* so it can sit between double quotes in Kotlin source.

    ``$`` is escaped as well because Kotlin treats it as a string template.

    Examples
    --------
    >>> print(escape_literal('a"b'))
    a\\"b
    >>> print(escape_literal('cost: $5'))
    cost: \\$5
    """

    return "".join(_escape_char(char) for char in value)


def _escape_char(char: str) -> str:
    if char in _ESCAPES:
        return _ESCAPES[char]
    if ord(char) < 0x20 or char == "\x7f":
        return f"\\u{ord(char):04x}"
    return char


def property_key_problem(key: str) -> str | None:
    """Return a human readable reason why *key* is unusable, else ``None``.

    Examples
    --------
    >>> property_key_problem("FOO_BAR") is None
    True
    >>> property_key_problem("VERSION")
    'collides with the reserved VERSION constant'
    """

    if not is_identifier(key):
        if key[:1].isdigit():
            return "must not start with a digit"
        return "must contain only letters, digits and underscores"
    if key == RESERVED_NAME:
        return f"collides with the reserved {RESERVED_NAME} constant"
    if key.strip("_") == "":
        return "must contain at least one letter or digit"
    if key in KOTLIN_HARD_KEYWORDS:
        return "is a Kotlin keyword"
    return None


def render_content(request: GenerationRequest) -> str:
    """Return the complete BuildConfig text for *request*.

    Properties keep the iteration order of ``request.properties``.

    Examples
    --------
    >>> request = GenerationRequest("1.2.3", "com.example.app", properties={"API_URL": "https://api.example.com"})
    >>> print(render_content(request), end="")
    package com.example.app
    <BLANKLINE>
    const val VERSION = "1.2.3"
    const val API_URL = "https://api.example.com"
    """

    lines = [f"package {request.package_name.strip()}", ""]
    lines.append(_constant(RESERVED_NAME, request.version))
    lines.extend(_constant(key, value) for key, value in request.properties.items())
    return "\n".join(lines) + "\n"


def _constant(name: str, value: str) -> str:
    return f'const val {name} = "{escape_literal(value)}"'
