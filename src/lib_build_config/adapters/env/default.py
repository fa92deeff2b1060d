"""Environment variable adapter.

Purpose
-------
Translate ``BUILD_CONFIG_*`` process environment variables into the settings
mapping used by the merge, so CI systems can supply generation parameters
without touching the command line.

Key behaviours
--------------
* Enforces the ``BUILD_CONFIG_`` prefix so only relevant keys are captured.
* ``BUILD_CONFIG_PACKAGE_NAME`` → ``{"package_name": ...}``; setting names are
  lower-cased.
* ``BUILD_CONFIG_PROPERTY__API_URL`` → ``{"properties": {"API_URL": ...}}``;
  property names keep their case because they become constant names.
* Values stay text; the settings value object interprets booleans.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...domain.errors import SettingsError
from ...observability import log_debug

ENV_PREFIX = "BUILD_CONFIG"
_PROPERTY_MARKER = "property"


class DefaultEnvLoader:
    """Load environment variables that belong to the settings namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability."""

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str = ENV_PREFIX) -> dict[str, object]:
        """Return settings taken from variables that start with *prefix*.

        Variables are visited in sorted name order so the resulting
        ``properties`` ordering does not depend on the process environment.

        Examples
        --------
        >>> env = {
        ...     'BUILD_CONFIG_VERSION': '1.2.3',
        ...     'BUILD_CONFIG_PROPERTY__API_URL': 'https://api.example.com',
        ...     'HOME': '/root',
        ... }
        >>> DefaultEnvLoader(environ=env).load()
        {'properties': {'API_URL': 'https://api.example.com'}, 'version': '1.2.3'}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, object] = {}
        for key in sorted(self._environ):
            if not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :]
            if stripped:
                assign_setting(collected, stripped, self._environ[key])
        log_debug("env_settings_loaded", stage="settings", path=None, keys=sorted(collected.keys()))
        return collected


def assign_setting(target: dict[str, object], key: str, value: str) -> None:
    """Assign ``value`` inside ``target`` using ``__`` to address a property.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_setting(data, 'SOURCE_SET_NAME', 'jvmMain')
    >>> assign_setting(data, 'PROPERTY__Flavor', 'free')
    >>> data
    {'source_set_name': 'jvmMain', 'properties': {'Flavor': 'free'}}
    """

    head, separator, rest = key.partition("__")
    name = head.lower()
    if not separator:
        target[name] = value
        return
    if name != _PROPERTY_MARKER or not rest or "__" in rest:
        raise SettingsError(f"Unsupported nested environment setting {key!r}; use PROPERTY__<NAME>")
    properties = target.setdefault("properties", {})
    if not isinstance(properties, dict):
        raise SettingsError(f"Cannot combine PROPERTIES with PROPERTY__{rest}")
    properties[rest] = value
