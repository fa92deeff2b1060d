"""Application-layer settings merge policy.

Purpose
-------
Combine the settings layers (``file`` → ``env`` → ``args``) into one mapping
while tracking which layer supplied each value. Free of I/O so it can be
reused by alternative composition roots.

Contents
    - ``merge_settings``: public entry point driven by a simple loop.
    - ``_merge_layer``: applies one payload.
    - ``_set_scalar`` / ``_merge_properties``: tiny helpers that narrate how
      provenance is updated when values change.

System Role
-----------
Receives layer payloads from :mod:`lib_build_config.core` and returns the data
consumed by :meth:`lib_build_config.domain.settings.GeneratorSettings.from_mapping`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable

from ..domain.errors import SettingsError

PROPERTIES_KEY = "properties"


def merge_settings(
    layers: Iterable[tuple[str, Mapping[str, object], str | None]],
) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    """Merge settings *layers* honouring precedence and recording provenance.

    Scalars from later layers replace earlier ones. The ``properties`` table is
    merged key by key: a property keeps the position where it first appeared
    and takes the value of the last layer that set it.

    Parameters
    ----------
    layers:
        Iterable of ``(layer_name, mapping, source_path)`` tuples ordered from
        lowest to highest precedence.

    Returns
    -------
    tuple[dict[str, object], dict[str, dict[str, object]]]
        ``(merged, provenance)`` where provenance maps dotted keys
        (``version``, ``properties.API_URL``) to ``{"layer", "path", "key"}``.

    Examples
    --------
    >>> merged, meta = merge_settings([
    ...     ("file", {"version": "1.0", "properties": {"A": "1", "B": "2"}}, "buildconfig.toml"),
    ...     ("env", {"version": "1.1", "properties": {"A": "9"}}, None),
    ... ])
    >>> merged
    {'version': '1.1', 'properties': {'A': '9', 'B': '2'}}
    >>> meta["version"]["layer"], meta["properties.B"]["path"]
    ('env', 'buildconfig.toml')
    """

    merged: dict[str, object] = {}
    meta: dict[str, dict[str, object]] = {}
    for layer_name, data, path in layers:
        _merge_layer(merged, meta, data, layer_name, path)
    return merged, meta


def _merge_layer(
    target: dict[str, object],
    meta: dict[str, dict[str, object]],
    payload: Mapping[str, object],
    layer: str,
    path: str | None,
) -> None:
    """Merge a single *payload* into *target* while tracking provenance."""

    for key, value in payload.items():
        if key == PROPERTIES_KEY:
            _merge_properties(target, meta, value, layer, path)
        elif isinstance(value, Mapping):
            raise SettingsError(f"Setting {key!r} from the {layer} layer must be a scalar, not a table")
        else:
            _set_scalar(target, meta, key, value, layer, path)


def _merge_properties(
    target: dict[str, object],
    meta: dict[str, dict[str, object]],
    value: object,
    layer: str,
    path: str | None,
) -> None:
    """Merge a ``properties`` table key by key into ``target["properties"]``."""

    if not isinstance(value, Mapping):
        raise SettingsError(f"'properties' from the {layer} layer must be a table of NAME = value entries")
    container = target.get(PROPERTIES_KEY)
    if not isinstance(container, dict):
        container = target[PROPERTIES_KEY] = {}
    for name, item in value.items():
        if isinstance(item, Mapping):
            raise SettingsError(f"Property {name!r} from the {layer} layer must be a scalar, not a table")
        _set_scalar(container, meta, name, item, layer, path, prefix=PROPERTIES_KEY)


def _set_scalar(
    target: dict[str, object],
    meta: dict[str, dict[str, object]],
    key: str,
    value: object,
    layer: str,
    path: str | None,
    *,
    prefix: str | None = None,
) -> None:
    """Assign a scalar value and update provenance for its dotted key."""

    dotted = f"{prefix}.{key}" if prefix else key
    target[key] = value
    meta[dotted] = {"layer": layer, "path": path, "key": dotted}
