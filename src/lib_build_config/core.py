"""Composition root for ``lib_build_config``.

Purpose
-------
Provide the entry points that resolve generation parameters from the settings
layers and hand the resulting request to the generator. This is the "thin
adapter" between a build pipeline and the pure generation core.

Contents
--------
* :data:`DEFAULT_SETTINGS_FILE` – settings file looked up in the start
  directory when no explicit path is given.
* :func:`read_settings_raw` – merged settings mapping plus provenance.
* :func:`read_settings` – the same, as a :class:`GeneratorSettings`.
* :func:`generate_build_config` – resolve settings and write the file.

System Role
-----------
Precedence is ``file`` → ``env`` → ``args`` (later wins). The CLI calls these
functions; library users may call them or
:func:`lib_build_config.application.generator.generate` directly.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Mapping

from .adapters.env.default import ENV_PREFIX, DefaultEnvLoader
from .adapters.file_loaders.structured import loader_for
from .application.generator import generate
from .application.merge import merge_settings
from .application.ports import FileWriter
from .domain.request import WrittenFile
from .domain.settings import SETTING_KEYS, GeneratorSettings
from .observability import log_debug, log_info, make_event

DEFAULT_SETTINGS_FILE = "buildconfig.toml"


def read_settings_raw(
    *,
    config_file: str | Path | None = None,
    start_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    """Return the merged settings mapping and its provenance metadata.

    Parameters
    ----------
    config_file:
        Explicit settings file (TOML, JSON or YAML). When omitted,
        ``<start_dir>/buildconfig.toml`` is used if it exists.
    start_dir:
        Directory searched for the default settings file; defaults to the
        working directory.
    environ:
        Environment mapping; defaults to :data:`os.environ`.
    overrides:
        Explicit arguments (highest precedence). ``None`` values are skipped so
        unset CLI options do not mask lower layers.

    Examples
    --------
    >>> data, meta = read_settings_raw(
    ...     environ={"BUILD_CONFIG_VERSION": "1.0"},
    ...     overrides={"package_name": "com.example", "version": None},
    ...     start_dir="/nonexistent",
    ... )
    >>> data
    {'version': '1.0', 'package_name': 'com.example'}
    >>> meta["version"]["layer"], meta["package_name"]["layer"]
    ('env', 'args')
    """

    layers: list[tuple[str, Mapping[str, object], str | None]] = []

    settings_path = _settings_path(config_file, start_dir)
    if settings_path is not None:
        payload = loader_for(settings_path).load(str(settings_path))
        layers.append(("file", payload, str(settings_path)))
        log_debug("settings_layer_loaded", **make_event("settings", str(settings_path), {"keys": len(payload)}))

    env_data = DefaultEnvLoader(environ=environ).load(ENV_PREFIX)
    if env_data:
        layers.append(("env", env_data, None))
        log_debug("settings_layer_loaded", **make_event("settings", None, {"layer": "env", "keys": len(env_data)}))

    args = {key: value for key, value in (overrides or {}).items() if value is not None}
    if args:
        layers.append(("args", args, None))

    merged, meta = merge_settings(layers)
    ignored = sorted(set(merged) - SETTING_KEYS)
    if ignored:
        log_debug("settings_ignored", **make_event("settings", None, {"keys": ignored}))
    log_info("settings_resolved", **make_event("settings", None, {"total_layers": len(layers)}))
    return merged, meta


def read_settings(
    *,
    config_file: str | Path | None = None,
    start_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> GeneratorSettings:
    """Return the merged settings as a :class:`GeneratorSettings` value object."""

    data, _ = read_settings_raw(config_file=config_file, start_dir=start_dir, environ=environ, overrides=overrides)
    return GeneratorSettings.from_mapping(data)


def generate_build_config(
    *,
    config_file: str | Path | None = None,
    start_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
    writer: FileWriter | None = None,
) -> WrittenFile:
    """Resolve settings from every layer and write the BuildConfig file.

    Relative ``root`` values resolve against *start_dir* when given, otherwise
    against the working directory.

    Raises
    ------
    SettingsError
        A settings source is malformed.
    InvalidInput / InvalidPropertyKey / IOFailure
        Propagated from the generator.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> written = generate_build_config(
    ...     start_dir=tmp.name,
    ...     environ={},
    ...     overrides={"version": "1.2.3", "package_name": "com.example.app"},
    ... )
    >>> written.path.relative_to(Path(tmp.name).resolve()).as_posix()
    'commonMain/com/example/app/BuildConfig.kt'
    >>> tmp.cleanup()
    """

    settings = read_settings(config_file=config_file, start_dir=start_dir, environ=environ, overrides=overrides)
    if start_dir is not None and not settings.root.is_absolute():
        settings = _rooted(settings, Path(start_dir).resolve())
    return generate(settings.to_request(), writer=writer)


def _settings_path(config_file: str | Path | None, start_dir: str | Path | None) -> Path | None:
    """Return the settings file to load, or ``None`` when there is none."""

    if config_file is not None:
        return Path(config_file)
    candidate = Path(start_dir or Path.cwd()) / DEFAULT_SETTINGS_FILE
    return candidate if candidate.is_file() else None


def _rooted(settings: GeneratorSettings, base: Path) -> GeneratorSettings:
    """Return *settings* with ``root`` anchored at *base*."""

    return replace(settings, root=base / settings.root)


__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "read_settings",
    "read_settings_raw",
    "generate_build_config",
]
