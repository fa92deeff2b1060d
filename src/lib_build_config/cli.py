"""CLI adapter for ``lib_build_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose BuildConfig generation as a build-pipeline step. The commands replace the
option bindings of a build-tool task (``version``, ``packageName``,
``sourceSetName``, ``buildConfigFileName``, ``propertyMap``) with Click options
and hand the collected values to the composition root.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling, logging and trace ids.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_generate` – resolves settings and writes the BuildConfig file.
* :func:`cli_settings` – prints the merged settings with provenance.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls :mod:`lib_build_config.core` and
never reaches into adapters directly. ``lib_cli_exit_tools`` turns library
errors into exit codes so build tools see a failed step.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import generate_build_config, read_settings_raw
from .domain.settings import GeneratorSettings
from .observability import attach_stream_handler, bind_trace_id, get_logger

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

LOG_LEVEL_CHOICES: Final[tuple[str, ...]] = ("debug", "info", "warning", "error")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_build_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Generate Kotlin BuildConfig constants for multiplatform builds",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_build_config",
    message="lib_build_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    default=None,
    help="Print generator log events at this level to stderr",
)
@click.option("--trace-id", default=None, help="Trace identifier attached to every log event")
@click.pass_context
def cli(ctx: click.Context, traceback: bool, log_level: Optional[str], trace_id: Optional[str]) -> None:
    """Root command configuring traceback handling, logging and trace context.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``; attaches a stderr
        handler to the package logger for the duration of the command.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    bind_trace_id(trace_id)
    if log_level is not None:
        _attach_logging(ctx, log_level)


def _attach_logging(ctx: click.Context, level: str) -> None:
    """Attach a stderr handler and detach it again when the command finishes."""

    logger = get_logger()
    previous_level = logger.level
    handler = attach_stream_handler(level, sys.stderr)

    def _detach() -> None:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)

    ctx.call_on_close(_detach)


def _parse_properties(
    _ctx: click.Context, _param: click.Parameter, values: Sequence[str]
) -> Optional[dict[str, str]]:
    """Turn repeated ``KEY=VALUE`` options into an ordered mapping (last duplicate wins).

    Examples
    --------
    >>> _parse_properties(None, None, ["API_URL=https://x?a=b", "DEBUG=false"])
    {'API_URL': 'https://x?a=b', 'DEBUG': 'false'}
    """

    if not values:
        return None
    parsed: dict[str, str] = {}
    for raw in values:
        key, separator, value = raw.partition("=")
        if not separator or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--property")
        parsed[key.strip()] = value
    return parsed


def _settings_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by ``generate`` and ``settings``."""

    options = [
        click.option("--version", "version", default=None, help="Version embedded as the VERSION constant"),
        click.option("--package-name", default=None, help="Package of the generated file (e.g. com.example.app)"),
        click.option(
            "--source-set-name",
            default=None,
            help="Source set receiving the file [default: commonMain]",
        ),
        click.option(
            "--build-config-file-name",
            default=None,
            help="Name of the generated file [default: BuildConfig.kt]",
        ),
        click.option(
            "--property",
            "properties",
            multiple=True,
            callback=_parse_properties,
            metavar="KEY=VALUE",
            help="Extra constant to emit (repeatable, order preserved)",
        ),
        click.option(
            "--root",
            type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
            default=None,
            help="Directory containing the source sets [default: project directory]",
        ),
        click.option(
            "--sort-properties",
            is_flag=True,
            default=False,
            help="Emit properties sorted by key instead of in the given order",
        ),
        click.option(
            "--config",
            "config_file",
            type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
            default=None,
            help="Settings file (TOML, JSON or YAML) [default: <project-dir>/buildconfig.toml if present]",
        ),
        click.option(
            "--project-dir",
            type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True),
            default=None,
            help="Project directory used for settings lookup and relative roots [default: CWD]",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _overrides(
    version: Optional[str],
    package_name: Optional[str],
    source_set_name: Optional[str],
    build_config_file_name: Optional[str],
    properties: Optional[dict[str, str]],
    root: Optional[Path],
    sort_properties: bool,
) -> dict[str, object]:
    """Collect explicit CLI values; unset options stay ``None`` and are skipped by the merge."""

    return {
        "version": version,
        "package_name": package_name,
        "source_set_name": source_set_name,
        "build_config_file_name": build_config_file_name,
        "properties": properties,
        "root": str(root) if root is not None else None,
        "sort_properties": True if sort_properties else None,
    }


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_build_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_build_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_build_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("generate", context_settings=CLICK_CONTEXT_SETTINGS)
@_settings_options
def cli_generate(
    version: Optional[str],
    package_name: Optional[str],
    source_set_name: Optional[str],
    build_config_file_name: Optional[str],
    properties: Optional[dict[str, str]],
    root: Optional[Path],
    sort_properties: bool,
    config_file: Optional[Path],
    project_dir: Optional[Path],
) -> None:
    """Write ``<root>/<source set>/<package dirs>/<file name>`` and print its path and size as JSON.

    Values come from the settings file, then ``BUILD_CONFIG_*`` environment
    variables, then these options (later wins). The file is overwritten on every
    run.
    """

    written = generate_build_config(
        config_file=config_file,
        start_dir=project_dir,
        overrides=_overrides(
            version, package_name, source_set_name, build_config_file_name, properties, root, sort_properties
        ),
    )
    click.echo(json.dumps(written.to_dict(), indent=2))


@cli.command("settings", context_settings=CLICK_CONTEXT_SETTINGS)
@_settings_options
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indent size")
def cli_settings(
    version: Optional[str],
    package_name: Optional[str],
    source_set_name: Optional[str],
    build_config_file_name: Optional[str],
    properties: Optional[dict[str, str]],
    root: Optional[Path],
    sort_properties: bool,
    config_file: Optional[Path],
    project_dir: Optional[Path],
    indent: int,
) -> None:
    """Print the resolved settings and the layer that supplied each value, without writing anything."""

    data, meta = read_settings_raw(
        config_file=config_file,
        start_dir=project_dir,
        overrides=_overrides(
            version, package_name, source_set_name, build_config_file_name, properties, root, sort_properties
        ),
    )
    payload = {"settings": GeneratorSettings.from_mapping(data).to_dict(), "provenance": meta}
    click.echo(json.dumps(payload, indent=indent))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_build_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
