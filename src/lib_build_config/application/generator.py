"""The BuildConfig generator.

Purpose
-------
Own the whole core operation: validate a
:class:`~lib_build_config.domain.request.GenerationRequest`, render the
constants file, derive its path, and persist it through a
:class:`~lib_build_config.application.ports.FileWriter`.

Contents
    - ``generate``: public entry point returning a
      :class:`~lib_build_config.domain.request.WrittenFile`.
    - ``validate_request``: fail-fast checks performed before any filesystem
      mutation.

System Role
-----------
Called once per build by :func:`lib_build_config.core.generate_build_config`
or directly by library users. Stateless; every call is independent.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from ..adapters.filesystem.atomic import AtomicFileWriter
from ..domain.errors import InvalidInput, InvalidPropertyKey
from ..domain.request import GenerationRequest, WrittenFile, is_identifier
from ..observability import log_debug, log_info, make_event
from .ports import FileWriter
from .render import KOTLIN_HARD_KEYWORDS, property_key_problem, render_content


def generate(request: GenerationRequest, *, writer: FileWriter | None = None) -> WrittenFile:
    """Validate *request*, render it, and write the BuildConfig file.

    Parameters
    ----------
    request:
        Resolved generation parameters.
    writer:
        Persistence adapter; defaults to :class:`AtomicFileWriter`.

    Returns
    -------
    WrittenFile
        Absolute output path and number of bytes written.

    Raises
    ------
    InvalidInput
        Missing or malformed required fields.
    InvalidPropertyKey
        A property key is not an identifier or collides with ``VERSION``.
    IOFailure
        Directory creation or the write failed.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> root = Path(tmp.name) / "commonMain"
    >>> written = generate(GenerationRequest("1.2.3", "com.example.app", source_set_root=root))
    >>> written.path.relative_to(root).as_posix(), written.size
    ('com/example/app/BuildConfig.kt', 53)
    >>> tmp.cleanup()
    """

    validate_request(request)
    content = render_content(request)
    path = request.output_path().absolute()
    log_debug("build_config_rendered", **make_event("render", str(path), {"properties": len(request.properties)}))

    size = (writer or AtomicFileWriter()).write(path, content)
    log_info("build_config_written", **make_event("write", str(path), {"size": size}))
    return WrittenFile(path=path, size=size)


def validate_request(request: GenerationRequest) -> None:
    """Raise on the first problem found in *request*; return ``None`` when it is usable.

    Examples
    --------
    >>> validate_request(GenerationRequest(" ", "com.example"))
    Traceback (most recent call last):
    ...
    lib_build_config.domain.errors.InvalidInput: version must not be empty
    """

    _require_text("version", request.version)
    _require_text("package_name", request.package_name)
    _check_package(request.package_name)
    if request.source_set_root is not None:
        _check_source_set_root(request.source_set_root)
    if request.file_name is not None:
        _require_text("file_name", request.file_name)
        _check_file_name(request.file_name)
    for key, value in request.properties.items():
        _check_property(key, value)
    log_debug(
        "request_validated",
        **make_event("validate", None, {"package_name": request.package_name, "properties": len(request.properties)}),
    )


def _require_text(name: str, value: object) -> None:
    if not isinstance(value, str):
        raise InvalidInput(f"{name} must be text, got {type(value).__name__}")
    if not value.strip():
        raise InvalidInput(f"{name} must not be empty")
    _require_utf8(name, value)


def _require_utf8(name: str, value: str) -> None:
    """Reject lone surrogates, e.g. from undecodable bytes in argv or the environment."""

    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidInput(f"{name} is not valid UTF-8 text: {exc.reason} at position {exc.start}") from exc


def _check_source_set_root(root: object) -> None:
    if isinstance(root, str):
        _require_text("source_set_root", root)
    elif not isinstance(root, PurePath):
        raise InvalidInput(f"source_set_root must be a path, got {type(root).__name__}")
    # Path("") collapses to "."; both would silently target the working directory
    if PurePath(root) == PurePath("."):
        raise InvalidInput("source_set_root must not be empty")
    _require_utf8("source_set_root", str(root))


def _check_package(package_name: str) -> None:
    for segment in package_name.strip().split("."):
        if not is_identifier(segment) or segment in KOTLIN_HARD_KEYWORDS:
            raise InvalidInput(f"package_name {package_name!r} has an invalid segment {segment!r}")


def _check_file_name(file_name: str) -> None:
    if file_name in {".", ".."} or Path(file_name).name != file_name or "\\" in file_name:
        raise InvalidInput(f"file_name {file_name!r} must be a plain file name without directories")


def _check_property(key: object, value: object) -> None:
    if not isinstance(key, str):
        raise InvalidPropertyKey(str(key), "must be text")
    problem = property_key_problem(key)
    if problem is not None:
        raise InvalidPropertyKey(key, problem)
    if not isinstance(value, str):
        raise InvalidInput(f"property {key!r} must have a text value, got {type(value).__name__}")
    _require_utf8(f"property {key!r}", value)
