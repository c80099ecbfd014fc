"""Build :class:`PdfConfig` values from ``project.yaml`` and command-line flags.

Options come from the ``pdf:`` block of a project's ``project.yaml``; any
value given on the command line replaces the file value. Paths are resolved
against the project directory, and the working and output directories
default to ``<build>/pdf`` (``<build>/pdf-aggregate`` for the aggregate
build).

Example
-------
.. code-block:: yaml

    pdf:
      locales: en,fr
      generate_toc: end
      implementation: itext
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .._constants import (
    AGGREGATE_DIRECTORY_NAME,
    DEFAULT_DESCRIPTOR,
    DEFAULT_SITE_DIRECTORY,
    GENERATED_SITE_DIRECTORY_NAME,
    WORKING_DIRECTORY_NAME,
)
from ..logging import get_logger
from ..rendering import FO_IMPLEMENTATION, IMPLEMENTATIONS
from .models import DEFAULT_TOC_PLACEMENT, TOC_PLACEMENTS, ConfigError, PdfConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ..project import ProjectModel

LOGGER = get_logger("config")

_BOOLEAN_DEFAULTS = {"include_reports": True, "aggregate": True, "validate": False}
_PATH_OPTIONS = (
    "descriptor",
    "site_directory",
    "generated_site_directory",
    "working_directory",
    "output_directory",
)
_KNOWN_OPTIONS = frozenset(
    {*_BOOLEAN_DEFAULTS, *_PATH_OPTIONS, "locales", "generate_toc", "implementation"}
)


def load_pdf_config(
    project: ProjectModel,
    *,
    overrides: cabc.Mapping[str, object] | None = None,
    build_properties: cabc.Mapping[str, str] | None = None,
    aggregate_build: bool = False,
) -> PdfConfig:
    """Return the effective build options for ``project``.

    Parameters
    ----------
    project : ProjectModel
        Project whose ``pdf:`` block supplies the file values.
    overrides : Mapping[str, object], optional
        Command-line values; ``None`` entries are ignored.
    build_properties : Mapping[str, str], optional
        ``--define`` values made available to placeholders.
    aggregate_build : bool, optional
        Use ``<build>/pdf-aggregate`` as the default working and output
        directory.

    Raises
    ------
    ConfigError
        If an option has the wrong type.
    """
    raw: dict[str, typ.Any] = dict(project.pdf_settings)
    for key in sorted(set(raw) - _KNOWN_OPTIONS):
        LOGGER.warning("Ignoring unknown pdf option '%s' in %s.", key, project)
    raw.update(
        {key: value for key, value in (overrides or {}).items() if value is not None}
    )

    default_directory = project.build_directory / (
        AGGREGATE_DIRECTORY_NAME if aggregate_build else WORKING_DIRECTORY_NAME
    )
    defaults = {
        "descriptor": project.basedir / DEFAULT_DESCRIPTOR,
        "site_directory": project.basedir / DEFAULT_SITE_DIRECTORY,
        "generated_site_directory": project.build_directory
        / GENERATED_SITE_DIRECTORY_NAME,
        "working_directory": default_directory,
        "output_directory": default_directory,
    }
    paths = {
        key: _resolve_path(project.basedir, raw.get(key), default, key)
        for key, default in defaults.items()
    }
    flags = {key: _boolean(raw, key) for key in _BOOLEAN_DEFAULTS}
    locales = raw.get("locales")
    if isinstance(locales, list):
        locales = ",".join(str(code) for code in locales)

    return PdfConfig(
        **paths,
        locales=str(locales) if locales else None,
        include_reports=flags["include_reports"],
        generate_toc=normalize_generate_toc(raw.get("generate_toc")),
        implementation=normalize_implementation(raw.get("implementation")),
        aggregate=flags["aggregate"],
        validate=flags["validate"],
        build_properties=dict(build_properties or {}),
    )


def normalize_generate_toc(value: object | None) -> str:
    """Return a valid TOC placement; malformed values fall back to ``start``."""
    if value is None:
        return DEFAULT_TOC_PLACEMENT
    placement = str(value).strip().lower()
    if placement not in TOC_PLACEMENTS:
        LOGGER.warning(
            "Invalid 'generate_toc' parameter: '%s', using '%s' as default.",
            value,
            DEFAULT_TOC_PLACEMENT,
        )
        return DEFAULT_TOC_PLACEMENT
    return placement


def normalize_implementation(value: object | None) -> str:
    """Return a valid renderer implementation; malformed values fall back to ``fo``."""
    if value is None:
        return FO_IMPLEMENTATION
    implementation = str(value).strip().lower()
    if implementation not in IMPLEMENTATIONS:
        LOGGER.warning(
            "Invalid 'implementation' parameter: '%s', using '%s' as default.",
            value,
            FO_IMPLEMENTATION,
        )
        return FO_IMPLEMENTATION
    return implementation


def parse_defines(defines: cabc.Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` strings into a property mapping.

    Raises
    ------
    ConfigError
        If an entry has no ``=`` or an empty key.
    """
    properties: dict[str, str] = {}
    for define in defines:
        key, separator, value = define.partition("=")
        if not separator or not key.strip():
            msg = f"Invalid property definition '{define}'; expected key=value."
            raise ConfigError(msg)
        properties[key.strip()] = value
    return properties


def _resolve_path(basedir: Path, value: object | None, default: Path, key: str) -> Path:
    if value is None:
        return default
    if not isinstance(value, (str, Path)):
        msg = f"The pdf option '{key}' must be a path, got {value!r}."
        raise ConfigError(msg)
    path = Path(value)
    return path if path.is_absolute() else basedir / path


def _boolean(raw: cabc.Mapping[str, typ.Any], key: str) -> bool:
    value = raw.get(key, _BOOLEAN_DEFAULTS[key])
    if not isinstance(value, bool):
        msg = f"The pdf option '{key}' must be true or false, got {value!r}."
        raise ConfigError(msg)
    return value


__all__ = [
    "load_pdf_config",
    "normalize_generate_toc",
    "normalize_implementation",
    "parse_defines",
]
