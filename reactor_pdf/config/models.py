"""Typed dataclasses describing the document build options."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata


class ConfigError(ValueError):
    """Raised when project or build configuration is invalid."""


TOC_NONE = "none"
TOC_START = "start"
TOC_END = "end"
TOC_PLACEMENTS = (TOC_NONE, TOC_START, TOC_END)
DEFAULT_TOC_PLACEMENT = TOC_START


@dc.dataclass(slots=True)
class PdfConfig:
    """Options of one document build.

    Attributes
    ----------
    descriptor : Path
        Document descriptor; a synthesized model is used when it is missing.
    locales : str or None
        Comma-separated locale codes; the first one is the default locale.
    include_reports : bool
        Generate project reports and list them in the table of contents.
    generate_toc : str
        Where the renderer places the table of contents: ``none``, ``start``
        or ``end``.
    implementation : str
        Renderer implementation, ``fo`` or ``itext``.
    aggregate : bool
        Render the whole site as one document driven by the document model.
    validate : bool
        Ask the renderer to validate the sources before rendering.
    site_directory : Path
        Hand-written site sources.
    generated_site_directory : Path
        Site sources produced by other build steps.
    working_directory : Path
        Directory receiving the staged sources, ``toc.json`` and the PDFs.
    output_directory : Path
        Directory the finished PDFs are moved to.
    build_properties : dict[str, str]
        Extra placeholder values, given on the command line.
    """

    descriptor: Path
    site_directory: Path
    generated_site_directory: Path
    working_directory: Path
    output_directory: Path
    locales: str | None = None
    include_reports: bool = True
    generate_toc: str = DEFAULT_TOC_PLACEMENT
    implementation: str = "fo"
    aggregate: bool = True
    validate: bool = False
    build_properties: dict[str, str] = dc.field(default_factory=dict)


__all__ = [
    "DEFAULT_TOC_PLACEMENT",
    "TOC_END",
    "TOC_NONE",
    "TOC_PLACEMENTS",
    "TOC_START",
    "ConfigError",
    "PdfConfig",
]
