"""Build options for document generation.

The options come from the ``pdf:`` block of ``project.yaml`` merged with
command-line overrides. :func:`load_pdf_config` returns a :class:`PdfConfig`
with every path resolved and every enumerated option normalized.

Examples
--------
>>> from pathlib import Path
>>> from reactor_pdf.config import load_pdf_config
>>> from reactor_pdf.project import load_project
>>> project = load_project(Path("."))  # doctest: +SKIP
>>> load_pdf_config(project, overrides={"implementation": "itext"}).implementation  # doctest: +SKIP
'itext'
"""

from .loader import (
    load_pdf_config,
    normalize_generate_toc,
    normalize_implementation,
    parse_defines,
)
from .models import (
    DEFAULT_TOC_PLACEMENT,
    TOC_END,
    TOC_NONE,
    TOC_PLACEMENTS,
    TOC_START,
    ConfigError,
    PdfConfig,
)

__all__ = [
    "DEFAULT_TOC_PLACEMENT",
    "TOC_END",
    "TOC_NONE",
    "TOC_PLACEMENTS",
    "TOC_START",
    "ConfigError",
    "PdfConfig",
    "load_pdf_config",
    "normalize_generate_toc",
    "normalize_implementation",
    "parse_defines",
]
