"""Report generation for the document build.

Exports
-------
- ``Report``: the protocol every report implements.
- ``SummaryReport`` / ``TeamReport`` and ``select_reports`` for the built-in
  project information pages.
- ``ReportGenerator`` / ``ReportIndex`` to generate pages per locale and list
  them in the table of contents.
"""

from __future__ import annotations

from .base import Report
from .generation import (
    ReportGenerator,
    ReportIndex,
    extract_document_title,
    is_valid_xdoc,
)
from .project_info import (
    BUILTIN_REPORTS,
    ProjectInfoReport,
    SummaryReport,
    TeamReport,
    select_reports,
)

__all__ = [
    "BUILTIN_REPORTS",
    "ProjectInfoReport",
    "Report",
    "ReportGenerator",
    "ReportIndex",
    "SummaryReport",
    "TeamReport",
    "extract_document_title",
    "is_valid_xdoc",
    "select_reports",
]
