"""Built-in project information reports.

Two reports ship with the package and run for every project with a
``reporting`` block unless ``reporting.exclude_defaults`` is set:

``summary``
    General project, organization, and build coordinates.
``team``
    The developers listed in ``project.yaml``.

Both render an xdoc page through a Jinja template under
``reactor_pdf/templates`` using localized labels from the ``pdf-plugin``
message bundle.

Example
-------
>>> from reactor_pdf.i18n import MessageCatalog
>>> from reactor_pdf.project import Reporting
>>> reports = select_reports(Reporting(reports=["team"]), MessageCatalog())
>>> [report.output_name for report in reports]
['team', 'summary']
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger

if typ.TYPE_CHECKING:
    from ..i18n import MessageCatalog
    from ..locales import Locale
    from ..project import ProjectModel, Reporting
    from .base import Report

LOGGER = get_logger("reports")


class ProjectInfoReport:
    """Render one project information page from a template."""

    output_name: typ.ClassVar[str]
    template_name: typ.ClassVar[str]
    is_external = False

    def __init__(
        self, catalog: MessageCatalog, *, templates_dir: Path | None = None
    ) -> None:
        self.catalog = catalog
        self.templates_dir = templates_dir or Path(__file__).parents[1] / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def name(self, locale: Locale) -> str:
        return self.message("name", locale)

    def message(self, key: str, locale: Locale) -> str:
        """Return the ``report.<output_name>.<key>`` message for ``locale``."""
        return self.catalog.get_string(f"report.{self.output_name}.{key}", locale)

    def can_generate(self, project: ProjectModel) -> bool:
        return True

    def generate(self, project: ProjectModel, locale: Locale) -> str:
        template = self.env.get_template(self.template_name)
        xdoc = template.render(
            project=project,
            title=self.name(locale),
            text=lambda key: self.message(key, locale),
        ).lstrip()
        if not xdoc.endswith("\n"):
            xdoc += "\n"
        return xdoc


class SummaryReport(ProjectInfoReport):
    """General information about the project."""

    output_name = "summary"
    template_name = "report_summary.xml.jinja"


class TeamReport(ProjectInfoReport):
    """Developers working on the project."""

    output_name = "team"
    template_name = "report_team.xml.jinja"


BUILTIN_REPORTS: dict[str, type[ProjectInfoReport]] = {
    SummaryReport.output_name: SummaryReport,
    TeamReport.output_name: TeamReport,
}


def select_reports(
    reporting: Reporting | None,
    catalog: MessageCatalog,
    *,
    templates_dir: Path | None = None,
) -> list[Report]:
    """Return the reports configured for a project, in run order.

    Reports listed in ``reporting.reports`` come first, in the listed order;
    unknown names are logged and skipped. The remaining built-in reports follow
    unless ``reporting.exclude_defaults`` is set.
    """
    if reporting is None:
        return []
    names: list[str] = []
    for name in reporting.reports:
        if name not in BUILTIN_REPORTS:
            LOGGER.warning("Unknown report '%s' will not be generated.", name)
            continue
        if name not in names:
            names.append(name)
    if not reporting.exclude_defaults:
        names.extend(name for name in BUILTIN_REPORTS if name not in names)
    return [
        BUILTIN_REPORTS[name](catalog, templates_dir=templates_dir) for name in names
    ]


__all__ = [
    "BUILTIN_REPORTS",
    "ProjectInfoReport",
    "SummaryReport",
    "TeamReport",
    "select_reports",
]
