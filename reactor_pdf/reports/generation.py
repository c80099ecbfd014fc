"""Generate report pages and list them in the table of contents.

Reports run once per locale before the document model is built. Each report
writes ``<output_name>.xml`` into the xdoc directory of the working
``generated-site.tmp`` tree (``<lang>/xdoc`` for non-default locales). A page
is only kept, and later listed in the TOC, when it is well-formed XML.

When at least one report was generated for a locale, the document TOC gets a
``project-info`` item holding one entry per generated report, followed by the
titled pages a project already keeps in its ``generated-site`` directory.
"""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as ET

from bs4 import BeautifulSoup
from markdown import markdown

from .._constants import PROJECT_INFO_REF
from ..document import DocumentTOCItem
from ..locales import locale_directory
from ..logging import get_logger
from ..site import list_site_files, secondary_languages

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from ..document import DocumentTOC
    from ..i18n import MessageCatalog
    from ..locales import Locale
    from ..project import ProjectModel
    from .base import Report

LOGGER = get_logger("reports")

XDOC_DIRECTORY = "xdoc"
MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})
MARKUP_SUFFIXES = frozenset({".xml", ".xhtml", ".html", ".htm"})


class ReportGenerator:
    """Run a project's reports for each locale and remember what they produced."""

    def __init__(
        self,
        project: ProjectModel,
        reports: cabc.Sequence[Report],
        *,
        site_directory: Path,
        output_directory: Path,
        locales: cabc.Sequence[Locale],
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        project : ProjectModel
            Project the reports describe.
        reports : Sequence[Report]
            Reports to run, in order.
        site_directory : Path
            Hand-written site sources; a report whose page already exists
            there is not generated.
        output_directory : Path
            ``generated-site.tmp`` directory receiving the generated pages.
        locales : Sequence[Locale]
            Available locales; the first entry is the default.
        """
        self.project = project
        self.reports = list(reports)
        self.site_directory = site_directory
        self.output_directory = output_directory
        self.locales = list(locales)
        self.default_locale = self.locales[0]
        self._generated: dict[str, list[Report]] = {}

    def generated_reports(self, locale: Locale) -> list[Report]:
        """Return the reports successfully generated for ``locale``."""
        return self._generated.setdefault(locale.language, [])

    def generate(self, locale: Locale) -> list[Report]:
        """Generate every configured report for ``locale``.

        Returns
        -------
        list[Report]
            The reports generated for ``locale`` so far, in generation order.
        """
        if self.project.reporting is None:
            LOGGER.info("No report was specified.")
            return self.generated_reports(locale)
        for report in self.reports:
            self._generate_report(report, locale)
        return self.generated_reports(locale)

    def xdoc_directory(self, locale: Locale) -> Path:
        """Return the directory that receives the pages for ``locale``."""
        base = locale_directory(self.output_directory, locale, self.default_locale)
        return base / XDOC_DIRECTORY

    def _generate_report(self, report: Report, locale: Locale) -> None:
        title = report.name(locale)
        if not report.can_generate(self.project):
            LOGGER.info('Skipped "%s" report.', title)
            return
        if report.is_external:
            LOGGER.info('Skipped external "%s" report (not supported).', title)
            return
        generated = self.generated_reports(locale)
        if any(existing.name(locale) == title for existing in generated):
            LOGGER.debug("%s was already generated.", title)
            return
        if self._exists_in_site(report, locale):
            LOGGER.info(
                'Skipped "%s" report, file "%s" already exists for the %s version.',
                title,
                report.output_name,
                locale.language,
            )
            return

        LOGGER.info('Generating "%s" report.', title)
        try:
            xdoc = report.generate(self.project, locale)
        except Exception:  # noqa: BLE001
            LOGGER.warning(
                'Error generating "%s" report; ignoring it.', title, exc_info=True
            )
            return

        target = self.xdoc_directory(locale) / f"{report.output_name}.xml"
        target.parent.mkdir(parents=True, exist_ok=True)
        LOGGER.debug("Writing generated xdoc to %s", target)
        target.write_text(xdoc, encoding="utf-8")
        if is_valid_xdoc(target, title):
            generated.append(report)

    def _exists_in_site(self, report: Report, locale: Locale) -> bool:
        """Return ``True`` when the site already has ``*/<output_name>.*``."""
        root = locale_directory(self.site_directory, locale, self.default_locale)
        excluded = secondary_languages(self.locales, self.default_locale)
        for relative in list_site_files(root, excluded):
            directory, _, filename = relative.rpartition("/")
            if (
                directory
                and "/" not in directory
                and filename.startswith(f"{report.output_name}.")
            ):
                return True
        return False


class ReportIndex:
    """Append the generated reports of a locale to a document TOC."""

    def __init__(
        self,
        catalog: MessageCatalog,
        *,
        generated_site_directory: Path,
        locales: cabc.Sequence[Locale],
    ) -> None:
        self.catalog = catalog
        self.generated_site_directory = generated_site_directory
        self.locales = list(locales)
        self.default_locale = self.locales[0]

    def append(
        self, toc: DocumentTOC, locale: Locale, reports: cabc.Sequence[Report]
    ) -> DocumentTOCItem | None:
        """Append the ``project-info`` item for ``reports``; skip when empty.

        Returns
        -------
        DocumentTOCItem or None
            The appended item, or ``None`` when nothing was generated.
        """
        if not reports:
            return None
        item = DocumentTOCItem(
            name=self.catalog.get_string("toc.project-info.item", locale),
            ref=PROJECT_INFO_REF,
        )
        added: set[str] = set()
        for report in reports:
            item.add_item(
                DocumentTOCItem(name=report.name(locale), ref=report.output_name)
            )
            added.add(report.output_name)
        for name, ref in self.generated_documents(locale):
            if ref in added:
                continue
            item.add_item(DocumentTOCItem(name=name, ref=ref))
            added.add(ref)
        toc.add_item(item)
        return item

    def generated_documents(self, locale: Locale) -> list[tuple[str, str]]:
        """Return ``(title, ref)`` for the titled pages of ``generated-site``.

        Pages are read from every format directory (``xdoc``, ``markdown``,
        ...) of the locale's tree. The ref is the page path within its format
        directory, without extension. Untitled or unreadable pages are left
        out.
        """
        root = locale_directory(
            self.generated_site_directory, locale, self.default_locale
        )
        if not root.is_dir():
            return []
        excluded = secondary_languages(self.locales, self.default_locale)
        documents: list[tuple[str, str]] = []
        for directory in sorted(root.iterdir()):
            if not directory.is_dir() or directory.name in excluded:
                continue
            for relative in list_site_files(directory):
                ref = relative.rpartition(".")[0] or relative
                title = extract_document_title(directory / relative)
                if title is not None:
                    documents.append((title, ref))
        return documents


def is_valid_xdoc(path: Path, title: str) -> bool:
    """Return ``True`` when the generated page at ``path`` is well-formed XML."""
    try:
        ET.parse(path)  # noqa: S314
    except ET.ParseError as exc:
        LOGGER.error(
            "Error when parsing the generated report xdoc file: %s\n%s\n"
            "You could exclude all reports using --no-include-reports or remove "
            "the report from the reporting block.\n"
            'Ignoring the "%s" report in the PDF.',
            path.resolve(),
            exc,
            title,
        )
        return False
    except OSError as exc:
        LOGGER.error("Error reading generated report %s: %s", path, exc)
        return False
    return True


def extract_document_title(path: Path) -> str | None:
    """Return the title of an xdoc, XHTML, or Markdown page.

    xdoc pages use ``properties/title`` and fall back to the first
    ``section`` name; XHTML pages use ``title`` or the first heading; Markdown
    pages use their first heading. Other formats yield ``None``.
    """
    suffix = path.suffix.lower()
    if suffix not in MARKUP_SUFFIXES | MARKDOWN_SUFFIXES:
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.error("Could not read generated document %s: %s", path, exc)
        return None
    if suffix in MARKDOWN_SUFFIXES:
        text = markdown(text)
    soup = BeautifulSoup(text, "html.parser")
    title = soup.find("title")
    if title is not None and title.get_text(strip=True):
        return title.get_text(strip=True)
    section = soup.find("section", attrs={"name": True})
    if section is not None:
        return str(section["name"]).strip() or None
    heading = soup.find(["h1", "h2", "h3", "h4", "h5", "h6"])
    if heading is not None and heading.get_text(strip=True):
        return heading.get_text(strip=True)
    return None


__all__ = [
    "ReportGenerator",
    "ReportIndex",
    "extract_document_title",
    "is_valid_xdoc",
]
