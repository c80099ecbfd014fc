"""Tests for report generation and their table-of-contents entries.

Fake reports exercise the skip rules of :class:`ReportGenerator` (not
generable, external, already generated, already in the site, failing,
invalid XML); the built-in reports are rendered once to check their
templates produce well-formed, localized pages.
"""

from __future__ import annotations

import dataclasses as dc
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from reactor_pdf.document import DocumentTOC, DocumentTOCItem
from reactor_pdf.i18n import MessageCatalog
from reactor_pdf.locales import Locale
from reactor_pdf.project import (
    BuildSettings,
    Developer,
    Organization,
    ProjectModel,
    Reporting,
)
from reactor_pdf.reports import (
    ReportGenerator,
    ReportIndex,
    SummaryReport,
    TeamReport,
    extract_document_title,
    select_reports,
)

EN = Locale("en")
FR = Locale("fr")


@dc.dataclass
class FakeReport:
    output_name: str
    title: str = "Fake"
    is_external: bool = False
    generable: bool = True
    content: str = "<document><body/></document>"
    failure: Exception | None = None
    runs: int = 0

    def name(self, locale: Locale) -> str:
        return f"{self.title} ({locale.language})"

    def can_generate(self, project: ProjectModel) -> bool:
        return self.generable

    def generate(self, project: ProjectModel, locale: Locale) -> str:
        self.runs += 1
        if self.failure is not None:
            raise self.failure
        return self.content


def _project(tmp_path: Path, *, reporting: Reporting | None = None) -> ProjectModel:
    return ProjectModel(
        artifact_id="widget",
        basedir=tmp_path,
        build=BuildSettings(directory=tmp_path / "target"),
        version="2.3.1",
        name="Widget",
        organization=Organization(name="Example & Co"),
        developers=[Developer(id="ada", name="Ada", roles=["lead"])],
        reporting=reporting if reporting is not None else Reporting(),
    )


def _generator(tmp_path: Path, reports: list[FakeReport]) -> ReportGenerator:
    return ReportGenerator(
        _project(tmp_path),
        reports,
        site_directory=tmp_path / "src" / "site",
        output_directory=tmp_path / "work" / "generated-site.tmp",
        locales=[EN, FR],
    )


def test_generated_pages_land_in_locale_xdoc_directories(tmp_path: Path) -> None:
    report = FakeReport("deps")
    generator = _generator(tmp_path, [report])
    assert generator.generate(EN) == [report]
    assert generator.generate(FR) == [report]
    output = tmp_path / "work" / "generated-site.tmp"
    assert (output / "xdoc" / "deps.xml").exists()
    assert (output / "fr" / "xdoc" / "deps.xml").exists()


def test_no_reporting_block_generates_nothing(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    report = FakeReport("deps")
    generator = ReportGenerator(
        dc.replace(_project(tmp_path), reporting=None),
        [report],
        site_directory=tmp_path / "site",
        output_directory=tmp_path / "out",
        locales=[EN],
    )
    with caplog.at_level("INFO", logger="reactor_pdf"):
        assert generator.generate(EN) == []
    assert report.runs == 0
    assert "No report was specified." in caplog.text


@pytest.mark.parametrize(
    "report",
    [
        FakeReport("deps", generable=False),
        FakeReport("deps", is_external=True),
        FakeReport("deps", failure=RuntimeError("boom")),
        FakeReport("deps", content="<document><unclosed></document>"),
    ],
    ids=["cannot-generate", "external", "raises", "invalid-xml"],
)
def test_skipped_reports_are_not_listed(tmp_path: Path, report: FakeReport) -> None:
    generator = _generator(tmp_path, [report, FakeReport("other", title="Other")])
    generated = generator.generate(EN)
    assert [entry.output_name for entry in generated] == ["other"], (
        "a skipped report must not abort the remaining reports"
    )


def test_report_already_generated_is_not_run_again(tmp_path: Path) -> None:
    first = FakeReport("deps", title="Same")
    duplicate = FakeReport("deps-copy", title="Same")
    generator = _generator(tmp_path, [first, duplicate])
    generator.generate(EN)
    generator.generate(EN)
    assert first.runs == 1
    assert duplicate.runs == 0
    assert generator.generated_reports(EN) == [first]


def test_report_present_in_site_is_skipped(tmp_path: Path) -> None:
    page = tmp_path / "src" / "site" / "markdown" / "deps.md"
    page.parent.mkdir(parents=True)
    page.write_text("# Dependencies\n", encoding="utf-8")
    nested = tmp_path / "src" / "site" / "xdoc" / "deep" / "other.xml"
    nested.parent.mkdir(parents=True)
    nested.write_text("<document/>", encoding="utf-8")

    deps = FakeReport("deps")
    other = FakeReport("other", title="Other")
    generated = _generator(tmp_path, [deps, other]).generate(EN)

    assert deps.runs == 0, "the hand-written deps page wins"
    assert generated == [other], "only top-level format directories count"


def test_site_page_of_another_locale_does_not_block(tmp_path: Path) -> None:
    page = tmp_path / "src" / "site" / "fr" / "xdoc" / "deps.xml"
    page.parent.mkdir(parents=True)
    page.write_text("<document/>", encoding="utf-8")
    generator = _generator(tmp_path, [FakeReport("deps")])
    assert len(generator.generate(EN)) == 1
    assert generator.generate(FR) == []


def test_select_reports_order() -> None:
    catalog = MessageCatalog()
    assert select_reports(None, catalog) == []
    selected = select_reports(Reporting(reports=["team", "unknown"]), catalog)
    assert [report.output_name for report in selected] == ["team", "summary"]
    only = select_reports(Reporting(exclude_defaults=True, reports=["team"]), catalog)
    assert [report.output_name for report in only] == ["team"]


@pytest.mark.parametrize("report_type", [SummaryReport, TeamReport])
def test_builtin_reports_render_valid_xdoc(
    tmp_path: Path, report_type: type[SummaryReport]
) -> None:
    report = report_type(MessageCatalog())
    xdoc = report.generate(_project(tmp_path), FR)
    root = ET.fromstring(xdoc)
    title = root.find("./properties/title")
    assert title is not None
    assert title.text == report.name(FR), "the page title should be localized"


def test_summary_report_escapes_project_values(tmp_path: Path) -> None:
    xdoc = SummaryReport(MessageCatalog()).generate(_project(tmp_path), EN)
    assert "<td>Example &amp; Co</td>" in xdoc
    assert "<td>2.3.1</td>" in xdoc


def test_team_report_without_developers(tmp_path: Path) -> None:
    project = dc.replace(_project(tmp_path), developers=[])
    xdoc = TeamReport(MessageCatalog()).generate(project, EN)
    assert "There are no developers working on this project." in xdoc


def test_index_appends_project_info_item(tmp_path: Path) -> None:
    generated_site = tmp_path / "generated-site"
    (generated_site / "markdown").mkdir(parents=True)
    (generated_site / "markdown" / "changes.md").write_text(
        "Intro\n\n## Changes\n", encoding="utf-8"
    )
    (generated_site / "xdoc").mkdir()
    (generated_site / "xdoc" / "deps.xml").write_text(
        "<document><properties><title>Deps page</title></properties></document>",
        encoding="utf-8",
    )
    (generated_site / "xdoc" / "untitled.xml").write_text(
        "<document><body/></document>", encoding="utf-8"
    )
    (generated_site / "fr" / "xdoc").mkdir(parents=True)
    (generated_site / "fr" / "xdoc" / "notes.xml").write_text(
        "<document><body><section name='Notes'/></body></document>", encoding="utf-8"
    )
    index = ReportIndex(
        MessageCatalog(), generated_site_directory=generated_site, locales=[EN, FR]
    )
    toc = DocumentTOC(items=[DocumentTOCItem("Intro", "index")])

    item = index.append(toc, EN, [FakeReport("deps", title="Dependencies")])

    assert item is toc.items[-1]
    assert item.name == "Project Reports"
    assert item.ref == "project-info"
    assert [(child.name, child.ref) for child in item.items] == [
        ("Dependencies (en)", "deps"),
        ("Changes", "changes"),
    ], "reports come first, generated pages follow, duplicates and untitled skipped"
    assert index.generated_documents(FR) == [("Notes", "notes")]


def test_index_skips_when_nothing_was_generated(tmp_path: Path) -> None:
    index = ReportIndex(
        MessageCatalog(), generated_site_directory=tmp_path, locales=[EN]
    )
    toc = DocumentTOC()
    assert index.append(toc, EN, []) is None
    assert toc.items == []


@pytest.mark.parametrize(
    ("name", "content", "expected"),
    [
        ("a.xml", "<document><properties><title>T</title></properties></document>", "T"),
        ("b.xml", "<document><body><section name='S'/></body></document>", "S"),
        ("c.html", "<html><body><h2>Heading</h2></body></html>", "Heading"),
        ("d.md", "# Markdown title\n\ntext\n", "Markdown title"),
        ("e.apt", "Title\n", None),
        ("f.xml", "<document/>", None),
    ],
)
def test_extract_document_title(
    tmp_path: Path, name: str, content: str, expected: str | None
) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    assert extract_document_title(path) == expected
