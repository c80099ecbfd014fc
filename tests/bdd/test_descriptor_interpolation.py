"""Behaviour tests for loading interpolated, localized descriptors.

The scenarios live in ``features/descriptor_interpolation.feature``. They write
a ``pdf.xml`` (and optionally a locale sibling such as ``pdf_fr.xml``) into a
temporary site directory and load it through :class:`DescriptorLoader`.

Usage:
    Run these behaviour tests with pytest, for example:

        pytest tests/bdd/test_descriptor_interpolation.py -v
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from reactor_pdf.document import DescriptorLoader, DocumentModel
from reactor_pdf.interpolation import BuildClock
from reactor_pdf.locales import Locale
from reactor_pdf.project import BuildSettings, ProjectModel

FEATURE_FILE = (
    Path(__file__).resolve().parents[2]
    / "features"
    / "descriptor_interpolation.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _write_descriptor(path: Path, title: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"<document><meta><title>{title}</title></meta></document>", encoding="utf-8"
    )


@given(parsers.parse('a project with version "{version}"'))
def given_project(
    tmp_path: Path, scenario_state: dict[str, object], version: str
) -> None:
    scenario_state["project"] = ProjectModel(
        artifact_id="widget",
        basedir=tmp_path,
        build=BuildSettings(directory=tmp_path / "target"),
        version=version,
    )
    scenario_state["descriptor"] = tmp_path / "src" / "site" / "pdf.xml"


@given(parsers.parse('a descriptor titled "{title}"'))
def given_descriptor(scenario_state: dict[str, object], title: str) -> None:
    _write_descriptor(scenario_state["descriptor"], title)  # type: ignore[arg-type]


@given(parsers.parse('a "{language}" sibling descriptor titled "{title}"'))
def given_sibling(scenario_state: dict[str, object], language: str, title: str) -> None:
    descriptor: Path = scenario_state["descriptor"]  # type: ignore[assignment]
    _write_descriptor(descriptor.with_name(f"pdf_{language}.xml"), title)


@when(parsers.parse('the descriptor is loaded for locale "{code}"'))
def when_loaded(scenario_state: dict[str, object], code: str) -> None:
    loader = DescriptorLoader(
        scenario_state["project"],  # type: ignore[arg-type]
        locale=Locale.parse(code),
        build_properties={},
        environ={},
        clock=BuildClock(dt.datetime(2024, 5, 1, tzinfo=dt.UTC)),
    )
    descriptor: Path = scenario_state["descriptor"]  # type: ignore[assignment]
    scenario_state["model"] = loader.load(descriptor)


@then(parsers.parse('the document title is "{title}"'))
def then_title(scenario_state: dict[str, object], title: str) -> None:
    model: DocumentModel = scenario_state["model"]  # type: ignore[assignment]
    assert model.meta.title == title, (
        f"expected title {title!r}, got {model.meta.title!r}"
    )


@then(parsers.parse('the document language is "{language}"'))
def then_language(scenario_state: dict[str, object], language: str) -> None:
    model: DocumentModel = scenario_state["model"]  # type: ignore[assignment]
    assert model.meta.language == language
