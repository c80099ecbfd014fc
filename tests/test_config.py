"""Tests for merging ``pdf:`` options with command-line overrides."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from reactor_pdf.config import (
    ConfigError,
    load_pdf_config,
    normalize_generate_toc,
    normalize_implementation,
    parse_defines,
)
from reactor_pdf.project import BuildSettings, ProjectModel

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def _project(tmp_path: Path, **pdf_settings: object) -> ProjectModel:
    return ProjectModel(
        artifact_id="widget",
        basedir=tmp_path,
        build=BuildSettings(directory=tmp_path / "target"),
        pdf_settings=dict(pdf_settings),
    )


def test_defaults(tmp_path: Path) -> None:
    config = load_pdf_config(_project(tmp_path))
    assert config.descriptor == tmp_path / "src" / "site" / "pdf.xml"
    assert config.site_directory == tmp_path / "src" / "site"
    assert config.generated_site_directory == tmp_path / "target" / "generated-site"
    assert config.working_directory == tmp_path / "target" / "pdf"
    assert config.output_directory == config.working_directory
    assert config.locales is None
    assert config.include_reports is True
    assert config.aggregate is True
    assert config.validate is False
    assert config.generate_toc == "start"
    assert config.implementation == "fo"


def test_aggregate_build_uses_its_own_directory(tmp_path: Path) -> None:
    config = load_pdf_config(_project(tmp_path), aggregate_build=True)
    assert config.working_directory == tmp_path / "target" / "pdf-aggregate"
    assert config.output_directory == tmp_path / "target" / "pdf-aggregate"


def test_file_values_and_overrides(tmp_path: Path) -> None:
    project = _project(
        tmp_path,
        locales=["en", "fr"],
        generate_toc="END",
        implementation="itext",
        output_directory="dist",
        include_reports=False,
    )
    config = load_pdf_config(
        project,
        overrides={"include_reports": True, "implementation": None, "validate": True},
        build_properties={"release": "yes"},
    )
    assert config.locales == "en,fr"
    assert config.generate_toc == "end"
    assert config.implementation == "itext", "None overrides keep the file value"
    assert config.output_directory == tmp_path / "dist"
    assert config.include_reports is True, "command-line values win"
    assert config.validate is True
    assert config.build_properties == {"release": "yes"}


def test_absolute_paths_are_kept(tmp_path: Path) -> None:
    elsewhere = tmp_path / "elsewhere" / "doc.xml"
    config = load_pdf_config(_project(tmp_path / "p", descriptor=str(elsewhere)))
    assert config.descriptor == elsewhere


@pytest.mark.parametrize(
    ("normalize", "value", "expected", "message"),
    [
        (normalize_generate_toc, "sideways", "start", "Invalid 'generate_toc'"),
        (normalize_implementation, "pdfbox", "fo", "Invalid 'implementation'"),
    ],
)
def test_malformed_enumerations_fall_back_with_warning(
    normalize: cabc.Callable[[object], str],
    value: str,
    expected: str,
    message: str,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level("WARNING", logger="reactor_pdf"):
        assert normalize(value) == expected
    assert message in caplog.text
    assert value in caplog.text


def test_valid_enumerations_are_normalized() -> None:
    assert normalize_generate_toc(" None ") == "none"
    assert normalize_generate_toc(None) == "start"
    assert normalize_implementation("ITEXT") == "itext"


def test_non_boolean_flag_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="include_reports"):
        load_pdf_config(_project(tmp_path, include_reports="yes"))


def test_non_path_option_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="descriptor"):
        load_pdf_config(_project(tmp_path, descriptor=42))


def test_unknown_options_are_reported(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("WARNING", logger="reactor_pdf"):
        load_pdf_config(_project(tmp_path, colour="blue"))
    assert "Ignoring unknown pdf option 'colour'" in caplog.text


def test_parse_defines() -> None:
    assert parse_defines(["a=1", "b=x=y", " c ="]) == {"a": "1", "b": "x=y", "c": ""}
    with pytest.raises(ConfigError):
        parse_defines(["novalue"])
    with pytest.raises(ConfigError):
        parse_defines(["=value"])
