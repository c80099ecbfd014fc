"""Tests for renderer discovery through entry points."""

from __future__ import annotations

import typing as typ

import pytest

from reactor_pdf import rendering
from reactor_pdf.rendering import RenderError, generator_string, load_renderer

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture


class StubRenderer:
    def render(self, source_dir, output_dir, model, context) -> None:  # noqa: ANN001
        return None


def test_generator_string() -> None:
    assert generator_string("itext", version="1.2.0") == (
        "reactor-pdf v. 1.2.0, 'itext' implementation."
    )


def test_mapping_accepts_instances_and_classes() -> None:
    instance = StubRenderer()
    assert load_renderer("fo", renderers={"fo": instance}) is instance
    created = load_renderer("fo", renderers={"fo": StubRenderer})
    assert isinstance(created, StubRenderer), "classes should be instantiated"


def test_object_without_render_is_rejected() -> None:
    with pytest.raises(RenderError, match="does not provide a render"):
        load_renderer("fo", renderers={"fo": object()})


def test_entry_point_is_loaded(mocker: MockerFixture) -> None:
    entry = mocker.Mock()
    entry.name = "itext"
    entry.value = "acme.pdf:ITextRenderer"
    entry.load.return_value = StubRenderer
    mocker.patch.object(rendering, "_iter_entry_points", return_value=[entry])

    assert isinstance(load_renderer("itext"), StubRenderer)


def test_missing_entry_point_raises(mocker: MockerFixture) -> None:
    mocker.patch.object(rendering, "_iter_entry_points", return_value=[])
    with pytest.raises(RenderError, match="reactor_pdf.renderers"):
        load_renderer("fo")


def test_broken_entry_point_raises(mocker: MockerFixture) -> None:
    entry = mocker.Mock()
    entry.name = "fo"
    entry.load.side_effect = ImportError("no module named acme")
    mocker.patch.object(rendering, "_iter_entry_points", return_value=[entry])
    with pytest.raises(RenderError, match="Failed to load renderer"):
        load_renderer("fo")
