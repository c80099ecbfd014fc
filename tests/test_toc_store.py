"""Tests for persisting tables of contents to ``toc.json``."""

from __future__ import annotations

from pathlib import Path

import pytest

from reactor_pdf.document import DocumentTOC, DocumentTOCItem
from reactor_pdf.toc_store import TocStore, toc_to_tree


def _nested_toc() -> DocumentTOC:
    return DocumentTOC(
        name="Contents",
        items=[
            DocumentTOCItem("Intro", "index"),
            DocumentTOCItem(
                "Guide",
                "guide",
                [
                    DocumentTOCItem(
                        "Setup", "guide/setup", [DocumentTOCItem("Deep", "deep")]
                    ),
                    DocumentTOCItem(None, None),
                ],
            ),
        ],
    )


@pytest.mark.parametrize(
    "toc",
    [
        DocumentTOC(),
        DocumentTOC(items=[DocumentTOCItem("Intro", "index")]),
        _nested_toc(),
    ],
    ids=["empty", "flat", "nested"],
)
def test_saved_toc_loads_as_the_same_tree(tmp_path: Path, toc: DocumentTOC) -> None:
    store = TocStore()
    store.save(tmp_path, toc)
    assert store.load(tmp_path) == toc_to_tree(toc)


def test_saved_file_is_indented_and_newline_terminated(tmp_path: Path) -> None:
    toc = DocumentTOC(items=[DocumentTOCItem("A", "a")])
    path = TocStore().save(tmp_path / "pdf", toc)
    text = path.read_text(encoding="utf-8")
    assert path == tmp_path / "pdf" / "toc.json"
    assert text.endswith("}\n")
    assert '\n  "items": [' in text, "expected two-space indentation"
    assert text.startswith('{\n  "name": null'), "keys keep name, ref, items order"


def test_save_replaces_previous_content(tmp_path: Path) -> None:
    store = TocStore()
    store.save(tmp_path, _nested_toc())
    store.save(tmp_path, DocumentTOC(name="Short"))
    assert store.load(tmp_path) == {"name": "Short", "ref": None, "items": []}


def test_load_missing_file_returns_empty_mapping(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("ERROR", logger="reactor_pdf"):
        assert TocStore().load(tmp_path) == {}
    assert "Error while reading table of contents" in caplog.text


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_malformed_file_returns_empty_mapping(tmp_path: Path, content: str) -> None:
    (tmp_path / "toc.json").write_text(content, encoding="utf-8")
    assert TocStore().load(tmp_path) == {}
