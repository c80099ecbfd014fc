"""Persist a module's table of contents between build phases.

Each module writes its TOC to ``toc.json`` in its working directory at the end
of its own document build. The aggregation phase later reloads the file as a
plain mapping tree (``name``, ``ref``, ``items``) rather than as TOC objects so
it can rewrite refs before building real items. The file is the only channel
between the two phases.

Example
-------
>>> from pathlib import Path
>>> from reactor_pdf.document import DocumentTOC, DocumentTOCItem
>>> store = TocStore()
>>> toc = DocumentTOC(name="Contents", items=[DocumentTOCItem("Intro", "index")])
>>> path = store.save(Path("target/pdf"), toc)  # doctest: +SKIP
>>> store.load(Path("target/pdf"))["items"][0]["ref"]  # doctest: +SKIP
'index'
"""

from __future__ import annotations

import typing as typ

import msgspec

from ._constants import TOC_FILENAME
from .logging import get_logger

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .document import DocumentTOC, DocumentTOCItem

LOGGER = get_logger("toc_store")

TocTree = dict[str, typ.Any]


def toc_to_tree(toc: DocumentTOC | DocumentTOCItem) -> TocTree:
    """Return the generic ``{name, ref, items}`` form of a TOC or TOC item."""
    return {
        "name": toc.name,
        "ref": getattr(toc, "ref", None),
        "items": [toc_to_tree(item) for item in toc.items],
    }


class TocStore:
    """Save and reload ``toc.json`` files, one per module working directory."""

    def __init__(self, filename: str = TOC_FILENAME) -> None:
        self.filename = filename

    def path_for(self, working_dir: Path) -> Path:
        """Return the TOC file location inside ``working_dir``."""
        return working_dir / self.filename

    def save(self, working_dir: Path, toc: DocumentTOC) -> Path:
        """Write ``toc`` as indented UTF-8 JSON, replacing any previous file.

        Raises
        ------
        OSError
            If the directory or file cannot be written.
        """
        path = self.path_for(working_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = msgspec.json.format(msgspec.json.encode(toc_to_tree(toc)), indent=2)
        path.write_bytes(payload + b"\n")
        return path

    def load(self, working_dir: Path) -> TocTree:
        """Return the stored tree, or an empty mapping when it cannot be read."""
        path = self.path_for(working_dir)
        try:
            decoded = msgspec.json.decode(path.read_bytes())
        except OSError as exc:
            LOGGER.error("Error while reading table of contents %s: %s", path, exc)
            return {}
        except msgspec.DecodeError as exc:
            LOGGER.error("Malformed table of contents %s: %s", path, exc)
            return {}
        if not isinstance(decoded, dict):
            LOGGER.error("Table of contents %s is not a JSON object.", path)
            return {}
        return decoded


__all__ = ["TocStore", "TocTree", "toc_to_tree"]
