"""Dataclasses describing one rendered document.

A :class:`DocumentModel` carries front matter (:class:`DocumentMeta`), the
cover page (:class:`DocumentCover`), and the table of contents
(:class:`DocumentTOC`). The TOC is a tree: every :class:`DocumentTOCItem`
owns its ``items`` list exclusively.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ


@dc.dataclass(slots=True)
class DocumentAuthor:
    """An author credited in the metadata or on the cover."""

    name: str | None = None
    email: str | None = None
    company_name: str | None = None
    position: str | None = None


@dc.dataclass(slots=True)
class DocumentMeta:
    """Front-matter metadata of a document."""

    title: str | None = None
    subject: str | None = None
    author: str | None = None
    authors: list[DocumentAuthor] = dc.field(default_factory=list)
    keywords: str | None = None
    description: str | None = None
    creator: str | None = None
    generator: str | None = None
    language: str | None = None
    page_size: str | None = None
    creation_date: str | None = None


@dc.dataclass(slots=True)
class DocumentCover:
    """Cover-page content."""

    cover_title: str | None = None
    cover_sub_title: str | None = None
    cover_type: str | None = None
    cover_version: str | None = None
    cover_date: str | None = None
    company_name: str | None = None
    company_logo: str | None = None
    project_name: str | None = None
    project_logo: str | None = None
    authors: list[DocumentAuthor] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class DocumentTOCItem:
    """A named, addressable entry of the table of contents.

    Attributes
    ----------
    name : str or None
        Display label.
    ref : str or None
        Path or slug the renderer resolves to the referenced source.
    items : list[DocumentTOCItem]
        Ordered children.
    """

    name: str | None = None
    ref: str | None = None
    items: list[DocumentTOCItem] = dc.field(default_factory=list)

    def add_item(self, item: DocumentTOCItem) -> None:
        """Append ``item`` as the last child."""
        self.items.append(item)

    def walk(self) -> typ.Iterator[DocumentTOCItem]:
        """Yield this item and every descendant depth-first."""
        yield self
        for child in self.items:
            yield from child.walk()


@dc.dataclass(slots=True)
class DocumentTOC:
    """Root of the table-of-contents tree."""

    name: str | None = None
    depth: int | None = None
    items: list[DocumentTOCItem] = dc.field(default_factory=list)

    def add_item(self, item: DocumentTOCItem) -> None:
        """Append a top-level item."""
        self.items.append(item)

    def walk(self) -> typ.Iterator[DocumentTOCItem]:
        """Yield every item of the tree depth-first, in document order."""
        for item in self.items:
            yield from item.walk()

    def refs(self) -> list[str]:
        """Return every non-empty ref in document order."""
        return [item.ref for item in self.walk() if item.ref]


@dc.dataclass(slots=True)
class DocumentModel:
    """Root entity for one rendered document.

    ``properties`` keeps renderer-specific values (unknown attributes of the
    root element and unknown top-level elements) so they survive a round trip
    through the reader and writer.
    """

    output_name: str | None = None
    model_encoding: str = "UTF-8"
    meta: DocumentMeta = dc.field(default_factory=DocumentMeta)
    cover: DocumentCover = dc.field(default_factory=DocumentCover)
    toc: DocumentTOC = dc.field(default_factory=DocumentTOC)
    properties: dict[str, str] = dc.field(default_factory=dict)


__all__ = [
    "DocumentAuthor",
    "DocumentCover",
    "DocumentMeta",
    "DocumentModel",
    "DocumentTOC",
    "DocumentTOCItem",
]
