"""Read document descriptors into :class:`DocumentModel` instances.

Parsing is deliberately lenient: namespaces are ignored, element names are
matched case-insensitively, unknown elements inside ``meta``/``cover``/``toc``
are skipped, and unknown top-level elements or root attributes are kept in
``DocumentModel.properties``. Only malformed XML is an error.
"""

from __future__ import annotations

import codecs
import re
import typing as typ
import xml.etree.ElementTree as ET

from .models import (
    DocumentAuthor,
    DocumentCover,
    DocumentMeta,
    DocumentModel,
    DocumentTOC,
    DocumentTOCItem,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_XML_ENCODING = "UTF-8"
_PROLOG_ENCODING = re.compile(
    rb"""^<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']"""
)
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

_META_FIELDS = {
    "title": "title",
    "subject": "subject",
    "author": "author",
    "description": "description",
    "creator": "creator",
    "generator": "generator",
    "language": "language",
    "pagesize": "page_size",
    "creationdate": "creation_date",
}
_COVER_FIELDS = {
    "covertitle": "cover_title",
    "coversubtitle": "cover_sub_title",
    "covertype": "cover_type",
    "coverversion": "cover_version",
    "coverdate": "cover_date",
    "companyname": "company_name",
    "companylogo": "company_logo",
    "projectname": "project_name",
    "projectlogo": "project_logo",
}
_KNOWN_SECTIONS = frozenset({"meta", "toc", "cover"})


class DocumentIOError(OSError):
    """Raised when a descriptor cannot be read or prepared for parsing."""


class DocumentParseError(ValueError):
    """Raised when a descriptor is not well-formed XML."""


def read_xml_text(path: Path) -> str:
    """Return the text of ``path`` decoded with the encoding its prolog declares.

    A byte-order mark wins over the prolog; without either the file is decoded
    as UTF-8.

    Raises
    ------
    OSError
        If the file cannot be read.
    DocumentIOError
        If the declared encoding is unknown or the content does not decode.
    """
    data = path.read_bytes()
    encoding = DEFAULT_XML_ENCODING
    for bom, name in _BOMS:
        if data.startswith(bom):
            data = data[len(bom) :]
            encoding = name
            break
    else:
        match = _PROLOG_ENCODING.match(data[:256])
        if match is not None:
            encoding = match.group(1).decode("ascii")
    try:
        return data.decode(encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        msg = f"Unable to decode '{path}' as {encoding}: {exc}"
        raise DocumentIOError(msg) from exc


def parse_document(text: str, *, source: str | None = None) -> DocumentModel:
    """Parse descriptor XML into a :class:`DocumentModel`.

    Raises
    ------
    DocumentParseError
        If ``text`` is not well-formed XML.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        location = f" in {source}" if source else ""
        msg = f"Malformed document descriptor{location}: {exc}"
        raise DocumentParseError(msg) from exc

    model = DocumentModel()
    for key, value in root.attrib.items():
        name = _local(key)
        if name == "outputName":
            model.output_name = value.strip() or None
        elif name == "modelEncoding":
            model.model_encoding = value.strip() or model.model_encoding
        else:
            model.properties[name] = value

    for child in root:
        tag = _local(child.tag).lower()
        if tag == "meta":
            model.meta = _read_meta(child)
        elif tag == "cover":
            model.cover = _read_cover(child)
        elif tag == "toc":
            model.toc = _read_toc(child)
        elif tag not in _KNOWN_SECTIONS and len(child) == 0:
            model.properties[_local(child.tag)] = _clean(child.text) or ""
    return model


def _read_meta(element: ET.Element) -> DocumentMeta:
    meta = DocumentMeta()
    for child in element:
        tag = _local(child.tag).lower()
        if tag in _META_FIELDS:
            setattr(meta, _META_FIELDS[tag], _clean(child.text))
        elif tag == "authors":
            meta.authors = _read_authors(child)
        elif tag == "keywords":
            keywords = [_clean(item.text) for item in child]
            joined = ", ".join(word for word in keywords if word)
            meta.keywords = joined or _clean(child.text)
    return meta


def _read_cover(element: ET.Element) -> DocumentCover:
    cover = DocumentCover()
    for child in element:
        tag = _local(child.tag).lower()
        if tag in _COVER_FIELDS:
            setattr(cover, _COVER_FIELDS[tag], _clean(child.text))
        elif tag == "authors":
            cover.authors = _read_authors(child)
        elif tag == "author":
            cover.authors.append(DocumentAuthor(name=_clean(child.text)))
    return cover


def _read_authors(element: ET.Element) -> list[DocumentAuthor]:
    authors: list[DocumentAuthor] = []
    for child in element:
        if _local(child.tag).lower() != "author":
            continue
        fields = {_local(part.tag).lower(): _clean(part.text) for part in child}
        authors.append(
            DocumentAuthor(
                name=fields.get("name") or _clean(child.text),
                email=fields.get("email"),
                company_name=fields.get("companyname"),
                position=fields.get("position"),
            )
        )
    return authors


def _read_toc(element: ET.Element) -> DocumentTOC:
    depth = element.get("depth")
    toc = DocumentTOC(
        name=_clean(element.get("name")),
        depth=int(depth) if depth and depth.strip().isdigit() else None,
    )
    toc.items = _read_items(element)
    return toc


def _read_items(element: ET.Element) -> list[DocumentTOCItem]:
    items: list[DocumentTOCItem] = []
    for child in element:
        if _local(child.tag).lower() != "item":
            continue
        items.append(
            DocumentTOCItem(
                name=_clean(child.get("name")),
                ref=_clean(child.get("ref")),
                items=_read_items(child),
            )
        )
    return items


def _local(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element or attribute name."""
    return tag.rsplit("}", 1)[-1]


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


__all__ = [
    "DocumentIOError",
    "DocumentParseError",
    "parse_document",
    "read_xml_text",
]
