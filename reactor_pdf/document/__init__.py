"""Document models and the readers, writers, and builders that produce them."""

from __future__ import annotations

from .builder import DefaultModelSynthesizer
from .descriptor import DescriptorLoader
from .models import (
    DocumentAuthor,
    DocumentCover,
    DocumentMeta,
    DocumentModel,
    DocumentTOC,
    DocumentTOCItem,
)
from .reader import DocumentIOError, DocumentParseError, parse_document, read_xml_text
from .writer import DocumentModelWriter

__all__ = [
    "DefaultModelSynthesizer",
    "DescriptorLoader",
    "DocumentAuthor",
    "DocumentCover",
    "DocumentIOError",
    "DocumentMeta",
    "DocumentModel",
    "DocumentModelWriter",
    "DocumentParseError",
    "DocumentTOC",
    "DocumentTOCItem",
    "parse_document",
    "read_xml_text",
]
