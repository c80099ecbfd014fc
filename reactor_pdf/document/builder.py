"""Synthesize a document model for projects without a descriptor.

The synthesized model is built from project metadata (name, version,
organization, developers) and, when available, the site decoration model:
menus become the table of contents and banners become cover logos. Cover type
and TOC title come from the message catalog in the build's *default* locale,
whichever locale is being built.
"""

from __future__ import annotations

import typing as typ

from ..interpolation import BuildClock
from .models import (
    DocumentAuthor,
    DocumentCover,
    DocumentMeta,
    DocumentModel,
    DocumentTOC,
    DocumentTOCItem,
)

if typ.TYPE_CHECKING:
    from ..i18n import MessageCatalog
    from ..locales import Locale
    from ..project import Developer, ProjectModel
    from ..site import DecorationModel, MenuItem

HTML_SUFFIX = ".html"


class DefaultModelSynthesizer:
    """Build a minimal :class:`DocumentModel` from project metadata."""

    def __init__(
        self,
        project: ProjectModel,
        decoration: DecorationModel | None,
        catalog: MessageCatalog,
        *,
        clock: BuildClock | None = None,
    ) -> None:
        self.project = project
        self.decoration = decoration
        self.catalog = catalog
        self.clock = clock or BuildClock.now()

    def build(
        self, locale: Locale, default_locale: Locale, generator: str
    ) -> DocumentModel:
        """Return the synthesized model for ``locale``.

        Parameters
        ----------
        locale : Locale
            Locale being built; sets ``meta.language``.
        default_locale : Locale
            Build default locale; selects the catalog language for the cover
            type and TOC title.
        generator : str
            Value for ``meta.generator``.
        """
        model = DocumentModel(
            output_name=self.project.artifact_id,
            model_encoding=self.project.encoding,
            meta=self._meta(),
            cover=self._cover(),
            toc=self._toc(),
        )
        model.meta.generator = generator
        model.meta.language = locale.language
        model.cover.cover_type = self.catalog.get_string("toc.type", default_locale)
        model.toc.name = self.catalog.get_string("toc.title", default_locale)
        return model

    def _meta(self) -> DocumentMeta:
        project = self.project
        return DocumentMeta(
            title=project.display_name,
            subject=project.display_name,
            description=project.description,
            authors=self._authors(),
            creation_date=self.clock.as_mapping()["date"],
        )

    def _cover(self) -> DocumentCover:
        project = self.project
        cover = DocumentCover(
            cover_title=project.display_name,
            cover_version=project.version,
            cover_sub_title=f"v. {project.version}" if project.version else None,
            cover_date=self.clock.as_mapping()["year"],
            company_name=project.organization.name if project.organization else None,
            project_name=project.display_name,
            authors=self._authors(),
        )
        if self.decoration is not None:
            if self.decoration.banner_left is not None:
                cover.project_logo = self.decoration.banner_left.src
            if self.decoration.banner_right is not None:
                cover.company_logo = self.decoration.banner_right.src
        return cover

    def _toc(self) -> DocumentTOC:
        toc = DocumentTOC()
        if self.decoration is None:
            return toc
        for menu in self.decoration.menus:
            for item in menu.items:
                toc_item = _toc_item(item)
                if toc_item is not None:
                    toc.add_item(toc_item)
        return toc

    def _authors(self) -> list[DocumentAuthor]:
        return [_author(developer) for developer in self.project.developers]


def _author(developer: Developer) -> DocumentAuthor:
    return DocumentAuthor(
        name=developer.name or developer.id,
        email=developer.email,
        company_name=developer.organization,
        position=", ".join(developer.roles) or None,
    )


def _toc_item(item: MenuItem) -> DocumentTOCItem | None:
    """Return a TOC item for a menu link; external links are dropped."""
    href = item.href
    if not href or "://" in href:
        return None
    ref = href.removesuffix(HTML_SUFFIX)
    toc_item = DocumentTOCItem(name=item.name, ref=ref)
    for child in item.items:
        nested = _toc_item(child)
        if nested is not None:
            toc_item.add_item(nested)
    return toc_item


__all__ = ["DefaultModelSynthesizer"]
