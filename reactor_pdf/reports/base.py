"""Interface shared by every report that can feed the document."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from ..locales import Locale
    from ..project import ProjectModel


class Report(typ.Protocol):
    """A report rendered to an xdoc page before the document is built.

    Attributes
    ----------
    output_name : str
        File stem of the generated page; also its TOC ref.
    is_external : bool
        ``True`` for reports that only link to content produced elsewhere.
        External reports are never included in the document.
    """

    output_name: str
    is_external: bool

    def name(self, locale: Locale) -> str:
        """Return the localized report title."""
        ...

    def can_generate(self, project: ProjectModel) -> bool:
        """Return ``False`` when the project lacks the data for this report."""
        ...

    def generate(self, project: ProjectModel, locale: Locale) -> str:
        """Return the report as xdoc XML text."""
        ...


__all__ = ["Report"]
