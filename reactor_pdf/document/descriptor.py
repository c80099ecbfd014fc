"""Read, interpolate, and parse a project's document descriptor.

The descriptor (``src/site/pdf.xml`` by default) declares the document
metadata and table of contents. Before parsing, every ``${…}`` placeholder is
resolved against build properties, project properties, environment
variables, project fields, and build-time date values. A locale-specific
sibling (``pdf_fr.xml`` for French) replaces the descriptor when present.

Example
-------
>>> from pathlib import Path
>>> from reactor_pdf.locales import Locale
>>> loader = DescriptorLoader(project, locale=Locale("fr"))  # doctest: +SKIP
>>> model = loader.load(Path("src/site/pdf.xml"))  # doctest: +SKIP
>>> model.meta.language  # doctest: +SKIP
'fr'
"""

from __future__ import annotations

import typing as typ

from ..interpolation import BuildClock, InterpolationError, build_resolver
from ..locales import localized_sibling
from ..logging import get_logger
from .reader import DocumentIOError, parse_document, read_xml_text

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from ..locales import Locale
    from ..project import ProjectModel
    from .models import DocumentModel

LOGGER = get_logger("descriptor")


class DescriptorLoader:
    """Turn a descriptor file into a resolved :class:`DocumentModel`."""

    def __init__(
        self,
        project: ProjectModel | None,
        *,
        locale: Locale | None = None,
        generator: str | None = None,
        build_properties: cabc.Mapping[str, str] | None = None,
        environ: cabc.Mapping[str, str] | None = None,
        clock: BuildClock | None = None,
    ) -> None:
        """Initialize the loader.

        Parameters
        ----------
        project : ProjectModel or None
            Project whose properties and fields feed the placeholders.
        locale : Locale, optional
            Locale being built; selects the ``_<language>`` sibling and fills
            an empty ``meta.language``.
        generator : str, optional
            Value for an empty ``meta.generator``.
        build_properties : Mapping[str, str], optional
            Build-level properties; defaults to the host properties.
        environ : Mapping[str, str], optional
            Environment variables; defaults to ``os.environ``.
        clock : BuildClock, optional
            Fixed instant for date placeholders; a new one per load otherwise.
        """
        self.project = project
        self.locale = locale
        self.generator = generator
        self.build_properties = build_properties
        self.environ = environ
        self.clock = clock

    def resolve_path(self, descriptor: Path) -> Path:
        """Return the localized sibling of ``descriptor`` when it exists."""
        if self.locale is None:
            return descriptor
        localized = localized_sibling(descriptor, self.locale)
        if localized.exists():
            return localized
        return descriptor

    def read(self, descriptor: Path) -> str:
        """Return the interpolated descriptor text.

        Raises
        ------
        DocumentIOError
            If the file cannot be read or a placeholder is malformed.
        """
        path = self.resolve_path(descriptor)
        try:
            raw = read_xml_text(path)
        except DocumentIOError:
            raise
        except OSError as exc:
            msg = f"Error opening document descriptor '{path}': {exc}"
            raise DocumentIOError(msg) from exc

        resolver = build_resolver(
            self.project,
            build_properties=self.build_properties,
            environ=self.environ,
            clock=self.clock or BuildClock.now(),
        )
        try:
            interpolated = resolver.resolve(raw)
        except InterpolationError as exc:
            msg = f"Error interpolating document descriptor '{path}'"
            raise DocumentIOError(msg) from exc

        LOGGER.debug(
            "Interpolated document descriptor (%s)\n%s", path.resolve(), interpolated
        )
        return interpolated

    def load(self, descriptor: Path) -> DocumentModel:
        """Read, interpolate, parse, and complete the descriptor model.

        Raises
        ------
        DocumentIOError
            If the file cannot be read or interpolated.
        DocumentParseError
            If the interpolated text is not well-formed XML.
        """
        text = self.read(descriptor)
        model = parse_document(text, source=str(self.resolve_path(descriptor)))
        if not model.meta.language and self.locale is not None:
            model.meta.language = self.locale.language
        if not model.meta.generator and self.generator:
            model.meta.generator = self.generator
        return model


__all__ = ["DescriptorLoader"]
