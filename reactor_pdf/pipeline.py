"""Build the PDF documents of a project, one per locale.

:class:`DocumentPipeline` drives a single project build:

1. stage the site sources into ``<working>/site.tmp`` (hand-written sources
   first, then generated ones that do not clash with them);
2. for each locale, generate the configured reports, obtain the document
   model (from the descriptor when it exists, synthesized otherwise), list
   the generated reports in its table of contents, persist that TOC as
   ``toc.json``, and hand everything to the renderer;
3. move the finished PDFs from the working to the output directory.

:class:`AggregatePipeline` runs the same steps for the top-level project of a
multi-module build, without reports, and grafts every module's persisted TOC
into the top-level document.

Example
-------
>>> from pathlib import Path
>>> from reactor_pdf.config import load_pdf_config
>>> from reactor_pdf.project import load_project
>>> project = load_project(Path("."))  # doctest: +SKIP
>>> pipeline = DocumentPipeline(project, load_pdf_config(project))  # doctest: +SKIP
>>> pipeline.execute()  # doctest: +SKIP
[PosixPath('target/pdf/my-project.pdf')]
"""

from __future__ import annotations

import logging
import shutil
import typing as typ

from ._constants import (
    GENERATED_SITE_TMP_DIRECTORY_NAME,
    PDF_SUFFIX,
    SITE_TMP_DIRECTORY_NAME,
    VCS_EXCLUDES,
    WORKING_DIRECTORY_NAME,
)
from .aggregate import TocAggregator
from .document import (
    DefaultModelSynthesizer,
    DescriptorLoader,
    DocumentIOError,
    DocumentModelWriter,
    DocumentParseError,
)
from .i18n import MessageCatalog
from .interpolation import BuildClock, host_properties
from .locales import LocaleResolver, locale_directory
from .logging import get_logger
from .rendering import RenderError, generator_string, load_renderer
from .reports import ReportGenerator, ReportIndex, select_reports
from .site import (
    SiteDescriptorError,
    list_site_files,
    load_decoration_model,
    secondary_languages,
)
from .toc_store import TocStore

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import PdfConfig
    from .document import DocumentModel
    from .locales import Locale
    from .project import ProjectModel
    from .rendering import DocumentRenderer
    from .site import DecorationModel

LOGGER = get_logger("pipeline")


class PdfBuildError(RuntimeError):
    """Raised when the document of a locale cannot be built.

    Attributes
    ----------
    locale : Locale or None
        Locale being built when the failure happened.
    """

    def __init__(self, message: str, *, locale: Locale | None = None) -> None:
        super().__init__(message)
        self.locale = locale


class DocumentPipeline:
    """Build and render the document of one project for every locale."""

    def __init__(
        self,
        project: ProjectModel,
        config: PdfConfig,
        *,
        renderer: DocumentRenderer | None = None,
        catalog: MessageCatalog | None = None,
        toc_store: TocStore | None = None,
        writer: DocumentModelWriter | None = None,
        clock: BuildClock | None = None,
        environ: cabc.Mapping[str, str] | None = None,
        host_locale: Locale | None = None,
    ) -> None:
        """Initialize the pipeline.

        Parameters
        ----------
        project : ProjectModel
            Project to document.
        config : PdfConfig
            Effective build options, see :func:`reactor_pdf.config.load_pdf_config`.
        renderer : DocumentRenderer, optional
            Renderer to use; loaded from the ``reactor_pdf.renderers`` entry
            points for ``config.implementation`` when omitted.
        catalog : MessageCatalog, optional
            Localized document chrome strings.
        toc_store : TocStore, optional
            Persistence for the document TOC.
        writer : DocumentModelWriter, optional
            Serializer used for debug dumps of document models.
        clock : BuildClock, optional
            Fixed build instant for date placeholders and cover dates.
        environ : Mapping[str, str], optional
            Environment variables for placeholders; ``os.environ`` by default.
        host_locale : Locale, optional
            Locale standing for ``default`` in the locale list.
        """
        self.project = project
        self.config = config
        self.catalog = catalog or MessageCatalog()
        self.toc_store = toc_store or TocStore()
        self.writer = writer or DocumentModelWriter()
        self.clock = clock or BuildClock.now()
        self.environ = environ
        self.locales = LocaleResolver(config.locales, host=host_locale)
        self.build_properties = {**host_properties(), **config.build_properties}
        self._renderer = renderer
        self._decoration: DecorationModel | None = None
        self._decoration_loaded = False
        self._site_directory_tmp: Path | None = None
        self._models: dict[str, DocumentModel] = {}
        self.reports = ReportGenerator(
            project,
            select_reports(project.reporting, self.catalog),
            site_directory=config.site_directory,
            output_directory=self.generated_site_directory_tmp,
            locales=self.locales.available_locales,
        )
        self.report_index = ReportIndex(
            self.catalog,
            generated_site_directory=config.generated_site_directory,
            locales=self.locales.available_locales,
        )

    @property
    def default_locale(self) -> Locale:
        return self.locales.default_locale

    @property
    def working_directory(self) -> Path:
        return self.config.working_directory

    @property
    def output_directory(self) -> Path:
        return self.config.output_directory

    @property
    def include_reports(self) -> bool:
        return self.config.include_reports

    @property
    def generator(self) -> str:
        """Return the default ``meta.generator`` value."""
        return generator_string(self.config.implementation)

    @property
    def generated_site_directory_tmp(self) -> Path:
        return self.working_directory / GENERATED_SITE_TMP_DIRECTORY_NAME

    @property
    def renderer(self) -> DocumentRenderer:
        if self._renderer is None:
            self._renderer = load_renderer(self.config.implementation)
        return self._renderer

    def site_directory_tmp(self) -> Path:
        """Return ``<working>/site.tmp``, staging it on first use."""
        if self._site_directory_tmp is None:
            target = self.working_directory / SITE_TMP_DIRECTORY_NAME
            self.prepare_temp_site_directory(target)
            self._site_directory_tmp = target
        return self._site_directory_tmp

    def execute(self) -> list[Path]:
        """Build every locale, then move the PDFs to the output directory.

        Returns
        -------
        list[Path]
            The PDFs present in the output directory after the build.

        Raises
        ------
        PdfBuildError
            If the document of a locale cannot be built or rendered.
        """
        for locale in self.locales.available_locales:
            self.build_locale(locale)
        try:
            return self.copy_generated_pdfs()
        except (DocumentParseError, SiteDescriptorError, OSError) as exc:
            msg = f"Error copying generated PDF: {exc}"
            raise PdfBuildError(msg) from exc

    def build_locale(self, locale: Locale) -> None:
        """Generate reports for ``locale`` and render its document."""
        working_dir = locale_directory(
            self.working_directory, locale, self.default_locale
        )
        try:
            source_dir = locale_directory(
                self.site_directory_tmp(), locale, self.default_locale
            )
            self.generate_reports(locale)
            model = self.document_model(locale) if self.config.aggregate else None
            self.renderer.render(source_dir, working_dir, model, self.render_context())
        except (DocumentIOError, DocumentParseError, SiteDescriptorError) as exc:
            self._debug_dump_default_model(locale)
            msg = f"Error during document generation: {exc}"
            raise PdfBuildError(msg, locale=locale) from exc
        except (RenderError, OSError) as exc:
            msg = f"Error during document generation: {exc}"
            raise PdfBuildError(msg, locale=locale) from exc

    def render_context(self) -> dict[str, object]:
        """Return the values handed to the renderer alongside the model."""
        context: dict[str, object] = {
            "project": self.project,
            "generate_toc": self.config.generate_toc,
            "validate": self.config.validate,
        }
        context.update(self.project.properties)
        return context

    def generate_reports(self, locale: Locale) -> None:
        """Generate the reports of ``locale`` and stage the generated sources."""
        if not self.include_reports:
            LOGGER.info("Skipped report generation.")
            return
        self.reports.generate(locale)
        self.copy_site_dir(self.generated_site_directory_tmp, self.site_directory_tmp())
        self.copy_site_dir(
            self.config.generated_site_directory, self.site_directory_tmp()
        )

    def document_model(self, locale: Locale) -> DocumentModel:
        """Return the document model of ``locale``, building it on first use.

        The model is read from the descriptor when it exists and synthesized
        from the project and site decoration otherwise. Generated reports are
        appended to its TOC, which is then saved to ``toc.json``.

        Raises
        ------
        DocumentIOError
            If the descriptor cannot be read or interpolated.
        DocumentParseError
            If the descriptor is not well-formed XML.
        """
        cached = self._models.get(locale.language)
        if cached is not None:
            return cached
        from_descriptor = self.config.descriptor.exists()
        if from_descriptor:
            model = self._descriptor_model(locale)
        else:
            model = self.default_model(locale)
        self.append_generated_reports(model, locale)
        self.save_toc(model)
        if not from_descriptor:
            self.debug_dump(model)
        self._models[locale.language] = model
        return model

    def default_model(self, locale: Locale) -> DocumentModel:
        """Synthesize a document model from project metadata."""
        synthesizer = DefaultModelSynthesizer(
            self.project, self.decoration_model(), self.catalog, clock=self.clock
        )
        return synthesizer.build(locale, self.default_locale, self.generator)

    def decoration_model(self) -> DecorationModel | None:
        """Return the default-locale site decoration, loading it once."""
        if not self._decoration_loaded:
            self._decoration = load_decoration_model(
                self.config.site_directory,
                self.default_locale,
                self.project,
                build_properties=self.build_properties,
            )
            self._decoration_loaded = True
        return self._decoration

    def append_generated_reports(self, model: DocumentModel, locale: Locale) -> None:
        """List the reports generated for ``locale`` in the model TOC."""
        if not self.include_reports:
            return
        self.report_index.append(
            model.toc, locale, self.reports.generated_reports(locale)
        )

    def save_toc(self, model: DocumentModel) -> None:
        """Persist the model TOC; failures are logged, not raised."""
        try:
            self.toc_store.save(self.working_directory, model.toc)
        except OSError:
            LOGGER.exception("Error while writing table of contents")

    def debug_dump(self, model: DocumentModel) -> None:
        """Write ``model`` under ``<build>/pdf`` when debug logging is enabled."""
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        directory = self.project.build_directory / WORKING_DIRECTORY_NAME
        try:
            path = self.writer.dump(model, directory)
        except OSError as exc:
            LOGGER.error("Failed to write document model: %s", exc)
            LOGGER.debug("Document model dump failure", exc_info=True)
            return
        LOGGER.debug("Generated a default document model: %s", path.resolve())

    def prepare_temp_site_directory(self, target: Path) -> None:
        """Copy the site sources without VCS files, then the generated sources.

        Generated files that already exist in the site are not copied.
        """
        target.mkdir(parents=True, exist_ok=True)
        if self.config.site_directory.is_dir():
            shutil.copytree(
                self.config.site_directory,
                target,
                dirs_exist_ok=True,
                ignore=shutil.ignore_patterns(*VCS_EXCLUDES),
            )
        self.copy_site_dir(self.config.generated_site_directory, target)

    def copy_site_dir(self, source: Path, target: Path) -> None:
        """Copy generated site sources of every locale into ``target``.

        Files the hand-written site already provides for the same locale are
        skipped with a warning.
        """
        if not source.exists():
            return
        locales = self.locales.available_locales
        excluded = secondary_languages(locales, self.default_locale)
        site_directory = self.config.site_directory
        for locale in locales:
            is_default = locale.same_language(self.default_locale)
            site_root = site_directory
            source_root = source
            if not is_default:
                if (site_directory / locale.language).exists():
                    site_root = site_directory / locale.language
                if not (source / locale.language).exists():
                    continue
                source_root = source / locale.language
            site_files = set(list_site_files(site_root, excluded))
            target_root = locale_directory(target, locale, self.default_locale)
            for relative in list_site_files(source_root, excluded):
                if relative in site_files:
                    LOGGER.warning(
                        "Generated-site already contains a file in site: %s. "
                        "Ignoring copying it!",
                        relative,
                    )
                    continue
                destination = target_root / relative
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source_root / relative, destination)

    def copy_generated_pdfs(self) -> list[Path]:
        """Move each locale's PDF from the working to the output directory."""
        require_copy = (
            self.output_directory.resolve() != self.working_directory.resolve()
        )
        output_name = self.document_model(self.default_locale).output_name or (
            self.project.artifact_id
        )
        output_name = output_name.strip()
        if not output_name.endswith(PDF_SUFFIX):
            output_name += PDF_SUFFIX

        produced: list[Path] = []
        for locale in self.locales.available_locales:
            source = (
                locale_directory(self.working_directory, locale, self.default_locale)
                / output_name
            )
            if not source.exists():
                LOGGER.warning("Unable to find the generated pdf: %s", source.resolve())
                continue
            destination = (
                locale_directory(self.output_directory, locale, self.default_locale)
                / output_name
            )
            if require_copy:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, destination)
                source.unlink()
            LOGGER.info("pdf generated: %s", destination)
            produced.append(destination)
        return produced

    def _descriptor_model(self, locale: Locale) -> DocumentModel:
        loader = DescriptorLoader(
            self.project,
            locale=locale,
            generator=self.generator,
            build_properties=self.build_properties,
            environ=self.environ,
            clock=self.clock,
        )
        return loader.load(self.config.descriptor)

    def _debug_dump_default_model(self, locale: Locale) -> None:
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        try:
            self.debug_dump(self.default_model(locale))
        except SiteDescriptorError:
            LOGGER.debug("No default document model to dump.", exc_info=True)


class AggregatePipeline(DocumentPipeline):
    """Build the top-level document of a multi-module build.

    Each module must already have been built with :class:`DocumentPipeline`
    so its ``toc.json`` and ``site.tmp`` exist. Reports are never generated
    here.
    """

    def __init__(
        self,
        project: ProjectModel,
        config: PdfConfig,
        reactor: cabc.Sequence[ProjectModel],
        **kwargs: typ.Any,
    ) -> None:
        super().__init__(project, config, **kwargs)
        self.reactor = list(reactor)

    @property
    def include_reports(self) -> bool:
        return False

    def prepare_temp_site_directory(self, target: Path) -> None:
        target.mkdir(parents=True, exist_ok=True)

    def append_generated_reports(self, model: DocumentModel, locale: Locale) -> None:
        """Append every module's staged TOC to the top-level document TOC."""
        super().append_generated_reports(model, locale)
        LOGGER.info("Appending staged reports.")
        staging_root = self.site_directory_tmp()
        if not staging_root.exists():
            LOGGER.error("Top-level project does not have site.tmp directory")
            return
        TocAggregator(staging_root, store=self.toc_store).aggregate(
            model.toc, self.reactor
        )


__all__ = ["AggregatePipeline", "DocumentPipeline", "PdfBuildError"]
