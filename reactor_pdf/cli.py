"""Cyclopts CLI entrypoint for building project documents as PDF.

The ``reactor-pdf`` console script exposes two commands:

``pdf``
    Build the document of a single project, one PDF per configured locale.
``aggregate``
    Build every module of a multi-module build, then the top-level document
    that gathers the tables of contents of all modules.

Options default to the ``pdf:`` block of the project's ``project.yaml``; any
flag given on the command line (or through an ``INPUT_*`` environment
variable) replaces the file value.

Examples
--------
Build the document of the project in the current directory:

>>> from reactor_pdf.cli import main
>>> main(["pdf"])  # doctest: +SKIP

Build a French and English document with the iText renderer:

>>> from reactor_pdf.cli import app
>>> app(["pdf", "--locales", "en,fr", "--implementation", "itext"])  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import ConfigError, load_pdf_config, parse_defines
from .logging import configure_logging, get_logger
from .pipeline import AggregatePipeline, DocumentPipeline, PdfBuildError
from .project import load_project, load_reactor

if typ.TYPE_CHECKING:
    from .config import PdfConfig
    from .project import ProjectModel

LOGGER = get_logger("cli")

app = App(name="reactor-pdf", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

ProjectOption = typ.Annotated[
    Path, Parameter(help="Project directory or project.yaml", env_var="INPUT_PROJECT")
]
LocalesOption = typ.Annotated[
    str | None, Parameter(help="Comma-separated locales; the first is the default")
]
ImplementationOption = typ.Annotated[
    str | None, Parameter(help="Renderer implementation: fo or itext")
]
GenerateTocOption = typ.Annotated[
    str | None, Parameter(help="Table of contents placement: none, start or end")
]
DefineOption = typ.Annotated[
    list[str] | None,
    Parameter(name=["--define", "-D"], help="Extra placeholder value as key=value"),
]
VerboseOption = typ.Annotated[bool, Parameter(help="Enable debug logging")]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _overrides(**values: object) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


def _build(pipeline: DocumentPipeline) -> None:
    try:
        written = pipeline.execute()
    except PdfBuildError as exc:
        locale = f" [{exc.locale}]" if exc.locale is not None else ""
        LOGGER.error("%s%s: %s", pipeline.project.artifact_id, locale, exc)
        raise SystemExit(1) from exc
    for path in written:
        print(f"wrote {_format_path(path)}")


_T = typ.TypeVar("_T")


def _load_projects(loader: typ.Callable[[Path], _T], path: Path) -> _T:
    try:
        return loader(path)
    except (ConfigError, FileNotFoundError) as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(2) from exc


def _load_config(
    project: ProjectModel,
    overrides: dict[str, object],
    define: list[str] | None,
    *,
    aggregate_build: bool = False,
) -> PdfConfig:
    try:
        return load_pdf_config(
            project,
            overrides=overrides,
            build_properties=parse_defines(define or []),
            aggregate_build=aggregate_build,
        )
    except ConfigError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(2) from exc


@app.command(help="Build the PDF document of a single project.")
def pdf(
    *,
    project: ProjectOption = Path(),
    descriptor: typ.Annotated[
        Path | None, Parameter(help="Document descriptor (default src/site/pdf.xml)")
    ] = None,
    locales: LocalesOption = None,
    implementation: ImplementationOption = None,
    generate_toc: GenerateTocOption = None,
    include_reports: typ.Annotated[
        bool | None, Parameter(help="Generate project reports into the document")
    ] = None,
    aggregate: typ.Annotated[
        bool | None, Parameter(help="Render the site as a single document")
    ] = None,
    validate: typ.Annotated[
        bool | None, Parameter(help="Validate sources before rendering")
    ] = None,
    working_directory: typ.Annotated[
        Path | None, Parameter(help="Working directory (default <build>/pdf)")
    ] = None,
    output_directory: typ.Annotated[
        Path | None, Parameter(help="Output directory (default <build>/pdf)")
    ] = None,
    define: DefineOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Build the document of the project at ``project``.

    Parameters
    ----------
    project : Path, optional
        Project directory or ``project.yaml`` file; defaults to the current
        directory.
    descriptor : Path or None, optional
        Document descriptor overriding ``pdf.descriptor``.
    locales : str or None, optional
        Comma-separated locale codes overriding ``pdf.locales``.
    implementation : str or None, optional
        Renderer implementation overriding ``pdf.implementation``.
    generate_toc : str or None, optional
        TOC placement overriding ``pdf.generate_toc``.
    include_reports : bool or None, optional
        Overrides ``pdf.include_reports``; ``None`` keeps the file value.
    aggregate : bool or None, optional
        Overrides ``pdf.aggregate``; ``None`` keeps the file value.
    validate : bool or None, optional
        Overrides ``pdf.validate``; ``None`` keeps the file value.
    working_directory : Path or None, optional
        Overrides the working directory.
    output_directory : Path or None, optional
        Overrides the output directory.
    define : list[str] or None, optional
        ``key=value`` pairs exposed to ``${key}`` placeholders.
    verbose : bool, optional
        Log at debug level and dump synthesized document models.

    Raises
    ------
    SystemExit
        With status 1 when a document cannot be built, 2 on invalid options.
    """
    configure_logging(verbose=verbose)
    model = _load_projects(load_project, project)
    config = _load_config(
        model,
        _overrides(
            descriptor=descriptor,
            locales=locales,
            implementation=implementation,
            generate_toc=generate_toc,
            include_reports=include_reports,
            aggregate=aggregate,
            validate=validate,
            working_directory=working_directory,
            output_directory=output_directory,
        ),
        define,
    )
    _build(DocumentPipeline(model, config))


@app.command(help="Build every module, then the aggregated top-level document.")
def aggregate(
    *,
    project: ProjectOption = Path(),
    locales: LocalesOption = None,
    implementation: ImplementationOption = None,
    generate_toc: GenerateTocOption = None,
    define: DefineOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Build each module of the reactor rooted at ``project``, then aggregate.

    Modules are built in reactor order (parents before their modules) with
    their own ``pdf:`` options; ``locales``, ``implementation`` and
    ``generate_toc`` apply to every build. The aggregated document is written
    to ``<build>/pdf-aggregate`` of the root project.
    """
    configure_logging(verbose=verbose)
    reactor = _load_projects(load_reactor, project)
    overrides = _overrides(
        locales=locales, implementation=implementation, generate_toc=generate_toc
    )
    for module in reactor:
        LOGGER.info("Building %s", module)
        _build(DocumentPipeline(module, _load_config(module, overrides, define)))
    root = reactor[0]
    config = _load_config(root, overrides, define, aggregate_build=True)
    _build(AggregatePipeline(root, config, reactor))


def main(tokens: list[str] | None = None) -> None:
    """Invoke the Cyclopts application behind the ``reactor-pdf`` command.

    Examples
    --------
    >>> main(["pdf", "--verbose"])  # doctest: +SKIP
    """
    app(tokens)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
