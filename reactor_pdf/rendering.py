"""Select the document renderer that lays out the PDF.

Page layout is delegated to renderer plugins. A renderer is registered under
the ``reactor_pdf.renderers`` entry point group with the name of the
implementation it provides (``fo`` or ``itext``) and must expose a
``render(source_dir, output_dir, model, context)`` method that writes
``<output_name>.pdf`` into ``output_dir``.

Example
-------
>>> generator_string("fo", version="1.0.0")
"reactor-pdf v. 1.0.0, 'fo' implementation."
"""

from __future__ import annotations

import typing as typ
from importlib import metadata

from .logging import get_logger

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .document import DocumentModel

LOGGER = get_logger("rendering")

RENDERER_ENTRY_POINT_GROUP = "reactor_pdf.renderers"
DISTRIBUTION_NAME = "reactor-pdf"
FO_IMPLEMENTATION = "fo"
ITEXT_IMPLEMENTATION = "itext"
IMPLEMENTATIONS = (FO_IMPLEMENTATION, ITEXT_IMPLEMENTATION)


class RenderError(RuntimeError):
    """Raised when no renderer is available or rendering fails."""


@typ.runtime_checkable
class DocumentRenderer(typ.Protocol):
    """Lay out the staged site sources of one locale as a PDF."""

    def render(
        self,
        source_dir: Path,
        output_dir: Path,
        model: DocumentModel | None,
        context: cabc.Mapping[str, object],
    ) -> None:
        """Write ``<model.output_name>.pdf`` into ``output_dir``.

        Raises
        ------
        RenderError
            If the document cannot be produced.
        """
        ...


def package_version() -> str:
    """Return the installed package version, or ``unknown`` from a checkout."""
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


def generator_string(implementation: str, *, version: str | None = None) -> str:
    """Return the default ``meta.generator`` value for ``implementation``."""
    return (
        f"reactor-pdf v. {version or package_version()}, "
        f"'{implementation}' implementation."
    )


def load_renderer(
    implementation: str,
    *,
    renderers: cabc.Mapping[str, object] | None = None,
) -> DocumentRenderer:
    """Return a renderer instance for ``implementation``.

    Parameters
    ----------
    implementation : str
        Implementation name, ``fo`` or ``itext``.
    renderers : Mapping[str, object], optional
        Renderers (instances, classes, or factories) checked before the
        installed entry points.

    Raises
    ------
    RenderError
        If nothing is registered under ``implementation`` or the registered
        object does not produce a renderer.
    """
    candidates = dict(renderers or {})
    if implementation in candidates:
        return _coerce_renderer(implementation, candidates[implementation])
    for entry in _iter_entry_points():
        if entry.name != implementation:
            continue
        try:
            loaded = entry.load()
        except (ImportError, AttributeError) as exc:
            msg = f"Failed to load renderer entry point '{entry.name}': {exc}"
            raise RenderError(msg) from exc
        LOGGER.debug("Loaded '%s' renderer from %s", implementation, entry.value)
        return _coerce_renderer(implementation, loaded)
    msg = (
        f"No renderer registered for the '{implementation}' implementation; "
        f"install a plugin providing the '{RENDERER_ENTRY_POINT_GROUP}' entry point."
    )
    raise RenderError(msg)


def _coerce_renderer(name: str, obj: object) -> DocumentRenderer:
    if isinstance(obj, DocumentRenderer) and not isinstance(obj, type):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, DocumentRenderer):
            return instance
    msg = f"Renderer '{name}' does not provide a render() method."
    raise RenderError(msg)


def _iter_entry_points() -> cabc.Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=RENDERER_ENTRY_POINT_GROUP)


__all__ = [
    "IMPLEMENTATIONS",
    "RENDERER_ENTRY_POINT_GROUP",
    "DocumentRenderer",
    "RenderError",
    "generator_string",
    "load_renderer",
    "package_version",
]
