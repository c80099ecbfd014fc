"""Shared fixtures for the reactor_pdf test suite.

The fixtures build small projects on disk (``project.yaml`` plus site
sources), provide a fixed build clock, and stand in for the PDF renderer so
pipelines can run without a layout engine installed.
"""

from __future__ import annotations

import datetime as dt
import logging
import textwrap
import typing as typ

import pytest

from reactor_pdf.interpolation import BuildClock
from reactor_pdf.locales import Locale

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from reactor_pdf.document import DocumentModel


class RecordingRenderer:
    """Renderer double writing a placeholder ``<output_name>.pdf``."""

    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def render(
        self,
        source_dir: Path,
        output_dir: Path,
        model: DocumentModel | None,
        context: cabc.Mapping[str, object],
    ) -> None:
        self.calls.append(
            {
                "source_dir": source_dir,
                "output_dir": output_dir,
                "model": model,
                "context": dict(context),
            }
        )
        output_name = (model.output_name if model else None) or "site"
        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / f"{output_name}.pdf").write_bytes(b"%PDF-1.4\n")


@pytest.fixture(autouse=True)
def _reset_package_logger() -> cabc.Iterator[None]:
    """Undo ``configure_logging`` so caplog keeps seeing package records."""
    yield
    logger = logging.getLogger("reactor_pdf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def epoch_clock() -> BuildClock:
    """Return a build clock frozen at the Unix epoch."""
    return BuildClock(dt.datetime(1970, 1, 1, tzinfo=dt.UTC))


@pytest.fixture
def english() -> Locale:
    return Locale("en")


@pytest.fixture
def french() -> Locale:
    return Locale("fr")


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def write_project() -> cabc.Callable[[Path, str], Path]:
    """Return a helper writing ``project.yaml`` into a directory."""

    def _write(directory: Path, content: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "project.yaml"
        path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
        return path

    return _write
