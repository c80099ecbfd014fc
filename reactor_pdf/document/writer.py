"""Serialize :class:`DocumentModel` instances back to descriptor XML.

The pipeline uses the writer to dump synthesized or partially built models
for diagnosis; the output can be read again by
:func:`reactor_pdf.document.reader.parse_document`.
"""

from __future__ import annotations

import tempfile
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

if typ.TYPE_CHECKING:
    from .models import DocumentModel

TEMPLATE_NAME = "document_model.xml.jinja"


class DocumentModelWriter:
    """Render a document model through the ``document_model.xml.jinja`` template."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the writer and its Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to the
            ``reactor_pdf/templates`` directory when ``None``.
        """
        self.templates_dir = templates_dir or Path(__file__).parents[1] / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template(TEMPLATE_NAME)

    def render(self, model: DocumentModel) -> str:
        """Return the XML text for ``model``."""
        meta = model.meta
        cover = model.cover
        context = {
            "model": model,
            "meta_fields": [
                ("title", meta.title),
                ("subject", meta.subject),
                ("author", meta.author),
                ("keywords", meta.keywords),
                ("description", meta.description),
                ("creator", meta.creator),
                ("generator", meta.generator),
                ("language", meta.language),
                ("pageSize", meta.page_size),
                ("creationDate", meta.creation_date),
            ],
            "cover_fields": [
                ("coverTitle", cover.cover_title),
                ("coverSubTitle", cover.cover_sub_title),
                ("coverType", cover.cover_type),
                ("coverVersion", cover.cover_version),
                ("coverdate", cover.cover_date),
                ("companyName", cover.company_name),
                ("companyLogo", cover.company_logo),
                ("projectName", cover.project_name),
                ("projectLogo", cover.project_logo),
            ],
        }
        xml = self.template.render(**context).lstrip()
        if not xml.endswith("\n"):
            xml += "\n"
        return xml

    def write(self, model: DocumentModel, path: Path) -> Path:
        """Write ``model`` to ``path`` as UTF-8, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(model), encoding="utf-8")
        return path

    def dump(self, model: DocumentModel, directory: Path) -> Path:
        """Write ``model`` to a new ``pdf*.xml`` file inside ``directory``."""
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            prefix="pdf", suffix=".xml", dir=directory, delete=False
        ) as handle:
            target = Path(handle.name)
        return self.write(model, target)


__all__ = ["DocumentModelWriter"]
