"""Merge the tables of contents of every reactor module into one document.

After each module has built its own document (and saved ``toc.json``), the
aggregation pass of the top-level project:

1. copies each module's staged site content under ``<dir>/<staged id>`` of the
   aggregate staging tree, and
2. appends one TOC item per module whose children are the module's own TOC
   entries with every ref prefixed by the module's staged id.

The staged id is the ``/``-joined chain of artifact ids from the root project
down to the module (``root/sub-a/sub-a-1``).
"""

from __future__ import annotations

import shutil
import typing as typ

from ._constants import (
    PROJECT_INFO_REF,
    SITE_TMP_DIRECTORY_NAME,
    VCS_EXCLUDES,
    WORKING_DIRECTORY_NAME,
)
from .document import DocumentTOCItem
from .logging import get_logger
from .toc_store import TocStore

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .document import DocumentTOC
    from .project import ProjectModel
    from .toc_store import TocTree

LOGGER = get_logger("aggregate")


def staged_id(project: ProjectModel) -> str:
    """Return the root-to-leaf ``/``-joined artifact ids of ``project``."""
    chain = [project, *project.ancestors()]
    return "/".join(member.artifact_id for member in reversed(chain))


def module_working_directory(project: ProjectModel) -> Path:
    """Return the directory a module's document build writes into."""
    return project.build_directory / WORKING_DIRECTORY_NAME


class TocAggregator:
    """Append every module's persisted TOC to a parent TOC."""

    def __init__(
        self,
        staging_root: Path | None = None,
        *,
        store: TocStore | None = None,
        working_dir_of: cabc.Callable[[ProjectModel], Path] = module_working_directory,
    ) -> None:
        """Initialize the aggregator.

        Parameters
        ----------
        staging_root : Path, optional
            Aggregate ``site.tmp`` directory receiving module content. When
            ``None`` no content is copied and only the TOC is merged.
        store : TocStore, optional
            Store used to reload module TOCs.
        working_dir_of : Callable[[ProjectModel], Path], optional
            Returns a module's working directory (holding ``toc.json`` and
            ``site.tmp``).
        """
        self.staging_root = staging_root
        self.store = store or TocStore()
        self.working_dir_of = working_dir_of

    def aggregate(
        self, toc: DocumentTOC, modules: cabc.Iterable[ProjectModel]
    ) -> DocumentTOC:
        """Append one item per module to ``toc``, in the given order."""
        for project in modules:
            LOGGER.info("Appending %s reports.", project.artifact_id)
            if not self._stage(project):
                continue
            item = self.module_item(project)
            if item is not None:
                toc.add_item(item)
        return toc

    def module_item(self, project: ProjectModel) -> DocumentTOCItem | None:
        """Return the re-rooted TOC item for ``project`` or ``None`` without a TOC."""
        stage = staged_id(project)
        tree = self.store.load(self.working_dir_of(project))
        if not tree:
            LOGGER.warning(
                "Skipping reactor project %s: no table of contents.", project
            )
            return None
        children = _children(tree)
        if len(children) == 1 and children[0].get("ref") == PROJECT_INFO_REF:
            children = _children(children[0])
        item = DocumentTOCItem(name=project.display_name, ref=stage)
        for child in children:
            item.add_item(_restage(child, stage))
        return item

    def _stage(self, project: ProjectModel) -> bool:
        """Copy the module's staged site content; return ``False`` to skip it.

        A failed copy is logged by :func:`copy_staged_content` and leaves the
        module in the TOC.
        """
        if project.reporting is None:
            LOGGER.info("Skipping reactor project %s: no reporting", project)
            return False
        source = self.working_dir_of(project) / SITE_TMP_DIRECTORY_NAME
        if not source.is_dir():
            LOGGER.info("Skipping reactor project %s: no site.tmp directory", project)
            return False
        if self.staging_root is not None and not copy_staged_content(
            source, self.staging_root, staged_id(project)
        ):
            LOGGER.warning(
                "Staged content of reactor project %s was not copied.", project
            )
        return True


def copy_staged_content(source: Path, staging_root: Path, stage: str) -> bool:
    """Copy each top-level directory of ``source`` to ``staging_root/<dir>/<stage>``.

    Returns ``False`` (after logging) when a destination cannot be created or
    the copy fails.
    """
    for directory in sorted(source.iterdir()):
        if not directory.is_dir() or directory.name in VCS_EXCLUDES:
            continue
        destination = staging_root / directory.name / stage
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.error("Could not create directory: %s (%s)", destination, exc)
            return False
        try:
            shutil.copytree(
                directory,
                destination,
                dirs_exist_ok=True,
                ignore=shutil.ignore_patterns(*VCS_EXCLUDES),
            )
        except OSError as exc:
            LOGGER.error("Error while copying %s to %s: %s", directory, destination, exc)
            return False
    return True


def _children(tree: TocTree) -> list[TocTree]:
    items = tree.get("items") or []
    return [item for item in items if isinstance(item, dict)]


def _restage(tree: TocTree, stage: str) -> DocumentTOCItem:
    """Build a TOC item from ``tree`` with every ref prefixed by ``stage``."""
    ref = tree.get("ref")
    item = DocumentTOCItem(
        name=tree.get("name"),
        ref=f"{stage}/{ref}" if ref else None,
    )
    for child in _children(tree):
        item.add_item(_restage(child, stage))
    return item


__all__ = [
    "TocAggregator",
    "copy_staged_content",
    "module_working_directory",
    "staged_id",
]
