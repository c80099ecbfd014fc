"""Typed dataclasses describing a project of a multi-module build."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


@dc.dataclass(slots=True)
class Organization:
    """Organization owning the project."""

    name: str | None = None
    url: str | None = None


@dc.dataclass(slots=True)
class Developer:
    """A developer listed in the project team."""

    id: str | None = None
    name: str | None = None
    email: str | None = None
    organization: str | None = None
    roles: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class License:
    """A license the project is distributed under."""

    name: str
    url: str | None = None


@dc.dataclass(slots=True)
class Scm:
    """Source control coordinates."""

    connection: str | None = None
    url: str | None = None


@dc.dataclass(slots=True)
class Reporting:
    """Report configuration; its presence enables report generation."""

    exclude_defaults: bool = False
    reports: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class BuildSettings:
    """Build layout of a project."""

    directory: Path


@dc.dataclass(slots=True)
class ProjectModel:
    """A fully resolved project definition sourced from ``project.yaml``.

    Attributes
    ----------
    artifact_id : str
        Short module name; the building block of staged identifiers.
    basedir : Path
        Directory holding the project file.
    build : BuildSettings
        Build layout; ``build.directory`` defaults to ``<basedir>/target``.
    parent : ProjectModel or None
        Aggregating project that listed this one in its ``modules``.
    reporting : Reporting or None
        ``None`` when the project declares no reporting block.
    """

    artifact_id: str
    basedir: Path
    build: BuildSettings
    group_id: str | None = None
    version: str | None = None
    name: str | None = None
    description: str | None = None
    url: str | None = None
    inception_year: str | None = None
    encoding: str = "UTF-8"
    organization: Organization | None = None
    developers: list[Developer] = dc.field(default_factory=list)
    licenses: list[License] = dc.field(default_factory=list)
    scm: Scm | None = None
    properties: dict[str, str] = dc.field(default_factory=dict)
    reporting: Reporting | None = None
    modules: list[str] = dc.field(default_factory=list)
    parent: ProjectModel | None = dc.field(default=None, repr=False, compare=False)
    pdf_settings: dict[str, object] = dc.field(default_factory=dict, repr=False)

    @property
    def display_name(self) -> str:
        """Return the project name, falling back to the artifact id."""
        return self.name or self.artifact_id

    @property
    def build_directory(self) -> Path:
        """Return the build output directory."""
        return self.build.directory

    def ancestors(self) -> list[ProjectModel]:
        """Return the parent chain, nearest parent first."""
        chain: list[ProjectModel] = []
        current = self.parent
        while current is not None:
            chain.append(current)
            current = current.parent
        return chain

    def __str__(self) -> str:
        coordinates = ":".join(
            part for part in (self.group_id, self.artifact_id, self.version) if part
        )
        return f"{self.display_name} ({coordinates})"


__all__ = [
    "BuildSettings",
    "Developer",
    "License",
    "Organization",
    "ProjectModel",
    "Reporting",
    "Scm",
]
