"""Load ``project.yaml`` files into typed project models.

A multi-module build is a tree of directories, each holding a
``project.yaml``. A project lists its sub-modules (relative directories) under
``modules``; the loader follows them depth-first so the reactor order always
places a parent before its modules, in declared order.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .._constants import DEFAULT_BUILD_DIRECTORY, PROJECT_FILENAME
from ..config.models import ConfigError
from .models import (
    BuildSettings,
    Developer,
    License,
    Organization,
    ProjectModel,
    Reporting,
    Scm,
)


class ProjectConfigError(ConfigError):
    """Raised when a project file is invalid or incomplete."""


def load_project(path: Path, *, parent: ProjectModel | None = None) -> ProjectModel:
    """Load a single project definition.

    Parameters
    ----------
    path : Path
        Either a ``project.yaml`` file or a directory containing one.
    parent : ProjectModel, optional
        Aggregating project; ``group_id``, ``version``, ``organization`` and
        ``properties`` are inherited from it when the file omits them.

    Returns
    -------
    ProjectModel
        Parsed project. ``modules`` are listed but not loaded; see
        :func:`load_reactor`.

    Raises
    ------
    FileNotFoundError
        If no project file exists at ``path``.
    ProjectConfigError
        If the file is not a mapping or misses ``artifact_id``.
    """
    project_file = path / PROJECT_FILENAME if path.is_dir() else path
    if not project_file.exists():
        msg = f"Project file '{project_file}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with project_file.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure of '{project_file}' must be a mapping."
        raise ProjectConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    artifact_id = raw.get("artifact_id")
    if not artifact_id:
        msg = f"Project '{project_file}' is missing 'artifact_id'."
        raise ProjectConfigError(msg)

    basedir = project_file.parent.resolve()
    build_raw = raw.get("build") or {}
    build_directory = Path(build_raw.get("directory", DEFAULT_BUILD_DIRECTORY))
    if not build_directory.is_absolute():
        build_directory = basedir / build_directory

    pdf_settings = raw.get("pdf") or {}
    if not isinstance(pdf_settings, dict):
        msg = f"The 'pdf' block of '{project_file}' must be a mapping."
        raise ProjectConfigError(msg)

    properties: dict[str, str] = {}
    if parent is not None:
        properties.update(parent.properties)
    properties.update(_string_map(raw.get("properties")))

    return ProjectModel(
        artifact_id=str(artifact_id),
        basedir=basedir,
        build=BuildSettings(directory=build_directory),
        group_id=_inherit(raw.get("group_id"), parent, "group_id"),
        version=_inherit(raw.get("version"), parent, "version"),
        name=_optional_str(raw.get("name")),
        description=_optional_str(raw.get("description")),
        url=_optional_str(raw.get("url")),
        inception_year=_optional_str(raw.get("inception_year")),
        encoding=str(raw.get("encoding") or "UTF-8"),
        organization=_build_organization(raw.get("organization"))
        or (parent.organization if parent else None),
        developers=_build_developers(raw.get("developers")),
        licenses=_build_licenses(raw.get("licenses")),
        scm=_build_scm(raw.get("scm")),
        properties=properties,
        reporting=_build_reporting(raw.get("reporting")),
        modules=[str(module) for module in raw.get("modules") or []],
        parent=parent,
        pdf_settings=dict(pdf_settings),
    )


def load_reactor(root: Path) -> list[ProjectModel]:
    """Load ``root`` and every nested module in build order.

    The returned list starts with the root project; each project is followed
    by its modules (recursively) in the order they are declared.
    """
    reactor: list[ProjectModel] = []

    def _visit(path: Path, parent: ProjectModel | None) -> None:
        project = load_project(path, parent=parent)
        reactor.append(project)
        for module in project.modules:
            _visit(project.basedir / module, project)

    _visit(root, None)
    return reactor


def _inherit(
    value: object | None, parent: ProjectModel | None, field: str
) -> str | None:
    """Return ``value`` or the parent's value for ``field``."""
    text = _optional_str(value)
    if text is None and parent is not None:
        return getattr(parent, field)
    return text


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_map(value: object | None) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): "" if item is None else str(item) for key, item in value.items()}


def _build_organization(payload: object | None) -> Organization | None:
    if not isinstance(payload, dict):
        return None
    return Organization(
        name=_optional_str(payload.get("name")), url=_optional_str(payload.get("url"))
    )


def _build_developers(payload: object | None) -> list[Developer]:
    developers: list[Developer] = []
    for entry in payload or []:
        if not isinstance(entry, dict):
            continue
        developers.append(
            Developer(
                id=_optional_str(entry.get("id")),
                name=_optional_str(entry.get("name")),
                email=_optional_str(entry.get("email")),
                organization=_optional_str(entry.get("organization")),
                roles=[str(role) for role in entry.get("roles") or []],
            )
        )
    return developers


def _build_licenses(payload: object | None) -> list[License]:
    licenses: list[License] = []
    for entry in payload or []:
        match entry:
            case str() as name:
                licenses.append(License(name=name))
            case dict() if entry.get("name"):
                licenses.append(
                    License(name=str(entry["name"]), url=_optional_str(entry.get("url")))
                )
            case _:
                continue
    return licenses


def _build_scm(payload: object | None) -> Scm | None:
    if not isinstance(payload, dict):
        return None
    return Scm(
        connection=_optional_str(payload.get("connection")),
        url=_optional_str(payload.get("url")),
    )


def _build_reporting(payload: object | None) -> Reporting | None:
    """Return a Reporting block; ``reporting: {}`` enables default reports."""
    if payload is None:
        return None
    if not isinstance(payload, dict):
        msg = "Project 'reporting' must be a mapping."
        raise ProjectConfigError(msg)
    return Reporting(
        exclude_defaults=bool(payload.get("exclude_defaults", False)),
        reports=[str(name) for name in payload.get("reports") or []],
    )


__all__ = ["ProjectConfigError", "load_project", "load_reactor"]
