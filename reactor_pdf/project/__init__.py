"""Project models and the ``project.yaml`` loader.

Exports
-------
- ``ProjectModel`` and its nested dataclasses.
- ``load_project`` / ``load_reactor`` to read one project or a whole
  multi-module build in reactor order.
"""

from __future__ import annotations

from .loader import ProjectConfigError, load_project, load_reactor
from .models import (
    BuildSettings,
    Developer,
    License,
    Organization,
    ProjectModel,
    Reporting,
    Scm,
)

__all__ = [
    "BuildSettings",
    "Developer",
    "License",
    "Organization",
    "ProjectConfigError",
    "ProjectModel",
    "Reporting",
    "Scm",
    "load_project",
    "load_reactor",
]
