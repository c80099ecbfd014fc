r"""Resolve ``${…}`` placeholders against layered value sources.

Descriptors and site files may reference build properties, project
properties, environment variables, project fields, and the build time. The
:class:`VariableResolver` checks an ordered list of value sources for each
placeholder and substitutes the first value found. Placeholders nobody can
resolve are left untouched.

Example
-------
>>> resolver = VariableResolver([PropertiesSource({"greeting": "hello"})])
>>> resolver.resolve("${greeting}, ${missing}")
'hello, ${missing}'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import os
import platform
import re
import sys
import typing as typ
from pathlib import Path

from .logging import get_logger

if typ.TYPE_CHECKING:
    from .project import ProjectModel

LOGGER = get_logger("interpolation")

EXPRESSION_PATTERN = re.compile(r"\$\{([^}]*)\}")
PROJECT_ROOT_TOKENS = frozenset({"project", "pom"})
ENV_PREFIX = "env."
_SEGMENT_PATTERN = re.compile(r"^(?P<name>[A-Za-z_][A-Za-z0-9_-]*)(?:\[(?P<index>\d+)\])?$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class InterpolationError(ValueError):
    """Raised when placeholder values reference each other in a cycle."""


class ValueSource(typ.Protocol):
    """A provider of placeholder values."""

    def get_value(self, expression: str) -> str | None:
        """Return the value for ``expression`` or ``None`` when unknown."""


class PropertiesSource:
    """Flat key/value lookup over one or more merged property maps.

    Later maps override earlier ones, so passing build properties first and
    project properties last lets the project win on collisions.
    """

    def __init__(self, *layers: cabc.Mapping[str, str]) -> None:
        merged: dict[str, str] = {}
        for layer in layers:
            merged.update(layer)
        self._values = merged

    def get_value(self, expression: str) -> str | None:
        return self._values.get(expression)


class EnvironmentSource:
    """Environment variable lookup; an ``env.`` prefix is optional."""

    def __init__(self, environ: cabc.Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get_value(self, expression: str) -> str | None:
        name = expression.removeprefix(ENV_PREFIX)
        return self._environ.get(name)


class ProjectSource:
    """Evaluate dotted paths such as ``project.version`` against a project.

    Only dataclass fields, mapping keys, and list indexes are reachable. The
    root token (``project`` or ``pom``) is required; failures are logged at
    debug level and reported as "no value".
    """

    def __init__(self, project: ProjectModel | None) -> None:
        self.project = project

    def get_value(self, expression: str) -> str | None:
        if self.project is None:
            return None
        root, _, path = expression.partition(".")
        if root not in PROJECT_ROOT_TOKENS or not path:
            return None
        try:
            return evaluate_path(self.project, path)
        except (LookupError, TypeError, ValueError) as exc:
            LOGGER.debug(
                "Failed to extract '%s' from %s: %s", expression, self.project, exc
            )
            return None


@dc.dataclass(frozen=True, slots=True)
class BuildClock:
    """Date and time fields of one fixed build instant, rendered in UTC."""

    instant: dt.datetime

    @classmethod
    def now(cls) -> BuildClock:
        """Capture the current instant."""
        return cls(dt.datetime.now(dt.UTC))

    @property
    def utc(self) -> dt.datetime:
        if self.instant.tzinfo is None:
            return self.instant.replace(tzinfo=dt.UTC)
        return self.instant.astimezone(dt.UTC)

    def as_mapping(self) -> dict[str, str]:
        """Return the placeholder names and their values."""
        moment = self.utc
        time = moment.strftime("%H:%M:%S")
        return {
            "date": moment.strftime("%Y-%m-%d"),
            "dateTime": f"{moment.strftime('%Y-%m-%d')}T{time}Z",
            "day": f"{moment.day:02d}",
            "month": f"{moment.month:02d}",
            "year": f"{moment.year:04d}",
            "hour": f"{moment.hour:02d}",
            "minute": f"{moment.minute:02d}",
            "second": f"{moment.second:02d}",
            "millisecond": f"{moment.microsecond // 1000:03d}",
            "time": f"{time}Z",
        }


class DateSource:
    """Expose :class:`BuildClock` fields as placeholders."""

    def __init__(self, clock: BuildClock) -> None:
        self._values = clock.as_mapping()

    def get_value(self, expression: str) -> str | None:
        return self._values.get(expression)


class VariableResolver:
    """Substitute placeholders using the first source that knows a value."""

    def __init__(self, sources: cabc.Sequence[ValueSource]) -> None:
        self.sources = list(sources)

    def resolve(self, text: str) -> str:
        """Return ``text`` with every resolvable placeholder substituted.

        Raises
        ------
        InterpolationError
            If values reference each other in a cycle. Blank or malformed
            placeholders have no value and are left as written.
        """
        return self._resolve(text, ())

    def _resolve(self, text: str, stack: tuple[str, ...]) -> str:
        if "${" not in text:
            return text

        def _repl(match: re.Match[str]) -> str:
            expression = match.group(1)
            if not expression.strip():
                return match.group(0)
            if expression in stack:
                chain = " -> ".join((*stack, expression))
                msg = f"Expression cycle detected: {chain}"
                raise InterpolationError(msg)
            value = self._lookup(expression)
            if value is None:
                return match.group(0)
            return self._resolve(value, (*stack, expression))

        return EXPRESSION_PATTERN.sub(_repl, text)

    def _lookup(self, expression: str) -> str | None:
        for source in self.sources:
            value = source.get_value(expression)
            if value is not None:
                return value
        return None


def evaluate_path(root: object, path: str) -> str | None:
    """Walk ``path`` (for example ``organization.name``) from ``root``.

    Mapping values consume all remaining segments as a single dotted key first,
    so ``properties.release.target.level`` reaches the ``release.target.level``
    property.
    """
    segments = path.split(".")
    current: object = root
    position = 0
    while position < len(segments):
        if isinstance(current, cabc.Mapping):
            joined = ".".join(segments[position:])
            if joined in current:
                current = current[joined]
                break
            current = _mapping_item(current, segments[position])
        else:
            current = _segment_value(current, segments[position])
        position += 1
    return _scalar(current)


def _segment_value(current: object, segment: str) -> object:
    match = _SEGMENT_PATTERN.match(segment)
    if match is None:
        msg = f"Invalid path segment '{segment}'."
        raise ValueError(msg)
    name = _CAMEL_BOUNDARY.sub("_", match.group("name")).lower().replace("-", "_")
    if not dc.is_dataclass(current) or isinstance(current, type):
        msg = f"Cannot read '{segment}' from {type(current).__name__}."
        raise TypeError(msg)
    allowed = {field.name for field in dc.fields(current)}
    if name not in allowed:
        msg = f"Unknown field '{segment}' on {type(current).__name__}."
        raise LookupError(msg)
    value = getattr(current, name)
    index = match.group("index")
    if index is None:
        return value
    if not isinstance(value, cabc.Sequence) or isinstance(value, str):
        msg = f"Field '{name}' is not indexable."
        raise TypeError(msg)
    return value[int(index)]


def _mapping_item(current: cabc.Mapping[typ.Any, typ.Any], segment: str) -> object:
    if segment not in current:
        msg = f"Unknown key '{segment}'."
        raise LookupError(msg)
    return current[segment]


def _scalar(value: object) -> str | None:
    match value:
        case None:
            return None
        case bool():
            return "true" if value else "false"
        case str() | int() | float() | Path():
            return str(value)
        case _:
            msg = f"Value of type {type(value).__name__} is not a scalar."
            raise TypeError(msg)


def host_properties() -> dict[str, str]:
    """Return build-environment facts exposed as flat properties."""
    return {
        "user.dir": str(Path.cwd()),
        "user.home": str(Path.home()),
        "user.name": os.environ.get("USER") or os.environ.get("USERNAME") or "",
        "os.name": platform.system(),
        "os.arch": platform.machine(),
        "os.version": platform.release(),
        "python.version": platform.python_version(),
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
        "file.encoding": sys.getfilesystemencoding(),
    }


def build_resolver(
    project: ProjectModel | None,
    *,
    build_properties: cabc.Mapping[str, str] | None = None,
    environ: cabc.Mapping[str, str] | None = None,
    clock: BuildClock | None = None,
) -> VariableResolver:
    """Return the standard resolver chain for ``project``.

    Sources, in priority order: build properties merged with project
    properties (project wins), environment variables, project fields, and
    build-time date values.
    """
    base = host_properties() if build_properties is None else dict(build_properties)
    project_properties = project.properties if project is not None else {}
    return VariableResolver(
        [
            PropertiesSource(base, project_properties),
            EnvironmentSource(environ),
            ProjectSource(project),
            DateSource(clock or BuildClock.now()),
        ]
    )


__all__ = [
    "BuildClock",
    "DateSource",
    "EnvironmentSource",
    "InterpolationError",
    "ProjectSource",
    "PropertiesSource",
    "ValueSource",
    "VariableResolver",
    "build_resolver",
    "evaluate_path",
    "host_properties",
]
