"""Load the site decoration descriptor (``site.xml``).

The decoration model supplies the banners and menus a project already
declares for its web site. When a project has no document descriptor, its
menus become the table of contents and its banners become the cover logos.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
import xml.etree.ElementTree as ET

from ._constants import VCS_EXCLUDES
from .document.reader import DocumentIOError, read_xml_text
from .interpolation import InterpolationError, build_resolver
from .locales import localized_sibling
from .logging import get_logger

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .locales import Locale
    from .project import ProjectModel

LOGGER = get_logger("site")

SITE_DESCRIPTOR_NAME = "site.xml"


class SiteDescriptorError(ValueError):
    """Raised when the site descriptor cannot be read or parsed."""


@dc.dataclass(slots=True)
class Banner:
    """A site banner with an optional image."""

    name: str | None = None
    src: str | None = None
    href: str | None = None


@dc.dataclass(slots=True)
class MenuItem:
    """A link of a site menu, possibly with nested links."""

    name: str | None = None
    href: str | None = None
    items: list[MenuItem] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class Menu:
    """A named group of menu items."""

    name: str | None = None
    ref: str | None = None
    items: list[MenuItem] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class DecorationModel:
    """Site-level presentation data used to decorate a synthesized document."""

    name: str | None = None
    banner_left: Banner | None = None
    banner_right: Banner | None = None
    menus: list[Menu] = dc.field(default_factory=list)


def site_descriptor_path(site_directory: Path, locale: Locale) -> Path:
    """Return ``site_<language>.xml`` when present, ``site.xml`` otherwise."""
    default = site_directory / SITE_DESCRIPTOR_NAME
    localized = localized_sibling(default, locale)
    return localized if localized.exists() else default


def load_decoration_model(
    site_directory: Path,
    locale: Locale,
    project: ProjectModel | None,
    *,
    build_properties: cabc.Mapping[str, str] | None = None,
) -> DecorationModel | None:
    """Load the interpolated decoration model, or ``None`` without a descriptor.

    Raises
    ------
    SiteDescriptorError
        If the descriptor cannot be read, interpolated, or parsed.
    """
    path = site_descriptor_path(site_directory, locale)
    if not path.exists():
        LOGGER.debug("No site descriptor found at %s", path)
        return None
    try:
        content = read_xml_text(path)
        content = build_resolver(project, build_properties=build_properties).resolve(
            content
        )
        root = ET.fromstring(content)
    except (DocumentIOError, OSError) as exc:
        msg = f"Error reading site descriptor '{path}'"
        raise SiteDescriptorError(msg) from exc
    except InterpolationError as exc:
        msg = f"Error when interpolating site descriptor '{path}'"
        raise SiteDescriptorError(msg) from exc
    except ET.ParseError as exc:
        msg = f"Error parsing site descriptor '{path}'"
        raise SiteDescriptorError(msg) from exc
    return _build_decoration(root)


def list_site_files(
    root: Path, excluded_directories: cabc.Iterable[str] = ()
) -> list[str]:
    """Return the ``/``-separated paths of every file below ``root``.

    VCS metadata is always skipped. ``excluded_directories`` names top-level
    directories to leave out, typically the sub-directories of the
    non-default locales.
    """
    if not root.is_dir():
        return []
    skipped = set(excluded_directories)
    files: list[str] = []
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root)
        if relative.parts[0] in skipped:
            continue
        if any(part in VCS_EXCLUDES for part in relative.parts):
            continue
        if path.is_file():
            files.append(relative.as_posix())
    return files


def secondary_languages(
    locales: cabc.Iterable[Locale], default_locale: Locale
) -> set[str]:
    """Return the language codes of every locale other than the default."""
    return {
        locale.language
        for locale in locales
        if not locale.same_language(default_locale)
    }


def _build_decoration(root: ET.Element) -> DecorationModel:
    model = DecorationModel(name=root.get("name"))
    for child in root:
        tag = _local(child.tag)
        if tag == "bannerLeft":
            model.banner_left = _build_banner(child)
        elif tag == "bannerRight":
            model.banner_right = _build_banner(child)
        elif tag == "body":
            model.menus = [
                _build_menu(menu) for menu in child if _local(menu.tag) == "menu"
            ]
    return model


def _build_banner(element: ET.Element) -> Banner:
    fields = {_local(part.tag): (part.text or "").strip() or None for part in element}
    return Banner(name=fields.get("name"), src=fields.get("src"), href=fields.get("href"))


def _build_menu(element: ET.Element) -> Menu:
    return Menu(
        name=element.get("name"),
        ref=element.get("ref"),
        items=_build_items(element),
    )


def _build_items(element: ET.Element) -> list[MenuItem]:
    return [
        MenuItem(name=item.get("name"), href=item.get("href"), items=_build_items(item))
        for item in element
        if _local(item.tag) == "item"
    ]


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


__all__ = [
    "Banner",
    "DecorationModel",
    "Menu",
    "MenuItem",
    "SiteDescriptorError",
    "list_site_files",
    "load_decoration_model",
    "secondary_languages",
    "site_descriptor_path",
]
