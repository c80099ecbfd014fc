"""Locale handling for multi-language document builds.

A build renders one document per configured locale. The first locale of the
configured list is the *default* locale: its output lives directly in the base
working and output directories, while every other locale writes into a
``<base>/<language>`` sub-directory. All locale comparisons use the language
code only; region and variant never influence path or file decisions.

Example
-------
>>> from pathlib import Path
>>> resolver = LocaleResolver("en,fr")
>>> resolver.default_locale.language
'en'
>>> [locale.language for locale in resolver.available_locales]
['en', 'fr']
>>> locale_directory(Path("target/pdf"), Locale("fr"), resolver.default_locale)
PosixPath('target/pdf/fr')
"""

from __future__ import annotations

import dataclasses as dc
import locale as host_locale
import re
import typing as typ

from ._constants import LOCALIZED_DESCRIPTOR_TEMPLATE
from .logging import get_logger

if typ.TYPE_CHECKING:
    from pathlib import Path

LOGGER = get_logger("locales")

FALLBACK_LANGUAGE = "en"
DEFAULT_TOKEN = "default"
_LOCALE_CODE_PATTERN = re.compile(
    r"^(?P<language>[A-Za-z]{2,3})"
    r"(?:[_-](?P<country>[A-Za-z]{2}|\d{3})?)?"
    r"(?:[_-](?P<variant>[A-Za-z0-9]{1,8}))?$"
)


class LocaleError(ValueError):
    """Raised when a locale code cannot be parsed."""


@dc.dataclass(frozen=True, slots=True)
class Locale:
    """A language code with optional region and variant qualifiers."""

    language: str
    country: str = ""
    variant: str = ""

    @classmethod
    def parse(cls, code: str) -> Locale:
        """Parse ``ll``, ``ll_CC`` or ``ll_CC_variant`` (``-`` also accepted)."""
        match = _LOCALE_CODE_PATTERN.match(code.strip())
        if match is None:
            msg = f"Invalid locale code '{code}'."
            raise LocaleError(msg)
        return cls(
            language=match.group("language").lower(),
            country=(match.group("country") or "").upper(),
            variant=match.group("variant") or "",
        )

    def same_language(self, other: Locale) -> bool:
        """Return ``True`` when both locales share a language code."""
        return self.language == other.language

    def __str__(self) -> str:
        parts = [self.language]
        if self.country or self.variant:
            parts.append(self.country)
        if self.variant:
            parts.append(self.variant)
        return "_".join(parts)


def host_default_locale() -> Locale:
    """Return the locale of the running process, falling back to English."""
    code, _encoding = host_locale.getlocale()
    if not code or code in {"C", "POSIX"}:
        return Locale(FALLBACK_LANGUAGE)
    try:
        return Locale.parse(code.split(".")[0])
    except LocaleError:
        return Locale(FALLBACK_LANGUAGE)


def parse_site_locales(
    configured: str | None, *, host: Locale | None = None
) -> list[Locale]:
    """Return the ordered, de-duplicated list of valid locales.

    Parameters
    ----------
    configured : str or None
        Comma-separated locale codes (for example ``"en,fr,de_CH"``). The token
        ``default`` stands for the host locale.
    host : Locale, optional
        Locale used for ``default`` tokens and as the fallback when nothing
        valid is configured. Defaults to :func:`host_default_locale`.

    Returns
    -------
    list[Locale]
        Never empty. Invalid tokens are logged and skipped; tokens whose
        language was already listed are dropped.
    """
    fallback = host or host_default_locale()
    result: list[Locale] = []
    for token in (configured or "").split(","):
        code = token.strip()
        if not code:
            continue
        if code.lower() == DEFAULT_TOKEN:
            candidate = fallback
        else:
            try:
                candidate = Locale.parse(code)
            except LocaleError:
                LOGGER.warning(
                    "The locale defined by '%s' is not valid and will not be used.",
                    code,
                )
                continue
        if any(existing.same_language(candidate) for existing in result):
            continue
        result.append(candidate)
    if not result:
        result.append(fallback)
    return result


class LocaleResolver:
    """Compute and cache the locales of one build.

    The configured list is parsed once, on first access, and reused for the
    remainder of the build.
    """

    def __init__(self, configured: str | None, *, host: Locale | None = None) -> None:
        self.configured = configured
        self._host = host
        self._locales: list[Locale] | None = None

    @property
    def available_locales(self) -> list[Locale]:
        """Return the ordered locale list; the first entry is the default."""
        if self._locales is None:
            self._locales = parse_site_locales(self.configured, host=self._host)
        return list(self._locales)

    @property
    def default_locale(self) -> Locale:
        """Return the first available locale."""
        return self.available_locales[0]

    def resolve(self) -> tuple[Locale, list[Locale]]:
        """Return ``(default_locale, available_locales)``."""
        locales = self.available_locales
        return locales[0], locales


def locale_directory(base: Path, locale: Locale, default_locale: Locale) -> Path:
    """Return ``base`` for the default language, ``base/<language>`` otherwise."""
    if locale.same_language(default_locale):
        return base
    return base / locale.language


def localized_sibling(path: Path, locale: Locale) -> Path:
    """Return ``<stem>_<language><suffix>`` next to ``path``."""
    name = LOCALIZED_DESCRIPTOR_TEMPLATE.format(
        stem=path.stem, language=locale.language, suffix=path.suffix
    )
    return path.with_name(name)


__all__ = [
    "Locale",
    "LocaleError",
    "LocaleResolver",
    "host_default_locale",
    "locale_directory",
    "localized_sibling",
    "parse_site_locales",
]
