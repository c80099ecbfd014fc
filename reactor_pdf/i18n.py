"""Localized message lookup for document chrome and report text.

Bundles are flat YAML mappings stored under ``reactor_pdf/messages``:
``<bundle>.yaml`` holds the base (English) strings and
``<bundle>_<language>.yaml`` overrides them for one language. Lookups fall
back from the language bundle to the base bundle, then to the key itself.

Example
-------
>>> from reactor_pdf.locales import Locale
>>> catalog = MessageCatalog()
>>> catalog.get_string("toc.title", Locale("de"))
'Inhaltsverzeichnis'
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from ._constants import MESSAGE_BUNDLE
from .logging import get_logger

if typ.TYPE_CHECKING:
    from .locales import Locale

LOGGER = get_logger("i18n")


class MessageCatalog:
    """Cached per-language view over a YAML message bundle."""

    def __init__(
        self, bundle: str = MESSAGE_BUNDLE, *, messages_dir: Path | None = None
    ) -> None:
        self.bundle = bundle
        self.messages_dir = messages_dir or Path(__file__).parent / "messages"
        self._cache: dict[str, dict[str, str]] = {}

    def get_string(self, key: str, locale: Locale) -> str:
        """Return the message for ``key`` in ``locale``'s language."""
        for language in (locale.language, ""):
            messages = self._messages(language)
            if key in messages:
                return messages[key]
        LOGGER.warning("No message for key '%s' in bundle '%s'.", key, self.bundle)
        return key

    def _messages(self, language: str) -> dict[str, str]:
        if language not in self._cache:
            name = f"{self.bundle}_{language}.yaml" if language else f"{self.bundle}.yaml"
            self._cache[language] = _load_bundle(self.messages_dir / name)
        return self._cache[language]


def _load_bundle(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Message bundle '{path}' must be a mapping."
        raise TypeError(msg)
    return {str(key): str(value) for key, value in loaded.items()}


__all__ = ["MessageCatalog"]
