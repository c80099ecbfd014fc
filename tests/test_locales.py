"""Unit tests for locale parsing and per-locale directory layout."""

from __future__ import annotations

from pathlib import Path

import pytest

from reactor_pdf.locales import (
    Locale,
    LocaleError,
    LocaleResolver,
    locale_directory,
    localized_sibling,
    parse_site_locales,
)


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("fr", Locale("fr")),
        ("de_CH", Locale("de", "CH")),
        ("pt-br", Locale("pt", "BR")),
        ("ja_JP_JP", Locale("ja", "JP", "JP")),
    ],
)
def test_locale_parse(code: str, expected: Locale) -> None:
    assert Locale.parse(code) == expected, f"unexpected parse of {code!r}"


def test_locale_parse_rejects_garbage() -> None:
    with pytest.raises(LocaleError):
        Locale.parse("not a locale")


def test_locale_str_round_trips() -> None:
    assert str(Locale("de", "CH")) == "de_CH"
    assert str(Locale("en")) == "en"


@pytest.mark.parametrize(
    "configured",
    [None, "", " , ", "??,!!", "en", "fr,en,de", "default,fr"],
)
def test_default_locale_is_first_available(configured: str | None) -> None:
    """The locale list is never empty and starts with the default locale."""
    resolver = LocaleResolver(configured, host=Locale("en"))
    locales = resolver.available_locales
    assert locales, "expected at least one locale"
    assert resolver.default_locale == locales[0]


def test_invalid_and_duplicate_languages_are_dropped(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level("WARNING", logger="reactor_pdf"):
        locales = parse_site_locales("fr, fr_CA, bad locale, de", host=Locale("en"))
    assert [locale.language for locale in locales] == ["fr", "de"]
    assert "is not valid and will not be used" in caplog.text


def test_default_token_uses_host_locale() -> None:
    locales = parse_site_locales("default,fr", host=Locale("it"))
    assert [locale.language for locale in locales] == ["it", "fr"]


def test_empty_configuration_falls_back_to_host() -> None:
    assert parse_site_locales(None, host=Locale("es")) == [Locale("es")]


def test_resolver_caches_the_parsed_list() -> None:
    resolver = LocaleResolver("en,fr", host=Locale("en"))
    default, available = resolver.resolve()
    resolver.configured = "de"
    assert default == Locale("en")
    assert resolver.available_locales == available, "locales are parsed once"


def test_locale_directory_compares_languages_only() -> None:
    base = Path("target/pdf")
    default = Locale("en", "US")
    assert locale_directory(base, Locale("en", "GB"), default) == base
    assert locale_directory(base, Locale("fr", "CA"), default) == base / "fr"


def test_localized_sibling() -> None:
    path = Path("src/site/pdf.xml")
    assert localized_sibling(path, Locale("fr", "CA")) == Path("src/site/pdf_fr.xml")
