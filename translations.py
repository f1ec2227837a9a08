"""Static per-language string tables and lookup with fallback."""

from __future__ import annotations

import importlib.resources as pkg_resources
import json
import logging
from collections.abc import Mapping
from typing import Callable

from languages import DEFAULT_LANGUAGE, Language, parse_language

logger = logging.getLogger(__name__)

LOCALES_PACKAGE = "locales"

Translator = Callable[[str], str]


def load_table(language: Language, package: str = LOCALES_PACKAGE) -> dict[str, str]:
    """Read the JSON table for *language* shipped in *package*."""

    resource = pkg_resources.files(package).joinpath(f"{language.value}.json")
    data = json.loads(resource.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"translation table for {language.value} is not an object")
    return {str(k): str(v) for k, v in data.items()}


class TranslationCatalog:
    """Read-only lookup over one string table per :class:`Language`.

    ``lookup`` never fails: a key missing from a language's table resolves to
    the English text, and a key unknown to English resolves to the key itself.
    Empty strings are treated as missing.
    """

    def __init__(self, tables: Mapping[Language, Mapping[str, str]]) -> None:
        self._tables: dict[Language, dict[str, str]] = {
            language: dict(tables.get(language, {})) for language in Language
        }

    @classmethod
    def load(cls, package: str = LOCALES_PACKAGE) -> "TranslationCatalog":
        """Load every language table from *package*.

        A table that cannot be read is logged and left empty so lookups for
        that language fall back to English.
        """
        tables: dict[Language, dict[str, str]] = {}
        for language in Language:
            try:
                tables[language] = load_table(language, package)
            except (OSError, ValueError) as exc:
                logger.error("Failed to load %s translations: %s", language.value, exc)
                tables[language] = {}
        catalog = cls(tables)
        catalog.validate()
        return catalog

    def lookup(self, language: Language | str, key: str) -> str:
        lang = parse_language(language) or DEFAULT_LANGUAGE
        value = self._tables[lang].get(key)
        if value:
            return value
        value = self._tables[DEFAULT_LANGUAGE].get(key)
        if value:
            return value
        return key

    def translator(self, language: Language | str) -> Translator:
        """Return a ``t(key)`` callable bound to *language*."""

        def t(key: str) -> str:
            return self.lookup(language, key)

        return t

    def keys(self) -> set[str]:
        """Keys of the reference (English) table."""
        return set(self._tables[DEFAULT_LANGUAGE])

    def missing_keys(self, language: Language) -> set[str]:
        table = self._tables[language]
        return {key for key in self.keys() if not table.get(key)}

    def validate(self) -> dict[Language, set[str]]:
        """Report keys present in English but absent from another table."""

        report: dict[Language, set[str]] = {}
        for language in Language:
            missing = self.missing_keys(language)
            if missing:
                logger.warning(
                    "%d translation keys missing for %s: %s",
                    len(missing),
                    language.value,
                    ", ".join(sorted(missing)[:5]),
                )
                report[language] = missing
        return report
