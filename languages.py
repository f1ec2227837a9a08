"""Supported languages and their speech locale codes."""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Languages the content and narration are available in."""

    ENGLISH = "english"
    HINDI = "hindi"
    MALAYALAM = "malayalam"
    MARATHI = "marathi"
    TAMIL = "tamil"
    TELUGU = "telugu"
    BENGALI = "bengali"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def native_label(self) -> str:
        return NATIVE_LABELS[self]


DEFAULT_LANGUAGE = Language.ENGLISH

NATIVE_LABELS: dict[Language, str] = {
    Language.ENGLISH: "English",
    Language.HINDI: "हिंदी",
    Language.MALAYALAM: "മലയാളം",
    Language.MARATHI: "मराठी",
    Language.TAMIL: "தமிழ்",
    Language.TELUGU: "తెలుగు",
    Language.BENGALI: "বাংলা",
}

LOCALE_CODES: dict[Language, str] = {
    Language.ENGLISH: "en-IN",
    Language.HINDI: "hi-IN",
    Language.MALAYALAM: "ml-IN",
    Language.MARATHI: "mr-IN",
    Language.TAMIL: "ta-IN",
    Language.TELUGU: "te-IN",
    Language.BENGALI: "bn-IN",
}

DEFAULT_LOCALE = LOCALE_CODES[DEFAULT_LANGUAGE]


def parse_language(value: object) -> Language | None:
    """Return the :class:`Language` named by *value* or ``None``.

    Accepts enum members and their string identifiers, ignoring case and
    surrounding whitespace.  Anything else is treated as unknown.
    """
    if isinstance(value, Language):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Language(value.strip().lower())
    except ValueError:
        return None


def locale_for(language: object) -> str:
    """Return the speech locale for *language*, defaulting to English."""
    parsed = parse_language(language)
    if parsed is None:
        return DEFAULT_LOCALE
    return LOCALE_CODES.get(parsed, DEFAULT_LOCALE)
