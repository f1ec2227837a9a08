"""Utility helpers for the VoiceForAll application."""

import os
import re
import sys
import unicodedata

if sys.platform.startswith("win"):
    import winreg
else:  # pragma: no cover - platform specific
    winreg = None


# Full stop, question, exclamation and the Devanagari danda / double danda.
SENTENCE_TERMINATORS = (".", "?", "!", "।", "॥")

_WHITESPACE = re.compile(r"\s+")


def get_user_env_var(name: str) -> str | None:
    r"""Retrieve a user-level environment variable.

    On Windows the ``HKCU\Environment`` registry key is consulted so that
    values configured for the user are found even when the current process
    environment lacks them.  Elsewhere this is ``os.environ.get``.
    """
    if not sys.platform.startswith("win") or winreg is None:
        return os.environ.get(name)
    try:
        reg_key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Environment")
        try:
            value, _ = winreg.QueryValueEx(reg_key, name)
            return value
        finally:
            winreg.CloseKey(reg_key)
    except FileNotFoundError:
        return os.environ.get(name)


def clean_text(text: str) -> str:
    """Strip Unicode control characters and collapse runs of whitespace.

    Format characters such as the zero width joiner are kept because several
    Indic scripts need them to render conjuncts.
    """
    kept = "".join(
        " " if ch.isspace() else ch
        for ch in text
        if ch.isspace() or unicodedata.category(ch) != "Cc"
    )
    return _WHITESPACE.sub(" ", kept).strip()


def compose_utterance(title: str, description: str) -> str:
    """Join *title* and *description* into one spoken sentence pair."""

    title = title.strip()
    description = description.strip()
    if not description:
        return title
    if not title:
        return description
    if title.endswith(SENTENCE_TERMINATORS):
        return f"{title} {description}"
    return f"{title}. {description}"
