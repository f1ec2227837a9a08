"""Durable user preferences kept in a small JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LANGUAGE_KEY = "selectedLanguage"


class JsonPreferenceStore:
    """String key/value pairs persisted to *path*.

    Reads tolerate a missing or corrupt file and report the key as absent.
    Writes keep unrelated keys already in the file.  I/O errors from writes
    propagate to the caller.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except ValueError as exc:
            # bad JSON or bad UTF-8
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not a JSON object", self.path)
            return {}
        return data

    def read(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
