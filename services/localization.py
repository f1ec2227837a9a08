"""Process-wide current language backed by the preference file."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from languages import DEFAULT_LANGUAGE, Language, parse_language
from state import Listeners
from storage.preferences import LANGUAGE_KEY, JsonPreferenceStore
from translations import TranslationCatalog, Translator

logger = logging.getLogger(__name__)


class LocalizationStore:
    """Owns the selected :class:`Language`.

    The value starts as English and is replaced by the stored preference once
    :meth:`initialize` completes.  :meth:`set_language` changes the value and
    notifies subscribers immediately; the preference file is written in the
    background and a failed write only gets logged.
    """

    def __init__(
        self,
        preferences: JsonPreferenceStore,
        catalog: TranslationCatalog | None = None,
        default: Language = DEFAULT_LANGUAGE,
    ) -> None:
        self._preferences = preferences
        self._catalog = catalog
        self._language = default
        self._ready = False
        self._chosen = False
        self._listeners: Listeners[Language] = Listeners()
        self._pending: set[asyncio.Task] = set()
        self._write_lock: asyncio.Lock | None = None

    # Reading -----------------------------------------------------------------
    @property
    def language(self) -> Language:
        return self._language

    def get_language(self) -> Language:
        return self._language

    @property
    def ready(self) -> bool:
        """``True`` once the stored preference has been read (or failed to)."""
        return self._ready

    def translate(self, key: str) -> str:
        if self._catalog is None:
            return key
        return self._catalog.lookup(self._language, key)

    @property
    def t(self) -> Translator:
        return self.translate

    def subscribe(self, callback: Callable[[Language], None]) -> Callable[[], None]:
        return self._listeners.subscribe(callback)

    # Lifecycle -----------------------------------------------------------------
    async def initialize(self) -> Language:
        """Load the stored language, keeping the default when none is usable."""

        try:
            stored = await asyncio.to_thread(self._preferences.read, LANGUAGE_KEY)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read language preference: %s", exc)
            stored = None

        language = parse_language(stored)
        if stored is not None and language is None:
            logger.warning("Ignoring unknown stored language %r", stored)

        self._ready = True
        if language is None:
            return self._language
        if self._chosen:
            logger.info(
                "Keeping %s chosen during start-up over stored %s",
                self._language.value,
                language.value,
            )
            return self._language
        self._apply(language)
        return self._language

    def set_language(self, language: Language | str) -> asyncio.Task | None:
        """Switch to *language* and persist it.

        Returns the background write task when called from a running event
        loop, otherwise writes synchronously and returns ``None``.
        """
        lang = parse_language(language)
        if lang is None:
            raise ValueError(f"Unsupported language: {language!r}")
        self._chosen = True
        self._apply(lang)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write(lang)
            return None
        task = loop.create_task(self._persist())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def flush(self) -> None:
        """Wait for background preference writes to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    # Internals -------------------------------------------------------------
    def _apply(self, language: Language) -> None:
        if language == self._language:
            return
        self._language = language
        logger.info("Language changed to %s", language.value)
        self._listeners.notify(language)

    def _write(self, language: Language) -> None:
        try:
            self._preferences.write(LANGUAGE_KEY, language.value)
        except (OSError, ValueError) as exc:
            logger.error("Failed to save language preference %s: %s", language.value, exc)

    async def _persist(self) -> None:
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        # Serialized; each write stores the value current at write time.
        async with self._write_lock:
            await asyncio.to_thread(self._write, self._language)
