"""Thin Tk front end for VoiceForAll.

The window only renders state and forwards clicks.  Narration and language
state live in the services built by :func:`build_services`, which run on an
asyncio loop owned by a background thread.
"""

import asyncio
import concurrent.futures
import logging
import threading
import tkinter as tk
from dataclasses import dataclass
from typing import Any, Coroutine

from config import AppConfig, load_config
from content import SECTIONS, section_items
from languages import Language
from models import ContentItem, Utterance
from services.localization import LocalizationStore
from services.narration import NarrationSession
from services.speech import SpeechEngine, create_engine, init_engine
from storage.preferences import JsonPreferenceStore
from translations import TranslationCatalog

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the presentation layer talks to."""

    catalog: TranslationCatalog
    localization: LocalizationStore
    engine: SpeechEngine
    narration: NarrationSession


def build_services(
    config: AppConfig,
    engine: SpeechEngine | None = None,
    catalog: TranslationCatalog | None = None,
) -> Services:
    catalog = catalog or TranslationCatalog.load()
    localization = LocalizationStore(JsonPreferenceStore(config.preferences_path), catalog)
    engine = engine or create_engine(config)
    narration = NarrationSession(engine, config.completion_policy, config.completion_delay)
    return Services(catalog, localization, engine, narration)


async def start_services(services: Services, config: AppConfig) -> None:
    await services.localization.initialize()
    await init_engine(services.engine, config.speech_rate, config.speech_pitch)


class LoopThread:
    """An asyncio event loop running on a daemon thread."""

    def __init__(self) -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="voiceforall-loop", daemon=True)

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> None:
        self._thread.start()

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future:
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def call(self, fn, *args) -> None:
        self.loop.call_soon_threadsafe(fn, *args)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=2)
        if not self._thread.is_alive():
            self.loop.close()


class VoiceForAllApp:
    """Main window: language picker, section buttons and the topic list."""

    def __init__(self, root: tk.Tk, services: Services, loop: LoopThread) -> None:
        self.root = root
        self.services = services
        self.loop = loop
        self.section: str | None = None
        self.items: list[ContentItem] = []

        self.title = tk.Label(root, font=("TkDefaultFont", 16, "bold"))
        self.title.pack(pady=(10, 0))
        self.subtitle = tk.Label(root)
        self.subtitle.pack()

        self.language_var = tk.StringVar(value=self._language_label(self.language))
        self.language_menu = tk.OptionMenu(
            root,
            self.language_var,
            *(self._language_label(lang) for lang in Language),
            command=self.on_language,
        )
        self.language_menu.pack(pady=5)

        bar = tk.Frame(root)
        bar.pack(fill=tk.X)
        self.back_button = tk.Button(bar, command=self.on_back)
        self.back_button.pack(side=tk.LEFT)
        self.section_buttons = {}
        for section in SECTIONS:
            button = tk.Button(bar, command=lambda s=section: self.open_section(s))
            button.pack(side=tk.LEFT, expand=True, fill=tk.X)
            self.section_buttons[section] = button

        self.listbox = tk.Listbox(root, height=12, width=70)
        self.listbox.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)
        self.listbox.bind("<ButtonRelease-1>", self.on_item_click)
        self.listbox.bind("<Return>", self.on_item_key)

        services.localization.subscribe(lambda _lang: self._schedule(self.render))
        services.narration.subscribe(lambda _state: self._schedule(self.render_items))
        root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.render()

    @property
    def language(self) -> Language:
        return self.services.localization.language

    @staticmethod
    def _language_label(language: Language) -> str:
        return f"{language.native_label} ({language.label})"

    def _schedule(self, fn) -> None:
        self.root.after(0, fn)

    # UI callbacks ---------------------------------------------------------
    def on_language(self, label: str) -> None:
        for language in Language:
            if self._language_label(language) == label:
                self.loop.call(self.services.localization.set_language, language)
                return

    def open_section(self, section: str) -> None:
        self.loop.call(self.services.narration.teardown)
        self.section = section
        self.render()

    def on_back(self) -> None:
        self.loop.call(self.services.narration.teardown)
        self.section = None
        self.render()

    def on_item_click(self, event: tk.Event) -> None:
        self.activate(self.listbox.nearest(event.y))

    def on_item_key(self, event: tk.Event | None = None) -> None:
        selection = self.listbox.curselection()
        if selection:
            self.activate(selection[0])

    def activate(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            return
        utterance = Utterance.for_item(self.items[index], self.language)
        self.loop.submit(self.services.narration.narrate(utterance))

    def on_close(self) -> None:
        self.loop.call(self.services.narration.teardown)
        try:
            self.loop.submit(self.services.localization.flush()).result(timeout=2)
        except concurrent.futures.TimeoutError:
            logger.warning("Language preference still being written at exit")
        self.loop.stop()
        self.root.destroy()

    # Rendering -------------------------------------------------------------
    def render(self) -> None:
        t = self.services.localization.translate
        self.language_var.set(self._language_label(self.language))
        self.root.title(t("app.name"))
        self.back_button.config(text=f"← {t('common.back')}")
        for section, button in self.section_buttons.items():
            button.config(text=t(f"{section}.title"))
        if self.section is None:
            self.title.config(text=t("app.name"))
            self.subtitle.config(text=t("app.tagline"))
            self.items = []
        else:
            self.title.config(text=t(f"{self.section}.title"))
            self.subtitle.config(text=t(f"{self.section}.subtitle"))
            self.items = section_items(self.section, self.language, self.services.catalog)
        self.render_items()

    def render_items(self) -> None:
        narration = self.services.narration
        self.listbox.delete(0, tk.END)
        for item in self.items:
            marker = "■" if narration.is_speaking(item.id) else "▶"
            self.listbox.insert(tk.END, f"{marker}  {item.title} - {item.description}")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config()
    services = build_services(config)
    loop = LoopThread()
    loop.start()

    root = tk.Tk()
    VoiceForAllApp(root, services, loop)
    loop.submit(start_services(services, config))
    root.mainloop()


if __name__ == "__main__":
    main()
