"""Speech engine boundary and the engines shipped with the app.

The narration session only ever talks to the :class:`SpeechEngine` protocol.
:class:`GeminiSpeechEngine` streams synthesized audio from the Google GenAI
text-to-speech model to the sound card; :class:`TranscriptEngine` is the silent
stand-in used when audio is disabled or no API key is configured.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import genai_api as ga
from config import AppConfig
from languages import DEFAULT_LOCALE
from .audio import PcmPlayer

logger = logging.getLogger(__name__)

Completion = Callable[[], None]

DEFAULT_RATE = 0.5
DEFAULT_PITCH = 1.0
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"


class SpeechEngineError(RuntimeError):
    """The engine cannot carry out a request as configured."""


class SpeechEngine(Protocol):
    """What the narration session needs from a text-to-speech backend.

    ``speak`` only starts an utterance.  Engines with ``supports_completion``
    call ``on_done`` once when that utterance ends on its own (or fails while
    playing); they never call it for an utterance silenced by ``stop``.
    """

    supports_completion: bool

    async def configure_default_rate(self, rate: float) -> None: ...

    async def configure_default_pitch(self, pitch: float) -> None: ...

    async def configure_language(self, locale: str) -> None: ...

    async def speak(self, text: str, on_done: Completion | None = None) -> None: ...

    def stop(self) -> None: ...


async def init_engine(
    engine: SpeechEngine,
    rate: float = DEFAULT_RATE,
    pitch: float = DEFAULT_PITCH,
    locale: str = DEFAULT_LOCALE,
) -> bool:
    """Apply start-up defaults to *engine*; failures are logged, not raised."""

    try:
        await engine.configure_default_rate(rate)
        await engine.configure_default_pitch(pitch)
        await engine.configure_language(locale)
    except Exception:
        logger.exception("Speech engine initialisation failed")
        return False
    return True


def _positive(name: str, value: float) -> float:
    value = float(value)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass
class TranscriptEngine:
    """Silent engine that logs and records what would have been spoken."""

    supports_completion: bool = True
    rate: float = DEFAULT_RATE
    pitch: float = DEFAULT_PITCH
    locale: str = DEFAULT_LOCALE
    last_text: str | None = None
    stopped: bool = False
    spoken: list[tuple[str, str]] = field(default_factory=list)
    _pending: asyncio.Handle | None = field(default=None, repr=False)

    async def configure_default_rate(self, rate: float) -> None:
        self.rate = _positive("rate", rate)

    async def configure_default_pitch(self, pitch: float) -> None:
        self.pitch = _positive("pitch", pitch)

    async def configure_language(self, locale: str) -> None:
        if not locale:
            raise ValueError("locale must not be empty")
        self.locale = locale

    async def speak(self, text: str, on_done: Completion | None = None) -> None:
        self.last_text = text
        self.stopped = False
        self.spoken.append((self.locale, text))
        logger.info("[%s] %s", self.locale, text)
        if on_done is not None:
            self._pending = asyncio.get_running_loop().call_soon(on_done)

    def stop(self) -> None:
        self.stopped = True
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


def delivery_instruction(rate: float, pitch: float) -> str:
    """Describe the requested rate and pitch as a spoken-style instruction."""

    if rate < 0.75:
        pace = "slowly and clearly"
    elif rate > 1.25:
        pace = "briskly"
    else:
        pace = "at a natural pace"
    if pitch < 0.9:
        tone = " in a low voice"
    elif pitch > 1.1:
        tone = " in a high voice"
    else:
        tone = ""
    return f"Read the following aloud {pace}{tone}:"


def audio_bytes(chunk: Any) -> bytes:
    """Concatenate the inline audio parts of one streamed response chunk."""

    data = bytearray()
    for candidate in getattr(chunk, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                data.extend(inline.data)
    return bytes(data)


class GeminiSpeechEngine:
    """Speech through the Gemini text-to-speech model.

    Each utterance runs as a task on the event loop that streams PCM chunks
    into its own :class:`~services.audio.PcmPlayer`.  ``stop`` cancels the task
    and aborts the player immediately.
    """

    supports_completion = True

    def __init__(
        self,
        client: Any = None,
        model: str = DEFAULT_TTS_MODEL,
        voice: str = DEFAULT_VOICE,
        player_factory: Callable[[], PcmPlayer] = PcmPlayer,
    ) -> None:
        self._client = client
        self.model = model
        self.voice = voice
        self.rate = 1.0
        self.pitch = 1.0
        self.locale = DEFAULT_LOCALE
        self._player_factory = player_factory
        self._player: PcmPlayer | None = None
        self._task: asyncio.Task | None = None

    def _get_client(self) -> Any:
        client = self._client or ga.ensure_client()
        if client is None:
            raise SpeechEngineError("No Gemini API key configured")
        return client

    async def configure_default_rate(self, rate: float) -> None:
        self.rate = _positive("rate", rate)

    async def configure_default_pitch(self, pitch: float) -> None:
        self.pitch = _positive("pitch", pitch)

    async def configure_language(self, locale: str) -> None:
        if not locale:
            raise ValueError("locale must not be empty")
        self.locale = locale

    def build_config(self) -> ga.types.GenerateContentConfig:
        return ga.types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=ga.types.SpeechConfig(
                language_code=self.locale,
                voice_config=ga.types.VoiceConfig(
                    prebuilt_voice_config=ga.types.PrebuiltVoiceConfig(voice_name=self.voice)
                ),
            ),
        )

    def build_prompt(self, text: str) -> str:
        return f"{delivery_instruction(self.rate, self.pitch)}\n{text}"

    async def speak(self, text: str, on_done: Completion | None = None) -> None:
        if not text.strip():
            raise SpeechEngineError("Nothing to speak")
        client = self._get_client()
        if not PcmPlayer.available():
            raise SpeechEngineError("No audio output device available")
        self.stop()
        player = self._player_factory()
        self._player = player
        self._task = asyncio.get_running_loop().create_task(
            self._run(client, text, player, on_done)
        )

    async def _run(
        self, client: Any, text: str, player: PcmPlayer, on_done: Completion | None
    ) -> None:
        try:
            await self._play(client, text, player)
        except Exception:
            logger.exception("Speech playback failed (%s)", self.locale)
        finally:
            player.abort()
        if on_done is not None:
            on_done()

    async def _play(self, client: Any, text: str, player: PcmPlayer) -> None:
        stream = client.aio.models.generate_content_stream(
            model=self.model,
            contents=self.build_prompt(text),
            config=self.build_config(),
        )
        if inspect.isawaitable(stream):
            stream = await stream
        player.open()
        async for chunk in stream:
            data = audio_bytes(chunk)
            if data:
                await asyncio.to_thread(player.write, data)
        await asyncio.to_thread(player.drain)

    def stop(self) -> None:
        task, self._task = self._task, None
        player, self._player = self._player, None
        if task is not None and not task.done():
            task.cancel()
        if player is not None:
            player.abort()


def create_engine(config: AppConfig) -> SpeechEngine:
    """Pick the engine for *config*: Gemini when audio can actually play."""

    if not config.enable_audio:
        logger.info("Audio disabled; narration will be logged only")
        return TranscriptEngine()
    if not PcmPlayer.available():
        logger.warning("sounddevice unavailable; narration will be logged only")
        return TranscriptEngine()
    client = ga.ensure_client()
    if client is None:
        logger.warning("No Gemini API key found; narration will be logged only")
        return TranscriptEngine()
    return GeminiSpeechEngine(client, model=config.tts_model, voice=config.voice_name)
