"""Raw PCM playback through ``sounddevice``."""

from __future__ import annotations

import logging
import threading

try:
    import sounddevice as sd

    HAVE_SD = True
except Exception:  # pragma: no cover - PortAudio missing on the host
    sd = None
    HAVE_SD = False

logger = logging.getLogger(__name__)

# Gemini speech output: 24 kHz, signed 16-bit, mono.
SAMPLE_RATE = 24000
CHANNELS = 1
DTYPE = "int16"


class PcmPlayer:
    """One output stream for one utterance.

    ``write`` blocks until the device accepts the chunk, so callers on an
    event loop should run it in a worker thread.  ``abort`` may be called from
    any thread and silences playback at once.
    """

    def __init__(self, samplerate: int = SAMPLE_RATE, channels: int = CHANNELS) -> None:
        self.samplerate = samplerate
        self.channels = channels
        self._stream = None
        self._lock = threading.Lock()

    @staticmethod
    def available() -> bool:
        return HAVE_SD

    def open(self) -> None:
        if not HAVE_SD:
            raise RuntimeError("sounddevice is not available")
        with self._lock:
            if self._stream is None:
                self._stream = sd.RawOutputStream(
                    samplerate=self.samplerate, channels=self.channels, dtype=DTYPE
                )
                self._stream.start()

    def write(self, data: bytes) -> None:
        """Queue *data* for playback; a write cut short by ``abort`` is dropped."""
        stream = self._stream
        if stream is None:
            return
        try:
            stream.write(data)
        except sd.PortAudioError:
            if self._stream is stream:
                raise
            logger.debug("Audio write interrupted by abort")

    def drain(self) -> None:
        """Let buffered audio finish, then release the device."""
        with self._lock:
            stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()

    def abort(self) -> None:
        with self._lock:
            stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.abort()
            stream.close()
        except Exception as exc:  # pragma: no cover - device specific
            logger.warning("Failed to abort audio stream: %s", exc)
