import pathlib
import sys
from types import SimpleNamespace

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

import services.audio as audio
from services.audio import PcmPlayer


class FakePortAudioError(Exception):
    pass


class FakeStream:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.written = []
        self.events = []
        self.on_write = None

    def start(self):
        self.events.append("start")

    def write(self, data):
        if self.on_write is not None:
            self.on_write()
            raise FakePortAudioError("Stream is stopped")
        self.written.append(data)

    def stop(self):
        self.events.append("stop")

    def abort(self):
        self.events.append("abort")

    def close(self):
        self.events.append("close")


@pytest.fixture
def fake_sd(monkeypatch):
    streams = []

    def raw_output_stream(**kwargs):
        streams.append(FakeStream(**kwargs))
        return streams[-1]

    monkeypatch.setattr(
        audio,
        "sd",
        SimpleNamespace(RawOutputStream=raw_output_stream, PortAudioError=FakePortAudioError),
    )
    monkeypatch.setattr(audio, "HAVE_SD", True)
    return streams


def test_open_write_drain(fake_sd):
    player = PcmPlayer()
    player.open()
    player.write(b"\x00\x01")
    player.drain()

    stream = fake_sd[0]
    assert stream.kwargs == {"samplerate": 24000, "channels": 1, "dtype": "int16"}
    assert stream.written == [b"\x00\x01"]
    assert stream.events == ["start", "stop", "close"]
    # released streams ignore further writes
    player.write(b"\x02")
    assert stream.written == [b"\x00\x01"]


def test_write_interrupted_by_abort_is_dropped(fake_sd):
    player = PcmPlayer()
    player.open()
    stream = fake_sd[0]
    stream.on_write = player.abort

    player.write(b"\x00\x01")

    assert stream.events == ["start", "abort", "close"]


def test_write_error_on_live_stream_propagates(fake_sd):
    player = PcmPlayer()
    player.open()
    fake_sd[0].on_write = lambda: None

    with pytest.raises(FakePortAudioError):
        player.write(b"\x00")


def test_open_without_sounddevice(monkeypatch):
    monkeypatch.setattr(audio, "HAVE_SD", False)
    assert not PcmPlayer.available()
    with pytest.raises(RuntimeError):
        PcmPlayer().open()
