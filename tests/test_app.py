import asyncio
import json
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

pytest.importorskip("tkinter")

import VoiceForAll
from config import AppConfig, load_config
from languages import Language
from services.narration import CompletionPolicy
from services.speech import TranscriptEngine
from storage.preferences import LANGUAGE_KEY


def _config(tmp_path, **kwargs):
    return AppConfig(enable_audio=False, preferences_path=str(tmp_path / "prefs.json"), **kwargs)


def test_build_services_without_audio_uses_transcript_engine(tmp_path):
    services = VoiceForAll.build_services(_config(tmp_path))
    assert isinstance(services.engine, TranscriptEngine)
    assert services.narration.policy is CompletionPolicy.ENGINE
    assert services.localization.language is Language.ENGLISH


def test_start_services_restores_language_and_configures_engine(tmp_path):
    (tmp_path / "prefs.json").write_text(json.dumps({LANGUAGE_KEY: "telugu"}), encoding="utf-8")
    config = _config(tmp_path, speech_rate=0.75)
    services = VoiceForAll.build_services(config)

    asyncio.run(VoiceForAll.start_services(services, config))

    assert services.localization.language is Language.TELUGU
    assert services.localization.t("common.back") != "Back"
    assert services.engine.rate == 0.75
    assert services.engine.locale == "en-IN"


def test_timed_policy_from_config(tmp_path):
    services = VoiceForAll.build_services(_config(tmp_path, completion_policy="timed", completion_delay=1.5))
    assert services.narration.policy is CompletionPolicy.TIMED


def test_loop_thread_runs_submitted_work():
    loop = VoiceForAll.LoopThread()
    loop.start()
    try:
        async def answer():
            return 42

        assert loop.submit(answer()).result(timeout=2) == 42
    finally:
        loop.stop()


def test_loop_thread_closes_loop_on_stop():
    loop = VoiceForAll.LoopThread()
    loop.start()
    loop.stop()
    assert loop.loop.is_closed()


def test_odd_completion_policy_in_config_file_still_starts(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"completion_policy": "Timed ", "preferences_path": str(tmp_path / "p.json")}),
        encoding="utf-8",
    )
    services = VoiceForAll.build_services(load_config(path), engine=TranscriptEngine())
    assert services.narration.policy is CompletionPolicy.TIMED

    path.write_text(
        json.dumps({"completion_policy": "sometimes", "preferences_path": str(tmp_path / "p.json")}),
        encoding="utf-8",
    )
    services = VoiceForAll.build_services(load_config(path), engine=TranscriptEngine())
    assert services.narration.policy is CompletionPolicy.ENGINE
