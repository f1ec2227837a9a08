import json
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from config import AppConfig, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "missing.json")
    assert cfg == AppConfig()
    assert cfg.speech_rate == 0.5
    assert cfg.completion_policy == "engine"
    assert cfg.completion_delay == 5.0


def test_save_and_load(tmp_path):
    path = tmp_path / "sub" / "config.json"
    cfg = AppConfig(enable_audio=False, completion_policy="timed", preferences_path=str(tmp_path / "p.json"))
    save_config(cfg, path)
    assert load_config(path) == cfg


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"voice_name": "Puck", "model": "gpt-4o-mini"}), encoding="utf-8")
    with caplog.at_level("WARNING"):
        cfg = load_config(path)
    assert cfg.voice_name == "Puck"
    assert "model" in caplog.text


def test_invalid_json_gives_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{", encoding="utf-8")
    with caplog.at_level("ERROR"):
        assert load_config(path) == AppConfig()
    assert "Invalid config file" in caplog.text


def test_invalid_utf8_gives_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_bytes(b'{"voice_name": "\xff"}')
    with caplog.at_level("ERROR"):
        assert load_config(path) == AppConfig()
    assert "Invalid config file" in caplog.text


def test_completion_policy_is_normalized(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"completion_policy": "Timed "}), encoding="utf-8")
    assert load_config(path).completion_policy == "timed"


def test_unknown_completion_policy_falls_back_to_engine(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"completion_policy": "whenever", "voice_name": "Puck"}), encoding="utf-8")
    with caplog.at_level("WARNING"):
        cfg = load_config(path)
    assert cfg.completion_policy == "engine"
    assert cfg.voice_name == "Puck"
    assert "Unknown completion policy" in caplog.text
