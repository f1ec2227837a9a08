from __future__ import annotations

"""Application configuration handling."""

from dataclasses import dataclass, asdict, field, fields
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".voiceforall"
CONFIG_PATH = APP_DIR / "config.json"

COMPLETION_POLICIES = ("engine", "immediate", "timed")
DEFAULT_COMPLETION_POLICY = "engine"


@dataclass
class AppConfig:
    """User adjustable settings for the application."""

    enable_audio: bool = True
    tts_model: str = "gemini-2.5-flash-preview-tts"
    voice_name: str = "Kore"
    # Slower than normal speech for rural listeners.
    speech_rate: float = 0.5
    speech_pitch: float = 1.0
    completion_policy: str = DEFAULT_COMPLETION_POLICY
    completion_delay: float = 5.0
    preferences_path: str = field(default_factory=lambda: str(APP_DIR / "preferences.json"))


def load_config(path: str | Path = CONFIG_PATH) -> AppConfig:
    """Load configuration from *path*.

    Returns a default :class:`AppConfig` if the file is missing or is not
    valid JSON.  Unknown keys are logged and ignored, and an unknown
    completion policy is replaced by the default.
    """

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return AppConfig()
    except ValueError as exc:
        logger.error("Invalid config file %s: %s", path, exc)
        return AppConfig()
    if not isinstance(data, dict):
        logger.error("Invalid config file %s: not a JSON object", path)
        return AppConfig()

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    cfg = AppConfig(**{k: v for k, v in data.items() if k in known})

    policy = str(cfg.completion_policy).strip().lower()
    if policy not in COMPLETION_POLICIES:
        logger.warning(
            "Unknown completion policy %r; using %r", cfg.completion_policy, DEFAULT_COMPLETION_POLICY
        )
        policy = DEFAULT_COMPLETION_POLICY
    cfg.completion_policy = policy
    return cfg


def save_config(cfg: AppConfig, path: str | Path = CONFIG_PATH) -> None:
    """Persist *cfg* to *path* as JSON."""

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(cfg), f, indent=2)
