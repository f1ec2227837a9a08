"""Google GenAI client creation for speech synthesis.

API key resolution and client caching live here so the speech engine never
touches the SDK constructor directly and tests have one place to patch.
"""
from __future__ import annotations

import os
import logging
from google import genai
from google.genai import types, errors

from utils import get_user_env_var

logger = logging.getLogger(__name__)

API_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

# Cached client instance and the key used to create it
client: genai.Client | None = None
_client_key: str | None = None


def resolve_api_key() -> str:
    """Return the first API key found.

    Each name in :data:`API_KEY_VARS` is looked up in the process environment
    and then through :func:`utils.get_user_env_var`.  An empty string means no
    key is configured.
    """
    for name in API_KEY_VARS:
        key = (os.environ.get(name) or get_user_env_var(name) or "").strip()
        if key:
            return key
    return ""


def ensure_client() -> genai.Client | None:
    """Return a client for the current key, or ``None`` without one.

    The client is cached and rebuilt only when the key changes.
    """
    global client, _client_key
    key = resolve_api_key()
    if not key:
        client = None
        _client_key = None
        return None
    if client is None or key != _client_key:
        try:
            client = genai.Client(api_key=key)
            _client_key = key
        except (getattr(errors, "APIError", Exception), Exception) as exc:
            logger.error("Failed to create GenAI client: %s", exc)
            client = None
            _client_key = None
            return None
    return client


__all__ = [
    "API_KEY_VARS",
    "client",
    "ensure_client",
    "resolve_api_key",
    "types",
    "errors",
    "genai",
]
