"""Environment-driven runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from changecast.ingest.fetcher import DEFAULT_CHANGELOG_URL
from changecast.types import DEFAULT_VOICE, is_known_voice

__all__ = ["Settings", "DEFAULT_PREFS_PATH"]

DEFAULT_PREFS_PATH = Path.home() / ".config" / "changecast" / "preferences.json"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Runtime configuration.

    Attributes:
        gemini_api_key: Credential for analysis and TTS; empty disables both.
        changelog_url: Markdown changelog location.
        cache_url: Base URL of the cache store service; empty means an
            in-process cache.
        default_voice: Voice used when no preference has been saved.
        prefs_path: JSON file holding saved playback preferences.
        fetch_attempts: Attempts for the changelog fetch.
        http_timeout: Timeout in seconds for provider and cache requests.
    """

    gemini_api_key: str = ""
    changelog_url: str = DEFAULT_CHANGELOG_URL
    cache_url: str = ""
    default_voice: str = DEFAULT_VOICE
    prefs_path: Path = DEFAULT_PREFS_PATH
    fetch_attempts: int = 3
    http_timeout: float = 120.0

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``GEMINI_API_KEY`` and ``CHANGECAST_*`` variables.

        ``CHANGECAST_VOICE`` falls back to ``VOICE_PREFERENCE``; unknown voice
        names are ignored in favour of the default.
        """

        voice = os.getenv("CHANGECAST_VOICE") or os.getenv("VOICE_PREFERENCE") or DEFAULT_VOICE
        if not is_known_voice(voice):
            voice = DEFAULT_VOICE
        prefs = os.getenv("CHANGECAST_PREFS_PATH")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            changelog_url=os.getenv("CHANGECAST_CHANGELOG_URL") or DEFAULT_CHANGELOG_URL,
            cache_url=os.getenv("CHANGECAST_CACHE_URL", ""),
            default_voice=voice,
            prefs_path=Path(prefs).expanduser() if prefs else DEFAULT_PREFS_PATH,
            fetch_attempts=max(1, _env_int("CHANGECAST_FETCH_ATTEMPTS", 3)),
            http_timeout=_env_float("CHANGECAST_HTTP_TIMEOUT", 120.0),
        )
