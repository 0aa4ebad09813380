"""User playback preferences and their persistence port."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from changecast.types import DEFAULT_VOICE, is_known_voice

__all__ = [
    "is_valid_speed",
    "UserPreferences",
    "PreferencesStore",
    "MemoryPreferencesStore",
    "JsonPreferencesStore",
]

logger = logging.getLogger(__name__)


def is_valid_speed(speed: float) -> bool:
    """Return ``True`` for a positive, finite playback rate."""
    return math.isfinite(speed) and speed > 0


@dataclass(frozen=True)
class UserPreferences:
    """Selected narration voice and playback speed."""

    voice: str = DEFAULT_VOICE
    playback_speed: float = 1.0

    def with_voice(self, voice: str) -> UserPreferences:
        return replace(self, voice=voice)

    def with_speed(self, speed: float) -> UserPreferences:
        return replace(self, playback_speed=float(speed))

    def to_dict(self) -> dict[str, Any]:
        return {"voicePreference": self.voice, "playbackSpeed": self.playback_speed}

    @classmethod
    def from_dict(cls, data: dict[str, Any], default: UserPreferences | None = None) -> UserPreferences:
        """Build preferences from stored values, falling back per field.

        Unknown voices and unparsable, non-finite or non-positive speeds are
        ignored.
        """

        base = default or cls()
        voice = data.get("voicePreference")
        if not isinstance(voice, str) or not is_known_voice(voice):
            voice = base.voice
        try:
            speed = float(data.get("playbackSpeed", base.playback_speed))
        except (TypeError, ValueError):
            speed = base.playback_speed
        if not is_valid_speed(speed):
            speed = base.playback_speed
        return cls(voice=voice, playback_speed=speed)


class PreferencesStore:
    """Key-value persistence port for :class:`UserPreferences`."""

    def load(self, default: UserPreferences | None = None) -> UserPreferences:
        raise NotImplementedError

    def save(self, prefs: UserPreferences) -> None:
        raise NotImplementedError


class MemoryPreferencesStore(PreferencesStore):
    """Keeps preferences in memory; handy for tests and one-shot CLI runs."""

    def __init__(self, initial: UserPreferences | None = None) -> None:
        self.saved: UserPreferences | None = initial

    def load(self, default: UserPreferences | None = None) -> UserPreferences:
        return self.saved or default or UserPreferences()

    def save(self, prefs: UserPreferences) -> None:
        self.saved = prefs


class JsonPreferencesStore(PreferencesStore):
    """Stores preferences in a small JSON file.

    Attributes:
        path: Location of the JSON document.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self, default: UserPreferences | None = None) -> UserPreferences:
        base = default or UserPreferences()
        if not self.path.exists():
            return base
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable preferences %s: %s", self.path, exc)
            return base
        if not isinstance(data, dict):
            return base
        return UserPreferences.from_dict(data, default=base)

    def save(self, prefs: UserPreferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(prefs.to_dict(), indent=2), encoding="utf-8")
