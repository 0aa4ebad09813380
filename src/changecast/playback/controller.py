"""State machine over the single active narration element.

States::

    IDLE --generate_and_play--> GENERATING --success--> PLAYING
    PLAYING <--play/pause--> PAUSED
    PLAYING --natural end--> PAUSED (position 0, label cleared)
    PLAYING/PAUSED --stop--> IDLE (position 0, label cleared; buffer kept)

``GENERATING`` is reported while any generation is pending, even if an
older buffer keeps playing underneath. Every :meth:`generate_and_play` call
takes a monotonically increasing token; a result whose token is no longer the
newest is discarded, so a slow earlier request cannot replace audio from a
later one.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any

from changecast.audio.pipeline import AudioPipeline
from changecast.errors import ChangecastError, PlaybackError
from changecast.playback.element import AudioElement, ClockAudioElement, ElementFactory
from changecast.playback.preferences import PreferencesStore, UserPreferences, is_valid_speed
from changecast.types import is_known_voice

__all__ = ["PlaybackState", "PlaybackController", "format_time"]

logger = logging.getLogger(__name__)

PLAYBACK_FAILED = "Failed to play audio"


class PlaybackState(str, enum.Enum):
    IDLE = "idle"
    GENERATING = "generating"
    PAUSED = "paused"
    PLAYING = "playing"


def format_time(seconds: float) -> str:
    """Format seconds as ``m:ss``."""
    total = int(max(0.0, seconds))
    return f"{total // 60}:{total % 60:02d}"


class PlaybackController:
    """Drive generation and playback of one active audio buffer.

    Attributes:
        pipeline: Produces WAV bytes and owns the local blob resource.
        preferences_store: Persistence port for voice and speed.
        element_factory: Builds an :class:`AudioElement` for a blob path.
    """

    def __init__(
        self,
        pipeline: AudioPipeline,
        preferences_store: PreferencesStore,
        element_factory: ElementFactory = ClockAudioElement,
        default_preferences: UserPreferences | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.preferences_store = preferences_store
        self.element_factory = element_factory
        self.preferences = preferences_store.load(default_preferences)

        self._state = PlaybackState.IDLE
        self._element: AudioElement | None = None
        self._buffer: bytes | None = None
        self._token = 0
        self.generating_for: str | None = None
        self.playing_for: str | None = None
        self.current_time = 0.0
        self.duration = 0.0
        self.error: str | None = None

    # ------------------------------------------------------------------
    # Read-only views
    @property
    def state(self) -> PlaybackState:
        if self.generating_for is not None:
            return PlaybackState.GENERATING
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def has_audio(self) -> bool:
        return self._element is not None

    @property
    def playback_speed(self) -> float:
        return self.preferences.playback_speed

    @property
    def selected_voice(self) -> str:
        return self.preferences.voice

    @property
    def audio_url(self) -> str | None:
        blob = self.pipeline.current_blob
        return blob.url if blob is not None else None

    @property
    def progress(self) -> float:
        """Playback progress in percent (0 when nothing is loaded)."""
        return (self.current_time / self.duration) * 100 if self.duration > 0 else 0.0

    def snapshot(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "is_playing": self.is_playing,
            "current_time": self.current_time,
            "duration": self.duration,
            "playback_speed": self.playback_speed,
            "selected_voice": self.selected_voice,
            "generating_for": self.generating_for,
            "playing_for": self.playing_for,
            "error": self.error,
        }

    # ------------------------------------------------------------------
    # Generation
    async def generate_and_play(self, text: str, label: str) -> bool:
        """Generate narration for ``text`` and start playing it.

        Errors never propagate: they are stored in :attr:`error` and the
        previously loaded audio stays usable.

        Args:
            text: Text to narrate.
            label: Caller-chosen label for the control that asked for audio.

        Returns:
            ``True`` if this call's audio became the active buffer.
        """

        self._token += 1
        token = self._token
        voice = self.preferences.voice
        self.generating_for = label
        self.error = None

        try:
            wav = await self.pipeline.generate(text, voice)
        except (ChangecastError, ValueError) as exc:
            if token == self._token:
                self.generating_for = None
                self.error = str(exc) or "Failed to generate audio"
            logger.warning("Audio generation for %r failed: %s", label, exc)
            return False

        if token != self._token:
            logger.info("Discarding stale audio for %r (superseded request)", label)
            return False
        self.generating_for = None
        return self._activate(wav, label)

    def _activate(self, wav: bytes, label: str) -> bool:
        self._teardown_element()
        element: AudioElement | None = None
        try:
            handle = self.pipeline.create_audio_url(wav)
            element = self.element_factory(handle.path)
            element.load()
            element.playback_rate = self.preferences.playback_speed
            element.play()
        except (PlaybackError, OSError) as exc:
            logger.error("Playback of %r failed: %s", label, exc)
            if element is not None:
                element.close()
            self._playback_failed()
            return False

        self._element = element
        self._buffer = wav
        self.duration = element.duration
        self.current_time = 0.0
        self._state = PlaybackState.PLAYING
        self.playing_for = label
        return True

    def _playback_failed(self) -> None:
        self._teardown_element()
        self._buffer = None
        self.error = PLAYBACK_FAILED
        self._state = PlaybackState.IDLE
        self.playing_for = None
        self.current_time = 0.0
        self.duration = 0.0

    def _teardown_element(self) -> None:
        if self._element is not None:
            self._element.pause()
            self._element.close()
            self._element = None
        self.pipeline.release()

    # ------------------------------------------------------------------
    # Transport controls
    def play(self) -> None:
        if self._element is None:
            return
        try:
            self._element.play()
        except PlaybackError as exc:
            logger.error("Resume failed: %s", exc)
            self._playback_failed()
            return
        self._state = PlaybackState.PLAYING

    def pause(self) -> None:
        if self._element is None:
            return
        self._element.pause()
        self.current_time = self._element.current_time
        self._state = PlaybackState.PAUSED

    def stop(self) -> None:
        if self._element is None:
            return
        self._element.pause()
        self._element.current_time = 0.0
        self.current_time = 0.0
        self.playing_for = None
        self._state = PlaybackState.IDLE

    def seek(self, time_s: float) -> float:
        """Move to ``time_s`` clamped to ``[0, duration]``; returns the new position."""

        if self._element is None:
            return self.current_time
        target = max(0.0, min(float(time_s), self.duration))
        self._element.current_time = target
        self.current_time = target
        return target

    def tick(self) -> float:
        """Sync :attr:`current_time` from the element and handle natural end."""

        if self._element is None:
            return self.current_time
        if self._state is PlaybackState.PLAYING and self._element.ended:
            self._element.pause()
            self._element.current_time = 0.0
            self.current_time = 0.0
            self.playing_for = None
            self._state = PlaybackState.PAUSED
            return self.current_time
        self.current_time = self._element.current_time
        return self.current_time

    # ------------------------------------------------------------------
    # Preferences
    def set_playback_speed(self, speed: float) -> None:
        if not is_valid_speed(speed):
            raise ValueError(f"playback speed must be a positive finite number: {speed!r}")
        self.preferences = self.preferences.with_speed(speed)
        self.preferences_store.save(self.preferences)
        if self._element is not None:
            self._element.playback_rate = float(speed)

    def set_selected_voice(self, voice: str) -> None:
        """Persist ``voice``; only generations started afterwards use it."""

        if not is_known_voice(voice):
            raise ValueError(f"unknown voice: {voice}")
        self.preferences = self.preferences.with_voice(voice)
        self.preferences_store.save(self.preferences)

    # ------------------------------------------------------------------
    # Export and teardown
    def download(self, path: str | Path) -> bool:
        """Write the active WAV buffer to ``path``; ``False`` if none is loaded."""

        if self._buffer is None:
            return False
        self.pipeline.download(self._buffer, path)
        return True

    def close(self) -> None:
        """Release the element and blob resource; safe to call repeatedly."""

        self._teardown_element()
        self._buffer = None
        self._state = PlaybackState.IDLE
        self.playing_for = None
        self.current_time = 0.0
        self.duration = 0.0

    async def __aenter__(self) -> PlaybackController:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.close()
