"""Audio elements: the playable handle the controller drives.

An element wraps one WAV resource and exposes the small surface a media
element offers: ``play``/``pause``, a seekable ``current_time``, a
``playback_rate`` and the ``duration`` read from the file header. Elements do
not emit events; :class:`~changecast.playback.controller.PlaybackController`
polls them through ``tick()``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

import soundfile as sf

from changecast.errors import PlaybackError

__all__ = ["AudioElement", "ClockAudioElement", "ElementFactory"]


class AudioElement:
    """Abstract base class for playable audio resources.

    Subclasses must implement every method; the base raises
    :class:`NotImplementedError`.
    """

    def load(self) -> None:
        """Decode metadata. Raises :class:`PlaybackError` if undecodable."""
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    @property
    def duration(self) -> float:
        raise NotImplementedError

    @property
    def current_time(self) -> float:
        raise NotImplementedError

    @current_time.setter
    def current_time(self, value: float) -> None:
        raise NotImplementedError

    @property
    def playback_rate(self) -> float:
        raise NotImplementedError

    @playback_rate.setter
    def playback_rate(self, value: float) -> None:
        raise NotImplementedError

    @property
    def paused(self) -> bool:
        raise NotImplementedError

    @property
    def ended(self) -> bool:
        raise NotImplementedError


ElementFactory = Callable[[Path], AudioElement]


class ClockAudioElement(AudioElement):
    """Element that advances its position on a monotonic clock.

    The file is validated and measured with :mod:`soundfile`; position is
    ``offset + elapsed * playback_rate`` while playing, clamped to the
    duration. Useful headless and in tests (inject ``clock``).

    Attributes:
        path: WAV file to play.
        clock: Monotonic time source in seconds.
    """

    def __init__(self, path: Path, clock: Callable[[], float] = time.monotonic) -> None:
        self.path = Path(path)
        self.clock = clock
        self._duration = 0.0
        self._offset = 0.0
        self._started_at: float | None = None
        self._rate = 1.0
        self._loaded = False

    def load(self) -> None:
        try:
            info = sf.info(str(self.path))
        except (RuntimeError, OSError) as exc:  # soundfile raises LibsndfileError(RuntimeError)
            raise PlaybackError(f"Failed to decode audio {self.path.name}: {exc}") from exc
        self._duration = float(info.frames) / float(info.samplerate) if info.samplerate else 0.0
        self._loaded = True

    def _position(self) -> float:
        pos = self._offset
        if self._started_at is not None:
            pos += (self.clock() - self._started_at) * self._rate
        return min(pos, self._duration)

    def play(self) -> None:
        if not self._loaded:
            raise PlaybackError("element not loaded")
        if self._started_at is None:
            if self._position() >= self._duration:
                self._offset = 0.0
            self._started_at = self.clock()

    def pause(self) -> None:
        if self._started_at is not None:
            self._offset = self._position()
            self._started_at = None

    def close(self) -> None:
        self.pause()
        self._loaded = False

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def current_time(self) -> float:
        return self._position()

    @current_time.setter
    def current_time(self, value: float) -> None:
        self._offset = max(0.0, min(float(value), self._duration))
        if self._started_at is not None:
            self._started_at = self.clock()

    @property
    def playback_rate(self) -> float:
        return self._rate

    @playback_rate.setter
    def playback_rate(self, value: float) -> None:
        # Re-anchor so the rate change only affects time going forward.
        if self._started_at is not None:
            self._offset = self._position()
            self._started_at = self.clock()
        self._rate = float(value)

    @property
    def paused(self) -> bool:
        return self._started_at is None

    @property
    def ended(self) -> bool:
        return self._loaded and self._duration > 0 and self._position() >= self._duration
