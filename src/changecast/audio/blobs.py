"""Revocable local resources for generated audio.

A :class:`BlobHandle` is the file-system equivalent of a browser object URL:
a temporary file holding a WAV buffer that players can open by path. Handles
must be revoked once replaced so repeated generations do not leak files.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

__all__ = ["BlobHandle", "BlobRegistry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobHandle:
    """Reference to a live blob.

    Attributes:
        path: Location of the temporary file.
        size: Number of bytes written.
    """

    path: Path
    size: int

    @property
    def url(self) -> str:
        return self.path.as_uri()


class BlobRegistry:
    """Create and revoke temporary audio files.

    Attributes:
        root: Directory holding blobs; a private temp directory when ``None``.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root
        self._lock = threading.Lock()
        self._live: set[Path] = set()

    def _dir(self) -> Path:
        if self.root is None:
            self.root = Path(tempfile.mkdtemp(prefix="changecast-"))
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def create(self, data: bytes, suffix: str = ".wav") -> BlobHandle:
        """Write ``data`` to a fresh temporary file and track it."""

        fd, name = tempfile.mkstemp(suffix=suffix, dir=self._dir())
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        path = Path(name)
        with self._lock:
            self._live.add(path)
        return BlobHandle(path=path, size=len(data))

    def revoke(self, handle: BlobHandle | None) -> None:
        """Delete the file behind ``handle``; unknown or ``None`` is a no-op."""

        if handle is None:
            return
        with self._lock:
            if handle.path not in self._live:
                return
            self._live.discard(handle.path)
        try:
            handle.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove blob %s: %s", handle.path, exc)

    def revoke_all(self) -> None:
        """Revoke every live blob."""

        with self._lock:
            paths = list(self._live)
        for path in paths:
            self.revoke(BlobHandle(path=path, size=0))

    @property
    def live_count(self) -> int:
        with self._lock:
            return len(self._live)
