"""Narration pipeline: hash, cache lookup, synthesis, WAV encoding, cache store."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path

from changecast.audio.blobs import BlobHandle, BlobRegistry
from changecast.audio.tts_base import SpeechProvider
from changecast.audio.wav import pcm_duration_s, pcm_peak_dbfs, pcm_to_wav
from changecast.cache.hashing import hash_string
from changecast.cache.store import AudioCache
from changecast.errors import TtsEmptyResponse, TtsProviderError, TtsUnavailable
from logging_setup import log_call

__all__ = ["AudioPipeline"]

logger = logging.getLogger(__name__)


class AudioPipeline:
    """Turn text into cached WAV narration.

    Steps for :meth:`generate` run strictly in sequence::

        hash(text) -> cache[(hash, voice)] -> hit: return cached bytes
                                           -> miss: provider -> base64 decode
                                              -> pcm_to_wav -> cache store -> return

    A cache hit never calls the provider. Cache store failures are logged by
    :class:`AudioCache` and do not fail generation.

    The pipeline also owns at most one live :class:`BlobHandle` (the local
    resource a player opens); creating a new one releases the previous.

    Attributes:
        provider: Speech synthesis backend.
        cache: Audio cache keyed by ``(hash, voice)``.
        blobs: Registry creating the revocable local resources.
    """

    def __init__(
        self,
        provider: SpeechProvider,
        cache: AudioCache,
        blobs: BlobRegistry | None = None,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.blobs = blobs or BlobRegistry()
        self._current: BlobHandle | None = None

    @property
    def current_blob(self) -> BlobHandle | None:
        return self._current

    @log_call()
    async def generate(self, text: str, voice: str) -> bytes:
        """Return WAV narration of ``text`` spoken by ``voice``.

        Args:
            text: Text to narrate.
            voice: Prebuilt voice identifier; part of the cache key.

        Returns:
            Complete WAV file bytes.

        Raises:
            ValueError: If ``voice`` is empty.
            TtsUnavailable: If the provider has no credential configured.
            TtsProviderError: If the provider call fails or returns
                undecodable audio.
            TtsEmptyResponse: If the provider returns no audio payload.
        """

        if not voice or not voice.strip():
            raise ValueError("voice must be a non-empty voice name")
        if not self.provider.is_configured():
            raise TtsUnavailable("TTS provider credential not configured")

        key = hash_string(text)
        cached = await self.cache.get(key, voice)
        if cached:
            logger.info("Using cached audio %s/%s (%d bytes)", key, voice, len(cached))
            return cached

        payload = await self.provider.synthesize(text, voice)
        if not payload:
            raise TtsEmptyResponse("No audio data in response")
        try:
            pcm = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise TtsProviderError("TTS provider returned invalid base64 audio") from exc
        if not pcm:
            raise TtsEmptyResponse("No audio data in response")

        wav = pcm_to_wav(pcm)
        logger.info(
            "Generated %.1fs of audio for %s/%s (peak %.1f dBFS)",
            pcm_duration_s(pcm),
            key,
            voice,
            pcm_peak_dbfs(pcm),
        )
        await self.cache.set(key, voice, wav)
        return wav

    def create_audio_url(self, wav: bytes) -> BlobHandle:
        """Materialize ``wav`` as a local resource, releasing the previous one."""

        self.release()
        self._current = self.blobs.create(wav, suffix=".wav")
        return self._current

    def release(self) -> None:
        """Release the current local resource (idempotent)."""

        if self._current is not None:
            self.blobs.revoke(self._current)
            self._current = None

    @staticmethod
    def download(wav: bytes, path: str | Path) -> Path:
        """Write ``wav`` to ``path`` (parent directories are created)."""

        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(wav)
        return out
