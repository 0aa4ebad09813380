"""Cache store clients and best-effort cache wrappers.

Two layers live here:

* Store backends (:class:`CacheStoreClient` over HTTP and the in-process
  :class:`MemoryCacheStore`) speak the raw protocol and raise
  :class:`~changecast.errors.CacheIoError` on failure.
* :class:`AnalysisCache` and :class:`AudioCache` wrap a backend and never
  raise: failures are logged and reported as a miss (reads) or ``False``
  (writes). The cache is an optimisation; losing it must not block callers.

HTTP protocol of the cache store service::

    GET  /analysis/{hash}        200 {"analysis": {...}} | 404
    POST /analysis/{hash}        {"analysis": {...}}
    GET  /audio/{hash}/{voice}   200 audio/wav bytes | 404
    POST /audio                  {"textHash", "voice", "audioData": <base64>}
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from changecast.analysis.schema import ChangelogAnalysis
from changecast.errors import CacheIoError

__all__ = [
    "CacheBackend",
    "CacheStoreClient",
    "MemoryCacheStore",
    "AnalysisCache",
    "AudioCache",
]

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """Raw cache store operations shared by all backends."""

    async def get_analysis(self, key: str) -> dict[str, Any] | None: ...

    async def put_analysis(self, key: str, analysis: dict[str, Any]) -> None: ...

    async def get_audio(self, key: str, voice: str) -> bytes | None: ...

    async def put_audio(self, key: str, voice: str, wav: bytes) -> None: ...


class CacheStoreClient:
    """Async HTTP client for the cache store service.

    Attributes:
        base_url: Root URL of the service (e.g. ``http://localhost:8000/api``).
        client: Optional shared :class:`httpx.AsyncClient`.
        timeout: Request timeout for owned clients.
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *(quote(p, safe="") for p in parts)])

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            if self.client is not None:
                return await self.client.request(method, url, **kwargs)
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise CacheIoError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _check(response: httpx.Response) -> None:
        if not response.is_success:
            raise CacheIoError(
                f"{response.request.method} {response.request.url} returned "
                f"{response.status_code}: {response.text[:200]}"
            )

    async def get_analysis(self, key: str) -> dict[str, Any] | None:
        response = await self._request("GET", self._url("analysis", key))
        if response.status_code == 404:
            return None
        self._check(response)
        try:
            data = response.json()
        except ValueError as exc:
            raise CacheIoError("cache store returned a non-JSON analysis body") from exc
        analysis = data.get("analysis") if isinstance(data, dict) else None
        return analysis if isinstance(analysis, dict) else None

    async def put_analysis(self, key: str, analysis: dict[str, Any]) -> None:
        response = await self._request(
            "POST", self._url("analysis", key), json={"analysis": analysis}
        )
        self._check(response)

    async def get_audio(self, key: str, voice: str) -> bytes | None:
        response = await self._request("GET", self._url("audio", key, voice))
        if response.status_code == 404:
            return None
        self._check(response)
        return response.content or None

    async def put_audio(self, key: str, voice: str, wav: bytes) -> None:
        payload = {
            "textHash": key,
            "voice": voice,
            "audioData": base64.b64encode(wav).decode("ascii"),
        }
        response = await self._request("POST", self._url("audio"), json=payload)
        self._check(response)


class MemoryCacheStore:
    """In-process cache backend; contents are lost when the process exits."""

    def __init__(self) -> None:
        self.analyses: dict[str, dict[str, Any]] = {}
        self.audio: dict[tuple[str, str], bytes] = {}

    async def get_analysis(self, key: str) -> dict[str, Any] | None:
        return self.analyses.get(key)

    async def put_analysis(self, key: str, analysis: dict[str, Any]) -> None:
        self.analyses[key] = analysis

    async def get_audio(self, key: str, voice: str) -> bytes | None:
        return self.audio.get((key, voice))

    async def put_audio(self, key: str, voice: str, wav: bytes) -> None:
        self.audio[(key, voice)] = bytes(wav)


class AnalysisCache:
    """Best-effort cache of analyses keyed by content hash."""

    def __init__(self, backend: CacheBackend) -> None:
        self.backend = backend

    async def get(self, key: str) -> ChangelogAnalysis | None:
        """Return the cached analysis for ``key`` or ``None`` on miss/failure."""

        try:
            raw = await self.backend.get_analysis(key)
        except CacheIoError as exc:
            logger.warning("Analysis cache read failed for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return ChangelogAnalysis.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Ignoring malformed cached analysis %s: %s", key, exc)
            return None

    async def set(self, key: str, analysis: ChangelogAnalysis) -> bool:
        """Store ``analysis`` under ``key``; returns ``False`` if the write failed."""

        try:
            await self.backend.put_analysis(key, analysis.model_dump(mode="json"))
        except CacheIoError as exc:
            logger.error("Failed to cache analysis %s: %s", key, exc)
            return False
        return True


class AudioCache:
    """Best-effort cache of WAV bytes keyed by ``(hash, voice)``."""

    def __init__(self, backend: CacheBackend) -> None:
        self.backend = backend

    async def get(self, key: str, voice: str) -> bytes | None:
        try:
            return await self.backend.get_audio(key, voice)
        except CacheIoError as exc:
            logger.warning("Audio cache read failed for %s/%s: %s", key, voice, exc)
            return None

    async def set(self, key: str, voice: str, wav: bytes) -> bool:
        try:
            await self.backend.put_audio(key, voice, wav)
        except CacheIoError as exc:
            logger.error("Failed to cache audio %s/%s: %s", key, voice, exc)
            return False
        logger.debug("Audio cached (%s/%s, %d bytes)", key, voice, len(wav))
        return True
