"""Wire settings into ready-to-use orchestrator, pipeline and controller."""

from __future__ import annotations

import httpx

from changecast.analysis.gemini import GeminiAnalyzer
from changecast.audio.gemini_tts import GeminiSpeechProvider
from changecast.audio.pipeline import AudioPipeline
from changecast.cache.store import (
    AnalysisCache,
    AudioCache,
    CacheBackend,
    CacheStoreClient,
    MemoryCacheStore,
)
from changecast.config import Settings
from changecast.ingest.fetcher import RetryingFetcher
from changecast.orchestrator import ChangelogOrchestrator
from changecast.playback.controller import PlaybackController
from changecast.playback.preferences import JsonPreferencesStore, UserPreferences

__all__ = ["build_backend", "build_orchestrator", "build_pipeline", "build_controller"]


def build_backend(settings: Settings, client: httpx.AsyncClient | None = None) -> CacheBackend:
    """HTTP cache store when ``cache_url`` is set, else an in-process store."""

    if settings.cache_url:
        return CacheStoreClient(settings.cache_url, client=client, timeout=settings.http_timeout)
    return MemoryCacheStore()


def build_orchestrator(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    backend: CacheBackend | None = None,
) -> ChangelogOrchestrator:
    return ChangelogOrchestrator(
        fetcher=RetryingFetcher(client=client, timeout=settings.http_timeout),
        analyzer=GeminiAnalyzer(
            api_key=settings.gemini_api_key, timeout=settings.http_timeout, client=client
        ),
        cache=AnalysisCache(backend or build_backend(settings, client)),
        url=settings.changelog_url,
        max_attempts=settings.fetch_attempts,
    )


def build_pipeline(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    backend: CacheBackend | None = None,
) -> AudioPipeline:
    provider = GeminiSpeechProvider(
        api_key=settings.gemini_api_key, timeout=settings.http_timeout, client=client
    )
    return AudioPipeline(provider, AudioCache(backend or build_backend(settings, client)))


def build_controller(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    backend: CacheBackend | None = None,
) -> PlaybackController:
    return PlaybackController(
        build_pipeline(settings, client, backend),
        JsonPreferencesStore(settings.prefs_path),
        default_preferences=UserPreferences(voice=settings.default_voice),
    )
