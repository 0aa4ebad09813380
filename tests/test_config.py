from __future__ import annotations

from pathlib import Path

import pytest

from changecast.config import DEFAULT_PREFS_PATH, Settings
from changecast.factory import build_backend, build_controller, build_orchestrator
from changecast.cache.store import CacheStoreClient, MemoryCacheStore
from changecast.ingest.fetcher import DEFAULT_CHANGELOG_URL
from changecast.types import DEFAULT_VOICE

ENV_VARS = (
    "GEMINI_API_KEY",
    "CHANGECAST_CHANGELOG_URL",
    "CHANGECAST_CACHE_URL",
    "CHANGECAST_VOICE",
    "VOICE_PREFERENCE",
    "CHANGECAST_PREFS_PATH",
    "CHANGECAST_FETCH_ATTEMPTS",
    "CHANGECAST_HTTP_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.gemini_api_key == ""
    assert s.changelog_url == DEFAULT_CHANGELOG_URL
    assert s.cache_url == ""
    assert s.default_voice == DEFAULT_VOICE
    assert s.prefs_path == DEFAULT_PREFS_PATH
    assert s.fetch_attempts == 3
    assert s.http_timeout == 120.0


def test_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("GEMINI_API_KEY", "secret")
    clean_env.setenv("CHANGECAST_CACHE_URL", "http://localhost:8000/api")
    clean_env.setenv("VOICE_PREFERENCE", "Kore")
    clean_env.setenv("CHANGECAST_PREFS_PATH", str(tmp_path / "p.json"))
    clean_env.setenv("CHANGECAST_FETCH_ATTEMPTS", "0")
    clean_env.setenv("CHANGECAST_HTTP_TIMEOUT", "oops")
    s = Settings.from_env()
    assert s.gemini_api_key == "secret"
    assert s.default_voice == "Kore"
    assert s.prefs_path == tmp_path / "p.json"
    assert s.fetch_attempts == 1
    assert s.http_timeout == 120.0
    assert isinstance(build_backend(s), CacheStoreClient)


def test_unknown_voice_ignored(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("CHANGECAST_VOICE", "Nobody")
    assert Settings.from_env().default_voice == DEFAULT_VOICE


def test_factory_wiring(tmp_path: Path) -> None:
    s = Settings(gemini_api_key="k", prefs_path=tmp_path / "p.json", default_voice="Puck", fetch_attempts=5)
    assert isinstance(build_backend(s), MemoryCacheStore)
    orch = build_orchestrator(s)
    assert orch.max_attempts == 5
    assert orch.url == DEFAULT_CHANGELOG_URL
    controller = build_controller(s)
    assert controller.selected_voice == "Puck"
    assert controller.pipeline.provider.is_configured()
