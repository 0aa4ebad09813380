from __future__ import annotations

import base64
import json

import httpx
import pytest

from changecast.analysis.schema import ChangelogAnalysis
from changecast.cache.store import AnalysisCache, AudioCache, CacheStoreClient, MemoryCacheStore
from changecast.errors import CacheIoError

pytestmark = pytest.mark.anyio

BASE = "http://cache.test/api"


def _analysis() -> ChangelogAnalysis:
    return ChangelogAnalysis.model_validate(
        {
            "tldr": "Short summary",
            "categories": {"major_features": ["MCP"], "removals": [{"feature": "old", "severity": "low"}]},
            "action_items": ["Upgrade"],
            "sentiment": "positive",
        }
    )


class _FailingBackend:
    async def get_analysis(self, key):
        raise CacheIoError("down")

    async def put_analysis(self, key, analysis):
        raise CacheIoError("down")

    async def get_audio(self, key, voice):
        raise CacheIoError("down")

    async def put_audio(self, key, voice, wav):
        raise CacheIoError("down")


async def test_client_speaks_the_store_protocol() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/api/analysis/22ci":
            return httpx.Response(200, json={"analysis": {"tldr": "cached"}})
        if request.method == "GET" and path.startswith("/api/analysis/"):
            return httpx.Response(404, json={"detail": "Not found"})
        if request.method == "POST" and path.startswith("/api/analysis/"):
            return httpx.Response(200, json={"success": True})
        if request.method == "GET" and path == "/api/audio/22ci/Kore":
            return httpx.Response(200, content=b"RIFF....", headers={"Content-Type": "audio/wav"})
        if request.method == "GET":
            return httpx.Response(404)
        if request.method == "POST" and path == "/api/audio":
            return httpx.Response(200, json={"success": True, "size": 8})
        return httpx.Response(405)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        store = CacheStoreClient(BASE, client=http)
        assert await store.get_analysis("22ci") == {"tldr": "cached"}
        assert await store.get_analysis("zzz") is None
        await store.put_analysis("abc", {"tldr": "x"})
        assert await store.get_audio("22ci", "Kore") == b"RIFF...."
        assert await store.get_audio("22ci", "Puck") is None
        await store.put_audio("22ci", "Kore", b"RIFF....")

    post_analysis = requests[2]
    assert json.loads(post_analysis.content) == {"analysis": {"tldr": "x"}}
    post_audio = requests[-1]
    body = json.loads(post_audio.content)
    assert body["textHash"] == "22ci"
    assert body["voice"] == "Kore"
    assert base64.b64decode(body["audioData"]) == b"RIFF...."


async def test_client_maps_failures_to_cache_io_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/api/audio/"):
            raise httpx.ConnectError("refused")
        return httpx.Response(500, text="kaput")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        store = CacheStoreClient(BASE, client=http)
        with pytest.raises(CacheIoError):
            await store.get_analysis("k")
        with pytest.raises(CacheIoError):
            await store.put_audio("k", "Kore", b"x")
        with pytest.raises(CacheIoError):
            await store.get_audio("k", "Kore")


async def test_analysis_cache_round_trip_in_memory() -> None:
    cache = AnalysisCache(MemoryCacheStore())
    assert await cache.get("k") is None
    assert await cache.set("k", _analysis()) is True
    got = await cache.get("k")
    assert got == _analysis()


async def test_malformed_cached_analysis_is_a_miss() -> None:
    backend = MemoryCacheStore()
    backend.analyses["k"] = {"sentiment": "ecstatic"}
    assert await AnalysisCache(backend).get("k") is None


async def test_audio_cache_is_keyed_by_voice() -> None:
    backend = MemoryCacheStore()
    cache = AudioCache(backend)
    assert await cache.set("h", "Kore", b"one") is True
    assert await cache.get("h", "Kore") == b"one"
    assert await cache.get("h", "Puck") is None


async def test_backend_failures_never_propagate() -> None:
    analysis_cache = AnalysisCache(_FailingBackend())
    audio_cache = AudioCache(_FailingBackend())
    assert await analysis_cache.get("k") is None
    assert await analysis_cache.set("k", _analysis()) is False
    assert await audio_cache.get("k", "Kore") is None
    assert await audio_cache.set("k", "Kore", b"x") is False
