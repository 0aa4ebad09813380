from __future__ import annotations

import json

import httpx
import pytest

from changecast.analysis.gemini import ANALYSIS_PROMPT, GeminiAnalyzer, parse_analysis
from changecast.audio.gemini_tts import NARRATION_PREFIX, TTS_MODEL, GeminiSpeechProvider
from changecast.errors import (
    AnalysisParseError,
    AnalysisProviderError,
    AnalysisUnavailable,
    TtsProviderError,
    TtsUnavailable,
)

pytestmark = pytest.mark.anyio


def _reply(part: dict) -> dict:
    return {"candidates": [{"content": {"parts": [part]}}]}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_tts_request_shape_and_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_reply({"inlineData": {"mimeType": "audio/L16", "data": "AAAA"}}))

    async with _client(handler) as http:
        provider = GeminiSpeechProvider(api_key="k", client=http)
        assert await provider.synthesize("Hello", "Kore") == "AAAA"

    req = seen[0]
    assert req.url.path.endswith(f"/{TTS_MODEL}:generateContent")
    assert req.url.params["key"] == "k"
    body = json.loads(req.content)
    assert body["contents"][0]["parts"][0]["text"] == NARRATION_PREFIX + "Hello"
    assert body["generationConfig"]["responseModalities"] == ["AUDIO"]
    voice_cfg = body["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
    assert voice_cfg == {"voiceName": "Kore"}


async def test_tts_missing_audio_returns_empty() -> None:
    async with _client(lambda r: httpx.Response(200, json={"candidates": []})) as http:
        assert await GeminiSpeechProvider(api_key="k", client=http).synthesize("x", "Kore") == ""


async def test_tts_error_status() -> None:
    async with _client(lambda r: httpx.Response(429, text="quota")) as http:
        with pytest.raises(TtsProviderError) as info:
            await GeminiSpeechProvider(api_key="k", client=http).synthesize("x", "Kore")
    assert info.value.status_code == 429


async def test_tts_requires_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    provider = GeminiSpeechProvider()
    assert not provider.is_configured()
    with pytest.raises(TtsUnavailable):
        await provider.synthesize("x", "Kore")


async def test_analyzer_parses_structured_reply() -> None:
    seen: list[httpx.Request] = []
    payload = {
        "tldr": "Lots changed",
        "categories": {"major_features": ["Hooks"], "removals": [{"feature": "x", "severity": "high", "why": "y"}]},
        "action_items": ["Update"],
        "sentiment": "positive",
    }

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_reply({"text": json.dumps(payload)}))

    async with _client(handler) as http:
        analysis = await GeminiAnalyzer(api_key="k", client=http).analyze("## 1.0.0\n- Added x")

    assert analysis.tldr == "Lots changed"
    assert analysis.categories.removals[0].severity == "high"
    assert analysis.categories.api_changes == []
    body = json.loads(seen[0].content)
    assert body["contents"][0]["parts"][0]["text"] == ANALYSIS_PROMPT + "## 1.0.0\n- Added x"
    assert body["generationConfig"]["responseMimeType"] == "application/json"


async def test_analyzer_failures() -> None:
    async with _client(lambda r: httpx.Response(500, text="oops")) as http:
        with pytest.raises(AnalysisProviderError):
            await GeminiAnalyzer(api_key="k", client=http).analyze("x")
    async with _client(lambda r: httpx.Response(200, json={"candidates": []})) as http:
        with pytest.raises(AnalysisProviderError):
            await GeminiAnalyzer(api_key="k", client=http).analyze("x")
    async with _client(lambda r: httpx.Response(200, json=_reply({"text": "not json"}))) as http:
        with pytest.raises(AnalysisParseError):
            await GeminiAnalyzer(api_key="k", client=http).analyze("x")
    with pytest.raises(AnalysisUnavailable):
        await GeminiAnalyzer(api_key="").analyze("x")


def test_parse_analysis_validates_shape() -> None:
    assert parse_analysis("{}").sentiment == "neutral"
    with pytest.raises(AnalysisParseError):
        parse_analysis("[1, 2]")
    with pytest.raises(AnalysisParseError):
        parse_analysis('{"sentiment": "furious"}')
