"""Gemini text-to-speech provider."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from changecast.audio.tts_base import SpeechProvider
from changecast.errors import TtsProviderError, TtsUnavailable
from changecast.gemini import GEMINI_BASE_URL, first_part, post_generate_content

__all__ = ["GeminiSpeechProvider", "TTS_MODEL", "NARRATION_PREFIX"]

logger = logging.getLogger(__name__)

TTS_MODEL = "gemini-2.5-flash-preview-tts"
NARRATION_PREFIX = "Read this changelog summary in a clear, informative tone:\n\n"


class GeminiSpeechProvider(SpeechProvider):
    """Narrate text with a Gemini prebuilt voice.

    Attributes:
        api_key: Gemini API key; read from ``GEMINI_API_KEY`` when omitted.
        model: TTS model identifier.
        base_url: Models endpoint root.
        timeout: Request timeout in seconds.
        client: Optional shared client, otherwise one is opened per call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = TTS_MODEL,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("GEMINI_API_KEY", "")
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self.client = client

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _body(self, text: str, voice: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": NARRATION_PREFIX + text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}},
                },
            },
        }

    async def _post(self, client: httpx.AsyncClient, text: str, voice: str) -> httpx.Response:
        return await post_generate_content(
            client,
            model=self.model,
            api_key=self.api_key,
            body=self._body(text, voice),
            base_url=self.base_url,
        )

    async def synthesize(self, text: str, voice: str) -> str:
        if not self.is_configured():
            raise TtsUnavailable("Gemini API key not configured")

        try:
            if self.client is not None:
                response = await self._post(self.client, text, voice)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, text, voice)
        except httpx.HTTPError as exc:
            raise TtsProviderError(f"TTS request failed: {exc}") from exc

        if not response.is_success:
            raise TtsProviderError(
                f"TTS API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise TtsProviderError("TTS API returned a non-JSON body") from exc

        inline = first_part(data).get("inlineData") or {}
        payload = inline.get("data") if isinstance(inline, dict) else None
        if not payload:
            logger.debug("TTS response carried no inline audio: %s", str(data)[:200])
            return ""
        return str(payload)
