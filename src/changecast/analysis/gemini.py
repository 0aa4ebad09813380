"""Changelog analysis via Gemini structured JSON output."""

from __future__ import annotations

import json
import logging
import os

import httpx
from pydantic import ValidationError

from changecast.analysis.schema import ChangelogAnalysis
from changecast.errors import AnalysisParseError, AnalysisProviderError, AnalysisUnavailable
from changecast.gemini import GEMINI_BASE_URL, first_part, post_generate_content

__all__ = ["ANALYSIS_MODEL", "ANALYSIS_PROMPT", "GeminiAnalyzer", "parse_analysis"]

logger = logging.getLogger(__name__)

ANALYSIS_MODEL = "gemini-3-flash-preview"

ANALYSIS_PROMPT = """You are an expert at analyzing Claude Code changelogs. Analyze the following changelog and return JSON with this exact structure:

{
  "tldr": "150-200 word summary for busy developers highlighting the most important changes",
  "categories": {
    "critical_breaking_changes": ["list of breaking changes that require immediate action"],
    "removals": [{"feature": "name", "severity": "critical|high|medium|low", "why": "reason for removal"}],
    "major_features": ["list of significant new features"],
    "important_fixes": ["list of notable bug fixes"],
    "new_slash_commands": ["list of new slash commands if any"],
    "terminal_improvements": ["list of terminal/CLI improvements"],
    "api_changes": ["list of API-related changes"]
  },
  "action_items": ["specific actions developers should take based on these changes"],
  "sentiment": "positive|neutral|critical"
}

Be thorough but concise. Focus on what developers need to know to update their workflows.

Changelog to analyze:
"""


def parse_analysis(text: str) -> ChangelogAnalysis:
    """Parse and validate the model's JSON reply.

    Raises:
        AnalysisParseError: If ``text`` is not JSON or does not match the schema.
    """

    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AnalysisParseError("Failed to parse analysis response as JSON") from exc
    try:
        return ChangelogAnalysis.model_validate(obj)
    except ValidationError as exc:
        raise AnalysisParseError(f"Analysis response has unexpected shape: {exc}") from exc


class GeminiAnalyzer:
    """Summarize changelog text into a :class:`ChangelogAnalysis`.

    Attributes:
        api_key: Gemini API key; read from ``GEMINI_API_KEY`` when omitted.
        model: Model identifier.
        temperature: Sampling temperature.
        timeout: Request timeout in seconds.
        client: Optional shared client.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = ANALYSIS_MODEL,
        base_url: str = GEMINI_BASE_URL,
        temperature: float = 1.0,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("GEMINI_API_KEY", "")
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.timeout = timeout
        self.client = client

    async def _post(self, client: httpx.AsyncClient, changelog_text: str) -> httpx.Response:
        body = {
            "contents": [{"parts": [{"text": ANALYSIS_PROMPT + changelog_text}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": self.temperature,
            },
        }
        return await post_generate_content(
            client, model=self.model, api_key=self.api_key, body=body, base_url=self.base_url
        )

    async def analyze(self, changelog_text: str) -> ChangelogAnalysis:
        """Request an analysis of ``changelog_text``.

        Args:
            changelog_text: Markdown digest of the versions to analyze.

        Returns:
            The validated analysis.

        Raises:
            AnalysisUnavailable: If no API key is configured.
            AnalysisProviderError: On transport failure, non-2xx status or an
                empty reply.
            AnalysisParseError: If the reply is not the expected JSON.
        """

        if not self.api_key:
            raise AnalysisUnavailable("Gemini API key not configured")

        try:
            if self.client is not None:
                response = await self._post(self.client, changelog_text)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, changelog_text)
        except httpx.HTTPError as exc:
            raise AnalysisProviderError(f"Analysis request failed: {exc}") from exc

        if not response.is_success:
            raise AnalysisProviderError(
                f"Gemini API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise AnalysisProviderError("Gemini API returned a non-JSON body") from exc

        text = first_part(data).get("text")
        if not text:
            raise AnalysisProviderError("No response from Gemini API")
        analysis = parse_analysis(text)
        logger.info("Analysis received (sentiment=%s)", analysis.sentiment)
        return analysis
