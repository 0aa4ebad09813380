"""Changelog refresh: fetch, parse, and cached AI analysis of recent versions."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from changecast.analysis.schema import ChangelogAnalysis
from changecast.cache.hashing import hash_string
from changecast.cache.store import AnalysisCache
from changecast.errors import AnalysisError, FetchError
from changecast.ingest.fetcher import DEFAULT_CHANGELOG_URL, RetryingFetcher
from changecast.ingest.parser import get_latest_version, parse_changelog, summarize_recent
from changecast.types import ChangelogVersion
from logging_setup import log_call

__all__ = ["Analyzer", "RefreshResult", "ChangelogOrchestrator", "RECENT_VERSION_COUNT"]

logger = logging.getLogger(__name__)

RECENT_VERSION_COUNT = 3


class Analyzer(Protocol):
    async def analyze(self, changelog_text: str) -> ChangelogAnalysis: ...


@dataclass
class RefreshResult:
    """Outcome of one :meth:`ChangelogOrchestrator.refresh` call.

    Attributes:
        versions: Parsed versions (empty when the fetch failed).
        analysis: Analysis of the recent versions, ``None`` if unavailable.
        error: User-facing message when the changelog could not be loaded.
        analysis_error: Message when analysis failed (changelog still usable).
        cache_hit: Whether the analysis came from the cache.
        summary_hash: Cache key of the recent-versions digest.
    """

    versions: list[ChangelogVersion] = field(default_factory=list)
    analysis: ChangelogAnalysis | None = None
    error: str | None = None
    analysis_error: str | None = None
    cache_hit: bool = False
    summary_hash: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def latest_version(self) -> str:
        return get_latest_version(self.versions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "latest_version": self.latest_version,
            "versions": [v.to_dict() for v in self.versions],
            "analysis": self.analysis.model_dump(mode="json") if self.analysis else None,
            "error": self.error,
            "analysis_error": self.analysis_error,
            "cache_hit": self.cache_hit,
            "summary_hash": self.summary_hash,
        }


class ChangelogOrchestrator:
    """Fetch the changelog and attach a cached analysis of its newest versions.

    Only the first :data:`RECENT_VERSION_COUNT` versions feed the analysis
    and its cache key, so edits to older entries do not invalidate a cached
    analysis.

    Attributes:
        fetcher: Retrying HTTP fetcher.
        analyzer: Analysis provider.
        cache: Analysis cache.
        url: Changelog location.
        max_attempts: Fetch attempts before giving up.
    """

    def __init__(
        self,
        fetcher: RetryingFetcher,
        analyzer: Analyzer,
        cache: AnalysisCache,
        url: str = DEFAULT_CHANGELOG_URL,
        max_attempts: int = 3,
    ) -> None:
        self.fetcher = fetcher
        self.analyzer = analyzer
        self.cache = cache
        self.url = url
        self.max_attempts = max_attempts

        self.raw_changelog: str | None = None
        self.versions: list[ChangelogVersion] = []
        self.analysis: ChangelogAnalysis | None = None
        self.is_loading = False
        self.is_analyzing = False
        self.error: str | None = None
        self.last_fetched: float | None = None

    @property
    def latest_version(self) -> str:
        return get_latest_version(self.versions)

    @log_call()
    async def refresh(self) -> RefreshResult:
        """Reload the changelog and its analysis. Never raises.

        Returns:
            The refresh outcome; observable attributes are updated as well.
        """

        self.is_loading = True
        self.error = None
        result = RefreshResult()
        try:
            try:
                markdown = await self.fetcher.fetch_with_retry(self.url, self.max_attempts)
            except FetchError as exc:
                logger.error("Changelog fetch failed: %s", exc)
                self.error = result.error = str(exc) or "Failed to load changelog"
                return result

            self.raw_changelog = markdown
            self.versions = result.versions = parse_changelog(markdown)
            self.last_fetched = time.time()
            logger.info(
                "Parsed %d versions (latest %s)", len(self.versions), self.latest_version
            )

            summary = summarize_recent(self.versions, RECENT_VERSION_COUNT)
            key = hash_string(summary)
            result.summary_hash = key

            cached = await self.cache.get(key)
            if cached is not None:
                logger.info("Using cached analysis %s", key)
                self.analysis = result.analysis = cached
                result.cache_hit = True
                return result

            await self._analyze(summary, key, result)
            return result
        finally:
            self.is_loading = False

    async def _analyze(self, summary: str, key: str, result: RefreshResult) -> None:
        self.is_analyzing = True
        try:
            analysis = await self.analyzer.analyze(summary)
        except AnalysisError as exc:
            logger.error("Analysis failed: %s", exc)
            self.analysis = None
            result.analysis_error = str(exc)
            return
        finally:
            self.is_analyzing = False

        self.analysis = result.analysis = analysis
        # Fire-and-forget: a failed store is logged by the cache and ignored.
        await self.cache.set(key, analysis)
