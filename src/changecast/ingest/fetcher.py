"""HTTP fetching with exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from changecast.errors import FetchError

__all__ = ["DEFAULT_CHANGELOG_URL", "RetryingFetcher"]

logger = logging.getLogger(__name__)

DEFAULT_CHANGELOG_URL = "https://raw.githubusercontent.com/anthropics/claude-code/main/CHANGELOG.md"

Sleep = Callable[[float], Awaitable[object]]


class RetryingFetcher:
    """Fetch text resources, retrying failed attempts with backoff.

    Any transport failure or non-2xx status counts as a retryable failure;
    4xx and 5xx are treated alike. Before retry ``n`` (0-based index of the
    failed attempt) the fetcher waits ``2 ** n`` seconds. There is no wait
    after the final attempt and no jitter.

    Attributes:
        client: Optional shared :class:`httpx.AsyncClient`. When ``None`` a
            short-lived client is opened per call.
        sleep: Awaitable sleep function, injectable for tests.
        timeout: Per-request timeout in seconds for owned clients.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
        timeout: float = 30.0,
    ) -> None:
        self.client = client
        self.sleep = sleep
        self.timeout = timeout

    async def _get_text(self, client: httpx.AsyncClient, url: str) -> str:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.text

    async def fetch_with_retry(self, url: str, max_attempts: int = 3) -> str:
        """Return the body of ``url``, retrying up to ``max_attempts`` times.

        Args:
            url: Resource to fetch.
            max_attempts: Total number of attempts, at least 1.

        Returns:
            The decoded response body.

        Raises:
            ValueError: If ``max_attempts`` is less than 1.
            FetchError: If every attempt failed; chained to the last error.
        """

        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        if self.client is not None:
            return await self._attempt_all(self.client, url, max_attempts)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._attempt_all(client, url, max_attempts)

    async def _attempt_all(self, client: httpx.AsyncClient, url: str, max_attempts: int) -> str:
        last_error: Exception | None = None
        for attempt in range(max_attempts):
            try:
                return await self._get_text(client, url)
            except httpx.HTTPError as exc:
                last_error = exc
                logger.warning(
                    "Fetch attempt %d/%d for %s failed: %s", attempt + 1, max_attempts, url, exc
                )
                if attempt < max_attempts - 1:
                    await self.sleep(2**attempt)
        raise FetchError(
            f"Failed to fetch {url} after {max_attempts} attempts: {last_error}",
            url=url,
            attempts=max_attempts,
        ) from last_error

    async def fetch_changelog(
        self, url: str = DEFAULT_CHANGELOG_URL, max_attempts: int = 3
    ) -> str:
        """Fetch the changelog markdown (defaults to the upstream CHANGELOG.md)."""

        return await self.fetch_with_retry(url, max_attempts=max_attempts)
