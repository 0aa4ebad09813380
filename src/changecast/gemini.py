"""Shared helpers for the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

from typing import Any

import httpx

__all__ = ["GEMINI_BASE_URL", "endpoint_url", "post_generate_content", "first_part"]

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


def endpoint_url(model: str, base_url: str = GEMINI_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{model}:generateContent"


async def post_generate_content(
    client: httpx.AsyncClient,
    *,
    model: str,
    api_key: str,
    body: dict[str, Any],
    base_url: str = GEMINI_BASE_URL,
) -> httpx.Response:
    """POST ``body`` to the model's ``generateContent`` endpoint.

    The key is sent as the ``key`` query parameter. The response is returned
    without status checks so callers can map failures to their own errors.

    Raises:
        httpx.HTTPError: On transport failures.
    """

    return await client.post(
        endpoint_url(model, base_url),
        params={"key": api_key},
        headers={"Content-Type": "application/json"},
        json=body,
    )


def first_part(data: Any) -> dict[str, Any]:
    """Return ``candidates[0].content.parts[0]`` or an empty dict."""

    try:
        part = data["candidates"][0]["content"]["parts"][0]
    except (KeyError, IndexError, TypeError):
        return {}
    return part if isinstance(part, dict) else {}
