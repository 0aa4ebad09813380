"""Command-line interface for changecast.

Usage::

    changecast refresh [--json] [--limit N]
    changecast latest
    changecast speak "text" --out narration.wav [--voice Puck]
    changecast voices
    changecast serve [--host 127.0.0.1] [--port 8000]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections import Counter
from pathlib import Path

from changecast.audio.pipeline import AudioPipeline
from changecast.config import Settings
from changecast.errors import FetchError, TtsError
from changecast.factory import build_orchestrator, build_pipeline
from changecast.ingest.fetcher import RetryingFetcher
from changecast.ingest.parser import get_latest_version, parse_changelog
from changecast.orchestrator import RefreshResult
from changecast.playback.preferences import JsonPreferencesStore, UserPreferences
from changecast.types import VOICE_NAMES, VOICE_OPTIONS, is_known_voice
from logging_setup import setup_logging

__all__ = ["main"]


def _print_refresh(result: RefreshResult, limit: int) -> None:
    print(f"Latest version: {result.latest_version}")
    for v in result.versions[:limit]:
        counts = Counter(item.type for item in v.items)
        summary = ", ".join(f"{k}={n}" for k, n in sorted(counts.items()))
        date = f" ({v.date})" if v.date else ""
        print(f"- {v.version}{date}: {len(v.items)} items [{summary}]")
    if result.analysis is not None:
        origin = "cached" if result.cache_hit else "fresh"
        print(f"\nTL;DR ({origin}, {result.analysis.sentiment}):")
        print(result.analysis.tldr)
        for action in result.analysis.action_items:
            print(f"  * {action}")
    else:
        print("\nAnalysis not available.")


async def _cmd_refresh(settings: Settings, as_json: bool, limit: int) -> int:
    result = await build_orchestrator(settings).refresh()
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.ok:
        _print_refresh(result, limit)
    if not result.ok:
        print(f"Failed to load changelog: {result.error}", file=sys.stderr)
        return 1
    return 0


async def _cmd_latest(settings: Settings) -> int:
    try:
        markdown = await RetryingFetcher(timeout=settings.http_timeout).fetch_with_retry(
            settings.changelog_url, settings.fetch_attempts
        )
    except FetchError as exc:
        print(f"Failed to load changelog: {exc}", file=sys.stderr)
        return 1
    print(get_latest_version(parse_changelog(markdown)))
    return 0


def _resolve_voice(settings: Settings, voice: str | None) -> str:
    if voice:
        return voice
    prefs = JsonPreferencesStore(settings.prefs_path).load(
        UserPreferences(voice=settings.default_voice)
    )
    return prefs.voice


async def _cmd_speak(settings: Settings, text: str, voice: str, out: Path) -> int:
    pipeline = build_pipeline(settings)
    try:
        wav = await pipeline.generate(text, voice)
    except TtsError as exc:
        print(f"Audio generation failed: {exc}", file=sys.stderr)
        return 1
    AudioPipeline.download(wav, out)
    print(f"Wrote {len(wav)} bytes to {out}")
    return 0


def _cmd_voices() -> int:
    tones = {opt.name: opt.tone for opt in VOICE_OPTIONS}
    for name in VOICE_NAMES:
        tone = tones.get(name)
        print(f"{name} ({tone})" if tone else name)
    return 0


def _cmd_serve(host: str, port: int) -> int:  # pragma: no cover - starts a server
    import uvicorn

    uvicorn.run("api.app:app", host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``changecast`` CLI."""

    parser = argparse.ArgumentParser(prog="changecast")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_refresh = sub.add_parser("refresh", help="fetch, parse and analyze the changelog")
    p_refresh.add_argument("--json", action="store_true")
    p_refresh.add_argument("--limit", type=int, default=5)

    sub.add_parser("latest", help="print the latest version")

    p_speak = sub.add_parser("speak", help="narrate text into a WAV file")
    p_speak.add_argument("text", nargs="?")
    p_speak.add_argument("--text-file", type=Path)
    p_speak.add_argument("--voice")
    p_speak.add_argument("--out", type=Path, default=Path("narration.wav"))

    sub.add_parser("voices", help="list available voices")

    p_serve = sub.add_parser("serve", help="run the cache store API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    setup_logging()
    settings = Settings.from_env()

    if args.cmd == "refresh":
        return asyncio.run(_cmd_refresh(settings, args.json, args.limit))
    if args.cmd == "latest":
        return asyncio.run(_cmd_latest(settings))
    if args.cmd == "speak":
        if args.text_file is not None:
            text = args.text_file.read_text(encoding="utf-8")
        elif args.text:
            text = args.text
        else:
            parser.error("speak requires TEXT or --text-file")
        voice = _resolve_voice(settings, args.voice)
        if not is_known_voice(voice):
            parser.error(f"unknown voice: {voice}")
        return asyncio.run(_cmd_speak(settings, text, voice, args.out))
    if args.cmd == "voices":
        return _cmd_voices()
    if args.cmd == "serve":
        return _cmd_serve(args.host, args.port)
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
