"""Changelog ingestion, AI summary caching and narrated playback.

This package contains modules for fetching and parsing changelogs, caching
analysis and narration artifacts, and driving audio playback.
"""

__all__ = [
    "ingest",
    "cache",
    "audio",
    "analysis",
    "playback",
    "orchestrator",
]
