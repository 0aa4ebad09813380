"""Changelog fetching, parsing and item categorization."""

__all__ = ["categorize", "fetcher", "parser"]
