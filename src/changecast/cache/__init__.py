"""Content-addressed caches for analysis results and narration audio."""

__all__ = ["hashing", "store"]
