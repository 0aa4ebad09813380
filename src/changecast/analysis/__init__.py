"""AI analysis of recent changelog versions."""

__all__ = ["gemini", "schema"]
