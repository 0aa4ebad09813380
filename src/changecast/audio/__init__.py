"""Narration audio: WAV encoding, speech providers and the caching pipeline."""

__all__ = ["blobs", "gemini_tts", "pipeline", "tts_base", "wav"]
