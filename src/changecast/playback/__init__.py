"""Playback state machine over a single active audio element."""

__all__ = ["controller", "element", "preferences"]
