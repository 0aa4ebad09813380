"""Deterministic 32-bit rolling hash used as a cache bucketing key.

This is the classic ``h = h * 31 + c`` string hash with signed 32-bit
wraparound, rendered as the absolute value in base 36. It is NOT
collision-free and NOT cryptographic; two texts may share a key. Keys must
stay stable across releases because previously cached artifacts are looked up
by them, so do not swap this for a stronger digest.

Character codes are UTF-16 code units, so text outside the Basic
Multilingual Plane contributes its two surrogate halves.
"""

from __future__ import annotations

__all__ = ["hash_string", "to_base36"]

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _MASK
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str) -> list[int]:
    raw = text.encode("utf-16-le", "surrogatepass")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def to_base36(n: int) -> str:
    """Render a non-negative integer in lowercase base 36."""

    if n < 0:
        raise ValueError("to_base36 expects a non-negative integer")
    if n == 0:
        return "0"
    out: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def hash_string(text: str) -> str:
    """Return the base-36 rolling hash of ``text``.

    Args:
        text: Arbitrary input text.

    Returns:
        Lowercase base-36 string; ``"0"`` for the empty string.
    """

    acc = 0
    for unit in _utf16_units(text):
        acc = _to_int32((acc << 5) - acc + unit)
    return to_base36(abs(acc))
