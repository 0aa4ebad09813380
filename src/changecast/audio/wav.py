"""Raw PCM to WAV container encoding and quick quality metrics."""

from __future__ import annotations

import struct

import numpy as np

__all__ = [
    "SAMPLE_RATE",
    "CHANNELS",
    "BITS_PER_SAMPLE",
    "HEADER_SIZE",
    "wav_header",
    "pcm_to_wav",
    "pcm_duration_s",
    "pcm_peak_dbfs",
]

# Native output format of the upstream TTS provider.
SAMPLE_RATE = 24000
CHANNELS = 1
BITS_PER_SAMPLE = 16
HEADER_SIZE = 44


def wav_header(data_size: int, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Return the canonical 44-byte RIFF/WAVE header for mono 16-bit PCM.

    Args:
        data_size: Length in bytes of the PCM payload that follows.
        sample_rate: Samples per second.

    Returns:
        Header bytes (all multi-byte fields little-endian).
    """

    block_align = CHANNELS * (BITS_PER_SAMPLE // 8)
    byte_rate = sample_rate * block_align
    return b"".join(
        (
            b"RIFF",
            struct.pack("<I", 36 + data_size),
            b"WAVE",
            b"fmt ",
            struct.pack(
                "<IHHIIHH",
                16,  # fmt chunk size
                1,  # PCM
                CHANNELS,
                sample_rate,
                byte_rate,
                block_align,
                BITS_PER_SAMPLE,
            ),
            b"data",
            struct.pack("<I", data_size),
        )
    )


def pcm_to_wav(pcm: bytes, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Wrap little-endian signed 16-bit mono PCM in a WAV container.

    The payload is copied unchanged after the header, so the result is
    exactly ``44 + len(pcm)`` bytes.
    """

    return wav_header(len(pcm), sample_rate) + bytes(pcm)


def _samples(pcm: bytes) -> np.ndarray:
    usable = len(pcm) - (len(pcm) % 2)
    return np.frombuffer(pcm[:usable], dtype="<i2")


def pcm_duration_s(pcm: bytes, sample_rate: int = SAMPLE_RATE) -> float:
    """Return the playback duration of ``pcm`` in seconds."""

    return float(_samples(pcm).size) / float(sample_rate)


def pcm_peak_dbfs(pcm: bytes) -> float:
    """Return sample peak in dBFS (``-inf`` for silence or empty input)."""

    y = _samples(pcm)
    if y.size == 0:
        return float("-inf")
    peak = float(np.max(np.abs(y.astype(np.int32)))) / 32768.0
    if peak <= 0:
        return float("-inf")
    return float(20 * np.log10(peak))
