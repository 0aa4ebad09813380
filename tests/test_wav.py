from __future__ import annotations

import io
import struct

import soundfile as sf

from changecast.audio.wav import (
    HEADER_SIZE,
    SAMPLE_RATE,
    pcm_duration_s,
    pcm_peak_dbfs,
    pcm_to_wav,
    wav_header,
)


def test_layout_and_size(pcm_bytes: bytes) -> None:
    wav = pcm_to_wav(pcm_bytes)
    assert len(wav) == HEADER_SIZE + len(pcm_bytes)
    assert wav[0:4] == b"RIFF"
    assert wav[8:12] == b"WAVE"
    assert wav[12:16] == b"fmt "
    assert wav[36:40] == b"data"
    assert struct.unpack("<I", wav[40:44])[0] == len(pcm_bytes)
    assert struct.unpack("<I", wav[4:8])[0] == 36 + len(pcm_bytes)
    assert wav[HEADER_SIZE:] == pcm_bytes


def test_fmt_chunk_fields() -> None:
    header = wav_header(1000)
    size, fmt, channels, rate, byte_rate, align, bits = struct.unpack("<IHHIIHH", header[16:36])
    assert (size, fmt, channels, rate, byte_rate, align, bits) == (16, 1, 1, 24000, 48000, 2, 16)


def test_header_is_reconstructible(pcm_bytes: bytes) -> None:
    wav = pcm_to_wav(pcm_bytes)
    data_size = struct.unpack("<I", wav[40:44])[0]
    assert wav[:HEADER_SIZE] == wav_header(data_size)


def test_empty_payload_yields_bare_header() -> None:
    wav = pcm_to_wav(b"")
    assert len(wav) == HEADER_SIZE
    assert struct.unpack("<I", wav[40:44])[0] == 0


def test_decodes_with_soundfile(pcm_bytes: bytes) -> None:
    data, rate = sf.read(io.BytesIO(pcm_to_wav(pcm_bytes)), dtype="int16")
    assert rate == SAMPLE_RATE
    assert len(data) == len(pcm_bytes) // 2


def test_quality_metrics(pcm_bytes: bytes) -> None:
    assert abs(pcm_duration_s(pcm_bytes) - 0.1) < 1e-6
    peak = pcm_peak_dbfs(pcm_bytes)
    assert -10.0 < peak < 0.0
    assert pcm_peak_dbfs(b"\x00\x00" * 10) == float("-inf")
    assert pcm_peak_dbfs(b"") == float("-inf")
