from __future__ import annotations

import math
import os
import struct
import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path so we can import changecast.*, api and db.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Keep test runs from writing rotating log files into the repo.
os.environ.setdefault("CHANGECAST_LOG_FILES", "0")


def make_pcm(seconds: float = 0.1, sample_rate: int = 24000, freq: float = 440.0) -> bytes:
    """Return little-endian int16 mono sine PCM."""
    n = int(sample_rate * seconds)
    samples = (int(12000 * math.sin(2 * math.pi * freq * i / sample_rate)) for i in range(n))
    return b"".join(struct.pack("<h", s) for s in samples)


@pytest.fixture
def pcm_bytes() -> bytes:
    return make_pcm()


SAMPLE_CHANGELOG = """# Changelog

## 1.0.0 - 2024-01-01
- Added new feature X
- Fixed bug Y

## 0.9.0
- Removed legacy flag
"""


@pytest.fixture
def sample_changelog() -> str:
    return SAMPLE_CHANGELOG
