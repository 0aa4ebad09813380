"""CRUD helpers for the cache store tables.

POSTs upsert: storing under an existing key replaces the previous record.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from . import models


def get_analysis(session: Session, version_hash: str) -> dict[str, Any] | None:
    """Return the cached analysis for ``version_hash`` or ``None``."""
    row = session.get(models.AnalysisRecord, version_hash)
    return dict(row.analysis) if row else None


def upsert_analysis(
    session: Session, version_hash: str, analysis: dict[str, Any]
) -> models.AnalysisRecord:
    """Insert or replace the analysis stored under ``version_hash``."""
    row = session.get(models.AnalysisRecord, version_hash)
    if row is None:
        row = models.AnalysisRecord(version_hash=version_hash, analysis=analysis)
        session.add(row)
    else:
        row.analysis = analysis
    return row


def get_audio(session: Session, text_hash: str, voice: str) -> bytes | None:
    """Return cached WAV bytes for ``(text_hash, voice)`` or ``None``."""
    row = session.get(models.AudioRecord, (text_hash, voice))
    return bytes(row.audio) if row else None


def upsert_audio(
    session: Session, text_hash: str, voice: str, audio: bytes
) -> models.AudioRecord:
    """Insert or replace the WAV stored under ``(text_hash, voice)``."""
    row = session.get(models.AudioRecord, (text_hash, voice))
    if row is None:
        row = models.AudioRecord(
            text_hash=text_hash, voice=voice, audio=audio, size_bytes=len(audio)
        )
        session.add(row)
    else:
        row.audio = audio
        row.size_bytes = len(audio)
    return row
