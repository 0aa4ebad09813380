"""Database models for the cache store.

Two tables back the content-addressed caches: analyses keyed by the hash of
the recent-versions digest, and narration audio keyed by text hash plus
voice. Hashes are non-cryptographic, so distinct inputs may share a row.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Project Declarative base class."""

    pass


class AnalysisRecord(Base):
    """Cached analysis document for one changelog digest hash."""

    __tablename__ = "analysis_cache"
    version_hash: Mapped[str] = mapped_column(String, primary_key=True)
    analysis: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class AudioRecord(Base):
    """Cached WAV narration for one text hash and voice."""

    __tablename__ = "audio_cache"
    text_hash: Mapped[str] = mapped_column(String, primary_key=True)
    voice: Mapped[str] = mapped_column(String, primary_key=True)
    audio: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
