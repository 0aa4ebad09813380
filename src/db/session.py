"""Session factory utilities for the cache store database.

A single engine + sessionmaker pair lives at module level; :func:`init_engine`
rebinds both so tests (or the CLI) can point the store at another database.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DEFAULT_DATABASE_URL = "sqlite:///./changecast_cache.db"

logger = logging.getLogger(__name__)


def _database_url() -> str:
    return os.getenv("CHANGECAST_DATABASE_URL", DEFAULT_DATABASE_URL)


def _make_engine(url: str) -> Engine:
    kwargs: dict[str, object] = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # The pool hands connections to whichever thread serves a request.
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


engine: Engine = _make_engine(_database_url())
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_engine(url: str | None = None) -> Engine:
    """Create missing tables, first rebinding to ``url`` when given.

    Args:
        url: SQLAlchemy URL to switch to; ``None`` keeps the current engine
            (initially built from ``CHANGECAST_DATABASE_URL``).

    Returns:
        The active engine.
    """

    global engine
    if url is not None and engine.url.render_as_string(hide_password=False) != url:
        engine.dispose()
        engine = _make_engine(url)
        SessionLocal.configure(bind=engine)
    Base.metadata.create_all(engine)
    logger.info("Cache store database ready at %s", engine.url)
    return engine


@contextmanager
def get_session() -> Iterator[Session]:
    """Context manager yielding a SQLAlchemy session and ensuring close."""
    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:  # noqa: BLE001
        session.rollback()
        raise
    finally:
        session.close()
