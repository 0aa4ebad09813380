"""Database package export surface.

Re-exports session helpers and repository for convenience at import sites.
"""

from . import repository  # noqa: F401
from .session import get_session, init_engine  # noqa: F401

__all__ = ["get_session", "init_engine", "repository"]
