"""Analysis cache endpoints.

Stores and serves analysis documents keyed by the hash of the recent
versions digest.
"""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from db import get_session, repository

router = APIRouter()


class AnalysisPayload(BaseModel):
    """Request/response body wrapping an analysis document.

    Attributes:
        analysis (dict[str, Any]): Opaque analysis JSON.
    """

    analysis: dict[str, Any]


@router.get("/analysis/{version_hash}")
async def get_analysis(version_hash: str) -> AnalysisPayload:
    """Return the cached analysis for ``version_hash``.

    Raises:
        HTTPException: 404 if nothing is cached under the hash.
    """
    with get_session() as session:
        analysis = repository.get_analysis(session, version_hash)
    if analysis is None:
        raise HTTPException(status_code=404, detail="analysis not cached")
    return AnalysisPayload(analysis=analysis)


@router.post("/analysis/{version_hash}")
async def put_analysis(version_hash: str, payload: AnalysisPayload) -> dict[str, Any]:
    """Store (or replace) the analysis under ``version_hash``."""
    with get_session() as session:
        repository.upsert_analysis(session, version_hash, payload.analysis)
    return {"success": True, "hash": version_hash}
