"""Audio cache endpoints.

WAV narrations are stored per ``(textHash, voice)``. Uploads carry the WAV
bytes base64-encoded in JSON; downloads return raw ``audio/wav``.
"""

import base64
import binascii
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from db import get_session, repository

router = APIRouter()

logger = logging.getLogger(__name__)


class AudioUpload(BaseModel):
    """Request model for storing narration audio.

    Attributes:
        textHash (str): Hash of the narrated text.
        voice (str): Voice identifier.
        audioData (str): Base64-encoded WAV bytes.
    """

    textHash: str
    voice: str
    audioData: str


@router.get("/audio/{text_hash}/{voice}")
async def get_audio(text_hash: str, voice: str) -> Response:
    """Return cached WAV bytes.

    Raises:
        HTTPException: 404 if no audio is cached for the key.
    """
    with get_session() as session:
        audio = repository.get_audio(session, text_hash, voice)
    if audio is None:
        raise HTTPException(status_code=404, detail="audio not cached")
    return Response(content=audio, media_type="audio/wav")


@router.post("/audio")
async def put_audio(payload: AudioUpload) -> dict[str, Any]:
    """Store (or replace) WAV bytes for ``(textHash, voice)``.

    Raises:
        HTTPException: 400 if ``audioData`` is not valid base64 or is empty.
    """
    if not payload.textHash or not payload.voice:
        raise HTTPException(status_code=400, detail="textHash and voice are required")
    try:
        audio = base64.b64decode(payload.audioData, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail="audioData is not valid base64") from exc
    if not audio:
        raise HTTPException(status_code=400, detail="audioData is empty")
    with get_session() as session:
        repository.upsert_audio(session, payload.textHash, payload.voice, audio)
    logger.info("Cached audio %s/%s (%d bytes)", payload.textHash, payload.voice, len(audio))
    return {"success": True, "size": len(audio)}
