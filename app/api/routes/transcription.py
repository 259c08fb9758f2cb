"""Direct transcription endpoint, mainly for checking the Whisper container."""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from app.api.deps import MediaStorageDep, TranscriptionServiceDep
from app.schemas.transcription import TranscriptionResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/whisper", tags=["transcription"])


@router.post("/transcribe", response_model=TranscriptionResult)
async def transcribe_audio(
    media: MediaStorageDep,
    transcriber: TranscriptionServiceDep,
    audio: Annotated[UploadFile | None, File()] = None,
    language: Annotated[str | None, Form()] = None,
) -> TranscriptionResult:
    """
    Transcribe an uploaded audio file without creating a note.

    The upload is stored temporarily and removed once the service answers.
    """
    if audio is None or not audio.size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Audio file is required",
        )

    audio_path = await media.save(audio)
    try:
        return await transcriber.transcribe(audio_path, language)
    except Exception as e:
        logger.error(f"Direct transcription failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Transcription failed: {e}",
        )
    finally:
        media.delete(audio_path)
