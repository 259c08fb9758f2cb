"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from app.repositories.note_store import NoteStore, note_store
from app.services.media_storage import MediaStorage, get_media_storage
from app.services.transcription_service import (
    TranscriptionService,
    transcription_service,
)


def get_note_store() -> NoteStore:
    """Get the shared note store."""
    return note_store


def get_transcription_service() -> TranscriptionService:
    """Get the shared Whisper client."""
    return transcription_service


NoteStoreDep = Annotated[NoteStore, Depends(get_note_store)]
MediaStorageDep = Annotated[MediaStorage, Depends(get_media_storage)]
TranscriptionServiceDep = Annotated[
    TranscriptionService, Depends(get_transcription_service)
]
