"""Service modules for business logic."""

from app.services.media_storage import MediaStorage, get_media_storage
from app.services.transcription_service import (
    TranscriptionService,
    transcription_service,
)

__all__ = [
    "MediaStorage",
    "TranscriptionService",
    "get_media_storage",
    "transcription_service",
]
