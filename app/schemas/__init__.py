"""Pydantic schemas for request/response validation."""

from app.schemas.note import NoteResponse
from app.schemas.transcription import TranscriptionResult, TranscriptionSegment

__all__ = [
    "NoteResponse",
    "TranscriptionResult",
    "TranscriptionSegment",
]
