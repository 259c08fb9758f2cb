"""Database models."""

from app.models.note import NoteRecord
from app.models.status import (
    LocalRecognitionStatus,
    RecognitionStatus,
    SyncStatus,
    map_remote_status,
    status_label,
)
from app.models.voice_note import (
    VoiceNote,
    VoiceNoteEntity,
    VoiceNotePhotoEntity,
    VoiceNoteTagEntity,
)

__all__ = [
    "NoteRecord",
    "LocalRecognitionStatus",
    "RecognitionStatus",
    "SyncStatus",
    "map_remote_status",
    "status_label",
    "VoiceNote",
    "VoiceNoteEntity",
    "VoiceNotePhotoEntity",
    "VoiceNoteTagEntity",
]
