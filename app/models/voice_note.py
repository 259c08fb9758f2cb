"""Client-side voice note tables and domain model."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from app.config import settings
from app.models.status import LocalRecognitionStatus, SyncStatus
from app.utils.datetime import utc_now


class VoiceNoteEntity(SQLModel, table=True):  # type: ignore
    """Row of a note captured on the device."""

    __tablename__ = "voice_notes"  # type: ignore

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(default="")
    audio_file_path: str = Field(default="")
    duration_seconds: float = Field(default=0.0)
    original_text: str | None = Field(default=None)
    recognized_text: str | None = Field(default=None)
    category_label: str = Field(default="")

    sync_status: SyncStatus = Field(default=SyncStatus.LOCAL_ONLY, index=True)
    server_id: str | None = Field(default=None, index=True)
    recognition_status: LocalRecognitionStatus = Field(
        default=LocalRecognitionStatus.IN_QUEUE
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class VoiceNotePhotoEntity(SQLModel, table=True):  # type: ignore
    __tablename__ = "voice_note_photos"  # type: ignore

    id: int | None = Field(default=None, primary_key=True)
    voice_note_id: int = Field(foreign_key="voice_notes.id", index=True)
    file_path: str
    created_at: datetime = Field(default_factory=utc_now)


class VoiceNoteTagEntity(SQLModel, table=True):  # type: ignore
    __tablename__ = "voice_note_tags"  # type: ignore

    id: int | None = Field(default=None, primary_key=True)
    voice_note_id: int = Field(foreign_key="voice_notes.id", index=True)
    value: str


class VoiceNote(SQLModel):
    """Note as seen by the sync coordinator and presentation layer.

    ``local_id`` is 0 until the note has been saved once.
    """

    local_id: int = 0
    title: str = ""
    audio_file_path: str = ""
    duration_seconds: float = 0.0
    original_text: str | None = None
    recognized_text: str | None = None
    category_label: str = Field(default_factory=lambda: settings.default_category_label)
    sync_status: SyncStatus = SyncStatus.LOCAL_ONLY
    server_id: str | None = None
    recognition_status: LocalRecognitionStatus = LocalRecognitionStatus.IN_QUEUE
    photos: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
