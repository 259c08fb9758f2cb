"""Note model."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from app.config import settings
from app.models.status import RecognitionStatus
from app.utils.datetime import utc_now


def new_note_id() -> str:
    return str(uuid.uuid4())


class NoteRecord(SQLModel, table=True):  # type: ignore
    """Uploaded voice note awaiting or holding its recognized text."""

    __tablename__ = "notes"  # type: ignore

    id: str = Field(default_factory=new_note_id, primary_key=True)

    # Content
    title: str
    category_label: str = Field(default_factory=lambda: settings.default_category_label)
    original_text: str | None = Field(default=None)
    recognized_text: str | None = Field(default=None)

    # Media blobs saved by MediaStorage
    audio_path: str | None = Field(default=None)
    photo_paths: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    # Processing state
    recognition_status: RecognitionStatus = Field(
        default=RecognitionStatus.UPLOADED, index=True
    )
    error_message: str | None = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
