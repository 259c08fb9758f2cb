"""Notes upload and recognition endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from app.api.deps import MediaStorageDep, NoteStoreDep
from app.config import settings
from app.models.note import NoteRecord
from app.models.status import RecognitionStatus
from app.schemas.note import NoteResponse
from app.utils.events import event_manager
from app.utils.exceptions import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_note(
    store: NoteStoreDep,
    media: MediaStorageDep,
    response: Response,
    title: Annotated[str | None, Form()] = None,
    category_label: Annotated[str | None, Form(alias="categoryLabel")] = None,
    original_text: Annotated[str | None, Form(alias="originalText")] = None,
    audio: Annotated[UploadFile | None, File()] = None,
    photos: Annotated[list[UploadFile] | None, File()] = None,
) -> NoteResponse:
    """
    Upload a captured note with its audio and photos.

    The note is stored with 'Uploaded' status. Recognition starts only when
    the client calls the recognize endpoint.
    """
    try:
        if not title or not title.strip():
            raise ValidationError("Title is required")

        audio_path = await media.save(audio) if audio is not None else None
        photo_paths = [await media.save(photo) for photo in photos or []]

        note = await store.create(
            NoteRecord(
                title=title.strip(),
                category_label=(category_label or "").strip()
                or settings.default_category_label,
                original_text=original_text,
                audio_path=audio_path,
                photo_paths=photo_paths,
                recognition_status=RecognitionStatus.UPLOADED,
            )
        )
    except (ValidationError, StorageError) as e:
        raise e.to_http_exception()

    logger.info(f"Stored note {note.id} ({len(photo_paths)} photos, audio={bool(audio_path)})")
    response.headers["Location"] = f"/notes/{note.id}"
    return NoteResponse.model_validate(note)


@router.post(
    "/{note_id}/recognize",
    response_model=NoteResponse,
)
async def start_recognition(note_id: str, store: NoteStoreDep) -> NoteResponse:
    """
    Queue a note for recognition.

    Does nothing for notes that are already recognized or being recognized,
    so clients may call it repeatedly. Failed notes are queued again.
    """
    try:
        note = await store.get(note_id)
        if note is None:
            raise NotFoundError("Note")

        if note.recognition_status in (
            RecognitionStatus.COMPLETED,
            RecognitionStatus.RECOGNIZING,
        ):
            return NoteResponse.model_validate(note)

        await store.update_status(note_id, RecognitionStatus.QUEUED)
        note = await store.get(note_id)
        if note is None:
            raise NotFoundError("Note")
    except (NotFoundError, StorageError) as e:
        raise e.to_http_exception()

    await event_manager.note_status_changed(note_id, RecognitionStatus.QUEUED.value)
    return NoteResponse.model_validate(note)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(note_id: str, store: NoteStoreDep) -> NoteResponse:
    """
    Get a single note by ID.
    """
    try:
        note = await store.get(note_id)
    except StorageError as e:
        raise e.to_http_exception()
    if note is None:
        raise NotFoundError("Note").to_http_exception()
    return NoteResponse.model_validate(note)
