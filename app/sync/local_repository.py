"""On-device storage for captured voice notes."""

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.database import create_client_tables
from app.models.voice_note import (
    VoiceNote,
    VoiceNoteEntity,
    VoiceNotePhotoEntity,
    VoiceNoteTagEntity,
)
from app.utils.datetime import as_utc, utc_now
from app.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_domain(
    entity: VoiceNoteEntity, photos: list[str], tags: list[str]
) -> VoiceNote:
    return VoiceNote(
        local_id=entity.id or 0,
        title=entity.title,
        audio_file_path=entity.audio_file_path,
        duration_seconds=entity.duration_seconds,
        original_text=entity.original_text,
        recognized_text=entity.recognized_text,
        category_label=entity.category_label,
        sync_status=entity.sync_status,
        server_id=entity.server_id,
        recognition_status=entity.recognition_status,
        photos=photos,
        tags=tags,
        created_at=as_utc(entity.created_at),
        updated_at=as_utc(entity.updated_at),
    )


class LocalNoteRepository:
    """
    Persists VoiceNote aggregates (note, photos, tags) in the client database.

    Tables are created on first use. Each call uses its own session.
    """

    def __init__(self, db_engine: Engine):
        self.engine = db_engine
        self._init_lock = threading.Lock()
        self._initialized = False

    async def ensure_initialized(self) -> None:
        if self._initialized:
            return
        await asyncio.to_thread(self._initialize)

    def _initialize(self) -> None:
        with self._init_lock:
            if self._initialized:
                return
            create_client_tables(self.engine)
            self._initialized = True

    async def _run(self, operation: Callable[[Session], T]) -> T:
        await self.ensure_initialized()

        def _call() -> T:
            try:
                with Session(self.engine, expire_on_commit=False) as session:
                    return operation(session)
            except SQLAlchemyError as e:
                raise StorageError(f"Local note storage failure: {e}") from e

        return await asyncio.to_thread(_call)

    @staticmethod
    def _children(
        session: Session, note_ids: list[int]
    ) -> tuple[dict[int, list[str]], dict[int, list[str]]]:
        photos: dict[int, list[str]] = {note_id: [] for note_id in note_ids}
        tags: dict[int, list[str]] = {note_id: [] for note_id in note_ids}
        if not note_ids:
            return photos, tags

        photo_rows = session.exec(
            select(VoiceNotePhotoEntity)
            .where(VoiceNotePhotoEntity.voice_note_id.in_(note_ids))  # type: ignore
            .order_by(VoiceNotePhotoEntity.id)  # type: ignore
        ).all()
        for photo in photo_rows:
            photos[photo.voice_note_id].append(photo.file_path)

        tag_rows = session.exec(
            select(VoiceNoteTagEntity)
            .where(VoiceNoteTagEntity.voice_note_id.in_(note_ids))  # type: ignore
            .order_by(VoiceNoteTagEntity.id)  # type: ignore
        ).all()
        for tag in tag_rows:
            tags[tag.voice_note_id].append(tag.value)

        return photos, tags

    async def list_notes(self) -> list[VoiceNote]:
        """All notes, newest first."""

        def _list(session: Session) -> list[VoiceNote]:
            entities = session.exec(
                select(VoiceNoteEntity).order_by(VoiceNoteEntity.created_at.desc())  # type: ignore
            ).all()
            ids = [entity.id for entity in entities if entity.id is not None]
            photos, tags = self._children(session, ids)
            return [
                _to_domain(entity, photos[entity.id], tags[entity.id])  # type: ignore
                for entity in entities
            ]

        return await self._run(_list)

    async def get(self, local_id: int) -> VoiceNote | None:
        def _get(session: Session) -> VoiceNote | None:
            entity = session.get(VoiceNoteEntity, local_id)
            if entity is None:
                return None
            photos, tags = self._children(session, [local_id])
            return _to_domain(entity, photos[local_id], tags[local_id])

        return await self._run(_get)

    async def save(self, note: VoiceNote) -> VoiceNote:
        """
        Insert or update a note together with its photos and tags.

        Photos and tags are replaced wholesale in the same transaction.

        Returns:
            The saved note with ``local_id`` and ``updated_at`` set
        """

        def _save(session: Session) -> VoiceNote:
            now = utc_now()
            entity = session.get(VoiceNoteEntity, note.local_id) if note.local_id else None
            if entity is None:
                entity = VoiceNoteEntity(created_at=note.created_at)

            entity.title = note.title
            entity.audio_file_path = note.audio_file_path
            entity.duration_seconds = note.duration_seconds
            entity.original_text = note.original_text
            entity.recognized_text = note.recognized_text
            entity.category_label = note.category_label
            entity.sync_status = note.sync_status
            entity.server_id = note.server_id
            entity.recognition_status = note.recognition_status
            entity.updated_at = now
            session.add(entity)
            session.flush()

            assert entity.id is not None
            for child_type in (VoiceNotePhotoEntity, VoiceNoteTagEntity):
                children = session.exec(
                    select(child_type).where(child_type.voice_note_id == entity.id)  # type: ignore
                ).all()
                for child in children:
                    session.delete(child)
            for file_path in note.photos:
                session.add(
                    VoiceNotePhotoEntity(voice_note_id=entity.id, file_path=file_path)
                )
            for value in note.tags:
                session.add(VoiceNoteTagEntity(voice_note_id=entity.id, value=value))
            session.commit()

            return note.model_copy(update={"local_id": entity.id, "updated_at": now})

        return await self._run(_save)

