"""Durable storage for uploaded notes and their recognition state."""

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.database import create_db_and_tables
from app.database import engine as default_engine
from app.models.note import NoteRecord, new_note_id
from app.models.status import RecognitionStatus
from app.utils.datetime import as_utc, utc_now
from app.utils.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _detached(record: NoteRecord) -> NoteRecord:
    record.created_at = as_utc(record.created_at)
    record.updated_at = as_utc(record.updated_at)
    return record


class NoteStore:
    """CRUD for NoteRecord.

    Every call runs in its own short-lived session on a worker thread, so the
    database is the only source of truth and there is no in-process cache.
    The ``notes`` table is created lazily on first use.
    """

    def __init__(self, db_engine: Engine | None = None):
        self.engine = db_engine or default_engine
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
            try:
                create_db_and_tables(self.engine)
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to initialize note storage: {e}") from e
            self._initialized = True
            logger.info("Note storage initialized")

    async def _run(self, operation: Callable[[Session], T]) -> T:
        await self.ensure_initialized()

        def _call() -> T:
            try:
                with Session(self.engine, expire_on_commit=False) as session:
                    return operation(session)
            except SQLAlchemyError as e:
                raise StorageError(f"Note storage failure: {e}") from e

        return await asyncio.to_thread(_call)

    async def create(self, record: NoteRecord) -> NoteRecord:
        """
        Persist a new note.

        A fresh id and matching created/updated timestamps are assigned
        regardless of what the caller put on the record.

        Raises:
            StorageError: If the insert fails
        """

        def _create(session: Session) -> NoteRecord:
            now = utc_now()
            record.id = new_note_id()
            record.created_at = now
            record.updated_at = now
            session.add(record)
            session.commit()
            session.refresh(record)
            return _detached(record)

        return await self._run(_create)

    async def get(self, note_id: str) -> NoteRecord | None:
        def _get(session: Session) -> NoteRecord | None:
            record = session.get(NoteRecord, note_id)
            return _detached(record) if record else None

        return await self._run(_get)

    async def list_by_status(self, status: RecognitionStatus) -> list[NoteRecord]:
        """Return all notes currently in ``status``. Order is unspecified."""

        def _list(session: Session) -> list[NoteRecord]:
            statement = select(NoteRecord).where(
                NoteRecord.recognition_status == status
            )
            return [_detached(r) for r in session.exec(statement).all()]

        return await self._run(_list)

    async def update_status(
        self,
        note_id: str,
        status: RecognitionStatus,
        recognized_text: str | None = None,
        category_label: str | None = None,
        error_message: str | None = None,
    ) -> None:
        """
        Move a note to ``status``.

        Args:
            note_id: Note to update
            status: New recognition status
            recognized_text: Replaces the stored text; None clears it, so
                pass the current value to keep it
            category_label: Ignored when None or empty, the stored label stays
            error_message: Replaces the stored message unconditionally

        Raises:
            NotFoundError: If no note has this id
            StorageError: If the update fails
        """

        def _update(session: Session) -> None:
            record = session.get(NoteRecord, note_id)
            if record is None:
                raise NotFoundError("Note")

            record.recognition_status = status
            record.recognized_text = recognized_text or None
            if category_label:
                record.category_label = category_label
            record.error_message = error_message or None
            record.updated_at = max(utc_now(), as_utc(record.updated_at))
            session.add(record)
            session.commit()

        await self._run(_update)


note_store = NoteStore()
