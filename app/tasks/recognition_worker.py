"""Background recognition of queued notes."""

import asyncio
import logging
from pathlib import Path

from app.config import settings
from app.models.note import NoteRecord
from app.models.status import RecognitionStatus
from app.repositories.note_store import NoteStore
from app.services.transcription_service import TranscriptionService
from app.utils.events import EventManager, event_manager

logger = logging.getLogger(__name__)

AUDIO_NOT_FOUND_MESSAGE = "Audio file not found"


class RecognitionWorker:
    """
    Polls the store for queued notes and transcribes them one at a time.

    The transcription container handles a single request at a time, so notes
    are never transcribed concurrently. A failed note stays failed until it
    is queued again through the recognize endpoint.
    """

    def __init__(
        self,
        store: NoteStore,
        transcriber: TranscriptionService,
        poll_interval: float | None = None,
        language: str | None = None,
        events: EventManager | None = None,
    ):
        self.store = store
        self.transcriber = transcriber
        self.poll_interval = (
            settings.recognition_poll_interval if poll_interval is None else poll_interval
        )
        self.language = language or settings.whisper_language
        self.events = events or event_manager
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self.run(), name="recognition-worker")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run(self) -> None:
        """Loop until cancelled. A failing iteration never ends the loop."""
        logger.info("Recognition worker started")
        try:
            while True:
                await asyncio.sleep(self.poll_interval)
                try:
                    await self.run_once()
                except Exception as e:
                    logger.exception(f"Recognition iteration failed: {e}")
        finally:
            logger.info("Recognition worker stopped")

    async def run_once(self) -> int:
        """
        Process every note currently queued.

        Returns:
            Number of notes picked up
        """
        queued = await self.store.list_by_status(RecognitionStatus.QUEUED)
        for note in queued:
            await self.process_note(note)
        return len(queued)

    async def _transition(
        self,
        note: NoteRecord,
        status: RecognitionStatus,
        recognized_text: str | None,
        error_message: str | None = None,
    ) -> None:
        await self.store.update_status(
            note.id,
            status,
            recognized_text=recognized_text,
            category_label=note.category_label,
            error_message=error_message,
        )
        await self.events.note_status_changed(note.id, status.value)

    async def process_note(self, note: NoteRecord) -> None:
        logger.info(f"Processing note {note.id}: {note.title}")
        try:
            await self._transition(
                note, RecognitionStatus.RECOGNIZING, note.recognized_text
            )

            if not note.audio_path or not Path(note.audio_path).is_file():
                logger.warning(
                    f"Audio file not found for note {note.id}: {note.audio_path}"
                )
                await self._transition(
                    note,
                    RecognitionStatus.FAILED,
                    note.recognized_text,
                    AUDIO_NOT_FOUND_MESSAGE,
                )
                return

            result = await self.transcriber.transcribe(note.audio_path, self.language)
            await self._transition(note, RecognitionStatus.COMPLETED, result.text)
            logger.info(f"Successfully transcribed note {note.id}")

        except Exception as e:
            logger.exception(f"Failed to process note {note.id}: {e}")
            await self._transition(
                note,
                RecognitionStatus.FAILED,
                note.recognized_text,
                f"Recognition failed: {e}",
            )
