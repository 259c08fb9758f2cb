"""Mirrors locally captured notes to the backend and follows their recognition."""

import asyncio
import logging
from collections.abc import Callable

from app.config import settings
from app.models.status import (
    LocalRecognitionStatus,
    RecognitionStatus,
    SyncStatus,
    map_remote_status,
)
from app.models.voice_note import VoiceNote
from app.schemas.note import NoteResponse
from app.sync.backend_client import BackendClient
from app.sync.connectivity import ConnectivityMonitor
from app.sync.local_repository import LocalNoteRepository
from app.utils.exceptions import TransientNetworkError

logger = logging.getLogger(__name__)

NoteListener = Callable[[VoiceNote], None]


def resolve_recognized_text(remote: NoteResponse) -> str | None:
    """The error message wins over recognized text when the backend sent one."""
    if remote.error_message and remote.error_message.strip():
        return remote.error_message
    return remote.recognized_text


class NoteSyncCoordinator:
    """
    Runs two loops over the local note store.

    The upload loop drains a queue of local ids and posts each note to the
    backend. While offline, ids are put back after ``retry_delay`` so nothing
    is dropped, though order is not kept. The poll loop resyncs the queue
    from storage every ``poll_interval`` and refreshes the recognition status
    of every uploaded note until it is Ready or Error.
    """

    def __init__(
        self,
        repository: LocalNoteRepository,
        backend: BackendClient,
        connectivity: ConnectivityMonitor,
        poll_interval: float | None = None,
        retry_delay: float | None = None,
        enabled: bool | None = None,
        on_note_changed: NoteListener | None = None,
    ):
        self.repository = repository
        self.backend = backend
        self.connectivity = connectivity
        self.poll_interval = (
            settings.sync_poll_interval if poll_interval is None else poll_interval
        )
        self.retry_delay = (
            settings.upload_retry_delay if retry_delay is None else retry_delay
        )
        self.enabled = settings.sync_enabled if enabled is None else enabled
        self.on_note_changed = on_note_changed

        self._pending: asyncio.Queue[int] = asyncio.Queue()
        self._pending_ids: set[int] = set()
        self._remote_to_local: dict[str, int] = {}
        self._resync_lock = asyncio.Lock()
        self._tasks: list[asyncio.Task] = []

    @property
    def tracked(self) -> dict[str, int]:
        """Remote id to local id of notes still awaiting recognition."""
        return dict(self._remote_to_local)

    @property
    def pending(self) -> set[int]:
        return set(self._pending_ids)

    async def start(self) -> None:
        if not self.enabled:
            logger.info("Note sync is disabled (set SYNC_ENABLED=true to enable)")
            return
        if self._tasks:
            return

        self.connectivity.add_listener(self._on_connectivity_changed)
        self._tasks = [
            asyncio.create_task(self._upload_loop(), name="note-sync-upload"),
            asyncio.create_task(self._poll_loop(), name="note-sync-poll"),
        ]
        await self.resync()

    async def stop(self) -> None:
        if not self._tasks:
            return
        self.connectivity.remove_listener(self._on_connectivity_changed)
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        # A loop cancelled mid-retry already took its id off the queue;
        # start() rebuilds both from storage through resync().
        self._pending = asyncio.Queue()
        self._pending_ids.clear()

    async def save_note(self, note: VoiceNote) -> VoiceNote:
        """Save a note captured on the device and schedule its upload."""
        saved = await self._save(note)
        self.track_for_upload(saved)
        return saved

    def track_for_upload(self, note: VoiceNote) -> None:
        if not self.enabled:
            return
        if note.server_id:
            self._track_recognition(note)
            return
        self._enqueue(note.local_id)

    def _enqueue(self, local_id: int) -> None:
        if local_id in self._pending_ids:
            return
        self._pending_ids.add(local_id)
        self._pending.put_nowait(local_id)

    def _track_recognition(self, note: VoiceNote) -> None:
        if not note.server_id:
            return
        if note.recognition_status.is_terminal:
            self._remote_to_local.pop(note.server_id, None)
            return
        self._remote_to_local[note.server_id] = note.local_id

    async def _save(self, note: VoiceNote) -> VoiceNote:
        saved = await self.repository.save(note)
        if self.on_note_changed is not None:
            self.on_note_changed(saved)
        return saved

    async def _on_connectivity_changed(self, online: bool) -> None:
        if online:
            await self.resync()

    async def resync(self) -> None:
        """
        Rebuild the queue and the tracking map from local storage.

        Safe to call any number of times; notes already pending or tracked
        are not duplicated.
        """
        if not self.enabled:
            return
        async with self._resync_lock:
            try:
                notes = await self.repository.list_notes()
            except Exception as e:
                logger.exception(f"Failed to load pending notes: {e}")
                return

            for note in notes:
                if not note.server_id and note.sync_status in (
                    SyncStatus.LOCAL_ONLY,
                    SyncStatus.FAILED,
                ):
                    self._enqueue(note.local_id)
                elif note.recognition_status in (
                    LocalRecognitionStatus.IN_QUEUE,
                    LocalRecognitionStatus.RECOGNIZING,
                ):
                    self._track_recognition(note)

    async def _upload_loop(self) -> None:
        while True:
            local_id = await self._pending.get()

            if not self.connectivity.is_online:
                await asyncio.sleep(self.retry_delay)
                self._pending.put_nowait(local_id)
                continue

            self._pending_ids.discard(local_id)
            try:
                await self.upload_note(local_id)
            except Exception as e:
                logger.exception(f"Failed to upload note {local_id}: {e}")
                await self._mark_failed(local_id, str(e) or "Sync failed")

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            await self.poll_once()

    async def poll_once(self) -> None:
        """One poll tick: resync, then refresh every tracked note if online."""
        await self.resync()
        if not self.connectivity.is_online:
            return

        for remote_id, local_id in list(self._remote_to_local.items()):
            try:
                await self.refresh_note(remote_id, local_id)
            except TransientNetworkError as e:
                logger.info(f"Backend unreachable, skipping refresh until next tick: {e}")
                return
            except Exception as e:
                logger.warning(f"Failed to refresh note {remote_id}: {e}")

    async def upload_note(self, local_id: int) -> None:
        """
        Upload one local note and ask the backend to recognize it.

        Raises:
            TransientNetworkError: If the backend cannot be reached
            UpstreamError: If the backend rejects the upload
            StorageError: If the local note cannot be read or written
        """
        note = await self.repository.get(local_id)
        if note is None:
            return
        if note.server_id:
            self._track_recognition(note)
            return

        note.sync_status = SyncStatus.UPLOADING
        note.recognition_status = LocalRecognitionStatus.IN_QUEUE
        note = await self._save(note)

        remote = await self.backend.create_note(note)

        note.server_id = remote.id
        note.sync_status = SyncStatus.SYNCED
        self._apply_remote(note, remote)
        note = await self._save(note)
        logger.info(f"Uploaded note {local_id} as {remote.id}")

        await self._try_request_recognition(remote.id)
        self._track_recognition(note)

    async def refresh_note(self, remote_id: str, local_id: int) -> None:
        note = await self.repository.get(local_id)
        if note is None:
            self._remote_to_local.pop(remote_id, None)
            return

        remote = await self.backend.get_note(remote_id)
        if remote is None:
            return

        if remote.recognition_status == RecognitionStatus.UPLOADED:
            await self._try_request_recognition(remote_id)

        self._apply_remote(note, remote)
        note.sync_status = SyncStatus.SYNCED
        note = await self._save(note)

        if note.recognition_status.is_terminal:
            self._remote_to_local.pop(remote_id, None)

    @staticmethod
    def _apply_remote(note: VoiceNote, remote: NoteResponse) -> None:
        note.recognition_status = map_remote_status(remote.recognition_status)
        note.recognized_text = resolve_recognized_text(remote)
        if remote.category_label and remote.category_label.strip():
            note.category_label = remote.category_label

    async def _try_request_recognition(self, remote_id: str) -> None:
        try:
            await self.backend.request_recognition(remote_id)
        except Exception as e:
            logger.warning(f"Failed to start recognition for note {remote_id}: {e}")

    async def _mark_failed(self, local_id: int, message: str) -> None:
        try:
            note = await self.repository.get(local_id)
            if note is None:
                return
            note.sync_status = SyncStatus.FAILED
            note.recognition_status = LocalRecognitionStatus.ERROR
            note.recognized_text = message
            await self._save(note)
        except Exception as e:
            logger.exception(f"Failed to mark note {local_id} as failed: {e}")
