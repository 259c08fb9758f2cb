"""HTTP client for the notes backend, used by the sync coordinator."""

import asyncio
import logging
from pathlib import Path

import httpx

from app.config import settings
from app.models.voice_note import VoiceNote
from app.schemas.note import NoteResponse
from app.utils.exceptions import TransientNetworkError, UpstreamError

logger = logging.getLogger(__name__)


def _read_existing(path: str) -> tuple[str, bytes] | None:
    if not path:
        return None
    file_path = Path(path)
    if not file_path.is_file():
        return None
    return file_path.name, file_path.read_bytes()


class BackendClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.backend_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise TransientNetworkError(f"Backend unreachable: {e}") from e

    async def ping(self) -> bool:
        try:
            response = await self._send("GET", "/health")
            return response.status_code == 200
        except TransientNetworkError as e:
            logger.debug(f"Backend ping failed: {e}")
            return False

    async def create_note(self, note: VoiceNote) -> NoteResponse:
        """
        Upload a local note as multipart form data.

        Audio and photo files that no longer exist on disk are skipped.

        Raises:
            TransientNetworkError: If the backend cannot be reached
            UpstreamError: If the backend rejects the note
        """
        data = {
            "title": note.title,
            "categoryLabel": note.category_label or settings.default_category_label,
        }
        if note.original_text and note.original_text.strip():
            data["originalText"] = note.original_text

        files: list[tuple[str, tuple[str, bytes, str]]] = []
        audio = await asyncio.to_thread(_read_existing, note.audio_file_path)
        if audio:
            files.append(("audio", (audio[0], audio[1], "application/octet-stream")))
        for photo_path in note.photos:
            photo = await asyncio.to_thread(_read_existing, photo_path)
            if photo:
                files.append(("photos", (photo[0], photo[1], "application/octet-stream")))

        response = await self._send("POST", "/notes", data=data, files=files or None)
        if not response.is_success:
            raise UpstreamError(
                f"Backend rejected note upload: {response.status_code} {response.text}"
            )
        try:
            return NoteResponse.model_validate(response.json())
        except ValueError as e:
            raise UpstreamError("Backend returned an invalid note payload") from e

    async def get_note(self, remote_id: str) -> NoteResponse | None:
        """Fetch the current projection, or None if the backend did not answer 2xx."""
        response = await self._send("GET", f"/notes/{remote_id}")
        if not response.is_success:
            logger.warning(f"Backend returned {response.status_code} for note {remote_id}")
            return None
        return NoteResponse.model_validate(response.json())

    async def request_recognition(self, remote_id: str) -> NoteResponse:
        response = await self._send("POST", f"/notes/{remote_id}/recognize")
        if not response.is_success:
            raise UpstreamError(
                f"Backend refused recognition for note {remote_id}: {response.status_code}"
            )
        return NoteResponse.model_validate(response.json())
