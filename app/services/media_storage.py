"""Storage of uploaded audio and photo blobs on the local disk."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from app.config import settings

logger = logging.getLogger(__name__)


class MediaStorage:
    """Saves uploads under a media directory with collision-free names."""

    def __init__(self, media_directory: str | Path | None = None):
        self.media_directory = Path(media_directory or settings.media_directory)
        self.media_directory.mkdir(parents=True, exist_ok=True)

    def _destination(self, filename: str | None) -> Path:
        name = Path(filename or "upload.bin").name
        return self.media_directory / f"{uuid.uuid4().hex}_{name}"

    async def save(self, upload: UploadFile) -> str:
        """
        Write an uploaded file to disk.

        Args:
            upload: File received by a multipart endpoint

        Returns:
            Path of the stored blob
        """
        content = await upload.read()
        destination = self._destination(upload.filename)
        destination.write_bytes(content)
        logger.debug(f"Saved {len(content)} bytes to {destination}")
        return str(destination)

    def delete(self, path: str | Path) -> None:
        Path(path).unlink(missing_ok=True)


_media_storage: MediaStorage | None = None


def get_media_storage() -> MediaStorage:
    global _media_storage
    if _media_storage is None:
        _media_storage = MediaStorage()
    return _media_storage
