"""Transcription service backed by an OpenAI-compatible Whisper container."""

import asyncio
import logging
from pathlib import Path

import httpx

from app.config import settings
from app.schemas.transcription import TranscriptionResult
from app.utils.exceptions import UpstreamError

logger = logging.getLogger(__name__)

TRANSCRIPTIONS_PATH = "/v1/audio/transcriptions"


class TranscriptionService:
    """Service for audio transcription through the Whisper HTTP API."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize transcription service.

        Args:
            base_url: Whisper API base URL (default from settings)
            model: Whisper model to request (default from settings)
            timeout: Request timeout in seconds; transcription is slow
            transport: Optional httpx transport, used by tests
        """
        self.base_url = (base_url or settings.whisper_base_url).rstrip("/")
        self.model = model or settings.whisper_model
        self.timeout = timeout or settings.whisper_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def check_connection(self) -> bool:
        """
        Check if the transcription service is reachable.

        Returns:
            True if connected, False otherwise
        """
        try:
            async with self._client() as client:
                response = await client.get("/health", timeout=5.0)
                return response.status_code < 500
        except Exception as e:
            logger.warning(f"Whisper connection check failed: {e}")
            return False

    async def transcribe(
        self, audio_path: str | Path, language: str | None = None
    ) -> TranscriptionResult:
        """
        Transcribe an audio file to text.

        Sends exactly one request and never retries; a transcription can run
        for minutes and the caller decides what to do on failure. The input
        file is left untouched.

        Args:
            audio_path: Path to the audio file
            language: Optional ISO language hint

        Returns:
            Parsed transcription result

        Raises:
            FileNotFoundError: If the audio file does not exist
            UpstreamError: If the service fails or returns an unreadable body
        """
        path = Path(audio_path)
        if not path.is_file():
            raise FileNotFoundError(f"Audio file not found: {path}")

        data = {"model": self.model, "response_format": "verbose_json"}
        if language:
            data["language"] = language

        audio = await asyncio.to_thread(path.read_bytes)
        files = {"file": (path.name, audio, "audio/wav")}

        try:
            async with self._client() as client:
                response = await client.post(TRANSCRIPTIONS_PATH, data=data, files=files)
            response.raise_for_status()
            result = TranscriptionResult.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Whisper API error {e.response.status_code} for {path}: {e.response.text}"
            )
            raise UpstreamError(
                f"Transcription service returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Whisper request error for {path}: {e}")
            raise UpstreamError(f"Failed to reach transcription service: {e}") from e
        except ValueError as e:
            logger.error(f"Unreadable Whisper response for {path}: {e}")
            raise UpstreamError("Transcription service returned an invalid body") from e

        logger.info(
            f"Transcribed {path.name}: {len(result.text)} chars, language={result.language}"
        )
        return result


# Singleton instance
transcription_service = TranscriptionService()
