"""Pytest configuration and fixtures."""

import os
import tempfile

# Test environment defaults, set before any app imports read Settings.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CLIENT_DATABASE_URL", "sqlite://")
os.environ.setdefault("MEDIA_DIRECTORY", tempfile.mkdtemp(prefix="notes-media-"))
os.environ.setdefault("RECOGNITION_WORKER_ENABLED", "false")

from collections.abc import Generator  # noqa: E402
from pathlib import Path  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from app.api.deps import get_note_store, get_transcription_service  # noqa: E402
from app.main import app  # noqa: E402
from app.repositories.note_store import NoteStore  # noqa: E402
from app.services.media_storage import MediaStorage, get_media_storage  # noqa: E402
from app.services.transcription_service import TranscriptionService  # noqa: E402

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite://"

WHISPER_RESPONSE = {
    "text": "Buy milk and call the plumber",
    "language": "en",
    "duration": 2.5,
    "segments": [
        {
            "id": 0,
            "seek": 0,
            "start": 0.0,
            "end": 2.5,
            "text": "Buy milk and call the plumber",
            "tokens": [50364, 7035, 5882],
            "temperature": 0.0,
            "avg_logprob": -0.21,
            "compression_ratio": 0.9,
            "no_speech_prob": 0.01,
        }
    ],
}


def make_engine():
    return create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(name="engine")
def engine_fixture():
    """Create a test database engine."""
    engine = make_engine()
    yield engine
    engine.dispose()


@pytest.fixture(name="file_engine")
def file_engine_fixture(tmp_path: Path):
    """File-backed engine for tests where several threads hit the database at once."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'notes.db'}",
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture(name="store")
def store_fixture(engine) -> NoteStore:
    return NoteStore(engine)


@pytest.fixture(name="media")
def media_fixture(tmp_path: Path) -> MediaStorage:
    return MediaStorage(tmp_path / "media")


@pytest.fixture(name="audio_file")
def audio_file_fixture(tmp_path: Path) -> Path:
    """A small file standing in for a recorded WAV."""
    path = tmp_path / "recording.wav"
    path.write_bytes(b"RIFF\x24\x00\x00\x00WAVEfmt ")
    return path


@pytest.fixture(name="whisper_response")
def whisper_response_fixture() -> dict:
    return WHISPER_RESPONSE


@pytest.fixture(name="whisper_requests")
def whisper_requests_fixture() -> list[httpx.Request]:
    return []


@pytest.fixture(name="transcriber")
def transcriber_fixture(whisper_requests) -> TranscriptionService:
    """Transcription client talking to a fake Whisper container."""

    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        whisper_requests.append(request)
        return httpx.Response(200, json=WHISPER_RESPONSE)

    return TranscriptionService(
        base_url="http://whisper.test",
        model="base",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(name="client")
def client_fixture(
    store: NoteStore, media: MediaStorage, transcriber: TranscriptionService
) -> Generator[TestClient, None, None]:
    """Create a test client with storage overrides."""
    app.dependency_overrides[get_note_store] = lambda: store
    app.dependency_overrides[get_media_storage] = lambda: media
    app.dependency_overrides[get_transcription_service] = lambda: transcriber
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
