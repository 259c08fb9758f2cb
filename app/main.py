"""Notes Commander backend - Main Application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes.events import router as events_router
from app.api.routes.notes import router as notes_router
from app.api.routes.transcription import router as transcription_router
from app.config import settings
from app.logging_config import setup_logging
from app.repositories.note_store import note_store
from app.services.transcription_service import transcription_service
from app.tasks.recognition_worker import RecognitionWorker


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await note_store.ensure_initialized()

    worker = RecognitionWorker(note_store, transcription_service)
    if settings.recognition_worker_enabled:
        worker.start()
    app.state.recognition_worker = worker

    yield
    await worker.stop()


app = FastAPI(
    title=settings.app_name,
    description="Voice note storage with background speech recognition",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(events_router)
app.include_router(notes_router)
app.include_router(transcription_router)


@app.get("/health")
async def health_check() -> dict:
    """
    System health check.

    Returns status of the application and its dependencies.
    """
    whisper_connected = await transcription_service.check_connection()

    # Database is connected if we reached this point
    db_connected = True

    return {
        "status": "ok",
        "whisper_connected": whisper_connected,
        "db_connected": db_connected,
    }
