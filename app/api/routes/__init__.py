"""API routes module."""

from app.api.routes.events import router as events_router
from app.api.routes.notes import router as notes_router
from app.api.routes.transcription import router as transcription_router

__all__ = ["events_router", "notes_router", "transcription_router"]
