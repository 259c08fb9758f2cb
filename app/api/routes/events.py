from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from app.utils.events import event_manager

router = APIRouter(tags=["events"])


@router.get("/api/events")
async def events_endpoint():
    """SSE stream of note status changes."""
    return StreamingResponse(
        event_manager.subscribe(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for Nginx
        },
    )
