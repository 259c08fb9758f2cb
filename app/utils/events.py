import asyncio
import json
import logging
from typing import Set

logger = logging.getLogger(__name__)


class EventManager:
    """Fan-out of note status changes to Server-Sent Events subscribers."""

    def __init__(self):
        self.queues: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self.queues)

    def open_queue(self) -> asyncio.Queue:
        queue: asyncio.Queue[str] = asyncio.Queue()
        self.queues.add(queue)
        return queue

    def close_queue(self, queue: asyncio.Queue) -> None:
        self.queues.discard(queue)

    async def subscribe(self):
        """Yield SSE frames until the client disconnects."""
        queue = self.open_queue()
        logger.info(f"[SSE] Subscribed. Active connections: {self.subscriber_count}")

        try:
            # Send initial ping to confirm connection
            yield ": ping\n\n"

            while True:
                data = await queue.get()
                yield data
        finally:
            self.close_queue(queue)
            logger.info("[SSE] Unsubscribed.")

    async def broadcast(self, event_name: str, data: str):
        """Broadcast an event to all connected clients."""
        if not self.queues:
            logger.debug(f"[SSE] No active connections to broadcast '{event_name}'")
            return

        logger.debug(
            f"[SSE] Broadcasting event '{event_name}' ({len(self.queues)} connections)"
        )
        message = f"event: {event_name}\ndata: {data}\n\n"
        for queue in list(self.queues):
            await queue.put(message)

    async def note_status_changed(self, note_id: str, status: str) -> None:
        await self.broadcast(
            "note-status", json.dumps({"id": note_id, "recognitionStatus": status})
        )


event_manager = EventManager()
