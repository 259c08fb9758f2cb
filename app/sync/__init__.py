"""Client-side synchronization of captured notes with the backend."""

from app.config import settings
from app.database import create_db_engine
from app.sync.backend_client import BackendClient
from app.sync.connectivity import ConnectivityMonitor
from app.sync.coordinator import NoteSyncCoordinator, resolve_recognized_text
from app.sync.local_repository import LocalNoteRepository

__all__ = [
    "BackendClient",
    "ConnectivityMonitor",
    "LocalNoteRepository",
    "NoteSyncCoordinator",
    "build_coordinator",
    "resolve_recognized_text",
]


def build_coordinator(connectivity: ConnectivityMonitor | None = None) -> NoteSyncCoordinator:
    """Wire a coordinator from settings. Call ``start()`` on it inside a running loop."""
    repository = LocalNoteRepository(create_db_engine(settings.client_database_url))
    return NoteSyncCoordinator(
        repository=repository,
        backend=BackendClient(settings.backend_base_url),
        connectivity=connectivity or ConnectivityMonitor(),
    )
