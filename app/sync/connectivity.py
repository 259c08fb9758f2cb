"""Network reachability as seen by the sync client."""

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.sync.backend_client import BackendClient

logger = logging.getLogger(__name__)

ConnectivityListener = Callable[[bool], Awaitable[None]]


class ConnectivityMonitor:
    """
    Holds the current online flag and notifies listeners when it flips.

    The platform layer feeds it through ``set_online``; ``probe`` can be used
    instead where no platform signal exists.
    """

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: list[ConnectivityListener] = []

    @property
    def is_online(self) -> bool:
        return self._online

    def add_listener(self, listener: ConnectivityListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ConnectivityListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        logger.info(f"Connectivity changed: {'online' if online else 'offline'}")
        for listener in list(self._listeners):
            try:
                await listener(online)
            except Exception as e:
                logger.exception(f"Connectivity listener failed: {e}")

    async def probe(self, backend: "BackendClient") -> bool:
        """Check the backend health endpoint and update the flag."""
        online = await backend.ping()
        await self.set_online(online)
        return online
