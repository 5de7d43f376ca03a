"""WebSocket connection manager for live reload clients."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastapi import WebSocket

log = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks connected browser clients and broadcasts reload commands."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, client_id: str) -> None:
        """Accept a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections[client_id] = websocket
        log.debug("Live reload client connected: %s", client_id)

    async def disconnect(self, client_id: str) -> None:
        async with self._lock:
            self._connections.pop(client_id, None)
        log.debug("Live reload client disconnected: %s", client_id)

    async def broadcast(self, message: dict[str, Any]) -> int:
        """Send a message to every client.

        Returns:
            Number of clients the message reached.
        """
        async with self._lock:
            connections = list(self._connections.items())

        dead: list[str] = []
        delivered = 0
        for client_id, websocket in connections:
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception:
                dead.append(client_id)

        if dead:
            async with self._lock:
                for client_id in dead:
                    self._connections.pop(client_id, None)

        return delivered

    def client_ids(self) -> list[str]:
        return list(self._connections)

    def get_connection_count(self) -> int:
        return len(self._connections)

    async def close_all(self, reason: str = "Server shutting down") -> None:
        """Close all WebSocket connections gracefully."""
        async with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()

        for websocket in connections:
            with contextlib.suppress(Exception):
                await websocket.close(code=1001, reason=reason)
        log.info("Closed %d live reload connections", len(connections))
