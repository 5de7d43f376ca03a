"""FastAPI routes for the live reload protocol.

Speaks the LiveReload protocol used by tiny-lr and the browser extensions:
clients open ``/livereload``, exchange a ``hello`` handshake, then receive
``reload`` commands. ``/changed`` lets other tools trigger reloads.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from fastapi import Body, FastAPI, WebSocket, WebSocketDisconnect

if TYPE_CHECKING:
    from livewatch.livereload.server import LiveReloadServer

log = logging.getLogger(__name__)

PROTOCOLS = [
    "http://livereload.com/protocols/official-7",
    "http://livereload.com/protocols/official-8",
    "http://livereload.com/protocols/2.x-origin-version-negotiation",
]
SERVER_NAME = "livewatch"


def hello_message() -> dict[str, Any]:
    return {"command": "hello", "protocols": PROTOCOLS, "serverName": SERVER_NAME}


def reload_message(path: str) -> dict[str, Any]:
    return {"command": "reload", "path": path, "liveCSS": True}


def _split_files(value: str | None) -> list[str]:
    if not value:
        return []
    return [f for f in (part.strip() for part in value.replace(" ", ",").split(",")) if f]


def create_app(server: LiveReloadServer) -> FastAPI:
    """Create the live reload application bound to a server instance."""
    from livewatch import __version__

    app = FastAPI(
        title="livewatch live reload",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get("/")
    async def index() -> dict[str, Any]:
        return {"tinylr": "Welcome", "version": __version__}

    @app.get("/changed")
    async def changed_get(files: str | None = None) -> dict[str, Any]:
        return await server.changed(_split_files(files))

    @app.post("/changed")
    async def changed_post(payload: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
        files = (payload or {}).get("files", [])
        if isinstance(files, str):
            files = _split_files(files)
        return await server.changed([str(f) for f in files])

    @app.websocket("/livereload")
    async def livereload(websocket: WebSocket) -> None:
        client_id = uuid.uuid4().hex
        await server.connections.connect(websocket, client_id)
        try:
            while True:
                message = await websocket.receive_json()
                command = message.get("command") if isinstance(message, dict) else None
                if command == "hello":
                    await websocket.send_json(hello_message())
                elif command == "info":
                    log.debug("Client %s info: %s", client_id, message)
        except WebSocketDisconnect:
            pass
        finally:
            await server.connections.disconnect(client_id)

    return app
