"""Live reload web server lifecycle management."""

from __future__ import annotations

import asyncio
import contextlib
import errno
import logging
import socket
import sys
import tempfile
import time
from pathlib import Path
from typing import Any

from livewatch.errors import LiveReloadBindError
from livewatch.livereload.routes import reload_message
from livewatch.livereload.websocket import ConnectionManager

log = logging.getLogger(__name__)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on host:port.

    Binding up front makes a held port fail here, synchronously, instead
    of inside the server task.

    Raises:
        LiveReloadBindError: If the port is already in use.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    if sys.platform != "win32":
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        if e.errno in (errno.EADDRINUSE, getattr(errno, "WSAEADDRINUSE", errno.EADDRINUSE)):
            raise LiveReloadBindError(port, e) from e
        raise
    sock.listen(128)
    sock.setblocking(False)
    return sock


class LiveReloadServer:
    """Serves the live reload protocol on one port.

    key and cert are PEM contents; uvicorn wants files, so they are written
    to a private temporary directory for the lifetime of the server.
    """

    def __init__(
        self,
        port: int,
        host: str = "0.0.0.0",
        key: bytes | None = None,
        cert: bytes | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self._key = key
        self._cert = cert
        self.connections = ConnectionManager()
        self._server: Any = None
        self._task: asyncio.Task[None] | None = None
        self._socket: socket.socket | None = None
        self._tls_dir: tempfile.TemporaryDirectory[str] | None = None
        self._start_time: float | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def status(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "port": self.port,
            "uptime": time.time() - self._start_time if self._start_time else 0,
            "connections": self.connections.get_connection_count(),
        }

    def _tls_files(self) -> dict[str, str]:
        if not (self._key and self._cert):
            return {}
        self._tls_dir = tempfile.TemporaryDirectory(prefix="livewatch-tls-")
        key_path = Path(self._tls_dir.name) / "key.pem"
        cert_path = Path(self._tls_dir.name) / "cert.pem"
        key_path.write_bytes(self._key)
        cert_path.write_bytes(self._cert)
        return {"ssl_keyfile": str(key_path), "ssl_certfile": str(cert_path)}

    async def start(self) -> None:
        """Bind the port and start serving in a background task.

        Raises:
            LiveReloadBindError: If the port is already in use.
            RuntimeError: If already running.
        """
        if self.running:
            raise RuntimeError(f"Live reload server already running on port {self.port}")

        import uvicorn

        from livewatch.livereload.routes import create_app

        self._socket = bind_socket(self.host, self.port)

        config = uvicorn.Config(
            create_app(self),
            log_config=None,  # keep livewatch's handlers
            log_level="warning",
            access_log=False,
            **self._tls_files(),
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._socket]))
        self._start_time = time.time()

        log.info("LiveReload server successfully started on port: %d", self.port)

    async def stop(self) -> None:
        """Close client connections and stop serving."""
        if self._task is None:
            return

        await self.connections.close_all("Server shutting down")

        self._server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(self._task), timeout=5.0)
        except asyncio.TimeoutError:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

        if self._socket is not None:
            self._socket.close()
        if self._tls_dir is not None:
            self._tls_dir.cleanup()

        log.info("LiveReload server stopped (was on port %d)", self.port)

        self._task = None
        self._server = None
        self._socket = None
        self._tls_dir = None
        self._start_time = None

    async def changed(self, files: list[str]) -> dict[str, Any]:
        """Push a reload command for each file to every client."""
        for path in files:
            await self.connections.broadcast(reload_message(path))
        return {"clients": self.connections.client_ids(), "files": files}

    async def notify(self, payload: dict[str, Any]) -> None:
        """Entry point used by the watcher: ``{"files": [...]}``."""
        await self.changed(list(payload.get("files", [])))
