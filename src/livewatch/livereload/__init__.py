"""Live reload support.

A small LiveReload-protocol server (FastAPI under uvicorn) and the notifier
that decides which changed files browsers should hear about.
"""

from livewatch.livereload.notifier import LiveReloadNotifier, LiveReloadSink
from livewatch.livereload.server import LiveReloadServer, bind_socket
from livewatch.livereload.websocket import ConnectionManager

__all__ = [
    "ConnectionManager",
    "LiveReloadNotifier",
    "LiveReloadServer",
    "LiveReloadSink",
    "bind_socket",
]
