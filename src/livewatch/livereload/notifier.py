"""Filtering changed files down to live-reload notifications."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

from livewatch.config.schema import LiveReloadConfig
from livewatch.logging import VERBOSE, get_logger
from livewatch.tasks.resolver import extension_of
from livewatch.watching.gate import WatchState

log = get_logger("livereload")


class LiveReloadSink(Protocol):
    """Anything that accepts ``{"files": [...]}`` notifications."""

    async def notify(self, payload: dict[str, Any]) -> None: ...


class LiveReloadNotifier:
    """Accumulates changed files and forwards reload-eligible ones."""

    def __init__(
        self,
        config: LiveReloadConfig,
        state: WatchState,
        server: LiveReloadSink | None = None,
    ) -> None:
        self.config = config
        self.state = state
        self.server = server
        self._extensions = set(config.extensions)

    def track(self, paths: Iterable[str]) -> None:
        if not self.config.enabled:
            return
        for path in paths:
            self.state.live_reload[path] = None

    def flush(self) -> list[str]:
        """Return accumulated reload-eligible files and clear the accumulation."""
        files = [p for p in self.state.live_reload if extension_of(p) in self._extensions]
        self.state.live_reload.clear()
        return files

    async def notify(self, files: list[str]) -> bool:
        """Send one notification if enabled and there is something to send."""
        if not (self.config.enabled and files and self.server is not None):
            return False
        log.log(VERBOSE, "Notifying live reload about: %s", ", ".join(files))
        await self.server.notify({"files": list(files)})
        return True
