"""Shared test utilities for livewatch tests."""

from __future__ import annotations

import asyncio
import io
import time
from collections.abc import Callable
from typing import Any

from rich.console import Console

from livewatch.config.schema import Config, LiveReloadConfig, WatchConfig
from livewatch.console import Reporter


class FakeHandle:
    """Stand-in for a watchdog ObservedWatch."""

    def __init__(self, path: str, handler: Any) -> None:
        self.path = path
        self.handler = handler
        self.closed = False


class FakeObserver:
    """Records schedule/unschedule calls instead of touching the OS."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.scheduled: list[FakeHandle] = []
        self.unscheduled: list[FakeHandle] = []
        self.fail_for = fail_for or set()
        self.alive = False

    def schedule(self, handler: Any, path: str, recursive: bool = False) -> FakeHandle:
        if path in self.fail_for:
            raise FileNotFoundError(path)
        handle = FakeHandle(path, handler)
        self.scheduled.append(handle)
        return handle

    def unschedule(self, handle: FakeHandle) -> None:
        handle.closed = True
        self.unscheduled.append(handle)

    @property
    def open_handles(self) -> list[FakeHandle]:
        return [h for h in self.scheduled if not h.closed]

    def is_alive(self) -> bool:
        return self.alive

    def start(self) -> None:
        self.alive = True

    def stop(self) -> None:
        self.alive = False

    def join(self, timeout: float | None = None) -> None:
        pass


class RecordingRunner:
    """Task runner that records dispatched task lists.

    ``during_run`` is awaited inside run(), which lets a test change files
    while the cycle is RUNNING.
    """

    def __init__(
        self,
        during_run: Callable[[list[str]], Any] | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.calls: list[list[str]] = []
        self.during_run = during_run
        self.error = error

    async def run(self, task_names: list[str]) -> None:
        self.calls.append(list(task_names))
        if self.during_run is not None:
            result = self.during_run(task_names)
            if asyncio.iscoroutine(result):
                await result
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error


class FakeLiveReloadServer:
    """Collects notifications instead of pushing them to browsers."""

    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []
        self.stopped = False

    async def notify(self, payload: dict[str, Any]) -> None:
        self.payloads.append(payload)

    async def stop(self) -> None:
        self.stopped = True


def make_reporter() -> tuple[Reporter, io.StringIO]:
    """Create a Reporter writing to an in-memory buffer."""
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=200, highlight=False)
    return Reporter(console), buffer


def make_config(**overrides: Any) -> Config:
    """Config with fast timings, suitable for orchestrator tests."""
    config = Config(
        watch=WatchConfig(
            dirs=["."],
            debounce_delay=0.02,
            unlock_interval=0.0,
            unlock_try_limit=3,
        ),
        livereload=LiveReloadConfig(enabled=True, extensions=["js", "css", "html"]),
        beep=False,
        error_stack=False,
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until predicate() is true, failing after timeout seconds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)
