"""Run serialization and debouncing.

The run gate is a two-state machine (idle/running) over an explicit
WatchState. While idle, changes collect in the pending set and re-arm the
debounce timer. While running, they collect in the deferred set instead,
and are replayed once the cycle ends, minus any path the cycle itself
dispatched. Tasks commonly rewrite the files that triggered them, so
replaying those would loop forever.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from livewatch.config.schema import DEFAULT_DEBOUNCE_DELAY
from livewatch.logging import VERBOSE, get_logger

log = get_logger("watching")


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class WatchState:
    """All mutable coordinator state, owned by the orchestrator.

    The path sets are insertion-ordered dicts used as ordered sets.
    Only the event loop thread may touch this object.
    """

    pending: dict[str, None] = field(default_factory=dict)
    deferred: dict[str, None] = field(default_factory=dict)
    live_reload: dict[str, None] = field(default_factory=dict)
    run_state: RunState = RunState.IDLE

    def reset(self) -> None:
        self.pending.clear()
        self.deferred.clear()
        self.live_reload.clear()
        self.run_state = RunState.IDLE


class DebounceScheduler:
    """Fires a callback once after a quiet period with no further arm() calls."""

    def __init__(
        self,
        callback: Callable[[], None],
        delay: float = DEFAULT_DEBOUNCE_DELAY,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        """(Re)start the quiet-period timer."""
        loop = self._loop or asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class RunGate:
    """Serializes dispatch cycles and queues changes seen mid-cycle."""

    def __init__(self, state: WatchState, debounce: DebounceScheduler) -> None:
        self.state = state
        self._debounce = debounce

    @property
    def running(self) -> bool:
        return self.state.run_state is RunState.RUNNING

    def ingest(self, path: str) -> None:
        """Accept a qualifying file change."""
        if self.running:
            log.log(VERBOSE, "Still running, so defer: %s", path)
            self.state.deferred[path] = None
            return
        self.state.pending[path] = None
        self._debounce.arm()

    def begin_cycle(self) -> list[str]:
        """Enter RUNNING and drain the pending set into a snapshot.

        Raises:
            RuntimeError: If a cycle is already running.
        """
        if self.running:
            raise RuntimeError("A dispatch cycle is already running")
        self._debounce.cancel()
        self.state.run_state = RunState.RUNNING
        snapshot = list(self.state.pending)
        self.state.pending.clear()
        return snapshot

    def end_cycle(self, dispatched: Iterable[str] = ()) -> bool:
        """Leave RUNNING, moving deferred changes back into pending.

        Paths the cycle dispatched are dropped from the replay.

        Returns:
            True if pending is non-empty, meaning a new cycle should run now.
        """
        dispatched = set(dispatched)
        deferred = list(self.state.deferred)
        self.state.deferred.clear()

        if deferred:
            log.log(VERBOSE, "Files changed within watch task:\n%s", "\n".join(deferred))

        for path in deferred:
            if path in dispatched:
                log.log(VERBOSE, "Didn't dispatch: %s", path)
            else:
                log.log(VERBOSE, "dispatched deferred: %s", path)
                self.state.pending[path] = None

        self.state.run_state = RunState.IDLE
        return bool(self.state.pending)

    def reset(self) -> None:
        """Drop every pending, deferred and live reload path and go IDLE."""
        self._debounce.cancel()
        self.state.reset()
