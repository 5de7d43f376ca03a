"""Top-level watch lifecycle.

The orchestrator owns the WatchState and wires the pieces together:

1. watchdog events cross from the observer thread into one asyncio.Queue
2. the queue consumer filters them and feeds the RunGate
3. debounce expiry (or a replay) wakes the supervisor loop
4. the supervisor runs one cycle at a time: unlock wait, resolution,
   batching, live reload notification, task dispatch
5. after every dispatched task sequence the watch is re-activated:
   directories are reconciled and deferred changes are replayed

Warnings and fatals reported through ``hooks`` are printed and, unless
``force`` is set, reset all state and restart watching with an empty
task queue.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from livewatch.config.schema import Config
from livewatch.console import Reporter
from livewatch.errors import LiveReloadBindError, TaskWarning
from livewatch.hooks import Hooks, Problem, format_problem
from livewatch.livereload.notifier import LiveReloadNotifier, LiveReloadSink
from livewatch.logging import VERBOSE, get_logger
from livewatch.tasks.batch import TaskBatch, TaskBatchBuilder
from livewatch.tasks.resolver import TaskResolver
from livewatch.terminal.runner import ShellTaskRunner, TaskRunner
from livewatch.watching.directories import DirectoryWatcherManager
from livewatch.watching.events import ChangeEvent
from livewatch.watching.expand import expand_dirs
from livewatch.watching.filters import ChangeEventFilter
from livewatch.watching.gate import DebounceScheduler, RunGate, WatchState
from livewatch.watching.unlock import FileUnlockWaiter, can_read

log = get_logger("orchestrator")


def _read_tls_material(value: str | bytes | None, root: Path) -> bytes | None:
    if value is None or isinstance(value, bytes):
        return value
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    return path.read_bytes()


class WatchOrchestrator:
    """Runs the watch process for one project root."""

    def __init__(
        self,
        config: Config,
        root: str | Path = ".",
        runner: TaskRunner | None = None,
        reporter: Reporter | None = None,
        observer: Any | None = None,
        live_reload_server: LiveReloadSink | None = None,
        probe: Callable[[str], bool] = can_read,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Configuration for this activation.
            root: Project root; directory patterns and TLS paths are relative to it.
            runner: Executes dispatched task names; ShellTaskRunner over config.tasks if None.
            reporter: Console reporter.
            observer: watchdog Observer to schedule directory watches on.
            live_reload_server: Server to notify; a LiveReloadServer is started if None.
            probe: File readability check used while waiting for unlocks.
        """
        self.config = config
        self.root = Path(root)
        self.state = WatchState()
        self.hooks = Hooks()
        self.reporter = reporter or Reporter()

        self._runner = runner or ShellTaskRunner(
            config.tasks, reporter=self.reporter, cwd=str(self.root)
        )
        self._debounce = DebounceScheduler(self._on_debounce, config.watch.debounce_delay)
        self.gate = RunGate(self.state, self._debounce)
        self._filter = ChangeEventFilter(config.watch.ignored_files, root=self.root.as_posix())
        self._builder = TaskBatchBuilder(TaskResolver(config.triggers))
        self._unlock = FileUnlockWaiter(
            interval=config.watch.unlock_interval,
            try_limit=config.watch.unlock_try_limit,
            probe=probe,
        )
        self._server = live_reload_server
        self._notifier = LiveReloadNotifier(config.livereload, self.state, live_reload_server)
        self._directories = DirectoryWatcherManager(
            self._post_event, observer=observer, reporter=self.reporter
        )

        self._loop: asyncio.AbstractEventLoop | None = None
        self._events: asyncio.Queue[ChangeEvent] | None = None
        self._cycle_ready = asyncio.Event()
        self._background: list[asyncio.Task[None]] = []
        self._dispatch_task: asyncio.Task[None] | None = None
        self._first_run = True
        self._in_cycle = False
        self._generation = 0
        self.cycles = 0

    @property
    def directories(self) -> list[str]:
        return self._directories.directories

    # -- lifecycle -----------------------------------------------------------

    async def start(self) -> None:
        """First activation: live reload server, hooks, background loops.

        Raises:
            LiveReloadBindError: If the live reload port is already in use.
        """
        if not self._first_run:
            return
        self._first_run = False

        self._loop = asyncio.get_running_loop()
        self._events = asyncio.Queue()

        if self.config.livereload.enabled:
            await self._start_live_reload()

        self.hooks.on_warning(lambda problem: self._recover(problem, warning=True))
        self.hooks.on_fatal(lambda problem: self._recover(problem, warning=False))

        self._directories.start()
        self._background = [
            asyncio.create_task(self._consume_events()),
            asyncio.create_task(self._supervise()),
        ]
        self.activate()

    async def _start_live_reload(self) -> None:
        lr = self.config.livereload
        self.reporter.info(f"Starting live reload server on port: {lr.port}")
        if self._server is None:
            from livewatch.livereload.server import LiveReloadServer

            server = LiveReloadServer(
                port=lr.port,
                host=lr.host,
                key=_read_tls_material(lr.key, self.root),
                cert=_read_tls_material(lr.cert, self.root),
            )
            try:
                await server.start()
            except LiveReloadBindError as e:
                self.reporter.fatal(str(e), beep=self.config.beep)
                self.reporter.fatal("Stop the process holding it and restart the watch.")
                raise
            self._server = server
        self._notifier.server = self._server

    async def run(self) -> None:
        """Start and keep watching until cancelled."""
        await self.start()
        try:
            await asyncio.gather(*self._background)
        finally:
            await self.stop()

    async def stop(self) -> None:
        for task in self._background:
            task.cancel()
        await asyncio.gather(*self._background, return_exceptions=True)
        self._background = []
        if self._dispatch_task is not None:
            self._dispatch_task.cancel()
        self._debounce.cancel()
        self._directories.stop()
        stop = getattr(self._server, "stop", None)
        if stop is not None:
            await stop()

    def activate(self, dispatched: Iterable[str] = ()) -> None:
        """(Re)activate watching after startup or a dispatched task sequence."""
        self._directories.reconcile(expand_dirs(self.config.watch.dirs, self.root))
        self.reporter.waiting()
        self._finish_cycle(dispatched)

    def _finish_cycle(self, dispatched: Iterable[str]) -> None:
        if self.gate.end_cycle(dispatched):
            # Replay without waiting for another debounce window.
            self._cycle_ready.set()

    # -- event intake --------------------------------------------------------

    def _post_event(self, event: ChangeEvent) -> None:
        """Hand an event from the observer thread to the event loop."""
        if self._loop is None or self._events is None:
            return
        with contextlib.suppress(RuntimeError):  # loop already closed
            self._loop.call_soon_threadsafe(self._events.put_nowait, event)

    async def _consume_events(self) -> None:
        assert self._events is not None
        while True:
            event = await self._events.get()
            self.handle_event(event)

    def handle_event(self, event: ChangeEvent) -> None:
        path = self._filter.filter(event.kind, event.raw_name, event.directory)
        if path is not None:
            self.gate.ingest(path)

    def ingest(self, path: str) -> None:
        """Feed an already normalized file path to the run gate."""
        self.gate.ingest(path)

    def _on_debounce(self) -> None:
        self._cycle_ready.set()

    # -- cycles --------------------------------------------------------------

    async def _supervise(self) -> None:
        while True:
            await self._cycle_ready.wait()
            self._cycle_ready.clear()
            if self.gate.running or not self.state.pending:
                continue
            try:
                await self.run_cycle()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.hooks.fatal(e)
                if self.gate.running:
                    # force is set, so nothing reset the gate
                    self.activate()

    async def run_cycle(self) -> TaskBatch | None:
        """Run one dispatch cycle over the pending changes.

        Returns:
            The batch that was built, or None if a reset aborted the cycle.
        """
        generation = self._generation
        self._in_cycle = True
        try:
            snapshot = self.gate.begin_cycle()
            self.cycles += 1
            self._notifier.track(snapshot)

            resolved = self._builder.resolve_all(snapshot)
            await self._unlock.wait_all(path for path, tasks in resolved if tasks)
            if generation != self._generation:
                return None

            batch = self._builder.build(resolved)
            reload_files = self._notifier.flush()
            changed = list(dict.fromkeys(reload_files + batch.files))
            if changed:
                self.reporter.files_changed(changed)
            await self._notifier.notify(reload_files)

            if not batch.tasks:
                self.reporter.continuing()
                self.reporter.waiting()
                self._finish_cycle(batch.dispatched)
                return batch

            log.log(VERBOSE, "Running tasks: %s", ", ".join(batch.tasks))
            await self._dispatch(batch.tasks)
            if generation != self._generation:
                return None
            self.activate(batch.dispatched)
            return batch
        finally:
            self._in_cycle = False
            if generation != self._generation:
                self.activate()

    async def _dispatch(self, tasks: list[str]) -> None:
        task = asyncio.create_task(self._runner.run(list(tasks)))
        self._dispatch_task = task
        try:
            await asyncio.wait([task])
        finally:
            if not task.done():
                task.cancel()
            self._dispatch_task = None

        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if isinstance(error, TaskWarning):
            self.hooks.warn(error)
        else:
            self.hooks.fatal(error)

    # -- recovery ------------------------------------------------------------

    def _recover(self, problem: Problem, warning: bool) -> None:
        message = format_problem(problem, self.config.error_stack)
        if warning:
            log.warning("%s", message)
            self.reporter.warning(message, beep=self.config.beep)
        else:
            log.error("%s", message)
            self.reporter.fatal(message, beep=self.config.beep)

        if not self.config.force:
            self.reset()

    def reset(self) -> None:
        """Drop all queued state and restart watching with an empty task queue."""
        self.gate.reset()
        self._generation += 1
        if self._dispatch_task is not None and not self._dispatch_task.done():
            self._dispatch_task.cancel()
        if not self._in_cycle:
            self.activate()
