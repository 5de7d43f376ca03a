"""Warning and fatal hook registration.

Task runners report problems by calling ``hooks.warn(...)`` or
``hooks.fatal(...)``; interested parties register handlers with
``on_warning`` / ``on_fatal``.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable

from livewatch.logging import get_logger

_log = get_logger("hooks")

Problem = BaseException | str
Handler = Callable[[Problem], None]


def format_problem(problem: Problem, error_stack: bool = True) -> str:
    """Render a warning/fatal problem as a console message.

    Exceptions with a traceback are rendered in full when error_stack is set.
    """
    if isinstance(problem, str):
        return problem
    if error_stack and problem.__traceback__ is not None:
        return "".join(
            traceback.format_exception(type(problem), problem, problem.__traceback__)
        ).rstrip()
    return str(problem) or type(problem).__name__


class Hooks:
    """Explicit registration points for warning and fatal handlers."""

    def __init__(self) -> None:
        self._warning_handlers: list[Handler] = []
        self._fatal_handlers: list[Handler] = []

    def on_warning(self, handler: Handler) -> Callable[[], None]:
        """Register a warning handler. Returns a function that unregisters it."""
        return self._register(self._warning_handlers, handler)

    def on_fatal(self, handler: Handler) -> Callable[[], None]:
        """Register a fatal handler. Returns a function that unregisters it."""
        return self._register(self._fatal_handlers, handler)

    @staticmethod
    def _register(handlers: list[Handler], handler: Handler) -> Callable[[], None]:
        handlers.append(handler)

        def unregister() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unregister

    def warn(self, problem: Problem) -> None:
        self._emit(self._warning_handlers, problem)

    def fatal(self, problem: Problem) -> None:
        self._emit(self._fatal_handlers, problem)

    @staticmethod
    def _emit(handlers: list[Handler], problem: Problem) -> None:
        for handler in list(handlers):
            try:
                handler(problem)
            except Exception as e:
                _log.warning("Hook handler error: %s", e)
