"""Bounded waiting for changed files to become readable.

Editors and build tools often still hold a file open when the change
notification arrives. Each file is probed independently; after the try
limit is exhausted the file is let through anyway.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

from livewatch.config.schema import DEFAULT_UNLOCK_INTERVAL, DEFAULT_UNLOCK_TRY_LIMIT
from livewatch.logging import VERBOSE, get_logger

log = get_logger("watching")


def can_read(path: str) -> bool:
    """Return True if the file can currently be opened and read."""
    try:
        with open(path, "rb") as f:
            f.read(1)
    except OSError:
        return False
    return True


class FileUnlockWaiter:
    """Polls a file until it is readable or the try limit is exceeded."""

    def __init__(
        self,
        interval: float = DEFAULT_UNLOCK_INTERVAL,
        try_limit: int = DEFAULT_UNLOCK_TRY_LIMIT,
        probe: Callable[[str], bool] = can_read,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.interval = interval
        self.try_limit = try_limit
        self._probe = probe
        self._sleep = sleep

    async def wait(self, path: str) -> bool:
        """Wait for ``path`` to unlock.

        Returns:
            True if the file was readable, False if the limit was exceeded and
            the file is being let through regardless of its lock state.
        """
        attempt = 0
        while True:
            attempt += 1
            if self._probe(path):
                return True
            if attempt > self.try_limit:
                log.log(VERBOSE, "Gave up waiting for unlock after %d tries: %s", attempt, path)
                return False
            log.log(VERBOSE, "Waiting for file to unlock (%d): %s", attempt, path)
            await self._sleep(self.interval)

    async def wait_all(self, paths: Iterable[str]) -> list[bool]:
        """Wait for several files concurrently, results in input order."""
        return list(await asyncio.gather(*(self.wait(p) for p in paths)))
