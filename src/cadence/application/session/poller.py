"""
Periodic due-check bound to a review session.

Runs as an asyncio task on the session's event loop. The task sleeps, calls
the callback, and repeats until cancelled; it never blocks the loop.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class DueCheckPoller:
    """
    Cancellable repeating timer.

    Args:
        callback: Coroutine function invoked once per period.
        interval: Period in seconds.
    """

    def __init__(self, callback: Callable[[], Awaitable[object]], interval: float):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self._callback = callback
        self.interval = interval
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the timer, replacing any previous task so only one poller runs."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        self._task.add_done_callback(self._on_done)
        logger.debug(f"Due-check poller armed every {self.interval:g}s")

    def cancel(self) -> bool:
        """
        Stop the timer.

        Returns True if a live task was cancelled by this call, False if there
        was nothing to cancel.
        """
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Due-check poller cancelled")
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            await self._callback()

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Due-check poller stopped: {exc}", exc_info=exc)
