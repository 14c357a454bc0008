"""Cancel-then-arm delayed callback on the running asyncio loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()


class Debouncer:
    """Runs at most one pending callback, always the most recently armed one.

    ``arm`` cancels the outstanding timer before scheduling a new one. Once the
    delay elapses the callback is detached from the timer slot, so arming again
    while it runs never cancels work that is already in progress.
    """

    def __init__(self, delay: float, name: str = "debounce") -> None:
        self.delay = delay
        self.name = name
        self._timer: asyncio.Task[None] | None = None
        self._running: asyncio.Task[None] | None = None

    @property
    def armed(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def running(self) -> bool:
        return self._running is not None

    def arm(self, callback: Callable[[], Awaitable[None]]) -> None:
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._fire(callback))

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def wait(self) -> None:
        """Block until no timer is armed and no callback is running."""
        while True:
            task = self._timer if self.armed else self._running
            if task is None:
                return
            await asyncio.wait({task})
            if task is self._timer and task.cancelled():
                self._timer = None

    async def _fire(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        current = asyncio.current_task()
        if self._timer is current:
            self._timer = None
        self._running = current
        try:
            await callback()
        except Exception:
            logger.error("debounce.callback_failed", name=self.name, exc_info=True)
        finally:
            if self._running is current:
                self._running = None
