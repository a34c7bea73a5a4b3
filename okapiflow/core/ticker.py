"""
Session ticker.

While a Space is clocked in the presentation layer refreshes its elapsed-time
display once per tick. The ticker is a background asyncio task that awaits
``on_tick`` every ``interval`` seconds until stopped. Tick callbacks that
raise are logged and the ticker keeps running.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]


class SessionTicker:
    """Periodic callback runner bound to one clock session."""

    def __init__(self, interval: float, on_tick: TickCallback):
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self.interval = interval
        self._on_tick = on_tick
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Starting a running ticker does nothing."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.debug(f"Session ticker started ({self.interval}s)")

    async def stop(self) -> None:
        """Stop ticking and wait for the task to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Session ticker stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._on_tick()
            except Exception as e:
                logger.warning(f"Session tick callback failed: {e}")
