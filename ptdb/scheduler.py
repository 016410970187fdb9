from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class SyncScheduler:
    """
    Periodically awaits tick() on the running loop.

    A failing tick is logged and the schedule carries on; nobody is waiting
    on a scheduled save, so there is no caller to report to.
    """

    def __init__(self, interval_ms: int, tick: Callable[[], Awaitable[Any]]):
        if interval_ms <= 0:
            raise ValueError(f"sync interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._tick = tick
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _loop(self) -> None:
        interval = self.interval_ms / 1000
        while True:
            await asyncio.sleep(interval)
            try:
                await self._tick()
            except Exception as e:
                logger.warning("PTDB SYNC: scheduled save failed: %r", e, exc_info=True)
