import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs an async callable every ``interval`` seconds until stopped.

    A failing run is logged and the loop keeps going; ``stop()`` cancels the
    loop and waits for it to finish.
    """

    def __init__(self, name: str, func: Callable[[], Awaitable[None]], interval: float):
        self.name = name
        self.interval = interval
        self._func = func
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info(f"{self.name} started (every {self.interval}s)")

    async def stop(self):
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info(f"{self.name} stopped")

    async def _loop(self):
        while self._running:
            try:
                await self._func()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(f"{self.name} run failed")
            await asyncio.sleep(self.interval)
