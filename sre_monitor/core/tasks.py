"""Periodic background tasks owned by the application lifespan."""

import asyncio
import contextlib
from collections.abc import Callable

from sre_monitor.core.config.constants import Stage
from sre_monitor.core.logging.logger import get_logger

logger = get_logger(__name__)


class PeriodicTask:
    """
    Run a synchronous callable every ``interval`` seconds on the event loop.

    A failing run is logged and the schedule continues; ``stop()`` cancels the
    task and waits for it to finish.

    Usage:
        sweep = PeriodicTask("rate_limiter_cleanup", limiter.cleanup, interval=60)
        sweep.start()
        ...
        await sweep.stop()
    """

    def __init__(self, name: str, func: Callable[[], object], interval: float):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = interval
        self._func = func
        self._task: asyncio.Task | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        self._task.add_done_callback(self._on_done)
        logger.info("Periodic task started", task=self.name, interval=self.interval,
                    stage=Stage.MAINTENANCE)
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Periodic task stopped", task=self.name, runs=self.runs,
                    stage=Stage.MAINTENANCE)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self._func()
            except Exception as e:
                logger.error("Periodic task run failed", task=self.name, error=str(e),
                             exc_info=True, stage=Stage.MAINTENANCE)
            self.runs += 1

    def _on_done(self, finished: asyncio.Task) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            exc = finished.exception()
            if exc is not None:
                logger.error("Periodic task crashed", task=self.name, error=str(exc),
                             stage=Stage.MAINTENANCE)
