"""Cooperative periodic driver for timer ticks and calendar polling."""

import asyncio
import contextlib
import inspect
from collections.abc import Callable
from typing import Any

from pomocal.utils.mixins import LoggerMixin


class PeriodicTicker(LoggerMixin):
    """Calls ``callback`` every ``interval`` seconds until stopped.

    ``start`` and ``stop`` are idempotent. ``stop`` cancels immediately so
    no further callbacks run after it returns.
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        interval: float = 1.0,
        name: str = "ticker",
    ) -> None:
        self.callback = callback
        self.interval = interval
        self.name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    def stop(self) -> None:
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()

    async def aclose(self) -> None:
        """Stop and wait for the loop to unwind."""
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.error(
                    "Periodic callback failed", ticker=self.name, error=str(e)
                )
