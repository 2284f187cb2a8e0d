"""Minimal observer used to publish state changes to subscribers."""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class Event:
    """Synchronous fan-out to listeners.

    A listener that returns a coroutine is scheduled on the running loop;
    pending coroutines can be awaited with :meth:`drain`.
    """

    def __init__(self, name: str = "event") -> None:
        self.name = name
        self._listeners: list[Callable[..., Any]] = []
        self._pending: set[asyncio.Task[Any]] = set()

    def add_listener(self, listener: Callable[..., Any]) -> None:
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[..., Any]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(*args, **kwargs)
            except Exception:
                logger.exception("Error in event listener", event_name=self.name)
                continue

            if inspect.iscoroutine(result):
                self._schedule(result)

    async def drain(self) -> None:
        """Wait for every scheduled async listener to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(self, coro: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.error("Async listener requires a running event loop", event_name=self.name)
            return

        task = loop.create_task(self._safe_task(coro))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _safe_task(self, coro: Any) -> None:
        try:
            await coro
        except Exception:
            logger.exception("Unhandled exception in async event listener", event_name=self.name)
