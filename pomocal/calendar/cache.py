"""
Read-through cache for upcoming calendar events.
"""

import asyncio
import contextlib
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta

from pomocal.calendar.interfaces import CalendarReader
from pomocal.integrations.google_calendar.schemas import CalendarEvent
from pomocal.utils.clock import Now, utcnow
from pomocal.utils.mixins import LoggerMixin

DEFAULT_REFRESH_SECONDS = 60.0
DEFAULT_WINDOW_MINUTES = 180
DEFAULT_MAX_RESULTS = 10

EventSequence = tuple[CalendarEvent, ...]


@dataclass(frozen=True)
class CachedEventSet:
    """Events from one successful fetch plus the clock reading taken after it."""

    events: EventSequence
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at


class CalendarCache(LoggerMixin):
    """Time-boxed cache in front of the calendar reader.

    Reads are served from the cached set while it is younger than
    ``refresh_interval`` seconds. A failed fetch falls back to the previous
    set (even if stale) or to an empty sequence and is only logged.
    Concurrent misses share one in-flight fetch.
    """

    def __init__(
        self,
        reader: CalendarReader,
        *,
        refresh_interval: float = DEFAULT_REFRESH_SECONDS,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
        max_results: int = DEFAULT_MAX_RESULTS,
        clock: Callable[[], float] = time.monotonic,
        now: Now = utcnow,
    ) -> None:
        self.reader = reader
        self.refresh_interval = refresh_interval
        self.window_minutes = window_minutes
        self.max_results = max_results
        self._clock = clock
        self._now = now

        self._entry: CachedEventSet | None = None
        self._inflight: asyncio.Task[EventSequence] | None = None
        self._superseded: set[asyncio.Task[EventSequence]] = set()
        self._generation = 0

        self._refresh_task: asyncio.Task[None] | None = None
        self._is_running = False

    @property
    def entry(self) -> CachedEventSet | None:
        return self._entry

    @property
    def is_running(self) -> bool:
        return self._is_running

    def is_fresh(self) -> bool:
        entry = self._entry
        return entry is not None and entry.age(self._clock()) < self.refresh_interval

    async def get_events(self, window_minutes: int | None = None) -> EventSequence:
        """Return upcoming events, fetching only when the cache is empty or stale."""
        entry = self._entry
        if entry is not None and entry.age(self._clock()) < self.refresh_interval:
            return entry.events
        return await self._fetch_shared(window_minutes or self.window_minutes)

    def invalidate(self) -> None:
        """Drop the cached set so the next read goes to the calendar."""
        self._entry = None
        self._generation += 1
        # A fetch already in flight may predate the write; don't hand it out.
        # Its current waiters still get its result; stop() cancels it.
        task = self._inflight
        if task is not None and not task.done():
            self._superseded.add(task)
            task.add_done_callback(self._superseded.discard)
        self._inflight = None
        self.logger.debug("Calendar cache invalidated")

    async def refresh_if_warm(self) -> bool:
        """Refresh proactively, but only when something is already cached."""
        if self._entry is None:
            return False
        try:
            await self._fetch_shared(self.window_minutes)
        except Exception as e:
            self.logger.warning("Background calendar refresh failed", error=str(e))
        return True

    # === lifecycle ===

    async def start(self) -> None:
        """Start the background refresh loop."""
        if self._is_running:
            return

        self._is_running = True
        self._refresh_task = asyncio.create_task(self._run_refresh_loop())
        self.logger.info(
            "Calendar cache refresh loop started",
            refresh_interval=self.refresh_interval,
        )

    async def stop(self) -> None:
        """Stop the background refresh loop and any fetch in flight."""
        self._is_running = False

        for task in (self._refresh_task, self._inflight, *self._superseded):
            if task and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

        self._refresh_task = None
        self._inflight = None
        self._superseded.clear()
        self.logger.info("Calendar cache refresh loop stopped")

    async def _run_refresh_loop(self) -> None:
        while self._is_running:
            await asyncio.sleep(self.refresh_interval)
            await self.refresh_if_warm()

    # === fetching ===

    async def _fetch_shared(self, window_minutes: int) -> EventSequence:
        task = self._inflight
        if task is None or task.done():
            task = asyncio.create_task(self._fetch(window_minutes, self._generation))
            self._inflight = task
        return await asyncio.shield(task)

    async def _fetch(self, window_minutes: int, generation: int) -> EventSequence:
        now = self._now()
        try:
            raw_events = await self.reader.list_events(
                now, now + timedelta(minutes=window_minutes)
            )
        except Exception as e:
            fallback = self._entry.events if self._entry else ()
            self.logger.warning(
                "Failed to fetch calendar events",
                error=str(e),
                error_type=type(e).__name__,
                cached_events=len(fallback),
            )
            return fallback

        events = self._normalize(raw_events)
        if generation == self._generation:
            self._entry = CachedEventSet(events=events, fetched_at=self._clock())
        self.logger.debug(
            "Calendar events fetched", count=len(events), window=window_minutes
        )
        return events

    def _normalize(self, raw_events: Iterable[CalendarEvent]) -> EventSequence:
        timed = [event for event in raw_events if event.start.is_set]
        timed.sort(key=lambda event: event.start_instant)
        return tuple(timed[: self.max_results])
