"""Tests for the calendar event cache."""

import asyncio
import contextlib
from datetime import UTC, datetime, timedelta

import pytest

from pomocal.calendar.cache import CalendarCache
from pomocal.errors import CalendarUnavailableError
from pomocal.integrations.google_calendar.schemas import CalendarEvent, EventTime

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


def _event(event_id: str, minutes: int, summary: str = "Meeting") -> CalendarEvent:
    start = NOW + timedelta(minutes=minutes)
    return CalendarEvent(
        id=event_id,
        summary=summary,
        start=EventTime(date_time=start),
        end=EventTime(date_time=start + timedelta(minutes=30)),
    )


class FakeClock:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class FakeReader:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls: list[tuple[datetime, datetime]] = []

    async def list_events(self, time_min, time_max):
        self.calls.append((time_min, time_max))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return list(result)


def _cache(reader, clock=None, **kwargs) -> CalendarCache:
    return CalendarCache(reader, clock=clock or FakeClock(), now=lambda: NOW, **kwargs)


@pytest.mark.asyncio
async def test_fresh_cache_is_served_without_fetch() -> None:
    clock = FakeClock()
    reader = FakeReader([_event("a", 10)])
    cache = _cache(reader, clock)

    first = await cache.get_events()
    clock.advance(59)
    second = await cache.get_events()

    assert second is first
    assert len(reader.calls) == 1


@pytest.mark.asyncio
async def test_stale_cache_triggers_fetch() -> None:
    clock = FakeClock()
    reader = FakeReader([_event("a", 10)], [_event("b", 20)])
    cache = _cache(reader, clock)

    await cache.get_events()
    clock.advance(61)
    events = await cache.get_events()

    assert [e.id for e in events] == ["b"]
    assert len(reader.calls) == 2


@pytest.mark.asyncio
async def test_fetch_window_is_bounded_by_now() -> None:
    reader = FakeReader([])
    cache = _cache(reader)

    await cache.get_events(45)

    time_min, time_max = reader.calls[0]
    assert time_min == NOW
    assert time_max == NOW + timedelta(minutes=45)


@pytest.mark.asyncio
async def test_default_window_is_three_hours() -> None:
    reader = FakeReader([])
    await _cache(reader).get_events()

    time_min, time_max = reader.calls[0]
    assert time_max - time_min == timedelta(minutes=180)


@pytest.mark.asyncio
async def test_events_are_filtered_sorted_and_capped() -> None:
    undated = CalendarEvent(id="x", start=EventTime(), end=EventTime())
    events = [_event(str(i), 60 - i) for i in range(12)] + [undated]
    cache = _cache(FakeReader(events))

    result = await cache.get_events()

    assert len(result) == 10
    assert "x" not in [e.id for e in result]
    starts = [e.start_instant for e in result]
    assert starts == sorted(starts)
    assert result[0].id == "11"


@pytest.mark.asyncio
async def test_failure_falls_back_to_stale_set() -> None:
    clock = FakeClock()
    reader = FakeReader([_event("a", 10)], CalendarUnavailableError("down"))
    cache = _cache(reader, clock)

    first = await cache.get_events()
    clock.advance(120)
    fallback = await cache.get_events()

    assert fallback is first
    # The failed fetch must not refresh the timestamp
    assert not cache.is_fresh()


@pytest.mark.asyncio
async def test_failure_without_cache_returns_empty() -> None:
    cache = _cache(FakeReader(RuntimeError("no network")))

    assert await cache.get_events() == ()
    assert cache.entry is None


@pytest.mark.asyncio
async def test_invalidate_forces_fetch() -> None:
    reader = FakeReader([_event("a", 10)], [_event("b", 10)])
    cache = _cache(reader)

    await cache.get_events()
    cache.invalidate()
    events = await cache.get_events()

    assert [e.id for e in events] == ["b"]
    assert len(reader.calls) == 2


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_fetch() -> None:
    release = asyncio.Event()
    calls = 0

    class SlowReader:
        async def list_events(self, time_min, time_max):
            nonlocal calls
            calls += 1
            await release.wait()
            return [_event("a", 10)]

    cache = _cache(SlowReader())
    pending = [asyncio.create_task(cache.get_events()) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*pending)

    assert calls == 1
    assert results[0] is results[1] is results[2]


@pytest.mark.asyncio
async def test_fetch_started_before_invalidate_is_not_stored() -> None:
    release = asyncio.Event()

    class SlowReader:
        async def list_events(self, time_min, time_max):
            await release.wait()
            return [_event("old", 10)]

    cache = _cache(SlowReader())
    pending = asyncio.create_task(cache.get_events())
    await asyncio.sleep(0)

    cache.invalidate()
    release.set()
    await pending

    assert cache.entry is None


@pytest.mark.asyncio
async def test_stop_cancels_fetch_superseded_by_invalidate() -> None:
    started = asyncio.Event()
    cancelled = asyncio.Event()

    class BlockedReader:
        async def list_events(self, time_min, time_max):
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

    cache = _cache(BlockedReader())
    fetch = cache._fetch_shared(cache.window_minutes)
    waiter = asyncio.create_task(fetch)
    await started.wait()

    cache.invalidate()
    await cache.stop()

    assert cancelled.is_set()
    assert cache._superseded == set()
    waiter.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await waiter


@pytest.mark.asyncio
async def test_background_refresh_skips_empty_cache() -> None:
    reader = FakeReader([_event("a", 10)])
    cache = _cache(reader)

    assert await cache.refresh_if_warm() is False
    assert reader.calls == []


@pytest.mark.asyncio
async def test_background_refresh_updates_warm_cache() -> None:
    reader = FakeReader([_event("a", 10)], [_event("b", 10)])
    cache = _cache(reader)
    await cache.get_events()

    assert await cache.refresh_if_warm() is True
    assert [e.id for e in cache.entry.events] == ["b"]


@pytest.mark.asyncio
async def test_background_refresh_failure_keeps_entry() -> None:
    reader = FakeReader([_event("a", 10)], CalendarUnavailableError("down"))
    cache = _cache(reader)
    first = await cache.get_events()

    assert await cache.refresh_if_warm() is True
    assert cache.entry.events is first


@pytest.mark.asyncio
async def test_refresh_loop_start_stop_is_idempotent() -> None:
    reader = FakeReader([_event("a", 10)])
    cache = _cache(reader, refresh_interval=0.01)
    await cache.get_events()

    await cache.start()
    await cache.start()
    assert cache.is_running
    await asyncio.sleep(0.05)
    await cache.stop()
    await cache.stop()

    assert not cache.is_running
    assert len(reader.calls) >= 2


@pytest.mark.asyncio
async def test_refresh_loop_never_populates_cold_cache() -> None:
    reader = FakeReader([_event("a", 10)])
    cache = _cache(reader, refresh_interval=0.01)

    await cache.start()
    await asyncio.sleep(0.05)
    await cache.stop()

    assert reader.calls == []
