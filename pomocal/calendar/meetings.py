"""
Next-meeting resolution and the smart-adjust heuristic.

Both are pure functions of their inputs and are re-evaluated on every
poll; nothing here is cached.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pomocal.integrations.google_calendar.schemas import CalendarEvent

# Meetings further away than this are ignored.
ADJUST_HORIZON_MINUTES = 30
# Below this there is no point starting a focus session.
MIN_FOCUS_MINUTES = 5
BUFFER_MINUTES = 3

REASON_TOO_SOON = "meeting starts too soon"
REASON_BUFFER = "finish 3 minutes before meeting"


@dataclass(frozen=True)
class Adjustment:
    suggested_minutes: int
    reason: str


class SmartAdjustSuggestion(BaseModel):
    """Suggested duration change ahead of a meeting (0 means take a break)."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    original_meeting: CalendarEvent
    suggested_duration: int
    reason: str


def next_meeting(
    events: Iterable[CalendarEvent], now: datetime
) -> CalendarEvent | None:
    """Return the first event starting strictly after ``now``.

    ``events`` must be ordered by start ascending.
    """
    for event in events:
        start = event.start_instant
        if start is not None and start > now:
            return event
    return None


def minutes_until(target: datetime, now: datetime) -> int:
    """Whole minutes from ``now`` to ``target``, floored at millisecond precision."""
    millis = (target - now) // timedelta(milliseconds=1)
    return millis // 60_000


def suggest_adjustment(meeting_start: datetime, now: datetime) -> Adjustment | None:
    minutes = minutes_until(meeting_start, now)

    if minutes > ADJUST_HORIZON_MINUTES:
        return None
    if minutes < MIN_FOCUS_MINUTES:
        return Adjustment(suggested_minutes=0, reason=REASON_TOO_SOON)
    return Adjustment(
        suggested_minutes=max(MIN_FOCUS_MINUTES, minutes - BUFFER_MINUTES),
        reason=REASON_BUFFER,
    )


def build_suggestion(
    meeting: CalendarEvent | None, now: datetime
) -> SmartAdjustSuggestion | None:
    if meeting is None or meeting.start_instant is None:
        return None

    adjustment = suggest_adjustment(meeting.start_instant, now)
    if adjustment is None:
        return None

    return SmartAdjustSuggestion(
        original_meeting=meeting,
        suggested_duration=adjustment.suggested_minutes,
        reason=adjustment.reason,
    )


def format_time_until(target: datetime, now: datetime) -> str:
    """Human readable distance to ``target``, e.g. ``"in 2 hours"``."""
    diff = target - now
    if diff <= timedelta(0):
        return "now"

    minutes = int(diff.total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"in {days} day{'s' if days > 1 else ''}"
    if hours > 0:
        return f"in {hours} hour{'s' if hours > 1 else ''}"
    if minutes > 0:
        return f"in {minutes} minute{'s' if minutes > 1 else ''}"
    return "in less than a minute"
