"""Calendar overview: upcoming events, the next meeting and a suggestion."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pomocal.calendar.cache import CalendarCache
from pomocal.calendar.meetings import (
    SmartAdjustSuggestion,
    build_suggestion,
    next_meeting,
)
from pomocal.integrations.google_calendar.schemas import CalendarEvent
from pomocal.utils.clock import Now, utcnow
from pomocal.utils.mixins import LoggerMixin


class CalendarOverview(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    events: tuple[CalendarEvent, ...] = ()
    next_meeting: CalendarEvent | None = None
    smart_adjust_suggestion: SmartAdjustSuggestion | None = None


class CalendarSyncService(LoggerMixin):
    """Read path used by the timer and the HTTP layer."""

    def __init__(self, cache: CalendarCache, now: Now = utcnow) -> None:
        self.cache = cache
        self._now = now

    async def overview(self, window_minutes: int | None = None) -> CalendarOverview:
        events = await self.cache.get_events(window_minutes)
        now = self._now()
        meeting = next_meeting(events, now)
        suggestion = build_suggestion(meeting, now)

        if suggestion is not None:
            self.logger.debug(
                "Smart adjust suggested",
                meeting_id=meeting.id if meeting else None,
                suggested_duration=suggestion.suggested_duration,
            )

        return CalendarOverview(
            events=events,
            next_meeting=meeting,
            smart_adjust_suggestion=suggestion,
        )
