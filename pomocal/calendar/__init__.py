"""Calendar synchronization and smart adjustment."""

from pomocal.calendar.cache import CachedEventSet, CalendarCache
from pomocal.calendar.interfaces import CalendarReader, CalendarWriter
from pomocal.calendar.meetings import (
    Adjustment,
    SmartAdjustSuggestion,
    build_suggestion,
    format_time_until,
    minutes_until,
    next_meeting,
    suggest_adjustment,
)
from pomocal.calendar.sync import CalendarOverview, CalendarSyncService

__all__ = [
    "Adjustment",
    "CachedEventSet",
    "CalendarCache",
    "CalendarOverview",
    "CalendarReader",
    "CalendarSyncService",
    "CalendarWriter",
    "SmartAdjustSuggestion",
    "build_suggestion",
    "format_time_until",
    "minutes_until",
    "next_meeting",
    "suggest_adjustment",
]
