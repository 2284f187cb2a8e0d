"""Google Calendar integration helpers."""

from pomocal.integrations.google_calendar.auth import SCOPES, GoogleOAuthClient
from pomocal.integrations.google_calendar.client import (
    FOCUS_EVENT_PREFIX,
    GoogleCalendarClient,
)
from pomocal.integrations.google_calendar.schemas import (
    CalendarEvent,
    EventTime,
    GoogleTokens,
)
from pomocal.integrations.google_calendar.service import GoogleCalendarService

__all__ = [
    "FOCUS_EVENT_PREFIX",
    "SCOPES",
    "CalendarEvent",
    "EventTime",
    "GoogleCalendarClient",
    "GoogleCalendarService",
    "GoogleOAuthClient",
    "GoogleTokens",
]
