"""Calendar read/write collaborator backed by Google Calendar."""

from __future__ import annotations

from datetime import datetime

from pomocal.config import Settings, get_settings
from pomocal.integrations.google_calendar.auth import GoogleOAuthClient
from pomocal.integrations.google_calendar.schemas import CalendarEvent
from pomocal.integrations.google_calendar.service import GoogleCalendarService

FOCUS_EVENT_PREFIX = "Focus — "
FOCUS_EVENT_DESCRIPTION = "Focus session created by Alegra Time"
FOCUS_EVENT_TAG = "focus"


class GoogleCalendarClient:
    """Lists and creates events on the configured Google calendar."""

    def __init__(
        self,
        oauth: GoogleOAuthClient,
        service: GoogleCalendarService | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.oauth = oauth
        self.service = service or GoogleCalendarService()
        self.calendar_id = self.settings.google_calendar_id

    async def list_events(
        self, time_min: datetime, time_max: datetime
    ) -> list[CalendarEvent]:
        access_token = await self.oauth.get_access_token()
        return await self.service.list_events(
            access_token=access_token,
            calendar_id=self.calendar_id,
            time_min=time_min,
            time_max=time_max,
            max_results=self.settings.calendar_max_results,
        )

    async def create_event(
        self, title: str, start: datetime, end: datetime
    ) -> str | None:
        access_token = await self.oauth.get_access_token()
        time_zone = self.settings.calendar_time_zone
        body = {
            "summary": title,
            "description": FOCUS_EVENT_DESCRIPTION,
            "start": {"dateTime": start.isoformat(), "timeZone": time_zone},
            "end": {"dateTime": end.isoformat(), "timeZone": time_zone},
            "extendedProperties": {"private": {"pomocal": FOCUS_EVENT_TAG}},
        }
        return await self.service.insert_event(
            access_token=access_token, calendar_id=self.calendar_id, body=body
        )

    async def close(self) -> None:
        await self.service.close()
