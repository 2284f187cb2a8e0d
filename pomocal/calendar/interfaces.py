"""Contracts for the external calendar collaborator."""

from datetime import datetime
from typing import Protocol

from pomocal.integrations.google_calendar.schemas import CalendarEvent


class CalendarReader(Protocol):
    async def list_events(
        self, time_min: datetime, time_max: datetime
    ) -> list[CalendarEvent]: ...


class CalendarWriter(Protocol):
    async def create_event(
        self, title: str, start: datetime, end: datetime
    ) -> str | None: ...
