"""Typed data objects for the Google Calendar integration."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNTITLED_EVENT = "Untitled Event"


class EventTime(BaseModel):
    """Start or end of an event: a precise timestamp or an all-day date."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date_time: datetime | None = Field(default=None, alias="dateTime")
    day: date | None = Field(default=None, alias="date")

    @field_validator("date_time")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def is_set(self) -> bool:
        return self.date_time is not None or self.day is not None

    @property
    def instant(self) -> datetime | None:
        """Precise time if present, else midnight UTC of the all-day date."""
        if self.date_time is not None:
            return self.date_time
        if self.day is not None:
            return datetime.combine(self.day, time.min, tzinfo=UTC)
        return None


class CalendarEvent(BaseModel):
    """Normalized calendar event. Immutable once fetched."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    summary: str = UNTITLED_EVENT
    start: EventTime
    end: EventTime

    @property
    def start_instant(self) -> datetime | None:
        return self.start.instant

    @property
    def end_instant(self) -> datetime | None:
        return self.end.instant

    @property
    def all_day(self) -> bool:
        return self.start.date_time is None and self.start.day is not None


class GoogleTokens(BaseModel):
    """OAuth credentials as persisted to the token file."""

    access_token: str
    refresh_token: str | None = None
    scope: str = ""
    token_type: str = "Bearer"
    expiry_date: int | None = None  # epoch milliseconds

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expiry_date is None:
            return False
        now = now or datetime.now(UTC)
        return now.timestamp() * 1000 >= self.expiry_date

    @classmethod
    def from_token_response(
        cls,
        payload: dict[str, Any],
        *,
        previous: GoogleTokens | None = None,
        now: datetime | None = None,
    ) -> GoogleTokens:
        """Build tokens from an OAuth token endpoint response.

        Google omits ``refresh_token`` on refresh, so the previous one is kept.
        """
        now = now or datetime.now(UTC)
        expiry_date = None
        if payload.get("expires_in"):
            expiry_date = int(now.timestamp() * 1000) + int(payload["expires_in"]) * 1000
        refresh_token = payload.get("refresh_token") or (
            previous.refresh_token if previous else None
        )
        return cls(
            access_token=payload["access_token"],
            refresh_token=refresh_token,
            scope=payload.get("scope", previous.scope if previous else ""),
            token_type=payload.get("token_type", "Bearer"),
            expiry_date=expiry_date,
        )
