"""HTTP helpers for Google Calendar integration."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import aiohttp

from pomocal.errors import CalendarUnavailableError
from pomocal.integrations.google_calendar.schemas import (
    UNTITLED_EVENT,
    CalendarEvent,
)
from pomocal.utils.logger import sanitize_log_content
from pomocal.utils.mixins import LoggerMixin


class GoogleCalendarService(LoggerMixin):
    """Wrapper around Google Calendar REST API."""

    def __init__(
        self,
        base_url: str = "https://www.googleapis.com/calendar/v3",
        timeout_seconds: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"User-Agent": "pomocal/1.0"},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def list_events(
        self,
        *,
        access_token: str,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 10,
    ) -> list[CalendarEvent]:
        url = f"{self.base_url}/calendars/{calendar_id}/events"
        query = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "maxResults": str(max_results),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        payload = await self._request_json(
            "GET", url, access_token=access_token, params=query
        )
        items = payload.get("items", []) if isinstance(payload, dict) else []
        events: list[CalendarEvent] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            event = self.build_event(item)
            if event is not None:
                events.append(event)
        return events

    async def insert_event(
        self,
        *,
        access_token: str,
        calendar_id: str,
        body: dict[str, Any],
    ) -> str | None:
        url = f"{self.base_url}/calendars/{calendar_id}/events"
        payload = await self._request_json(
            "POST", url, access_token=access_token, json_body=body
        )
        if isinstance(payload, dict):
            return payload.get("id")
        return None

    def build_event(self, raw_event: dict[str, Any]) -> CalendarEvent | None:
        """Normalize a raw API item; items without an id or start are dropped."""
        try:
            return CalendarEvent.model_validate(
                {
                    "id": raw_event["id"],
                    "summary": raw_event.get("summary") or UNTITLED_EVENT,
                    "start": raw_event.get("start") or {},
                    "end": raw_event.get("end") or {},
                }
            )
        except Exception as exc:
            self.logger.debug(
                "Failed to build calendar event",
                event_id=raw_event.get("id"),
                error=str(exc),
            )
            return None

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        access_token: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        session = await self.get_session()
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            async with session.request(
                method, url, params=params, json=json_body, headers=headers
            ) as resp:
                if resp.status not in (200, 201):
                    body = await resp.text()
                    self.logger.warning(
                        "Google Calendar API request failed",
                        url=url,
                        status=resp.status,
                        body=sanitize_log_content(body),
                    )
                    raise CalendarUnavailableError(
                        f"Google Calendar API returned HTTP {resp.status}",
                        status=resp.status,
                    )
                try:
                    return await resp.json()
                except aiohttp.ContentTypeError as exc:
                    raise CalendarUnavailableError(
                        "Google Calendar API returned non-JSON response"
                    ) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise CalendarUnavailableError(
                f"Google Calendar API unreachable: {exc}"
            ) from exc
