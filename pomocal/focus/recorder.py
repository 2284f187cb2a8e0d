"""
Focus block recording: mirror a focus session to the calendar and store it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from pomocal.calendar.cache import CalendarCache
from pomocal.calendar.interfaces import CalendarWriter
from pomocal.errors import ConfigurationError
from pomocal.integrations.google_calendar.client import FOCUS_EVENT_PREFIX
from pomocal.storage.memory import MemoryStorage
from pomocal.storage.models import FocusBlock, FocusBlockCreate, parse_input
from pomocal.utils.clock import Now, utcnow
from pomocal.utils.mixins import LoggerMixin

DEFAULT_FOCUS_TITLE = "Focus Session"

CALENDAR_NOT_CONFIGURED = "CALENDAR_NOT_CONFIGURED"
CALENDAR_WRITE_FAILED = "CALENDAR_WRITE_FAILED"


@dataclass(frozen=True)
class FocusBlockResult:
    focus_block: FocusBlock
    warning: str | None = None
    warning_code: str | None = None

    @property
    def calendar_synced(self) -> bool:
        return self.focus_block.event_id is not None


class FocusBlockRecorder(LoggerMixin):
    """Creates the calendar event and the stored record for a focus session.

    A calendar failure never blocks the stored record: the block is saved
    without an event id and the result carries a warning instead.
    """

    def __init__(
        self,
        storage: MemoryStorage,
        calendar: CalendarWriter | None = None,
        cache: CalendarCache | None = None,
        now: Now = utcnow,
    ) -> None:
        self.storage = storage
        self.calendar = calendar
        self.cache = cache
        self._now = now

    async def record(
        self,
        title: str,
        minutes: int,
        task_id: str | None = None,
        *,
        user_id: str | None = None,
    ) -> FocusBlockResult:
        payload = parse_input(
            FocusBlockCreate,
            {"title": title, "duration": minutes, "task_id": task_id},
        )
        if payload.task_id is not None:
            # Unknown tasks are rejected before anything is written
            await self.storage.get_task(payload.task_id, user_id=user_id)

        start = self._now()
        end = start + timedelta(minutes=payload.duration)
        event_id, warning = await self._create_event(payload.title, start, end)

        block = await self.storage.create_focus_block(
            payload, user_id=user_id, event_id=event_id
        )
        self.logger.info(
            "Focus block recorded",
            focus_block_id=block.id,
            duration=block.duration,
            event_id=event_id,
            warning_code=warning[1] if warning else None,
        )

        if warning is None:
            return FocusBlockResult(focus_block=block)
        return FocusBlockResult(
            focus_block=block, warning=warning[0], warning_code=warning[1]
        )

    async def _create_event(
        self, title: str, start: datetime, end: datetime
    ) -> tuple[str | None, tuple[str, str] | None]:
        if self.calendar is None:
            return None, ("Calendar is not connected", CALENDAR_NOT_CONFIGURED)

        try:
            event_id = await self.calendar.create_event(
                f"{FOCUS_EVENT_PREFIX}{title}", start, end
            )
        except ConfigurationError as e:
            self.logger.warning("Calendar not configured for focus block", error=str(e))
            return None, (str(e), CALENDAR_NOT_CONFIGURED)
        except Exception as e:
            self.logger.warning(
                "Failed to create calendar event",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None, ("Failed to create calendar event", CALENDAR_WRITE_FAILED)

        if self.cache is not None:
            self.cache.invalidate()
        return event_id, None
