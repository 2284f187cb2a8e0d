"""
Client-side session controller.

Drives a :class:`TimerEngine` with a one-second ticker, polls the calendar
overview on its own cadence and performs the engine's side effects:
focus-block requests, completion notifications and pomodoro counting.
"""

from pomocal.calendar.meetings import (
    SmartAdjustSuggestion,
    build_suggestion,
    next_meeting,
)
from pomocal.calendar.sync import CalendarOverview, CalendarSyncService
from pomocal.errors import NotFoundError
from pomocal.focus.recorder import (
    DEFAULT_FOCUS_TITLE,
    FocusBlockRecorder,
    FocusBlockResult,
)
from pomocal.integrations.google_calendar.schemas import CalendarEvent
from pomocal.notifications import NotificationSink, deliver
from pomocal.storage.memory import MemoryStorage
from pomocal.storage.models import Task
from pomocal.timer.driver import PeriodicTicker
from pomocal.timer.engine import TimerEngine
from pomocal.timer.models import SessionKind, TimerPhase, TimerSnapshot
from pomocal.utils.clock import Now, utcnow
from pomocal.utils.mixins import LoggerMixin

DEFAULT_POLL_SECONDS = 60.0


def completion_message(kind: SessionKind) -> tuple[str, str]:
    body = "Ready to focus?" if kind.is_break else "Time for a break!"
    return f"{kind.label} Complete!", body


class PomodoroSession(LoggerMixin):
    """One user's running timer and its calendar awareness."""

    def __init__(
        self,
        engine: TimerEngine | None = None,
        *,
        sync: CalendarSyncService | None = None,
        recorder: FocusBlockRecorder | None = None,
        storage: MemoryStorage | None = None,
        notifier: NotificationSink | None = None,
        user_id: str | None = None,
        tick_interval: float = 1.0,
        poll_interval: float = DEFAULT_POLL_SECONDS,
        now: Now = utcnow,
    ) -> None:
        self.engine = engine or TimerEngine()
        self.sync = sync
        self.recorder = recorder
        self.storage = storage
        self.notifier = notifier
        self.user_id = user_id
        self._now = now

        self.current_task: Task | None = None
        self.overview: CalendarOverview | None = None
        self.last_focus_block: FocusBlockResult | None = None
        self._dismissed_meeting_id: str | None = None

        self._ticker = PeriodicTicker(self.engine.tick, tick_interval, name="timer")
        self._poller = PeriodicTicker(
            self.refresh_calendar, poll_interval, name="calendar-poll"
        )

        self.engine.on_change.add_listener(self._on_change)
        self.engine.on_focus_block_requested.add_listener(self._on_focus_block_requested)
        self.engine.on_session_completed.add_listener(self._on_session_completed)

    # === lifecycle ===

    async def start(self) -> None:
        if self.sync is not None:
            await self.refresh_calendar()
            self._poller.start()
        if self.engine.phase is TimerPhase.RUNNING:
            self._ticker.start()
        self.logger.info("Pomodoro session started", user_id=self.user_id)

    async def stop(self) -> None:
        """Stop both drivers and wait for pending side effects. Safe to repeat."""
        await self._ticker.aclose()
        await self._poller.aclose()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        for event in (
            self.engine.on_change,
            self.engine.on_focus_block_requested,
            self.engine.on_session_completed,
        ):
            await event.drain()

    @property
    def ticking(self) -> bool:
        return self._ticker.running

    # === timer controls ===

    @property
    def snapshot(self) -> TimerSnapshot:
        return self.engine.snapshot

    def toggle(self) -> TimerPhase:
        return self.engine.toggle()

    def reset(self) -> None:
        self.engine.reset()

    def select_kind(self, kind: SessionKind) -> None:
        self.engine.select_kind(kind)

    def adjust_setting(self, kind: SessionKind, delta: int) -> None:
        self.engine.adjust_setting(kind, delta)

    def select_task(self, task: Task | None) -> None:
        self.current_task = task

    # === calendar ===

    async def refresh_calendar(self) -> CalendarOverview | None:
        if self.sync is None:
            return None
        self.overview = await self.sync.overview()
        return self.overview

    @property
    def next_meeting(self) -> CalendarEvent | None:
        if self.overview is None:
            return None
        return next_meeting(self.overview.events, self._now())

    @property
    def suggestion(self) -> SmartAdjustSuggestion | None:
        """Current suggestion, recomputed against the clock on every read."""
        meeting = self.next_meeting
        if meeting is None or meeting.id == self._dismissed_meeting_id:
            return None
        return build_suggestion(meeting, self._now())

    def accept_suggestion(self) -> SmartAdjustSuggestion | None:
        """Apply the current suggestion to the engine.

        A zero-minute suggestion switches to a short break; otherwise the
        focus duration is set to the suggested minutes and focus is selected.
        """
        suggestion = self.suggestion
        if suggestion is None:
            return None

        if suggestion.suggested_duration == 0:
            self.engine.select_kind(SessionKind.SHORT_BREAK)
        else:
            self.engine.set_duration(SessionKind.FOCUS, suggestion.suggested_duration)
            self.engine.select_kind(SessionKind.FOCUS)
            self.engine.reset()

        self._dismissed_meeting_id = suggestion.original_meeting.id
        self.logger.info(
            "Smart adjust accepted",
            meeting_id=suggestion.original_meeting.id,
            suggested_duration=suggestion.suggested_duration,
        )
        return suggestion

    def dismiss_suggestion(self) -> None:
        suggestion = self.suggestion
        if suggestion is not None:
            self._dismissed_meeting_id = suggestion.original_meeting.id

    # === engine side effects ===

    def _on_change(self, snapshot: TimerSnapshot) -> None:
        if snapshot.is_running:
            self._ticker.start()
        else:
            self._ticker.stop()

    async def _on_focus_block_requested(self, minutes: int) -> None:
        if self.recorder is None:
            return

        task = self.current_task
        self.last_focus_block = await self.recorder.record(
            task.title if task else DEFAULT_FOCUS_TITLE,
            minutes,
            task.id if task else None,
            user_id=self.user_id,
        )
        if self.last_focus_block.warning:
            self.logger.warning(
                "Focus block saved without calendar event",
                warning=self.last_focus_block.warning,
                warning_code=self.last_focus_block.warning_code,
            )

    async def _on_session_completed(self, kind: SessionKind) -> None:
        title, body = completion_message(kind)
        deliver(self.notifier, title, body)

        task = self.current_task
        if kind is not SessionKind.FOCUS or task is None or self.storage is None:
            return

        try:
            self.current_task = await self.storage.increment_pomodoros(
                task.id, user_id=self.user_id
            )
        except NotFoundError:
            self.logger.warning("Current task no longer exists", task_id=task.id)
            self.current_task = None
