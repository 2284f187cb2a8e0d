"""
Service wiring and lifecycle shared by the HTTP app and the CLI.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pomocal.calendar import CalendarCache, CalendarSyncService
from pomocal.config import Settings, get_settings
from pomocal.focus import FocusBlockRecorder
from pomocal.integrations.google_calendar import (
    GoogleCalendarClient,
    GoogleCalendarService,
    GoogleOAuthClient,
)
from pomocal.notifications import LogNotificationSink, NotificationSink
from pomocal.storage import MemoryStorage, seed_demo_data
from pomocal.timer import PomodoroSession, TimerEngine, TimerSettings

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


@dataclass
class RuntimeContext:
    """Container for runtime components."""

    settings: Settings
    storage: MemoryStorage
    oauth: GoogleOAuthClient
    calendar: GoogleCalendarClient
    cache: CalendarCache
    sync: CalendarSyncService
    recorder: FocusBlockRecorder

    @property
    def timer_settings(self) -> TimerSettings:
        return TimerSettings(
            focus=self.settings.timer_focus_minutes,
            short_break=self.settings.timer_short_break_minutes,
            long_break=self.settings.timer_long_break_minutes,
        )

    def new_session(
        self, user_id: str | None = None, notifier: NotificationSink | None = None
    ) -> PomodoroSession:
        """Timer session wired to this runtime's calendar and storage."""
        return PomodoroSession(
            TimerEngine(self.timer_settings),
            sync=self.sync,
            recorder=self.recorder,
            storage=self.storage,
            notifier=notifier or LogNotificationSink(),
            user_id=user_id,
            poll_interval=self.settings.calendar_poll_seconds,
        )


def build_runtime_context(settings: Settings | None = None) -> RuntimeContext:
    """Construct the runtime components for the application."""
    settings = settings or get_settings()

    storage = MemoryStorage()
    oauth = GoogleOAuthClient(settings=settings)
    calendar = GoogleCalendarClient(
        oauth, service=GoogleCalendarService(), settings=settings
    )
    cache = CalendarCache(
        calendar,
        refresh_interval=settings.calendar_refresh_seconds,
        window_minutes=settings.calendar_window_minutes,
        max_results=settings.calendar_max_results,
    )
    sync = CalendarSyncService(cache)
    recorder = FocusBlockRecorder(storage, calendar=calendar, cache=cache)

    return RuntimeContext(
        settings=settings,
        storage=storage,
        oauth=oauth,
        calendar=calendar,
        cache=cache,
        sync=sync,
        recorder=recorder,
    )


async def start_runtime(context: RuntimeContext, logger: "BoundLogger") -> None:
    await seed_demo_data(context.storage, context.settings.demo_username)
    if not context.settings.has_google_credentials:
        logger.warning(
            "Google OAuth credentials not configured; calendar features disabled"
        )
    await context.cache.start()
    logger.info("Runtime started", environment=context.settings.environment)


async def shutdown_runtime(context: RuntimeContext, logger: "BoundLogger") -> None:
    """Stop background work and release HTTP sessions."""
    logger.info("Shutting down services...")
    await context.cache.stop()
    await context.calendar.close()
    logger.info("All services stopped")
