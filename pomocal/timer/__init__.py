"""Pomodoro timer: state machine, drivers and session controller."""

from pomocal.timer.driver import PeriodicTicker
from pomocal.timer.engine import TimerEngine
from pomocal.timer.models import (
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    SessionKind,
    TimerPhase,
    TimerSettings,
    TimerSnapshot,
    clamp_minutes,
    format_time,
)
from pomocal.timer.session import PomodoroSession, completion_message

__all__ = [
    "MAX_DURATION_MINUTES",
    "MIN_DURATION_MINUTES",
    "PeriodicTicker",
    "PomodoroSession",
    "SessionKind",
    "TimerEngine",
    "TimerPhase",
    "TimerSettings",
    "TimerSnapshot",
    "clamp_minutes",
    "completion_message",
    "format_time",
]
