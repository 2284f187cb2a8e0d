"""Timer value types: session kinds, settings and published snapshots."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 60


class SessionKind(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @property
    def is_break(self) -> bool:
        return self is not SessionKind.FOCUS


_KIND_LABELS = {
    SessionKind.FOCUS: "Pomodoro",
    SessionKind.SHORT_BREAK: "Short Break",
    SessionKind.LONG_BREAK: "Long Break",
}


class TimerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


def clamp_minutes(minutes: int) -> int:
    return max(MIN_DURATION_MINUTES, min(MAX_DURATION_MINUTES, minutes))


def format_time(seconds: int) -> str:
    """Format seconds as ``MM:SS``; minutes are not wrapped into hours."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class TimerSettings(BaseModel):
    """Per-kind durations in minutes, always within [1, 60]."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    focus: int = 25
    short_break: int = 5
    long_break: int = 15

    @field_validator("focus", "short_break", "long_break")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return clamp_minutes(value)

    def duration_for(self, kind: SessionKind) -> int:
        return getattr(self, _KIND_FIELDS[kind])

    def with_duration(self, kind: SessionKind, minutes: int) -> "TimerSettings":
        values = self.model_dump()
        values[_KIND_FIELDS[kind]] = minutes
        # Re-validate so the clamp applies
        return TimerSettings(**values)

    def adjusted(self, kind: SessionKind, delta: int) -> "TimerSettings":
        return self.with_duration(kind, self.duration_for(kind) + delta)


_KIND_FIELDS = {
    SessionKind.FOCUS: "focus",
    SessionKind.SHORT_BREAK: "short_break",
    SessionKind.LONG_BREAK: "long_break",
}


class TimerSnapshot(BaseModel):
    """Immutable view of the engine published after every change."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    kind: SessionKind
    phase: TimerPhase
    remaining_seconds: int = Field(ge=0)
    settings: TimerSettings

    @property
    def formatted(self) -> str:
        return format_time(self.remaining_seconds)

    @property
    def is_running(self) -> bool:
        return self.phase is TimerPhase.RUNNING
