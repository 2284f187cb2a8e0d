"""
Countdown state machine for focus and break sessions.

The engine is synchronous and does no I/O. Side effects are published
through events so the caller decides how to perform them:

* ``on_change(snapshot)`` after every state change
* ``on_focus_block_requested(minutes)`` when a focus session starts
* ``on_session_completed(kind)`` once per transition into ``finished``
"""

import math

from pomocal.timer.models import (
    SessionKind,
    TimerPhase,
    TimerSettings,
    TimerSnapshot,
)
from pomocal.utils.event import Event
from pomocal.utils.mixins import LoggerMixin


class TimerEngine(LoggerMixin):
    def __init__(
        self,
        settings: TimerSettings | None = None,
        kind: SessionKind = SessionKind.FOCUS,
    ) -> None:
        self._settings = settings or TimerSettings()
        self._kind = kind
        self._phase = TimerPhase.IDLE
        self._remaining = self._configured_seconds()

        self.on_change = Event("timer.change")
        self.on_focus_block_requested = Event("timer.focus_block_requested")
        self.on_session_completed = Event("timer.session_completed")

    # === state ===

    @property
    def kind(self) -> SessionKind:
        return self._kind

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            kind=self._kind,
            phase=self._phase,
            remaining_seconds=self._remaining,
            settings=self._settings,
        )

    # === transitions ===

    def toggle(self) -> TimerPhase:
        """Start, pause or resume depending on the current phase."""
        if self._phase is TimerPhase.RUNNING:
            self._phase = TimerPhase.PAUSED
        elif self._phase is TimerPhase.PAUSED:
            self._phase = TimerPhase.RUNNING
        else:
            if self._phase is TimerPhase.FINISHED:
                self._remaining = self._configured_seconds()
            self._phase = TimerPhase.RUNNING
            if self._kind is SessionKind.FOCUS:
                self.on_focus_block_requested.emit(math.ceil(self._remaining / 60))

        self.logger.debug(
            "Timer toggled", phase=self._phase.value, remaining=self._remaining
        )
        self._publish()
        return self._phase

    def tick(self) -> bool:
        """Advance one second. Returns False when the timer is not running."""
        if self._phase is not TimerPhase.RUNNING:
            return False

        if self._remaining > 1:
            self._remaining -= 1
            self._publish()
            return True

        self._remaining = 0
        self._phase = TimerPhase.FINISHED
        self.logger.info("Timer session finished", kind=self._kind.value)
        self.on_session_completed.emit(self._kind)
        self._publish()
        return True

    def reset(self) -> None:
        self._phase = TimerPhase.IDLE
        self._remaining = self._configured_seconds()
        self._publish()

    def select_kind(self, kind: SessionKind) -> None:
        """Switch session kind; selecting the current kind is a no-op."""
        if kind is self._kind:
            return
        self._kind = kind
        self.reset()

    def adjust_setting(self, kind: SessionKind, delta: int) -> TimerSettings:
        """Change a duration by ``delta`` minutes, clamped to [1, 60]."""
        return self._apply_settings(self._settings.adjusted(kind, delta), kind)

    def set_duration(self, kind: SessionKind, minutes: int) -> TimerSettings:
        return self._apply_settings(self._settings.with_duration(kind, minutes), kind)

    # === helpers ===

    def _apply_settings(
        self, settings: TimerSettings, kind: SessionKind
    ) -> TimerSettings:
        self._settings = settings
        if self._phase is TimerPhase.IDLE and kind is self._kind:
            self._remaining = self._configured_seconds()
        self._publish()
        return settings

    def _configured_seconds(self) -> int:
        return self._settings.duration_for(self._kind) * 60

    def _publish(self) -> None:
        self.on_change.emit(self.snapshot)
