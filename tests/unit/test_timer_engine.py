"""Tests for the timer state machine."""

import pytest

from pomocal.timer.engine import TimerEngine
from pomocal.timer.models import (
    SessionKind,
    TimerPhase,
    TimerSettings,
    format_time,
)


def _engine(**settings) -> TimerEngine:
    return TimerEngine(TimerSettings(**settings))


class Recorder:
    def __init__(self, engine: TimerEngine) -> None:
        self.snapshots = []
        self.focus_requests = []
        self.completed = []
        engine.on_change.add_listener(self.snapshots.append)
        engine.on_focus_block_requested.add_listener(self.focus_requests.append)
        engine.on_session_completed.add_listener(self.completed.append)


class TestTransitions:
    def test_initial_state_is_idle_with_configured_duration(self) -> None:
        engine = _engine()
        assert engine.phase is TimerPhase.IDLE
        assert engine.kind is SessionKind.FOCUS
        assert engine.remaining_seconds == 25 * 60

    def test_toggle_cycles_running_and_paused(self) -> None:
        engine = _engine()

        assert engine.toggle() is TimerPhase.RUNNING
        assert engine.toggle() is TimerPhase.PAUSED
        assert engine.toggle() is TimerPhase.RUNNING

    def test_starting_focus_requests_focus_block(self) -> None:
        engine = _engine(focus=25)
        events = Recorder(engine)

        engine.toggle()
        engine.toggle()  # pause
        engine.toggle()  # resume

        assert events.focus_requests == [25]

    def test_only_starts_from_idle_request_focus_blocks(self) -> None:
        engine = _engine(focus=2)
        events = Recorder(engine)
        engine.toggle()
        engine.tick()
        engine.reset()

        engine.toggle()
        for _ in range(30):
            engine.tick()
        engine.toggle()
        assert engine.remaining_seconds == 90

        engine.toggle()
        assert events.focus_requests == [2, 2]

    def test_starting_break_does_not_request_focus_block(self) -> None:
        engine = _engine()
        events = Recorder(engine)

        engine.select_kind(SessionKind.SHORT_BREAK)
        engine.toggle()

        assert events.focus_requests == []
        assert engine.remaining_seconds == 5 * 60

    def test_tick_decrements_only_while_running(self) -> None:
        engine = _engine(focus=1)

        assert engine.tick() is False
        assert engine.remaining_seconds == 60

        engine.toggle()
        assert engine.tick() is True
        assert engine.remaining_seconds == 59

    def test_pause_resume_preserves_remaining(self) -> None:
        engine = _engine(focus=1)
        engine.toggle()
        for _ in range(10):
            engine.tick()

        engine.toggle()
        remaining = engine.remaining_seconds
        for _ in range(5):
            engine.tick()
        assert engine.remaining_seconds == remaining

        engine.toggle()
        engine.tick()
        assert engine.remaining_seconds == remaining - 1

    def test_completion_fires_exactly_once(self) -> None:
        engine = _engine(focus=1)
        events = Recorder(engine)
        engine.toggle()

        for _ in range(100):
            engine.tick()

        assert engine.phase is TimerPhase.FINISHED
        assert engine.remaining_seconds == 0
        assert events.completed == [SessionKind.FOCUS]

    def test_finished_toggle_restarts_with_full_duration(self) -> None:
        engine = _engine(focus=1)
        events = Recorder(engine)
        engine.toggle()
        for _ in range(60):
            engine.tick()
        assert engine.phase is TimerPhase.FINISHED

        engine.toggle()

        assert engine.phase is TimerPhase.RUNNING
        assert engine.remaining_seconds == 60
        assert events.focus_requests == [1, 1]

    def test_reset_returns_to_idle(self) -> None:
        engine = _engine(focus=1)
        engine.toggle()
        engine.tick()

        engine.reset()

        assert engine.phase is TimerPhase.IDLE
        assert engine.remaining_seconds == 60

    def test_selecting_kind_resets(self) -> None:
        engine = _engine(long_break=20)
        engine.toggle()
        engine.tick()

        engine.select_kind(SessionKind.LONG_BREAK)

        assert engine.phase is TimerPhase.IDLE
        assert engine.kind is SessionKind.LONG_BREAK
        assert engine.remaining_seconds == 20 * 60

    def test_selecting_same_kind_is_noop(self) -> None:
        engine = _engine()
        engine.toggle()
        engine.tick()

        engine.select_kind(SessionKind.FOCUS)

        assert engine.phase is TimerPhase.RUNNING
        assert engine.remaining_seconds == 25 * 60 - 1

    def test_every_change_publishes_snapshot(self) -> None:
        engine = _engine()
        events = Recorder(engine)

        engine.toggle()
        engine.tick()

        assert [s.phase for s in events.snapshots] == [
            TimerPhase.RUNNING,
            TimerPhase.RUNNING,
        ]
        assert events.snapshots[-1].formatted == "24:59"


class TestSettings:
    @pytest.mark.parametrize("delta", [-1, -5, -100])
    def test_clamps_low(self, delta) -> None:
        engine = _engine(focus=1)
        settings = engine.adjust_setting(SessionKind.FOCUS, delta)
        assert settings.focus == 1

    @pytest.mark.parametrize("delta", [1, 10, 1000])
    def test_clamps_high(self, delta) -> None:
        engine = _engine(long_break=60)
        settings = engine.adjust_setting(SessionKind.LONG_BREAK, delta)
        assert settings.long_break == 60

    def test_settings_model_clamps_construction(self) -> None:
        settings = TimerSettings(focus=0, short_break=90, long_break=15)
        assert (settings.focus, settings.short_break) == (1, 60)

    def test_idle_adjustment_updates_remaining(self) -> None:
        engine = _engine(focus=25)
        engine.adjust_setting(SessionKind.FOCUS, 5)
        assert engine.remaining_seconds == 30 * 60

    def test_adjusting_other_kind_leaves_remaining(self) -> None:
        engine = _engine(focus=25)
        engine.adjust_setting(SessionKind.SHORT_BREAK, 5)
        assert engine.remaining_seconds == 25 * 60
        assert engine.settings.short_break == 10

    def test_running_adjustment_leaves_remaining(self) -> None:
        engine = _engine(focus=25)
        engine.toggle()
        engine.adjust_setting(SessionKind.FOCUS, 5)

        assert engine.remaining_seconds == 25 * 60
        engine.reset()
        assert engine.remaining_seconds == 30 * 60

    def test_set_duration(self) -> None:
        engine = _engine()
        engine.set_duration(SessionKind.FOCUS, 12)
        assert engine.remaining_seconds == 12 * 60


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "00:00"), (5, "00:05"), (125, "02:05"), (3600, "60:00"), (6000, "100:00")],
)
def test_format_time(seconds, expected) -> None:
    assert format_time(seconds) == expected


def test_session_kind_labels() -> None:
    assert SessionKind.FOCUS.label == "Pomodoro"
    assert SessionKind.SHORT_BREAK.label == "Short Break"
    assert SessionKind.LONG_BREAK.value == "longBreak"


def test_failing_change_listener_does_not_break_toggle() -> None:
    engine = _engine()
    recorder = Recorder(engine)

    def broken(snapshot):
        raise RuntimeError("display gone")

    engine.on_change.add_listener(broken)

    assert engine.toggle() is TimerPhase.RUNNING
    assert engine.tick() is True
    assert recorder.snapshots[-1].remaining_seconds == 25 * 60 - 1
