"""Tests for the countdown Clock."""

import math
import time

import pytest

from chessgame.core.enums import Color
from chessgame.game.clock import Clock, ClockSnapshot
from chessgame.game.interfaces import TimeControl


@pytest.fixture
def ten_minutes() -> Clock:
    return Clock(TimeControl(600, 0))


class TestRunning:
    def test_fresh_clock_is_paused(self, ten_minutes: Clock) -> None:
        assert ten_minutes.snapshot() == ClockSnapshot(600.0, 600.0, None, False)

    def test_start_runs_only_that_side(self, ten_minutes: Clock) -> None:
        ten_minutes.start(Color.BLACK)
        time.sleep(0.03)
        snap = ten_minutes.snapshot()
        assert snap.is_running
        assert snap.active_color == Color.BLACK
        assert snap.black_remaining < 600.0
        assert snap.white_remaining == 600.0

    def test_stop_freezes_time(self, ten_minutes: Clock) -> None:
        ten_minutes.start(Color.WHITE)
        time.sleep(0.02)
        ten_minutes.stop()
        left = ten_minutes.remaining(Color.WHITE)
        time.sleep(0.02)
        assert ten_minutes.remaining(Color.WHITE) == left
        assert not ten_minutes.snapshot().is_running

    def test_switch_charges_mover(self, ten_minutes: Clock) -> None:
        ten_minutes.start(Color.WHITE)
        time.sleep(0.02)
        ten_minutes.switch()
        white_after_move = ten_minutes.remaining(Color.WHITE)
        time.sleep(0.02)
        assert white_after_move < 600.0
        assert ten_minutes.remaining(Color.WHITE) == white_after_move
        assert ten_minutes.remaining(Color.BLACK) < 600.0
        assert ten_minutes.snapshot().active_color == Color.BLACK

    def test_switch_while_paused_keeps_paused(self, ten_minutes: Clock) -> None:
        ten_minutes.switch()
        assert ten_minutes.snapshot().active_color is None

        ten_minutes.start(Color.WHITE)
        ten_minutes.stop()
        ten_minutes.switch()
        snap = ten_minutes.snapshot()
        assert snap.active_color == Color.BLACK
        assert not snap.is_running
        assert snap.black_remaining == 600.0


class TestIncrementAndFlag:
    def test_increment_goes_to_one_side(self) -> None:
        clock = Clock(TimeControl(30, 3))
        for _ in range(3):
            clock.add_increment(Color.BLACK)
        assert clock.remaining(Color.BLACK) == 39.0
        assert clock.remaining(Color.WHITE) == 30.0

    def test_flag_down_only_when_empty(self) -> None:
        clock = Clock(TimeControl(0.01, 0))
        assert not clock.is_flag_fallen(Color.WHITE)
        clock.start(Color.WHITE)
        time.sleep(0.03)
        assert clock.remaining(Color.WHITE) == 0.0
        assert clock.is_flag_fallen(Color.WHITE)
        assert not clock.is_flag_fallen(Color.BLACK)

    def test_unlimited_never_falls(self) -> None:
        clock = Clock(TimeControl.unlimited())
        clock.start(Color.BLACK)
        assert math.isinf(clock.remaining(Color.BLACK))
        assert not clock.is_flag_fallen(Color.BLACK)


class TestRestore:
    def test_running_snapshot_resumes(self, ten_minutes: Clock) -> None:
        ten_minutes.restore(ClockSnapshot(30.0, 45.0, Color.BLACK, True))
        time.sleep(0.02)
        snap = ten_minutes.snapshot()
        assert snap.is_running
        assert snap.active_color == Color.BLACK
        assert snap.white_remaining == 30.0
        assert snap.black_remaining < 45.0

    def test_paused_snapshot_stays_paused(self, ten_minutes: Clock) -> None:
        saved = ClockSnapshot(12.5, 0.0, Color.BLACK, False)
        ten_minutes.restore(saved)
        assert ten_minutes.snapshot() == saved
        assert ten_minutes.is_flag_fallen(Color.BLACK)

    def test_running_without_side_is_paused(self, ten_minutes: Clock) -> None:
        ten_minutes.restore(ClockSnapshot(5.0, 5.0, None, True))
        assert not ten_minutes.snapshot().is_running


class TestTimeControl:
    @pytest.mark.parametrize(
        "control, text",
        [
            (TimeControl(600, 0), "TimeControl(10m)"),
            (TimeControl(180, 2), "TimeControl(3m+2s)"),
            (TimeControl.unlimited(), "TimeControl(unlimited)"),
        ],
    )
    def test_repr(self, control: TimeControl, text: str) -> None:
        assert repr(control) == text

    def test_presets(self) -> None:
        assert TimeControl.rapid_10m() == TimeControl(600, 0)
        assert TimeControl.unlimited().is_unlimited
        assert not TimeControl.rapid_10m().is_unlimited
