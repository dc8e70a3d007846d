"""Tests for clock widget display and styling."""

from __future__ import annotations

import pytest

from chessgame.core.enums import Color
from chessgame.ui.clock_widget import ClockWidget, _SingleClock, format_time


class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds, text",
        [(600, "10:00"), (59.9, "0:59"), (61, "1:01"), (0, "0:00"), (-3, "0:00")],
    )
    def test_format(self, seconds: float, text: str) -> None:
        assert format_time(seconds) == text

    def test_unlimited(self) -> None:
        assert format_time(None) == "∞"


class TestSingleClock:
    def test_low_time_style_is_cleared_after_time_increase(self, qapp) -> None:
        clock = _SingleClock(Color.WHITE)
        clock.set_active(True)

        clock.update_time(10.0)
        assert "#8b2020" in clock.styleSheet()

        clock.update_time(45.0)
        assert "#8b2020" not in clock.styleSheet()
        assert "#3a7d44" in clock.styleSheet()

    def test_idle_ignores_low_time(self, qapp) -> None:
        clock = _SingleClock(Color.BLACK)
        clock.update_time(5.0)
        assert "#2b2b2b" in clock.styleSheet()
        assert clock.text() == "Black: 0:05"


class TestClockWidget:
    def test_texts(self, qapp) -> None:
        widget = ClockWidget()
        widget.update_display(600, 125)
        assert widget.texts() == ("White: 10:00", "Black: 2:05")

    def test_reset_unlimited(self, qapp) -> None:
        widget = ClockWidget()
        widget.reset(None)
        assert widget.texts() == ("White: ∞", "Black: ∞")
        assert not widget.is_running

    def test_start_reads_remaining(self, qapp) -> None:
        widget = ClockWidget()
        widget.start(lambda: (90.0, 30.0))
        assert widget.is_running
        assert widget.texts() == ("White: 1:30", "Black: 0:30")
        widget.stop()
        assert not widget.is_running
