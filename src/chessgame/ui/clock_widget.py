"""ClockWidget - dual chess clock display."""

from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QWidget

from chessgame.core.enums import Color

_ACTIVE_STYLE = "background-color: #3a7d44; color: white; padding: 4px 10px;"
_LOW_STYLE = "background-color: #8b2020; color: white; padding: 4px 10px;"
_IDLE_STYLE = "background-color: #2b2b2b; color: #aaa; padding: 4px 10px;"


def format_time(seconds: float | None) -> str:
    """``m:ss`` for a remaining time; ``∞`` when the clock is unlimited."""
    if seconds is None:
        return "∞"
    s = int(max(0.0, seconds))
    return f"{s // 60}:{s % 60:02d}"


class _SingleClock(QLabel):
    """Display for one player's time."""

    def __init__(self, color: Color, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._prefix = color.name.capitalize()
        self._active = False
        self._is_low_time = False

        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setFont(QFont("Sans-Serif", 16, QFont.Weight.Bold))
        self.setMinimumWidth(140)
        self.update_time(None)

    def set_active(self, active: bool) -> None:
        self._active = active
        self._apply_style()

    def update_time(self, seconds: float | None) -> None:
        self.setText(f"{self._prefix}: {format_time(seconds)}")
        self._is_low_time = seconds is not None and seconds < 30.0
        self._apply_style()

    def _apply_style(self) -> None:
        if not self._active:
            self.setStyleSheet(_IDLE_STYLE)
        elif self._is_low_time:
            self.setStyleSheet(_LOW_STYLE)
        else:
            self.setStyleSheet(_ACTIVE_STYLE)


class ClockWidget(QWidget):
    """Combined dual clock widget."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        self._white_clock = _SingleClock(Color.WHITE)
        self._black_clock = _SingleClock(Color.BLACK)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(8)
        layout.addWidget(self._white_clock)
        layout.addWidget(self._black_clock)

        self._timer = QTimer(self)
        self._timer.setInterval(200)
        self._timer.timeout.connect(self._tick)
        self._get_remaining: (
            Callable[[], tuple[float | None, float | None]] | None
        ) = None

    def start(
        self, get_remaining: Callable[[], tuple[float | None, float | None]]
    ) -> None:
        """Start updating. *get_remaining* returns (white_sec, black_sec)."""
        self._get_remaining = get_remaining
        self._tick()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def set_active(self, color: Color | None) -> None:
        self._white_clock.set_active(color == Color.WHITE)
        self._black_clock.set_active(color == Color.BLACK)

    def update_display(self, white_sec: float | None, black_sec: float | None) -> None:
        self._white_clock.update_time(white_sec)
        self._black_clock.update_time(black_sec)

    def reset(self, seconds: float | None) -> None:
        self.stop()
        self.update_display(seconds, seconds)
        self.set_active(None)

    def texts(self) -> tuple[str, str]:
        """Currently displayed (white, black) labels."""
        return self._white_clock.text(), self._black_clock.text()

    def _tick(self) -> None:
        if self._get_remaining:
            w, b = self._get_remaining()
            self.update_display(w, b)
