"""Two-sided countdown clock with Fischer increment."""

from __future__ import annotations

import time
from dataclasses import dataclass

from chessgame.core.enums import Color
from chessgame.game.interfaces import IClock, TimeControl


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Both remaining times plus whose clock runs; what a save file keeps."""

    white_remaining: float
    black_remaining: float
    active_color: Color | None
    is_running: bool


class Clock(IClock):
    """Countdown for both sides where only the active side's time runs.

    Time used is measured with :func:`time.monotonic` and charged to the
    active side whenever the clock stops or switches over.
    """

    __slots__ = ("_time_control", "_remaining", "_active", "_started_at")

    def __init__(self, time_control: TimeControl) -> None:
        self._time_control = time_control
        # indexed by Color
        self._remaining = [time_control.initial_seconds] * 2
        self._active: Color | None = None
        self._started_at: float | None = None  # None while paused

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    def start(self, color: Color) -> None:
        self._active = color
        self._started_at = time.monotonic()

    def stop(self) -> None:
        self._charge_active()
        self._started_at = None

    def switch(self) -> None:
        """Hand the move (and the running time) to the other side."""
        if self._active is None:
            return
        self._charge_active()
        self._active = self._active.opposite

    def remaining(self, color: Color) -> float:
        left = self._remaining[color]
        if color == self._active and self._started_at is not None:
            left -= time.monotonic() - self._started_at
        return max(0.0, left)

    def is_flag_fallen(self, color: Color) -> bool:
        return self.remaining(color) == 0.0

    def add_increment(self, color: Color) -> None:
        self._remaining[color] += self._time_control.increment_seconds

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            white_remaining=self.remaining(Color.WHITE),
            black_remaining=self.remaining(Color.BLACK),
            active_color=self._active,
            is_running=self._started_at is not None,
        )

    def restore(self, snapshot: ClockSnapshot) -> None:
        """Continue from *snapshot*; a running clock restarts timing now."""
        self._remaining = [snapshot.white_remaining, snapshot.black_remaining]
        self._active = snapshot.active_color
        if snapshot.is_running and snapshot.active_color is not None:
            self._started_at = time.monotonic()
        else:
            self._started_at = None

    def _charge_active(self) -> None:
        if self._active is None or self._started_at is None:
            return
        now = time.monotonic()
        used = now - self._started_at
        self._remaining[self._active] = max(0.0, self._remaining[self._active] - used)
        self._started_at = now
