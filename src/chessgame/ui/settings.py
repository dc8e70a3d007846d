"""User-configurable application settings."""

from __future__ import annotations

from dataclasses import dataclass

from chessgame.game.interfaces import TimeControl
from chessgame.ui.theme import THEME_NAMES


@dataclass
class AppSettings:
    """All user-configurable settings."""

    # Board
    board_theme: str = "Classic"
    show_coordinates: bool = False

    # Clock (0 minutes = untimed)
    time_minutes: int = 10
    increment_seconds: int = 0

    def __post_init__(self) -> None:
        if self.board_theme not in THEME_NAMES:
            raise ValueError(f"Unknown board theme: {self.board_theme!r}")
        if self.time_minutes < 0 or self.increment_seconds < 0:
            raise ValueError("Time settings must not be negative")

    def time_control(self) -> TimeControl:
        if self.time_minutes == 0:
            return TimeControl.unlimited()
        return TimeControl(self.time_minutes * 60, self.increment_seconds)
