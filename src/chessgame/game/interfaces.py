"""Abstract interfaces and value types for the game layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto

from chessgame.core.enums import Color

# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


class GameEndReason(IntEnum):
    """Why a finished game ended."""

    NONE = 0
    CHECKMATE = auto()
    STALEMATE = auto()
    TIMEOUT = auto()


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Immutable time-control definition.

    Args:
        initial_seconds: Starting time per player.
        increment_seconds: Per-move increment (Fischer).
    """

    __slots__ = ("initial_seconds", "increment_seconds")

    def __init__(self, initial_seconds: float, increment_seconds: float = 0.0) -> None:
        self.initial_seconds = initial_seconds
        self.increment_seconds = increment_seconds

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        """Ten minutes each, no increment: the default game."""
        return cls(600, 0)

    @classmethod
    def unlimited(cls) -> TimeControl:
        """No time limit."""
        return cls(float("inf"), 0)

    @property
    def is_unlimited(self) -> bool:
        return self.initial_seconds == float("inf")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (
            self.initial_seconds == other.initial_seconds
            and self.increment_seconds == other.increment_seconds
        )

    def __hash__(self) -> int:
        return hash((self.initial_seconds, self.increment_seconds))

    def __repr__(self) -> str:
        if self.is_unlimited:
            return "TimeControl(unlimited)"
        mins = self.initial_seconds / 60
        if self.increment_seconds:
            return f"TimeControl({mins:.0f}m+{self.increment_seconds:.0f}s)"
        return f"TimeControl({mins:.0f}m)"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a chess clock."""

    @abstractmethod
    def start(self, color: Color) -> None:
        """Start the clock for *color*."""

    @abstractmethod
    def stop(self) -> None:
        """Pause the running clock."""

    @abstractmethod
    def switch(self) -> None:
        """Switch to the other player's clock."""

    @abstractmethod
    def remaining(self, color: Color) -> float:
        """Seconds remaining for *color*."""

    @abstractmethod
    def is_flag_fallen(self, color: Color) -> bool:
        """Has *color* run out of time?"""

    @abstractmethod
    def add_increment(self, color: Color) -> None:
        """Add Fischer increment after a move."""
