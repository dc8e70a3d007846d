"""GameController - the central orchestrator of a chess game.

Coordinates: Board (through GameState), Clock and the save files.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from chessgame.core.board import Board, PromotionChooser
from chessgame.core.enums import Color, GameResult, PieceType, Variant
from chessgame.core.move import MoveRecord
from chessgame.core.types import Square
from chessgame.game.clock import Clock, ClockSnapshot
from chessgame.game.interfaces import GamePhase, TimeControl
from chessgame.game.persistence import SavedGame, load_game, save_game
from chessgame.game.state import GameState

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameState], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


def _fixed_promotion(choice: PieceType | None) -> PromotionChooser:
    """A chooser that answers with an already made *choice*."""
    return lambda _color, _sq: choice


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Orchestrates a full chess game: validates moves, manages the clock,
    switches turns, notifies listeners.

    Methods are meant to be called from a single thread (the UI thread).
    ``choose_promotion`` is asked for the promotion piece whenever a pawn
    reaches the last rank; without it pawns promote to a queen.
    """

    __slots__ = ("_state", "_clock", "events", "choose_promotion")

    def __init__(self) -> None:
        self._state = GameState()
        self._clock: Clock | None = None
        self.events = GameEvents()
        self.choose_promotion: PromotionChooser | None = None

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> Board:
        return self._state.board

    @property
    def clock(self) -> Clock | None:
        return self._clock

    @property
    def is_active(self) -> bool:
        return self._state.phase == GamePhase.AWAITING_MOVE

    # ── Game lifecycle ───────────────────────────────────────────────────

    def new_game(
        self,
        variant: Variant = Variant.CLASSICAL,
        time_control: TimeControl | None = None,
        rng: random.Random | None = None,
        back_rank: Sequence[PieceType] | None = None,
    ) -> None:
        """Start a new game.  Without *time_control* the game is untimed."""
        self._state = GameState()
        self._state.setup(variant, rng, back_rank)
        self._start_clock(time_control)
        _LOGGER.info("New %s game, %r", self._state.board.variant, time_control)
        self._emit_phase(self._state.phase)

    def legal_moves_for(self, sq: Square) -> list[Square]:
        """Legal targets from *sq* for the side to move (empty otherwise)."""
        return self._state.legal_moves(sq)

    def submit_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Play *from_sq* -> *to_sq* for the side to move.

        The promotion piece is asked for before the board changes.  The
        chooser may block (a modal dialog) while the clock keeps running,
        so the game is checked again once it returns.
        """
        if not self.is_active:
            return False

        color = self._state.side_to_move
        if self._flag_fell(color):
            return False

        chooser: PromotionChooser | None = None
        if self._is_promotion(from_sq, to_sq) and self.choose_promotion is not None:
            state = self._state
            choice = self.choose_promotion(color, to_sq)
            if self._state is not state or not self.is_active:
                return False
            if self._flag_fell(color):
                return False
            chooser = _fixed_promotion(choice)

        record = self._state.apply_move(from_sq, to_sq, chooser)
        if record is None:
            return False

        if self._clock is not None:
            self._clock.add_increment(color)

        self._emit_move(record)

        if self._state.is_game_over:
            if self._clock is not None:
                self._clock.stop()
            self._emit_game_over(self._state.result)
            return True

        if self._clock is not None:
            self._clock.switch()
        return True

    def check_time(self) -> bool:
        """Detect a flag fall for the side to move.

        Meant to be polled by a UI timer.  Returns ``True`` if the game
        ended on time during this call.
        """
        if not self.is_active:
            return False
        return self._flag_fell(self._state.side_to_move)

    # ── Save / load ──────────────────────────────────────────────────────

    def save(self, path: str | Path) -> None:
        """Write the current game to *path*.

        Raises ``RuntimeError`` when no game is in progress; ``OSError``
        propagates from the file system.
        """
        if not self.is_active:
            raise RuntimeError("No active game to save")
        if self._clock is not None:
            time_control = self._clock.time_control
            snap = self._clock.snapshot()
            white, black = snap.white_remaining, snap.black_remaining
        else:
            time_control = TimeControl.unlimited()
            white = black = time_control.initial_seconds
        save_game(
            path,
            SavedGame(
                board=self._state.board.snapshot(),
                side_to_move=self._state.side_to_move,
                time_control=time_control,
                white_remaining=white,
                black_remaining=black,
            ),
        )

    def load(self, path: str | Path) -> None:
        """Replace the current game with the one saved at *path*.

        On error (``OSError`` or ``SavedGameError``) the current game is
        left untouched.
        """
        saved = load_game(path)
        board = Board.from_snapshot(saved.board)

        state = GameState()
        state.restore(board, saved.side_to_move)
        self._state = state

        if saved.time_control.is_unlimited:
            self._clock = None
        else:
            self._clock = Clock(saved.time_control)
            self._clock.restore(
                ClockSnapshot(
                    white_remaining=saved.white_remaining,
                    black_remaining=saved.black_remaining,
                    active_color=saved.side_to_move,
                    is_running=not state.is_game_over,
                )
            )
        self._emit_phase(state.phase)
        if state.is_game_over:
            self._emit_game_over(state.result)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _start_clock(self, time_control: TimeControl | None) -> None:
        if time_control is None or time_control.is_unlimited:
            self._clock = None
            return
        self._clock = Clock(time_control)
        self._clock.start(self._state.side_to_move)

    def _flag_fell(self, color: Color) -> bool:
        """End the game on time if *color*'s flag is down."""
        if self._clock is None or not self._clock.is_flag_fallen(color):
            return False
        self._time_out(color)
        return True

    def _is_promotion(self, from_sq: Square, to_sq: Square) -> bool:
        piece = self._state.board[from_sq]
        return (
            piece is not None
            and piece.piece_type == PieceType.PAWN
            and to_sq.row == piece.color.promotion_row
            and to_sq in self._state.legal_moves(from_sq)
        )

    def _time_out(self, color: Color) -> None:
        if self._clock is not None:
            self._clock.stop()
        self._state.flag_fall(color)
        self._emit_game_over(self._state.result)

    def _emit_move(self, record: MoveRecord) -> None:
        for cb in self.events.on_move:
            cb(record, self._state)

    def _emit_game_over(self, result: GameResult) -> None:
        self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
