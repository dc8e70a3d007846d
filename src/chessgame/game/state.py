"""Game state machine: board, side to move, phase and result."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from chessgame.core.board import Board, PromotionChooser
from chessgame.core.enums import Color, GameResult, PieceType, Variant
from chessgame.core.move import MoveRecord
from chessgame.core.rules import Rules
from chessgame.core.types import Square
from chessgame.game.interfaces import GameEndReason, GamePhase

_LOGGER = logging.getLogger(__name__)


def _win_for(color: Color) -> GameResult:
    return GameResult.WHITE_WINS if color == Color.WHITE else GameResult.BLACK_WINS


@dataclass
class GameState:
    """Manages game lifecycle: board, turn, phase and result.

    This is a pure data/logic class - no threading, no UI.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    phase: GamePhase = GamePhase.NOT_STARTED
    result: GameResult = GameResult.IN_PROGRESS
    end_reason: GameEndReason = GameEndReason.NONE

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(
        self,
        variant: Variant = Variant.CLASSICAL,
        rng: random.Random | None = None,
        back_rank: Sequence[PieceType] | None = None,
    ) -> None:
        """Initialise (or reset) the game from a starting position."""
        if back_rank is not None:
            board = Board.from_back_rank(back_rank)
        else:
            board = Board.initial(variant, rng)
        self.restore(board, Color.WHITE)

    def restore(self, board: Board, side_to_move: Color) -> None:
        """Continue a game from *board* with *side_to_move* to play."""
        self.board = board
        self.side_to_move = side_to_move
        self.phase = GamePhase.AWAITING_MOVE
        self.result = GameResult.IN_PROGRESS
        self.end_reason = GameEndReason.NONE
        self._check_game_over()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(
        self,
        from_sq: Square,
        to_sq: Square,
        choose_promotion: PromotionChooser | None = None,
    ) -> MoveRecord | None:
        """Play a move for the side to move.

        Returns the history record, or ``None`` when the game is over, the
        origin does not hold a piece of the side to move, or the move is
        illegal.
        """
        if self.is_game_over:
            return None
        piece = self.board[from_sq]
        if piece is None or piece.color != self.side_to_move:
            return None
        if not self.board.move_piece(from_sq, to_sq, choose_promotion):
            return None

        self.side_to_move = self.side_to_move.opposite
        self._check_game_over()
        return self.board.history[-1]

    def flag_fall(self, color: Color) -> None:
        """Time ran out for *color*."""
        self.result = _win_for(color.opposite)
        self.end_reason = GameEndReason.TIMEOUT
        self.phase = GamePhase.GAME_OVER
        _LOGGER.info("%s flag fell", color)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.board.history)

    def legal_moves(self, sq: Square) -> list[Square]:
        """Legal targets from *sq*; empty unless it holds a piece that may move."""
        piece = self.board[sq]
        if self.is_game_over or piece is None or piece.color != self.side_to_move:
            return []
        return self.board.legal_moves(sq)

    def status_message(self) -> str:
        """One-line human description of the game state."""
        side = self.side_to_move.name.capitalize()
        other = self.side_to_move.opposite.name.capitalize()
        if self.end_reason == GameEndReason.CHECKMATE:
            return f"Checkmate! {other} wins."
        if self.end_reason == GameEndReason.STALEMATE:
            return "Stalemate! The game is a draw."
        if self.end_reason == GameEndReason.TIMEOUT:
            loser = "White" if self.result == GameResult.BLACK_WINS else "Black"
            winner = "Black" if loser == "White" else "White"
            return f"{loser}'s time has expired. {winner} wins!"
        if self.board.is_king_in_check(self.side_to_move):
            return f"{side} is in check!"
        return f"{side}'s turn"

    # ── Internal ─────────────────────────────────────────────────────────

    def _check_game_over(self) -> None:
        result = Rules.game_result(self.board, self.side_to_move)
        if result == GameResult.IN_PROGRESS:
            return
        self.result = result
        if result == GameResult.DRAW:
            self.end_reason = GameEndReason.STALEMATE
        else:
            self.end_reason = GameEndReason.CHECKMATE
        self.phase = GamePhase.GAME_OVER
        _LOGGER.info("Game over: %s (%s)", result.name, self.end_reason.name)
