"""Legal move generation, castling, en passant and attack detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessgame.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessgame.core.movement import pawn_attacks
from chessgame.core.piece import Piece
from chessgame.core.types import Square

if TYPE_CHECKING:
    from chessgame.core.board import Board

# Row a pawn must stand on to capture en passant.
_EN_PASSANT_ROW: dict[Color, int] = {Color.WHITE: 3, Color.BLACK: 4}

# Castling destinations (king column, rook column), identical in Chess960.
_KINGSIDE_COLS = (6, 5)
_QUEENSIDE_COLS = (2, 3)


@dataclass(frozen=True, slots=True)
class CastlingPlan:
    """Where the king and rook start and finish for one castling move."""

    flag: MoveFlag
    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square


class MoveGenerator:
    """Generates legal moves for the pieces of a :class:`Board`.

    King safety is tested by temporarily moving pieces on the board and
    restoring them before returning, so callers never observe the scratch
    state.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    # -- Public API ---------------------------------------------------------

    def pseudo_legal_moves(self, sq: Square) -> list[Square]:
        """Raw destinations of the piece on *sq* (may leave its king in check)."""
        piece = self._board[sq]
        if piece is None:
            return []
        return piece.possible_moves(sq, self._board)

    def legal_moves(self, sq: Square) -> list[Square]:
        """All strictly legal destinations of the piece on *sq*."""
        piece = self._board[sq]
        if piece is None:
            return []

        legal = [
            to_sq
            for to_sq in piece.possible_moves(sq, self._board)
            if self._is_safe_after(piece, sq, to_sq)
        ]

        if piece.piece_type == PieceType.KING:
            for to_sq in self.castling_moves(sq):
                if to_sq not in legal:
                    legal.append(to_sq)
        elif piece.piece_type == PieceType.PAWN:
            legal.extend(self.en_passant_moves(sq))
        return legal

    def is_legal_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether moving *from_sq* -> *to_sq* leaves the mover's king safe.

        Only the two squares are touched; castling rights, en passant and
        history are left alone.
        """
        piece = self._board[from_sq]
        if piece is None:
            return False
        return self._is_safe_after(piece, from_sq, to_sq)

    def has_any_legal_move(self, color: Color) -> bool:
        """Whether *color* has at least one legal move anywhere on the board."""
        return any(self.legal_moves(sq) for sq in self._board.pieces(color))

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked?  ``False`` when the king is missing."""
        king_sq = self._board.king_square(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, color)

    def is_square_attacked(self, sq: Square, defender: Color) -> bool:
        """Is *sq* attacked by any piece of *defender*'s opponent?

        Pawns attack geometrically (the two forward diagonals), which also
        covers empty squares and the en-passant target.
        """
        board = self._board
        attacker = defender.opposite
        for from_sq in board.pieces(attacker):
            piece = board[from_sq]
            if piece is None:
                continue
            if piece.piece_type == PieceType.PAWN:
                if sq in pawn_attacks(attacker, from_sq):
                    return True
            elif sq in piece.possible_moves(from_sq, board):
                return True
        return False

    # -- Castling -----------------------------------------------------------

    def castling_moves(self, king_sq: Square) -> list[Square]:
        """King destinations for every castling currently available."""
        king = self._board[king_sq]
        if king is None or king.piece_type != PieceType.KING:
            return []
        if self.is_in_check(king.color):
            return []

        moves: list[Square] = []
        for kingside in (True, False):
            plan = self.castling_plan(king_sq, kingside)
            if plan is not None:
                moves.append(plan.king_to)
        return moves

    def castling_plan_for(self, from_sq: Square, to_sq: Square) -> CastlingPlan | None:
        """The castling a king move *from_sq* -> *to_sq* performs, if any."""
        king = self._board[from_sq]
        if king is None or king.piece_type != PieceType.KING:
            return None
        if self.is_in_check(king.color):
            return None
        for kingside in (True, False):
            plan = self.castling_plan(from_sq, kingside)
            if plan is not None and plan.king_to == to_sq:
                return plan
        return None

    def castling_plan(self, king_sq: Square, kingside: bool) -> CastlingPlan | None:
        """Check one wing's castling conditions and describe the move.

        Works for classical and Chess960 alike: the rook is looked up on its
        home column and the king always lands on column 6 / 2 with the rook
        on column 5 / 3.
        """
        board = self._board
        king = board[king_sq]
        if king is None or king.piece_type != PieceType.KING:
            return None

        color = king.color
        row = color.back_rank
        if king_sq.row != row:
            return None
        if not board.castling & CastlingRights.for_wing(color, kingside):
            return None

        rook_sq = Square(row, board.rook_home(color, kingside))
        if board[rook_sq] != Piece(color, PieceType.ROOK):
            return None
        if kingside != (rook_sq.col > king_sq.col):
            return None

        king_col, rook_col = _KINGSIDE_COLS if kingside else _QUEENSIDE_COLS
        king_to = Square(row, king_col)
        rook_to = Square(row, rook_col)

        lo, hi = sorted((king_sq.col, rook_sq.col))
        for col in range(lo + 1, hi):
            if board[Square(row, col)] is not None:
                return None

        # Destinations may only hold the castling king or rook themselves.
        for dest in (king_to, rook_to):
            if dest not in (king_sq, rook_sq) and board[dest] is not None:
                return None

        lo, hi = sorted((king_sq.col, king_to.col))
        for col in range(lo, hi + 1):
            if self.is_square_attacked(Square(row, col), color):
                return None

        plan = CastlingPlan(
            flag=MoveFlag.CASTLE_KINGSIDE if kingside else MoveFlag.CASTLE_QUEENSIDE,
            king_from=king_sq,
            king_to=king_to,
            rook_from=rook_sq,
            rook_to=rook_to,
        )
        if not self._is_castle_safe(plan):
            return None
        return plan

    # -- En passant ---------------------------------------------------------

    def en_passant_moves(self, sq: Square) -> list[Square]:
        """The en-passant capture available to the pawn on *sq*, if any."""
        board = self._board
        target = board.en_passant
        pawn = board[sq]
        if target is None or pawn is None or pawn.piece_type != PieceType.PAWN:
            return []

        color = pawn.color
        if sq.row != _EN_PASSANT_ROW[color]:
            return []
        if target.row != sq.row + color.pawn_direction:
            return []
        if abs(sq.col - target.col) != 1 or board[target] is not None:
            return []

        victim_sq = Square(sq.row, target.col)
        victim = board[victim_sq]
        if (
            victim is None
            or victim.color == color
            or victim.piece_type != PieceType.PAWN
        ):
            return []

        if not self._is_safe_after(pawn, sq, target, captured_sq=victim_sq):
            return []
        return [target]

    # -- Scratch simulation (private) --------------------------------------

    def _is_safe_after(
        self,
        piece: Piece,
        from_sq: Square,
        to_sq: Square,
        captured_sq: Square | None = None,
    ) -> bool:
        board = self._board
        captured = board[to_sq]
        removed = board[captured_sq] if captured_sq is not None else None

        board[to_sq] = piece
        board[from_sq] = None
        if captured_sq is not None:
            board[captured_sq] = None
        try:
            return not self.is_in_check(piece.color)
        finally:
            if captured_sq is not None:
                board[captured_sq] = removed
            board[from_sq] = piece
            board[to_sq] = captured

    def _is_castle_safe(self, plan: CastlingPlan) -> bool:
        board = self._board
        saved = {
            sq: board[sq]
            for sq in (plan.king_from, plan.king_to, plan.rook_from, plan.rook_to)
        }
        king = saved[plan.king_from]
        rook = saved[plan.rook_from]
        assert king is not None and rook is not None

        for sq in saved:
            board[sq] = None
        board[plan.king_to] = king
        board[plan.rook_to] = rook
        try:
            return not self.is_in_check(king.color)
        finally:
            for sq, original in saved.items():
                board[sq] = original
