"""Move history record."""

from __future__ import annotations

from dataclasses import dataclass

from chessgame.core.enums import MoveFlag, PieceType
from chessgame.core.piece import Piece
from chessgame.core.types import Square


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """One executed move, as appended to the board history.

    ``captured`` is the piece removed by the move (the passed pawn for en
    passant).  Castling is stored with the king's origin and destination.
    """

    from_sq: Square
    to_sq: Square
    piece: Piece
    captured: Piece | None = None
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    def __str__(self) -> str:
        base = f"{self.piece}{self.from_sq.name}{'x' if self.captured else '-'}"
        base += self.to_sq.name
        if self.promotion is not None:
            base += "=" + str(Piece(self.piece.color, self.promotion)).upper()
        return base
