"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessgame.core import Square, Variant, new_board

    board = new_board(Variant.CHESS960)
    for to_sq in board.legal_moves(Square(6, 4)):
        print(to_sq)
"""

from chessgame.core.board import (
    CLASSICAL_BACK_RANK,
    PROMOTION_TYPES,
    Board,
    BoardSnapshot,
    PromotionChooser,
    chess960_back_rank,
    new_board,
    validate_back_rank,
)
from chessgame.core.enums import (
    CastlingRights,
    Color,
    GameResult,
    MoveFlag,
    PieceType,
    Variant,
)
from chessgame.core.move import MoveRecord
from chessgame.core.move_generator import CastlingPlan, MoveGenerator
from chessgame.core.piece import Piece
from chessgame.core.rules import Rules
from chessgame.core.types import (
    ALL_SQUARES,
    BOARD_SIZE,
    Square,
    is_on_board,
    parse_square,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    "Variant",
    # Types / helpers
    "ALL_SQUARES",
    "BOARD_SIZE",
    "Square",
    "is_on_board",
    "parse_square",
    # Domain objects
    "Board",
    "BoardSnapshot",
    "CastlingPlan",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "PromotionChooser",
    "Rules",
    # Setup
    "CLASSICAL_BACK_RANK",
    "PROMOTION_TYPES",
    "chess960_back_rank",
    "new_board",
    "validate_back_rank",
]
