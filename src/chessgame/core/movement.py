"""Pseudo-legal move generation per piece kind.

Each generator returns the squares a piece could reach under its own
movement rule and the current occupancy, without looking at king safety,
castling or en passant.  Those are layered on by :mod:`move_generator`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from chessgame.core.enums import Color, PieceType
from chessgame.core.types import ALL_SQUARES, Square, is_on_board

if TYPE_CHECKING:
    from chessgame.core.board import Board
    from chessgame.core.piece import Piece

# (d_row, d_col) offsets
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for sq in ALL_SQUARES:
        moves: list[Square] = []
        for dr, dc in offsets:
            row = sq.row + dr
            col = sq.col + dc
            if is_on_board(row, col):
                moves.append(Square(row, col))
        targets[sq] = tuple(moves)
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[tuple[Square, ...], ...]]:
    rays_per_square: dict[Square, tuple[tuple[Square, ...], ...]] = {}
    for sq in ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for dr, dc in directions:
            row = sq.row + dr
            col = sq.col + dc
            ray: list[Square] = []
            while is_on_board(row, col):
                ray.append(Square(row, col))
                row += dr
                col += dc
            square_rays.append(tuple(ray))
        rays_per_square[sq] = tuple(square_rays)
    return rays_per_square


def _build_pawn_attacks() -> dict[Color, dict[Square, tuple[Square, ...]]]:
    attacks: dict[Color, dict[Square, tuple[Square, ...]]] = {}
    for color in Color:
        per_square: dict[Square, tuple[Square, ...]] = {}
        for sq in ALL_SQUARES:
            row = sq.row + color.pawn_direction
            per_square[sq] = tuple(
                Square(row, col)
                for col in (sq.col - 1, sq.col + 1)
                if is_on_board(row, col)
            )
        attacks[color] = per_square
    return attacks


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_PAWN_ATTACKS = _build_pawn_attacks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


def pawn_attacks(color: Color, sq: Square) -> tuple[Square, ...]:
    """Squares a *color* pawn on *sq* attacks, whether occupied or not."""
    return _PAWN_ATTACKS[color][sq]


# -- Per-kind generators ---------------------------------------------------


def _gen_step(
    piece: Piece, targets: tuple[Square, ...], board: Board
) -> list[Square]:
    moves: list[Square] = []
    for to_sq in targets:
        target = board[to_sq]
        if target is None or target.color != piece.color:
            moves.append(to_sq)
    return moves


def _gen_sliding(
    piece: Piece, rays: tuple[tuple[Square, ...], ...], board: Board
) -> list[Square]:
    moves: list[Square] = []
    for ray in rays:
        for to_sq in ray:
            target = board[to_sq]
            if target is None:
                moves.append(to_sq)
                continue
            if target.color != piece.color:
                moves.append(to_sq)
            break
    return moves


def _gen_king(piece: Piece, sq: Square, board: Board) -> list[Square]:
    return _gen_step(piece, _KING_TARGETS[sq], board)


def _gen_knight(piece: Piece, sq: Square, board: Board) -> list[Square]:
    return _gen_step(piece, _KNIGHT_TARGETS[sq], board)


def _gen_bishop(piece: Piece, sq: Square, board: Board) -> list[Square]:
    return _gen_sliding(piece, _BISHOP_RAYS[sq], board)


def _gen_rook(piece: Piece, sq: Square, board: Board) -> list[Square]:
    return _gen_sliding(piece, _ROOK_RAYS[sq], board)


def _gen_queen(piece: Piece, sq: Square, board: Board) -> list[Square]:
    return _gen_sliding(piece, _QUEEN_RAYS[sq], board)


def _gen_pawn(piece: Piece, sq: Square, board: Board) -> list[Square]:
    moves: list[Square] = []
    color = piece.color
    one_step = sq.offset(color.pawn_direction, 0)

    if one_step is not None and board[one_step] is None:
        moves.append(one_step)
        if sq.row == color.pawn_start_row:
            two_step = sq.offset(2 * color.pawn_direction, 0)
            if two_step is not None and board[two_step] is None:
                moves.append(two_step)

    for cap_sq in _PAWN_ATTACKS[color][sq]:
        target = board[cap_sq]
        if target is not None and target.color != color:
            moves.append(cap_sq)
    return moves


_GENERATORS: dict[PieceType, Callable[[Piece, Square, Board], list[Square]]] = {
    PieceType.KING: _gen_king,
    PieceType.QUEEN: _gen_queen,
    PieceType.ROOK: _gen_rook,
    PieceType.BISHOP: _gen_bishop,
    PieceType.KNIGHT: _gen_knight,
    PieceType.PAWN: _gen_pawn,
}


def pseudo_legal_moves(piece: Piece, sq: Square, board: Board) -> list[Square]:
    """Destinations of *piece* standing on *sq* under its movement rule."""
    return _GENERATORS[piece.piece_type](piece, sq, board)
