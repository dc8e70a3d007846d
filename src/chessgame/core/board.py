"""Board - piece placement plus castling, en passant and move history."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from chessgame.core.enums import CastlingRights, Color, MoveFlag, PieceType, Variant
from chessgame.core.move import MoveRecord
from chessgame.core.move_generator import CastlingPlan, MoveGenerator
from chessgame.core.piece import Piece
from chessgame.core.types import ALL_SQUARES, BOARD_SIZE, Square

_LOGGER = logging.getLogger(__name__)

PromotionChooser = Callable[[Color, Square], PieceType | None]

CLASSICAL_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_BACK_RANK_COUNTS: dict[PieceType, int] = {
    PieceType.KING: 1,
    PieceType.QUEEN: 1,
    PieceType.ROOK: 2,
    PieceType.BISHOP: 2,
    PieceType.KNIGHT: 2,
}


# -- Chess960 arrangement ---------------------------------------------------


def chess960_back_rank(rng: random.Random | None = None) -> tuple[PieceType, ...]:
    """Draw a random Chess960 back rank.

    Bishops go on one even and one odd column, then queen and both knights
    take random empty columns; the last three columns receive rook, king,
    rook from left to right.
    """
    rng = rng if rng is not None else random.Random()
    cols: list[PieceType | None] = [None] * BOARD_SIZE

    cols[rng.randrange(0, BOARD_SIZE, 2)] = PieceType.BISHOP
    cols[rng.randrange(1, BOARD_SIZE, 2)] = PieceType.BISHOP

    for piece_type in (PieceType.QUEEN, PieceType.KNIGHT, PieceType.KNIGHT):
        col = rng.randrange(BOARD_SIZE)
        while cols[col] is not None:
            col = rng.randrange(BOARD_SIZE)
        cols[col] = piece_type

    empty = [col for col in range(BOARD_SIZE) if cols[col] is None]
    left_rook, king, right_rook = empty
    cols[left_rook] = PieceType.ROOK
    cols[king] = PieceType.KING
    cols[right_rook] = PieceType.ROOK

    return tuple(pt for pt in cols if pt is not None)


def validate_back_rank(back_rank: Sequence[PieceType]) -> None:
    """Raise ``ValueError`` unless *back_rank* is a legal Chess960 arrangement."""
    if len(back_rank) != BOARD_SIZE:
        raise ValueError(f"Back rank needs 8 pieces, got {len(back_rank)}")
    for piece_type, count in _BACK_RANK_COUNTS.items():
        if list(back_rank).count(piece_type) != count:
            raise ValueError(f"Back rank needs exactly {count} {piece_type.name}(s)")

    bishops = [col for col, pt in enumerate(back_rank) if pt == PieceType.BISHOP]
    if bishops[0] % 2 == bishops[1] % 2:
        raise ValueError("Bishops must stand on opposite-coloured squares")

    rooks = [col for col, pt in enumerate(back_rank) if pt == PieceType.ROOK]
    king = back_rank.index(PieceType.KING)
    if not rooks[0] < king < rooks[1]:
        raise ValueError("King must stand between the two rooks")


# -- Snapshot ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Plain-data copy of every field needed to rebuild a :class:`Board`."""

    squares: tuple[Piece | None, ...]
    variant: Variant
    castling: CastlingRights
    en_passant: Square | None
    history: tuple[MoveRecord, ...]
    # [color] -> (queenside rook column, kingside rook column)
    rook_homes: tuple[tuple[int, int], tuple[int, int]]


class Board:
    """Mutable 8x8 board with castling rights, en-passant target and history.

    Squares change only through :meth:`move_piece` during play;
    :meth:`set_piece_at` exists for setup and for the scratch simulation
    performed by :class:`MoveGenerator`.
    """

    __slots__ = (
        "_squares",
        "_variant",
        "_history",
        "_rook_homes",
        "castling",
        "en_passant",
        "choose_promotion",
    )

    def __init__(
        self,
        variant: Variant = Variant.CLASSICAL,
        *,
        choose_promotion: PromotionChooser | None = None,
    ) -> None:
        self._squares: list[Piece | None] = [None] * (BOARD_SIZE * BOARD_SIZE)
        self._variant = variant
        self._history: list[MoveRecord] = []
        # [color] -> (queenside rook column, kingside rook column)
        self._rook_homes: list[tuple[int, int]] = [(0, 7), (0, 7)]
        self.castling = CastlingRights.ALL
        self.en_passant: Square | None = None
        self.choose_promotion = choose_promotion

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq.index]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq.index] = piece

    def piece_at(self, sq: Square) -> Piece | None:
        return self._squares[sq.index]

    def set_piece_at(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq.index] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq.index] is None

    # -- Query helpers ------------------------------------------------------

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return tuple(self._history)

    def pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*, in row-major order."""
        return [
            sq
            for sq, piece in zip(ALL_SQUARES, self._squares)
            if piece is not None and piece.color == color
        ]

    def king_square(self, color: Color) -> Square | None:
        """Square of *color*'s king, or ``None`` if it is missing."""
        king = Piece(color, PieceType.KING)
        for sq, piece in zip(ALL_SQUARES, self._squares):
            if piece == king:
                return sq
        return None

    def can_castle(self, color: Color, kingside: bool) -> bool:
        return bool(self.castling & CastlingRights.for_wing(color, kingside))

    def rook_home(self, color: Color, kingside: bool) -> int:
        """Column the castling rook of *color* started on."""
        queenside_col, kingside_col = self._rook_homes[int(color)]
        return kingside_col if kingside else queenside_col

    # -- Rules --------------------------------------------------------------

    def legal_moves(self, sq: Square) -> list[Square]:
        return MoveGenerator(self).legal_moves(sq)

    def is_square_attacked(self, sq: Square, defender: Color) -> bool:
        return MoveGenerator(self).is_square_attacked(sq, defender)

    def is_king_in_check(self, color: Color) -> bool:
        return MoveGenerator(self).is_in_check(color)

    def has_any_legal_move(self, color: Color) -> bool:
        return MoveGenerator(self).has_any_legal_move(color)

    # -- Move execution -----------------------------------------------------

    def move_piece(
        self,
        from_sq: Square,
        to_sq: Square,
        choose_promotion: PromotionChooser | None = None,
    ) -> bool:
        """Execute a legal move.  Returns ``False`` and changes nothing otherwise.

        *choose_promotion* overrides :attr:`choose_promotion` for this move.
        """
        piece = self[from_sq]
        if piece is None:
            _LOGGER.debug("Rejected %s -> %s: no piece on origin", from_sq, to_sq)
            return False

        gen = MoveGenerator(self)
        if to_sq not in gen.legal_moves(from_sq):
            _LOGGER.debug("Rejected %s -> %s: not a legal move", from_sq, to_sq)
            return False

        if piece.piece_type == PieceType.KING:
            plan = gen.castling_plan_for(from_sq, to_sq)
            if plan is not None:
                self._castle(plan, piece)
                return True

        # Ask for the promotion piece before touching the board.
        promotion: PieceType | None = None
        if (
            piece.piece_type == PieceType.PAWN
            and to_sq.row == piece.color.promotion_row
        ):
            promotion = self._resolve_promotion(piece.color, to_sq, choose_promotion)

        flag = MoveFlag.NORMAL
        captured = self[to_sq]

        if (
            piece.piece_type == PieceType.PAWN
            and from_sq.col != to_sq.col
            and captured is None
        ):
            passed_sq = Square(from_sq.row, to_sq.col)
            captured = self[passed_sq]
            self[passed_sq] = None
            flag = MoveFlag.EN_PASSANT

        if piece.piece_type == PieceType.PAWN and abs(from_sq.row - to_sq.row) == 2:
            self.en_passant = Square((from_sq.row + to_sq.row) // 2, from_sq.col)
            flag = MoveFlag.DOUBLE_PAWN
        else:
            self.en_passant = None

        self._update_castling(piece, from_sq, to_sq, self[to_sq])

        if promotion is not None:
            flag = MoveFlag.PROMOTION
        self._history.append(
            MoveRecord(from_sq, to_sq, piece, captured, flag, promotion)
        )

        if promotion is not None:
            self[to_sq] = Piece(piece.color, promotion)
        else:
            self[to_sq] = piece
        self[from_sq] = None
        return True

    def _castle(self, plan: CastlingPlan, king: Piece) -> None:
        rook = self[plan.rook_from]
        self[plan.king_from] = None
        self[plan.rook_from] = None
        self[plan.king_to] = king
        self[plan.rook_to] = rook

        self.castling &= ~CastlingRights.for_side(king.color)
        self.en_passant = None
        self._history.append(
            MoveRecord(plan.king_from, plan.king_to, king, None, plan.flag)
        )

    def _resolve_promotion(
        self,
        color: Color,
        sq: Square,
        choose_promotion: PromotionChooser | None,
    ) -> PieceType:
        chooser = choose_promotion or self.choose_promotion
        if chooser is None:
            return PieceType.QUEEN
        choice = chooser(color, sq)
        if isinstance(choice, PieceType) and choice in PROMOTION_TYPES:
            return choice
        _LOGGER.debug("Promotion choice %r not usable; promoting to queen", choice)
        return PieceType.QUEEN

    # -- Castling bookkeeping -----------------------------------------------

    def _update_castling(
        self,
        piece: Piece,
        from_sq: Square,
        to_sq: Square,
        captured: Piece | None,
    ) -> None:
        rights = self.castling
        color = piece.color

        if piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.for_side(color)
        elif piece.piece_type == PieceType.ROOK and from_sq.row == color.back_rank:
            rights &= ~self._wing_for_column(color, from_sq.col)

        if (
            captured is not None
            and captured.piece_type == PieceType.ROOK
            and to_sq.row == captured.color.back_rank
        ):
            rights &= ~self._wing_for_column(captured.color, to_sq.col)

        self.castling = rights

    def _wing_for_column(self, color: Color, col: int) -> CastlingRights:
        queenside_col, kingside_col = self._rook_homes[int(color)]
        if col == queenside_col:
            return CastlingRights.for_wing(color, kingside=False)
        if col == kingside_col:
            return CastlingRights.for_wing(color, kingside=True)
        return CastlingRights.NONE

    def _detect_rook_homes(self) -> None:
        """Take rook homes from the rooks flanking each side's king."""
        for color in Color:
            row = color.back_rank
            king_sq = self.king_square(color)
            queenside_col, kingside_col = 0, 7
            if king_sq is not None and king_sq.row == row:
                rook = Piece(color, PieceType.ROOK)
                cols = [c for c in range(BOARD_SIZE) if self[Square(row, c)] == rook]
                left = [c for c in cols if c < king_sq.col]
                right = [c for c in cols if c > king_sq.col]
                if left:
                    queenside_col = left[0]
                if right:
                    kingside_col = right[-1]
            self._rook_homes[int(color)] = (queenside_col, kingside_col)

    # -- Snapshot / copying -------------------------------------------------

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            squares=tuple(self._squares),
            variant=self._variant,
            castling=self.castling,
            en_passant=self.en_passant,
            history=tuple(self._history),
            rook_homes=(self._rook_homes[0], self._rook_homes[1]),
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: BoardSnapshot,
        *,
        choose_promotion: PromotionChooser | None = None,
    ) -> Board:
        if len(snapshot.squares) != BOARD_SIZE * BOARD_SIZE:
            raise ValueError(
                f"Snapshot needs {BOARD_SIZE * BOARD_SIZE} squares, "
                f"got {len(snapshot.squares)}"
            )
        b = cls(snapshot.variant, choose_promotion=choose_promotion)
        b._squares = list(snapshot.squares)
        b.castling = snapshot.castling
        b.en_passant = snapshot.en_passant
        b._history = list(snapshot.history)
        b._rook_homes = list(snapshot.rook_homes)
        return b

    def copy(self) -> Board:
        return Board.from_snapshot(
            self.snapshot(), choose_promotion=self.choose_promotion
        )

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(
        cls,
        variant: Variant = Variant.CLASSICAL,
        rng: random.Random | None = None,
        *,
        choose_promotion: PromotionChooser | None = None,
    ) -> Board:
        """Starting position: classical, or a random Chess960 arrangement."""
        if variant == Variant.CHESS960:
            back_rank = chess960_back_rank(rng)
        else:
            back_rank = CLASSICAL_BACK_RANK
        b = cls(variant, choose_promotion=choose_promotion)
        b._place_start(back_rank)
        return b

    @classmethod
    def from_back_rank(
        cls,
        back_rank: Sequence[PieceType],
        *,
        choose_promotion: PromotionChooser | None = None,
    ) -> Board:
        """Chess960 starting position with a chosen (mirrored) back rank."""
        validate_back_rank(back_rank)
        b = cls(Variant.CHESS960, choose_promotion=choose_promotion)
        b._place_start(back_rank)
        return b

    @classmethod
    def from_diagram(
        cls,
        rows: Sequence[str],
        variant: Variant = Variant.CLASSICAL,
        castling: CastlingRights = CastlingRights.NONE,
        en_passant: Square | None = None,
    ) -> Board:
        """Build a board from 8 rows of piece letters, row 0 first.

        Empty squares are ``.``; spaces are ignored, so the body of
        ``repr(board)`` can be pasted back in.
        """
        if len(rows) != BOARD_SIZE:
            raise ValueError(f"Diagram needs {BOARD_SIZE} rows, got {len(rows)}")
        b = cls(variant)
        for row, text in enumerate(rows):
            cells = text.replace(" ", "")
            if len(cells) != BOARD_SIZE:
                raise ValueError(f"Diagram row {row} needs 8 cells: {text!r}")
            for col, char in enumerate(cells):
                if char != ".":
                    b[Square(row, col)] = Piece.from_char(char)
        b.castling = castling
        b.en_passant = en_passant
        b._detect_rook_homes()
        return b

    def _place_start(self, back_rank: Sequence[PieceType]) -> None:
        for color in Color:
            for col, piece_type in enumerate(back_rank):
                self[Square(color.back_rank, col)] = Piece(color, piece_type)
                self[Square(color.pawn_start_row, col)] = Piece(color, PieceType.PAWN)

        rooks = [col for col, pt in enumerate(back_rank) if pt == PieceType.ROOK]
        self._rook_homes = [(rooks[0], rooks[1]), (rooks[0], rooks[1])]
        self.castling = CastlingRights.ALL
        self.en_passant = None
        self._history = []

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._squares == other._squares
            and self._variant == other._variant
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self._rook_homes == other._rook_homes
            and self._history == other._history
        )

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(BOARD_SIZE):
            cells = []
            for col in range(BOARD_SIZE):
                p = self[Square(row, col)]
                cells.append(str(p) if p else ".")
            rows.append(f"{BOARD_SIZE - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)


def new_board(
    variant: Variant = Variant.CLASSICAL,
    rng: random.Random | None = None,
    choose_promotion: PromotionChooser | None = None,
) -> Board:
    """Create a board in its starting position for *variant*."""
    return Board.initial(variant, rng, choose_promotion=choose_promotion)
