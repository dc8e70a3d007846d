"""Square value type and coordinate helpers.

Board layout (row-major, Black at the top):
    row 0 = Black's back rank (a8 ... h8)
    row 7 = White's back rank (a1 ... h1)
    col 0 = a-file, col 7 = h-file
"""

from __future__ import annotations

from dataclasses import dataclass

BOARD_SIZE = 8

_FILES = "abcdefgh"
_RANKS = "12345678"


def is_on_board(row: int, col: int) -> bool:
    """Whether *row*, *col* both lie in 0..7."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


@dataclass(frozen=True, slots=True, order=True)
class Square:
    """Immutable board coordinate."""

    row: int
    col: int

    def __post_init__(self) -> None:
        if not is_on_board(self.row, self.col):
            raise ValueError(f"Square out of range: ({self.row}, {self.col})")

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"

    @property
    def name(self) -> str:
        """Algebraic name, e.g. ``Square(7, 4).name == 'e1'``."""
        return _FILES[self.col] + str(BOARD_SIZE - self.row)

    @property
    def index(self) -> int:
        """Row-major index 0-63."""
        return self.row * BOARD_SIZE + self.col

    def offset(self, d_row: int, d_col: int) -> Square | None:
        """The square *d_row*, *d_col* away, or ``None`` when off the board."""
        row = self.row + d_row
        col = self.col + d_col
        if not is_on_board(row, col):
            return None
        return Square(row, col)


def parse_square(name: str) -> Square:
    """Parse an algebraic square name, e.g. ``'e4'`` -> ``Square(4, 4)``."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    return Square(BOARD_SIZE - int(name[1]), _FILES.index(name[0]))


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)
)
