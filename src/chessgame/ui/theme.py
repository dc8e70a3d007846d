"""Board colour schemes."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtGui import QColor


@dataclass(frozen=True)
class BoardTheme:
    """Colour scheme for the chessboard."""

    name: str
    light_square: QColor
    dark_square: QColor
    highlight_from: QColor  # selected piece origin
    highlight_to: QColor  # legal move targets
    highlight_check: QColor  # king in check
    coord_text: QColor  # coordinate labels on empty squares

    @classmethod
    def classic(cls) -> BoardTheme:
        return cls(
            name="Classic",
            light_square=QColor(240, 217, 183),
            dark_square=QColor(180, 136, 99),
            highlight_from=QColor(173, 216, 230),  # light blue
            highlight_to=QColor(144, 238, 144),  # light green
            highlight_check=QColor(235, 97, 80),
            coord_text=QColor(128, 128, 128),
        )

    @classmethod
    def blue(cls) -> BoardTheme:
        return cls(
            name="Blue",
            light_square=QColor(220, 230, 245),
            dark_square=QColor(75, 115, 153),
            highlight_from=QColor(173, 216, 230),
            highlight_to=QColor(144, 238, 144),
            highlight_check=QColor(235, 97, 80),
            coord_text=QColor(128, 128, 128),
        )

    @classmethod
    def green(cls) -> BoardTheme:
        return cls(
            name="Green",
            light_square=QColor(235, 240, 208),
            dark_square=QColor(118, 150, 86),
            highlight_from=QColor(173, 216, 230),
            highlight_to=QColor(144, 238, 144),
            highlight_check=QColor(235, 97, 80),
            coord_text=QColor(128, 128, 128),
        )

    def square_color(self, row: int, col: int) -> QColor:
        """Base colour of the square at (*row*, *col*); a8 is light."""
        return self.light_square if (row + col) % 2 == 0 else self.dark_square


THEME_NAMES: tuple[str, ...] = ("Classic", "Blue", "Green")


def theme_by_name(name: str) -> BoardTheme:
    """Return the preset called *name*, falling back to Classic."""
    theme_map = {
        "Classic": BoardTheme.classic,
        "Blue": BoardTheme.blue,
        "Green": BoardTheme.green,
    }
    return theme_map.get(name, BoardTheme.classic)()
