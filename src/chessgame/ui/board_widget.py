"""BoardWidget - an 8x8 grid of square buttons showing the position."""

from __future__ import annotations

from PyQt6.QtCore import QSize, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QGridLayout, QPushButton, QSizePolicy, QWidget

from chessgame.core.board import Board
from chessgame.core.enums import Color
from chessgame.core.types import ALL_SQUARES, Square
from chessgame.ui.theme import BoardTheme


class BoardWidget(QWidget):
    """Clickable chessboard.

    Click one of the side to move's pieces to select it; its legal targets
    are highlighted.  Clicking a highlighted square completes the move,
    clicking another own piece reselects, anything else clears the
    selection.

    Signals:
        move_made(Square, Square): Emitted when a user picks a legal target.
    """

    move_made = pyqtSignal(object, object)

    TILE = 72  # px per square

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._theme = BoardTheme.classic()
        self._board: Board | None = None
        self._side_to_move = Color.WHITE
        self._interactive = True
        self._show_coordinates = False

        # Interaction state
        self._selected_sq: Square | None = None
        self._targets: list[Square] = []

        layout = QGridLayout(self)
        layout.setSpacing(0)
        layout.setContentsMargins(0, 0, 0, 0)

        self._buttons: dict[Square, QPushButton] = {}
        for sq in ALL_SQUARES:
            btn = QPushButton()
            btn.setMinimumSize(QSize(self.TILE, self.TILE))
            btn.setSizePolicy(
                QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding
            )
            btn.setFlat(True)
            btn.setAutoFillBackground(True)
            btn.clicked.connect(lambda checked, s=sq: self._on_square_clicked(s))
            layout.addWidget(btn, sq.row, sq.col)
            self._buttons[sq] = btn

        self._refresh()

    # ── Public API ───────────────────────────────────────────────────────

    def set_position(self, board: Board, side_to_move: Color) -> None:
        """Show *board*; only *side_to_move*'s pieces can be selected."""
        self._board = board
        self._side_to_move = side_to_move
        self._clear_selection()
        self._refresh()

    def set_interactive(self, interactive: bool) -> None:
        """Enable / disable piece interaction."""
        self._interactive = interactive
        if not interactive:
            self._clear_selection()
            self._refresh()

    def set_theme(self, theme: BoardTheme) -> None:
        self._theme = theme
        self._refresh()

    @property
    def theme(self) -> BoardTheme:
        return self._theme

    def set_show_coordinates(self, visible: bool) -> None:
        """Show or hide square names on empty squares."""
        self._show_coordinates = visible
        self._refresh()

    @property
    def show_coordinates(self) -> bool:
        return self._show_coordinates

    @property
    def selected_square(self) -> Square | None:
        return self._selected_sq

    @property
    def highlighted_targets(self) -> list[Square]:
        return list(self._targets)

    def button(self, sq: Square) -> QPushButton:
        return self._buttons[sq]

    # ── Interaction ──────────────────────────────────────────────────────

    def _on_square_clicked(self, sq: Square) -> None:
        if not self._interactive or self._board is None:
            return

        # Clicking a legal target -> make the move
        if self._selected_sq is not None and sq in self._targets:
            from_sq = self._selected_sq
            self._clear_selection()
            self._refresh()
            self.move_made.emit(from_sq, sq)
            return

        piece = self._board[sq]
        if piece is not None and piece.color == self._side_to_move:
            self._selected_sq = sq
            self._targets = self._board.legal_moves(sq)
        else:
            self._clear_selection()
        self._refresh()

    def _clear_selection(self) -> None:
        self._selected_sq = None
        self._targets = []

    # ── Rendering ────────────────────────────────────────────────────────

    def _refresh(self) -> None:
        check_sq: Square | None = None
        if self._board is not None and self._board.is_king_in_check(
            self._side_to_move
        ):
            check_sq = self._board.king_square(self._side_to_move)

        for sq, btn in self._buttons.items():
            if sq == self._selected_sq:
                color = self._theme.highlight_from
            elif sq in self._targets:
                color = self._theme.highlight_to
            elif sq == check_sq:
                color = self._theme.highlight_check
            else:
                color = self._theme.square_color(sq.row, sq.col)

            piece = self._board[sq] if self._board is not None else None
            if piece is not None:
                btn.setText(piece.symbol)
                btn.setFont(QFont("Serif", 32, QFont.Weight.Bold))
                text_color = "#ffffff" if piece.color == Color.WHITE else "#000000"
            elif self._show_coordinates:
                btn.setText(sq.name)
                btn.setFont(QFont("Sans-Serif", 9))
                text_color = self._theme.coord_text.name()
            else:
                btn.setText("")
                text_color = "#000000"

            btn.setStyleSheet(
                f"background-color: {color.name()}; color: {text_color}; border: none;"
            )
