"""Promotion dialog - lets user pick the promotion piece."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from chessgame.core.board import PROMOTION_TYPES
from chessgame.core.enums import Color, PieceType
from chessgame.core.piece import Piece


class PromotionDialog(QDialog):
    """Modal dialog to select promotion piece type."""

    def __init__(self, color: Color, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setModal(True)
        self.setWindowTitle("Pawn Promotion")
        self.setWindowFlags(
            self.windowFlags() & ~Qt.WindowType.WindowContextHelpButtonHint
        )

        self._selected: PieceType = PieceType.QUEEN

        layout = QVBoxLayout(self)
        label = QLabel("Choose piece for promotion:")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(label)

        btn_row = QHBoxLayout()
        self._buttons: dict[PieceType, QPushButton] = {}
        for pt in PROMOTION_TYPES:
            btn = QPushButton(Piece(color, pt).symbol)
            btn.setFont(QFont("Serif", 32))
            btn.setFixedSize(68, 68)
            btn.setToolTip(pt.name.capitalize())
            btn.clicked.connect(lambda checked, p=pt: self._choose(p))
            btn_row.addWidget(btn)
            self._buttons[pt] = btn

        layout.addLayout(btn_row)

    def _choose(self, piece_type: PieceType) -> None:
        self._selected = piece_type
        self.accept()

    @property
    def selected(self) -> PieceType:
        return self._selected

    def button(self, piece_type: PieceType) -> QPushButton:
        return self._buttons[piece_type]

    @staticmethod
    def ask(color: Color, parent: QWidget | None = None) -> PieceType | None:
        """Show the dialog and return the chosen piece type, or ``None`` on cancel."""
        dlg = PromotionDialog(color, parent)
        if dlg.exec() == QDialog.DialogCode.Accepted:
            return dlg.selected
        return None
