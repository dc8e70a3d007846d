"""Tests for the promotion piece picker."""

from __future__ import annotations

import pytest
from PyQt6.QtWidgets import QDialog

from chessgame.core.enums import Color, PieceType
from chessgame.ui.promotion_dialog import PromotionDialog


class TestPromotionDialog:
    def test_buttons_show_glyphs(self, qapp) -> None:
        dlg = PromotionDialog(Color.BLACK)
        assert dlg.windowTitle() == "Pawn Promotion"
        assert dlg.button(PieceType.QUEEN).text() == "♛"
        assert dlg.button(PieceType.KNIGHT).text() == "♞"

    def test_default_is_queen(self, qapp) -> None:
        assert PromotionDialog(Color.WHITE).selected == PieceType.QUEEN

    def test_click_accepts(self, qapp) -> None:
        dlg = PromotionDialog(Color.WHITE)
        dlg.button(PieceType.ROOK).click()
        assert dlg.result() == QDialog.DialogCode.Accepted.value
        assert dlg.selected == PieceType.ROOK

    def test_ask_returns_choice(self, qapp, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_exec(self: PromotionDialog) -> int:
            self.button(PieceType.BISHOP).click()
            return QDialog.DialogCode.Accepted

        monkeypatch.setattr(PromotionDialog, "exec", fake_exec)
        assert PromotionDialog.ask(Color.WHITE) == PieceType.BISHOP

    def test_ask_cancelled(self, qapp, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            PromotionDialog, "exec", lambda self: QDialog.DialogCode.Rejected
        )
        assert PromotionDialog.ask(Color.WHITE) is None
