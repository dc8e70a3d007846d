"""Tests for AppSettings and board themes."""

from __future__ import annotations

import pytest

from chessgame.game.interfaces import TimeControl
from chessgame.ui.settings import AppSettings
from chessgame.ui.theme import THEME_NAMES, BoardTheme, theme_by_name


class TestAppSettings:
    def test_defaults(self) -> None:
        settings = AppSettings()
        assert settings.board_theme == "Classic"
        assert not settings.show_coordinates
        assert settings.time_control() == TimeControl.rapid_10m()

    def test_zero_minutes_is_unlimited(self) -> None:
        assert AppSettings(time_minutes=0).time_control().is_unlimited

    def test_increment(self) -> None:
        tc = AppSettings(time_minutes=3, increment_seconds=2).time_control()
        assert tc == TimeControl(180, 2)

    def test_unknown_theme(self) -> None:
        with pytest.raises(ValueError, match="theme"):
            AppSettings(board_theme="Purple")

    def test_negative_time(self) -> None:
        with pytest.raises(ValueError):
            AppSettings(time_minutes=-1)


class TestThemes:
    def test_every_name_resolves(self) -> None:
        for name in THEME_NAMES:
            assert theme_by_name(name).name == name

    def test_unknown_falls_back(self) -> None:
        assert theme_by_name("Nope") == BoardTheme.classic()

    def test_square_color_alternates(self) -> None:
        theme = BoardTheme.classic()
        assert theme.square_color(0, 0) == theme.light_square
        assert theme.square_color(0, 1) == theme.dark_square
        assert theme.square_color(7, 7) == theme.light_square
