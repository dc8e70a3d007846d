"""MainWindow - top-level window assembling all UI components."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QAction, QActionGroup, QCloseEvent
from PyQt6.QtWidgets import (
    QFileDialog,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from chessgame.core.enums import Color, PieceType, Variant
from chessgame.core.move import MoveRecord
from chessgame.core.types import Square
from chessgame.game.controller import GameController
from chessgame.game.interfaces import GamePhase
from chessgame.game.state import GameState
from chessgame.ui.board_widget import BoardWidget
from chessgame.ui.clock_widget import ClockWidget
from chessgame.ui.promotion_dialog import PromotionDialog
from chessgame.ui.settings import AppSettings
from chessgame.ui.theme import THEME_NAMES, theme_by_name

_LOGGER = logging.getLogger(__name__)

_SAVE_FILTER = "Chess games (*.json);;All files (*)"


class MainWindow(QMainWindow):
    """Main application window."""

    TIME_CHECK_MS = 200

    def __init__(self, settings: AppSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Chess Game")

        self._settings = settings if settings is not None else AppSettings()
        self._controller = GameController()
        self._controller.choose_promotion = self._ask_promotion

        self._setup_ui()
        self._setup_menu()
        self._connect_game_events()

        self._time_timer = QTimer(self)
        self._time_timer.setInterval(self.TIME_CHECK_MS)
        self._time_timer.timeout.connect(self._on_time_tick)

        self._apply_settings()
        self.start_new_game(Variant.CLASSICAL)

    # ── UI setup ─────────────────────────────────────────────────────────

    def _setup_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(6, 6, 6, 6)
        root.setSpacing(6)

        self._clock_widget = ClockWidget()
        root.addWidget(self._clock_widget)

        self._board_widget = BoardWidget()
        root.addWidget(self._board_widget, stretch=1)

        # Status bar
        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._status_label = QLabel("White's turn")
        self._status.addWidget(self._status_label)

    def _setup_menu(self) -> None:
        menu_bar = self.menuBar()
        assert menu_bar is not None

        # Game menu
        menu_game = menu_bar.addMenu("Game")
        assert menu_game is not None

        self._act_new_game = QAction("New Game", self)
        self._act_new_game.setShortcut("Ctrl+N")
        self._act_new_game.triggered.connect(
            lambda: self.start_new_game(Variant.CLASSICAL)
        )
        menu_game.addAction(self._act_new_game)

        self._act_new_960 = QAction("New Chess960 Game", self)
        self._act_new_960.triggered.connect(
            lambda: self.start_new_game(Variant.CHESS960)
        )
        menu_game.addAction(self._act_new_960)

        menu_game.addSeparator()

        self._act_save = QAction("Save Game", self)
        self._act_save.setShortcut("Ctrl+S")
        self._act_save.triggered.connect(self._on_save_game)
        menu_game.addAction(self._act_save)

        self._act_load = QAction("Load Game", self)
        self._act_load.setShortcut("Ctrl+O")
        self._act_load.triggered.connect(self._on_load_game)
        menu_game.addAction(self._act_load)

        menu_game.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.setShortcut("Ctrl+Q")
        act_exit.triggered.connect(self.close)
        menu_game.addAction(act_exit)

        # Options menu
        menu_options = menu_bar.addMenu("Options")
        assert menu_options is not None

        act_timer = QAction("Timer Settings", self)
        act_timer.triggered.connect(self._on_timer_settings)
        menu_options.addAction(act_timer)

        menu_colors = menu_options.addMenu("Board Colors")
        assert menu_colors is not None
        self._theme_group = QActionGroup(self)
        self._theme_actions: dict[str, QAction] = {}
        for name in THEME_NAMES:
            act = QAction(name, self)
            act.setCheckable(True)
            act.triggered.connect(lambda checked, n=name: self.set_board_theme(n))
            self._theme_group.addAction(act)
            menu_colors.addAction(act)
            self._theme_actions[name] = act

        self._act_coords = QAction("Show Coordinates", self)
        self._act_coords.setCheckable(True)
        self._act_coords.toggled.connect(self.set_show_coordinates)
        menu_options.addAction(self._act_coords)

        menu_options.addSeparator()

        act_about = QAction("About", self)
        act_about.triggered.connect(self._on_about)
        menu_options.addAction(act_about)

    def _connect_game_events(self) -> None:
        self._controller.events.on_move.append(self._on_move_played)
        self._controller.events.on_phase_changed.append(self._on_phase_changed)
        self._board_widget.move_made.connect(self._on_user_move)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def controller(self) -> GameController:
        return self._controller

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def board_widget(self) -> BoardWidget:
        return self._board_widget

    @property
    def clock_widget(self) -> ClockWidget:
        return self._clock_widget

    @property
    def status_text(self) -> str:
        return self._status_label.text()

    # ── Game lifecycle ───────────────────────────────────────────────────

    def start_new_game(self, variant: Variant) -> None:
        self._controller.new_game(variant, self._settings.time_control())
        self._after_game_changed()

    def save_to(self, path: str | Path) -> bool:
        """Save the current game; errors are reported in a message box."""
        try:
            self._controller.save(path)
        except (OSError, RuntimeError) as exc:
            _LOGGER.warning("Saving to %s failed: %s", path, exc)
            QMessageBox.critical(self, "Save Error", f"Error saving game: {exc}")
            return False
        self._status_label.setText("Game saved successfully!")
        return True

    def load_from(self, path: str | Path) -> bool:
        """Load a saved game; errors are reported in a message box."""
        try:
            self._controller.load(path)
        except (OSError, ValueError) as exc:
            _LOGGER.warning("Loading %s failed: %s", path, exc)
            QMessageBox.critical(self, "Load Error", f"Error loading game: {exc}")
            return False
        self._after_game_changed()
        return True

    def _after_game_changed(self) -> None:
        state = self._controller.state
        self._board_widget.set_position(state.board, state.side_to_move)
        self._board_widget.set_interactive(self._controller.is_active)
        self._update_status(state)

        clock = self._controller.clock
        if clock is None:
            self._clock_widget.reset(None)
            self._time_timer.stop()
        elif self._controller.is_active:
            self._clock_widget.start(self._remaining_times)
            self._clock_widget.set_active(state.side_to_move)
            self._time_timer.start()
        else:
            self._clock_widget.reset(None)
            self._clock_widget.update_display(*self._remaining_times())
            self._time_timer.stop()

    # ── Settings ─────────────────────────────────────────────────────────

    def _apply_settings(self) -> None:
        self.set_board_theme(self._settings.board_theme)
        self._act_coords.setChecked(self._settings.show_coordinates)
        self._board_widget.set_show_coordinates(self._settings.show_coordinates)

    def set_board_theme(self, name: str) -> None:
        theme = theme_by_name(name)
        self._settings.board_theme = theme.name
        self._theme_actions[theme.name].setChecked(True)
        self._board_widget.set_theme(theme)

    def set_show_coordinates(self, visible: bool) -> None:
        self._settings.show_coordinates = visible
        self._board_widget.set_show_coordinates(visible)

    def set_time_minutes(self, minutes: int) -> None:
        """Time per player for the next new game."""
        self._settings.time_minutes = minutes

    # ── Handlers ─────────────────────────────────────────────────────────

    def _on_user_move(self, from_sq: Square, to_sq: Square) -> None:
        if not self._controller.submit_move(from_sq, to_sq):
            # Refused only when the flag fell first.
            self._after_game_changed()

    def _on_move_played(self, record: MoveRecord, state: GameState) -> None:
        self._board_widget.set_position(state.board, state.side_to_move)
        self._clock_widget.set_active(state.side_to_move)
        self._update_status(state)

    def _on_phase_changed(self, phase: GamePhase) -> None:
        if phase != GamePhase.GAME_OVER:
            return
        self._time_timer.stop()
        self._board_widget.set_interactive(False)
        self._clock_widget.set_active(None)
        self._clock_widget.stop()
        self._update_status(self._controller.state)

    def _on_time_tick(self) -> None:
        self._controller.check_time()

    def _ask_promotion(self, color: Color, sq: Square) -> PieceType | None:
        return PromotionDialog.ask(color, self)

    def _on_save_game(self) -> None:
        if not self._controller.is_active:
            QMessageBox.critical(self, "Save Error", "No active game to save.")
            return
        path, _ = QFileDialog.getSaveFileName(self, "Save Game", "", _SAVE_FILTER)
        if path:
            self.save_to(path)

    def _on_load_game(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Load Game", "", _SAVE_FILTER)
        if path:
            self.load_from(path)

    def _on_timer_settings(self) -> None:
        minutes, ok = QInputDialog.getInt(
            self,
            "Timer Settings",
            "Enter time in minutes for each player (0 = no limit):",
            self._settings.time_minutes,
            0,
            180,
        )
        if ok:
            self.set_time_minutes(minutes)
            self._status_label.setText("Timer will apply to the next new game.")

    def _on_about(self) -> None:
        QMessageBox.information(
            self,
            "About Chess Game",
            "Chess Game\n\nSupports standard chess and Chess960 variants.",
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _update_status(self, state: GameState) -> None:
        self._status_label.setText(state.status_message())

    def _remaining_times(self) -> tuple[float | None, float | None]:
        clock = self._controller.clock
        if clock is None:
            return None, None
        return clock.remaining(Color.WHITE), clock.remaining(Color.BLACK)

    def closeEvent(self, event: QCloseEvent | None) -> None:
        self._time_timer.stop()
        self._clock_widget.stop()
        super().closeEvent(event)
