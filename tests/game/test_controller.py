"""Tests for GameController, the orchestrator."""

import json
import random
from pathlib import Path

import pytest

from chessgame.core.board import Board, new_board
from chessgame.core.enums import Color, GameResult, PieceType, Variant
from chessgame.core.move import MoveRecord
from chessgame.core.piece import Piece
from chessgame.core.types import Square, parse_square
from chessgame.game.clock import ClockSnapshot
from chessgame.game.controller import GameController
from chessgame.game.interfaces import GameEndReason, GamePhase, TimeControl
from chessgame.game.persistence import SavedGame, SavedGameError, save_game
from chessgame.game.state import GameState

FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]


def _sq(move: str) -> tuple[Square, Square]:
    return parse_square(move[:2]), parse_square(move[2:])


def _make_controller(time_control: TimeControl | None = None) -> GameController:
    ctrl = GameController()
    ctrl.new_game(time_control=time_control)
    return ctrl


def _play(ctrl: GameController, moves: list[str]) -> None:
    for move in moves:
        assert ctrl.submit_move(*_sq(move)), move


class TestNewGame:
    def test_phase_awaiting(self) -> None:
        ctrl = _make_controller()
        assert ctrl.state.phase == GamePhase.AWAITING_MOVE
        assert ctrl.is_active

    def test_not_active_before_new_game(self) -> None:
        ctrl = GameController()
        assert not ctrl.is_active
        assert not ctrl.submit_move(*_sq("e2e4"))

    def test_untimed_has_no_clock(self) -> None:
        assert _make_controller().clock is None
        assert _make_controller(TimeControl.unlimited()).clock is None

    def test_timed_clock_running(self) -> None:
        ctrl = _make_controller(TimeControl.rapid_10m())
        assert ctrl.clock is not None
        assert ctrl.clock.snapshot().is_running
        assert ctrl.clock.snapshot().active_color == Color.WHITE

    def test_chess960(self) -> None:
        ctrl = GameController()
        ctrl.new_game(Variant.CHESS960, rng=random.Random(11))
        assert ctrl.board.variant == Variant.CHESS960
        assert ctrl.board.king_square(Color.WHITE) is not None

    def test_phase_event(self) -> None:
        ctrl = GameController()
        phases: list[GamePhase] = []
        ctrl.events.on_phase_changed.append(phases.append)
        ctrl.new_game()
        assert phases == [GamePhase.AWAITING_MOVE]

    def test_new_game_resets(self) -> None:
        ctrl = _make_controller()
        _play(ctrl, ["e2e4"])
        ctrl.new_game()
        assert ctrl.board == new_board()
        assert ctrl.state.side_to_move == Color.WHITE


class TestSubmitMove:
    def test_legal_move_accepted(self) -> None:
        ctrl = _make_controller()
        assert ctrl.submit_move(*_sq("e2e4"))
        assert ctrl.state.side_to_move == Color.BLACK

    def test_illegal_move_rejected(self) -> None:
        ctrl = _make_controller()
        assert not ctrl.submit_move(*_sq("e2e5"))
        assert ctrl.state.side_to_move == Color.WHITE

    def test_wrong_side_rejected(self) -> None:
        ctrl = _make_controller()
        assert not ctrl.submit_move(*_sq("e7e5"))

    def test_legal_moves_for(self) -> None:
        ctrl = _make_controller()
        assert set(ctrl.legal_moves_for(parse_square("g1"))) == {
            parse_square("f3"),
            parse_square("h3"),
        }
        assert ctrl.legal_moves_for(parse_square("g8")) == []

    def test_clock_switches(self) -> None:
        ctrl = _make_controller(TimeControl.rapid_10m())
        _play(ctrl, ["e2e4"])
        assert ctrl.clock is not None
        assert ctrl.clock.snapshot().active_color == Color.BLACK

    def test_increment_added(self) -> None:
        ctrl = _make_controller(TimeControl(60, 5))
        _play(ctrl, ["e2e4"])
        assert ctrl.clock is not None
        assert ctrl.clock.remaining(Color.WHITE) > 60.0


class TestEvents:
    def test_on_move(self) -> None:
        ctrl = _make_controller()
        seen: list[tuple[MoveRecord, GameState]] = []
        ctrl.events.on_move.append(lambda rec, st: seen.append((rec, st)))
        _play(ctrl, ["e2e4"])
        assert len(seen) == 1
        record, state = seen[0]
        assert str(record) == "Pe2-e4"
        assert state is ctrl.state

    def test_no_event_for_rejected_move(self) -> None:
        ctrl = _make_controller()
        seen: list[MoveRecord] = []
        ctrl.events.on_move.append(lambda rec, st: seen.append(rec))
        ctrl.submit_move(*_sq("e2e5"))
        assert seen == []

    def test_checkmate_emits_game_over(self) -> None:
        ctrl = _make_controller(TimeControl.rapid_10m())
        results: list[GameResult] = []
        phases: list[GamePhase] = []
        ctrl.events.on_game_over.append(results.append)
        ctrl.events.on_phase_changed.append(phases.append)
        _play(ctrl, FOOLS_MATE)
        assert results == [GameResult.BLACK_WINS]
        assert phases == [GamePhase.GAME_OVER]
        assert not ctrl.is_active
        assert ctrl.clock is not None and not ctrl.clock.snapshot().is_running
        assert not ctrl.submit_move(*_sq("a2a3"))


class TestPromotion:
    def _promotion_controller(
        self, time_control: TimeControl | None = None
    ) -> GameController:
        ctrl = GameController()
        ctrl.new_game(time_control=time_control)
        ctrl.state.restore(
            Board.from_diagram(
                [
                    "....k...",
                    "P.......",
                    "........",
                    "........",
                    "........",
                    "........",
                    "........",
                    "....K...",
                ]
            ),
            Color.WHITE,
        )
        return ctrl

    def test_default_queen(self) -> None:
        ctrl = self._promotion_controller()
        assert ctrl.submit_move(*_sq("a7a8"))
        assert ctrl.board[parse_square("a8")] == Piece(Color.WHITE, PieceType.QUEEN)

    def test_chooser_called(self) -> None:
        ctrl = self._promotion_controller()
        asked: list[tuple[Color, Square]] = []

        def choose(color: Color, sq: Square) -> PieceType:
            asked.append((color, sq))
            return PieceType.ROOK

        ctrl.choose_promotion = choose
        assert ctrl.submit_move(*_sq("a7a8"))
        assert asked == [(Color.WHITE, parse_square("a8"))]
        assert ctrl.board[parse_square("a8")] == Piece(Color.WHITE, PieceType.ROOK)
        assert str(ctrl.board.history[-1]) == "Pa7-a8=R"

    def test_flag_falls_while_choosing(self) -> None:
        ctrl = self._promotion_controller(TimeControl.rapid_10m())
        results: list[GameResult] = []
        ctrl.events.on_game_over.append(results.append)

        def choose_slowly(color: Color, sq: Square) -> PieceType:
            assert ctrl.clock is not None
            ctrl.clock.restore(ClockSnapshot(0.0, 600.0, Color.WHITE, True))
            ctrl.check_time()
            return PieceType.QUEEN

        ctrl.choose_promotion = choose_slowly
        assert not ctrl.submit_move(*_sq("a7a8"))
        assert results == [GameResult.BLACK_WINS]
        assert ctrl.state.end_reason == GameEndReason.TIMEOUT
        assert ctrl.state.ply_count == 0
        assert ctrl.state.side_to_move == Color.WHITE
        assert ctrl.board[parse_square("a7")] == Piece(Color.WHITE, PieceType.PAWN)
        assert ctrl.board[parse_square("a8")] is None

    def test_flag_down_when_chooser_returns(self) -> None:
        ctrl = self._promotion_controller(TimeControl.rapid_10m())
        results: list[GameResult] = []
        ctrl.events.on_game_over.append(results.append)

        def choose_too_late(color: Color, sq: Square) -> PieceType:
            assert ctrl.clock is not None
            ctrl.clock.restore(ClockSnapshot(0.0, 600.0, Color.WHITE, True))
            return PieceType.KNIGHT

        ctrl.choose_promotion = choose_too_late
        assert not ctrl.submit_move(*_sq("a7a8"))
        assert results == [GameResult.BLACK_WINS]
        assert ctrl.board[parse_square("a7")] == Piece(Color.WHITE, PieceType.PAWN)

    def test_new_game_while_choosing(self) -> None:
        ctrl = self._promotion_controller()
        moves: list[MoveRecord] = []
        ctrl.events.on_move.append(lambda rec, st: moves.append(rec))

        def restart(color: Color, sq: Square) -> PieceType:
            ctrl.new_game()
            return PieceType.QUEEN

        ctrl.choose_promotion = restart
        assert not ctrl.submit_move(*_sq("a7a8"))
        assert moves == []
        assert ctrl.board == new_board()

    def test_chooser_not_asked_for_plain_move(self) -> None:
        ctrl = self._promotion_controller()
        asked: list[Square] = []
        ctrl.choose_promotion = lambda color, sq: asked.append(sq)
        assert ctrl.submit_move(*_sq("e1d1"))
        assert asked == []


class TestTimeout:
    def test_check_time_no_flag(self) -> None:
        ctrl = _make_controller(TimeControl.rapid_10m())
        assert not ctrl.check_time()
        assert ctrl.is_active

    def test_check_time_untimed(self) -> None:
        assert not _make_controller().check_time()

    def test_check_time_flag(self) -> None:
        ctrl = _make_controller(TimeControl.rapid_10m())
        results: list[GameResult] = []
        ctrl.events.on_game_over.append(results.append)
        assert ctrl.clock is not None
        ctrl.clock.restore(ClockSnapshot(0.0, 600.0, Color.WHITE, True))
        assert ctrl.check_time()
        assert results == [GameResult.BLACK_WINS]
        assert ctrl.state.end_reason == GameEndReason.TIMEOUT
        assert not ctrl.clock.snapshot().is_running
        assert not ctrl.check_time()

    def test_move_after_flag_rejected(self) -> None:
        ctrl = _make_controller(TimeControl.rapid_10m())
        assert ctrl.clock is not None
        ctrl.clock.restore(ClockSnapshot(0.0, 600.0, Color.WHITE, True))
        assert not ctrl.submit_move(*_sq("e2e4"))
        assert ctrl.state.result == GameResult.BLACK_WINS
        assert ctrl.state.ply_count == 0


class TestSaveLoad:
    def test_round_trip(self, tmp_path: Path) -> None:
        ctrl = _make_controller(TimeControl(300, 2))
        _play(ctrl, ["e2e4", "c7c5", "e4e5", "d7d5"])
        path = tmp_path / "game.json"
        ctrl.save(path)

        other = GameController()
        other.load(path)
        assert other.board == ctrl.board
        assert other.board.en_passant == parse_square("d6")
        assert other.state.side_to_move == Color.WHITE
        assert other.is_active
        assert other.clock is not None
        assert other.clock.time_control == TimeControl(300, 2)
        assert other.clock.snapshot().active_color == Color.WHITE
        assert other.clock.remaining(Color.BLACK) <= 304.0

        # en passant still available after loading
        assert other.submit_move(*_sq("e5d6"))
        assert other.board[parse_square("d5")] is None

    def test_untimed_round_trip(self, tmp_path: Path) -> None:
        ctrl = _make_controller()
        _play(ctrl, ["g1f3"])
        path = tmp_path / "game.json"
        ctrl.save(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["clock"]["initial"] is None

        other = _make_controller(TimeControl.rapid_10m())
        other.load(path)
        assert other.clock is None
        assert other.state.side_to_move == Color.BLACK

    def test_save_without_game(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError):
            GameController().save(tmp_path / "game.json")

    def test_save_after_game_over(self, tmp_path: Path) -> None:
        ctrl = _make_controller()
        _play(ctrl, FOOLS_MATE)
        with pytest.raises(RuntimeError):
            ctrl.save(tmp_path / "game.json")

    def test_load_finished_game(self, tmp_path: Path) -> None:
        board = new_board()
        for move in FOOLS_MATE:
            assert board.move_piece(*_sq(move))
        path = tmp_path / "mated.json"
        save_game(
            path,
            SavedGame(
                board=board.snapshot(),
                side_to_move=Color.WHITE,
                time_control=TimeControl.rapid_10m(),
                white_remaining=500.0,
                black_remaining=400.0,
            ),
        )

        ctrl = GameController()
        results: list[GameResult] = []
        ctrl.events.on_game_over.append(results.append)
        ctrl.load(path)
        assert results == [GameResult.BLACK_WINS]
        assert ctrl.state.end_reason == GameEndReason.CHECKMATE
        assert ctrl.clock is not None and not ctrl.clock.snapshot().is_running

    def test_bad_file_leaves_game(self, tmp_path: Path) -> None:
        ctrl = _make_controller()
        _play(ctrl, ["e2e4"])
        before = ctrl.board.copy()
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SavedGameError):
            ctrl.load(path)
        assert ctrl.board == before
        assert ctrl.state.side_to_move == Color.BLACK

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            GameController().load(tmp_path / "missing.json")
