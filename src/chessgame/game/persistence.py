"""JSON save files for an unfinished game.

A save holds everything needed to continue play: the board snapshot
(pieces, castling rights, en-passant target, rook homes and history),
the side to move and both clocks.  Squares are written as algebraic
names, pieces as letters and enums by name, so files stay readable::

    {
      "format": 1,
      "variant": "CHESS960",
      "side_to_move": "WHITE",
      "diagram": ["rnbqkbnr", "pppppppp", ...],
      "castling": 15,
      "en_passant": null,
      "rook_homes": [[0, 7], [0, 7]],
      "history": [{"from": "e2", "to": "e4", "piece": "P", ...}],
      "clock": {"initial": 600, "increment": 0, "white": 593.2, "black": 600}
    }

Unlimited clocks are stored as ``null``.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from chessgame.core.board import BoardSnapshot
from chessgame.core.enums import CastlingRights, Color, MoveFlag, PieceType, Variant
from chessgame.core.move import MoveRecord
from chessgame.core.piece import Piece
from chessgame.core.types import BOARD_SIZE, Square, parse_square
from chessgame.game.interfaces import TimeControl

_LOGGER = logging.getLogger(__name__)

FORMAT_VERSION = 1


class SavedGameError(ValueError):
    """A save file is malformed or describes an impossible game."""


@dataclass(frozen=True, slots=True)
class SavedGame:
    """Everything written to (and read back from) a save file."""

    board: BoardSnapshot
    side_to_move: Color
    time_control: TimeControl
    white_remaining: float
    black_remaining: float


# ── Encoding ─────────────────────────────────────────────────────────────────


def _seconds_to_json(seconds: float) -> float | None:
    return None if math.isinf(seconds) else seconds


def _seconds_from_json(value: Any) -> float:
    if value is None:
        return math.inf
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SavedGameError(f"Expected a number of seconds, got {value!r}")
    return float(value)


def _square_name(sq: Square | None) -> str | None:
    return None if sq is None else sq.name


def _record_to_dict(record: MoveRecord) -> dict[str, Any]:
    return {
        "from": record.from_sq.name,
        "to": record.to_sq.name,
        "piece": str(record.piece),
        "captured": None if record.captured is None else str(record.captured),
        "flag": record.flag.name,
        "promotion": None if record.promotion is None else record.promotion.name,
    }


def saved_game_to_dict(saved: SavedGame) -> dict[str, Any]:
    """Plain JSON-compatible representation of *saved*."""
    snapshot = saved.board
    diagram = []
    for row in range(BOARD_SIZE):
        cells = snapshot.squares[row * BOARD_SIZE : (row + 1) * BOARD_SIZE]
        diagram.append("".join("." if p is None else str(p) for p in cells))

    return {
        "format": FORMAT_VERSION,
        "variant": snapshot.variant.name,
        "side_to_move": saved.side_to_move.name,
        "diagram": diagram,
        "castling": int(snapshot.castling),
        "en_passant": _square_name(snapshot.en_passant),
        "rook_homes": [list(homes) for homes in snapshot.rook_homes],
        "history": [_record_to_dict(r) for r in snapshot.history],
        "clock": {
            "initial": _seconds_to_json(saved.time_control.initial_seconds),
            "increment": saved.time_control.increment_seconds,
            "white": _seconds_to_json(saved.white_remaining),
            "black": _seconds_to_json(saved.black_remaining),
        },
    }


# ── Decoding ─────────────────────────────────────────────────────────────────


def _enum(enum_cls: Any, name: Any) -> Any:
    try:
        return enum_cls[name]
    except (KeyError, TypeError):
        raise SavedGameError(f"Unknown {enum_cls.__name__}: {name!r}") from None


def _square(name: Any) -> Square:
    if not isinstance(name, str):
        raise SavedGameError(f"Expected a square name, got {name!r}")
    try:
        return parse_square(name)
    except ValueError as exc:
        raise SavedGameError(str(exc)) from exc


def _piece(char: Any) -> Piece:
    if not isinstance(char, str):
        raise SavedGameError(f"Expected a piece letter, got {char!r}")
    try:
        return Piece.from_char(char)
    except ValueError as exc:
        raise SavedGameError(str(exc)) from exc


def _record_from_dict(data: Any) -> MoveRecord:
    if not isinstance(data, dict):
        raise SavedGameError(f"History entry must be an object, got {data!r}")
    try:
        captured = data.get("captured")
        promotion = data.get("promotion")
        return MoveRecord(
            from_sq=_square(data["from"]),
            to_sq=_square(data["to"]),
            piece=_piece(data["piece"]),
            captured=None if captured is None else _piece(captured),
            flag=_enum(MoveFlag, data.get("flag", "NORMAL")),
            promotion=None if promotion is None else _enum(PieceType, promotion),
        )
    except KeyError as exc:
        raise SavedGameError(f"History entry missing {exc}") from None


def _diagram_squares(diagram: Any) -> tuple[Piece | None, ...]:
    if not isinstance(diagram, list) or len(diagram) != BOARD_SIZE:
        raise SavedGameError("Diagram must be a list of 8 rows")
    squares: list[Piece | None] = []
    for row in diagram:
        if not isinstance(row, str) or len(row) != BOARD_SIZE:
            raise SavedGameError(f"Diagram row must have 8 cells: {row!r}")
        squares.extend(None if ch == "." else _piece(ch) for ch in row)
    for color in Color:
        kings = squares.count(Piece(color, PieceType.KING))
        if kings != 1:
            raise SavedGameError(f"Diagram needs one {color} king, found {kings}")
    return tuple(squares)


def _rook_homes(value: Any) -> tuple[tuple[int, int], tuple[int, int]]:
    try:
        (wq, wk), (bq, bk) = value
    except (TypeError, ValueError):
        raise SavedGameError(f"Malformed rook homes: {value!r}") from None
    cols = (wq, wk, bq, bk)
    if not all(isinstance(c, int) and 0 <= c < BOARD_SIZE for c in cols):
        raise SavedGameError(f"Rook home columns out of range: {value!r}")
    return (wq, wk), (bq, bk)


def saved_game_from_dict(data: Any) -> SavedGame:
    """Inverse of :func:`saved_game_to_dict`; raises :class:`SavedGameError`."""
    if not isinstance(data, dict):
        raise SavedGameError("Save file must contain a JSON object")
    if data.get("format") != FORMAT_VERSION:
        raise SavedGameError(f"Unsupported save format: {data.get('format')!r}")

    try:
        castling = data["castling"]
        if isinstance(castling, bool) or not isinstance(castling, int):
            raise SavedGameError(f"Malformed castling rights: {castling!r}")
        if castling & ~int(CastlingRights.ALL):
            raise SavedGameError(f"Malformed castling rights: {castling!r}")

        en_passant = data.get("en_passant")
        history = data.get("history", [])
        if not isinstance(history, list):
            raise SavedGameError("History must be a list")

        snapshot = BoardSnapshot(
            squares=_diagram_squares(data["diagram"]),
            variant=_enum(Variant, data["variant"]),
            castling=CastlingRights(castling),
            en_passant=None if en_passant is None else _square(en_passant),
            history=tuple(_record_from_dict(r) for r in history),
            rook_homes=_rook_homes(data.get("rook_homes", [[0, 7], [0, 7]])),
        )

        clock = data["clock"]
        if not isinstance(clock, dict):
            raise SavedGameError("Clock must be an object")
        time_control = TimeControl(
            _seconds_from_json(clock.get("initial")),
            _seconds_from_json(clock.get("increment", 0)),
        )
        return SavedGame(
            board=snapshot,
            side_to_move=_enum(Color, data["side_to_move"]),
            time_control=time_control,
            white_remaining=_seconds_from_json(clock.get("white")),
            black_remaining=_seconds_from_json(clock.get("black")),
        )
    except KeyError as exc:
        raise SavedGameError(f"Save file missing field {exc}") from None


# ── Files ────────────────────────────────────────────────────────────────────


def save_game(path: str | Path, saved: SavedGame) -> None:
    """Write *saved* to *path* as JSON.  ``OSError`` propagates."""
    text = json.dumps(saved_game_to_dict(saved), indent=2)
    Path(path).write_text(text + "\n", encoding="utf-8")
    _LOGGER.info("Saved game to %s", path)


def load_game(path: str | Path) -> SavedGame:
    """Read a save file.  ``OSError`` propagates; bad content raises
    :class:`SavedGameError`."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SavedGameError(f"Save file is not valid JSON: {exc}") from exc
    saved = saved_game_from_dict(data)
    _LOGGER.info("Loaded game from %s", path)
    return saved
