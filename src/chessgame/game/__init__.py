"""Game management layer - controller, clock, state machine, save files.

Quick start::

    from chessgame.game import GameController, TimeControl

    ctrl = GameController()
    ctrl.new_game(Variant.CHESS960, TimeControl.rapid_10m())
    ctrl.submit_move(Square(6, 4), Square(4, 4))
"""

from chessgame.game.clock import Clock, ClockSnapshot
from chessgame.game.controller import GameController, GameEvents
from chessgame.game.interfaces import GameEndReason, GamePhase, IClock, TimeControl
from chessgame.game.persistence import (
    SavedGame,
    SavedGameError,
    load_game,
    save_game,
    saved_game_from_dict,
    saved_game_to_dict,
)
from chessgame.game.state import GameState

__all__ = [
    "Clock",
    "ClockSnapshot",
    "GameController",
    "GameEndReason",
    "GameEvents",
    "GamePhase",
    "GameState",
    "IClock",
    "SavedGame",
    "SavedGameError",
    "TimeControl",
    "load_game",
    "save_game",
    "saved_game_from_dict",
    "saved_game_to_dict",
]
