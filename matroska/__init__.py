# Rules engine for Matroska, a stacking 3x3 game with nested pieces

from matroska.actions import Action, MoveAction, action_to_notation, notation_to_action
from matroska.board import Board
from matroska.errors import InvalidConstruction, MatroskaError, RuleViolation
from matroska.game import GameResult, initial_board, new_game, play_action, result_of
from matroska.heuristic import evaluate
from matroska.state import GameState
from matroska.types import Piece, Player, Position, Size

__all__ = [
    "Action",
    "Board",
    "GameResult",
    "GameState",
    "InvalidConstruction",
    "MatroskaError",
    "MoveAction",
    "Piece",
    "Player",
    "Position",
    "RuleViolation",
    "Size",
    "action_to_notation",
    "evaluate",
    "initial_board",
    "new_game",
    "notation_to_action",
    "play_action",
    "result_of",
]
