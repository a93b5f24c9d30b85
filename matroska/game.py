from __future__ import annotations

from enum import Enum

from matroska.actions import MoveAction
from matroska.board import Board
from matroska.state import GameState
from matroska.types import STARTING_PIECES, Piece, Player


class GameResult(Enum):
    """Possible game outcomes."""

    ONGOING = "ongoing"
    MAX_WINS = "max_wins"
    MIN_WINS = "min_wins"


def initial_board(max_player: Player, min_player: Player) -> Board:
    """A board with empty cells and both reserves fully stocked."""
    board = Board()
    for player in (max_player, min_player):
        for size, count in STARTING_PIECES.items():
            for _ in range(count):
                board.add_piece(Piece(player, size))
    return board


def new_game(
    max_id: str = "max",
    min_id: str = "min",
    max_is_human: bool = True,
    min_is_human: bool = False,
) -> GameState:
    """
    Set up a fresh game.

    The two players are created here, once, and the maximizing player
    moves first.
    """
    max_player = Player(max_id, is_human=max_is_human, is_maximizing=True)
    min_player = Player(min_id, is_human=min_is_human, is_maximizing=False)
    return GameState(initial_board(max_player, min_player), max_player, min_player, max_player)


def result_of(state: GameState) -> GameResult:
    """Derive the outcome of a state from its board."""
    winner = state.get_winner()
    if winner is None:
        return GameResult.ONGOING
    return GameResult.MAX_WINS if winner == state.max_player else GameResult.MIN_WINS


def play_action(state: GameState, action: MoveAction) -> tuple[GameState, GameResult]:
    """
    Functional interface: apply an action and return new state + result.

    Raises ValueError if the game is already over.
    """
    if state.is_terminal():
        raise ValueError("Game is already over")
    new_state = action.apply(state)
    return new_state, result_of(new_state)
