from __future__ import annotations

import math
from typing import TYPE_CHECKING

from matroska.board import Board
from matroska.errors import InvalidConstruction
from matroska.heuristic import evaluate
from matroska.types import Player

if TYPE_CHECKING:
    from matroska.actions import MoveAction


class GameState:
    """
    A board snapshot bound to the two players and the player on turn.

    A GameState owns its board and is never changed after construction;
    actions produce new states from copies. Terminality and the winner
    are recomputed from the board on every call.
    """

    def __init__(
        self,
        board: Board,
        max_player: Player,
        min_player: Player,
        player_on_turn: Player,
    ) -> None:
        if not max_player.is_maximizing or min_player.is_maximizing:
            raise InvalidConstruction(
                f"Expected a maximizing and a minimizing player, got {max_player} and {min_player}"
            )
        if max_player == min_player:
            raise InvalidConstruction(f"Both sides share the identifier {max_player.player_id!r}")
        if player_on_turn != max_player and player_on_turn != min_player:
            raise InvalidConstruction(f"{player_on_turn} is not playing this game")

        self._board = board
        self._max_player = max_player
        self._min_player = min_player
        self._player_on_turn = player_on_turn

    @property
    def board(self) -> Board:
        return self._board

    @property
    def max_player(self) -> Player:
        return self._max_player

    @property
    def min_player(self) -> Player:
        return self._min_player

    @property
    def player_on_turn(self) -> Player:
        return self._player_on_turn

    def get_player_for_next_turn(self) -> Player:
        """The opponent of the player on turn."""
        if self._player_on_turn == self._min_player:
            return self._max_player
        return self._min_player

    def get_possible_actions(self) -> list[MoveAction]:
        """
        Every move available to the player on turn.

        Pieces come in reserve-then-board order, destinations in
        row-major order. Reserve pieces of equal size each contribute
        their own (equal) actions.
        """
        from matroska.actions import MoveAction

        actions: list[MoveAction] = []
        player = self._player_on_turn
        for piece in self._board.get_movement_available_pieces(player):
            for destination in self._board.get_possible_placement_destinations(piece):
                actions.append(MoveAction(player=player, source=piece, destination=destination))
        return actions

    def get_winner(self) -> Player | None:
        return self._board.get_winner(self._max_player, self._min_player)

    def is_terminal(self) -> bool:
        """True if either side has completed a line."""
        return self.get_winner() is not None

    def utility(self) -> float:
        """
        Score for a search driver: +inf/-inf once a side has won,
        otherwise the heuristic value of the board.
        """
        winner = self.get_winner()
        if winner is None:
            return evaluate(self._board)
        return math.inf if winner == self._max_player else -math.inf

    def __repr__(self) -> str:
        return f"GameState(on turn: {self._player_on_turn})\n{self._board!r}"
