from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from matroska.board import Board
from matroska.errors import InvalidConstruction, RuleViolation
from matroska.state import GameState
from matroska.types import Piece, Player, Position, Size

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MoveAction:
    """
    Moves one piece to a board position.

    `source` is the piece as it stands before the move: with a position
    for a piece already on the board, without one for a reserve piece.
    The landing piece is derived from it, so owner and size cannot
    change in flight.
    """

    player: Player
    source: Piece
    destination: Position

    def __post_init__(self) -> None:
        if self.source.owner != self.player:
            raise InvalidConstruction(f"{self.player} does not own {self.source!r}")
        if not isinstance(self.destination, Position):
            object.__setattr__(self, "destination", Position(*self.destination))

    @property
    def is_from_reserve(self) -> bool:
        """True if this action places a piece from reserve."""
        return self.source.position is None

    @property
    def landing_piece(self) -> Piece:
        """The piece as it will stand after the move."""
        return self.source.placed_at(self.destination)

    def _key(self) -> tuple:
        # Piece equality ignores position; two moves differ by origin too.
        return (self.player, self.source, self.source.position, self.destination)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoveAction):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def apply(self, state: GameState) -> GameState:
        """
        Return the state reached by playing this action.

        Works on a copy of the board; the given state is left untouched
        whether the move succeeds or raises RuleViolation.
        """
        if self.player != state.player_on_turn:
            raise RuleViolation(f"It is not {self.player}'s turn")

        board: Board = state.board.copy()
        board.remove_piece(self.source)
        board.add_piece(self.landing_piece)
        logger.debug("Applied %s for %s", action_to_notation(self), self.player.player_id)

        return GameState(
            board,
            state.max_player,
            state.min_player,
            state.get_player_for_next_turn(),
        )

    def __repr__(self) -> str:
        if self.is_from_reserve:
            return f"Place {self.source.size.letter} -> {self.destination}"
        return f"Move {self.source.position} -> {self.destination}"


# Closed set of action kinds; MoveAction is currently the only one.
Action = MoveAction


def action_to_notation(action: MoveAction) -> str:
    """
    Convert an action to coordinate-based notation.

    Reserve placement: L(1,1), S(0,2), M(2,1)
    Board move: (0,0)→(2,2), (1,1)→(0,0)
    """
    to_x, to_y = action.destination
    if action.is_from_reserve:
        return f"{action.source.size.letter}({to_x},{to_y})"
    assert action.source.position is not None
    from_x, from_y = action.source.position
    return f"({from_x},{from_y})→({to_x},{to_y})"


_RESERVE_NOTATION = re.compile(r"^([SML])\((\d),(\d)\)$")
_BOARD_NOTATION = re.compile(r"^\((\d),(\d)\)→\((\d),(\d)\)$")
_SIZE_LETTERS = {size.letter: size for size in Size}


def notation_to_action(notation: str, state: GameState) -> MoveAction:
    """
    Parse notation into an action for the player on turn.

    Board moves take the piece on top of the source cell. Raises
    ValueError if the notation is malformed or off the board, and
    RuleViolation if the player has no piece on top of the source cell.
    """
    notation = notation.strip()
    player = state.player_on_turn
    board = state.board

    reserve_match = _RESERVE_NOTATION.match(notation)
    if reserve_match:
        size = _SIZE_LETTERS[reserve_match.group(1)]
        destination = Position(int(reserve_match.group(2)), int(reserve_match.group(3)))
        if not board.contains(destination):
            raise ValueError(f"Invalid position in notation: {notation}")
        return MoveAction(player=player, source=Piece(player, size), destination=destination)

    board_match = _BOARD_NOTATION.match(notation)
    if board_match:
        origin = Position(int(board_match.group(1)), int(board_match.group(2)))
        destination = Position(int(board_match.group(3)), int(board_match.group(4)))
        if not board.contains(origin):
            raise ValueError(f"Invalid from position in notation: {notation}")
        if not board.contains(destination):
            raise ValueError(f"Invalid to position in notation: {notation}")

        top = board.top_at(origin)
        if top is None or top.owner != player:
            raise RuleViolation(f"{player.player_id} has no piece on top at {origin}")
        return MoveAction(player=player, source=top, destination=destination)

    raise ValueError(f"Invalid move notation: {notation}")
