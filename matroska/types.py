from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import NamedTuple

from matroska.errors import InvalidConstruction

# Board dimension (the grid is BOARD_SIZE x BOARD_SIZE)
BOARD_SIZE = 3

# Maximum number of pieces of one size a player may hold off-board
RESERVE_CAPACITY = 2


@dataclass(frozen=True)
class Player:
    """
    One side of the game.

    Two players exist per game. Equality and hashing use only the
    identifier, so the role flags never make two references differ.
    """

    player_id: str
    is_human: bool = field(default=False, compare=False)
    is_maximizing: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        role = "max" if self.is_maximizing else "min"
        kind = "human" if self.is_human else "CPU"
        return f"P({self.player_id}, {role}, {kind})"


class Size(IntEnum):
    """Piece sizes, ordered small to large."""

    SMALL = 0
    MEDIUM = 1
    LARGE = 2

    @property
    def letter(self) -> str:
        return self.name[0]


# Standard starting pieces for each player
STARTING_PIECES: dict[Size, int] = {
    Size.SMALL: RESERVE_CAPACITY,
    Size.MEDIUM: RESERVE_CAPACITY,
    Size.LARGE: RESERVE_CAPACITY,
}


class Position(NamedTuple):
    """Board coordinate: x is the column, y is the row."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


@dataclass(frozen=True, eq=False)
class Piece:
    """
    A sized game piece owned by one player.

    `position` is None while the piece sits in its owner's reserve.

    Two pieces compare equal when owner and size match, regardless of
    position. Up to two physically distinct pieces share that pair, so
    board removal matches on it rather than on identity.
    """

    owner: Player
    size: Size
    position: Position | None = None

    def __post_init__(self) -> None:
        try:
            size = Size(self.size)
        except ValueError:
            raise InvalidConstruction(
                f"Piece size must be in [{Size.SMALL}, {Size.LARGE}], got {self.size!r}"
            ) from None
        object.__setattr__(self, "size", size)
        if self.position is not None and not isinstance(self.position, Position):
            object.__setattr__(self, "position", Position(*self.position))

    @property
    def is_placed(self) -> bool:
        """True if this piece is on the board rather than in reserve."""
        return self.position is not None

    def can_cover(self, other: Piece) -> bool:
        """Return True if this piece may be stacked on top of the other."""
        return self.size > other.size

    def placed_at(self, position: Position | None) -> Piece:
        """Return a copy of this piece at another position (None for reserve)."""
        return replace(self, position=position)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return self.owner == other.owner and self.size == other.size

    def __hash__(self) -> int:
        return hash((self.owner, self.size))

    def __repr__(self) -> str:
        where = "reserve" if self.position is None else str(self.position)
        return f"{self.owner.player_id}{self.size.letter}@{where}"
