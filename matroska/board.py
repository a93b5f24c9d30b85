from __future__ import annotations

import logging
from typing import Iterator

from matroska.errors import RuleViolation
from matroska.types import BOARD_SIZE, RESERVE_CAPACITY, Piece, Player, Position, Size

logger = logging.getLogger(__name__)


class Board:
    """
    Spatial state of a game: on-board stacks plus each player's reserve.

    The grid is addressed as [row][col][size]. A cell holds at most one
    piece per size, and slot [size] only ever holds a piece of that size.
    The top occupant of a cell is the piece in the highest non-empty slot.

    Reserves are kept per player as one list per size, each holding at
    most RESERVE_CAPACITY pieces.

    All changes go through add_piece/remove_piece. Pieces are immutable,
    so copy() only has to duplicate the containers.
    """

    # Rows, then columns, then the descending and ascending diagonals
    WINNING_LINES: list[list[Position]] = [
        [Position(0, 0), Position(1, 0), Position(2, 0)],
        [Position(0, 1), Position(1, 1), Position(2, 1)],
        [Position(0, 2), Position(1, 2), Position(2, 2)],
        [Position(0, 0), Position(0, 1), Position(0, 2)],
        [Position(1, 0), Position(1, 1), Position(1, 2)],
        [Position(2, 0), Position(2, 1), Position(2, 2)],
        [Position(0, 0), Position(1, 1), Position(2, 2)],
        [Position(0, 2), Position(1, 1), Position(2, 0)],
    ]

    def __init__(self) -> None:
        self._grid: list[list[list[Piece | None]]] = [
            [[None for _ in Size] for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)
        ]
        self._reserves: dict[Player, list[list[Piece]]] = {}

    def copy(self) -> Board:
        """Create an independent snapshot of this board."""
        new_board = Board.__new__(Board)
        new_board._grid = [[cell.copy() for cell in row] for row in self._grid]
        new_board._reserves = {
            player: [pieces.copy() for pieces in by_size]
            for player, by_size in self._reserves.items()
        }
        return new_board

    # --- Position helpers ---

    @staticmethod
    def all_positions() -> Iterator[Position]:
        """Iterate over all board positions in row-major order."""
        for y in range(BOARD_SIZE):
            for x in range(BOARD_SIZE):
                yield Position(x, y)

    def contains(self, position: Position | None) -> bool:
        """True if position is not None and lies inside the board."""
        if position is None:
            return False
        x, y = position
        return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE

    # --- Cell access ---

    def _cell(self, position: Position) -> list[Piece | None]:
        x, y = position
        return self._grid[y][x]

    def stack_at(self, position: Position) -> tuple[Piece, ...]:
        """Occupants of a cell, bottom to top."""
        return tuple(piece for piece in self._cell(position) if piece is not None)

    def top_at(self, position: Position) -> Piece | None:
        """The top-most piece at a position, or None if the cell is empty."""
        for piece in reversed(self._cell(position)):
            if piece is not None:
                return piece
        return None

    def _remove_top(self, position: Position) -> None:
        cell = self._cell(position)
        for size in reversed(range(len(cell))):
            if cell[size] is not None:
                cell[size] = None
                return

    # --- Reserve access ---

    def _reserve(self, player: Player) -> list[list[Piece]]:
        return self._reserves.setdefault(player, [[] for _ in Size])

    def reserve_count(self, player: Player, size: Size) -> int:
        """Number of pieces of a given size in the player's reserve."""
        by_size = self._reserves.get(player)
        return len(by_size[size]) if by_size else 0

    def get_reserve(self, player: Player) -> list[Piece]:
        """The player's reserve, flattened from smallest to largest size."""
        by_size = self._reserves.get(player, [])
        return [piece for pieces in by_size for piece in pieces]

    # --- Mutation ---

    def add_piece(self, piece: Piece) -> None:
        """
        Put a piece into its owner's reserve (no position) or onto the board.

        Raises RuleViolation if the reserve for that size is full, the
        position is outside the board, or the cell's top occupant is not
        strictly smaller than the piece.
        """
        if piece.position is None:
            pieces = self._reserve(piece.owner)[piece.size]
            if len(pieces) >= RESERVE_CAPACITY:
                raise RuleViolation(
                    f"Reserve of {piece.owner.player_id} already holds "
                    f"{RESERVE_CAPACITY} pieces of size {piece.size.name}"
                )
            pieces.append(piece)
            return

        if not self.contains(piece.position):
            raise RuleViolation(f"Position {piece.position} out of board's range")

        top = self.top_at(piece.position)
        if top is not None and not piece.can_cover(top):
            raise RuleViolation(f"Position {piece.position} occupied by {top!r}")
        self._cell(piece.position)[piece.size] = piece

    def remove_piece(self, piece: Piece) -> None:
        """
        Take a piece out of its owner's reserve (no position) or off the board.

        On the board, the top occupant at piece.position must equal the
        piece (same owner and size). Raises RuleViolation otherwise, or if
        the reserve is empty, or the position lies outside the board.
        """
        if piece.position is None:
            pieces = self._reserve(piece.owner)[piece.size]
            if not pieces:
                raise RuleViolation(
                    f"Reserve of {piece.owner.player_id} has no pieces of size {piece.size.name}"
                )
            pieces.pop()
            return

        if not self.contains(piece.position):
            raise RuleViolation(f"Position {piece.position} out of board's range")

        top = self.top_at(piece.position)
        if top is None or top != piece:
            logger.debug("Refusing to remove %r, top is %r", piece, top)
            raise RuleViolation(f"{piece!r} is not on top at {piece.position}")
        self._remove_top(piece.position)

    # --- Queries used by move generation ---

    def get_movement_available_pieces(self, player: Player) -> list[Piece]:
        """Every piece the player may move: its whole reserve, then its visible pieces."""
        pieces = self.get_reserve(player)
        for position in self.all_positions():
            top = self.top_at(position)
            if top is not None and top.owner == player:
                pieces.append(top)
        return pieces

    def get_possible_placement_destinations(self, piece: Piece) -> list[Position]:
        """Positions (row-major) where the piece could land, excluding its own."""
        destinations = []
        for position in self.all_positions():
            if position == piece.position:
                continue
            top = self.top_at(position)
            if top is None or piece.can_cover(top):
                destinations.append(position)
        return destinations

    # --- Win detection ---

    def get_winner(self, max_player: Player, min_player: Player) -> Player | None:
        """
        Return the owner of the first line whose three top occupants all
        belong to one of the given players, or None if no line is complete.
        """
        for line in self.WINNING_LINES:
            tops = [self.top_at(position) for position in line]
            if any(top is None for top in tops):
                continue
            owners = {top.owner for top in tops}  # type: ignore[union-attr]
            if len(owners) != 1:
                continue
            owner = owners.pop()
            if owner == max_player:
                return max_player
            if owner == min_player:
                return min_player
        return None

    # --- Display ---

    def __repr__(self) -> str:
        """Text representation of reserves and visible pieces."""
        lines = []
        for player, by_size in self._reserves.items():
            reserve_str = ", ".join(f"{size.letter}:{len(by_size[size])}" for size in Size)
            lines.append(f"{player.player_id} reserves: {reserve_str}")
        if lines:
            lines.append("")

        lines.append("   " + "".join(f"{x:<8}" for x in range(BOARD_SIZE)).rstrip())
        for y in range(BOARD_SIZE):
            row_str = f"{y}  "
            for x in range(BOARD_SIZE):
                top = self.top_at(Position(x, y))
                cell = ".." if top is None else f"{top.owner.player_id}{top.size.letter}"
                row_str += f"{cell:<8}"
            lines.append(row_str.rstrip())

        return "\n".join(lines)
