"""
Static positional evaluation.

Each visible piece scores the weight of its cell: positive for the
maximizing side, negative for the minimizing side. Reserves score nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from matroska.types import Position

if TYPE_CHECKING:
    from matroska.board import Board

CENTER_WEIGHT = 4
CORNER_WEIGHT = 3
EDGE_WEIGHT = 2

CELL_WEIGHTS: dict[Position, int] = {
    Position(1, 1): CENTER_WEIGHT,
    Position(0, 0): CORNER_WEIGHT,
    Position(2, 0): CORNER_WEIGHT,
    Position(0, 2): CORNER_WEIGHT,
    Position(2, 2): CORNER_WEIGHT,
    Position(1, 0): EDGE_WEIGHT,
    Position(0, 1): EDGE_WEIGHT,
    Position(2, 1): EDGE_WEIGHT,
    Position(1, 2): EDGE_WEIGHT,
}


def evaluate(board: Board) -> int:
    """Score a board from the maximizing player's point of view."""
    score = 0
    for position, weight in CELL_WEIGHTS.items():
        top = board.top_at(position)
        if top is None:
            continue
        score += weight if top.owner.is_maximizing else -weight
    return score
