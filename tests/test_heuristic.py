"""Tests for the static evaluation."""

import pytest

from matroska import Board, Piece, Player, Position, Size, evaluate
from matroska.heuristic import CELL_WEIGHTS

MAX = Player("p1", is_human=True, is_maximizing=True)
MIN = Player("p2", is_human=False, is_maximizing=False)


class TestEvaluate:
    """Tests for evaluate()."""

    def test_empty_board(self) -> None:
        assert evaluate(Board()) == 0

    def test_weights_cover_every_cell(self) -> None:
        assert set(CELL_WEIGHTS) == set(Board.all_positions())
        assert sum(CELL_WEIGHTS.values()) == 4 + 4 * 3 + 4 * 2

    @pytest.mark.parametrize(
        "position, weight",
        [
            (Position(1, 1), 4),
            (Position(0, 0), 3),
            (Position(2, 2), 3),
            (Position(1, 0), 2),
            (Position(0, 1), 2),
        ],
    )
    def test_cell_weight(self, position: Position, weight: int) -> None:
        board = Board()
        board.add_piece(Piece(MAX, Size.SMALL, position))
        assert evaluate(board) == weight

        board = Board()
        board.add_piece(Piece(MIN, Size.SMALL, position))
        assert evaluate(board) == -weight

    def test_corner_and_center(self) -> None:
        board = Board()
        board.add_piece(Piece(MAX, Size.MEDIUM, Position(0, 0)))
        board.add_piece(Piece(MAX, Size.SMALL, Position(1, 1)))

        assert evaluate(board) == 7

    def test_only_top_counts(self) -> None:
        board = Board()
        board.add_piece(Piece(MAX, Size.SMALL, Position(1, 1)))
        board.add_piece(Piece(MIN, Size.LARGE, Position(1, 1)))

        assert evaluate(board) == -4

    def test_reserves_ignored(self) -> None:
        board = Board()
        board.add_piece(Piece(MAX, Size.LARGE))
        board.add_piece(Piece(MAX, Size.LARGE))

        assert evaluate(board) == 0

    def test_does_not_mutate(self) -> None:
        board = Board()
        board.add_piece(Piece(MIN, Size.MEDIUM, Position(2, 1)))
        before = repr(board)

        evaluate(board)

        assert repr(board) == before
