"""
Tests for Board: landing rules, obstacle gravity, fullness, win scan, growth.
"""

import numpy as np
import pytest

from powerfour.game.board import Board
from powerfour.game.errors import BlockedByObstacleError, ColumnFullError, InvalidColumnError
from powerfour.utils import Cell, Player


class TestConstruction:

    def test_default_dimensions(self):
        board = Board()
        assert (board.rows, board.cols) == (6, 7)
        assert not board.grid.any()

    def test_more_than_ten_columns_rejected(self):
        with pytest.raises(ValueError):
            Board(6, 11)

    def test_from_rows_bottom_first(self):
        board = Board.from_rows([[1, 0], [0, 2]])
        assert board[0, 0] == Cell.X
        assert board[1, 1] == Cell.O

    def test_copy_is_independent(self):
        board = Board()
        clone = board.copy()
        clone[0, 0] = Cell.X
        assert board[0, 0] == Cell.EMPTY


class TestLanding:

    def test_empty_column_lands_on_bottom(self):
        assert Board().find_landing(3) == 0

    def test_pieces_stack(self):
        board = Board()
        board[0, 2] = Cell.X
        board[1, 2] = Cell.O
        assert board.find_landing(2) == 2

    def test_power_up_cell_is_a_landing_cell(self):
        board = Board()
        board[0, 1] = Cell.X
        board[1, 1] = Cell.BOMB
        assert board.find_landing(1) == 1

    def test_floating_power_up_does_not_stop_the_fall(self):
        board = Board()
        board[3, 4] = Cell.SKIP
        assert board.find_landing(4) == 0

    def test_piece_rests_on_obstacle(self):
        board = Board()
        board[0, 5] = Cell.OBSTACLE
        assert board.find_landing(5) == 1

    def test_obstacle_blocks_when_stacking_disabled(self):
        board = Board()
        board[0, 5] = Cell.OBSTACLE
        with pytest.raises(BlockedByObstacleError) as excinfo:
            board.find_landing(5, stack_on_obstacles=False)
        assert excinfo.value.column == 5

    def test_power_up_over_obstacle_is_not_blocked(self):
        board = Board()
        board[0, 5] = Cell.OBSTACLE
        board[1, 5] = Cell.SPAWNER
        assert board.find_landing(5, stack_on_obstacles=False) == 1

    def test_full_column(self):
        board = Board()
        board.grid[:, 0] = [1, 2, 1, 2, 1, 2]
        with pytest.raises(ColumnFullError):
            board.find_landing(0)

    def test_obstacle_on_top_row_leaves_column_full(self):
        board = Board()
        board.grid[:, 6] = [1, 2, 1, 2, 1, 3]
        with pytest.raises(ColumnFullError):
            board.find_landing(6)

    @pytest.mark.parametrize("column", [-1, 7, 10])
    def test_invalid_column(self, column):
        with pytest.raises(InvalidColumnError):
            Board().find_landing(column)


class TestObstacleFall:

    def test_falls_to_lowest_empty_cell(self):
        board = Board()
        board[0, 2] = Cell.X
        assert board.drop_obstacle(2, from_row=4) == 1
        assert board[1, 2] == Cell.OBSTACLE

    def test_replaces_power_up_it_lands_on(self):
        board = Board()
        board[0, 2] = Cell.BOMB
        assert board.drop_obstacle(2, from_row=3) == 0
        assert board[0, 2] == Cell.OBSTACLE

    def test_never_lands_above_start_row(self):
        board = Board()
        board.grid[0:3, 1] = Cell.O
        assert board.drop_obstacle(1, from_row=2) is None
        assert board.count(Cell.OBSTACLE) == 0


class TestQueries:

    def test_is_full_counts_power_ups_as_filled(self):
        board = Board()
        board.grid[:, :] = Cell.X
        board.grid[5, :] = Cell.SKIP
        assert board.is_full()
        board[5, 0] = Cell.EMPTY
        assert not board.is_full()

    def test_empty_cells_filters(self):
        board = Board(4, 3)
        board.grid[0, :] = Cell.X
        cells = board.empty_cells(min_row=2, exclude_cols=[1])
        assert cells == [(2, 0), (2, 2), (3, 0), (3, 2)]

    def test_power_up_cells(self):
        board = Board()
        board[0, 0] = Cell.BOMB
        board[2, 3] = Cell.SPAWNER
        board[1, 1] = Cell.OBSTACLE
        assert sorted(board.power_up_cells()) == [(0, 0), (2, 3)]

    def test_winner_vertical(self):
        board = Board()
        board.grid[1:5, 6] = Cell.O
        assert board.winner() == Player.O
        assert board.get_winning_line() == [(1, 6), (2, 6), (3, 6), (4, 6)]

    def test_obstacles_break_lines(self):
        board = Board()
        board.grid[0, 0:5] = [1, 1, 3, 1, 1]
        assert board.winner() is None

    def test_state_view_is_read_only(self):
        board = Board()
        view = board.get_state()
        with pytest.raises(ValueError):
            view[0, 0] = Cell.X
        board[0, 0] = Cell.X
        assert view[0, 0] == Cell.X


class TestExpand:

    def test_keeps_cells_at_same_coordinates(self):
        board = Board()
        board.grid[:, :] = np.arange(42).reshape(6, 7) % 3
        before = board.grid.copy()

        board.expand(10, 10)

        assert board.grid.shape == (10, 10)
        assert np.array_equal(board.grid[:6, :7], before)
        assert not board.grid[6:, :].any()
        assert not board.grid[:, 7:].any()

    def test_cannot_shrink(self):
        board = Board(10, 10)
        with pytest.raises(ValueError):
            board.expand(6, 7)

    def test_cannot_exceed_ten_columns(self):
        with pytest.raises(ValueError):
            Board().expand(10, 12)
