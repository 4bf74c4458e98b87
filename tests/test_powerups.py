"""
Tests for power-up seeding, spawning and effect resolution.
"""

import numpy as np
import pytest

from powerfour.game import powerups
from powerfour.game.board import Board
from powerfour.utils import Cell, PowerUp


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class TestSeeding:

    def test_places_requested_count_on_distinct_empty_cells(self, rng):
        board = Board()
        board.grid[0, :] = Cell.X

        placements = powerups.seed_power_ups(board, 6, rng)

        assert len(placements) == 6
        assert len({(r, c) for r, c, _ in placements}) == 6
        assert all(r >= 1 for r, _, _ in placements)
        assert len(board.power_up_cells()) == 6
        assert board.count(Cell.X) == 7

    def test_respects_min_row_and_excluded_columns(self, rng):
        board = Board(10, 10)
        placements = powerups.seed_power_ups(board, 5, rng, min_row=6, exclude_cols=[8])

        assert len(placements) == 5
        for row, col, kind in placements:
            assert row >= 6
            assert col != 8
            assert board[row, col] == kind

    def test_fills_every_candidate_when_short(self, rng):
        board = Board()
        board.grid[:, :] = Cell.O
        board[5, 1] = Cell.EMPTY
        board[5, 4] = Cell.EMPTY

        placements = powerups.seed_power_ups(board, 6, rng)

        assert sorted((r, c) for r, c, _ in placements) == [(5, 1), (5, 4)]
        assert board.is_full()

    def test_same_seed_same_layout(self):
        first, second = Board(), Board()
        powerups.seed_power_ups(first, 6, np.random.default_rng(5))
        powerups.seed_power_ups(second, 6, np.random.default_rng(5))
        assert np.array_equal(first.grid, second.grid)

    def test_random_power_up_kind(self, rng):
        kinds = {powerups.random_power_up(rng) for _ in range(200)}
        assert kinds == set(PowerUp)


class TestSpawning:

    def test_spawns_on_top_of_a_column(self, rng):
        board = Board()
        board.grid[0:2, :] = Cell.X

        row, col, kind = powerups.spawn_power_up(board, rng)

        assert row == 2
        assert board[row, col] == kind

    def test_gives_up_on_full_board(self, rng):
        board = Board()
        board.grid[:, :] = Cell.O
        assert powerups.spawn_power_up(board, rng) is None

    def test_clear_power_ups(self):
        board = Board()
        board[0, 0] = Cell.BOMB
        board[3, 3] = Cell.SKIP
        board[1, 1] = Cell.OBSTACLE

        assert powerups.clear_power_ups(board) == 2
        assert board.power_up_cells() == []
        assert board[1, 1] == Cell.OBSTACLE


class TestEffects:

    def test_bomb_clears_landing_cell_and_cell_below(self):
        board = Board()
        board[0, 2] = Cell.X
        board[1, 2] = Cell.BOMB

        effect = powerups.resolve_power_up(board, 1, 2)

        assert effect.kind == PowerUp.BOMB
        assert not effect.place_piece
        assert effect.skip_next_turn
        assert effect.cleared == [(1, 2), (0, 2)]
        assert not board.grid[:, 2].any()

    def test_bomb_on_bottom_row(self):
        board = Board()
        board[0, 0] = Cell.BOMB
        effect = powerups.resolve_power_up(board, 0, 0)
        assert effect.cleared == [(0, 0)]
        assert board[0, 0] == Cell.EMPTY

    def test_skip(self):
        board = Board()
        board[0, 3] = Cell.SKIP
        effect = powerups.resolve_power_up(board, 0, 3)
        assert effect.place_piece
        assert effect.skip_next_turn

    def test_spawner_drops_obstacles_into_neighbours(self):
        board = Board()
        board[0, 3] = Cell.O
        board[1, 3] = Cell.X
        board[2, 3] = Cell.SPAWNER
        board[0, 4] = Cell.O

        effect = powerups.resolve_power_up(board, 2, 3)

        assert effect.place_piece
        assert not effect.skip_next_turn
        assert effect.obstacles == [(0, 2), (1, 4)]
        assert board[0, 2] == Cell.OBSTACLE
        assert board[1, 4] == Cell.OBSTACLE
        assert board[2, 2] == Cell.EMPTY
        assert board[2, 4] == Cell.EMPTY

    def test_spawner_leaves_pieces_alone(self):
        board = Board()
        board[0, 2] = Cell.O
        board[0, 3] = Cell.SPAWNER
        board[0, 4] = Cell.X

        effect = powerups.resolve_power_up(board, 0, 3)

        assert effect.obstacles == []
        assert board[0, 2] == Cell.O
        assert board[0, 4] == Cell.X

    def test_spawner_at_edge(self):
        board = Board()
        board[0, 0] = Cell.SPAWNER
        effect = powerups.resolve_power_up(board, 0, 0)
        assert effect.obstacles == [(0, 1)]
