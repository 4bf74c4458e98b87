"""
Shared pytest fixtures for PowerFour tests.
"""

import pytest

from powerfour.game.state import GameState
from powerfour.utils import Cell


def pattern_cell(row: int, col: int) -> Cell:
    """
    Cell of a fill pattern that never contains four in a row.

    Colours alternate along every row and change every second row, so no
    line in any direction holds more than two equal pieces.
    """
    return Cell.X if ((row // 2) + col) % 2 == 0 else Cell.O


@pytest.fixture
def fill_no_winner():
    """Return a function filling a board's empty cells without creating a line."""
    def fill(board, skip=()):
        skipped = set(skip)
        for row in range(board.rows):
            for col in range(board.cols):
                if (row, col) in skipped or board.grid[row, col] != Cell.EMPTY:
                    continue
                board.grid[row, col] = pattern_cell(row, col)
        return board
    return fill


@pytest.fixture
def state():
    """Fresh game without power-ups."""
    return GameState(power_ups_enabled=False)


@pytest.fixture
def powered_state():
    """Power-ups enabled, but nothing seeded, so tests place markers themselves."""
    return GameState(power_ups_enabled=True, power_up_count=0, seed=7)
