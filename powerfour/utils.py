"""
utils.py - Constants, enumerations and grid helpers for PowerFour

This module provides the constants, cell/player enumerations and the
grid-level helper functions (run scanning, rendering, key mapping) used
throughout the PowerFour implementation.

Grids are numpy arrays addressed ``[row, col]`` with row 0 at the bottom.
"""

from enum import Enum, IntEnum, auto
from typing import Dict, List, Optional, Tuple

import numpy as np

# Game constants
ROWS = 6
COLS = 7
EXPANDED_ROWS = 10
EXPANDED_COLS = 10
MAX_COLS = 10  # Columns must map onto single digit keys
CONNECT_N = 4  # Number of pieces in a row to win

# Power-up constants
POWER_UP_COUNT = 6
SPAWN_ATTEMPTS = 10
DEFAULT_SPAWN_CHANCE = 0.2


class Cell(IntEnum):
    """Enumeration of everything a board cell can hold."""
    EMPTY = 0
    X = 1
    O = 2
    OBSTACLE = 3
    BOMB = 4
    SKIP = 5
    SPAWNER = 6

    @property
    def symbol(self) -> str:
        return CELL_SYMBOLS[self]


class Player(IntEnum):
    """The two players. Values match their ``Cell`` codes."""
    X = 1
    O = 2

    def other(self) -> 'Player':
        """Get the other player."""
        return Player.O if self == Player.X else Player.X

    @property
    def number(self) -> int:
        """1-based player number as shown to humans."""
        return 1 if self == Player.X else 2

    def __str__(self):
        return self.name


class PowerUp(IntEnum):
    """Power-up kinds. Values match their ``Cell`` codes."""
    BOMB = 4
    SKIP = 5
    SPAWNER = 6

    @property
    def label(self) -> str:
        return POWER_UP_LABELS[self]


class GameResult(Enum):
    """Enumeration representing the game outcome."""
    IN_PROGRESS = auto()
    X_WINS = auto()
    O_WINS = auto()
    DRAW = auto()

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Optional[Player]:
        if self == GameResult.X_WINS:
            return Player.X
        if self == GameResult.O_WINS:
            return Player.O
        return None

    @classmethod
    def for_winner(cls, player: Player) -> 'GameResult':
        return cls.X_WINS if player == Player.X else cls.O_WINS


class Direction(Enum):
    """Directions scanned for four in a row, in tie-break order."""
    RIGHT = auto()
    UP = auto()
    UP_RIGHT = auto()
    DOWN_RIGHT = auto()


# Direction vectors (row, col); row grows upwards
DIRECTION_VECTORS: Dict[Direction, Tuple[int, int]] = {
    Direction.RIGHT: (0, 1),
    Direction.UP: (1, 0),
    Direction.UP_RIGHT: (1, 1),
    Direction.DOWN_RIGHT: (-1, 1),
}

CELL_SYMBOLS = {
    Cell.EMPTY: ".",
    Cell.X: "X",
    Cell.O: "O",
    Cell.OBSTACLE: "#",
    Cell.BOMB: "B",
    Cell.SKIP: "S",
    Cell.SPAWNER: "W",
}

POWER_UP_LABELS = {
    PowerUp.BOMB: "Bomb triggered",
    PowerUp.SKIP: "Skip opponent's turn",
    PowerUp.SPAWNER: "Place obstacles",
}

POWER_UP_CODES = frozenset(int(p) for p in PowerUp)

# Digit keys as laid out on a keyboard: '1' is the first column, '0' the tenth
COLUMN_KEYS = "1234567890"


def is_power_up(value: int) -> bool:
    """Check whether a raw cell value is an untriggered power-up marker."""
    return int(value) in POWER_UP_CODES


def is_player(value: int) -> bool:
    """Check whether a raw cell value is a player's piece."""
    return int(value) in (Cell.X, Cell.O)


def is_valid_position(grid: np.ndarray, row: int, col: int) -> bool:
    """
    Check if a position is within the grid boundaries.

    Args:
        grid: The board grid
        row: Row index
        col: Column index

    Returns:
        True if position is valid, False otherwise
    """
    rows, cols = grid.shape
    return 0 <= row < rows and 0 <= col < cols


def run_from(grid: np.ndarray, row: int, col: int,
             direction: Direction) -> Optional[List[Tuple[int, int]]]:
    """
    Check for CONNECT_N same-player pieces starting at a position.

    Args:
        grid: The board grid
        row: Row index of the first piece of the run
        col: Column index of the first piece of the run
        direction: Direction to walk in

    Returns:
        The positions of the run, or None if there is no such run
    """
    value = grid[row, col]
    if not is_player(value):
        return None

    dr, dc = DIRECTION_VECTORS[direction]
    positions = [(row, col)]
    for step in range(1, CONNECT_N):
        r, c = row + dr * step, col + dc * step
        if not is_valid_position(grid, r, c) or grid[r, c] != value:
            return None
        positions.append((r, c))
    return positions


def find_winning_line(grid: np.ndarray) -> List[Tuple[int, int]]:
    """
    Find the first four-in-a-row on the grid.

    Cells are visited in row-major order and, for each cell, directions in
    ``DIRECTION_VECTORS`` order. The first run found is returned, so
    simultaneous lines resolve deterministically.

    Args:
        grid: The board grid

    Returns:
        List of (row, col) positions forming the line, or empty list if none
    """
    rows, cols = grid.shape
    for row in range(rows):
        for col in range(cols):
            if not is_player(grid[row, col]):
                continue
            for direction in DIRECTION_VECTORS:
                line = run_from(grid, row, col, direction)
                if line:
                    return line
    return []


def key_to_column(key: str) -> Optional[int]:
    """
    Map a digit key onto a column index ('1'..'9' -> 0..8, '0' -> 9).

    Returns:
        The column index, or None if the key is not a single digit
    """
    key = key.strip()
    if len(key) != 1 or key not in COLUMN_KEYS:
        return None
    return COLUMN_KEYS.index(key)


def column_to_key(column: int) -> str:
    """Inverse of ``key_to_column``."""
    return COLUMN_KEYS[column]


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render the grid as ASCII art, top row first.

    Args:
        grid: The board grid

    Returns:
        ASCII representation of the board
    """
    rows, cols = grid.shape
    border = "|" + "-" * (cols * 2 - 1) + "|"

    result = [border]
    for row in range(rows - 1, -1, -1):
        symbols = [Cell(int(grid[row, col])).symbol for col in range(cols)]
        result.append("|" + " ".join(symbols) + "|")
    result.append(border)
    result.append("|" + " ".join(column_to_key(c) for c in range(cols)) + "|")

    return "\n".join(result)
