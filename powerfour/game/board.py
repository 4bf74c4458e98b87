"""
board.py - Board representation and gravity mechanics for PowerFour

This module implements the Board class: a resizable grid of cells with the
landing rules for dropped pieces and obstacles, fullness and win detection,
and the one-off growth used when the board is expanded.

The grid is a numpy array addressed ``[row, col]`` with row 0 at the bottom.
"""

from typing import Iterable, List, Optional, Tuple

import numpy as np

from powerfour.debug import debug
from powerfour.game.errors import BlockedByObstacleError, ColumnFullError, InvalidColumnError
from powerfour.utils import (ROWS, COLS, MAX_COLS, Cell, Player, find_winning_line,
                             is_power_up, render_board_ascii)

Position = Tuple[int, int]


class Board:
    """
    A PowerFour game board.

    The board knows where things land and whether four pieces line up. It
    does not know whose turn it is or what power-ups do; that belongs to
    GameState.
    """

    def __init__(self, rows: int = ROWS, cols: int = COLS):
        if cols > MAX_COLS:
            raise ValueError(f"Boards wider than {MAX_COLS} columns are not supported")
        if rows < 1 or cols < 1:
            raise ValueError("Board dimensions must be positive")
        self.grid = np.zeros((rows, cols), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[int]]) -> 'Board':
        """
        Build a board from cell values, bottom row first.

        Mostly useful for setting up positions in tests and the CLI.
        """
        grid = np.array([list(row) for row in rows], dtype=np.int8)
        if grid.ndim != 2:
            raise ValueError("Rows must all have the same length")
        board = cls(*grid.shape)
        board.grid[:, :] = grid
        return board

    @property
    def rows(self) -> int:
        return self.grid.shape[0]

    @property
    def cols(self) -> int:
        return self.grid.shape[1]

    @property
    def size(self) -> int:
        return self.grid.size

    def copy(self) -> 'Board':
        """Create a deep copy of the board."""
        new_board = Board(self.rows, self.cols)
        new_board.grid = self.grid.copy()
        return new_board

    def __getitem__(self, position: Position) -> Cell:
        row, col = position
        return Cell(int(self.grid[row, col]))

    def __setitem__(self, position: Position, value: int):
        row, col = position
        self.grid[row, col] = int(value)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def find_landing(self, column: int, stack_on_obstacles: bool = True) -> int:
        """
        Work out the row a piece dropped into a column would occupy.

        Rows are scanned bottom to top. An empty or power-up cell is the
        landing cell, unless it is empty and sits directly on an obstacle.
        When stack_on_obstacles is set, an obstacle with an empty cell above
        it catches the piece first.

        Args:
            column: The column to drop into (0-indexed)
            stack_on_obstacles: Whether pieces may rest on top of obstacles

        Returns:
            The landing row

        Raises:
            InvalidColumnError: column is outside the board
            BlockedByObstacleError: the landing cell sits on an obstacle
            ColumnFullError: there is nowhere left to land
        """
        if not 0 <= column < self.cols:
            raise InvalidColumnError(column, self.cols)

        for row in range(self.rows):
            cell = self.grid[row, column]

            if cell == Cell.EMPTY or is_power_up(cell):
                if row > 0 and self.grid[row - 1, column] == Cell.OBSTACLE and cell == Cell.EMPTY:
                    raise BlockedByObstacleError(column)
                return row

            if cell == Cell.OBSTACLE and stack_on_obstacles:
                if row + 1 < self.rows and self.grid[row + 1, column] == Cell.EMPTY:
                    return row + 1

        raise ColumnFullError(column)

    def lowest_empty_row(self, column: int) -> Optional[int]:
        """Lowest strictly empty cell of a column, or None."""
        empty = np.flatnonzero(self.grid[:, column] == Cell.EMPTY)
        return int(empty[0]) if empty.size else None

    def drop_obstacle(self, column: int, from_row: int) -> Optional[int]:
        """
        Let an obstacle fall down a column from the given row.

        The obstacle settles in the lowest empty or power-up cell at or below
        from_row, replacing any power-up marker there. Markers count as free
        cells here exactly as they do for find_landing.

        Returns:
            The row the obstacle settled in, or None if nothing was free
        """
        for row in range(min(from_row, self.rows - 1) + 1):
            cell = self.grid[row, column]
            if cell == Cell.EMPTY or is_power_up(cell):
                self.grid[row, column] = Cell.OBSTACLE
                debug.trace(f"Obstacle settled at ({row}, {column})", "board")
                return row
        return None

    def empty_cells(self, min_row: int = 0, exclude_cols: Iterable[int] = ()) -> List[Position]:
        """List every empty cell at or above min_row outside exclude_cols."""
        excluded = set(exclude_cols)
        rows, cols = np.nonzero(self.grid == Cell.EMPTY)
        return [(int(r), int(c)) for r, c in zip(rows, cols)
                if r >= min_row and c not in excluded]

    def power_up_cells(self) -> List[Position]:
        """List every cell holding an untriggered power-up."""
        mask = self.grid >= Cell.BOMB
        return [(int(r), int(c)) for r, c in zip(*np.nonzero(mask))]

    def count(self, value: int) -> int:
        return int(np.count_nonzero(self.grid == int(value)))

    def is_full(self) -> bool:
        """True when no empty cell remains. Power-up markers count as filled."""
        return not np.any(self.grid == Cell.EMPTY)

    def get_winning_line(self) -> List[Position]:
        """
        Get the positions of the first four-in-a-row on the board.

        Returns:
            List of (row, col) positions, or empty list if there is no line
        """
        return find_winning_line(self.grid)

    def winner(self) -> Optional[Player]:
        """The player owning the first four-in-a-row, if any."""
        line = self.get_winning_line()
        if not line:
            return None
        row, col = line[0]
        return Player(int(self.grid[row, col]))

    def expand(self, rows: int, cols: int):
        """
        Grow the board, keeping every existing cell at its coordinates.

        Args:
            rows: New number of rows
            cols: New number of columns
        """
        if cols > MAX_COLS:
            raise ValueError(f"Boards wider than {MAX_COLS} columns are not supported")
        if rows < self.rows or cols < self.cols:
            raise ValueError("A board can only grow")

        new_grid = np.zeros((rows, cols), dtype=np.int8)
        new_grid[:self.rows, :self.cols] = self.grid
        debug.debug(f"Expanding board from {self.rows}x{self.cols} to {rows}x{cols}", "board")
        self.grid = new_grid

    def get_state(self) -> np.ndarray:
        """
        Get a read-only view of the grid.

        Returns:
            2D numpy array, row 0 at the bottom
        """
        view = self.grid.view()
        view.flags.writeable = False
        return view

    def render(self) -> str:
        return render_board_ascii(self.grid)

    def __str__(self) -> str:
        return self.render()
