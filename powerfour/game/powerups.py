"""
powerups.py - Power-up placement and effects for PowerFour

Power-ups are markers sitting in board cells. A piece landing on one
triggers it:

- Bomb: the landing cell and the cell below it are cleared, no piece is
  placed, and the opponent's next turn is skipped.
- Skip: the piece is placed and the opponent's next turn is skipped.
- Spawner: obstacles fall into the neighbouring columns, then the piece is
  placed.

Functions here only touch the Board; GameState applies the returned
PowerUpEffect to the turn bookkeeping.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from powerfour.debug import debug
from powerfour.game.board import Board, Position
from powerfour.utils import SPAWN_ATTEMPTS, Cell, PowerUp, is_power_up

Placement = Tuple[int, int, PowerUp]


@dataclass
class PowerUpEffect:
    """What a triggered power-up did to the board and to the turn order."""
    kind: PowerUp
    place_piece: bool = True
    skip_next_turn: bool = False
    cleared: List[Position] = field(default_factory=list)
    obstacles: List[Position] = field(default_factory=list)


def random_power_up(rng: np.random.Generator) -> PowerUp:
    """Pick a power-up kind uniformly at random."""
    kinds = list(PowerUp)
    return kinds[int(rng.integers(len(kinds)))]


def seed_power_ups(board: Board, count: int, rng: np.random.Generator,
                   min_row: int = 0, exclude_cols: Iterable[int] = ()) -> List[Placement]:
    """
    Scatter power-ups over empty cells.

    Random (row, col) positions are drawn until `count` distinct empty cells
    at or above min_row, outside exclude_cols, have received a power-up. When
    fewer candidates exist than requested, every candidate gets one.

    Args:
        board: Board to place on
        count: Number of power-ups wanted
        rng: Random generator
        min_row: Lowest row eligible for placement
        exclude_cols: Columns that never receive a power-up

    Returns:
        The (row, col, kind) of each power-up placed
    """
    excluded = set(exclude_cols)
    candidates = board.empty_cells(min_row, excluded)
    placements: List[Placement] = []

    if len(candidates) <= count:
        for row, col in candidates:
            kind = random_power_up(rng)
            board[row, col] = kind
            placements.append((row, col, kind))
    else:
        while len(placements) < count:
            row = int(rng.integers(min_row, board.rows))
            col = int(rng.integers(board.cols))
            if col in excluded or board[row, col] != Cell.EMPTY:
                continue
            kind = random_power_up(rng)
            board[row, col] = kind
            placements.append((row, col, kind))

    debug.debug(f"Seeded {len(placements)} power-ups: {placements}", "powerups")
    return placements


def spawn_power_up(board: Board, rng: np.random.Generator,
                   attempts: int = SPAWN_ATTEMPTS) -> Optional[Placement]:
    """
    Put one power-up on top of a random column's stack.

    Up to `attempts` columns are tried; the first with an empty cell gets a
    random power-up in its lowest empty cell.

    Returns:
        The (row, col, kind) placed, or None if every attempt hit a full column
    """
    for _ in range(attempts):
        col = int(rng.integers(board.cols))
        row = board.lowest_empty_row(col)
        if row is None:
            continue
        kind = random_power_up(rng)
        board[row, col] = kind
        debug.debug(f"Spawned {kind.name} at ({row}, {col})", "powerups")
        return row, col, kind
    return None


def clear_power_ups(board: Board) -> int:
    """Remove every untriggered power-up. Returns how many were removed."""
    cells = board.power_up_cells()
    for position in cells:
        board[position] = Cell.EMPTY
    return len(cells)


def detonate_bomb(board: Board, row: int, col: int) -> PowerUpEffect:
    effect = PowerUpEffect(PowerUp.BOMB, place_piece=False, skip_next_turn=True)
    for r in (row, row - 1):
        if board.in_bounds(r, col):
            board[r, col] = Cell.EMPTY
            effect.cleared.append((r, col))
    return effect


def grant_skip(board: Board, row: int, col: int) -> PowerUpEffect:
    return PowerUpEffect(PowerUp.SKIP, skip_next_turn=True)


def spawn_obstacles(board: Board, row: int, col: int) -> PowerUpEffect:
    """Drop an obstacle into each horizontal neighbour that is not a piece or obstacle."""
    effect = PowerUpEffect(PowerUp.SPAWNER)
    for neighbour in (col - 1, col + 1):
        if not board.in_bounds(row, neighbour):
            continue
        cell = board[row, neighbour]
        if cell != Cell.EMPTY and not is_power_up(cell):
            continue
        landed = board.drop_obstacle(neighbour, row)
        if landed is not None:
            effect.obstacles.append((landed, neighbour))
    return effect


RESOLVERS: Dict[PowerUp, Callable[[Board, int, int], PowerUpEffect]] = {
    PowerUp.BOMB: detonate_bomb,
    PowerUp.SKIP: grant_skip,
    PowerUp.SPAWNER: spawn_obstacles,
}


def resolve_power_up(board: Board, row: int, col: int) -> PowerUpEffect:
    """
    Trigger the power-up at (row, col).

    Args:
        board: Board holding the power-up
        row: Row of the power-up cell
        col: Column of the power-up cell

    Returns:
        The effect, for the caller to apply to the turn order
    """
    kind = PowerUp(int(board[row, col]))
    effect = RESOLVERS[kind](board, row, col)
    debug.info(f"Power-up activated: {kind.label} at ({row}, {col})", "powerups")
    return effect
