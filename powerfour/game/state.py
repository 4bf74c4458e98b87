"""
state.py - The PowerFour rules engine

GameState owns one Board plus the turn bookkeeping (current player, pending
turn skip, the one-shot expansion latch) and resolves power-ups as pieces
land on them.

A presentation layer drives it in this order each turn:

    row, col = state.drop_piece(column)
    if state.check_winner(): ...
    elif state.is_full(): state.expand_board() or declare a draw
    state.switch_player()

ConnectFourGame in rules.py does exactly that for callers that don't need
fine-grained control.
"""

import copy
from typing import List, Optional, Tuple

import numpy as np

from powerfour.debug import debug
from powerfour.game import powerups
from powerfour.game.board import Board, Position
from powerfour.game.errors import GameOverError, MoveError
from powerfour.utils import (ROWS, COLS, EXPANDED_ROWS, EXPANDED_COLS, POWER_UP_COUNT,
                             GameResult, Player, PowerUp, is_power_up)


class GameState:
    """
    State of a single PowerFour game.

    Attributes:
        board: The Board being played on
        current_player: Player whose piece the next drop places
        skip_next_turn: Cancels the next switch_player() once
        expanded: Set once the board has grown to its expanded size
        power_ups_enabled: Whether power-ups exist in this game
        last_power_up: Power-up triggered by the most recent drop, if any
    """

    def __init__(self, power_ups_enabled: bool = False,
                 power_up_count: int = POWER_UP_COUNT,
                 stack_on_obstacles: bool = True,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Create a fresh game: empty 6x7 board, X to move.

        Args:
            power_ups_enabled: Seed power-ups now and resolve them on landing
            power_up_count: Number of power-ups seeded on the initial board
            stack_on_obstacles: Whether pieces may rest on top of obstacles
            seed: Seed for the power-up generator (ignored if rng is given)
            rng: Generator to draw power-up positions and kinds from
        """
        self.power_ups_enabled = power_ups_enabled
        self.power_up_count = power_up_count
        self.stack_on_obstacles = stack_on_obstacles
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.board = Board(ROWS, COLS)
        self.current_player = Player.X
        self.skip_next_turn = False
        self.expanded = False
        self.last_power_up: Optional[PowerUp] = None

        if self.power_ups_enabled:
            powerups.seed_power_ups(self.board, self.power_up_count, self.rng)

        debug.debug(f"New game (power-ups {'on' if power_ups_enabled else 'off'})", "state")

    @classmethod
    def new(cls, power_ups_enabled: bool = False, **kwargs) -> 'GameState':
        return cls(power_ups_enabled=power_ups_enabled, **kwargs)

    @property
    def rows(self) -> int:
        return self.board.rows

    @property
    def cols(self) -> int:
        return self.board.cols

    def get_board(self) -> np.ndarray:
        """Read-only view of the cells, row 0 at the bottom."""
        return self.board.get_state()

    def get_current_player(self) -> Player:
        return self.current_player

    def is_valid_move(self, column: int) -> bool:
        """Check whether drop_piece(column) would succeed, without dropping."""
        if self.result.is_game_over():
            return False
        try:
            self.board.find_landing(column, self.stack_on_obstacles)
        except MoveError:
            return False
        return True

    def get_valid_moves(self) -> List[int]:
        return [col for col in range(self.cols) if self.is_valid_move(col)]

    def drop_piece(self, column: int) -> Tuple[int, int]:
        """
        Drop the current player's piece into a column.

        Landing on a power-up triggers it before the piece is placed; a bomb
        leaves the landing cell empty. Turns are not switched and the winner
        is not checked here.

        Args:
            column: The column to drop into (0-indexed)

        Returns:
            The (row, column) the piece landed in

        Raises:
            MoveError: the drop was rejected; the board is unchanged
            GameOverError: the game has already been decided
        """
        result = self.result
        if result.is_game_over():
            raise GameOverError(f"Game is over ({result.name}); start a new game")

        try:
            row = self.board.find_landing(column, self.stack_on_obstacles)
        except MoveError as e:
            debug.debug(f"Rejected drop in column {column}: {e}", "state")
            raise

        self.last_power_up = None
        place_piece = True
        if self.power_ups_enabled and is_power_up(self.board.grid[row, column]):
            effect = powerups.resolve_power_up(self.board, row, column)
            self.last_power_up = effect.kind
            place_piece = effect.place_piece
            if effect.skip_next_turn:
                self.skip_next_turn = True

        if place_piece:
            self.board[row, column] = self.current_player

        debug.debug(f"Player {self.current_player} dropped into ({row}, {column})", "state")
        return row, column

    def switch_player(self):
        """Hand the turn to the other player, unless a skip is pending."""
        if self.skip_next_turn:
            self.skip_next_turn = False
            debug.info(f"Turn skipped, player {self.current_player} goes again", "state")
        else:
            self.current_player = self.current_player.other()

    def check_winner(self) -> Optional[Player]:
        """The first player found with four in a row, scanning row-major."""
        return self.board.winner()

    def winning_line(self) -> List[Position]:
        return self.board.get_winning_line()

    def is_full(self) -> bool:
        return self.board.is_full()

    def can_expand(self) -> bool:
        return not self.expanded and self.is_full() and self.check_winner() is None

    def expand_board(self) -> bool:
        """
        Grow a full, undecided board to 10x10. Happens at most once per game.

        Existing cells keep their coordinates. With power-ups enabled, one
        new power-up per ten new cells is seeded in the new upper rows,
        never in the second column from the right.

        Returns:
            True if the board was expanded, False if it was not allowed
        """
        if not self.can_expand():
            debug.debug("Board expansion not allowed", "state")
            return False

        old_rows, old_size = self.rows, self.board.size
        self.board.expand(EXPANDED_ROWS, EXPANDED_COLS)
        self.expanded = True

        if self.power_ups_enabled:
            count = (self.board.size - old_size) // 10
            powerups.seed_power_ups(self.board, count, self.rng,
                                    min_row=old_rows, exclude_cols=[self.cols - 2])

        debug.info(f"Expanded the board to {self.rows}x{self.cols}", "state")
        return True

    def spawn_power_up(self) -> Optional[Tuple[int, int, PowerUp]]:
        """Place one random power-up on top of a random column, if enabled."""
        if not self.power_ups_enabled:
            return None
        return powerups.spawn_power_up(self.board, self.rng)

    def clear_power_ups(self) -> int:
        """Remove all untriggered power-ups."""
        return powerups.clear_power_ups(self.board)

    @property
    def result(self) -> GameResult:
        winner = self.check_winner()
        if winner is not None:
            return GameResult.for_winner(winner)
        if self.is_full() and self.expanded:
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def copy(self) -> 'GameState':
        """Deep copy, including the random generator's position."""
        return copy.deepcopy(self)

    def render(self) -> str:
        return self.board.render()

    def __str__(self) -> str:
        return self.render()
