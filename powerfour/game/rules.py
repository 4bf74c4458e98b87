"""
rules.py - Turn sequencing and Gymnasium environment for PowerFour

This module provides:
1. ConnectFourGame, which runs the drop / win check / expand / switch
   sequence of a turn over a GameState and keeps undo history
2. A gymnasium-compatible environment for reinforcement learning
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from powerfour.debug import debug
from powerfour.game.errors import MoveError
from powerfour.game.state import GameState
from powerfour.utils import (EXPANDED_ROWS, EXPANDED_COLS, MAX_COLS, POWER_UP_COUNT,
                             Cell, GameResult, Player, PowerUp)


@dataclass
class TurnRecord:
    """What happened during one call to ConnectFourGame.play_turn."""
    player: Player
    column: int
    row: int
    power_up: Optional[PowerUp]
    expanded: bool
    result: GameResult
    next_player: Player


class ConnectFourGame:
    """
    High-level PowerFour game manager.

    Wraps a GameState and performs the full turn sequence so that
    interfaces only have to supply columns.
    """

    def __init__(self, power_ups_enabled: bool = False,
                 spawn_chance: float = 0.0,
                 power_up_count: int = POWER_UP_COUNT,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize a new game.

        Args:
            power_ups_enabled: Whether the game uses power-ups
            spawn_chance: Probability of a fresh power-up at the start of
                each turn. When non-zero, untriggered power-ups are cleared
                at every turn start instead of persisting.
            power_up_count: Number of power-ups seeded at the start
            seed: Seed for the random generator
            rng: Random generator (takes precedence over seed)
        """
        if not 0.0 <= spawn_chance <= 1.0:
            raise ValueError(f"spawn_chance must be within [0, 1], got {spawn_chance}")

        self.power_ups_enabled = power_ups_enabled
        self.spawn_chance = spawn_chance
        self.power_up_count = power_up_count
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.state = self._new_state()
        self.history: List[GameState] = []
        self.turns: List[TurnRecord] = []

    def _new_state(self) -> GameState:
        debug.debug("Starting new game", "game")
        state = GameState(power_ups_enabled=self.power_ups_enabled,
                          power_up_count=self.power_up_count,
                          rng=self.rng)
        self._refresh_power_ups(state)
        return state

    def _refresh_power_ups(self, state: GameState):
        if not (state.power_ups_enabled and self.spawn_chance):
            return
        state.clear_power_ups()
        if state.rng.random() < self.spawn_chance:
            state.spawn_power_up()

    def reset(self, rng: Optional[np.random.Generator] = None) -> None:
        """Reset the game to initial state."""
        if rng is not None:
            self.rng = rng
        self.state = self._new_state()
        self.history = []
        self.turns = []

    def play_turn(self, column: int) -> TurnRecord:
        """
        Play one full turn for the current player.

        Args:
            column: Column to drop into (0-indexed)

        Returns:
            A TurnRecord describing the turn

        Raises:
            MoveError: the column was rejected; nothing changed
            GameOverError: the game is already decided
        """
        state = self.state
        snapshot = state.copy()
        player = state.current_player

        row, col = state.drop_piece(column)
        expanded = False

        winner = state.check_winner()
        if winner is not None:
            debug.info(f"Player {winner} wins after move at ({row}, {col})", "game")
        elif state.is_full():
            expanded = state.expand_board()
            if not expanded:
                debug.info("Game ends in a draw", "game")

        result = state.result
        if not result.is_game_over():
            state.switch_player()
            self._refresh_power_ups(state)
            # A spawned marker can take the last empty cell of an expanded board
            result = state.result
            if result == GameResult.DRAW:
                debug.info("Game ends in a draw", "game")

        self.history.append(snapshot)
        record = TurnRecord(player=player, column=col, row=row,
                            power_up=state.last_power_up, expanded=expanded,
                            result=result, next_player=state.current_player)
        self.turns.append(record)
        return record

    def make_move(self, column: int) -> bool:
        """
        Make a move in the game.

        Args:
            column: Column to place a piece (0-indexed)

        Returns:
            True if the move was played, False if it was rejected
        """
        try:
            self.play_turn(column)
        except MoveError as e:
            debug.warning(f"Move in column {column} rejected: {e}", "game")
            return False
        return True

    def undo_move(self) -> bool:
        """
        Undo the last turn.

        Returns:
            True if a turn was undone, False if there was nothing to undo
        """
        if not self.history:
            debug.debug("No moves to undo", "game")
            return False

        debug.debug("Undoing last move", "game")
        self.state = self.history.pop()
        self.state.rng = self.rng
        self.turns.pop()
        return True

    def get_state(self) -> GameState:
        return self.state

    def get_result(self) -> GameResult:
        return self.state.result

    def is_game_over(self) -> bool:
        return self.state.result.is_game_over()

    def get_winner(self) -> Optional[Player]:
        """
        Get the winner of the game.

        Returns:
            The winning player, or None if no winner yet or draw
        """
        return self.state.result.winner

    def get_current_player(self) -> Player:
        return self.state.current_player

    def get_valid_moves(self) -> List[int]:
        return self.state.get_valid_moves()

    def render(self) -> str:
        return self.state.render()


class ConnectFourEnv(gym.Env):
    """
    PowerFour environment following the Gymnasium interface.

    Observations are always 10x10 so that they keep their shape across the
    board expansion; cells outside the live board read as obstacles.
    Rewards are from player X's point of view.
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, render_mode: Optional[str] = None,
                 power_ups_enabled: bool = False,
                 spawn_chance: float = 0.0):
        """
        Initialize the environment.

        Args:
            render_mode: Mode for rendering the environment
            power_ups_enabled: Default power-up setting for new games
            spawn_chance: Per-turn power-up spawn probability
        """
        debug.debug("Initializing ConnectFourEnv", "env")

        self.action_space = spaces.Discrete(MAX_COLS)
        self.observation_space = spaces.Box(
            low=0, high=int(max(Cell)), shape=(EXPANDED_ROWS, EXPANDED_COLS), dtype=np.int8
        )

        self.render_mode = render_mode
        self.power_ups_enabled = power_ups_enabled
        self.spawn_chance = spawn_chance
        self.game = ConnectFourGame(power_ups_enabled=power_ups_enabled,
                                    spawn_chance=spawn_chance)

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None,
              options: Optional[Dict[str, Any]] = None) -> Tuple[np.ndarray, Dict]:
        """
        Reset the environment to initial state.

        Args:
            seed: Random seed for reproducibility
            options: {'power_ups': bool} overrides the power-up setting

        Returns:
            Initial observation and info dictionary
        """
        super().reset(seed=seed)

        power_ups = self.power_ups_enabled
        if options and 'power_ups' in options:
            power_ups = bool(options['power_ups'])

        self.game = ConnectFourGame(power_ups_enabled=power_ups,
                                    spawn_chance=self.spawn_chance,
                                    rng=self.np_random)

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Play one turn for the current player.

        Args:
            action: Column to drop into (0-indexed)

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        action = int(action)
        try:
            record = self.game.play_turn(action)
        except MoveError as e:
            debug.warning(f"Invalid action {action}: {e}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = record.result.is_game_over()
        if record.result == GameResult.X_WINS:
            reward = self.reward_win
        elif record.result == GameResult.O_WINS:
            reward = self.reward_lose
        elif record.result == GameResult.DRAW:
            reward = self.reward_draw

        if terminated:
            debug.info(f"Game over: {record.result.name}", "env")

        if self.render_mode == "human":
            self.render()

        info = self._get_info()
        info['power_up'] = record.power_up.name if record.power_up else None
        info['expanded'] = record.expanded
        return self._get_observation(), reward, terminated, False, info

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode is None:
            return None

        if self.render_mode == "ascii":
            return self.game.render()

        print(self.game.render())
        return None

    def _get_observation(self) -> np.ndarray:
        observation = np.full((EXPANDED_ROWS, EXPANDED_COLS), int(Cell.OBSTACLE), dtype=np.int8)
        board = self.game.state.get_board()
        observation[:board.shape[0], :board.shape[1]] = board
        return observation

    def _get_info(self) -> Dict:
        state = self.game.state
        return {
            'valid_moves': state.get_valid_moves(),
            'current_player': int(state.current_player),
            'game_result': state.result.name,
            'rows': state.rows,
            'cols': state.cols,
            'expanded': state.expanded,
            'skip_next_turn': state.skip_next_turn,
            'moves_made': len(self.game.turns),
            'winning_line': state.winning_line(),
        }

    def close(self):
        pass
