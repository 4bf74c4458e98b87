"""
powerfour.game - Core game mechanics for PowerFour

This package contains the board representation, the rules engine with
power-up resolution, and the game manager built on top of it.
"""

from powerfour.game.board import Board
from powerfour.game.errors import (BlockedByObstacleError, ColumnFullError, GameOverError,
                                   InvalidColumnError, MoveError, PowerFourError)
from powerfour.game.state import GameState
from powerfour.game.rules import ConnectFourEnv, ConnectFourGame, TurnRecord

__all__ = [
    'Board', 'GameState', 'ConnectFourGame', 'ConnectFourEnv', 'TurnRecord',
    'PowerFourError', 'MoveError', 'InvalidColumnError', 'ColumnFullError',
    'BlockedByObstacleError', 'GameOverError',
]
