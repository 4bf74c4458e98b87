"""
errors.py - Exceptions raised by the PowerFour engine

MoveError and its subclasses are the recoverable rejections of a drop: the
board is left untouched and the caller simply asks for another column.
GameOverError signals a caller mutating a game that has already finished.
"""

__all__ = [
    'PowerFourError',
    'MoveError',
    'InvalidColumnError',
    'ColumnFullError',
    'BlockedByObstacleError',
    'GameOverError',
]


class PowerFourError(Exception):
    """Base exception for all PowerFour errors."""


class MoveError(PowerFourError):
    """A drop was rejected. The board is unchanged."""

    reason = "Invalid move."

    def __init__(self, column: int, message: str = None):
        self.column = column
        super().__init__(message or self.reason)


class InvalidColumnError(MoveError):
    reason = "Invalid column."

    def __init__(self, column: int, cols: int):
        self.cols = cols
        super().__init__(column, f"Invalid column {column}: expected 0-{cols - 1}.")


class ColumnFullError(MoveError):
    reason = "Column is full."


class BlockedByObstacleError(MoveError):
    reason = "Cannot place a piece above an obstacle."


class GameOverError(PowerFourError):
    """Raised when a finished game is asked to accept another move."""
