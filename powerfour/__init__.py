"""
powerfour - Connect Four with power-ups and a one-time board expansion

This package provides the PowerFour rules engine (board, power-ups,
win detection and expansion), a turn-sequencing game manager, a
Gymnasium environment and a terminal interface.
"""

# Version number
__version__ = '0.1.0'
