"""
connect4_minimax - Minimax decision engine for Connect Four

This package builds depth-bounded game trees over immutable Connect Four
boards, scores them with minimax and picks the move preferred for a
designated side. It also ships simple players, a game manager, a Gymnasium
environment and a command-line interface for analysing positions.
"""

# Version number
__version__ = '0.1.0'
