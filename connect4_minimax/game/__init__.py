"""
connect4_minimax.game - Core game mechanics for Connect Four

This package contains the immutable board, the game manager and the
Gymnasium environment.
"""

from connect4_minimax.game.board import Board, Move
from connect4_minimax.game.rules import ConnectFourGame, ConnectFourEnv

__all__ = ['Board', 'Move', 'ConnectFourGame', 'ConnectFourEnv']
