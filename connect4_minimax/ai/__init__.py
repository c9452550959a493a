"""
connect4_minimax/ai/__init__.py - Search tree and players

This package contains the minimax game tree and the players that choose
moves for a Connect Four side.
"""

from connect4_minimax.ai.state import GameState, Expanded, UNEXPANDED, board_value
from connect4_minimax.ai.minimax import MinimaxPlayer
from connect4_minimax.ai.random_player import RandomPlayer

__all__ = ['GameState', 'Expanded', 'UNEXPANDED', 'board_value',
           'MinimaxPlayer', 'RandomPlayer']
