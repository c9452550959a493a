"""
minimax.py - Depth-bounded minimax player for Connect Four

This module provides a MinimaxPlayer that builds a GameState tree for the
position it is asked about, expands it to a fixed depth, and plays the move
the tree prefers. Ties go to the leftmost column.
"""

from typing import Optional

from connect4_minimax.ai.state import GameState
from connect4_minimax.debug import debug, DebugLevel
from connect4_minimax.game.board import Board, Move
from connect4_minimax.utils import Player, DEFAULT_DEPTH


class MinimaxPlayer:
    """
    A Connect Four player that searches the full game tree to a fixed depth.

    Memory and time grow with COLS ** depth, so depth is the only knob that
    bounds the search.
    """

    def __init__(self, player: Player, depth: int = DEFAULT_DEPTH, name: Optional[str] = None):
        """
        Initialize the minimax player.

        Args:
            player: The side this player moves for
            depth: Number of plies to expand below the current position
            name: Display name, defaults to "Minimax-d<depth>"
        """
        if player == Player.EMPTY:
            raise ValueError("MinimaxPlayer needs Player.ONE or Player.TWO")
        if depth < 1:
            raise ValueError(f"depth must be at least 1, got {depth}")

        self.player = player
        self.depth = depth
        self.name = name or f"Minimax-d{depth}"

        # Diagnostics from the last search
        self.last_root: Optional[GameState] = None
        self.last_value: Optional[int] = None
        self.nodes_evaluated = 0

    def get_move(self, board: Board) -> Move:
        """
        Get the preferred move for this player on `board`.

        Args:
            board: The current game board; must have a legal move

        Returns:
            The chosen move
        """
        root = GameState(self.player, board, self.player)

        with debug.timer("minimax_search", "minimax"):
            root.expand_up_to(self.depth)
            move = root.get_preferred_move()

        self.last_root = root
        self.last_value = root.value
        self.nodes_evaluated = root.node_count()

        debug.debug(f"{self.name} ({self.player.initial}) chose {move} "
                    f"value={root.value} nodes={self.nodes_evaluated}", "minimax")
        if debug.level == DebugLevel.TRACE:
            debug.trace(f"Search tree:\n{root}", "minimax")
        return move
