"""
random_player.py - A player that picks uniformly among the legal moves
"""

import random

from connect4_minimax.debug import debug
from connect4_minimax.game.board import Board, Move
from connect4_minimax.utils import Player, InvalidMoveError


class RandomPlayer:
    """Chooses moves at random; the same seed always gives the same games."""

    def __init__(self, player: Player, seed: str = "0"):
        self.player = player
        self.seed = seed
        self.name = f"Random-{seed}"
        self.rng = random.Random(seed)

    def get_move(self, board: Board) -> Move:
        moves = board.get_possible_moves()
        if not moves:
            raise InvalidMoveError("No valid moves on this board")

        move = moves[self.rng.randrange(len(moves))]
        debug.trace(f"{self.name} picked {move} from {len(moves)} options", "random")
        return move
