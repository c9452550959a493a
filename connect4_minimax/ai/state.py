"""
state.py - Game tree nodes for minimax search

A GameState is one node of the search tree: a board, the side to move and,
once expanded, one child per legal move. The tree is built to a fixed depth
with expand_up_to(), scored bottom-up with compute_minimax(), and queried with
get_preferred_move().

Values are always from the point of view of the designated AI side: the AI
maximizes, its opponent minimizes. Leaves are scored with a static count over
every four-in-a-row line of the board; won, lost and drawn boards get exact
values.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple, Union

import numpy as np

from connect4_minimax.game.board import Board, Move
from connect4_minimax.utils import (Player, InvalidMoveError,
                                    WIN_SCORE, LOSS_SCORE, DRAW_SCORE)


class Unexpanded:
    """Expansion tag for a node whose children have not been built."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNEXPANDED"


UNEXPANDED = Unexpanded()


@dataclass(frozen=True)
class Expanded:
    """Expansion tag holding (move, child) pairs in increasing column order."""
    children: Tuple[Tuple[Move, 'GameState'], ...]


Expansion = Union[Unexpanded, Expanded]


def board_value(board: Board, ai: Player) -> int:
    """
    Static desirability of a board for `ai`.

    Every cell of every four-in-a-row line counts +1 if the AI holds it,
    -1 if the opponent does and 0 if it is empty.
    """
    lines = board.line_values()
    mine = np.count_nonzero(lines == ai.value)
    theirs = np.count_nonzero(lines == ai.other().value)
    return int(mine - theirs)


class GameState:
    """A board plus the side to move, with lazily built children."""

    def __init__(self, ai: Player, board: Board, player: Player):
        """
        Create an unexpanded, unevaluated node.

        Args:
            ai: The designated side whose desirability values measure
            board: Board snapshot at this node
            player: The side that moves next on `board`
        """
        if ai == Player.EMPTY or player == Player.EMPTY:
            raise ValueError("ai and player must be Player.ONE or Player.TWO")

        self.ai = ai
        self.board = board
        self.player = player
        self.expansion: Expansion = UNEXPANDED
        self.value: Optional[int] = None

    @property
    def is_expanded(self) -> bool:
        return isinstance(self.expansion, Expanded)

    @property
    def children(self) -> Mapping[Move, 'GameState']:
        """Read-only view of the children by move; empty if unexpanded."""
        if not self.is_expanded:
            return MappingProxyType({})
        return MappingProxyType(dict(self.expansion.children))

    def get_child(self, move: Move) -> 'GameState':
        """
        Return the child reached by `move`.

        Raises:
            InvalidMoveError: If this node is unexpanded or `move` is not
                one of its children
        """
        if self.is_expanded:
            for child_move, child in self.expansion.children:
                if child_move == move:
                    return child
        raise InvalidMoveError(f"{move} is not an expanded child of this state")

    def expand_up_to(self, depth: int) -> None:
        """
        Grow the tree below this node so every path has length
        min(depth, plies left in the game).

        With depth 0 this does nothing; it never discards children that are
        already built. Otherwise the children are created if needed (one per
        legal move, reused when present) and each is expanded to depth - 1.
        A board with no legal moves becomes expanded with no children.

        Raises:
            ValueError: If depth is negative
        """
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")
        if depth == 0:
            return

        if not self.is_expanded:
            next_player = self.player.other()
            self.expansion = Expanded(tuple(
                (move, GameState(self.ai, self.board.apply(self.player, move), next_player))
                for move in self.board.get_possible_moves()
            ))

        for _, child in self.expansion.children:
            child.expand_up_to(depth - 1)

    def compute_minimax(self) -> int:
        """
        Compute and store the value of this node and all its descendants.

        Children are evaluated first. A connect four is worth WIN_SCORE or
        LOSS_SCORE depending on who made it, a full board is worth 0, an
        unexpanded node gets the static board value, and otherwise the node
        takes the maximum of its children's values when the AI is to move and
        the minimum when the opponent is.

        Returns:
            The computed value
        """
        children = self.expansion.children if self.is_expanded else ()
        for _, child in children:
            child.compute_minimax()

        winner = self.board.has_connect_four()
        if winner == self.ai:
            self.value = WIN_SCORE
        elif winner is not None:
            self.value = LOSS_SCORE
        elif self.board.is_full():
            self.value = DRAW_SCORE
        elif not children:
            self.value = board_value(self.board, self.ai)
        else:
            prefer = max if self.player == self.ai else min
            self.value = prefer(child.value for _, child in children)
        return self.value

    def get_preferred_move(self) -> Move:
        """
        Return the move this node's player should make.

        Minimax is recomputed for the subtree, then the leftmost child whose
        value matches this node's value is chosen. If the node has no children
        the first legal move is returned unscored.

        Raises:
            InvalidMoveError: If the board has no legal moves at all
        """
        if self.is_expanded and self.expansion.children:
            self.compute_minimax()
            for move, child in self.expansion.children:
                if child.value == self.value:
                    return move

        moves = self.board.get_possible_moves()
        if not moves:
            raise InvalidMoveError("No valid moves on this board")
        return moves[0]

    def iter_leaves(self, depth: int = 0) -> Iterator[Tuple[int, 'GameState']]:
        """Yield (depth, node) for every search leaf below this node."""
        if not self.is_expanded or not self.expansion.children:
            yield depth, self
            return
        for _, child in self.expansion.children:
            yield from child.iter_leaves(depth + 1)

    def node_count(self) -> int:
        """Number of nodes in this subtree, this node included."""
        if not self.is_expanded:
            return 1
        return 1 + sum(child.node_count() for _, child in self.expansion.children)

    def __str__(self) -> str:
        return self._to_string(0, "")

    def _to_string(self, depth: int, indent: str) -> str:
        who = "AI" if self.player == self.ai else "Opponent"
        parts = [
            f"{indent}{who} will play next on the board below as {self.player.initial}\n",
            f"{indent}Value: {self.value}\n",
            self.board.render(indent) + "\n",
        ]
        if self.is_expanded and self.expansion.children:
            parts.append(f"{indent}Children at depth {depth + 1}:\n")
            parts.append(f"{indent}----------------\n")
            for _, child in self.expansion.children:
                parts.append(child._to_string(depth + 1, indent + "   "))
        return "".join(parts)

    def __repr__(self) -> str:
        return (f"GameState(ai={self.ai.name}, player={self.player.name}, "
                f"expansion={'expanded' if self.is_expanded else 'unexpanded'}, value={self.value})")
