"""
board.py - Immutable board representation for Connect Four

This module implements the Move value type and the Board snapshot the search
tree is built from. A Board never changes after construction: applying a move
returns a new Board, so every node of a game tree can own its board outright.
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, List, Optional

import numpy as np

from connect4_minimax.utils import (ROWS, COLS, LINE_ROWS, LINE_COLS, Player,
                                    InvalidMoveError, render_board_ascii)

_UNKNOWN = object()


@dataclass(frozen=True, order=True)
class Move:
    """A drop into a column (0-indexed). Moves order by column."""
    column: int

    def __post_init__(self):
        if not isinstance(self.column, (int, np.integer)) or isinstance(self.column, bool):
            raise TypeError(f"Move column must be an int, got {self.column!r}")
        object.__setattr__(self, 'column', int(self.column))

    def __int__(self) -> int:
        return self.column

    def __str__(self) -> str:
        return f"column {self.column}"


@total_ordering
class Board:
    """
    Immutable Connect Four board.

    The grid is a read-only ROWS x COLS numpy array of Player values with
    row 0 at the top. Boards compare and hash by content, and sort by their
    raw grid bytes so sets of boards have a deterministic order.
    """

    def __init__(self, grid: Optional[np.ndarray] = None):
        """
        Create a board.

        Args:
            grid: Optional ROWS x COLS array of Player values; copied. An empty
                board is created when omitted.
        """
        if grid is None:
            cells = np.zeros((ROWS, COLS), dtype=np.int8)
        else:
            cells = np.array(grid, dtype=np.int8)
            if cells.shape != (ROWS, COLS):
                raise ValueError(f"Board grid must have shape {(ROWS, COLS)}, got {cells.shape}")
            if not np.isin(cells, [p.value for p in Player]).all():
                raise ValueError("Board grid may only contain Player values")

        cells.flags.writeable = False
        self._grid = cells
        self._winner = _UNKNOWN

    @classmethod
    def from_string(cls, text: str) -> 'Board':
        """
        Parse a board drawn as rows of marks, top row first.

        'X' is Player.ONE, 'O' is Player.TWO and '.' is empty. Blank lines
        and surrounding whitespace are ignored; missing top rows are empty.

        Args:
            text: The drawing, e.g. "...O...\\n..XXX.."

        Returns:
            The parsed board
        """
        lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
        if len(lines) > ROWS:
            raise ValueError(f"Board drawing has {len(lines)} rows, expected at most {ROWS}")

        grid = np.zeros((ROWS, COLS), dtype=np.int8)
        offset = ROWS - len(lines)
        for i, line in enumerate(lines):
            if len(line) != COLS:
                raise ValueError(f"Board row {line!r} must have {COLS} cells")
            for col, char in enumerate(line):
                grid[offset + i, col] = Player.from_initial(char).value
        return cls(grid)

    @classmethod
    def from_moves(cls, columns: Iterable[int], first: Player = Player.ONE) -> 'Board':
        """Replay alternating drops starting with `first`."""
        board = cls()
        player = first
        for column in columns:
            board = board.apply(player, Move(column))
            player = player.other()
        return board

    @property
    def grid(self) -> np.ndarray:
        """A writable copy of the grid."""
        return self._grid.copy()

    @property
    def move_count(self) -> int:
        return int(np.count_nonzero(self._grid))

    def cell(self, row: int, col: int) -> Player:
        return Player(int(self._grid[row, col]))

    def line_values(self) -> np.ndarray:
        """Cell values of every four-in-a-row line, shape (lines, CONNECT_N)."""
        return self._grid[LINE_ROWS, LINE_COLS]

    def is_valid_move(self, move: Move) -> bool:
        """
        Check if a move can be played.

        A move is invalid once the game is won, when its column is out of
        range, or when its column is full.
        """
        if not 0 <= move.column < COLS:
            return False
        if self._grid[0, move.column] != Player.EMPTY.value:
            return False
        return self.has_connect_four() is None

    def get_possible_moves(self) -> List[Move]:
        """
        Get the legal moves in increasing column order.

        Returns:
            List of moves; empty when the board is full or already won
        """
        if self.has_connect_four() is not None:
            return []
        open_columns = np.flatnonzero(self._grid[0] == Player.EMPTY.value)
        return [Move(int(c)) for c in open_columns]

    def apply(self, player: Player, move: Move) -> 'Board':
        """
        Drop a piece for `player` into the move's column.

        Args:
            player: The side making the move
            move: The column to drop into

        Returns:
            A new board with the piece placed

        Raises:
            InvalidMoveError: If the move is not legal on this board
        """
        if player == Player.EMPTY:
            raise InvalidMoveError("Player.EMPTY cannot make a move")
        if not self.is_valid_move(move):
            raise InvalidMoveError(f"Invalid move: {move} on board\n{self.render()}")

        row = int(np.flatnonzero(self._grid[:, move.column] == Player.EMPTY.value)[-1])
        grid = self._grid.copy()
        grid[row, move.column] = player.value
        return Board(grid)

    def has_connect_four(self) -> Optional[Player]:
        """
        Find the side that has CONNECT_N in a row.

        Returns:
            The winning player, or None if nobody has connected four
        """
        if self._winner is _UNKNOWN:
            lines = self.line_values()
            self._winner = None
            for player in (Player.ONE, Player.TWO):
                if np.all(lines == player.value, axis=1).any():
                    self._winner = player
                    break
        return self._winner

    def is_full(self) -> bool:
        return not (self._grid[0] == Player.EMPTY.value).any()

    def render(self, indent: str = "") -> str:
        return render_board_ascii(self._grid, indent)

    def _key(self) -> bytes:
        return self._grid.tobytes()

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board(moves={self.move_count}, winner={self.has_connect_four()})"
