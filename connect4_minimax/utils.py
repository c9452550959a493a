"""
utils.py - Utility functions and constants for the Connect Four search engine

This module provides the board dimensions, score sentinels, the Player
enumeration, the precomputed list of four-in-a-row lines and helpers shared
by the board, the search tree and the interfaces.
"""

from enum import Enum, auto
from typing import List, Tuple

import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win

# Score sentinels (32-bit int extremes)
WIN_SCORE = 2 ** 31 - 1
LOSS_SCORE = -(2 ** 31)
DRAW_SCORE = 0

# Search depth used by MinimaxPlayer when none is given
DEFAULT_DEPTH = 4

Location = Tuple[int, int]


class InvalidMoveError(ValueError):
    """Raised when a move is not legal for the board or tree node it targets."""


class Player(Enum):
    """Enumeration representing players and cell states."""
    EMPTY = 0
    ONE = 1    # First player
    TWO = 2    # Second player

    def other(self) -> 'Player':
        """Get the other player."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    @property
    def initial(self) -> str:
        """Single-letter mark used when rendering boards."""
        return _INITIALS[self]

    @classmethod
    def from_initial(cls, char: str) -> 'Player':
        for player, initial in _INITIALS.items():
            if initial == char:
                return player
        if char in ('.', '-', '_'):
            return cls.EMPTY
        raise ValueError(f"Unknown board mark: {char!r}")

    def __str__(self):
        return self.initial


_INITIALS = {Player.EMPTY: ' ', Player.ONE: 'X', Player.TWO: 'O'}


class Direction(Enum):
    """Directions a four-in-a-row line can run in."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()  # Diagonal from bottom-left to top-right
    DIAGONAL_DOWN = auto()  # Diagonal from top-left to bottom-right


# Direction vectors (row, col) for each direction
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_UP: (-1, 1),
    Direction.DIAGONAL_DOWN: (1, 1)
}


def is_valid_position(row: int, col: int) -> bool:
    """Check if a position is within the board boundaries."""
    return 0 <= row < ROWS and 0 <= col < COLS


def four_in_a_rows() -> List[Tuple[Location, ...]]:
    """
    Enumerate every line of CONNECT_N cells that can hold a win.

    Lines are listed by start cell in row-major order and, for each start
    cell, in DIRECTION_VECTORS order. A standard 6x7 board has 69 of them.

    Returns:
        List of tuples of (row, col) locations
    """
    lines = []
    for row in range(ROWS):
        for col in range(COLS):
            for dr, dc in DIRECTION_VECTORS.values():
                end_row = row + (CONNECT_N - 1) * dr
                end_col = col + (CONNECT_N - 1) * dc
                if not is_valid_position(end_row, end_col):
                    continue
                lines.append(tuple((row + i * dr, col + i * dc) for i in range(CONNECT_N)))
    return lines


FOUR_IN_A_ROWS = four_in_a_rows()

# Fancy-index arrays: grid[LINE_ROWS, LINE_COLS] has shape (len(lines), CONNECT_N)
LINE_ROWS = np.array([[r for r, _ in line] for line in FOUR_IN_A_ROWS], dtype=np.intp)
LINE_COLS = np.array([[c for _, c in line] for line in FOUR_IN_A_ROWS], dtype=np.intp)


def render_board_ascii(grid: np.ndarray, indent: str = "") -> str:
    """
    Render the board as ASCII art.

    Args:
        grid: The game grid (row 0 is the top)
        indent: Prefix added to every line

    Returns:
        ASCII representation of the board
    """
    rows, cols = grid.shape
    border = "|" + "-" * (cols * 2 - 1) + "|"

    result = [border]
    for row in range(rows):
        marks = [Player(int(cell)).initial for cell in grid[row]]
        result.append("|" + " ".join(marks) + "|")
    result.append(border)
    result.append("|" + " ".join(str(i) for i in range(cols)) + "|")

    return "\n".join(indent + line for line in result)
