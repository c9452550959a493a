"""
Shared test fixtures for connect4_minimax tests.
"""

import pytest

from connect4_minimax.debug import debug, DebugLevel
from connect4_minimax.game.board import Board


# =============================================================================
# Logging
# =============================================================================

@pytest.fixture(autouse=True)
def quiet_debug():
    """Keep the shared debug manager at WARNING for every test."""
    previous = debug.level
    debug.configure(level=DebugLevel.WARNING)
    yield
    debug.configure(level=previous)


# =============================================================================
# Board Fixtures
# =============================================================================

@pytest.fixture
def empty_board() -> Board:
    return Board()


@pytest.fixture
def x_wins_next_board() -> Board:
    """X to move; dropping in column 3 completes the bottom row."""
    return Board.from_string("""
        OO.....
        XXX...O
    """)


@pytest.fixture
def x_must_block_board() -> Board:
    """X to move; O completes the bottom row in column 3 unless X blocks."""
    return Board.from_string("""
        XX.....
        OOO...X
    """)


@pytest.fixture
def x_two_wins_board() -> Board:
    """X to move; both column 0 and column 4 win."""
    return Board.from_string("""
        .OOO...
        .XXX...
    """)


@pytest.fixture
def drawn_board() -> Board:
    """Full board with no four-in-a-row for either side."""
    return Board.from_string("""
        XOXOXOX
        XOXOXOX
        OXOXOXO
        OXOXOXO
        XOXOXOX
        XOXOXOX
    """)


@pytest.fixture
def full_winning_board() -> Board:
    """Full board where X has four in the bottom row."""
    return Board.from_string("""
        XOXOXOX
        XOXOXOX
        OXOXOXO
        OXOXOXO
        XOXOXOX
        XXXXOOO
    """)
