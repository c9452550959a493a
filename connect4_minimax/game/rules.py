"""
rules.py - Game management and Gymnasium environment for Connect Four

This module provides:
1. ConnectFourGame, a referee that tracks a match on immutable boards and
   can play two players against each other
2. ConnectFourEnv, a gymnasium-compatible environment in which an agent plays
   Player.ONE against a built-in opponent
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from connect4_minimax.debug import debug
from connect4_minimax.game.board import Board, Move
from connect4_minimax.utils import ROWS, COLS, Player


class MovePicker(Protocol):
    player: Player
    name: str

    def get_move(self, board: Board) -> Move:
        ...


class ConnectFourGame:
    """
    High-level Connect Four game manager.

    Every move replaces the current board with a new immutable one; the
    previous boards are kept so moves can be undone.
    """

    def __init__(self, first: Player = Player.ONE):
        """Initialize a new game where `first` moves first."""
        debug.debug("Initializing ConnectFourGame", "game")
        self.first = first
        self.reset()

    def reset(self) -> None:
        """Reset the game to initial state."""
        self.board = Board()
        self.current_player = self.first
        self.history: List[Tuple[Board, Move]] = []

    def make_move(self, column: Union[int, Move]) -> bool:
        """
        Make a move for the current player.

        Args:
            column: Column (or Move) to drop into

        Returns:
            True if the move was played, False if it was illegal
        """
        move = column if isinstance(column, Move) else Move(column)
        if not self.board.is_valid_move(move):
            debug.warning(f"Invalid move {move} for {self.current_player.initial}", "game")
            return False

        debug.debug(f"{self.current_player.initial} plays {move}", "game")
        self.history.append((self.board, move))
        self.board = self.board.apply(self.current_player, move)
        self.current_player = self.current_player.other()

        if self.is_game_over():
            winner = self.get_winner()
            debug.info(f"Game over: {winner.initial + ' wins' if winner else 'draw'}", "game")
        return True

    def undo_move(self) -> bool:
        """Take back the last move; False if there is nothing to undo."""
        if not self.history:
            debug.debug("No moves to undo", "game")
            return False

        self.board, move = self.history.pop()
        self.current_player = self.current_player.other()
        debug.debug(f"Undid {move}", "game")
        return True

    @property
    def moves_made(self) -> List[Move]:
        return [move for _, move in self.history]

    def is_game_over(self) -> bool:
        return self.board.has_connect_four() is not None or self.board.is_full()

    def get_winner(self) -> Optional[Player]:
        """The winning player, or None if no winner yet or draw."""
        return self.board.has_connect_four()

    def get_valid_moves(self) -> List[Move]:
        return self.board.get_possible_moves()

    def play(self, players: Sequence[MovePicker], max_moves: int = ROWS * COLS) -> Optional[Player]:
        """
        Alternate the players' moves until the game ends.

        Args:
            players: Two players; each moves for its own `player` side
            max_moves: Safety cap on the number of moves played

        Returns:
            The winner, or None for a draw
        """
        by_side = {p.player: p for p in players}
        if set(by_side) != {Player.ONE, Player.TWO}:
            raise ValueError("play() needs one player for each side")

        for _ in range(max_moves):
            if self.is_game_over():
                break
            picker = by_side[self.current_player]
            move = picker.get_move(self.board)
            if not self.make_move(move):
                raise ValueError(f"{picker.name} chose illegal {move}")

        return self.get_winner()

    def render(self) -> str:
        return self.board.render()


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    The agent always plays Player.ONE. After each legal agent move the
    opponent answers immediately, so every step returns a board on which the
    agent is to move (or a finished game).
    """

    metadata = {'render_modes': ['ascii', 'human'], 'render_fps': 4}

    def __init__(self, opponent: Optional[MovePicker] = None, render_mode: Optional[str] = None):
        """
        Initialize the Connect Four environment.

        Args:
            opponent: Player for Player.TWO; a depth-2 MinimaxPlayer by default
            render_mode: Mode for rendering the environment
        """
        debug.debug("Initializing ConnectFourEnv", "env")

        if opponent is None:
            from connect4_minimax.ai.minimax import MinimaxPlayer
            opponent = MinimaxPlayer(Player.TWO, depth=2)
        if opponent.player != Player.TWO:
            raise ValueError("The environment opponent must play Player.TWO")

        self.action_space = spaces.Discrete(COLS)
        self.observation_space = spaces.Box(low=0, high=2, shape=(ROWS, COLS), dtype=np.int8)

        self.opponent = opponent
        self.game = ConnectFourGame(first=Player.ONE)
        self.render_mode = render_mode

        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        super().reset(seed=seed)
        self.game.reset()

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Play the agent's move and the opponent's reply.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        if not self.game.make_move(int(action)):
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        if not self.game.is_game_over():
            self.game.make_move(self.opponent.get_move(self.game.board))

        reward = self.reward_step
        terminated = self.game.is_game_over()
        if terminated:
            winner = self.game.get_winner()
            if winner == Player.ONE:
                reward = self.reward_win
            elif winner == Player.TWO:
                reward = self.reward_lose
            else:
                reward = self.reward_draw

        if self.render_mode == "human":
            self.render()
        return self._get_observation(), reward, terminated, False, self._get_info()

    def render(self) -> Optional[str]:
        if self.render_mode == "ascii":
            return self.game.render()
        if self.render_mode == "human":
            print(self.game.render())
        return None

    def _get_observation(self) -> np.ndarray:
        return self.game.board.grid

    def _get_info(self) -> Dict[str, Any]:
        winner = self.game.get_winner()
        return {
            'valid_moves': [m.column for m in self.game.get_valid_moves()],
            'current_player': self.game.current_player.value,
            'winner': winner.value if winner else None,
            'moves_made': len(self.game.history),
        }
