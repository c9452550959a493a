"""
cli.py - Command-line interface for the Connect Four search engine

This module provides a CLI for analysing positions with the minimax tree,
dumping the tree for debugging, running minimax-vs-random matches and
benchmarking tree construction.
"""

import argparse
import sys
import time
from typing import List, Optional

from connect4_minimax.ai.minimax import MinimaxPlayer
from connect4_minimax.ai.random_player import RandomPlayer
from connect4_minimax.ai.state import GameState
from connect4_minimax.debug import debug, DebugLevel
from connect4_minimax.game.board import Board
from connect4_minimax.game.rules import ConnectFourGame
from connect4_minimax.utils import Player, InvalidMoveError, DEFAULT_DEPTH


def parse_moves(moves_str: Optional[str]) -> List[int]:
    """Parse a comma-separated list of columns, e.g. "3,3,4"."""
    if not moves_str:
        return []
    try:
        return [int(part) for part in moves_str.split(',') if part.strip()]
    except ValueError:
        raise InvalidMoveError(f"Could not parse moves '{moves_str}'") from None


class SimpleCLI:
    """Command-line interface for the minimax engine."""

    def __init__(self):
        self.args = None

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Connect Four minimax engine')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug_level', default='info',
                            choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                            help='Logging level')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        analyze_parser = subparsers.add_parser('analyze', help='Find the preferred move for a position')
        analyze_parser.add_argument('--moves', type=str, default='',
                                    help='Comma-separated columns played so far, X first')
        analyze_parser.add_argument('--depth', type=int, default=DEFAULT_DEPTH,
                                    help='Search depth in plies')
        analyze_parser.add_argument('--tree', action='store_true',
                                    help='Print the evaluated search tree')

        match_parser = subparsers.add_parser('match', help='Play minimax against a random player')
        match_parser.add_argument('--games', type=int, default=10, help='Number of games')
        match_parser.add_argument('--depth', type=int, default=DEFAULT_DEPTH, help='Minimax depth')
        match_parser.add_argument('--seed', type=str, default='0', help='Random player seed')

        benchmark_parser = subparsers.add_parser('benchmark', help='Time tree expansion per depth')
        benchmark_parser.add_argument('--max-depth', type=int, default=DEFAULT_DEPTH,
                                      help='Deepest tree to build')

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI based on the parsed arguments; returns the exit status."""
        if argv is not None or not self.args:
            self.parse_args(argv)

        commands = {
            'analyze': self.analyze,
            'match': self.match,
            'benchmark': self.benchmark,
        }
        handler = commands.get(self.args.command)
        if handler is None:
            print("Please specify a command. Use --help for options.")
            return 1

        try:
            return handler()
        except InvalidMoveError as e:
            debug.error(str(e), "cli")
            print(f"Error: {e}")
            return 1

    def analyze(self) -> int:
        """Search the position given by --moves for the side to move."""
        columns = parse_moves(self.args.moves)
        board = Board.from_moves(columns)
        player = Player.ONE if len(columns) % 2 == 0 else Player.TWO

        print(board)
        if not board.get_possible_moves():
            winner = board.has_connect_four()
            print(f"Game is over: {winner.initial + ' won' if winner else 'draw'}")
            return 0

        root = GameState(player, board, player)
        start = time.perf_counter()
        root.expand_up_to(self.args.depth)
        move = root.get_preferred_move()
        elapsed = time.perf_counter() - start

        print(f"\n{player.initial} to move, depth {self.args.depth}")
        print(f"Preferred move: {move}")
        print(f"Value: {root.value}")
        print(f"Nodes: {root.node_count()} ({elapsed:.3f}s)")
        for child_move, child in root.children.items():
            print(f"  {child_move}: {child.value}")

        if self.args.tree:
            print()
            print(root)
        return 0

    def match(self) -> int:
        """Play --games games of minimax vs random, alternating who starts."""
        tally = {'minimax': 0, 'random': 0, 'draw': 0}

        for game_no in range(self.args.games):
            minimax_side = Player.ONE if game_no % 2 == 0 else Player.TWO
            minimax = MinimaxPlayer(minimax_side, depth=self.args.depth)
            rand = RandomPlayer(minimax_side.other(), seed=f"{self.args.seed}-{game_no}")

            game = ConnectFourGame(first=Player.ONE)
            winner = game.play([minimax, rand])

            if winner is None:
                tally['draw'] += 1
            elif winner == minimax_side:
                tally['minimax'] += 1
            else:
                tally['random'] += 1
            debug.info(f"Game {game_no + 1}: minimax as {minimax_side.initial}, "
                       f"winner {winner.initial if winner else 'none'} after {len(game.history)} moves", "cli")

        print(f"Minimax (depth {self.args.depth}): {tally['minimax']}  "
              f"Random: {tally['random']}  Draws: {tally['draw']}")
        return 0

    def benchmark(self) -> int:
        """Build and evaluate trees from the empty board at each depth."""
        print(f"{'depth':>5} {'nodes':>10} {'leaves':>10} {'seconds':>10}")
        for depth in range(1, self.args.max_depth + 1):
            root = GameState(Player.ONE, Board(), Player.ONE)
            start = time.perf_counter()
            root.expand_up_to(depth)
            root.compute_minimax()
            elapsed = time.perf_counter() - start

            leaves = sum(1 for _ in root.iter_leaves())
            print(f"{depth:>5} {root.node_count():>10} {leaves:>10} {elapsed:>10.4f}")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    return SimpleCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
