#!/usr/bin/env python3
"""
run.py - Main entry point for the Connect Four minimax engine

Examples:
    python run.py analyze --moves 3,3,4 --depth 4
    python run.py analyze --moves 3,2 --depth 2 --tree
    python run.py match --games 20 --depth 3 --seed demo
    python run.py --debug_level warning benchmark --max-depth 5
"""

import sys

from connect4_minimax.interfaces.cli import main


if __name__ == "__main__":
    sys.exit(main())
