"""
connect4_minimax.interfaces - User interfaces for the engine

This package contains the command-line interface.
"""

# Don't import anything here to avoid circular imports
__all__ = []
