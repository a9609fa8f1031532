"""
Console Game Module

This module is the presentation layer and process entry point: it renders
the board, reads and validates the human's moves, and alternates human and
engine turns until someone has six in a row.

Game Flow:
    Human  → "9 9"             (Black's single-stone opening)
    Engine → "Engine plays 8,9 10,10"
    Human  → "9 10 9 11"
    ...
    Game   → "Black wins! You beat the engine."

Usage:
    python -m connect6_engine.game --color white --time 4
"""

from connect6_engine.game.interface import ConsoleGame, parse_coordinates, render_board, setup_logger

__all__ = ['ConsoleGame', 'parse_coordinates', 'render_board', 'setup_logger']
