"""
Board Module

This module provides the Connect6 board representation shared by the
evaluator, the move generator and the search.

Key Components:
    - BoardState: 19*19 numpy grid with mutation and query primitives
    - Position / Move: coordinate and turn encodings (SENTINEL marks the
      single-stone opening move, NO_MOVE the engine's no-op answer)
    - WINDOW_CELLS: every six-cell window, for vectorized win/threat scans

Data Flow:
    BoardState → evaluator.evaluate() / smart_moves() → MCTSEngine.search() → Move
"""

from connect6_engine.board.state import (
    BOARD_SIZE,
    WIN_LENGTH,
    EMPTY,
    BLACK,
    WHITE,
    DIRECTIONS,
    SENTINEL,
    NO_MOVE,
    WINDOW_CELLS,
    Position,
    Move,
    BoardState,
    switch_player,
    player_name,
)

__all__ = [
    'BOARD_SIZE',
    'WIN_LENGTH',
    'EMPTY',
    'BLACK',
    'WHITE',
    'DIRECTIONS',
    'SENTINEL',
    'NO_MOVE',
    'WINDOW_CELLS',
    'Position',
    'Move',
    'BoardState',
    'switch_player',
    'player_name',
]
