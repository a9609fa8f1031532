"""
Utilities Module

This module provides utility functions for testing and benchmarking the
Connect6 engine.

Key Components:
    - Tactical test suite: positions where the side to move must win now or
      stop an immediate win
    - evaluate_position / run_tactical_suite: run the engine on the suite
    - play_game / run_self_play: engine-versus-engine games

Success Metrics:
    - Every forced win and forced block solved at any time budget
"""

from connect6_engine.utils.self_play import GameRecord, play_game, run_self_play
from connect6_engine.utils.testing import (
    TACTICAL_POSITIONS,
    TacticalPosition,
    TacticalResult,
    evaluate_position,
    is_solved,
    run_tactical_suite,
)

__all__ = [
    'TACTICAL_POSITIONS',
    'TacticalPosition',
    'TacticalResult',
    'evaluate_position',
    'is_solved',
    'run_tactical_suite',
    'GameRecord',
    'play_game',
    'run_self_play',
]
