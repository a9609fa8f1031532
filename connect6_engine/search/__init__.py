"""
Search Module

This module implements the Connect6 search: a time-bounded Monte-Carlo Tree
Search over a locality-pruned candidate set, preceded by forced win/block
detection, with an optional transposition table shared between tree paths.

Key Components:
    - MCTSEngine: selection / expansion / rollout / backpropagation loop
    - find_best_move: One-shot search with a fresh engine
    - SearchConfig: Budget, UCB1 and rollout parameters
    - smart_moves and the forced-move detectors of the moves module
    - TranspositionTable: Zobrist-keyed visit/win aggregates

"""

from connect6_engine.search.config import SearchConfig
from connect6_engine.search.mcts import MCTSEngine, SearchNode, SearchStats, SearchTree, find_best_move
from connect6_engine.search.moves import (
    priority_positions,
    smart_moves,
    find_winning_move,
    find_pair_winning_move,
    find_critical_blocks,
    find_best_complement_for_critical,
    find_threat_blocks,
    winning_completions,
)
from connect6_engine.search.transposition import TranspositionTable, zobrist_hash

__all__ = [
    'SearchConfig',
    'MCTSEngine',
    'SearchNode',
    'SearchStats',
    'SearchTree',
    'find_best_move',
    'priority_positions',
    'smart_moves',
    'find_winning_move',
    'find_pair_winning_move',
    'find_critical_blocks',
    'find_best_complement_for_critical',
    'find_threat_blocks',
    'winning_completions',
    'TranspositionTable',
    'zobrist_hash',
]
