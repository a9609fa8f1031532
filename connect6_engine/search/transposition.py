"""
Transposition Table with Zobrist Hashing

The same Connect6 position is often reached through different move orders
(placing A then B, or B then A). The transposition table aggregates MCTS
statistics per position so different tree paths can share them.

Unlike the node tree, which lives for a single search, the table belongs to
the engine and survives across searches. It is guarded by a lock so a
parallel search can share it.

References:
    - Zobrist Hashing: https://www.chessprogramming.org/Zobrist_Hashing
    - Transpositions in MCTS: Childs, Brodeur & Kocsis, "Transpositions and
      Move Groups in Monte Carlo Tree Search" (2008)
"""

import threading
from typing import Dict, Optional

import numpy as np

from connect6_engine.board.state import NUM_CELLS, BoardState


class TTEntry:
    """
    Aggregate statistics for one position.

    Attributes:
        zobrist_hash: 64-bit hash of the position
        visits: Number of rollouts backed up through the position
        wins: Accumulated reward, from the perspective of the player who
            made the move into the position
    """

    __slots__ = ('zobrist_hash', 'visits', 'wins')

    def __init__(self, zobrist_hash: int, visits: int = 0, wins: float = 0.0):
        self.zobrist_hash = zobrist_hash
        self.visits = visits
        self.wins = wins

    @property
    def win_rate(self) -> float:
        return self.wins / self.visits if self.visits else 0.0

    def __repr__(self) -> str:
        return (
            f"TTEntry(hash={self.zobrist_hash}, visits={self.visits}, "
            f"wins={self.wins:.1f})"
        )


# ============================================================================
# Zobrist Hashing
# ============================================================================
# One random 63-bit number per (stone colour, cell). Hash = XOR of the
# numbers of every occupied cell. Side to move is implied by stone counts,
# so it is not hashed separately.
# ============================================================================

_zobrist_rng = np.random.default_rng(42)  # Fixed seed for reproducibility

# [colour - 1][flat cell index], colour 1 = Black, 2 = White
ZOBRIST_STONES = _zobrist_rng.integers(
    0, np.iinfo(np.int64).max, size=(2, NUM_CELLS), dtype=np.int64
)


def zobrist_hash(state: BoardState) -> int:
    """
    Compute the Zobrist hash for a position.

    Args:
        state: Board to hash

    Returns:
        64-bit integer hash (0 for the empty board)
    """
    flat = state.cells.ravel()
    occupied = np.flatnonzero(flat)
    if occupied.size == 0:
        return 0
    keys = ZOBRIST_STONES[flat[occupied].astype(np.intp) - 1, occupied]
    return int(np.bitwise_xor.reduce(keys))


class TranspositionTable:
    """
    Position-keyed MCTS statistics shared across tree paths.

    Attributes:
        max_size: Maximum number of entries (oldest entries are evicted)
        table: Dictionary mapping hash → TTEntry
    """

    def __init__(self, max_size: int = 1_000_000):
        """
        Initialize transposition table.

        Args:
            max_size: Maximum number of entries
        """
        self.max_size = max_size
        self.table: Dict[int, TTEntry] = {}
        self.hits = 0
        self.misses = 0
        self._lock = threading.Lock()

    def update(self, zobrist_hash: int, reward: float) -> TTEntry:
        """
        Merge one backed-up rollout into the entry for a position.

        Args:
            zobrist_hash: Zobrist hash of the position
            reward: Rollout reward (1.0 or 0.0) for the player who moved in

        Returns:
            The updated entry
        """
        with self._lock:
            entry = self.table.get(zobrist_hash)
            if entry is None:
                entry = TTEntry(zobrist_hash)
                self.table[zobrist_hash] = entry
                if len(self.table) > self.max_size:
                    # Dicts keep insertion order: the first key is the oldest
                    del self.table[next(iter(self.table))]
            entry.visits += 1
            entry.wins += reward
            return entry

    def lookup(self, zobrist_hash: int) -> Optional[TTEntry]:
        """
        Look up a position.

        Returns:
            TTEntry if present, None otherwise
        """
        with self._lock:
            entry = self.table.get(zobrist_hash)
            if entry is None:
                self.misses += 1
            else:
                self.hits += 1
            return entry

    def clear(self):
        """Clear all entries from the transposition table."""
        with self._lock:
            self.table.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self.table)

    def get_stats(self) -> Dict[str, int | float]:
        """Get statistics about transposition table usage."""

        total_lookups = self.hits + self.misses
        hit_rate = (self.hits / total_lookups * 100) if total_lookups > 0 else 0

        return {
            'entries': len(self.table),
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
        }

    def __repr__(self) -> str:
        stats = self.get_stats()
        return (
            f"TranspositionTable(entries={stats['entries']}, "
            f"hit_rate={stats['hit_rate']:.1f}%)"
        )
