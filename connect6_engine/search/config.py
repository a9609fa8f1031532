"""
Search configuration for the MCTS engine.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SearchConfig:
    """Configuration for Monte-Carlo Tree Search.

    Every engine parameter lives here so the console game, the tools and
    the tests can build engines from one place.
    """

    # Budget
    iterations: int = 100000
    """Maximum number of select/expand/rollout/backpropagate iterations"""

    time_limit: float = 4.0
    """Wall-clock budget per search in seconds (checked between iterations)"""

    # Tree policy
    exploration: float = 1.414
    """UCB1 exploration constant C (sqrt(2))"""

    # Rollout policy
    max_rollout_depth: int = 30
    """Maximum stones placed in one rollout before it is scored"""

    rollout_random_prob: float = 0.1
    """Probability of a uniformly random placement instead of the greedy one"""

    # Candidate generation
    max_pairs: int = 100
    """Base candidate pairs per node"""

    max_candidates: int = 150
    """Candidates per node once immediate wins are prepended"""

    priority_radius: int = 2
    """Chebyshev radius around stones for candidate cells"""

    # Forced moves
    use_forced_checks: bool = True
    """Play forced wins/blocks directly instead of searching"""

    # Transposition table
    use_transposition: bool = False
    """Share visit/win statistics between tree paths reaching one position"""

    transposition_size: int = 1_000_000
    """Maximum transposition table entries"""

    # Reproducibility
    seed: Optional[int] = None
    """Random seed for the engine's generator (None for random)"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.iterations <= 0:
            raise ValueError(f"iterations must be positive, got {self.iterations}")

        if self.time_limit < 0:
            raise ValueError(f"time_limit must be non-negative, got {self.time_limit}")

        if self.exploration < 0:
            raise ValueError(f"exploration must be non-negative, got {self.exploration}")

        if self.max_rollout_depth < 0:
            raise ValueError(
                f"max_rollout_depth must be non-negative, got {self.max_rollout_depth}"
            )

        if not 0.0 <= self.rollout_random_prob <= 1.0:
            raise ValueError(
                f"rollout_random_prob must be in [0, 1], got {self.rollout_random_prob}"
            )

        if self.max_pairs <= 0:
            raise ValueError(f"max_pairs must be positive, got {self.max_pairs}")

        if self.max_candidates < self.max_pairs:
            raise ValueError(
                f"max_candidates ({self.max_candidates}) must be >= max_pairs ({self.max_pairs})"
            )

        if self.priority_radius < 1:
            raise ValueError(f"priority_radius must be >= 1, got {self.priority_radius}")

        if self.transposition_size <= 0:
            raise ValueError(
                f"transposition_size must be positive, got {self.transposition_size}"
            )

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"SearchConfig(\n"
            f"  Budget: iterations={self.iterations}, time_limit={self.time_limit}s\n"
            f"  UCB1: exploration={self.exploration}\n"
            f"  Rollout: depth={self.max_rollout_depth}, random={self.rollout_random_prob}\n"
            f"  Candidates: pairs={self.max_pairs}, max={self.max_candidates}, radius={self.priority_radius}\n"
            f"  Forced checks: {self.use_forced_checks}, transposition: {self.use_transposition}\n"
            f")"
        )
