"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, we can swap between evaluators without
modifying the move generator or the search.

Key Principles:
    1. Evaluators are stateless
    2. evaluate() scores a board from the given player's perspective
    3. Positive = player advantage, Negative = opponent advantage
    4. A completed six saturates the scale (WIN_SCORE per counted chain)

Convention:
    - Scores are plain integers on the chain-weight scale (an open five is
      worth 100000, a lone stone 50)
    - Return 0 for an empty board
"""

from abc import ABC, abstractmethod
from typing import List

from connect6_engine.board.state import BoardState, Move, Position


# Evaluation constants
WIN_SCORE = 999999  # Saturating value of a chain of six or more


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    All evaluator implementations must inherit from this class and implement
    the evaluate() method. The helpers below work for any evaluator but
    subclasses may override them with faster incremental versions.
    """

    @abstractmethod
    def evaluate(self, state: BoardState, player: int) -> float:
        """
        Evaluate a position from `player`'s perspective.

        Args:
            state: Board to evaluate
            player: BLACK or WHITE

        Returns:
            float: Heuristic score, higher is better for `player`
        """
        pass

    def score_move(self, state: BoardState, move: Move, player: int) -> float:
        """Evaluate the board after `player` plays `move` (on a clone)."""
        after = state.clone()
        after.apply_move(move, player)
        return self.evaluate(after, player)

    def placement_delta(
        self, state: BoardState, pos: Position, stone: int, player: int
    ) -> float:
        """
        Change in evaluate(state, player) if `stone` is placed at `pos`.

        Generic version: two full evaluations on a clone.
        """
        after = state.clone()
        after.place(pos, stone)
        return self.evaluate(after, player) - self.evaluate(state, player)

    def placement_deltas(
        self, state: BoardState, positions: List[Position], stone: int, player: int
    ) -> List[float]:
        """placement_delta() for each of `positions`."""
        return [self.placement_delta(state, pos, stone, player) for pos in positions]

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
