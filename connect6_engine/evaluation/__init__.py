"""
Evaluation Module

This module provides position evaluation functions for the Connect6 engine.
The key design principle is that evaluators are SWAPPABLE - the move
generator and the search work with any evaluator that implements the base
interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - ChainEvaluator: Weighted open/blocked chain-length evaluation

Data Flow:
    BoardState → evaluator.evaluate(state, player) → float
                                                     Positive = player advantage
                                                     Negative = opponent advantage
"""

from connect6_engine.evaluation.base import Evaluator, WIN_SCORE
from connect6_engine.evaluation.chains import ChainEvaluator

__all__ = ['Evaluator', 'ChainEvaluator', 'WIN_SCORE']
