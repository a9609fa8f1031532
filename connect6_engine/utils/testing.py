"""
Engine Testing and Benchmarking

This module provides a tactical test suite for measuring the Connect6
engine's strength at the situations that decide games.

Test Suite:
    Each position has a side to move (inferred from stone counts) and a
    goal:
        - "win": the chosen move must give the side to move six in a row
        - "block": after the chosen move the opponent must have no way left
          to complete six with its next two stones

    Judging by the resulting board instead of a fixed answer accepts every
    move that solves the position (a win or block often has several).

Evaluation Metrics:
    - Solved positions
    - Time per position
    - Iterations searched and the engine's decision reason
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from connect6_engine.board.state import BoardState, Move, switch_player
from connect6_engine.search.config import SearchConfig
from connect6_engine.search.mcts import MCTSEngine
from connect6_engine.search.moves import winning_completions


@dataclass
class TacticalPosition:
    """
    A test position with a goal for the side to move.

    Attributes:
        id: Position identifier (e.g., "W.01")
        black: Black stone coordinates
        white: White stone coordinates
        goal: "win" or "block"
        description: Human-readable description of the position
    """
    id: str
    black: List[Tuple[int, int]]
    white: List[Tuple[int, int]]
    goal: str
    description: str = ""

    def board(self) -> BoardState:
        return BoardState.from_stones(self.black, self.white)


@dataclass
class TacticalResult:
    """
    Result of testing a single position.

    Attributes:
        position: The test position
        found_move: Move the engine chose
        solved: Whether the move reaches the goal
        time_taken: Time spent searching (seconds)
        iterations: MCTS iterations run (0 for forced moves)
        reason: Engine decision reason
    """
    position: TacticalPosition
    found_move: Move
    solved: bool
    time_taken: float
    iterations: int = 0
    reason: str = ""


# ============================================================================
# Tactical Suite
# ============================================================================

TACTICAL_POSITIONS = [
    TacticalPosition(
        id="W.01",
        black=[(9, 5), (9, 6), (9, 7), (9, 8), (9, 9)],
        white=[(8, 5), (8, 6), (10, 6), (10, 7), (11, 9)],
        goal="win",
        description="Black completes an open five",
    ),
    TacticalPosition(
        id="W.02",
        black=[(9, 5), (9, 6), (9, 8), (9, 9)],
        white=[(10, 5), (10, 6), (8, 8), (8, 9)],
        goal="win",
        description="Black fills the gap of a split four and extends",
    ),
    TacticalPosition(
        id="W.03",
        black=[(5, 5), (6, 6), (7, 7), (8, 8)],
        white=[(5, 6), (6, 7), (10, 2), (12, 12)],
        goal="win",
        description="Black finishes a diagonal four with two stones",
    ),
    TacticalPosition(
        id="W.04",
        black=[(5, 4), (6, 5), (7, 6), (12, 12), (12, 13)],
        white=[(5, 3), (6, 3), (7, 3), (8, 3)],
        goal="win",
        description="White finishes a vertical open four",
    ),
    TacticalPosition(
        id="B.01",
        black=[(8, 8), (10, 8), (10, 9)],
        white=[(9, 6), (9, 7), (9, 8), (9, 9)],
        goal="block",
        description="Black must close both ends of White's open four",
    ),
    TacticalPosition(
        id="B.02",
        black=[(10, 10), (10, 11), (11, 10)],
        white=[(4, 4), (4, 5), (4, 7), (4, 8)],
        goal="block",
        description="Black plugs the gap of White's split four",
    ),
    TacticalPosition(
        id="B.03",
        black=[(2, 9), (10, 4), (11, 4), (12, 5)],
        white=[(3, 9), (4, 9), (5, 9), (6, 9), (7, 9)],
        goal="block",
        description="Black stops a half-closed vertical five",
    ),
    TacticalPosition(
        id="B.04",
        black=[(9, 2), (2, 11), (14, 0), (15, 0), (16, 2), (17, 4)],
        white=[(9, 3), (9, 4), (9, 5), (9, 6), (3, 12), (4, 13), (5, 14), (6, 15)],
        goal="block",
        description="Black answers two half-closed fours, one stone each",
    ),
]


def is_solved(position: TacticalPosition, move: Move) -> bool:
    """Check whether `move` reaches the position's goal."""
    state = position.board()
    player = state.current_player()
    if move.is_null or not state.is_valid_move(move.first, move.second):
        return False

    state.apply_move(move, player)
    if position.goal == "win":
        return state.check_win(player)
    if position.goal == "block":
        return not winning_completions(state, switch_player(player), 2)
    raise ValueError(f"Unknown goal: {position.goal}")


def evaluate_position(
    position: TacticalPosition,
    engine: MCTSEngine,
    time_limit: float = 1.0,
    verbose: bool = False,
) -> TacticalResult:
    """
    Evaluate a single test position.

    Args:
        position: Test position to evaluate
        engine: Engine to test
        time_limit: Search budget in seconds
        verbose: If True, print detailed output

    Returns:
        TacticalResult with the engine's move and whether it solved the position
    """
    state = position.board()
    player = state.current_player()

    if verbose:
        print(f"\nTesting {position.id}: {position.description}")
        print(f"Goal: {position.goal}")

    start_time = time.time()
    move = engine.search(state, player, time_limit=time_limit)
    time_taken = time.time() - start_time

    solved = is_solved(position, move)
    stats = engine.last_stats

    if verbose:
        print(f"Engine found: {move} ({stats.reason})")
        print(f"Iterations: {stats.iterations:,}")
        print(f"Time: {time_taken:.2f}s")
        print(f"Result: {'✓ SOLVED' if solved else '✗ FAILED'}")

    return TacticalResult(
        position=position,
        found_move=move,
        solved=solved,
        time_taken=time_taken,
        iterations=stats.iterations,
        reason=stats.reason,
    )


def run_tactical_suite(
    engine: Optional[MCTSEngine] = None,
    time_limit: float = 1.0,
    positions: Optional[Sequence[TacticalPosition]] = None,
    verbose: bool = True,
) -> Dict[str, Any]:
    """
    Run the tactical test suite.

    Args:
        engine: Engine to test (default: MCTSEngine with a fixed seed)
        time_limit: Search budget per position in seconds
        positions: Positions to run (default: TACTICAL_POSITIONS)
        verbose: If True, print detailed results

    Returns:
        Dictionary with test results:
            - score: Number of solved positions
            - total: Total number of positions
            - percentage: Success percentage
            - results: List of TacticalResult objects
            - avg_time: Average time per position
            - total_time: Total search time
    """
    engine = engine if engine else MCTSEngine(SearchConfig(seed=0))
    positions = list(positions) if positions is not None else TACTICAL_POSITIONS

    if verbose:
        print("=" * 70)
        print("CONNECT6 TACTICAL TEST SUITE")
        print("=" * 70)

    results = []
    solved_count = 0
    total_time = 0.0

    for position in positions:
        result = evaluate_position(position, engine, time_limit, verbose=verbose)
        results.append(result)

        if result.solved:
            solved_count += 1

        total_time += result.time_taken

    avg_time = total_time / len(positions) if positions else 0
    percentage = (solved_count / len(positions) * 100) if positions else 0

    if verbose:
        print("\n" + "=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Score: {solved_count}/{len(positions)} ({percentage:.1f}%)")
        print(f"Average time: {avg_time:.2f}s")
        print(f"Total time: {total_time:.2f}s")

    return {
        'score': solved_count,
        'total': len(positions),
        'percentage': percentage,
        'results': results,
        'avg_time': avg_time,
        'total_time': total_time,
    }
