"""
Move Generation and Forced-Move Detection

The legal move space of Connect6 (every pair of empty cells, ~65000 pairs
on an open board) is far too large to search, so the engine only considers
a locality-pruned candidate set: useful moves cluster near existing stones.

Key Concepts:
    - Priority positions: empty cells within a Chebyshev radius of any stone
    - Ranked pairs: candidate cells ordered by attack + defence value, then
      paired best-with-best up to a fixed pair budget
    - Completions: empty cells that finish a six-cell window for a player
      (found with the vectorized window table of the board module)
    - Critical blocks: cells where the opponent would reach a run of four
    - Window scores: per-cell attack/defence weights summed over the
      single-colour six-cell windows, cheap enough for rollouts

Forced-move detectors:
    - find_winning_move: a move that wins this turn
    - find_pair_winning_move: a move after which a second move would win
      (two-turn lookahead, order dependent, not exhaustive)
    - find_threat_blocks: a move stopping the opponent's immediate wins
    - find_critical_blocks / find_best_complement_for_critical: urgent
      blocks and the best second stone to go with them

Candidate Budget:
    MAX_PAIRS base pairs, MAX_CANDIDATES overall once winning moves are
    prepended.
"""

from itertools import combinations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from connect6_engine.board.state import (
    BOARD_SIZE,
    DIRECTIONS,
    EMPTY,
    NUM_CELLS,
    WIN_LENGTH,
    WINDOW_CELLS,
    BoardState,
    Move,
    Position,
    index_to_position,
    switch_player,
)
from connect6_engine.evaluation.base import Evaluator
from connect6_engine.evaluation.chains import ChainEvaluator

MAX_PAIRS = 100
MAX_CANDIDATES = 150
PRIORITY_RADIUS = 2
OPENING_RADIUS = 2  # 5*5 window around the centre on an empty board
CRITICAL_LENGTH = 4

# Weight of a six-cell window by the number of stones of the one colour in it
WINDOW_WEIGHTS = np.array([0, 1, 50, 500, 5000, 10000, 1000000], dtype=np.int64)

_default_evaluator = ChainEvaluator()


def priority_positions(state: BoardState, radius: int = PRIORITY_RADIUS) -> List[Position]:
    """
    Empty cells worth considering, in row-major order.

    Args:
        state: Current board
        radius: Chebyshev distance from any stone

    Returns:
        The 25 cells around (9, 9) on an empty board, otherwise every empty
        cell within `radius` of an occupied cell
    """
    center = BOARD_SIZE // 2
    if state.is_empty():
        return [
            Position(center + dr, center + dc)
            for dr in range(-OPENING_RADIUS, OPENING_RADIUS + 1)
            for dc in range(-OPENING_RADIUS, OPENING_RADIUS + 1)
        ]

    occupied = state.cells != EMPTY
    padded = np.pad(occupied, radius)
    near = np.zeros_like(occupied)
    # Dilate the occupied mask by shifting it over the (2r+1)^2 neighbourhood
    for dr in range(2 * radius + 1):
        for dc in range(2 * radius + 1):
            near |= padded[dr:dr + BOARD_SIZE, dc:dc + BOARD_SIZE]

    return [Position(int(r), int(c)) for r, c in np.argwhere(near & ~occupied)]


def rank_positions(
    state: BoardState,
    positions: Sequence[Position],
    player: int,
    evaluator: Optional[Evaluator] = None,
) -> List[Position]:
    """
    Order cells best first by attack value plus defence value.

    Attack is the evaluation gain for `player` placing there, defence the
    gain the opponent would get from the same cell.
    """
    if not positions:
        return []
    evaluator = evaluator or _default_evaluator
    opponent = switch_player(player)
    attack = evaluator.placement_deltas(state, list(positions), player, player)
    defence = evaluator.placement_deltas(state, list(positions), opponent, opponent)
    order = sorted(
        range(len(positions)),
        key=lambda i: attack[i] + defence[i],
        reverse=True,
    )
    return [positions[i] for i in order]


def _pairs_from_ranked(ranked: Sequence[Position], max_pairs: int) -> List[Move]:
    """
    Pair ranked cells, introducing one new cell at a time.

    Order: (0,1), (0,2), (1,2), (0,3), (1,3), (2,3), ... so the budget is
    spent on combinations of the best cells.
    """
    moves = []
    for j in range(1, len(ranked)):
        for i in range(j):
            moves.append(Move(ranked[i], ranked[j]))
            if len(moves) >= max_pairs:
                return moves
    return moves


def base_moves(
    state: BoardState,
    player: Optional[int] = None,
    evaluator: Optional[Evaluator] = None,
    max_pairs: int = MAX_PAIRS,
    radius: int = PRIORITY_RADIUS,
) -> List[Move]:
    """
    Locality-pruned two-stone candidates, capped at `max_pairs`.

    Returns an empty list when fewer than two empty cells remain.
    """
    if player is None:
        player = state.current_player()

    ranked = rank_positions(state, priority_positions(state, radius), player, evaluator)
    if len(ranked) == 1:
        # Pair the lone priority cell with the nearest other empty cell
        lone = ranked[0]
        others = [p for p in state.empty_positions() if p != lone]
        if not others:
            return []
        others.sort(key=lambda p: max(abs(p.row - lone.row), abs(p.col - lone.col)))
        return [Move(lone, others[0])]
    return _pairs_from_ranked(ranked, max_pairs)


def winning_completions(state: BoardState, player: int, stones: int = 2) -> List[Tuple[Position, ...]]:
    """
    Empty-cell sets that would give `player` six in a row.

    A six-cell window qualifies when it holds no opponent stone and at most
    `stones` empty cells. Windows that are already complete are skipped.

    Args:
        state: Current board
        player: Side completing the window
        stones: Stones available (2 for a full turn)

    Returns:
        Distinct completions as tuples of Positions, in window order
    """
    values = state.window_values()
    own = np.count_nonzero(values == player, axis=1)
    theirs = np.count_nonzero(values == switch_player(player), axis=1)
    mask = (theirs == 0) & (own >= WIN_LENGTH - stones) & (own < WIN_LENGTH)

    completions = []
    seen = set()
    for w in np.flatnonzero(mask):
        key = tuple(sorted(int(i) for i in WINDOW_CELLS[w][values[w] == EMPTY]))
        if key in seen:
            continue
        seen.add(key)
        completions.append(tuple(index_to_position(i) for i in key))
    return completions


def window_cell_scores(
    state: BoardState, player: int, values: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Attack plus defence weight of every cell.

    Each six-cell window holding stones of only one colour adds
    WINDOW_WEIGHTS[stones] to every empty cell in it, so a cell scores for
    the lines it would extend for `player` and the lines it would cut for
    the opponent.

    Args:
        state: Current board
        player: Side to move
        values: Precomputed state.window_values()

    Returns:
        Float array of shape (361,) indexed by flat cell, 0 for occupied cells
    """
    if values is None:
        values = state.window_values()
    own = np.count_nonzero(values == player, axis=1)
    theirs = np.count_nonzero(values == switch_player(player), axis=1)
    weights = (
        np.where(theirs == 0, WINDOW_WEIGHTS[own], 0)
        + np.where(own == 0, WINDOW_WEIGHTS[theirs], 0)
    )
    empty = values == EMPTY
    per_cell = np.broadcast_to(weights[:, None], values.shape)[empty]
    return np.bincount(WINDOW_CELLS[empty], weights=per_cell, minlength=NUM_CELLS)


def _completion_moves(
    completions: Sequence[Tuple[Position, ...]], ranked: Sequence[Position], empties: Sequence[Position]
) -> List[Move]:
    """Turn completions into two-stone moves, topping up one-cell ones."""
    moves = []
    for cells in completions:
        if len(cells) == 2:
            moves.append(Move(cells[0], cells[1]))
            continue
        spare = next((p for p in ranked if p != cells[0]), None)
        if spare is None:
            spare = next((p for p in empties if p != cells[0]), None)
        if spare is not None:
            moves.append(Move(cells[0], spare))
    return moves


def smart_moves(
    state: BoardState,
    player: Optional[int] = None,
    evaluator: Optional[Evaluator] = None,
    max_pairs: int = MAX_PAIRS,
    max_candidates: int = MAX_CANDIDATES,
    radius: int = PRIORITY_RADIUS,
) -> List[Move]:
    """
    Candidate moves for the side to move.

    Opening (empty board): single-stone moves over the 25 centre cells.
    Otherwise: immediate wins first, then the ranked base pairs, without
    duplicates and capped at `max_candidates`.
    """
    if state.is_empty():
        return [Move(p) for p in priority_positions(state, radius)]

    if player is None:
        player = state.current_player()

    ranked = rank_positions(state, priority_positions(state, radius), player, evaluator)
    if len(ranked) == 1:
        pairs = base_moves(state, player, evaluator, max_pairs, radius)
    else:
        pairs = _pairs_from_ranked(ranked, max_pairs)

    wins = _completion_moves(winning_completions(state, player, 2), ranked, state.empty_positions())

    moves = []
    seen = set()
    for move in wins + pairs:
        key = frozenset(move.positions())
        if key in seen:
            continue
        seen.add(key)
        moves.append(move)
        if len(moves) >= max_candidates:
            break
    return moves


def _wins_after(state: BoardState, move: Move, player: int) -> bool:
    after = state.clone()
    after.apply_move(move, player)
    return any(after.check_win_at(p, player) for p in move.positions())


def find_winning_move(
    state: BoardState,
    player: int,
    evaluator: Optional[Evaluator] = None,
) -> Optional[Move]:
    """
    First candidate move that wins immediately for `player`.

    Returns:
        The winning Move, or None
    """
    for move in smart_moves(state, player, evaluator):
        if _wins_after(state, move, player):
            return move
    return None


def _blockable(completions: Sequence[Tuple[Position, ...]], stones: int = 2) -> bool:
    """True if `stones` cells can hit every completion."""
    cells = sorted({p for completion in completions for p in completion})
    for size in range(1, stones + 1):
        for chosen in combinations(cells, size):
            if all(any(p in completion for p in chosen) for completion in completions):
                return True
    return False


def find_pair_winning_move(
    state: BoardState,
    player: int,
    evaluator: Optional[Evaluator] = None,
    unstoppable_only: bool = False,
) -> Optional[Move]:
    """
    Two-turn lookahead for a win.

    For each candidate first move, apply it and check whether some second
    move would complete six; return the first move of the first such pair.
    This is a heuristic: it is order dependent and only examines the
    generated candidates, so it can miss forced wins outside them.

    Args:
        state: Current board
        player: Side looking for the win
        evaluator: Used to rank candidates
        unstoppable_only: Only accept first moves whose follow-up wins cannot
            all be blocked by the opponent's two stones

    Returns:
        The first move of the winning pair, or None
    """
    for first in smart_moves(state, player, evaluator):
        after = state.clone()
        after.apply_move(first, player)
        if any(after.check_win_at(p, player) for p in first.positions()):
            return first
        completions = winning_completions(after, player, 2)
        if not completions:
            continue
        if unstoppable_only and _blockable(completions):
            continue
        return first
    return None


def find_critical_blocks(state: BoardState, opponent: int) -> List[Position]:
    """
    Empty cells where an `opponent` stone would make a run of four or more.

    Returns:
        Positions in row-major order
    """
    grid = state.cells.tolist()
    critical = []
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if grid[r][c] != EMPTY:
                continue
            for dr, dc in DIRECTIONS:
                count = 1  # the hypothetical stone
                for sign in (1, -1):
                    nr, nc = r + sign * dr, c + sign * dc
                    while 0 <= nr < BOARD_SIZE and 0 <= nc < BOARD_SIZE and grid[nr][nc] == opponent:
                        count += 1
                        nr += sign * dr
                        nc += sign * dc
                if count >= CRITICAL_LENGTH:
                    critical.append(Position(r, c))
                    break
    return critical


def find_best_complement_for_critical(
    state: BoardState,
    player: int,
    critical: Position,
    evaluator: Optional[Evaluator] = None,
) -> Optional[Position]:
    """
    Best second stone to play alongside `critical`.

    Every other empty cell is tried; the one maximizing
    evaluate(board after (critical, cell), player) wins, first in row-major
    order on ties.

    Returns:
        The complement Position, or None if no other empty cell exists
    """
    evaluator = evaluator or _default_evaluator
    after = state.clone()
    after.place(critical, player)
    candidates = [p for p in after.empty_positions() if p != critical]
    if not candidates:
        return None
    # evaluate(after + cell) = evaluate(after) + delta, so the argmax is shared
    deltas = evaluator.placement_deltas(after, candidates, player, player)
    best = max(range(len(candidates)), key=lambda i: (deltas[i], -i))
    return candidates[best]


def find_threat_blocks(
    state: BoardState,
    player: int,
    evaluator: Optional[Evaluator] = None,
) -> Optional[Move]:
    """
    Move that stops as many of the opponent's immediate wins as possible.

    If one cell covers every threat it is paired with its best complement,
    otherwise the pair covering the most threats is chosen.

    Returns:
        Blocking Move, or None when the opponent has no immediate win
    """
    threats = winning_completions(state, switch_player(player), 2)
    if not threats:
        return None

    cells = sorted({p for threat in threats for p in threat})

    def covered(chosen):
        return sum(1 for threat in threats if any(p in threat for p in chosen))

    for cell in cells:
        if covered((cell,)) == len(threats):
            complement = find_best_complement_for_critical(state, player, cell, evaluator)
            if complement is None:
                return None
            return Move(cell, complement)

    best_pair = max(combinations(cells, 2), key=covered)
    return Move(best_pair[0], best_pair[1])
