"""
Chain Evaluation

This module implements the static Connect6 evaluator. Every occupied cell
is scanned in the four axis directions; the contiguous chain through it is
scored by its length and by how many of its ends are open:

    length | both open | one open | both blocked
    -------+-----------+----------+-------------
      >=6  |  999999 (saturating)
       5   |  100000   |  50000   |  20000
       4   |   30000   |  15000   |   5000
       3   |    7000   |   3000   |   1000
       2   |    1500   |    500   |    500
       1   |      50   |     50   |     50

An end is blocked by the board edge or an enemy stone.

evaluate(state, player) = sum(player chains) - sum(opponent chains)

Overlap Bias:
    Chains are not deduplicated: a chain of length L is counted once for
    each of its L cells, and a stone sitting on several lines contributes on
    each of them. Intersecting, central structures are therefore weighted
    higher. This is part of the scoring scale every heuristic is tuned
    against and must be kept.

Line Scanning:
    A chain in direction d only depends on the line of cells through it in
    that direction. The board is decomposed into its 19 rows, 19 columns and
    37 + 37 diagonals, and each maximal run of L stones on a line adds
    L * score(L, ends). This is exactly the per-cell scan above, and it
    lets placement_delta() rescore only the four lines through one cell.
"""

from typing import Dict, List, Tuple

from connect6_engine.board.state import (
    BOARD_SIZE,
    BLACK,
    DIRECTIONS,
    EMPTY,
    WHITE,
    BoardState,
    Position,
    switch_player,
)
from connect6_engine.evaluation.base import Evaluator, WIN_SCORE

#fmt: off
# (both open, one open, both blocked) by chain length
CHAIN_SCORES = {
    5: (100000, 50000, 20000),
    4: ( 30000, 15000,  5000),
    3: (  7000,  3000,  1000),
    2: (  1500,   500,   500),
    1: (    50,    50,    50),
}
#fmt: on


def weighted_chain_score(length: int, blocked_a: bool, blocked_b: bool) -> int:
    """
    Score a single chain.

    Args:
        length: Number of contiguous stones
        blocked_a: True if the backward end is blocked
        blocked_b: True if the forward end is blocked

    Returns:
        Table weight (0 for length < 1)
    """
    if length >= 6:
        return WIN_SCORE
    if length < 1:
        return 0
    open_ends = int(not blocked_a) + int(not blocked_b)
    both_open, one_open, both_blocked = CHAIN_SCORES[length]
    if open_ends == 2:
        return both_open
    if open_ends == 1:
        return one_open
    return both_blocked


def chain_info(state: BoardState, row: int, col: int, dr: int, dc: int) -> Tuple[int, bool, bool]:
    """
    Measure the chain through (row, col) in direction (dr, dc).

    Returns:
        (length, blocked_a, blocked_b) where blocked_b refers to the
        (+dr, +dc) end and blocked_a to the opposite end
    """
    cells = state.cells
    player = cells[row, col]
    length = 1
    blocked = {}
    for sign in (1, -1):
        r, c = row + sign * dr, col + sign * dc
        while 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE and cells[r, c] == player:
            length += 1
            r += sign * dr
            c += sign * dc
        inside = 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE
        blocked[sign] = not inside or cells[r, c] != EMPTY
    return length, blocked[-1], blocked[1]


def _build_lines() -> Tuple[List[List[Tuple[int, int]]], Dict[Tuple[int, int], List[Tuple[int, int]]]]:
    """
    Decompose the board into lines, one list per direction per start cell.

    Returns:
        lines: every line as a list of (row, col), for all four directions
        through: (row, col) -> [(line_id, index_on_line)] for the 4 directions
    """
    lines = []
    through = {(r, c): [] for r in range(BOARD_SIZE) for c in range(BOARD_SIZE)}
    for dr, dc in DIRECTIONS:
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                # A line starts where the previous cell would be off the board
                pr, pc = r - dr, c - dc
                if 0 <= pr < BOARD_SIZE and 0 <= pc < BOARD_SIZE:
                    continue
                line = []
                lr, lc = r, c
                while 0 <= lr < BOARD_SIZE and 0 <= lc < BOARD_SIZE:
                    through[(lr, lc)].append((len(lines), len(line)))
                    line.append((lr, lc))
                    lr += dr
                    lc += dc
                lines.append(line)
    return lines, through


LINES, LINES_THROUGH = _build_lines()


def score_line(values: List[int]) -> Dict[int, int]:
    """
    Sum chain scores on one line for both colours.

    Args:
        values: Stone values along the line

    Returns:
        {BLACK: score, WHITE: score}
    """
    totals = {BLACK: 0, WHITE: 0}
    n = len(values)
    i = 0
    while i < n:
        stone = values[i]
        if stone == EMPTY:
            i += 1
            continue
        j = i
        while j + 1 < n and values[j + 1] == stone:
            j += 1
        length = j - i + 1
        blocked_a = i == 0 or values[i - 1] != EMPTY
        blocked_b = j == n - 1 or values[j + 1] != EMPTY
        # Every cell of the run sees the same chain
        totals[stone] += length * weighted_chain_score(length, blocked_a, blocked_b)
        i = j + 1
    return totals


class ChainEvaluator(Evaluator):
    """
    Weighted open/blocked chain evaluation.

    Attributes:
        None (stateless)
    """

    def side_totals(self, state: BoardState) -> Dict[int, int]:
        """Chain score sums for both colours."""
        grid = state.cells.tolist()
        totals = {BLACK: 0, WHITE: 0}
        for line in LINES:
            line_totals = score_line([grid[r][c] for r, c in line])
            totals[BLACK] += line_totals[BLACK]
            totals[WHITE] += line_totals[WHITE]
        return totals

    def side_score(self, state: BoardState, player: int) -> int:
        """Sum of chain scores of `player`'s stones only."""
        return self.side_totals(state)[player]

    def evaluate(self, state: BoardState, player: int) -> float:
        """
        Evaluate position as own chains minus opponent chains.

        Args:
            state: Board to evaluate
            player: Perspective (BLACK or WHITE)

        Returns:
            float: Score from `player`'s perspective
        """
        totals = self.side_totals(state)
        return float(totals[player] - totals[switch_player(player)])

    def placement_delta(
        self, state: BoardState, pos: Position, stone: int, player: int
    ) -> float:
        """
        Exact change in evaluate(state, player) if `stone` goes to `pos`.

        Only the four lines through `pos` can change, so only those are
        rescored.
        """
        return self.placement_deltas(state, [pos], stone, player)[0]

    def placement_deltas(
        self, state: BoardState, positions: List[Position], stone: int, player: int
    ) -> List[float]:
        """placement_delta() for many cells, sharing one grid conversion."""
        grid = state.cells.tolist()
        opponent = switch_player(player)
        deltas = []
        for pos in positions:
            row, col = pos
            delta = 0
            for line_id, index in LINES_THROUGH[(row, col)]:
                values = [grid[r][c] for r, c in LINES[line_id]]
                before = score_line(values)
                values[index] = stone
                after = score_line(values)
                delta += (after[player] - before[player]) - (after[opponent] - before[opponent])
            deltas.append(float(delta))
        return deltas
