"""
Monte-Carlo Tree Search

This module implements the search algorithm of the Connect6 engine: an
anytime MCTS bounded by an iteration cap and a wall-clock deadline.

Key Concepts:
    - Selection: descend fully expanded nodes by UCB1
          wins/visits + C * sqrt(ln(parent visits) / visits)
      where an unvisited child always goes first
    - Expansion: pop one untried candidate uniformly at random and create
      the child position
    - Rollout: play stone by stone with a cheap heuristic policy (complete a
      six, else block the opponent's six, else the best window score of
      the numpy window table, with a little random noise), scored at a
      depth cap by the sign of the evaluation for the root player
    - Backpropagation: walk back to the root adding the outcome, credited to
      the player who made the move into each node
    - Robust child: the final answer is the most visited root child

Turn Phase:
    A Connect6 turn is two stones (one for the opening move). Every node
    and every rollout carries the number of stones already placed in the
    current turn; the acting player only switches once the phase counter
    completes the turn (0 → 1 → 2 → 0). Tree edges are whole-turn moves,
    rollout steps are single stones.

Tree Storage:
    Nodes live in an index-addressed arena (SearchTree). Parents and
    children refer to each other by index, and the whole tree is dropped
    when search() returns. Only the optional transposition table outlives a
    search.

References:
    - UCT: Kocsis & Szepesvari, "Bandit based Monte-Carlo Planning" (2006)
    - MCTS survey: Browne et al., "A Survey of Monte Carlo Tree Search
      Methods" (2012)
"""

import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from connect6_engine.board.state import (
    EMPTY,
    NO_MOVE,
    NUM_CELLS,
    WIN_LENGTH,
    WINDOW_CELLS,
    BoardState,
    Move,
    Position,
    index_to_position,
    player_name,
    switch_player,
)
from connect6_engine.evaluation.base import Evaluator
from connect6_engine.evaluation.chains import ChainEvaluator
from connect6_engine.search.config import SearchConfig
from connect6_engine.search.moves import (
    find_best_complement_for_critical,
    find_critical_blocks,
    find_pair_winning_move,
    find_threat_blocks,
    find_winning_move,
    smart_moves,
    window_cell_scores,
)
from connect6_engine.search.transposition import TranspositionTable, zobrist_hash

logger = logging.getLogger(__name__)


def advance_phase(phase: int, stones: int, turn_length: int) -> Tuple[int, bool]:
    """
    Count placed stones into the turn-phase counter.

    Returns:
        (new phase, True if the turn is complete and the player switches)
    """
    phase += stones
    if phase >= turn_length:
        return 0, True
    return phase, False


@dataclass
class SearchNode:
    """
    One position in the search tree.

    Attributes:
        state: Board snapshot at this node
        parent: Arena index of the parent (None for the root)
        move: Move that produced this node
        player: Player who made `move`
        to_move: Player acting at this node
        phase: Stones already placed in `to_move`'s current turn
        children: Arena indices of expanded children
        visits: Number of rollouts backed up through this node
        wins: Accumulated reward for `player`
        untried: Candidates not expanded yet (None until first needed)
        terminal: True if a side already has six in a row
        key: Zobrist hash, when a transposition table is in use
    """
    state: BoardState
    parent: Optional[int]
    move: Move
    player: int
    to_move: int
    phase: int = 0
    children: List[int] = field(default_factory=list)
    visits: int = 0
    wins: float = 0.0
    untried: Optional[List[Move]] = None
    terminal: bool = False
    key: int = 0


class SearchTree:
    """Index-addressed arena of SearchNodes, private to one search."""

    def __init__(self):
        self.nodes: List[SearchNode] = []

    def add(self, node: SearchNode) -> int:
        self.nodes.append(node)
        index = len(self.nodes) - 1
        if node.parent is not None:
            self.nodes[node.parent].children.append(index)
        return index

    def path_to_root(self, index: int) -> Iterator[int]:
        while index is not None:
            yield index
            index = self.nodes[index].parent

    def __getitem__(self, index: int) -> SearchNode:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass
class SearchStats:
    """Summary of the last search()."""
    iterations: int = 0
    nodes: int = 0
    elapsed: float = 0.0
    reason: str = ""
    root_visits: int = 0
    best_visits: int = 0
    transposition: Optional[Dict[str, float]] = None


class MCTSEngine:
    """
    Time-bounded MCTS player.

    Attributes:
        config: Search parameters
        evaluator: Static evaluator for candidate ranking and rollouts
        rng: Random generator, seeded once at construction
        transposition_table: Optional shared statistics, engine lifetime
        last_stats: SearchStats of the most recent search
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        evaluator: Optional[Evaluator] = None,
        rng: Optional[random.Random] = None,
        transposition_table: Optional[TranspositionTable] = None,
    ):
        self.config = config if config else SearchConfig()
        self.evaluator = evaluator if evaluator else ChainEvaluator()
        self.rng = rng if rng is not None else random.Random(self.config.seed)

        if transposition_table is None and self.config.use_transposition:
            transposition_table = TranspositionTable(max_size=self.config.transposition_size)
        self.transposition_table = transposition_table

        self.last_stats = SearchStats()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def search(
        self,
        state: BoardState,
        player: int,
        iterations: Optional[int] = None,
        exploration: Optional[float] = None,
        max_rollout_depth: Optional[int] = None,
        time_limit: Optional[float] = None,
    ) -> Move:
        """
        Choose a move for `player`.

        Parameters left as None fall back to the engine config.

        Args:
            state: Current position (not modified)
            player: Side to move (BLACK or WHITE)
            iterations: Iteration cap
            exploration: UCB1 exploration constant
            max_rollout_depth: Stones per rollout before scoring
            time_limit: Wall-clock budget in seconds

        Returns:
            The chosen Move, NO_MOVE if nothing can be played
        """
        iterations = self.config.iterations if iterations is None else iterations
        exploration = self.config.exploration if exploration is None else exploration
        max_depth = self.config.max_rollout_depth if max_rollout_depth is None else max_rollout_depth
        time_limit = self.config.time_limit if time_limit is None else time_limit

        start_time = time.monotonic()
        deadline = start_time + time_limit
        stats = SearchStats()
        self.last_stats = stats

        logger.info(
            f"Search started: player={player_name(player)}, iterations={iterations}, "
            f"time_limit={time_limit}s, stones={int((state.cells != 0).sum())}"
        )

        if state.get_winner() is not None:
            stats.reason = "terminal"
            logger.info("Search on a finished game, returning no move")
            return NO_MOVE

        if self.config.use_forced_checks:
            forced, reason = self.forced_move(state, player)
            if forced is not None:
                stats.reason = reason
                stats.elapsed = time.monotonic() - start_time
                logger.info(f"Forced move ({reason}): {forced}")
                return forced

        tree = SearchTree()
        root = tree.add(self._new_node(state, None, NO_MOVE, switch_player(player), player, 0, False))
        self._ensure_candidates(tree[root])
        fallback = list(tree[root].untried)

        # Nothing to expand or roll out from
        if not fallback:
            iterations = 0

        for _ in range(iterations):
            # Deadline checked only between rollouts
            if time.monotonic() >= deadline:
                break

            leaf = self._select(tree, exploration)
            node = tree[leaf]
            if not node.terminal and node.untried:
                leaf = self._expand(tree, leaf)

            reward = self._simulate(tree[leaf], player, max_depth)
            self._backpropagate(tree, leaf, reward, player)
            stats.iterations += 1

        move = self._best_move(tree, player, fallback, stats)

        stats.nodes = len(tree)
        stats.root_visits = tree[root].visits
        stats.elapsed = time.monotonic() - start_time
        if self.transposition_table is not None:
            stats.transposition = self.transposition_table.get_stats()

        logger.info(
            f"Search complete: move={move}, reason={stats.reason}, "
            f"iterations={stats.iterations}, nodes={stats.nodes}, "
            f"time={stats.elapsed * 1000:.0f}ms"
        )
        if stats.transposition:
            logger.debug(f"Transposition table: {stats.transposition}")
        return move

    def forced_move(self, state: BoardState, player: int) -> Tuple[Optional[Move], str]:
        """
        Moves that are played without searching.

        Checked in order: an immediate win, a block of the opponent's
        immediate wins, a move leaving unstoppable winning threats, and a
        block of the opponent's critical cells (runs of four or more).

        Returns:
            (move, reason), or (None, "") when nothing is forced
        """
        if state.is_empty():
            return None, ""

        win = find_winning_move(state, player, self.evaluator)
        if win is not None:
            return win, "win"

        block = find_threat_blocks(state, player, self.evaluator)
        if block is not None:
            return block, "block"

        double_threat = find_pair_winning_move(state, player, self.evaluator, unstoppable_only=True)
        if double_threat is not None:
            return double_threat, "double_threat"

        critical = find_critical_blocks(state, switch_player(player))
        if len(critical) >= 2:
            return Move(critical[0], critical[1]), "critical_block"
        if critical:
            complement = find_best_complement_for_critical(state, player, critical[0], self.evaluator)
            if complement is not None:
                return Move(critical[0], complement), "critical_block"

        return None, ""

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------

    def _new_node(
        self,
        state: BoardState,
        parent: Optional[int],
        move: Move,
        player: int,
        to_move: int,
        phase: int,
        terminal: bool,
    ) -> SearchNode:
        node = SearchNode(
            state=state,
            parent=parent,
            move=move,
            player=player,
            to_move=to_move,
            phase=phase,
            terminal=terminal or (parent is None and state.get_winner() is not None),
        )
        if self.transposition_table is not None:
            node.key = zobrist_hash(state)
        return node

    def _ensure_candidates(self, node: SearchNode):
        """Generate a node's candidate moves on first use."""
        if node.untried is not None:
            return
        if node.terminal:
            node.untried = []
            return
        node.untried = smart_moves(
            node.state,
            node.to_move,
            self.evaluator,
            max_pairs=self.config.max_pairs,
            max_candidates=self.config.max_candidates,
            radius=self.config.priority_radius,
        )

    def _select(self, tree: SearchTree, exploration: float) -> int:
        """Descend from the root while nodes are fully expanded."""
        index = 0
        while True:
            node = tree[index]
            if node.terminal:
                return index
            self._ensure_candidates(node)
            if node.untried or not node.children:
                return index
            index = max(node.children, key=lambda c: self._ucb1(node, tree[c], exploration))

    def _ucb1(self, parent: SearchNode, child: SearchNode, exploration: float) -> float:
        if child.visits == 0:
            return math.inf
        exploitation = child.wins / child.visits
        if self.transposition_table is not None:
            entry = self.transposition_table.lookup(child.key)
            if entry is not None and entry.visits > 0:
                exploitation = entry.win_rate
        return exploitation + exploration * math.sqrt(math.log(parent.visits) / child.visits)

    def _expand(self, tree: SearchTree, index: int) -> int:
        """Play one random untried candidate and add the child."""
        node = tree[index]
        move = node.untried.pop(self.rng.randrange(len(node.untried)))

        state = node.state.clone()
        state.apply_move(move, node.to_move)

        placed = move.positions()
        phase, done = advance_phase(node.phase, len(placed), node.state.turn_length())
        next_player = switch_player(node.to_move) if done else node.to_move
        won = any(state.check_win_at(p, node.to_move) for p in placed)

        child = self._new_node(state, index, move, node.to_move, next_player, phase, won)
        return tree.add(child)

    def _simulate(self, node: SearchNode, root_player: int, max_depth: int) -> float:
        if node.terminal:
            winner = node.state.get_winner()
            return 1.0 if winner == root_player else 0.0
        return self.rollout(node.state, node.to_move, node.phase, root_player, max_depth)

    def _backpropagate(self, tree: SearchTree, index: int, reward: float, root_player: int):
        """
        Add the outcome from `index` up to the root.

        Each node is credited from the point of view of the player who made
        the move into it.
        """
        for i in tree.path_to_root(index):
            node = tree[i]
            gained = reward if node.player == root_player else 1.0 - reward
            node.visits += 1
            node.wins += gained
            if self.transposition_table is not None:
                self.transposition_table.update(node.key, gained)

    def _best_move(self, tree: SearchTree, root_player: int, fallback: List[Move], stats: SearchStats) -> Move:
        root = tree[0]
        if not root.children:
            stats.reason = "fallback"
            if fallback:
                logger.warning("Search budget ran out before any expansion, using first candidate")
                return fallback[0]
            logger.warning("No candidate moves available")
            return NO_MOVE

        for c in root.children:
            child = tree[c]
            if child.phase == 0 and child.state.check_win(root_player):
                stats.reason = "winning_child"
                stats.best_visits = child.visits
                return child.move

        best = max(root.children, key=lambda c: tree[c].visits)
        stats.reason = "most_visited"
        stats.best_visits = tree[best].visits
        return tree[best].move

    # ------------------------------------------------------------------
    # Rollout policy
    # ------------------------------------------------------------------

    def rollout(
        self,
        state: BoardState,
        to_move: int,
        phase: int,
        root_player: int,
        max_depth: int,
    ) -> float:
        """
        Play out stone by stone from `state` (not modified).

        Returns:
            1.0 if the rollout ends in a win for `root_player` or, at the
            depth cap, if the evaluation favours `root_player`; else 0.0
        """
        board = state.clone()
        player = to_move
        for _ in range(max_depth):
            turn_length = board.turn_length()
            cell = self._rollout_cell(board, player, turn_length - phase)
            if cell is None:
                break
            board.place(cell, player)
            if board.check_win_at(cell, player):
                return 1.0 if player == root_player else 0.0
            phase, done = advance_phase(phase, 1, turn_length)
            if done:
                player = switch_player(player)

        return 1.0 if self.evaluator.evaluate(board, root_player) > 0 else 0.0

    def _rollout_cell(self, board: BoardState, player: int, stones_left: int) -> Optional[Position]:
        """
        Pick the next stone for `player`.

        Priority: finish a six with the stones left in this turn, else cover
        the cell shared by most of the opponent's winning windows, else a
        uniformly random empty cell with probability rollout_random_prob,
        else the cell with the best window score.
        """
        values = board.window_values()
        own = np.count_nonzero(values == player, axis=1)
        theirs = np.count_nonzero(values == switch_player(player), axis=1)
        empty = values == EMPTY

        wins = np.flatnonzero((theirs == 0) & (own >= WIN_LENGTH - stones_left) & (own < WIN_LENGTH))
        if wins.size:
            window = wins[0]
            return index_to_position(WINDOW_CELLS[window][empty[window]].min())

        threats = (own == 0) & (theirs >= WIN_LENGTH - 2) & (theirs < WIN_LENGTH)
        if threats.any():
            counts = np.bincount(WINDOW_CELLS[threats][empty[threats]], minlength=NUM_CELLS)
            return index_to_position(counts.argmax())

        empties = np.flatnonzero(board.cells.ravel() == EMPTY)
        if empties.size == 0:
            return None

        if self.rng.random() < self.config.rollout_random_prob:
            return index_to_position(empties[self.rng.randrange(empties.size)])

        scores = window_cell_scores(board, player, values)
        return index_to_position(empties[scores[empties].argmax()])


def find_best_move(
    state: BoardState,
    player: int,
    iterations: int = 100000,
    exploration: float = 1.414,
    max_rollout_depth: int = 30,
    time_limit: float = 4.0,
    config: Optional[SearchConfig] = None,
    rng: Optional[random.Random] = None,
) -> Move:
    """
    One-shot search with a fresh engine.

    Args:
        state: Current position
        player: Side to move
        iterations: Iteration cap
        exploration: UCB1 exploration constant
        max_rollout_depth: Stones per rollout before scoring
        time_limit: Wall-clock budget in seconds
        config: Other engine settings
        rng: Random generator for reproducible searches

    Returns:
        The chosen Move
    """
    engine = MCTSEngine(config=config, rng=rng)
    return engine.search(
        state,
        player,
        iterations=iterations,
        exploration=exploration,
        max_rollout_depth=max_rollout_depth,
        time_limit=time_limit,
    )
