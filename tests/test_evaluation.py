"""
Unit Tests for Evaluation Module

Tests for the chain evaluator, focusing on:
    - Chain weight table values
    - Per-cell scoring (a chain of length L counts L times)
    - Symmetry (swapping perspective negates the score)
    - Exact incremental placement deltas
"""

import pytest
from connect6_engine.board import BLACK, DIRECTIONS, EMPTY, WHITE, BoardState, Position
from connect6_engine.evaluation import ChainEvaluator, Evaluator, WIN_SCORE
from connect6_engine.evaluation.chains import chain_info, weighted_chain_score


def per_cell_score(state, player):
    """Scan every stone of `player` in four directions, as the weights are defined."""
    total = 0
    for r in range(19):
        for c in range(19):
            if state.cells[r, c] != player:
                continue
            for dr, dc in DIRECTIONS:
                length, blocked_a, blocked_b = chain_info(state, r, c, dr, dc)
                total += weighted_chain_score(length, blocked_a, blocked_b)
    return total


class TestChainWeights:
    """Tests for weighted_chain_score()."""

    def test_table_values(self):
        assert weighted_chain_score(5, False, False) == 100000
        assert weighted_chain_score(5, True, False) == 50000
        assert weighted_chain_score(5, True, True) == 20000
        assert weighted_chain_score(4, False, True) == 15000
        assert weighted_chain_score(3, False, False) == 7000
        assert weighted_chain_score(2, True, True) == 500
        assert weighted_chain_score(1, True, True) == 50

    def test_six_or_more_saturates(self):
        assert weighted_chain_score(6, True, True) == WIN_SCORE
        assert weighted_chain_score(9, False, False) == WIN_SCORE

    def test_empty_chain_scores_zero(self):
        assert weighted_chain_score(0, False, False) == 0

    def test_chain_info_ends(self):
        state = BoardState.from_stones(black=[(0, 0), (0, 1)], white=[(0, 2)])
        length, blocked_a, blocked_b = chain_info(state, 0, 1, 0, 1)
        assert length == 2
        assert blocked_a, "Board edge blocks"
        assert blocked_b, "Enemy stone blocks"


class TestChainEvaluator:
    """Tests for ChainEvaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create a ChainEvaluator instance."""
        return ChainEvaluator()

    def test_empty_board_is_zero(self, evaluator):
        assert evaluator.evaluate(BoardState(), BLACK) == 0

    def test_lone_stone(self, evaluator):
        """A lone stone is a chain of one in each of four directions."""
        state = BoardState.from_stones(black=[(9, 9)])
        assert evaluator.evaluate(state, BLACK) == 200
        assert evaluator.evaluate(state, WHITE) == -200

    def test_chain_counted_once_per_cell(self, evaluator):
        # Open two: 2 * 1500 horizontally, plus six single-stone chains
        open_two = BoardState.from_stones(black=[(9, 9), (9, 10)])
        assert evaluator.side_score(open_two, BLACK) == 2 * 1500 + 6 * 50

        # Edge two: one end on the board edge
        edge_two = BoardState.from_stones(black=[(0, 0), (0, 1)])
        assert evaluator.side_score(edge_two, BLACK) == 2 * 500 + 6 * 50

    def test_matches_per_cell_scan(self, evaluator):
        state = BoardState.from_stones(
            black=[(9, 9), (9, 10), (9, 11), (10, 10), (11, 11), (0, 0), (18, 5)],
            white=[(9, 8), (8, 8), (10, 9), (12, 12), (0, 1), (5, 5)],
        )
        assert evaluator.side_score(state, BLACK) == per_cell_score(state, BLACK)
        assert evaluator.side_score(state, WHITE) == per_cell_score(state, WHITE)

    def test_perspective_symmetry(self, evaluator):
        state = BoardState.from_stones(
            black=[(9, 9), (9, 10), (10, 10)],
            white=[(8, 8), (8, 9), (12, 3)],
        )
        assert evaluator.evaluate(state, BLACK) == -evaluator.evaluate(state, WHITE)

    def test_longer_chain_scores_higher(self, evaluator):
        three = BoardState.from_stones(black=[(9, 8), (9, 9), (9, 10)])
        four = BoardState.from_stones(black=[(9, 8), (9, 9), (9, 10), (9, 11)])
        assert evaluator.side_score(four, BLACK) > evaluator.side_score(three, BLACK)

    def test_blocked_chain_scores_lower(self, evaluator):
        open_three = BoardState.from_stones(black=[(9, 8), (9, 9), (9, 10)])
        blocked = BoardState.from_stones(black=[(9, 8), (9, 9), (9, 10)], white=[(9, 7)])
        assert evaluator.side_score(blocked, BLACK) < evaluator.side_score(open_three, BLACK)

    def test_six_saturates(self, evaluator):
        state = BoardState.from_stones(black=[(3, c) for c in range(6)])
        assert evaluator.evaluate(state, BLACK) >= 6 * WIN_SCORE


class TestPlacementDelta:
    """Tests for the incremental placement_delta()."""

    @pytest.fixture
    def state(self):
        return BoardState.from_stones(
            black=[(9, 9), (9, 10), (10, 11), (7, 7)],
            white=[(9, 11), (8, 10), (10, 9)],
        )

    @pytest.mark.parametrize("pos", [(9, 8), (8, 9), (11, 12), (0, 0), (9, 12)])
    def test_delta_equals_full_difference(self, state, pos):
        evaluator = ChainEvaluator()
        pos = Position(*pos)
        for stone in (BLACK, WHITE):
            for player in (BLACK, WHITE):
                after = state.clone()
                after.place(pos, stone)
                expected = evaluator.evaluate(after, player) - evaluator.evaluate(state, player)
                assert evaluator.placement_delta(state, pos, stone, player) == expected

    def test_state_not_modified(self, state):
        before = state.clone()
        ChainEvaluator().placement_deltas(state, [Position(0, 0), Position(9, 8)], BLACK, BLACK)
        assert state == before
        assert state.at(Position(9, 8)) == EMPTY


class TestEvaluatorInterface:
    """Tests for the abstract Evaluator interface."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Evaluator()

    def test_generic_delta_matches_chain_delta(self):
        class FullScanEvaluator(Evaluator):
            def __init__(self):
                self.inner = ChainEvaluator()

            def evaluate(self, state, player):
                return self.inner.evaluate(state, player)

        state = BoardState.from_stones(black=[(9, 9), (9, 10)], white=[(10, 10)])
        generic = FullScanEvaluator()
        fast = ChainEvaluator()
        for pos in (Position(9, 11), Position(9, 8), Position(11, 11)):
            assert generic.placement_delta(state, pos, BLACK, BLACK) == fast.placement_delta(state, pos, BLACK, BLACK)

    def test_repr(self):
        assert repr(ChainEvaluator()) == "ChainEvaluator()"
