"""
Unit Tests for Board Module

Tests for the Connect6 board state:
    - Move validation (opening single stone, two distinct empty cells)
    - Side to move inferred from stone counts
    - Win detection in all four directions, overlines included
    - Clone independence and fingerprints
"""

import numpy as np
import pytest
from connect6_engine.board import (
    BLACK,
    BOARD_SIZE,
    EMPTY,
    NO_MOVE,
    SENTINEL,
    WHITE,
    WINDOW_CELLS,
    BoardState,
    Move,
    Position,
    player_name,
    switch_player,
)


class TestMoveValidation:
    """Tests for is_valid_move()."""

    @pytest.fixture
    def opened(self):
        """Board after Black's single-stone opening at the centre."""
        state = BoardState()
        state.apply_move(Move(Position(9, 9)), BLACK)
        return state

    def test_single_stone_only_on_empty_board(self, opened):
        assert BoardState().is_valid_move(Position(9, 9))
        assert not opened.is_valid_move(Position(0, 0)), "Single stone only opens the game"

    def test_two_stone_move(self, opened):
        assert opened.is_valid_move(Position(8, 8), Position(10, 10))

    def test_same_cell_twice_rejected(self, opened):
        assert not opened.is_valid_move(Position(8, 8), Position(8, 8))

    def test_occupied_cell_rejected(self, opened):
        assert not opened.is_valid_move(Position(9, 9), Position(8, 8))
        assert not opened.is_valid_move(Position(8, 8), Position(9, 9))

    def test_out_of_bounds_rejected(self, opened):
        assert not opened.is_valid_move(Position(-1, 3), Position(8, 8))
        assert not opened.is_valid_move(Position(8, 8), Position(BOARD_SIZE, 0))
        assert not BoardState().is_valid_move(Position(19, 19))

    def test_plain_tuples_accepted(self, opened):
        assert opened.is_valid_move((0, 0), (0, 1))


class TestTurnOrder:
    """Tests for current_player() and turn_length()."""

    def test_black_opens(self):
        state = BoardState()
        assert state.current_player() == BLACK
        assert state.turn_length() == 1

    def test_alternation(self):
        state = BoardState()
        state.apply_move(Move(Position(9, 9)), BLACK)
        assert state.current_player() == WHITE
        assert state.turn_length() == 2

        state.apply_move(Move(Position(8, 8), Position(8, 9)), WHITE)
        assert state.current_player() == BLACK

        state.apply_move(Move(Position(10, 10), Position(10, 11)), BLACK)
        assert state.current_player() == WHITE

    def test_switch_player_is_involution(self):
        assert switch_player(BLACK) == WHITE
        assert switch_player(WHITE) == BLACK
        assert switch_player(switch_player(BLACK)) == BLACK

    def test_player_names(self):
        assert player_name(BLACK) == "Black"
        assert player_name(WHITE) == "White"
        assert player_name(None) == "Nobody"


class TestWinDetection:
    """Tests for check_win(), check_win_at() and get_winner()."""

    def test_empty_board_has_no_winner(self):
        state = BoardState()
        assert not state.check_win(BLACK)
        assert not state.check_win(WHITE)
        assert state.get_winner() is None

    def test_horizontal_six(self):
        state = BoardState.from_stones(black=[(5, c) for c in range(6)])
        assert state.check_win(BLACK)
        assert not state.check_win(WHITE)
        assert state.get_winner() == BLACK

    def test_five_is_not_a_win(self):
        state = BoardState.from_stones(black=[(5, c) for c in range(5)])
        assert not state.check_win(BLACK)

    def test_overline_wins(self):
        state = BoardState.from_stones(white=[(r, 3) for r in range(4, 11)])
        assert state.check_win(WHITE)
        assert state.get_winner() == WHITE

    def test_diagonal_and_anti_diagonal(self):
        diagonal = BoardState.from_stones(black=[(i, i) for i in range(13, 19)])
        assert diagonal.check_win(BLACK)

        anti = BoardState.from_stones(white=[(i, 18 - i) for i in range(6)])
        assert anti.check_win(WHITE)

    def test_broken_line_is_not_a_win(self):
        state = BoardState.from_stones(
            black=[(9, 0), (9, 1), (9, 2), (9, 4), (9, 5), (9, 6)],
            white=[(9, 3)],
        )
        assert not state.check_win(BLACK)

    def test_check_win_at(self):
        state = BoardState.from_stones(black=[(2, c) for c in range(10, 16)])
        assert state.check_win_at(Position(2, 12), BLACK)
        assert not state.check_win_at(Position(3, 12), BLACK)

    def test_window_table_covers_every_six(self):
        # 2 * 19 * 14 straight windows + 2 * 14 * 14 diagonal windows
        assert WINDOW_CELLS.shape == (924, 6)


class TestBoardState:
    """Tests for construction, cloning and fingerprints."""

    def test_clone_is_independent(self):
        state = BoardState.from_stones(black=[(9, 9)])
        copy = state.clone()
        copy.place(Position(0, 0), WHITE)

        assert state.at(Position(0, 0)) == EMPTY
        assert copy.at(Position(0, 0)) == WHITE
        assert copy.at(Position(9, 9)) == BLACK

    def test_apply_move_skips_sentinel(self):
        state = BoardState()
        state.apply_move(Move(Position(9, 9), SENTINEL), BLACK)
        assert state.stone_count(BLACK) == 1
        assert state.stone_count(WHITE) == 0

    def test_fingerprint_roundtrip(self):
        state = BoardState.from_stones(black=[(0, 0), (18, 18)], white=[(9, 9)])
        fingerprint = state.fingerprint()

        assert len(fingerprint) == BOARD_SIZE * BOARD_SIZE
        assert fingerprint[0] == 'B'
        assert fingerprint.count('W') == 1
        assert BoardState.from_fingerprint(fingerprint) == state

    def test_equal_positions_hash_equal(self):
        a = BoardState.from_stones(black=[(1, 1), (2, 2)])
        b = BoardState.from_stones(black=[(2, 2), (1, 1)])
        assert a == b
        assert hash(a) == hash(b)

    def test_from_rows(self):
        state = BoardState.from_rows([
            "B . W",
            ". B .",
        ])
        assert state.at(Position(0, 0)) == BLACK
        assert state.at(Position(0, 2)) == WHITE
        assert state.at(Position(1, 1)) == BLACK
        assert state.stone_count(BLACK) == 2

    def test_from_rows_rejects_unknown_symbol(self):
        with pytest.raises(ValueError):
            BoardState.from_rows(["B X"])

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            BoardState(np.zeros((8, 8), dtype=np.int8))

    def test_empty_and_full(self):
        state = BoardState()
        assert state.is_empty()
        assert not state.is_full()
        assert len(state.empty_positions()) == BOARD_SIZE * BOARD_SIZE

        full = BoardState(np.full((BOARD_SIZE, BOARD_SIZE), BLACK, dtype=np.int8))
        assert full.is_full()
        assert full.empty_positions() == []


class TestMove:
    """Tests for the Move encoding."""

    def test_single_and_null(self):
        assert Move(Position(9, 9)).is_single
        assert not Move(Position(9, 9), Position(9, 10)).is_single
        assert NO_MOVE.is_null

    def test_str(self):
        assert str(Move(Position(9, 9))) == "9,9"
        assert str(Move(Position(9, 9), Position(8, 10))) == "9,9 8,10"
        assert str(NO_MOVE) == "(none)"
