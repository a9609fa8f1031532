"""
Connect6 Board State

This module holds the 19*19 Connect6 grid and the primitives every other
module builds on: applying moves, validating moves, win detection, cloning,
inferring the side to move and fingerprinting positions.

Cell Encoding:
    0: Empty
    1: Black
    2: White

The grid is a numpy int8 array of shape (19, 19), row-major, with
row 0 at the top and column 0 on the left.

Move Encoding:
    A Move is an ordered pair of Positions. The sentinel Position (-1, -1)
    in the second slot marks a single-stone placement, which is only legal
    for the opening move of the game (Black places one stone, afterwards
    both sides place two stones per turn).

Six-Cell Windows:
    Every run of six cells in the four axis directions (horizontal,
    vertical and both diagonals) is precomputed as a row of flat indices in
    WINDOW_CELLS. Gathering stone values through this table lets win and
    threat detection run as a few vectorized numpy operations.
"""

from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

BOARD_SIZE = 19
WIN_LENGTH = 6
NUM_CELLS = BOARD_SIZE * BOARD_SIZE

EMPTY = 0
BLACK = 1
WHITE = 2

STONE_SYMBOLS = {EMPTY: '.', BLACK: 'B', WHITE: 'W'}
SYMBOL_STONES = {symbol: stone for stone, symbol in STONE_SYMBOLS.items()}

# Horizontal, vertical, diagonal, anti-diagonal
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


class Position(NamedTuple):
    """Zero-based (row, col) cell coordinate."""
    row: int
    col: int

    def in_bounds(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE


SENTINEL = Position(-1, -1)


class Move(NamedTuple):
    """
    One turn's placement.

    `second` is SENTINEL for the single-stone opening move.
    """
    first: Position
    second: Position = SENTINEL

    @property
    def is_single(self) -> bool:
        return self.second == SENTINEL

    @property
    def is_null(self) -> bool:
        return self.first == SENTINEL

    def positions(self) -> List[Position]:
        """Positions this move actually occupies."""
        return [p for p in (self.first, self.second) if p != SENTINEL]

    def __str__(self) -> str:
        if self.is_null:
            return "(none)"
        return " ".join(f"{p.row},{p.col}" for p in self.positions())


# Returned by the engine when it has nothing to play
NO_MOVE = Move(SENTINEL, SENTINEL)


def switch_player(player: int) -> int:
    """Return the other colour. Applying it twice is the identity."""
    return WHITE if player == BLACK else BLACK


def player_name(player: Optional[int]) -> str:
    if player == BLACK:
        return "Black"
    if player == WHITE:
        return "White"
    return "Nobody"


def _build_window_table() -> np.ndarray:
    """Flat cell indices of every six-cell window, shape (924, 6)."""
    windows = []
    for dr, dc in DIRECTIONS:
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                end_r = r + dr * (WIN_LENGTH - 1)
                end_c = c + dc * (WIN_LENGTH - 1)
                if not (0 <= end_r < BOARD_SIZE and 0 <= end_c < BOARD_SIZE):
                    continue
                windows.append([
                    (r + dr * k) * BOARD_SIZE + (c + dc * k)
                    for k in range(WIN_LENGTH)
                ])
    return np.array(windows, dtype=np.intp)


WINDOW_CELLS = _build_window_table()


def index_to_position(index: int) -> Position:
    return Position(int(index) // BOARD_SIZE, int(index) % BOARD_SIZE)


class BoardState:
    """
    A Connect6 position.

    The grid is only populated through apply_move()/place(). Neither checks
    legality: callers validate with is_valid_move() first.

    Attributes:
        cells: (19, 19) int8 numpy array of EMPTY/BLACK/WHITE
    """

    def __init__(self, cells: Optional[np.ndarray] = None):
        if cells is None:
            self.cells = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        else:
            cells = np.asarray(cells, dtype=np.int8)
            if cells.shape != (BOARD_SIZE, BOARD_SIZE):
                raise ValueError(
                    f"Invalid board shape: {cells.shape}. "
                    f"Expected ({BOARD_SIZE}, {BOARD_SIZE})"
                )
            self.cells = cells.copy()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "BoardState":
        """
        Build a board from a text diagram.

        Each row uses '.', 'B' and 'W'; whitespace is ignored. Missing
        trailing rows and columns are treated as empty, so small diagrams
        describe the top-left corner of the board.

        Raises:
            ValueError: On unknown symbols or oversized diagrams
        """
        if len(rows) > BOARD_SIZE:
            raise ValueError(f"Diagram has {len(rows)} rows, max is {BOARD_SIZE}")

        state = cls()
        for r, line in enumerate(rows):
            symbols = "".join(line.split())
            if len(symbols) > BOARD_SIZE:
                raise ValueError(f"Row {r} has {len(symbols)} cells, max is {BOARD_SIZE}")
            for c, symbol in enumerate(symbols):
                if symbol not in SYMBOL_STONES:
                    raise ValueError(f"Unknown symbol {symbol!r} at ({r}, {c})")
                state.cells[r, c] = SYMBOL_STONES[symbol]
        return state

    @classmethod
    def from_fingerprint(cls, fingerprint: str) -> "BoardState":
        """Inverse of fingerprint()."""
        if len(fingerprint) != NUM_CELLS:
            raise ValueError(
                f"Fingerprint has {len(fingerprint)} cells, expected {NUM_CELLS}"
            )
        rows = [
            fingerprint[r * BOARD_SIZE:(r + 1) * BOARD_SIZE]
            for r in range(BOARD_SIZE)
        ]
        return cls.from_rows(rows)

    @classmethod
    def from_stones(
        cls,
        black: Iterable[Sequence[int]] = (),
        white: Iterable[Sequence[int]] = (),
    ) -> "BoardState":
        """Build a board from lists of (row, col) coordinates."""
        state = cls()
        for r, c in black:
            state.cells[r, c] = BLACK
        for r, c in white:
            state.cells[r, c] = WHITE
        return state

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def place(self, pos: Position, player: int) -> None:
        """Put a single stone. Unchecked."""
        self.cells[pos[0], pos[1]] = player

    def apply_move(self, move: Move, player: int) -> None:
        """
        Write `player` into one or two cells.

        The second cell is skipped when it is the sentinel (single-stone
        opening). Unchecked: the caller must have validated the move.
        """
        first, second = move
        self.cells[first[0], first[1]] = player
        if second != SENTINEL:
            self.cells[second[0], second[1]] = player

    def clone(self) -> "BoardState":
        """Fully independent copy."""
        copy = BoardState.__new__(BoardState)
        copy.cells = self.cells.copy()
        return copy

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def at(self, pos: Position) -> int:
        return int(self.cells[pos[0], pos[1]])

    def is_empty_cell(self, pos: Position) -> bool:
        return pos.in_bounds() and self.cells[pos.row, pos.col] == EMPTY

    def is_empty(self) -> bool:
        return not self.cells.any()

    def is_full(self) -> bool:
        return bool(self.cells.all())

    def stone_count(self, player: int) -> int:
        return int(np.count_nonzero(self.cells == player))

    def empty_positions(self) -> List[Position]:
        """Empty cells in row-major order."""
        return [Position(int(r), int(c)) for r, c in np.argwhere(self.cells == EMPTY)]

    def is_valid_move(self, p1: Position, p2: Position = SENTINEL) -> bool:
        """
        True iff the move may be applied.

        Two-stone move: p1 != p2, both on the board, both empty.
        Single-stone move (p2 is SENTINEL): only on an empty board.
        """
        p1 = Position(*p1)
        p2 = Position(*p2)
        if p2 == SENTINEL:
            return self.is_empty() and self.is_empty_cell(p1)
        if p1 == p2:
            return False
        return self.is_empty_cell(p1) and self.is_empty_cell(p2)

    def current_player(self) -> int:
        """
        Infer the side to move from stone counts.

        Black opens and moves first in every pair of turns, so the side with
        fewer or equal stones moves next and equal counts mean Black.
        """
        black = self.stone_count(BLACK)
        white = self.stone_count(WHITE)
        return BLACK if black <= white else WHITE

    def turn_length(self) -> int:
        """Stones the side to move places this turn."""
        return 1 if self.is_empty() else 2

    def window_values(self) -> np.ndarray:
        """Stone values of every six-cell window, shape (924, 6)."""
        return self.cells.ravel()[WINDOW_CELLS]

    def check_win(self, player: int) -> bool:
        """True if `player` has a contiguous run of six or more anywhere."""
        return bool(np.any(np.all(self.window_values() == player, axis=1)))

    def check_win_at(self, pos: Position, player: int) -> bool:
        """True if a run of six or more for `player` passes through `pos`."""
        row, col = pos
        cells = self.cells
        for dr, dc in DIRECTIONS:
            count = 1
            for sign in (1, -1):
                r, c = row + sign * dr, col + sign * dc
                while 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE and cells[r, c] == player:
                    count += 1
                    r += sign * dr
                    c += sign * dc
            if count >= WIN_LENGTH:
                return True
        return False

    def get_winner(self) -> Optional[int]:
        """BLACK, WHITE or None when neither has six in a row."""
        if self.check_win(BLACK):
            return BLACK
        if self.check_win(WHITE):
            return WHITE
        return None

    def fingerprint(self) -> str:
        """Canonical 361-character '.', 'B', 'W' string in row-major order."""
        return "".join(STONE_SYMBOLS[int(v)] for v in self.cells.ravel())

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return bool(np.array_equal(self.cells, other.cells))

    def __hash__(self) -> int:
        return hash(self.cells.tobytes())

    def __repr__(self) -> str:
        return (
            f"BoardState(black={self.stone_count(BLACK)}, "
            f"white={self.stone_count(WHITE)})"
        )
