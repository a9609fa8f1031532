"""
Console Game Interface

This module implements the text front end that lets a human play Connect6
against the MCTS engine in a terminal.

Game Flow:
    1. Render the board
    2. Stop if either side has six in a row, or no legal turn is left
    3. Human turn: read one position on the empty board, two otherwise
       (malformed or illegal input is re-prompted, never propagated)
    4. Engine turn: MCTSEngine.search() within the per-move time budget
    5. Apply the move and repeat

Coordinates:
    Rows and columns are zero-based, 0-18, row first:
        Enter two positions (row1 col1 row2 col2): 9 10 8 10

Logging:
    Engine and game events go to ~/.hexastone/engine.log so they never
    interleave with the board on stdout.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from connect6_engine.board.state import (
    BLACK,
    BOARD_SIZE,
    STONE_SYMBOLS,
    BoardState,
    Move,
    Position,
    player_name,
    switch_player,
)
from connect6_engine.search.config import SearchConfig
from connect6_engine.search.mcts import MCTSEngine


def setup_logger(debug=False, log_dir: Optional[Path] = None):
    """
    Setup file-based logger for game and engine debugging.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_dir: Directory for engine.log (default: ~/.hexastone)

    Returns:
        Configured logger instance
    """
    log_dir = Path(log_dir) if log_dir else Path.home() / ".hexastone"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "engine.log"

    # Parent of every module logger in the package
    logger = logging.getLogger("connect6_engine")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def render_board(state: BoardState) -> str:
    """
    Format the board for the terminal.

    Column numbers across the top, row numbers down the left, and
    'B', 'W' or '.' in each cell.
    """
    lines = ["   " + "".join(f"{c:>3}" for c in range(BOARD_SIZE))]
    for r in range(BOARD_SIZE):
        cells = "".join(f"{STONE_SYMBOLS[int(v)]:>3}" for v in state.cells[r])
        lines.append(f"{r:>2} {cells}")
    return "\n".join(lines) + "\n"


def parse_coordinates(text: str, count: int) -> List[Position]:
    """
    Parse `count` (row, col) pairs from free text.

    Numbers may be separated by spaces, commas or semicolons.

    Raises:
        ValueError: Wrong number of values or non-integer values
    """
    tokens = [t for t in re.split(r"[\s,;]+", text.strip()) if t]
    if len(tokens) != 2 * count:
        raise ValueError(f"expected {2 * count} numbers, got {len(tokens)}")
    try:
        values = [int(t) for t in tokens]
    except ValueError:
        raise ValueError("coordinates must be whole numbers")
    return [Position(values[i], values[i + 1]) for i in range(0, len(values), 2)]


class ConsoleGame:
    """
    Human-versus-engine Connect6 game in the terminal.

    Attributes:
        board: Authoritative game position
        human_color: BLACK or WHITE
        bot_color: The other colour
        time_limit: Engine budget per move in seconds
        engine: MCTSEngine making the bot's moves
        history: (player, move) pairs in play order

    Methods:
        run: Main game loop
        human_turn: Read and apply the human's move
        bot_turn: Search and apply the engine's move
        read_human_move: Prompt until a legal move is entered
    """

    def __init__(
        self,
        human_color: int = BLACK,
        time_limit: float = 4.0,
        engine: Optional[MCTSEngine] = None,
        config: Optional[SearchConfig] = None,
        input_fn: Callable[[str], str] = input,
    ):
        """
        Initialize a game.

        Args:
            human_color: Colour the human plays (Black always opens)
            time_limit: Engine budget per move in seconds
            engine: Engine to use (default: MCTSEngine(config))
            config: Search configuration for the default engine
            input_fn: Line reader, replaceable in tests
        """
        self.board = BoardState()
        self.human_color = human_color
        self.bot_color = switch_player(human_color)
        self.time_limit = time_limit
        self.engine = engine if engine else MCTSEngine(config or SearchConfig(time_limit=time_limit))
        self.input_fn = input_fn
        self.history: List[Tuple[int, Move]] = []

        self.logger = logging.getLogger("connect6_engine.game")
        self.logger.info(
            f"New game: human={player_name(self.human_color)}, "
            f"time_limit={self.time_limit}s"
        )

    def run(self) -> Optional[int]:
        """
        Main game loop.

        Returns:
            The winner (BLACK or WHITE), or None for a draw or an aborted game
        """
        winner = None
        while True:
            print(render_board(self.board))
            sys.stdout.flush()

            winner = self.board.get_winner()
            if winner is not None:
                break

            if not self.can_move():
                self.logger.info("No legal turn left, game drawn")
                break

            player = self.board.current_player()
            try:
                if player == self.human_color:
                    self.human_turn(player)
                elif self.bot_turn(player) is None:
                    self.logger.info("Engine has no move, game drawn")
                    break
            except EOFError:
                self.logger.info("EOF received, ending game")
                print("\nGame aborted.")
                return None

        self.show_final_result(winner)
        return winner

    def can_move(self) -> bool:
        """True if the side to move can still place a full turn."""
        return len(self.board.empty_positions()) >= self.board.turn_length()

    def human_turn(self, player: int) -> Move:
        print(f"Your turn ({player_name(player)})...")
        move = self.read_human_move()
        self.board.apply_move(move, player)
        self.history.append((player, move))
        self.logger.info(f"Human played {move}")
        return move

    def bot_turn(self, player: int) -> Optional[Move]:
        """
        Let the engine play.

        Returns:
            The move played, or None if the engine had nothing to play

        Raises:
            RuntimeError: If the engine proposes an illegal move
        """
        print(f"Engine is thinking ({player_name(player)})...")
        sys.stdout.flush()

        move = self.engine.search(self.board, player, time_limit=self.time_limit)
        if move.is_null:
            return None

        if not self.board.is_valid_move(move.first, move.second):
            self.logger.error(f"Engine proposed an illegal move: {move}")
            raise RuntimeError(f"Engine proposed an illegal move: {move}")

        self.board.apply_move(move, player)
        self.history.append((player, move))

        stats = self.engine.last_stats
        print(f"Engine plays {move}")
        self.logger.info(
            f"Engine played {move} ({stats.reason}, {stats.iterations} iterations, "
            f"{stats.elapsed:.2f}s)"
        )
        return move

    def read_human_move(self) -> Move:
        """
        Prompt until a legal move is entered.

        One position is read on the empty board (the single-stone opening),
        two otherwise.
        """
        single = self.board.is_empty()
        count = 1 if single else 2
        prompt = (
            "Enter a position (row col): " if single
            else "Enter two positions (row1 col1 row2 col2): "
        )

        while True:
            text = self.input_fn(prompt)
            self.logger.debug(f">>> {text!r}")
            try:
                positions = parse_coordinates(text, count)
            except ValueError as e:
                print(f"Invalid input: {e}. Use {2 * count} numbers separated by spaces.")
                continue

            move = Move(*positions)
            if self.board.is_valid_move(move.first, move.second):
                return move
            print("Invalid move: cells must be on the board, empty and distinct. Try again.")

    def show_final_result(self, winner: Optional[int]):
        print(self.result_message(winner))
        self.logger.info(f"Game over: {self.result_message(winner)}")

    def result_message(self, winner: Optional[int]) -> str:
        if winner is None:
            return "It's a draw!"
        if winner == self.human_color:
            return f"{player_name(winner)} wins! You beat the engine."
        return f"{player_name(winner)} wins! The engine takes the game."
