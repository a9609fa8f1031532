"""
Engine-versus-engine self-play.

Plays complete games between two MCTS engines and summarizes the results,
for checking engine changes end to end (every move legal, games finish,
no colour is favoured by a bug).
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from tqdm import tqdm

from connect6_engine.board.state import BLACK, WHITE, BoardState, Move, player_name
from connect6_engine.search.config import SearchConfig
from connect6_engine.search.mcts import MCTSEngine

logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    """One finished self-play game."""
    winner: Optional[int]
    moves: List[Tuple[int, Move]] = field(default_factory=list)
    elapsed: float = 0.0
    final_board: Optional[BoardState] = None

    @property
    def turns(self) -> int:
        return len(self.moves)


def play_game(
    black: MCTSEngine,
    white: MCTSEngine,
    time_limit: float = 1.0,
    max_turns: Optional[int] = None,
) -> GameRecord:
    """
    Play one game from the empty board.

    Args:
        black: Engine playing Black
        white: Engine playing White
        time_limit: Search budget per move in seconds
        max_turns: Stop (as a draw) after this many turns

    Returns:
        GameRecord with the winner (None for a draw)

    Raises:
        RuntimeError: If an engine proposes an illegal move
    """
    engines = {BLACK: black, WHITE: white}
    state = BoardState()
    record = GameRecord(winner=None)
    start_time = time.time()

    while max_turns is None or record.turns < max_turns:
        player = state.current_player()
        move = engines[player].search(state, player, time_limit=time_limit)
        if move.is_null:
            break
        if not state.is_valid_move(move.first, move.second):
            raise RuntimeError(f"{player_name(player)} proposed an illegal move: {move}")

        state.apply_move(move, player)
        record.moves.append((player, move))
        logger.debug(f"Turn {record.turns}: {player_name(player)} {move}")

        if state.check_win(player):
            record.winner = player
            break

    record.elapsed = time.time() - start_time
    record.final_board = state
    return record


def run_self_play(
    games: int = 10,
    time_limit: float = 1.0,
    config: Optional[SearchConfig] = None,
    seed: Optional[int] = None,
    max_turns: Optional[int] = None,
    show_progress: bool = True,
) -> Dict[str, Any]:
    """
    Play a series of games between two identically configured engines.

    Each engine gets its own random generator, seeded from `seed` so a run
    can be repeated.

    Returns:
        Dictionary with:
            - games: Number of games played
            - black_wins / white_wins / draws: Result counts
            - avg_turns: Average game length in turns
            - avg_time: Average game duration in seconds
            - records: List of GameRecord objects
    """
    config = config if config else SearchConfig(time_limit=time_limit)
    seeder = random.Random(seed)

    records = []
    counts = {BLACK: 0, WHITE: 0, None: 0}

    pbar = tqdm(range(games), desc="Self-play", disable=not show_progress)
    for _ in pbar:
        black = MCTSEngine(config, rng=random.Random(seeder.getrandbits(32)))
        white = MCTSEngine(config, rng=random.Random(seeder.getrandbits(32)))
        record = play_game(black, white, time_limit=time_limit, max_turns=max_turns)
        records.append(record)
        counts[record.winner] += 1

        if show_progress:
            pbar.set_postfix({
                "black": counts[BLACK],
                "white": counts[WHITE],
                "draws": counts[None],
            })
        logger.info(
            f"Game {len(records)}: winner={player_name(record.winner)}, "
            f"turns={record.turns}, time={record.elapsed:.1f}s"
        )

    played = len(records)
    return {
        'games': played,
        'black_wins': counts[BLACK],
        'white_wins': counts[WHITE],
        'draws': counts[None],
        'avg_turns': sum(r.turns for r in records) / played if played else 0,
        'avg_time': sum(r.elapsed for r in records) / played if played else 0,
        'records': records,
    }
