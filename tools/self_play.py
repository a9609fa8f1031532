#!/usr/bin/env python3
"""
CLI tool for engine-versus-engine self-play.

Usage:
    python tools/self_play.py --games 10 --time 1.0 --seed 7
    python tools/self_play.py --games 2 --max-turns 20 --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from connect6_engine.board.state import player_name
from connect6_engine.search.config import SearchConfig
from connect6_engine.utils.self_play import run_self_play


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main():
    parser = argparse.ArgumentParser(
        description="Play the Connect6 engine against itself"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=10,
        help="Number of games to play (default: 10)",
    )
    parser.add_argument(
        "--time",
        type=float,
        default=1.0,
        help="Search budget per move in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=100000,
        help="Maximum MCTS iterations per move (default: 100000)",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Stop a game as a draw after this many turns",
    )
    parser.add_argument(
        "--transposition",
        action="store_true",
        help="Enable the transposition table",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible runs",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    if args.games <= 0:
        print("Error: --games must be positive")
        sys.exit(1)

    try:
        config = SearchConfig(
            iterations=args.iterations,
            time_limit=args.time,
            use_transposition=args.transposition,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    logger.info(f"Starting self-play: {args.games} games, {args.time}s per move")

    try:
        summary = run_self_play(
            games=args.games,
            time_limit=args.time,
            config=config,
            seed=args.seed,
            max_turns=args.max_turns,
        )
    except KeyboardInterrupt:
        print("\n\nSelf-play interrupted by user")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("SELF-PLAY SUMMARY")
    print("=" * 60)
    print(f"Games:       {summary['games']}")
    print(f"Black wins:  {summary['black_wins']}")
    print(f"White wins:  {summary['white_wins']}")
    print(f"Draws:       {summary['draws']}")
    print(f"Avg turns:   {summary['avg_turns']:.1f}")
    print(f"Avg time:    {summary['avg_time']:.1f}s")
    print("=" * 60)

    for i, record in enumerate(summary['records'], start=1):
        print(f"  Game {i}: {player_name(record.winner)} in {record.turns} turns")


if __name__ == "__main__":
    main()
