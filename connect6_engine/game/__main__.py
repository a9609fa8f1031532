"""
Main entry point for playing HexaStone in the terminal.

Usage:
    python -m connect6_engine.game --color black --time 4
"""

import argparse
import sys

from connect6_engine.board.state import BLACK, WHITE
from connect6_engine.game.interface import ConsoleGame, setup_logger
from connect6_engine.search.config import SearchConfig

COLOR_CHOICES = {
    "black": BLACK,
    "white": WHITE,
    "negras": BLACK,
    "blancas": WHITE,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="hexastone",
        description="Play Connect6 against a Monte-Carlo Tree Search engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--color",
        "--fichas",
        dest="color",
        choices=sorted(COLOR_CHOICES),
        default="black",
        help="Colour you play (Black opens with one stone)",
    )
    parser.add_argument(
        "--time",
        "--tpj",
        dest="time",
        type=float,
        default=4.0,
        help="Engine time budget per move in seconds",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=100000,
        help="Maximum MCTS iterations per move",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible engine play",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = SearchConfig(iterations=args.iterations, time_limit=args.time, seed=args.seed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logger(debug=args.debug)

    game = ConsoleGame(human_color=COLOR_CHOICES[args.color], time_limit=args.time, config=config)
    try:
        game.run()
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
