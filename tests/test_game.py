"""
Unit Tests for the Console Game

Tests for board rendering, coordinate parsing, input validation, the game
loop against a scripted engine, and the command-line entry point.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from connect6_engine.board import BLACK, NO_MOVE, WHITE, BoardState, Move, Position
from connect6_engine.game import ConsoleGame, parse_coordinates, render_board, setup_logger
from connect6_engine.game.__main__ import main, parse_args
from connect6_engine.search import SearchConfig, SearchStats


def scripted_input(lines):
    """input() replacement returning `lines` one by one, then EOF."""
    remaining = iter(lines)

    def read(prompt=""):
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError
    return read


def scripted_engine(moves):
    """Engine double that plays `moves` in order."""
    engine = MagicMock()
    engine.search.side_effect = list(moves)
    engine.last_stats = SearchStats(reason="most_visited", iterations=10)
    return engine


class TestRendering:
    """Tests for render_board()."""

    def test_empty_board(self):
        text = render_board(BoardState())
        lines = text.rstrip("\n").split("\n")

        assert len(lines) == 20, "Header plus 19 rows"
        assert lines[0].split() == [str(c) for c in range(19)]
        assert lines[1].split() == ["0"] + ["."] * 19

    def test_stones_shown(self):
        state = BoardState.from_stones(black=[(9, 9)], white=[(0, 18)])
        lines = render_board(state).split("\n")

        assert lines[10].split()[10] == "B"
        assert lines[1].split()[-1] == "W"


class TestParseCoordinates:
    """Tests for parse_coordinates()."""

    def test_space_separated(self):
        assert parse_coordinates("9 10 8 10", 2) == [Position(9, 10), Position(8, 10)]

    def test_mixed_separators(self):
        assert parse_coordinates(" 9,10; 8 10 ", 2) == [Position(9, 10), Position(8, 10)]

    def test_single_position(self):
        assert parse_coordinates("9 9", 1) == [Position(9, 9)]

    @pytest.mark.parametrize("text", ["", "9 10 8", "9 10 8 10 7", "a b c d", "9.5 1 2 3"])
    def test_malformed(self, text):
        with pytest.raises(ValueError):
            parse_coordinates(text, 2)


class TestHumanInput:
    """Tests for ConsoleGame.read_human_move()."""

    def test_opening_reads_one_position(self):
        game = ConsoleGame(engine=scripted_engine([]), input_fn=scripted_input(["9 9"]))
        assert game.read_human_move() == Move(Position(9, 9))

    def test_reprompts_until_legal(self, capsys):
        game = ConsoleGame(
            engine=scripted_engine([]),
            input_fn=scripted_input(["abc", "9 10 9 10", "20 0 9 10", "9 9 9 10", "9 10 9 11"]),
        )
        game.board.apply_move(Move(Position(9, 9)), BLACK)

        assert game.read_human_move() == Move(Position(9, 10), Position(9, 11))

        output = capsys.readouterr().out
        assert output.count("Invalid input") == 1
        assert output.count("Invalid move") == 3

    def test_eof_propagates(self):
        game = ConsoleGame(engine=scripted_engine([]), input_fn=scripted_input([]))
        with pytest.raises(EOFError):
            game.read_human_move()


class TestGameLoop:
    """Tests for ConsoleGame.run()."""

    def test_human_wins(self, capsys):
        engine = scripted_engine([
            Move(Position(0, 0), Position(0, 1)),
            Move(Position(1, 0), Position(1, 1)),
            Move(Position(2, 0), Position(2, 1)),
        ])
        game = ConsoleGame(
            human_color=BLACK,
            time_limit=1.0,
            engine=engine,
            input_fn=scripted_input(["9 9", "9 10 9 11", "9 12 9 13", "9 14 0 18"]),
        )

        assert game.run() == BLACK
        assert len(game.history) == 7
        assert engine.search.call_count == 3

        output = capsys.readouterr().out
        assert "Engine plays 0,0 0,1" in output
        assert "Black wins! You beat the engine." in output

    def test_engine_wins(self, capsys):
        engine = scripted_engine([
            Move(Position(9, 9)),
            Move(Position(9, 10), Position(9, 11)),
            Move(Position(9, 12), Position(9, 13)),
            Move(Position(9, 14), Position(0, 0)),
        ])
        game = ConsoleGame(
            human_color=WHITE,
            engine=engine,
            input_fn=scripted_input(["1 1 1 2", "2 1 2 2", "3 1 3 2"]),
        )

        assert game.run() == BLACK
        assert "Black wins! The engine takes the game." in capsys.readouterr().out

    def test_engine_passes_time_budget(self):
        engine = scripted_engine([NO_MOVE])
        game = ConsoleGame(human_color=WHITE, time_limit=2.5, engine=engine, input_fn=scripted_input([]))
        game.run()

        _, kwargs = engine.search.call_args
        assert kwargs["time_limit"] == 2.5

    def test_no_engine_move_is_draw(self, capsys):
        game = ConsoleGame(
            human_color=WHITE,
            engine=scripted_engine([NO_MOVE]),
            input_fn=scripted_input([]),
        )
        assert game.run() is None
        assert "It's a draw!" in capsys.readouterr().out

    def test_eof_aborts(self, capsys):
        game = ConsoleGame(engine=scripted_engine([]), input_fn=scripted_input([]))
        assert game.run() is None
        assert "Game aborted." in capsys.readouterr().out

    def test_illegal_engine_move_raises(self):
        game = ConsoleGame(
            human_color=WHITE,
            engine=scripted_engine([Move(Position(9, 9), Position(9, 9))]),
            input_fn=scripted_input([]),
        )
        game.board.apply_move(Move(Position(5, 5)), BLACK)
        game.board.apply_move(Move(Position(6, 6), Position(6, 7)), WHITE)
        with pytest.raises(RuntimeError):
            game.bot_turn(BLACK)


class TestLogging:
    """Tests for setup_logger()."""

    def test_log_file_created(self, tmp_path):
        logger = setup_logger(debug=True, log_dir=tmp_path)
        logging.getLogger("connect6_engine.search").debug("window gather done")
        for handler in logger.handlers:
            handler.flush()

        log_file = tmp_path / "engine.log"
        assert log_file.exists()
        assert logger.level == logging.DEBUG
        assert "window gather done" in log_file.read_text()

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


class TestCommandLine:
    """Tests for the hexastone entry point."""

    def test_defaults(self):
        args = parse_args([])
        assert args.color == "black"
        assert args.time == 4.0
        assert args.seed is None
        assert not args.debug

    def test_aliases(self):
        args = parse_args(["--fichas", "blancas", "--tpj", "2"])
        assert args.color == "blancas"
        assert args.time == 2.0

    def test_unknown_colour_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--color", "red"])

    @patch("connect6_engine.game.__main__.setup_logger")
    @patch("connect6_engine.game.__main__.ConsoleGame")
    def test_main_starts_game(self, mock_game, mock_logger):
        assert main(["--color", "white", "--time", "2", "--seed", "3"]) == 0

        _, kwargs = mock_game.call_args
        assert kwargs["human_color"] == WHITE
        assert kwargs["time_limit"] == 2.0
        assert kwargs["config"].seed == 3
        mock_game.return_value.run.assert_called_once()
        mock_logger.assert_called_once_with(debug=False)

    def test_main_rejects_bad_config(self, capsys):
        assert main(["--iterations", "0"]) == 2
        assert "iterations must be positive" in capsys.readouterr().err

    @patch("connect6_engine.game.__main__.setup_logger")
    @patch("connect6_engine.game.__main__.ConsoleGame")
    def test_main_interrupted(self, mock_game, mock_logger):
        mock_game.return_value.run.side_effect = KeyboardInterrupt
        assert main([]) == 1
