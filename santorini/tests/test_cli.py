"""
Tests for the command-line front end, configuration and logging setup.
"""

import argparse
import logging

import pytest
from pydantic import ValidationError

from .. import cli
from ..api.schemas import ActionKind
from ..api.service import build_snapshot
from ..bots import FirstLegalPolicy, HeuristicBot, MctsBot, PUCT, RandomPolicy, UCB1
from ..config import Settings
from ..engine_core.board import Position
from ..engine_core.state import Phase, Player
from ..logging_setup import setup_logging
from ..session import Contestant
from .conftest import make_state, flat


P = Position


def scripted(*lines):
    """input() replacement that replays lines, then reports EOF."""
    remaining = list(lines)

    def _input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)
    return _input


class TestRender:
    def test_marks_heights_workers_and_domes(self):
        state = make_state(flat(c22=3, c21=2), capped={P(2, 2)})
        text = cli.render(build_snapshot(state))
        lines = text.splitlines()

        assert len(lines) == 6
        assert "[0P1*]" in lines[1]  # selectable worker at (0,0)
        assert "[X   ]" in lines[3]
        assert "[2   ]" in lines[3]
        assert "[0P2 ]" in lines[5]

    def test_describe_turn_and_winner(self, opening_state):
        assert "Player 1" in cli.describe(build_snapshot(opening_state))

        stuck = make_state(flat(c32=2, c33=2, c34=2, c42=2))
        stuck = stuck._copy_with(phase=Phase.NO_LEGAL_MOVE, current_player=stuck.current_player.other,
                                 winner=stuck.current_player)
        assert cli.describe(build_snapshot(stuck)) == "Player 2 cannot move. Player 1 wins!"


class TestReadHumanAction:
    def test_parses_row_col(self, opening_state):
        request = cli.read_human_action(build_snapshot(opening_state), scripted("0, 1"))
        assert request.action_type == ActionKind.SELECT_WORKER
        assert (request.position.row, request.position.col) == (0, 1)

    def test_space_separated(self, new_game):
        request = cli.read_human_action(build_snapshot(new_game), scripted("3 4"))
        assert request.action_type == ActionKind.PLACE_WORKER
        assert (request.position.row, request.position.col) == (3, 4)

    def test_resign(self, opening_state):
        request = cli.read_human_action(build_snapshot(opening_state), scripted("q"))
        assert request.action_type == ActionKind.RESIGN

    def test_garbage(self, opening_state):
        with pytest.raises(ValueError):
            cli.read_human_action(build_snapshot(opening_state), scripted("left"))

    def test_off_board(self, opening_state):
        with pytest.raises(ValidationError):
            cli.read_human_action(build_snapshot(opening_state), scripted("7,0"))


class TestMakeBot:
    def test_kinds(self):
        assert cli.make_bot("human", 2, 10, None) is None
        assert isinstance(cli.make_bot("heuristic", 2, 10, None), HeuristicBot)
        assert isinstance(cli.make_bot("random", 2, 10, 1), RandomPolicy)
        assert cli.make_bot("mcts-puct", 2, 10, 1).get_name() == "MCTS(PUCT, budget=10)"
        assert isinstance(cli.make_bot("mcts", 2, 10, 1), MctsBot)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            cli.make_bot("oracle", 2, 10, None)

    def test_mcts_kinds_use_tree_policies(self):
        assert isinstance(cli.make_bot("mcts", 2, 10, 1).tree_policy, UCB1)
        assert isinstance(cli.make_bot("mcts-puct", 2, 10, 1).tree_policy, PUCT)

    def test_seat_seed(self):
        assert cli.seat_seed(None, Player.TWO) is None
        assert cli.seat_seed(9, Player.ONE) == 9
        assert cli.seat_seed(9, Player.TWO) == 10


class TestCommands:
    def _args(self, **kwargs):
        defaults = dict(player1="random", player2="random", depth=1, budget=10, seed=4, games=1)
        defaults.update(kwargs)
        return argparse.Namespace(**defaults)

    def test_bot_game(self):
        lines = []
        cli.cmd_play(self._args(), input_fn=scripted(), output=lines.append)
        assert lines[-1].endswith("wins!")

    def test_human_resigns(self):
        lines = []
        # Heuristic placements stay off the edge, so the corners are free
        cli.cmd_play(
            self._args(player1="human", player2="heuristic"),
            input_fn=scripted("nonsense", "0,0", "0,4", "q"),
            output=lines.append,
        )

        assert any(line.startswith("Invalid input") for line in lines)
        assert lines[-1] == "Player 2 wins!"

    def test_rejected_move_is_reported(self):
        lines = []
        cli.cmd_play(
            self._args(player1="human", player2="heuristic"),
            input_fn=scripted("0,0", "0,0"),
            output=lines.append,
        )
        assert any(line.startswith("InvalidPlacement") for line in lines)

    def test_input_closed_during_setup_quits(self):
        lines = []
        cli.cmd_play(self._args(player1="human"), input_fn=scripted(), output=lines.append)

        assert "Input closed, quitting." in lines
        assert "Input closed, resigning." not in lines
        assert lines[-1] == "Turn 0 - Player 1: placing_workers"

    def test_input_closed_after_setup_resigns(self):
        lines = []
        cli.cmd_play(
            self._args(player1="human", player2="heuristic"),
            input_fn=scripted("0,0", "0,4"),
            output=lines.append,
        )

        assert "Input closed, resigning." in lines
        assert lines[-1] == "Player 2 wins!"

    def test_bot_seats_get_different_seeds(self, monkeypatch):
        seeds = []
        real_make_bot = cli.make_bot

        def recording_make_bot(kind, depth, budget, seed):
            seeds.append(seed)
            return real_make_bot(kind, depth, budget, seed)

        monkeypatch.setattr(cli, "make_bot", recording_make_bot)
        cli.cmd_play(self._args(seed=4), input_fn=scripted(), output=lambda line: None)

        assert seeds == [4, 5]

    def test_elo(self, monkeypatch):
        monkeypatch.setattr(cli, "default_contestants", lambda **kwargs: [
            Contestant("Random", lambda: RandomPolicy(seed=1)),
            Contestant("First", FirstLegalPolicy),
        ])
        lines = []
        cli.cmd_elo(self._args(), output=lines.append)

        assert lines[0] == "Calculating Elo scores..."
        assert any("K=100.0" in line for line in lines)
        assert "Random:" in lines[-1] or "First:" in lines[-1]

    def test_main_without_command_exits(self):
        with pytest.raises(SystemExit):
            cli.main([])


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.search_depth == 2
        assert settings.mcts_budget == 200
        assert settings.seed is None
        assert settings.log_level == "WARNING"

    def test_overrides(self):
        settings = Settings.from_env({
            "SANTORINI_SEARCH_DEPTH": "3",
            "SANTORINI_MCTS_BUDGET": "50",
            "SANTORINI_SEED": "42",
            "SANTORINI_LOG_LEVEL": "debug",
            "SANTORINI_LOG_FILE": "santorini.log",
        })
        assert settings.search_depth == 3
        assert settings.mcts_budget == 50
        assert settings.seed == 42
        assert settings.log_level == "DEBUG"
        assert settings.log_file == "santorini.log"

    def test_rejects_non_positive_depth(self):
        with pytest.raises(ValueError):
            Settings.from_env({"SANTORINI_SEARCH_DEPTH": "0"})


class TestLoggingSetup:
    def test_console_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "santorini.log"
        setup_logging("info", log_file)

        logging.getLogger("santorini.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert logging.getLogger().level == logging.INFO
        assert "hello" in log_file.read_text()

        setup_logging(logging.WARNING)

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("chatty")
