"""
Tests for sessions, the game loop and bot tournaments.
"""

import pytest

from ..bots import FirstLegalPolicy, HeuristicBot, RandomPolicy
from ..engine_core.action import Action, ErrorCode
from ..engine_core.board import Position
from ..engine_core.state import Phase, Player
from ..session import (
    Contestant,
    EloConfig,
    GameLoop,
    GameSession,
    LoopState,
    SessionState,
    Tournament,
    default_contestants,
    play_match,
)
from ..session.tournament import expected_score


P = Position


class TestGameSession:
    def test_lifecycle_states(self):
        session = GameSession()
        assert session.state == SessionState.SETUP

        for pos in (P(0, 0), P(4, 4), P(0, 1), P(4, 3)):
            assert session.submit(Action.place_worker(pos)).success
        assert session.state == SessionState.ACTIVE

        assert session.resign().success
        assert session.state == SessionState.GAME_OVER
        assert session.outcome().winner == 2

    def test_rejected_action_keeps_state(self):
        session = GameSession()
        before = session.game_state

        result = session.submit(Action.move_to(P(1, 1)))

        assert result.error_code == ErrorCode.OUT_OF_PHASE
        assert session.game_state is before

    def test_play_move(self, opening_state):
        session = GameSession(game_state=opening_state)
        move = session.legal_moves()[0]

        assert session.play_move(move).success
        assert session.game_state.current_player == Player.TWO


class TestGameLoop:
    def test_bot_game_finishes(self):
        loop = GameLoop(
            GameSession(),
            bots={Player.ONE: RandomPolicy(seed=5), Player.TWO: RandomPolicy(seed=6)},
        )
        result = loop.run()

        assert result.winner in (Player.ONE, Player.TWO)
        assert loop.state == LoopState.GAME_OVER
        assert len(result.moves) >= 4
        assert result.no_legal_move == (loop.session.game_state.phase == Phase.NO_LEGAL_MOVE)

    def test_heuristic_bot_plays_full_game(self):
        loop = GameLoop(
            GameSession(),
            bots={Player.ONE: HeuristicBot(depth=1, seed=1), Player.TWO: FirstLegalPolicy()},
        )
        result = loop.run()
        assert result.winner is not None

    def test_stops_for_human(self):
        loop = GameLoop(GameSession(), bots={Player.TWO: RandomPolicy(seed=1)})
        assert loop.is_human_turn()
        assert loop.run_bots() == []

        loop.session.submit(Action.place_worker(P(0, 0)))
        results = loop.run_bots()

        assert len(results) == 1
        assert results[0].success
        assert loop.state == LoopState.WAITING_HUMAN_ACTION

    def test_step_without_bot(self):
        loop = GameLoop(GameSession(), bots={})
        result = loop.step()

        assert not result.success
        assert result.loop_state == LoopState.WAITING_HUMAN_ACTION

    def test_run_needs_both_bots(self):
        loop = GameLoop(GameSession(), bots={Player.ONE: RandomPolicy()})
        with pytest.raises(ValueError):
            loop.run()


class TestElo:
    def test_expected_score(self):
        assert expected_score(1500, 1500) == pytest.approx(0.5)
        assert expected_score(1900, 1500) == pytest.approx(10 / 11)
        assert expected_score(1500, 1900) + expected_score(1900, 1500) == pytest.approx(1.0)

    def test_play_match_scores(self):
        score = play_match(RandomPolicy(seed=2), FirstLegalPolicy())
        assert score in (0.0, 1.0)

    def test_rounds_follow_k_schedule(self):
        contestants = [
            Contestant("Random", lambda: RandomPolicy(seed=3)),
            Contestant("First", FirstLegalPolicy),
        ]
        config = EloConfig(k_start=20.0, k_decay=0.5, k_min=5.0, games_per_pair=1)
        seen = []

        rounds = Tournament(contestants, config, on_round=seen.append).run()

        assert [r.k for r in rounds] == [20.0, 10.0, 5.0]
        assert seen == rounds
        assert sum(rounds[-1].ratings.values()) == pytest.approx(3000.0)
        assert all(c.games == 3 for c in contestants)

    def test_seeded_games_in_a_pairing_differ(self):
        random_bot = default_contestants(seed=7)[0]
        games = [
            tuple(GameLoop(GameSession(), bots={
                Player.ONE: random_bot.factory(),
                Player.TWO: random_bot.factory(),
            }).run().moves)
            for _ in range(5)
        ]
        assert len(set(games)) > 1

    def test_seeded_contestants_are_reproducible(self):
        first = [c.factory().rng.random() for c in default_contestants(seed=7)]
        second = [c.factory().rng.random() for c in default_contestants(seed=7)]
        assert first == second

    def test_needs_two_contestants(self):
        with pytest.raises(ValueError):
            Tournament([Contestant("Solo", FirstLegalPolicy)])
