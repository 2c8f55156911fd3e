"""
Elo tournament between bot policies.

Every round, each pair of contestants plays a fixed number of games with
the first-listed contestant as Player 1. Rating changes are accumulated over
the round and applied together, then K shrinks until it drops below k_min.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import random

from ..bots.heuristic_ai import HeuristicBot
from ..bots.mcts import MctsBot, PUCT
from ..bots.policy import BotPolicy, RandomPolicy
from ..engine_core.state import Player
from .game_loop import GameLoop
from .manager import GameSession


logger = logging.getLogger(__name__)


@dataclass
class EloConfig:
    initial_rating: float = 1500.0
    k_start: float = 100.0
    k_decay: float = 0.75
    k_min: float = 10.0
    games_per_pair: int = 5


@dataclass
class Contestant:
    name: str
    factory: Callable[[], BotPolicy]
    rating: float = 1500.0
    diff: float = 0.0
    games: int = 0


@dataclass
class TournamentRound:
    k: float
    ratings: dict[str, float] = field(default_factory=dict)


def expected_score(rating_a: float, rating_b: float) -> float:
    return 1.0 / (1.0 + 10 ** ((rating_b - rating_a) / 400.0))


def play_match(p1: BotPolicy, p2: BotPolicy) -> float:
    """Play one game; 1.0 if Player 1 wins, 0.0 if Player 2 wins, 0.5 otherwise."""
    loop = GameLoop(GameSession(), bots={Player.ONE: p1, Player.TWO: p2})
    result = loop.run()
    if result.winner == Player.ONE:
        return 1.0
    if result.winner == Player.TWO:
        return 0.0
    return 0.5


class Tournament:
    """
    Round-robin Elo rating of bot policies.

    Usage:
        tournament = Tournament([Contestant("Random", RandomPolicy), ...])
        rounds = tournament.run()
    """

    def __init__(
        self,
        contestants: list[Contestant],
        config: EloConfig | None = None,
        on_round: Callable[[TournamentRound], None] | None = None,
    ):
        if len(contestants) < 2:
            raise ValueError("A tournament needs at least two contestants")
        self.config = config or EloConfig()
        self.contestants = contestants
        for c in self.contestants:
            c.rating = self.config.initial_rating
        self.on_round = on_round

    @property
    def ratings(self) -> dict[str, float]:
        return {c.name: c.rating for c in self.contestants}

    def play_round(self, k: float) -> TournamentRound:
        for i, first in enumerate(self.contestants):
            for second in self.contestants[i + 1:]:
                for _ in range(self.config.games_per_pair):
                    score = play_match(first.factory(), second.factory())
                    delta = k * (score - expected_score(first.rating, second.rating))
                    first.diff += delta
                    second.diff -= delta
                    first.games += 1
                    second.games += 1

        for c in self.contestants:
            c.rating += c.diff
            c.diff = 0.0

        summary = TournamentRound(k=k, ratings=self.ratings)
        logger.info("Round with K=%.1f: %s", k, summary.ratings)
        return summary

    def run(self) -> list[TournamentRound]:
        rounds = []
        k = self.config.k_start
        while k >= self.config.k_min:
            summary = self.play_round(k)
            rounds.append(summary)
            if self.on_round:
                self.on_round(summary)
            k *= self.config.k_decay
        return rounds


def default_contestants(
    depth: int = 1,
    budget: int = 100,
    seed: int | None = None,
) -> list[Contestant]:
    """
    Random, heuristic and both MCTS flavours.

    With a seed, every bot instance draws its own seed from one shared
    generator, so repeated games in a pairing differ but the whole
    tournament is reproducible.
    """
    next_seed = _seed_source(seed)
    return [
        Contestant("Random", lambda: RandomPolicy(seed=next_seed())),
        Contestant("Heuristic", lambda: HeuristicBot(depth=depth, seed=next_seed())),
        Contestant("MCTS UCT", lambda: MctsBot(budget=budget, seed=next_seed())),
        Contestant("MCTS PUCT", lambda: MctsBot(budget=budget, tree_policy=PUCT(), seed=next_seed())),
    ]


def _seed_source(seed: int | None) -> Callable[[], int | None]:
    if seed is None:
        return lambda: None
    rng = random.Random(seed)
    return lambda: rng.randrange(2 ** 32)
