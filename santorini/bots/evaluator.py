"""
Heuristic Evaluator - Scores game states for bot decision-making.

Scoring is lexicographic:
1. A won game dominates everything (MAX_SCORE / MIN_SCORE)
2. Otherwise a positional score combines:
   - Proximity: stay close to the opponent's workers to block them
   - Height: stand tall, next to tall cells

Only the ordering of scores matters; the numbers themselves are not stable API.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math

from ..engine_core.board import Position, neighbors
from ..engine_core.state import GameState, Player, Phase


MAX_SCORE = math.inf
MIN_SCORE = -math.inf


@dataclass
class EvaluationWeights:
    """
    Weights for the positional score.

    Held fixed so search results are reproducible.
    """
    proximity: float = 1.0
    height: float = 2.0


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


def effective_height(state: GameState, position: Position) -> float:
    """Cell height plus the mean height of its neighbors."""
    board = state.board
    around = [board.height(p) for p in neighbors(position)]
    return board.height(position) + sum(around) / len(around)


def proximity_term(state: GameState, player: Player) -> float:
    """Negative sum of distances between every own/opponent worker pair."""
    total = 0
    for mine in state.workers[player]:
        for theirs in state.workers[player.other]:
            total += mine.distance(theirs)
    return -float(total)


def height_term(state: GameState, player: Player) -> float:
    mine = sum(effective_height(state, p) for p in state.workers[player])
    theirs = sum(effective_height(state, p) for p in state.workers[player.other])
    return mine - theirs


def terminal_score(state: GameState, player: Player) -> float | None:
    """MAX_SCORE/MIN_SCORE for finished games, None while play continues."""
    if state.phase not in (Phase.WON, Phase.NO_LEGAL_MOVE):
        return None
    return MAX_SCORE if state.winner == player else MIN_SCORE


class HeuristicEvaluator:
    """
    Evaluates game states from one player's perspective.

    Used by the heuristic bot at the leaves of its search tree.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def score(self, state: GameState, for_player: Player) -> float:
        """Evaluate and return only the total (the search hot path)."""
        terminal = terminal_score(state, for_player)
        if terminal is not None:
            return terminal
        return (
            self.weights.proximity * proximity_term(state, for_player)
            + self.weights.height * height_term(state, for_player)
        )

    def evaluate(self, state: GameState, for_player: Player) -> StateEvaluation:
        """
        Evaluate a game state with a per-feature breakdown.

        Higher is better for for_player.
        """
        terminal = terminal_score(state, for_player)
        if terminal is not None:
            return StateEvaluation(
                total_score=terminal,
                feature_breakdown={"terminal": terminal},
            )

        features = {
            "proximity": proximity_term(state, for_player),
            "height": height_term(state, for_player),
        }
        total = (
            self.weights.proximity * features["proximity"]
            + self.weights.height * features["height"]
        )
        return StateEvaluation(total_score=total, feature_breakdown=features)


def evaluate(state: GameState, player: Player) -> float:
    """Score state for player with the default weights."""
    return HeuristicEvaluator().score(state, player)
