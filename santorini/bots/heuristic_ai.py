"""
Heuristic AI - Bounded-depth minimax over complete turns.

The search:
- Expands every legal Move with the move generator
- Alternates maximizing (the player to move) and minimizing (the opponent) layers
- Scores leaves and finished games with the HeuristicEvaluator

Depth counts full turns, not sub-actions. Ties go to the first move in
generation order, so results are deterministic for a given state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator
import logging
import random
import time

from .evaluator import HeuristicEvaluator, MAX_SCORE, MIN_SCORE
from .policy import BotPolicy, BotDecision, free_cells
from ..engine_core.board import Position
from ..engine_core.move_generator import Move, apply_move, generate_moves
from ..engine_core.state import GameState, Player, Phase


logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 2


@dataclass(frozen=True)
class NoLegalMove:
    """The player to move cannot complete a turn and has lost."""
    player: Player


@dataclass
class SearchResult:
    """Best move found plus statistics."""
    move: Move | None
    score: float
    nodes: int = 0
    root_moves: int = 0
    completed: bool = True


def _children(state: GameState, moves: Iterable[Move] | None = None) -> Iterator[tuple[Move, GameState]]:
    """Yield (move, resulting state) pairs; each child is an independent copy."""
    if moves is None:
        moves = generate_moves(state)
    for move in moves:
        result = apply_move(state, move, record_history=False)
        if not result.success:
            raise ValueError(f"Generated move {move} was rejected: {result.error}")
        yield move, result.new_state


class MinimaxSearch:
    """
    Depth-limited minimax from a fixed player's perspective.

    Usage:
        search = MinimaxSearch(depth=2)
        result = search.run(state)
        result.move  # best Move, or None when the player is stuck
    """

    def __init__(
        self,
        depth: int = DEFAULT_DEPTH,
        evaluator: HeuristicEvaluator | None = None,
        time_limit: float | None = None,
    ):
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.depth = depth
        self.evaluator = evaluator or HeuristicEvaluator()
        self.time_limit = time_limit
        self._nodes = 0

    def run(self, state: GameState, moves: Iterable[Move] | None = None) -> SearchResult:
        """
        Search from a state at the start of a turn.

        With a time limit, the search stops between root moves once the
        limit passes and returns the best move seen so far.
        """
        player = state.current_player
        deadline = None
        if self.time_limit is not None:
            deadline = time.monotonic() + self.time_limit

        self._nodes = 0
        best_move = None
        best_score = MIN_SCORE
        root_moves = 0
        completed = True

        for move, child in _children(state, moves):
            if deadline is not None and best_move is not None and time.monotonic() >= deadline:
                completed = False
                break

            root_moves += 1
            value = self._minimax(child, self.depth - 1, False, player)
            if best_move is None or value > best_score:
                best_move = move
                best_score = value
            if best_score == MAX_SCORE:
                break

        logger.debug(
            "Searched %d root moves / %d nodes for %s at depth %d: best %s (%.3f)",
            root_moves, self._nodes, player, self.depth, best_move, best_score,
        )
        return SearchResult(
            move=best_move,
            score=best_score,
            nodes=self._nodes,
            root_moves=root_moves,
            completed=completed,
        )

    def _minimax(self, state: GameState, depth: int, maximizing: bool, player: Player) -> float:
        self._nodes += 1
        if depth == 0 or state.is_over:
            return self.evaluator.score(state, player)

        best = MIN_SCORE if maximizing else MAX_SCORE
        expanded = False
        for _, child in _children(state):
            expanded = True
            value = self._minimax(child, depth - 1, not maximizing, player)
            if maximizing:
                best = max(best, value)
                if best == MAX_SCORE:
                    break
            else:
                best = min(best, value)
                if best == MIN_SCORE:
                    break

        if not expanded:
            return self.evaluator.score(state, player)
        return best


def choose_move(
    state: GameState,
    depth: int = DEFAULT_DEPTH,
    evaluator: HeuristicEvaluator | None = None,
) -> Move | NoLegalMove:
    """
    Pick the best Move for the player to move, or report NoLegalMove.

    The state must be at the start of a turn (or already stuck).
    """
    if state.phase == Phase.NO_LEGAL_MOVE:
        return NoLegalMove(state.current_player)
    if state.phase != Phase.SELECTING_WORKER:
        raise ValueError(f"Cannot choose a move while {state.phase.value}")

    result = MinimaxSearch(depth=depth, evaluator=evaluator).run(state)
    if result.move is None:
        return NoLegalMove(state.current_player)
    return result.move


class HeuristicBot(BotPolicy):
    """
    Santorini bot backed by minimax search.

    Usage:
        bot = HeuristicBot(depth=2)
        decision = bot.select_move(state, legal_moves(state))
    """

    def __init__(
        self,
        depth: int = DEFAULT_DEPTH,
        evaluator: HeuristicEvaluator | None = None,
        seed: int | None = None,
        time_limit: float | None = None,
    ):
        self.search = MinimaxSearch(depth=depth, evaluator=evaluator, time_limit=time_limit)
        self.rng = random.Random(seed)

    def select_move(self, state: GameState, legal_moves: list[Move]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        result = self.search.run(state, legal_moves)
        return BotDecision(
            move=result.move,
            explanation=self._explain(result),
            evaluated_actions=result.root_moves,
            best_score=result.score,
            evaluation_details={"nodes": result.nodes, "completed": result.completed},
        )

    def select_placement(self, state: GameState) -> Position:
        """Random free cell away from the edge, if one is left."""
        cells = free_cells(state)
        interior = [p for p in cells if 1 <= p.row <= 3 and 1 <= p.col <= 3]
        return self.rng.choice(interior or cells)

    def get_name(self) -> str:
        return f"Heuristic(depth={self.search.depth})"

    def _explain(self, result: SearchResult) -> str:
        if result.score == MAX_SCORE:
            return "Found a forced win"
        if result.score == MIN_SCORE:
            return "Every line loses; playing the first one"
        return f"Best positional score {result.score:.2f}"
