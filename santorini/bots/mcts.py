"""
Monte Carlo Tree Search bot.

Each iteration:
1. Selection: walk down fully expanded nodes with the tree policy (UCB1 or PUCT)
2. Expansion: add one untried move as a new child
3. Simulation: play out the game, taking a winning move whenever one exists
   and a uniformly random move otherwise
4. Backpropagation: credit the result to every node on the path

Node values are stored from the point of view of the player who made the
move leading to that node, in [-1, 1].
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
import math
import random

from .policy import BotPolicy, BotDecision, free_cells
from ..engine_core.board import Position
from ..engine_core.move_generator import Move, apply_move, legal_moves
from ..engine_core.state import GameState, Player


logger = logging.getLogger(__name__)


@dataclass
class MctsNode:
    """A search tree node; state is the position after move was played."""
    state: GameState
    move: Move | None = None
    parent: MctsNode | None = None
    children: list[MctsNode] = field(default_factory=list)
    untried: list[Move] | None = None
    visits: int = 0
    value: float = 0.0

    @property
    def mover(self) -> Player:
        """Player who made the move into this node."""
        if self.parent is None:
            return self.state.current_player.other
        return self.parent.state.current_player

    @property
    def mean(self) -> float:
        return self.value / self.visits if self.visits else 0.0

    def untried_moves(self) -> list[Move]:
        if self.untried is None:
            self.untried = [] if self.state.is_over else legal_moves(self.state)
        return self.untried

    def is_fully_expanded(self) -> bool:
        return not self.untried_moves()


class TreePolicy(ABC):
    """Chooses which child to descend into during selection."""

    def __init__(self, parameter: float = math.sqrt(2.0)):
        self.parameter = parameter

    @abstractmethod
    def weight(self, parent: MctsNode, child: MctsNode) -> float:
        pass

    def select(self, parent: MctsNode) -> MctsNode:
        best = None
        best_weight = -math.inf
        for child in parent.children:
            w = self.weight(parent, child)
            if w > best_weight:
                best, best_weight = child, w
        if best is None:
            raise ValueError("Node has no children to select from")
        return best


class UCB1(TreePolicy):
    def weight(self, parent: MctsNode, child: MctsNode) -> float:
        # Rescale to be between 0 and 1
        exploit = (1.0 + child.mean) / 2.0
        explore = math.sqrt(math.log(parent.visits) / child.visits)
        return exploit + self.parameter * explore


class PUCT(TreePolicy):
    def weight(self, parent: MctsNode, child: MctsNode) -> float:
        exploit = (1.0 + child.mean) / 2.0
        explore = math.sqrt(parent.visits) / child.visits
        return exploit + self.parameter * explore


TREE_POLICIES = {
    "ucb1": UCB1,
    "puct": PUCT,
}


class MctsBot(BotPolicy):
    """
    Santorini bot using Monte Carlo tree search.

    Usage:
        bot = MctsBot(budget=200, seed=7)
        decision = bot.select_move(state, legal_moves(state))
    """

    def __init__(
        self,
        budget: int = 200,
        tree_policy: TreePolicy | None = None,
        max_rollout_turns: int = 80,
        seed: int | None = None,
    ):
        if budget < 1:
            raise ValueError(f"MCTS budget must be positive, got {budget}")
        self.budget = budget
        self.tree_policy = tree_policy or UCB1()
        self.max_rollout_turns = max_rollout_turns
        self.rng = random.Random(seed)

    def get_name(self) -> str:
        return f"MCTS({self.tree_policy.__class__.__name__}, budget={self.budget})"

    def select_placement(self, state: GameState) -> Position:
        return self.rng.choice(free_cells(state))

    def select_move(self, state: GameState, legal_moves: list[Move]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        for move in legal_moves:
            if move.is_winning:
                return BotDecision(move=move, explanation="Immediate win", evaluated_actions=1)

        if len(legal_moves) == 1:
            return BotDecision(move=legal_moves[0], explanation="Only move", evaluated_actions=1)

        root = MctsNode(state=state, untried=list(legal_moves))
        for _ in range(self.budget):
            self._iterate(root)

        best = max(root.children, key=lambda c: c.visits)
        logger.debug(
            "MCTS picked %s after %d iterations (%d visits, mean %.3f)",
            best.move, self.budget, best.visits, best.mean,
        )
        return BotDecision(
            move=best.move,
            explanation=f"Most visited move ({best.visits}/{root.visits})",
            confidence=best.visits / root.visits,
            evaluated_actions=len(root.children),
            best_score=best.mean,
            evaluation_details={"iterations": self.budget},
        )

    def _iterate(self, root: MctsNode):
        node = root
        while not node.state.is_over and node.is_fully_expanded() and node.children:
            node = self.tree_policy.select(node)

        if not node.state.is_over and not node.is_fully_expanded():
            node = self._expand(node)

        winner = self._simulate(node.state)
        self._backpropagate(node, winner)

    def _expand(self, node: MctsNode) -> MctsNode:
        untried = node.untried_moves()
        move = untried.pop(self.rng.randrange(len(untried)))
        result = apply_move(node.state, move, record_history=False)
        child = MctsNode(state=result.new_state, move=move, parent=node)
        node.children.append(child)
        return child

    def _simulate(self, state: GameState) -> Player | None:
        """Play out the game; None when the turn cap is hit first."""
        for _ in range(self.max_rollout_turns):
            if state.is_over:
                return state.winner
            moves = legal_moves(state)
            winning = next((m for m in moves if m.is_winning), None)
            if winning is not None:
                return state.current_player
            state = apply_move(state, self.rng.choice(moves), record_history=False).new_state
        return state.winner

    def _backpropagate(self, node: MctsNode, winner: Player | None):
        while node is not None:
            node.visits += 1
            if winner is not None:
                node.value += 1.0 if winner == node.mover else -1.0
            node = node.parent
