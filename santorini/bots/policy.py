"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and returns a decision.
Decisions cover:
- Where to place workers during setup
- Which complete turn (Move) to play
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
import random

from ..engine_core.board import Position, all_positions
from ..engine_core.move_generator import Move
from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to play
    - Explanation (for UI/debugging)
    - Search statistics
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


def free_cells(state: GameState) -> list[Position]:
    """Cells without a worker, row-major."""
    taken = set(state.all_workers())
    return [p for p in all_positions() if p not in taken]


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects moves.
    Implementations range from uniform random choice
    to tree search.
    """

    @abstractmethod
    def select_move(
        self,
        state: GameState,
        legal_moves: list[Move],
    ) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            state: Current game state (SELECTING_WORKER phase)
            legal_moves: List of legal moves to choose from

        Returns:
            BotDecision with the selected move
        """
        pass

    @abstractmethod
    def select_placement(self, state: GameState) -> Position:
        """
        Choose a free cell for the next worker during setup.
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(
        self,
        state: GameState,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        move = self.rng.choice(legal_moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_moves),
            evaluated_actions=len(legal_moves),
        )

    def select_placement(self, state: GameState) -> Position:
        return self.rng.choice(free_cells(state))


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal move.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_move(
        self,
        state: GameState,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=legal_moves[0],
            explanation="Selected first legal move",
            evaluated_actions=1,
        )

    def select_placement(self, state: GameState) -> Position:
        return free_cells(state)[0]
