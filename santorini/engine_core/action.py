"""
Action System - Actions, error codes, and results.

A full Santorini turn is three actions:
1. SELECT_WORKER - pick one of your workers
2. MOVE_TO - move it to an adjacent cell
3. BUILD_AT - build next to its new cell

Setup uses PLACE_WORKER, and RESIGN ends the game at any time after setup.
All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .board import Position


class ActionType(Enum):
    """Types of actions in the system."""
    PLACE_WORKER = "place_worker"
    SELECT_WORKER = "select_worker"
    MOVE_TO = "move_to"
    BUILD_AT = "build_at"
    RESIGN = "resign"


class ErrorCode(str, Enum):
    """Why an action was rejected."""
    INVALID_PLACEMENT = "InvalidPlacement"
    INVALID_SELECTION = "InvalidSelection"
    INVALID_DESTINATION = "InvalidDestination"
    INVALID_BUILD = "InvalidBuild"
    OUT_OF_PHASE = "OutOfPhase"
    GAME_ALREADY_OVER = "GameAlreadyOver"


@dataclass(frozen=True)
class Action:
    """
    A single sub-decision submitted to the reducer.

    Every action except RESIGN targets one cell.
    The acting player is always the state's current player.
    """
    action_type: ActionType
    position: Position | None = None

    @classmethod
    def place_worker(cls, position: Position) -> Action:
        return cls(ActionType.PLACE_WORKER, position)

    @classmethod
    def select_worker(cls, position: Position) -> Action:
        """Select the active player's worker standing on position."""
        return cls(ActionType.SELECT_WORKER, position)

    @classmethod
    def move_to(cls, position: Position) -> Action:
        return cls(ActionType.MOVE_TO, position)

    @classmethod
    def build_at(cls, position: Position) -> Action:
        return cls(ActionType.BUILD_AT, position)

    @classmethod
    def resign(cls) -> Action:
        return cls(ActionType.RESIGN)

    def __str__(self) -> str:
        if self.position is None:
            return self.action_type.value
        return f"{self.action_type.value} {self.position}"


@dataclass
class ActionResult:
    """
    Result of applying an action.

    On failure new_state is None and the submitted state is untouched.
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    # Human-readable changes for the front end
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
