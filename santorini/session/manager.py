"""
Session Manager - The live game session.

A session is one play-through:
- Created when a game starts
- Holds the current canonical GameState
- Accepts one action at a time from a front end or a bot
- Discarded when the game ends (nothing is persisted)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import uuid

from ..api.schemas import GameOutcome, GameSnapshot
from ..api.service import build_snapshot, game_outcome
from ..engine_core.action import Action, ActionResult
from ..engine_core.move_generator import Move, apply_move, legal_moves
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, Phase


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    SETUP = "setup"  # Workers still being placed
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed


@dataclass
class GameSession:
    """
    An ephemeral game session.

    The session is the only holder of the live GameState; every change goes
    through submit(), which leaves the state untouched on failure.
    """
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    game_state: GameState = field(default_factory=GameState.new_game)
    reducer: Reducer = field(default_factory=Reducer)

    @property
    def state(self) -> SessionState:
        if self.game_state.is_over:
            return SessionState.GAME_OVER
        if self.game_state.phase == Phase.PLACING_WORKERS:
            return SessionState.SETUP
        return SessionState.ACTIVE

    def submit(self, action: Action) -> ActionResult:
        """Apply one action; the session advances only on success."""
        result = self.reducer.apply(self.game_state, action)
        if result.success:
            self.game_state = result.new_state
            for change in result.state_changes:
                logger.debug("[%s] %s", self.session_id[:8], change)
        else:
            logger.debug(
                "[%s] rejected %s: %s", self.session_id[:8], action, result.error_code.value,
            )
        return result

    def play_move(self, move: Move) -> ActionResult:
        """Apply a whole turn at once (as bots do)."""
        result = apply_move(self.game_state, move)
        if result.success:
            self.game_state = result.new_state
        return result

    def resign(self) -> ActionResult:
        return self.submit(Action.resign())

    def legal_moves(self) -> list[Move]:
        return legal_moves(self.game_state)

    def snapshot(self) -> GameSnapshot:
        return build_snapshot(self.game_state)

    def outcome(self) -> GameOutcome:
        return game_outcome(self.game_state)
