"""
Game Loop - Drives bots through a session.

The loop:
1. Setup: each bot places its workers (P1, P2, P1, P2)
2. Each turn: the bot to move picks a Move from the move generator
3. The move is applied through the session
4. Repeat until somebody wins or a player is stuck

Seats without a bot belong to a human; the loop stops and hands control
back to the front end on their turns.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging

from ..bots.policy import BotPolicy
from ..engine_core.action import Action
from ..engine_core.state import Phase, Player
from .manager import GameSession


logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    RUNNING_BOT = "running_bot"
    WAITING_HUMAN_ACTION = "waiting_human_action"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing one bot decision.
    """
    success: bool
    loop_state: LoopState
    player: Player | None = None
    description: str = ""
    errors: list[str] = field(default_factory=list)
    winner: Player | None = None


@dataclass
class MatchResult:
    """How a finished game ended."""
    winner: Player | None
    turns: int
    no_legal_move: bool = False
    moves: list[str] = field(default_factory=list)


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session, bots={Player.ONE: HeuristicBot(), Player.TWO: RandomPolicy()})
        result = loop.run()
        result.winner
    """

    def __init__(
        self,
        session: GameSession,
        bots: dict[Player, BotPolicy],
        max_turns: int = 400,
    ):
        self.session = session
        self.bots = bots
        self.max_turns = max_turns
        self.history: list[str] = []

    @property
    def state(self) -> LoopState:
        game = self.session.game_state
        if game.is_over:
            return LoopState.GAME_OVER
        if game.current_player in self.bots:
            return LoopState.RUNNING_BOT
        return LoopState.WAITING_HUMAN_ACTION

    def is_human_turn(self) -> bool:
        return self.state == LoopState.WAITING_HUMAN_ACTION

    def step(self) -> TurnResult:
        """Let the bot to move make one decision (a placement or a whole turn)."""
        game = self.session.game_state
        if self.state != LoopState.RUNNING_BOT:
            return TurnResult(
                success=False,
                loop_state=self.state,
                errors=["No bot to move"],
                winner=game.winner,
            )

        player = game.current_player
        bot = self.bots[player]

        if game.phase == Phase.PLACING_WORKERS:
            pos = bot.select_placement(game)
            result = self.session.submit(Action.place_worker(pos))
            description = f"{player} ({bot.get_name()}) placed a worker at {pos}"
        else:
            decision = bot.select_move(game, self.session.legal_moves())
            result = self.session.play_move(decision.move)
            description = f"{player} ({bot.get_name()}): {decision.move}"

        if not result.success:
            # Bots choose from generated moves, so this is a bug in the bot
            logger.error("%s made an illegal choice: %s", bot.get_name(), result.error)
            return TurnResult(
                success=False,
                loop_state=self.state,
                player=player,
                errors=[result.error],
            )

        self.history.append(description)
        logger.debug(description)
        return TurnResult(
            success=True,
            loop_state=self.state,
            player=player,
            description=description,
            winner=self.session.game_state.winner,
        )

    def run_bots(self) -> list[TurnResult]:
        """Run bot decisions until a human is to move or the game ends."""
        results = []
        while self.state == LoopState.RUNNING_BOT:
            result = self.step()
            results.append(result)
            if not result.success:
                break
        return results

    def run(self) -> MatchResult:
        """
        Play a full bot-vs-bot game.

        Raises ValueError if a seat has no bot.
        """
        missing = [p for p in Player if p not in self.bots]
        if missing:
            raise ValueError(f"No bot for {', '.join(str(p) for p in missing)}")

        decisions = 0
        while not self.session.game_state.is_over and decisions < self.max_turns:
            result = self.step()
            if not result.success:
                raise RuntimeError(f"Game loop stalled: {result.errors}")
            decisions += 1

        game = self.session.game_state
        if game.is_over:
            logger.info("Game over after %d turns: %s wins", game.turn_number, game.winner)
        else:
            logger.warning("Game stopped after %d decisions without a winner", decisions)

        return MatchResult(
            winner=game.winner,
            turns=game.turn_number,
            no_legal_move=game.phase == Phase.NO_LEGAL_MOVE,
            moves=list(self.history),
        )
