"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying; a rejected action leaves the state untouched
- Returns ActionResult with success/failure
- Every (phase, action type) pairing is either handled or OUT_OF_PHASE
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .board import MAX_HEIGHT, Position
from .state import GameState, Phase, WORKERS_PER_PLAYER
from .action import Action, ActionType, ActionResult, ErrorCode
from .move_generator import (
    can_build_at, can_move_to, has_legal_move, legal_builds, legal_destinations,
)


logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    Search turns off history recording to keep branch copies small.
    """
    record_history: bool = True

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        if state.is_over:
            return ActionResult.failure(
                f"Game is over - {state.winner} already won",
                error_code=ErrorCode.GAME_ALREADY_OVER,
            )

        handler = self._get_handler(state.phase, action.action_type)
        if not handler:
            return ActionResult.failure(
                f"Cannot {action.action_type.value} while {state.phase.value}",
                error_code=ErrorCode.OUT_OF_PHASE,
            )

        result = handler(state, action)
        if result.success and self.record_history:
            result.new_state = result.new_state._copy_with(
                action_history=state.action_history + (action,),
            )
        return result

    def _get_handler(self, phase: Phase, action_type: ActionType):
        """Get the handler for a phase/action pairing."""
        if action_type == ActionType.RESIGN and phase != Phase.PLACING_WORKERS:
            return self._handle_resign

        handlers = {
            (Phase.PLACING_WORKERS, ActionType.PLACE_WORKER): self._handle_place,
            (Phase.SELECTING_WORKER, ActionType.SELECT_WORKER): self._handle_select,
            (Phase.CHOOSING_DESTINATION, ActionType.MOVE_TO): self._handle_move,
            (Phase.CHOOSING_BUILD_SITE, ActionType.BUILD_AT): self._handle_build,
        }
        return handlers.get((phase, action_type))

    def _handle_place(self, state: GameState, action: Action) -> ActionResult:
        """Handle setup placement: P1, P2, P1, P2."""
        pos = action.position
        player = state.current_player

        if pos is None or not pos.in_bounds:
            return ActionResult.failure(
                f"Cannot place a worker off the board at {pos}",
                error_code=ErrorCode.INVALID_PLACEMENT,
            )
        if state.is_occupied(pos):
            return ActionResult.failure(
                f"Cell {pos} already has a worker",
                error_code=ErrorCode.INVALID_PLACEMENT,
            )

        new_state = state.with_worker_added(player, pos)
        placed = len(new_state.all_workers())
        changes = [f"{player} placed a worker at {pos}"]

        if placed < 2 * WORKERS_PER_PLAYER:
            new_state = new_state._copy_with(current_player=player.other)
            return ActionResult.success_with_state(new_state, changes=changes)

        logger.debug("Setup complete, %s to move", player.other)
        new_state = new_state._copy_with(
            current_player=player.other,
            phase=Phase.SELECTING_WORKER,
            turn_number=1,
        )
        return ActionResult.success_with_state(self._begin_turn(new_state), changes=changes)

    def _handle_select(self, state: GameState, action: Action) -> ActionResult:
        """Handle worker selection."""
        pos = action.position
        player = state.current_player

        index = state.worker_index(player, pos) if pos is not None else None
        if index is None:
            return ActionResult.failure(
                f"{player} has no worker at {pos}",
                error_code=ErrorCode.INVALID_SELECTION,
            )

        if not any(True for _ in legal_destinations(state, pos)):
            return ActionResult.failure(
                f"Worker at {pos} has nowhere to move",
                error_code=ErrorCode.INVALID_SELECTION,
            )

        new_state = state._copy_with(
            phase=Phase.CHOOSING_DESTINATION,
            selected_worker=index,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{player} selected the worker at {pos}"],
        )

    def _handle_move(self, state: GameState, action: Action) -> ActionResult:
        """Handle moving the selected worker. Reaching height 3 wins."""
        origin = state.selected_position
        dest = action.position
        player = state.current_player

        if dest is None or not can_move_to(state, origin, dest):
            return ActionResult.failure(
                f"Worker at {origin} cannot move to {dest}",
                error_code=ErrorCode.INVALID_DESTINATION,
            )

        new_state = state.with_worker_moved(player, state.selected_worker, dest)
        changes = [f"{player} moved {origin} -> {dest}"]

        if state.board.height(dest) == MAX_HEIGHT:
            logger.debug("%s wins by climbing to %s", player, dest)
            new_state = new_state._copy_with(
                phase=Phase.WON,
                winner=player,
                selected_worker=None,
            )
            return ActionResult.success_with_state(
                new_state,
                changes=changes + [f"{player} reached the third level and wins"],
            )

        if not any(True for _ in legal_builds(new_state, dest)):
            return ActionResult.failure(
                f"No build site next to {dest}",
                error_code=ErrorCode.INVALID_DESTINATION,
            )

        new_state = new_state._copy_with(phase=Phase.CHOOSING_BUILD_SITE)
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_build(self, state: GameState, action: Action) -> ActionResult:
        """Handle building next to the moved worker, then pass the turn."""
        builder = state.selected_position
        site = action.position
        player = state.current_player

        if site is None or not can_build_at(state, builder, site):
            return ActionResult.failure(
                f"Worker at {builder} cannot build at {site}",
                error_code=ErrorCode.INVALID_BUILD,
            )

        new_board = state.board.with_build(site)
        built = "a dome" if new_board.is_capped(site) else f"level {new_board.height(site)}"

        new_state = state._copy_with(
            board=new_board,
            current_player=player.other,
            phase=Phase.SELECTING_WORKER,
            selected_worker=None,
            turn_number=state.turn_number + 1,
        )
        return ActionResult.success_with_state(
            self._begin_turn(new_state),
            changes=[f"{player} built {built} at {site}"],
        )

    def _handle_resign(self, state: GameState, action: Action) -> ActionResult:
        """Handle resignation - the opponent wins."""
        player = state.current_player
        logger.debug("%s resigned", player)
        new_state = state._copy_with(
            phase=Phase.WON,
            winner=player.other,
            current_player=player.other,
            selected_worker=None,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{player} resigned, {player.other} wins"],
        )

    def _begin_turn(self, state: GameState) -> GameState:
        """Start-of-turn check: a player who cannot move loses."""
        player = state.current_player
        if has_legal_move(state, player):
            return state

        logger.debug("%s has no legal move, %s wins", player, player.other)
        return state._copy_with(
            phase=Phase.NO_LEGAL_MOVE,
            winner=player.other,
        )


def apply_action(state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)


def place_workers(state: GameState, positions: list[Position]) -> GameState:
    """
    Run the whole setup phase from a list of four cells (P1, P2, P1, P2).

    Raises ValueError if any placement is rejected.
    """
    for pos in positions:
        result = apply_action(state, Action.place_worker(pos))
        if not result.success:
            raise ValueError(result.error)
        state = result.new_state
    return state
