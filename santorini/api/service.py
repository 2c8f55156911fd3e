"""
API Service - Converts between engine objects and front-end schemas.

The service is stateless:
- build_snapshot() turns a GameState into a GameSnapshot
- parse_action() turns an ActionRequest into an engine Action
- to_response() turns an ActionResult into an ActionResponse
"""

from __future__ import annotations
from typing import Any

from ..engine_core.action import Action, ActionResult, ActionType
from ..engine_core.board import Position, all_positions, BOARD_SIZE
from ..engine_core.move_generator import legal_builds, legal_destinations
from ..engine_core.state import GameState, Phase
from .schemas import (
    ActionKind,
    ActionRequest,
    ActionResponse,
    CellInfo,
    GameOutcome,
    GameSnapshot,
    PhaseName,
    PositionModel,
    WorkerInfo,
)


_ACTION_TYPES = {
    ActionKind.PLACE_WORKER: ActionType.PLACE_WORKER,
    ActionKind.SELECT_WORKER: ActionType.SELECT_WORKER,
    ActionKind.MOVE_TO: ActionType.MOVE_TO,
    ActionKind.BUILD_AT: ActionType.BUILD_AT,
    ActionKind.RESIGN: ActionType.RESIGN,
}


def legal_targets(state: GameState) -> list[Position]:
    """Cells that are valid for the next sub-action in the current phase."""
    if state.phase == Phase.PLACING_WORKERS:
        taken = set(state.all_workers())
        return [p for p in all_positions() if p not in taken]

    if state.phase == Phase.SELECTING_WORKER:
        return [
            pos for pos in state.active_workers
            if any(True for _ in legal_destinations(state, pos))
        ]

    if state.phase == Phase.CHOOSING_DESTINATION:
        return list(legal_destinations(state, state.selected_position))

    if state.phase == Phase.CHOOSING_BUILD_SITE:
        return list(legal_builds(state, state.selected_position))

    return []


def game_outcome(state: GameState) -> GameOutcome:
    if not state.is_over:
        return GameOutcome(is_over=False)

    stuck = state.phase == Phase.NO_LEGAL_MOVE
    return GameOutcome(
        is_over=True,
        winner=state.winner.value if state.winner else None,
        no_legal_move=stuck,
        stuck_player=state.current_player.value if stuck else None,
    )


def build_snapshot(state: GameState) -> GameSnapshot:
    """Read-only render state for a front end."""
    occupants = {
        pos: player.value
        for player, locs in state.workers.items()
        for pos in locs
    }
    board = state.board
    cells = [
        [
            CellInfo(
                row=r,
                col=c,
                height=board.height(Position(r, c)),
                capped=board.is_capped(Position(r, c)),
                occupant=occupants.get(Position(r, c)),
            )
            for c in range(BOARD_SIZE)
        ]
        for r in range(BOARD_SIZE)
    ]

    workers = []
    for player, locs in state.workers.items():
        for idx, pos in enumerate(locs):
            workers.append(WorkerInfo(
                player=player.value,
                index=idx,
                row=pos.row,
                col=pos.col,
                selected=(player == state.current_player and idx == state.selected_worker),
            ))

    return GameSnapshot(
        phase=PhaseName(state.phase.value),
        current_player=state.current_player.value,
        turn_number=state.turn_number,
        cells=cells,
        workers=workers,
        highlights=[PositionModel(row=p.row, col=p.col) for p in legal_targets(state)],
        outcome=game_outcome(state),
    )


def parse_action(request: ActionRequest | dict[str, Any]) -> Action:
    """
    Convert a request (or its dict form) into an engine Action.

    Raises pydantic.ValidationError for malformed input and ValueError
    when a positional action has no position.
    """
    if not isinstance(request, ActionRequest):
        request = ActionRequest.model_validate(request)

    action_type = _ACTION_TYPES[request.action_type]
    if action_type == ActionType.RESIGN:
        return Action.resign()
    if request.position is None:
        raise ValueError(f"{request.action_type.value} needs a position")

    return Action(action_type, Position(request.position.row, request.position.col))


def to_response(result: ActionResult) -> ActionResponse:
    return ActionResponse(
        success=result.success,
        error=result.error,
        error_code=result.error_code.value if result.error_code else None,
        changes=result.state_changes,
    )
