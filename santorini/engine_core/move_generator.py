"""
Move Generator - Enumerates complete legal turns.

The move generator is used by:
1. The reducer, to validate selections and detect stuck players
2. Bots, to enumerate candidate turns for search
3. Front ends, to highlight legal cells

A Move bundles the three sub-actions of a turn (select, move, build).
Generation is lazy and recomputed on every call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, TYPE_CHECKING

from .board import MAX_HEIGHT, Position, neighbors
from .state import GameState, Player, Phase

if TYPE_CHECKING:
    from .action import ActionResult


@dataclass(frozen=True)
class Move:
    """
    One complete turn.

    build is None when the destination wins outright.
    """
    worker: Position
    destination: Position
    build: Position | None

    @property
    def is_winning(self) -> bool:
        return self.build is None

    def __str__(self) -> str:
        text = f"{self.worker} -> {self.destination}"
        if self.build is not None:
            text += f", build {self.build}"
        return text


def _is_free(state: GameState, position: Position, vacated: Position | None = None) -> bool:
    if position == vacated:
        return True
    return not state.is_occupied(position)


def can_move_to(state: GameState, origin: Position, destination: Position) -> bool:
    """Adjacency, occupancy, dome and climb rules for a single step."""
    board = state.board
    if not destination.in_bounds or not origin.is_adjacent(destination):
        return False
    if board.is_capped(destination) or state.is_occupied(destination):
        return False
    return board.height(destination) - board.height(origin) <= 1


def can_build_at(
    state: GameState,
    builder: Position,
    site: Position,
    vacated: Position | None = None,
) -> bool:
    """
    Build rules for a worker standing on builder.

    vacated marks a cell that is free because its worker is (hypothetically)
    standing on builder instead.
    """
    if not site.in_bounds or not builder.is_adjacent(site):
        return False
    if state.board.is_capped(site):
        return False
    return _is_free(state, site, vacated) and site != builder


def legal_builds(
    state: GameState,
    builder: Position,
    vacated: Position | None = None,
) -> Iterator[Position]:
    for site in neighbors(builder):
        if can_build_at(state, builder, site, vacated):
            yield site


def legal_destinations(state: GameState, origin: Position) -> Iterator[Position]:
    """
    Destinations that complete a legal turn from origin.

    Non-winning destinations must leave at least one build site.
    """
    for dest in neighbors(origin):
        if not can_move_to(state, origin, dest):
            continue
        if state.board.height(dest) == MAX_HEIGHT:
            yield dest
        elif any(True for _ in legal_builds(state, dest, vacated=origin)):
            yield dest


def generate_moves(state: GameState, player: Player | None = None) -> Iterator[Move]:
    """
    Lazily yield every legal Move for player (default: the player to move).

    Order: worker index, then neighbor order for destination and build.
    """
    if player is None:
        player = state.current_player

    for origin in state.workers[player]:
        for dest in legal_destinations(state, origin):
            if state.board.height(dest) == MAX_HEIGHT:
                yield Move(worker=origin, destination=dest, build=None)
                continue
            for site in legal_builds(state, dest, vacated=origin):
                yield Move(worker=origin, destination=dest, build=site)


def legal_moves(state: GameState, player: Player | None = None) -> list[Move]:
    """Convenience function: all moves as a list."""
    return list(generate_moves(state, player))


def has_legal_move(state: GameState, player: Player | None = None) -> bool:
    """True if player can complete at least one turn."""
    if player is None:
        player = state.current_player
    return any(
        True
        for origin in state.workers[player]
        for _ in legal_destinations(state, origin)
    )


def is_legal(state: GameState, move: Move) -> bool:
    """Check if a specific move is legal for the player to move."""
    if state.phase != Phase.SELECTING_WORKER:
        return False
    return move in generate_moves(state)


def apply_move(state: GameState, move: Move, record_history: bool = True) -> ActionResult:
    """
    Play a whole Move through the reducer as its sub-actions.

    Stops at the first rejected sub-action or once the game ends.
    """
    from .action import Action, ActionResult, ErrorCode
    from .reducer import Reducer

    reducer = Reducer(record_history=record_history)
    steps = [Action.select_worker(move.worker), Action.move_to(move.destination)]
    if move.build is not None:
        steps.append(Action.build_at(move.build))

    result = None
    for action in steps:
        result = reducer.apply(state, action)
        if not result.success:
            return result
        state = result.new_state
        if state.is_over:
            break

    if state.phase == Phase.CHOOSING_BUILD_SITE:
        return ActionResult.failure(
            f"Move {move} has no build but {move.destination} is not a winning cell",
            error_code=ErrorCode.INVALID_BUILD,
        )
    return result
