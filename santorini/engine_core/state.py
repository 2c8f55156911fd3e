"""
Game State - The single source of truth for a Santorini game.

Design principles:
- Immutable-friendly: the reducer returns new states, never edits old ones
- Cheap to branch: search copies states freely
- Workers are a mapping from player to a fixed-size tuple of positions
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .board import Board, Position


WORKERS_PER_PLAYER = 2


class Player(Enum):
    """The two seats at the table."""
    ONE = 1
    TWO = 2

    @property
    def other(self) -> Player:
        return Player.TWO if self is Player.ONE else Player.ONE

    def __str__(self) -> str:
        return f"Player {self.value}"


class Phase(Enum):
    """Turn phases, including setup and the two terminal outcomes."""
    PLACING_WORKERS = "placing_workers"
    SELECTING_WORKER = "selecting_worker"
    CHOOSING_DESTINATION = "choosing_destination"
    CHOOSING_BUILD_SITE = "choosing_build_site"
    WON = "won"
    NO_LEGAL_MOVE = "no_legal_move"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.WON, Phase.NO_LEGAL_MOVE)


def _empty_workers() -> dict[Player, tuple[Position, ...]]:
    return {Player.ONE: (), Player.TWO: ()}


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    In a terminal phase, current_player is the player whose turn ended the
    game: the winner for WON, the stuck player for NO_LEGAL_MOVE.
    """
    board: Board = field(default_factory=Board)
    workers: dict[Player, tuple[Position, ...]] = field(default_factory=_empty_workers)
    current_player: Player = Player.ONE
    phase: Phase = Phase.PLACING_WORKERS

    # Mid-turn bookkeeping
    selected_worker: int | None = None

    winner: Player | None = None
    turn_number: int = 0

    action_history: tuple[Any, ...] = ()

    @classmethod
    def new_game(cls) -> GameState:
        """Empty board, nobody placed yet, Player 1 to place."""
        return cls()

    @property
    def is_over(self) -> bool:
        return self.phase.is_terminal

    @property
    def active_workers(self) -> tuple[Position, ...]:
        return self.workers[self.current_player]

    @property
    def opponent_workers(self) -> tuple[Position, ...]:
        return self.workers[self.current_player.other]

    @property
    def selected_position(self) -> Position | None:
        """Cell of the worker picked this turn (after moving, its new cell)."""
        if self.selected_worker is None:
            return None
        return self.active_workers[self.selected_worker]

    def all_workers(self) -> list[Position]:
        return [pos for locs in self.workers.values() for pos in locs]

    def occupant(self, position: Position) -> Player | None:
        """Which player's worker stands on a cell, if any."""
        for player, locs in self.workers.items():
            if position in locs:
                return player
        return None

    def is_occupied(self, position: Position) -> bool:
        return self.occupant(position) is not None

    def worker_index(self, player: Player, position: Position) -> int | None:
        locs = self.workers[player]
        for idx, loc in enumerate(locs):
            if loc == position:
                return idx
        return None

    def with_worker_moved(self, player: Player, index: int, to: Position) -> GameState:
        """Return new state with one worker relocated."""
        locs = list(self.workers[player])
        locs[index] = to
        new_workers = dict(self.workers)
        new_workers[player] = tuple(locs)
        return self._copy_with(workers=new_workers)

    def with_worker_added(self, player: Player, position: Position) -> GameState:
        """Return new state with a freshly placed worker."""
        new_workers = dict(self.workers)
        new_workers[player] = self.workers[player] + (position,)
        return self._copy_with(workers=new_workers)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def clone(self) -> GameState:
        """Independent copy (all nested values are immutable)."""
        return self._copy_with(workers=dict(self.workers))
