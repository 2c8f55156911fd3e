"""
Pytest fixtures for Santorini tests.
"""

import pytest

from ..engine_core.board import Board, Position
from ..engine_core.reducer import place_workers
from ..engine_core.state import GameState, Phase, Player


P = Position


def make_state(
    rows: list[list[int]] | None = None,
    p1: tuple = (P(0, 0), P(0, 1)),
    p2: tuple = (P(4, 4), P(4, 3)),
    capped: set | None = None,
    current: Player = Player.ONE,
    phase: Phase = Phase.SELECTING_WORKER,
) -> GameState:
    """Build a mid-game state directly, bypassing setup."""
    board = Board.from_rows(rows, capped) if rows else Board()
    return GameState(
        board=board,
        workers={Player.ONE: tuple(p1), Player.TWO: tuple(p2)},
        current_player=current,
        phase=phase,
        turn_number=1,
    )


def flat(**overrides) -> list[list[int]]:
    """All-zero 5x5 grid with a few cells overridden: flat(c12=3) sets (1,2)."""
    rows = [[0] * 5 for _ in range(5)]
    for key, height in overrides.items():
        rows[int(key[1])][int(key[2])] = height
    return rows


@pytest.fixture
def new_game() -> GameState:
    """Fresh game waiting for the first placement."""
    return GameState.new_game()


@pytest.fixture
def opening_state() -> GameState:
    """
    Flat board after setup.

    Player 1 at (0,0) and (0,1), Player 2 at (4,4) and (4,3).
    """
    return place_workers(
        GameState.new_game(),
        [P(0, 0), P(4, 4), P(0, 1), P(4, 3)],
    )


@pytest.fixture
def center_state() -> GameState:
    """Flat board with both players in the middle of the board."""
    return make_state(p1=(P(2, 2), P(1, 1)), p2=(P(3, 3), P(1, 3)))
