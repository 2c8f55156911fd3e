"""
Engine Core - Deterministic Santorini state management.

The engine is the runtime that:
1. Models the board (heights and domes)
2. Holds GameState (workers, active player, phase)
3. Generates legal moves
4. Applies actions via the reducer
"""

from .board import Board, Position, BOARD_SIZE, MAX_HEIGHT, neighbors, all_positions
from .state import GameState, Player, Phase, WORKERS_PER_PLAYER
from .action import Action, ActionType, ActionResult, ErrorCode
from .reducer import Reducer, apply_action, place_workers
from .move_generator import (
    Move,
    apply_move,
    generate_moves,
    has_legal_move,
    is_legal,
    legal_builds,
    legal_destinations,
    legal_moves,
)

__all__ = [
    "Board",
    "Position",
    "BOARD_SIZE",
    "MAX_HEIGHT",
    "neighbors",
    "all_positions",
    "GameState",
    "Player",
    "Phase",
    "WORKERS_PER_PLAYER",
    "Action",
    "ActionType",
    "ActionResult",
    "ErrorCode",
    "Reducer",
    "apply_action",
    "place_workers",
    "Move",
    "apply_move",
    "generate_moves",
    "has_legal_move",
    "is_legal",
    "legal_builds",
    "legal_destinations",
    "legal_moves",
]
