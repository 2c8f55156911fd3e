"""
API Module - Front-end interface.

Exposes the engine to a presentation layer (terminal, GUI, web client):
1. Render a read-only snapshot of the game
2. Accept one sub-action at a time
3. Report structured errors and the game outcome

Everything here is plain data; nothing is persisted.
"""

from .schemas import (
    # Requests
    ActionRequest,
    # Responses
    ActionResponse,
    GameOutcome,
    GameSnapshot,
    # Shared
    ActionKind,
    CellInfo,
    PhaseName,
    PositionModel,
    WorkerInfo,
)
from .service import build_snapshot, game_outcome, legal_targets, parse_action, to_response

__all__ = [
    # Requests
    "ActionRequest",
    # Responses
    "ActionResponse",
    "GameOutcome",
    "GameSnapshot",
    # Shared
    "ActionKind",
    "CellInfo",
    "PhaseName",
    "PositionModel",
    "WorkerInfo",
    # Service
    "build_snapshot",
    "game_outcome",
    "legal_targets",
    "parse_action",
    "to_response",
]
