"""
Pydantic Schemas - The contract between the engine and a front end.

A front end only ever sees:
- GameSnapshot: read-only render state (grid, workers, phase, highlights)
- ActionRequest: one sub-action chosen by a human
- ActionResponse: success or a structured error code
- GameOutcome: whether the game is over and how it ended

Error Codes:
- InvalidPlacement: setup cell is off the board or taken
- InvalidSelection: no worker of yours there, or it cannot move
- InvalidDestination: cell breaks adjacency, climb, occupancy or dome rules
- InvalidBuild: cell breaks adjacency, occupancy or dome rules
- OutOfPhase: action does not fit the current phase
- GameAlreadyOver: the game has ended
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core.board import BOARD_SIZE, MAX_HEIGHT


# =============================================================================
# Enums
# =============================================================================

class PhaseName(str, Enum):
    """Turn phases as shown to a front end."""
    PLACING_WORKERS = "placing_workers"
    SELECTING_WORKER = "selecting_worker"
    CHOOSING_DESTINATION = "choosing_destination"
    CHOOSING_BUILD_SITE = "choosing_build_site"
    WON = "won"
    NO_LEGAL_MOVE = "no_legal_move"


class ActionKind(str, Enum):
    """Sub-actions a human can submit."""
    PLACE_WORKER = "place_worker"
    SELECT_WORKER = "select_worker"
    MOVE_TO = "move_to"
    BUILD_AT = "build_at"
    RESIGN = "resign"


# =============================================================================
# Shared Models
# =============================================================================

class PositionModel(BaseModel):
    """A board coordinate."""
    row: int = Field(ge=0, lt=BOARD_SIZE)
    col: int = Field(ge=0, lt=BOARD_SIZE)

    model_config = {"from_attributes": True}


class CellInfo(BaseModel):
    """One cell for display."""
    row: int
    col: int
    height: int = Field(ge=0, le=MAX_HEIGHT)
    capped: bool = False
    occupant: Optional[int] = Field(None, description="Player number of the worker here")


class WorkerInfo(BaseModel):
    """One worker for display."""
    player: int
    index: int
    row: int
    col: int
    selected: bool = False


# =============================================================================
# Requests / Responses
# =============================================================================

class ActionRequest(BaseModel):
    """A sub-action chosen by a human."""
    action_type: ActionKind
    position: Optional[PositionModel] = None


class ActionResponse(BaseModel):
    """Outcome of submitting an action."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    changes: list[str] = Field(default_factory=list)


class GameOutcome(BaseModel):
    """Whether the game is over, and how."""
    is_over: bool
    winner: Optional[int] = None
    no_legal_move: bool = False
    stuck_player: Optional[int] = Field(
        None, description="Player who could not move, for no_legal_move endings"
    )


class GameSnapshot(BaseModel):
    """Everything a front end needs to draw the game."""
    phase: PhaseName
    current_player: int
    turn_number: int = 0
    cells: list[list[CellInfo]]
    workers: list[WorkerInfo] = Field(default_factory=list)
    highlights: list[PositionModel] = Field(
        default_factory=list,
        description="Cells that are legal targets for the next sub-action",
    )
    outcome: GameOutcome
