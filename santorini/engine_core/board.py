"""
Board Model - The 5x5 grid of towers.

The board only knows about buildings:
- Tower height per cell (0-3)
- Domes (caps) on completed towers

Workers live on GameState, which owns occupancy.
Boards are immutable values: building returns a new board.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator


BOARD_SIZE = 5
MAX_HEIGHT = 3

_DELTAS = tuple(
    (dr, dc)
    for dr in (-1, 0, 1)
    for dc in (-1, 0, 1)
    if (dr, dc) != (0, 0)
)


@dataclass(frozen=True, order=True)
class Position:
    """A cell coordinate on the board."""
    row: int
    col: int

    @property
    def in_bounds(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    def distance(self, other: Position) -> int:
        """Chebyshev distance, matching 8-direction adjacency."""
        return max(abs(self.row - other.row), abs(self.col - other.col))

    def is_adjacent(self, other: Position) -> bool:
        return self.distance(other) == 1

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


def neighbors(position: Position) -> Iterator[Position]:
    """Yield the up-to-8 cells around a position, clipped to the grid."""
    for dr, dc in _DELTAS:
        row, col = position.row + dr, position.col + dc
        if 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE:
            yield Position(row, col)


def all_positions() -> Iterator[Position]:
    """Every cell, row-major."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            yield Position(row, col)


def _index(position: Position) -> int:
    if not position.in_bounds:
        raise ValueError(f"Position {position} is off the board")
    return position.row * BOARD_SIZE + position.col


@dataclass(frozen=True)
class Board:
    """
    Tower heights and domes.

    heights is row-major, one entry per cell.
    A capped cell always has height MAX_HEIGHT.
    """
    heights: tuple[int, ...] = field(default=(0,) * (BOARD_SIZE * BOARD_SIZE))
    capped: frozenset[Position] = field(default_factory=frozenset)

    def __post_init__(self):
        if len(self.heights) != BOARD_SIZE * BOARD_SIZE:
            raise ValueError(f"Board needs {BOARD_SIZE * BOARD_SIZE} cells")
        for h in self.heights:
            if not 0 <= h <= MAX_HEIGHT:
                raise ValueError(f"Invalid tower height: {h}")
        for pos in self.capped:
            if self.height(pos) != MAX_HEIGHT:
                raise ValueError(f"Dome at {pos} without a complete tower")

    @classmethod
    def from_rows(
        cls,
        rows: list[list[int]],
        capped: set[Position] | None = None,
    ) -> Board:
        """Build a board from a 5x5 list of heights (handy for tests and setups)."""
        if len(rows) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in rows):
            raise ValueError(f"Expected a {BOARD_SIZE}x{BOARD_SIZE} grid")
        heights = tuple(h for row in rows for h in row)
        return cls(heights=heights, capped=frozenset(capped or ()))

    def height(self, position: Position) -> int:
        return self.heights[_index(position)]

    def is_capped(self, position: Position) -> bool:
        return position in self.capped

    def can_build(self, position: Position) -> bool:
        """True unless the cell is off the board or already domed."""
        return position.in_bounds and position not in self.capped

    def with_build(self, position: Position) -> Board:
        """
        Return a new board with one level added at position.

        Below MAX_HEIGHT the tower grows; at MAX_HEIGHT a dome is placed.
        """
        if not self.can_build(position):
            raise ValueError(f"Cannot build at {position}")

        idx = _index(position)
        current = self.heights[idx]
        if current < MAX_HEIGHT:
            heights = self.heights[:idx] + (current + 1,) + self.heights[idx + 1:]
            return Board(heights=heights, capped=self.capped)

        return Board(heights=self.heights, capped=self.capped | {position})

    def rows(self) -> list[list[int]]:
        """Heights as nested rows."""
        return [
            list(self.heights[r * BOARD_SIZE:(r + 1) * BOARD_SIZE])
            for r in range(BOARD_SIZE)
        ]
