"""
Shared type definitions for the cubeflow engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Direction(Enum):
    """Compass direction of a cube face or of travel along the path."""

    N = "N"  # Up (decreasing row)
    S = "S"  # Down (increasing row)
    E = "E"  # Right (increasing col)
    W = "W"  # Left (decreasing col)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def delta(self) -> tuple[int, int]:
        """(row, col) step taken when moving one cell in this direction."""
        return _DELTAS[self]

    def rotate_cw(self) -> Direction:
        """Rotate 90° clockwise (N -> E -> S -> W -> N)."""
        return _CLOCKWISE[self]

    def rotate_ccw(self) -> Direction:
        """Rotate 90° counter-clockwise."""
        return _COUNTER_CLOCKWISE[self]

    def is_straight_with(self, other: Direction) -> bool:
        """True if the two directions lie on the same axis ({N,S} or {E,W})."""
        return other is self or other is self.opposite


_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}

_DELTAS = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}

_CLOCKWISE = {
    Direction.N: Direction.E,
    Direction.E: Direction.S,
    Direction.S: Direction.W,
    Direction.W: Direction.N,
}

_COUNTER_CLOCKWISE = {v: k for k, v in _CLOCKWISE.items()}

# Clockwise order, used wherever faces are enumerated
DIRECTIONS: tuple[Direction, ...] = (Direction.N, Direction.E, Direction.S, Direction.W)

Position = tuple[int, int]


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class Cell:
    """A grid cell, optionally holding a cube."""

    has_cube: bool = False
    extra_tall: bool = False
    excluded_edges: frozenset[Direction] = field(default_factory=frozenset)  # faces opted out of cladding


EMPTY_CELL = Cell()
CUBE_CELL = Cell(has_cube=True)


@dataclass(frozen=True)
class Grid:
    """A fixed-size 2D grid of cells."""

    cells: tuple[tuple[Cell, ...], ...]

    @classmethod
    def empty(cls, rows: int = 3, cols: int = 3) -> Grid:
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {rows}x{cols}")
        return cls(tuple(tuple(EMPTY_CELL for _ in range(cols)) for _ in range(rows)))

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise ValueError(
                f"Position ({row}, {col}) is outside the grid\n"
                f"  Grid size: {self.rows}x{self.cols}"
            )
        return self.cells[row][col]

    def has_cube(self, row: int, col: int) -> bool:
        """True if a cube occupies (row, col); positions off the grid hold no cube."""
        return self.in_bounds(row, col) and self.cells[row][col].has_cube

    def cube_positions(self) -> list[Position]:
        """All cube positions in row-major order."""
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell.has_cube
        ]

    @property
    def cube_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.has_cube)

    def replace(self, row: int, col: int, cell: Cell) -> Grid:
        """Return a new Grid with the cell at (row, col) replaced."""
        self.cell(row, col)  # bounds check
        new_row = self.cells[row][:col] + (cell,) + self.cells[row][col + 1:]
        return Grid(self.cells[:row] + (new_row,) + self.cells[row + 1:])
