"""
Panel requirement calculation.

Every exposed face of a cube on the path takes one cladding panel. The panel
type depends on the face's relation to the direction water travels through
the cube (its outlet):

- SIDE: an open end of the path (where water enters or leaves the run)
- RIGHT: the face on the right-hand side of travel
- LEFT: the face on the left-hand side of travel

Right-hand convention: looking along the direction of travel, the face
reached by turning clockwise is on the right (travelling E, the S face is
right and the N face left).

The back face of a corner cube (opposite its outlet) lies on the outside of
the turn. It takes the hand of the cube's inlet, which it continues, so a
corner always takes one left and one right panel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from flow_path import FlowCube, ValidPath
from grid_model import exposed_edges
from grid_types import DIRECTIONS, Direction, Grid

logger = logging.getLogger(__name__)

RIGHT_HAND: Callable[[Direction], Direction] = Direction.rotate_cw


class PanelType(Enum):
    """Kind of cladding panel fitted to an exposed face."""

    SIDE = "side"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class PanelCounts:
    """Panel tally by type."""

    side: int = 0
    left: int = 0
    right: int = 0

    def __add__(self, other: PanelCounts) -> PanelCounts:
        return PanelCounts(self.side + other.side, self.left + other.left, self.right + other.right)

    @property
    def total(self) -> int:
        return self.side + self.left + self.right

    def add(self, panel: PanelType) -> PanelCounts:
        match panel:
            case PanelType.SIDE:
                return PanelCounts(self.side + 1, self.left, self.right)
            case PanelType.LEFT:
                return PanelCounts(self.side, self.left + 1, self.right)
            case PanelType.RIGHT:
                return PanelCounts(self.side, self.left, self.right + 1)


@dataclass(frozen=True)
class RawPanels:
    """Unpacked panel tallies, regular and extra-tall cubes kept apart."""

    regular: PanelCounts = field(default_factory=PanelCounts)
    extra_tall: PanelCounts = field(default_factory=PanelCounts)

    @property
    def total(self) -> int:
        return self.regular.total + self.extra_tall.total


def _hand(face: Direction, travel: Direction) -> PanelType:
    return PanelType.RIGHT if face is RIGHT_HAND(travel) else PanelType.LEFT


def classify_faces(grid: Grid, cube: FlowCube) -> dict[Direction, PanelType]:
    """Panel type for each exposed, non-excluded face of a path cube."""
    cell = grid.cell(cube.row, cube.col)
    travel = cube.outlet
    open_faces = cube.open_faces()

    faces: dict[Direction, PanelType] = {}
    for face in sorted(exposed_edges(grid, cube.row, cube.col) - cell.excluded_edges, key=DIRECTIONS.index):
        if face in open_faces:
            faces[face] = PanelType.SIDE
        elif face is travel.opposite:
            # Outside of a corner
            faces[face] = _hand(cube.inlet, travel)
        else:
            faces[face] = _hand(face, travel)
    return faces


def count_panels(grid: Grid, path: ValidPath) -> RawPanels:
    """Tally panels over every cube of a valid path."""
    regular = PanelCounts()
    extra_tall = PanelCounts()

    for cube in path:
        tall = grid.cell(cube.row, cube.col).extra_tall
        for panel in classify_faces(grid, cube).values():
            if tall:
                extra_tall = extra_tall.add(panel)
            else:
                regular = regular.add(panel)

    logger.debug("Raw panels: regular=%s extra_tall=%s", regular, extra_tall)
    return RawPanels(regular, extra_tall)
