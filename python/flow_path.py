"""
Flow path validation.

A legal arrangement is a single non-branching chain of cubes with exactly two
open ends. Validation either returns the ordered path, with the entry and
exit face of every cube, or a Rejection naming why the arrangement is
illegal.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from grid_model import degree, direction_between, neighbour_directions, step
from grid_types import Direction, Grid, Position
from rejections import RejectReason, Rejection

logger = logging.getLogger(__name__)

# Inlet and outlet of a lone cube: water runs west to east
DEFAULT_FLOW: tuple[Direction, Direction] = (Direction.W, Direction.E)


@dataclass(frozen=True)
class FlowCube:
    """
    A cube on the path.

    `entry` points at the previous cube and `exit` at the next one; either is
    None at an open end of the path.
    """

    row: int
    col: int
    entry: Direction | None
    exit: Direction | None

    @property
    def position(self) -> Position:
        return self.row, self.col

    @property
    def inlet(self) -> Direction:
        """Face water flows in through (real connection or open end)."""
        if self.entry is not None:
            return self.entry
        if self.exit is not None:
            return self.exit.opposite
        return DEFAULT_FLOW[0]

    @property
    def outlet(self) -> Direction:
        """Face water flows out through (real connection or open end)."""
        if self.exit is not None:
            return self.exit
        if self.entry is not None:
            return self.entry.opposite
        return DEFAULT_FLOW[1]

    @property
    def is_corner(self) -> bool:
        return (
            self.entry is not None
            and self.exit is not None
            and not self.entry.is_straight_with(self.exit)
        )

    @property
    def is_open_end(self) -> bool:
        return self.entry is None or self.exit is None

    def open_faces(self) -> frozenset[Direction]:
        """Faces where the path begins or ends."""
        faces = set()
        if self.entry is None:
            faces.add(self.inlet)
        if self.exit is None:
            faces.add(self.outlet)
        return frozenset(faces)


@dataclass(frozen=True)
class ValidPath:
    """Ordered cubes of a legal path, first endpoint (row-major) first."""

    cubes: tuple[FlowCube, ...] = ()

    def __len__(self) -> int:
        return len(self.cubes)

    def __iter__(self) -> Iterator[FlowCube]:
        return iter(self.cubes)

    def positions(self) -> list[Position]:
        return [cube.position for cube in self.cubes]

    @property
    def turns(self) -> int:
        return sum(1 for cube in self.cubes if cube.is_corner)


EMPTY_PATH = ValidPath()


# =============================================================================
# Validation
# =============================================================================


def connected_components(grid: Grid) -> list[list[Position]]:
    """Groups of 4-adjacent cubes, in row-major discovery order."""
    seen: set[Position] = set()
    components: list[list[Position]] = []

    for start in grid.cube_positions():
        if start in seen:
            continue
        component = []
        queue = deque([start])
        seen.add(start)
        while queue:
            current = queue.popleft()
            component.append(current)
            for direction in neighbour_directions(grid, *current):
                neighbour = step(*current, direction)
                if neighbour not in seen:
                    seen.add(neighbour)
                    queue.append(neighbour)
        components.append(sorted(component))

    return components


def _walk(grid: Grid, start: Position) -> list[Position]:
    """Follow the chain from an endpoint until it runs out."""
    order = [start]
    previous: Position | None = None
    current = start
    while True:
        onward = [
            step(*current, d)
            for d in neighbour_directions(grid, *current)
            if step(*current, d) != previous
        ]
        if not onward:
            return order
        previous, current = current, onward[0]
        order.append(current)


def validate_path(grid: Grid) -> ValidPath | Rejection:
    """
    Check that the cubes form one unbranched chain and order it.

    Returns:
        ValidPath if legal (empty for an empty grid), otherwise a Rejection.
    """
    positions = grid.cube_positions()
    if not positions:
        return EMPTY_PATH

    components = connected_components(grid)
    if len(components) > 1:
        logger.debug("Rejected: %d separate groups of cubes", len(components))
        return Rejection.of(RejectReason.DISCONNECTED_PATH, components[1][0])

    for position in positions:
        if degree(grid, *position) > 2:
            logger.debug("Rejected: branch at %s", position)
            return Rejection.of(RejectReason.BRANCHING_PATH, position)

    if len(positions) == 1:
        row, col = positions[0]
        return ValidPath((FlowCube(row, col, None, None),))

    endpoints = [p for p in positions if degree(grid, *p) <= 1]
    if len(endpoints) != 2:
        # Every cube has two neighbours: a closed loop
        logger.debug("Rejected: %d path ends", len(endpoints))
        return Rejection.of(RejectReason.INVALID_PATH_SHAPE, positions[0])

    order = _walk(grid, endpoints[0])
    cubes = []
    for index, position in enumerate(order):
        entry = direction_between(position, order[index - 1]) if index > 0 else None
        exit_ = direction_between(position, order[index + 1]) if index + 1 < len(order) else None
        cubes.append(FlowCube(position[0], position[1], entry, exit_))

    path = ValidPath(tuple(cubes))
    logger.debug("Valid path of %d cubes with %d turns", len(path), path.turns)
    return path


# =============================================================================
# Shape description
# =============================================================================


class ShapeKind(Enum):
    """Recognised arrangement of a valid path."""

    EMPTY = auto()
    SINGLE = auto()
    STRAIGHT = auto()  # No turns
    L_SHAPE = auto()  # One turn
    U_SHAPE = auto()  # Two turns the same way round, ends parallel
    CUSTOM = auto()


def turn_senses(path: ValidPath) -> list[bool]:
    """For each corner along the path, True if it turns clockwise."""
    senses = []
    for cube in path:
        if not cube.is_corner or cube.entry is None:
            continue
        travel = cube.entry.opposite
        senses.append(cube.exit is travel.rotate_cw())
    return senses


def describe_shape(path: ValidPath) -> ShapeKind:
    if not path.cubes:
        return ShapeKind.EMPTY
    if len(path) == 1:
        return ShapeKind.SINGLE

    senses = turn_senses(path)
    match len(senses):
        case 0:
            return ShapeKind.STRAIGHT
        case 1:
            return ShapeKind.L_SHAPE
        case 2 if senses[0] == senses[1]:
            return ShapeKind.U_SHAPE
        case _:
            return ShapeKind.CUSTOM
