"""
Grid model operations: toggling cubes, heights and cladding exclusions, and
deriving adjacency and exposed edges.

Every operation returns a new Grid and touches only the targeted cell; none of
them checks path legality (see flow_path.validate_path).
"""

from __future__ import annotations

import logging

from grid_types import DIRECTIONS, EMPTY_CELL, Cell, Direction, Grid, Position

logger = logging.getLogger(__name__)


def step(row: int, col: int, direction: Direction) -> Position:
    """The position one cell away from (row, col) in `direction`."""
    dr, dc = direction.delta
    return row + dr, col + dc


def direction_between(source: Position, target: Position) -> Direction:
    """Direction from `source` to an orthogonally adjacent `target`."""
    for direction in DIRECTIONS:
        if step(*source, direction) == target:
            return direction
    raise ValueError(f"Positions {source} and {target} are not adjacent")


def neighbour_directions(grid: Grid, row: int, col: int) -> list[Direction]:
    """Directions (clockwise from N) in which a cube adjoins (row, col)."""
    return [d for d in DIRECTIONS if grid.has_cube(*step(row, col, d))]


def degree(grid: Grid, row: int, col: int) -> int:
    """Number of cubes orthogonally adjacent to (row, col)."""
    return len(neighbour_directions(grid, row, col))


def exposed_edges(grid: Grid, row: int, col: int) -> frozenset[Direction]:
    """
    Faces of the cube at (row, col) with no adjacent cube.

    The grid boundary counts as exposed. An empty cell has no faces.
    """
    if not grid.cell(row, col).has_cube:
        return frozenset()
    return frozenset(d for d in DIRECTIONS if not grid.has_cube(*step(row, col, d)))


def _drop_covered_exclusions(grid: Grid, row: int, col: int) -> Grid:
    """Forget exclusions on faces of (row, col) that a neighbour now covers."""
    cell = grid.cell(row, col)
    if not cell.excluded_edges:
        return grid
    still_exposed = cell.excluded_edges & exposed_edges(grid, row, col)
    if still_exposed == cell.excluded_edges:
        return grid
    return grid.replace(row, col, Cell(True, cell.extra_tall, still_exposed))


def toggle_cube(grid: Grid, row: int, col: int) -> Grid:
    """
    Add a cube at (row, col) if the cell is empty, otherwise remove it.

    A removed cube loses its height flag and cladding exclusions. Adding a cube
    drops any exclusion a neighbour held on the face it now covers.
    """
    cell = grid.cell(row, col)
    if cell.has_cube:
        logger.debug("Removing cube at (%d, %d)", row, col)
        return grid.replace(row, col, EMPTY_CELL)

    logger.debug("Adding cube at (%d, %d)", row, col)
    result = grid.replace(row, col, Cell(has_cube=True))
    for direction in neighbour_directions(result, row, col):
        result = _drop_covered_exclusions(result, *step(row, col, direction))
    return result


def toggle_height(grid: Grid, row: int, col: int) -> Grid:
    """Flip the extra-tall flag of the cube at (row, col); no-op for an empty cell."""
    cell = grid.cell(row, col)
    if not cell.has_cube:
        return grid
    return grid.replace(row, col, Cell(True, not cell.extra_tall, cell.excluded_edges))


def toggle_cladding(grid: Grid, row: int, col: int, edge: Direction) -> Grid:
    """
    Exclude an exposed face from cladding, or include it again.

    No-op for an empty cell or a face shared with another cube.
    """
    cell = grid.cell(row, col)
    if edge not in exposed_edges(grid, row, col):
        return grid
    return grid.replace(row, col, Cell(True, cell.extra_tall, cell.excluded_edges ^ {edge}))
