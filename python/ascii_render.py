"""
ASCII rendering for cubeflow grids.

Each cell is drawn as a 3x3 block of characters. A cube shows its flow
direction in the centre and the panel fitted to each face on that side:

     L
    S→S       S = side panel, L = left panel, R = right panel,
     R        x = face excluded from cladding, blank = shared face

Extra-tall cubes show their centre arrow in yellow; empty cells are dots.
"""

from __future__ import annotations

from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from flow_path import FlowCube, ValidPath
from grid_model import exposed_edges
from grid_types import Direction, Grid, Position
from panels import PanelType, classify_faces
from requirements import Requirements

ARROWS: dict[Direction, str] = {
    Direction.N: "↑",
    Direction.E: "→",
    Direction.S: "↓",
    Direction.W: "←",
}

PANEL_CHARS: dict[PanelType, str] = {
    PanelType.SIDE: "S",
    PanelType.LEFT: "L",
    PanelType.RIGHT: "R",
}

# Offsets of each face's character within a 3x3 cell block
_FACE_SLOTS: dict[Direction, Position] = {
    Direction.N: (0, 1),
    Direction.E: (1, 2),
    Direction.S: (2, 1),
    Direction.W: (1, 0),
}

Colorize = Callable[[str], str]


def _plain(s: str) -> str:
    return s


def _palette(color: bool) -> dict[str, Colorize]:
    if not color:
        return {name: _plain for name in ("side", "left", "right", "tall", "empty", "frame", "cursor")}
    return {
        "side": chalk.blue,
        "left": chalk.green,
        "right": chalk.magenta,
        "tall": chalk.yellow,
        "empty": chalk.white,
        "frame": chalk.cyan,
        "cursor": chalk.bgWhite.black,
    }


def render_cell(grid: Grid, row: int, col: int, cube: FlowCube | None, colors: dict[str, Colorize]) -> list[str]:
    """The 3 rows of characters for one cell."""
    cell = grid.cell(row, col)
    if not cell.has_cube:
        dot = colors["empty"](".")
        return [dot * 3 for _ in range(3)]

    block = [[" "] * 3 for _ in range(3)]
    for slot_row, slot_col in ((0, 0), (0, 2), (2, 0), (2, 2)):
        block[slot_row][slot_col] = "+"

    for face in cell.excluded_edges & exposed_edges(grid, row, col):
        slot_row, slot_col = _FACE_SLOTS[face]
        block[slot_row][slot_col] = "x"

    if cube is None:
        block[1][1] = "o"
    else:
        arrow = ARROWS[cube.outlet]
        block[1][1] = colors["tall"](arrow) if cell.extra_tall else arrow
        for face, panel in classify_faces(grid, cube).items():
            slot_row, slot_col = _FACE_SLOTS[face]
            block[slot_row][slot_col] = colors[panel.value](PANEL_CHARS[panel])

    return ["".join(chars) for chars in block]


def render_grid(
    grid: Grid,
    path: ValidPath | None = None,
    highlight: Position | None = None,
    color: bool = True,
) -> str:
    """
    Render the grid with a frame.

    Args:
        grid: Grid to draw
        path: Validated path; cubes not on it are drawn without flow
        highlight: Optional cursor cell
        color: Emit ANSI colours via simple_chalk

    Returns:
        Rendered string, one line per character row
    """
    colors = _palette(color)
    cubes = {cube.position: cube for cube in path} if path is not None else {}
    frame = colors["frame"]

    width = grid.cols * 3
    lines = [frame("┌" + "─" * width + "┐")]
    for row in range(grid.rows):
        blocks = [render_cell(grid, row, col, cubes.get((row, col)), colors) for col in range(grid.cols)]
        for line_idx in range(3):
            parts = []
            for col, block in enumerate(blocks):
                text = block[line_idx]
                if (row, col) == highlight:
                    text = colors["cursor"](text)
                parts.append(text)
            lines.append(frame("│") + "".join(parts) + frame("│"))
    lines.append(frame("└" + "─" * width + "┘"))
    return "\n".join(lines)


REQUIREMENT_LABELS: tuple[tuple[str, str], ...] = (
    ("four_pack_regular", "Four-pack"),
    ("two_pack_regular", "Two-pack"),
    ("four_pack_extra_tall", "Four-pack (extra tall)"),
    ("two_pack_extra_tall", "Two-pack (extra tall)"),
    ("side_panels", "Side panel"),
    ("left_panels", "Left panel"),
    ("right_panels", "Right panel"),
    ("side_panels_extra_tall", "Side panel (extra tall)"),
    ("left_panels_extra_tall", "Left panel (extra tall)"),
    ("right_panels_extra_tall", "Right panel (extra tall)"),
    ("straight_couplings", "Straight coupling"),
    ("corner_connectors", "Corner connector"),
)


def render_requirements(requirements: Requirements) -> str:
    """Bill of materials, one 'Label x N' line per non-zero item."""
    lines = [
        f"{label} x {getattr(requirements, attr)}"
        for attr, label in REQUIREMENT_LABELS
        if getattr(requirements, attr)
    ]
    if not lines:
        return "Nothing required"
    return "\n".join(lines)
