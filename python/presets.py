"""
Preset catalogue: ready-made shapes a user can drop onto the grid.
"""

from __future__ import annotations

from enum import Enum

from grid_parser import parse_layout
from grid_types import CUBE_CELL, Grid, Position


class PresetName(Enum):
    SINGLE = "single"
    STRAIGHT = "straight"
    L_SHAPE = "l-shape"
    U_SHAPE = "u-shape"


PRESET_LAYOUTS: dict[PresetName, str] = {
    PresetName.SINGLE: "___|_#_|___",
    PresetName.STRAIGHT: "___|###|___",
    PresetName.L_SHAPE: "___|##_|_#_",
    PresetName.U_SHAPE: "___|#_#|###",
}


def preset_placements(name: PresetName) -> list[Position]:
    """Cube positions of a preset, row-major."""
    return parse_layout(PRESET_LAYOUTS[name]).cube_positions()


def build_preset(name: PresetName, rows: int = 3, cols: int = 3) -> Grid:
    """
    A fresh grid of the given size holding only the preset's cubes.

    Raises:
        ValueError: If the preset does not fit the grid
    """
    grid = Grid.empty(rows, cols)
    placements = preset_placements(name)
    for row, col in placements:
        if not grid.in_bounds(row, col):
            raise ValueError(
                f"Preset '{name.value}' does not fit a {rows}x{cols} grid\n"
                f"  Cube at ({row}, {col}) is outside the grid"
            )
    for row, col in placements:
        grid = grid.replace(row, col, CUBE_CELL)
    return grid


def parse_preset_name(text: str) -> PresetName:
    """Look up a preset by value ('l-shape') or member name ('L_SHAPE')."""
    key = text.strip()
    for preset in PresetName:
        if key.lower() == preset.value or key.upper() == preset.name:
            return preset
    valid = ", ".join(p.value for p in PresetName)
    raise ValueError(
        f"Unknown preset '{text}'\n"
        f"  Valid presets: {valid}"
    )
