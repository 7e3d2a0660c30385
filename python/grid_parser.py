"""
Layout parsing utilities for cubeflow.

Provides two parsing formats:
1. Single layout: one grid, rows separated by |
2. Named layouts: several grids, one "name: layout" per line
"""

from __future__ import annotations

from grid_types import CUBE_CELL, EMPTY_CELL, Cell, Grid

__all__ = ["parse_layout", "parse_layouts", "format_layout"]

EXTRA_TALL_CELL = Cell(has_cube=True, extra_tall=True)

_CELL_CHARS: dict[str, Cell] = {
    "_": EMPTY_CELL,
    ".": EMPTY_CELL,
    "#": CUBE_CELL,
    "T": EXTRA_TALL_CELL,
}


def parse_layout(definition: str, rows: int | None = None, cols: int | None = None) -> Grid:
    """
    Parse a grid layout from a compact string format.

    Format:
    - Rows separated by |
    - One character per cell (no spaces between cells):
      * '_' or '.': Empty cell
      * '#': Regular cube
      * 'T': Extra-tall cube
    - Short rows are padded with Empty cells to the longest row
    - Surrounding whitespace is ignored

    Example:
        "___|##_|_#_"
        Creates a 3x3 grid with cubes at (1,0), (1,1) and (2,1).

    Args:
        definition: Layout string
        rows: Optional minimum row count (pads with empty rows)
        cols: Optional minimum column count (pads with empty cells)

    Returns:
        Parsed Grid

    Raises:
        ValueError: If the layout contains an invalid character or is empty
    """
    row_strings = [row.strip() for row in definition.strip().split("|")]
    if not any(row_strings):
        raise ValueError("Empty layout definition")

    parsed: list[list[Cell]] = []
    for row_idx, row_str in enumerate(row_strings):
        cells: list[Cell] = []
        for col_idx, char in enumerate(row_str):
            if char not in _CELL_CHARS:
                raise ValueError(
                    f"Invalid character '{char}' in layout\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Valid characters:\n"
                    f"    - '_' or '.': Empty cell\n"
                    f"    - '#': Regular cube\n"
                    f"    - 'T': Extra-tall cube"
                )
            cells.append(_CELL_CHARS[char])
        parsed.append(cells)

    # Pad rows to maximum length with Empty cells
    width = max(max(len(row) for row in parsed), cols or 0)
    height = max(len(parsed), rows or 0)
    parsed.extend([] for _ in range(height - len(parsed)))
    padded = tuple(tuple(row) + (EMPTY_CELL,) * (width - len(row)) for row in parsed)

    return Grid(padded)


def parse_layouts(definition: str, rows: int | None = None, cols: int | None = None) -> dict[str, Grid]:
    """
    Parse several named layouts from a multi-line format.

    Format:
    - One layout per line: "name: layout"
    - Layout uses the parse_layout format

    Example:
        \"\"\"
        line: ___|###|___
        ell: ___|##_|_#_
        \"\"\"

    Raises:
        ValueError: If a line is malformed or a name is repeated
    """
    layouts: dict[str, Grid] = {}
    lines = [line.strip() for line in definition.strip().split("\n") if line.strip()]

    for line_idx, line in enumerate(lines):
        if ":" not in line:
            raise ValueError(
                f"Invalid layout definition on line {line_idx + 1}: '{line}'\n"
                f"  Expected format: 'name: layout'"
            )

        name, layout = (part.strip() for part in line.split(":", 1))
        if not name:
            raise ValueError(f"Empty layout name on line {line_idx + 1}: '{line}'")
        if not layout:
            raise ValueError(f"Empty layout for '{name}' on line {line_idx + 1}")
        if name in layouts:
            raise ValueError(
                f"Duplicate layout name '{name}' on line {line_idx + 1}\n"
                f"  Layout names must be unique"
            )

        layouts[name] = parse_layout(layout, rows, cols)

    return layouts


def format_layout(grid: Grid) -> str:
    """Inverse of parse_layout (empty cells written as '_')."""
    def char(cell: Cell) -> str:
        if not cell.has_cube:
            return "_"
        return "T" if cell.extra_tall else "#"

    return "|".join("".join(char(cell) for cell in row) for row in grid.cells)
