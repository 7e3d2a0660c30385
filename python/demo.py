"""
Demonstration script: bills of materials for the presets and a few
hand-drawn layouts, including ones the validator refuses.
"""

from ascii_render import render_grid, render_requirements
from configurator import Configurator
from diagnostics import NullSink
from flow_path import describe_shape, validate_path
from grid_parser import parse_layouts
from grid_types import Grid
from presets import PresetName
from rejections import Rejection
from requirements import calculate_raw, pack_requirements

LAYOUTS = parse_layouts("""
    zigzag: ##_|_##|__#
    tall-line: ___|T#T|___
    branch: _#_|###|___
    loop: ##_|##_|___
    split: #_#|___|___
""")


def demo_presets() -> None:
    """Show every preset with its flow and packed requirements."""
    configurator = Configurator(sink=NullSink())
    for preset in PresetName:
        configurator.apply_preset(preset)
        print("=" * 40)
        print(f"Preset: {preset.value} ({describe_shape(configurator.path).name})")
        print("=" * 40)
        print(render_grid(configurator.grid, configurator.path))
        print(render_requirements(configurator.requirements))
        print()


def layout_report(grid: Grid, color: bool = True) -> str:
    """The drawn grid followed by its requirements, or by the reason it is refused."""
    path = validate_path(grid)
    if isinstance(path, Rejection):
        return f"{render_grid(grid, color=color)}\n✗ {path}"
    result = pack_requirements(calculate_raw(grid, path))
    return f"{render_grid(grid, path, color=color)}\n{render_requirements(result)}\n{result.to_dict()}"


def demo_layouts() -> None:
    """Validate a handful of custom layouts."""
    for name, grid in LAYOUTS.items():
        print("=" * 40)
        print(f"Layout: {name}")
        print("=" * 40)
        print(layout_report(grid))
        print()


if __name__ == "__main__":
    demo_presets()
    demo_layouts()
