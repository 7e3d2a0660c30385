"""
Interactive demo for cubeflow.
Move a cursor over the grid, place cubes and presets, and watch the bill of
materials update.
"""

import logging
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_grid, render_requirements
from configurator import Configurator
from diagnostics import MemorySink, configure_logging
from flow_path import describe_shape
from grid_types import Direction
from presets import PresetName, parse_preset_name
from rejections import friendly_message

MOVE_KEYS: dict[str, Direction] = {
    "w": Direction.N,
    "s": Direction.S,
    "a": Direction.W,
    "d": Direction.E,
    readchar.key.UP: Direction.N,
    readchar.key.DOWN: Direction.S,
    readchar.key.LEFT: Direction.W,
    readchar.key.RIGHT: Direction.E,
}

CLADDING_KEYS: dict[str, Direction] = {
    "i": Direction.N,
    "k": Direction.S,
    "j": Direction.W,
    "l": Direction.E,
}

PRESET_KEYS: dict[str, PresetName] = {
    "1": PresetName.SINGLE,
    "2": PresetName.STRAIGHT,
    "3": PresetName.L_SHAPE,
    "4": PresetName.U_SHAPE,
}


class InteractiveDemo:
    """Keyboard-driven configurator session."""

    def __init__(self, configurator: Configurator | None = None) -> None:
        self.configurator = configurator or Configurator(sink=MemorySink())
        self.console = Console()
        self.cursor = (0, 0)
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with grid, requirements and status."""
        config = self.configurator
        row, col = self.cursor

        status = Text()
        status.append("Cursor: ", style="bold")
        status.append(f"[{row}, {col}]    ")
        status.append("Shape: ", style="bold")
        status.append(f"{describe_shape(config.path).name}    ")
        status.append("Preset: ", style="bold")
        if config.is_preset_active():
            status.append(f"{config.guard.phase.name} (removed {config.removed_count()})\n\n")
        else:
            status.append("none\n\n")

        # Convert ANSI-colored grid text to Rich Text properly
        status.append(Text.from_ansi(render_grid(config.grid, config.path, highlight=self.cursor)))
        status.append("\n\n")
        status.append("Requirements:\n", style="bold cyan")
        status.append(render_requirements(config.requirements) + "\n\n")

        status.append("Keys:\n", style="bold cyan")
        status.append("  WASD / arrows - Move cursor\n")
        status.append("  Space - Toggle cube\n")
        status.append("  H - Toggle extra-tall\n")
        status.append("  I/J/K/L - Toggle cladding on N/W/S/E face\n")
        status.append("  1-4 - Preset (single, straight, L, U)\n")
        status.append("  R - Reset\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="cubeflow Configurator", border_style="green", width=80)

    def move_cursor(self, direction: Direction) -> None:
        dr, dc = direction.delta
        row, col = self.cursor[0] + dr, self.cursor[1] + dc
        if self.configurator.grid.in_bounds(row, col):
            self.cursor = (row, col)

    def toggle_cube(self) -> None:
        rejection = self.configurator.toggle_cube(*self.cursor)
        if rejection is not None:
            self.status_message = "✗ " + friendly_message(rejection)
        else:
            self.status_message = f"✓ Toggled cube at {list(self.cursor)}"

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the demo should stop."""
        self.configurator.poll()
        if key in MOVE_KEYS or key.lower() in MOVE_KEYS:
            self.move_cursor(MOVE_KEYS.get(key) or MOVE_KEYS[key.lower()])
        elif key == " ":
            self.toggle_cube()
        elif key.lower() == "h":
            self.configurator.toggle_height(*self.cursor)
            self.status_message = "Toggled height"
        elif key.lower() in CLADDING_KEYS:
            edge = CLADDING_KEYS[key.lower()]
            self.configurator.toggle_cladding(*self.cursor, edge)
            self.status_message = f"Toggled cladding on {edge.value} face"
        elif key in PRESET_KEYS:
            self.configurator.apply_preset(PRESET_KEYS[key])
            self.status_message = f"Applied preset {PRESET_KEYS[key].value}"
        elif key.lower() == "r":
            self.configurator.reset()
            self.status_message = "Grid reset"
        elif key.lower() == "q":
            self.status_message = "Quitting..."
            return False
        else:
            self.status_message = f"Unknown key: {repr(key)}"
        return True

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    self.configurator.poll()
                    live.update(self.generate_display())
                    if not self.handle_key(readchar.readkey()):
                        live.update(self.generate_display())
                        break
            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main() -> None:
    """Run the interactive demo, optionally starting from a named preset."""
    demo = InteractiveDemo()
    if len(sys.argv) > 1:
        demo.configurator.apply_preset(parse_preset_name(sys.argv[1]))
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "sublime":
        # Running from IDE - just render the initial state
        configure_logging(logging.DEBUG)
        print("Running from IDE - rendering initial state")
        print()
        configurator = Configurator()
        configurator.apply_preset(PresetName.U_SHAPE)
        print(render_grid(configurator.grid, configurator.path))
        print(render_requirements(configurator.requirements))
    else:
        main()
