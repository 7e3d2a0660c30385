"""
Configurator session: owns the grid and its derived bill of materials, and
applies user edits atomically.

Every cube toggle goes: preset guard -> candidate grid -> path validation ->
requirements -> commit. A refused toggle returns its Rejection and leaves
grid, path and requirements exactly as they were.
"""

from __future__ import annotations

import logging

import grid_model
from diagnostics import DiagnosticEvent, DiagnosticsSink, LoggingSink
from flow_path import EMPTY_PATH, ValidPath, validate_path
from grid_types import Direction, Grid
from preset_guard import ClockScheduler, PresetGuard, Scheduler
from presets import PresetName, build_preset
from rejections import Rejection
from requirements import EMPTY_REQUIREMENTS, Requirements, calculate_raw, pack_requirements
from rules import RuleSet

logger = logging.getLogger(__name__)


class Configurator:
    """A single editing session on one grid."""

    def __init__(
        self,
        rules: RuleSet | None = None,
        scheduler: Scheduler | None = None,
        sink: DiagnosticsSink | None = None,
    ) -> None:
        self.rules = rules or RuleSet()
        self.sink: DiagnosticsSink = sink or LoggingSink()
        self.grid = Grid.empty(self.rules.rows, self.rules.cols)
        self.path: ValidPath = EMPTY_PATH
        self.requirements: Requirements = EMPTY_REQUIREMENTS
        self.last_rejection: Rejection | None = None
        self.guard = PresetGuard(
            lambda: self.grid,
            self.rules,
            scheduler or ClockScheduler(),
            self.sink,
        )

    # -------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------

    def _reject(self, rejection: Rejection) -> Rejection:
        self.last_rejection = rejection
        logger.debug("Rejected: %s", rejection)
        self.sink.record(DiagnosticEvent("rejected", {
            "reason": rejection.reason.value,
            "message": rejection.message,
            "position": rejection.position,
        }))
        return rejection

    def _commit(self, candidate: Grid) -> Rejection | None:
        """Validate and recompute for `candidate`; install everything or nothing."""
        path = validate_path(candidate)
        if isinstance(path, Rejection):
            return self._reject(path)

        requirements = pack_requirements(calculate_raw(candidate, path)) if path.cubes else EMPTY_REQUIREMENTS
        self.grid = candidate
        self.path = path
        self.requirements = requirements
        self.last_rejection = None
        return None

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def toggle_cube(self, row: int, col: int) -> Rejection | None:
        """Add or remove a cube. Returns the Rejection if refused."""
        self.poll()
        self.grid.cell(row, col)  # bounds check

        rejection = self.guard.check_toggle(self.grid, row, col)
        if rejection is not None:
            return self._reject(rejection)

        result = self._commit(grid_model.toggle_cube(self.grid, row, col))
        if result is None:
            self.guard.notify_mutation()
        return result

    def toggle_height(self, row: int, col: int) -> None:
        """Flip a cube between regular and extra-tall (nothing happens on an empty cell)."""
        self.poll()
        candidate = grid_model.toggle_height(self.grid, row, col)
        if candidate is not self.grid:
            self._commit(candidate)
            self.guard.notify_mutation()

    def toggle_cladding(self, row: int, col: int, edge: Direction) -> None:
        """Exclude an exposed face from cladding or include it again."""
        self.poll()
        candidate = grid_model.toggle_cladding(self.grid, row, col, edge)
        if candidate is not self.grid:
            self._commit(candidate)
            self.guard.notify_mutation()

    def apply_preset(self, name: PresetName) -> None:
        """Replace the grid with a preset and start the guard's settle period."""
        self.poll()
        candidate = build_preset(name, self.rules.rows, self.rules.cols)
        rejection = self._commit(candidate)
        if rejection is not None:
            raise ValueError(f"Preset '{name.value}' is not a valid path: {rejection}")
        logger.info("Applied preset %s", name.value)
        self.sink.record(DiagnosticEvent("preset_applied", {"preset": name.value}))
        self.guard.begin_preset()

    def reset(self) -> None:
        """Clear the grid and forget any preset."""
        self.guard.reset()
        self._commit(Grid.empty(self.rules.rows, self.rules.cols))
        self.sink.record(DiagnosticEvent("reset", {}))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def poll(self) -> None:
        """Run guard timers that have come due."""
        self.guard.scheduler.run_pending()

    def is_preset_active(self) -> bool:
        return self.guard.preset_active

    def removed_count(self) -> int:
        return self.guard.removed_count(self.grid)
