"""Tests for the configurator session."""

import pytest

from configurator import Configurator
from diagnostics import MemorySink
from flow_path import EMPTY_PATH
from grid_types import Direction
from preset_guard import ClockScheduler, GuardPhase, ManualScheduler
from presets import PresetName
from rejections import RejectReason, friendly_message
from requirements import EMPTY_REQUIREMENTS, Requirements
from rules import RuleSet


def make_configurator() -> tuple[Configurator, ManualScheduler, MemorySink]:
    scheduler = ManualScheduler()
    sink = MemorySink()
    return Configurator(RuleSet(), scheduler, sink), scheduler, sink


class TestToggleCube:
    """Tests for placing and removing cubes."""

    def test_starts_empty(self) -> None:
        """A new session has an empty 3x3 grid and no requirements."""
        config, _, _ = make_configurator()
        assert config.grid.cube_count == 0
        assert config.path == EMPTY_PATH
        assert config.requirements == EMPTY_REQUIREMENTS

    def test_build_line(self) -> None:
        """Placing three cubes in a line updates the requirements."""
        config, _, _ = make_configurator()
        for col in range(3):
            assert config.toggle_cube(1, col) is None
        assert config.requirements == Requirements(four_pack_regular=1, two_pack_regular=2, straight_couplings=2)
        assert len(config.path) == 3

    def test_branch_rejected_atomically(self) -> None:
        """Adding (0, 1) to the line is refused and nothing changes."""
        config, _, sink = make_configurator()
        for col in range(3):
            config.toggle_cube(1, col)
        grid, path, requirements = config.grid, config.path, config.requirements

        rejection = config.toggle_cube(0, 1)

        assert rejection is not None
        assert rejection.reason is RejectReason.BRANCHING_PATH
        assert config.grid is grid
        assert config.path is path
        assert config.requirements is requirements
        assert config.last_rejection == rejection
        assert sink.events[-1].name == "rejected"
        assert sink.events[-1].details["reason"] == "branching_path"

    def test_disconnected_rejected(self) -> None:
        """A cube away from the path is refused."""
        config, _, _ = make_configurator()
        config.toggle_cube(0, 0)
        rejection = config.toggle_cube(2, 2)
        assert rejection is not None
        assert rejection.reason is RejectReason.DISCONNECTED_PATH
        assert config.grid.cube_positions() == [(0, 0)]

    def test_removal_that_splits_rejected(self) -> None:
        """Removing the middle of a line would disconnect it."""
        config, _, _ = make_configurator()
        for col in range(3):
            config.toggle_cube(1, col)
        rejection = config.toggle_cube(1, 1)
        assert rejection is not None
        assert rejection.reason is RejectReason.DISCONNECTED_PATH
        assert config.grid.cube_count == 3

    def test_success_clears_last_rejection(self) -> None:
        """A successful edit clears the previous rejection."""
        config, _, _ = make_configurator()
        config.toggle_cube(0, 0)
        config.toggle_cube(2, 2)
        assert config.last_rejection is not None
        config.toggle_cube(0, 1)
        assert config.last_rejection is None

    def test_out_of_bounds(self) -> None:
        """Coordinates off the grid are a programming error."""
        config, _, _ = make_configurator()
        with pytest.raises(ValueError):
            config.toggle_cube(3, 0)


class TestOtherEdits:
    """Tests for height and cladding edits."""

    def test_toggle_height(self) -> None:
        """An extra-tall cube moves to the extra-tall tier."""
        config, _, _ = make_configurator()
        config.toggle_cube(1, 1)
        config.toggle_height(1, 1)
        assert config.requirements == Requirements(four_pack_extra_tall=1)

    def test_toggle_height_empty(self) -> None:
        """Height toggles on empty cells do nothing."""
        config, _, _ = make_configurator()
        grid = config.grid
        config.toggle_height(0, 0)
        assert config.grid is grid

    def test_toggle_cladding(self) -> None:
        """Excluding a face drops its panel."""
        config, _, _ = make_configurator()
        config.toggle_cube(1, 1)
        config.toggle_cladding(1, 1, Direction.N)
        config.toggle_cladding(1, 1, Direction.S)
        assert config.requirements == Requirements(two_pack_regular=1)
        config.toggle_cladding(1, 1, Direction.S)
        assert config.requirements == Requirements(two_pack_regular=1, right_panels=1)


class TestPresets:
    """Tests for presets and the guard inside a session."""

    def test_apply_preset(self) -> None:
        """Applying a preset replaces the grid and computes requirements."""
        config, _, sink = make_configurator()
        config.toggle_cube(0, 0)
        config.apply_preset(PresetName.U_SHAPE)
        assert config.grid.cube_positions() == [(1, 0), (1, 2), (2, 0), (2, 1), (2, 2)]
        assert config.requirements.corner_connectors == 2
        assert config.is_preset_active()
        assert "preset_applied" in sink.names()

    def test_l_preset_guard(self) -> None:
        """After settling, the L preset allows two end removals only."""
        config, scheduler, _ = make_configurator()
        config.apply_preset(PresetName.L_SHAPE)
        scheduler.advance(1.0)
        assert config.guard.phase is GuardPhase.STABLE

        assert config.toggle_cube(2, 1) is None
        assert config.toggle_cube(1, 1) is None
        assert config.removed_count() == 2

        rejection = config.toggle_cube(1, 0)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_REMOVAL_CAP_EXCEEDED
        assert friendly_message(rejection) == "You can remove up to 2 preset cubes"
        assert config.grid.cube_positions() == [(1, 0)]

        rejection = config.toggle_cube(0, 0)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_ADDITION_DENIED

        assert config.toggle_cube(1, 1) is None
        assert config.removed_count() == 1

    def test_edits_free_while_settling(self) -> None:
        """Before the guard settles, additions are only path-checked."""
        config, _, _ = make_configurator()
        config.apply_preset(PresetName.STRAIGHT)
        assert config.toggle_cube(0, 0) is None
        assert config.guard.phase is GuardPhase.AWAITING_CAPTURE

    def test_poll_runs_timers(self) -> None:
        """Timers fire through poll() as the clock moves."""
        config, scheduler, _ = make_configurator()
        config.apply_preset(PresetName.SINGLE)
        scheduler._now += 1.0
        assert config.guard.phase is GuardPhase.AWAITING_CAPTURE
        config.poll()
        assert config.guard.phase is GuardPhase.STABLE

    def test_edit_after_idle_wait_is_guarded(self) -> None:
        """An edit long after the preset, with no polling in between, is checked against it."""
        clock = [0.0]
        config = Configurator(RuleSet(), ClockScheduler(clock=lambda: clock[0]), MemorySink())
        config.apply_preset(PresetName.L_SHAPE)
        before = config.grid
        clock[0] = 5.0

        rejection = config.toggle_cube(0, 0)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_ADDITION_DENIED
        assert config.guard.phase is GuardPhase.STABLE
        assert config.grid is before
        assert config.guard.snapshot == before

    def test_reset(self) -> None:
        """Reset clears the grid and forgets the preset."""
        config, scheduler, _ = make_configurator()
        config.apply_preset(PresetName.L_SHAPE)
        scheduler.advance(1.0)
        config.reset()
        assert config.grid.cube_count == 0
        assert config.requirements == EMPTY_REQUIREMENTS
        assert not config.is_preset_active()
        assert config.toggle_cube(0, 0) is None
