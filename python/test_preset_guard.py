"""Tests for the preset guard and its schedulers."""

from diagnostics import MemorySink
from grid_model import toggle_cube
from grid_types import Grid
from preset_guard import ClockScheduler, GuardPhase, ManualScheduler, PresetGuard
from presets import PresetName, build_preset
from rejections import RejectReason, friendly_message
from rules import GuardTiming, RuleSet


class GridHolder:
    """Mutable stand-in for the configurator's committed grid."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid

    def __call__(self) -> Grid:
        return self.grid


def settled_guard(preset: PresetName) -> tuple[PresetGuard, GridHolder]:
    holder = GridHolder(build_preset(preset))
    guard = PresetGuard(holder, RuleSet(), ManualScheduler())
    guard.begin_preset()
    guard.scheduler.advance(1.0)  # type: ignore[attr-defined]
    assert guard.phase is GuardPhase.STABLE
    return guard, holder


class TestManualScheduler:
    """Tests for the virtual-clock scheduler."""

    def test_fires_when_due(self) -> None:
        """Callbacks run once the clock passes their delay."""
        scheduler = ManualScheduler()
        fired: list[str] = []
        scheduler.call_later(0.5, lambda: fired.append("a"))
        scheduler.advance(0.4)
        assert fired == []
        scheduler.advance(0.1)
        assert fired == ["a"]

    def test_order_and_chaining(self) -> None:
        """Callbacks run in due order, including ones they schedule."""
        scheduler = ManualScheduler()
        fired: list[str] = []
        scheduler.call_later(0.2, lambda: fired.append("late"))
        scheduler.call_later(0.1, lambda: scheduler.call_later(0.05, lambda: fired.append("chained")))
        scheduler.advance(1.0)
        assert fired == ["chained", "late"]

    def test_cancel(self) -> None:
        """Cancelled timers never fire."""
        scheduler = ManualScheduler()
        fired: list[str] = []
        handle = scheduler.call_later(0.1, lambda: fired.append("x"))
        handle.cancel()
        scheduler.advance(1.0)
        assert fired == []
        assert scheduler.pending() == 0

    def test_chained_delay_counts_from_parent_due_time(self) -> None:
        """A timer set by a firing callback is due relative to its parent, not the clock."""
        scheduler = ManualScheduler()
        fired: list[float] = []
        scheduler.call_later(0.25, lambda: scheduler.call_later(0.5, lambda: fired.append(scheduler.now())))
        scheduler.advance(5.0)
        assert fired == [0.75]
        assert scheduler.now() == 5.0


class TestClockScheduler:
    """Tests for the scheduler polled against a real clock."""

    def test_late_poll_fires_whole_chain(self) -> None:
        """One late run_pending() fires a timer and everything it chains that is already due."""
        clock = [0.0]
        scheduler = ClockScheduler(clock=lambda: clock[0])
        fired: list[str] = []
        scheduler.call_later(0.25, lambda: scheduler.call_later(0.5, lambda: fired.append("second")))
        clock[0] = 5.0
        scheduler.run_pending()
        assert fired == ["second"]
        assert scheduler.pending() == 0

    def test_not_due_yet(self) -> None:
        """Nothing fires before its due time."""
        clock = [0.0]
        scheduler = ClockScheduler(clock=lambda: clock[0])
        fired: list[str] = []
        scheduler.call_later(0.5, lambda: fired.append("a"))
        clock[0] = 0.25
        scheduler.run_pending()
        assert fired == []
        assert scheduler.pending() == 1


class TestGuardPhases:
    """Tests for the settle sequence."""

    def test_idle_by_default(self) -> None:
        """No preset, no constraints."""
        guard = PresetGuard(GridHolder(Grid.empty()), scheduler=ManualScheduler())
        assert guard.phase is GuardPhase.IDLE
        assert not guard.preset_active
        assert guard.check_toggle(Grid.empty(), 0, 0) is None

    def test_settle_sequence(self) -> None:
        """Capture after 0.3s, stable 0.5s later."""
        scheduler = ManualScheduler()
        holder = GridHolder(build_preset(PresetName.L_SHAPE))
        sink = MemorySink()
        guard = PresetGuard(holder, RuleSet(), scheduler, sink)

        guard.begin_preset()
        assert guard.phase is GuardPhase.AWAITING_CAPTURE
        assert guard.preset_active
        assert guard.snapshot is None

        scheduler.advance(0.3)
        assert guard.phase is GuardPhase.AWAITING_COMPLETION
        assert guard.snapshot == holder.grid

        scheduler.advance(0.4)
        assert guard.phase is GuardPhase.AWAITING_COMPLETION
        scheduler.advance(0.2)
        assert guard.phase is GuardPhase.STABLE
        assert sink.names() == ["preset_captured", "preset_stable"]

    def test_custom_timing(self) -> None:
        """Delays come from the rule set."""
        scheduler = ManualScheduler()
        rules = RuleSet(timing=GuardTiming(capture_delay=0.0, completion_delay=2.0))
        guard = PresetGuard(GridHolder(Grid.empty()), rules, scheduler)
        guard.begin_preset()
        scheduler.advance(0.0)
        assert guard.phase is GuardPhase.AWAITING_COMPLETION
        scheduler.advance(2.0)
        assert guard.phase is GuardPhase.STABLE

    def test_no_constraints_while_settling(self) -> None:
        """Edits during the settle period are not checked."""
        scheduler = ManualScheduler()
        holder = GridHolder(build_preset(PresetName.L_SHAPE))
        guard = PresetGuard(holder, RuleSet(), scheduler)
        guard.begin_preset()
        scheduler.advance(0.3)
        assert guard.check_toggle(holder.grid, 0, 0) is None

    def test_mutation_restarts_capture(self) -> None:
        """A mutation while settling restarts from capture with the newer grid."""
        scheduler = ManualScheduler()
        holder = GridHolder(build_preset(PresetName.STRAIGHT))
        guard = PresetGuard(holder, RuleSet(), scheduler)
        guard.begin_preset()
        scheduler.advance(0.3)
        assert guard.phase is GuardPhase.AWAITING_COMPLETION

        holder.grid = toggle_cube(holder.grid, 1, 2)
        guard.notify_mutation()
        assert guard.phase is GuardPhase.AWAITING_CAPTURE
        assert guard.snapshot is None

        scheduler.advance(0.5)  # old completion time passes without effect
        assert guard.phase is GuardPhase.AWAITING_COMPLETION
        assert guard.snapshot is not None
        assert guard.snapshot.cube_count == 2

    def test_long_wait_settles(self) -> None:
        """Waiting well past both delays leaves the guard stable."""
        scheduler = ManualScheduler()
        holder = GridHolder(build_preset(PresetName.L_SHAPE))
        guard = PresetGuard(holder, RuleSet(), scheduler)
        guard.begin_preset()
        scheduler.advance(5.0)
        assert guard.phase is GuardPhase.STABLE
        assert guard.snapshot == holder.grid

    def test_mutation_when_stable_ignored(self) -> None:
        """Once stable, mutations do not restart anything."""
        guard, _ = settled_guard(PresetName.L_SHAPE)
        guard.notify_mutation()
        assert guard.phase is GuardPhase.STABLE

    def test_new_preset_discards_snapshot(self) -> None:
        """Applying another preset starts over."""
        guard, holder = settled_guard(PresetName.L_SHAPE)
        holder.grid = build_preset(PresetName.U_SHAPE)
        guard.begin_preset()
        assert guard.phase is GuardPhase.AWAITING_CAPTURE
        assert guard.snapshot is None
        guard.scheduler.advance(1.0)  # type: ignore[attr-defined]
        assert guard.snapshot == holder.grid

    def test_reset(self) -> None:
        """Reset cancels timers and returns to idle."""
        scheduler = ManualScheduler()
        guard = PresetGuard(GridHolder(Grid.empty()), RuleSet(), scheduler)
        guard.begin_preset()
        guard.reset()
        scheduler.advance(5.0)
        assert guard.phase is GuardPhase.IDLE
        assert guard.snapshot is None


class TestCheckToggle:
    """Tests for the constraints applied once stable."""

    def test_l_preset_sequence(self) -> None:
        """Two end removals succeed, the third hits the cap."""
        guard, holder = settled_guard(PresetName.L_SHAPE)

        assert guard.check_toggle(holder.grid, 2, 1) is None
        holder.grid = toggle_cube(holder.grid, 2, 1)
        assert guard.removed_count(holder.grid) == 1

        assert guard.check_toggle(holder.grid, 1, 1) is None
        holder.grid = toggle_cube(holder.grid, 1, 1)
        assert guard.removed_count(holder.grid) == 2

        rejection = guard.check_toggle(holder.grid, 1, 0)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_REMOVAL_CAP_EXCEEDED
        assert rejection.message == "Preset limit reached: only 2 cubes can be removed from a preset"

    def test_addition_denied(self) -> None:
        """Cells empty in the preset stay empty."""
        guard, holder = settled_guard(PresetName.L_SHAPE)
        rejection = guard.check_toggle(holder.grid, 0, 0)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_ADDITION_DENIED
        assert rejection.position == (0, 0)

    def test_readding_allowed_at_cap(self) -> None:
        """Restoring a preset cube is allowed even at the cap."""
        guard, holder = settled_guard(PresetName.L_SHAPE)
        holder.grid = toggle_cube(toggle_cube(holder.grid, 2, 1), 1, 1)
        assert guard.check_toggle(holder.grid, 1, 1) is None

    def test_not_at_end(self) -> None:
        """Interior cubes cannot be removed."""
        guard, holder = settled_guard(PresetName.STRAIGHT)
        rejection = guard.check_toggle(holder.grid, 1, 1)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_REMOVAL_NOT_AT_END

    def test_cap_checked_before_end(self) -> None:
        """At the cap, even an interior cube reports the cap."""
        guard, holder = settled_guard(PresetName.U_SHAPE)
        holder.grid = toggle_cube(toggle_cube(holder.grid, 1, 0), 1, 2)
        rejection = guard.check_toggle(holder.grid, 2, 1)
        assert rejection is not None
        assert rejection.reason is RejectReason.PRESET_REMOVAL_CAP_EXCEEDED

    def test_custom_cap(self) -> None:
        """The removal cap comes from the rule set."""
        holder = GridHolder(build_preset(PresetName.STRAIGHT))
        scheduler = ManualScheduler()
        guard = PresetGuard(holder, RuleSet(removal_cap=0), scheduler)
        guard.begin_preset()
        scheduler.advance(1.0)
        rejection = guard.check_toggle(holder.grid, 1, 0)
        assert rejection is not None
        assert "only 0 cubes" in rejection.message
        assert rejection.cap == 0
        assert friendly_message(rejection) == "You can remove up to 0 preset cubes"
