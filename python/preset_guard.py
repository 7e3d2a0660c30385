"""
Preset mutation guard.

After a preset is applied the grid settles in two timed steps: the guard
waits, snapshots the grid, waits again, and only then starts constraining
edits against the snapshot. Any mutation while settling restarts the wait.

Timers run on an injected cooperative scheduler. Nothing fires on its own
thread: due callbacks run when the owner calls `run_pending()`.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from enum import Enum, auto
from typing import Callable, Protocol

from diagnostics import DiagnosticEvent, DiagnosticsSink, NullSink
from grid_model import degree
from grid_types import Grid
from rejections import RejectReason, Rejection
from rules import RuleSet

logger = logging.getLogger(__name__)


# =============================================================================
# Scheduling
# =============================================================================


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def run_pending(self) -> None: ...


class _Timer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ClockScheduler:
    """Timers against a monotonic clock, fired from run_pending()."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._queue: list[tuple[float, int, _Timer]] = []
        self._counter = itertools.count()
        self._clock = clock
        self._firing_due: float | None = None

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Timer:
        """Schedule `callback`. Inside a firing callback the delay counts from that timer's due time."""
        base = self._firing_due if self._firing_due is not None else self.now()
        timer = _Timer(base + delay, callback)
        heapq.heappush(self._queue, (timer.due, next(self._counter), timer))
        return timer

    def run_pending(self) -> None:
        """Fire due timers in order, including ones scheduled by earlier callbacks."""
        while self._queue and self._queue[0][0] <= self.now():
            _, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._firing_due = timer.due
            try:
                timer.callback()
            finally:
                self._firing_due = None

    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class ManualScheduler(ClockScheduler):
    """Virtual clock moved forward explicitly with advance()."""

    def __init__(self) -> None:
        super().__init__()
        self._now = 0.0

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward, stopping at each due time on the way."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            self._now = max(self._now, self._queue[0][0])
            self.run_pending()
        self._now = target
        self.run_pending()


# =============================================================================
# Guard
# =============================================================================


class GuardPhase(Enum):
    IDLE = auto()  # No preset; edits unconstrained
    AWAITING_CAPTURE = auto()  # Preset applied, waiting to snapshot
    AWAITING_COMPLETION = auto()  # Snapshot taken, waiting before constraints apply
    STABLE = auto()  # Edits checked against the snapshot


class PresetGuard:
    """
    Constrains edits to a settled preset.

    Args:
        grid_source: Returns the current committed grid (read at capture time)
        rules: Removal cap and settle delays
        scheduler: Timer source
        sink: Receives phase-change events
    """

    def __init__(
        self,
        grid_source: Callable[[], Grid],
        rules: RuleSet | None = None,
        scheduler: Scheduler | None = None,
        sink: DiagnosticsSink | None = None,
    ) -> None:
        self._grid_source = grid_source
        self.rules = rules or RuleSet()
        self.scheduler: Scheduler = scheduler or ClockScheduler()
        self.sink: DiagnosticsSink = sink or NullSink()
        self.phase = GuardPhase.IDLE
        self.snapshot: Grid | None = None
        self._timer: TimerHandle | None = None

    @property
    def preset_active(self) -> bool:
        return self.phase is not GuardPhase.IDLE

    def _set_phase(self, phase: GuardPhase) -> None:
        if phase is not self.phase:
            logger.info("Preset guard: %s -> %s", self.phase.name, phase.name)
            self.phase = phase

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_capture(self) -> None:
        self._cancel_timer()
        self.snapshot = None
        self._set_phase(GuardPhase.AWAITING_CAPTURE)
        self._timer = self.scheduler.call_later(self.rules.timing.capture_delay, self._capture)

    def _capture(self) -> None:
        self.snapshot = self._grid_source()
        self._set_phase(GuardPhase.AWAITING_COMPLETION)
        self.sink.record(DiagnosticEvent("preset_captured", {"cubes": self.snapshot.cube_count}))
        self._timer = self.scheduler.call_later(self.rules.timing.completion_delay, self._complete)

    def _complete(self) -> None:
        self._timer = None
        self._set_phase(GuardPhase.STABLE)
        self.sink.record(DiagnosticEvent("preset_stable", {}))

    def begin_preset(self) -> None:
        """A preset was just applied; start settling (restarts any earlier preset)."""
        self._schedule_capture()

    def notify_mutation(self) -> None:
        """A committed edit; while settling this restarts the wait."""
        if self.phase in (GuardPhase.AWAITING_CAPTURE, GuardPhase.AWAITING_COMPLETION):
            logger.debug("Mutation while settling; restarting capture")
            self._schedule_capture()

    def reset(self) -> None:
        self._cancel_timer()
        self.snapshot = None
        self._set_phase(GuardPhase.IDLE)

    def removed_count(self, grid: Grid) -> int:
        """Preset cubes missing from `grid` (0 without a snapshot)."""
        if self.snapshot is None:
            return 0
        return max(0, self.snapshot.cube_count - grid.cube_count)

    def check_toggle(self, grid: Grid, row: int, col: int) -> Rejection | None:
        """
        Decide whether toggling (row, col) on `grid` is allowed.

        Returns:
            None if permitted, otherwise the Rejection
        """
        if self.phase is not GuardPhase.STABLE or self.snapshot is None:
            return None

        if not grid.has_cube(row, col):
            if not self.snapshot.has_cube(row, col):
                return Rejection.of(RejectReason.PRESET_ADDITION_DENIED, (row, col))
            return None

        cap = self.rules.removal_cap
        if self.removed_count(grid) >= cap:
            return Rejection.of(RejectReason.PRESET_REMOVAL_CAP_EXCEEDED, (row, col), cap=cap)

        if degree(grid, row, col) > 1:
            return Rejection.of(RejectReason.PRESET_REMOVAL_NOT_AT_END, (row, col))

        return None
