"""
Rules governing a configurator session.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GuardTiming:
    """Settle delays (seconds) used by the preset guard after a preset is applied."""

    capture_delay: float = 0.3  # Wait before snapshotting the preset grid
    completion_delay: float = 0.5  # Wait after the snapshot before constraints apply

    def __post_init__(self) -> None:
        if self.capture_delay < 0 or self.completion_delay < 0:
            raise ValueError(
                f"Guard delays must be non-negative\n"
                f"  capture_delay: {self.capture_delay}\n"
                f"  completion_delay: {self.completion_delay}"
            )


@dataclass(frozen=True)
class RuleSet:
    """Rules governing grid size and preset editing."""

    rows: int = 3
    cols: int = 3
    removal_cap: int = 2  # Cubes that may be removed from a preset
    timing: GuardTiming = field(default_factory=GuardTiming)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.rows}x{self.cols}")
        if self.removal_cap < 0:
            raise ValueError(f"removal_cap must be non-negative, got {self.removal_cap}")
