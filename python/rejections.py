"""
Rejection taxonomy shared by the path validator, the preset guard and the
configurator. Rejections are returned, never raised: a rejected mutation
leaves the grid untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from grid_types import Position


class RejectReason(Enum):
    """Reason a cube toggle was refused."""

    DISCONNECTED_PATH = "disconnected_path"  # More than one group of cubes
    BRANCHING_PATH = "branching_path"  # A cube touches more than two others (T-junction)
    INVALID_PATH_SHAPE = "invalid_path_shape"  # Wrong number of path ends (e.g. a closed loop)
    PRESET_ADDITION_DENIED = "preset_addition_denied"  # Cell was empty in the preset
    PRESET_REMOVAL_CAP_EXCEEDED = "preset_removal_cap_exceeded"  # Removal limit reached
    PRESET_REMOVAL_NOT_AT_END = "preset_removal_not_at_end"  # Only end cubes may be removed


MESSAGES: dict[RejectReason, str] = {
    RejectReason.DISCONNECTED_PATH: "Invalid cube placement: cubes must connect in a continuous line",
    RejectReason.BRANCHING_PATH: "Invalid cube placement: creates a branch",
    RejectReason.INVALID_PATH_SHAPE: "Invalid cube placement: the path must have exactly two open ends",
    RejectReason.PRESET_ADDITION_DENIED: "Only preset cubes may be used",
    RejectReason.PRESET_REMOVAL_CAP_EXCEEDED: "Preset limit reached: only {cap} cubes can be removed from a preset",
    RejectReason.PRESET_REMOVAL_NOT_AT_END: "Only end cubes may be removed",
}

# Short toast text for the UI
FRIENDLY_MESSAGES: dict[RejectReason, str] = {
    RejectReason.DISCONNECTED_PATH: "Cubes must connect in a continuous line",
    RejectReason.BRANCHING_PATH: "Cubes can't branch into a T",
    RejectReason.INVALID_PATH_SHAPE: "Cubes can't close into a loop",
    RejectReason.PRESET_ADDITION_DENIED: "Please use only the preset cubes",
    RejectReason.PRESET_REMOVAL_CAP_EXCEEDED: "You can remove up to {cap} preset cubes",
    RejectReason.PRESET_REMOVAL_NOT_AT_END: "Remove only from the ends of the shape",
}


@dataclass(frozen=True)
class Rejection:
    """A refused mutation: why, where, and the message shown to the user."""

    reason: RejectReason
    message: str
    position: Position | None = None
    cap: int | None = None  # Removal cap in force, for cap rejections

    @classmethod
    def of(cls, reason: RejectReason, position: Position | None = None, cap: int | None = None) -> Rejection:
        """Build a rejection using the standard message for `reason`."""
        return cls(reason, MESSAGES[reason].format(cap=cap), position, cap)

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at {self.position}"


def friendly_message(rejection: Rejection | None) -> str:
    """Toast text for a rejection ('' when there is nothing to show)."""
    if rejection is None:
        return ""
    return FRIENDLY_MESSAGES[rejection.reason].format(cap=rejection.cap)
