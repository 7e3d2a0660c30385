"""
Greedy packing of loose panels into four-packs and two-packs.

A four-pack holds 2 side + 1 left + 1 right panels. A two-pack holds any two
of 2 side, 1 left + 1 right, or 1 side + 1 left/right. Whatever cannot be
packed is reported as single panels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from panels import PanelCounts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackedTier:
    """Packed result for one height tier (regular or extra-tall)."""

    four_packs: int = 0
    two_packs: int = 0
    leftover: PanelCounts = field(default_factory=PanelCounts)

    @property
    def total_panels(self) -> int:
        return 4 * self.four_packs + 2 * self.two_packs + self.leftover.total


def pack_panels(counts: PanelCounts) -> PackedTier:
    side, left, right = counts.side, counts.left, counts.right
    if min(side, left, right) < 0:
        raise ValueError(f"Panel counts must be non-negative, got {counts}")

    four_packs = 0
    two_packs = 0

    while side >= 2 and left >= 1 and right >= 1:
        side -= 2
        left -= 1
        right -= 1
        four_packs += 1

    while side >= 2:
        side -= 2
        two_packs += 1

    while left >= 1 and right >= 1:
        left -= 1
        right -= 1
        two_packs += 1

    # Mixed packs: one side panel with one handed panel, left first
    while side >= 1 and (left >= 1 or right >= 1):
        side -= 1
        if left >= 1:
            left -= 1
        else:
            right -= 1
        two_packs += 1

    tier = PackedTier(four_packs, two_packs, PanelCounts(side, left, right))
    logger.debug("Packed %s into %s", counts, tier)
    return tier
