"""
Bill of materials: validate the grid, tally panels and connectors, then pack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields

from connectors import ConnectorCounts, count_connectors
from flow_path import ValidPath, validate_path
from grid_types import Grid
from packing import pack_panels
from panels import RawPanels, count_panels
from rejections import Rejection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawRequirements:
    """Unpacked counts for a valid path."""

    panels: RawPanels = field(default_factory=RawPanels)
    connectors: ConnectorCounts = field(default_factory=ConnectorCounts)


@dataclass(frozen=True)
class Requirements:
    """Packed bill of materials."""

    four_pack_regular: int = 0
    four_pack_extra_tall: int = 0
    two_pack_regular: int = 0
    two_pack_extra_tall: int = 0
    left_panels: int = 0
    right_panels: int = 0
    side_panels: int = 0
    left_panels_extra_tall: int = 0
    right_panels_extra_tall: int = 0
    side_panels_extra_tall: int = 0
    corner_connectors: int = 0
    straight_couplings: int = 0

    def to_dict(self) -> dict[str, int]:
        """Mapping with camelCase keys (fourPackRegular, ...)."""
        return {_camel_case(f.name): getattr(self, f.name) for f in fields(self)}

    def total_panels(self) -> int:
        """Panels across all packs and singles, both tiers."""
        return (
            4 * (self.four_pack_regular + self.four_pack_extra_tall)
            + 2 * (self.two_pack_regular + self.two_pack_extra_tall)
            + self.left_panels + self.right_panels + self.side_panels
            + self.left_panels_extra_tall + self.right_panels_extra_tall + self.side_panels_extra_tall
        )


EMPTY_REQUIREMENTS = Requirements()


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word.capitalize() for word in rest)


def calculate_raw(grid: Grid, path: ValidPath) -> RawRequirements:
    return RawRequirements(count_panels(grid, path), count_connectors(path))


def pack_requirements(raw: RawRequirements) -> Requirements:
    regular = pack_panels(raw.panels.regular)
    tall = pack_panels(raw.panels.extra_tall)
    return Requirements(
        four_pack_regular=regular.four_packs,
        four_pack_extra_tall=tall.four_packs,
        two_pack_regular=regular.two_packs,
        two_pack_extra_tall=tall.two_packs,
        left_panels=regular.leftover.left,
        right_panels=regular.leftover.right,
        side_panels=regular.leftover.side,
        left_panels_extra_tall=tall.leftover.left,
        right_panels_extra_tall=tall.leftover.right,
        side_panels_extra_tall=tall.leftover.side,
        corner_connectors=raw.connectors.corner_connectors,
        straight_couplings=raw.connectors.straight_couplings,
    )


def calculate_requirements(grid: Grid) -> Requirements | Rejection:
    """Full pipeline; an illegal grid yields the validator's Rejection."""
    path = validate_path(grid)
    if isinstance(path, Rejection):
        return path
    if not path.cubes:
        return EMPTY_REQUIREMENTS

    requirements = pack_requirements(calculate_raw(grid, path))
    logger.debug("Requirements for %d cubes: %s", len(path), requirements)
    return requirements
