"""
Connector classification: every joint between consecutive path cubes takes
a straight coupling or a corner connector.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flow_path import ValidPath
from grid_types import Position


class JointType(Enum):
    STRAIGHT = "straight"
    CORNER = "corner"


@dataclass(frozen=True)
class Joint:
    """Connection from one path cube to the next."""

    source: Position
    target: Position
    kind: JointType


@dataclass(frozen=True)
class ConnectorCounts:
    straight_couplings: int = 0
    corner_connectors: int = 0

    @property
    def total(self) -> int:
        return self.straight_couplings + self.corner_connectors


def classify_joints(path: ValidPath) -> list[Joint]:
    """
    One joint per consecutive pair of cubes.

    A joint is a corner when the path bends at the cube it leads into.
    """
    cubes = path.cubes
    return [
        Joint(
            current.position,
            following.position,
            JointType.CORNER if following.is_corner else JointType.STRAIGHT,
        )
        for current, following in zip(cubes, cubes[1:])
    ]


def count_connectors(path: ValidPath) -> ConnectorCounts:
    joints = classify_joints(path)
    corners = sum(1 for joint in joints if joint.kind is JointType.CORNER)
    return ConnectorCounts(len(joints) - corners, corners)
