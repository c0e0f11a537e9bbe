"""Map wall-relative item placements to world transforms."""
from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from ..models.gallery import ItemPlacement, RoomDimensions, WallSide

# Pulls items off the wall plane so they do not z-fight with it.
WALL_INSET = 0.05


@dataclass(slots=True, frozen=True, eq=False)
class WorldTransform:
    """World position of an item's centre and its rotation about +Y."""

    position: np.ndarray
    yaw: float

    @property
    def normal(self) -> np.ndarray:
        """Unit vector the item's front face points along."""
        return np.array([math.sin(self.yaw), 0.0, math.cos(self.yaw)], dtype=np.float64)

    @property
    def right(self) -> np.ndarray:
        """Unit vector along the item's horizontal extent."""
        return np.array([math.cos(self.yaw), 0.0, -math.sin(self.yaw)], dtype=np.float64)


def wall_normal(wall: WallSide) -> np.ndarray:
    """Inward (into the room) unit normal of a wall."""
    yaw = wall.facing_yaw
    return np.array([math.sin(yaw), 0.0, math.cos(yaw)], dtype=np.float64)


def wall_point(placement: ItemPlacement, dimensions: RoomDimensions, inset: float = 0.0) -> np.ndarray:
    """Point on the wall plane (moved ``inset`` into the room) at the item's offset and height."""
    half_width = dimensions.half_width
    half_depth = dimensions.half_depth
    wall = placement.wall

    if wall.runs_along_depth:
        side = 1.0 if wall is WallSide.EAST else -1.0
        x, z = side * (half_width - inset), placement.x
    else:
        side = 1.0 if wall is WallSide.SOUTH else -1.0
        x, z = placement.x, side * (half_depth - inset)
    return np.array([x, placement.y, z], dtype=np.float64)


def resolve_world_transform(
    placement: ItemPlacement,
    dimensions: RoomDimensions,
    inset: float = WALL_INSET,
) -> WorldTransform:
    """Resolve an item's world position and facing from its wall placement.

    North/South walls use the offset as world X; East/West walls use it as
    world Z. Height is copied unchanged. Offsets are not clamped to the wall.
    """
    position = wall_point(placement, dimensions, inset=inset)
    return WorldTransform(position=position, yaw=placement.wall.facing_yaw)
