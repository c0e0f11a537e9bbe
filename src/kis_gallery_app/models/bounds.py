"""Walkable floor-plane bounds."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .gallery import RoomDimensions


@dataclass(slots=True, frozen=True)
class Bounds:
    """Axis-aligned rectangle on the XZ plane that constrains the camera."""

    min_x: float
    max_x: float
    min_z: float
    max_z: float

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_z > self.max_z:
            raise ValueError(
                f"Invalid bounds: x=[{self.min_x}, {self.max_x}], z=[{self.min_z}, {self.max_z}]"
            )

    @classmethod
    def from_room(cls, dimensions: RoomDimensions, margin: float = 0.5) -> "Bounds":
        """Shrink the room footprint by ``margin`` on every side."""
        half_x = max(0.0, dimensions.width / 2.0 - margin)
        half_z = max(0.0, dimensions.depth / 2.0 - margin)
        return cls(min_x=-half_x, max_x=half_x, min_z=-half_z, max_z=half_z)

    def contains(self, position: np.ndarray) -> bool:
        x = float(position[0])
        z = float(position[2])
        return self.min_x <= x <= self.max_x and self.min_z <= z <= self.max_z

    def clamp(self, position: np.ndarray) -> np.ndarray:
        """Return a copy of ``position`` with x/z clamped; height is untouched."""
        clamped = np.array(position, dtype=np.float64, copy=True)
        clamped[0] = np.clip(clamped[0], self.min_x, self.max_x)
        clamped[2] = np.clip(clamped[2], self.min_z, self.max_z)
        return clamped
