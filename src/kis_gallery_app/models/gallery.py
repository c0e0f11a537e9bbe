"""Gallery domain models: rooms, walls and exhibited items."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Dict, Optional, Tuple

import numpy as np

COVER_ITEM_ID = "photo-cover"
# Room centre at eye height.
DEFAULT_SPAWN_POINT: Tuple[float, float, float] = (0.0, 1.6, 0.0)


class WallSide(str, Enum):
    """Cardinal wall an item hangs on."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def facing_yaw(self) -> float:
        """Rotation about +Y that turns an item's front face into the room."""
        return _FACING_YAW[self]

    @property
    def runs_along_depth(self) -> bool:
        """East/West walls store their offset along the room depth (Z)."""
        return self in (WallSide.EAST, WallSide.WEST)

    @classmethod
    def parse(cls, value: str) -> "WallSide":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(side.value for side in cls)
            raise ValueError(f"Unknown wall side {value!r}; expected one of: {valid}") from None


_FACING_YAW: Dict[WallSide, float] = {
    WallSide.NORTH: 0.0,
    WallSide.SOUTH: math.pi,
    WallSide.EAST: -math.pi / 2.0,
    WallSide.WEST: math.pi / 2.0,
}


@dataclass(slots=True, frozen=True)
class RoomDimensions:
    """Interior extents of a room in world units."""

    width: float  # along X
    height: float  # along Y
    depth: float  # along Z

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def half_depth(self) -> float:
        return self.depth / 2.0


@dataclass(slots=True, frozen=True)
class Room:
    """A room of the gallery and the pose visitors start at."""

    id: str
    dimensions: RoomDimensions
    name: str = ""
    spawn_point: Tuple[float, float, float] = DEFAULT_SPAWN_POINT

    @property
    def spawn_position(self) -> np.ndarray:
        return np.array(self.spawn_point, dtype=np.float64)


@dataclass(slots=True, frozen=True)
class ItemPlacement:
    """Wall-relative placement of an item.

    ``x`` is the offset from the wall's horizontal midpoint and ``y`` is the
    height of the item's centre above the floor. Offsets beyond half the
    wall length are accepted and simply place the item off the wall.
    """

    room: str
    wall: WallSide
    x: float = 0.0
    y: float = 1.8


@dataclass(slots=True, frozen=True)
class TextOverlay:
    """Text printed over an item. Items carrying one show the text instead of the picture in the detail view."""

    text: str
    position: str = "bottom"  # "bottom" or "full"
    color: str = "#ffffff"


@dataclass(slots=True, frozen=True)
class ExhibitItem:
    """An exhibited piece and the metadata shown in its detail view."""

    id: str
    placement: ItemPlacement
    title: str = ""
    description: str = ""
    src: Optional[str] = None
    width: float = 1.5
    height: float = 1.0
    overlay: Optional[TextOverlay] = None

    @property
    def overlay_text(self) -> str:
        return self.overlay.text if self.overlay is not None else ""


@dataclass(slots=True)
class GallerySettings:
    """Presentation settings carried through from the gallery config."""

    wall_color: str = "#f5f5f5"
    floor_color: str = "#2a2a2a"
    ambient_light: float = 0.5
    spotlight_intensity: float = 1.2


@dataclass(slots=True)
class GalleryConfig:
    """Complete gallery description consumed by the session."""

    rooms: Tuple[Room, ...]
    items: Tuple[ExhibitItem, ...]
    name: str = "Gallery"
    description: str = ""
    settings: GallerySettings = field(default_factory=GallerySettings)

    def room(self, room_id: str) -> Optional[Room]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def items_in_room(self, room_id: str) -> Tuple[ExhibitItem, ...]:
        return tuple(item for item in self.items if item.placement.room == room_id)

    @property
    def first_room(self) -> Room:
        if not self.rooms:
            raise ValueError("Gallery config defines no rooms.")
        return self.rooms[0]
