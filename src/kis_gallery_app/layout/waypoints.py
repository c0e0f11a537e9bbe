"""Derive guided-tour waypoints from item placements."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Iterable, List, Optional

import numpy as np
from loguru import logger

from ..models.gallery import COVER_ITEM_ID, ExhibitItem, RoomDimensions
from .placement import wall_normal, wall_point

DEFAULT_VIEW_DISTANCE = 2.5
DEFAULT_EYE_HEIGHT = 1.6


@dataclass(slots=True, frozen=True, eq=False)
class Waypoint:
    """Camera pose from which one item is viewed."""

    item: ExhibitItem
    view_position: np.ndarray
    look_at: np.ndarray


def build_waypoints(
    items: Iterable[ExhibitItem],
    dimensions: RoomDimensions,
    view_distance: float = DEFAULT_VIEW_DISTANCE,
    *,
    eye_height: float = DEFAULT_EYE_HEIGHT,
    excluded_ids: Collection[str] = (COVER_ITEM_ID,),
    room_id: Optional[str] = None,
) -> List[Waypoint]:
    """Build one waypoint per viewable item, in curatorial (input) order.

    Each view position stands ``view_distance`` in front of the item's wall
    along the inward normal at ``eye_height``; each target is the item's
    own point on the wall. Items listed in ``excluded_ids`` (the cover
    piece by default) and, when ``room_id`` is given, items hung in other
    rooms are skipped.
    """
    waypoints: List[Waypoint] = []
    for item in items:
        if item.id in excluded_ids:
            continue
        if room_id is not None and item.placement.room != room_id:
            continue

        target = wall_point(item.placement, dimensions)
        view_position = target + view_distance * wall_normal(item.placement.wall)
        view_position[1] = eye_height
        waypoints.append(Waypoint(item=item, view_position=view_position, look_at=target))

    logger.debug("Built {} waypoint(s) for room {}", len(waypoints), room_id or "<any>")
    return waypoints
