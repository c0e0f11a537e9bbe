"""Assemble hit-testable item surfaces from the gallery config."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
from loguru import logger

from ..interaction.resolver import SurfaceRegistry
from ..math.raycast import Surface
from ..models.gallery import ExhibitItem, GalleryConfig
from .placement import WorldTransform, resolve_world_transform

FRAME_WIDTH = 0.05
WORLD_UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)
# Keeps the picture plane just in front of its backing.
PICTURE_OFFSET = 0.001


@dataclass(eq=False)
class ItemNode:
    """Root scene node of one framed item; its surfaces are children."""

    item: ExhibitItem
    transform: WorldTransform
    picture: Surface = field(init=False)
    frame: Tuple[Surface, ...] = field(init=False, default=())

    @property
    def surfaces(self) -> Tuple[Surface, ...]:
        return (self.picture, *self.frame)


def build_item_node(item: ExhibitItem, transform: WorldTransform, frame_width: float = FRAME_WIDTH) -> ItemNode:
    """Create the picture plane and frame strips for one placed item."""
    node = ItemNode(item=item, transform=transform)
    normal = transform.normal
    right = transform.right
    center = transform.position
    half_w = item.width / 2.0
    half_h = item.height / 2.0

    node.picture = Surface(
        name=f"{item.id}:picture",
        center=center + normal * PICTURE_OFFSET,
        normal=normal,
        right=right,
        width=item.width,
        height=item.height,
        parent=node,
    )

    if frame_width > 0.0:
        strips: List[Surface] = []
        outer_w = item.width + 2.0 * frame_width
        for label, offset_right, offset_up, width, height in (
            ("top", 0.0, half_h + frame_width / 2.0, outer_w, frame_width),
            ("bottom", 0.0, -half_h - frame_width / 2.0, outer_w, frame_width),
            ("left", -half_w - frame_width / 2.0, 0.0, frame_width, item.height),
            ("right", half_w + frame_width / 2.0, 0.0, frame_width, item.height),
        ):
            strips.append(
                Surface(
                    name=f"{item.id}:frame-{label}",
                    center=center + right * offset_right + WORLD_UP * offset_up,
                    normal=normal,
                    right=right,
                    width=width,
                    height=height,
                    parent=node,
                )
            )
        node.frame = tuple(strips)
    return node


def build_item_surfaces(
    config: GalleryConfig,
    frame_width: float = FRAME_WIDTH,
) -> Tuple[List[ItemNode], List[Surface], SurfaceRegistry]:
    """Place every item and return its nodes, pickable surfaces and registry.

    Picture planes are registered directly; frame strips resolve through
    their parent node. Items that reference an unknown room are skipped.
    """
    nodes: List[ItemNode] = []
    surfaces: List[Surface] = []
    registry = SurfaceRegistry()

    for item in config.items:
        room = config.room(item.placement.room)
        if room is None:
            logger.warning("Item {} references unknown room {}; skipping", item.id, item.placement.room)
            continue
        transform = resolve_world_transform(item.placement, room.dimensions)
        node = build_item_node(item, transform, frame_width=frame_width)
        registry.register(node, item)
        registry.register(node.picture, item)
        nodes.append(node)
        surfaces.extend(node.surfaces)

    logger.info("Assembled {} item(s) with {} pickable surface(s)", len(nodes), len(surfaces))
    return nodes, surfaces, registry
