"""Resolve pointer/tap input to exhibited items and track hover state."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from loguru import logger

from ..math.raycast import Surface, intersect
from ..models.camera import Camera
from ..models.gallery import ExhibitItem

HOVER_MAX_DISTANCE = 5.0

ScreenPoint = Optional[Tuple[float, float]]
HoverCallback = Callable[[ExhibitItem, Surface], None]


class SurfaceRegistry:
    """Maps scene nodes (surfaces or their parents) to the item they belong to."""

    def __init__(self) -> None:
        self._items: Dict[int, Tuple[object, ExhibitItem]] = {}

    def __len__(self) -> int:
        return len(self._items)

    def register(self, node: object, item: ExhibitItem) -> None:
        # Keyed by identity; the node is kept alive alongside its item.
        self._items[id(node)] = (node, item)

    def lookup(self, node: object) -> Optional[ExhibitItem]:
        entry = self._items.get(id(node))
        if entry is None or entry[0] is not node:
            return None
        return entry[1]

    def resolve(self, surface: Surface) -> Optional[ExhibitItem]:
        """Item for ``surface``, checking the surface itself, then its parent."""
        item = self.lookup(surface)
        if item is not None:
            return item
        if surface.parent is not None:
            return self.lookup(surface.parent)
        return None


@dataclass(slots=True, frozen=True)
class Hit:
    """Nearest resolved intersection between a pick ray and an item."""

    item: ExhibitItem
    surface: Surface
    distance: float


def resolve_hit(
    screen_point: ScreenPoint,
    camera: Camera,
    surfaces: Iterable[Surface],
    registry: SurfaceRegistry,
    *,
    max_distance: Optional[float] = None,
) -> Optional[Hit]:
    """Cast through ``screen_point`` (or the screen centre) and return the nearest item hit.

    Only the nearest intersection is considered; if it belongs to no
    registered item, or lies beyond ``max_distance``, the result is ``None``.
    """
    ray = camera.ray_from_screen(screen_point)
    hits = intersect(ray, surfaces, near=camera.near, far=camera.far)
    if not hits:
        return None

    nearest = hits[0]
    if max_distance is not None and nearest.distance >= max_distance:
        return None
    item = registry.resolve(nearest.surface)
    if item is None:
        return None
    return Hit(item=item, surface=nearest.surface, distance=nearest.distance)


class HoverTracker:
    """Remembers the hovered item and fires enter/exit only when it changes."""

    def __init__(
        self,
        on_enter: Optional[HoverCallback] = None,
        on_exit: Optional[HoverCallback] = None,
    ) -> None:
        self._on_enter = on_enter
        self._on_exit = on_exit
        self._item: Optional[ExhibitItem] = None
        self._surface: Optional[Surface] = None

    @property
    def item(self) -> Optional[ExhibitItem]:
        return self._item

    @property
    def surface(self) -> Optional[Surface]:
        return self._surface

    def update(self, hit: Optional[Hit]) -> bool:
        """Apply this frame's hit; returns ``True`` if the hovered item changed.

        Moving between surfaces of the same item (picture to frame) only
        updates :attr:`surface`.
        """
        item = hit.item if hit is not None else None
        surface = hit.surface if hit is not None else None
        if item is self._item:
            self._surface = surface
            return False

        if self._item is not None and self._on_exit is not None:
            self._on_exit(self._item, self._surface)
        self._item = item
        self._surface = surface
        if item is not None:
            logger.debug("Hovering item {}", item.id)
            if self._on_enter is not None:
                self._on_enter(item, surface)
        return True

    def clear(self) -> bool:
        return self.update(None)


class InteractionResolver:
    """Bundles the camera, pickable surfaces and hover bookkeeping for a session."""

    def __init__(
        self,
        camera: Camera,
        surfaces: Sequence[Surface],
        registry: SurfaceRegistry,
        hover: Optional[HoverTracker] = None,
        *,
        hover_max_distance: float = HOVER_MAX_DISTANCE,
    ) -> None:
        self.camera = camera
        self.surfaces = tuple(surfaces)
        self.registry = registry
        self.hover = hover or HoverTracker()
        self.hover_max_distance = hover_max_distance

    @property
    def hovered_item(self) -> Optional[ExhibitItem]:
        return self.hover.item

    def update_hover(self, screen_point: ScreenPoint = None) -> Optional[ExhibitItem]:
        """Recompute hover along the aim ray; hits past the cutoff count as misses."""
        hit = resolve_hit(
            screen_point,
            self.camera,
            self.surfaces,
            self.registry,
            max_distance=self.hover_max_distance,
        )
        self.hover.update(hit)
        return self.hover.item

    def clear_hover(self) -> None:
        self.hover.clear()

    def activate(self, screen_point: ScreenPoint = None) -> Optional[ExhibitItem]:
        """Resolve a click/tap once, without the hover distance cutoff."""
        hit = resolve_hit(screen_point, self.camera, self.surfaces, self.registry)
        if hit is None:
            logger.debug("Activation at {} hit nothing", screen_point or "screen centre")
            return None
        logger.info("Activated item {} at distance {:.2f}", hit.item.id, hit.distance)
        return hit.item
