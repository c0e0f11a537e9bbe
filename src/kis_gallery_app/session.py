"""Per-visit gallery session: controller selection, frame tick and activation."""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple, Union

from loguru import logger

from .controls.base import PointerCapture
from .controls.continuous import ContinuousController
from .controls.guided import GuidedController
from .interaction.resolver import HoverCallback, HoverTracker, InteractionResolver
from .layout.scene import ItemNode, build_item_surfaces
from .models.bounds import Bounds
from .models.camera import Camera
from .models.gallery import ExhibitItem, GalleryConfig, Room

Controller = Union[ContinuousController, GuidedController]
ItemCallback = Callable[[ExhibitItem], None]


class GallerySession:
    """Owns the camera controller and picking state for one visit.

    Desktop sessions use the continuous controller and aim with the screen
    centre; touch sessions use the guided controller and pick by tap.
    """

    def __init__(
        self,
        config: GalleryConfig,
        camera: Optional[Camera] = None,
        *,
        touch: bool = False,
        capture: Optional[PointerCapture] = None,
        bounds_margin: float = 0.5,
        on_item_activated: Optional[ItemCallback] = None,
        on_hover_enter: Optional[HoverCallback] = None,
        on_hover_exit: Optional[HoverCallback] = None,
    ) -> None:
        self.config = config
        self.room: Room = config.first_room
        self.camera = camera or Camera()
        self.camera.position = self.room.spawn_position
        self.touch = touch
        self.on_item_activated = on_item_activated
        self._detail_item: Optional[ExhibitItem] = None

        self.nodes: List[ItemNode]
        self.nodes, surfaces, registry = build_item_surfaces(config)
        self.interaction = InteractionResolver(
            self.camera,
            surfaces,
            registry,
            HoverTracker(on_enter=on_hover_enter, on_exit=on_hover_exit),
        )

        self.controller: Controller
        if touch:
            self.controller = GuidedController(self.camera)
        else:
            self.controller = ContinuousController(self.camera, capture)
        self.controller.set_bounds(Bounds.from_room(self.room.dimensions, margin=bounds_margin))
        if isinstance(self.controller, GuidedController):
            self.controller.set_waypoints(config.items, self.room)

        logger.info(
            "Session started in room {} with {} controls",
            self.room.id,
            "guided" if touch else "continuous",
        )

    # ------------------------------------------------------------------
    @property
    def guided(self) -> Optional[GuidedController]:
        return self.controller if isinstance(self.controller, GuidedController) else None

    @property
    def hovered_item(self) -> Optional[ExhibitItem]:
        return self.interaction.hovered_item

    @property
    def detail_item(self) -> Optional[ExhibitItem]:
        return self._detail_item

    @property
    def detail_open(self) -> bool:
        return self._detail_item is not None

    @property
    def interactive(self) -> bool:
        return self.controller.is_locked and not self.detail_open

    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Enter the gallery; returns whether the controller locked."""
        return self.controller.lock()

    def tick(self, delta: float) -> None:
        """One frame: integrate staged input, then refresh hover state."""
        self.controller.update(delta)
        if self.interactive and not self.touch:
            self.interaction.update_hover()
        else:
            self.interaction.clear_hover()

    def activate(self, screen_point: Optional[Tuple[float, float]] = None) -> Optional[ExhibitItem]:
        """Handle a click/tap. Desktop clicks always aim at the screen centre."""
        if self.detail_open:
            return None
        if not self.touch:
            if not self.controller.is_locked:
                return None
            screen_point = None

        item = self.interaction.activate(screen_point)
        if item is None:
            return None

        self._detail_item = item
        self.interaction.clear_hover()
        self.controller.unlock()
        if self.on_item_activated is not None:
            self.on_item_activated(item)
        return item

    def close_detail(self) -> bool:
        """Close the detail view and resume navigation."""
        if self._detail_item is None:
            return False
        logger.debug("Detail view for {} closed", self._detail_item.id)
        self._detail_item = None
        return self.controller.lock()
