"""Touch controller: joystick drive, swipe look, rotation wheel and guided tour."""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np
from loguru import logger

from ..layout.waypoints import DEFAULT_VIEW_DISTANCE, Waypoint, build_waypoints
from ..math.orientation import clamp_pitch, look_angles, shortest_angle_delta
from ..models.bounds import Bounds
from ..models.camera import Camera
from ..models.gallery import ExhibitItem, Room
from .timer import AdvanceTimer

WORLD_UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)


class GuidedController:
    """Touch-oriented controller with waypoint auto-traversal.

    Manual input of any kind (joystick, swipe look, rotation wheel) cancels
    waypoint travel and auto-walk. Event handlers stage input; positions are
    only integrated in :meth:`update`.
    """

    def __init__(
        self,
        camera: Camera,
        *,
        move_speed: float = 3.5,
        look_speed: float = 0.003,
        rotation_speed: float = 0.012,
        auto_walk_speed: float = 1.5,
        deadzone: float = 0.05,
        swipe_threshold_px: float = 2.0,
        arrive_distance: float = 0.1,
        dwell_seconds: float = 3.0,
        turn_rate: float = 3.0,
        view_distance: float = DEFAULT_VIEW_DISTANCE,
    ) -> None:
        self.camera = camera
        self.move_speed = move_speed
        self.look_speed = look_speed
        self.rotation_speed = rotation_speed
        self.auto_walk_speed = auto_walk_speed
        self.deadzone = deadzone
        self.swipe_threshold_px = swipe_threshold_px
        self.arrive_distance = arrive_distance
        self.dwell_seconds = dwell_seconds
        self.turn_rate = turn_rate
        self.view_distance = view_distance

        self._locked = False
        self._bounds: Optional[Bounds] = None

        self._joystick = np.zeros(2, dtype=np.float64)
        self._look_last: Optional[Tuple[float, float]] = None
        self._look_moved = False
        self._rotation_last_x: Optional[float] = None

        self._waypoints: List[Waypoint] = []
        self._current_index = 0
        self._traversing = False
        self._auto_advance = False
        self._target_position = camera.position.copy()
        self._target_look_at = camera.position + camera.forward
        self._advance_timer = AdvanceTimer()

    # ------------------------------------------------------------------
    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def is_traversing(self) -> bool:
        return self._traversing

    @property
    def auto_advance_enabled(self) -> bool:
        return self._auto_advance

    @property
    def current_waypoint_index(self) -> int:
        return self._current_index

    @property
    def waypoints(self) -> Tuple[Waypoint, ...]:
        return tuple(self._waypoints)

    @property
    def target_position(self) -> np.ndarray:
        return self._target_position.copy()

    @property
    def target_look_at(self) -> np.ndarray:
        return self._target_look_at.copy()

    @property
    def joystick(self) -> Tuple[float, float]:
        return float(self._joystick[0]), float(self._joystick[1])

    @property
    def look_active(self) -> bool:
        return self._look_last is not None

    @property
    def rotation_drag_active(self) -> bool:
        return self._rotation_last_x is not None

    @property
    def advance_pending(self) -> bool:
        return self._advance_timer.pending

    def set_bounds(self, bounds: Optional[Bounds]) -> None:
        self._bounds = bounds

    # ------------------------------------------------------------------
    def lock(self) -> bool:
        if not self._locked:
            self._locked = True
            logger.debug("Guided controls locked")
        return True

    def unlock(self) -> None:
        if not self._locked:
            return
        self._locked = False
        self._auto_advance = False
        self._advance_timer.cancel()
        self.release_joystick()
        self._look_last = None
        self._rotation_last_x = None
        logger.debug("Guided controls unlocked; auto-walk disabled")

    # Joystick ---------------------------------------------------------
    def set_joystick(self, x: float, y: float) -> None:
        """Stage a joystick deflection; +y is pulled towards the user (backwards)."""
        vector = np.array([x, y], dtype=np.float64)
        magnitude = float(np.linalg.norm(vector))
        if magnitude > 1.0:
            vector /= magnitude
        self._joystick = vector

    def release_joystick(self) -> None:
        self._joystick = np.zeros(2, dtype=np.float64)

    # Swipe look -------------------------------------------------------
    def begin_look(self, x: float, y: float, viewport_width: float) -> bool:
        """Start a look drag; only touches on the right half of the viewport qualify."""
        if not self._locked or self._look_last is not None:
            return False
        if x <= viewport_width / 2.0:
            return False
        self._look_last = (float(x), float(y))
        self._look_moved = False
        return True

    def move_look(self, x: float, y: float) -> None:
        if not self._locked or self._look_last is None:
            return
        dx = float(x) - self._look_last[0]
        dy = float(y) - self._look_last[1]
        self._look_last = (float(x), float(y))

        yaw = self.camera.yaw - dx * self.look_speed
        pitch = clamp_pitch(self.camera.pitch - dy * self.look_speed)
        self.camera.set_orientation(yaw, pitch)

        if abs(dx) > self.swipe_threshold_px or abs(dy) > self.swipe_threshold_px:
            self._look_moved = True
            self.cancel_traversal("swipe look")

    def end_look(self) -> bool:
        """Finish the look drag; returns ``True`` when it never moved (a tap)."""
        if self._look_last is None:
            return False
        self._look_last = None
        return not self._look_moved

    # Rotation wheel ---------------------------------------------------
    def begin_rotation(self, x: float) -> None:
        if self._locked:
            self._rotation_last_x = float(x)

    def drag_rotation(self, x: float) -> None:
        if not self._locked or self._rotation_last_x is None:
            return
        dx = float(x) - self._rotation_last_x
        self._rotation_last_x = float(x)
        if dx == 0.0:
            return
        self.camera.set_orientation(self.camera.yaw - dx * self.rotation_speed, self.camera.pitch)
        self.cancel_traversal("rotation wheel")

    def end_rotation(self) -> None:
        self._rotation_last_x = None

    # Waypoints --------------------------------------------------------
    def set_waypoints(self, items: Iterable[ExhibitItem], room: Room) -> None:
        """Rebuild the tour for ``room`` and stand at its first stop."""
        self._waypoints = build_waypoints(
            items,
            room.dimensions,
            self.view_distance,
            room_id=room.id,
        )
        self._current_index = 0
        self._traversing = False
        self._auto_advance = False
        self._advance_timer.cancel()

        if self._waypoints:
            first = self._waypoints[0]
            self.camera.position = first.view_position.copy()
            self._target_position = first.view_position.copy()
            self._target_look_at = first.look_at.copy()
            self._smooth_look_at(first.look_at, factor=1.0)
        logger.info("Guided tour for room {} has {} stop(s)", room.id, len(self._waypoints))

    def move_to_waypoint(self, index: int) -> bool:
        if index < 0 or index >= len(self._waypoints):
            return False
        waypoint = self._waypoints[index]
        self._current_index = index
        self._target_position = waypoint.view_position.copy()
        self._target_look_at = waypoint.look_at.copy()
        self._traversing = True
        self._advance_timer.cancel()
        logger.debug("Travelling to waypoint {} ({})", index, waypoint.item.id)
        return True

    def advance(self) -> None:
        count = len(self._waypoints)
        if count == 0:
            return
        self.move_to_waypoint((self._current_index + 1) % count)
        self._auto_advance = True

    def retreat(self) -> None:
        count = len(self._waypoints)
        if count == 0:
            return
        self.move_to_waypoint((self._current_index - 1) % count)
        self._auto_advance = True

    def toggle_auto_walk(self) -> bool:
        """Flip auto-walk and return the new state; always ``False`` without waypoints."""
        if not self._waypoints:
            self._auto_advance = False
            return False
        self._auto_advance = not self._auto_advance
        if self._auto_advance:
            if not self._traversing:
                self.advance()
        else:
            self._advance_timer.cancel()
        logger.debug("Auto-walk {}", "enabled" if self._auto_advance else "disabled")
        return self._auto_advance

    def cancel_traversal(self, reason: str = "manual input") -> None:
        if self._traversing or self._auto_advance or self._advance_timer.pending:
            logger.debug("Guided traversal cancelled by {}", reason)
        self._traversing = False
        self._auto_advance = False
        self._advance_timer.cancel()

    # ------------------------------------------------------------------
    def update(self, delta: float) -> None:
        if not self._locked:
            return

        self._apply_joystick(delta)

        if self._advance_timer.tick(delta) and self._auto_advance and not self._traversing:
            self.advance()

        if self._traversing:
            self._step_towards_target(delta)

        self._clamp_to_bounds()

    def _apply_joystick(self, delta: float) -> None:
        jx, jy = float(self._joystick[0]), float(self._joystick[1])
        if abs(jx) <= self.deadzone and abs(jy) <= self.deadzone:
            return

        self.cancel_traversal("joystick")

        forward = self.camera.forward
        forward[1] = 0.0
        norm = float(np.linalg.norm(forward))
        if norm <= 1e-9:
            return
        forward /= norm
        right = np.cross(forward, WORLD_UP)
        right /= float(np.linalg.norm(right))

        speed = self.move_speed * delta
        self.camera.position = self.camera.position + forward * (-jy * speed) + right * (jx * speed)
        self._clamp_to_bounds()

    def _step_towards_target(self, delta: float) -> None:
        offset = self._target_position - self.camera.position
        distance = float(np.linalg.norm(offset))

        if distance < self.arrive_distance:
            self.camera.position = self._target_position.copy()
            self._traversing = False
            self._smooth_look_at(self._target_look_at, delta=delta)
            if self._auto_advance:
                self._advance_timer.schedule(self.dwell_seconds)
            logger.debug("Arrived at waypoint {}", self._current_index)
            return

        step = min(self.auto_walk_speed * delta, distance)
        self.camera.position = self.camera.position + (offset / distance) * step
        self._smooth_look_at(self._target_look_at, delta=delta)

    def _smooth_look_at(
        self,
        target: np.ndarray,
        *,
        delta: float = 0.0,
        factor: Optional[float] = None,
    ) -> None:
        target_yaw, target_pitch = look_angles(self.camera.position, target)
        blend = min(1.0, delta * self.turn_rate) if factor is None else factor
        yaw = self.camera.yaw + shortest_angle_delta(self.camera.yaw, target_yaw) * blend
        pitch = self.camera.pitch + (target_pitch - self.camera.pitch) * blend
        self.camera.set_orientation(yaw, pitch)

    def _clamp_to_bounds(self) -> None:
        if self._bounds is not None:
            self.camera.position = self._bounds.clamp(self.camera.position)
