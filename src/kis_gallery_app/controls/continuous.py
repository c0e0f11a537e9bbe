"""Free-look keyboard + mouse controller for desktop sessions."""
from __future__ import annotations

from enum import Enum
import math
from typing import Dict, Optional

from loguru import logger

from ..math.orientation import clamp_pitch
from ..models.bounds import Bounds
from ..models.camera import Camera
from .base import AlwaysGrantedCapture, PointerCapture


class MoveFlag(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT = "left"
    RIGHT = "right"


class ContinuousController:
    """WASD/arrow movement with pointer-locked mouse look.

    Movement keys only toggle flags; the camera is moved in :meth:`update`.
    Mouse look is applied as soon as the motion event arrives.
    """

    def __init__(
        self,
        camera: Camera,
        capture: Optional[PointerCapture] = None,
        *,
        move_speed: float = 5.0,
        look_speed: float = 0.002,
    ) -> None:
        self.camera = camera
        self.move_speed = move_speed
        self.look_speed = look_speed
        self._capture: PointerCapture = capture or AlwaysGrantedCapture()
        self._locked = False
        self._bounds: Optional[Bounds] = None
        self._flags: Dict[MoveFlag, bool] = {flag: False for flag in MoveFlag}

    # ------------------------------------------------------------------
    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def yaw(self) -> float:
        return self.camera.yaw

    @property
    def pitch(self) -> float:
        return self.camera.pitch

    def move_flags(self) -> Dict[MoveFlag, bool]:
        return dict(self._flags)

    def set_bounds(self, bounds: Optional[Bounds]) -> None:
        self._bounds = bounds

    # ------------------------------------------------------------------
    def lock(self) -> bool:
        """Ask the host for pointer capture; a refusal leaves the controller unlocked."""
        if self._locked:
            return True
        try:
            granted = bool(self._capture.request())
        except Exception as exc:  # noqa: BLE001
            logger.warning("Pointer capture request failed: {}", exc)
            return False
        if not granted:
            logger.warning("Pointer capture denied by host; controls stay unlocked")
            return False
        self._locked = True
        logger.debug("Continuous controls locked")
        return True

    def unlock(self) -> None:
        if not self._locked:
            return
        self._locked = False
        self._clear_flags()
        self._capture.release()
        logger.debug("Continuous controls unlocked")

    def on_capture_lost(self) -> None:
        """Host notification that pointer capture ended outside our control."""
        if not self._locked:
            return
        self._locked = False
        self._clear_flags()
        logger.info("Pointer capture lost; continuous controls unlocked")

    # ------------------------------------------------------------------
    def on_pointer_motion(self, dx: float, dy: float) -> None:
        if not self._locked:
            return
        yaw = self.camera.yaw - dx * self.look_speed
        pitch = clamp_pitch(self.camera.pitch - dy * self.look_speed)
        self.camera.set_orientation(yaw, pitch)

    def press(self, flag: MoveFlag) -> None:
        if self._locked:
            self._flags[flag] = True

    def release(self, flag: MoveFlag) -> None:
        self._flags[flag] = False

    def _clear_flags(self) -> None:
        for flag in self._flags:
            self._flags[flag] = False

    # ------------------------------------------------------------------
    def update(self, delta: float) -> None:
        if not self._locked:
            return

        flags = self._flags
        strafe = float(flags[MoveFlag.RIGHT]) - float(flags[MoveFlag.LEFT])
        advance = float(flags[MoveFlag.FORWARD]) - float(flags[MoveFlag.BACKWARD])
        length = math.hypot(strafe, advance)
        if length > 0.0:
            speed = self.move_speed * delta
            self.camera.translate_local((strafe / length) * speed, (advance / length) * speed)

        if self._bounds is not None:
            self.camera.position = self._bounds.clamp(self.camera.position)
