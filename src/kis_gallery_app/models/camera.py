"""Perspective camera state shared by the controllers and the picker."""
from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from ..math.orientation import (
    clamp_pitch,
    forward_vector,
    quaternion_to_yaw_pitch,
    right_vector,
    up_vector,
    yaw_pitch_to_quaternion,
)
from ..math.raycast import Ray


class Camera:
    """First-person camera: a world position plus a yaw/pitch orientation."""

    def __init__(
        self,
        position=(0.0, 1.6, 5.0),
        yaw: float = 0.0,
        pitch: float = 0.0,
        fov_y_deg: float = 70.0,
        viewport: Tuple[int, int] = (1280, 720),
        near: float = 0.1,
        far: float = 100.0,
    ) -> None:
        self.position = np.array(position, dtype=np.float64).reshape(3)
        self._yaw = float(yaw)
        self._pitch = clamp_pitch(float(pitch))
        self.fov_y = math.radians(fov_y_deg)
        self.viewport = viewport
        self.near = near
        self.far = far

    def __repr__(self) -> str:
        x, y, z = (float(v) for v in self.position)
        return f"Camera(position=({x:.2f}, {y:.2f}, {z:.2f}), yaw={self._yaw:.3f}, pitch={self._pitch:.3f})"

    # ------------------------------------------------------------------
    @property
    def yaw(self) -> float:
        return self._yaw

    @property
    def pitch(self) -> float:
        return self._pitch

    def set_orientation(self, yaw: float, pitch: float) -> None:
        self._yaw = float(yaw)
        self._pitch = clamp_pitch(float(pitch))

    @property
    def quaternion(self) -> np.ndarray:
        return yaw_pitch_to_quaternion(self._yaw, self._pitch)

    @quaternion.setter
    def quaternion(self, value: np.ndarray) -> None:
        self._yaw, self._pitch = quaternion_to_yaw_pitch(value)

    @property
    def forward(self) -> np.ndarray:
        return forward_vector(self._yaw, self._pitch)

    @property
    def right(self) -> np.ndarray:
        return right_vector(self._yaw)

    @property
    def up(self) -> np.ndarray:
        return up_vector(self._yaw, self._pitch)

    @property
    def aspect(self) -> float:
        width, height = self.viewport
        return max(1e-3, float(width) / max(1.0, float(height)))

    # ------------------------------------------------------------------
    def translate_local(self, right: float, forward: float) -> None:
        """Move along the camera's own right/forward axes (pitch included)."""
        self.position = self.position + right * self.right + forward * self.forward

    def screen_center(self) -> Tuple[float, float]:
        width, height = self.viewport
        return width / 2.0, height / 2.0

    def ray_from_screen(self, point: Optional[Tuple[float, float]] = None) -> Ray:
        """Build a world-space ray through a viewport pixel.

        ``None`` means the screen centre, i.e. straight along ``forward``.
        """
        if point is None:
            return Ray(self.position.copy(), self.forward)

        width = max(1.0, float(self.viewport[0]))
        height = max(1.0, float(self.viewport[1]))
        x_ndc = ((float(point[0]) / width) * 2.0) - 1.0
        y_ndc = 1.0 - ((float(point[1]) / height) * 2.0)

        tan_half_y = math.tan(self.fov_y / 2.0)
        tan_half_x = tan_half_y * self.aspect
        direction = self.forward + (x_ndc * tan_half_x) * self.right + (y_ndc * tan_half_y) * self.up
        return Ray(self.position.copy(), direction)

    def project(self, point: np.ndarray) -> Optional[Tuple[float, float]]:
        """Project a world point to viewport pixels; ``None`` if behind the camera."""
        offset = np.asarray(point, dtype=np.float64) - self.position
        z_forward = float(np.dot(offset, self.forward))
        if z_forward <= self.near:
            return None

        tan_half_y = math.tan(self.fov_y / 2.0)
        tan_half_x = tan_half_y * self.aspect
        x_ndc = float(np.dot(offset, self.right)) / (z_forward * tan_half_x)
        y_ndc = float(np.dot(offset, self.up)) / (z_forward * tan_half_y)

        width, height = self.viewport
        return ((x_ndc + 1.0) * 0.5) * width, ((1.0 - y_ndc) * 0.5) * height
