"""Yaw/pitch orientation helpers shared by every camera controller.

Conventions: +Y is up, a camera with zero yaw and pitch looks down -Z, and a
positive yaw turns the view to the left (counter-clockwise seen from above).
Rotations compose in YXZ order: yaw about world Y first, then pitch about the
camera's local X axis. Quaternions are stored as ``[w, x, y, z]``.
"""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np

PITCH_LIMIT = math.pi / 2.0
TWO_PI = 2.0 * math.pi


def clamp_pitch(pitch: float, limit: float = PITCH_LIMIT) -> float:
    """Clamp pitch so the camera never flips over the vertical."""
    return float(np.clip(pitch, -limit, limit))


def normalize_angle(angle: float) -> float:
    """Wrap an angle into ``[-pi, pi)``."""
    return ((angle + math.pi) % TWO_PI) - math.pi


def shortest_angle_delta(current: float, target: float) -> float:
    """Signed difference ``target - current`` taken along the shorter arc."""
    return normalize_angle(target - current)


def forward_vector(yaw: float, pitch: float) -> np.ndarray:
    """Unit view direction for the given yaw/pitch."""
    cos_pitch = math.cos(pitch)
    return np.array(
        [
            -math.sin(yaw) * cos_pitch,
            math.sin(pitch),
            -math.cos(yaw) * cos_pitch,
        ],
        dtype=np.float64,
    )


def right_vector(yaw: float) -> np.ndarray:
    """Unit camera-right direction; pitch never tilts it because roll is zero."""
    return np.array([math.cos(yaw), 0.0, -math.sin(yaw)], dtype=np.float64)


def up_vector(yaw: float, pitch: float) -> np.ndarray:
    """Unit camera-up direction, orthogonal to forward and right."""
    return np.cross(right_vector(yaw), forward_vector(yaw, pitch))


def look_angles(origin: np.ndarray, target: np.ndarray) -> Tuple[float, float]:
    """Return the (yaw, pitch) that points a camera at ``origin`` towards ``target``.

    A coincident origin and target has no defined direction; the neutral
    orientation ``(0.0, 0.0)`` is returned in that case.
    """
    delta = np.asarray(target, dtype=np.float64) - np.asarray(origin, dtype=np.float64)
    norm = float(np.linalg.norm(delta))
    if norm <= 1e-9:
        return 0.0, 0.0
    direction = delta / norm
    yaw = math.atan2(-float(direction[0]), -float(direction[2]))
    pitch = math.asin(float(np.clip(direction[1], -1.0, 1.0)))
    return yaw, pitch


def yaw_pitch_to_quaternion(yaw: float, pitch: float) -> np.ndarray:
    """Build the YXZ rotation quaternion ``q_yaw * q_pitch``."""
    half_yaw = yaw / 2.0
    half_pitch = pitch / 2.0
    cy, sy = math.cos(half_yaw), math.sin(half_yaw)
    cp, sp = math.cos(half_pitch), math.sin(half_pitch)
    return np.array([cy * cp, cy * sp, sy * cp, -sy * sp], dtype=np.float64)


def quaternion_to_yaw_pitch(quaternion: np.ndarray) -> Tuple[float, float]:
    """Recover (yaw, pitch) from a rotation quaternion, ignoring any roll.

    The pitch is clamped to ``[-pi/2, pi/2]``; at the poles the yaw is taken
    from the camera-right axis, which stays well defined.
    """
    q = np.asarray(quaternion, dtype=np.float64).reshape(4)
    norm = float(np.linalg.norm(q))
    if norm <= 1e-12:
        raise ValueError("Quaternion has zero length.")
    w, x, y, z = q / norm

    # Third column of the rotation matrix is the camera +Z (backwards) axis.
    back_x = 2.0 * (x * z + w * y)
    back_y = 2.0 * (y * z - w * x)
    back_z = 1.0 - 2.0 * (x * x + y * y)

    pitch = clamp_pitch(math.asin(float(np.clip(-back_y, -1.0, 1.0))))
    if math.hypot(back_x, back_z) > 1e-6:
        yaw = math.atan2(back_x, back_z)
    else:
        right_x = 1.0 - 2.0 * (y * y + z * z)
        right_z = 2.0 * (x * z - w * y)
        yaw = math.atan2(-right_z, right_x)
    return yaw, pitch
