"""Ray casting against bounded rectangular surfaces."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import numpy as np


@dataclass(slots=True)
class Ray:
    """Half-line starting at ``origin``; ``direction`` is normalised on creation."""

    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self) -> None:
        self.origin = np.asarray(self.origin, dtype=np.float64).reshape(3)
        direction = np.asarray(self.direction, dtype=np.float64).reshape(3)
        norm = float(np.linalg.norm(direction))
        if norm <= 1e-12:
            raise ValueError("Ray direction vector is degenerate.")
        self.direction = direction / norm

    def point_at(self, distance: float) -> np.ndarray:
        return self.origin + distance * self.direction


@dataclass(eq=False)
class Surface:
    """A rectangle in world space, optionally parented to a scene node.

    ``right`` and ``normal`` span the rectangle's local frame; ``width`` is
    measured along ``right`` and ``height`` along ``normal x right``.
    Surfaces compare by identity so they can key lookup tables.
    """

    name: str
    center: np.ndarray
    normal: np.ndarray
    right: np.ndarray
    width: float
    height: float
    parent: Optional[object] = None
    pickable: bool = True
    up: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.center = np.asarray(self.center, dtype=np.float64).reshape(3)
        self.normal = _unit(self.normal)
        self.right = _unit(self.right)
        self.up = np.cross(self.normal, self.right)


@dataclass(slots=True, frozen=True, eq=False)
class RayHit:
    """Single ray/surface intersection."""

    distance: float
    point: np.ndarray
    surface: Surface


def intersect_surface(
    ray: Ray,
    surface: Surface,
    *,
    epsilon: float = 1e-9,
) -> Optional[RayHit]:
    """Intersect a ray with one two-sided rectangle, or return ``None``."""
    denom = float(np.dot(ray.direction, surface.normal))
    if abs(denom) <= epsilon:
        return None
    distance = float(np.dot(surface.center - ray.origin, surface.normal)) / denom
    if distance < 0.0:
        return None

    point = ray.point_at(distance)
    local = point - surface.center
    if abs(float(np.dot(local, surface.right))) > surface.width / 2.0 + epsilon:
        return None
    if abs(float(np.dot(local, surface.up))) > surface.height / 2.0 + epsilon:
        return None
    return RayHit(distance=distance, point=point, surface=surface)


def intersect(
    ray: Ray,
    surfaces: Iterable[Surface],
    *,
    near: float = 0.0,
    far: float = float("inf"),
) -> List[RayHit]:
    """Intersect ``ray`` with every pickable surface; hits are sorted nearest first."""
    hits: List[RayHit] = []
    for surface in surfaces:
        if not surface.pickable:
            continue
        hit = intersect_surface(ray, surface)
        if hit is not None and near <= hit.distance <= far:
            hits.append(hit)
    hits.sort(key=lambda item: item.distance)
    return hits


def _unit(vector: np.ndarray) -> np.ndarray:
    v = np.asarray(vector, dtype=np.float64).reshape(3)
    norm = float(np.linalg.norm(v))
    if norm <= 1e-12:
        raise ValueError("Surface axis vector is degenerate.")
    return v / norm
