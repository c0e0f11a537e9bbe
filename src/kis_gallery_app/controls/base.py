"""Contract shared by the camera controller variants."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models.bounds import Bounds


@runtime_checkable
class CameraController(Protocol):
    """What the session needs from any controller variant.

    Input handlers only stage state; ``update`` integrates it once per frame.
    """

    @property
    def is_locked(self) -> bool: ...

    @property
    def bounds(self) -> Optional[Bounds]: ...

    def lock(self) -> bool: ...

    def unlock(self) -> None: ...

    def set_bounds(self, bounds: Optional[Bounds]) -> None: ...

    def update(self, delta: float) -> None: ...


@runtime_checkable
class PointerCapture(Protocol):
    """Host-platform pointer capture used by the continuous controller."""

    def request(self) -> bool: ...

    def release(self) -> None: ...


class AlwaysGrantedCapture:
    """Capture for hosts without a real pointer lock; every request succeeds."""

    def request(self) -> bool:
        return True

    def release(self) -> None:
        return None
