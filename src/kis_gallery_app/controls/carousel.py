"""Slide state for the flat (2D) swipe carousel offered on touch devices."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from ..models.gallery import COVER_ITEM_ID, ExhibitItem

SWIPE_FRACTION = 0.2  # of the carousel width


@dataclass(slots=True, frozen=True)
class CarouselSlide:
    item: ExhibitItem
    is_cover: bool = False

    @property
    def shows_image(self) -> bool:
        return not self.is_cover


def build_carousel_slides(items: Sequence[ExhibitItem]) -> List[CarouselSlide]:
    """Cover text slide first (only when it carries overlay text), then every other item."""
    slides: List[CarouselSlide] = []
    cover = next((item for item in items if item.id == COVER_ITEM_ID), None)
    if cover is not None and cover.overlay_text:
        slides.append(CarouselSlide(cover, is_cover=True))
    slides.extend(CarouselSlide(item) for item in items if item.id != COVER_ITEM_ID)
    return slides


class CarouselState:
    """Current slide plus the horizontal drag in progress.

    Navigation clamps at both ends; there is no wrap-around.
    """

    def __init__(self, slides: Sequence[CarouselSlide]) -> None:
        self.slides = tuple(slides)
        self._index = 0
        self._drag_start: Optional[float] = None
        self._drag_offset = 0.0

    @property
    def count(self) -> int:
        return len(self.slides)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[CarouselSlide]:
        return self.slides[self._index] if self.slides else None

    @property
    def dragging(self) -> bool:
        return self._drag_start is not None

    @property
    def drag_offset(self) -> float:
        return self._drag_offset

    def photo_position(self, slide: CarouselSlide) -> int:
        """1-based counter among photo slides, ignoring the cover."""
        photos = [s for s in self.slides if not s.is_cover]
        return photos.index(slide) + 1

    @property
    def photo_count(self) -> int:
        return sum(1 for s in self.slides if not s.is_cover)

    def go_to(self, index: int) -> bool:
        if not self.slides:
            return False
        index = max(0, min(int(index), self.count - 1))
        if index == self._index:
            return False
        self._index = index
        logger.debug("Carousel at slide {}/{}", index + 1, self.count)
        return True

    def next(self) -> bool:
        return self.go_to(self._index + 1)

    def previous(self) -> bool:
        return self.go_to(self._index - 1)

    def reset(self) -> None:
        self._index = 0
        self.cancel_drag()

    # ------------------------------------------------------------------
    def begin_drag(self, x: float) -> None:
        self._drag_start = float(x)
        self._drag_offset = 0.0

    def drag(self, x: float) -> float:
        if self._drag_start is not None:
            self._drag_offset = float(x) - self._drag_start
        return self._drag_offset

    def end_drag(self, width: float) -> bool:
        """Finish a swipe; a drag past a fifth of ``width`` turns one slide."""
        if self._drag_start is None:
            return False
        moved = self._drag_offset
        self.cancel_drag()
        threshold = max(0.0, float(width)) * SWIPE_FRACTION
        if moved < -threshold:
            return self.next()
        if moved > threshold:
            return self.previous()
        return False

    def cancel_drag(self) -> None:
        self._drag_start = None
        self._drag_offset = 0.0
