"""Flat swipe carousel: one exhibit per page, for small touch screens."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Set

from loguru import logger
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QImage, QMouseEvent, QPixmap
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from ..controls.carousel import CarouselState, build_carousel_slides
from ..models.gallery import ExhibitItem, GalleryConfig
from ..workers.task_runner import TaskRunner
from .detail_dialog import decode_image, resolve_image_path

TAP_SLOP_PX = 8.0


class CarouselView(QWidget):
    """Shows the current slide with its caption, a counter and page dots.

    Swiping (or the arrow buttons) turns pages; tapping a photo emits
    :attr:`itemActivated`.
    """

    itemActivated = pyqtSignal(object)

    def __init__(
        self,
        config: GalleryConfig,
        *,
        base_dir: Optional[Path] = None,
        task_runner: Optional[TaskRunner] = None,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.state = CarouselState(build_carousel_slides(config.items))
        self._base_dir = base_dir
        self._task_runner = task_runner
        self._images: Dict[str, QImage] = {}
        self._pending: Set[str] = set()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)

        self._image = QLabel()
        self._image.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._image.setMinimumHeight(240)
        layout.addWidget(self._image, stretch=1)

        self._title = QLabel()
        self._title.setTextFormat(Qt.TextFormat.RichText)
        self._title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._title)

        self._body = QLabel()
        self._body.setWordWrap(True)
        self._body.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._body)

        self._counter = QLabel()
        self._counter.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._counter)

        nav = QHBoxLayout()
        self._previous = QPushButton("‹")
        self._previous.clicked.connect(self.show_previous)
        nav.addWidget(self._previous)
        self._dots: List[QPushButton] = []
        nav.addStretch(1)
        for index in range(self.state.count):
            dot = QPushButton("●")
            dot.setFlat(True)
            dot.setFixedWidth(20)
            dot.clicked.connect(lambda _checked=False, i=index: self.show_slide(i))
            nav.addWidget(dot)
            self._dots.append(dot)
        nav.addStretch(1)
        self._next = QPushButton("›")
        self._next.clicked.connect(self.show_next)
        nav.addWidget(self._next)
        layout.addLayout(nav)

        self._refresh()

    # ------------------------------------------------------------------
    def show_slide(self, index: int) -> None:
        if self.state.go_to(index):
            self._refresh()

    def show_next(self) -> None:
        if self.state.next():
            self._refresh()

    def show_previous(self) -> None:
        if self.state.previous():
            self._refresh()

    def reset(self) -> None:
        self.state.reset()
        self._refresh()

    # ------------------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            self.state.begin_drag(event.position().x())
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if self.state.dragging:
            self.state.drag(event.position().x())
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton or not self.state.dragging:
            super().mouseReleaseEvent(event)
            return
        offset = self.state.drag(event.position().x())
        if abs(offset) < TAP_SLOP_PX:
            self.state.cancel_drag()
            self._on_tap(event.position().toPoint())
        elif self.state.end_drag(self.width()):
            self._refresh()
        event.accept()

    def _on_tap(self, point) -> None:
        slide = self.state.current
        if slide is None or not slide.shows_image:
            return
        if self._image.geometry().contains(point):
            logger.debug("Carousel tap on {}", slide.item.id)
            self.itemActivated.emit(slide.item)

    # ------------------------------------------------------------------
    def _refresh(self) -> None:
        slide = self.state.current
        for index, dot in enumerate(self._dots):
            dot.setEnabled(index != self.state.index)
        self._previous.setEnabled(self.state.index > 0)
        self._next.setEnabled(self.state.index < self.state.count - 1)
        if slide is None:
            self._image.clear()
            self._title.setText("<h2>No photos</h2>")
            self._body.clear()
            self._counter.clear()
            return

        item = slide.item
        self._title.setText(f"<h2>{item.title}</h2>" if item.title else "")
        if slide.is_cover:
            self._image.hide()
            self._body.setText(item.overlay_text)
            self._counter.clear()
            return

        self._body.setText(item.description)
        self._counter.setText(f"{self.state.photo_position(slide)} / {self.state.photo_count}")
        self._image.show()
        self._load_image(item)

    def _load_image(self, item: ExhibitItem) -> None:
        cached = self._images.get(item.id)
        if cached is not None:
            self._set_pixmap(cached)
            return
        path = resolve_image_path(item.src, self._base_dir)
        if path is None:
            self._image.setText("No image")
            return
        if self._task_runner is None:
            try:
                self._on_image_ready(item.id, decode_image(path))
            except (FileNotFoundError, ValueError) as exc:
                self._on_image_failed(item.id, str(exc))
            return
        self._image.setText("Loading image…")
        if item.id in self._pending:
            return
        self._pending.add(item.id)
        self._task_runner.submit(
            decode_image,
            path,
            on_success=lambda image, item_id=item.id: self._on_image_ready(item_id, image),
            on_failure=lambda message, item_id=item.id: self._on_image_failed(item_id, message),
        )

    def _on_image_ready(self, item_id: str, image: QImage) -> None:
        self._pending.discard(item_id)
        self._images[item_id] = image
        slide = self.state.current
        if slide is not None and slide.item.id == item_id:
            self._set_pixmap(image)

    def _on_image_failed(self, item_id: str, message: str) -> None:
        self._pending.discard(item_id)
        logger.warning("Carousel image for {} unavailable: {}", item_id, message)
        slide = self.state.current
        if slide is not None and slide.item.id == item_id:
            self._image.setText("Image unavailable")

    def _set_pixmap(self, image: QImage) -> None:
        width = max(self._image.width(), 320)
        height = max(self._image.height(), 240)
        self._image.setPixmap(
            QPixmap.fromImage(image).scaled(
                width,
                height,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        )
