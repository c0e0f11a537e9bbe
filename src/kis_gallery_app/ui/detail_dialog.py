"""Detail view for an activated exhibit item."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import QDialog, QDialogButtonBox, QLabel, QVBoxLayout

from ..models.gallery import ExhibitItem
from ..workers.task_runner import TaskRunner

PREVIEW_SIZE = (720, 540)


def resolve_image_path(src: Optional[str], base_dir: Optional[Path] = None) -> Optional[Path]:
    """Map an item's ``src`` (site-rooted or relative) onto the local filesystem."""
    if not src:
        return None
    path = Path(src.lstrip("/"))
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path


def decode_image(path: Path) -> QImage:
    """Decode an image file; safe to call off the GUI thread."""
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    image = QImage(str(path))
    if image.isNull():
        raise ValueError(f"Cannot decode image {path}")
    return image


class ItemDetailDialog(QDialog):
    """Shows an item's picture, title and description.

    The picture is decoded on the task runner's pool and swapped in when ready.
    Items with overlay text show that text panel instead of the picture.
    """

    def __init__(
        self,
        item: ExhibitItem,
        base_dir: Optional[Path] = None,
        task_runner: Optional[TaskRunner] = None,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.item = item
        self._finished = False
        self.setWindowTitle(item.title or item.id)
        self.setMinimumWidth(480)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 16)

        self._image = QLabel()
        self._image.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._image)

        title = QLabel(f"<h2>{item.title or item.id}</h2>")
        title.setTextFormat(Qt.TextFormat.RichText)
        layout.addWidget(title)

        body = item.overlay_text or item.description
        if body:
            description = QLabel(body)
            description.setObjectName("overlayText" if item.overlay_text else "description")
            description.setWordWrap(True)
            layout.addWidget(description)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        path = None if item.overlay_text else resolve_image_path(item.src, base_dir)
        if path is None:
            self._image.hide()
        elif task_runner is None:
            try:
                self._show_image(decode_image(path))
            except (FileNotFoundError, ValueError) as exc:
                self._show_failure(str(exc))
        else:
            self._image.setText("Loading image…")
            task_runner.submit(decode_image, path, on_success=self._show_image, on_failure=self._show_failure)

    def done(self, result: int) -> None:
        self._finished = True
        super().done(result)

    def _show_image(self, image: QImage) -> None:
        if self._finished:
            return
        pixmap = QPixmap.fromImage(image)
        self._image.setPixmap(
            pixmap.scaled(
                *PREVIEW_SIZE,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        )

    def _show_failure(self, message: str) -> None:
        logger.warning("Image for {} unavailable: {}", self.item.id, message)
        if self._finished:
            return
        self._image.setText("Image unavailable")
