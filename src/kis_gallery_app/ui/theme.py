"""Application palette and scene colours."""
from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtGui import QColor, QPalette

from ..models.gallery import GallerySettings

BACKGROUND = QColor(26, 26, 26)


@dataclass(slots=True)
class SceneColors:
    """Colours used to paint the gallery view."""

    background: QColor
    wall: QColor
    floor: QColor
    item: QColor
    highlight: QColor
    text: QColor
    strip: QColor

    @classmethod
    def from_settings(cls, settings: GallerySettings) -> "SceneColors":
        wall = QColor(settings.wall_color)
        floor = QColor(settings.floor_color)
        # Invalid colour strings fall back to neutral greys.
        if not wall.isValid():
            wall = QColor(245, 245, 245)
        if not floor.isValid():
            floor = QColor(42, 42, 42)
        return cls(
            background=BACKGROUND,
            wall=wall,
            floor=floor.lighter(250),
            item=QColor(200, 200, 200),
            highlight=QColor(255, 221, 87),
            text=QColor(235, 235, 235),
            strip=QColor(255, 255, 255, 28),
        )


def build_gallery_palette() -> QPalette:
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, BACKGROUND)
    palette.setColor(QPalette.ColorRole.WindowText, QColor(235, 235, 235))
    palette.setColor(QPalette.ColorRole.Base, QColor(18, 18, 18))
    palette.setColor(QPalette.ColorRole.Text, QColor(235, 235, 235))
    palette.setColor(QPalette.ColorRole.Button, QColor(40, 40, 40))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor(235, 235, 235))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(255, 221, 87))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(20, 20, 20))
    return palette


def apply_gallery_theme(app) -> None:
    """Apply the dark gallery palette with the Fusion style."""
    app.setPalette(build_gallery_palette())
    app.setStyle("Fusion")
