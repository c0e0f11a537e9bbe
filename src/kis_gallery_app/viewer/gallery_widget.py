"""Qt host widget: frame loop, input mapping and a wireframe view of the gallery."""
from __future__ import annotations

import time
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
from loguru import logger
from PyQt6.QtCore import QEvent, QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QCursor,
    QEventPoint,
    QFocusEvent,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPen,
    QResizeEvent,
    QTouchEvent,
)
from PyQt6.QtWidgets import QWidget

from ..controls.continuous import ContinuousController, MoveFlag
from ..models.camera import Camera
from ..models.gallery import ExhibitItem
from ..session import GallerySession
from ..ui.theme import SceneColors

FRAME_INTERVAL_MS = 16
MAX_FRAME_DELTA = 0.1
JOYSTICK_RADIUS_PX = 50.0
ROTATION_STRIP_HEIGHT_PX = 56.0

_KEY_FLAGS: Dict[Qt.Key, MoveFlag] = {
    Qt.Key.Key_W: MoveFlag.FORWARD,
    Qt.Key.Key_Up: MoveFlag.FORWARD,
    Qt.Key.Key_S: MoveFlag.BACKWARD,
    Qt.Key.Key_Down: MoveFlag.BACKWARD,
    Qt.Key.Key_A: MoveFlag.LEFT,
    Qt.Key.Key_Left: MoveFlag.LEFT,
    Qt.Key.Key_D: MoveFlag.RIGHT,
    Qt.Key.Key_Right: MoveFlag.RIGHT,
}


class TouchRegion(Enum):
    JOYSTICK = "joystick"
    LOOK = "look"
    ROTATION = "rotation"


def touch_region(x: float, y: float, width: float, height: float) -> TouchRegion:
    """Which touch control a press at ``(x, y)`` belongs to.

    The bottom strip is the rotation wheel; above it the left half drives the
    joystick and the right half looks around.
    """
    if y >= height - ROTATION_STRIP_HEIGHT_PX:
        return TouchRegion.ROTATION
    if x <= width / 2.0:
        return TouchRegion.JOYSTICK
    return TouchRegion.LOOK


def key_to_move_flag(key: int) -> Optional[MoveFlag]:
    """Map a Qt key code to the movement flag it drives, if any."""
    try:
        return _KEY_FLAGS.get(Qt.Key(key))
    except ValueError:
        return None


class QtPointerCapture:
    """Pointer capture backed by ``QWidget.grabMouse`` and a hidden, recentred cursor."""

    def __init__(self) -> None:
        self._widget: Optional[QWidget] = None

    def bind(self, widget: QWidget) -> None:
        self._widget = widget

    def request(self) -> bool:
        widget = self._widget
        if widget is None or not widget.isVisible() or not widget.isActiveWindow():
            return False
        widget.grabMouse()
        widget.setCursor(Qt.CursorShape.BlankCursor)
        QCursor.setPos(widget.mapToGlobal(widget.rect().center()))
        return True

    def release(self) -> None:
        if self._widget is None:
            return
        self._widget.releaseMouse()
        self._widget.unsetCursor()


class GalleryWidget(QWidget):
    """Drives a :class:`GallerySession` from Qt events and paints its scene."""

    frameTicked = pyqtSignal(float)

    def __init__(self, session: GallerySession, capture: Optional[QtPointerCapture] = None, parent=None) -> None:
        super().__init__(parent)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, session.touch)
        self.setMinimumSize(480, 320)

        self.session = session
        self._capture = capture
        if capture is not None:
            capture.bind(self)
        self._colors = SceneColors.from_settings(session.config.settings)

        self._joystick_touch: Optional[int] = None
        self._joystick_origin = QPointF()
        self._look_touch: Optional[int] = None
        self._rotation_touch: Optional[int] = None

        self._last_tick = time.perf_counter()
        self._timer = QTimer(self)
        self._timer.setInterval(FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self._on_frame)
        self._timer.start()

    @property
    def camera(self) -> Camera:
        return self.session.camera

    # ------------------------------------------------------------------
    def _on_frame(self) -> None:
        now = time.perf_counter()
        delta = min(MAX_FRAME_DELTA, now - self._last_tick)
        self._last_tick = now
        self.session.tick(delta)
        self.frameTicked.emit(delta)
        self.update()

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        size = event.size()
        self.camera.viewport = (max(1, size.width()), max(1, size.height()))
        super().resizeEvent(event)

    # Desktop input ----------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        if self.session.touch:
            pos = event.position()
            self._press_touch_point(-1, pos)
        elif self.session.detail_open:
            pass
        elif not self.session.controller.is_locked:
            self.session.start()
        else:
            self.session.activate()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        controller = self.session.controller
        pos = event.position()
        if isinstance(controller, ContinuousController) and controller.is_locked:
            center = QPointF(self.rect().center())
            delta = pos - center
            if delta.x() or delta.y():
                controller.on_pointer_motion(delta.x(), delta.y())
                QCursor.setPos(self.mapToGlobal(self.rect().center()))
        elif self.session.touch and event.buttons() & Qt.MouseButton.LeftButton:
            self._move_touch_point(-1, pos)
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if self.session.touch and event.button() == Qt.MouseButton.LeftButton:
            self._release_touch_point(-1, event.position())
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        controller = self.session.controller
        if event.key() == Qt.Key.Key_Escape and controller.is_locked and not self.session.touch:
            controller.unlock()
            event.accept()
            return
        flag = key_to_move_flag(event.key())
        if flag is not None and isinstance(controller, ContinuousController):
            if not event.isAutoRepeat():
                controller.press(flag)
            event.accept()
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        flag = key_to_move_flag(event.key())
        controller = self.session.controller
        if flag is not None and isinstance(controller, ContinuousController):
            if not event.isAutoRepeat():
                controller.release(flag)
            event.accept()
            return
        super().keyReleaseEvent(event)

    def focusOutEvent(self, event: QFocusEvent) -> None:  # noqa: N802
        controller = self.session.controller
        if isinstance(controller, ContinuousController) and controller.is_locked:
            controller.on_capture_lost()
            if self._capture is not None:
                self._capture.release()
        super().focusOutEvent(event)

    # Touch input ------------------------------------------------------
    def event(self, event: QEvent) -> bool:  # noqa: A003
        if event.type() in (
            QEvent.Type.TouchBegin,
            QEvent.Type.TouchUpdate,
            QEvent.Type.TouchEnd,
            QEvent.Type.TouchCancel,
        ):
            self._handle_touch(event)  # type: ignore[arg-type]
            event.accept()
            return True
        return super().event(event)

    def _handle_touch(self, event: QTouchEvent) -> None:
        for point in event.points():
            state = point.state()
            if state == QEventPoint.State.Pressed:
                self._press_touch_point(point.id(), point.position())
            elif state in (QEventPoint.State.Updated, QEventPoint.State.Stationary):
                self._move_touch_point(point.id(), point.position())
            elif state == QEventPoint.State.Released:
                self._release_touch_point(point.id(), point.position())

    # A mouse in touch mode is routed as touch id -1.
    def _press_touch_point(self, touch_id: int, pos: QPointF) -> None:
        guided = self.session.guided
        if guided is None:
            return
        region = touch_region(pos.x(), pos.y(), self.width(), self.height())
        if region is TouchRegion.ROTATION:
            if self._rotation_touch is None:
                self._rotation_touch = touch_id
                guided.begin_rotation(pos.x())
        elif region is TouchRegion.JOYSTICK:
            if self._joystick_touch is None:
                self._joystick_touch = touch_id
                self._joystick_origin = QPointF(pos)
        elif self._look_touch is None and guided.begin_look(pos.x(), pos.y(), self.width()):
            self._look_touch = touch_id

    def _move_touch_point(self, touch_id: int, pos: QPointF) -> None:
        guided = self.session.guided
        if guided is None:
            return
        if touch_id == self._joystick_touch:
            offset = pos - self._joystick_origin
            guided.set_joystick(offset.x() / JOYSTICK_RADIUS_PX, offset.y() / JOYSTICK_RADIUS_PX)
        elif touch_id == self._look_touch:
            guided.move_look(pos.x(), pos.y())
        elif touch_id == self._rotation_touch:
            guided.drag_rotation(pos.x())

    def _release_touch_point(self, touch_id: int, pos: QPointF) -> None:
        guided = self.session.guided
        if guided is None:
            return
        if touch_id == self._joystick_touch:
            self._joystick_touch = None
            guided.release_joystick()
        elif touch_id == self._look_touch:
            self._look_touch = None
            if guided.end_look():
                self.session.activate((pos.x(), pos.y()))
        elif touch_id == self._rotation_touch:
            self._rotation_touch = None
            guided.end_rotation()

    # Painting ---------------------------------------------------------
    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self._colors.background)

        self._draw_room(painter)
        self._draw_items(painter)
        self._draw_overlay(painter)
        if self.session.touch:
            self._draw_rotation_strip(painter)
        painter.end()

    def _draw_room(self, painter: QPainter) -> None:
        dims = self.session.room.dimensions
        hw, hd, h = dims.half_width, dims.half_depth, dims.height
        floor = [(-hw, 0.0, -hd), (hw, 0.0, -hd), (hw, 0.0, hd), (-hw, 0.0, hd)]
        ceiling = [(x, h, z) for x, _, z in floor]

        painter.setPen(QPen(self._colors.floor, 1.5))
        self._draw_polyline(painter, floor, closed=True)
        painter.setPen(QPen(self._colors.wall, 1.0))
        self._draw_polyline(painter, ceiling, closed=True)
        for bottom, top in zip(floor, ceiling):
            self._draw_polyline(painter, [bottom, top])

    def _draw_items(self, painter: QPainter) -> None:
        hovered = self.session.hovered_item
        for node in self.session.nodes:
            picture = node.picture
            half_right = picture.right * (picture.width / 2.0)
            half_up = picture.up * (picture.height / 2.0)
            corners = [
                picture.center - half_right - half_up,
                picture.center + half_right - half_up,
                picture.center + half_right + half_up,
                picture.center - half_right + half_up,
            ]
            color = self._colors.highlight if node.item is hovered else self._colors.item
            painter.setPen(QPen(color, 2.0 if node.item is hovered else 1.2))
            self._draw_polyline(painter, corners, closed=True)
            if node.item.overlay is not None:
                self._draw_item_overlay(painter, node.item, picture.center)

    def _draw_overlay(self, painter: QPainter) -> None:
        painter.setPen(self._colors.text)
        if not self.session.touch and self.session.interactive:
            center = self.rect().center()
            painter.drawLine(center.x() - 8, center.y(), center.x() + 8, center.y())
            painter.drawLine(center.x(), center.y() - 8, center.x(), center.y() + 8)

        hovered = self.session.hovered_item
        if hovered is not None:
            painter.drawText(16, self.height() - 36, hovered.title or hovered.id)
            if hovered.description:
                painter.drawText(16, self.height() - 18, hovered.description)
        elif not self.session.controller.is_locked and not self.session.detail_open:
            painter.drawText(16, 28, "Click to enter the gallery. WASD / arrows to move, mouse to look, Esc to leave.")

    def _draw_item_overlay(self, painter: QPainter, item: ExhibitItem, center: np.ndarray) -> None:
        anchor = self._project(center)
        if anchor is None:
            return
        painter.setPen(QColor(item.overlay.color))
        first_line = item.overlay_text.splitlines()[0] if item.overlay_text else ""
        painter.drawText(QPointF(anchor[0] - 40.0, anchor[1]), first_line[:24])

    def _draw_rotation_strip(self, painter: QPainter) -> None:
        top = self.height() - ROTATION_STRIP_HEIGHT_PX
        painter.fillRect(QRectF(0.0, top, float(self.width()), ROTATION_STRIP_HEIGHT_PX), self._colors.strip)
        painter.setPen(QPen(self._colors.text, 1.0))
        # Ticks scroll with yaw so the strip reads as a wheel.
        spacing = 24.0
        guided = self.session.guided
        pixels_per_radian = 1.0 / guided.rotation_speed if guided is not None else 80.0
        phase = (self.camera.yaw * pixels_per_radian) % spacing
        x = phase
        while x < self.width():
            painter.drawLine(QPointF(x, top + 18.0), QPointF(x, top + ROTATION_STRIP_HEIGHT_PX - 18.0))
            x += spacing
        painter.drawText(QRectF(0.0, top, float(self.width()), 16.0), Qt.AlignmentFlag.AlignCenter, "drag to turn")

    def _draw_polyline(self, painter: QPainter, points: Iterable, closed: bool = False) -> None:
        projected = [self._project(point) for point in points]
        if closed and projected:
            projected.append(projected[0])
        for start, end in zip(projected, projected[1:]):
            if start is None or end is None:
                continue
            painter.drawLine(QPointF(*start), QPointF(*end))

    def _project(self, point) -> Optional[Tuple[float, float]]:
        return self.camera.project(np.asarray(point, dtype=np.float64))

    def closeEvent(self, event) -> None:  # noqa: N802
        self._timer.stop()
        logger.debug("Gallery widget closed")
        super().closeEvent(event)
