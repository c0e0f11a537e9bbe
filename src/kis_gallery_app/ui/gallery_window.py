"""Main window hosting the gallery view."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from loguru import logger
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QLabel, QMainWindow, QStackedWidget, QStatusBar, QToolBar

from ..math.raycast import Surface
from ..models.camera import Camera
from ..models.gallery import ExhibitItem, GalleryConfig
from ..session import GallerySession
from ..viewer.gallery_widget import GalleryWidget, QtPointerCapture
from ..workers.task_runner import TaskRunner
from .carousel_view import CarouselView
from .detail_dialog import ItemDetailDialog


class GalleryWindow(QMainWindow):
    """Top-level window: the gallery view, tour controls and a status bar.

    Touch sessions open on the flat carousel and switch to the walkable view
    through the toolbar.
    """

    def __init__(self, config: GalleryConfig, *, touch: bool = False, base_dir: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle(config.name or "Gallery")
        self.resize(1280, 760)
        self._base_dir = base_dir
        self._detail: Optional[ItemDetailDialog] = None
        self._task_runner = TaskRunner()
        self._view_action: Optional[QAction] = None
        self._tour_actions: Tuple[QAction, ...] = ()

        capture = QtPointerCapture()
        self.session = GallerySession(
            config,
            Camera(viewport=(1280, 720)),
            touch=touch,
            capture=capture,
            on_item_activated=self._open_detail,
            on_hover_enter=self._on_hover_enter,
            on_hover_exit=self._on_hover_exit,
        )
        self.viewer = GalleryWidget(self.session, capture)
        self.carousel: Optional[CarouselView] = None
        self._pages = QStackedWidget()
        self._pages.addWidget(self.viewer)
        if touch:
            self.carousel = CarouselView(config, base_dir=base_dir, task_runner=self._task_runner)
            self.carousel.itemActivated.connect(self._open_carousel_detail)
            self._pages.addWidget(self.carousel)
        self.setCentralWidget(self._pages)

        self._hover_label = QLabel("")
        status = QStatusBar()
        status.addPermanentWidget(self._hover_label)
        self.setStatusBar(status)

        if touch:
            self._build_tour_toolbar()
            self.show_carousel()
        else:
            status.showMessage("Click the view to start walking")
        logger.info("Gallery window ready")

    def _build_tour_toolbar(self) -> None:
        guided = self.session.guided
        if guided is None:
            return
        toolbar = QToolBar("Tour", self)
        toolbar.setMovable(False)

        self._view_action = QAction("3D view", self)
        self._view_action.setCheckable(True)
        self._view_action.toggled.connect(self._on_toggle_view)
        toolbar.addAction(self._view_action)
        toolbar.addSeparator()

        previous = QAction("Previous", self)
        previous.setShortcut(QKeySequence("PgUp"))
        previous.triggered.connect(guided.retreat)
        toolbar.addAction(previous)

        self._auto_action = QAction("Auto-walk", self)
        self._auto_action.setCheckable(True)
        self._auto_action.triggered.connect(self._on_toggle_auto_walk)
        toolbar.addAction(self._auto_action)

        following = QAction("Next", self)
        following.setShortcut(QKeySequence("PgDown"))
        following.triggered.connect(guided.advance)
        toolbar.addAction(following)

        self._tour_actions = (previous, self._auto_action, following)
        self.addToolBar(toolbar)
        self.viewer.frameTicked.connect(self._sync_auto_action)

    @property
    def in_carousel(self) -> bool:
        return self.carousel is not None and self._pages.currentWidget() is self.carousel

    def show_carousel(self) -> None:
        """Switch to the flat carousel; the walkable view stops taking input."""
        if self.carousel is None:
            return
        self.session.controller.unlock()
        self.session.interaction.clear_hover()
        self.carousel.reset()
        self._pages.setCurrentWidget(self.carousel)
        self._set_view_checked(False)
        self.statusBar().showMessage("Swipe to browse")
        logger.info("Switched to carousel view")

    def show_walkthrough(self) -> None:
        self._pages.setCurrentWidget(self.viewer)
        self._set_view_checked(True)
        self.viewer.setFocus()
        self.session.start()
        self.statusBar().showMessage("Guided mode")
        logger.info("Switched to walkable view")

    def _set_view_checked(self, checked: bool) -> None:
        action = self._view_action
        if action is not None and action.isChecked() != checked:
            action.blockSignals(True)
            action.setChecked(checked)
            action.blockSignals(False)
        for tour_action in self._tour_actions:
            tour_action.setEnabled(checked)

    def _on_toggle_view(self, checked: bool) -> None:
        if checked:
            self.show_walkthrough()
        else:
            self.show_carousel()

    def _on_toggle_auto_walk(self) -> None:
        guided = self.session.guided
        if guided is None:
            return
        enabled = guided.toggle_auto_walk()
        self._auto_action.setChecked(enabled)
        self.statusBar().showMessage("Auto-walk on" if enabled else "Auto-walk off", 2000)

    def _sync_auto_action(self, _delta: float) -> None:
        guided = self.session.guided
        if guided is not None and self._auto_action.isChecked() != guided.auto_advance_enabled:
            self._auto_action.setChecked(guided.auto_advance_enabled)

    # ------------------------------------------------------------------
    def _on_hover_enter(self, item: ExhibitItem, _surface: Surface) -> None:
        self._hover_label.setText(item.title or item.id)

    def _on_hover_exit(self, _item: ExhibitItem, _surface: Surface) -> None:
        self._hover_label.setText("")

    def _open_carousel_detail(self, item: ExhibitItem) -> None:
        if self._detail is None:
            self._open_detail(item)

    def _open_detail(self, item: ExhibitItem) -> None:
        dialog = ItemDetailDialog(item, base_dir=self._base_dir, task_runner=self._task_runner, parent=self)
        dialog.finished.connect(self._on_detail_closed)
        self._detail = dialog
        dialog.open()

    def _on_detail_closed(self, _result: int) -> None:
        if self._detail is not None:
            self._detail.deleteLater()
        self._detail = None
        if self.in_carousel:
            return
        self.viewer.setFocus()
        if not self.session.close_detail():
            self.statusBar().showMessage("Click the view to resume walking", 3000)
