import math
import os
from pathlib import Path

import pytest

pytest.importorskip("PyQt6.QtWidgets")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QPointF, Qt  # noqa: E402
from PyQt6.QtGui import QImage  # noqa: E402
from PyQt6.QtWidgets import QApplication, QLabel  # noqa: E402

from kis_gallery_app.controls.continuous import MoveFlag  # noqa: E402
from kis_gallery_app.models.camera import Camera  # noqa: E402
from kis_gallery_app.models.gallery import (  # noqa: E402
    ExhibitItem,
    GalleryConfig,
    ItemPlacement,
    Room,
    RoomDimensions,
    TextOverlay,
    WallSide,
)
from kis_gallery_app.session import GallerySession  # noqa: E402
from kis_gallery_app.ui.detail_dialog import ItemDetailDialog, decode_image, resolve_image_path  # noqa: E402
from kis_gallery_app.viewer.gallery_widget import (  # noqa: E402
    ROTATION_STRIP_HEIGHT_PX,
    GalleryWidget,
    TouchRegion,
    key_to_move_flag,
    touch_region,
)


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


def make_item(item_id="nets", overlay=None, src=None):
    return ExhibitItem(
        id=item_id,
        placement=ItemPlacement(room="main", wall=WallSide.NORTH),
        title=item_id.title(),
        description="Drying on the quay",
        src=src,
        overlay=overlay,
    )


@pytest.mark.parametrize(
    "key, flag",
    [
        (Qt.Key.Key_W, MoveFlag.FORWARD),
        (Qt.Key.Key_Up, MoveFlag.FORWARD),
        (Qt.Key.Key_S, MoveFlag.BACKWARD),
        (Qt.Key.Key_Down, MoveFlag.BACKWARD),
        (Qt.Key.Key_A, MoveFlag.LEFT),
        (Qt.Key.Key_Left, MoveFlag.LEFT),
        (Qt.Key.Key_D, MoveFlag.RIGHT),
        (Qt.Key.Key_Right, MoveFlag.RIGHT),
    ],
)
def test_movement_keys_map_to_flags(key, flag):
    assert key_to_move_flag(key) is flag
    assert key_to_move_flag(key.value) is flag


def test_other_keys_do_not_move():
    assert key_to_move_flag(Qt.Key.Key_Escape) is None
    assert key_to_move_flag(-1) is None


def test_image_paths_resolve_against_config_directory(tmp_path):
    assert resolve_image_path(None, tmp_path) is None
    assert resolve_image_path("/images/cover.jpg", tmp_path) == tmp_path / "images" / "cover.jpg"
    assert resolve_image_path("cover.jpg") == Path("cover.jpg")


def test_decode_image_reports_missing_and_broken_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        decode_image(tmp_path / "absent.png")
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    with pytest.raises(ValueError):
        decode_image(broken)


@pytest.mark.parametrize(
    "x, y, region",
    [
        (100.0, 560.0, TouchRegion.ROTATION),
        (700.0, 599.0, TouchRegion.ROTATION),
        (100.0, 300.0, TouchRegion.JOYSTICK),
        (400.0, 300.0, TouchRegion.JOYSTICK),
        (700.0, 300.0, TouchRegion.LOOK),
        (700.0, 600.0 - ROTATION_STRIP_HEIGHT_PX - 1.0, TouchRegion.LOOK),
    ],
)
def test_touch_regions_split_the_view(x, y, region):
    assert touch_region(x, y, 800.0, 600.0) is region


def test_dragging_the_bottom_strip_turns_the_camera(qapp):
    config = GalleryConfig(
        rooms=(Room(id="main", dimensions=RoomDimensions(width=10.0, height=3.5, depth=8.0)),),
        items=(make_item("a"), make_item("b")),
    )
    session = GallerySession(config, Camera(viewport=(800, 600)), touch=True)
    widget = GalleryWidget(session)
    widget.resize(800, 600)
    session.start()
    yaw = session.camera.yaw

    widget._press_touch_point(1, QPointF(400.0, 580.0))
    widget._move_touch_point(1, QPointF(450.0, 580.0))
    widget._release_touch_point(1, QPointF(450.0, 580.0))

    turned = yaw - session.camera.yaw
    assert math.isclose(turned, 50.0 * session.guided.rotation_speed, rel_tol=1e-9)

    # Once released, the strip no longer steers.
    widget._move_touch_point(1, QPointF(600.0, 580.0))
    assert math.isclose(yaw - session.camera.yaw, turned)


def test_detail_dialog_shows_overlay_text_instead_of_picture(qapp, tmp_path):
    item = make_item("photo-cover", overlay=TextOverlay("Summer Show\nHarbour prints"), src="/images/cover.jpg")
    dialog = ItemDetailDialog(item, base_dir=tmp_path)
    try:
        assert dialog._image.isHidden()
        body = dialog.findChild(QLabel, "overlayText")
        assert body is not None
        assert body.text() == "Summer Show\nHarbour prints"
    finally:
        dialog.deleteLater()


class RecordingRunner:
    def __init__(self):
        self.calls = []

    def submit(self, fn, *args, on_success, on_failure=None, **kwargs):
        self.calls.append((fn, args, on_success, on_failure))


def test_closed_detail_dialog_ignores_late_images(qapp, tmp_path):
    runner = RecordingRunner()
    dialog = ItemDetailDialog(make_item(src="/images/nets.jpg"), base_dir=tmp_path, task_runner=runner)
    (fn, args, on_success, on_failure) = runner.calls[0]
    assert fn is decode_image
    assert args == (tmp_path / "images" / "nets.jpg",)

    dialog.reject()
    image = QImage(8, 8, QImage.Format.Format_RGB32)
    image.fill(0)
    on_success(image)
    on_failure("gone")

    assert dialog._image.pixmap().isNull()
    assert dialog._image.text() == "Loading image…"
    dialog.deleteLater()
