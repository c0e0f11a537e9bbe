import numpy as np
import pytest

from kis_gallery_app.controls.continuous import ContinuousController
from kis_gallery_app.controls.guided import GuidedController
from kis_gallery_app.models.camera import Camera
from kis_gallery_app.models.gallery import (
    COVER_ITEM_ID,
    ExhibitItem,
    GalleryConfig,
    ItemPlacement,
    Room,
    RoomDimensions,
    WallSide,
)
from kis_gallery_app.session import GallerySession


def make_config(depth=8.0, items=None):
    if items is None:
        items = (
            ExhibitItem(id="north-piece", placement=ItemPlacement(room="main", wall=WallSide.NORTH)),
            ExhibitItem(id="south-piece", placement=ItemPlacement(room="main", wall=WallSide.SOUTH)),
        )
    room = Room(id="main", dimensions=RoomDimensions(width=10.0, height=3.5, depth=depth), spawn_point=(0.0, 1.6, 1.0))
    return GalleryConfig(rooms=(room,), items=tuple(items))


def aim_north(session):
    session.camera.position = np.array([0.0, 1.8, 0.0])
    session.camera.set_orientation(0.0, 0.0)


def test_desktop_session_uses_continuous_controls_at_spawn():
    session = GallerySession(make_config(), Camera(viewport=(800, 600)))
    assert isinstance(session.controller, ContinuousController)
    assert session.guided is None
    np.testing.assert_allclose(session.camera.position, [0.0, 1.6, 1.0])
    assert session.controller.bounds.max_z == pytest.approx(3.5)
    assert not session.interactive
    assert session.start()
    assert session.interactive


def test_desktop_hover_and_activation_open_detail():
    activated = []
    entered = []
    session = GallerySession(
        make_config(),
        Camera(viewport=(800, 600)),
        on_item_activated=activated.append,
        on_hover_enter=lambda item, surface: entered.append(item.id),
    )
    session.start()
    aim_north(session)
    session.tick(0.016)
    assert session.hovered_item.id == "north-piece"
    assert entered == ["north-piece"]

    item = session.activate((0.0, 0.0))
    assert item.id == "north-piece"
    assert activated == [item]
    assert session.detail_open
    assert not session.controller.is_locked
    assert session.hovered_item is None

    assert session.activate() is None
    session.tick(0.016)
    assert session.hovered_item is None

    assert session.close_detail()
    assert session.controller.is_locked
    assert not session.detail_open
    assert not session.close_detail()


def test_desktop_click_is_ignored_while_unlocked():
    session = GallerySession(make_config(), Camera(viewport=(800, 600)))
    aim_north(session)
    assert session.activate() is None
    assert not session.detail_open


def test_distant_item_is_not_hovered_but_can_be_activated():
    session = GallerySession(make_config(depth=14.0), Camera(viewport=(800, 600)))
    session.start()
    aim_north(session)
    session.tick(0.016)
    assert session.hovered_item is None
    assert session.activate().id == "north-piece"


def test_touch_session_starts_tour_at_first_item():
    session = GallerySession(make_config(), Camera(viewport=(800, 600)), touch=True)
    guided = session.guided
    assert isinstance(guided, GuidedController)
    np.testing.assert_allclose(session.camera.position, [0.0, 1.6, -1.5])
    assert session.start()

    session.tick(0.016)
    assert session.hovered_item is None

    item = session.activate((400.0, 300.0))
    assert item.id == "north-piece"
    assert not guided.is_locked
    assert session.close_detail()
    assert guided.is_locked


def test_touch_session_with_only_the_cover_has_no_tour():
    items = (ExhibitItem(id=COVER_ITEM_ID, placement=ItemPlacement(room="main", wall=WallSide.NORTH)),)
    session = GallerySession(make_config(items=items), touch=True)
    session.start()
    assert session.guided.waypoints == ()
    assert not session.guided.toggle_auto_walk()


def test_config_without_rooms_is_rejected():
    with pytest.raises(ValueError):
        GallerySession(GalleryConfig(rooms=(), items=()))
