import math

import numpy as np
import pytest

from kis_gallery_app.layout.placement import WALL_INSET, resolve_world_transform, wall_normal
from kis_gallery_app.models.bounds import Bounds
from kis_gallery_app.models.gallery import ItemPlacement, RoomDimensions, WallSide

ROOM = RoomDimensions(width=10.0, height=3.5, depth=8.0)


@pytest.mark.parametrize(
    "wall, expected_xz, expected_yaw",
    [
        (WallSide.NORTH, (0.0, -4.0 + WALL_INSET), 0.0),
        (WallSide.SOUTH, (0.0, 4.0 - WALL_INSET), math.pi),
        (WallSide.EAST, (5.0 - WALL_INSET, 0.0), -math.pi / 2),
        (WallSide.WEST, (-5.0 + WALL_INSET, 0.0), math.pi / 2),
    ],
)
def test_zero_offset_lands_on_wall_midpoint(wall, expected_xz, expected_yaw):
    transform = resolve_world_transform(ItemPlacement(room="main", wall=wall, x=0.0, y=1.8), ROOM)
    assert math.isclose(transform.position[0], expected_xz[0], abs_tol=1e-12)
    assert math.isclose(transform.position[1], 1.8)
    assert math.isclose(transform.position[2], expected_xz[1], abs_tol=1e-12)
    assert math.isclose(transform.yaw, expected_yaw)


@pytest.mark.parametrize("wall", list(WallSide))
def test_item_normal_points_into_room(wall):
    transform = resolve_world_transform(ItemPlacement(room="main", wall=wall, x=0.0, y=1.8), ROOM)
    to_center = np.array([0.0, 1.8, 0.0]) - transform.position
    assert float(np.dot(transform.normal, to_center)) > 0.0
    np.testing.assert_allclose(transform.normal, wall_normal(wall), atol=1e-12)
    assert math.isclose(float(np.dot(transform.normal, transform.right)), 0.0, abs_tol=1e-12)


def test_east_and_west_offsets_run_along_depth():
    east = resolve_world_transform(ItemPlacement(room="main", wall=WallSide.EAST, x=1.5, y=2.0), ROOM)
    west = resolve_world_transform(ItemPlacement(room="main", wall=WallSide.WEST, x=-2.0, y=2.0), ROOM)
    assert math.isclose(east.position[2], 1.5)
    assert math.isclose(west.position[2], -2.0)
    assert math.isclose(east.position[0], 5.0 - WALL_INSET)
    assert math.isclose(west.position[0], -5.0 + WALL_INSET)


def test_offsets_are_not_clamped_to_the_wall():
    transform = resolve_world_transform(ItemPlacement(room="main", wall=WallSide.NORTH, x=20.0, y=9.0), ROOM)
    assert math.isclose(transform.position[0], 20.0)
    assert math.isclose(transform.position[1], 9.0)


def test_zero_inset_places_item_on_wall_plane():
    transform = resolve_world_transform(
        ItemPlacement(room="main", wall=WallSide.SOUTH, x=1.0, y=1.5),
        ROOM,
        inset=0.0,
    )
    np.testing.assert_allclose(transform.position, [1.0, 1.5, 4.0])


def test_wall_side_parse_is_case_insensitive():
    assert WallSide.parse(" North ") is WallSide.NORTH
    with pytest.raises(ValueError):
        WallSide.parse("ceiling")


def test_bounds_from_room_and_clamp():
    bounds = Bounds.from_room(ROOM, margin=0.5)
    assert (bounds.min_x, bounds.max_x, bounds.min_z, bounds.max_z) == (-4.5, 4.5, -3.5, 3.5)
    clamped = bounds.clamp(np.array([10.0, 2.2, -10.0]))
    np.testing.assert_allclose(clamped, [4.5, 2.2, -3.5])
    assert bounds.contains(clamped)
    assert not bounds.contains(np.array([10.0, 0.0, 0.0]))


def test_bounds_reject_inverted_limits():
    with pytest.raises(ValueError):
        Bounds(min_x=1.0, max_x=0.0, min_z=0.0, max_z=1.0)


def test_bounds_margin_larger_than_room_collapses_axis():
    bounds = Bounds.from_room(RoomDimensions(width=0.6, height=3.0, depth=8.0), margin=0.5)
    assert bounds.min_x == bounds.max_x == 0.0


@pytest.mark.parametrize(
    "wall, along_depth",
    [(WallSide.NORTH, False), (WallSide.SOUTH, False), (WallSide.EAST, True), (WallSide.WEST, True)],
)
def test_wall_offset_axis_follows_runs_along_depth(wall, along_depth):
    assert wall.runs_along_depth is along_depth
    transform = resolve_world_transform(ItemPlacement(room="main", wall=wall, x=1.25, y=1.8), ROOM)
    offset_axis = 2 if along_depth else 0
    assert math.isclose(transform.position[offset_axis], 1.25)
