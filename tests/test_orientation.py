import math

import numpy as np
import pytest

from kis_gallery_app.math import orientation


def test_forward_vector_neutral_looks_down_negative_z():
    np.testing.assert_allclose(orientation.forward_vector(0.0, 0.0), [0.0, 0.0, -1.0], atol=1e-12)
    # Positive yaw turns left, i.e. towards -X.
    np.testing.assert_allclose(orientation.forward_vector(math.pi / 2, 0.0), [-1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(orientation.forward_vector(0.0, math.pi / 2), [0.0, 1.0, 0.0], atol=1e-12)


def test_camera_basis_is_orthonormal():
    yaw, pitch = 0.8, -0.4
    forward = orientation.forward_vector(yaw, pitch)
    right = orientation.right_vector(yaw)
    up = orientation.up_vector(yaw, pitch)
    for axis in (forward, right, up):
        assert math.isclose(float(np.linalg.norm(axis)), 1.0, abs_tol=1e-9)
    assert abs(float(np.dot(forward, right))) < 1e-9
    assert abs(float(np.dot(forward, up))) < 1e-9
    assert abs(float(np.dot(right, up))) < 1e-9
    assert up[1] > 0.0


@pytest.mark.parametrize(
    "yaw, pitch",
    [(0.0, 0.0), (1.2, 0.3), (-2.5, -0.9), (math.pi - 0.01, 1.2), (0.4, -1.5)],
)
def test_quaternion_roundtrip(yaw, pitch):
    q = orientation.yaw_pitch_to_quaternion(yaw, pitch)
    assert math.isclose(float(np.linalg.norm(q)), 1.0, abs_tol=1e-12)
    yaw2, pitch2 = orientation.quaternion_to_yaw_pitch(q)
    assert math.isclose(orientation.shortest_angle_delta(yaw, yaw2), 0.0, abs_tol=1e-9)
    assert math.isclose(pitch2, pitch, abs_tol=1e-9)


def test_quaternion_at_pole_keeps_yaw():
    q = orientation.yaw_pitch_to_quaternion(0.7, math.pi / 2)
    yaw, pitch = orientation.quaternion_to_yaw_pitch(q)
    assert math.isclose(pitch, math.pi / 2, abs_tol=1e-6)
    assert math.isclose(yaw, 0.7, abs_tol=1e-6)


def test_quaternion_to_yaw_pitch_rejects_zero_quaternion():
    with pytest.raises(ValueError):
        orientation.quaternion_to_yaw_pitch(np.zeros(4))


def test_clamp_pitch_limits_to_vertical():
    assert orientation.clamp_pitch(2.0) == pytest.approx(math.pi / 2)
    assert orientation.clamp_pitch(-2.0) == pytest.approx(-math.pi / 2)
    assert orientation.clamp_pitch(0.25) == 0.25


def test_shortest_angle_delta_crosses_the_seam():
    delta = orientation.shortest_angle_delta(3.0, -3.0)
    assert delta == pytest.approx(2.0 * math.pi - 6.0)
    assert orientation.shortest_angle_delta(0.5, 0.25) == pytest.approx(-0.25)


def test_look_angles_inverts_forward_vector():
    origin = np.array([1.0, 1.6, -2.0])
    yaw, pitch = -2.2, 0.35
    target = origin + 4.0 * orientation.forward_vector(yaw, pitch)
    yaw2, pitch2 = orientation.look_angles(origin, target)
    assert math.isclose(yaw2, yaw, abs_tol=1e-9)
    assert math.isclose(pitch2, pitch, abs_tol=1e-9)


def test_look_angles_degenerate_target():
    origin = np.array([0.0, 1.6, 0.0])
    assert orientation.look_angles(origin, origin.copy()) == (0.0, 0.0)
