import math

import numpy as np
import pytest

from shockglobe.model.projection import (
    Point3,
    from_sphere,
    project,
    project_points,
    rotate,
    rotate_pitch,
    rotate_points,
    rotate_yaw,
    sphere_points,
    to_sphere,
)


def _as_tuple(p: Point3) -> tuple[float, float, float]:
    return p.x, p.y, p.z


@pytest.mark.parametrize("lat", [-89.0, -45.5, 0.0, 10.48, 60.0, 89.0])
@pytest.mark.parametrize("lng", [-179.0, -66.88, 0.0, 45.0, 120.9, 179.0])
def test_sphere_round_trip(lat, lng):
    got_lat, got_lng = from_sphere(to_sphere(lat, lng, 123.0))
    assert got_lat == pytest.approx(lat, abs=1e-9)
    assert got_lng == pytest.approx(lng, abs=1e-9)


def test_poles_round_trip_latitude():
    assert from_sphere(to_sphere(90.0, 30.0, 1.0))[0] == pytest.approx(90.0)
    assert from_sphere(to_sphere(-90.0, 30.0, 1.0))[0] == pytest.approx(-90.0)


def test_to_sphere_keeps_radius():
    p = to_sphere(37.0, -122.0, 250.0)
    assert math.sqrt(p.x ** 2 + p.y ** 2 + p.z ** 2) == pytest.approx(250.0)


def test_rotate_is_yaw_then_pitch():
    p = to_sphere(30.0, 40.0, 1.0)
    expected = rotate_pitch(rotate_yaw(p, 0.7), 0.5)
    assert _as_tuple(rotate(p, 0.7, 0.5)) == pytest.approx(_as_tuple(expected))


def test_rotation_order_matters():
    p = to_sphere(30.0, 40.0, 1.0)
    yaw_then_pitch = rotate(p, 0.7, 0.5)
    pitch_then_yaw = rotate_yaw(rotate_pitch(p, 0.5), 0.7)

    diff = np.subtract(_as_tuple(yaw_then_pitch), _as_tuple(pitch_then_yaw))
    assert np.linalg.norm(diff) > 1e-3


def test_rotation_preserves_length():
    p = to_sphere(-20.0, 150.0, 10.0)
    q = rotate(p, 2.1, -1.3)
    assert math.sqrt(q.x ** 2 + q.y ** 2 + q.z ** 2) == pytest.approx(10.0)


def test_project_centre_point():
    pr = project(Point3(0.0, 0.0, 0.0), 800, 600)
    assert (pr.x, pr.y, pr.scale) == pytest.approx((400.0, 300.0, 1.0))


def test_project_screen_y_points_down():
    pr = project(Point3(0.0, 50.0, 0.0), 800, 600)
    assert pr.y < 300.0


@pytest.mark.parametrize("z,visible", [(-679.0, True), (-680.0, False), (-900.0, False), (300.0, True)])
def test_project_returns_none_behind_focal_plane(z, visible):
    pr = project(Point3(10.0, 10.0, z), 800, 600, focal_length=680.0)
    assert (pr is not None) == visible


def test_marker_at_null_island_with_zero_rotation():
    # lat 0, lng 0 sits on the horizontal centre line, at the limb of the sphere
    w, h = 800.0, 600.0
    radius = min(w, h) * 0.36
    p = rotate(to_sphere(0.0, 0.0, radius), 0.0, 0.0)
    pr = project(p, w, h)

    assert p.z == pytest.approx(0.0, abs=1e-9)
    assert pr.y == pytest.approx(h / 2.0)
    assert pr.x == pytest.approx(w / 2.0 + radius)
    assert pr.scale == pytest.approx(1.0)


def test_vectorised_variants_match_scalar():
    lats = np.array([10.48, -33.9, 51.5, 0.0])
    lngs = np.array([-66.88, 18.4, -0.12, 0.0])
    w, h, yaw, pitch = 1024.0, 768.0, -0.9, -0.1

    xyz = rotate_points(sphere_points(lats, lngs, 200.0), yaw, pitch)
    screen, valid = project_points(xyz, w, h)

    for i, (lat, lng) in enumerate(zip(lats, lngs)):
        p = rotate(to_sphere(lat, lng, 200.0), yaw, pitch)
        pr = project(p, w, h)
        assert valid[i]
        assert tuple(xyz[i]) == pytest.approx(_as_tuple(p))
        assert tuple(screen[i]) == pytest.approx((pr.x, pr.y))


def test_project_points_marks_invalid_rows():
    xyz = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, -700.0]])
    screen, valid = project_points(xyz, 100, 100)
    assert valid.tolist() == [True, False]
    assert np.isnan(screen[1]).all()
