"""
Projection Math
===============
Pure functions that take a geographic coordinate to a point on the screen.

The pipeline is always the same three steps:

1. ``to_sphere``: (lat, lng, radius) -> 3D point, Y up, Z towards the viewer.
2. ``rotate``: the view transform, yaw (about Y) first, then pitch (about X).
3. ``project``: perspective divide onto a viewport of the given size.

Scalar versions are used for the handful of markers/arcs per frame, the
numpy versions for the grid and the continent dot field. Both follow the same
formulas and the same rotation order.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Point3:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class ScreenPoint:
    """Projected position in viewport pixels plus the perspective scale."""
    x: float
    y: float
    scale: float


def to_sphere(lat: float, lng: float, radius: float) -> Point3:
    """
    Convert a geographic coordinate to a point on a sphere.

    Longitude is offset by 180 degrees so that the seam lies at the back of
    the default-facing hemisphere.

    Args:
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        radius: Sphere radius (screen units).

    Returns:
        The 3D point.
    """
    phi = math.radians(90.0 - lat)
    theta = math.radians(lng + 180.0)
    return Point3(
        x=-(radius * math.sin(phi) * math.cos(theta)),
        y=radius * math.cos(phi),
        z=radius * math.sin(phi) * math.sin(theta),
    )


def from_sphere(p: Point3) -> tuple[float, float]:
    """Inverse of ``to_sphere``. Returns (lat, lng) in degrees, lng in [-180, 180)."""
    r = math.sqrt(p.x * p.x + p.y * p.y + p.z * p.z)
    if r == 0.0:
        return 0.0, 0.0
    lat = 90.0 - math.degrees(math.acos(max(-1.0, min(1.0, p.y / r))))
    theta = math.degrees(math.atan2(p.z, -p.x))
    lng = theta % 360.0 - 180.0
    return lat, lng


def rotate_yaw(p: Point3, angle: float) -> Point3:
    """Rotate about the vertical (Y) axis."""
    c, s = math.cos(angle), math.sin(angle)
    return Point3(p.x * c + p.z * s, p.y, -p.x * s + p.z * c)


def rotate_pitch(p: Point3, angle: float) -> Point3:
    """Rotate about the horizontal (X) axis."""
    c, s = math.cos(angle), math.sin(angle)
    return Point3(p.x, p.y * c - p.z * s, p.y * s + p.z * c)


def rotate(p: Point3, yaw: float, pitch: float) -> Point3:
    """The view transform: yaw first, then pitch."""
    return rotate_pitch(rotate_yaw(p, yaw), pitch)


def project(
    p: Point3,
    width: float,
    height: float,
    focal_length: float = 680.0,
) -> Optional[ScreenPoint]:
    """
    Perspective projection of a view-space point onto the viewport.

    Args:
        p: Rotated point (view space).
        width: Viewport width.
        height: Viewport height.
        focal_length: Distance of the eye in front of the sphere centre.

    Returns:
        The screen point, or None when the point lies behind the focal
        plane (``z + focal_length <= 0``). None means "skip this frame".
    """
    depth = p.z + focal_length
    if depth <= 0.0:
        return None
    s = focal_length / depth
    return ScreenPoint(p.x * s + width / 2.0, -p.y * s + height / 2.0, s)


# -------------------------------------------------------------------------------
# Vectorised variants
# -------------------------------------------------------------------------------

def sphere_points(
    lat: npt.ArrayLike,
    lng: npt.ArrayLike,
    radius: float | npt.ArrayLike,
) -> npt.NDArray[np.float64]:
    """
    Vectorised ``to_sphere``.

    Returns:
        An (N, 3) array of x, y, z.
    """
    lat_a, lng_a, r = np.broadcast_arrays(
        np.asarray(lat, dtype=np.float64),
        np.asarray(lng, dtype=np.float64),
        np.asarray(radius, dtype=np.float64),
    )
    phi = np.radians(90.0 - lat_a.ravel())
    theta = np.radians(lng_a.ravel() + 180.0)
    r = r.ravel()
    sin_phi = np.sin(phi)
    return np.column_stack((
        -(r * sin_phi * np.cos(theta)),
        r * np.cos(phi),
        r * sin_phi * np.sin(theta),
    ))


def rotate_points(xyz: npt.NDArray[np.float64], yaw: float, pitch: float) -> npt.NDArray[np.float64]:
    """Vectorised ``rotate`` (yaw, then pitch) for an (N, 3) array."""
    cy, sy = math.cos(yaw), math.sin(yaw)
    cp, sp = math.cos(pitch), math.sin(pitch)
    x, y, z = xyz[:, 0], xyz[:, 1], xyz[:, 2]

    # yaw
    x1 = x * cy + z * sy
    z1 = -x * sy + z * cy

    # pitch
    y2 = y * cp - z1 * sp
    z2 = y * sp + z1 * cp
    return np.column_stack((x1, y2, z2))


def project_points(
    xyz: npt.NDArray[np.float64],
    width: float,
    height: float,
    focal_length: float = 680.0,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.bool_]]:
    """
    Vectorised ``project``.

    Returns:
        (screen, valid): an (N, 2) array of screen positions and a mask that
        is False where ``project`` would have returned None. Invalid rows
        hold NaN.
    """
    depth = xyz[:, 2] + focal_length
    valid = depth > 0.0
    scale = np.full(depth.shape, np.nan)
    scale[valid] = focal_length / depth[valid]
    screen = np.column_stack((
        xyz[:, 0] * scale + width / 2.0,
        -xyz[:, 1] * scale + height / 2.0,
    ))
    return screen, valid
