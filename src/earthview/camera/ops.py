"""Camera and globe geometry (free functions).

Conventions follow the WebGL scene the renderer draws: Y is up, cameras look
down their local -Z axis, quaternions are ``(x, y, z, w)`` tuples and the
globe has radius 1 centred at the origin.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from earthview.camera.state import Vec3
from earthview.config.models import FramingSettings

logger = logging.getLogger(__name__)

Quaternion = Tuple[float, float, float, float]

EARTH_RADIUS = 1.0
MARKER_ALTITUDE = 0.02
HALO_ALTITUDE = 0.025
WORLD_UP = Vec3(0.0, 1.0, 0.0)
ORIGIN = Vec3(0.0, 0.0, 0.0)
_HALO_REFERENCE_NORMAL = np.array((0.0, 0.0, 1.0))
_EPS = 1e-9


def _normalize(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n < _EPS:
        return v
    return v / n


def _quaternion_from_matrix(m: np.ndarray) -> Quaternion:
    trace = float(m[0, 0] + m[1, 1] + m[2, 2])
    if trace > 0.0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m[2, 1] - m[1, 2]) * s
        y = (m[0, 2] - m[2, 0]) * s
        z = (m[1, 0] - m[0, 1]) * s
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        w = (m[2, 1] - m[1, 2]) / s
        x = 0.25 * s
        y = (m[0, 1] + m[1, 0]) / s
        z = (m[0, 2] + m[2, 0]) / s
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        w = (m[0, 2] - m[2, 0]) / s
        x = (m[0, 1] + m[1, 0]) / s
        y = 0.25 * s
        z = (m[1, 2] + m[2, 1]) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        w = (m[1, 0] - m[0, 1]) / s
        x = (m[0, 2] + m[2, 0]) / s
        y = (m[1, 2] + m[2, 1]) / s
        z = 0.25 * s
    return (float(x), float(y), float(z), float(w))


def look_at_matrix(position: Vec3, target: Vec3, up: Vec3 = WORLD_UP) -> np.ndarray:
    """Rotation matrix whose -Z column points from ``position`` to ``target``."""

    z_axis = position.as_array() - target.as_array()
    if float(np.linalg.norm(z_axis)) < _EPS:
        z_axis = np.array((0.0, 0.0, 1.0))
    z_axis = _normalize(z_axis)
    up_v = up.as_array()
    x_axis = np.cross(up_v, z_axis)
    if float(np.linalg.norm(x_axis)) < _EPS:
        # up parallel to the view axis: nudge the view axis like three.js does
        nudged = z_axis + (np.array((1e-4, 0.0, 0.0)) if abs(up_v[2]) == 1.0 else np.array((0.0, 0.0, 1e-4)))
        z_axis = _normalize(nudged)
        x_axis = np.cross(up_v, z_axis)
    x_axis = _normalize(x_axis)
    y_axis = np.cross(z_axis, x_axis)
    return np.column_stack((x_axis, y_axis, z_axis))


def orient_camera(position: Vec3, target: Vec3, roll_deg: float = 0.0, up: Vec3 = WORLD_UP) -> Quaternion:
    """Look-at orientation with an extra roll about the camera's view axis."""

    m = look_at_matrix(position, target, up)
    if roll_deg:
        r = math.radians(float(roll_deg))
        c, s = math.cos(r), math.sin(r)
        roll = np.array(((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0)))
        m = m @ roll
    return _quaternion_from_matrix(m)


def view_direction(orientation: Quaternion) -> Vec3:
    """Unit forward (-Z) vector of a camera with the given orientation."""

    x, y, z, w = orientation
    # third column of the rotation matrix, negated
    fx = -(2.0 * (x * z + w * y))
    fy = -(2.0 * (y * z - w * x))
    fz = -(1.0 - 2.0 * (x * x + y * y))
    return Vec3(fx, fy, fz)


def quaternion_from_unit_vectors(v_from: np.ndarray, v_to: np.ndarray) -> Quaternion:
    """Shortest-arc rotation taking unit vector ``v_from`` onto ``v_to``."""

    r = float(np.dot(v_from, v_to)) + 1.0
    if r < 1e-8:
        r = 0.0
        if abs(v_from[0]) > abs(v_from[2]):
            axis = np.array((-v_from[1], v_from[0], 0.0))
        else:
            axis = np.array((0.0, -v_from[2], v_from[1]))
    else:
        axis = np.cross(v_from, v_to)
    q = np.array((axis[0], axis[1], axis[2], r))
    q = q / float(np.linalg.norm(q))
    return (float(q[0]), float(q[1]), float(q[2]), float(q[3]))


def lat_lon_to_vector(lat: float, lon: float, radius: float = EARTH_RADIUS + MARKER_ALTITUDE) -> Vec3:
    """Map geographic degrees onto the textured sphere (lon 0 faces +X after the 180° seam)."""

    phi = math.radians(90.0 - float(lat))
    theta = math.radians(float(lon) + 180.0)
    x = -(radius * math.sin(phi) * math.cos(theta))
    z = radius * math.sin(phi) * math.sin(theta)
    y = radius * math.cos(phi)
    return Vec3(x, y, z)


@dataclass(frozen=True)
class MarkerAnchor:
    """Placement of a located point: the marker dot and its outward-facing halo."""

    lat: float
    lon: float
    position: Vec3
    normal: Vec3
    halo_position: Vec3
    quaternion: Quaternion


def marker_anchor(lat: float, lon: float, earth_radius: float = EARTH_RADIUS) -> MarkerAnchor:
    position = lat_lon_to_vector(lat, lon, earth_radius + MARKER_ALTITUDE)
    normal = _normalize(position.as_array())
    halo = normal * (earth_radius + HALO_ALTITUDE)
    return MarkerAnchor(
        lat=float(lat),
        lon=float(lon),
        position=position,
        normal=Vec3.from_iterable(normal),
        halo_position=Vec3.from_iterable(halo),
        quaternion=quaternion_from_unit_vectors(_HALO_REFERENCE_NORMAL, normal),
    )


def focus_position(location: Vec3, framing: FramingSettings = FramingSettings()) -> Vec3:
    """Camera position that frames ``location`` slightly off-axis and above."""

    normal = _normalize(location.as_array())
    up = WORLD_UP.as_array()
    target = normal * float(framing.focus_distance)
    lateral = np.cross(normal, up)
    if float(np.dot(lateral, lateral)) < 0.001:
        lateral = np.array((1.0, 0.0, 0.0))
    target = target + _normalize(lateral) * float(framing.lateral_offset)
    target = target + up * float(framing.vertical_lift)
    target[1] = min(float(framing.max_height), max(float(framing.min_height), float(target[1])))
    logger.debug("focus_position: location=%s -> %s", location, target)
    return Vec3.from_iterable(target)


__all__ = [
    "EARTH_RADIUS",
    "MarkerAnchor",
    "ORIGIN",
    "Quaternion",
    "WORLD_UP",
    "focus_position",
    "lat_lon_to_vector",
    "look_at_matrix",
    "marker_anchor",
    "orient_camera",
    "quaternion_from_unit_vectors",
    "view_direction",
]
