"""Geometry kernel: bearings, destination points and buffers.

Pure functions with no shared state.  All geodesy runs on a sphere of
radius ``EARTH_RADIUS_M`` through ``pyproj.Geod``; on a sphere its
inverse and forward solutions are the great-circle initial bearing and
the spherical destination-point formula.

Coordinates are decimal degrees, distances metres, bearings degrees
clockwise from true north in ``[0, 360)``.
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import TYPE_CHECKING

from bars_lighting.core.constants import EARTH_RADIUS_M
from bars_lighting.core.exceptions import DegenerateGeometryError
from bars_lighting.models.geo import MIN_CENTERLINE_POINTS, BufferedPolygon, GeoPoint

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pyproj import Geod

logger = logging.getLogger("bars_lighting.geometry.kernel")

# Corner bearings relative to heading: bottom-left, bottom-right, top-right, top-left
RECTANGLE_CORNER_OFFSETS_DEG = (225.0, 315.0, 45.0, 135.0)


@lru_cache(maxsize=1)
def _sphere() -> Geod:
    from pyproj import Geod

    return Geod(a=EARTH_RADIUS_M, f=0.0)


def _normalize_bearing(bearing_deg: float) -> float:
    """Wrap a bearing into ``[0, 360)``."""
    result = bearing_deg % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    return 0.0 if result == 360.0 else result


# ---------------------------------------------------------------------------
# Bearing and destination
# ---------------------------------------------------------------------------


def bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing from ``a`` to ``b`` in ``[0, 360)``.

    The result is meaningless when ``a == b``.
    """
    azimuth, _back_azimuth, _distance = _sphere().inv(a.lon, a.lat, b.lon, b.lat)
    return _normalize_bearing(azimuth)


def destination(origin: GeoPoint, bearing_deg: float, distance_m: float) -> GeoPoint:
    """Point reached from ``origin`` travelling ``distance_m`` along ``bearing_deg``."""
    lon, lat, _back_azimuth = _sphere().fwd(origin.lon, origin.lat, bearing_deg, distance_m)
    return GeoPoint(lat=lat, lon=lon)


# ---------------------------------------------------------------------------
# Polyline buffer
# ---------------------------------------------------------------------------


def buffer_polyline(points: Sequence[GeoPoint], padding_m: float) -> BufferedPolygon:
    """Buffer a polyline into a closed polygon with squared end caps.

    Each vertex is offset ``padding_m`` to the left and right of its local
    bearing: the segment bearing at the ends, the bisector of the incoming
    and outgoing bearings at interior vertices.  The first and last offset
    pairs are then pushed ``padding_m`` outward along the end segments.

    Ring order: start-cap-right, right offsets, end-cap-right,
    end-cap-left, left offsets reversed, start-cap-left, closing point.
    An ``n``-point line yields ``2n + 5`` ring points.

    Raises:
        DegenerateGeometryError: If fewer than two points are given, two
            consecutive points coincide, or ``padding_m`` is not positive.
    """
    if len(points) < MIN_CENTERLINE_POINTS:
        msg = f"Cannot buffer a polyline of {len(points)} point(s), need at least 2"
        raise DegenerateGeometryError(msg)
    if not padding_m > 0:
        msg = f"Buffer padding must be > 0 metres, got {padding_m}"
        raise DegenerateGeometryError(msg)
    for idx in range(1, len(points)):
        if points[idx] == points[idx - 1]:
            msg = f"Polyline has coincident consecutive points at index {idx - 1} and {idx}"
            raise DegenerateGeometryError(msg)

    last = len(points) - 1
    left: list[GeoPoint] = []
    right: list[GeoPoint] = []

    for idx, point in enumerate(points):
        if idx == 0:
            local = bearing(point, points[1])
        elif idx == last:
            local = bearing(points[idx - 1], point)
        else:
            local = _bisector(bearing(points[idx - 1], point), bearing(point, points[idx + 1]))

        left.append(destination(point, _normalize_bearing(local - 90), padding_m))
        right.append(destination(point, _normalize_bearing(local + 90), padding_m))

    start_bearing = bearing(points[0], points[1])
    end_bearing = bearing(points[last - 1], points[last])
    backward = _normalize_bearing(start_bearing + 180)

    start_cap_left = destination(left[0], backward, padding_m)
    start_cap_right = destination(right[0], backward, padding_m)
    end_cap_left = destination(left[-1], end_bearing, padding_m)
    end_cap_right = destination(right[-1], end_bearing, padding_m)

    ring = [
        start_cap_right,
        *right,
        end_cap_right,
        end_cap_left,
        *reversed(left),
        start_cap_left,
    ]
    ring.append(ring[0])
    logger.debug(
        "Buffered %d-point polyline into %d-point ring (padding %.2f m)",
        len(points),
        len(ring),
        padding_m,
    )
    return BufferedPolygon(ring=tuple(ring))


def _bisector(bearing_in: float, bearing_out: float) -> float:
    """Mean of two bearings taken across their smaller angle."""
    diff = bearing_out - bearing_in
    if diff > 180:
        diff -= 360
    if diff < -180:
        diff += 360
    return bearing_in + diff / 2


# ---------------------------------------------------------------------------
# Rectangles
# ---------------------------------------------------------------------------


def rectangle_from_center(
    center: GeoPoint,
    width_m: float,
    length_m: float,
    heading_deg: float,
) -> tuple[GeoPoint, GeoPoint, GeoPoint, GeoPoint]:
    """Corners of a ``width_m`` x ``length_m`` rectangle rotated to ``heading_deg``.

    Every corner lies at the half-diagonal from ``center``.

    Returns:
        ``(bottom_left, bottom_right, top_right, top_left)`` in the
        object's local frame.

    Raises:
        DegenerateGeometryError: If width or length is not a positive number.
    """
    if not (width_m > 0 and length_m > 0):
        msg = f"Rectangle needs positive width and length, got {width_m} x {length_m} m"
        raise DegenerateGeometryError(msg)

    half_diagonal = math.hypot(width_m / 2, length_m / 2)
    bottom_left, bottom_right, top_right, top_left = (
        destination(center, (heading_deg + offset) % 360, half_diagonal)
        for offset in RECTANGLE_CORNER_OFFSETS_DEG
    )
    return (bottom_left, bottom_right, top_right, top_left)
