"""Tests for the geometry kernel.

Covers:
- Initial bearing and destination point on the sphere
- Polyline buffering: ring closure, ring size, offsets and end caps
- Degenerate input rejection
- Rectangle corners: determinism, symmetry, degenerate sizes
"""

from __future__ import annotations

import math

import pytest

from bars_lighting.core.constants import EARTH_RADIUS_M
from bars_lighting.core.exceptions import DegenerateGeometryError
from bars_lighting.geometry.kernel import (
    _bisector,
    bearing,
    buffer_polyline,
    destination,
    rectangle_from_center,
)
from bars_lighting.models.geo import GeoPoint

# Metres per degree of arc on the engine's sphere
METRES_PER_DEGREE = EARTH_RADIUS_M * math.pi / 180

ORIGIN = GeoPoint(lat=0.0, lon=0.0)


class TestBearing:
    """Initial great-circle bearing."""

    def test_due_north(self) -> None:
        assert bearing(ORIGIN, GeoPoint(lat=1.0, lon=0.0)) == pytest.approx(0.0, abs=1e-9)

    def test_due_east(self) -> None:
        assert bearing(ORIGIN, GeoPoint(lat=0.0, lon=1.0)) == pytest.approx(90.0)

    def test_due_west_is_positive(self) -> None:
        """Bearings are normalised into [0, 360)."""
        assert bearing(ORIGIN, GeoPoint(lat=0.0, lon=-1.0)) == pytest.approx(270.0)

    def test_range(self) -> None:
        for target in (
            GeoPoint(lat=-1.0, lon=-1.0),
            GeoPoint(lat=1.0, lon=-0.001),
            GeoPoint(lat=-0.5, lon=0.5),
        ):
            assert 0.0 <= bearing(ORIGIN, target) < 360.0


class TestDestination:
    """Destination point given bearing and distance."""

    def test_one_degree_east(self) -> None:
        point = destination(ORIGIN, 90.0, METRES_PER_DEGREE)
        assert point.lat == pytest.approx(0.0, abs=1e-9)
        assert point.lon == pytest.approx(1.0, rel=1e-9)

    def test_one_degree_north(self) -> None:
        point = destination(ORIGIN, 0.0, METRES_PER_DEGREE)
        assert point.lat == pytest.approx(1.0, rel=1e-9)
        assert point.lon == pytest.approx(0.0, abs=1e-9)

    def test_zero_distance_is_identity(self) -> None:
        origin = GeoPoint(lat=47.5, lon=-122.25)
        point = destination(origin, 123.0, 0.0)
        assert point.lat == pytest.approx(origin.lat)
        assert point.lon == pytest.approx(origin.lon)

    def test_out_and_back(self) -> None:
        origin = GeoPoint(lat=47.4647, lon=-122.308)
        out = destination(origin, 60.0, 250.0)
        back = destination(out, bearing(out, origin), 250.0)
        assert back.lat == pytest.approx(origin.lat, abs=1e-9)
        assert back.lon == pytest.approx(origin.lon, abs=1e-9)


class TestBisector:
    def test_simple_mean(self) -> None:
        assert _bisector(80.0, 100.0) == pytest.approx(90.0)

    def test_across_north(self) -> None:
        """350° and 10° bisect through north, not south."""
        assert _bisector(350.0, 10.0) % 360 == pytest.approx(0.0)
        assert _bisector(10.0, 350.0) % 360 == pytest.approx(0.0)


class TestBufferPolyline:
    """Buffering a centerline into a closed ring."""

    EAST_LINE = (GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=0.001))

    @pytest.mark.parametrize("n_points", [2, 3, 5])
    def test_ring_closed_with_two_n_plus_five_points(self, n_points: int) -> None:
        points = [GeoPoint(lat=0.0001 * i * i, lon=0.001 * i) for i in range(n_points)]
        polygon = buffer_polyline(points, 1.0)
        assert polygon.ring[0] == polygon.ring[-1]
        assert len(polygon.ring) == 2 * n_points + 5

    def test_right_offset_is_south_of_eastward_line(self) -> None:
        polygon = buffer_polyline(self.EAST_LINE, 1.0)
        right_start = polygon.ring[1]
        assert right_start.lat == pytest.approx(-1.0 / METRES_PER_DEGREE, rel=1e-6)
        assert right_start.lon == pytest.approx(0.0, abs=1e-12)

    def test_left_offset_is_north_of_eastward_line(self) -> None:
        polygon = buffer_polyline(self.EAST_LINE, 1.0)
        # start-cap-right, 2 right, 2 end caps, then left offsets reversed
        left_end, left_start = polygon.ring[5], polygon.ring[6]
        assert left_start.lat == pytest.approx(1.0 / METRES_PER_DEGREE, rel=1e-6)
        assert left_end.lon == pytest.approx(0.001, abs=1e-12)

    def test_start_cap_pushed_backwards(self) -> None:
        polygon = buffer_polyline(self.EAST_LINE, 2.0)
        start_cap_right = polygon.ring[0]
        assert start_cap_right.lon == pytest.approx(-2.0 / METRES_PER_DEGREE, rel=1e-6)
        assert start_cap_right.lat == pytest.approx(-2.0 / METRES_PER_DEGREE, rel=1e-6)

    def test_end_cap_pushed_forwards(self) -> None:
        polygon = buffer_polyline(self.EAST_LINE, 2.0)
        end_cap_right, end_cap_left = polygon.ring[3], polygon.ring[4]
        assert end_cap_right.lon == pytest.approx(0.001 + 2.0 / METRES_PER_DEGREE, rel=1e-6)
        assert end_cap_left.lat == pytest.approx(2.0 / METRES_PER_DEGREE, rel=1e-6)

    def test_interior_vertex_uses_bisector(self) -> None:
        """A right-angle turn offsets the corner along the 45° diagonal."""
        points = [
            GeoPoint(lat=0.0, lon=0.0),
            GeoPoint(lat=0.0, lon=0.001),
            GeoPoint(lat=0.001, lon=0.001),
        ]
        polygon = buffer_polyline(points, 1.0)
        corner_right = polygon.ring[2]
        # Bisector of 90° and 0° is 45°; right offset is at 135° (south-east)
        assert corner_right.lat < 0.0
        assert corner_right.lon > 0.001
        assert -corner_right.lat == pytest.approx(corner_right.lon - 0.001, rel=1e-3)

    def test_deterministic(self) -> None:
        assert buffer_polyline(self.EAST_LINE, 1.0) == buffer_polyline(self.EAST_LINE, 1.0)

    def test_single_point_rejected(self) -> None:
        with pytest.raises(DegenerateGeometryError, match="at least 2"):
            buffer_polyline([ORIGIN], 1.0)

    def test_non_positive_padding_rejected(self) -> None:
        with pytest.raises(DegenerateGeometryError, match="padding"):
            buffer_polyline(self.EAST_LINE, 0.0)

    def test_coincident_points_rejected(self) -> None:
        with pytest.raises(DegenerateGeometryError, match="coincident"):
            buffer_polyline([ORIGIN, ORIGIN, GeoPoint(lat=0.0, lon=0.001)], 1.0)


class TestRectangleFromCenter:
    """Rectangle corners from centre, size and heading."""

    CENTER = GeoPoint(lat=47.4647, lon=-122.308)

    def test_deterministic(self) -> None:
        first = rectangle_from_center(self.CENTER, 10.0, 20.0, 37.0)
        second = rectangle_from_center(self.CENTER, 10.0, 20.0, 37.0)
        assert first == second

    def test_four_distinct_corners(self) -> None:
        corners = rectangle_from_center(self.CENTER, 10.0, 20.0, 90.0)
        assert len(corners) == 4
        assert len(set(corners)) == 4

    def test_corners_centred(self) -> None:
        corners = rectangle_from_center(self.CENTER, 10.0, 20.0, 15.0)
        mean_lat = sum(c.lat for c in corners) / 4
        mean_lon = sum(c.lon for c in corners) / 4
        assert mean_lat == pytest.approx(self.CENTER.lat, abs=1e-9)
        assert mean_lon == pytest.approx(self.CENTER.lon, abs=1e-9)

    def test_heading_zero_corner_quadrants(self) -> None:
        """At heading 0 the corners sit at 225°, 315°, 45° and 135° from the centre."""
        bottom_left, bottom_right, top_right, top_left = rectangle_from_center(
            ORIGIN, 10.0, 10.0, 0.0
        )
        assert bottom_left.lat < 0 and bottom_left.lon < 0
        assert bottom_right.lat > 0 and bottom_right.lon < 0
        assert top_right.lat > 0 and top_right.lon > 0
        assert top_left.lat < 0 and top_left.lon > 0

    @pytest.mark.parametrize(("width", "length"), [(0.0, 10.0), (10.0, -1.0)])
    def test_degenerate_size_rejected(self, width: float, length: float) -> None:
        with pytest.raises(DegenerateGeometryError, match="positive width and length"):
            rectangle_from_center(self.CENTER, width, length, 0.0)
