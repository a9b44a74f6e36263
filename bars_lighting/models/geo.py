"""Geometry value types of the canonical model.

- ``GeoPoint``: a WGS 84 position in decimal degrees.
- ``Centerline``: the ordered footprint of one fixture group.
- ``BufferedPolygon``: a closed ring offset around a centerline.
- ``RemoveArea``: a closed ring masking default scenery lighting, derived
  from a buffered centerline, a support rectangle or a raw polygon.

All types are frozen dataclasses; operations return new values.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from bars_lighting.core.exceptions import DegenerateGeometryError

# Ring invariants: 3 body vertices + closing duplicate
MIN_CENTERLINE_POINTS = 2
MIN_RING_POINTS = 4


class FixtureKind(enum.Enum):
    """Kind of a light fixture or fixture group."""

    STOPBAR = "stopbar"
    LEAD_ON = "lead_on"
    TAXIWAY = "taxiway"
    STAND = "stand"

    @classmethod
    def parse(cls, raw: str) -> FixtureKind | None:
        """Return the kind for a ``type`` attribute value, or ``None`` if unknown."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class RemoveAreaSource(enum.Enum):
    """How a ``RemoveArea`` ring was obtained."""

    BUFFERED = "buffered"
    RECTANGLE = "rectangle"
    POLYGON = "polygon"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A position in decimal degrees (WGS 84, no datum transform)."""

    lat: float
    lon: float

    def to_lonlat(self) -> tuple[float, float]:
        """Return ``(lon, lat)``, the axis order shapely and pyproj expect."""
        return (self.lon, self.lat)


def midpoint(a: GeoPoint, b: GeoPoint) -> GeoPoint:
    """Arithmetic midpoint in degree space."""
    return GeoPoint(lat=(a.lat + b.lat) / 2, lon=(a.lon + b.lon) / 2)


@dataclass(frozen=True, slots=True)
class Centerline:
    """Ordered points describing one fixture group's physical extent.

    Attributes:
        name: Group identifier (parent object id or polygon display name).
        kind: Fixture kind of the group.
        points: At least two positions, in document order.
        group_index: ``groupIndex`` read from polygon XML, if any.
        altitude_m: ``altitude`` read from polygon XML, if any.
        unique_id: ``UniqueGUID`` value read from polygon XML, if any.
    """

    name: str
    kind: FixtureKind
    points: tuple[GeoPoint, ...]
    group_index: int | None = None
    altitude_m: float | None = None
    unique_id: str = ""

    def __post_init__(self) -> None:
        if len(self.points) < MIN_CENTERLINE_POINTS:
            msg = (
                f"Centerline '{self.name}' has {len(self.points)} point(s), "
                f"need at least {MIN_CENTERLINE_POINTS}"
            )
            raise DegenerateGeometryError(msg)

    def normalized(self) -> Centerline:
        """Return a centerline with at least three points.

        A two-point line gets its midpoint inserted; polygon consumers
        need three vertices.
        """
        if len(self.points) != MIN_CENTERLINE_POINTS:
            return self
        first, last = self.points
        return replace(self, points=(first, midpoint(first, last), last))

    def to_dict(self) -> dict[str, object]:
        """Serialise for API transport."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "points": [[p.lat, p.lon] for p in self.points],
        }


@dataclass(frozen=True, slots=True)
class BufferedPolygon:
    """A closed ring whose first and last points are equal."""

    ring: tuple[GeoPoint, ...]

    def __post_init__(self) -> None:
        _check_closed_ring(self.ring, "BufferedPolygon")


@dataclass(frozen=True, slots=True)
class RemoveArea:
    """An area in which default scenery lights are suppressed.

    Attributes:
        id: Area identifier (``support-<i>``, ``remove-<i>`` or the polygon GUID).
        ring: Closed ring, first == last.
        source: Where the ring came from.
        altitude_m: ``altitude`` read from polygon XML, if any.
        unique_id: ``UniqueGUID`` value read from polygon XML, if any.
    """

    id: str
    ring: tuple[GeoPoint, ...]
    source: RemoveAreaSource = RemoveAreaSource.POLYGON
    altitude_m: float | None = None
    unique_id: str = ""

    def __post_init__(self) -> None:
        _check_closed_ring(self.ring, f"RemoveArea '{self.id}'")

    @classmethod
    def from_points(
        cls,
        area_id: str,
        points: list[GeoPoint] | tuple[GeoPoint, ...],
        source: RemoveAreaSource = RemoveAreaSource.POLYGON,
        **kwargs: object,
    ) -> RemoveArea:
        """Build an area from an open or closed vertex list, closing it if needed."""
        ring = tuple(points)
        if ring and ring[0] != ring[-1]:
            ring = (*ring, ring[0])
        return cls(id=area_id, ring=ring, source=source, **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_buffered(cls, area_id: str, polygon: BufferedPolygon) -> RemoveArea:
        return cls(id=area_id, ring=polygon.ring, source=RemoveAreaSource.BUFFERED)

    @property
    def open_ring(self) -> tuple[GeoPoint, ...]:
        """The ring without its closing duplicate."""
        return self.ring[:-1]

    def to_dict(self) -> dict[str, object]:
        """Serialise for API transport."""
        return {
            "id": self.id,
            "source": self.source.value,
            "ring": [[p.lat, p.lon] for p in self.ring],
        }


def _check_closed_ring(ring: tuple[GeoPoint, ...], label: str) -> None:
    if len(ring) < MIN_RING_POINTS:
        msg = f"{label} ring has {len(ring)} point(s), need at least {MIN_RING_POINTS}"
        raise DegenerateGeometryError(msg)
    if ring[0] != ring[-1]:
        msg = f"{label} ring is not closed (first point differs from last)"
        raise DegenerateGeometryError(msg)
