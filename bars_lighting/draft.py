"""Draft geometry generation.

Turns mapped fixture groups into a polygon-dialect document the
simulator's scenery editor can import:

1. normalise each centerline (a two-point line gains its midpoint)
2. buffer it into a closed remove ring ``padding_m`` around the line
3. write one polygon per centerline, then one ``remove`` polygon per ring

Centerlines come from parsed documents or from the airport points
collaborator payload (``centerlines_from_points``).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bars_lighting.core.config import LightingConfig
from bars_lighting.core.constants import MAX_LATITUDE, MAX_LONGITUDE
from bars_lighting.dialects.polygon import new_guid, write_polygon_document
from bars_lighting.geometry.kernel import buffer_polyline
from bars_lighting.models.geo import (
    MIN_CENTERLINE_POINTS,
    Centerline,
    FixtureKind,
    GeoPoint,
    RemoveArea,
)
from bars_lighting.models.payloads import parse_airport_points

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from bars_lighting.models.payloads import AirportPoint

logger = logging.getLogger("bars_lighting.draft")


@dataclass(frozen=True, slots=True)
class DraftResult:
    """A generated polygon document and the geometry written into it.

    Attributes:
        xml: Polygon-dialect document text.
        centerlines: Normalised centerlines, in output order.
        remove_areas: Buffered remove areas, one per centerline.
    """

    xml: str
    centerlines: list[Centerline] = field(default_factory=list)
    remove_areas: list[RemoveArea] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_draft(
    centerlines: Sequence[Centerline],
    *,
    padding_m: float | None = None,
    altitude_m: float | None = None,
    id_factory: Callable[[], str] = new_guid,
    config: LightingConfig | None = None,
) -> DraftResult:
    """Buffer centerlines into remove areas and write the polygon document.

    Args:
        centerlines: Fixture groups to draft, in output order.
        padding_m: Buffer distance in metres (defaults to
            ``config.buffer_padding_m``).
        altitude_m: Altitude for every polygon (defaults to
            ``config.draft_altitude_m``).
        id_factory: Source of unique GUID strings, one per polygon.
        config: Engine configuration (defaults to ``LightingConfig()``).

    Returns:
        A ``DraftResult`` with the document text and its geometry.

    Raises:
        DegenerateGeometryError: If a centerline cannot be buffered
            (coincident consecutive points or non-positive padding).
    """
    config = config or LightingConfig()
    padding = config.buffer_padding_m if padding_m is None else padding_m

    normalized = [centerline.normalized() for centerline in centerlines]
    remove_areas = [
        RemoveArea.from_buffered(f"remove-{idx}", buffer_polyline(centerline.points, padding))
        for idx, centerline in enumerate(normalized)
    ]

    xml = write_polygon_document(
        normalized,
        remove_areas,
        altitude_m=altitude_m,
        id_factory=id_factory,
        config=config,
    )
    logger.info(
        "Draft built | centerlines=%d | remove_areas=%d | padding=%.2f m",
        len(normalized),
        len(remove_areas),
        padding,
    )
    return DraftResult(xml=xml, centerlines=normalized, remove_areas=remove_areas)


def centerlines_from_points(payload: Any) -> list[Centerline]:
    """Convert an airport points payload into centerlines.

    Coordinates outside WGS 84 bounds are dropped, as are consecutive
    duplicates; a point left with fewer than two coordinates is skipped.
    Unknown ``type`` values are treated as stopbars.

    Raises:
        PayloadContractError: If the payload does not match the schema.
    """
    centerlines: list[Centerline] = []
    for point in parse_airport_points(payload):
        vertices = _usable_vertices(point)
        if len(vertices) < MIN_CENTERLINE_POINTS:
            logger.warning(
                "Skipping airport point '%s': %d usable coordinate(s), need at least %d",
                point.id,
                len(vertices),
                MIN_CENTERLINE_POINTS,
            )
            continue

        kind = FixtureKind.parse(point.type)
        if kind is None:
            logger.warning(
                "Airport point '%s' has unknown type %r; treating as stopbar",
                point.id,
                point.type,
            )
            kind = FixtureKind.STOPBAR
        centerlines.append(Centerline(name=point.id, kind=kind, points=tuple(vertices)))

    logger.info("Built %d centerline(s) from airport points", len(centerlines))
    return centerlines


def _usable_vertices(point: AirportPoint) -> list[GeoPoint]:
    vertices: list[GeoPoint] = []
    for coord in point.coordinates:
        finite = math.isfinite(coord.lat) and math.isfinite(coord.lng)
        if not finite or abs(coord.lat) > MAX_LATITUDE or abs(coord.lng) > MAX_LONGITUDE:
            logger.debug("Dropping out-of-range coordinate on '%s': %s", point.id, coord)
            continue
        vertex = GeoPoint(lat=coord.lat, lon=coord.lng)
        if vertices and vertices[-1] == vertex:
            continue
        vertices.append(vertex)
    return vertices
