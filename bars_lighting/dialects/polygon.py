"""Generic polygon dialect (simulator ``FSData``) parser and writer.

Document layout::

    <FSData version="9.0">
      <Polygon displayName="A1" groupIndex="1" altitude="408.0">
        <Attribute name="UniqueGUID" guid="{...}" type="GUID" value="{...}"/>
        <Vertex lat="47.46" lon="8.54"/>
        ...
      </Polygon>
    </FSData>

A polygon named ``remove`` (any case) is a remove area; any other polygon
is a fixture group whose kind follows its ``groupIndex``.  The writer
omits each ring's closing vertex; the parser takes vertex lists as given.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from bars_lighting.core.config import LightingConfig
from bars_lighting.core.constants import REMOVE_DISPLAY_NAME, UNIQUE_GUID_ATTRIBUTE_GUID
from bars_lighting.core.exceptions import (
    DegenerateGeometryError,
    LightingError,
    MalformedDocumentError,
    SkippedElementError,
)
from bars_lighting.dialects._constants import (
    ATTRIBUTE_TAG,
    GROUP_INDEX_KINDS,
    MIN_POLYGON_VERTICES,
    MIN_REMOVE_VERTICES,
    POLYGON_ROOT_TAG,
    POLYGON_TAG,
    UNIQUE_GUID_NAME,
    VERTEX_TAG,
)
from bars_lighting.dialects._validation import (
    check_position,
    check_remove_ring,
    parse_float,
    parse_xml,
    record_skip,
    require_root,
)
from bars_lighting.models.documents import DocumentValidation, ParseWarning, PolygonDocument
from bars_lighting.models.geo import (
    Centerline,
    FixtureKind,
    GeoPoint,
    RemoveArea,
    RemoveAreaSource,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from lxml.etree import _Element

logger = logging.getLogger("bars_lighting.dialects.polygon")


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


def kind_for_group_index(group_index: int | None) -> FixtureKind:
    """Map a ``groupIndex`` to a fixture kind; unknown indices are stopbars."""
    if group_index is not None:
        for low, high, kind in GROUP_INDEX_KINDS:
            if low <= group_index <= high:
                return FixtureKind(kind)
    return FixtureKind.STOPBAR


def parse_polygon_document(xml: str | bytes, *, source: str = "polygon XML") -> PolygonDocument:
    """Parse an ``FSData`` document into centerlines and remove areas.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML or the
            root element is not ``<FSData>``.
    """
    root = parse_xml(xml, dialect="polygon")
    require_root(root, POLYGON_ROOT_TAG, dialect="polygon")

    centerlines: list[Centerline] = []
    remove_areas: list[RemoveArea] = []
    warnings: list[ParseWarning] = []

    for idx, polygon in enumerate(root.iter(POLYGON_TAG)):
        display_name = (polygon.get("displayName") or "").strip()
        label = display_name or f"Polygon {idx}"
        try:
            if not display_name:
                msg = "Polygon has no displayName attribute"
                raise SkippedElementError(msg)
            points = parse_vertices(polygon, label)
            raw_altitude = polygon.get("altitude")
            altitude = (
                parse_float(raw_altitude, "altitude", label) if raw_altitude is not None else None
            )
            unique_id = _unique_guid(polygon)

            if display_name.lower() == REMOVE_DISPLAY_NAME:
                _require_vertices(points, MIN_REMOVE_VERTICES, label)
                area = RemoveArea.from_points(
                    unique_id or f"remove-{idx}",
                    points,
                    RemoveAreaSource.POLYGON,
                    altitude_m=altitude,
                    unique_id=unique_id,
                )
                check_remove_ring(area.ring, label)
                remove_areas.append(area)
            else:
                _require_vertices(points, MIN_POLYGON_VERTICES, label)
                group_index = _group_index(polygon.get("groupIndex"))
                centerlines.append(
                    Centerline(
                        name=display_name,
                        kind=kind_for_group_index(group_index),
                        points=tuple(points),
                        group_index=group_index,
                        altitude_m=altitude,
                        unique_id=unique_id,
                    )
                )
        except (SkippedElementError, DegenerateGeometryError) as exc:
            record_skip(warnings, exc, element=POLYGON_TAG, index=idx, label=label, source=source)
            continue

    logger.info(
        "Parsed %d fixture polygon(s) and %d remove area(s) from %s (%d skipped)",
        len(centerlines),
        len(remove_areas),
        source,
        len(warnings),
    )
    return PolygonDocument(centerlines=centerlines, remove_areas=remove_areas, warnings=warnings)


def parse_vertices(polygon: _Element, label: str) -> list[GeoPoint]:
    """Parse the ``<Vertex lat lon/>`` children of a polygon, in order."""
    points: list[GeoPoint] = []
    for vertex in polygon.iter(VERTEX_TAG):
        lat = parse_float(vertex.get("lat"), "vertex lat", label)
        lon = parse_float(vertex.get("lon"), "vertex lon", label)
        check_position(lat, lon, label)
        points.append(GeoPoint(lat=lat, lon=lon))
    return points


def _require_vertices(points: list[GeoPoint], minimum: int, label: str) -> None:
    if len(points) < minimum:
        msg = f"Polygon '{label}' has {len(points)} vertex/vertices, need at least {minimum}"
        raise SkippedElementError(msg, code="DEGENERATE_GEOMETRY")


def _group_index(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _unique_guid(polygon: _Element) -> str:
    for attribute in polygon.iter(ATTRIBUTE_TAG):
        if attribute.get("name") == UNIQUE_GUID_NAME:
            return (attribute.get("value") or "").strip("{} ")
    return ""


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------


def validate_polygon_document(xml: str | bytes) -> DocumentValidation:
    """Check that an uploaded ``FSData`` file holds usable stopbar polygons.

    Stricter than ``parse_polygon_document``: the first problem rejects the
    whole document.  A document is invalid when it is not well-formed XML,
    its root is not ``<FSData>`` or it has no ``Polygon``.  It is also
    invalid when any polygon lacks a ``displayName``, has no vertices, or
    has a vertex that is non-numeric or outside WGS 84 range.
    """
    try:
        root = parse_xml(xml, dialect="polygon")
        require_root(root, POLYGON_ROOT_TAG, dialect="polygon")
        polygons = list(root.iter(POLYGON_TAG))
        if not polygons:
            msg = "No stopbar polygons found in document"
            raise MalformedDocumentError(msg, code="NO_POLYGONS")

        for idx, polygon in enumerate(polygons):
            display_name = (polygon.get("displayName") or "").strip()
            if not display_name:
                msg = f"Polygon {idx} has no displayName attribute"
                raise SkippedElementError(msg)
            if not parse_vertices(polygon, display_name):
                msg = f"Polygon '{display_name}' has no vertices"
                raise SkippedElementError(msg, code="DEGENERATE_GEOMETRY")
    except LightingError as exc:
        logger.warning("Polygon document rejected: %s", exc.message)
        return DocumentValidation.invalid(exc.message, exc.code)

    logger.info("Polygon document valid (%d polygon(s))", len(polygons))
    return DocumentValidation.valid()


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------


def new_guid() -> str:
    """Upper-case UUID4 string, the simulator's GUID spelling."""
    return str(uuid.uuid4()).upper()


def write_polygon_document(
    centerlines: Sequence[Centerline],
    remove_areas: Sequence[RemoveArea],
    *,
    altitude_m: float | None = None,
    id_factory: Callable[[], str] = new_guid,
    config: LightingConfig | None = None,
) -> str:
    """Write centerlines and remove areas as an ``FSData`` document.

    Centerline polygons come first, named after their centerline, then one
    ``remove`` polygon per area.  ``groupIndex`` counts from 1 across both,
    and every polygon gets a fresh ``UniqueGUID`` from ``id_factory``.

    Args:
        centerlines: Fixture groups, written vertex-for-vertex.
        remove_areas: Closed rings, written without the closing vertex.
        altitude_m: Altitude for every polygon (defaults to
            ``config.draft_altitude_m``).
        id_factory: Source of unique GUID strings.
        config: Engine configuration (defaults to ``LightingConfig()``).

    Returns:
        The document text, XML declaration included.
    """
    from lxml import etree  # type: ignore[attr-defined]

    config = config or LightingConfig()
    altitude = config.draft_altitude_m if altitude_m is None else altitude_m

    entries: list[tuple[str, Sequence[GeoPoint]]] = [(c.name, c.points) for c in centerlines]
    entries.extend((REMOVE_DISPLAY_NAME, area.open_ring) for area in remove_areas)

    root = etree.Element(POLYGON_ROOT_TAG)
    root.set("version", config.fsdata_version)
    root.text = "\n\t" if entries else "\n"

    for group_index, (display_name, vertices) in enumerate(entries, start=1):
        polygon = etree.SubElement(root, POLYGON_TAG)
        polygon.set("version", config.polygon_version)
        polygon.set("displayName", display_name)
        polygon.set("groupIndex", str(group_index))
        polygon.set("altitude", f"{altitude:.11f}")
        polygon.text = "\n\t\t"
        polygon.tail = "\n\t" if group_index < len(entries) else "\n"

        attribute = etree.SubElement(polygon, ATTRIBUTE_TAG)
        attribute.set("name", UNIQUE_GUID_NAME)
        attribute.set("guid", UNIQUE_GUID_ATTRIBUTE_GUID)
        attribute.set("type", "GUID")
        attribute.set("value", f"{{{id_factory()}}}")
        attribute.tail = "\n\t\t" if vertices else "\n\t"

        for vertex_idx, point in enumerate(vertices):
            vertex = etree.SubElement(polygon, VERTEX_TAG)
            vertex.set("lat", f"{point.lat:.14f}")
            vertex.set("lon", f"{point.lon:.14f}")
            vertex.tail = "\n\t\t" if vertex_idx < len(vertices) - 1 else "\n\t"

    logger.info(
        "Wrote %d fixture polygon(s) and %d remove polygon(s)",
        len(centerlines),
        len(remove_areas),
    )
    return '<?xml version="1.0"?>\n' + etree.tostring(root, encoding="unicode")
