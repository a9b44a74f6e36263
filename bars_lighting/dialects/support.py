"""Rectangle "support" dialect parser.

Each ``<LightSupport latitude longitude width length heading/>`` element
describes a rectangle (centre in decimal degrees, size in metres, heading
in degrees) that becomes one closed-ring ``RemoveArea``.
"""

from __future__ import annotations

import logging

from bars_lighting.core.exceptions import DegenerateGeometryError, SkippedElementError
from bars_lighting.dialects._constants import SUPPORT_TAG
from bars_lighting.dialects._validation import (
    check_position,
    parse_float,
    parse_xml,
    record_skip,
)
from bars_lighting.geometry.kernel import rectangle_from_center
from bars_lighting.models.documents import ParseWarning, RemoveAreaDocument
from bars_lighting.models.geo import GeoPoint, RemoveArea, RemoveAreaSource

logger = logging.getLogger("bars_lighting.dialects.support")


def parse_support_document(xml: str | bytes, *, source: str = "support XML") -> RemoveAreaDocument:
    """Parse a support document into rectangle remove areas.

    Areas are identified ``support-<i>`` by element position.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML.
    """
    root = parse_xml(xml, dialect="support")

    areas: list[RemoveArea] = []
    warnings: list[ParseWarning] = []

    for idx, support in enumerate(root.iter(SUPPORT_TAG)):
        area_id = f"support-{idx}"
        try:
            lat = parse_float(support.get("latitude"), "latitude", area_id)
            lon = parse_float(support.get("longitude"), "longitude", area_id)
            width = parse_float(support.get("width"), "width", area_id)
            length = parse_float(support.get("length"), "length", area_id)
            heading = parse_float(support.get("heading"), "heading", area_id)
            check_position(lat, lon, area_id)
            try:
                corners = rectangle_from_center(GeoPoint(lat=lat, lon=lon), width, length, heading)
            except DegenerateGeometryError as exc:
                raise SkippedElementError(exc.message, code=exc.code) from exc
        except SkippedElementError as exc:
            record_skip(
                warnings, exc, element=SUPPORT_TAG, index=idx, label=area_id, source=source
            )
            continue

        areas.append(RemoveArea.from_points(area_id, corners, RemoveAreaSource.RECTANGLE))

    logger.info(
        "Parsed %d support rectangle(s) from %s (%d skipped)",
        len(areas),
        source,
        len(warnings),
    )
    return RemoveAreaDocument(areas=areas, warnings=warnings)
