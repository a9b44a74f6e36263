"""Shared parsing and validation helpers for the XML dialects.

Responsibilities:
- Safe XML parsing (no entity expansion, no network) with document-level
  failure as ``MalformedDocumentError``
- Element-level checks raising ``SkippedElementError``
- Recording skipped elements as ``ParseWarning`` entries
- Shapely validity checks for remove-area rings
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from bars_lighting.core.constants import MAX_LATITUDE, MAX_LONGITUDE
from bars_lighting.core.exceptions import (
    MalformedDocumentError,
    SkippedElementError,
    ValidationError,
)
from bars_lighting.dialects._constants import RUNWAY_DESIGNATOR_PATTERN
from bars_lighting.models.documents import ParseWarning

if TYPE_CHECKING:
    from lxml.etree import _Element

    from bars_lighting.models.geo import GeoPoint

logger = logging.getLogger("bars_lighting.dialects")


# ---------------------------------------------------------------------------
# Document level
# ---------------------------------------------------------------------------


def parse_xml(xml: str | bytes, *, dialect: str) -> _Element:
    """Parse XML text and return its root element.

    Raises:
        MalformedDocumentError: If the text is empty or not well-formed XML.
    """
    from lxml import etree  # type: ignore[attr-defined]

    content = xml.encode("utf-8") if isinstance(xml, str) else xml
    if not content.strip():
        msg = f"{dialect} document is empty"
        raise MalformedDocumentError(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        return etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"{dialect} document is not valid XML: {exc}"
        raise MalformedDocumentError(msg) from exc


def require_root(root: _Element, tag: str, *, dialect: str) -> None:
    """Raise ``MalformedDocumentError`` unless the root element is ``<tag>``."""
    if root.tag != tag:
        msg = f"Not a {dialect} document: root element is <{root.tag}>, expected <{tag}>"
        raise MalformedDocumentError(msg)


# ---------------------------------------------------------------------------
# Element level
# ---------------------------------------------------------------------------


def child_text(elem: _Element, tag: str) -> str | None:
    """Stripped text of the first ``<tag>`` child, or ``None`` if absent/empty."""
    child = elem.find(tag)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def parse_float(raw: str | None, field_name: str, label: str) -> float:
    """Parse a finite float or raise ``SkippedElementError``."""
    if raw is None or not raw.strip():
        msg = f"'{label}' is missing required {field_name}"
        raise SkippedElementError(msg)
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"'{label}' has non-numeric {field_name} {raw!r}"
        raise SkippedElementError(msg) from exc
    if not math.isfinite(value):
        msg = f"'{label}' has non-finite {field_name} {raw!r}"
        raise SkippedElementError(msg)
    return value


def check_position(lat: float, lon: float, label: str) -> None:
    """Raise ``SkippedElementError`` if a position is outside WGS 84 bounds."""
    if abs(lat) > MAX_LATITUDE or abs(lon) > MAX_LONGITUDE:
        msg = (
            f"'{label}' has coordinate outside WGS 84 range: lat={lat}, lon={lon} "
            f"(limits ±{MAX_LATITUDE:g} / ±{MAX_LONGITUDE:g})"
        )
        raise SkippedElementError(msg, code="INVALID_COORDINATE")


def is_valid_runway(runway: str) -> bool:
    """Whether ``runway`` is two designators ``NN[LCR]`` joined by ``/``."""
    parts = runway.split("/")
    return len(parts) == 2 and all(
        RUNWAY_DESIGNATOR_PATTERN.fullmatch(part.strip()) for part in parts
    )


def record_skip(
    warnings: list[ParseWarning],
    exc: ValidationError,
    *,
    element: str,
    index: int,
    label: str,
    source: str,
) -> None:
    """Log a skipped element and append its ``ParseWarning``."""
    logger.warning(
        "Skipping <%s> #%d '%s' in %s: %s",
        element,
        index,
        label,
        source,
        exc,
    )
    warnings.append(
        ParseWarning(element=element, index=index, label=label, reason=exc.message, code=exc.code)
    )


# ---------------------------------------------------------------------------
# Shapely ring checks
# ---------------------------------------------------------------------------


def check_remove_ring(ring: tuple[GeoPoint, ...], label: str) -> None:
    """Validate a closed remove-area ring with shapely.

    Self-intersecting rings are kept (the simulator accepts them) but
    logged.

    Raises:
        SkippedElementError: If the ring encloses no area.
    """
    from shapely.geometry import Polygon

    try:
        poly = Polygon([p.to_lonlat() for p in ring])
    except Exception as exc:
        msg = f"Cannot create polygon for '{label}': {exc}"
        raise SkippedElementError(msg) from exc

    if poly.area == 0:
        msg = f"Zero-area remove polygon '{label}'"
        raise SkippedElementError(msg, code="DEGENERATE_GEOMETRY")

    if not poly.is_valid:
        from shapely.validation import explain_validity

        logger.warning(
            "Remove polygon '%s' is not a valid simple polygon: %s",
            label,
            explain_validity(poly),
        )
