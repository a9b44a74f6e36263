"""XML dialect readers and writers.

Four interchange formats share the canonical model in ``bars_lighting.models``:

- **native**: ``<Object>``/``<BarsObject>`` elements holding ``<Light>``
  fixtures with inherited properties
- **support**: ``<LightSupport>`` centre/width/length/heading rectangles
  that become remove areas
- **polygon**: simulator ``<FSData>`` polygons (fixture groups and
  ``remove`` areas); read and written
- **legacy**: ``<Bars>``/``<StopBar>`` records with coordinate tokens;
  read, written, relabeled in place

Parsing is fatal per document (``MalformedDocumentError``) and tolerant
per element (``ParseWarning`` on the result).
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from bars_lighting.core.exceptions import MalformedDocumentError
from bars_lighting.dialects._constants import (
    LEGACY_ROOT_TAG,
    NATIVE_OBJECT_TAGS,
    POLYGON_ROOT_TAG,
    SUPPORT_TAG,
)
from bars_lighting.dialects._validation import parse_xml
from bars_lighting.dialects.legacy import (
    convert_polygons_to_legacy,
    parse_legacy_document,
    relabel,
    validate_legacy_document,
    write_legacy_document,
)
from bars_lighting.dialects.native import parse_native_document
from bars_lighting.dialects.polygon import (
    kind_for_group_index,
    new_guid,
    parse_polygon_document,
    validate_polygon_document,
    write_polygon_document,
)
from bars_lighting.dialects.support import parse_support_document

if TYPE_CHECKING:
    from bars_lighting.models.documents import (
        FixtureDocument,
        LegacyDocument,
        PolygonDocument,
        RemoveAreaDocument,
    )

logger = logging.getLogger("bars_lighting.dialects")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "Dialect",
    "convert_polygons_to_legacy",
    "detect_dialect",
    "kind_for_group_index",
    "new_guid",
    "parse_document",
    "parse_legacy_document",
    "parse_native_document",
    "parse_polygon_document",
    "parse_support_document",
    "relabel",
    "validate_legacy_document",
    "validate_polygon_document",
    "write_legacy_document",
    "write_polygon_document",
]


class Dialect(enum.Enum):
    """The XML interchange formats."""

    NATIVE = "native"
    SUPPORT = "support"
    POLYGON = "polygon"
    LEGACY = "legacy"


def detect_dialect(xml: str | bytes) -> Dialect:
    """Identify the dialect of a document from its structure.

    ``<FSData>`` and ``<Bars>`` roots are recognised directly; any other
    root is native if it holds object elements, or support if it holds
    ``<LightSupport>`` elements.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML or
            matches no dialect.
    """
    root = parse_xml(xml, dialect="lighting")

    if root.tag == POLYGON_ROOT_TAG:
        return Dialect.POLYGON
    if root.tag == LEGACY_ROOT_TAG:
        return Dialect.LEGACY
    if root.tag in NATIVE_OBJECT_TAGS or next(root.iter(*NATIVE_OBJECT_TAGS), None) is not None:
        return Dialect.NATIVE
    if root.tag == SUPPORT_TAG or next(root.iter(SUPPORT_TAG), None) is not None:
        return Dialect.SUPPORT

    msg = f"Unrecognised lighting document: root element <{root.tag}>"
    raise MalformedDocumentError(msg)


def parse_document(
    xml: str | bytes, *, source: str = ""
) -> FixtureDocument | RemoveAreaDocument | PolygonDocument | LegacyDocument:
    """Detect the dialect of ``xml`` and parse it with the matching reader.

    Raises:
        MalformedDocumentError: If the document is malformed or of no
            known dialect.
    """
    dialect = detect_dialect(xml)
    logger.info("Detected %s dialect for %s", dialect.value, source or "document")
    source = source or f"{dialect.value} XML"

    if dialect is Dialect.NATIVE:
        return parse_native_document(xml, source=source)
    if dialect is Dialect.SUPPORT:
        return parse_support_document(xml, source=source)
    if dialect is Dialect.POLYGON:
        return parse_polygon_document(xml, source=source)
    return parse_legacy_document(xml, source=source)
