"""Legacy token dialect (``<Bars>``): parse, validate, write, relabel and convert.

Document layout::

    <Bars>
        <StopBar>
            <Name>A--01</Name>
            <Runway>06/24</Runway>
            <Point>+473112.360-1222002.400</Point>
            ...
        </StopBar>
    </Bars>

``<Point>`` text is a 23-character token (see ``geometry.codec``) and is
kept verbatim in ``LegacyStopBarRecord``.  ``relabel`` edits ``<Name>`` and
``<Runway>`` in place and leaves the rest of the document untouched.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from bars_lighting.core.constants import REMOVE_DISPLAY_NAME
from bars_lighting.core.exceptions import (
    InvalidCoordinateError,
    InvalidRunwayError,
    LightingError,
    MalformedDocumentError,
    SkippedElementError,
)
from bars_lighting.dialects._constants import (
    LEGACY_ROOT_TAG,
    MIN_POLYGON_VERTICES,
    NAME_TAG,
    POINT_TAG,
    POLYGON_ROOT_TAG,
    POLYGON_TAG,
    RUNWAY_TAG,
    STOPBAR_TAG,
)
from bars_lighting.dialects._validation import (
    child_text,
    is_valid_runway,
    parse_xml,
    record_skip,
    require_root,
)
from bars_lighting.dialects.polygon import parse_vertices
from bars_lighting.geometry.codec import decode_point, encode_point, is_valid_token
from bars_lighting.models.documents import (
    DocumentValidation,
    LegacyConversion,
    LegacyDocument,
    ParseWarning,
)
from bars_lighting.models.legacy import LegacyStopBarRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lxml.etree import _Element

    from bars_lighting.models.legacy import Mapping

logger = logging.getLogger("bars_lighting.dialects.legacy")

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


def parse_legacy_document(xml: str | bytes, *, source: str = "legacy XML") -> LegacyDocument:
    """Parse a ``<Bars>`` document into stopbar records.

    A ``StopBar`` without a name, without points, or with a point that is
    not a well-formed token is skipped with a warning.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML or the
            root element is not ``<Bars>``.
    """
    root = parse_xml(xml, dialect="legacy")
    require_root(root, LEGACY_ROOT_TAG, dialect="legacy")

    records: list[LegacyStopBarRecord] = []
    warnings: list[ParseWarning] = []

    for idx, bar in enumerate(root.iter(STOPBAR_TAG)):
        name = child_text(bar, NAME_TAG)
        label = name or f"StopBar {idx}"
        try:
            records.append(_parse_stopbar(bar, name, label))
        except SkippedElementError as exc:
            record_skip(warnings, exc, element=STOPBAR_TAG, index=idx, label=label, source=source)

    logger.info(
        "Parsed %d stopbar(s) from %s (%d skipped)",
        len(records),
        source,
        len(warnings),
    )
    return LegacyDocument(records=records, warnings=warnings)


def _parse_stopbar(bar: _Element, name: str | None, label: str) -> LegacyStopBarRecord:
    if name is None:
        msg = "StopBar has no Name"
        raise SkippedElementError(msg)

    points = tuple((point.text or "").strip() for point in bar.iter(POINT_TAG))
    if not points:
        msg = f"StopBar '{label}' has no Point elements"
        raise SkippedElementError(msg)
    for point_idx, token in enumerate(points):
        if not is_valid_token(token):
            msg = f"StopBar '{label}' Point {point_idx} is not a coordinate token: {token!r}"
            raise SkippedElementError(msg, code="MALFORMED_TOKEN")
        try:
            decode_point(token)
        except InvalidCoordinateError as exc:
            msg = f"StopBar '{label}' Point {point_idx}: {exc.message}"
            raise SkippedElementError(msg, code=exc.code) from exc

    return LegacyStopBarRecord(name=name, runway=child_text(bar, RUNWAY_TAG), points=points)


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------


def validate_legacy_document(xml: str | bytes) -> DocumentValidation:
    """Check that a ``<Bars>`` file is complete enough to publish.

    The first problem rejects the whole document.  A document is invalid
    when it is not well-formed XML, its root is not ``<Bars>`` or it holds
    no ``StopBar``.  It is also invalid when any ``StopBar`` lacks a
    ``Name`` or ``Point`` children, or has a point that is not an in-range
    coordinate token.
    """
    try:
        root = parse_xml(xml, dialect="legacy")
        require_root(root, LEGACY_ROOT_TAG, dialect="legacy")
        stopbars = list(root.iter(STOPBAR_TAG))
        if not stopbars:
            msg = "No stopbars found in document"
            raise MalformedDocumentError(msg, code="NO_STOPBARS")

        for idx, bar in enumerate(stopbars):
            name = child_text(bar, NAME_TAG)
            _parse_stopbar(bar, name, name or f"StopBar {idx}")
    except LightingError as exc:
        logger.warning("Legacy document rejected: %s", exc.message)
        return DocumentValidation.invalid(exc.message, exc.code)

    logger.info("Legacy document valid (%d stopbar(s))", len(stopbars))
    return DocumentValidation.valid()


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------


def write_legacy_document(records: Sequence[LegacyStopBarRecord]) -> str:
    """Write stopbar records as a ``<Bars>`` document (4-space indentation)."""
    from lxml import etree  # type: ignore[attr-defined]

    root = etree.Element(LEGACY_ROOT_TAG)
    root.text = "\n    " if records else "\n"

    for idx, record in enumerate(records):
        bar = etree.SubElement(root, STOPBAR_TAG)
        bar.text = "\n        "
        bar.tail = "\n    " if idx < len(records) - 1 else "\n"

        children = [(NAME_TAG, record.name)]
        if record.runway:
            children.append((RUNWAY_TAG, record.runway))
        children.extend((POINT_TAG, token) for token in record.points)

        for child_idx, (tag, text) in enumerate(children):
            child = etree.SubElement(bar, tag)
            child.text = text
            child.tail = "\n        " if child_idx < len(children) - 1 else "\n    "

    return f"{XML_DECLARATION}\n" + etree.tostring(root, encoding="unicode")


# ---------------------------------------------------------------------------
# Relabel
# ---------------------------------------------------------------------------

# Markup whose text must not be mistaken for tags when locating elements
_OPAQUE_PATTERN = re.compile(
    r"<!--.*?-->|<!\[CDATA\[.*?\]\]>|<\?.*?\?>|<!DOCTYPE(?:[^\[>]|\[.*?\])*>",
    re.DOTALL,
)
_ATTRIBUTES = r"""(?:\s+[^\s=/>]+\s*=\s*(?:"[^"]*"|'[^']*'))*\s*"""


def _start_tag(tag: str) -> re.Pattern[str]:
    """Start tag of ``tag``; group ``empty`` is ``/`` for a self-closing tag."""
    return re.compile(rf"<{tag}{_ATTRIBUTES}(?P<empty>/?)>")


def _end_tag(tag: str) -> re.Pattern[str]:
    return re.compile(rf"</{tag}\s*>")


def relabel(
    target_xml: str | bytes,
    mappings: Sequence[Mapping],
    references: Sequence[LegacyStopBarRecord],
) -> str:
    """Rename matched stopbars and copy reference runways, in place.

    For each mapping the first not-yet-relabeled ``StopBar`` whose
    ``Name`` equals ``target_name`` gets the reference's name.  When the
    reference has a runway, the ``Runway`` element is overwritten or
    inserted immediately before the first ``Point``, indented like that
    ``Point``.

    Edits are spliced into the source text: only the touched ``Name`` and
    ``Runway`` contents change, every other character (prolog, comments,
    attribute quoting, character references, CDATA) is returned verbatim.
    ``bytes`` input is decoded with the encoding the document declares.

    Raises:
        MalformedDocumentError: If ``target_xml`` is not a ``<Bars>`` document.
    """
    root = parse_xml(target_xml, dialect="legacy")
    require_root(root, LEGACY_ROOT_TAG, dialect="legacy")

    if isinstance(target_xml, bytes):
        encoding = root.getroottree().docinfo.encoding or "utf-8"
        text = target_xml.decode(encoding)
    else:
        text = target_xml

    references_by_name: dict[str, LegacyStopBarRecord] = {}
    for reference in references:
        references_by_name.setdefault(reference.name, reference)

    stopbars = list(root.iter(STOPBAR_TAG))
    masked = _masked(text)
    spans = _stopbar_spans(masked)
    if len(spans) != len(stopbars):
        msg = f"Located {len(spans)} StopBar tag(s) in the source, parsed {len(stopbars)}"
        raise MalformedDocumentError(msg)

    touched: set[int] = set()
    edits: list[tuple[int, int, str]] = []

    for mapping in mappings:
        reference = references_by_name.get(mapping.reference_name)
        if reference is None:
            logger.warning("Mapping references unknown stopbar '%s'", mapping.reference_name)
            continue

        target_idx = _find_stopbar(stopbars, mapping.target_name, touched)
        if target_idx is None:
            logger.warning("Target stopbar '%s' not found in document", mapping.target_name)
            continue
        touched.add(target_idx)

        start, end = spans[target_idx]
        logger.info("Renaming stopbar: %s -> %s", mapping.target_name, reference.name)
        edits.append(_replace_content(masked, start, end, NAME_TAG, reference.name))
        if reference.runway:
            edits.append(_runway_edit(text, masked, start, end, reference.runway))
            logger.info("  runway set to %s", reference.runway)

    for start, end, replacement in sorted(edits, reverse=True):
        text = text[:start] + replacement + text[end:]

    logger.info("Updated %d stopbar name(s) and runway(s)", len(touched))
    return text


def _find_stopbar(stopbars: list[_Element], name: str, touched: set[int]) -> int | None:
    for idx, bar in enumerate(stopbars):
        if idx in touched:
            continue
        name_elem = bar.find(NAME_TAG)
        if name_elem is not None and (name_elem.text or "").strip() == name:
            return idx
    return None


def _masked(text: str) -> str:
    """``text`` with comments, CDATA, PIs and DOCTYPE blanked to spaces."""
    return _OPAQUE_PATTERN.sub(lambda m: " " * len(m.group(0)), text)


def _stopbar_spans(masked: str) -> list[tuple[int, int]]:
    """Source offsets of each ``StopBar``'s content, in document order.

    A self-closing ``<StopBar/>`` gets an empty span at the tag's end.
    """
    end_pattern = _end_tag(STOPBAR_TAG)
    spans: list[tuple[int, int]] = []
    for match in _start_tag(STOPBAR_TAG).finditer(masked):
        if match.group("empty"):
            spans.append((match.end(), match.end()))
            continue
        close = end_pattern.search(masked, match.end())
        if close is None:
            msg = "StopBar start tag has no matching end tag"
            raise MalformedDocumentError(msg)
        spans.append((match.end(), close.start()))
    return spans


def _escaped(tag: str, value: str) -> str:
    """``value`` escaped as the text content of ``<tag>``."""
    from lxml import etree  # type: ignore[attr-defined]

    elem = etree.Element(tag)
    elem.text = value
    markup = etree.tostring(elem, encoding="unicode")
    if markup.endswith("/>"):
        return ""
    return markup[len(tag) + 2 : -(len(tag) + 3)]


def _element(tag: str, value: str) -> str:
    return f"<{tag}>{_escaped(tag, value)}</{tag}>"


def _replace_content(
    masked: str, start: int, end: int, tag: str, value: str
) -> tuple[int, int, str]:
    """Edit replacing the content of the first ``<tag>`` between ``start`` and ``end``."""
    opening = _start_tag(tag).search(masked, start, end)
    if opening is None:
        msg = f"No <{tag}> element found in StopBar source"
        raise MalformedDocumentError(msg)
    if opening.group("empty"):
        return (opening.start(), opening.end(), _element(tag, value))
    closing = _end_tag(tag).search(masked, opening.end(), end)
    if closing is None:
        msg = f"<{tag}> start tag has no matching end tag"
        raise MalformedDocumentError(msg)
    return (opening.end(), closing.start(), _escaped(tag, value))


def _runway_edit(
    text: str, masked: str, start: int, end: int, runway: str
) -> tuple[int, int, str]:
    """Overwrite the ``Runway``, or insert one before the first ``Point``."""
    if _start_tag(RUNWAY_TAG).search(masked, start, end) is not None:
        return _replace_content(masked, start, end, RUNWAY_TAG, runway)

    first_point = _start_tag(POINT_TAG).search(masked, start, end)
    if first_point is None:
        return (end, end, _element(RUNWAY_TAG, runway))

    position = first_point.start()
    indent_start = position
    while indent_start > start and text[indent_start - 1] in " \t\r\n":
        indent_start -= 1
    indent = text[indent_start:position]
    return (position, position, _element(RUNWAY_TAG, runway) + indent)


# ---------------------------------------------------------------------------
# Polygon → legacy conversion
# ---------------------------------------------------------------------------


def convert_polygons_to_legacy(
    polygon_xml: str | bytes, *, source: str = "polygon XML"
) -> LegacyConversion:
    """Convert an ``FSData`` stopbar document to the legacy dialect.

    A ``displayName`` of ``"A1 - 06 24"`` yields name ``A1--<n>`` (``n`` is
    the 1-based polygon position, zero-padded to two digits) and runway
    ``06/24``.  Every vertex becomes one ``Point`` token.  ``remove``
    polygons are not stopbars and are left out.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML or the
            root element is not ``<FSData>``.
    """
    root = parse_xml(polygon_xml, dialect="polygon")
    require_root(root, POLYGON_ROOT_TAG, dialect="polygon")

    records: list[LegacyStopBarRecord] = []
    warnings: list[ParseWarning] = []

    for idx, polygon in enumerate(root.iter(POLYGON_TAG)):
        display_name = (polygon.get("displayName") or "").strip()
        label = display_name or f"Polygon {idx}"
        if display_name.lower() == REMOVE_DISPLAY_NAME:
            logger.debug("Skipping remove polygon #%d during conversion", idx)
            continue
        try:
            records.append(_polygon_to_record(polygon, display_name, idx, label))
        except SkippedElementError as exc:
            record_skip(warnings, exc, element=POLYGON_TAG, index=idx, label=label, source=source)

    logger.info(
        "Converted %d polygon(s) to stopbars from %s (%d skipped)",
        len(records),
        source,
        len(warnings),
    )
    return LegacyConversion(xml=write_legacy_document(records), records=records, warnings=warnings)


def _polygon_to_record(
    polygon: _Element, display_name: str, idx: int, label: str
) -> LegacyStopBarRecord:
    if not display_name:
        msg = "Polygon has no displayName attribute"
        raise SkippedElementError(msg)

    parts = [part.strip() for part in display_name.split("-")]
    bar_name = parts[0]
    runway = None
    if len(parts) > 1 and parts[1]:
        runway = parts[1].replace(" ", "/").upper()
        if not is_valid_runway(runway):
            msg = (
                f"Invalid runway format in {display_name!r}: must contain two runway "
                f"designations (e.g. '06/24' or '16L/34R')"
            )
            raise InvalidRunwayError(msg)

    points = parse_vertices(polygon, label)
    if len(points) < MIN_POLYGON_VERTICES:
        msg = f"Polygon '{label}' has {len(points)} vertex/vertices, need at least 2"
        raise SkippedElementError(msg, code="DEGENERATE_GEOMETRY")

    return LegacyStopBarRecord(
        name=f"{bar_name.upper()}--{idx + 1:02d}",
        runway=runway,
        points=tuple(encode_point(point) for point in points),
    )
