"""Native fixture dialect parser.

Reads ``<Object id type>`` (or ``<BarsObject>``) groups of ``<Light>``
elements::

    <Object id="SB_A1" type="stopbar">
      <Properties><Elevated>false</Elevated></Properties>
      <Light>
        <Position>47.4647,8.5492</Position>
        <Heading>275.3</Heading>
        <Properties><IHP>true</IHP></Properties>
      </Light>
    </Object>

Property precedence: light ``<Properties>`` over object ``<Properties>``
over the type default.  One centerline is derived per object from its
non-elevated, non-IHP lights in document order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bars_lighting.core.exceptions import SkippedElementError
from bars_lighting.dialects._constants import (
    NATIVE_LIGHT_TAG,
    NATIVE_OBJECT_TAGS,
    NATIVE_PROPERTIES_TAG,
)
from bars_lighting.dialects._validation import (
    check_position,
    child_text,
    parse_float,
    parse_xml,
    record_skip,
)
from bars_lighting.models.documents import FixtureDocument, ParseWarning
from bars_lighting.models.fixtures import (
    DEFAULT_COLOR,
    DEFAULT_DIRECTIONALITY,
    DEFAULT_ORIENTATION,
    Directionality,
    LeadOnLight,
    LightFixture,
    Orientation,
    ParentObject,
    StandLight,
    StopbarLight,
    TaxiwayLight,
)
from bars_lighting.models.geo import (
    MIN_CENTERLINE_POINTS,
    Centerline,
    FixtureKind,
    GeoPoint,
)

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("bars_lighting.dialects.native")


def parse_native_document(xml: str | bytes, *, source: str = "native XML") -> FixtureDocument:
    """Parse a native fixture document.

    Args:
        xml: Document text.
        source: Label used in log messages (e.g. the upload filename).

    Returns:
        Parent objects, fixtures, one centerline per object with at least
        two centerline fixtures, and a warning per skipped element.

    Raises:
        MalformedDocumentError: If the text is not well-formed XML.
    """
    root = parse_xml(xml, dialect="native fixture")

    parents: list[ParentObject] = []
    fixtures: list[LightFixture] = []
    centerlines: list[Centerline] = []
    warnings: list[ParseWarning] = []
    used_ids: set[str] = set()

    for obj_idx, obj in enumerate(root.iter(*NATIVE_OBJECT_TAGS)):
        try:
            parent = _parse_parent(obj)
        except SkippedElementError as exc:
            record_skip(
                warnings,
                exc,
                element=str(obj.tag),
                index=obj_idx,
                label=obj.get("id", ""),
                source=source,
            )
            continue
        parents.append(parent)

        line_points: list[GeoPoint] = []
        for light_idx, light in enumerate(obj.iter(NATIVE_LIGHT_TAG)):
            try:
                fixture = _parse_light(light, light_idx, parent, used_ids)
            except SkippedElementError as exc:
                record_skip(
                    warnings,
                    exc,
                    element=NATIVE_LIGHT_TAG,
                    index=light_idx,
                    label=f"{parent.id}_{light_idx}",
                    source=source,
                )
                continue
            fixtures.append(fixture)
            if fixture.on_centerline:
                line_points.append(fixture.position)

        if len(line_points) >= MIN_CENTERLINE_POINTS:
            centerlines.append(
                Centerline(name=parent.id, kind=parent.kind, points=tuple(line_points))
            )
        else:
            logger.debug(
                "Object '%s' has %d centerline light(s); no centerline derived",
                parent.id,
                len(line_points),
            )

    logger.info(
        "Parsed %d object(s), %d light(s), %d centerline(s) from %s (%d skipped)",
        len(parents),
        len(fixtures),
        len(centerlines),
        source,
        len(warnings),
    )
    return FixtureDocument(
        parents=parents, fixtures=fixtures, centerlines=centerlines, warnings=warnings
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_parent(obj: _Element) -> ParentObject:
    object_id = (obj.get("id") or "").strip()
    if not object_id:
        msg = "Object has no id attribute"
        raise SkippedElementError(msg)

    raw_type = obj.get("type")
    if raw_type is None:
        msg = f"Object '{object_id}' has no type attribute"
        raise SkippedElementError(msg)
    kind = FixtureKind.parse(raw_type)
    if kind is None:
        msg = f"Object '{object_id}' has unknown type {raw_type!r}"
        raise SkippedElementError(msg)

    props = obj.find(NATIVE_PROPERTIES_TAG)
    if props is None:
        return ParentObject(id=object_id, kind=kind)

    return ParentObject(
        id=object_id,
        kind=kind,
        default_color=child_text(props, "Color"),
        default_orientation=_orientation(props, object_id),
        default_directionality=_directionality(props, object_id),
        default_elevated=_flag(props, "Elevated"),
    )


def _parse_light(
    light: _Element,
    light_idx: int,
    parent: ParentObject,
    used_ids: set[str],
) -> LightFixture:
    label = f"{parent.id}_{light_idx}"

    raw_position = child_text(light, "Position")
    if raw_position is None:
        msg = f"Light '{label}' has no Position"
        raise SkippedElementError(msg)
    parts = raw_position.split(",")
    if len(parts) != 2:
        msg = f"Light '{label}' Position {raw_position!r} is not 'lat,lng'"
        raise SkippedElementError(msg)
    lat = parse_float(parts[0], "latitude", label)
    lon = parse_float(parts[1], "longitude", label)
    check_position(lat, lon, label)

    raw_heading = child_text(light, "Heading")
    heading = parse_float(raw_heading, "Heading", label) if raw_heading is not None else 0.0

    props = light.find(NATIVE_PROPERTIES_TAG)
    color = orientation = directionality = elevated = None
    ihp = False
    if props is not None:
        color = child_text(props, "Color")
        orientation = _orientation(props, label)
        directionality = _directionality(props, label)
        elevated = _flag(props, "Elevated")
        ihp = bool(_flag(props, "IHP"))

    if elevated is None:
        elevated = bool(parent.default_elevated)

    fixture_id = _unique_id(label, used_ids)
    common = {
        "id": fixture_id,
        "position": GeoPoint(lat=lat, lon=lon),
        "heading_deg": heading,
        "parent_object_id": parent.id,
        "elevated": elevated,
        "ihp": ihp,
    }

    if parent.kind is FixtureKind.STOPBAR:
        return StopbarLight(
            **common,
            directionality=directionality
            or parent.default_directionality
            or DEFAULT_DIRECTIONALITY,
        )
    if parent.kind is FixtureKind.LEAD_ON:
        return LeadOnLight(**common, color=color or parent.default_color or DEFAULT_COLOR)
    if parent.kind is FixtureKind.TAXIWAY:
        return TaxiwayLight(
            **common,
            color=color or parent.default_color or DEFAULT_COLOR,
            orientation=orientation or parent.default_orientation or DEFAULT_ORIENTATION,
        )
    return StandLight(**common)


def _unique_id(base_id: str, used_ids: set[str]) -> str:
    """Return ``base_id`` or ``base_id__<n>`` for the first unused n."""
    unique = base_id
    dup = 1
    while unique in used_ids:
        unique = f"{base_id}__{dup}"
        dup += 1
    used_ids.add(unique)
    return unique


def _flag(props: _Element, tag: str) -> bool | None:
    raw = child_text(props, tag)
    if raw is None:
        return None
    return raw.lower() == "true"


def _orientation(props: _Element, label: str) -> Orientation | None:
    raw = child_text(props, "Orientation")
    if raw is None:
        return None
    value = Orientation.parse(raw)
    if value is None:
        msg = f"'{label}' has unknown Orientation {raw!r}"
        raise SkippedElementError(msg)
    return value


def _directionality(props: _Element, label: str) -> Directionality | None:
    raw = child_text(props, "Directionality")
    if raw is None:
        return None
    value = Directionality.parse(raw)
    if value is None:
        msg = f"'{label}' has unknown Directionality {raw!r}"
        raise SkippedElementError(msg)
    return value
