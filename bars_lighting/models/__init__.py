"""Data models and schemas.

Defines the canonical model shared by every dialect:
- GeoPoint, Centerline, BufferedPolygon, RemoveArea: geometry values
- ParentObject and the LightFixture variants: native fixtures
- LegacyStopBarRecord, Mapping: legacy stopbars and reconciler output
- *Document / ParseWarning: per-dialect parse results
- AirportPoint, SubmissionsResponse: collaborator JSON payloads
"""

from bars_lighting.models.documents import (
    DocumentValidation,
    FixtureDocument,
    LegacyConversion,
    LegacyDocument,
    ParseWarning,
    PolygonDocument,
    RemoveAreaDocument,
)
from bars_lighting.models.fixtures import (
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
    BufferedPolygon,
    Centerline,
    FixtureKind,
    GeoPoint,
    RemoveArea,
    RemoveAreaSource,
)
from bars_lighting.models.legacy import LegacyStopBarRecord, Mapping

__all__ = [
    "BufferedPolygon",
    "Centerline",
    "Directionality",
    "DocumentValidation",
    "FixtureDocument",
    "FixtureKind",
    "GeoPoint",
    "LeadOnLight",
    "LegacyConversion",
    "LegacyDocument",
    "LegacyStopBarRecord",
    "LightFixture",
    "Mapping",
    "Orientation",
    "ParentObject",
    "ParseWarning",
    "PolygonDocument",
    "RemoveArea",
    "RemoveAreaDocument",
    "RemoveAreaSource",
    "StandLight",
    "StopbarLight",
    "TaxiwayLight",
]
