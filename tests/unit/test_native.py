"""Tests for the native fixture dialect parser.

Covers:
- Parent objects (<Object> and <BarsObject>) and their kinds
- Property precedence: light over object over type default
- Centerline derivation from non-elevated, non-IHP lights
- Fixture id assignment and de-duplication
- Element-level skips recorded as ParseWarning
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest

from bars_lighting.core.exceptions import MalformedDocumentError
from bars_lighting.dialects.native import parse_native_document
from bars_lighting.models.fixtures import (
    Directionality,
    LeadOnLight,
    Orientation,
    StopbarLight,
    TaxiwayLight,
)
from bars_lighting.models.geo import FixtureKind, GeoPoint

if TYPE_CHECKING:
    from bars_lighting.models.documents import FixtureDocument


def _fixture(doc: FixtureDocument, fixture_id: str) -> Any:
    return next(f for f in doc.fixtures if f.id == fixture_id)


class TestSampleDocument:
    """Parse tests/data/native_fixtures.xml."""

    def test_counts(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        assert [p.id for p in doc.parents] == ["SB_A1", "LO_A1", "TW_B"]
        assert len(doc.fixtures) == 6
        assert len(doc.centerlines) == 1
        assert len(doc.warnings) == 3

    def test_parent_kinds(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        assert [p.kind for p in doc.parents] == [
            FixtureKind.STOPBAR,
            FixtureKind.LEAD_ON,
            FixtureKind.TAXIWAY,
        ]

    def test_stopbar_centerline(self, native_xml: str) -> None:
        """Two non-elevated stopbar lights form the centerline; the elevated one does not."""
        doc = parse_native_document(native_xml)
        centerline = doc.centerlines[0]
        assert centerline.name == "SB_A1"
        assert centerline.kind is FixtureKind.STOPBAR
        assert centerline.points == (
            GeoPoint(lat=47.4647, lon=-122.3080),
            GeoPoint(lat=47.4648, lon=-122.3075),
        )

    def test_centerline_normalized_to_three_points(self, native_xml: str) -> None:
        normalized = parse_native_document(native_xml).centerlines[0].normalized()
        assert len(normalized.points) == 3
        assert normalized.points[1].lat == pytest.approx(47.46475)
        assert normalized.points[1].lon == pytest.approx(-122.30775)

    def test_fixture_ids(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        assert [f.id for f in doc.fixtures] == [
            "SB_A1_0",
            "SB_A1_1",
            "SB_A1_2",
            "LO_A1_0",
            "LO_A1_1",
            "TW_B_0",
        ]

    def test_skipped_elements(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        skipped = {(w.element, w.label): w.code for w in doc.warnings}
        assert skipped == {
            ("Light", "TW_B_1"): "INVALID_COORDINATE",
            ("Light", "TW_B_2"): "SKIPPED_ELEMENT",
            ("Object", "MYSTERY"): "SKIPPED_ELEMENT",
        }

    def test_skips_logged(self, native_xml: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="bars_lighting.dialects"):
            parse_native_document(native_xml, source="KSEA.xml")
        assert "MYSTERY" in caplog.text
        assert "KSEA.xml" in caplog.text


class TestPropertyPrecedence:
    """Light-level over object-level over type default."""

    def test_stopbar_directionality_inherited(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        light = _fixture(doc, "SB_A1_0")
        assert isinstance(light, StopbarLight)
        assert light.directionality is Directionality.BI

    def test_stopbar_directionality_overridden(self, native_xml: str) -> None:
        light = _fixture(parse_native_document(native_xml), "SB_A1_1")
        assert light.directionality is Directionality.UNI

    def test_light_elevated_overrides_parent(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        assert _fixture(doc, "SB_A1_2").elevated is True
        assert _fixture(doc, "SB_A1_2").on_centerline is False
        assert _fixture(doc, "SB_A1_0").elevated is False

    def test_lead_on_colour(self, native_xml: str) -> None:
        doc = parse_native_document(native_xml)
        own, inherited = _fixture(doc, "LO_A1_0"), _fixture(doc, "LO_A1_1")
        assert isinstance(own, LeadOnLight)
        assert own.color == "green"
        assert inherited.color == "yellow-green"

    def test_ihp_excluded_from_centerline(self, native_xml: str) -> None:
        light = _fixture(parse_native_document(native_xml), "LO_A1_1")
        assert light.ihp is True
        assert light.on_centerline is False

    def test_missing_heading_defaults_to_zero(self, native_xml: str) -> None:
        assert _fixture(parse_native_document(native_xml), "LO_A1_0").heading_deg == 0.0

    def test_taxiway_defaults(self, native_xml: str) -> None:
        light = _fixture(parse_native_document(native_xml), "TW_B_0")
        assert isinstance(light, TaxiwayLight)
        assert light.orientation is Orientation.RIGHT
        assert light.color == "green"

    def test_type_defaults_without_properties(self) -> None:
        xml = """<Objects>
          <Object id="T1" type="taxiway">
            <Light><Position>1.0,2.0</Position></Light>
          </Object>
          <Object id="S1" type="STOPBAR">
            <Light><Position>1.0,2.0</Position></Light>
          </Object>
        </Objects>"""
        doc = parse_native_document(xml)
        taxiway, stopbar = doc.fixtures
        assert taxiway.orientation is Orientation.BOTH
        assert taxiway.color == "green"
        assert stopbar.directionality is Directionality.UNI

    def test_to_dict_carries_kind_fields(self, native_xml: str) -> None:
        data = _fixture(parse_native_document(native_xml), "TW_B_0").to_dict()
        assert data["kind"] == "taxiway"
        assert data["orientation"] == "right"
        assert data["parent_object_id"] == "TW_B"


class TestEdgeCases:
    def test_duplicate_object_ids_get_suffix(self) -> None:
        xml = """<Objects>
          <Object id="A" type="stand"><Light><Position>1,2</Position></Light></Object>
          <Object id="A" type="stand"><Light><Position>1,3</Position></Light></Object>
          <Object id="A" type="stand"><Light><Position>1,4</Position></Light></Object>
        </Objects>"""
        doc = parse_native_document(xml)
        assert [f.id for f in doc.fixtures] == ["A_0", "A_0__1", "A_0__2"]

    def test_position_must_be_lat_comma_lng(self) -> None:
        xml = """<Objects><Object id="A" type="stand">
          <Light><Position>+473000.000-1221500.000</Position></Light>
        </Object></Objects>"""
        doc = parse_native_document(xml)
        assert doc.fixtures == []
        assert "lat,lng" in doc.warnings[0].reason

    def test_object_without_id_skipped(self) -> None:
        doc = parse_native_document('<Objects><Object type="stand"/></Objects>')
        assert doc.parents == []
        assert doc.warnings[0].reason == "Object has no id attribute"

    def test_document_without_objects_is_empty(self) -> None:
        doc = parse_native_document("<Objects/>")
        assert doc.parents == [] and doc.fixtures == [] and doc.warnings == []

    def test_malformed_document_rejected(self, malformed_xml: str) -> None:
        with pytest.raises(MalformedDocumentError, match="not valid XML"):
            parse_native_document(malformed_xml)

    def test_empty_document_rejected(self) -> None:
        with pytest.raises(MalformedDocumentError, match="empty"):
            parse_native_document("   ")

    def test_entities_not_expanded(self) -> None:
        xml = """<?xml version="1.0"?>
        <!DOCTYPE Objects [<!ENTITY pos "1,2">]>
        <Objects><Object id="A" type="stand">
          <Light><Position>&pos;</Position></Light>
        </Object></Objects>"""
        doc = parse_native_document(xml)
        assert doc.fixtures == []
        assert doc.warnings[0].reason == "Light 'A_0' has no Position"
