"""Tests for collaborator payload schemas.

Validates:
- ``parse_airport_points`` accepts the airport points endpoint shape
- ``parse_submissions`` accepts the approved submissions shape (camelCase aliases)
- Schema drift raises ``PayloadContractError`` with the offending field named
"""

from __future__ import annotations

import pytest

from bars_lighting.core.exceptions import ContractError, PayloadContractError
from bars_lighting.models.payloads import (
    AirportPoint,
    ApprovedSubmission,
    parse_airport_points,
    parse_submissions,
)


class TestAirportPoints:
    def test_minimal_point(self) -> None:
        points = parse_airport_points([{"id": "SB1", "type": "stopbar"}])
        assert points == [AirportPoint(id="SB1", type="stopbar")]
        assert points[0].coordinates == []

    def test_full_point(self) -> None:
        point = parse_airport_points(
            [
                {
                    "id": 7,
                    "type": "taxiway",
                    "name": "B",
                    "coordinates": [{"lat": "47.1", "lng": 8.5}],
                    "color": "green",
                    "elevated": True,
                    "ihp": False,
                }
            ]
        )[0]
        assert point.id == "7"
        assert point.coordinates[0].lat == 47.1
        assert point.elevated is True

    def test_missing_type_rejected(self) -> None:
        with pytest.raises(PayloadContractError, match="type"):
            parse_airport_points([{"id": "SB1"}])

    def test_non_list_rejected(self) -> None:
        with pytest.raises(PayloadContractError):
            parse_airport_points({"id": "SB1", "type": "stopbar"})

    def test_bad_coordinate_rejected(self) -> None:
        with pytest.raises(PayloadContractError, match="lng"):
            parse_airport_points([{"id": "SB1", "type": "stopbar", "coordinates": [{"lat": 1}]}])


class TestSubmissions:
    def test_aliases(self) -> None:
        response = parse_submissions(
            {"submissions": {"KSEA": [{"id": "s1", "airportICAO": "KSEA", "xmlData": "<Bars/>"}]}}
        )
        submission = response.submissions["KSEA"][0]
        assert submission == ApprovedSubmission(id="s1", airport_icao="KSEA", xml_data="<Bars/>")

    def test_empty(self) -> None:
        assert parse_submissions({}).submissions == {}

    def test_wrong_shape_rejected(self) -> None:
        with pytest.raises(PayloadContractError, match="submissions"):
            parse_submissions({"submissions": ["<Bars/>"]})

    def test_error_is_contract_category(self) -> None:
        with pytest.raises(ContractError) as exc_info:
            parse_submissions({"submissions": None})
        assert exc_info.value.category == "contract"
        assert exc_info.value.code == "PAYLOAD_CONTRACT_VIOLATION"
        assert exc_info.value.stage == "payload"
