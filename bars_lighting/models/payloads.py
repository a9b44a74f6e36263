"""Pydantic models for JSON supplied by external collaborators.

The HTTP layer fetches these payloads; the engine only validates them at
the boundary before turning them into canonical records:

- **airport points**: ``[{id, type, name, coordinates: [{lat, lng}], ...}]``,
  the mapped fixture groups of one airport, used for draft generation.
- **approved submissions**: ``{"submissions": {ICAO: [{id, airportICAO,
  xmlData}]}}``, the reference set for reconciliation.

Schema drift surfaces as ``PayloadContractError``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bars_lighting.core.exceptions import PayloadContractError


class PointCoordinate(BaseModel):
    """One vertex of an airport point, in decimal degrees."""

    lat: float
    lng: float


class AirportPoint(BaseModel):
    """A mapped fixture group returned by the airport points endpoint.

    Attributes:
        id: Point identifier; becomes the centerline name.
        type: Fixture kind (``stopbar``, ``lead_on``, ``taxiway``, ``stand``).
        name: Human-readable name.
        coordinates: Ordered centerline vertices.
        directionality: Stopbar directionality, if set.
        color: Lead-on / taxiway colour, if set.
        elevated: Elevated fixture flag, if set.
        ihp: Intermediate holding position flag, if set.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    type: str
    name: str = ""
    coordinates: list[PointCoordinate] = Field(default_factory=list)
    directionality: str | None = None
    color: str | None = None
    elevated: bool | None = None
    ihp: bool | None = None


class ApprovedSubmission(BaseModel):
    """One approved contribution for an airport."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    airport_icao: str = Field(default="", alias="airportICAO")
    xml_data: str = Field(alias="xmlData")


class SubmissionsResponse(BaseModel):
    """Approved submissions keyed by airport ICAO code."""

    submissions: dict[str, list[ApprovedSubmission]] = Field(default_factory=dict)


_AIRPORT_POINTS = TypeAdapter(list[AirportPoint])


def parse_airport_points(payload: Any) -> list[AirportPoint]:
    """Validate an airport points payload.

    Raises:
        PayloadContractError: If the payload does not match the schema.
    """
    try:
        return _AIRPORT_POINTS.validate_python(payload)
    except PydanticValidationError as exc:
        msg = f"Airport points payload failed validation: {exc.error_count()} error(s): {exc}"
        raise PayloadContractError(msg) from exc


def parse_submissions(payload: Any) -> SubmissionsResponse:
    """Validate an approved submissions payload.

    Raises:
        PayloadContractError: If the payload does not match the schema.
    """
    try:
        return SubmissionsResponse.model_validate(payload)
    except PydanticValidationError as exc:
        msg = f"Submissions payload failed validation: {exc.error_count()} error(s): {exc}"
        raise PayloadContractError(msg) from exc
