"""Parse results for each XML dialect.

Parsing is fatal at the document level and tolerant at the element
level: every result carries the partial data that parsed plus one
``ParseWarning`` per element that was skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bars_lighting.models.fixtures import LightFixture, ParentObject
    from bars_lighting.models.geo import Centerline, RemoveArea
    from bars_lighting.models.legacy import LegacyStopBarRecord


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """A single element excluded from a parse result.

    Attributes:
        element: Tag of the skipped element (e.g. ``"Polygon"``).
        index: Zero-based position among elements of the same tag.
        label: Display name or id of the element, when known.
        reason: Human-readable explanation.
        code: Machine-readable code of the underlying error.
    """

    element: str
    index: int
    label: str
    reason: str
    code: str = "SKIPPED_ELEMENT"

    def to_dict(self) -> dict[str, object]:
        return {
            "element": self.element,
            "index": self.index,
            "label": self.label,
            "reason": self.reason,
            "code": self.code,
        }


@dataclass(frozen=True, slots=True)
class FixtureDocument:
    """Result of parsing the native fixture dialect."""

    parents: list[ParentObject] = field(default_factory=list)
    fixtures: list[LightFixture] = field(default_factory=list)
    centerlines: list[Centerline] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RemoveAreaDocument:
    """Result of parsing the rectangle support dialect."""

    areas: list[RemoveArea] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PolygonDocument:
    """Result of parsing the generic polygon dialect."""

    centerlines: list[Centerline] = field(default_factory=list)
    remove_areas: list[RemoveArea] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LegacyDocument:
    """Result of parsing the legacy token dialect."""

    records: list[LegacyStopBarRecord] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LegacyConversion:
    """Result of converting a polygon document to the legacy dialect."""

    xml: str
    records: list[LegacyStopBarRecord] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DocumentValidation:
    """Whole-document verdict for an uploaded file.

    Unlike parsing, validation does not skip bad elements: the first
    problem found makes the document invalid.
    """

    is_valid: bool
    error: str | None = None
    code: str | None = None

    @classmethod
    def valid(cls) -> DocumentValidation:
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, error: str, code: str) -> DocumentValidation:
        return cls(is_valid=False, error=error, code=code)

    def to_dict(self) -> dict[str, object]:
        return {"is_valid": self.is_valid, "error": self.error, "code": self.code}
