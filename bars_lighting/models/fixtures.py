"""Light fixture models.

A ``ParentObject`` groups fixtures that share placement semantics and
supplies their property defaults.  Each fixture kind has its own variant
carrying only the properties that kind has:

- ``StopbarLight``: directionality (``uni`` / ``bi``)
- ``LeadOnLight``: colour
- ``TaxiwayLight``: colour and orientation
- ``StandLight``: no kind-specific properties

Fixtures reference their parent by id rather than embedding it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from bars_lighting.models.geo import FixtureKind

if TYPE_CHECKING:
    from bars_lighting.models.geo import GeoPoint


class Orientation(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"

    @classmethod
    def parse(cls, raw: str) -> Orientation | None:
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class Directionality(enum.Enum):
    UNI = "uni"
    BI = "bi"

    @classmethod
    def parse(cls, raw: str) -> Directionality | None:
        value = raw.strip().lower()
        if value in ("bi", "bi-directional", "bidirectional"):
            return cls.BI
        if value in ("uni", "uni-directional", "unidirectional"):
            return cls.UNI
        return None


# Type defaults, applied when neither the light nor its parent specify a value
DEFAULT_COLOR = "green"
DEFAULT_ORIENTATION = Orientation.BOTH
DEFAULT_DIRECTIONALITY = Directionality.UNI


@dataclass(frozen=True, slots=True)
class ParentObject:
    """A fixture group, e.g. one stopbar.

    Attributes:
        id: Object id, reused by every ``Light`` of the group.
        kind: Fixture kind shared by the group.
        default_color: Object-level ``Color``, if given.
        default_orientation: Object-level ``Orientation``, if given.
        default_directionality: Object-level ``Directionality``, if given.
        default_elevated: Object-level ``Elevated``, if given.
    """

    id: str
    kind: FixtureKind
    default_color: str | None = None
    default_orientation: Orientation | None = None
    default_directionality: Directionality | None = None
    default_elevated: bool | None = None


@dataclass(frozen=True, slots=True)
class LightFixture:
    """Fields common to every light emitter.

    Attributes:
        id: Document-unique fixture id (``<object_id>_<index>``).
        position: Emitter position.
        heading_deg: Emitter heading in degrees.
        parent_object_id: Id of the owning ``ParentObject``.
        elevated: Elevated (edge) fixture rather than in-pavement.
        ihp: Intermediate holding position fixture.
    """

    kind: ClassVar[FixtureKind]

    id: str
    position: GeoPoint
    heading_deg: float
    parent_object_id: str
    elevated: bool = False
    ihp: bool = False

    @property
    def on_centerline(self) -> bool:
        """Whether this fixture contributes to its group's centerline."""
        return not self.elevated and not self.ihp

    def to_dict(self) -> dict[str, object]:
        """Serialise for API transport, including kind-specific fields."""
        data: dict[str, object] = {
            "id": self.id,
            "kind": self.kind.value,
            "position": [self.position.lat, self.position.lon],
            "heading_deg": self.heading_deg,
            "parent_object_id": self.parent_object_id,
            "elevated": self.elevated,
            "ihp": self.ihp,
        }
        data.update(self._kind_fields())
        return data

    def _kind_fields(self) -> dict[str, object]:
        return {}


@dataclass(frozen=True, slots=True)
class StopbarLight(LightFixture):
    kind: ClassVar[FixtureKind] = FixtureKind.STOPBAR

    directionality: Directionality = DEFAULT_DIRECTIONALITY

    def _kind_fields(self) -> dict[str, object]:
        return {"directionality": self.directionality.value}


@dataclass(frozen=True, slots=True)
class LeadOnLight(LightFixture):
    kind: ClassVar[FixtureKind] = FixtureKind.LEAD_ON

    color: str = DEFAULT_COLOR

    def _kind_fields(self) -> dict[str, object]:
        return {"color": self.color}


@dataclass(frozen=True, slots=True)
class TaxiwayLight(LightFixture):
    kind: ClassVar[FixtureKind] = FixtureKind.TAXIWAY

    color: str = DEFAULT_COLOR
    orientation: Orientation = DEFAULT_ORIENTATION

    def _kind_fields(self) -> dict[str, object]:
        return {"color": self.color, "orientation": self.orientation.value}


@dataclass(frozen=True, slots=True)
class StandLight(LightFixture):
    kind: ClassVar[FixtureKind] = FixtureKind.STAND
