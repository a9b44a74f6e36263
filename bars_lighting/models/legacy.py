"""Legacy stopbar models (``<Bars>`` dialect) and reconciler mappings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LegacyStopBarRecord:
    """One ``<StopBar>`` element.

    Point tokens are kept verbatim; decode them with
    ``bars_lighting.geometry.codec.decode_point`` when a position is needed.

    Attributes:
        name: ``<Name>`` text.
        runway: ``<Runway>`` text (``"NN[LCR]/NN[LCR]"``), if present.
        points: ``<Point>`` tokens in document order.
    """

    name: str
    runway: str | None = None
    points: tuple[str, ...] = ()

    @property
    def representative_token(self) -> str:
        """The middle point token (index ``len // 2``)."""
        if not self.points:
            msg = f"StopBar '{self.name}' has no points"
            raise ValueError(msg)
        return self.points[len(self.points) // 2]

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "runway": self.runway, "points": list(self.points)}


@dataclass(frozen=True, slots=True)
class Mapping:
    """A target stopbar matched to a reference stopbar by the reconciler."""

    target_name: str
    reference_name: str
