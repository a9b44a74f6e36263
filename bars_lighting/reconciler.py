"""Point reconciler: keep stopbar identifiers stable across resubmissions.

A newly generated legacy document names its stopbars generically
(``A--01``, ``A--02``, ...).  The reconciler pairs each of them with the
nearest stopbar of the previously approved reference set and relabels the
new document with the reference names and runways.

Matching is greedy, not a globally optimal assignment: targets are taken
in document order, each claims the nearest still-unused reference that is
strictly closer than the threshold, and ties go to the first reference in
document order.  Relabeling depends on this order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bars_lighting.core.config import LightingConfig
from bars_lighting.core.constants import MILLIARCSECONDS_PER_DEGREE
from bars_lighting.dialects.legacy import parse_legacy_document, relabel
from bars_lighting.geometry.codec import decode_point
from bars_lighting.models.legacy import Mapping
from bars_lighting.models.payloads import parse_submissions

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from bars_lighting.models.documents import ParseWarning
    from bars_lighting.models.geo import GeoPoint
    from bars_lighting.models.legacy import LegacyStopBarRecord

logger = logging.getLogger("bars_lighting.reconciler")

__all__ = [
    "ReconcileResult",
    "match_points",
    "reconcile_documents",
    "reconcile_submission",
    "relabel",
    "representative_point",
    "select_reference_xml",
]


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome of one reconciliation.

    Attributes:
        xml: The relabeled target document (unchanged when nothing matched).
        mappings: Target-to-reference pairs, in target order.
        warnings: Elements skipped while parsing the target and reference.
    """

    xml: str
    mappings: list[Mapping] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def representative_point(record: LegacyStopBarRecord) -> GeoPoint:
    """Decode the middle point of a stopbar.

    Raises:
        ValueError: If the record has no points.
        MalformedTokenError: If the middle token cannot be decoded.
        InvalidCoordinateError: If the middle token decodes out of range.
    """
    return decode_point(record.representative_token)


def _to_grid(point: GeoPoint) -> tuple[int, int]:
    """``(lat, lon)`` in whole milli-arc-seconds, the resolution of a token."""
    return (
        round(point.lat * MILLIARCSECONDS_PER_DEGREE),
        round(point.lon * MILLIARCSECONDS_PER_DEGREE),
    )


def match_points(
    targets: Sequence[LegacyStopBarRecord],
    references: Sequence[LegacyStopBarRecord],
    *,
    threshold_deg: float | None = None,
    config: LightingConfig | None = None,
) -> list[Mapping]:
    """Greedily pair each target with its nearest unused reference.

    A reference qualifies only when its squared distance to the target is
    strictly below ``threshold_deg ** 2``; each reference name is used at
    most once.  Unmatched targets produce no mapping.

    Distances are compared in whole milli-arc-seconds, the resolution of
    a coordinate token, so two tokens exactly ``threshold_deg`` apart never
    match regardless of floating-point error in the decoded degrees.

    Args:
        targets: Stopbars to relabel, in document order.
        references: Previously approved stopbars, in document order.
        threshold_deg: Match distance in decimal degrees (defaults to
            ``config.match_threshold_deg``).
        config: Engine configuration (defaults to ``LightingConfig()``).

    Raises:
        ValueError: If a record has no points.
        MalformedTokenError: If a representative token cannot be decoded.
        InvalidCoordinateError: If a representative token decodes out of range.
    """
    config = config or LightingConfig()
    threshold = config.match_threshold_deg if threshold_deg is None else threshold_deg
    threshold_sq = round(threshold * MILLIARCSECONDS_PER_DEGREE) ** 2

    reference_points = [(ref.name, _to_grid(representative_point(ref))) for ref in references]
    used: set[str] = set()
    mappings: list[Mapping] = []

    for target in targets:
        target_lat, target_lon = _to_grid(representative_point(target))
        best_name: str | None = None
        best_distance = threshold_sq

        for ref_name, (ref_lat, ref_lon) in reference_points:
            if ref_name in used:
                continue
            distance = (target_lat - ref_lat) ** 2 + (target_lon - ref_lon) ** 2
            logger.debug(
                "Candidate %s -> %s: distance^2=%d mas^2 (best %d)",
                target.name,
                ref_name,
                distance,
                best_distance,
            )
            if distance < best_distance:
                best_distance = distance
                best_name = ref_name

        if best_name is None:
            logger.debug("No reference within %.6f deg of %s", threshold, target.name)
            continue
        used.add(best_name)
        mappings.append(Mapping(target_name=target.name, reference_name=best_name))
        logger.debug("Matched %s -> %s", target.name, best_name)

    logger.info("Matched %d of %d stopbar(s)", len(mappings), len(targets))
    return mappings


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


def reconcile_documents(
    target_xml: str | bytes,
    reference_xml: str | bytes,
    *,
    config: LightingConfig | None = None,
) -> ReconcileResult:
    """Match and relabel a target ``<Bars>`` document against a reference one.

    Raises:
        MalformedDocumentError: If either document is not a ``<Bars>`` document.
    """
    reference_doc = parse_legacy_document(reference_xml, source="reference XML")
    result = _reconcile(target_xml, reference_doc.records, config=config)
    return ReconcileResult(
        xml=result.xml,
        mappings=result.mappings,
        warnings=[*result.warnings, *reference_doc.warnings],
    )


def reconcile_submission(
    target_xml: str | bytes,
    airport_id: str,
    fetch_reference_set: Callable[[str], Sequence[LegacyStopBarRecord]],
    *,
    config: LightingConfig | None = None,
) -> ReconcileResult:
    """Reconcile a target document against the airport's approved stopbars.

    ``fetch_reference_set`` retrieves the reference records; its own
    failures (network, timeouts) propagate unchanged.

    Raises:
        MalformedDocumentError: If the target is not a ``<Bars>`` document.
    """
    references = list(fetch_reference_set(airport_id))
    logger.info("Fetched %d reference stopbar(s) for %s", len(references), airport_id)
    return _reconcile(target_xml, references, config=config)


def select_reference_xml(payload: Any, airport_icao: str) -> str | None:
    """Return the first approved submission's XML for an airport, if any.

    Raises:
        PayloadContractError: If the payload does not match the schema.
    """
    submissions = parse_submissions(payload).submissions.get(airport_icao.upper(), [])
    if not submissions:
        logger.info("No approved submissions for %s", airport_icao)
        return None
    logger.info(
        "Using submission %s of %d for %s",
        submissions[0].id,
        len(submissions),
        airport_icao,
    )
    return submissions[0].xml_data


def _reconcile(
    target_xml: str | bytes,
    references: Sequence[LegacyStopBarRecord],
    *,
    config: LightingConfig | None,
) -> ReconcileResult:
    target_doc = parse_legacy_document(target_xml, source="target XML")

    if references:
        mappings = match_points(target_doc.records, references, config=config)
    else:
        logger.info("No reference stopbars; target document left unchanged")
        mappings = []

    # With no mappings relabel only decodes the text, leaving it unchanged
    return ReconcileResult(
        xml=relabel(target_xml, mappings, references),
        mappings=mappings,
        warnings=list(target_doc.warnings),
    )
