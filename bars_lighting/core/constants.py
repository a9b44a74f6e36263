"""Shared engine constants: single source of truth.

Centralises degree bounds, geodesy parameters and the generator defaults
used across the codec, geometry kernel, dialects and reconciler.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# WGS 84 degree bounds
# ---------------------------------------------------------------------------

MAX_LATITUDE: float = 90.0
MAX_LONGITUDE: float = 180.0

# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------

EARTH_RADIUS_M: float = 6_371_000.0
"""Mean Earth radius used by all bearing/destination computations."""

# ---------------------------------------------------------------------------
# Generator and reconciler defaults
# ---------------------------------------------------------------------------

DEFAULT_PADDING_M: float = 1.0
"""Default remove-polygon padding around a centerline, in metres."""

DEFAULT_MATCH_THRESHOLD_DEG: float = 0.0004
"""Reconciler match threshold in decimal degrees (~44 m at the equator)."""

MILLIARCSECONDS_PER_DEGREE: int = 3_600_000
"""Coordinate tokens resolve to 0.001 arc-second; the reconciler compares on this grid."""

DEFAULT_POLYGON_VERSION: str = "0.4.0"
DEFAULT_FSDATA_VERSION: str = "9.0"

UNIQUE_GUID_ATTRIBUTE_GUID: str = "{359C73E8-06BE-4FB2-ABCB-EC942F7761D0}"
"""Fixed ``guid`` of the ``UniqueGUID`` attribute definition in polygon XML."""

REMOVE_DISPLAY_NAME: str = "remove"
