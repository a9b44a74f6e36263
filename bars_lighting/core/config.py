"""Engine configuration loaded from environment variables.

All values have defaults matching the behaviour of the web generator,
so the engine works unconfigured.  Deployments override them through
the ``BARS_*`` environment variables.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from bars_lighting.core.constants import (
    DEFAULT_FSDATA_VERSION,
    DEFAULT_MATCH_THRESHOLD_DEG,
    DEFAULT_PADDING_M,
    DEFAULT_POLYGON_VERSION,
)
from bars_lighting.core.exceptions import LightingError


class ConfigValidationError(LightingError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class LightingConfig:
    """Immutable engine configuration.

    Attributes:
        buffer_padding_m: Distance in metres a remove polygon extends
            around its centerline.
        match_threshold_deg: Reconciler distance threshold in decimal
            degrees; a reference matches only when strictly closer.
        draft_altitude_m: Altitude written on every generated polygon.
        polygon_version: ``version`` attribute of generated ``<Polygon>`` elements.
        fsdata_version: ``version`` attribute of the generated ``<FSData>`` root.
    """

    buffer_padding_m: float = DEFAULT_PADDING_M
    match_threshold_deg: float = DEFAULT_MATCH_THRESHOLD_DEG
    draft_altitude_m: float = 0.0
    polygon_version: str = DEFAULT_POLYGON_VERSION
    fsdata_version: str = DEFAULT_FSDATA_VERSION

    @classmethod
    def from_env(cls) -> LightingConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``BARS_BUFFER_PADDING_M=abc``).
        """
        config = cls(
            buffer_padding_m=float(os.getenv("BARS_BUFFER_PADDING_M", str(DEFAULT_PADDING_M))),
            match_threshold_deg=float(
                os.getenv("BARS_MATCH_THRESHOLD_DEG", str(DEFAULT_MATCH_THRESHOLD_DEG))
            ),
            draft_altitude_m=float(os.getenv("BARS_DRAFT_ALTITUDE_M", "0")),
            polygon_version=os.getenv("BARS_POLYGON_VERSION", DEFAULT_POLYGON_VERSION),
            fsdata_version=os.getenv("BARS_FSDATA_VERSION", DEFAULT_FSDATA_VERSION),
        )
        _validate(config)
        return config


def _validate(config: LightingConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.buffer_padding_m > 0:
        raise ConfigValidationError(
            "BARS_BUFFER_PADDING_M",
            config.buffer_padding_m,
            "must be > 0 (metres)",
        )

    if not config.match_threshold_deg > 0:
        raise ConfigValidationError(
            "BARS_MATCH_THRESHOLD_DEG",
            config.match_threshold_deg,
            "must be > 0 (decimal degrees)",
        )

    if not math.isfinite(config.draft_altitude_m):
        raise ConfigValidationError(
            "BARS_DRAFT_ALTITUDE_M",
            config.draft_altitude_m,
            "must be a finite number (metres)",
        )

    if not config.polygon_version:
        raise ConfigValidationError(
            "BARS_POLYGON_VERSION",
            config.polygon_version,
            "must not be empty",
        )

    if not config.fsdata_version:
        raise ConfigValidationError(
            "BARS_FSDATA_VERSION",
            config.fsdata_version,
            "must not be empty",
        )
