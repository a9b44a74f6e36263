"""Unified exception taxonomy.

Every domain exception inherits from ``LightingError`` and carries
structured context fields so callers (the upload and review screens, the
generator endpoint) can report failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``:   input violations (bad coordinate, bad token,
  degenerate geometry, a single skipped element). Never retryable.
- ``PermanentError``:    a whole document cannot be processed.
- ``ContractError``:     collaborator payload drift (airport points,
  approved submissions JSON). Never retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for API responses and logging.
"""

from __future__ import annotations


class LightingError(Exception):
    """Base exception for all lighting-engine errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"codec"``, ``"geometry"``, ``"parse_xml"``).
        code: Machine-readable error code (e.g. ``"MALFORMED_TOKEN"``).
        retryable: Whether retrying the same call could succeed.
        correlation_id: Request correlation identifier supplied by the caller.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(LightingError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(LightingError):
    """Unrecoverable failure for the whole input. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(LightingError):
    """Collaborator payload does not match the expected schema. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Codec and geometry errors
# ---------------------------------------------------------------------------


class InvalidCoordinateError(ValidationError):
    """Raised when a latitude/longitude is outside its degree range."""

    default_stage = "codec"
    default_code = "INVALID_COORDINATE"


class MalformedTokenError(ValidationError):
    """Raised when a legacy coordinate token is structurally unparseable."""

    default_stage = "codec"
    default_code = "MALFORMED_TOKEN"


class DegenerateGeometryError(ValidationError):
    """Raised when a geometry has fewer vertices or less extent than required."""

    default_stage = "geometry"
    default_code = "DEGENERATE_GEOMETRY"


# ---------------------------------------------------------------------------
# Document errors
# ---------------------------------------------------------------------------


class MalformedDocumentError(PermanentError):
    """Raised when a document is not well-formed XML or not the expected dialect."""

    default_stage = "parse_xml"
    default_code = "MALFORMED_DOCUMENT"


class SkippedElementError(ValidationError):
    """Raised by a per-element parser when one element fails local validation.

    Document parsers catch this, log it and record a ``ParseWarning``;
    it never escapes a document-level parse.
    """

    default_stage = "parse_xml"
    default_code = "SKIPPED_ELEMENT"


class InvalidRunwayError(SkippedElementError):
    """Raised when a runway designation is not ``NN[LCR]/NN[LCR]``."""

    default_code = "INVALID_RUNWAY"


class PayloadContractError(ContractError):
    """Raised when collaborator JSON fails schema validation."""

    default_stage = "payload"
    default_code = "PAYLOAD_CONTRACT_VIOLATION"
