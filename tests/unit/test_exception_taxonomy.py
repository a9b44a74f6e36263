"""Tests for the unified exception taxonomy.

Validates:
- LightingError hierarchy and structured attributes
- Category classification (validation, permanent, contract)
- ``to_error_dict()`` produces stable payload keys
- Every domain exception has a default stage and code
"""

from __future__ import annotations

from typing import ClassVar

from bars_lighting.core.config import ConfigValidationError
from bars_lighting.core.exceptions import (
    ContractError,
    DegenerateGeometryError,
    InvalidCoordinateError,
    InvalidRunwayError,
    LightingError,
    MalformedDocumentError,
    MalformedTokenError,
    PayloadContractError,
    PermanentError,
    SkippedElementError,
    ValidationError,
)


class TestLightingErrorBase:
    """LightingError base class behavior."""

    def test_default_attributes(self) -> None:
        err = LightingError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = LightingError(
            "fail",
            stage="reconcile",
            code="FETCH_FAILED",
            retryable=True,
            correlation_id="abc-123",
        )
        assert err.stage == "reconcile"
        assert err.code == "FETCH_FAILED"
        assert err.retryable is True
        assert err.correlation_id == "abc-123"

    def test_str_is_message(self) -> None:
        assert str(LightingError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        err = LightingError("x", stage="s", code="C", retryable=True, correlation_id="id")
        d = err.to_error_dict()
        assert set(d.keys()) == {
            "category",
            "code",
            "stage",
            "message",
            "retryable",
            "correlation_id",
        }
        assert d["message"] == "x"
        assert d["category"] == "transient"


class TestCategoryBases:
    """Category base classes set correct defaults."""

    def test_validation_error_not_retryable(self) -> None:
        err = ValidationError("bad input")
        assert err.retryable is False
        assert err.category == "validation"

    def test_permanent_error_not_retryable(self) -> None:
        err = PermanentError("gone")
        assert err.retryable is False
        assert err.category == "permanent"

    def test_contract_error_not_retryable(self) -> None:
        err = ContractError("schema drift")
        assert err.retryable is False
        assert err.category == "contract"

    def test_dynamic_category_from_retryable(self) -> None:
        assert LightingError("x", retryable=True).category == "transient"
        assert LightingError("x", retryable=False).category == "permanent"


class TestAllExceptionsAreLightingError:
    """Every custom exception inherits from LightingError."""

    EXCEPTION_CLASSES: ClassVar[list[type[LightingError]]] = [
        InvalidCoordinateError,
        MalformedTokenError,
        DegenerateGeometryError,
        MalformedDocumentError,
        SkippedElementError,
        InvalidRunwayError,
        PayloadContractError,
        ConfigValidationError,
    ]

    def test_all_subclass_lighting_error(self) -> None:
        for cls in self.EXCEPTION_CLASSES:
            assert issubclass(cls, LightingError), f"{cls.__name__} is not a LightingError"


class TestDomainExceptionStageAndCode:
    """Every domain exception has a default stage and code."""

    def test_invalid_coordinate(self) -> None:
        err = InvalidCoordinateError("lat 91")
        assert (err.stage, err.code, err.category) == ("codec", "INVALID_COORDINATE", "validation")

    def test_malformed_token(self) -> None:
        err = MalformedTokenError("bad")
        assert (err.stage, err.code) == ("codec", "MALFORMED_TOKEN")

    def test_degenerate_geometry(self) -> None:
        err = DegenerateGeometryError("one point")
        assert (err.stage, err.code) == ("geometry", "DEGENERATE_GEOMETRY")

    def test_malformed_document_is_permanent(self) -> None:
        err = MalformedDocumentError("not xml")
        assert (err.stage, err.code, err.category) == (
            "parse_xml",
            "MALFORMED_DOCUMENT",
            "permanent",
        )

    def test_skipped_element_code_override(self) -> None:
        err = SkippedElementError("bad vertex", code="INVALID_COORDINATE")
        assert err.code == "INVALID_COORDINATE"
        assert err.stage == "parse_xml"

    def test_invalid_runway_is_skipped_element(self) -> None:
        err = InvalidRunwayError("6/24")
        assert isinstance(err, SkippedElementError)
        assert (err.stage, err.code) == ("parse_xml", "INVALID_RUNWAY")

    def test_payload_contract(self) -> None:
        err = PayloadContractError("drift")
        assert (err.stage, err.code, err.category) == (
            "payload",
            "PAYLOAD_CONTRACT_VIOLATION",
            "contract",
        )

    def test_config_validation_message(self) -> None:
        err = ConfigValidationError("BARS_BUFFER_PADDING_M", -1.0, "must be > 0 (metres)")
        assert err.message == (
            "Invalid configuration BARS_BUFFER_PADDING_M=-1.0: must be > 0 (metres)"
        )
        assert err.to_error_dict()["stage"] == "config"
