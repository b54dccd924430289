"""
Error Model Unit Tests
Tests for tlog_core/schemas/errors.py
"""
import pytest
from pydantic import ValidationError

from tlog_core.schemas.errors import (
    ConfigException,
    ConsistencyCheckFailedException,
    EncodingException,
    ErrorCodes,
    HashPrimitiveUnavailableException,
    InclusionCheckFailedException,
    InvalidRangeException,
    MalformedProofException,
    TlogError,
    TlogException,
)


class TestExceptionHierarchy:
    """Every exception is a TlogException with a stable code."""

    @pytest.mark.parametrize(
        "exc,code",
        [
            (MalformedProofException("m"), ErrorCodes.MALFORMED_PROOF),
            (ConsistencyCheckFailedException("m"), ErrorCodes.CONSISTENCY_CHECK_FAILED),
            (InclusionCheckFailedException("m"), ErrorCodes.INCLUSION_CHECK_FAILED),
            (InvalidRangeException("m"), ErrorCodes.INVALID_RANGE),
            (HashPrimitiveUnavailableException("m"), ErrorCodes.HASH_PRIMITIVE_UNAVAILABLE),
            (EncodingException("m"), ErrorCodes.INVALID_ENCODING),
            (ConfigException("m"), ErrorCodes.CONFIG_ERROR),
        ],
    )
    def test_codes(self, exc, code):
        assert isinstance(exc, TlogException)
        assert exc.code == code
        assert exc.retryable is False
        assert str(exc) == "m"

    def test_malformed_details(self):
        exc = MalformedProofException("bad", expected_length=4, actual_length=2)
        assert exc.details == {"expected_length": 4, "actual_length": 2}

    def test_repr(self):
        exc = InvalidRangeException("nope")
        assert repr(exc) == "InvalidRangeException(code='INVALID_RANGE', message='nope')"


class TestConversion:
    """Round trips between exceptions and TlogError models."""

    def test_exception_to_model(self):
        model = ConsistencyCheckFailedException("mismatch", first_size=3, second_size=7).to_error_model()

        assert model.code == ErrorCodes.CONSISTENCY_CHECK_FAILED
        assert model.message == "mismatch"
        assert model.details == {"first_size": 3, "second_size": 7}

    def test_model_to_typed_exception(self):
        model = TlogError(
            code=ErrorCodes.MALFORMED_PROOF,
            message="short",
            details={"expected_length": 4, "actual_length": 3},
        )
        exc = model.to_exception()

        assert type(exc) is MalformedProofException
        assert exc.details == {"expected_length": 4, "actual_length": 3}

    def test_unknown_code_falls_back(self):
        exc = TlogError(code="SOMETHING_ELSE", message="x", retryable=True).to_exception()

        assert type(exc) is TlogException
        assert exc.code == "SOMETHING_ELSE"
        assert exc.retryable is True

    def test_model_forbids_extra_fields(self):
        with pytest.raises(ValidationError):
            TlogError(code="X", message="y", unexpected=1)
