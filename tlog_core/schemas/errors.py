"""
Schemas - Errors
File: errors.py

Purpose: Error taxonomy for Merkle proof planning and verification.
Defines both Pydantic models for structured error communication
(carried inside verification results) and Python exceptions for
control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Proof shape errors
    MALFORMED_PROOF = "MALFORMED_PROOF"
    INVALID_RANGE = "INVALID_RANGE"

    # Verification outcomes
    CONSISTENCY_CHECK_FAILED = "CONSISTENCY_CHECK_FAILED"
    INCLUSION_CHECK_FAILED = "INCLUSION_CHECK_FAILED"

    # Environment errors
    HASH_PRIMITIVE_UNAVAILABLE = "HASH_PRIMITIVE_UNAVAILABLE"
    CONFIG_ERROR = "CONFIG_ERROR"

    # Input decoding
    INVALID_ENCODING = "INVALID_ENCODING"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class TlogError(BaseModel):
    """
    Error model carried by verification results.

    Verification failures are reported through this model instead of
    being raised, so callers can inspect and serialize them.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "TlogException":
        """Convert this error model to the matching exception type."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_type is None:
            return TlogException(
                message=self.message,
                code=self.code,
                details=dict(self.details),
                retryable=self.retryable,
            )
        return exc_type(message=self.message, details=dict(self.details))


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class TlogException(Exception):
    """
    Base exception for all transparency-log Merkle errors.

    Carries structured error information and converts to/from
    TlogError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "TLOG_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> TlogError:
        """Convert this exception to a TlogError model."""
        return TlogError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class MalformedProofException(TlogException):
    """Raised when a proof has the wrong number or size of elements."""

    def __init__(
        self,
        message: str,
        expected_length: int | None = None,
        actual_length: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected_length is not None:
            full_details["expected_length"] = expected_length
        if actual_length is not None:
            full_details["actual_length"] = actual_length
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
            retryable=False,
        )


class ConsistencyCheckFailedException(TlogException):
    """Raised when a consistency proof does not reproduce both roots."""

    def __init__(
        self,
        message: str,
        first_size: int | None = None,
        second_size: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if first_size is not None:
            full_details["first_size"] = first_size
        if second_size is not None:
            full_details["second_size"] = second_size
        super().__init__(
            message=message,
            code=ErrorCodes.CONSISTENCY_CHECK_FAILED,
            details=full_details,
            retryable=False,
        )


class InclusionCheckFailedException(TlogException):
    """Raised when an audit path does not reproduce the expected root."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.INCLUSION_CHECK_FAILED,
            details=full_details,
            retryable=False,
        )


class InvalidRangeException(TlogException):
    """
    Raised when a range, index or tree size precondition is violated.

    This is a programming error on the caller's side, not a
    verification outcome.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_RANGE,
            details=details,
            retryable=False,
        )


class HashPrimitiveUnavailableException(TlogException):
    """Raised when the requested digest algorithm is not available."""

    def __init__(
        self,
        message: str,
        algorithm: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if algorithm:
            full_details["algorithm"] = algorithm
        super().__init__(
            message=message,
            code=ErrorCodes.HASH_PRIMITIVE_UNAVAILABLE,
            details=full_details,
            retryable=False,
        )


class EncodingException(TlogException):
    """Raised when hex, base64 or leaf encodings cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_ENCODING,
            details=details,
            retryable=False,
        )


class ConfigException(TlogException):
    """Raised when configuration cannot be loaded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=details,
            retryable=False,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[TlogException]] = {
    ErrorCodes.MALFORMED_PROOF: MalformedProofException,
    ErrorCodes.CONSISTENCY_CHECK_FAILED: ConsistencyCheckFailedException,
    ErrorCodes.INCLUSION_CHECK_FAILED: InclusionCheckFailedException,
    ErrorCodes.INVALID_RANGE: InvalidRangeException,
    ErrorCodes.HASH_PRIMITIVE_UNAVAILABLE: HashPrimitiveUnavailableException,
    ErrorCodes.INVALID_ENCODING: EncodingException,
    ErrorCodes.CONFIG_ERROR: ConfigException,
}
