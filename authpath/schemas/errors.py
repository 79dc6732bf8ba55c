"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the accumulator.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the package."""

    # Tree capacity
    TREE_FULL = "TREE_FULL"

    # Persistence
    MALFORMED_STATE = "MALFORMED_STATE"

    # Membership circuits
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Symbolic realization
    CIRCUIT_ERROR = "CIRCUIT_ERROR"

    # Serialization & configuration
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used where failures are reported as results rather than raised,
    e.g. by the persistence codec.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_STATE],
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

    def to_exception(self) -> "AuthPathException":
        """Convert this error model to a raised exception."""
        return AuthPathException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


class MarshalError(MerkleError):
    """Error model for a failed read of persisted state."""

    code: str = Field(default=ErrorCodes.MALFORMED_STATE)
    token_index: int | None = Field(
        default=None,
        description="Index of the token where reading stopped",
    )
    expected: str | None = Field(
        default=None,
        description="What the reader expected at that position",
    )
    actual: str | None = Field(
        default=None,
        description="Token actually found (None at end of input)",
    )

    def to_exception(self) -> "MarshalException":
        return MarshalException(message=self.message, error=self)


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AuthPathException(Exception):
    """
    Base exception for all accumulator errors.

    Carries structured error information and can be converted
    to/from MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "AUTHPATH_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TreeFullException(AuthPathException):
    """Raised when a leaf is added to a tree holding 2^depth leaves."""

    def __init__(
        self,
        message: str,
        capacity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if capacity is not None:
            full_details["capacity"] = capacity
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_FULL,
            details=full_details,
            retryable=False,
        )


class MarshalException(AuthPathException):
    """Raised by file-level helpers when persisted state cannot be read."""

    def __init__(
        self,
        message: str,
        error: MarshalError | None = None,
    ) -> None:
        details = error.model_dump(exclude={"code", "message", "details", "retryable"}) if error else {}
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_STATE,
            details=details,
            retryable=False,
        )
        self.error = error


class CircuitException(AuthPathException):
    """Raised on misuse of the symbolic (circuit-bound) realization."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CIRCUIT_ERROR,
            details=details,
            retryable=False,
        )


class CanonicalizationException(AuthPathException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class ConfigException(AuthPathException):
    """Exception raised for invalid configuration values."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=full_details,
            retryable=False,
        )
