"""
Schemas - Errors

Purpose: Standard error taxonomy for tree construction, proof generation,
proof verification, encoding and configuration.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the library."""

    # Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"

    # Proof Generation Errors
    DATA_NOT_FOUND = "DATA_NOT_FOUND"
    INVALID_POLLARD_HEIGHT = "INVALID_POLLARD_HEIGHT"

    # Verification Errors
    MALFORMED_PROOF = "MALFORMED_PROOF"

    # Hash Provider Errors
    UNKNOWN_HASH_TYPE = "UNKNOWN_HASH_TYPE"

    # Encoding & Configuration Errors
    TREE_ENCODING_ERROR = "TREE_ENCODING_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to cross a serialization boundary (CLI JSON
    output, logs) rather than being raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.DATA_NOT_FOUND],
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

    def to_exception(self) -> "MerkleTreeException":
        """Convert this error model to a raised exception."""
        return MerkleTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleTreeException(Exception):
    """
    Base exception for all Merkle tree errors.

    This exception carries structured error information and can be
    converted to/from MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_TREE_ERROR",
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


class EmptyInputException(MerkleTreeException):
    """Exception raised when a tree is requested over zero values."""

    def __init__(
        self,
        message: str = "tree must have at least 1 piece of data",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class DataNotFoundException(MerkleTreeException):
    """Exception raised when a value (or leaf index) is not in the tree."""

    def __init__(
        self,
        message: str = "data not found",
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.DATA_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class InvalidPollardHeightException(MerkleTreeException):
    """Exception raised when a pollard height exceeds the tree depth."""

    def __init__(
        self,
        message: str,
        height: int | None = None,
        depth: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if height is not None:
            full_details["height"] = height
        if depth is not None:
            full_details["depth"] = depth
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_POLLARD_HEIGHT,
            details=full_details,
            retryable=False,
        )


class MalformedProofException(MerkleTreeException):
    """Exception raised when a proof cannot be replayed at all."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=details,
            retryable=False,
        )


class UnknownHashTypeException(MerkleTreeException):
    """Exception raised when a hash provider name is not recognised."""

    def __init__(
        self,
        message: str = "cannot parse hash type",
        hash_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if hash_type is not None:
            full_details["hash_type"] = hash_type
        super().__init__(
            message=message,
            code=ErrorCodes.UNKNOWN_HASH_TYPE,
            details=full_details,
            retryable=False,
        )


class TreeEncodingException(MerkleTreeException):
    """Exception raised when an exported tree or proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_ENCODING_ERROR,
            details=details,
            retryable=False,
        )


class ConfigurationException(MerkleTreeException):
    """Exception raised when configuration values are invalid."""

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
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )
