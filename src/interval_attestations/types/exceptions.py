"""Exception hierarchy for attestation validation and storage."""

from __future__ import annotations

from enum import Enum
from typing import Any


class AttestationStoreError(Exception):
    """
    Base exception for all attestation store errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ValidationErrorKind(Enum):
    """Structural constraint a candidate record violated."""

    EMPTY_SIGNATURE = "empty_signature"
    """The aggregate signature is empty."""

    NON_POSITIVE_INTERVAL = "non_positive_interval"
    """The interval size is below one slot."""

    NEGATIVE_VALIDATOR_COUNT = "negative_validator_count"
    """The validator count is negative."""

    NEGATIVE_SLOT = "negative_slot"
    """The slot number is negative."""

    INTEGER_OVERFLOW = "integer_overflow"
    """An integer field does not fit the signed 64-bit storage column."""


class RecordValidationError(AttestationStoreError):
    """
    Raised when a candidate record violates a field constraint.

    Always detected before persistence, so it never leaves a partial write.
    The caller recovers by correcting the record.

    Attributes:
        kind: Which constraint failed.
        field: Name of the offending field.
        value: The rejected value (truncated for display).
    """

    def __init__(self, kind: ValidationErrorKind, field: str, value: Any) -> None:
        self.kind = kind
        self.field = field
        self.value = value

        value_repr = repr(value)
        if len(value_repr) > 50:
            value_repr = value_repr[:47] + "..."

        super().__init__(f"Invalid {field} ({kind.value}): {value_repr}")


class StoreError(AttestationStoreError):
    """Base class for failures reported by a store operation."""


class DuplicateSignatureError(StoreError):
    """
    Raised when a record with the same aggregate signature is already stored.

    An aggregate signature denotes one immutable fact. Callers should treat
    this as "already recorded" rather than retrying.

    Attributes:
        signature: The aggregate signature that collided.
    """

    def __init__(self, signature: str) -> None:
        self.signature = signature

        shown = signature if len(signature) <= 24 else signature[:21] + "..."
        super().__init__(f"Aggregate signature already stored: {shown}")


class InvalidRangeError(StoreError):
    """
    Raised when a slot range query has its bounds inverted.

    Attributes:
        from_slot: Requested lower bound (inclusive).
        to_slot: Requested upper bound (inclusive).
    """

    def __init__(self, from_slot: int, to_slot: int) -> None:
        self.from_slot = from_slot
        self.to_slot = to_slot

        super().__init__(f"Invalid slot range: from_slot={from_slot} > to_slot={to_slot}")


class StoreUnavailableError(StoreError):
    """
    Raised when the underlying storage medium fails.

    The store does not retry on its own. Callers may retry with backoff;
    the stored data is unaffected by the failed operation.

    Attributes:
        operation: Store operation that failed (e.g. "insert").
        detail: Description of the underlying failure.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail

        super().__init__(f"Storage unavailable during {operation}: {detail}")
