"""
Record validation for aggregate interval attestations.

Rejects structurally invalid records before they reach durable storage.
Validation is a pure function of the record: no logging, no metrics, no I/O.
Stores call it on every insert and account for failures themselves.
"""

from __future__ import annotations

from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.types import RecordValidationError, ValidationErrorKind

MIN_INTERVAL_SIZE = 1
"""Smallest interval an aggregate may span."""

INT64_MIN = -(2**63)
"""Smallest value an integer column can hold."""

INT64_MAX = 2**63 - 1
"""Largest value an integer column can hold."""

INTEGER_FIELDS = ("slot_number", "value", "interval_size", "num_validators")
"""Integer fields in persisted column order."""


def validate(record: AggregateIntervalAttestation) -> None:
    """
    Check the field constraints of a candidate record.

    Constraints are checked in a fixed order and the first violation wins:

    1. The aggregate signature is non-empty.
    2. The interval spans at least one slot.
    3. The validator count is non-negative.
    4. The slot number is non-negative.
    5. Every integer fits a signed 64-bit column.

    A record with zero validators passes. It is structurally valid but
    degenerate; see `AggregateIntervalAttestation.is_degenerate`.

    Args:
        record: Candidate record produced by the aggregator.

    Raises:
        RecordValidationError: If any constraint is violated.
    """
    if not record.aggregate_signature:
        raise RecordValidationError(
            ValidationErrorKind.EMPTY_SIGNATURE,
            "aggregate_signature",
            record.aggregate_signature,
        )

    if record.interval_size < MIN_INTERVAL_SIZE:
        raise RecordValidationError(
            ValidationErrorKind.NON_POSITIVE_INTERVAL,
            "interval_size",
            record.interval_size,
        )

    if record.num_validators < 0:
        raise RecordValidationError(
            ValidationErrorKind.NEGATIVE_VALIDATOR_COUNT,
            "num_validators",
            record.num_validators,
        )

    if record.slot_number < 0:
        raise RecordValidationError(
            ValidationErrorKind.NEGATIVE_SLOT,
            "slot_number",
            record.slot_number,
        )

    # Persisted columns are SQLite integers: signed 64-bit.
    for name in INTEGER_FIELDS:
        number = getattr(record, name)
        if not INT64_MIN <= number <= INT64_MAX:
            raise RecordValidationError(ValidationErrorKind.INTEGER_OVERFLOW, name, number)


def is_valid(record: AggregateIntervalAttestation) -> bool:
    """Return True if `validate` accepts the record."""
    try:
        validate(record)
    except RecordValidationError:
        return False
    return True
