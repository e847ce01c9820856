"""
Logging and metrics shared by the database implementations.

Both backends report the same events the same way, so operators see
identical signals whichever store is configured.
"""

from __future__ import annotations

import logging

from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.metrics import (
    attestations_inserted,
    attestations_pruned,
    degenerate_attestations,
    duplicate_signatures,
    store_unavailable,
    validation_failures,
)
from interval_attestations.types import (
    DuplicateSignatureError,
    RecordValidationError,
    StoreUnavailableError,
)
from interval_attestations.validation import validate

logger = logging.getLogger(__name__)


def check_insertable(record: AggregateIntervalAttestation) -> None:
    """
    Validate a record on its way into a store.

    Raises:
        RecordValidationError: Re-raised after it has been counted.
    """
    try:
        validate(record)
    except RecordValidationError as e:
        validation_failures.labels(kind=e.kind.value).inc()
        logger.debug("Rejected aggregate: %s", e.message)
        raise


def note_stored(record: AggregateIntervalAttestation) -> None:
    """Account for a committed insert."""
    attestations_inserted.inc()

    # Zero validators is structurally fine but carries no attestation content.
    if record.is_degenerate:
        degenerate_attestations.inc()
        logger.warning(
            "Stored degenerate aggregate with no validators at slot %d",
            record.slot_number,
        )
    else:
        logger.debug(
            "Stored aggregate at slot %d (interval %d, %d validators)",
            record.slot_number,
            record.interval_size,
            record.num_validators,
        )


def duplicate(signature: str) -> DuplicateSignatureError:
    """Account for a rejected re-insert and build the error to raise."""
    duplicate_signatures.inc()
    error = DuplicateSignatureError(signature)
    logger.info(error.message)
    return error


def unavailable(operation: str, cause: BaseException) -> StoreUnavailableError:
    """Account for a medium failure and build the error to raise."""
    store_unavailable.labels(operation=operation).inc()
    error = StoreUnavailableError(operation, str(cause))
    logger.error(error.message)
    return error


def note_pruned(slot_number: int, removed: int) -> None:
    """Account for a retention pass."""
    attestations_pruned.inc(removed)
    logger.info("Pruned %d aggregates below slot %d", removed, slot_number)
