"""
Database namespace definitions for storage tables.

Defines table names and schema constants for SQLite storage.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AggregateIntervalAttestationNamespace:
    """
    Namespace for aggregate interval attestation storage.

    Records are keyed by their aggregate signature.
    Each field lives in its own column; there is no encoded blob.
    """

    TABLE_NAME: str = "aggregate_interval_attestations"
    """Table name for aggregate storage."""

    COLUMNS: tuple[str, ...] = (
        "aggregate_signature",
        "slot_number",
        "value",
        "interval_size",
        "num_validators",
    )
    """Column names in persisted order."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS aggregate_interval_attestations (
            aggregate_signature text NOT NULL PRIMARY KEY,
            slot_number integer NOT NULL,
            value integer NOT NULL,
            interval_size integer NOT NULL,
            num_validators integer NOT NULL
        )
    """
    """SQL to create the aggregates table."""

    CREATE_INDEX: str = """
        CREATE INDEX IF NOT EXISTS idx_aggregate_interval_attestations_slot
        ON aggregate_interval_attestations(slot_number)
    """
    """SQL to create the slot index backing slot and range scans."""


AGGREGATES = AggregateIntervalAttestationNamespace()
