"""
Abstract database interface for aggregate attestation storage.

Defines the Protocol that all database implementations must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from interval_attestations.containers import AggregateIntervalAttestation


class AttestationDatabase(Protocol):
    """
    Protocol for aggregate interval attestation storage.

    All database implementations must provide these methods.
    Uses structural subtyping - any class with matching methods satisfies the protocol.

    Guarantees
    ----------
    - Inserts are atomic with respect to the uniqueness check:
      two concurrent inserts of one signature yield one success
      and one DuplicateSignatureError.
    - Reads only observe fully committed records.
    - Medium failures raise StoreUnavailableError. Nothing is retried internally.
    """

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def insert(self, record: AggregateIntervalAttestation) -> None:
        """
        Store a new aggregate.

        Args:
            record: Aggregate to store. Validated before any write.

        Raises:
            RecordValidationError: If the record violates a field constraint.
            DuplicateSignatureError: If the signature is already stored.
            StoreUnavailableError: If the storage medium fails.
        """
        ...

    def prune_before_slot(self, slot_number: int) -> int:
        """
        Remove every aggregate whose slot is strictly below `slot_number`.

        Deletion primitive for an external retention policy.

        Args:
            slot_number: First slot to keep.

        Returns:
            Number of removed aggregates.
        """
        ...

    # -------------------------------------------------------------------------
    # Point Lookups
    # -------------------------------------------------------------------------

    def get_by_signature(self, signature: str) -> AggregateIntervalAttestation | None:
        """
        Retrieve an aggregate by its signature.

        Args:
            signature: Aggregate signature to look up.

        Returns:
            The stored aggregate, or None if absent.
        """
        ...

    def has_signature(self, signature: str) -> bool:
        """
        Check if an aggregate exists in storage.

        Args:
            signature: Aggregate signature to look up.

        Returns:
            True if an aggregate with this signature is stored.
        """
        ...

    # -------------------------------------------------------------------------
    # Slot Scans
    # -------------------------------------------------------------------------

    def list_by_slot(self, slot_number: int) -> list[AggregateIntervalAttestation]:
        """
        Retrieve every aggregate at one slot, in insertion order.

        Args:
            slot_number: Slot to scan.

        Returns:
            Matching aggregates. Empty if none.
        """
        ...

    def list_by_slot_range(
        self,
        from_slot: int,
        to_slot: int,
    ) -> list[AggregateIntervalAttestation]:
        """
        Retrieve every aggregate with a slot in `[from_slot, to_slot]`.

        Results are ordered by slot, then by insertion order within a slot.

        Args:
            from_slot: Lower bound (inclusive).
            to_slot: Upper bound (inclusive).

        Returns:
            Matching aggregates. Empty if none.

        Raises:
            InvalidRangeError: If `from_slot > to_slot`.
        """
        ...

    def list_all(self) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate, ordered by slot then insertion order."""
        ...

    def count(self) -> int:
        """Return the number of stored aggregates."""
        ...

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the database and release resources."""
        ...
