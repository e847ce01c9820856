"""
In-memory database implementation for aggregate attestation storage.

Keeps aggregates in process memory. Nothing survives a restart.
Suited to tests and to short-lived aggregators that forward their output elsewhere.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right, insort
from dataclasses import dataclass, field
from threading import Lock

from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.metrics import insert_duration
from interval_attestations.types import InvalidRangeError

from .accounting import check_insertable, duplicate, note_pruned, note_stored, unavailable


@dataclass
class InMemoryAttestationDatabase:
    """
    Dict-backed implementation of the AttestationDatabase protocol.

    Aggregates are indexed twice:

    - by signature, in insertion order (the primary index)
    - by slot, as a sorted list of occupied slots plus per-slot signature lists

    Records are immutable, so handing the stored instances to callers is safe.
    """

    _records: dict[str, AggregateIntervalAttestation] = field(default_factory=dict)
    """Signature -> aggregate. Dict order is insertion order."""

    _by_slot: dict[int, list[str]] = field(default_factory=dict)
    """Slot -> signatures at that slot, in insertion order."""

    _slots: list[int] = field(default_factory=list)
    """Occupied slots, kept sorted for range scans."""

    _closed: bool = False
    """Set once close() has been called."""

    _lock: Lock = field(default_factory=Lock)
    """Thread safety lock."""

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise unavailable(operation, RuntimeError("database is closed"))

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def insert(self, record: AggregateIntervalAttestation) -> None:
        """Store a new aggregate."""
        check_insertable(record)

        signature = record.aggregate_signature
        with insert_duration.time(), self._lock:
            self._ensure_open("insert")

            # Check and write under one lock acquisition.
            if signature in self._records:
                raise duplicate(signature)

            self._records[signature] = record
            slot_signatures = self._by_slot.get(record.slot_number)
            if slot_signatures is None:
                self._by_slot[record.slot_number] = [signature]
                insort(self._slots, record.slot_number)
            else:
                slot_signatures.append(signature)

        note_stored(record)

    def prune_before_slot(self, slot_number: int) -> int:
        """Remove every aggregate whose slot is strictly below `slot_number`."""
        with self._lock:
            self._ensure_open("prune_before_slot")

            cut = bisect_left(self._slots, slot_number)
            removed = 0
            for slot in self._slots[:cut]:
                for signature in self._by_slot.pop(slot):
                    del self._records[signature]
                    removed += 1
            del self._slots[:cut]

        note_pruned(slot_number, removed)
        return removed

    # -------------------------------------------------------------------------
    # Point Lookups
    # -------------------------------------------------------------------------

    def get_by_signature(self, signature: str) -> AggregateIntervalAttestation | None:
        """Retrieve an aggregate by its signature."""
        with self._lock:
            self._ensure_open("get_by_signature")
            return self._records.get(signature)

    def has_signature(self, signature: str) -> bool:
        """Check if an aggregate exists in storage."""
        with self._lock:
            self._ensure_open("has_signature")
            return signature in self._records

    # -------------------------------------------------------------------------
    # Slot Scans
    # -------------------------------------------------------------------------

    def list_by_slot(self, slot_number: int) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate at one slot, in insertion order."""
        with self._lock:
            self._ensure_open("list_by_slot")
            signatures = self._by_slot.get(slot_number, [])
            return [self._records[signature] for signature in signatures]

    def list_by_slot_range(
        self,
        from_slot: int,
        to_slot: int,
    ) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate with a slot in `[from_slot, to_slot]`."""
        if from_slot > to_slot:
            raise InvalidRangeError(from_slot, to_slot)

        with self._lock:
            self._ensure_open("list_by_slot_range")
            lo = bisect_left(self._slots, from_slot)
            hi = bisect_right(self._slots, to_slot)
            return self._collect(self._slots[lo:hi])

    def list_all(self) -> list[AggregateIntervalAttestation]:
        """Retrieve every aggregate, ordered by slot then insertion order."""
        with self._lock:
            self._ensure_open("list_all")
            return self._collect(self._slots)

    def count(self) -> int:
        """Return the number of stored aggregates."""
        with self._lock:
            self._ensure_open("count")
            return len(self._records)

    def _collect(self, slots: list[int]) -> list[AggregateIntervalAttestation]:
        """Gather aggregates for the given slots. Caller holds the lock."""
        return [
            self._records[signature] for slot in slots for signature in self._by_slot[slot]
        ]

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Drop all aggregates. Later operations raise StoreUnavailableError."""
        with self._lock:
            self._closed = True
            self._records.clear()
            self._by_slot.clear()
            self._slots.clear()

    def __enter__(self) -> InMemoryAttestationDatabase:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
