"""Aggregate interval attestation container."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from interval_attestations.types import StrictBaseModel

type AttestationRow = tuple[str, int, int, int, int]
"""Column tuple in persisted order: signature, slot, value, interval, validators."""


class AggregateIntervalAttestation(StrictBaseModel):
    """
    An aggregated attestation over an interval of slots.

    Produced once, when the aggregator finalizes an aggregate signature for a
    slot and interval. Never mutated afterwards: the signature is the identity
    of the record and is not recomputed in place.

    Only types are enforced at construction. Range constraints are checked by
    `interval_attestations.validation.validate` so each violation has a kind.
    """

    aggregate_signature: str
    """Aggregated signature over the attested value. Globally unique key."""

    slot_number: int
    """Consensus slot the attestation covers."""

    value: int
    """Attested value. Opaque to the store."""

    interval_size: int
    """Number of slots spanned by this aggregate."""

    num_validators: int
    """Number of validator attestations folded into the signature."""

    @property
    def is_degenerate(self) -> bool:
        """True when no validator contributed to the aggregate."""
        return self.num_validators == 0

    @property
    def end_slot(self) -> int:
        """Last slot covered by the interval (inclusive)."""
        return self.slot_number + self.interval_size - 1

    def to_row(self) -> AttestationRow:
        """Flatten into the persisted column order."""
        return (
            self.aggregate_signature,
            self.slot_number,
            self.value,
            self.interval_size,
            self.num_validators,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> AggregateIntervalAttestation:
        """Rebuild a record from a row keyed by column name."""
        return cls(
            aggregate_signature=row["aggregate_signature"],
            slot_number=row["slot_number"],
            value=row["value"],
            interval_size=row["interval_size"],
            num_validators=row["num_validators"],
        )
