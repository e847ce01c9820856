"""Record containers persisted by the attestation store."""

from .attestation import AggregateIntervalAttestation, AttestationRow

__all__ = [
    "AggregateIntervalAttestation",
    "AttestationRow",
]
