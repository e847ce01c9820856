"""Reusable type definitions for the interval attestation store."""

from .base import CamelModel, StrictBaseModel
from .exceptions import (
    AttestationStoreError,
    DuplicateSignatureError,
    InvalidRangeError,
    RecordValidationError,
    StoreError,
    StoreUnavailableError,
    ValidationErrorKind,
)

__all__ = [
    # Models
    "CamelModel",
    "StrictBaseModel",
    # Exceptions
    "AttestationStoreError",
    "RecordValidationError",
    "ValidationErrorKind",
    "StoreError",
    "DuplicateSignatureError",
    "InvalidRangeError",
    "StoreUnavailableError",
]
