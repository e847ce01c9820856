"""Test helpers for interval attestation unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .backends import BACKENDS, open_backend
from .builders import make_attestation, make_signature

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    "BACKENDS",
    "open_backend",
    "make_attestation",
    "make_signature",
    "run_async",
]
