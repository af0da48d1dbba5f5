"""Exceptions raised by :mod:`pureblake2s`."""

from __future__ import annotations


class Blake2sError(Exception):
    """Base error for BLAKE2s hashing."""


class InvalidParameterError(Blake2sError, ValueError):
    """Raised when a digest length, key, salt or other parameter is out of range."""


class StateFinalizedError(Blake2sError, RuntimeError):
    """Raised when a finalized hashing state is updated or finalized again."""
