"""Exceptions shared across the matching engine."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when caller-supplied weights, options or times are malformed."""
