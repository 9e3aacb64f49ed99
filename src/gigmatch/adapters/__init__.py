"""Provider-specific profile adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .agent_gig import AgentGigAdapter
from .native import NativeAdapter


@runtime_checkable
class ProfileAdapter(Protocol):
    """Provider-specific profile adapter contract.

    Implementations transform provider-native candidate and opportunity
    documents into provider-neutral dictionaries that conform to the shared
    schema.
    """

    provider: str

    def can_handle(self, blob: bytes | str | dict, metadata: dict) -> bool:
        """Return True when the adapter can parse the given payload."""

    def parse_candidate(self, payload: bytes | str | dict) -> dict:
        """Parse a candidate document and return a provider-neutral dictionary."""

    def parse_opportunity(self, payload: bytes | str | dict) -> dict:
        """Parse an opportunity document and return a provider-neutral dictionary."""


__all__ = ["ProfileAdapter", "AgentGigAdapter", "NativeAdapter"]
