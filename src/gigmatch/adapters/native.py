"""Adapter for payloads already in the provider-neutral shape."""

from __future__ import annotations

from typing import Any

from ..schemas import Candidate, Opportunity
from ._json import load_document


class NativeAdapter:
    """Validate neutral candidate and opportunity payloads as they are."""

    provider = "native"

    def can_handle(self, blob: bytes | str | dict[str, Any], metadata: dict[str, Any]) -> bool:
        provider = metadata.get("provider")
        if provider:
            return str(provider).lower() == self.provider
        try:
            data = load_document(blob, self.provider)
        except ValueError:
            return False
        return "candidate_id" in data or "opportunity_id" in data

    def parse_candidate(self, payload: bytes | str | dict[str, Any]) -> dict[str, Any]:
        data = load_document(payload, self.provider)
        return Candidate.model_validate(data).model_dump(mode="python")

    def parse_opportunity(self, payload: bytes | str | dict[str, Any]) -> dict[str, Any]:
        data = load_document(payload, self.provider)
        return Opportunity.model_validate(data).model_dump(mode="python")
