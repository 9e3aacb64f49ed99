"""Region proximity scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...normalize import normalize_identifier
from ...schemas import Candidate, Opportunity

DEFAULT_ADJACENT_REGIONS: list[tuple[str, str]] = [
    ("Europe", "Middle East"),
    ("Middle East", "North America"),
    ("Asia", "Asia-Pacific"),
    ("Asia-Pacific", "Middle East"),
    ("North America", "Latin America"),
    ("Europe", "Africa"),
    ("Africa", "Middle East"),
]


@dataclass
class RegionConfig:
    """Configuration for region matching."""

    adjacent: list[tuple[str, str]] = field(default_factory=lambda: list(DEFAULT_ADJACENT_REGIONS))
    adjacent_score: float = 0.7
    missing_score: float = 0.5


class RegionScorer:
    """Exact, adjacent or unrelated regions."""

    criterion = "region"

    def __init__(self, *, config: RegionConfig | None = None) -> None:
        self._config = config or RegionConfig()
        self._pairs = {
            frozenset((normalize_identifier(left), normalize_identifier(right)))
            for left, right in self._config.adjacent
        }

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)
        mine = normalize_identifier(profile.region)
        target = normalize_identifier(job.region)

        details: dict[str, Any] = {
            "candidate_region": profile.region,
            "target_region": job.region,
        }
        if not mine or not target:
            score, status, details["reason"] = self._config.missing_score, "neutral_match", "missing_data"
        elif mine == target:
            score, status, details["reason"] = 1.0, "perfect_match", "same_region"
        elif frozenset((mine, target)) in self._pairs:
            score, status, details["reason"] = self._config.adjacent_score, "partial_match", "adjacent_region"
        else:
            score, status, details["reason"] = 0.0, "no_match", "different_region"

        return {"criterion": self.criterion, "score": score, "status": status, "details": details}
