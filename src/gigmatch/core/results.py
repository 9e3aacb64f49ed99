"""Result types produced by the matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

MatchStatus = Literal["perfect_match", "partial_match", "no_match", "neutral_match"]


@dataclass(slots=True, frozen=True)
class CriterionScore:
    """Normalized scorer output for one criterion."""

    criterion: str
    score: float
    status: MatchStatus
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class ScoredPair:
    """Aggregate compatibility of one candidate with one opportunity."""

    candidate_id: str
    opportunity_id: str
    score: float
    criteria: dict[str, CriterionScore]
    applied_weights: dict[str, float]
    match_status: MatchStatus


def ratio_status(matched: int, total: int) -> MatchStatus:
    """Classify a matched/total count."""
    if total <= 0:
        return "neutral_match"
    if matched >= total:
        return "perfect_match"
    if matched > 0:
        return "partial_match"
    return "no_match"


def clamp_unit(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


__all__ = ["MatchStatus", "CriterionScore", "ScoredPair", "ratio_status", "clamp_unit"]
