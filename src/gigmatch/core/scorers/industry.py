"""Industry affiliation scoring."""

from __future__ import annotations

from typing import Any

from ...normalize import identifiers_related, normalize_identifier
from ...schemas import Candidate, Opportunity


def matching_industries(candidate: Candidate, category: str | None) -> list[str]:
    target = normalize_identifier(category)
    return [
        industry
        for industry in candidate.industries
        if identifiers_related(normalize_identifier(industry), target)
    ]


class IndustryScorer:
    """Binary industry match against the opportunity category."""

    criterion = "industry"

    def __init__(self, *, missing_score: float = 0.5) -> None:
        self._missing_score = missing_score

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)

        details: dict[str, Any] = {
            "category": job.category,
            "candidate_industries": list(profile.industries),
        }
        if not normalize_identifier(job.category) or not profile.industries:
            details["reason"] = "missing_data"
            return {
                "criterion": self.criterion,
                "score": self._missing_score,
                "status": "neutral_match",
                "details": details,
            }

        matches = matching_industries(profile, job.category)
        details["matching"] = matches
        return {
            "criterion": self.criterion,
            "score": 1.0 if matches else 0.0,
            "status": "perfect_match" if matches else "no_match",
            "details": details,
        }
