"""Historical performance scoring."""

from __future__ import annotations

from typing import Any

from ...schemas import Candidate, Opportunity

CONVERSION_SHARE = 0.4
RELIABILITY_SHARE = 0.3
RATING_SHARE = 0.3


class PerformanceScorer:
    """Blend conversion against expectation, reliability and rating."""

    criterion = "performance"

    def __init__(self, *, missing_score: float = 0.5) -> None:
        self._missing_score = missing_score

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)
        metrics = profile.performance
        expected = job.expected_conversion_rate

        details: dict[str, Any] = {
            "conversion_rate": metrics.conversion_rate,
            "expected_conversion_rate": expected,
            "reliability": metrics.reliability,
            "rating": metrics.rating,
        }
        if None in (metrics.conversion_rate, metrics.reliability, metrics.rating, expected):
            details["reason"] = "missing_data"
            return {
                "criterion": self.criterion,
                "score": self._missing_score,
                "status": "neutral_match",
                "details": details,
            }

        if expected <= 0 or metrics.conversion_rate >= expected:
            conversion = CONVERSION_SHARE
        else:
            conversion = CONVERSION_SHARE * metrics.conversion_rate / expected
        reliability = RELIABILITY_SHARE * metrics.reliability / 10.0
        rating = RATING_SHARE * metrics.rating / 5.0
        score = min(1.0, conversion + reliability + rating)

        details["components"] = {
            "conversion": conversion,
            "reliability": reliability,
            "rating": rating,
        }
        if score >= 1.0:
            status = "perfect_match"
        elif score > 0:
            status = "partial_match"
        else:
            status = "no_match"
        return {"criterion": self.criterion, "score": score, "status": status, "details": details}
