"""Weighted aggregation of criterion scores."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .results import CriterionScore, MatchStatus, clamp_unit
from .weights import WeightVector


@dataclass(slots=True, frozen=True)
class AggregateScore:
    score: float
    applied_weights: dict[str, float]
    match_status: MatchStatus


class ScoreAggregator:
    """Weighted mean over the criteria whose weight is non-zero."""

    def aggregate(
        self,
        criteria: Mapping[str, CriterionScore],
        weights: WeightVector,
    ) -> AggregateScore:
        applied = {
            name: weight
            for name, weight in weights.applied().items()
            if name in criteria
        }
        total_weight = sum(applied.values())
        if total_weight <= 0:
            score = 0.0
        else:
            weighted = sum(criteria[name].score * weight for name, weight in applied.items())
            score = clamp_unit(weighted / total_weight)

        statuses = [criteria[name].status for name in applied]
        return AggregateScore(
            score=score,
            applied_weights=applied,
            match_status=self.overall_status(statuses),
        )

    @staticmethod
    def overall_status(statuses: list[MatchStatus]) -> MatchStatus:
        decisive = [status for status in statuses if status != "neutral_match"]
        if not decisive:
            return "neutral_match"
        if all(status == "perfect_match" for status in decisive):
            return "perfect_match"
        if all(status == "no_match" for status in decisive):
            return "no_match"
        return "partial_match"
