"""Core matching engine components."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .aggregation import AggregateScore, ScoreAggregator
from .allocation import Assignment, GreedyAllocator
from .engine import LanguageMatch, MatchingEngine, SkillMatch, format_score
from .filtering import CandidateFilter, FilterConfig, FilterStage
from .ranking import Ranker, RankingOptions, RankingResult, ScoreStats
from .results import CriterionScore, ScoredPair
from .scorers import CRITERIA, ScorerRegistry, default_registry
from .weights import WeightResolver, WeightVector, resolve_weights


@runtime_checkable
class Scorer(Protocol):
    """Scorer contract for one matching criterion."""

    criterion: str

    def evaluate(self, candidate: dict, opportunity: dict) -> dict:
        """Return the criterion score for a candidate against an opportunity."""


__all__ = [
    "Scorer",
    "CRITERIA",
    "MatchingEngine",
    "LanguageMatch",
    "SkillMatch",
    "format_score",
    "ScorerRegistry",
    "default_registry",
    "WeightResolver",
    "WeightVector",
    "resolve_weights",
    "ScoreAggregator",
    "AggregateScore",
    "CandidateFilter",
    "FilterConfig",
    "FilterStage",
    "Ranker",
    "RankingOptions",
    "RankingResult",
    "ScoreStats",
    "GreedyAllocator",
    "Assignment",
    "CriterionScore",
    "ScoredPair",
]
