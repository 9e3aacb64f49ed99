"""Matching engine orchestration."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence, get_args

import structlog

from ..errors import InvalidInputError
from ..schemas import Candidate, Opportunity
from .aggregation import ScoreAggregator
from .allocation import GreedyAllocator
from .filtering import CandidateFilter
from .ranking import Ranker, RankingOptions, RankingResult
from .results import CriterionScore, MatchStatus, ScoredPair
from .scorers import ScorerRegistry, default_registry
from .weights import WeightResolver, WeightVector

Observer = Callable[[str, dict[str, Any]], None]
Weights = Mapping[str, Any] | WeightVector | None

_STATUSES = frozenset(get_args(MatchStatus))


@dataclass(slots=True, frozen=True)
class LanguageMatch:
    """Candidate meeting every language requirement of an opportunity."""

    candidate_id: str
    score: float
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class SkillMatch:
    """Skill coverage of one candidate against an opportunity."""

    candidate_id: str
    score: float
    status: MatchStatus
    details: dict[str, Any] = field(default_factory=dict)


def format_score(score: float) -> str:
    """Render a unit score as a whole percentage, e.g. ``0.856 -> "86%"``."""
    return f"{math.floor(float(score) * 100 + 0.5)}%"


class MatchingEngine:
    """Scores candidate/opportunity pairs and builds rankings and allocations."""

    def __init__(
        self,
        registry: ScorerRegistry | None = None,
        *,
        resolver: WeightResolver | None = None,
        aggregator: ScoreAggregator | None = None,
        ranker: Ranker | None = None,
        candidate_filter: CandidateFilter | None = None,
        allocator: GreedyAllocator | None = None,
        default_weights: Mapping[str, Any] | None = None,
        default_options: RankingOptions | None = None,
        max_workers: int | None = None,
        observer: Observer | None = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._resolver = resolver or WeightResolver()
        self._aggregator = aggregator or ScoreAggregator()
        self._ranker = ranker or Ranker()
        self._filter = candidate_filter or self._build_filter()
        self._allocator = allocator or GreedyAllocator()
        self._default_weights = self._resolver.resolve(default_weights)
        self._default_options = default_options or RankingOptions()
        if max_workers is not None and max_workers < 1:
            raise InvalidInputError(f"max_workers must be at least 1, got {max_workers!r}")
        self._max_workers = max_workers
        self._observer = observer
        self._logger = structlog.get_logger(__name__)

    @property
    def registry(self) -> ScorerRegistry:
        return self._registry

    @property
    def default_options(self) -> RankingOptions:
        return self._default_options

    def set_observer(self, observer: Observer | None) -> None:
        self._observer = observer

    def resolve_weights(self, weights: Weights = None) -> WeightVector:
        if weights is None:
            weights = self._default_weights
        return self._resolver.resolve(weights)

    def score_pair(
        self,
        candidate: Candidate | Mapping[str, Any],
        opportunity: Opportunity | Mapping[str, Any],
        weights: Weights = None,
    ) -> ScoredPair:
        vector = self.resolve_weights(weights)
        return self._score(
            self._as_candidate(candidate),
            self._as_opportunity(opportunity),
            vector,
        )

    def rank_candidates_for_opportunity(
        self,
        opportunity: Opportunity | Mapping[str, Any],
        candidates: Iterable[Candidate | Mapping[str, Any]],
        weights: Weights = None,
        options: RankingOptions | None = None,
    ) -> RankingResult:
        job = self._as_opportunity(opportunity)
        pairs = [(self._as_candidate(candidate), job) for candidate in candidates]
        return self._rank(pairs, weights, options, orientation="candidates", subject_id=job.opportunity_id)

    def rank_opportunities_for_candidate(
        self,
        candidate: Candidate | Mapping[str, Any],
        opportunities: Iterable[Opportunity | Mapping[str, Any]],
        weights: Weights = None,
        options: RankingOptions | None = None,
    ) -> RankingResult:
        profile = self._as_candidate(candidate)
        pairs = [(profile, self._as_opportunity(opportunity)) for opportunity in opportunities]
        return self._rank(pairs, weights, options, orientation="opportunities", subject_id=profile.candidate_id)

    def allocate_pairs(
        self,
        candidates: Iterable[Candidate | Mapping[str, Any]],
        opportunities: Iterable[Opportunity | Mapping[str, Any]],
        weights: Weights = None,
    ) -> list[ScoredPair]:
        """Greedily assign each candidate at most one opportunity.

        Assignments come back in the order they were made. The heuristic
        does not maximise the total score.
        """
        vector = self.resolve_weights(weights)
        profiles = [self._as_candidate(candidate) for candidate in candidates]
        jobs = [self._as_opportunity(opportunity) for opportunity in opportunities]
        if not profiles or not jobs:
            self._logger.info("allocation.empty", candidates=len(profiles), opportunities=len(jobs))
            return []

        flat = self._score_many([(profile, job) for profile in profiles for job in jobs], vector)
        width = len(jobs)
        matrix = [flat[row * width:(row + 1) * width] for row in range(len(profiles))]

        assignments = self._allocator.allocate(matrix)
        for order, assignment in enumerate(assignments):
            self._emit(
                "allocation.assigned",
                {
                    "order": order,
                    "candidate_index": assignment.candidate_index,
                    "opportunity_index": assignment.opportunity_index,
                    "candidate_id": assignment.pair.candidate_id,
                    "opportunity_id": assignment.pair.opportunity_id,
                    "score": assignment.pair.score,
                },
            )
        self._logger.info(
            "allocation.completed",
            candidates=len(profiles),
            opportunities=len(jobs),
            assigned=len(assignments),
        )
        return [assignment.pair for assignment in assignments]

    def find_language_matches(
        self,
        opportunity: Opportunity | Mapping[str, Any],
        candidates: Iterable[Candidate | Mapping[str, Any]],
    ) -> list[LanguageMatch]:
        job = self._as_opportunity(opportunity)
        scorer = self._registry.get("language")
        matches: list[LanguageMatch] = []
        for candidate in candidates:
            profile = self._as_candidate(candidate)
            result = self._normalize(scorer.evaluate(profile, job), "language")
            if result.status == "perfect_match":
                matches.append(LanguageMatch(profile.candidate_id, result.score, result.details))
        return matches

    def find_skill_matches(
        self,
        opportunity: Opportunity | Mapping[str, Any],
        candidates: Iterable[Candidate | Mapping[str, Any]],
    ) -> list[SkillMatch]:
        """Skill coverage for every candidate, best first.

        Candidates holding none of the required skills are kept with a zero
        score. An opportunity without skill requirements yields no matches.
        """
        job = self._as_opportunity(opportunity)
        scorer = self._registry.get("skills")
        matches: list[SkillMatch] = []
        for candidate in candidates:
            profile = self._as_candidate(candidate)
            result = self._normalize(scorer.evaluate(profile, job), "skills")
            if result.status == "neutral_match":
                continue
            matches.append(SkillMatch(profile.candidate_id, result.score, result.status, result.details))
        matches.sort(key=lambda match: match.score, reverse=True)
        return matches

    def _rank(
        self,
        pairs: list[tuple[Candidate, Opportunity]],
        weights: Weights,
        options: RankingOptions | None,
        *,
        orientation: str,
        subject_id: str,
    ) -> RankingResult:
        options = options or self._default_options
        vector = self.resolve_weights(weights)

        stages = []
        selected = pairs
        if options.enable_filter:
            report = self._filter.apply(pairs, vector)
            stages = report.stages
            for stage in stages:
                self._emit("filter.stage", {"orientation": orientation, "subject_id": subject_id, **_stage_payload(stage)})
            selected = [pairs[index] for index in report.kept]

        scored = self._score_many(selected, vector)
        result = self._ranker.rank(
            scored,
            options,
            total_considered=len(pairs),
            filter_stages=stages,
            weights=vector.as_dict(),
        )

        summary = {
            "orientation": orientation,
            "subject_id": subject_id,
            "total_considered": result.total_considered,
            "total_matches": result.total_matches,
            "qualifying": result.qualifying_count,
            "returned": result.match_count,
            "highest": result.score_stats.highest,
            "average": result.score_stats.average,
        }
        self._emit("ranking.summary", summary)
        self._logger.info("ranking.completed", **summary)
        return result

    def _score_many(
        self,
        pairs: Sequence[tuple[Candidate, Opportunity]],
        vector: WeightVector,
    ) -> list[ScoredPair]:
        if self._max_workers and self._max_workers > 1 and len(pairs) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                return list(pool.map(lambda pair: self._score(pair[0], pair[1], vector), pairs))
        return [self._score(candidate, opportunity, vector) for candidate, opportunity in pairs]

    def _score(self, candidate: Candidate, opportunity: Opportunity, vector: WeightVector) -> ScoredPair:
        criteria: dict[str, CriterionScore] = {}
        for name, scorer in self._registry.items():
            criteria[name] = self._normalize(scorer.evaluate(candidate, opportunity), name)

        aggregate = self._aggregator.aggregate(criteria, vector)
        return ScoredPair(
            candidate_id=candidate.candidate_id,
            opportunity_id=opportunity.opportunity_id,
            score=aggregate.score,
            criteria=criteria,
            applied_weights=aggregate.applied_weights,
            match_status=aggregate.match_status,
        )

    @staticmethod
    def _normalize(payload: dict[str, Any], expected: str) -> CriterionScore:
        criterion = payload.get("criterion", expected)
        if criterion != expected:
            raise ValueError(f"Scorer for {expected!r} reported criterion {criterion!r}.")
        score = payload.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError(f"Scorer {expected!r} returned a non-numeric score: {score!r}")
        if not 0.0 <= score <= 1.0:
            raise ValueError(f"Scorer {expected!r} returned {score!r}, outside [0, 1].")
        status = payload.get("status")
        if status not in _STATUSES:
            raise ValueError(f"Scorer {expected!r} returned unknown status {status!r}.")
        details = payload.get("details") or {}
        return CriterionScore(criterion=expected, score=float(score), status=status, details=dict(details))

    def _build_filter(self) -> CandidateFilter:
        return CandidateFilter(
            as_of_provider=self._scorer_hook("experience", "as_of"),
            language_key=self._scorer_hook("language", "language_key"),
            skill_key=self._scorer_hook("skills", "skill_key"),
        )

    def _scorer_hook(self, criterion: str, attribute: str) -> Any:
        if criterion not in self._registry.criteria():
            return None
        return getattr(self._registry.get(criterion), attribute, None)

    def _emit(self, event: str, payload: dict[str, Any]) -> None:
        if self._observer is not None:
            self._observer(event, payload)

    @staticmethod
    def _as_candidate(value: Candidate | Mapping[str, Any]) -> Candidate:
        return Candidate.model_validate(value)

    @staticmethod
    def _as_opportunity(value: Opportunity | Mapping[str, Any]) -> Opportunity:
        return Opportunity.model_validate(value)


def _stage_payload(stage: Any) -> dict[str, Any]:
    return {
        "criterion": stage.criterion,
        "weight": stage.weight,
        "before": stage.before,
        "after": stage.after,
        "removed": stage.removed,
        "skipped": stage.skipped,
        "reason": stage.reason,
    }


__all__ = ["LanguageMatch", "MatchingEngine", "Observer", "SkillMatch", "format_score"]
