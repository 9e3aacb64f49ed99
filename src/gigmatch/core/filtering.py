"""Hard-filter pre-pass applied before scoring.

Explicitly weighted criteria are visited in descending weight order. Each
criterion at or above the threshold removes pairs that fail a coarse
"any overlap" predicate. The pass is recall oriented and never changes the
aggregate score of the pairs it keeps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Sequence

import pendulum

from ..normalize import normalize_identifier
from ..schemas import Candidate, Opportunity
from .scorers.availability import candidate_intervals, required_intervals
from .scorers.experience import candidate_years
from .scorers.industry import matching_industries
from .scorers.skills import skill_identifier
from .weights import WeightVector

Pair = tuple[Candidate, Opportunity]
Predicate = Callable[[Candidate, Opportunity], bool]


@dataclass
class FilterConfig:
    """Configuration for the hard-filter pre-pass."""

    threshold: float = 0.5
    excluded_criteria: tuple[str, ...] = ("industry",)
    cap_overqualification: bool = False
    overqualification_factor: float = 2.0


@dataclass(slots=True, frozen=True)
class FilterStage:
    """Pair counts around one filter criterion."""

    criterion: str
    weight: float
    before: int
    after: int
    removed: int
    skipped: bool
    reason: str


@dataclass(slots=True)
class FilterReport:
    kept: list[int]
    stages: list[FilterStage] = field(default_factory=list)


class CandidateFilter:
    """Drop pairs failing high-weight criteria outright."""

    def __init__(
        self,
        *,
        config: FilterConfig | None = None,
        as_of_provider: Callable[[], pendulum.DateTime] | None = None,
        language_key: Callable[[str | None], str] | None = None,
        skill_key: Callable[[str | None], str] | None = None,
    ) -> None:
        self._config = config or FilterConfig()
        self._as_of_provider = as_of_provider or pendulum.now
        self._language_key = language_key or normalize_identifier
        self._skill_key = skill_key or skill_identifier

    @property
    def config(self) -> FilterConfig:
        return self._config

    def apply(self, pairs: Sequence[Pair], weights: WeightVector) -> FilterReport:
        kept = list(range(len(pairs)))
        stages: list[FilterStage] = []
        predicates = self._predicates(self._as_of_provider())

        for criterion, weight in weights.by_descending_weight(explicit_only=True):
            before = len(kept)
            reason = self._skip_reason(criterion, weight, predicates)
            if reason is not None:
                stages.append(FilterStage(criterion, weight, before, before, 0, True, reason))
                continue
            predicate = predicates[criterion]
            kept = [index for index in kept if predicate(*pairs[index])]
            after = len(kept)
            stages.append(FilterStage(criterion, weight, before, after, before - after, False, "applied"))

        return FilterReport(kept=kept, stages=stages)

    def _predicates(self, as_of: pendulum.DateTime) -> dict[str, Predicate]:
        return {
            "experience": partial(self._experience, as_of=as_of),
            "skills": self._skills,
            "language": self._language,
            "availability": self._availability,
            "industry": self._industry,
        }

    def _skip_reason(
        self,
        criterion: str,
        weight: float,
        predicates: dict[str, Predicate],
    ) -> str | None:
        if weight < self._config.threshold:
            return "below_threshold"
        if criterion in self._config.excluded_criteria:
            return "excluded"
        if criterion not in predicates:
            return "no_hard_filter"
        return None

    def _experience(
        self,
        candidate: Candidate,
        opportunity: Opportunity,
        *,
        as_of: pendulum.DateTime,
    ) -> bool:
        need = opportunity.required_experience_years
        if need is None:
            return True
        have, _ = candidate_years(candidate, as_of)
        if have is None or have < need:
            return False
        if self._config.cap_overqualification and need > 0:
            return have <= need * self._config.overqualification_factor
        return True

    def _skills(self, candidate: Candidate, opportunity: Opportunity) -> bool:
        required = {
            self._skill_key(requirement.name)
            for requirements in opportunity.required_skills.by_category().values()
            for requirement in requirements
        }
        required.discard("")
        if not required:
            return True
        held = {
            self._skill_key(skill.name)
            for skills in candidate.skills.by_category().values()
            for skill in skills
        }
        return bool(required & held)

    def _language(self, candidate: Candidate, opportunity: Opportunity) -> bool:
        required = {self._language_key(item.language) for item in opportunity.required_languages}
        required.discard("")
        if not required:
            return True
        spoken = {self._language_key(item.language) for item in candidate.languages}
        return bool(required & spoken)

    @staticmethod
    def _availability(candidate: Candidate, opportunity: Opportunity) -> bool:
        required = set(required_intervals(opportunity))
        if not required:
            return True
        return bool(required & set(candidate_intervals(candidate.availability)))

    @staticmethod
    def _industry(candidate: Candidate, opportunity: Opportunity) -> bool:
        if not normalize_identifier(opportunity.category):
            return True
        return bool(matching_industries(candidate, opportunity.category))


__all__ = ["CandidateFilter", "FilterConfig", "FilterReport", "FilterStage"]
