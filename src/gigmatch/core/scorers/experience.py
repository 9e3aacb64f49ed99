"""Experience duration scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import pendulum

from ...schemas import Candidate, ExperienceEntry, Opportunity


@dataclass
class ExperienceConfig:
    """Configuration for experience scoring."""

    met_floor: float = 0.8
    met_bonus: float = 0.2
    shortfall_floor: float = 0.1
    missing_score: float = 0.5
    as_of: str | None = None


def candidate_years(
    candidate: Candidate,
    as_of: pendulum.DateTime,
) -> tuple[float | None, str]:
    """Return the candidate's experience in years and where it came from."""
    if candidate.experience_years is not None:
        return candidate.experience_years, "literal"
    months = _total_months(candidate.experiences, as_of)
    if months is None:
        return None, "missing"
    return months / 12.0, "derived"


def _total_months(
    experiences: Iterable[ExperienceEntry],
    as_of: pendulum.DateTime,
) -> float | None:
    total: float | None = None
    for experience in experiences:
        start = parse_date(experience.start)
        if start is None:
            continue
        end = parse_date(experience.end, default=as_of)
        if end is None or end < start:
            continue
        total = (total or 0.0) + end.diff(start).in_months()
    return total


def parse_date(
    value: str | None,
    *,
    default: pendulum.DateTime | None = None,
) -> pendulum.DateTime | None:
    if not value:
        return default
    try:
        if len(value) == 7 and value[4] == "-":
            return pendulum.datetime(int(value[:4]), int(value[5:7]), 1)
        parsed = pendulum.parse(value)
    except ValueError:
        return default
    if not isinstance(parsed, pendulum.DateTime):
        return default
    return parsed


class ExperienceScorer:
    """Compare candidate years of experience with the required years."""

    criterion = "experience"

    def __init__(
        self,
        *,
        config: ExperienceConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or ExperienceConfig()
        self._now_provider = now_provider or pendulum.now

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)
        have, source = candidate_years(profile, self.as_of())
        need = job.required_experience_years

        details: dict[str, Any] = {
            "candidate_years": have,
            "required_years": need,
            "source": source,
        }

        if have is None or need is None:
            details["reason"] = "missing_data"
            return self._build(self._config.missing_score, "neutral_match", details)

        details["difference"] = have - need
        if have >= need:
            ratio = 1.0 if have == 0 else min(1.0, need / have)
            score = self._config.met_floor + self._config.met_bonus * ratio
            details["reason"] = "meets_requirement" if have == need else "exceeds_requirement"
            return self._build(score, "perfect_match", details)

        score = max(self._config.shortfall_floor, have / need)
        details["reason"] = "below_requirement"
        return self._build(score, "partial_match" if have > 0 else "no_match", details)

    def as_of(self) -> pendulum.DateTime:
        default_now = self._now_provider()
        if self._config.as_of is None:
            return default_now
        return parse_date(self._config.as_of, default=default_now) or default_now

    def _build(self, score: float, status: str, details: dict[str, Any]) -> dict[str, Any]:
        return {
            "criterion": self.criterion,
            "score": score,
            "status": status,
            "details": details,
        }
