"""Timezone compatibility scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pendulum

from ...normalize import normalize_identifier
from ...schemas import Candidate, Opportunity


@dataclass
class TimezoneConfig:
    """Configuration for timezone matching.

    With ``offset_grading`` enabled, two IANA zone names are graded by the
    difference of their current UTC offsets instead of the plain
    same/different rule.
    """

    mismatch_score: float = 0.5
    missing_score: float = 0.5
    offset_grading: bool = False
    offset_bands: list[tuple[float, float]] = field(default_factory=lambda: [
        (0.0, 1.0),
        (1.0, 0.7),
        (2.0, 0.5),
        (3.0, 0.3),
        (4.0, 0.1),
    ])


class TimezoneScorer:
    """Exact timezone match with a neutral score otherwise."""

    criterion = "timezone"

    def __init__(
        self,
        *,
        config: TimezoneConfig | None = None,
        now_provider: Any | None = None,
    ) -> None:
        self._config = config or TimezoneConfig()
        self._now_provider = now_provider or pendulum.now

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)

        details: dict[str, Any] = {
            "candidate_timezone": profile.timezone,
            "required_timezone": job.timezone,
        }
        if not normalize_identifier(profile.timezone) or not normalize_identifier(job.timezone):
            details["reason"] = "missing_data"
            return self._build(self._config.missing_score, "neutral_match", details)

        if normalize_identifier(profile.timezone) == normalize_identifier(job.timezone):
            details["reason"] = "same_timezone"
            return self._build(1.0, "perfect_match", details)

        if self._config.offset_grading:
            difference = self._offset_hours(profile.timezone, job.timezone)
            if difference is not None:
                details["offset_difference_hours"] = difference
                return self._graded(difference, details)

        details["reason"] = "different_timezone"
        return self._build(self._config.mismatch_score, "partial_match", details)

    def _graded(self, difference: float, details: dict[str, Any]) -> dict[str, Any]:
        for limit, score in self._config.offset_bands:
            if difference <= limit:
                details["reason"] = f"offset_within_{limit:g}h"
                status = "perfect_match" if score >= 1.0 else "partial_match"
                return self._build(score, status, details)
        details["reason"] = "offset_incompatible"
        return self._build(0.0, "no_match", details)

    def _offset_hours(self, left: str, right: str) -> float | None:
        now = self._now_provider()
        try:
            left_offset = now.in_timezone(left).utcoffset()
            right_offset = now.in_timezone(right).utcoffset()
        except (ValueError, KeyError, OSError):
            # Region prefixes such as "Europe" resolve to tzdata directories.
            return None
        if left_offset is None or right_offset is None:
            return None
        return abs((left_offset - right_offset).total_seconds()) / 3600.0

    def _build(self, score: float, status: str, details: dict[str, Any]) -> dict[str, Any]:
        return {
            "criterion": self.criterion,
            "score": score,
            "status": status,
            "details": details,
        }
