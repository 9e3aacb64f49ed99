"""Weekly availability versus required schedule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

from ...normalize import MINUTES_PER_DAY, canonical_day, parse_time
from ...schemas import AvailabilitySlot, Candidate, Opportunity

Interval = tuple[int, int]


def candidate_intervals(availability: Iterable[AvailabilitySlot | str]) -> dict[str, list[Interval]]:
    """Per-day merged availability; a bare day name means the whole day."""
    by_day: dict[str, list[Interval]] = {}
    for slot in availability:
        if isinstance(slot, str):
            day, interval = canonical_day(slot), (0, MINUTES_PER_DAY)
        else:
            day, interval = canonical_day(slot.day), (parse_time(slot.start), parse_time(slot.end))
        if not day:
            continue
        by_day.setdefault(day, []).append(interval)
    return {day: _merge(intervals) for day, intervals in by_day.items()}


def required_intervals(opportunity: Opportunity) -> dict[str, list[Interval]]:
    by_day: dict[str, list[Interval]] = {}
    for entry in opportunity.schedule:
        day = canonical_day(entry.day)
        if not day:
            continue
        by_day.setdefault(day, []).append((parse_time(entry.start), parse_time(entry.end)))
    return by_day


def _merge(intervals: list[Interval]) -> list[Interval]:
    merged: list[Interval] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _contains(available: list[Interval], needed: Interval) -> bool:
    return any(start <= needed[0] and end >= needed[1] for start, end in available)


def _overlap(available: list[Interval], needed: Interval) -> int:
    return sum(
        max(0, min(end, needed[1]) - max(start, needed[0]))
        for start, end in available
    )


def _format(interval: Interval) -> str:
    return "{:02d}:{:02d}-{:02d}:{:02d}".format(
        interval[0] // 60, interval[0] % 60, interval[1] // 60, interval[1] % 60
    )


@dataclass
class AvailabilityConfig:
    """Configuration for schedule matching."""

    mode: Literal["strict", "overlap"] = "strict"
    overlap_floor: float = 0.2
    no_schedule_score: float = 0.5


class AvailabilityScorer:
    """Share of required schedule days the candidate fully covers.

    A required day with no candidate entry at all is a hard miss and scores
    the whole comparison 0.
    """

    criterion = "availability"

    def __init__(self, *, config: AvailabilityConfig | None = None) -> None:
        self._config = config or AvailabilityConfig()

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)

        required = required_intervals(job)
        if not required:
            return {
                "criterion": self.criterion,
                "score": self._config.no_schedule_score,
                "status": "neutral_match",
                "details": {"reason": "no_schedule_required", "mode": self._config.mode},
            }

        available = candidate_intervals(profile.availability)

        matching_days: list[dict[str, Any]] = []
        missing_days: list[str] = []
        insufficient_hours: list[dict[str, Any]] = []
        required_minutes = 0
        overlapped_minutes = 0

        for day, needed in required.items():
            day_minutes = sum(end - start for start, end in needed)
            required_minutes += day_minutes
            slots = available.get(day)
            if not slots:
                missing_days.append(day)
                continue
            overlapped_minutes += sum(_overlap(slots, interval) for interval in needed)
            record = {
                "day": day,
                "required_hours": [_format(interval) for interval in needed],
                "candidate_hours": [_format(interval) for interval in slots],
            }
            if all(_contains(slots, interval) for interval in needed):
                matching_days.append(record)
            else:
                insufficient_hours.append(record)

        details: dict[str, Any] = {
            "mode": self._config.mode,
            "required_days": len(required),
            "matching_days": matching_days,
            "missing_days": missing_days,
            "insufficient_hours": insufficient_hours,
        }

        if missing_days:
            details["reason"] = "missing_required_day"
            return {"criterion": self.criterion, "score": 0.0, "status": "no_match", "details": details}

        covered = len(matching_days)
        if self._config.mode == "overlap":
            fraction = overlapped_minutes / required_minutes if required_minutes else 0.0
            floor = self._config.overlap_floor
            score = floor + (1.0 - floor) * min(1.0, fraction)
            details["overlap_fraction"] = fraction
        else:
            score = covered / len(required)

        if covered == len(required):
            status = "perfect_match"
        elif covered or (self._config.mode == "overlap" and overlapped_minutes):
            status = "partial_match"
        else:
            status = "no_match"
        return {"criterion": self.criterion, "score": score, "status": status, "details": details}
