"""Criterion scorer implementations and their registry."""

from __future__ import annotations

from typing import Any, Iterable

from .availability import AvailabilityScorer
from .experience import ExperienceScorer
from .industry import IndustryScorer
from .language import LanguageScorer
from .performance import PerformanceScorer
from .region import RegionScorer
from .skills import SkillsScorer
from .timezone import TimezoneScorer

CRITERIA: tuple[str, ...] = (
    "experience",
    "skills",
    "industry",
    "language",
    "availability",
    "timezone",
    "performance",
    "region",
)


class ScorerRegistry:
    """Scorers keyed by criterion name, in canonical criterion order."""

    def __init__(self, scorers: Iterable[Any]):
        self._scorers: dict[str, Any] = {}
        for scorer in scorers:
            if scorer.criterion in self._scorers:
                raise ValueError(f"Duplicate scorer for criterion {scorer.criterion!r}")
            self._scorers[scorer.criterion] = scorer

    def get(self, criterion: str) -> Any:
        try:
            return self._scorers[criterion]
        except KeyError as exc:
            raise KeyError(f"No scorer registered for {criterion!r}") from exc

    def criteria(self) -> list[str]:
        ordered = [name for name in CRITERIA if name in self._scorers]
        return ordered + [name for name in self._scorers if name not in CRITERIA]

    def items(self) -> list[tuple[str, Any]]:
        return [(name, self._scorers[name]) for name in self.criteria()]


def default_registry() -> ScorerRegistry:
    """Registry with every built-in scorer at its default configuration."""
    return ScorerRegistry(
        [
            ExperienceScorer(),
            SkillsScorer(),
            IndustryScorer(),
            LanguageScorer(),
            AvailabilityScorer(),
            TimezoneScorer(),
            PerformanceScorer(),
            RegionScorer(),
        ]
    )


__all__ = [
    "CRITERIA",
    "ScorerRegistry",
    "default_registry",
    "ExperienceScorer",
    "SkillsScorer",
    "IndustryScorer",
    "LanguageScorer",
    "AvailabilityScorer",
    "TimezoneScorer",
    "PerformanceScorer",
    "RegionScorer",
]
