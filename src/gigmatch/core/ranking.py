"""Ranking of scored pairs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ..errors import InvalidInputError
from .filtering import FilterStage
from .results import ScoredPair


@dataclass
class RankingOptions:
    """Options controlling which pairs are reported."""

    minimum_score: float = 0.4
    limit: int = 10
    show_all_scores: bool = False
    top_score_count: int = 5
    enable_filter: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.minimum_score, bool) or not isinstance(self.minimum_score, (int, float)):
            raise InvalidInputError(f"minimum_score must be a number, got {self.minimum_score!r}")
        if not 0.0 <= self.minimum_score <= 1.0:
            raise InvalidInputError(f"minimum_score must lie in [0, 1], got {self.minimum_score!r}")
        for name in ("limit", "top_score_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidInputError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(slots=True, frozen=True)
class ScoreStats:
    highest: float
    average: float
    qualifying: int


@dataclass(slots=True)
class RankingResult:
    """Ranked view over every scored pair of one request."""

    matches: list[ScoredPair]
    qualifying_count: int
    total_matches: int
    total_considered: int
    match_count: int
    top_scores: list[ScoredPair] | None
    score_stats: ScoreStats
    minimum_score_applied: float
    filter_stages: list[FilterStage] = field(default_factory=list)
    weights: dict[str, float] = field(default_factory=dict)


class Ranker:
    """Order pairs by aggregate score and cut them down to the report."""

    def rank(
        self,
        pairs: Sequence[ScoredPair],
        options: RankingOptions | None = None,
        *,
        total_considered: int | None = None,
        filter_stages: list[FilterStage] | None = None,
        weights: dict[str, float] | None = None,
    ) -> RankingResult:
        options = options or RankingOptions()
        # sorted() is stable, so equal scores keep input order.
        ordered = sorted(pairs, key=lambda pair: pair.score, reverse=True)
        qualifying = [pair for pair in ordered if pair.score >= options.minimum_score]
        matches = qualifying[: options.limit]

        top_scores = None
        if options.show_all_scores:
            top_scores = qualifying[: options.top_score_count]

        scores = [pair.score for pair in ordered]
        stats = ScoreStats(
            highest=max(scores) if scores else 0.0,
            average=sum(scores) / len(scores) if scores else 0.0,
            qualifying=len(qualifying),
        )

        return RankingResult(
            matches=matches,
            qualifying_count=len(qualifying),
            total_matches=len(ordered),
            total_considered=len(ordered) if total_considered is None else total_considered,
            match_count=len(matches),
            top_scores=top_scores,
            score_stats=stats,
            minimum_score_applied=float(options.minimum_score),
            filter_stages=list(filter_stages or []),
            weights=dict(weights or {}),
        )


__all__ = ["RankingOptions", "RankingResult", "Ranker", "ScoreStats"]
