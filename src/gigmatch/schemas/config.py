"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class RankingConfig(BaseModel):
    minimum_score: float | None = None
    limit: int | None = None
    show_all_scores: bool | None = None
    top_score_count: int | None = None
    enable_filter: bool | None = None


class FilterConfig(BaseModel):
    threshold: float | None = None
    excluded_criteria: list[str] | None = None
    cap_overqualification: bool | None = None


class CoreConfig(BaseModel):
    weights: dict[str, float] | None = None
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    max_workers: int | None = None


class ScorerConfig(BaseModel):
    experience: dict[str, Any] | None = None
    skills: dict[str, Any] | None = None
    industry: dict[str, Any] | None = None
    language: dict[str, Any] | None = None
    availability: dict[str, Any] | None = None
    timezone: dict[str, Any] | None = None
    performance: dict[str, Any] | None = None
    region: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    scorers: ScorerConfig = Field(default_factory=ScorerConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        core = self.core.model_dump(exclude_none=True)
        core = {key: value for key, value in core.items() if value != {}}
        if core:
            settings["core"] = core
        scorer_settings = self.scorers.model_dump(exclude_none=True)
        if scorer_settings:
            settings["scorers"] = scorer_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
