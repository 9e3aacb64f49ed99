from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..normalize import parse_time, parse_years


class SkillRequirement(BaseModel):
    """Skill required by an opportunity, optionally with a minimum level."""

    name: str
    level: int | float | str | None = None

    model_config = ConfigDict(extra="forbid")


class RequiredSkills(BaseModel):
    """Required skills partitioned by category."""

    technical: list[SkillRequirement] = Field(default_factory=list)
    professional: list[SkillRequirement] = Field(default_factory=list)
    soft: list[SkillRequirement] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def by_category(self) -> dict[str, list[SkillRequirement]]:
        return {
            "technical": self.technical,
            "professional": self.professional,
            "soft": self.soft,
        }

    def is_empty(self) -> bool:
        return not (self.technical or self.professional or self.soft)


class LanguageRequirement(BaseModel):
    """Required language with a CEFR level or a named tier."""

    language: str
    proficiency: str | None = None

    model_config = ConfigDict(extra="forbid")


class ScheduleEntry(BaseModel):
    """Required working window on one day."""

    day: str
    start: str
    end: str

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_interval(self) -> "ScheduleEntry":
        if parse_time(self.end) <= parse_time(self.start):
            raise ValueError(f"Schedule on {self.day} ends before it starts ({self.start}-{self.end})")
        return self


class Opportunity(BaseModel):
    """Provider-neutral opportunity (gig) record."""

    opportunity_id: str
    title: str | None = None
    required_experience_years: float | None = None
    required_skills: RequiredSkills = Field(default_factory=RequiredSkills)
    required_languages: list[LanguageRequirement] = Field(default_factory=list)
    schedule: list[ScheduleEntry] = Field(default_factory=list)
    category: str | None = None
    region: str | None = None
    timezone: str | None = None
    expected_conversion_rate: float | None = Field(default=None, ge=0.0, le=1.0)

    model_config = ConfigDict(extra="allow")

    @field_validator("required_experience_years", mode="before")
    @classmethod
    def _parse_experience(cls, value: Any) -> float | None:
        return parse_years(value)
