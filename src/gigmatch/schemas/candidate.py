from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..normalize import parse_time, parse_years


class ExperienceEntry(BaseModel):
    """Dated role in a candidate's work history."""

    title: str = ""
    company: str = ""
    start: str | None = None
    end: str | None = None

    model_config = ConfigDict(extra="forbid")


class SkillEntry(BaseModel):
    """Skill held by a candidate, with a 0-5 or categorical level."""

    name: str
    level: int | float | str | None = None

    model_config = ConfigDict(extra="forbid")


class CandidateSkills(BaseModel):
    """Candidate skills partitioned by category."""

    technical: list[SkillEntry] = Field(default_factory=list)
    professional: list[SkillEntry] = Field(default_factory=list)
    soft: list[SkillEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def by_category(self) -> dict[str, list[SkillEntry]]:
        return {
            "technical": self.technical,
            "professional": self.professional,
            "soft": self.soft,
        }

    def is_empty(self) -> bool:
        return not (self.technical or self.professional or self.soft)


class LanguageProficiency(BaseModel):
    """Language spoken by a candidate."""

    language: str
    proficiency: str | None = None

    model_config = ConfigDict(extra="forbid")


class AvailabilitySlot(BaseModel):
    """Weekly availability window on one day."""

    day: str
    start: str
    end: str

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_interval(self) -> "AvailabilitySlot":
        if parse_time(self.end) <= parse_time(self.start):
            raise ValueError(f"Slot on {self.day} ends before it starts ({self.start}-{self.end})")
        return self


class PerformanceMetrics(BaseModel):
    """Historical performance of a candidate."""

    conversion_rate: float | None = Field(default=None, ge=0.0, le=1.0)
    reliability: float | None = Field(default=None, ge=0.0, le=10.0)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)

    model_config = ConfigDict(extra="forbid")


class Candidate(BaseModel):
    """Provider-neutral candidate (agent) record."""

    candidate_id: str
    name: str | None = None
    experience_years: float | None = None
    experiences: list[ExperienceEntry] = Field(default_factory=list)
    skills: CandidateSkills = Field(default_factory=CandidateSkills)
    languages: list[LanguageProficiency] = Field(default_factory=list)
    availability: list[AvailabilitySlot | str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    timezone: str | None = None
    region: str | None = None
    performance: PerformanceMetrics = Field(default_factory=PerformanceMetrics)

    model_config = ConfigDict(extra="allow")

    @field_validator("experience_years", mode="before")
    @classmethod
    def _parse_experience(cls, value: Any) -> float | None:
        return parse_years(value)
