"""Pydantic schema definitions for provider-neutral matching records."""

from __future__ import annotations

from .candidate import (
    AvailabilitySlot,
    Candidate,
    CandidateSkills,
    ExperienceEntry,
    LanguageProficiency,
    PerformanceMetrics,
    SkillEntry,
)
from .opportunity import (
    LanguageRequirement,
    Opportunity,
    RequiredSkills,
    ScheduleEntry,
    SkillRequirement,
)

__all__ = [
    "Candidate",
    "CandidateSkills",
    "SkillEntry",
    "LanguageProficiency",
    "AvailabilitySlot",
    "ExperienceEntry",
    "PerformanceMetrics",
    "Opportunity",
    "RequiredSkills",
    "SkillRequirement",
    "LanguageRequirement",
    "ScheduleEntry",
]
