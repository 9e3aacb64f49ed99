"""Language proficiency scoring.

Proficiencies are placed on one ladder (A1=0.1 ... C2/native=1.0). A
requirement may name a CEFR level, in which case that level's rank is the
threshold, or one of the tiers below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...normalize import normalize_identifier
from ...schemas import Candidate, LanguageProficiency, Opportunity
from ..results import ratio_status

LEVEL_RANKS: dict[str, float] = {
    "a1": 0.1,
    "beginner": 0.1,
    "debutant": 0.1,
    "a2": 0.2,
    "elementary": 0.2,
    "b1": 0.4,
    "intermediate": 0.4,
    "limitedworking": 0.4,
    "b2": 0.6,
    "upperintermediate": 0.6,
    "c1": 0.8,
    "advanced": 0.8,
    "fluent": 0.8,
    "professionalworking": 0.8,
    "fullprofessional": 0.9,
    "c2": 1.0,
    "native": 1.0,
    "natif": 1.0,
    "bilingual": 1.0,
    "nativeorbilingual": 1.0,
}

TIER_THRESHOLDS: dict[str, float] = {
    "conversational": 0.6,
    "professional": 0.8,
    "native": 1.0,
}


def proficiency_rank(value: str | None) -> float:
    return LEVEL_RANKS.get(normalize_identifier(value), 0.0)


def required_rank(value: str | None) -> float:
    key = normalize_identifier(value)
    if not key:
        return 0.0
    if key in TIER_THRESHOLDS:
        return TIER_THRESHOLDS[key]
    return LEVEL_RANKS.get(key, 0.0)


@dataclass
class LanguageConfig:
    """Configuration for language matching."""

    aliases: dict[str, str] = field(default_factory=lambda: {
        "francais": "french",
        "anglais": "english",
        "espagnol": "spanish",
        "arabe": "arabic",
        "allemand": "german",
    })
    no_requirement_score: float = 0.5


class LanguageScorer:
    """Ratio of required languages spoken at the required proficiency."""

    criterion = "language"

    def __init__(self, *, config: LanguageConfig | None = None) -> None:
        self._config = config or LanguageConfig()
        self._aliases = {
            normalize_identifier(key): normalize_identifier(value)
            for key, value in self._config.aliases.items()
        }

    def language_key(self, value: str | None) -> str:
        key = normalize_identifier(value)
        return self._aliases.get(key, key)

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)

        if not job.required_languages:
            return {
                "criterion": self.criterion,
                "score": self._config.no_requirement_score,
                "status": "neutral_match",
                "details": {"reason": "no_languages_required", "required": 0},
            }

        spoken: dict[str, LanguageProficiency] = {}
        for entry in profile.languages:
            key = self.language_key(entry.language)
            current = spoken.get(key)
            if current is None or proficiency_rank(entry.proficiency) > proficiency_rank(current.proficiency):
                spoken[key] = entry

        matching: list[dict[str, Any]] = []
        missing: list[dict[str, Any]] = []
        insufficient: list[dict[str, Any]] = []

        for requirement in job.required_languages:
            entry = spoken.get(self.language_key(requirement.language))
            if entry is None:
                missing.append({"language": requirement.language, "required_level": requirement.proficiency})
                continue
            record = {
                "language": requirement.language,
                "required_level": requirement.proficiency,
                "candidate_level": entry.proficiency,
            }
            if proficiency_rank(entry.proficiency) >= required_rank(requirement.proficiency):
                matching.append(record)
            else:
                insufficient.append(record)

        total = len(job.required_languages)
        status = ratio_status(len(matching), total)
        return {
            "criterion": self.criterion,
            "score": len(matching) / total,
            "status": status,
            "details": {
                "required": total,
                "matching": matching,
                "missing": missing,
                "insufficient": insufficient,
                "match_status": status,
            },
        }
