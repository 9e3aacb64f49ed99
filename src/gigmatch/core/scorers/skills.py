"""Skill coverage scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rapidfuzz import fuzz

from ...normalize import normalize_identifier
from ...schemas import Candidate, Opportunity, SkillEntry
from ..results import ratio_status

LEVEL_RANKS: dict[str, float] = {
    "beginner": 1,
    "novice": 1,
    "basic": 1,
    "elementary": 2,
    "intermediate": 3,
    "advanced": 4,
    "expert": 5,
}


def level_rank(level: Any) -> float:
    """Map a 0-5 number or a Beginner..Expert label onto the 0-5 scale."""
    if level is None or isinstance(level, bool):
        return 0.0
    if isinstance(level, (int, float)):
        return float(level)
    text = str(level).strip()
    try:
        return float(text)
    except ValueError:
        return float(LEVEL_RANKS.get(normalize_identifier(text), 0))


_SKILL_SYMBOLS: tuple[tuple[str, str], ...] = (("++", "pp"), ("#", "sharp"), ("+", "plus"))

DEFAULT_SKILL_ALIASES: dict[str, str] = {
    "js": "javascript",
    "py": "python",
    "c++": "cpp",
    "c#": "csharp",
    "reactjs": "react",
    "node": "nodejs",
    "node.js": "nodejs",
    "vue.js": "vue",
    "vuejs": "vue",
    "mysql": "sql",
    "postgresql": "sql",
    "mongodb": "nosql",
}


def skill_identifier(value: Any) -> str:
    """Comparison key for a skill name that keeps ``C++`` and ``C#`` apart from ``C``."""
    if isinstance(value, dict):
        value = value.get("name") or ""
    text = str(value or "").casefold()
    for symbol, word in _SKILL_SYMBOLS:
        text = text.replace(symbol, word)
    return normalize_identifier(text)


@dataclass
class SkillsConfig:
    """Configuration for skill matching.

    ``aliases`` maps spelling variants onto one canonical skill name.
    """

    aliases: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SKILL_ALIASES))
    match_category: bool = True
    unleveled_min_level: float = 4.0
    min_similarity: float | None = None
    no_requirement_score: float = 0.5


class SkillsScorer:
    """Ratio of required skills the candidate holds at a sufficient level."""

    criterion = "skills"

    def __init__(self, *, config: SkillsConfig | None = None) -> None:
        self._config = config or SkillsConfig()
        self._aliases = {
            skill_identifier(key): skill_identifier(value)
            for key, value in self._config.aliases.items()
        }

    def skill_key(self, value: Any) -> str:
        key = skill_identifier(value)
        return self._aliases.get(key, key)

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        profile = Candidate.model_validate(candidate)
        job = Opportunity.model_validate(opportunity)

        required = [
            (category, requirement)
            for category, requirements in job.required_skills.by_category().items()
            for requirement in requirements
        ]
        if not required:
            return {
                "criterion": self.criterion,
                "score": self._config.no_requirement_score,
                "status": "neutral_match",
                "details": {"reason": "no_skills_required", "required": 0},
            }

        held = [
            (category, skill)
            for category, skills in profile.skills.by_category().items()
            for skill in skills
        ]

        matching: list[dict[str, Any]] = []
        missing: list[dict[str, Any]] = []
        insufficient: list[dict[str, Any]] = []

        for category, requirement in required:
            entry = self._find(held, category, requirement.name)
            if entry is None:
                missing.append({"skill": requirement.name, "type": category, "required_level": requirement.level})
                continue
            needed = (
                level_rank(requirement.level)
                if requirement.level is not None
                else self._config.unleveled_min_level
            )
            record = {
                "skill": requirement.name,
                "type": category,
                "required_level": requirement.level,
                "candidate_level": entry.level,
            }
            if level_rank(entry.level) >= needed:
                matching.append(record)
            else:
                insufficient.append(record)

        total = len(required)
        return {
            "criterion": self.criterion,
            "score": len(matching) / total,
            "status": ratio_status(len(matching), total),
            "details": {
                "required": total,
                "matching": matching,
                "missing": missing,
                "insufficient": insufficient,
            },
        }

    def _find(
        self,
        held: list[tuple[str, SkillEntry]],
        category: str,
        name: str,
    ) -> SkillEntry | None:
        best: SkillEntry | None = None
        for held_category, skill in held:
            if self._config.match_category and held_category != category:
                continue
            if not self._same_skill(name, skill.name):
                continue
            if best is None or level_rank(skill.level) > level_rank(best.level):
                best = skill
        return best

    def _same_skill(self, wanted: str, candidate_skill: str) -> bool:
        wanted_key = self.skill_key(wanted)
        if not wanted_key:
            return False
        if wanted_key == self.skill_key(candidate_skill):
            return True
        if self._config.min_similarity is None:
            return False
        score = fuzz.token_set_ratio(wanted.casefold(), candidate_skill.casefold())
        return score >= self._config.min_similarity
