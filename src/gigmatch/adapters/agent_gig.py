"""Adapter for nested agent and gig documents of the staffing platform."""

from __future__ import annotations

import json
from typing import Any

from ..schemas import (
    AvailabilitySlot,
    Candidate,
    CandidateSkills,
    ExperienceEntry,
    LanguageProficiency,
    LanguageRequirement,
    Opportunity,
    PerformanceMetrics,
    RequiredSkills,
    ScheduleEntry,
    SkillEntry,
    SkillRequirement,
)
from ._json import load_document

_SKILL_CATEGORIES = ("technical", "professional", "soft")


class AgentGigAdapter:
    """Adapter converting agent/gig documents into neutral candidate and opportunity dicts."""

    provider = "agent_gig"

    def can_handle(self, blob: bytes | str | dict[str, Any], metadata: dict[str, Any]) -> bool:
        provider = metadata.get("provider")
        if provider:
            return str(provider).lower() == self.provider
        try:
            data = load_document(blob, self.provider)
        except ValueError:
            return False
        return "personalInfo" in data or "seniority" in data

    def parse_candidate(self, payload: bytes | str | dict[str, Any]) -> dict[str, Any]:
        agent = load_document(payload, self.provider)
        personal = agent.get("personalInfo") or {}
        summary = agent.get("professionalSummary") or {}
        availability = agent.get("availability") or {}
        skills = agent.get("skills") or {}
        time_zone = availability.get("timeZone") if isinstance(availability, dict) else None

        years = summary.get("yearsOfExperience")
        history = agent.get("experience")
        if years in (None, "") and isinstance(history, (int, float, str)):
            years = history

        experiences = [
            ExperienceEntry(
                title=_text(item.get("title")),
                company=_text(item.get("company")),
                start=item.get("startDate") or item.get("start"),
                end=item.get("endDate") or item.get("end"),
            )
            for item in (history if isinstance(history, list) else [])
            if isinstance(item, dict)
        ]

        candidate = Candidate(
            candidate_id=_identifier(agent),
            name=personal.get("name") or _full_name(agent),
            experience_years=years,
            experiences=experiences,
            skills=CandidateSkills(
                **{
                    category: [
                        SkillEntry(name=name, level=level)
                        for name, level in _skill_items(skills.get(category))
                    ]
                    for category in _SKILL_CATEGORIES
                }
            ),
            languages=[
                LanguageProficiency(
                    language=_text(entry.get("language")),
                    proficiency=_text(entry.get("proficiency")) or None,
                )
                for entry in personal.get("languages") or []
                if isinstance(entry, dict) and _text(entry.get("language"))
            ],
            availability=_availability(availability),
            industries=[
                _text(item) for item in summary.get("industries") or [] if _text(item)
            ],
            timezone=_zone_name(time_zone),
            region=time_zone.get("countryCode") if isinstance(time_zone, dict) else None,
            performance=_performance(agent.get("performance") or {}),
        )
        return candidate.model_dump(mode="python")

    def parse_opportunity(self, payload: bytes | str | dict[str, Any]) -> dict[str, Any]:
        gig = load_document(payload, self.provider)
        seniority = gig.get("seniority") or {}
        skills = gig.get("skills") or {}
        schedule = gig.get("schedule") or {}

        time_zones = schedule.get("timeZones") or []
        timezone = _zone_name(time_zones[0]) if time_zones else None
        if timezone is None:
            timezone = _zone_name((gig.get("availability") or {}).get("time_zone"))

        opportunity = Opportunity(
            opportunity_id=_identifier(gig),
            title=gig.get("title"),
            required_experience_years=seniority.get("yearsExperience"),
            required_skills=RequiredSkills(
                **{
                    category: [
                        SkillRequirement(name=name, level=level)
                        for name, level in _skill_items(skills.get(category))
                    ]
                    for category in _SKILL_CATEGORIES
                }
            ),
            required_languages=[
                LanguageRequirement(
                    language=_text(entry.get("name") or entry.get("language")),
                    proficiency=_text(entry.get("level") or entry.get("proficiency")) or None,
                )
                for entry in skills.get("languages") or []
                if isinstance(entry, dict) and _text(entry.get("name") or entry.get("language"))
            ],
            schedule=_schedule(schedule.get("hours")),
            category=_text(gig.get("category")) or None,
            region=_region_code(gig.get("destination_zone")),
            timezone=timezone,
            expected_conversion_rate=_expected_conversion(gig.get("leads") or {}),
        )
        return opportunity.model_dump(mode="python")


def _identifier(document: dict[str, Any]) -> str:
    value = document.get("_id", document.get("id", ""))
    if isinstance(value, dict):
        value = value.get("$oid", "")
    return str(value)


def _full_name(agent: dict[str, Any]) -> str | None:
    name = " ".join(part for part in (agent.get("firstName"), agent.get("lastName")) if part)
    return name or None


def _text(value: Any) -> str:
    """Flatten populated reference documents to their display name."""
    if value is None:
        return ""
    if isinstance(value, dict):
        value = value.get("name") or value.get("skill") or ""
    return str(value).strip()


def _skill_items(entries: Any) -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for entry in entries or []:
        if isinstance(entry, dict):
            name = _text(entry.get("skill") or entry.get("name"))
            level = entry.get("level", entry.get("proficiency"))
        else:
            name, level = _text(entry), None
        if name:
            items.append((name, level))
    return items


def _availability(availability: Any) -> list[AvailabilitySlot | str]:
    # Older agent documents store availability as a bare list of day names.
    if isinstance(availability, list):
        return [_text(day) for day in availability if _text(day)]

    if not isinstance(availability, dict):
        raise ValueError(f"Invalid availability: expected an object, got {type(availability).__name__}")
    schedule = availability.get("schedule") or []
    if not isinstance(schedule, list):
        raise ValueError("Invalid availability schedule: expected a list")

    slots: list[AvailabilitySlot | str] = []
    for entry in schedule:
        if not isinstance(entry, dict) or not entry.get("day"):
            continue
        hours = entry.get("hours") or {}
        if not isinstance(hours, dict):
            raise ValueError(f"Invalid availability hours for {entry['day']!r}: expected an object")
        if hours.get("start") and hours.get("end"):
            slots.append(AvailabilitySlot(day=entry["day"], start=hours["start"], end=hours["end"]))
        else:
            slots.append(str(entry["day"]))
    return slots


def _schedule(hours: Any) -> list[ScheduleEntry]:
    """Read required hours, stored as a JSON-encoded list of ``{day, start, end}``."""
    if not hours:
        return []
    if isinstance(hours, str):
        try:
            hours = json.loads(hours)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid schedule hours: {exc}") from exc
    if isinstance(hours, dict):
        hours = [hours]

    if not isinstance(hours, list):
        raise ValueError("Invalid schedule hours: expected a list of {day, start, end} objects")

    entries: list[ScheduleEntry] = []
    for item in hours:
        if not isinstance(item, dict):
            raise ValueError(f"Invalid schedule entry {item!r}: expected an object")
        window = item.get("hours") or item
        if not isinstance(window, dict):
            raise ValueError(f"Invalid schedule hours for {item.get('day')!r}: expected an object")
        entries.append(ScheduleEntry(day=item["day"], start=window["start"], end=window["end"]))
    return entries


def _zone_name(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("zoneName") or value.get("name")
    return str(value) if value else None


def _region_code(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("cca2") or value.get("code") or value.get("name")
    return str(value) if value else None


def _performance(raw: dict[str, Any]) -> PerformanceMetrics:
    conversion = raw.get("conversionRate")
    if isinstance(conversion, (int, float)) and conversion > 1:
        conversion = conversion / 100.0
    return PerformanceMetrics(
        conversion_rate=conversion,
        reliability=raw.get("reliability"),
        rating=raw.get("rating"),
    )


def _expected_conversion(leads: dict[str, Any]) -> float | None:
    """Average the per-lead-type conversion rates, read as percentages above 1."""
    rates = [
        float(item["conversionRate"])
        for item in leads.get("types") or []
        if isinstance(item, dict) and isinstance(item.get("conversionRate"), (int, float))
    ]
    if not rates:
        return None
    average = sum(rates) / len(rates)
    return average / 100.0 if average > 1 else average
