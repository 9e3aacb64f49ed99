from __future__ import annotations

import pendulum

from gigmatch.core import CandidateFilter, FilterConfig, resolve_weights
from gigmatch.core.scorers import SkillsScorer
from gigmatch.schemas import Candidate, Opportunity


def build_candidate(candidate_id: str, **kwargs) -> Candidate:
    return Candidate(candidate_id=candidate_id, **kwargs)


def build_opportunity(**kwargs) -> Opportunity:
    return Opportunity(opportunity_id="O-600", **kwargs)


def pairs_for(opportunity: Opportunity, *candidates: Candidate) -> list[tuple[Candidate, Opportunity]]:
    return [(candidate, opportunity) for candidate in candidates]


def test_experience_stage_drops_short_and_unknown():
    opportunity = build_opportunity(required_experience_years=3)
    pairs = pairs_for(
        opportunity,
        build_candidate("C-1", experience_years=5),
        build_candidate("C-2", experience_years=1),
        build_candidate("C-3"),
    )

    report = CandidateFilter().apply(pairs, resolve_weights({"experience": 1}))

    assert report.kept == [0]
    stage = report.stages[0]
    assert (stage.criterion, stage.before, stage.after, stage.removed) == ("experience", 3, 1, 2)
    assert stage.skipped is False


def test_absent_requirement_keeps_everyone():
    pairs = pairs_for(build_opportunity(), build_candidate("C-1"), build_candidate("C-2"))

    report = CandidateFilter().apply(
        pairs, resolve_weights({"experience": 1, "skills": 1, "language": 1, "availability": 1})
    )

    assert report.kept == [0, 1]


def test_stages_follow_descending_weight():
    opportunity = build_opportunity(
        required_languages=[{"language": "English", "proficiency": "native"}],
        schedule=[{"day": "Monday", "start": "09:00", "end": "17:00"}],
    )
    pairs = pairs_for(
        opportunity,
        build_candidate("C-1", languages=[{"language": "English", "proficiency": "B1"}], availability=["Monday"]),
        build_candidate("C-2", languages=[{"language": "German", "proficiency": "C2"}], availability=["Monday"]),
        build_candidate("C-3", languages=[{"language": "english"}], availability=["Tuesday"]),
    )

    report = CandidateFilter().apply(pairs, resolve_weights({"availability": 0.8, "language": 2}))

    assert [stage.criterion for stage in report.stages] == ["language", "availability"]
    assert report.stages[0].after == 2
    assert report.stages[1].after == 1
    assert report.kept == [0]


def test_skipped_stages_record_reason():
    pairs = pairs_for(
        build_opportunity(category="Banking"),
        build_candidate("C-1", industries=["Retail"]),
    )

    report = CandidateFilter().apply(
        pairs, resolve_weights({"skills": 0.2, "industry": 3, "timezone": 1})
    )

    reasons = {stage.criterion: stage.reason for stage in report.stages}
    assert reasons == {"industry": "excluded", "timezone": "no_hard_filter", "skills": "below_threshold"}
    assert all(stage.skipped for stage in report.stages)
    assert report.kept == [0]


def test_industry_stage_applies_when_not_excluded():
    pairs = pairs_for(
        build_opportunity(category="Banking"),
        build_candidate("C-1", industries=["Retail"]),
        build_candidate("C-2", industries=["Banking and Finance"]),
    )
    candidate_filter = CandidateFilter(config=FilterConfig(excluded_criteria=()))

    report = candidate_filter.apply(pairs, resolve_weights({"industry": 1}))

    assert report.kept == [1]


def test_overqualification_cap_is_opt_in():
    opportunity = build_opportunity(required_experience_years=2)
    pairs = pairs_for(
        opportunity,
        build_candidate("C-1", experience_years=3),
        build_candidate("C-2", experience_years=10),
    )
    weights = resolve_weights({"experience": 1})

    default = CandidateFilter().apply(pairs, weights)
    capped = CandidateFilter(config=FilterConfig(cap_overqualification=True)).apply(pairs, weights)

    assert default.kept == [0, 1]
    assert capped.kept == [0]


def test_implicit_weights_never_filter():
    pairs = pairs_for(
        build_opportunity(required_experience_years=10),
        build_candidate("C-1", experience_years=1),
    )

    report = CandidateFilter().apply(pairs, resolve_weights())

    assert report.kept == [0]
    assert report.stages == []


def test_skills_stage_keeps_symbol_names_apart():
    opportunity = build_opportunity(required_skills={"technical": [{"name": "C++", "level": 3}]})
    pairs = pairs_for(
        opportunity,
        build_candidate("C-1", skills={"technical": [{"name": "C#", "level": 5}]}),
        build_candidate("C-2", skills={"technical": [{"name": "cpp", "level": 2}]}),
    )

    report = CandidateFilter(skill_key=SkillsScorer().skill_key).apply(pairs, resolve_weights({"skills": 1}))

    assert report.kept == [1]


def test_as_of_is_read_on_every_apply():
    dates = iter([pendulum.datetime(2021, 1, 1), pendulum.datetime(2026, 1, 1)])
    candidate_filter = CandidateFilter(as_of_provider=lambda: next(dates))
    pairs = pairs_for(
        build_opportunity(required_experience_years=3),
        build_candidate("C-1", experiences=[{"title": "Agent", "start": "2020-01-01"}]),
    )
    weights = resolve_weights({"experience": 1})

    early = candidate_filter.apply(pairs, weights)
    late = candidate_filter.apply(pairs, weights)

    assert early.kept == []
    assert late.kept == [0]
    assert not hasattr(candidate_filter, "_as_of")
