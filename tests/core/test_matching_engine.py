from __future__ import annotations

from typing import Any

import pytest

from gigmatch.core import MatchingEngine, RankingOptions, ScorerRegistry, format_score
from gigmatch.core.scorers import ExperienceScorer
from gigmatch.errors import InvalidInputError
from gigmatch.schemas import Candidate, Opportunity


class StubScorer:
    def __init__(self, criterion: str, score: Any, status: str = "partial_match"):
        self.criterion = criterion
        self._score = score
        self._status = status
        self.calls = 0

    def evaluate(self, candidate: Any, opportunity: Any) -> dict[str, Any]:
        self.calls += 1
        return {"criterion": self.criterion, "score": self._score, "status": self._status}


def build_candidate(candidate_id: str = "C-001", **kwargs: Any) -> Candidate:
    defaults: dict[str, Any] = {
        "experience_years": 4,
        "skills": {"technical": [{"name": "CRM", "level": 4}]},
        "languages": [{"language": "English", "proficiency": "C2"}],
        "availability": [{"day": "Monday", "start": "08:00", "end": "18:00"}],
        "industries": ["Telecom"],
        "timezone": "Europe/Paris",
        "region": "Europe",
    }
    defaults.update(kwargs)
    return Candidate(candidate_id=candidate_id, **defaults)


def build_opportunity(opportunity_id: str = "O-001", **kwargs: Any) -> Opportunity:
    defaults: dict[str, Any] = {
        "required_experience_years": 3,
        "required_skills": {"technical": [{"name": "CRM", "level": 3}]},
        "required_languages": [{"language": "English", "proficiency": "professional"}],
        "schedule": [{"day": "Monday", "start": "09:00", "end": "17:00"}],
        "category": "Telecom",
        "timezone": "Europe/Paris",
        "region": "Europe",
    }
    defaults.update(kwargs)
    return Opportunity(opportunity_id=opportunity_id, **defaults)


def test_score_pair_reports_every_criterion():
    engine = MatchingEngine()

    pair = engine.score_pair(build_candidate(), build_opportunity())

    assert set(pair.criteria) == {
        "experience", "skills", "industry", "language",
        "availability", "timezone", "performance", "region",
    }
    assert 0.0 <= pair.score <= 1.0
    assert all(0.0 <= item.score <= 1.0 for item in pair.criteria.values())
    assert pair.candidate_id == "C-001"
    assert pair.opportunity_id == "O-001"


def test_score_pair_is_deterministic():
    engine = MatchingEngine()
    candidate, opportunity = build_candidate(), build_opportunity()

    first = engine.score_pair(candidate, opportunity, {"skills": 2})
    second = engine.score_pair(candidate, opportunity, {"skills": 2})

    assert first == second


def test_score_pair_single_weighted_criterion():
    engine = MatchingEngine()
    weights = {name: 0 for name in engine.registry.criteria()}
    weights["experience"] = 1

    pair = engine.score_pair(
        build_candidate(experience_years=2),
        build_opportunity(required_experience_years=4),
        weights,
    )

    assert pair.score == pytest.approx(0.5)
    assert pair.applied_weights == {"experience": 1.0}


def test_score_pair_accepts_plain_dicts():
    engine = MatchingEngine()

    pair = engine.score_pair({"candidate_id": "C-9"}, {"opportunity_id": "O-9"})

    assert pair.match_status == "neutral_match"
    assert pair.score == pytest.approx(0.5)


def test_invalid_weights_raise():
    with pytest.raises(InvalidInputError):
        MatchingEngine().score_pair(build_candidate(), build_opportunity(), {"charisma": 1})


def test_scorer_out_of_range_is_rejected():
    engine = MatchingEngine(ScorerRegistry([StubScorer("experience", 1.5)]))

    with pytest.raises(ValueError):
        engine.score_pair(build_candidate(), build_opportunity())


def test_rank_candidates_orders_and_emits_summary():
    events: list[tuple[str, dict]] = []
    engine = MatchingEngine(observer=lambda event, payload: events.append((event, payload)))
    candidates = [
        build_candidate("C-weak", experience_years=0, languages=[], skills={}),
        build_candidate("C-strong"),
    ]

    result = engine.rank_candidates_for_opportunity(build_opportunity(), candidates)

    assert [pair.candidate_id for pair in result.matches][0] == "C-strong"
    assert result.total_considered == 2
    assert events[-1][0] == "ranking.summary"
    assert events[-1][1]["orientation"] == "candidates"
    assert events[-1][1]["subject_id"] == "O-001"


def test_rank_with_filter_emits_stages():
    events: list[tuple[str, dict]] = []
    engine = MatchingEngine(observer=lambda event, payload: events.append((event, payload)))
    candidates = [
        build_candidate("C-1"),
        build_candidate("C-2", languages=[{"language": "German", "proficiency": "C2"}]),
    ]

    result = engine.rank_candidates_for_opportunity(
        build_opportunity(),
        candidates,
        {"language": 1},
        RankingOptions(enable_filter=True, minimum_score=0.0),
    )

    stage_events = [payload for event, payload in events if event == "filter.stage"]
    assert stage_events[0]["criterion"] == "language"
    assert stage_events[0]["removed"] == 1
    assert result.total_considered == 2
    assert result.total_matches == 1
    assert result.filter_stages[0].after == 1


def test_rank_opportunities_for_candidate():
    engine = MatchingEngine()
    opportunities = [
        build_opportunity("O-far", region="Asia", timezone="Asia/Tokyo", category="Banking"),
        build_opportunity("O-near"),
    ]

    result = engine.rank_opportunities_for_candidate(build_candidate(), opportunities)

    assert result.matches[0].opportunity_id == "O-near"
    assert result.score_stats.qualifying == result.qualifying_count


def test_rank_empty_collection():
    result = MatchingEngine().rank_opportunities_for_candidate(build_candidate(), [])

    assert result.matches == []
    assert result.score_stats.average == 0.0
    assert result.total_considered == 0


def test_parallel_scoring_matches_sequential():
    candidates = [build_candidate(f"C-{index}", experience_years=index) for index in range(6)]

    sequential = MatchingEngine().rank_candidates_for_opportunity(build_opportunity(), candidates)
    parallel = MatchingEngine(max_workers=3).rank_candidates_for_opportunity(build_opportunity(), candidates)

    assert [pair.candidate_id for pair in parallel.matches] == [pair.candidate_id for pair in sequential.matches]
    assert [pair.score for pair in parallel.matches] == [pair.score for pair in sequential.matches]


def test_max_workers_must_be_positive():
    with pytest.raises(InvalidInputError):
        MatchingEngine(max_workers=0)


def test_allocate_pairs_is_one_to_one():
    events: list[tuple[str, dict]] = []
    engine = MatchingEngine(observer=lambda event, payload: events.append((event, payload)))
    candidates = [build_candidate(f"C-{index}", experience_years=index) for index in range(3)]
    opportunities = [build_opportunity("O-1"), build_opportunity("O-2")]

    pairs = engine.allocate_pairs(candidates, opportunities)

    assert len(pairs) == 2
    assert len({pair.candidate_id for pair in pairs}) == 2
    assert len({pair.opportunity_id for pair in pairs}) == 2
    assert [event for event, _ in events] == ["allocation.assigned", "allocation.assigned"]


def test_allocate_pairs_empty_side():
    assert MatchingEngine().allocate_pairs([build_candidate()], []) == []


def test_find_language_matches_keeps_full_matches():
    engine = MatchingEngine()
    candidates = [
        build_candidate("C-native", languages=[{"language": "English", "proficiency": "Native"}]),
        build_candidate("C-basic", languages=[{"language": "English", "proficiency": "A2"}]),
    ]

    matches = engine.find_language_matches(build_opportunity(), candidates)

    assert [match.candidate_id for match in matches] == ["C-native"]
    assert matches[0].score == pytest.approx(1.0)
    assert matches[0].details["matching"][0]["language"] == "English"


def test_find_skill_matches_orders_by_coverage():
    engine = MatchingEngine()
    opportunity = build_opportunity(
        required_skills={"technical": [{"name": "C++", "level": 3}, {"name": "SQL", "level": 2}]},
    )
    candidates = [
        build_candidate("C-partial", skills={"technical": [{"name": "cpp", "level": 4}]}),
        build_candidate("C-sharp", skills={"technical": [{"name": "C#", "level": 5}]}),
        build_candidate("C-full", skills={"technical": [{"name": "C++", "level": 4}, {"name": "PostgreSQL", "level": 3}]}),
    ]

    matches = engine.find_skill_matches(opportunity, candidates)

    assert [match.candidate_id for match in matches] == ["C-full", "C-partial", "C-sharp"]
    assert [match.status for match in matches] == ["perfect_match", "partial_match", "no_match"]
    assert matches[1].score == pytest.approx(0.5)
    assert [item["skill"] for item in matches[2].details["missing"]] == ["C++", "SQL"]


def test_find_skill_matches_without_requirements_is_empty():
    engine = MatchingEngine()

    assert engine.find_skill_matches(build_opportunity(required_skills={}), [build_candidate()]) == []


def test_filter_uses_experience_reference_date():
    registry = ScorerRegistry([ExperienceScorer()])
    engine = MatchingEngine(registry)
    candidate = build_candidate(experience_years=None, experiences=[{"title": "Agent", "company": "A", "start": "2010-01"}])

    result = engine.rank_candidates_for_opportunity(
        build_opportunity(),
        [candidate],
        {"experience": 1},
        RankingOptions(enable_filter=True),
    )

    assert result.total_matches == 1


@pytest.mark.parametrize(
    ("score", "expected"),
    [(0.856, "86%"), (0.125, "13%"), (1.0, "100%"), (0.0, "0%")],
)
def test_format_score(score, expected):
    assert format_score(score) == expected
