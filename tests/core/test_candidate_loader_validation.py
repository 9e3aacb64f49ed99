from __future__ import annotations

import json
from pathlib import Path

import pytest

from gigmatch.adapters import AgentGigAdapter, NativeAdapter
from gigmatch.pipeline import AdapterRegistry, ProfileLoadError, ProfileLoader


def build_registry() -> AdapterRegistry:
    return AdapterRegistry([NativeAdapter(), AgentGigAdapter()])


def test_profile_loader_raises_on_invalid_json(tmp_path: Path):
    loader = ProfileLoader(build_registry())
    path = tmp_path / "candidates.jsonl"
    path.write_text('{"provider": "native", "payload": {"candidate_id": "C-1"}}\n{invalid}', encoding="utf-8")

    with pytest.raises(ProfileLoadError) as exc:
        loader.load_candidates(path)
    assert "invalid JSON" in str(exc.value)
    assert [candidate.candidate_id for candidate in exc.value.partial] == ["C-1"]


def test_profile_loader_skips_invalid_and_reports(tmp_path: Path):
    loader = ProfileLoader(build_registry())
    path = tmp_path / "candidates.jsonl"
    records = [
        {"provider": "native", "payload": {"candidate_id": "C-001"}},
        {"provider": "unknown"},
        {"payload": {"candidate_id": "C-002"}},
        {"provider": "native", "payload": {"candidate_id": "C-003", "experience_years": -1}},
    ]
    path.write_text("\n".join(json.dumps(item) for item in records), encoding="utf-8")

    with pytest.raises(ProfileLoadError) as exc:
        loader.load_candidates(path)
    error = exc.value
    assert "unsupported provider" in error.errors[0]
    assert "missing provider" in error.errors[1]
    assert error.errors[2].startswith("line 4:")
    assert len(error.partial) == 1


def test_profile_loader_reads_opportunities(tmp_path: Path):
    loader = ProfileLoader(build_registry())
    path = tmp_path / "opportunities.jsonl"
    records = [
        {"provider": "native", "payload": {"opportunity_id": "O-1", "category": "Telecom"}},
        {"provider": "agent_gig", "payload": {"_id": "gig-2", "seniority": {"yearsExperience": "2"}}},
    ]
    path.write_text("\n\n".join(json.dumps(item) for item in records), encoding="utf-8")

    opportunities = loader.load_opportunities(path)

    assert [item.opportunity_id for item in opportunities] == ["O-1", "gig-2"]
    assert opportunities[1].required_experience_years == 2.0


def test_registry_unknown_provider_raises_key_error():
    with pytest.raises(KeyError):
        build_registry().get("missing")


def test_profile_loader_reports_malformed_schedule_shapes(tmp_path: Path):
    loader = ProfileLoader(build_registry())
    path = tmp_path / "opportunities.jsonl"
    records = [
        {"provider": "agent_gig", "payload": {"_id": "gig-1", "category": "Telecom"}},
        {"provider": "agent_gig", "payload": {"_id": "gig-2", "schedule": {"hours": '["Monday"]'}}},
        {"provider": "agent_gig", "payload": {"_id": "gig-3", "schedule": {"hours": "42"}}},
    ]
    path.write_text("\n".join(json.dumps(item) for item in records), encoding="utf-8")

    with pytest.raises(ProfileLoadError) as exc:
        loader.load_opportunities(path)
    error = exc.value
    assert [item.opportunity_id for item in error.partial] == ["gig-1"]
    assert error.errors[0].startswith("line 2:")
    assert "Invalid schedule entry" in error.errors[0]
    assert error.errors[1].startswith("line 3:")


def test_profile_loader_reports_malformed_availability(tmp_path: Path):
    loader = ProfileLoader(build_registry())
    path = tmp_path / "candidates.jsonl"
    records = [
        {"provider": "agent_gig", "payload": {"_id": "agent-1", "availability": "Monday"}},
        {"provider": "agent_gig", "payload": {"_id": "agent-2", "availability": {"schedule": [{"day": "Monday", "hours": "9-5"}]}}},
        {"provider": "agent_gig", "payload": {"_id": "agent-3", "availability": ["Monday"]}},
    ]
    path.write_text("\n".join(json.dumps(item) for item in records), encoding="utf-8")

    with pytest.raises(ProfileLoadError) as exc:
        loader.load_candidates(path)
    error = exc.value
    assert [item.candidate_id for item in error.partial] == ["agent-3"]
    assert [message.split(":")[0] for message in error.errors] == ["line 1", "line 2"]
