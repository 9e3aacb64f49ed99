from __future__ import annotations

import json
from pathlib import Path

from gigmatch.container import create_container
from gigmatch.core import RankingOptions
from gigmatch.pipeline import AuditLogger


def write_jsonl(path: Path, records: list[dict]) -> None:
    path.write_text("\n".join(json.dumps(item, ensure_ascii=False) for item in records), encoding="utf-8")


def test_pipeline_writes_audit_log_for_filtered_ranking(tmp_path: Path) -> None:
    candidates_path = tmp_path / "candidates.jsonl"
    opportunities_path = tmp_path / "opportunities.jsonl"
    output_path = tmp_path / "results.json"
    audit_path = tmp_path / "audit.jsonl"

    write_jsonl(
        candidates_path,
        [
            {
                "provider": "native",
                "payload": {
                    "candidate_id": "C-EN",
                    "experience_years": 4,
                    "languages": [{"language": "English", "proficiency": "C1"}],
                },
            },
            {
                "provider": "native",
                "payload": {
                    "candidate_id": "C-DE",
                    "experience_years": 4,
                    "languages": [{"language": "German", "proficiency": "C2"}],
                },
            },
            {"provider": "native", "payload": {"name": "no id"}},
        ],
    )
    write_jsonl(
        opportunities_path,
        [
            {
                "provider": "native",
                "payload": {
                    "opportunity_id": "O-EN",
                    "required_experience_years": 2,
                    "required_languages": [{"language": "English", "proficiency": "professional"}],
                },
            }
        ],
    )

    container = create_container(settings={"core": {"weights": {"language": 2}}})
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_path)

    results = pipeline.rank_candidates(
        candidates_path=candidates_path,
        opportunities_path=opportunities_path,
        output_path=output_path,
        options=RankingOptions(enable_filter=True),
        audit_logger=audit_logger,
    )

    assert results[0]["opportunity_id"] == "O-EN"
    assert [match["candidate_id"] for match in results[0]["matches"]] == ["C-EN"]
    assert results[0]["matches"][0]["formatted_score"].endswith("%")

    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["command"] == "rank-candidates"
    assert rendered["metadata"]["candidate_count"] == 2
    assert rendered["metadata"]["errors"][0].startswith("candidates line 3:")

    audit_entries = [json.loads(line) for line in audit_path.read_text(encoding="utf-8").splitlines()]
    events = [entry["event"] for entry in audit_entries]
    assert events == ["filter.stage", "ranking.summary"]
    assert audit_entries[0]["criterion"] == "language"
    assert audit_entries[0]["removed"] == 1
    assert "timestamp" in audit_entries[1]


def test_pipeline_allocate_writes_assignments(tmp_path: Path) -> None:
    candidates_path = tmp_path / "candidates.jsonl"
    opportunities_path = tmp_path / "opportunities.jsonl"
    output_path = tmp_path / "allocation.json"

    write_jsonl(
        candidates_path,
        [
            {"provider": "native", "payload": {"candidate_id": f"C-{index}", "experience_years": index}}
            for index in range(3)
        ],
    )
    write_jsonl(
        opportunities_path,
        [
            {"provider": "native", "payload": {"opportunity_id": "O-1", "required_experience_years": 2}},
            {"provider": "native", "payload": {"opportunity_id": "O-2", "required_experience_years": 1}},
        ],
    )

    results = create_container().pipeline().allocate(
        candidates_path=candidates_path,
        opportunities_path=opportunities_path,
        output_path=output_path,
    )

    assert len(results) == 2
    assert len({item["opportunity_id"] for item in results}) == 2
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["opportunity_count"] == 2
    assert rendered["results"] == results
