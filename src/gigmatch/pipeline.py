"""Matching pipeline assembly and execution."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Literal, Mapping

import pendulum
import structlog

from .adapters import ProfileAdapter
from .core import MatchingEngine, RankingOptions, format_score
from .schemas import Candidate, Opportunity
from . import __version__

RecordKind = Literal["candidate", "opportunity"]


class AdapterRegistry:
    """Registry mapping providers to profile adapters."""

    def __init__(self, adapters: Iterable[ProfileAdapter]):
        self._adapters = {adapter.provider: adapter for adapter in adapters}

    def get(self, provider: str) -> ProfileAdapter:
        try:
            return self._adapters[provider]
        except KeyError as exc:
            raise KeyError(f"Unsupported provider: {provider!r}") from exc

    def providers(self) -> List[str]:
        return list(self._adapters.keys())


class ProfileLoadError(ValueError):
    """Raised when profile loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[Any]):
        super().__init__("Profile loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Profile loading failed: {self.errors}"


class ProfileLoader:
    """Load candidate and opportunity records through adapters.

    Input files are JSON lines of ``{"provider": ..., "payload": {...}}``.
    Invalid lines are collected and reported together; valid ones are kept.
    """

    def __init__(self, registry: AdapterRegistry):
        self._registry = registry

    def load_candidates(self, path: Path) -> list[Candidate]:
        return self._load(path, "candidate")

    def load_opportunities(self, path: Path) -> list[Opportunity]:
        return self._load(path, "opportunity")

    def _load(self, path: Path, kind: RecordKind) -> list[Any]:
        model = Candidate if kind == "candidate" else Opportunity
        records: list[Any] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                provider = record.get("provider")
                if not provider:
                    errors.append(f"line {idx}: missing provider field")
                    continue
                try:
                    adapter = self._registry.get(provider)
                except KeyError:
                    errors.append(f"line {idx}: unsupported provider '{provider}'")
                    continue
                payload = record.get("payload", record)
                try:
                    if kind == "candidate":
                        parsed = adapter.parse_candidate(payload)
                    else:
                        parsed = adapter.parse_opportunity(payload)
                    records.append(model.model_validate(parsed))
                except Exception as exc:  # noqa: BLE001
                    errors.append(f"line {idx}: {exc}")
        if errors:
            raise ProfileLoadError(errors, records)
        return records


class OutputWriter:
    """Persist matching results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines.

    Instances are callable with ``(event, payload)`` so they can be attached
    to the engine as its trace observer.
    """

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=_json_default))
            handle.write("\n")

    def __call__(self, event: str, payload: dict[str, Any]) -> None:
        self.append({"event": event, "timestamp": pendulum.now().to_iso8601_string(), **payload})


class MatchingPipeline:
    """End-to-end matching orchestrator."""

    def __init__(
        self,
        *,
        engine: MatchingEngine,
        registry: AdapterRegistry,
        loader: ProfileLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._registry = registry
        self._loader = loader or ProfileLoader(registry)
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def rank_candidates(
        self,
        *,
        candidates_path: Path,
        opportunities_path: Path,
        output_path: Path,
        options: RankingOptions | None = None,
        weights: Mapping[str, Any] | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> list[dict]:
        """Rank every candidate for each opportunity."""
        candidates, opportunities, errors = self._load_both(candidates_path, opportunities_path)
        results: list[dict] = []
        with self._observing(audit_logger):
            for opportunity in opportunities:
                ranking = self._engine.rank_candidates_for_opportunity(
                    opportunity, candidates, weights, options
                )
                results.append({"opportunity_id": opportunity.opportunity_id, **_serialize(ranking)})
                self._logger.info(
                    "matching.ranked_candidates",
                    opportunity_id=opportunity.opportunity_id,
                    qualifying=ranking.qualifying_count,
                    returned=ranking.match_count,
                )
        self._finish("rank-candidates", output_path, results, candidates, opportunities, errors)
        return results

    def rank_opportunities(
        self,
        *,
        candidates_path: Path,
        opportunities_path: Path,
        output_path: Path,
        options: RankingOptions | None = None,
        weights: Mapping[str, Any] | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> list[dict]:
        """Rank every opportunity for each candidate."""
        candidates, opportunities, errors = self._load_both(candidates_path, opportunities_path)
        results: list[dict] = []
        with self._observing(audit_logger):
            for candidate in candidates:
                ranking = self._engine.rank_opportunities_for_candidate(
                    candidate, opportunities, weights, options
                )
                results.append({"candidate_id": candidate.candidate_id, **_serialize(ranking)})
                self._logger.info(
                    "matching.ranked_opportunities",
                    candidate_id=candidate.candidate_id,
                    qualifying=ranking.qualifying_count,
                    returned=ranking.match_count,
                )
        self._finish("rank-opportunities", output_path, results, candidates, opportunities, errors)
        return results

    def allocate(
        self,
        *,
        candidates_path: Path,
        opportunities_path: Path,
        output_path: Path,
        weights: Mapping[str, Any] | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> list[dict]:
        """Greedily pair candidates with opportunities, one each."""
        candidates, opportunities, errors = self._load_both(candidates_path, opportunities_path)
        with self._observing(audit_logger):
            pairs = self._engine.allocate_pairs(candidates, opportunities, weights)
        results = [_serialize(pair) for pair in pairs]
        self._finish("allocate", output_path, results, candidates, opportunities, errors)
        return results

    def _load_both(
        self,
        candidates_path: Path,
        opportunities_path: Path,
    ) -> tuple[list[Candidate], list[Opportunity], list[str]]:
        errors: list[str] = []
        try:
            candidates = self._loader.load_candidates(candidates_path)
        except ProfileLoadError as exc:
            candidates = exc.partial
            errors.extend(f"candidates {message}" for message in exc.errors)
            self._logger.warning("candidates.partial_load", errors=exc.errors)
        try:
            opportunities = self._loader.load_opportunities(opportunities_path)
        except ProfileLoadError as exc:
            opportunities = exc.partial
            errors.extend(f"opportunities {message}" for message in exc.errors)
            self._logger.warning("opportunities.partial_load", errors=exc.errors)
        return candidates, opportunities, errors

    @contextmanager
    def _observing(self, audit_logger: AuditLogger | None) -> Iterator[None]:
        if audit_logger is None:
            yield
            return
        self._engine.set_observer(audit_logger)
        try:
            yield
        finally:
            self._engine.set_observer(None)

    def _finish(
        self,
        command: str,
        output_path: Path,
        results: list[dict],
        candidates: list[Candidate],
        opportunities: list[Opportunity],
        errors: list[str],
    ) -> None:
        metadata = {
            "command": command,
            "candidate_count": len(candidates),
            "opportunity_count": len(opportunities),
            "errors": errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})


def _serialize(value: Any) -> dict:
    payload = asdict(value)
    if "score" in payload:
        payload["formatted_score"] = format_score(payload["score"])
    for match in payload.get("matches", []):
        match["formatted_score"] = format_score(match["score"])
    return json.loads(json.dumps(payload, default=_json_default, ensure_ascii=False))


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
