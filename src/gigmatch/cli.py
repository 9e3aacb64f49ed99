"""Typer CLI entrypoint for the matching pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .core import RankingOptions
from .errors import InvalidInputError
from .logging import configure_logging
from .pipeline import AuditLogger, MatchingPipeline
from .schemas.config import load_config

app = typer.Typer(help="Candidate and opportunity matching CLI.")

CandidatesOption = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Candidates JSONL path.")
OpportunitiesOption = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Opportunities JSONL path.")
OutputOption = typer.Option(..., dir_okay=False, resolve_path=True, help="Output JSON path.")
ConfigOption = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path.")
LogLevelOption = typer.Option("INFO", help="Log level for structured logging.")
ConsoleLogsOption = typer.Option(False, "--console-logs", help="Human-readable logs instead of JSON.")
AuditLogOption = typer.Option(None, dir_okay=False, help="Audit log output (JSONL).")


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise typer.BadParameter("Config file must be a YAML object", param_name="config")
    try:
        return load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc


def _ranking_options(
    defaults: RankingOptions,
    *,
    minimum_score: Optional[float],
    limit: Optional[int],
    show_all_scores: Optional[bool],
    enable_filter: Optional[bool],
) -> RankingOptions:
    try:
        return RankingOptions(
            minimum_score=defaults.minimum_score if minimum_score is None else minimum_score,
            limit=defaults.limit if limit is None else limit,
            show_all_scores=defaults.show_all_scores if show_all_scores is None else show_all_scores,
            top_score_count=defaults.top_score_count,
            enable_filter=defaults.enable_filter if enable_filter is None else enable_filter,
        )
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build(
    config: Optional[Path],
    log_level: str,
    console_logs: bool,
) -> tuple[MatchingPipeline, RankingOptions]:
    settings = _load_settings(config)
    configure_logging(log_level, json_output=not console_logs)
    try:
        container = create_container(settings=settings)
        return container.pipeline(), container.ranking_options()
    except (InvalidInputError, TypeError) as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc


@app.command("rank-candidates")
def rank_candidates(
    candidates: Path = CandidatesOption,
    opportunities: Path = OpportunitiesOption,
    output: Path = OutputOption,
    minimum_score: Optional[float] = typer.Option(None, help="Minimum aggregate score to qualify."),
    limit: Optional[int] = typer.Option(None, help="Maximum matches reported per opportunity."),
    show_all_scores: Optional[bool] = typer.Option(None, "--show-all-scores/--no-show-all-scores", help="Include the top qualifying scores."),
    enable_filter: Optional[bool] = typer.Option(None, "--filter/--no-filter", help="Apply the hard-filter pre-pass."),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    console_logs: bool = ConsoleLogsOption,
    audit_log: Optional[Path] = AuditLogOption,
) -> None:
    """Rank candidates for every opportunity."""
    pipeline, defaults = _build(config, log_level, console_logs)
    options = _ranking_options(
        defaults,
        minimum_score=minimum_score,
        limit=limit,
        show_all_scores=show_all_scores,
        enable_filter=enable_filter,
    )
    results = pipeline.rank_candidates(
        candidates_path=candidates,
        opportunities_path=opportunities,
        output_path=output,
        options=options,
        audit_logger=AuditLogger(audit_log) if audit_log else None,
    )
    typer.echo(f"Ranked candidates for {len(results)} opportunities. Results saved to {output}.")


@app.command("rank-opportunities")
def rank_opportunities(
    candidates: Path = CandidatesOption,
    opportunities: Path = OpportunitiesOption,
    output: Path = OutputOption,
    minimum_score: Optional[float] = typer.Option(None, help="Minimum aggregate score to qualify."),
    limit: Optional[int] = typer.Option(None, help="Maximum matches reported per candidate."),
    show_all_scores: Optional[bool] = typer.Option(None, "--show-all-scores/--no-show-all-scores", help="Include the top qualifying scores."),
    enable_filter: Optional[bool] = typer.Option(None, "--filter/--no-filter", help="Apply the hard-filter pre-pass."),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    console_logs: bool = ConsoleLogsOption,
    audit_log: Optional[Path] = AuditLogOption,
) -> None:
    """Rank opportunities for every candidate."""
    pipeline, defaults = _build(config, log_level, console_logs)
    options = _ranking_options(
        defaults,
        minimum_score=minimum_score,
        limit=limit,
        show_all_scores=show_all_scores,
        enable_filter=enable_filter,
    )
    results = pipeline.rank_opportunities(
        candidates_path=candidates,
        opportunities_path=opportunities,
        output_path=output,
        options=options,
        audit_logger=AuditLogger(audit_log) if audit_log else None,
    )
    typer.echo(f"Ranked opportunities for {len(results)} candidates. Results saved to {output}.")


@app.command()
def allocate(
    candidates: Path = CandidatesOption,
    opportunities: Path = OpportunitiesOption,
    output: Path = OutputOption,
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    console_logs: bool = ConsoleLogsOption,
    audit_log: Optional[Path] = AuditLogOption,
) -> None:
    """Greedily assign each candidate at most one opportunity."""
    pipeline, _ = _build(config, log_level, console_logs)
    results = pipeline.allocate(
        candidates_path=candidates,
        opportunities_path=opportunities,
        output_path=output,
        audit_logger=AuditLogger(audit_log) if audit_log else None,
    )
    typer.echo(f"Assigned {len(results)} pairs. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
