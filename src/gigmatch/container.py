"""Dependency injection container for the matching system."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import AgentGigAdapter, NativeAdapter
from .core import (
    CandidateFilter,
    FilterConfig,
    MatchingEngine,
    RankingOptions,
    ScorerRegistry,
    WeightResolver,
)
from .core.scorers import (
    AvailabilityScorer,
    ExperienceScorer,
    IndustryScorer,
    LanguageScorer,
    PerformanceScorer,
    RegionScorer,
    SkillsScorer,
    TimezoneScorer,
)
from .core.scorers.availability import AvailabilityConfig
from .core.scorers.experience import ExperienceConfig
from .core.scorers.language import LanguageConfig
from .core.scorers.region import RegionConfig
from .core.scorers.skills import SkillsConfig
from .core.scorers.timezone import TimezoneConfig
from .pipeline import AdapterRegistry, MatchingPipeline


class MatchingContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    native_adapter = providers.Singleton(NativeAdapter)
    agent_gig_adapter = providers.Singleton(AgentGigAdapter)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        adapters=providers.List(native_adapter, agent_gig_adapter),
    )

    experience_scorer = providers.Singleton(ExperienceScorer)
    skills_scorer = providers.Singleton(SkillsScorer)
    industry_scorer = providers.Singleton(IndustryScorer)
    language_scorer = providers.Singleton(LanguageScorer)
    availability_scorer = providers.Singleton(AvailabilityScorer)
    timezone_scorer = providers.Singleton(TimezoneScorer)
    performance_scorer = providers.Singleton(PerformanceScorer)
    region_scorer = providers.Singleton(RegionScorer)

    scorer_registry = providers.Singleton(
        ScorerRegistry,
        scorers=providers.List(
            experience_scorer,
            skills_scorer,
            industry_scorer,
            language_scorer,
            availability_scorer,
            timezone_scorer,
            performance_scorer,
            region_scorer,
        ),
    )

    weight_resolver = providers.Singleton(WeightResolver)

    filter_config = providers.Singleton(FilterConfig)

    candidate_filter = providers.Singleton(
        CandidateFilter,
        config=filter_config,
        as_of_provider=experience_scorer.provided.as_of,
        language_key=language_scorer.provided.language_key,
        skill_key=skills_scorer.provided.skill_key,
    )

    ranking_options = providers.Singleton(RankingOptions)

    engine = providers.Singleton(
        MatchingEngine,
        registry=scorer_registry,
        resolver=weight_resolver,
        candidate_filter=candidate_filter,
        default_weights=config.weights,
        default_options=ranking_options,
        max_workers=config.max_workers,
    )

    pipeline = providers.Factory(
        MatchingPipeline,
        engine=engine,
        registry=adapter_registry,
    )


def create_container(*, settings: dict | None = None) -> MatchingContainer:
    """Instantiate container with optional overrides."""

    container = MatchingContainer()

    if not settings:
        return container

    core_settings = settings.get("core", {}) if isinstance(settings, dict) else {}
    if core_settings:
        container.config.override(core_settings)

    if core_settings.get("ranking"):
        container.ranking_options.override(
            providers.Singleton(RankingOptions, **core_settings["ranking"])
        )

    if core_settings.get("filter"):
        filter_settings = dict(core_settings["filter"])
        if "excluded_criteria" in filter_settings:
            filter_settings["excluded_criteria"] = tuple(filter_settings["excluded_criteria"])
        container.filter_config.override(
            providers.Singleton(FilterConfig, **filter_settings)
        )

    scorer_settings = settings.get("scorers", {}) if isinstance(settings, dict) else {}

    if "experience" in scorer_settings:
        experience_config = ExperienceConfig(**scorer_settings["experience"])
        container.experience_scorer.override(
            providers.Singleton(ExperienceScorer, config=experience_config)
        )

    if "skills" in scorer_settings:
        skills_config = SkillsConfig(**scorer_settings["skills"])
        container.skills_scorer.override(
            providers.Singleton(SkillsScorer, config=skills_config)
        )

    if "industry" in scorer_settings:
        container.industry_scorer.override(
            providers.Singleton(IndustryScorer, **scorer_settings["industry"])
        )

    if "language" in scorer_settings:
        language_config = LanguageConfig(**scorer_settings["language"])
        container.language_scorer.override(
            providers.Singleton(LanguageScorer, config=language_config)
        )

    if "availability" in scorer_settings:
        availability_config = AvailabilityConfig(**scorer_settings["availability"])
        container.availability_scorer.override(
            providers.Singleton(AvailabilityScorer, config=availability_config)
        )

    if "timezone" in scorer_settings:
        timezone_config = TimezoneConfig(**scorer_settings["timezone"])
        container.timezone_scorer.override(
            providers.Singleton(TimezoneScorer, config=timezone_config)
        )

    if "performance" in scorer_settings:
        container.performance_scorer.override(
            providers.Singleton(PerformanceScorer, **scorer_settings["performance"])
        )

    if "region" in scorer_settings:
        region_config = RegionConfig(**scorer_settings["region"])
        container.region_scorer.override(
            providers.Singleton(RegionScorer, config=region_config)
        )

    return container
