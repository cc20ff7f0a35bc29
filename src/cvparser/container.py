"""Dependency injection container for the résumé parser."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .adapters import default_descriptors
from .benchmark import BenchmarkRunner
from .core import ConfidenceScorer, EngineConfig, FieldExtractionEngine, ScorerConfig
from .pipeline import AdapterRegistry, ExtractionOrchestrator, FallbackChain
from .service import ResumeParsingService


class ParserContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    descriptors = providers.Singleton(default_descriptors)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        descriptors=descriptors,
        disabled=config.adapters.disabled,
    )

    scorer = providers.Singleton(ConfidenceScorer)
    engine = providers.Singleton(FieldExtractionEngine, scorer=scorer)
    fallback_chain = providers.Singleton(FallbackChain)

    orchestrator = providers.Singleton(
        ExtractionOrchestrator,
        registry=adapter_registry,
        engine=engine,
        chain=fallback_chain,
        acceptable_confidence=config.orchestrator.acceptable_confidence,
        adapter_timeout_seconds=config.orchestrator.adapter_timeout_seconds,
        max_file_bytes=config.orchestrator.max_file_bytes,
    )

    benchmark_runner = providers.Singleton(
        BenchmarkRunner,
        orchestrator=orchestrator,
        max_workers=config.benchmark.max_workers,
    )

    service = providers.Factory(
        ResumeParsingService,
        orchestrator=orchestrator,
        benchmark_runner=benchmark_runner,
    )


def create_container(*, settings: dict[str, Any] | None = None) -> ParserContainer:
    """Instantiate container with optional overrides."""

    container = ParserContainer()

    if not settings:
        return container

    section_settings = {
        key: settings[key]
        for key in ("orchestrator", "benchmark", "adapters")
        if isinstance(settings.get(key), dict)
    }
    if section_settings:
        container.config.from_dict(section_settings)

    scorer_settings = settings.get("scorer")
    if scorer_settings:
        scorer_config = ScorerConfig(**scorer_settings)
        container.scorer.override(providers.Singleton(ConfidenceScorer, config=scorer_config))

    engine_settings = settings.get("engine")
    if engine_settings:
        engine_config = EngineConfig(**engine_settings)
        container.engine.override(
            providers.Singleton(FieldExtractionEngine, config=engine_config, scorer=container.scorer)
        )

    return container


__all__ = ["ParserContainer", "create_container"]
