"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def overrides(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class OrchestratorSettings(_Section):
    acceptable_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    adapter_timeout_seconds: float | None = Field(default=None, gt=0.0)
    max_file_bytes: int | None = Field(default=None, gt=0)


class BenchmarkSettings(_Section):
    max_workers: int | None = Field(default=None, ge=1)


class AdapterSettings(_Section):
    disabled: list[str] = Field(default_factory=list)


class ScorerSettings(_Section):
    full_name_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    first_name_only_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    email_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    phone_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    title_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    employer_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    short_text_threshold: int | None = Field(default=None, ge=0)
    short_text_cap: float | None = Field(default=None, ge=0.0, le=1.0)


class EngineSettings(_Section):
    name_lookahead_lines: int | None = Field(default=None, ge=1)
    header_window_chars: int | None = Field(default=None, ge=1)
    experience_scan_lines: int | None = Field(default=None, ge=1)
    header_scan_lines: int | None = Field(default=None, ge=1)
    notes_max_length: int | None = Field(default=None, ge=1)
    notes_max_lines: int | None = Field(default=None, ge=1)
    notes_fallback_lines: int | None = Field(default=None, ge=1)


class AppConfig(BaseModel):
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    benchmark: BenchmarkSettings = Field(default_factory=BenchmarkSettings)
    adapters: AdapterSettings = Field(default_factory=AdapterSettings)
    scorer: ScorerSettings = Field(default_factory=ScorerSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        """Plain dict of the sections that override a default."""
        sections = {
            "orchestrator": self.orchestrator.overrides(),
            "benchmark": self.benchmark.overrides(),
            "scorer": self.scorer.overrides(),
            "engine": self.engine.overrides(),
        }
        settings = {name: values for name, values in sections.items() if values}
        if self.adapters.disabled:
            settings["adapters"] = {"disabled": list(self.adapters.disabled)}
        return settings


def load_config(raw: Any) -> AppConfig:
    """Validate a decoded YAML document; non-mappings raise ValidationError."""
    if raw is None:
        return AppConfig()
    return AppConfig.model_validate(raw)
