"""Field extraction and confidence scoring."""

from __future__ import annotations

from .engine import EngineConfig, ExtractedFields, FieldExtractionEngine
from .normalize import content_lines, normalize_text
from .scoring import ConfidenceScorer, ScorerConfig

__all__ = [
    "ConfidenceScorer",
    "EngineConfig",
    "ExtractedFields",
    "FieldExtractionEngine",
    "ScorerConfig",
    "content_lines",
    "normalize_text",
]
