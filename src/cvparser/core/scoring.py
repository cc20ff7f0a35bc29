"""Confidence scoring for extracted candidate fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .fields import is_valid_email


@dataclass
class ScorerConfig:
    """Weights and thresholds used to score a field set."""

    full_name_weight: float = 0.3
    first_name_only_weight: float = 0.2
    email_weight: float = 0.25
    phone_weight: float = 0.2
    title_weight: float = 0.15
    employer_weight: float = 0.1
    short_text_threshold: int = 300
    short_text_cap: float = 0.3


class ConfidenceScorer:
    """Deterministic, bounded confidence for a set of extracted fields.

    ``fields`` is any mapping with ``first_name``, ``last_name``, ``email``,
    ``phone``, ``current_title`` and ``current_employer`` keys; missing keys
    count as empty. ``text_length`` is the length of the normalized text the
    fields were extracted from.
    """

    def __init__(self, *, config: ScorerConfig | None = None) -> None:
        self._config = config or ScorerConfig()

    @property
    def config(self) -> ScorerConfig:
        return self._config

    def explain(self, fields: Mapping[str, Any], text_length: int) -> dict[str, float]:
        cfg = self._config
        if fields.get("first_name") and fields.get("last_name"):
            name = cfg.full_name_weight
        elif fields.get("first_name"):
            name = cfg.first_name_only_weight
        else:
            name = 0.0
        contributions = {
            "name": name,
            "email": cfg.email_weight if is_valid_email(str(fields.get("email") or "")) else 0.0,
            "phone": cfg.phone_weight if fields.get("phone") else 0.0,
            "title": cfg.title_weight if fields.get("current_title") else 0.0,
            "employer": cfg.employer_weight if fields.get("current_employer") else 0.0,
        }
        raw = sum(contributions.values())
        total = min(max(raw, 0.0), 1.0)
        if text_length < cfg.short_text_threshold:
            total = min(total, cfg.short_text_cap)
        contributions["raw"] = raw
        contributions["total"] = round(total, 6)
        return contributions

    def score(self, fields: Mapping[str, Any], text_length: int) -> float:
        return self.explain(fields, text_length)["total"]


__all__ = ["ConfidenceScorer", "ScorerConfig"]
