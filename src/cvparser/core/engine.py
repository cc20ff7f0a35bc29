"""Compose the field strategies into a single profile extraction."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..schemas import CandidateProfile, ExperienceEntry, Skill
from . import fields as strategies
from .normalize import content_lines, normalize_text
from .scoring import ConfidenceScorer


@dataclass
class EngineConfig:
    """Scan windows and output limits for the field strategies."""

    name_lookahead_lines: int = 3
    header_window_chars: int = 500
    experience_scan_lines: int = 10
    header_scan_lines: int = 15
    notes_max_length: int = 200
    notes_max_lines: int = 3
    notes_fallback_lines: int = 5


@dataclass(slots=True)
class ExtractedFields:
    """Fields found in one text, before scoring."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    current_title: str = ""
    current_employer: str = ""
    skills: list[Skill] = field(default_factory=list)
    experience: list[ExperienceEntry] = field(default_factory=list)
    notes: str = ""


class FieldExtractionEngine:
    """Turn raw adapter text into a scored :class:`CandidateProfile`."""

    def __init__(
        self,
        *,
        config: EngineConfig | None = None,
        scorer: ConfidenceScorer | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._scorer = scorer or ConfidenceScorer()

    def extract_fields(self, text: str) -> tuple[ExtractedFields, int]:
        """Return the raw field set and the normalized text length."""
        cfg = self._config
        normalized = normalize_text(text)
        lines = content_lines(normalized)

        first_name, last_name = strategies.extract_name(lines, lookahead=cfg.name_lookahead_lines)
        title, employer = strategies.extract_current_role(
            lines,
            experience_window=cfg.experience_scan_lines,
            header_lines=cfg.header_scan_lines,
        )
        experience = strategies.extract_experience(lines)
        if not title:
            current = next((entry for entry in experience if entry.end == "Present"), None)
            if current is not None:
                title, employer = current.title, employer or current.employer

        extracted = ExtractedFields(
            first_name=first_name,
            last_name=last_name,
            email=strategies.extract_email(normalized),
            phone=strategies.extract_phone(normalized, header_window=cfg.header_window_chars),
            current_title=title,
            current_employer=employer,
            skills=strategies.extract_skills(normalized),
            experience=experience,
            notes=strategies.extract_notes(
                lines,
                max_length=cfg.notes_max_length,
                max_lines=cfg.notes_max_lines,
                fallback_lines=cfg.notes_fallback_lines,
            ),
        )
        return extracted, len(normalized)

    def extract(self, text: str) -> CandidateProfile:
        extracted, text_length = self.extract_fields(text)
        values = {
            "first_name": extracted.first_name,
            "last_name": extracted.last_name,
            "email": extracted.email,
            "phone": extracted.phone,
            "current_title": extracted.current_title,
            "current_employer": extracted.current_employer,
        }
        confidence = self._scorer.score(values, text_length)
        return CandidateProfile(
            first_name=extracted.first_name,
            last_name=extracted.last_name,
            email=extracted.email,
            phone=extracted.phone,
            current_title=extracted.current_title,
            current_employer=extracted.current_employer,
            skills=extracted.skills,
            experience=extracted.experience,
            notes=extracted.notes,
            confidence=confidence,
        )


__all__ = ["EngineConfig", "ExtractedFields", "FieldExtractionEngine"]
