"""Pydantic schema definitions for documents, profiles and responses."""

from __future__ import annotations

from .document import UploadedDocument
from .profile import CandidateProfile, ExperienceEntry, Skill
from .response import (
    AttemptSummary,
    BenchmarkSuccess,
    ErrorBody,
    ParseFailure,
    ParseSuccess,
)

__all__ = [
    "AttemptSummary",
    "BenchmarkSuccess",
    "CandidateProfile",
    "ErrorBody",
    "ExperienceEntry",
    "ParseFailure",
    "ParseSuccess",
    "Skill",
    "UploadedDocument",
]
