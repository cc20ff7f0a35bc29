"""Response envelopes returned to the request boundary."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .profile import CandidateProfile


class _Envelope(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AttemptSummary(_Envelope):
    adapter_id: str
    success: bool
    char_count: int = 0
    duration_ms: float = 0.0
    failure_reason: str | None = None
    failure_kind: str | None = None


class ParseSuccess(_Envelope):
    success: Literal[True] = True
    data: CandidateProfile
    adapter_used: str
    duration_ms: float
    attempts: list[AttemptSummary] = Field(default_factory=list)


class ErrorBody(_Envelope):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ParseFailure(_Envelope):
    success: Literal[False] = False
    error: ErrorBody


class BenchmarkSuccess(_Envelope):
    success: Literal[True] = True
    data: dict[str, Any]
