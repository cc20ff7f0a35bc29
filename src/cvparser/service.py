"""Request boundary: map parse and benchmark calls onto response envelopes."""

from __future__ import annotations

from typing import Any, Iterable

import structlog

from .benchmark import BenchmarkRunner, summarize_reports
from .errors import CVParserError
from .pipeline import CancellationToken, ExtractionOrchestrator, ExtractionOutcome
from .schemas import (
    AttemptSummary,
    BenchmarkSuccess,
    ErrorBody,
    ParseFailure,
    ParseSuccess,
    UploadedDocument,
)


def _attempt_summary(outcome: ExtractionOutcome) -> AttemptSummary:
    return AttemptSummary(
        adapter_id=outcome.adapter_id,
        success=outcome.success,
        char_count=outcome.char_count,
        duration_ms=outcome.duration_ms,
        failure_reason=outcome.failure_reason,
        failure_kind=outcome.failure_kind.value if outcome.failure_kind else None,
    )


def failure_envelope(error: CVParserError) -> dict[str, Any]:
    body = ErrorBody(code=error.code.value, message=error.message, details=error.details or None)
    return ParseFailure(error=body).to_payload()


class ResumeParsingService:
    """Thin facade returning JSON-ready success or failure envelopes."""

    def __init__(self, *, orchestrator: ExtractionOrchestrator, benchmark_runner: BenchmarkRunner) -> None:
        self._orchestrator = orchestrator
        self._benchmark = benchmark_runner
        self._logger = structlog.get_logger(__name__)

    def parse(self, document: UploadedDocument | None, *, cancel: CancellationToken | None = None) -> dict[str, Any]:
        try:
            result = self._orchestrator.parse(document, cancel=cancel)
        except CVParserError as exc:
            self._logger.warning("parse.rejected", code=exc.code.value, message=exc.message)
            return failure_envelope(exc)
        envelope = ParseSuccess(
            data=result.profile,
            adapter_used=result.adapter_used,
            duration_ms=result.duration_ms,
            attempts=[_attempt_summary(outcome) for outcome in result.attempts],
        )
        return envelope.to_payload()

    def benchmark(self, document: UploadedDocument | None, *, cancel: CancellationToken | None = None) -> dict[str, Any]:
        try:
            report = self._benchmark.run(document, cancel=cancel)
        except CVParserError as exc:
            self._logger.warning("benchmark.rejected", code=exc.code.value, message=exc.message)
            return failure_envelope(exc)
        return BenchmarkSuccess(data=report.to_dict()).to_payload()

    def benchmark_many(self, documents: Iterable[UploadedDocument]) -> dict[str, Any]:
        """Benchmark several documents and aggregate per-adapter statistics.

        Documents rejected at the request level are listed under ``errors``
        and left out of the summary.
        """
        reports = []
        errors: list[dict[str, Any]] = []
        for document in documents:
            try:
                reports.append(self._benchmark.run(document))
            except CVParserError as exc:
                self._logger.warning("benchmark.rejected", code=exc.code.value, filename=document.filename)
                errors.append({"filename": document.filename, **exc.to_dict()})
        summary = summarize_reports(reports)
        data = {
            "reports": [report.to_dict() for report in reports],
            "summary": [stats.to_dict() for stats in summary.values()],
            "errors": errors,
        }
        return BenchmarkSuccess(data=data).to_payload()


__all__ = ["ResumeParsingService", "failure_envelope"]
