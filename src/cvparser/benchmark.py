"""Run every applicable adapter on one document and compare the results."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

import pendulum
import structlog
from rapidfuzz import fuzz

from .adapters import AdapterDescriptor
from .pipeline import CancellationToken, ExtractionOrchestrator, ExtractionOutcome
from .schemas import CandidateProfile, UploadedDocument


@dataclass(frozen=True, slots=True)
class BenchmarkEntry:
    """One adapter's run inside a benchmark."""

    adapter_id: str
    priority: int
    outcome: ExtractionOutcome
    profile: CandidateProfile | None = None
    confidence: float = 0.0
    duration_ms: float = 0.0
    text_similarity: float | None = None

    @property
    def success(self) -> bool:
        return self.outcome.success

    def to_dict(self) -> dict[str, Any]:
        outcome = self.outcome
        return {
            "adapterId": self.adapter_id,
            "priority": self.priority,
            "success": outcome.success,
            "confidence": self.confidence,
            "durationMs": self.duration_ms,
            "charCount": outcome.char_count,
            "sourceLabel": outcome.source_label,
            "failureReason": outcome.failure_reason,
            "failureKind": outcome.failure_kind.value if outcome.failure_kind else None,
            "textSimilarity": self.text_similarity,
            "profile": self.profile.model_dump(mode="json", by_alias=True) if self.profile else None,
        }


@dataclass(frozen=True, slots=True)
class BenchmarkReport:
    """Every adapter's result for a single document plus the winner."""

    document_id: str
    filename: str | None
    media_type: str | None
    entries: tuple[BenchmarkEntry, ...]
    best: str | None
    generated_at: str

    @property
    def success_count(self) -> int:
        return sum(1 for entry in self.entries if entry.success)

    @property
    def failure_count(self) -> int:
        return len(self.entries) - self.success_count

    def best_entry(self) -> BenchmarkEntry | None:
        for entry in self.entries:
            if entry.adapter_id == self.best:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        best = self.best_entry()
        return {
            "documentId": self.document_id,
            "filename": self.filename,
            "mediaType": self.media_type,
            "generatedAt": self.generated_at,
            "best": self.best,
            "bestConfidence": best.confidence if best else None,
            "adapterCount": len(self.entries),
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "entries": [entry.to_dict() for entry in self.entries],
        }


class BenchmarkRunner:
    """Run all applicable adapters concurrently, without early stopping.

    Validation and adapter selection are shared with the orchestrator, so a
    benchmark fails with the same request-level errors a parse would.
    """

    def __init__(
        self,
        *,
        orchestrator: ExtractionOrchestrator,
        max_workers: int | None = None,
        now_provider: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._max_workers = max_workers
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))
        self._logger = structlog.get_logger(__name__)

    def run(self, document: UploadedDocument | None, *, cancel: CancellationToken | None = None) -> BenchmarkReport:
        descriptors = self._orchestrator.select(document)
        if cancel is not None:
            cancel.raise_if_cancelled()

        slots: list[BenchmarkEntry | None] = [None] * len(descriptors)
        workers = self._max_workers or len(descriptors)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cvparser-benchmark")
        try:
            futures = {
                executor.submit(self._run_one, descriptor, document, cancel): index
                for index, descriptor in enumerate(descriptors)
            }
            for future in as_completed(futures):
                slots[futures[future]] = future.result()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        entries = [entry for entry in slots if entry is not None]
        best = self._pick_best(entries)
        if best is not None:
            entries = [self._with_similarity(entry, best) for entry in entries]

        report = BenchmarkReport(
            document_id=document.document_id,
            filename=document.filename,
            media_type=document.media_type,
            entries=tuple(entries),
            best=best.adapter_id if best else None,
            generated_at=self._now_provider().to_iso8601_string(),
        )
        self._logger.info(
            "benchmark.completed",
            document_id=report.document_id,
            filename=report.filename,
            best=report.best,
            successes=report.success_count,
            failures=report.failure_count,
        )
        return report

    def _run_one(
        self,
        descriptor: AdapterDescriptor,
        document: UploadedDocument,
        cancel: CancellationToken | None,
    ) -> BenchmarkEntry:
        if cancel is not None:
            cancel.raise_if_cancelled()
        outcome = self._orchestrator.chain.attempt(
            descriptor,
            document,
            timeout=self._orchestrator.adapter_timeout_seconds,
        )
        if not outcome.success or outcome.text is None:
            return BenchmarkEntry(
                adapter_id=descriptor.adapter_id,
                priority=descriptor.priority,
                outcome=outcome,
                duration_ms=outcome.duration_ms,
            )
        profile = self._orchestrator.engine.extract(outcome.text)
        return BenchmarkEntry(
            adapter_id=descriptor.adapter_id,
            priority=descriptor.priority,
            outcome=outcome,
            profile=profile,
            confidence=profile.confidence,
            duration_ms=outcome.duration_ms,
        )

    def _pick_best(self, entries: list[BenchmarkEntry]) -> BenchmarkEntry | None:
        registry = self._orchestrator.registry
        successes = [entry for entry in entries if entry.success]
        if not successes:
            return None
        return min(
            successes,
            key=lambda entry: (-entry.confidence, entry.priority, registry.registration_index(entry.adapter_id)),
        )

    @staticmethod
    def _with_similarity(entry: BenchmarkEntry, best: BenchmarkEntry) -> BenchmarkEntry:
        if not entry.success:
            return entry
        similarity = round(fuzz.ratio(entry.outcome.text or "", best.outcome.text or "") / 100.0, 4)
        return BenchmarkEntry(
            adapter_id=entry.adapter_id,
            priority=entry.priority,
            outcome=entry.outcome,
            profile=entry.profile,
            confidence=entry.confidence,
            duration_ms=entry.duration_ms,
            text_similarity=similarity,
        )


@dataclass(slots=True)
class AdapterStats:
    """Per-adapter aggregate across several benchmark reports."""

    adapter_id: str
    runs: int = 0
    successes: int = 0
    wins: int = 0
    confidences: list[float] = field(default_factory=list)
    durations_ms: list[float] = field(default_factory=list)
    char_counts: list[int] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        return self.successes / self.runs if self.runs else 0.0

    @property
    def average_confidence(self) -> float:
        return _mean(self.confidences)

    @property
    def average_duration_ms(self) -> float:
        return _mean(self.durations_ms)

    @property
    def average_char_count(self) -> float:
        return _mean(self.char_counts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "adapterId": self.adapter_id,
            "runs": self.runs,
            "successes": self.successes,
            "wins": self.wins,
            "successRate": round(self.success_rate, 4),
            "averageConfidence": round(self.average_confidence, 4),
            "averageDurationMs": round(self.average_duration_ms, 3),
            "averageCharCount": round(self.average_char_count, 1),
        }


def _mean(values: list[float] | list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_reports(reports: Iterable[BenchmarkReport]) -> dict[str, AdapterStats]:
    """Aggregate benchmark reports per adapter, in first-seen order."""
    stats: dict[str, AdapterStats] = {}
    for report in reports:
        for entry in report.entries:
            adapter = stats.setdefault(entry.adapter_id, AdapterStats(adapter_id=entry.adapter_id))
            adapter.runs += 1
            adapter.durations_ms.append(entry.duration_ms)
            if entry.success:
                adapter.successes += 1
                adapter.confidences.append(entry.confidence)
                adapter.char_counts.append(entry.outcome.char_count)
            if entry.adapter_id == report.best:
                adapter.wins += 1
    return stats


__all__ = [
    "AdapterStats",
    "BenchmarkEntry",
    "BenchmarkReport",
    "BenchmarkRunner",
    "summarize_reports",
]
