"""Adapter selection and the sequential fallback chain."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

import structlog

from .adapters import AdapterDescriptor, RawText, resolve_media_type
from .core import FieldExtractionEngine
from .errors import (
    AdapterError,
    ExtractionError,
    FailureKind,
    FileTooLargeError,
    NoFileError,
    ParseCancelledError,
    ParseFailedError,
    UnsupportedTypeError,
)
from .schemas import CandidateProfile, UploadedDocument

T = TypeVar("T")


class AdapterRegistry:
    """Read-only registry of adapter descriptors in registration order."""

    def __init__(self, descriptors: Iterable[AdapterDescriptor], *, disabled: Iterable[str] | None = None):
        disabled_ids = set(disabled or ())
        registered: list[AdapterDescriptor] = []
        seen: set[str] = set()
        for descriptor in descriptors:
            if descriptor.adapter_id in seen:
                raise ValueError(f"Duplicate adapter id: {descriptor.adapter_id!r}")
            seen.add(descriptor.adapter_id)
            if descriptor.adapter_id not in disabled_ids:
                registered.append(descriptor)
        self._descriptors = tuple(registered)
        self._order = {descriptor.adapter_id: index for index, descriptor in enumerate(self._descriptors)}

    def get(self, adapter_id: str) -> AdapterDescriptor:
        for descriptor in self._descriptors:
            if descriptor.adapter_id == adapter_id:
                return descriptor
        raise KeyError(f"Unknown adapter: {adapter_id!r}")

    def adapter_ids(self) -> list[str]:
        return [descriptor.adapter_id for descriptor in self._descriptors]

    def registration_index(self, adapter_id: str) -> int:
        return self._order[adapter_id]

    def applicable(self, document: UploadedDocument) -> list[AdapterDescriptor]:
        """Descriptors for the document's type, in fallback order.

        The resolved media type decides; the file extension is only consulted
        when no adapter claims that media type.
        """
        media_type = resolve_media_type(document)
        matches = [d for d in self._descriptors if d.applies_to(media_type, None)]
        if not matches:
            matches = [d for d in self._descriptors if d.applies_to(None, document.extension)]
        return sorted(matches, key=lambda d: (d.priority, self._order[d.adapter_id]))


@dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    """Result of one adapter invocation."""

    adapter_id: str
    success: bool
    text: str | None
    char_count: int
    duration_ms: float
    failure_reason: str | None = None
    failure_kind: FailureKind | None = None
    source_label: str | None = None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Profile selected by the orchestrator plus every attempt made."""

    profile: CandidateProfile
    adapter_used: str
    duration_ms: float
    attempts: tuple[ExtractionOutcome, ...]
    stopped_early: bool


class CancellationToken:
    """Thread-safe flag used to abort a running parse or benchmark."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ParseCancelledError("Parsing was cancelled")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000.0, 3)


def call_with_timeout(func: Callable[[], T], timeout: float | None) -> T:
    """Run ``func`` on a worker thread, raising ``TimeoutError`` past ``timeout``.

    The worker is abandoned, not killed, when the timeout fires.
    """
    if timeout is None:
        return func()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cvparser-adapter")
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError as exc:
        future.cancel()
        raise TimeoutError(f"adapter exceeded {timeout:g}s") from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


class FallbackChain:
    """Run single adapters and turn every failure mode into an outcome."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__)

    def attempt(
        self,
        descriptor: AdapterDescriptor,
        document: UploadedDocument,
        *,
        timeout: float | None = None,
    ) -> ExtractionOutcome:
        media_type = resolve_media_type(document)
        context = {"adapter_id": descriptor.adapter_id, "filename": document.filename}
        started = time.perf_counter()

        def run() -> RawText:
            return descriptor.extractor.extract(document.content, media_type, document.filename)

        try:
            raw = call_with_timeout(run, timeout)
        except ExtractionError as exc:
            self._logger.warning("adapter.failed", failure_kind=exc.kind.value, reason=str(exc), **context)
            return self._failure(descriptor, started, str(exc), exc.kind)
        except TimeoutError as exc:
            self._logger.warning("adapter.timeout", timeout_seconds=timeout, **context)
            return self._failure(descriptor, started, str(exc), FailureKind.TIMEOUT)
        except Exception as exc:  # noqa: BLE001
            self._logger.exception("adapter.internal_error", **context)
            return self._failure(descriptor, started, f"{type(exc).__name__}: {exc}", FailureKind.INTERNAL)

        if not raw.text or not raw.text.strip():
            self._logger.warning("adapter.failed", failure_kind=FailureKind.EMPTY.value, reason="no text", **context)
            return self._failure(descriptor, started, "adapter returned no text", FailureKind.EMPTY)

        outcome = ExtractionOutcome(
            adapter_id=descriptor.adapter_id,
            success=True,
            text=raw.text,
            char_count=len(raw.text),
            duration_ms=_elapsed_ms(started),
            source_label=raw.source_label,
        )
        self._logger.debug(
            "adapter.succeeded",
            char_count=outcome.char_count,
            duration_ms=outcome.duration_ms,
            source=raw.source_label,
            **context,
        )
        return outcome

    @staticmethod
    def _failure(
        descriptor: AdapterDescriptor,
        started: float,
        reason: str,
        kind: FailureKind,
    ) -> ExtractionOutcome:
        return ExtractionOutcome(
            adapter_id=descriptor.adapter_id,
            success=False,
            text=None,
            char_count=0,
            duration_ms=_elapsed_ms(started),
            failure_reason=reason,
            failure_kind=kind,
        )


def attempt_details(attempts: Iterable[ExtractionOutcome]) -> list[dict[str, object]]:
    return [
        {
            "adapterId": outcome.adapter_id,
            "success": outcome.success,
            "failureKind": outcome.failure_kind.value if outcome.failure_kind else None,
            "failureReason": outcome.failure_reason,
        }
        for outcome in attempts
    ]


class ExtractionOrchestrator:
    """Select adapters for a document and walk them until one is trustworthy."""

    DEFAULT_ACCEPTABLE_CONFIDENCE = 0.7
    DEFAULT_ADAPTER_TIMEOUT_SECONDS = 30.0
    DEFAULT_MAX_FILE_BYTES = 20 * 1024 * 1024

    def __init__(
        self,
        *,
        registry: AdapterRegistry,
        engine: FieldExtractionEngine,
        chain: FallbackChain | None = None,
        acceptable_confidence: float | None = None,
        adapter_timeout_seconds: float | None = None,
        max_file_bytes: int | None = None,
    ) -> None:
        self._registry = registry
        self._engine = engine
        self._chain = chain or FallbackChain()
        self._acceptable_confidence = (
            self.DEFAULT_ACCEPTABLE_CONFIDENCE if acceptable_confidence is None else acceptable_confidence
        )
        self._timeout = (
            self.DEFAULT_ADAPTER_TIMEOUT_SECONDS if adapter_timeout_seconds is None else adapter_timeout_seconds
        )
        self._max_file_bytes = self.DEFAULT_MAX_FILE_BYTES if max_file_bytes is None else max_file_bytes
        self._logger = structlog.get_logger(__name__)

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    @property
    def engine(self) -> FieldExtractionEngine:
        return self._engine

    @property
    def chain(self) -> FallbackChain:
        return self._chain

    @property
    def adapter_timeout_seconds(self) -> float:
        return self._timeout

    def select(self, document: UploadedDocument | None) -> list[AdapterDescriptor]:
        """Validate the upload and return its adapters in fallback order."""
        if document is None or not document.content:
            raise NoFileError("No file was uploaded")
        if document.size > self._max_file_bytes:
            raise FileTooLargeError(
                "File exceeds the maximum upload size",
                details={"size": document.size, "maxBytes": self._max_file_bytes},
            )
        descriptors = self._registry.applicable(document)
        if not descriptors:
            raise UnsupportedTypeError(
                "No adapter supports this file type",
                details={"mediaType": document.media_type, "filename": document.filename},
            )
        return descriptors

    def parse(self, document: UploadedDocument | None, *, cancel: CancellationToken | None = None) -> ParseResult:
        started = time.perf_counter()
        descriptors = self.select(document)

        attempts: list[ExtractionOutcome] = []
        best: tuple[CandidateProfile, str] | None = None

        for descriptor in descriptors:
            if cancel is not None and cancel.cancelled:
                self._logger.info("orchestrator.cancelled", filename=document.filename, attempts=len(attempts))
                cancel.raise_if_cancelled()
            outcome = self._chain.attempt(descriptor, document, timeout=self._timeout)
            attempts.append(outcome)
            if not outcome.success or outcome.text is None:
                continue

            profile = self._engine.extract(outcome.text)
            self._logger.debug(
                "orchestrator.scored",
                adapter_id=descriptor.adapter_id,
                confidence=profile.confidence,
                filename=document.filename,
            )
            # Strictly greater keeps the earlier adapter on ties.
            if best is None or profile.confidence > best[0].confidence:
                best = (profile, descriptor.adapter_id)
            if profile.confidence >= self._acceptable_confidence:
                self._logger.info(
                    "orchestrator.accepted",
                    adapter_id=descriptor.adapter_id,
                    confidence=profile.confidence,
                    filename=document.filename,
                )
                return ParseResult(
                    profile=profile,
                    adapter_used=descriptor.adapter_id,
                    duration_ms=_elapsed_ms(started),
                    attempts=tuple(attempts),
                    stopped_early=True,
                )

        if best is not None:
            profile, adapter_id = best
            self._logger.info(
                "orchestrator.best_effort",
                adapter_id=adapter_id,
                confidence=profile.confidence,
                filename=document.filename,
            )
            return ParseResult(
                profile=profile,
                adapter_used=adapter_id,
                duration_ms=_elapsed_ms(started),
                attempts=tuple(attempts),
                stopped_early=False,
            )

        details = {"attempts": attempt_details(attempts)}
        self._logger.warning("orchestrator.exhausted", filename=document.filename, attempts=len(attempts))
        if attempts and all(outcome.failure_kind is FailureKind.INTERNAL for outcome in attempts):
            raise AdapterError("Every applicable adapter failed unexpectedly", details=details)
        raise ParseFailedError("No adapter could extract text from the document", details=details)


__all__ = [
    "AdapterRegistry",
    "CancellationToken",
    "ExtractionOrchestrator",
    "ExtractionOutcome",
    "FallbackChain",
    "ParseResult",
    "attempt_details",
    "call_with_timeout",
]
