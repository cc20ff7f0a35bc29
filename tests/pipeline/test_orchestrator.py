from __future__ import annotations

import pytest

from conftest import EMAIL_ONLY_TEXT, MEDIUM_TEXT, STRONG_TEXT, WEAK_TEXT, StubExtractor
from cvparser.adapters import default_descriptors
from cvparser.core import FieldExtractionEngine
from cvparser.errors import (
    AdapterError,
    CorruptDocumentError,
    EmptyDocumentError,
    ErrorCode,
    FailureKind,
    FileTooLargeError,
    NoFileError,
    ParseCancelledError,
    ParseFailedError,
    UnsupportedTypeError,
)
from cvparser.pipeline import AdapterRegistry, CancellationToken, ExtractionOrchestrator
from cvparser.schemas import UploadedDocument


def test_first_acceptable_result_stops_the_chain(stub_descriptor, make_orchestrator, text_document):
    first, second = StubExtractor(STRONG_TEXT), StubExtractor(STRONG_TEXT)
    orchestrator = make_orchestrator([stub_descriptor("a", first), stub_descriptor("b", second, priority=2)])

    result = orchestrator.parse(text_document)

    assert result.adapter_used == "a"
    assert result.stopped_early is True
    assert result.profile.confidence >= 0.7
    assert [attempt.adapter_id for attempt in result.attempts] == ["a"]
    assert second.calls == 0


def test_failed_adapter_falls_through_to_next(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("broken", StubExtractor(error=CorruptDocumentError("bad xref"))),
            stub_descriptor("good", StubExtractor(STRONG_TEXT), priority=2),
        ]
    )

    result = orchestrator.parse(text_document)

    assert result.adapter_used == "good"
    failed, succeeded = result.attempts
    assert failed.success is False
    assert failed.text is None
    assert failed.failure_kind is FailureKind.CORRUPT
    assert failed.failure_reason == "bad xref"
    assert succeeded.success is True
    assert succeeded.char_count == len(STRONG_TEXT)


def test_exhausted_chain_returns_highest_confidence(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("a", StubExtractor(WEAK_TEXT)),
            stub_descriptor("b", StubExtractor(MEDIUM_TEXT), priority=2),
            stub_descriptor("c", StubExtractor(WEAK_TEXT), priority=3),
        ]
    )

    result = orchestrator.parse(text_document)

    assert result.adapter_used == "b"
    assert result.stopped_early is False
    assert len(result.attempts) == 3
    assert result.profile.confidence == pytest.approx(0.55)


def test_ties_go_to_the_earlier_adapter(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("a", StubExtractor(MEDIUM_TEXT)),
            stub_descriptor("b", StubExtractor(MEDIUM_TEXT), priority=2),
        ]
    )

    assert orchestrator.parse(text_document).adapter_used == "a"


def test_fields_are_never_merged_across_adapters(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("email-only", StubExtractor(EMAIL_ONLY_TEXT)),
            stub_descriptor("name-only", StubExtractor(WEAK_TEXT), priority=2),
        ]
    )

    result = orchestrator.parse(text_document)

    assert result.adapter_used == "name-only"
    assert result.profile.full_name == "Jane Doe"
    assert result.profile.email == ""
    assert result.profile == FieldExtractionEngine().extract(WEAK_TEXT)


def test_acceptance_threshold_is_configurable(stub_descriptor, make_orchestrator, text_document):
    second = StubExtractor(STRONG_TEXT)
    orchestrator = make_orchestrator(
        [stub_descriptor("a", StubExtractor(MEDIUM_TEXT)), stub_descriptor("b", second, priority=2)],
        acceptable_confidence=0.5,
    )

    result = orchestrator.parse(text_document)

    assert result.adapter_used == "a"
    assert second.calls == 0


def test_no_text_from_any_adapter_is_parse_failed(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("a", StubExtractor(error=CorruptDocumentError("bad"))),
            stub_descriptor("b", StubExtractor(error=RuntimeError("boom")), priority=2),
            stub_descriptor("c", StubExtractor("   \n  "), priority=3),
        ]
    )

    with pytest.raises(ParseFailedError) as excinfo:
        orchestrator.parse(text_document)

    assert excinfo.value.code is ErrorCode.PARSE_FAILED
    kinds = [attempt["failureKind"] for attempt in excinfo.value.details["attempts"]]
    assert kinds == ["corrupt", "internal", "empty"]


def test_only_internal_failures_is_adapter_error(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("a", StubExtractor(error=RuntimeError("boom"))),
            stub_descriptor("b", StubExtractor(error=KeyError("missing")), priority=2),
        ]
    )

    with pytest.raises(AdapterError) as excinfo:
        orchestrator.parse(text_document)

    assert excinfo.value.code is ErrorCode.ADAPTER_ERROR


def test_timed_out_adapter_counts_as_failure(stub_descriptor, make_orchestrator, text_document):
    orchestrator = make_orchestrator(
        [
            stub_descriptor("slow", StubExtractor(STRONG_TEXT, delay=0.5)),
            stub_descriptor("fast", StubExtractor(STRONG_TEXT), priority=2),
        ],
        adapter_timeout_seconds=0.05,
    )

    result = orchestrator.parse(text_document)

    assert result.adapter_used == "fast"
    assert result.attempts[0].failure_kind is FailureKind.TIMEOUT


def test_cancelled_token_aborts_before_any_attempt(stub_descriptor, make_orchestrator, text_document):
    extractor = StubExtractor(STRONG_TEXT)
    orchestrator = make_orchestrator([stub_descriptor("a", extractor)])
    token = CancellationToken()
    token.cancel()

    with pytest.raises(ParseCancelledError) as excinfo:
        orchestrator.parse(text_document, cancel=token)

    assert excinfo.value.code is ErrorCode.PARSE_CANCELLED
    assert extractor.calls == 0


def test_cancellation_mid_chain_skips_remaining_adapters(stub_descriptor, make_orchestrator, text_document):
    token = CancellationToken()
    remaining = StubExtractor(STRONG_TEXT)
    orchestrator = make_orchestrator(
        [
            stub_descriptor("a", StubExtractor(error=EmptyDocumentError("blank"), on_call=token.cancel)),
            stub_descriptor("b", remaining, priority=2),
        ]
    )

    with pytest.raises(ParseCancelledError):
        orchestrator.parse(text_document, cancel=token)

    assert remaining.calls == 0


def test_missing_file_is_rejected(make_orchestrator, stub_descriptor):
    orchestrator = make_orchestrator([stub_descriptor("a", StubExtractor(STRONG_TEXT))])

    with pytest.raises(NoFileError):
        orchestrator.parse(None)
    with pytest.raises(NoFileError):
        orchestrator.parse(UploadedDocument(content=b"", filename="cv.txt"))


def test_oversized_file_is_rejected(make_orchestrator, stub_descriptor, text_document):
    orchestrator = make_orchestrator([stub_descriptor("a", StubExtractor(STRONG_TEXT))], max_file_bytes=4)

    with pytest.raises(FileTooLargeError) as excinfo:
        orchestrator.parse(text_document)

    assert excinfo.value.details == {"size": text_document.size, "maxBytes": 4}


def test_unsupported_type_is_rejected(make_orchestrator, stub_descriptor):
    orchestrator = make_orchestrator([stub_descriptor("a", StubExtractor(STRONG_TEXT))])
    document = UploadedDocument(content=b"GIF89a", media_type="image/gif", filename="photo.gif")

    with pytest.raises(UnsupportedTypeError) as excinfo:
        orchestrator.parse(document)

    assert excinfo.value.code is ErrorCode.UNSUPPORTED_TYPE


def test_corrupt_pdf_with_only_pdf_adapters_is_parse_failed():
    orchestrator = ExtractionOrchestrator(
        registry=AdapterRegistry(default_descriptors()),
        engine=FieldExtractionEngine(),
    )
    document = UploadedDocument(content=b"%PDF-1.4\nthis is not really a pdf", filename="cv.pdf")

    with pytest.raises(ParseFailedError) as excinfo:
        orchestrator.parse(document)

    attempts = excinfo.value.details["attempts"]
    assert [attempt["adapterId"] for attempt in attempts] == ["pymupdf", "pdfplumber", "pymupdf4llm"]
    assert all(attempt["success"] is False for attempt in attempts)


def test_plain_text_resume_through_default_registry():
    orchestrator = ExtractionOrchestrator(
        registry=AdapterRegistry(default_descriptors()),
        engine=FieldExtractionEngine(),
    )
    document = UploadedDocument(content=STRONG_TEXT.encode("utf-8"), filename="cv.txt")

    result = orchestrator.parse(document)

    assert result.adapter_used == "plain-text"
    assert result.profile.email == "jane.doe@example.com"
    assert result.profile.confidence >= 0.7
