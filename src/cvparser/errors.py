"""Error taxonomy shared by adapters, the orchestrator and the service layer."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Codes surfaced to callers in failure envelopes."""

    NO_FILE = "NO_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    PARSE_FAILED = "PARSE_FAILED"
    PARSE_CANCELLED = "PARSE_CANCELLED"
    ADAPTER_ERROR = "ADAPTER_ERROR"
    # Reserved: no OCR adapter is registered, so nothing raises this code.
    OCR_FAILED = "OCR_FAILED"


class FailureKind(str, Enum):
    """Why a single adapter attempt did not yield text."""

    CORRUPT = "corrupt"
    ENCODING = "encoding"
    EMPTY = "empty"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class CVParserError(Exception):
    """Request-level failure carrying a caller-facing error code."""

    code: ErrorCode = ErrorCode.PARSE_FAILED

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NoFileError(CVParserError):
    code = ErrorCode.NO_FILE


class FileTooLargeError(CVParserError):
    code = ErrorCode.FILE_TOO_LARGE


class UnsupportedTypeError(CVParserError):
    code = ErrorCode.UNSUPPORTED_TYPE


class ParseFailedError(CVParserError):
    code = ErrorCode.PARSE_FAILED


class ParseCancelledError(CVParserError):
    code = ErrorCode.PARSE_CANCELLED


class AdapterError(CVParserError):
    """Every applicable adapter crashed with an unexpected internal error."""

    code = ErrorCode.ADAPTER_ERROR


class ExtractionError(Exception):
    """Typed, expected failure raised by a raw text extractor."""

    kind: FailureKind = FailureKind.CORRUPT


class CorruptDocumentError(ExtractionError):
    """The container could not be parsed (not a valid PDF/OOXML package)."""

    kind = FailureKind.CORRUPT


class UnsupportedEncodingError(ExtractionError):
    kind = FailureKind.ENCODING


class EmptyDocumentError(ExtractionError):
    """The payload is empty or carries no recoverable text."""

    kind = FailureKind.EMPTY


__all__ = [
    "AdapterError",
    "CVParserError",
    "CorruptDocumentError",
    "EmptyDocumentError",
    "ErrorCode",
    "ExtractionError",
    "FailureKind",
    "FileTooLargeError",
    "NoFileError",
    "ParseCancelledError",
    "ParseFailedError",
    "UnsupportedEncodingError",
    "UnsupportedTypeError",
]
