"""Contracts shared by raw text extractors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPE = "text/plain"
MARKDOWN_MEDIA_TYPE = "text/markdown"
GENERIC_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class RawText:
    """Text recovered by an extractor plus a label describing its source."""

    text: str
    source_label: str


@runtime_checkable
class TextExtractor(Protocol):
    """Format-specific raw text extraction contract.

    Implementations turn a byte buffer into text or raise one of the
    ``ExtractionError`` subclasses from :mod:`cvparser.errors`.
    """

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        """Return the text carried by ``content``."""


@dataclass(frozen=True, slots=True)
class AdapterDescriptor:
    """Static registration record for one extraction adapter."""

    adapter_id: str
    media_types: frozenset[str]
    extensions: frozenset[str]
    priority: int
    extractor: TextExtractor

    def applies_to(self, media_type: str | None, extension: str | None) -> bool:
        if media_type and media_type.lower() in self.media_types:
            return True
        return bool(extension) and extension.lower() in self.extensions
