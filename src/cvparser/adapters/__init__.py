"""Raw text extraction adapters."""

from __future__ import annotations

from .base import (
    DOCX_MEDIA_TYPE,
    MARKDOWN_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    TEXT_MEDIA_TYPE,
    AdapterDescriptor,
    RawText,
    TextExtractor,
)
from .pdf import MarkdownPDFExtractor, PdfPlumberExtractor, PyMuPDFExtractor
from .plain_text import PlainTextExtractor
from .sniffing import resolve_media_type, sniff_media_type
from .wordprocessing import PythonDocxExtractor, RawOOXMLExtractor, join_runs

TEXT_TYPES = frozenset({TEXT_MEDIA_TYPE, MARKDOWN_MEDIA_TYPE})
TEXT_EXTENSIONS = frozenset({".txt", ".text", ".md"})
PDF_TYPES = frozenset({PDF_MEDIA_TYPE})
PDF_EXTENSIONS = frozenset({".pdf"})
DOCX_TYPES = frozenset({DOCX_MEDIA_TYPE})
DOCX_EXTENSIONS = frozenset({".docx"})


def describe(
    adapter_id: str,
    extractor: TextExtractor,
    *,
    media_types: frozenset[str],
    extensions: frozenset[str],
    priority: int,
) -> AdapterDescriptor:
    return AdapterDescriptor(
        adapter_id=adapter_id,
        media_types=media_types,
        extensions=extensions,
        priority=priority,
        extractor=extractor,
    )


def default_descriptors() -> list[AdapterDescriptor]:
    """Return the built-in adapters in registration order."""
    return [
        describe("plain-text", PlainTextExtractor(), media_types=TEXT_TYPES, extensions=TEXT_EXTENSIONS, priority=1),
        describe("pymupdf", PyMuPDFExtractor(), media_types=PDF_TYPES, extensions=PDF_EXTENSIONS, priority=1),
        describe("pdfplumber", PdfPlumberExtractor(), media_types=PDF_TYPES, extensions=PDF_EXTENSIONS, priority=2),
        describe("pymupdf4llm", MarkdownPDFExtractor(), media_types=PDF_TYPES, extensions=PDF_EXTENSIONS, priority=3),
        describe("python-docx", PythonDocxExtractor(), media_types=DOCX_TYPES, extensions=DOCX_EXTENSIONS, priority=1),
        describe("ooxml-xml", RawOOXMLExtractor(), media_types=DOCX_TYPES, extensions=DOCX_EXTENSIONS, priority=2),
    ]


__all__ = [
    "AdapterDescriptor",
    "DOCX_EXTENSIONS",
    "DOCX_MEDIA_TYPE",
    "DOCX_TYPES",
    "MarkdownPDFExtractor",
    "PDF_EXTENSIONS",
    "PDF_MEDIA_TYPE",
    "PDF_TYPES",
    "PdfPlumberExtractor",
    "PlainTextExtractor",
    "PyMuPDFExtractor",
    "PythonDocxExtractor",
    "RawOOXMLExtractor",
    "RawText",
    "TEXT_EXTENSIONS",
    "TEXT_MEDIA_TYPE",
    "TEXT_TYPES",
    "TextExtractor",
    "default_descriptors",
    "describe",
    "join_runs",
    "resolve_media_type",
    "sniff_media_type",
]
