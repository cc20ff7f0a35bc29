"""PDF adapters backed by PyMuPDF, pdfplumber and pymupdf4llm."""

from __future__ import annotations

import io
import re
from typing import Iterable, Sequence

import pdfplumber
import pymupdf
import pymupdf4llm

from ..errors import CorruptDocumentError, EmptyDocumentError
from .base import RawText

PAGE_BREAK = "\f"

_DEFAULT_EXCLUDES: tuple[str, ...] = (
    r"Page\s+\d+\s+of\s+\d+",
    r"\d+\s*/\s*\d+",
)

_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s*")
_EMPHASIS_RE = re.compile(r"(\*\*|__|~~)")
_ITALIC_RE = re.compile(r"(?<![\w*])[*_](?=\S)(.+?)(?<=\S)[*_](?![\w*])")
_TABLE_RULE_RE = re.compile(r"^\s*\|?\s*:?-{3,}.*$")


def _open_pymupdf(content: bytes) -> pymupdf.Document:
    try:
        document = pymupdf.open(stream=content, filetype="pdf")
    except (pymupdf.FileDataError, RuntimeError, ValueError) as exc:
        raise CorruptDocumentError(f"not a readable PDF: {exc}") from exc
    if document.page_count == 0:
        document.close()
        raise CorruptDocumentError("PDF has no pages")
    return document


def _join_pages(pages: Iterable[str]) -> str:
    text = PAGE_BREAK.join(page.strip("\n") for page in pages)
    if not text.replace(PAGE_BREAK, "").strip():
        raise EmptyDocumentError("PDF has no text layer")
    return text


class PyMuPDFExtractor:
    """Walk each page's content stream in drawing order."""

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        with _open_pymupdf(content) as document:
            pages = [page.get_text("text", sort=False) for page in document]
            page_count = document.page_count
        return RawText(text=_join_pages(pages), source_label=f"pymupdf:{page_count} pages")


class PdfPlumberExtractor:
    """Character-level layout reconstruction through pdfminer."""

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:  # noqa: BLE001 - pdfminer raises a zoo of parser errors
            raise CorruptDocumentError(f"not a readable PDF: {exc}") from exc
        if not pages:
            raise CorruptDocumentError("PDF has no pages")
        return RawText(text=_join_pages(pages), source_label=f"pdfplumber:{len(pages)} pages")


class MarkdownPDFExtractor:
    """Markdown rendering via pymupdf4llm, flattened back to plain lines.

    Parameters
    ----------
    exclude_patterns:
        Regular expressions for lines to drop entirely (page counters by
        default). A line is dropped when a pattern matches the whole line.
    """

    def __init__(self, *, exclude_patterns: Sequence[str] | None = None) -> None:
        excludes = list(exclude_patterns) if exclude_patterns is not None else list(_DEFAULT_EXCLUDES)
        self._patterns = _build_patterns(excludes)

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        with _open_pymupdf(content) as document:
            markdown = pymupdf4llm.to_markdown(document)
            page_count = document.page_count
        text = self.strip_markdown(markdown)
        if not text.strip():
            raise EmptyDocumentError("PDF has no text layer")
        return RawText(text=text, source_label=f"pymupdf4llm:{page_count} pages")

    def strip_markdown(self, markdown: str) -> str:
        cleaned_lines: list[str] = []
        for line in markdown.splitlines():
            if not line.strip():
                cleaned_lines.append("")
                continue
            if _TABLE_RULE_RE.match(line):
                continue
            if any(pattern.fullmatch(line.strip()) for pattern in self._patterns):
                continue
            line = _HEADING_RE.sub("", line)
            line = _EMPHASIS_RE.sub("", line)
            line = _ITALIC_RE.sub(r"\1", line)
            cleaned_lines.append(line.strip("| "))
        return "\n".join(cleaned_lines)


def _build_patterns(excludes: Iterable[str]) -> list[re.Pattern[str]]:
    return [re.compile(text, re.IGNORECASE) for text in excludes]


__all__ = ["MarkdownPDFExtractor", "PdfPlumberExtractor", "PyMuPDFExtractor"]
