"""Plain text adapter."""

from __future__ import annotations

import codecs

from ..errors import EmptyDocumentError, UnsupportedEncodingError
from .base import RawText

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


class PlainTextExtractor:
    """Decode the buffer as UTF-8 text."""

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        if not content:
            raise EmptyDocumentError("empty payload")

        if content.startswith(_UTF16_BOMS):
            return RawText(text=content.decode("utf-16"), source_label="text:utf-16")

        # NUL bytes mean a binary container or a BOM-less wide encoding.
        if b"\x00" in content:
            raise UnsupportedEncodingError("payload is not UTF-8 text")

        text = content.decode("utf-8-sig", errors="replace")
        if not text.strip():
            raise EmptyDocumentError("payload contains only whitespace")
        return RawText(text=text, source_label="text:utf-8")
