"""Media type resolution for uploaded documents."""

from __future__ import annotations

import io
import zipfile

from ..schemas import UploadedDocument
from .base import (
    DOCX_MEDIA_TYPE,
    GENERIC_MEDIA_TYPE,
    MARKDOWN_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    TEXT_MEDIA_TYPE,
)

EXTENSION_MEDIA_TYPES: dict[str, str] = {
    ".pdf": PDF_MEDIA_TYPE,
    ".docx": DOCX_MEDIA_TYPE,
    ".txt": TEXT_MEDIA_TYPE,
    ".text": TEXT_MEDIA_TYPE,
    ".md": MARKDOWN_MEDIA_TYPE,
}

_PDF_MAGIC = b"%PDF-"
_ZIP_MAGIC = b"PK\x03\x04"


def sniff_media_type(content: bytes, filename: str | None = None) -> str | None:
    """Guess a media type from magic bytes, then from the file extension."""
    head = content[:1024].lstrip()
    if head.startswith(_PDF_MAGIC):
        return PDF_MEDIA_TYPE
    if content.startswith(_ZIP_MAGIC) and _is_wordprocessing_package(content):
        return DOCX_MEDIA_TYPE
    if filename:
        suffix = filename[filename.rfind(".") :].lower() if "." in filename else ""
        return EXTENSION_MEDIA_TYPES.get(suffix)
    return None


def resolve_media_type(document: UploadedDocument) -> str | None:
    """Declared media type unless missing or generic, else the sniffed one."""
    declared = (document.media_type or "").split(";", 1)[0].strip().lower()
    if declared and declared != GENERIC_MEDIA_TYPE:
        return declared
    return sniff_media_type(document.content, document.filename)


def _is_wordprocessing_package(content: bytes) -> bool:
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            return "word/document.xml" in archive.namelist()
    except zipfile.BadZipFile:
        return False
