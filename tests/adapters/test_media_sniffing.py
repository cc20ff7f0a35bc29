from __future__ import annotations

import io
import zipfile

from cvparser.adapters import (
    DOCX_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    TEXT_MEDIA_TYPE,
    default_descriptors,
    resolve_media_type,
    sniff_media_type,
)
from cvparser.schemas import UploadedDocument


def _zip(names: list[str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name in names:
            archive.writestr(name, "<xml/>")
    return buffer.getvalue()


def test_pdf_magic_wins_over_extension():
    assert sniff_media_type(b"%PDF-1.7\n...", "resume.txt") == PDF_MEDIA_TYPE


def test_wordprocessing_package_is_detected():
    assert sniff_media_type(_zip(["word/document.xml"]), None) == DOCX_MEDIA_TYPE


def test_other_zip_falls_back_to_extension():
    assert sniff_media_type(_zip(["xl/workbook.xml"]), "sheet.xlsx") is None


def test_extension_lookup():
    assert sniff_media_type(b"Jane Doe", "CV.TXT") == TEXT_MEDIA_TYPE
    assert sniff_media_type(b"Jane Doe", "cv") is None
    assert sniff_media_type(b"Jane Doe", None) is None


def test_declared_media_type_wins():
    document = UploadedDocument(content=b"%PDF-1.7", media_type="text/plain; charset=utf-8", filename="cv.pdf")

    assert resolve_media_type(document) == TEXT_MEDIA_TYPE


def test_generic_media_type_is_sniffed():
    document = UploadedDocument(content=b"%PDF-1.7", media_type="application/octet-stream", filename="upload")

    assert resolve_media_type(document) == PDF_MEDIA_TYPE


def test_default_descriptor_priorities():
    descriptors = {descriptor.adapter_id: descriptor.priority for descriptor in default_descriptors()}

    assert descriptors == {
        "plain-text": 1,
        "pymupdf": 1,
        "pdfplumber": 2,
        "pymupdf4llm": 3,
        "python-docx": 1,
        "ooxml-xml": 2,
    }


def test_descriptor_applies_to_media_type_or_extension():
    pymupdf = next(d for d in default_descriptors() if d.adapter_id == "pymupdf")

    assert pymupdf.applies_to("application/pdf", None)
    assert pymupdf.applies_to(None, ".PDF")
    assert not pymupdf.applies_to("text/plain", ".txt")
