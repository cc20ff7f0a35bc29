"""OOXML word-processing adapters."""

from __future__ import annotations

import io
import re
import zipfile
from typing import Iterable
from xml.etree import ElementTree

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph

from ..errors import CorruptDocumentError, EmptyDocumentError
from .base import RawText

_MC_FALLBACK = "{http://schemas.openxmlformats.org/markup-compatibility/2006}Fallback"

W_P = qn("w:p")
W_R = qn("w:r")
W_T = qn("w:t")
W_TAB = qn("w:tab")
W_BR = qn("w:br")
W_CR = qn("w:cr")
W_TBL = qn("w:tbl")
W_SDT = qn("w:sdt")
W_SDT_CONTENT = qn("w:sdtContent")
W_TXBX_CONTENT = qn("w:txbxContent")
A_TXBODY = qn("a:txBody")
A_P = qn("a:p")
A_R = qn("a:r")
A_T = qn("a:t")

_HEADER_FOOTER_RE = re.compile(r"^word/(header|footer)\d*\.xml$")


def join_runs(run_texts: Iterable[str]) -> str:
    """Concatenate run texts, inserting one space where two runs would collide."""
    texts = [text for text in run_texts if text]
    joined = ""
    for index, text in enumerate(texts):
        joined += text
        if index + 1 < len(texts):
            following = texts[index + 1]
            if not text[-1].isspace() and not following[0].isspace():
                joined += " "
    return joined


def _owner(element, tag: str):
    for ancestor in element.iterancestors():
        if ancestor.tag == tag:
            return ancestor
    return None


def _in_fallback(element) -> bool:
    return any(ancestor.tag == _MC_FALLBACK for ancestor in element.iterancestors())


def _run_text(run) -> str:
    parts: list[str] = []
    for child in run.iterchildren():
        if child.tag == W_T:
            parts.append(child.text or "")
        elif child.tag == W_TAB:
            parts.append("\t")
        elif child.tag in (W_BR, W_CR):
            parts.append("\n")
    return "".join(parts)


class PythonDocxExtractor:
    """Walk a .docx package with python-docx.

    Headers come first, then the body in document order, then footers. Body
    paragraphs use python-docx's full paragraph text; paragraphs in table
    cells, text boxes, headers and footers are rebuilt run by run with
    :func:`join_runs`. Floating text boxes (``w:txbxContent``) and DrawingML
    text bodies (``a:txBody``) are emitted right after the paragraph that
    anchors them.
    """

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        if not content:
            raise EmptyDocumentError("empty payload")
        try:
            document = Document(io.BytesIO(content))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
            raise CorruptDocumentError(f"not a word-processing package: {exc}") from exc

        headers: list[str] = []
        footers: list[str] = []
        seen_parts: set[str] = set()
        for section in document.sections:
            for story, sink in (
                (section.first_page_header, headers),
                (section.header, headers),
                (section.even_page_header, headers),
                (section.first_page_footer, footers),
                (section.footer, footers),
                (section.even_page_footer, footers),
            ):
                if story.is_linked_to_previous:
                    continue
                partname = str(story.part.partname)
                if partname in seen_parts:
                    continue
                seen_parts.add(partname)
                self._walk_blocks(story._element, sink, full_paragraphs=False)

        body: list[str] = []
        self._walk_blocks(document.element.body, body, full_paragraphs=True)

        lines = [line for line in headers + body + footers if line.strip()]
        if not lines:
            raise EmptyDocumentError("document has no text")
        return RawText(text="\n".join(lines), source_label=f"python-docx:{len(lines)} paragraphs")

    def _walk_blocks(self, container, lines: list[str], *, full_paragraphs: bool) -> None:
        for child in container.iterchildren():
            if child.tag == W_P:
                if full_paragraphs:
                    lines.append(Paragraph(child, None).text)
                else:
                    lines.append(self._joined_paragraph(child))
                self._walk_floating(child, lines)
            elif child.tag == W_TBL:
                for row in child.tr_lst:
                    for cell in row.tc_lst:
                        self._walk_blocks(cell, lines, full_paragraphs=False)
            elif child.tag == W_SDT:
                sdt_content = child.find(W_SDT_CONTENT)
                if sdt_content is not None:
                    self._walk_blocks(sdt_content, lines, full_paragraphs=full_paragraphs)

    def _joined_paragraph(self, paragraph) -> str:
        runs = [run for run in paragraph.iter(W_R) if _owner(run, W_P) is paragraph]
        return join_runs(_run_text(run) for run in runs)

    def _walk_floating(self, paragraph, lines: list[str]) -> None:
        for box in paragraph.iter(W_TXBX_CONTENT):
            if _owner(box, W_P) is not paragraph or _in_fallback(box):
                continue
            self._walk_blocks(box, lines, full_paragraphs=False)
        for text_body in paragraph.iter(A_TXBODY):
            if _owner(text_body, W_P) is not paragraph or _in_fallback(text_body):
                continue
            for drawing_paragraph in text_body.iter(A_P):
                runs = (
                    "".join(node.text or "" for node in run.iter(A_T))
                    for run in drawing_paragraph.iter(A_R)
                )
                lines.append(join_runs(runs))


class RawOOXMLExtractor:
    """Read ``w:t`` and DrawingML ``a:t`` nodes straight out of the package XML parts.

    Nested paragraphs (text boxes, drawing text bodies) are emitted after
    their anchoring paragraph; ``mc:Fallback`` copies of shapes are skipped.
    """

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        if not content:
            raise EmptyDocumentError("empty payload")
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                names = archive.namelist()
                if "word/document.xml" not in names:
                    raise CorruptDocumentError("package has no word/document.xml part")
                stories = sorted(name for name in names if _HEADER_FOOTER_RE.match(name))
                ordered = (
                    [name for name in stories if "/header" in name]
                    + ["word/document.xml"]
                    + [name for name in stories if "/footer" in name]
                )
                roots = [ElementTree.fromstring(archive.read(name)) for name in ordered]
        except (zipfile.BadZipFile, ElementTree.ParseError) as exc:
            raise CorruptDocumentError(f"not a word-processing package: {exc}") from exc

        lines: list[str] = []
        for root in roots:
            _walk_xml(root, lines)
        lines = [line for line in lines if line.strip()]
        if not lines:
            raise EmptyDocumentError("document has no text")
        return RawText(text="\n".join(lines), source_label=f"ooxml-xml:{len(roots)} parts")


def _walk_xml(element: ElementTree.Element, lines: list[str]) -> None:
    if element.tag == _MC_FALLBACK:
        return
    if element.tag == A_P:
        runs = ("".join(node.text or "" for node in run.iter(A_T)) for run in element.iter(A_R))
        lines.append(join_runs(runs))
        return
    if element.tag == W_P:
        parts: list[str] = []
        nested: list[ElementTree.Element] = []
        _gather_text(element, parts, nested)
        lines.append("".join(parts))
        for paragraph in nested:
            _walk_xml(paragraph, lines)
        return
    for child in element:
        _walk_xml(child, lines)


def _gather_text(
    element: ElementTree.Element,
    parts: list[str],
    nested: list[ElementTree.Element],
) -> None:
    for child in element:
        if child.tag == _MC_FALLBACK:
            continue
        if child.tag in (W_P, A_P):
            nested.append(child)
        elif child.tag == W_T:
            parts.append(child.text or "")
        elif child.tag == W_TAB:
            parts.append("\t")
        elif child.tag in (W_BR, W_CR):
            parts.append("\n")
        else:
            _gather_text(child, parts, nested)


__all__ = ["PythonDocxExtractor", "RawOOXMLExtractor", "join_runs"]
