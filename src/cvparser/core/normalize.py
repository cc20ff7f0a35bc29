"""Text normalization applied before any field heuristic runs."""

from __future__ import annotations

import re

_LINE_BREAKS_RE = re.compile(r"\r\n|[\r\f\v\x85\u2028\u2029]")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")
_HORIZONTAL_SPACE_RE = re.compile(r"[^\S\n]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Return ``text`` with uniform line endings and collapsed spacing.

    Every line-ending variant becomes ``\\n``, control characters are dropped,
    runs of horizontal whitespace become one space, lines are trimmed and at
    most one blank line is kept between paragraphs.
    """
    if not text:
        return ""
    text = _LINE_BREAKS_RE.sub("\n", text)
    text = _CONTROL_RE.sub("", text)
    text = _HORIZONTAL_SPACE_RE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def content_lines(text: str) -> list[str]:
    """Non-empty lines of already normalized text."""
    return [line for line in text.split("\n") if line]


__all__ = ["content_lines", "normalize_text"]
