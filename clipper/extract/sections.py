"""Plain-text section parser.

Last resort when a page carries no structured recipe data: the page text
is scanned line by line for an "Ingredients" header followed by an
"Instructions"-like header.  Pages without recognisable headers still
yield their numbered lines as steps.

The pasted-block helpers at the bottom serve the manual paste path, where
the user supplies ingredients and instructions as separate text blocks.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from clipper.extract.models import RawFields
from clipper.heuristics import DEFAULT_RULES, Heuristics

logger = logging.getLogger(__name__)

_NUMBERED_LINE_RE = re.compile(r"^\d+[.)]\s+")
_LINE_PREFIX_RES = (
    re.compile(r"^[-*•‣▪◦]+\s+"),
    re.compile(r"^\[[ xX]\]\s+"),
    re.compile(r"^\(?\d+\)?[.)]\s+"),
    re.compile(r"^step\s+\d+\s*[:\-]\s+", re.IGNORECASE),
)
_HEADER_TRAILER_RE = re.compile(r"[:\-–—]+$")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")
_WHITESPACE_RE = re.compile(r"\s+")


def _lines(text: str) -> List[str]:
    text = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    return [line.strip() for line in text.split("\n") if line.strip()]


def _marker_index(lowered: List[str], markers: Iterable[str]) -> int:
    for i, line in enumerate(lowered):
        if any(marker in line for marker in markers):
            return i
    return -1


def _provisional_title(lines: List[str], rules: Heuristics) -> Optional[str]:
    for line in lines:
        if (
            rules.title_line_min_length <= len(line) <= rules.title_line_max_length
            and not line[0].isdigit()
        ):
            return line
    return None


def parse_sections(text: str, *, rules: Heuristics = DEFAULT_RULES) -> RawFields:
    """Find ingredient and instruction sections in plain *text*.

    With an ingredients header followed later by an instructions header,
    the lines strictly between them are ingredients and everything after
    the second header is instructions.  Otherwise every ``1.`` / ``2)``
    numbered line is taken as a step.  Both lists are capped at
    ``rules.section_line_cap`` entries.
    """
    lines = _lines(text)
    fields = RawFields(title=_provisional_title(lines, rules))
    if not lines:
        return fields

    lowered = [line.lower() for line in lines]
    ing_idx = _marker_index(lowered, rules.ingredient_markers)
    ins_idx = _marker_index(lowered, rules.instruction_markers)
    cap = rules.section_line_cap

    if ing_idx != -1 and ins_idx > ing_idx:
        logger.debug("Section headers at lines %d and %d", ing_idx, ins_idx)
        fields.ingredients_raw = lines[ing_idx + 1 : ins_idx][:cap]
        fields.instructions_raw = lines[ins_idx + 1 :][:cap]
        return fields

    steps = [_NUMBERED_LINE_RE.sub("", line).strip() for line in lines if _NUMBERED_LINE_RE.match(line)]
    fields.instructions_raw = [s for s in steps if s][:cap]
    if fields.instructions_raw:
        logger.debug("No usable section headers, kept %d numbered lines", len(fields.instructions_raw))
    return fields


# ---------------------------------------------------------------------------
# Pasted blocks
# ---------------------------------------------------------------------------

def strip_line_prefix(line: str) -> str:
    """Remove bullets, checkboxes, ``1.``/``(1)`` numbering and ``Step 1:``."""
    s = line.strip()
    for pattern in _LINE_PREFIX_RES:
        s = pattern.sub("", s, count=1)
    return s.strip()


def split_lines(block: str) -> List[str]:
    out: List[str] = []
    for line in _lines(block):
        cleaned = _WHITESPACE_RE.sub(" ", strip_line_prefix(line)).strip()
        if cleaned:
            out.append(cleaned)
    return out


def split_paragraphs(block: str) -> List[str]:
    """Split pasted instructions into steps.

    Blank-line separated paragraphs win when there are any (each paragraph
    joined into one step), otherwise every line is a step.
    """
    text = (block or "").replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return []
    if not _BLANK_LINES_RE.search(text):
        return split_lines(text)

    out: List[str] = []
    for paragraph in _BLANK_LINES_RE.split(text):
        joined = " ".join(strip_line_prefix(line) for line in paragraph.split("\n"))
        joined = _WHITESPACE_RE.sub(" ", joined).strip()
        if joined:
            out.append(joined)
    return out


def drop_header(lines: List[str], header_words: Iterable[str]) -> List[str]:
    """Drop the first line if it is only a section header like ``Ingredients:``."""
    if not lines:
        return lines
    first = _HEADER_TRAILER_RE.sub("", lines[0].lower()).strip()
    if first in header_words:
        return lines[1:]
    return lines
