"""Field normalizers: turn raw candidate fields into clean recipe values.

Titles and descriptions get entity decoding, tag stripping and clamping.
Ingredients and instructions arrive in whatever shape the source used
(a blob, a list, nested ``HowToSection`` objects, …) and are flattened
into ordered lists of non-empty strings.
"""

from __future__ import annotations

import enum
import html
import re
from typing import Any, Callable, Dict, List, Optional

from clipper.heuristics import DEFAULT_RULES, Heuristics

# ---------------------------------------------------------------------------
# Text primitives
# ---------------------------------------------------------------------------

_TAG_RE = re.compile(r"<[^>]*>")
_BLOCK_BREAK_RE = re.compile(r"<\s*(?:br\s*/?|/p|/li|/div|/h\d)\s*>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_INLINE_SPACE_RE = re.compile(r"[ \t\f\v]+")

_BULLET_RE = re.compile(r"^\s*(?:[-*•‣▪◦·]+\s*|\[[ xX]\]\s+)")
_STEP_NUMBER_RE = re.compile(r"^\s*(?:step\s+\d+\s*[:.\-]\s*|\(?\d{1,2}\)?[.)]\s+)", re.IGNORECASE)
_TRAILING_SEPARATORS_RE = re.compile(r"[•|\-–—:]+$")
_TRAILING_SHOUTING_RE = re.compile(r"[!?.]{3,}$")


def strip_tags(value: str) -> str:
    return _TAG_RE.sub(" ", value)


def decode_entities(value: str) -> str:
    """Decode HTML character references and turn NBSPs into plain spaces."""
    return html.unescape(value).replace("\u00a0", " ")


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def clean_text(value: Any) -> str:
    """Strip tags, decode entities and collapse whitespace into one line."""
    if value is None:
        return ""
    return collapse_whitespace(decode_entities(strip_tags(str(value))))


def _clean_multiline(value: str) -> str:
    """Like :func:`clean_text` but keeps line breaks for re-segmentation."""
    text = _BLOCK_BREAK_RE.sub("\n", value)
    text = decode_entities(strip_tags(text))
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [_INLINE_SPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def strip_bullet(value: str) -> str:
    return _BULLET_RE.sub("", value, count=1).strip()


def _scalar_text(value: Any) -> str:
    """Stringify a JSON scalar the way it reads in the source."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


# ---------------------------------------------------------------------------
# Title / description
# ---------------------------------------------------------------------------

def placeholder_title(host: Optional[str], *, base: str = DEFAULT_RULES.title_placeholder) -> str:
    return f"{base} ({host})" if host else base


def _host_labels(host: str) -> List[str]:
    """Return the comparable labels of *host*: the full host and its main label."""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    labels = [p for p in host.split(".") if p]
    out = [host]
    if len(labels) >= 2:
        main = labels[-2]
        if main in ("co", "com", "org", "net", "ac", "gov") and len(labels) >= 3:
            main = labels[-3]
        out.append(main)
    return out


def _squash(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "", value.lower())


def _looks_like_site(part: str, host: Optional[str], rules: Heuristics) -> bool:
    if len(part) > rules.site_suffix_max_length:
        return False
    lowered = part.lower()
    tld_re = r"\.(?:" + "|".join(map(re.escape, rules.site_suffix_tlds)) + r")\b"
    if re.search(tld_re, lowered):
        return True
    if any(word in lowered for word in rules.site_suffix_keywords):
        return True
    if host:
        squashed = _squash(part)
        for label in _host_labels(host):
            if len(label) >= 3 and label in lowered:
                return True
            label = _squash(label)
            if len(label) >= 3 and len(squashed) >= 3 and (label in squashed or squashed in label):
                return True
    return False


def _separator_re(rules: Heuristics) -> re.Pattern[str]:
    chars = "".join(re.escape(s) for s in rules.title_separators)
    return re.compile(rf"\s[{chars}]\s")


def clean_title(
    raw: Any,
    host: Optional[str] = None,
    *,
    placeholder: Optional[str] = None,
    rules: Heuristics = DEFAULT_RULES,
) -> str:
    """Clean a page or recipe title, removing a trailing site-branding suffix.

    Never returns an empty string: a placeholder derived from *host* is used
    when nothing usable is left.
    """
    fallback = placeholder_title(host, base=placeholder or rules.title_placeholder)
    s = clean_text(raw)
    if not s:
        return fallback

    parts = [p.strip() for p in _separator_re(rules).split(s) if p.strip()]
    if len(parts) >= 2:
        left, right = parts[0], parts[-1]
        if len(left) >= rules.title_left_min_length and _looks_like_site(right, host, rules):
            s = left

    s = _TRAILING_SEPARATORS_RE.sub("", s).strip()
    s = _TRAILING_SHOUTING_RE.sub("!!", s).strip()

    if len(s) > rules.title_max_length:
        s = s[: rules.title_max_length].strip()

    return s or fallback


def clean_description(raw: Any, *, rules: Heuristics = DEFAULT_RULES) -> Optional[str]:
    s = clean_text(raw)
    if len(s) > rules.description_max_length:
        s = s[: rules.description_max_length].strip()
    return s or None


# ---------------------------------------------------------------------------
# Ingredients
# ---------------------------------------------------------------------------

def _ingredient_entry(item: Any, rules: Heuristics) -> str:
    if isinstance(item, dict):
        for key in rules.ingredient_field_keys:
            text = _scalar_text(item.get(key))
            if text.strip():
                return text
        return ""
    return _scalar_text(item)


def flatten_ingredients(value: Any, *, rules: Heuristics = DEFAULT_RULES) -> List[str]:
    """Flatten any supported ``recipeIngredient`` shape into clean lines.

    Accepted shapes:
      - a string: split on newlines when it has any, otherwise on commas;
      - a list: strings pass through, numbers/booleans are stringified,
        objects contribute their first non-empty name-like field;
      - an object wrapping a list under ``items``/``list``/``values``;
      - any other object: treated as a one-element list.
    """
    return _flatten_ingredients(value, rules, unwrap=True)


def _flatten_ingredients(value: Any, rules: Heuristics, unwrap: bool) -> List[str]:
    if value is None:
        return []

    if isinstance(value, str):
        text = value.replace("\r\n", "\n").replace("\r", "\n")
        pieces = text.split("\n") if "\n" in text else text.split(",")
    elif isinstance(value, list):
        pieces = [_ingredient_entry(item, rules) for item in value]
    elif isinstance(value, dict):
        if unwrap:
            for key in rules.ingredient_wrapper_keys:
                if key in value:
                    return _flatten_ingredients(value[key], rules, unwrap=False)
        pieces = [_ingredient_entry(value, rules)]
    else:
        pieces = [_scalar_text(value)]

    out: List[str] = []
    for piece in pieces:
        cleaned = strip_bullet(clean_text(piece))
        if cleaned:
            out.append(cleaned)
    return out


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------

class InstructionShape(enum.Enum):
    """The shapes ``recipeInstructions`` (or one of its items) can take."""

    EMPTY = "empty"
    BLOB = "blob"          # a single string
    LIST = "list"          # a list of any of these shapes
    SECTION = "section"    # {"itemListElement": [...]}, e.g. HowToSection
    STEP = "step"          # {"text": ...} / {"name": ...}, e.g. HowToStep


def classify_instructions(value: Any, *, rules: Heuristics = DEFAULT_RULES) -> InstructionShape:
    if isinstance(value, str):
        return InstructionShape.BLOB if value.strip() else InstructionShape.EMPTY
    if isinstance(value, list):
        return InstructionShape.LIST if value else InstructionShape.EMPTY
    if isinstance(value, dict):
        if value.get("itemListElement"):
            return InstructionShape.SECTION
        if any(_scalar_text(value.get(k)).strip() for k in rules.step_field_keys):
            return InstructionShape.STEP
    return InstructionShape.EMPTY


def _from_blob(value: str, rules: Heuristics, depth: int) -> List[str]:
    return [value]


def _from_list(value: list, rules: Heuristics, depth: int) -> List[str]:
    out: List[str] = []
    for item in value:
        out.extend(_flatten_steps(item, rules, depth + 1))
    return out


def _from_section(value: dict, rules: Heuristics, depth: int) -> List[str]:
    return _flatten_steps(value["itemListElement"], rules, depth + 1)


def _from_step(value: dict, rules: Heuristics, depth: int) -> List[str]:
    for key in rules.step_field_keys:
        text = _scalar_text(value.get(key))
        if text.strip():
            return [text]
    return []


def _from_empty(value: Any, rules: Heuristics, depth: int) -> List[str]:
    return []


_SHAPE_HANDLERS: Dict[InstructionShape, Callable[[Any, Heuristics, int], List[str]]] = {
    InstructionShape.EMPTY: _from_empty,
    InstructionShape.BLOB: _from_blob,
    InstructionShape.LIST: _from_list,
    InstructionShape.SECTION: _from_section,
    InstructionShape.STEP: _from_step,
}


def _flatten_steps(value: Any, rules: Heuristics, depth: int) -> List[str]:
    if depth > rules.max_section_depth:
        return []
    shape = classify_instructions(value, rules=rules)
    return _SHAPE_HANDLERS[shape](value, rules, depth)


def _header_re(rules: Heuristics) -> re.Pattern[str]:
    words = "|".join(map(re.escape, rules.step_header_words))
    return re.compile(rf"^\s*(?:{words})\s*:\s*", re.IGNORECASE)


def _strip_step_header(value: str, rules: Heuristics) -> str:
    """Drop a redundant leading header word and bullet marker."""
    s = _header_re(rules).sub("", value, count=1)
    return strip_bullet(s)


def flatten_instructions(value: Any, *, rules: Heuristics = DEFAULT_RULES) -> List[str]:
    """Flatten any supported ``recipeInstructions`` shape into ordered steps.

    When the flattening yields exactly one string it is handed to
    :func:`resegment_steps`, since many sites pack every step into a single
    text block.  Step numbers are only removed after re-segmentation, which
    relies on them.
    """
    raw_steps = [_clean_multiline(s) for s in _flatten_steps(value, rules, 0)]
    steps = [s for s in (_strip_step_header(s, rules) for s in raw_steps) if s]

    if len(steps) == 1:
        steps = resegment_steps(steps[0], rules=rules)

    out: List[str] = []
    for step in steps:
        cleaned = _strip_step_header(collapse_whitespace(step), rules)
        cleaned = _STEP_NUMBER_RE.sub("", cleaned, count=1).strip()
        if cleaned:
            out.append(cleaned)
    return out


# ---------------------------------------------------------------------------
# Step re-segmentation
# ---------------------------------------------------------------------------

_BLANK_LINES_RE = re.compile(r"\n\s*\n+")
_NEWLINES_RE = re.compile(r"\n+")
_NUMBER_MARKER_RE = re.compile(r"(?:(?<=\s)|^)(\d{1,2})\s*[.)\-]\s+")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def _non_empty(parts: List[str]) -> List[str]:
    return [p.strip() for p in parts if p and p.strip()]


def _split_numbered(blob: str) -> List[str]:
    """Split on ``1. `` / ``2) `` / ``3 - `` markers that count up from one."""
    cuts: List[re.Match[str]] = []
    expected = 1
    for match in _NUMBER_MARKER_RE.finditer(blob):
        if int(match.group(1)) == expected:
            cuts.append(match)
            expected += 1
    if len(cuts) < 2:
        return []

    parts = [blob[: cuts[0].start()]]
    for current, following in zip(cuts, cuts[1:] + [None]):
        end = following.start() if following is not None else len(blob)
        parts.append(blob[current.end() : end])
    return _non_empty(parts)


def resegment_steps(blob: str, *, rules: Heuristics = DEFAULT_RULES) -> List[str]:
    """Split one combined instructions string into discrete steps.

    Tried in order, the first rule giving at least two parts wins:
      1. blank lines, then single newlines;
      2. counted numbering (``1. `` … ``2. `` …);
      3. sentence boundaries, only for long text whose sentence count lands
         between ``sentence_split_min_parts`` and ``sentence_split_max_parts``.
    Otherwise the blob is returned as the single step.
    """
    text = blob.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not text:
        return []

    for splitter in (_BLANK_LINES_RE, _NEWLINES_RE):
        parts = _non_empty(splitter.split(text))
        if len(parts) >= 2:
            return parts

    parts = _split_numbered(text)
    if len(parts) >= 2:
        return parts

    if len(text) >= rules.sentence_split_min_length:
        sentences = _non_empty(_SENTENCE_END_RE.split(text))
        if rules.sentence_split_min_parts <= len(sentences) <= rules.sentence_split_max_parts:
            return sentences

    return [text]
