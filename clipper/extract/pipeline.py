"""Recipe extraction pipeline.

Turns a URL, a pasted page, or separately pasted ingredient/instruction
blocks into an :class:`ExtractedRecipe`.  Sources are tried in tiers, and
the first tier that yields any ingredient or instruction wins:

    JSON-LD recipe node  →  Next.js ``__NEXT_DATA__`` node  →  plain-text sections

Title and description are resolved independently of the tier, through the
page-level fallbacks in :mod:`clipper.extract.page`.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from clipper.config import Settings
from clipper.errors import ExtractionEmptyError
from clipper.extract import page
from clipper.extract.models import ExtractedRecipe, RawFields
from clipper.extract.normalize import (
    clean_description,
    clean_text,
    clean_title,
    flatten_ingredients,
    flatten_instructions,
)
from clipper.extract.quantities import humanize_lines
from clipper.extract.sections import drop_header, parse_sections, split_lines, split_paragraphs
from clipper.extract.structured import locate, locate_next_data
from clipper.heuristics import DEFAULT_RULES, Heuristics
from clipper.scraper.fetcher import retrieve
from clipper.scraper.urls import sanitize_url, source_host, validate_url

logger = logging.getLogger(__name__)

_TierResult = Tuple[str, RawFields, List[str], List[str]]


# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------

def _node_text(node: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = node.get(key)
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            text = clean_text(value)
            if text:
                return text
    return None


def _fields_from_node(node: Optional[dict]) -> Optional[RawFields]:
    if node is None:
        return None
    return RawFields(
        title=_node_text(node, "name", "headline"),
        description=_node_text(node, "description"),
        ingredients_raw=node.get("recipeIngredient"),
        instructions_raw=node.get("recipeInstructions"),
    )


def _jsonld_tier(markup: str, rules: Heuristics) -> Optional[RawFields]:
    return _fields_from_node(locate(markup, rules=rules))


def _next_data_tier(markup: str, rules: Heuristics) -> Optional[RawFields]:
    return _fields_from_node(locate_next_data(markup, rules=rules))


def _sections_tier(markup: str, rules: Heuristics) -> Optional[RawFields]:
    if not page.looks_like_html(markup):
        return parse_sections(markup, rules=rules)

    readable = page.readable_text(markup)
    if readable:
        fields = parse_sections(readable, rules=rules)
        if fields.ingredients_raw or fields.instructions_raw:
            return fields
        logger.debug("No sections in trafilatura text, retrying with BeautifulSoup")
    return parse_sections(page.fallback_text(markup), rules=rules)


_TIERS: Tuple[Tuple[str, Callable[[str, Heuristics], Optional[RawFields]]], ...] = (
    ("json-ld", _jsonld_tier),
    ("next-data", _next_data_tier),
    ("sections", _sections_tier),
)


def _normalize(fields: RawFields, rules: Heuristics) -> Tuple[List[str], List[str]]:
    ingredients = humanize_lines(flatten_ingredients(fields.ingredients_raw, rules=rules), rules=rules)
    instructions = flatten_instructions(fields.instructions_raw, rules=rules)
    return ingredients, instructions


def _first_usable_tier(markup: str, rules: Heuristics) -> Optional[_TierResult]:
    for name, tier in _TIERS:
        fields = tier(markup, rules)
        if fields is None:
            logger.debug("[extract:%s] nothing found", name)
            continue
        ingredients, instructions = _normalize(fields, rules)
        if ingredients or instructions:
            logger.info(
                "[extract:%s] %d ingredients, %d instructions",
                name,
                len(ingredients),
                len(instructions),
            )
            return name, fields, ingredients, instructions
        logger.debug("[extract:%s] node found but no usable ingredients or instructions", name)
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def has_structured_recipe(markup: str, *, rules: Heuristics = DEFAULT_RULES) -> bool:
    """``True`` if *markup* embeds a recipe node the structured tiers can use."""
    return locate(markup, rules=rules) is not None or locate_next_data(markup, rules=rules) is not None


def extract_from_markup(
    markup: str,
    *,
    source_url: str,
    host: Optional[str],
    rules: Heuristics = DEFAULT_RULES,
) -> ExtractedRecipe:
    """Run every extraction tier over *markup* (HTML or plain text).

    Raises:
        ExtractionEmptyError: If no tier produced an ingredient or instruction.
    """
    markup = markup or ""
    found = _first_usable_tier(markup, rules)
    if found is None:
        raise ExtractionEmptyError()
    tier, fields, ingredients, instructions = found

    if tier == "sections":
        # The first plausible text line is the last resort before the placeholder.
        raw_title = page.page_title(markup) or fields.title
    else:
        raw_title = fields.title or page.page_title(markup)
    raw_description = fields.description or page.page_description(markup)

    return ExtractedRecipe(
        title=clean_title(raw_title, host, rules=rules),
        description=clean_description(raw_description, rules=rules),
        ingredients=ingredients,
        instructions=instructions,
        source_url=source_url,
        source_host=host,
    )


def extract_recipe(
    url: str,
    *,
    timeout: Optional[float] = None,
    config: Settings | None = None,
    rules: Heuristics = DEFAULT_RULES,
) -> ExtractedRecipe:
    """Fetch *url* and extract the recipe it holds.

    Raises:
        InvalidUrlError: If *url* is missing or not an http(s) URL.
        FetchError: If both the direct request and the reader fallback failed.
        ExtractionEmptyError: If the page yielded no ingredients or instructions.
    """
    canonical = sanitize_url(validate_url(url), rules=rules)
    host = source_host(canonical)

    retrieved = retrieve(
        canonical,
        accept=lambda body: has_structured_recipe(body, rules=rules),
        timeout=timeout,
        config=config,
        rules=rules,
    )
    logger.info("[extract] %s retrieved via %s", canonical, retrieved.retrieval_mode)
    return extract_from_markup(retrieved.body, source_url=canonical, host=host, rules=rules)


def _source(url: Optional[str], rules: Heuristics) -> Tuple[str, Optional[str]]:
    if not url or not url.strip():
        return "", None
    canonical = sanitize_url(validate_url(url), rules=rules)
    return canonical, source_host(canonical)


def extract_from_text(
    text: str,
    *,
    url: Optional[str] = None,
    rules: Heuristics = DEFAULT_RULES,
) -> ExtractedRecipe:
    """Extract a recipe from pasted page source or plain text, no network."""
    source_url, host = _source(url, rules)
    return extract_from_markup(text, source_url=source_url, host=host, rules=rules)


def extract_from_sections(
    ingredients_text: str,
    instructions_text: str,
    *,
    title: Optional[str] = None,
    url: Optional[str] = None,
    rules: Heuristics = DEFAULT_RULES,
) -> ExtractedRecipe:
    """Build a recipe from separately pasted ingredient and instruction blocks.

    Bullets, checkboxes and step numbering are stripped from every line, a
    leading ``Ingredients``/``Directions`` header line is dropped, and
    instructions are split on blank lines when the paste has paragraphs.
    """
    source_url, host = _source(url, rules)

    ingredients = humanize_lines(
        drop_header(split_lines(ingredients_text), rules.ingredient_header_words),
        rules=rules,
    )
    instructions = drop_header(split_paragraphs(instructions_text), rules.instruction_header_words)
    if not ingredients and not instructions:
        raise ExtractionEmptyError("Paste ingredients and/or instructions first.")

    return ExtractedRecipe(
        title=clean_title(title, host, placeholder=rules.pasted_title_placeholder, rules=rules),
        description=None,
        ingredients=ingredients,
        instructions=instructions,
        source_url=source_url,
        source_host=host,
    )

