"""Keyword tables and thresholds used by the extraction heuristics.

Every list of magic words and every numeric cut-off lives here instead of
at its call site.  Heuristic functions take a ``rules`` keyword argument
defaulting to :data:`DEFAULT_RULES`, so a test (or a caller with different
needs) can pass a tuned copy built with :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Heuristics:
    # ------------------------------------------------------------------
    # URL sanitizer
    # ------------------------------------------------------------------
    tracking_params: tuple[str, ...] = ("fbclid", "gclid", "mc_cid", "mc_eid", "mkt_tok")
    tracking_prefixes: tuple[str, ...] = ("utm_",)

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    hard_block_statuses: tuple[int, ...] = (403, 404)

    # ------------------------------------------------------------------
    # Title / description cleanup
    # ------------------------------------------------------------------
    title_separators: tuple[str, ...] = ("-", "|", "•", "–")
    site_suffix_tlds: tuple[str, ...] = ("com", "net", "org", "co", "io", "ca", "uk", "au")
    site_suffix_keywords: tuple[str, ...] = ("recipe", "recipes", "kitchen", "food", "cooking")
    site_suffix_max_length: int = 30
    title_left_min_length: int = 6
    title_max_length: int = 120
    description_max_length: int = 260
    title_placeholder: str = "Clipped recipe"
    pasted_title_placeholder: str = "Pasted recipe"

    # ------------------------------------------------------------------
    # Ingredient / instruction flattening
    # ------------------------------------------------------------------
    ingredient_field_keys: tuple[str, ...] = ("name", "text", "value", "ingredient", "item")
    ingredient_wrapper_keys: tuple[str, ...] = ("items", "list", "values")
    step_field_keys: tuple[str, ...] = ("text", "name")
    step_header_words: tuple[str, ...] = ("directions", "instructions", "method")
    max_section_depth: int = 8

    # ------------------------------------------------------------------
    # Step re-segmentation
    # ------------------------------------------------------------------
    sentence_split_min_length: int = 120
    sentence_split_min_parts: int = 2
    sentence_split_max_parts: int = 20

    # ------------------------------------------------------------------
    # Plain-text section parser
    # ------------------------------------------------------------------
    ingredient_markers: tuple[str, ...] = ("ingredients",)
    instruction_markers: tuple[str, ...] = (
        "instructions",
        "directions",
        "method",
        "preparation",
        "steps",
    )
    section_line_cap: int = 250
    title_line_min_length: int = 6
    title_line_max_length: int = 120

    # Header lines dropped from the top of pasted blocks
    ingredient_header_words: tuple[str, ...] = ("ingredients", "ingredient")
    instruction_header_words: tuple[str, ...] = ("instructions", "direction", "directions", "method")

    # ------------------------------------------------------------------
    # Quantity humanizer
    # ------------------------------------------------------------------
    fraction_denominator: int = 8
    third_tolerance: float = 0.02
    min_inline_decimals: int = 3

    # ------------------------------------------------------------------
    # Structured data walk
    # ------------------------------------------------------------------
    recipe_type: str = "recipe"
    max_walk_depth: int = 64


DEFAULT_RULES = Heuristics()
