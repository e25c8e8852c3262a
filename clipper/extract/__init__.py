"""Extraction package: structured data, section parsing & normalization."""

from clipper.extract.models import ExtractedRecipe, RawFields
from clipper.extract.pipeline import (
    extract_from_markup,
    extract_from_sections,
    extract_from_text,
    extract_recipe,
)

__all__ = [
    "extract_recipe",
    "extract_from_text",
    "extract_from_markup",
    "extract_from_sections",
    "ExtractedRecipe",
    "RawFields",
]
