"""Data models for the extraction stage."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, List, Optional


@dataclass
class RawFields:
    """Best-candidate fields from one extraction tier, before normalization.

    The ingredient and instruction values keep whatever shape the source
    used (a string, a list, nested ``HowToSection`` objects, ...); the
    normalizers flatten them.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    ingredients_raw: Any = None
    instructions_raw: Any = None


@dataclass(frozen=True)
class ExtractedRecipe:
    """The normalized recipe handed back to callers.

    ``title`` is never empty, and at least one of ``ingredients`` /
    ``instructions`` holds an entry.
    """

    title: str
    description: Optional[str]
    ingredients: List[str]
    instructions: List[str]
    source_url: str
    source_host: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
