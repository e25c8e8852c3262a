"""Recipe extraction endpoints.

Routes
------
POST /recipes/preview          Body: {"url": "https://..."}            → extract_recipe
POST /recipes/paste            Body: {"text": "...", "url": null}      → extract_from_text
POST /recipes/paste/sections   Body: {"ingredients_text": "...", ...}  → extract_from_sections
"""

from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from clipper.errors import ClipError
from clipper.extract import (
    ExtractedRecipe,
    extract_from_sections,
    extract_from_text,
    extract_recipe,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class PreviewRequest(BaseModel):
    url: str


class PasteRequest(BaseModel):
    text: str
    url: Optional[str] = None


class PasteSectionsRequest(BaseModel):
    ingredients_text: str = ""
    instructions_text: str = ""
    title: Optional[str] = None
    url: Optional[str] = None


class RecipeResponse(BaseModel):
    title: str
    description: Optional[str] = None
    ingredients: List[str]
    instructions: List[str]
    source_url: str
    source_host: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _http_error(exc: ClipError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_dict())


def _recipe_response(recipe: ExtractedRecipe) -> dict[str, Any]:
    return recipe.to_dict()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/preview", response_model=RecipeResponse)
def preview_endpoint(body: PreviewRequest) -> dict[str, Any]:
    """Fetch a recipe page and return the extracted recipe.

    Falls back to a reader proxy when the site blocks the direct request.
    """
    try:
        recipe = extract_recipe(body.url)
    except ClipError as exc:
        raise _http_error(exc) from exc
    return _recipe_response(recipe)


@router.post("/paste", response_model=RecipeResponse)
def paste_endpoint(body: PasteRequest) -> dict[str, Any]:
    """Extract a recipe from pasted page source or plain text."""
    try:
        recipe = extract_from_text(body.text, url=body.url)
    except ClipError as exc:
        raise _http_error(exc) from exc
    return _recipe_response(recipe)


@router.post("/paste/sections", response_model=RecipeResponse)
def paste_sections_endpoint(body: PasteSectionsRequest) -> dict[str, Any]:
    try:
        recipe = extract_from_sections(
            body.ingredients_text,
            body.instructions_text,
            title=body.title,
            url=body.url,
        )
    except ClipError as exc:
        raise _http_error(exc) from exc
    return _recipe_response(recipe)
