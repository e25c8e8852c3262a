"""Recipe Clipper CLI: entry-point for the extraction pipeline.

Usage:
    python cli/main.py --help

Commands:
    preview   → fetch a recipe URL and print the extracted recipe
    paste     → extract a recipe from pasted page source or text (file or stdin)
    sections  → build a recipe from separate ingredient / instruction files
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from clipper.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
from typing import Optional

import typer

from clipper.config import settings
from clipper.errors import ClipError
from clipper.extract import (
    ExtractedRecipe,
    extract_from_sections,
    extract_from_text,
    extract_recipe,
)

app = typer.Typer(
    name="clip",
    help="Recipe Clipper CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Turn recipe pages and pasted text into clean recipe records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render(tag: str, recipe: ExtractedRecipe, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(recipe.to_dict(), indent=2, ensure_ascii=False))
        return

    typer.echo(f"[{tag}] Title       : {recipe.title}")
    typer.echo(f"[{tag}] Source      : {recipe.source_host or '(none)'}")
    if recipe.description:
        typer.echo(f"[{tag}] Description : {recipe.description}")
    typer.echo("")
    typer.echo(f"Ingredients ({len(recipe.ingredients)}):")
    for line in recipe.ingredients:
        typer.echo(f"  - {line}")
    typer.echo("")
    typer.echo(f"Instructions ({len(recipe.instructions)}):")
    for i, step in enumerate(recipe.instructions, start=1):
        typer.echo(f"  {i}. {step}")


def _fail(tag: str, exc: ClipError) -> None:
    typer.echo(f"[{tag}] Error: {exc.message}", err=True)
    raise typer.Exit(1)


def _read(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("preview")
def preview(
    url: str = typer.Option(..., help="Recipe page URL."),
    as_json: bool = typer.Option(False, "--json", help="Print the recipe as JSON."),
) -> None:
    """Fetch a recipe page and print the extracted recipe."""
    if not as_json:
        typer.echo(f"[preview] Fetching {url!r} …")
    try:
        recipe = extract_recipe(url)
    except ClipError as exc:
        _fail("preview", exc)
    _render("preview", recipe, as_json)


@app.command("paste")
def paste(
    file: Optional[Path] = typer.Option(
        None, "--file", exists=True, dir_okay=False, help="Read the text from a file instead of stdin."
    ),
    url: Optional[str] = typer.Option(None, help="Where the text was copied from."),
    as_json: bool = typer.Option(False, "--json", help="Print the recipe as JSON."),
) -> None:
    """Extract a recipe from pasted page source or plain text."""
    try:
        recipe = extract_from_text(_read(file), url=url)
    except ClipError as exc:
        _fail("paste", exc)
    _render("paste", recipe, as_json)


@app.command("sections")
def sections(
    ingredients: Optional[Path] = typer.Option(
        None, "--ingredients", exists=True, dir_okay=False, help="File with the ingredient lines."
    ),
    instructions: Optional[Path] = typer.Option(
        None, "--instructions", exists=True, dir_okay=False, help="File with the instructions."
    ),
    title: Optional[str] = typer.Option(None, help="Recipe title."),
    url: Optional[str] = typer.Option(None, help="Where the recipe was copied from."),
    as_json: bool = typer.Option(False, "--json", help="Print the recipe as JSON."),
) -> None:
    """Build a recipe from separately pasted ingredients and instructions."""
    ingredients_text = ingredients.read_text(encoding="utf-8") if ingredients else ""
    instructions_text = instructions.read_text(encoding="utf-8") if instructions else ""
    try:
        recipe = extract_from_sections(ingredients_text, instructions_text, title=title, url=url)
    except ClipError as exc:
        _fail("sections", exc)
    _render("sections", recipe, as_json)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
