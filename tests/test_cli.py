"""Tests for the ``clip`` CLI commands."""

from __future__ import annotations

import json
from unittest.mock import patch

from typer.testing import CliRunner

from cli.main import app
from clipper.errors import FetchError
from clipper.extract import ExtractedRecipe

runner = CliRunner()

_RECIPE = ExtractedRecipe(
    title="Tomato Soup",
    description="Bright and quick.",
    ingredients=["4 tomatoes", "1/2 onion"],
    instructions=["Chop.", "Simmer."],
    source_url="https://example.com/soup",
    source_host="example.com",
)

_PASTED = "Lemon Cake\nIngredients\n1.5 cups flour\nMethod\nMix.\nBake.\n"


# ---------------------------------------------------------------------------
# preview
# ---------------------------------------------------------------------------

class TestPreviewCommand:
    def test_human_output(self) -> None:
        with patch("cli.main.extract_recipe", return_value=_RECIPE):
            result = runner.invoke(app, ["preview", "--url", "https://example.com/soup"])

        assert result.exit_code == 0
        assert "[preview] Title       : Tomato Soup" in result.output
        assert "  - 1/2 onion" in result.output
        assert "  2. Simmer." in result.output

    def test_json_output(self) -> None:
        with patch("cli.main.extract_recipe", return_value=_RECIPE):
            result = runner.invoke(app, ["preview", "--url", "https://example.com/soup", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == _RECIPE.to_dict()

    def test_error_exits_1(self) -> None:
        err = FetchError("https://example.com/soup", 403, 500)
        with patch("cli.main.extract_recipe", side_effect=err):
            result = runner.invoke(app, ["preview", "--url", "https://example.com/soup"])

        assert result.exit_code == 1
        assert "Direct fetch failed (403) and fallback failed (500)." in result.output

    def test_invalid_url_exits_1(self) -> None:
        result = runner.invoke(app, ["preview", "--url", "example.com"])
        assert result.exit_code == 1
        assert "Invalid URL" in result.output


# ---------------------------------------------------------------------------
# paste / sections
# ---------------------------------------------------------------------------

class TestPasteCommand:
    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "cake.txt"
        path.write_text(_PASTED, encoding="utf-8")

        result = runner.invoke(app, ["paste", "--file", str(path)])

        assert result.exit_code == 0
        assert "[paste] Title       : Lemon Cake" in result.output
        assert "  - 1 1/2 cups flour" in result.output

    def test_from_stdin_as_json(self) -> None:
        result = runner.invoke(app, ["paste", "--json", "--url", "https://example.com/cake"], input=_PASTED)

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["instructions"] == ["Mix.", "Bake."]
        assert data["source_host"] == "example.com"

    def test_nothing_found_exits_1(self) -> None:
        result = runner.invoke(app, ["paste"], input="no recipe here")
        assert result.exit_code == 1
        assert "[paste] Error:" in result.output


class TestSectionsCommand:
    def test_files(self, tmp_path) -> None:
        ingredients = tmp_path / "ingredients.txt"
        ingredients.write_text("Ingredients:\n- 2 eggs\n", encoding="utf-8")
        instructions = tmp_path / "instructions.txt"
        instructions.write_text("Beat the eggs.\n\nCook gently.", encoding="utf-8")

        result = runner.invoke(
            app,
            [
                "sections",
                "--ingredients", str(ingredients),
                "--instructions", str(instructions),
                "--title", "Scrambled Eggs",
            ],
        )

        assert result.exit_code == 0
        assert "[sections] Title       : Scrambled Eggs" in result.output
        assert "  1. Beat the eggs." in result.output
