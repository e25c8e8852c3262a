"""Tests for the structured data locator (JSON-LD and Next.js payloads)."""

from __future__ import annotations

from clipper.extract.structured import (
    find_jsonld_blocks,
    find_recipe_node,
    locate,
    locate_next_data,
    parse_block,
    recipe_score,
)


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_GRAPH_PAGE = """\
<html><head>
<script type="application/ld+json">{"@type": "Organization", "name": "Site"}</script>
<script data-rh="true" type='application/ld+json'>
{
  "@context": "https://schema.org",
  "@graph": [
    {"@type": "WebPage", "name": "Soup page"},
    {"@type": ["Recipe", "NewsArticle"], "name": "Tomato Soup"}
  ]
}
</script>
</head><body></body></html>
"""

_NEXT_PAGE = """\
<html><body>
<script id="__NEXT_DATA__" type="application/json">
{"props": {"pageProps": {
  "related": {"name": "Other thing"},
  "recipe": {"name": "Street Tacos", "recipeIngredient": ["8 tortillas"], "recipeInstructions": "Fill."}
}}}
</script>
</body></html>
"""


# ---------------------------------------------------------------------------
# Block scanning / parsing
# ---------------------------------------------------------------------------

class TestFindJsonldBlocks:
    def test_finds_blocks_in_order_any_attribute_order(self) -> None:
        blocks = find_jsonld_blocks(_GRAPH_PAGE)
        assert len(blocks) == 2
        assert blocks[0].startswith('{"@type": "Organization"')

    def test_ignores_empty_blocks(self) -> None:
        assert find_jsonld_blocks('<script type="application/ld+json">  </script>') == []

    def test_no_markup(self) -> None:
        assert find_jsonld_blocks("") == []


class TestParseBlock:
    def test_valid_json(self) -> None:
        assert parse_block('{"a": 1}') == {"a": 1}

    def test_trailing_commas_repaired(self) -> None:
        assert parse_block('{"@type": "Recipe", "recipeIngredient": ["a", "b",],}') == {
            "@type": "Recipe",
            "recipeIngredient": ["a", "b"],
        }

    def test_html_comment_wrapper_repaired(self) -> None:
        assert parse_block('<!-- {"a": 1} -->') == {"a": 1}

    def test_trailing_semicolon_repaired(self) -> None:
        assert parse_block('{"a": 1};') == {"a": 1}

    def test_line_comments_repaired(self) -> None:
        assert parse_block('// generated\n{"a": 1}') == {"a": 1}

    def test_garbage_is_none(self) -> None:
        assert parse_block("{not json") is None

    def test_too_deeply_nested_is_none(self) -> None:
        assert parse_block("[" * 100000) is None


# ---------------------------------------------------------------------------
# Recipe node resolution
# ---------------------------------------------------------------------------

class TestFindRecipeNode:
    def test_top_level_recipe(self) -> None:
        node = {"@type": "Recipe", "name": "Pie"}
        assert find_recipe_node(node) is node

    def test_type_case_insensitive(self) -> None:
        assert find_recipe_node({"@type": "recipe", "name": "Pie"})["name"] == "Pie"

    def test_list_payload(self) -> None:
        payload = [{"@type": "BreadcrumbList"}, {"@type": "Recipe", "name": "Pie"}]
        assert find_recipe_node(payload)["name"] == "Pie"

    def test_graph(self) -> None:
        payload = {"@graph": [{"@type": "WebSite"}, {"@type": ["Recipe"], "name": "Pie"}]}
        assert find_recipe_node(payload)["name"] == "Pie"

    def test_main_entity(self) -> None:
        payload = {"@type": "WebPage", "mainEntity": {"@type": "Recipe", "name": "Pie"}}
        assert find_recipe_node(payload)["name"] == "Pie"

    def test_first_match_wins(self) -> None:
        payload = [{"@type": "Recipe", "name": "First"}, {"@type": "Recipe", "name": "Second"}]
        assert find_recipe_node(payload)["name"] == "First"

    def test_self_reference_terminates(self) -> None:
        page = {"@type": "WebPage"}
        page["mainEntity"] = page
        assert find_recipe_node(page) is None

    def test_no_recipe(self) -> None:
        assert find_recipe_node({"@type": "Article", "name": "News"}) is None
        assert find_recipe_node("Recipe") is None


class TestLocate:
    def test_graph_page(self) -> None:
        assert locate(_GRAPH_PAGE)["name"] == "Tomato Soup"

    def test_skips_unparseable_blocks(self) -> None:
        markup = (
            '<script type="application/ld+json">{broken</script>'
            '<script type="application/ld+json">{"@type": "Recipe", "name": "Pie"}</script>'
        )
        assert locate(markup)["name"] == "Pie"

    def test_nothing_found(self) -> None:
        assert locate("<html><body>No data</body></html>") is None


# ---------------------------------------------------------------------------
# Next.js payload
# ---------------------------------------------------------------------------

class TestRecipeScore:
    def test_weights(self) -> None:
        assert recipe_score({"@type": "Recipe"}) == 1000
        assert recipe_score({"recipeIngredient": ["a"], "name": "x"}) == 550
        assert recipe_score({"recipeInstructions": "Mix."}) == 200

    def test_name_alone_scores_nothing(self) -> None:
        assert recipe_score({"name": "x"}) == 0
        assert recipe_score({"recipeIngredient": []}) == 0
        assert recipe_score(["not", "a", "dict"]) == 0


class TestLocateNextData:
    def test_best_node_wins(self) -> None:
        node = locate_next_data(_NEXT_PAGE)
        assert node is not None
        assert node["name"] == "Street Tacos"

    def test_typed_node_beats_untyped(self) -> None:
        markup = (
            '<script id="__NEXT_DATA__">'
            '{"a": {"recipeIngredient": ["x"], "recipeInstructions": "y", "name": "Loose"},'
            ' "b": {"@type": "Recipe", "name": "Typed"}}'
            "</script>"
        )
        assert locate_next_data(markup)["name"] == "Typed"

    def test_no_payload(self) -> None:
        assert locate_next_data("<html></html>") is None

    def test_payload_without_recipe(self) -> None:
        markup = '<script id="__NEXT_DATA__">{"props": {"name": "Home"}}</script>'
        assert locate_next_data(markup) is None
