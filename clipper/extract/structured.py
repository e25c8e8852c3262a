"""Structured data locator: find the recipe node embedded in a page.

Two embedded sources are searched:

- JSON-LD ``<script type="application/ld+json">`` blocks, walked through
  lists, ``@graph`` containers and ``mainEntity`` links until a node whose
  ``@type`` is (or includes) ``Recipe`` turns up;
- the Next.js ``__NEXT_DATA__`` payload, which has no fixed schema, so
  every nested value is scored and the most recipe-like node wins.

Nothing in here raises on malformed input: a block that will not parse is
skipped and an exhausted search returns ``None``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator, List, Optional

from clipper.heuristics import DEFAULT_RULES, Heuristics

logger = logging.getLogger(__name__)

_JSONLD_RE = re.compile(
    r"<script\b[^>]*\btype\s*=\s*[\"']application/ld\+json[\"'][^>]*>(.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)
_NEXT_DATA_RE = re.compile(
    r"<script\b[^>]*\bid\s*=\s*[\"']__NEXT_DATA__[\"'][^>]*>(.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)

_CDATA_RE = re.compile(r"^\s*(?://\s*)?<!\[CDATA\[|(?://\s*)?\]\]>\s*$")
_HTML_COMMENT_RE = re.compile(r"^\s*<!--|-->\s*$")
_LINE_COMMENT_RE = re.compile(r"^\s*//[^\n]*$", re.MULTILINE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


# ---------------------------------------------------------------------------
# Block scanning / parsing
# ---------------------------------------------------------------------------

def find_jsonld_blocks(markup: str) -> List[str]:
    """Return the raw text of every non-empty JSON-LD block, in page order."""
    if not markup:
        return []
    blocks: List[str] = []
    for match in _JSONLD_RE.finditer(markup):
        raw = match.group(1).strip()
        if raw:
            blocks.append(raw)
    return blocks


def _repair(raw: str) -> str:
    """Trim the usual junk around hand-edited JSON-LD."""
    fixed = _CDATA_RE.sub("", raw)
    fixed = _HTML_COMMENT_RE.sub("", fixed)
    fixed = _LINE_COMMENT_RE.sub("", fixed)
    fixed = fixed.strip().rstrip(";").strip()
    return _TRAILING_COMMA_RE.sub(r"\1", fixed)


def parse_block(raw: str) -> Optional[Any]:
    """Parse one structured-data block, with a single forgiving retry.

    Returns ``None`` when the block is not valid JSON even after repair.
    """
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        pass

    try:
        return json.loads(_repair(raw))
    except (ValueError, RecursionError) as exc:
        logger.debug("Skipping unparseable structured-data block: %s", exc)
        return None


# ---------------------------------------------------------------------------
# JSON-LD recipe node resolution
# ---------------------------------------------------------------------------

def is_recipe_node(node: Any, *, rules: Heuristics = DEFAULT_RULES) -> bool:
    """``True`` if *node*'s ``@type`` is, or includes, ``Recipe``."""
    if not isinstance(node, dict):
        return False
    kind = node.get("@type")
    if isinstance(kind, str):
        return kind.strip().lower() == rules.recipe_type
    if isinstance(kind, list):
        return any(isinstance(k, str) and k.strip().lower() == rules.recipe_type for k in kind)
    return False


def find_recipe_node(payload: Any, *, rules: Heuristics = DEFAULT_RULES) -> Optional[dict]:
    """Walk a parsed JSON-LD payload depth-first and return the first recipe node."""
    visited: set[int] = set()

    def _walk(node: Any, depth: int) -> Optional[dict]:
        if depth > rules.max_walk_depth or not isinstance(node, (dict, list)):
            return None
        if id(node) in visited:
            return None
        visited.add(id(node))

        if isinstance(node, list):
            for item in node:
                found = _walk(item, depth + 1)
                if found is not None:
                    return found
            return None

        if is_recipe_node(node, rules=rules):
            return node
        for key in ("@graph", "mainEntity"):
            if key in node:
                found = _walk(node[key], depth + 1)
                if found is not None:
                    return found
        return None

    return _walk(payload, 0)


def locate(markup: str, *, rules: Heuristics = DEFAULT_RULES) -> Optional[dict]:
    """Return the first JSON-LD recipe node in *markup*, or ``None``."""
    for raw in find_jsonld_blocks(markup):
        payload = parse_block(raw)
        if payload is None:
            continue
        node = find_recipe_node(payload, rules=rules)
        if node is not None:
            return node
    logger.debug("No JSON-LD recipe node found")
    return None


# ---------------------------------------------------------------------------
# Next.js payload
# ---------------------------------------------------------------------------

def find_next_data(markup: str) -> Optional[Any]:
    """Return the parsed ``__NEXT_DATA__`` payload, if the page has one."""
    if not markup:
        return None
    match = _NEXT_DATA_RE.search(markup)
    if not match or not match.group(1).strip():
        return None
    return parse_block(match.group(1).strip())


def recipe_score(node: Any, *, rules: Heuristics = DEFAULT_RULES) -> int:
    """How recipe-like a node looks; ``0`` means not at all."""
    if not isinstance(node, dict):
        return 0
    score = 0
    if is_recipe_node(node, rules=rules):
        score += 1000
    ingredients = node.get("recipeIngredient")
    if isinstance(ingredients, list) and ingredients:
        score += 500
    if node.get("recipeInstructions"):
        score += 200
    if node.get("name") and score:
        score += 50
    return score


def _iter_nodes(root: Any, max_depth: int) -> Iterator[Any]:
    """Yield every dict/list reachable from *root*, each object once."""
    visited: set[int] = set()
    stack: List[tuple[Any, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if depth > max_depth or id(node) in visited:
            continue
        visited.add(id(node))
        yield node
        children = node.values() if isinstance(node, dict) else node
        for child in reversed(list(children)):
            if isinstance(child, (dict, list)):
                stack.append((child, depth + 1))


def find_best_recipe_node(payload: Any, *, rules: Heuristics = DEFAULT_RULES) -> Optional[dict]:
    """Return the highest-scoring recipe-like node anywhere in *payload*."""
    if not isinstance(payload, (dict, list)):
        return None
    best: Optional[dict] = None
    best_score = 0
    for node in _iter_nodes(payload, rules.max_walk_depth):
        score = recipe_score(node, rules=rules)
        if score > best_score:
            best, best_score = node, score
    return best


def locate_next_data(markup: str, *, rules: Heuristics = DEFAULT_RULES) -> Optional[dict]:
    """Return the most recipe-like node of the page's Next.js payload."""
    payload = find_next_data(markup)
    if payload is None:
        return None
    return find_best_recipe_node(payload, rules=rules)
