"""Page-level metadata and text rendering.

Used when the structured data is missing or incomplete: the ``<title>``
tag and ``og:``/``twitter:`` meta tags stand in for the recipe name and
description, and the markup is rendered to plain lines for the section
parser.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

import trafilatura
from bs4 import BeautifulSoup

from clipper.extract.normalize import clean_text

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title\s*>", re.IGNORECASE | re.DOTALL)
_READER_TITLE_RE = re.compile(r"\A\s*Title:[ \t]*(.+)$", re.MULTILINE)
_HTML_HINT_RE = re.compile(r"<(?:html|head|body|div|p|ul|ol|li|h[1-6]|article|main|section|br)\b", re.IGNORECASE)

TITLE_META_KEYS = ("og:title", "twitter:title")
DESCRIPTION_META_KEYS = ("og:description", "twitter:description", "description")


def extract_title(markup: str) -> str:
    """Return the cleaned text of the first ``<title>`` tag, or empty string."""
    match = _TITLE_RE.search(markup or "")
    if match:
        return clean_text(match.group(1))
    return ""


def extract_meta(markup: str, key: str) -> str:
    """Return the ``content`` of the ``<meta>`` whose property/name is *key*.

    Handles both attribute orders.  Returns an empty string when absent.
    """
    if not markup:
        return ""
    name = re.escape(key)
    patterns = (
        rf"<meta[^>]+(?:property|name)\s*=\s*[\"']{name}[\"'][^>]*?\scontent\s*=\s*(\"[^\"]*\"|'[^']*')[^>]*>",
        rf"<meta[^>]+content\s*=\s*(\"[^\"]*\"|'[^']*')[^>]*?\s(?:property|name)\s*=\s*[\"']{name}[\"'][^>]*>",
    )
    for pattern in patterns:
        match = re.search(pattern, markup, re.IGNORECASE)
        if match:
            value = clean_text(match.group(1)[1:-1])
            if value:
                return value
    return ""


def extract_reader_title(text: str) -> str:
    """Return the ``Title:`` header that reader services put on their output."""
    match = _READER_TITLE_RE.search(text or "")
    if match:
        return clean_text(match.group(1))
    return ""


def page_title(markup: str) -> str:
    """Best page-level title: og/twitter meta, ``<title>``, then reader header."""
    for key in TITLE_META_KEYS:
        value = extract_meta(markup, key)
        if value:
            return value
    return extract_title(markup) or extract_reader_title(markup)


def page_description(markup: str) -> str:
    for key in DESCRIPTION_META_KEYS:
        value = extract_meta(markup, key)
        if value:
            return value
    return ""


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

def looks_like_html(markup: str) -> bool:
    return bool(_HTML_HINT_RE.search(markup or ""))


def readable_text(markup: str) -> str:
    """Readable text of *markup* via ``trafilatura``; empty string if none."""
    try:
        text: Optional[str] = trafilatura.extract(
            markup,
            include_links=False,
            include_images=False,
            include_tables=True,
            include_comments=False,
            no_fallback=False,
        )
    except Exception as exc:  # noqa: BLE001 - lxml can choke on broken pages
        logger.debug("trafilatura failed, using BeautifulSoup text: %r", exc)
        return ""
    return text or ""


def fallback_text(markup: str) -> str:
    """Line-per-element text of *markup* using BeautifulSoup.

    Plain text (a reader response, a paste) passes through unchanged.
    """
    if not looks_like_html(markup):
        return markup or ""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style", "noscript", "template", "nav", "footer"]):
        tag.decompose()
    container = soup.find("main") or soup.find("article") or soup.body or soup
    return container.get_text(separator="\n", strip=True)
