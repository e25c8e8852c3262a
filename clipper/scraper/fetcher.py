"""HTTP fetcher with a reader-proxy fallback for blocked or JS-rendered pages.

A request makes at most two attempts, strictly one after the other:

    direct  →  (blocked, failed, or nothing usable)  →  reader fallback

The reader service renders the page server-side and returns simplified
text/markup, which recovers content hidden behind bot detection or heavy
client-side rendering.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx

from clipper.config import Settings, settings
from clipper.errors import FetchError
from clipper.heuristics import DEFAULT_RULES, Heuristics
from clipper.scraper.models import FetchAttempt, RetrievalMode, RetrievedPage

logger = logging.getLogger(__name__)


def _headers(config: Settings, accept: str) -> dict[str, str]:
    return {
        "User-Agent": config.user_agent,
        "Accept": accept,
        "Accept-Language": config.accept_language,
    }


def _resolve_timeout(timeout: Optional[float], config: Settings) -> float:
    value = config.request_timeout if timeout is None else timeout
    if value is None or value <= 0:
        raise ValueError(f"A positive request timeout is required, got {value!r}.")
    return float(value)


def _attempt(
    url: str,
    mode: RetrievalMode,
    headers: dict[str, str],
    timeout: float,
) -> FetchAttempt:
    """Issue one GET and capture the outcome; never raises for network trouble."""
    try:
        with httpx.Client(
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            body = response.text
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.info("[fetch:%s] %s failed: %r", mode, url, exc)
        return FetchAttempt(url=url, mode=mode, status_code=None, error=type(exc).__name__)

    logger.info("[fetch:%s] %s → HTTP %s", mode, url, response.status_code)
    return FetchAttempt(
        url=url,
        mode=mode,
        status_code=response.status_code,
        body=body,
        final_url=str(response.url),
    )


def fetch_direct(url: str, *, timeout: Optional[float] = None, config: Settings | None = None) -> FetchAttempt:
    """Fetch *url* directly with browser-like headers."""
    config = config or settings
    return _attempt(
        url,
        "direct",
        _headers(config, "text/html,application/xhtml+xml"),
        _resolve_timeout(timeout, config),
    )


def fetch_via_reader(url: str, *, timeout: Optional[float] = None, config: Settings | None = None) -> FetchAttempt:
    """Fetch *url* through the configured reader proxy."""
    config = config or settings
    return _attempt(
        config.reader_url(url),
        "fallback",
        _headers(config, "text/plain,text/html,*/*"),
        _resolve_timeout(timeout, config),
    )


def _to_page(requested_url: str, attempt: FetchAttempt) -> RetrievedPage:
    return RetrievedPage(
        requested_url=requested_url,
        final_url=attempt.final_url or attempt.url,
        status_code=attempt.status_code or 0,
        body=attempt.body,
        retrieval_mode=attempt.mode,
    )


def retrieve(
    url: str,
    accept: Optional[Callable[[str], bool]] = None,
    *,
    timeout: Optional[float] = None,
    config: Settings | None = None,
    rules: Heuristics = DEFAULT_RULES,
) -> RetrievedPage:
    """Fetch *url*, falling back to the reader proxy when needed.

    Args:
        url: Absolute, already sanitised URL.
        accept: Optional predicate over the direct body.  When it returns
            ``False`` for an otherwise successful response, the reader
            fallback is tried as well.
        timeout: Per-attempt timeout in seconds (defaults to
            ``settings.request_timeout``).

    Returns:
        The reader page if the fallback ran and succeeded, otherwise the
        direct page.

    Raises:
        FetchError: If neither attempt produced a usable body.
        ValueError: If the timeout is not a positive number.
    """
    config = config or settings
    timeout = _resolve_timeout(timeout, config)

    direct = fetch_direct(url, timeout=timeout, config=config)

    if direct.ok and (accept is None or accept(direct.body)):
        return _to_page(url, direct)

    if direct.status_code in rules.hard_block_statuses:
        logger.info("[fetch] direct request blocked (%s), trying reader", direct.status_code)
    elif direct.ok:
        logger.info("[fetch] direct page has no usable recipe data, trying reader")
    else:
        logger.info("[fetch] direct request failed, trying reader")

    fallback = fetch_via_reader(url, timeout=timeout, config=config)
    if fallback.ok:
        return _to_page(url, fallback)
    if direct.ok:
        logger.info("[fetch] reader failed, keeping the direct page")
        return _to_page(url, direct)

    raise FetchError(
        url,
        direct_status=direct.status_code,
        fallback_status=fallback.status_code,
        direct_error=direct.error,
        fallback_error=fallback.error,
    )
