"""Scraper package: URL canonicalisation & fetch with reader fallback."""

from clipper.scraper.fetcher import retrieve
from clipper.scraper.models import FetchAttempt, RetrievedPage
from clipper.scraper.urls import sanitize_url, source_host, validate_url

__all__ = [
    "retrieve",
    "sanitize_url",
    "source_host",
    "validate_url",
    "FetchAttempt",
    "RetrievedPage",
]
