"""Source URL helpers: validation, canonicalisation and display host."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from clipper.errors import InvalidUrlError
from clipper.heuristics import DEFAULT_RULES, Heuristics


def validate_url(url: str | None) -> str:
    """Return *url* trimmed, or raise :class:`InvalidUrlError`.

    Only absolute ``http``/``https`` URLs with a host are accepted.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidUrlError("Missing url.")
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL: {candidate!r}.") from exc
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        raise InvalidUrlError(
            f"Invalid URL: {candidate!r}. Please enter a full address including https://."
        )
    return candidate


def _is_tracking(key: str, rules: Heuristics) -> bool:
    lowered = key.lower()
    return lowered in rules.tracking_params or lowered.startswith(rules.tracking_prefixes)


def sanitize_url(url: str, *, rules: Heuristics = DEFAULT_RULES) -> str:
    """Drop the fragment and known tracking parameters from *url*.

    Best-effort: anything that does not parse as an absolute URL is
    returned unchanged.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url

    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        kept = [(k, v) for k, v in pairs if not _is_tracking(k, rules)]
        if len(kept) != len(pairs):
            query = urlencode(kept)

    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))


def source_host(url: str) -> str | None:
    """Return the hostname of *url* without a leading ``www.``."""
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    if host.startswith("www."):
        host = host[4:]
    return host or None
