"""Fatal errors surfaced to callers of the extraction pipeline.

Non-fatal conditions (a JSON-LD block that will not parse, a payload with
no recipe node) are not exceptions: the locator returns ``None`` and the
orchestrator falls through to the next tier.
"""

from __future__ import annotations

from typing import Any


class ClipError(Exception):
    """Base class for errors that end a clipping request.

    ``status_code`` classifies the failure the way an HTTP layer would
    report it; ``kind`` is a stable machine-readable tag.
    """

    status_code: int = 500
    kind: str = "clip_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "kind": self.kind}


class InvalidUrlError(ClipError):
    """The caller supplied no URL, or something that is not an http(s) URL."""

    status_code = 400
    kind = "invalid_url"


class FetchError(ClipError):
    """Both the direct request and the reader fallback failed."""

    status_code = 502
    kind = "fetch_failed"

    def __init__(
        self,
        url: str,
        direct_status: int | None,
        fallback_status: int | None,
        direct_error: str | None = None,
        fallback_error: str | None = None,
    ) -> None:
        self.url = url
        self.direct_status = direct_status
        self.fallback_status = fallback_status
        self.direct_error = direct_error
        self.fallback_error = fallback_error
        super().__init__(
            f"Direct fetch failed ({_describe(direct_status, direct_error)}) "
            f"and fallback failed ({_describe(fallback_status, fallback_error)})."
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["direct_status"] = self.direct_status
        data["fallback_status"] = self.fallback_status
        return data


class ExtractionEmptyError(ClipError):
    """No tier produced a single ingredient or instruction."""

    status_code = 422
    kind = "extraction_empty"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                "Could not extract recipe data (the site may block scraping or hide "
                "the recipe content). Try a different source or use manual entry."
            )
        )


def _describe(status: int | None, error: str | None) -> str:
    if status is not None:
        return str(status)
    return error or "no response"
