"""Data models for the fetch stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RetrievalMode = Literal["direct", "fallback"]


@dataclass(frozen=True)
class FetchAttempt:
    """Outcome of a single HTTP request, successful or not."""

    url: str
    mode: RetrievalMode
    status_code: int | None
    body: str = ""
    final_url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """``True`` for a 2xx response with a non-blank body."""
        return (
            self.status_code is not None
            and 200 <= self.status_code < 300
            and bool(self.body.strip())
        )


@dataclass(frozen=True)
class RetrievedPage:
    """The page the rest of the pipeline works from."""

    requested_url: str
    final_url: str
    status_code: int
    body: str
    retrieval_mode: RetrievalMode
