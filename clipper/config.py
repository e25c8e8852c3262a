"""Centralised settings for the recipe clipper.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "20.0"))
    )
    reader_base_url: str = field(
        default_factory=lambda: os.environ.get("READER_BASE_URL", "https://r.jina.ai/")
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("CLIPPER_USER_AGENT", _BROWSER_UA)
    )
    accept_language: str = field(
        default_factory=lambda: os.environ.get("ACCEPT_LANGUAGE", "en-US,en;q=0.9")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "WARNING").upper()
    )

    def reader_url(self, url: str) -> str:
        """Return the reader-proxy address that renders *url*."""
        target = url if url.startswith(("http://", "https://")) else f"https://{url}"
        return f"{self.reader_base_url.rstrip('/')}/{target}"


# Module-level singleton, import this everywhere:
#   from clipper.config import settings
settings = Settings()
