"""Tests for the fetcher (direct request with reader-proxy fallback).

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.  The reader proxy lives at ``reader.test`` so its routes never
  collide with the page routes.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from clipper.config import Settings
from clipper.errors import FetchError
from clipper.scraper.fetcher import fetch_direct, retrieve
from clipper.scraper.models import FetchAttempt

_URL = "https://example.com/recipe"
_READER = "reader.test"
_PAGE = "<html><head><title>Soup</title></head><body><p>Soup.</p></body></html>"


@pytest.fixture()
def config() -> Settings:
    return Settings(request_timeout=5.0, reader_base_url=f"https://{_READER}/")


# ---------------------------------------------------------------------------
# Settings.reader_url / FetchAttempt
# ---------------------------------------------------------------------------

class TestReaderUrl:
    def test_prefixes_target(self) -> None:
        cfg = Settings(reader_base_url="https://r.jina.ai/")
        assert cfg.reader_url("https://example.com/x") == "https://r.jina.ai/https://example.com/x"

    def test_adds_scheme(self) -> None:
        cfg = Settings(reader_base_url="https://r.jina.ai")
        assert cfg.reader_url("example.com/x") == "https://r.jina.ai/https://example.com/x"


class TestFetchAttempt:
    def test_ok_requires_2xx_and_body(self) -> None:
        assert FetchAttempt(url=_URL, mode="direct", status_code=200, body="x").ok
        assert not FetchAttempt(url=_URL, mode="direct", status_code=200, body="  ").ok
        assert not FetchAttempt(url=_URL, mode="direct", status_code=500, body="x").ok
        assert not FetchAttempt(url=_URL, mode="direct", status_code=None).ok


# ---------------------------------------------------------------------------
# fetch_direct
# ---------------------------------------------------------------------------

class TestFetchDirect:
    def test_sends_browser_headers(self, config: Settings) -> None:
        with respx.mock:
            route = respx.get(_URL).mock(return_value=httpx.Response(200, text=_PAGE))
            attempt = fetch_direct(_URL, config=config)

        request = route.calls.last.request
        assert request.headers["User-Agent"] == config.user_agent
        assert request.headers["Accept-Language"] == config.accept_language
        assert "text/html" in request.headers["Accept"]
        assert attempt.ok
        assert attempt.final_url == _URL

    def test_follows_redirects(self, config: Settings) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": _URL})
            )
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_PAGE))
            attempt = fetch_direct("https://example.com/old", config=config)

        assert attempt.status_code == 200
        assert attempt.final_url == _URL

    def test_transport_error_captured(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ConnectTimeout("slow"))
            attempt = fetch_direct(_URL, config=config)

        assert attempt.status_code is None
        assert attempt.error == "ConnectTimeout"
        assert not attempt.ok


# ---------------------------------------------------------------------------
# retrieve
# ---------------------------------------------------------------------------

class TestRetrieve:
    def test_direct_success(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_PAGE))
            page = retrieve(_URL, config=config)

        assert page.retrieval_mode == "direct"
        assert page.status_code == 200
        assert page.body == _PAGE
        assert page.requested_url == _URL

    @pytest.mark.parametrize("status", [403, 404, 500])
    def test_failed_direct_uses_reader(self, config: Settings, status: int) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(status, text="Blocked"))
            reader = respx.get(host=_READER).mock(
                return_value=httpx.Response(200, text="Title: Soup\n\nIngredients\nwater")
            )
            page = retrieve(_URL, config=config)

        assert reader.called
        assert str(reader.calls.last.request.url).endswith("/https://example.com/recipe")
        assert page.retrieval_mode == "fallback"
        assert page.body.startswith("Title: Soup")

    def test_timeout_uses_reader(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ReadTimeout("slow"))
            respx.get(host=_READER).mock(return_value=httpx.Response(200, text="Soup"))
            page = retrieve(_URL, config=config)

        assert page.retrieval_mode == "fallback"

    def test_empty_body_uses_reader(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text="   "))
            respx.get(host=_READER).mock(return_value=httpx.Response(200, text="Soup"))
            page = retrieve(_URL, config=config)

        assert page.retrieval_mode == "fallback"

    def test_unaccepted_body_uses_reader(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_PAGE))
            respx.get(host=_READER).mock(return_value=httpx.Response(200, text="Reader text"))
            page = retrieve(_URL, accept=lambda body: "recipe" in body, config=config)

        assert page.retrieval_mode == "fallback"
        assert page.body == "Reader text"

    def test_accepted_body_skips_reader(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_PAGE))
            page = retrieve(_URL, accept=lambda body: "Soup" in body, config=config)

        assert page.retrieval_mode == "direct"

    def test_reader_failure_keeps_direct_page(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(200, text=_PAGE))
            respx.get(host=_READER).mock(return_value=httpx.Response(502))
            page = retrieve(_URL, accept=lambda body: False, config=config)

        assert page.retrieval_mode == "direct"
        assert page.body == _PAGE

    def test_both_fail_raises(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(return_value=httpx.Response(404))
            respx.get(host=_READER).mock(return_value=httpx.Response(503))
            with pytest.raises(FetchError) as exc_info:
                retrieve(_URL, config=config)

        err = exc_info.value
        assert err.direct_status == 404
        assert err.fallback_status == 503
        assert err.status_code == 502
        assert "Direct fetch failed (404) and fallback failed (503)." == err.message
        assert err.to_dict()["kind"] == "fetch_failed"

    def test_both_transport_errors_raise(self, config: Settings) -> None:
        with respx.mock:
            respx.get(_URL).mock(side_effect=httpx.ConnectError("refused"))
            respx.get(host=_READER).mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(FetchError) as exc_info:
                retrieve(_URL, config=config)

        assert exc_info.value.direct_status is None
        assert exc_info.value.fallback_status is None
        assert "ConnectError" in exc_info.value.message

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_non_positive_timeout_rejected(self, config: Settings, timeout: float) -> None:
        with pytest.raises(ValueError):
            retrieve(_URL, timeout=timeout, config=config)
