import asyncio
from dataclasses import replace

import aiohttp
import pytest

from logofetch.workflows import logo_fetch
from logofetch.workflows.logo_config import DEFAULT_CONFIG, LogoSize
from logofetch.workflows.logo_fetch import (
    DEFAULT_SOURCES,
    LogoSourceError,
    clearbit_url,
    duckduckgo_api_url,
    fetch_logo,
    google_favicon_url,
    summarize_fetch_result,
)

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 600
SMALL_PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 200
HTML = b"<!doctype html><html><body>error</body></html>" + b" " * 200

SESSION = object()


def _install(monkeypatch, responses, json_payload=None):
    """Route fetch_bytes/fetch_json through a URL-prefix lookup table."""

    calls = []

    async def fake_fetch_bytes(session, url, *, timeout, headers=None):
        calls.append((url, timeout, headers))
        for prefix, outcome in responses:
            if url.startswith(prefix):
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome
        raise LogoSourceError("HTTP 404: Not Found", url=url)

    async def fake_fetch_json(session, url, *, timeout, headers=None):
        calls.append((url, timeout, headers))
        if isinstance(json_payload, BaseException):
            raise json_payload
        return json_payload if json_payload is not None else {}

    monkeypatch.setattr(logo_fetch, "fetch_bytes", fake_fetch_bytes)
    monkeypatch.setattr(logo_fetch, "fetch_json", fake_fetch_json)
    return calls


def _run(domain="acme.example", company="acme", size=LogoSize.LARGE, **kwargs):
    return asyncio.run(fetch_logo(domain, company, size, session=SESSION, config=DEFAULT_CONFIG, **kwargs))


def test_source_urls():
    assert clearbit_url("stripe.com", LogoSize.LARGE) == "https://logo.clearbit.com/stripe.com?size=512&format=png"
    assert google_favicon_url("stripe.com", LogoSize.LARGE).endswith("domain=stripe.com&sz=256")
    assert google_favicon_url("stripe.com", LogoSize.SMALL).endswith("sz=128")
    assert duckduckgo_api_url("Stripe").startswith("https://api.duckduckgo.com/?q=Stripe+company&format=json")


def test_first_source_success_stops_pipeline(monkeypatch):
    calls = _install(monkeypatch, [("https://logo.clearbit.com/", PNG)])
    result = _run()
    assert result.success
    assert len(result.attempts) == 1
    assert result.logo.source == "Clearbit Logo API"
    assert result.logo.image_info.format == "PNG"
    assert result.attempts[0].source == "Clearbit"
    assert result.attempts[0].success
    assert len(calls) == 1
    assert calls[0][2]["Accept"] == "image/*,*/*;q=0.8"
    assert calls[0][2]["User-Agent"] == DEFAULT_CONFIG.user_agent


def test_third_source_success_records_three_attempts(monkeypatch):
    _install(
        monkeypatch,
        [
            ("https://logo.clearbit.com/", LogoSourceError("HTTP 404: Not Found")),
            ("https://www.google.com/s2/favicons", HTML),
            ("https://duckduckgo.com/i/acme.png", PNG),
        ],
        json_payload={"Image": "/i/acme.png"},
    )
    result = _run()
    assert result.success
    assert [attempt.source for attempt in result.attempts] == ["Clearbit", "Google Favicon", "DuckDuckGo"]
    assert [attempt.success for attempt in result.attempts] == [False, False, True]
    assert result.attempts[1].error.startswith("Content is HTML")
    assert result.logo.source == "DuckDuckGo Instant Answer"
    assert result.logo.source_url == "https://duckduckgo.com/i/acme.png"


def test_all_sources_fail(monkeypatch):
    _install(monkeypatch, [], json_payload={"Image": ""})
    result = _run()
    assert not result.success
    assert result.logo is None
    assert len(result.attempts) == 4
    assert [attempt.source for attempt in result.attempts] == [source.name for source in DEFAULT_SOURCES]
    assert result.error == "Failed to download logo from all 4 sources"
    assert result.attempts[2].error == "No logo image found in DuckDuckGo response"
    # Direct favicon reports the last path it tried.
    assert result.attempts[3].url == "https://acme.example/favicon.ico"
    assert result.attempts[3].error == "HTTP 404: Not Found"


def test_google_placeholder_rejected_unless_small(monkeypatch):
    _install(monkeypatch, [("https://www.google.com/s2/favicons", SMALL_PNG)])
    result = _run(sources=[DEFAULT_SOURCES[1]])
    assert not result.success
    assert result.attempts[0].error == "Google returned a generic placeholder icon"

    small = _run(size=LogoSize.SMALL, sources=[DEFAULT_SOURCES[1]])
    assert small.success
    assert small.logo.image_info.size_bytes == len(SMALL_PNG)


def test_timeout_is_recorded_and_pipeline_continues(monkeypatch):
    _install(
        monkeypatch,
        [
            ("https://logo.clearbit.com/", asyncio.TimeoutError()),
            ("https://www.google.com/s2/favicons", PNG),
        ],
    )
    result = _run()
    assert result.success
    assert result.attempts[0].error == "Timed out after 10s"
    assert result.attempts[0].url == "[Clearbit] acme.example"
    assert result.logo.source == "Google Favicon Service"


def test_client_errors_are_recorded(monkeypatch):
    _install(
        monkeypatch,
        [("https://logo.clearbit.com/", aiohttp.ClientConnectionError("connection reset"))],
        json_payload=ValueError("Expecting value"),
    )
    result = _run(sources=DEFAULT_SOURCES[:1] + DEFAULT_SOURCES[2:3])
    assert not result.success
    assert result.attempts[0].error == "connection reset"
    assert result.attempts[1].error == "Expecting value"
    assert result.error == "Failed to download logo from all 2 sources"


def test_direct_favicon_tries_paths_in_order(monkeypatch):
    calls = _install(monkeypatch, [("https://acme.example/favicon-32x32.png", PNG)])
    result = _run(sources=[DEFAULT_SOURCES[3]])
    assert result.success
    assert result.logo.source == "Direct Favicon"
    assert [url for url, _, _ in calls] == [
        "https://acme.example/apple-touch-icon.png",
        "https://acme.example/apple-touch-icon-precomposed.png",
        "https://acme.example/favicon-32x32.png",
    ]
    assert all(timeout == DEFAULT_CONFIG.favicon_timeout for _, timeout, _ in calls)


def test_progress_hook_sees_every_attempt(monkeypatch):
    _install(monkeypatch, [("https://www.google.com/s2/favicons", PNG)])
    seen = []
    result = _run(progress_hook=seen.append)
    assert tuple(seen) == result.attempts
    assert len(seen) == 2


def test_cancellation_is_recorded_then_raised(monkeypatch):
    _install(monkeypatch, [("https://logo.clearbit.com/", asyncio.CancelledError())])
    seen = []
    with pytest.raises(asyncio.CancelledError):
        _run(progress_hook=seen.append)
    assert len(seen) == 1
    assert seen[0].error == "Cancelled"
    assert not seen[0].success


def test_custom_config_timeout_reported(monkeypatch):
    _install(monkeypatch, [("https://logo.clearbit.com/", asyncio.TimeoutError())])
    config = replace(DEFAULT_CONFIG, source_timeout=2.5)
    result = asyncio.run(
        fetch_logo("acme.example", "acme", "large", session=SESSION, config=config, sources=DEFAULT_SOURCES[:1])
    )
    assert result.attempts[0].error == "Timed out after 2.5s"


def test_summarize_fetch_result(monkeypatch):
    _install(monkeypatch, [("https://logo.clearbit.com/", PNG)])
    text = summarize_fetch_result(_run())
    assert "Logo downloaded successfully" in text
    assert "Source: Clearbit Logo API" in text
    assert "[ok] Clearbit" in text

    failed = logo_fetch.LogoFetchResult(success=False, attempts=(), error="boom")
    assert "Error: boom" in summarize_fetch_result(failed)


def test_result_to_dict_omits_buffer(monkeypatch):
    _install(monkeypatch, [("https://logo.clearbit.com/", PNG)])
    payload = _run().to_dict()
    assert payload["success"] is True
    assert payload["logo"]["source"] == "Clearbit Logo API"
    assert payload["logo"]["image"]["size_bytes"] == len(PNG)
    assert "buffer" not in payload["logo"]
