import asyncio
import json
from dataclasses import replace

import pytest

from logofetch.downloader import download_bulk, download_logo, render_bulk_report
from logofetch.workflows.image_validator import validate_image
from logofetch.workflows.logo_config import DEFAULT_CONFIG
from logofetch.workflows.logo_fetch import LogoResult, LogoSource, LogoSourceError, SourceKind

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 600
ICO = b"\x00\x00\x01\x00" + b"\x00" * 300

CONFIG = replace(DEFAULT_CONFIG, live_search=False)
SESSION = object()


def _source(payloads, *, delay=0.0, tracker=None):
    async def fetch(session, target, size, config):
        if tracker is not None:
            tracker["active"] += 1
            tracker["peak"] = max(tracker["peak"], tracker["active"])
        try:
            if delay:
                await asyncio.sleep(delay)
            outcome = payloads.get(target)
            if isinstance(outcome, BaseException):
                raise outcome
            if outcome is None:
                raise LogoSourceError("HTTP 404: Not Found", url=f"https://img.test/{target}")
            info = validate_image(outcome).info
            return LogoResult(outcome, info, "Test Source", f"https://img.test/{target}")
        finally:
            if tracker is not None:
                tracker["active"] -= 1

    return LogoSource(SourceKind.CLEARBIT, fetch)


def test_download_logo_writes_file_with_source_extension(tmp_path):
    item = asyncio.run(
        download_logo(
            "GitHub",
            out_dir=tmp_path,
            session=SESSION,
            config=CONFIG,
            sources=[_source({"github.com": ICO})],
        )
    )
    assert item["success"] is True
    assert item["domain"] == "github.com"
    assert item["confidence"] == "exact"
    assert item["format"] == "ICO"
    assert item["source_url"] == "https://img.test/github.com"
    path = tmp_path / "github.ico"
    assert item["path"] == str(path.resolve())
    assert path.read_bytes() == ICO


def test_download_logo_format_overrides_extension(tmp_path):
    item = asyncio.run(
        download_logo(
            "GH",
            fmt="png",
            out_dir=tmp_path,
            session=SESSION,
            config=CONFIG,
            sources=[_source({"github.com": ICO})],
        )
    )
    assert item["path"].endswith("github.png")


def test_download_logo_failure_has_no_path(tmp_path):
    item = asyncio.run(
        download_logo("Stripe", out_dir=tmp_path, session=SESSION, config=CONFIG, sources=[_source({})])
    )
    assert item["success"] is False
    assert item["error"] == "Failed to download logo from all 1 sources"
    assert "path" not in item
    assert len(item["attempts"]) == 1
    assert list(tmp_path.iterdir()) == []


def test_download_logo_rejects_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        asyncio.run(download_logo("Stripe", fmt="gif", out_dir=tmp_path, session=SESSION, config=CONFIG))


def test_download_bulk_isolates_failures_and_writes_summary(tmp_path):
    payloads = {
        "stripe.com": PNG,
        "slack.com": RuntimeError("boom"),
        "github.com": ICO,
    }
    summary = asyncio.run(
        download_bulk(
            ["Stripe", "Slack", "Notion", "GitHub"],
            out_dir=tmp_path,
            session=SESSION,
            config=CONFIG,
            sources=[_source(payloads)],
        )
    )
    assert summary["counts"] == {"total": 4, "succeeded": 2, "failed": 2}
    items = summary["items"]
    assert [item["input"] for item in items] == ["Stripe", "Slack", "Notion", "GitHub"]
    assert items[1]["company"] == "unknown"
    assert items[1]["error"] == "boom"
    assert items[2]["success"] is False
    assert items[2]["domain"] == "notion.so"
    assert (tmp_path / "stripe.png").exists()
    assert (tmp_path / "github.ico").exists()

    on_disk = json.loads((tmp_path / "bulk_summary.json").read_text(encoding="utf-8"))
    assert on_disk["counts"] == summary["counts"]
    assert on_disk["size"] == "large"


def test_download_bulk_respects_concurrency_cap(tmp_path):
    tracker = {"active": 0, "peak": 0}
    companies = ["Stripe", "Slack", "Notion", "GitHub", "Shopify", "Vercel", "HubSpot"]
    payloads = {
        "stripe.com": PNG,
        "slack.com": PNG,
        "notion.so": PNG,
        "github.com": PNG,
        "shopify.com": PNG,
        "vercel.com": PNG,
        "hubspot.com": PNG,
    }
    summary = asyncio.run(
        download_bulk(
            companies,
            out_dir=tmp_path,
            concurrency=2,
            session=SESSION,
            config=CONFIG,
            sources=[_source(payloads, delay=0.01, tracker=tracker)],
        )
    )
    assert summary["counts"]["succeeded"] == 7
    assert tracker["peak"] == 2


def test_download_bulk_validates_company_count(tmp_path):
    with pytest.raises(ValueError):
        asyncio.run(download_bulk([], out_dir=tmp_path, session=SESSION, config=CONFIG))
    with pytest.raises(ValueError):
        asyncio.run(download_bulk(["x"] * 21, out_dir=tmp_path, session=SESSION, config=CONFIG))


def test_render_bulk_report():
    summary = {
        "out_dir": "/tmp/logos",
        "counts": {"total": 2, "succeeded": 1, "failed": 1},
        "items": [
            {
                "input": "Stripe",
                "company": "stripe",
                "domain": "stripe.com",
                "confidence": "exact",
                "success": True,
                "path": "/tmp/logos/stripe.png",
                "source": "Clearbit Logo API",
            },
            {
                "input": "Nope",
                "company": "nope",
                "domain": "nope.com",
                "confidence": "inferred",
                "success": False,
                "error": "Failed to download logo from all 4 sources",
            },
        ],
    }
    text = render_bulk_report(summary)
    assert "1/2 succeeded" in text
    assert "stripe (stripe.com) -> /tmp/logos/stripe.png [Clearbit Logo API, exact]" in text
    assert "Nope (nope.com): Failed to download logo from all 4 sources" in text
    assert text.endswith("Saved to: /tmp/logos\n")


def test_download_logo_uses_fallback_name_for_punctuation_only_input(tmp_path):
    item = asyncio.run(
        download_logo("...", out_dir=tmp_path, session=SESSION, config=CONFIG, sources=[_source({".com": PNG})])
    )
    assert item["success"] is True
    assert item["domain"] == ".com"
    assert (tmp_path / "logo.png").read_bytes() == PNG
    assert not (tmp_path / ".png").exists()
