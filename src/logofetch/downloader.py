"""Single and bulk logo downloads: resolve, fetch, persist, summarize."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from .core.keys import (
    K_ATTEMPTS,
    K_COMPANY,
    K_CONFIDENCE,
    K_DOMAIN,
    K_ERROR,
    K_FORMAT,
    K_INPUT,
    K_PATH,
    K_SIZE_BYTES,
    K_SOURCE,
    K_SOURCE_URL,
    K_SUCCESS,
)
from .workflows.domain_resolver import LiveSearchFn, resolve_domain
from .workflows.logo_config import (
    BULK_MAX_COMPANIES,
    BULK_SUMMARY_NAME,
    DEFAULT_CONFIG,
    LogoFetchConfig,
    LogoSize,
)
from .workflows.logo_fetch import LogoSource, fetch_logo, new_session
from .workflows.logo_utils import format_file_size, sanitize_filename

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("original", "png", "jpg")
# Used when the company name has no filename-safe characters left.
FALLBACK_FILE_STEM = "logo"


def _iso_now(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    return stamp.isoformat().replace("+00:00", "Z")


def resolve_out_dir(out_dir: Optional[Path], config: Optional[LogoFetchConfig] = None) -> Path:
    target = Path(out_dir) if out_dir is not None else (config or DEFAULT_CONFIG).assets_dir
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


async def download_logo(
    company: str,
    *,
    size: LogoSize | str = LogoSize.LARGE,
    fmt: str = "original",
    out_dir: Optional[Path] = None,
    session: Optional[aiohttp.ClientSession] = None,
    config: Optional[LogoFetchConfig] = None,
    sources: Optional[Sequence[LogoSource]] = None,
    live_search: Optional[LiveSearchFn] = None,
) -> Dict[str, Any]:
    """Resolve ``company``, fetch its logo and write it under ``out_dir``.

    ``fmt`` only picks the file extension (``original`` keeps the source's);
    bytes are written exactly as downloaded.
    """

    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {fmt}")
    cfg = config or DEFAULT_CONFIG
    if session is None:
        async with new_session(cfg) as owned:
            return await download_logo(
                company,
                size=size,
                fmt=fmt,
                out_dir=out_dir,
                session=owned,
                config=cfg,
                sources=sources,
                live_search=live_search,
            )

    resolved = await resolve_domain(company, session=session, config=cfg, live_search=live_search)
    result = await fetch_logo(
        resolved.domain,
        resolved.company,
        size,
        session=session,
        config=cfg,
        sources=sources,
    )
    item: Dict[str, Any] = {
        K_INPUT: company,
        **resolved.to_dict(),
        K_SUCCESS: result.success,
        K_ATTEMPTS: [attempt.to_dict() for attempt in result.attempts],
    }
    if not result.success or result.logo is None:
        item[K_ERROR] = result.error or "Unknown error"
        return item

    info = result.logo.image_info
    ext = info.extension if fmt == "original" else fmt
    target_dir = resolve_out_dir(out_dir, cfg)
    stem = sanitize_filename(resolved.company) or FALLBACK_FILE_STEM
    path = target_dir / f"{stem}.{ext}"
    await asyncio.to_thread(path.write_bytes, result.logo.buffer)
    logger.info("saved %s logo to %s (%s)", resolved.company, path, format_file_size(info.size_bytes))
    item.update({
        K_PATH: str(path),
        K_SOURCE: result.logo.source,
        K_SOURCE_URL: result.logo.source_url,
        K_FORMAT: info.format,
        K_SIZE_BYTES: info.size_bytes,
    })
    return item


def _failed_item(company: str, exc: BaseException) -> Dict[str, Any]:
    return {
        K_INPUT: company,
        K_COMPANY: "unknown",
        K_DOMAIN: "unknown",
        K_CONFIDENCE: "unknown",
        K_SUCCESS: False,
        K_ERROR: str(exc) or exc.__class__.__name__,
        K_ATTEMPTS: [],
    }


async def download_bulk(
    companies: Sequence[str],
    *,
    size: LogoSize | str = LogoSize.LARGE,
    out_dir: Optional[Path] = None,
    concurrency: Optional[int] = None,
    session: Optional[aiohttp.ClientSession] = None,
    config: Optional[LogoFetchConfig] = None,
    sources: Optional[Sequence[LogoSource]] = None,
    live_search: Optional[LiveSearchFn] = None,
) -> Dict[str, Any]:
    """Download logos for up to 20 companies with a bounded fan-out.

    Each resolve+fetch chain runs under a shared semaphore; a failing item
    never cancels its siblings and is reported in place.
    """

    if not companies:
        raise ValueError("At least one company is required")
    if len(companies) > BULK_MAX_COMPANIES:
        raise ValueError(f"At most {BULK_MAX_COMPANIES} companies per bulk download")
    cfg = config or DEFAULT_CONFIG
    if session is None:
        async with new_session(cfg) as owned:
            return await download_bulk(
                companies,
                size=size,
                out_dir=out_dir,
                concurrency=concurrency,
                session=owned,
                config=cfg,
                sources=sources,
                live_search=live_search,
            )

    started_at = datetime.now(timezone.utc)
    target_dir = resolve_out_dir(out_dir, cfg)
    semaphore = asyncio.Semaphore(max(1, concurrency or cfg.bulk_concurrency))

    async def _one(company: str) -> Dict[str, Any]:
        async with semaphore:
            return await download_logo(
                company,
                size=size,
                out_dir=target_dir,
                session=session,
                config=cfg,
                sources=sources,
                live_search=live_search,
            )

    outcomes = await asyncio.gather(*(_one(company) for company in companies), return_exceptions=True)

    items: List[Dict[str, Any]] = []
    for company, outcome in zip(companies, outcomes):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            logger.warning("bulk item %r failed: %s", company, outcome)
            items.append(_failed_item(company, outcome))
        else:
            items.append(outcome)

    finished_at = datetime.now(timezone.utc)
    succeeded = sum(1 for item in items if item.get(K_SUCCESS))
    summary: Dict[str, Any] = {
        "started_at": _iso_now(started_at),
        "finished_at": _iso_now(finished_at),
        "duration_ms": int((finished_at - started_at).total_seconds() * 1000),
        "out_dir": str(target_dir),
        "size": LogoSize(size).value,
        "counts": {
            "total": len(items),
            "succeeded": succeeded,
            "failed": len(items) - succeeded,
        },
        "items": items,
    }
    summary_path = target_dir / BULK_SUMMARY_NAME
    payload = json.dumps(summary, ensure_ascii=False, indent=2) + "\n"
    await asyncio.to_thread(summary_path.write_text, payload, encoding="utf-8")
    return summary


def render_bulk_report(summary: Dict[str, Any]) -> str:
    counts = summary.get("counts") or {}
    lines: List[str] = []
    lines.append("Bulk Logo Download Complete")
    lines.append(f"   {counts.get('succeeded', 0)}/{counts.get('total', 0)} succeeded")
    lines.append("")
    items = summary.get("items") or []
    succeeded = [item for item in items if item.get(K_SUCCESS)]
    failed = [item for item in items if not item.get(K_SUCCESS)]
    if succeeded:
        lines.append("Downloaded:")
        for item in succeeded:
            lines.append(
                f"   {item.get(K_COMPANY)} ({item.get(K_DOMAIN)}) -> {item.get(K_PATH)}"
                f" [{item.get(K_SOURCE)}, {item.get(K_CONFIDENCE)}]"
            )
        lines.append("")
    if failed:
        lines.append("Failed:")
        for item in failed:
            lines.append(f"   {item.get(K_INPUT)} ({item.get(K_DOMAIN)}): {item.get(K_ERROR)}")
        lines.append("")
    lines.append(f"Saved to: {summary.get('out_dir')}")
    return "\n".join(lines).rstrip() + "\n"


__all__ = [
    "FALLBACK_FILE_STEM",
    "OUTPUT_FORMATS",
    "download_bulk",
    "download_logo",
    "render_bulk_report",
    "resolve_out_dir",
    "sanitize_filename",
]
