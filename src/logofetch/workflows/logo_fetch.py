"""Cascading multi-source logo fetcher.

Sources are tried strictly in quality order, one at a time, and the first one to
return bytes that pass :func:`validate_image` wins. Every attempt (failed,
timed out, cancelled or successful) lands in the result's attempt log.

Source priority:

1. Clearbit Logo API        (large PNG logos, keyed by domain)
2. Google Favicon Service   (up to 256px, keyed by domain)
3. DuckDuckGo Instant API   (structured search, keyed by company name)
4. Direct favicon probing   (conventional icon paths on the domain itself)
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple
from urllib.parse import quote, urlencode, urljoin

import aiohttp

from ..core.keys import (
    K_ATTEMPTS,
    K_DURATION_MS,
    K_ERROR,
    K_SOURCE,
    K_SOURCE_URL,
    K_SUCCESS,
    K_URL,
)
from .image_validator import ImageInfo, validate_image
from .logo_config import (
    ACCEPT_IMAGE,
    CLEARBIT_ENDPOINT,
    CLEARBIT_MAX_SIZE,
    DDG_API_ENDPOINT,
    DDG_BASE_URL,
    DEFAULT_CONFIG,
    FAVICON_PATHS,
    GOOGLE_FAVICON_ENDPOINT,
    GOOGLE_MAX_SIZE,
    GOOGLE_PLACEHOLDER_MAX_BYTES,
    HDR_ACCEPT,
    HDR_USER_AGENT,
    LogoFetchConfig,
    LogoSize,
)
from .logo_utils import format_file_size

logger = logging.getLogger(__name__)

# Failures a source may raise; anything else is a programming error and propagates.
SOURCE_FAILURES: Tuple[type, ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
    ValueError,
    UnicodeError,
)


class LogoSourceError(Exception):
    """A single source could not produce a valid logo."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


@dataclass(frozen=True, slots=True)
class LogoResult:
    buffer: bytes = field(repr=False)
    image_info: ImageInfo
    source: str
    source_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            K_SOURCE: self.source,
            K_SOURCE_URL: self.source_url,
            "image": self.image_info.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class FetchAttempt:
    source: str
    url: str
    success: bool
    duration_ms: int
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            K_SOURCE: self.source,
            K_URL: self.url,
            K_SUCCESS: self.success,
            K_DURATION_MS: self.duration_ms,
        }
        if self.error:
            payload[K_ERROR] = self.error
        return payload


@dataclass(frozen=True, slots=True)
class LogoFetchResult:
    success: bool
    attempts: Tuple[FetchAttempt, ...]
    logo: Optional[LogoResult] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            K_SUCCESS: self.success,
            K_ATTEMPTS: [attempt.to_dict() for attempt in self.attempts],
        }
        if self.logo is not None:
            payload["logo"] = self.logo.to_dict()
        if self.error:
            payload[K_ERROR] = self.error
        return payload


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


async def fetch_bytes(
    session: aiohttp.ClientSession,
    url: str,
    *,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    """GET ``url`` and return the body; non-2xx raises :class:`LogoSourceError`.

    The timeout covers the whole request, and expiry closes the connection.
    """

    async with session.get(
        url,
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers=headers,
        allow_redirects=True,
    ) as resp:
        if not 200 <= resp.status < 300:
            raise LogoSourceError(f"HTTP {resp.status}: {resp.reason or 'error'}", url=url)
        return await resp.read()


async def fetch_json(
    session: aiohttp.ClientSession,
    url: str,
    *,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    # DuckDuckGo answers with application/x-javascript, so decode the body ourselves.
    body = await fetch_bytes(session, url, timeout=timeout, headers=headers)
    return json.loads(body.decode("utf-8"))


def _image_headers(config: LogoFetchConfig) -> Dict[str, str]:
    return {HDR_USER_AGENT: config.user_agent, HDR_ACCEPT: ACCEPT_IMAGE}


async def _fetch_validated(
    session: aiohttp.ClientSession,
    url: str,
    *,
    timeout: float,
    config: LogoFetchConfig,
    label: str,
) -> LogoResult:
    buffer = await fetch_bytes(session, url, timeout=timeout, headers=_image_headers(config))
    validation = validate_image(buffer)
    if not validation.valid or validation.info is None:
        raise LogoSourceError(validation.reason or f"Invalid image from {label}", url=url)
    return LogoResult(buffer=buffer, image_info=validation.info, source=label, source_url=url)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def clearbit_url(domain: str, size: LogoSize) -> str:
    size_param = min(size.pixels * 2, CLEARBIT_MAX_SIZE)
    return f"{CLEARBIT_ENDPOINT}/{quote(domain, safe='/.-')}?size={size_param}&format=png"


def google_favicon_url(domain: str, size: LogoSize) -> str:
    sz = min(size.pixels * 2, GOOGLE_MAX_SIZE)
    return f"{GOOGLE_FAVICON_ENDPOINT}?{urlencode({'domain': domain, 'sz': sz})}"


def duckduckgo_api_url(company: str) -> str:
    query = urlencode({"q": f"{company} company", "format": "json", "no_html": 1})
    return f"{DDG_API_ENDPOINT}?{query}"


async def fetch_from_clearbit(
    session: aiohttp.ClientSession,
    domain: str,
    size: LogoSize,
    config: LogoFetchConfig,
) -> LogoResult:
    url = clearbit_url(domain, size)
    return await _fetch_validated(
        session, url, timeout=config.source_timeout, config=config, label="Clearbit Logo API"
    )


async def fetch_from_google(
    session: aiohttp.ClientSession,
    domain: str,
    size: LogoSize,
    config: LogoFetchConfig,
) -> LogoResult:
    url = google_favicon_url(domain, size)
    logo = await _fetch_validated(
        session, url, timeout=config.source_timeout, config=config, label="Google Favicon Service"
    )
    # Unknown domains get a tiny generic globe; only trust small payloads for small requests.
    if len(logo.buffer) < GOOGLE_PLACEHOLDER_MAX_BYTES and size is not LogoSize.SMALL:
        raise LogoSourceError("Google returned a generic placeholder icon", url=url)
    return logo


async def fetch_from_duckduckgo(
    session: aiohttp.ClientSession,
    company: str,
    size: LogoSize,
    config: LogoFetchConfig,
) -> LogoResult:
    api_url = duckduckgo_api_url(company)
    data = await fetch_json(
        session,
        api_url,
        timeout=config.source_timeout,
        headers={HDR_USER_AGENT: config.user_agent},
    )
    image = data.get("Image") if isinstance(data, dict) else None
    if not image or not isinstance(image, str):
        raise LogoSourceError("No logo image found in DuckDuckGo response", url=api_url)
    image_url = image if image.startswith("http") else urljoin(DDG_BASE_URL, image)
    return await _fetch_validated(
        session, image_url, timeout=config.source_timeout, config=config, label="DuckDuckGo Instant Answer"
    )


async def fetch_direct_favicon(
    session: aiohttp.ClientSession,
    domain: str,
    size: LogoSize,
    config: LogoFetchConfig,
) -> LogoResult:
    last_error: Optional[Exception] = None
    for path in FAVICON_PATHS:
        url = f"https://{domain}{path}"
        try:
            return await _fetch_validated(
                session, url, timeout=config.favicon_timeout, config=config, label="Direct Favicon"
            )
        except LogoSourceError as exc:
            last_error = exc
        except SOURCE_FAILURES as exc:
            last_error = LogoSourceError(_describe_error(exc, config.favicon_timeout), url=url)
        logger.debug("direct favicon miss %s: %s", url, last_error)
    if last_error is not None:
        raise last_error
    raise LogoSourceError("No valid favicon found at any common path")


SourceFn = Callable[[aiohttp.ClientSession, str, LogoSize, LogoFetchConfig], Awaitable[LogoResult]]


class SourceKind(str, Enum):
    CLEARBIT = "Clearbit"
    GOOGLE_FAVICON = "Google Favicon"
    DUCKDUCKGO = "DuckDuckGo"
    DIRECT_FAVICON = "Direct Favicon"


@dataclass(frozen=True, slots=True)
class LogoSource:
    kind: SourceKind
    fetch: SourceFn
    uses_company_name: bool = False
    timeout_attr: str = "source_timeout"

    @property
    def name(self) -> str:
        return self.kind.value

    def timeout(self, config: LogoFetchConfig) -> float:
        return float(getattr(config, self.timeout_attr))


DEFAULT_SOURCES: Tuple[LogoSource, ...] = (
    LogoSource(SourceKind.CLEARBIT, fetch_from_clearbit),
    LogoSource(SourceKind.GOOGLE_FAVICON, fetch_from_google),
    LogoSource(SourceKind.DUCKDUCKGO, fetch_from_duckduckgo, uses_company_name=True),
    LogoSource(SourceKind.DIRECT_FAVICON, fetch_direct_favicon, timeout_attr="favicon_timeout"),
)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def _describe_error(exc: BaseException, timeout: float) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return f"Timed out after {timeout:g}s"
    if isinstance(exc, asyncio.CancelledError):
        return "Cancelled"
    message = str(exc).strip()
    return message or exc.__class__.__name__


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def new_session(config: LogoFetchConfig) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(headers={HDR_USER_AGENT: config.user_agent})


async def _run_sources(
    session: aiohttp.ClientSession,
    domain: str,
    company: str,
    size: LogoSize,
    config: LogoFetchConfig,
    sources: Sequence[LogoSource],
    progress_hook: Optional[Callable[[FetchAttempt], None]],
) -> LogoFetchResult:
    attempts: list[FetchAttempt] = []

    def _record(attempt: FetchAttempt) -> None:
        attempts.append(attempt)
        if progress_hook is not None:
            progress_hook(attempt)

    for source in sources:
        target = company if source.uses_company_name else domain
        placeholder_url = f"[{source.name}] {target}"
        start = time.perf_counter()
        try:
            logo = await source.fetch(session, target, size, config)
        except asyncio.CancelledError as exc:
            _record(FetchAttempt(source.name, placeholder_url, False, _elapsed_ms(start), _describe_error(exc, 0)))
            logger.info("logo fetch for %s cancelled during %s", domain, source.name)
            raise
        except (LogoSourceError,) + SOURCE_FAILURES as exc:
            url = getattr(exc, "url", None) or placeholder_url
            error = _describe_error(exc, source.timeout(config))
            _record(FetchAttempt(source.name, url, False, _elapsed_ms(start), error))
            logger.debug("source %s failed for %s: %s", source.name, target, error)
            continue
        _record(FetchAttempt(source.name, logo.source_url, True, _elapsed_ms(start)))
        logger.info(
            "logo for %s from %s (%s, %s)",
            domain,
            logo.source,
            logo.image_info.format,
            format_file_size(logo.image_info.size_bytes),
        )
        return LogoFetchResult(success=True, attempts=tuple(attempts), logo=logo)

    return LogoFetchResult(
        success=False,
        attempts=tuple(attempts),
        error=f"Failed to download logo from all {len(sources)} sources",
    )


async def fetch_logo(
    domain: str,
    company: str,
    size: LogoSize | str = LogoSize.LARGE,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    config: Optional[LogoFetchConfig] = None,
    sources: Optional[Sequence[LogoSource]] = None,
    progress_hook: Optional[Callable[[FetchAttempt], None]] = None,
) -> LogoFetchResult:
    """Fetch a logo for ``domain`` by trying each source in priority order.

    Never raises for network, HTTP or validation failures; those are recorded
    in ``attempts``. ``company`` feeds the name-keyed sources. Cancellation is
    recorded (and passed to ``progress_hook``) before it propagates.
    """

    cfg = config or DEFAULT_CONFIG
    logo_size = LogoSize(size)
    chain = tuple(sources) if sources is not None else DEFAULT_SOURCES
    if session is not None:
        return await _run_sources(session, domain, company, logo_size, cfg, chain, progress_hook)
    async with new_session(cfg) as owned:
        return await _run_sources(owned, domain, company, logo_size, cfg, chain, progress_hook)


def summarize_fetch_result(result: LogoFetchResult) -> str:
    """Render a fetch result and its attempt log for humans."""

    lines: list[str] = []
    if result.success and result.logo is not None:
        info = result.logo.image_info
        lines.append("Logo downloaded successfully")
        lines.append(f"   Source: {result.logo.source}")
        lines.append(f"   Format: {info.format}")
        lines.append(f"   Size: {format_file_size(info.size_bytes)}")
    else:
        lines.append("Failed to download logo")
        lines.append(f"   Error: {result.error}")
    lines.append("")
    lines.append(f"Attempts ({len(result.attempts)}):")
    for attempt in result.attempts:
        mark = "ok" if attempt.success else "failed"
        lines.append(f"   [{mark}] {attempt.source} ({attempt.duration_ms}ms)")
        if attempt.error:
            lines.append(f"      -> {attempt.error}")
    return "\n".join(lines)


__all__ = [
    "DEFAULT_SOURCES",
    "FetchAttempt",
    "LogoFetchResult",
    "LogoResult",
    "LogoSource",
    "LogoSourceError",
    "SourceKind",
    "fetch_bytes",
    "fetch_json",
    "fetch_logo",
    "fetch_from_clearbit",
    "fetch_from_google",
    "fetch_from_duckduckgo",
    "fetch_direct_favicon",
    "summarize_fetch_result",
]
