"""Company name -> canonical domain resolution.

Resolution order (first hit wins, each tier only runs when the previous misses):

1. exact key match against the curated database
2. alias match
3. fuzzy match (Levenshtein distance <= 2) against keys and aliases
4. live search: one DuckDuckGo HTML query for the official website
5. inference: ``<name>.com``

``resolve_domain`` always returns a result; failures only lower the confidence.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import aiohttp
from bs4 import BeautifulSoup  # type: ignore

from ..core.keys import K_CATEGORY, K_COMPANY, K_CONFIDENCE, K_DOMAIN, K_MATCHED_NAME
from .company_db import COMPANY_DATABASE, CompanyEntry
from .logo_config import (
    CATEGORY_LIVE_SEARCH,
    CATEGORY_UNKNOWN,
    DDG_HTML_ENDPOINT,
    DDG_NO_ADS_COOKIE,
    DEFAULT_CONFIG,
    FUZZY_MAX_DISTANCE,
    HDR_COOKIE,
    HDR_USER_AGENT,
    LIVE_SEARCH_EXCLUDED_DOMAINS,
    LIVE_SEARCH_QUERY_SUFFIX,
    LIVE_SEARCH_RESULT_SELECTOR,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_FUZZY_MAX_DISTANCE,
    LogoFetchConfig,
)
from .logo_utils import (
    clean_display_url,
    decode_html_bytes,
    edit_distance,
    is_excluded_domain,
    normalize_name,
)

logger = logging.getLogger(__name__)


class Confidence(str, Enum):
    EXACT = "exact"
    ALIAS = "alias"
    FUZZY = "fuzzy"
    LIVE_SEARCH = "live-search"
    INFERRED = "inferred"


@dataclass(frozen=True, slots=True)
class ResolvedDomain:
    domain: str
    company: str
    category: str
    confidence: Confidence
    matched_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            K_DOMAIN: self.domain,
            K_COMPANY: self.company,
            K_CATEGORY: self.category,
            K_CONFIDENCE: self.confidence.value,
            K_MATCHED_NAME: self.matched_name,
        }


@dataclass(frozen=True, slots=True)
class CompanyMatch:
    name: str
    domain: str
    aliases: Tuple[str, ...]
    category: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            K_DOMAIN: self.domain,
            "aliases": list(self.aliases),
            K_CATEGORY: self.category,
            "score": self.score,
        }


LiveSearchFn = Callable[[str], Awaitable[Optional[str]]]


# ---------------------------------------------------------------------------
# Tiers 1-3: curated database
# ---------------------------------------------------------------------------


def _match_exact(normalized: str) -> Optional[ResolvedDomain]:
    entry = COMPANY_DATABASE.get(normalized)
    if entry is None:
        return None
    return ResolvedDomain(entry.domain, normalized, entry.category, Confidence.EXACT, normalized)


def _match_alias(normalized: str) -> Optional[ResolvedDomain]:
    for key, entry in COMPANY_DATABASE.items():
        for alias in entry.aliases:
            if normalize_name(alias) == normalized:
                return ResolvedDomain(entry.domain, key, entry.category, Confidence.ALIAS, alias)
    return None


def _match_fuzzy(normalized: str) -> Optional[ResolvedDomain]:
    if not normalized:
        return None
    best: Optional[Tuple[int, str, CompanyEntry, str]] = None
    for key, entry in COMPANY_DATABASE.items():
        for candidate in (key,) + entry.aliases:
            dist = edit_distance(normalized, normalize_name(candidate))
            # Strictly smaller only: equal distances keep the first one seen.
            if dist <= FUZZY_MAX_DISTANCE and (best is None or dist < best[0]):
                best = (dist, key, entry, candidate)
    if best is None:
        return None
    _, key, entry, via = best
    return ResolvedDomain(entry.domain, key, entry.category, Confidence.FUZZY, via)


def resolve_offline(text: str) -> Optional[ResolvedDomain]:
    """Run the curated-database tiers only (exact, alias, fuzzy)."""

    normalized = normalize_name(text)
    for tier in (_match_exact, _match_alias, _match_fuzzy):
        resolved = tier(normalized)
        if resolved is not None:
            return resolved
    return None


# ---------------------------------------------------------------------------
# Tier 4: live search
# ---------------------------------------------------------------------------


def parse_search_results(html: str) -> Optional[str]:
    """Return the first non-excluded host from a DuckDuckGo HTML result page."""

    soup = BeautifulSoup(html, "lxml")
    for node in soup.select(LIVE_SEARCH_RESULT_SELECTOR):
        host = clean_display_url(node.get_text(" ", strip=True))
        if host and not is_excluded_domain(host, LIVE_SEARCH_EXCLUDED_DOMAINS):
            return host
    return None


async def search_web_for_domain(
    company: str,
    *,
    session: aiohttp.ClientSession,
    config: Optional[LogoFetchConfig] = None,
) -> Optional[str]:
    """Query DuckDuckGo's HTML endpoint for ``company``'s official website.

    Any network error, timeout, non-2xx status or parse miss yields ``None``.
    """

    cfg = config or DEFAULT_CONFIG
    query = urlencode({"q": f"{company} {LIVE_SEARCH_QUERY_SUFFIX}"})
    url = f"{DDG_HTML_ENDPOINT}?{query}"
    headers = {HDR_USER_AGENT: cfg.search_user_agent, HDR_COOKIE: DDG_NO_ADS_COOKIE}
    try:
        async with session.get(
            url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=cfg.live_search_timeout),
        ) as resp:
            if not 200 <= resp.status < 300:
                logger.warning("live search for %r returned HTTP %s", company, resp.status)
                return None
            html = decode_html_bytes(await resp.read(), resp.headers)
    except asyncio.TimeoutError:
        logger.warning("live search for %r timed out after %gs", company, cfg.live_search_timeout)
        return None
    except (aiohttp.ClientError, OSError, ValueError) as exc:
        logger.warning("live search for %r failed: %s", company, exc)
        return None
    return parse_search_results(html)


# ---------------------------------------------------------------------------
# Resolution entrypoint
# ---------------------------------------------------------------------------


def _infer(normalized: str) -> ResolvedDomain:
    sanitized = "".join(normalized.split())
    return ResolvedDomain(f"{sanitized}.com", sanitized, CATEGORY_UNKNOWN, Confidence.INFERRED, sanitized)


async def resolve_domain(
    text: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    config: Optional[LogoFetchConfig] = None,
    live_search: Optional[LiveSearchFn] = None,
) -> ResolvedDomain:
    """Resolve a company or integration name to its canonical domain.

    ``live_search`` replaces the DuckDuckGo lookup (tests, alternate engines);
    the tier is skipped for empty input or when the config disables it.
    """

    cfg = config or DEFAULT_CONFIG
    normalized = normalize_name(text)

    resolved = resolve_offline(text)
    if resolved is not None:
        logger.debug("resolved %r -> %s (%s)", text, resolved.domain, resolved.confidence.value)
        return resolved

    if normalized and cfg.live_search:
        live_domain = await _run_live_search(text, session=session, config=cfg, live_search=live_search)
        if live_domain:
            logger.info("live search resolved %r -> %s", text, live_domain)
            return ResolvedDomain(live_domain, text, CATEGORY_LIVE_SEARCH, Confidence.LIVE_SEARCH, text)

    inferred = _infer(normalized)
    logger.debug("inferred %r -> %s", text, inferred.domain)
    return inferred


async def _run_live_search(
    text: str,
    *,
    session: Optional[aiohttp.ClientSession],
    config: LogoFetchConfig,
    live_search: Optional[LiveSearchFn],
) -> Optional[str]:
    if live_search is not None:
        return await live_search(text)
    if session is not None:
        return await search_web_for_domain(text, session=session, config=config)
    async with aiohttp.ClientSession() as owned:
        return await search_web_for_domain(text, session=owned, config=config)


# ---------------------------------------------------------------------------
# Database search
# ---------------------------------------------------------------------------


def _score_entry(normalized: str, key: str, entry: CompanyEntry) -> Optional[int]:
    scores: List[int] = []
    if key == normalized:
        scores.append(0)
    elif normalized in key:
        scores.append(1)
    if any(normalized in normalize_name(alias) for alias in entry.aliases):
        scores.append(2)
    if normalized in entry.category.lower():
        scores.append(3)
    dist = edit_distance(normalized, key)
    if dist <= SEARCH_FUZZY_MAX_DISTANCE:
        scores.append(4 + dist)
    return min(scores) if scores else None


def search_companies(
    query: str,
    *,
    category: Optional[str] = None,
    limit: int = SEARCH_DEFAULT_LIMIT,
) -> List[CompanyMatch]:
    """Rank curated entries against ``query`` (lower score is better)."""

    normalized = normalize_name(query)
    wanted_category = category.lower() if category else None
    ranked: List[CompanyMatch] = []
    for key, entry in COMPANY_DATABASE.items():
        if wanted_category is not None and entry.category.lower() != wanted_category:
            continue
        score = _score_entry(normalized, key, entry)
        if score is None:
            continue
        ranked.append(CompanyMatch(key, entry.domain, entry.aliases, entry.category, score))
    ranked.sort(key=lambda match: match.score)
    return ranked[: max(0, limit)]


def get_categories() -> List[str]:
    return sorted({entry.category for entry in COMPANY_DATABASE.values()})


def get_company_count() -> int:
    return len(COMPANY_DATABASE)


def get_company(key: str) -> Optional[CompanyEntry]:
    return COMPANY_DATABASE.get(normalize_name(key))


__all__ = [
    "CompanyMatch",
    "Confidence",
    "ResolvedDomain",
    "get_categories",
    "get_company",
    "get_company_count",
    "parse_search_results",
    "resolve_domain",
    "resolve_offline",
    "search_companies",
    "search_web_for_domain",
]
