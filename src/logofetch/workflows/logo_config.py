"""Logofetch defaults (endpoints, headers, exclusions, sizes, timeouts, paths).

Centralizes static defaults so the resolver and fetch pipeline have no embedded
magic strings. ``DEFAULT_CONFIG`` is built from the environment at import; callers
can inject their own ``LogoFetchConfig`` to override any of it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=False)

# Endpoints
CLEARBIT_ENDPOINT = "https://logo.clearbit.com"
GOOGLE_FAVICON_ENDPOINT = "https://www.google.com/s2/favicons"
DDG_API_ENDPOINT = "https://api.duckduckgo.com/"
DDG_BASE_URL = "https://duckduckgo.com"
DDG_HTML_ENDPOINT = "https://html.duckduckgo.com/html/"

# Headers
HDR_USER_AGENT = "User-Agent"
HDR_ACCEPT = "Accept"
HDR_COOKIE = "Cookie"
ACCEPT_IMAGE = "image/*,*/*;q=0.8"
DDG_NO_ADS_COOKIE = "ah=wt"
DEFAULT_USER_AGENT = "logofetch/1.0"
DEFAULT_SEARCH_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Provider caps
CLEARBIT_MAX_SIZE = 1024
GOOGLE_MAX_SIZE = 256
GOOGLE_PLACEHOLDER_MAX_BYTES = 500

# Direct favicon probing, best quality first
FAVICON_PATHS = (
    "/apple-touch-icon.png",
    "/apple-touch-icon-precomposed.png",
    "/favicon-32x32.png",
    "/favicon.ico",
)

# Live search never returns these (reference sites, socials, stores, reviews, itself)
LIVE_SEARCH_EXCLUDED_DOMAINS = (
    "wikipedia.org",
    "linkedin.com",
    "facebook.com",
    "twitter.com",
    "instagram.com",
    "youtube.com",
    "apps.apple.com",
    "play.google.com",
    "g2.com",
    "trustpilot.com",
    "capterra.com",
    "crunchbase.com",
    "bloomberg.com",
    "forbes.com",
    "github.com",
    "duckduckgo.com",
)
LIVE_SEARCH_RESULT_SELECTOR = ".result__url"
LIVE_SEARCH_QUERY_SUFFIX = "official website"

# Resolution / search thresholds
FUZZY_MAX_DISTANCE = 2
SEARCH_FUZZY_MAX_DISTANCE = 3
SEARCH_DEFAULT_LIMIT = 25
BULK_MAX_COMPANIES = 20

CATEGORY_LIVE_SEARCH = "Unknown (Live Search)"
CATEGORY_UNKNOWN = "Unknown"

# Paths (working-directory relative)
ASSETS_DIR = Path("assets")
BULK_SUMMARY_NAME = "bulk_summary.json"


class LogoSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def pixels(self) -> int:
        return SIZE_PIXELS[self]


SIZE_PIXELS = {
    LogoSize.SMALL: 64,
    LogoSize.MEDIUM: 128,
    LogoSize.LARGE: 256,
}


def _env_float(name: str, default: float) -> float:
    try:
        raw = os.getenv(name, "")
        value = float(raw) if raw.strip() else default
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    try:
        raw = os.getenv(name, "")
        value = int(raw) if raw.strip() else default
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_bool(name: str, default: str = "0") -> bool:
    raw = os.getenv(name, default)
    return str(raw).strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class LogoFetchConfig:
    user_agent: str = DEFAULT_USER_AGENT
    search_user_agent: str = DEFAULT_SEARCH_USER_AGENT
    live_search: bool = True
    live_search_timeout: float = 5.0
    source_timeout: float = 10.0
    favicon_timeout: float = 8.0
    bulk_concurrency: int = 5
    assets_dir: Path = ASSETS_DIR


def load_config() -> LogoFetchConfig:
    """Build a config from ``LOGOFETCH_*`` environment variables."""

    return LogoFetchConfig(
        user_agent=os.getenv("LOGOFETCH_USER_AGENT") or DEFAULT_USER_AGENT,
        search_user_agent=os.getenv("LOGOFETCH_SEARCH_USER_AGENT") or DEFAULT_SEARCH_USER_AGENT,
        live_search=_env_bool("LOGOFETCH_LIVE_SEARCH", "1"),
        live_search_timeout=_env_float("LOGOFETCH_LIVE_SEARCH_TIMEOUT", 5.0),
        source_timeout=_env_float("LOGOFETCH_SOURCE_TIMEOUT", 10.0),
        favicon_timeout=_env_float("LOGOFETCH_FAVICON_TIMEOUT", 8.0),
        bulk_concurrency=_env_int("LOGOFETCH_BULK_CONCURRENCY", 5),
        assets_dir=Path(os.getenv("LOGOFETCH_ASSETS_DIR") or ASSETS_DIR),
    )


DEFAULT_CONFIG = load_config()
