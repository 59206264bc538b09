"""High-level exports for the logofetch workflows."""

from .domain_resolver import (
    CompanyMatch,
    Confidence,
    ResolvedDomain,
    get_categories,
    get_company_count,
    resolve_domain,
    search_companies,
)
from .image_validator import ImageInfo, ValidationResult, validate_image
from .logo_config import DEFAULT_CONFIG, LogoFetchConfig, LogoSize, load_config
from .logo_fetch import (
    FetchAttempt,
    LogoFetchResult,
    LogoResult,
    fetch_logo,
    summarize_fetch_result,
)

__all__ = [
    "CompanyMatch",
    "Confidence",
    "DEFAULT_CONFIG",
    "FetchAttempt",
    "ImageInfo",
    "LogoFetchConfig",
    "LogoFetchResult",
    "LogoResult",
    "LogoSize",
    "ResolvedDomain",
    "ValidationResult",
    "fetch_logo",
    "get_categories",
    "get_company_count",
    "load_config",
    "resolve_domain",
    "search_companies",
    "summarize_fetch_result",
    "validate_image",
]
