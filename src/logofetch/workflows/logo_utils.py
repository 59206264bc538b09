"""Shared helper functions used by the resolver, the fetch pipeline and the CLI."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional

from charset_normalizer import from_bytes
from rapidfuzz.distance import Levenshtein

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .logo_config import LogoFetchConfig

_STRIP_CHARS = re.compile(r"[._\-]")
_WHITESPACE = re.compile(r"\s+")
_SCHEME = re.compile(r"^https?://")
_FILENAME_UNSAFE = re.compile(r"[^a-z0-9]+")
_CHARSET = re.compile(r"charset=([^\s;]+)", re.I)


def normalize_name(value: str) -> str:
    """Lowercase, trim, drop ``.``/``_``/``-`` and collapse whitespace."""

    text = (value or "").lower().strip()
    text = _STRIP_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", text)


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between two already-normalized strings."""

    return Levenshtein.distance(a, b)


def clean_display_url(text: str) -> str:
    """Reduce a search result's display URL to its bare host."""

    cleaned = (text or "").strip().lower()
    cleaned = _SCHEME.sub("", cleaned)
    if cleaned.startswith("www."):
        cleaned = cleaned[4:]
    return cleaned.split("/")[0].strip()


def decode_html_bytes(body: bytes, headers: Optional[Mapping[str, str]] = None) -> str:
    """Decode a page using the Content-Type charset, else charset-normalizer detection."""

    enc = None
    if headers:
        match = _CHARSET.search(headers.get("content-type", ""))
        if match:
            enc = match.group(1).strip(" \"'").lower()
    if enc:
        try:
            return body.decode(enc, errors="replace")
        except LookupError:
            pass
    best = from_bytes(body).best()
    if best is None:
        return body.decode("utf-8", errors="replace")
    return str(best)


def is_excluded_domain(host: str, excluded: Iterable[str]) -> bool:
    """Return True when ``host`` contains any excluded domain."""

    return any(token in host for token in excluded)


def sanitize_filename(name: str) -> str:
    """Lowercase ``name`` and collapse anything outside ``[a-z0-9]`` into ``_``."""

    return _FILENAME_UNSAFE.sub("_", (name or "").lower()).strip("_")


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def check_writable(path: Path) -> bool:
    """Return True when ``path`` (or its nearest existing ancestor) is writable."""

    try:
        candidate = path
        while not candidate.exists():
            if candidate.parent == candidate:
                return False
            candidate = candidate.parent
        return os.access(candidate, os.W_OK)
    except OSError:
        return False


def collect_environment_warnings(
    config: Optional["LogoFetchConfig"] = None,
    assets_dir: Optional[Path] = None,
) -> List[Dict[str, str]]:
    """Return coded warnings about settings that degrade resolution or downloads."""

    from .logo_config import DEFAULT_CONFIG

    cfg = config or DEFAULT_CONFIG
    warnings: List[Dict[str, str]] = []
    if not cfg.live_search:
        warnings.append({
            "code": "live_search_disabled",
            "message": "Live search tier disabled; unknown names fall back to <name>.com",
            "remedy": "Unset LOGOFETCH_LIVE_SEARCH or set it to 1.",
        })
    target = assets_dir or cfg.assets_dir
    if not check_writable(target):
        warnings.append({
            "code": "assets_dir_not_writable",
            "message": f"Assets directory is not writable: {target}",
            "remedy": "Create the directory or set LOGOFETCH_ASSETS_DIR to a writable location.",
        })
    return warnings


def sanity_check() -> None:
    assert normalize_name("  Next.JS ") == "nextjs"
    assert normalize_name("Hub   Spot") == "hub spot"
    assert clean_display_url("https://www.Example.com/about") == "example.com"
    assert sanitize_filename("Adobe XD!") == "adobe_xd"
    assert is_excluded_domain("en.wikipedia.org", ("wikipedia.org",))


sanity_check()

__all__ = [
    "normalize_name",
    "edit_distance",
    "clean_display_url",
    "decode_html_bytes",
    "is_excluded_domain",
    "sanitize_filename",
    "format_file_size",
    "check_writable",
    "collect_environment_warnings",
    "sanity_check",
]
