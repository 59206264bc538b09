from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from .core.keys import (
    K_ATTEMPTS,
    K_CATEGORY,
    K_COMPANY,
    K_CONFIDENCE,
    K_DOMAIN,
    K_DURATION_MS,
    K_ERROR,
    K_FORMAT,
    K_MATCHED_NAME,
    K_PATH,
    K_SIZE_BYTES,
    K_SOURCE,
    K_SUCCESS,
)
from .downloader import OUTPUT_FORMATS, download_bulk, download_logo, render_bulk_report
from .workflows.company_db import COMPANY_DATABASE
from .workflows.doctor import build_doctor_report, format_doctor_report
from .workflows.domain_resolver import get_categories, resolve_domain, search_companies
from .workflows.logo_config import BULK_MAX_COMPANIES, DEFAULT_CONFIG, SEARCH_DEFAULT_LIMIT, LogoSize
from .workflows.logo_utils import format_file_size

app = typer.Typer(add_help_option=False, no_args_is_help=False)


def _minimal_help() -> str:
    return """logofetch (company logo CLI)

Usage:
  logofetch resolve <name> [--offline] [--json]
  logofetch search <query> [--category <NAME>] [--limit <N>] [--json]
  logofetch categories
  logofetch get <company> [--size small|medium|large] [--format original|png|jpg] [--out <DIR>] [--json]
  logofetch bulk <company>... [--size small|medium|large] [--out <DIR>] [--json] [--soft-fail]
  logofetch doctor

Common options:
  --out <DIR>     Write logos into this directory (default: ./assets).
  --json          Print the result JSON to stdout only.
  --soft-fail     Exit 0 even if some bulk items fail.
  --verbose       Log per-source attempts to stderr.

Discoverability:
  --help-full     Expanded help + env vars + artifacts.
  --find <query>  Search commands, flags, env vars, artifacts.
  --doctor        Run environment diagnostics and exit.
"""


def _help_full() -> str:
    return """logofetch CLI (best-effort)

Commands:
  resolve      Resolve a company or integration name to its domain.
  search       Search the curated company database.
  categories   List database categories with company counts.
  get          Resolve a company and download its logo.
  bulk         Download logos for up to 20 companies (5 in flight).
  doctor       Print environment diagnostics.

Resolution tiers (first hit wins):
  exact        Normalized name equals a database key.
  alias        Normalized name equals a declared alias.
  fuzzy        Levenshtein distance <= 2 to a key or alias.
  live-search  First non-directory result of a DuckDuckGo web search.
  inferred     <name>.com fallback.

Logo sources (tried in order):
  Clearbit, Google Favicon, DuckDuckGo, Direct Favicon

Artifacts:
  <company>.<ext>      Downloaded logo bytes (no transcoding).
  bulk_summary.json    Stable JSON summary for a bulk run.

Important env vars:
  LOGOFETCH_USER_AGENT
  LOGOFETCH_SEARCH_USER_AGENT
  LOGOFETCH_LIVE_SEARCH
  LOGOFETCH_LIVE_SEARCH_TIMEOUT
  LOGOFETCH_SOURCE_TIMEOUT
  LOGOFETCH_FAVICON_TIMEOUT
  LOGOFETCH_BULK_CONCURRENCY
  LOGOFETCH_ASSETS_DIR

Exit codes:
  0  success (or --soft-fail)
  2  usage or diagnostic problem
  3  logo could not be fetched

Troubleshooting:
  - Use resolve --offline to check the curated database without network.
  - Set LOGOFETCH_LIVE_SEARCH=0 when web search is blocked.
"""


_FIND_INDEX = [
    ("command", "resolve", "Resolve a company name to its domain."),
    ("command", "search", "Search the curated company database."),
    ("command", "categories", "List database categories."),
    ("command", "get", "Download a single company logo."),
    ("command", "bulk", "Download logos for up to 20 companies."),
    ("command", "doctor", "Print environment diagnostics."),
    ("flag", "--offline", "Resolve with the curated database only."),
    ("flag", "--category", "Restrict search to one category."),
    ("flag", "--limit", "Maximum search results."),
    ("flag", "--size", "Logo size: small, medium, large."),
    ("flag", "--format", "File extension: original, png, jpg."),
    ("flag", "--out", "Write logos into this directory."),
    ("flag", "--json", "Print result JSON to stdout only."),
    ("flag", "--soft-fail", "Exit 0 even if some bulk items fail."),
    ("flag", "--verbose", "Log per-source attempts to stderr."),
    ("flag", "--help-full", "Expanded help, env vars, artifacts."),
    ("flag", "--find", "Search commands, flags, env vars, artifacts."),
    ("flag", "--doctor", "Run environment diagnostics and exit."),
    ("env", "LOGOFETCH_USER_AGENT", "Identifying User-Agent for logo requests."),
    ("env", "LOGOFETCH_SEARCH_USER_AGENT", "Browser User-Agent for live search."),
    ("env", "LOGOFETCH_LIVE_SEARCH", "Enable the live search tier (default 1)."),
    ("env", "LOGOFETCH_LIVE_SEARCH_TIMEOUT", "Live search timeout in seconds."),
    ("env", "LOGOFETCH_SOURCE_TIMEOUT", "Per-source timeout in seconds."),
    ("env", "LOGOFETCH_FAVICON_TIMEOUT", "Per favicon probe timeout in seconds."),
    ("env", "LOGOFETCH_BULK_CONCURRENCY", "Bulk in-flight cap (default 5)."),
    ("env", "LOGOFETCH_ASSETS_DIR", "Default output directory."),
    ("artifact", "bulk_summary.json", "Stable bulk summary output."),
    ("artifact", "<company>.<ext>", "Downloaded logo file."),
]


def _run_find(query: str) -> str:
    needle = (query or "").strip().lower()
    if not needle:
        return ""
    lines = []
    for category, name, desc in _FIND_INDEX:
        haystack = f"{category} {name} {desc}".lower()
        if needle in haystack:
            lines.append(f"{category} {name} - {desc}")
    return "\n".join(lines)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _render_resolution(payload: Dict[str, Any]) -> str:
    return "\n".join(
        [
            f"Company:    {payload[K_COMPANY]}",
            f"Domain:     {payload[K_DOMAIN]}",
            f"Category:   {payload[K_CATEGORY]}",
            f"Confidence: {payload[K_CONFIDENCE]}",
            f"Matched:    {payload[K_MATCHED_NAME]}",
        ]
    )


def _render_item(item: Dict[str, Any]) -> str:
    lines: List[str] = []
    if item.get(K_SUCCESS):
        lines.append(f"Saved {item.get(K_COMPANY)} ({item.get(K_DOMAIN)}) -> {item.get(K_PATH)}")
        lines.append(f"   Source: {item.get(K_SOURCE)}")
        lines.append(f"   Format: {item.get(K_FORMAT)}")
        lines.append(f"   Size: {format_file_size(int(item.get(K_SIZE_BYTES) or 0))}")
        lines.append(f"   Confidence: {item.get(K_CONFIDENCE)}")
    else:
        lines.append(f"Failed to download logo for {item.get(K_COMPANY)} ({item.get(K_DOMAIN)})")
        lines.append(f"   Error: {item.get(K_ERROR)}")
    attempts = item.get(K_ATTEMPTS) or []
    lines.append("")
    lines.append(f"Attempts ({len(attempts)}):")
    for attempt in attempts:
        mark = "ok" if attempt.get(K_SUCCESS) else "failed"
        lines.append(f"   [{mark}] {attempt.get(K_SOURCE)} ({attempt.get(K_DURATION_MS)}ms)")
        if attempt.get(K_ERROR):
            lines.append(f"      -> {attempt.get(K_ERROR)}")
    return "\n".join(lines)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    help: bool = typer.Option(False, "--help", "-h", is_eager=True, help="Show minimal help."),
    help_full: bool = typer.Option(False, "--help-full", is_eager=True, help="Show expanded help."),
    find: Optional[str] = typer.Option(None, "--find", is_eager=True, help="Search commands, flags, env vars, artifacts."),
    doctor: bool = typer.Option(False, "--doctor", is_eager=True, help="Run environment diagnostics and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-source attempts to stderr."),
) -> None:
    _configure_logging(verbose)
    if help_full:
        typer.echo(_help_full())
        raise typer.Exit(code=0)
    if find is not None:
        output = _run_find(find)
        if output:
            typer.echo(output)
        raise typer.Exit(code=0)
    if doctor:
        report = build_doctor_report()
        typer.echo(format_doctor_report(report))
        raise typer.Exit(code=0 if report.get("ok", True) else 2)
    if help or ctx.invoked_subcommand is None:
        typer.echo(_minimal_help())
        raise typer.Exit(code=0)


@app.command("doctor", add_help_option=True)
def doctor_cmd() -> None:
    """Print environment diagnostics."""
    report = build_doctor_report()
    typer.echo(format_doctor_report(report))
    raise typer.Exit(code=0 if report.get("ok", True) else 2)


@app.command("resolve", add_help_option=True)
def resolve_cmd(
    name: str = typer.Argument(..., help="Company or integration name."),
    offline: bool = typer.Option(False, "--offline", help="Resolve with the curated database only."),
    json_out: bool = typer.Option(False, "--json", help="Print result JSON to stdout only."),
) -> None:
    config = replace(DEFAULT_CONFIG, live_search=False) if offline else DEFAULT_CONFIG
    resolved = asyncio.run(resolve_domain(name, config=config))
    payload = resolved.to_dict()
    if json_out:
        _emit_json(payload)
    else:
        typer.echo(_render_resolution(payload))
    raise typer.Exit(code=0)


@app.command("search", add_help_option=True)
def search_cmd(
    query: str = typer.Argument(..., help="Name, alias or category fragment."),
    category: Optional[str] = typer.Option(None, "--category", help="Restrict results to one category."),
    limit: int = typer.Option(SEARCH_DEFAULT_LIMIT, "--limit", help="Maximum number of results."),
    json_out: bool = typer.Option(False, "--json", help="Print result JSON to stdout only."),
) -> None:
    matches = search_companies(query, category=category, limit=limit)
    if json_out:
        _emit_json([match.to_dict() for match in matches])
        raise typer.Exit(code=0)
    if not matches:
        typer.echo(f"No companies match {query!r}")
        raise typer.Exit(code=0)
    width = max(len(match.name) for match in matches)
    for match in matches:
        typer.echo(f"{match.name.ljust(width)}  {match.domain}  [{match.category}]  score={match.score}")
    raise typer.Exit(code=0)


@app.command("categories", add_help_option=True)
def categories_cmd(
    json_out: bool = typer.Option(False, "--json", help="Print result JSON to stdout only."),
) -> None:
    counts = Counter(entry.category for entry in COMPANY_DATABASE.values())
    rows = [{"category": name, "count": counts[name]} for name in get_categories()]
    if json_out:
        _emit_json(rows)
    else:
        for row in rows:
            typer.echo(f"{row['category']} ({row['count']})")
        typer.echo("")
        typer.echo(f"{len(COMPANY_DATABASE)} companies in {len(rows)} categories")
    raise typer.Exit(code=0)


def _check_format(value: str) -> str:
    fmt = (value or "").strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"Unknown format {value!r}; expected one of: {', '.join(OUTPUT_FORMATS)}")
    return fmt


@app.command("get", add_help_option=True)
def get_cmd(
    company: str = typer.Argument(..., help="Company or integration name."),
    size: LogoSize = typer.Option(LogoSize.LARGE, "--size", case_sensitive=False, help="Logo size."),
    fmt: str = typer.Option("original", "--format", callback=_check_format, help="File extension: original, png, jpg."),
    out: Optional[Path] = typer.Option(None, "--out", help="Write logos into this directory."),
    json_out: bool = typer.Option(False, "--json", help="Print result JSON to stdout only."),
) -> None:
    try:
        item = asyncio.run(download_logo(company, size=size, fmt=fmt, out_dir=out))
    except Exception as exc:
        if not json_out:
            typer.echo(f"fatal: {exc}", err=True)
        raise typer.Exit(code=3)
    if json_out:
        _emit_json(item)
    else:
        typer.echo(_render_item(item))
    raise typer.Exit(code=0 if item.get(K_SUCCESS) else 3)


@app.command("bulk", add_help_option=True)
def bulk_cmd(
    companies: List[str] = typer.Argument(..., help=f"One to {BULK_MAX_COMPANIES} company names."),
    size: LogoSize = typer.Option(LogoSize.LARGE, "--size", case_sensitive=False, help="Logo size."),
    out: Optional[Path] = typer.Option(None, "--out", help="Write logos into this directory."),
    json_out: bool = typer.Option(False, "--json", help="Print bulk_summary.json to stdout only."),
    soft_fail: bool = typer.Option(False, "--soft-fail", help="Exit 0 even if some items fail."),
) -> None:
    if len(companies) > BULK_MAX_COMPANIES:
        if not json_out:
            typer.echo(f"error: at most {BULK_MAX_COMPANIES} companies per bulk download", err=True)
        raise typer.Exit(code=2)
    try:
        summary = asyncio.run(download_bulk(companies, size=size, out_dir=out))
    except Exception as exc:
        if not json_out:
            typer.echo(f"fatal: {exc}", err=True)
        raise typer.Exit(code=3)
    if json_out:
        _emit_json(summary)
    else:
        typer.echo(render_bulk_report(summary))
    failed = summary.get("counts", {}).get("failed", 0)
    raise typer.Exit(code=0 if soft_fail or not failed else 3)
