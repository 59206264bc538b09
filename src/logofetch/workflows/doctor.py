"""Environment diagnostics for ``logofetch doctor``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .company_db import COMPANY_DATABASE
from .logo_config import DEFAULT_CONFIG, DEFAULT_USER_AGENT, LogoFetchConfig
from .logo_utils import check_writable, collect_environment_warnings

LEVEL_WARN = "warn"
LEVEL_INFO = "info"


@dataclass(frozen=True, slots=True)
class DoctorCheck:
    name: str
    ok: bool
    level: str
    detail: str
    remedy: Optional[str] = None
    value: Optional[str] = None

    @property
    def blocking(self) -> bool:
        return not self.ok and self.level == LEVEL_WARN

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "status": "ok" if self.ok else "missing",
            "level": self.level,
            "detail": self.detail,
        }
        if self.remedy:
            payload["remedy"] = self.remedy
        if self.value is not None:
            payload["value"] = self.value
        return payload


def _assets_check(target: Path) -> DoctorCheck:
    return DoctorCheck(
        "LOGOFETCH_ASSETS_DIR",
        check_writable(target),
        LEVEL_WARN,
        str(target),
        remedy="Create the directory or set LOGOFETCH_ASSETS_DIR to a writable location.",
    )


def _live_search_check(cfg: LogoFetchConfig) -> DoctorCheck:
    state = "enabled" if cfg.live_search else "disabled"
    return DoctorCheck(
        "LOGOFETCH_LIVE_SEARCH",
        cfg.live_search,
        LEVEL_INFO,
        f"Live search tier {state}",
        remedy=None if cfg.live_search else "Set LOGOFETCH_LIVE_SEARCH=1 to resolve names missing from the curated database.",
    )


def _user_agent_check(cfg: LogoFetchConfig) -> DoctorCheck:
    custom = bool(os.getenv("LOGOFETCH_USER_AGENT"))
    return DoctorCheck(
        "LOGOFETCH_USER_AGENT",
        custom,
        LEVEL_INFO,
        "Custom client header" if custom else f"Default client header ({DEFAULT_USER_AGENT})",
        value=cfg.user_agent,
    )


def _timeouts_check(cfg: LogoFetchConfig) -> DoctorCheck:
    return DoctorCheck(
        "timeouts",
        True,
        LEVEL_INFO,
        f"live search {cfg.live_search_timeout:g}s, sources {cfg.source_timeout:g}s, "
        f"favicon probes {cfg.favicon_timeout:g}s, bulk concurrency {cfg.bulk_concurrency}",
    )


def _database_check() -> DoctorCheck:
    size = len(COMPANY_DATABASE)
    return DoctorCheck("company_database", size > 0, LEVEL_WARN, f"{size} curated companies")


def build_doctor_report(
    *,
    config: Optional[LogoFetchConfig] = None,
    assets_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Run every check; ``ok`` is False only when a ``warn`` level check fails."""

    cfg = config or DEFAULT_CONFIG
    target = Path(assets_dir or cfg.assets_dir)
    checks = [
        _assets_check(target),
        _live_search_check(cfg),
        _user_agent_check(cfg),
        _timeouts_check(cfg),
        _database_check(),
    ]
    return {
        "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "ok": not any(check.blocking for check in checks),
        "checks": [check.to_dict() for check in checks],
        "environment_warnings": collect_environment_warnings(cfg, target),
    }


def format_doctor_report(report: Dict[str, Any]) -> str:
    checks = report.get("checks") or []
    width = max((len(check.get("name", "")) for check in checks), default=0)
    verdict = "healthy" if report.get("ok", True) else "needs attention"
    lines: List[str] = [f"logofetch doctor: {verdict} ({report.get('generated_at')})", ""]
    for check in checks:
        mark = "ok" if check.get("status") == "ok" else check.get("level", LEVEL_INFO)
        lines.append(f"[{mark:>4}] {check.get('name', '').ljust(width)}  {check.get('detail') or ''}".rstrip())
        if check.get("value"):
            lines.append(f"{'':7}{'':{width}}  value: {check['value']}")
        if check.get("remedy") and check.get("status") != "ok":
            lines.append(f"{'':7}{'':{width}}  fix: {check['remedy']}")
    warnings = report.get("environment_warnings") or []
    if warnings:
        lines.append("")
        lines.append(f"{len(warnings)} environment warning(s):")
        lines.extend(f"  {warning.get('code')}: {warning.get('message', '')}" for warning in warnings)
    return "\n".join(lines) + "\n"


__all__ = ["DoctorCheck", "build_doctor_report", "format_doctor_report"]
