"""Run configuration.

Built once at startup and passed explicitly to every component.
"""

from __future__ import annotations

import os
from collections.abc import Collection
from dataclasses import dataclass, replace
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError

DEFAULT_LOG_FILE = Path("/var/log/host-health-report.log")
DEFAULT_REPORT_FILE = Path("/var/log/host-health-report.html")
DEFAULT_SYSLOG = Path("/var/log/syslog")
DEFAULT_LOG_LINES = 50


@dataclass(frozen=True, slots=True)
class HealthCheckConfig:
    skip_update: bool = False
    skip_smart: bool = False
    skip_integrity: bool = False
    log_file: Path = DEFAULT_LOG_FILE
    report_file: Path = DEFAULT_REPORT_FILE
    syslog_path: Path = DEFAULT_SYSLOG
    log_lines: int = DEFAULT_LOG_LINES
    display_tz: str | None = None  # None means the host's local zone
    require_root: bool = True
    update_timeout: float = 600.0
    command_timeout: float = 120.0

    def __post_init__(self) -> None:
        if self.log_lines < 1:
            raise ConfigError("log_lines must be >= 1")
        if self.update_timeout <= 0 or self.command_timeout <= 0:
            raise ConfigError("timeouts must be > 0")
        for label, p in (("report file", self.report_file), ("log file", self.log_file)):
            if Path(p).is_dir():
                raise ConfigError(f"{label} {p} is a directory")
        if self.display_tz is not None:
            _zone(self.display_tz)

    def tz(self) -> tzinfo | None:
        """Display timezone for log timestamps (None = local)."""
        return _zone(self.display_tz) if self.display_tz else None


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone: {name!r}") from exc


def resolve_config(
    cfg: HealthCheckConfig | None = None, *, explicit: Collection[str] = ()
) -> HealthCheckConfig:
    """Return config with optional env overrides applied.

    Fields named in `explicit` were set by the caller and are left alone,
    so their environment variables are not even parsed.
    """
    if cfg is None:
        cfg = HealthCheckConfig()

    changes: dict[str, object] = {}

    env = os.getenv("HOST_HEALTH_LOG_LINES")
    if env and "log_lines" not in explicit:
        try:
            changes["log_lines"] = int(env)
        except ValueError as exc:
            raise ConfigError("HOST_HEALTH_LOG_LINES must be an integer") from exc

    env = os.getenv("HOST_HEALTH_DISPLAY_TZ")
    if env and "display_tz" not in explicit:
        changes["display_tz"] = env

    if not changes:
        return cfg
    return replace(cfg, **changes)
