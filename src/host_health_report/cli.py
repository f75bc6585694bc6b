from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from host_health_report.config import (
    DEFAULT_LOG_FILE,
    DEFAULT_REPORT_FILE,
    DEFAULT_SYSLOG,
    HealthCheckConfig,
    resolve_config,
)
from host_health_report.errors import ConfigError, PersistError
from host_health_report.pipeline import run_health_check

LOGGER = logging.getLogger(__name__)

EXIT_NO_PRIVILEGE = 1
EXIT_CONFIG = 2
EXIT_PERSIST = 3
EXIT_INTERRUPTED = 130

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Path | None, level_name: str | None = None) -> None:
    """Log to stderr and append to the durable run log.

    Raises PersistError when the run log cannot be opened.
    """
    level_name = (level_name or os.getenv("HOST_HEALTH_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as e:
            raise PersistError(log_file, e.strerror or str(e)) from e
    logging.basicConfig(level=level, format=_LOG_FORMAT, handlers=handlers, force=True)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="host-health-report",
        description="Update packages, check disk/memory/CPU/SMART/log health and write an HTML report.",
    )
    p.add_argument("--skip-update", action="store_true", help="Do not update packages")
    p.add_argument("--skip-smart", action="store_true", help="Do not run SMART checks")
    p.add_argument("--skip-integrity", action="store_true", help="Do not verify installed package files")
    p.add_argument("--log-file", type=Path, default=DEFAULT_LOG_FILE, help=f"Run log (default: {DEFAULT_LOG_FILE})")
    p.add_argument(
        "--report-file", type=Path, default=DEFAULT_REPORT_FILE, help=f"HTML report (default: {DEFAULT_REPORT_FILE})"
    )
    p.add_argument("--syslog", type=Path, default=DEFAULT_SYSLOG, help=f"Log scanned for errors (default: {DEFAULT_SYSLOG})")
    p.add_argument("--log-lines", type=int, default=None, help="Most recent error lines to keep (default: 50)")
    p.add_argument("--display-tz", default=None, help="IANA timezone for log timestamps (default: local)")
    p.add_argument(
        "--allow-unprivileged", action="store_true", help="Run without root; some checks will be unavailable"
    )
    return p


def config_from_args(args: argparse.Namespace) -> HealthCheckConfig:
    """Build the run configuration; CLI values win over environment overrides."""
    values: dict[str, object] = {
        "skip_update": args.skip_update,
        "skip_smart": args.skip_smart,
        "skip_integrity": args.skip_integrity,
        "log_file": args.log_file,
        "report_file": args.report_file,
        "syslog_path": args.syslog,
        "require_root": not args.allow_unprivileged,
    }
    explicit: set[str] = set()
    if args.log_lines is not None:
        values["log_lines"] = args.log_lines
        explicit.add("log_lines")
    if args.display_tz is not None:
        values["display_tz"] = args.display_tz
        explicit.add("display_tz")
    return resolve_config(HealthCheckConfig(**values), explicit=explicit)


def _fail(message: str, code: int) -> NoReturn:
    LOGGER.error("%s", message)
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(code)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # Opened before validation; startup failures are logged as well.
    log_error: PersistError | None = None
    try:
        configure_logging(args.log_file)
    except PersistError as e:
        log_error = e
        configure_logging(None)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        _fail(str(e), EXIT_CONFIG)

    if config.require_root and not _is_root():
        _fail("this tool must be run as root (or pass --allow-unprivileged).", EXIT_NO_PRIVILEGE)

    if log_error is not None:
        _fail(str(log_error), EXIT_PERSIST)

    LOGGER.info("Starting health check")
    try:
        result = asyncio.run(run_health_check(config))
    except PersistError as e:
        _fail(str(e), EXIT_PERSIST)
    except KeyboardInterrupt:
        LOGGER.warning("Interrupted; no report written")
        raise SystemExit(EXIT_INTERRUPTED)

    LOGGER.info("Health check finished")
    print(f"Report written to {result.report_path}")


if __name__ == "__main__":
    main()
