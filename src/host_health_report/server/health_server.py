"""MCP server entrypoint (stdio transport).

Exposes log classification and report generation to MCP clients.

Run locally (stdio):
    python -m host_health_report.server.health_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from host_health_report.resources.registry import register_resources
from host_health_report.tools.health import (
    classify_log_lines_impl,
    classify_process_impl,
    generate_health_report_impl,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Log to stderr only; stdout carries the MCP protocol."""
    level_name = os.getenv("HOST_HEALTH_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


mcp = FastMCP("host-health", json_response=True)

register_resources(mcp)


@mcp.tool()
def classify_process(process: str) -> dict[str, Any]:
    """Return severity and remediation hint for a process name (e.g. "systemd[1]")."""
    return classify_process_impl(process)


@mcp.tool()
def classify_log_lines(lines: list[str]) -> dict[str, Any]:
    """Parse syslog lines ("<timestamp> <host> <process>: <message>") and classify each.

    Returns
    -------
    dict:
        {"count": int, "severity_counts": dict, "entries": list[dict]}
    """
    return classify_log_lines_impl(lines)


@mcp.tool()
async def generate_health_report(
    report_path: str,
    syslog_path: str | None = None,
    skip_update: bool = True,
    skip_smart: bool = False,
    skip_integrity: bool = False,
    log_lines: int | None = None,
) -> dict[str, Any]:
    """Run the host health check and write the HTML report.

    Parameters
    ----------
    report_path:
        Where the HTML report is written.
    syslog_path:
        Log scanned for error/fail/critical lines (default /var/log/syslog).
    skip_update/skip_smart/skip_integrity:
        Disable the package update, SMART checks or package verification.
        Package updates are skipped by default from this tool.
    log_lines:
        Most recent matching log lines kept.
    """
    return await generate_health_report_impl(
        report_path=report_path,
        syslog_path=syslog_path,
        skip_update=skip_update,
        skip_smart=skip_smart,
        skip_integrity=skip_integrity,
        log_lines=log_lines,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
