"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from host_health_report.tools.health import list_rules_impl
from host_health_report.tools.models import ClassifiedEntry, HealthReportSummary


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://host-health/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs and tools."""
        return (
            "Tools:\n"
            "- classify_process(process)\n"
            "- classify_log_lines(lines)\n"
            "- generate_health_report(report_path, ...)\n"
            "\nResources:\n"
            "- app://host-health/help\n"
            "- app://host-health/rules\n"
            "- app://host-health/examples/sample-log\n"
            "- app://host-health/schemas/classified-entry\n"
            "- app://host-health/schemas/report-summary\n"
        )

    @mcp.resource("app://host-health/rules")
    def rules() -> list[dict[str, Any]]:
        """Return the classification rules in evaluation order."""
        return list_rules_impl()

    @mcp.resource("app://host-health/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny sample of filtered syslog lines."""
        return (
            "2024-12-06T10:51:23Z host1 systemd[1]: Failed to start foo.service\n"
            "2024-12-06T10:52:01Z host1 kernel: EXT4-fs error (device sda1): bad block\n"
            "2024-12-06T10:53:44Z host1 NetworkManager[812]: <warn> dhcp4 (wlan0): request failed\n"
            "2024-12-06T10:55:10Z host1 mysqld[1204]: [ERROR] InnoDB: Operating system error 28\n"
        )

    @mcp.resource("app://host-health/schemas/classified-entry")
    def classified_entry_schema() -> dict[str, Any]:
        """Return the JSON schema for classified log entries."""
        return ClassifiedEntry.model_json_schema()

    @mcp.resource("app://host-health/schemas/report-summary")
    def report_summary_schema() -> dict[str, Any]:
        """Return the JSON schema for generate_health_report results."""
        return HealthReportSummary.model_json_schema()
