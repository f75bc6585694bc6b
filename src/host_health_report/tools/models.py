"""JSON shapes returned by the MCP tools."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ClassifiedEntry(BaseModel):
    timestamp: str | None = Field(description="ISO-8601 UTC timestamp, or null when unparsable.")
    timestamp_raw: str = Field(description="Timestamp token exactly as it appeared in the line.")
    host: str
    process: str
    message: str
    severity: Literal["low", "medium", "high"]
    explanation: str = Field(description="Remediation hint for the process category.")
    rule: str = Field(description="Name of the classification rule that matched.")


class RuleInfo(BaseModel):
    name: str
    pattern: str
    severity: Literal["low", "medium", "high"]
    explanation: str


class HealthReportSummary(BaseModel):
    report_path: str
    generated_at: str
    sections: list[str]
    error_count: int = Field(ge=0)
    severity_counts: dict[str, int] = Field(default_factory=dict)
    unavailable: list[str] = Field(
        default_factory=list, description="Collectors that failed and were replaced by placeholders."
    )
    skipped: list[str] = Field(default_factory=list)
