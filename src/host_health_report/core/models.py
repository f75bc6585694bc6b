"""Core data models for the health report."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum

from ..errors import CollectorFailure, RuleTableError


class Severity(str, Enum):
    """Severity attached to a classified log entry."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _SEVERITY_COLORS[self]


_SEVERITY_COLORS = {
    Severity.LOW: "blue",
    Severity.MEDIUM: "orange",
    Severity.HIGH: "red",
}


@dataclass(frozen=True, slots=True)
class LogEntry:
    """Structured form of one system log line."""

    timestamp: datetime | None  # None when the token is not a parsable timestamp
    timestamp_raw: str
    host: str
    process: str
    message: str
    raw: str = ""
    highlights: tuple[tuple[int, int], ...] = ()  # spans in `raw`
    message_offset: int | None = None  # index in `raw` where `message` starts

    def display_timestamp(self, tz: tzinfo | None = None) -> str:
        """Format the timestamp in `tz`, falling back to the raw token."""
        if self.timestamp is None:
            return self.timestamp_raw
        try:
            return self.timestamp.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S %Z")
        except (OverflowError, ValueError):
            return self.timestamp_raw

    def message_highlights(self) -> list[tuple[int, int]]:
        """Highlight spans translated into `message` coordinates."""
        if self.message_offset is None or not self.message:
            return []
        start = self.message_offset
        end = start + len(self.message)
        out: list[tuple[int, int]] = []
        for s, e in self.highlights:
            if s >= start and e <= end:
                out.append((s - start, e - start))
        return out


@dataclass(frozen=True, slots=True)
class ClassificationRule:
    """Case-insensitive pattern over a process name."""

    name: str
    pattern: str
    severity: Severity
    explanation: str
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern or not self.explanation:
            raise RuleTableError(f"Rule {self.name!r} needs a pattern and an explanation")
        if not isinstance(self.severity, Severity):
            raise RuleTableError(f"Rule {self.name!r} has invalid severity {self.severity!r}")
        try:
            compiled = re.compile(self.pattern, re.IGNORECASE)
        except re.error as exc:
            raise RuleTableError(f"Rule {self.name!r} has invalid pattern: {exc}") from exc
        object.__setattr__(self, "_regex", compiled)

    def matches(self, process: str) -> bool:
        return self._regex.search(process) is not None


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying one process name."""

    severity: Severity
    explanation: str
    rule_name: str


class SectionKind(int, Enum):
    """Report sections, in document order."""

    SYSTEM_INFO = 0
    DISK_USAGE = 1
    MEMORY_USAGE = 2
    CPU_LOAD = 3
    SMART_STATUS = 4
    SYSTEM_ERRORS = 5
    PACKAGE_INTEGRITY = 6

    @property
    def title(self) -> str:
        return _SECTION_TITLES[self]


_SECTION_TITLES = {
    SectionKind.SYSTEM_INFO: "System Information",
    SectionKind.DISK_USAGE: "Disk Usage",
    SectionKind.MEMORY_USAGE: "Memory Usage",
    SectionKind.CPU_LOAD: "CPU Load",
    SectionKind.SMART_STATUS: "SMART Status",
    SectionKind.SYSTEM_ERRORS: "System Errors",
    SectionKind.PACKAGE_INTEGRITY: "Package Integrity",
}


@dataclass(frozen=True, slots=True)
class ReportSection:
    """One collapsible block of the compiled report."""

    kind: SectionKind
    title: str
    body_html: str
    collapsed_by_default: bool = True


@dataclass(frozen=True, slots=True)
class Report:
    """Compiled report; immutable once built."""

    sections: tuple[ReportSection, ...]
    generated_at: datetime
    title: str = "System Health Report"


# A collector result is either the raw text, None when skipped by
# configuration, or the failure that made it unavailable.
TextArtifact = str | CollectorFailure | None


@dataclass(frozen=True, slots=True)
class Artifacts:
    """Raw collector outputs for one run."""

    system_info: dict[str, str] | CollectorFailure = field(default_factory=dict)
    update_status: TextArtifact = None
    disk: TextArtifact = ""
    memory: TextArtifact = ""
    cpu: TextArtifact = ""
    error_log: TextArtifact = ""
    smart: dict[str, str] | CollectorFailure | None = None
    integrity: TextArtifact = None
    failing_packages: tuple[str, ...] = ()
