"""Exception hierarchy for the health-report pipeline.

Only ``ConfigError`` and ``PersistError`` terminate a run; everything else is
contained by the section that hit it.
"""

from __future__ import annotations

from pathlib import Path


class HealthReportError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(HealthReportError):
    """Invalid command-line input or environment override."""


class RuleTableError(ConfigError):
    """A classification rule could not be loaded."""


class ParseError(HealthReportError):
    """A log line could not be turned into a LogEntry."""


class CollectorFailure(HealthReportError):
    """An external tool was missing, failed or timed out."""

    def __init__(self, collector: str, reason: str) -> None:
        super().__init__(f"{collector}: {reason}")
        self.collector = collector
        self.reason = reason


class PersistError(HealthReportError):
    """The report or the run log could not be written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Cannot write {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
