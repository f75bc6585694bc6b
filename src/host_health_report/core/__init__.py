"""Log classification and report compilation."""

from __future__ import annotations

from .classifier import Classifier
from .models import (
    Artifacts,
    Classification,
    ClassificationRule,
    LogEntry,
    Report,
    ReportSection,
    SectionKind,
    Severity,
)
from .parser import parse_line, parse_lines
from .render import render_all
from .report import compile_report, render_html, write_report
from .rules import FALLBACK_RULE, default_rules

__all__ = [
    "Artifacts",
    "Classification",
    "ClassificationRule",
    "Classifier",
    "FALLBACK_RULE",
    "LogEntry",
    "Report",
    "ReportSection",
    "SectionKind",
    "Severity",
    "compile_report",
    "default_rules",
    "parse_line",
    "parse_lines",
    "render_all",
    "render_html",
    "write_report",
]
