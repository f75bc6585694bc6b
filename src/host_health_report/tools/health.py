"""MCP tool implementations.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import fields
from pathlib import Path
from typing import Any

from host_health_report.collectors import Collector
from host_health_report.config import HealthCheckConfig, resolve_config
from host_health_report.core import Classifier, LogEntry, parse_lines
from host_health_report.errors import CollectorFailure
from host_health_report.pipeline import run_health_check
from host_health_report.tools.models import ClassifiedEntry, HealthReportSummary, RuleInfo

MAX_LINES = 5000

_CLASSIFIER = Classifier()


def _entry_to_model(entry: LogEntry, classifier: Classifier) -> ClassifiedEntry:
    c = classifier.classify(entry.process)
    return ClassifiedEntry(
        timestamp=entry.timestamp.isoformat() if entry.timestamp is not None else None,
        timestamp_raw=entry.timestamp_raw,
        host=entry.host,
        process=entry.process,
        message=entry.message,
        severity=c.severity.value.lower(),
        explanation=c.explanation,
        rule=c.rule_name,
    )


def classify_process_impl(process: str) -> dict[str, Any]:
    """Classify a single process name."""
    c = _CLASSIFIER.classify(process)
    return {"process": process, "severity": c.severity.value.lower(), "explanation": c.explanation, "rule": c.rule_name}


def classify_log_lines_impl(lines: Sequence[str] | str) -> dict[str, Any]:
    """Parse and classify raw syslog lines."""
    if isinstance(lines, str):
        lines = lines.splitlines()
    if len(lines) > MAX_LINES:
        raise ValueError(f"At most {MAX_LINES} lines can be classified per call.")
    entries = parse_lines(lines)
    models = [_entry_to_model(e, _CLASSIFIER) for e in entries]
    counts = Counter(m.severity for m in models)
    return {
        "count": len(models),
        "severity_counts": dict(counts),
        "entries": [m.model_dump() for m in models],
    }


def list_rules_impl() -> list[dict[str, Any]]:
    rules = [*_CLASSIFIER.rules, _CLASSIFIER.fallback]
    return [
        RuleInfo(
            name=r.name,
            pattern=r.pattern,
            severity=r.severity.value.lower(),
            explanation=r.explanation,
        ).model_dump()
        for r in rules
    ]


async def generate_health_report_impl(
    *,
    report_path: str,
    syslog_path: str | None = None,
    skip_update: bool = True,
    skip_smart: bool = False,
    skip_integrity: bool = False,
    log_lines: int | None = None,
    collector: Collector | None = None,
) -> dict[str, Any]:
    """Implementation for the `generate_health_report` MCP tool.

    Package updates are skipped unless explicitly requested.
    """
    overrides: dict[str, Any] = {
        "report_file": Path(report_path),
        "skip_update": skip_update,
        "skip_smart": skip_smart,
        "skip_integrity": skip_integrity,
        "require_root": False,
    }
    if syslog_path is not None:
        overrides["syslog_path"] = Path(syslog_path)
    if log_lines is not None:
        overrides["log_lines"] = log_lines
    config = resolve_config(HealthCheckConfig(**overrides))

    result = await run_health_check(config, collector=collector)
    artifacts = result.artifacts

    unavailable = [
        f.name for f in fields(artifacts) if isinstance(getattr(artifacts, f.name), CollectorFailure)
    ]
    skipped = [
        name
        for name, flag in (
            ("update", config.skip_update),
            ("smart", config.skip_smart),
            ("integrity", config.skip_integrity),
        )
        if flag
    ]

    entries = parse_lines(artifacts.error_log.splitlines()) if isinstance(artifacts.error_log, str) else []
    counts = Counter(_CLASSIFIER.classify(e.process).severity.value.lower() for e in entries)

    summary = HealthReportSummary(
        report_path=str(result.report_path),
        generated_at=result.report.generated_at.isoformat(),
        sections=[s.title for s in result.report.sections],
        error_count=len(entries),
        severity_counts=dict(counts),
        unavailable=unavailable,
        skipped=skipped,
    )
    return summary.model_dump()
