from __future__ import annotations

from pathlib import Path

import pytest

from host_health_report.errors import CollectorFailure
from host_health_report.tools.health import (
    MAX_LINES,
    classify_log_lines_impl,
    classify_process_impl,
    generate_health_report_impl,
    list_rules_impl,
)
from host_health_report.tools.models import ClassifiedEntry

from samples import SYSLOG_LINES


def test_classify_process_impl() -> None:
    out = classify_process_impl("postgres")
    assert out["severity"] == "high"
    assert out["rule"] == "postgres"


def test_classify_log_lines_impl() -> None:
    out = classify_log_lines_impl(SYSLOG_LINES + [""])
    assert out["count"] == 3
    assert out["severity_counts"] == {"medium": 1, "high": 2}
    first = ClassifiedEntry.model_validate(out["entries"][0])
    assert first.host == "host1"
    assert first.process == "systemd[1]"
    assert first.timestamp == "2024-12-06T10:51:23+00:00"


def test_classify_log_lines_accepts_text_blob() -> None:
    out = classify_log_lines_impl("garbage-ts host2 weird: boom\n")
    entry = out["entries"][0]
    assert entry["timestamp"] is None
    assert entry["timestamp_raw"] == "garbage-ts"
    assert entry["severity"] == "low"
    assert entry["rule"] == "fallback"


def test_classify_log_lines_limit() -> None:
    with pytest.raises(ValueError):
        classify_log_lines_impl(["x"] * (MAX_LINES + 1))


def test_list_rules_ends_with_fallback() -> None:
    rules = list_rules_impl()
    assert rules[0]["name"] == "systemd"
    assert rules[-1]["name"] == "fallback"


@pytest.mark.asyncio
async def test_generate_health_report_impl(tmp_path: Path, fixture_collector) -> None:
    collector = fixture_collector(cpu_snapshot=CollectorFailure("top", "top is not installed"))
    out = await generate_health_report_impl(
        report_path=str(tmp_path / "report.html"),
        syslog_path=str(tmp_path / "syslog"),
        skip_smart=True,
        collector=collector,
    )
    assert Path(out["report_path"]).is_file()
    assert out["error_count"] == 3
    assert out["severity_counts"] == {"medium": 1, "high": 2}
    assert out["unavailable"] == ["cpu"]
    assert out["skipped"] == ["update", "smart"]
    assert out["sections"][0] == "System Information"
    assert "update_packages" not in collector.calls
