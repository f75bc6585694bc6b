from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from host_health_report.collectors import system
from host_health_report.collectors.base import CommandResult, run_command
from host_health_report.collectors.system import SystemCollector, parse_failing_packages, tail_matching
from host_health_report.config import HealthCheckConfig
from host_health_report.errors import CollectorFailure


@pytest.mark.asyncio
async def test_tail_matching_keeps_last_matching_lines(tmp_path: Path, write_syslog) -> None:
    path = tmp_path / "syslog"
    write_syslog(
        path,
        [
            "2024-12-06T10:00:00Z h a: started",
            "2024-12-06T10:00:01Z h a: ERROR one",
            "2024-12-06T10:00:02Z h b: Failed two",
            "2024-12-06T10:00:03Z h c: all good",
            "2024-12-06T10:00:04Z h d: critical three",
        ],
    )
    out = await tail_matching(path, lines=2)
    assert out.splitlines() == [
        "2024-12-06T10:00:02Z h b: Failed two",
        "2024-12-06T10:00:04Z h d: critical three",
    ]


@pytest.mark.asyncio
async def test_tail_matching_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CollectorFailure, match="not found"):
        await tail_matching(tmp_path / "nope", lines=5)


def test_parse_failing_packages() -> None:
    output = (
        "debsums: changed file /usr/bin/foo (from foo package)\n"
        "debsums: missing file /usr/share/bar/x (from bar package)\n"
        "debsums: changed file /usr/bin/foo2 (from foo package)\n"
    )
    assert parse_failing_packages(output) == ["foo", "bar"]
    assert parse_failing_packages("") == []


@pytest.mark.asyncio
async def test_run_command_missing_tool() -> None:
    with pytest.raises(CollectorFailure, match="not installed"):
        await run_command(["definitely-not-a-real-tool-4242"], timeout=5)


@pytest.mark.asyncio
async def test_run_command_exit_status() -> None:
    assert (await run_command(["true"], timeout=5)).returncode == 0
    with pytest.raises(CollectorFailure, match="status 1"):
        await run_command(["false"], timeout=5)
    assert (await run_command(["false"], timeout=5, ok_codes=None)).returncode == 1


@pytest.mark.asyncio
async def test_run_command_timeout() -> None:
    with pytest.raises(CollectorFailure, match="timed out"):
        await run_command(["sleep", "5"], timeout=0.2)


class FakeRunner:
    def __init__(self, outputs: dict[tuple[str, ...], CommandResult]) -> None:
        self.outputs = outputs
        self.seen: list[tuple[str, ...]] = []

    async def __call__(self, argv: Sequence[str], *, timeout: float, ok_codes=(0,), env=None) -> CommandResult:
        key = tuple(argv)
        self.seen.append(key)
        result = self.outputs[key]
        if ok_codes is not None and result.returncode not in ok_codes:
            raise CollectorFailure(argv[0], f"exited with status {result.returncode}")
        return result


@pytest.mark.asyncio
async def test_smart_status_scans_devices(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = FakeRunner(
        {
            ("smartctl", "--scan"): CommandResult(
                0, "/dev/sda -d sat # /dev/sda, ATA device\n/dev/nvme0 -d nvme # nvme\n", ""
            ),
            ("smartctl", "-H", "/dev/sda"): CommandResult(0, "result: PASSED\n", ""),
            ("smartctl", "-H", "/dev/nvme0"): CommandResult(4, "result: FAILED!\n", ""),
        }
    )
    monkeypatch.setattr(system, "run_command", runner)
    out = await SystemCollector(HealthCheckConfig()).smart_status()
    assert out == {"/dev/sda": "result: PASSED\n", "/dev/nvme0": "result: FAILED!\n"}


@pytest.mark.asyncio
async def test_package_integrity_accepts_changed_files(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = FakeRunner(
        {
            ("debsums", "-s"): CommandResult(
                2, "", "debsums: changed file /etc/foo.conf (from foo package)\n"
            )
        }
    )
    monkeypatch.setattr(system, "run_command", runner)
    text, failing = await SystemCollector(HealthCheckConfig()).package_integrity()
    assert "changed file" in text
    assert failing == ["foo"]


@pytest.mark.asyncio
async def test_system_info_survives_missing_uptime(monkeypatch: pytest.MonkeyPatch) -> None:
    async def no_uptime(argv, **_kwargs):
        raise CollectorFailure(argv[0], "uptime is not installed")

    monkeypatch.setattr(system, "run_command", no_uptime)
    info = await SystemCollector(HealthCheckConfig()).system_info()
    assert info["Uptime"] == "unknown"
    assert "Hostname" in info


@pytest.mark.asyncio
async def test_cpu_snapshot_is_truncated(monkeypatch: pytest.MonkeyPatch) -> None:
    top = "\n".join(f"line {i}" for i in range(100))
    runner = FakeRunner({("top", "-bn1"): CommandResult(0, top, "")})
    monkeypatch.setattr(system, "run_command", runner)
    out = await SystemCollector(HealthCheckConfig()).cpu_snapshot()
    assert out.splitlines()[0] == "line 0"
    assert len(out.splitlines()) == 20


@pytest.mark.asyncio
async def test_tail_matching_unreadable_path(tmp_path: Path) -> None:
    with pytest.raises(CollectorFailure, match="cannot read"):
        await tail_matching(tmp_path, lines=5)
