"""Collectors backed by the host's own tools."""

from __future__ import annotations

import logging
import platform
import re
from collections import deque
from collections.abc import Sequence
from pathlib import Path

import aiofiles

from ..config import HealthCheckConfig
from ..core.parser import HIGHLIGHT_RE
from ..errors import CollectorFailure
from .base import CommandResult, run_command

logger = logging.getLogger(__name__)

_DEBSUMS_PKG_RE = re.compile(r"\(from (?P<pkg>\S+) package\)")
_OS_RELEASE = Path("/etc/os-release")
_TOP_LINES = 20


async def tail_matching(path: Path, *, lines: int, encoding: str = "utf-8") -> str:
    """Return the last `lines` lines of `path` mentioning error/fail/critical."""
    keep: deque[str] = deque(maxlen=lines)
    try:
        async with aiofiles.open(path, encoding=encoding, errors="replace") as f:
            async for line in f:
                if HIGHLIGHT_RE.search(line):
                    keep.append(line.rstrip("\r\n"))
    except FileNotFoundError as exc:
        raise CollectorFailure("syslog", f"log file not found: {path}") from exc
    except OSError as exc:
        raise CollectorFailure("syslog", f"cannot read {path}: {exc.strerror}") from exc
    return "\n".join(keep)


def parse_failing_packages(output: str) -> list[str]:
    """Package names mentioned by `debsums -s`, in first-seen order."""
    seen: dict[str, None] = {}
    for m in _DEBSUMS_PKG_RE.finditer(output):
        seen.setdefault(m.group("pkg"), None)
    return list(seen)


async def _os_pretty_name() -> str:
    try:
        async with aiofiles.open(_OS_RELEASE, encoding="utf-8") as f:
            async for line in f:
                if line.startswith("PRETTY_NAME="):
                    return line.split("=", 1)[1].strip().strip('"')
    except OSError:
        logger.debug("Cannot read %s", _OS_RELEASE)
    return platform.system()


class SystemCollector:
    """Collector that shells out to apt, df, free, top, smartctl and debsums."""

    def __init__(self, config: HealthCheckConfig) -> None:
        self.config = config

    async def _run(self, *argv: str, ok_codes: Sequence[int] | None = (0,)) -> CommandResult:
        return await run_command(argv, timeout=self.config.command_timeout, ok_codes=ok_codes)

    async def system_info(self) -> dict[str, str]:
        try:
            uptime = (await self._run("uptime", "-p")).stdout.strip()
        except CollectorFailure as exc:
            logger.warning("uptime unavailable: %s", exc.reason)
            uptime = "unknown"
        return {
            "Hostname": platform.node(),
            "Operating system": await _os_pretty_name(),
            "Kernel": platform.release(),
            "Architecture": platform.machine(),
            "Uptime": uptime,
        }

    async def update_packages(self) -> str:
        env = {"DEBIAN_FRONTEND": "noninteractive"}
        timeout = self.config.update_timeout
        update = await run_command(["apt-get", "update"], timeout=timeout, env=env)
        upgrade = await run_command(["apt-get", "-y", "upgrade"], timeout=timeout, env=env)
        return f"{update.output}\n{upgrade.output}"

    async def disk_usage(self) -> str:
        return (await self._run("df", "-hP")).stdout

    async def memory_usage(self) -> str:
        return (await self._run("free", "-h")).stdout

    async def cpu_snapshot(self) -> str:
        out = (await self._run("top", "-bn1")).stdout
        return "\n".join(out.splitlines()[:_TOP_LINES])

    async def error_log(self) -> str:
        return await tail_matching(self.config.syslog_path, lines=self.config.log_lines)

    async def smart_status(self) -> dict[str, str]:
        scan = await self._run("smartctl", "--scan")
        devices = [line.split()[0] for line in scan.stdout.splitlines() if line.strip() and not line.startswith("#")]
        out: dict[str, str] = {}
        for dev in devices:
            # smartctl encodes disk health in the exit status bits; keep whatever it printed.
            res = await self._run("smartctl", "-H", dev, ok_codes=None)
            out[dev] = res.output
        return out

    async def package_integrity(self) -> tuple[str, list[str]]:
        # debsums exits 2 when files changed
        res = await self._run("debsums", "-s", ok_codes=(0, 2))
        return res.output, parse_failing_packages(res.output)
