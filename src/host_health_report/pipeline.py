"""End-to-end health check run.

Collectors run one after another, then parsing, classification and rendering,
and finally a single write of the compiled report.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TypeVar

import aiofiles

from .collectors import Collector, SystemCollector
from .config import HealthCheckConfig
from .core import Artifacts, Classifier, Report, compile_report, render_all, write_report
from .errors import CollectorFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class HealthCheckResult:
    report: Report
    report_path: Path
    artifacts: Artifacts


async def _collect(name: str, step: Callable[[], Awaitable[T]]) -> T | CollectorFailure:
    logger.info("Collecting %s", name)
    try:
        return await step()
    except CollectorFailure as exc:
        logger.warning("Collector %s unavailable: %s", name, exc.reason)
        return exc
    except Exception as exc:
        logger.exception("Collector %s crashed; using placeholder", name)
        return CollectorFailure(name, str(exc) or type(exc).__name__)


async def _stash(workdir: Path, name: str, value: object) -> None:
    """Keep a copy of a raw artifact in the run's working directory."""
    if isinstance(value, dict):
        text = "\n\n".join(f"== {k} ==\n{v}" for k, v in value.items())
    elif isinstance(value, str):
        text = value
    else:
        return
    path = workdir / f"{name}.txt"
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(text)
    except OSError as exc:
        logger.warning("Could not stash %s artifact: %s", name, exc)


async def collect_artifacts(collector: Collector, config: HealthCheckConfig, workdir: Path) -> Artifacts:
    """Run every enabled collector and gather the results."""
    if config.skip_update:
        logger.info("Package update skipped by configuration")
        update_status = None
    else:
        update_status = await _collect("package update", collector.update_packages)

    system_info = await _collect("system info", collector.system_info)
    disk = await _collect("disk usage", collector.disk_usage)
    memory = await _collect("memory usage", collector.memory_usage)
    cpu = await _collect("cpu load", collector.cpu_snapshot)
    error_log = await _collect("error log", collector.error_log)

    if config.skip_smart:
        logger.info("SMART checks skipped by configuration")
        smart = None
    else:
        smart = await _collect("SMART status", collector.smart_status)

    failing: tuple[str, ...] = ()
    if config.skip_integrity:
        logger.info("Package integrity checks skipped by configuration")
        integrity = None
    else:
        result = await _collect("package integrity", collector.package_integrity)
        if isinstance(result, CollectorFailure):
            integrity = result
        else:
            integrity, names = result
            failing = tuple(names)
            if failing:
                logger.warning("Packages failing integrity checks: %s", ", ".join(failing))

    for name, value in (
        ("update", update_status),
        ("system_info", system_info),
        ("disk", disk),
        ("memory", memory),
        ("cpu", cpu),
        ("error_log", error_log),
        ("smart", smart),
        ("integrity", integrity),
    ):
        await _stash(workdir, name, value)

    return Artifacts(
        system_info=system_info,
        update_status=update_status,
        disk=disk,
        memory=memory,
        cpu=cpu,
        error_log=error_log,
        smart=smart,
        integrity=integrity,
        failing_packages=failing,
    )


async def run_health_check(
    config: HealthCheckConfig,
    *,
    collector: Collector | None = None,
    classifier: Classifier | None = None,
    now: datetime | None = None,
) -> HealthCheckResult:
    """Collect, render, compile and persist one report.

    Raises PersistError when the report cannot be written.
    """
    collector = collector or SystemCollector(config)
    classifier = classifier or Classifier()

    with tempfile.TemporaryDirectory(prefix="host-health-") as tmp:
        workdir = Path(tmp)
        logger.debug("Working directory %s", workdir)
        artifacts = await collect_artifacts(collector, config, workdir)
        fragments = render_all(artifacts, classifier=classifier, tz=config.tz())
        report = compile_report(fragments, generated_at=now)
        path = await write_report(report, config.report_file)
    return HealthCheckResult(report=report, report_path=path, artifacts=artifacts)
