"""Collector interface and subprocess helper."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from ..errors import CollectorFailure

logger = logging.getLogger(__name__)


class Collector(Protocol):
    """Source of raw text artifacts; every method may raise CollectorFailure."""

    async def system_info(self) -> dict[str, str]:
        ...

    async def update_packages(self) -> str:
        ...

    async def disk_usage(self) -> str:
        ...

    async def memory_usage(self) -> str:
        ...

    async def cpu_snapshot(self) -> str:
        ...

    async def error_log(self) -> str:
        ...

    async def smart_status(self) -> dict[str, str]:
        ...

    async def package_integrity(self) -> tuple[str, list[str]]:
        ...


@dataclass(frozen=True, slots=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """stdout followed by stderr, for tools that report on both."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


async def run_command(
    argv: Sequence[str],
    *,
    timeout: float,
    ok_codes: Sequence[int] | None = (0,),
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run an external tool and capture its output.

    `ok_codes=None` accepts any exit status. Missing tools, disallowed exit
    codes and timeouts raise CollectorFailure.
    """
    name = argv[0]
    full_env = {**os.environ, **env} if env else None
    logger.debug("Running %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            env=full_env,
        )
    except FileNotFoundError as exc:
        raise CollectorFailure(name, f"{name} is not installed") from exc
    except PermissionError as exc:
        raise CollectorFailure(name, f"permission denied running {name}") from exc

    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError as exc:
        proc.kill()
        await proc.wait()
        raise CollectorFailure(name, f"{name} timed out after {timeout:g}s") from exc

    result = CommandResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=out.decode("utf-8", errors="replace"),
        stderr=err.decode("utf-8", errors="replace"),
    )
    if ok_codes is not None and result.returncode not in ok_codes:
        detail = result.stderr.strip().splitlines()[-1:] or [""]
        raise CollectorFailure(name, f"{name} exited with status {result.returncode} {detail[0]}".rstrip())
    return result
