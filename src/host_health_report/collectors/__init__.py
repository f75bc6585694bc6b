"""Raw artifact collectors."""

from __future__ import annotations

from .base import Collector, CommandResult, run_command
from .system import SystemCollector, parse_failing_packages, tail_matching

__all__ = [
    "Collector",
    "CommandResult",
    "SystemCollector",
    "parse_failing_packages",
    "run_command",
    "tail_matching",
]
