from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from samples import FixtureCollector


@pytest.fixture
def fixture_collector() -> Callable[..., FixtureCollector]:
    return FixtureCollector


@pytest.fixture
def write_syslog() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return _write
