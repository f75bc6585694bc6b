"""Report compilation and persistence."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

import aiofiles
from jinja2 import Environment

from ..errors import PersistError
from .models import Report, ReportSection, SectionKind

logger = logging.getLogger(__name__)

_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8"/>
<meta name="viewport" content="width=device-width, initial-scale=1"/>
<title>{{ report.title }}</title>
<style>
body { font-family: system-ui, -apple-system, sans-serif; background: #f5f6f8; color: #1f2328; margin: 0; padding: 1.5rem; line-height: 1.45; }
h1 { margin: 0 0 0.25rem 0; }
.generated { color: #656d76; margin-bottom: 1.5rem; }
details.section { background: #fff; border: 1px solid #d0d7de; border-radius: 8px; margin-bottom: 1rem; padding: 0.5rem 1rem; }
details.section > summary { cursor: pointer; font-size: 1.2rem; font-weight: 600; padding: 0.25rem 0; }
table { border-collapse: collapse; width: 100%; margin: 0.5rem 0; }
th, td { border-bottom: 1px solid #d8dee4; padding: 0.35rem 0.5rem; text-align: left; vertical-align: top; }
table.kv th { width: 12rem; }
pre { background: #f6f8fa; border: 1px solid #d0d7de; border-radius: 6px; padding: 0.75rem; overflow-x: auto; white-space: pre-wrap; }
.bar { display: inline-block; width: 10rem; height: 0.8rem; background: #e6e8eb; border-radius: 4px; vertical-align: middle; overflow: hidden; }
.bar-fill { height: 100%; }
.bar-fill.ok { background: #2da44e; }
.bar-fill.warn { background: #d4a72c; }
.bar-fill.crit { background: #cf222e; }
.hl { background: #ffebe9; color: #cf222e; font-weight: 600; }
.sev { font-weight: 700; }
.unavailable, .skipped { color: #656d76; font-style: italic; }
</style>
</head>
<body>
<h1>{{ report.title }}</h1>
<p class="generated">Generated {{ generated }}</p>
{% for section in report.sections %}
<details class="section" id="{{ section.kind.name | lower }}"{% if not section.collapsed_by_default %} open{% endif %}>
<summary>{{ section.title }}</summary>
{{ section.body_html | safe }}
</details>
{% endfor %}
</body>
</html>
"""

_ENV = Environment(autoescape=True, keep_trailing_newline=True)


def compile_report(
    fragments: Mapping[SectionKind, str],
    *,
    generated_at: datetime | None = None,
    title: str = "System Health Report",
) -> Report:
    """Assemble fragments into a Report in fixed section order.

    Sections missing from `fragments` are still emitted with a placeholder so the
    document structure never changes. Only the first section starts expanded.
    """
    generated_at = (generated_at or datetime.now(UTC)).astimezone(UTC)
    sections = []
    for i, kind in enumerate(SectionKind):
        body = fragments.get(kind)
        if body is None:
            body = f'<p class="unavailable">{kind.title} data not available.</p>'
        sections.append(
            ReportSection(
                kind=kind,
                title=kind.title,
                body_html=str(body),
                collapsed_by_default=i != 0,
            )
        )
    return Report(sections=tuple(sections), generated_at=generated_at, title=title)


def render_html(report: Report) -> str:
    """Render the report as a self-contained HTML document."""
    template = _ENV.from_string(_TEMPLATE)
    return template.render(
        report=report,
        generated=report.generated_at.strftime("%Y-%m-%d %H:%M:%S UTC"),
    )


async def write_report(report: Report, path: str | Path) -> Path:
    """Write the report to `path` via a temporary sibling file and rename.

    Raises PersistError with the attempted path on any filesystem error.
    """
    target = Path(path)
    tmp = target.with_name(f".{target.name}.tmp")
    document = render_html(report)
    replaced = False
    try:
        async with aiofiles.open(tmp, "w", encoding="utf-8") as f:
            await f.write(document)
        os.replace(tmp, target)
        replaced = True
    except OSError as exc:
        raise PersistError(target, exc.strerror or str(exc)) from exc
    finally:
        if not replaced:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove %s", tmp)
    logger.info("Report written to %s", target)
    return target
