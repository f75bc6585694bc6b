"""HTML fragment renderers, one per report section.

Every renderer is total: malformed or missing input turns into an
explanatory placeholder instead of an exception.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from datetime import tzinfo

from markupsafe import Markup, escape

from ..errors import CollectorFailure
from .classifier import Classifier
from .models import Artifacts, LogEntry, SectionKind, TextArtifact
from .parser import parse_lines

logger = logging.getLogger(__name__)

NO_ERRORS_NOTICE = "No recent errors found."
SMART_SKIPPED_NOTICE = "SMART checks skipped."
INTEGRITY_SKIPPED_NOTICE = "Package integrity checks skipped."
UPDATE_SKIPPED_NOTICE = "Skipped"
DISK_UNAVAILABLE = "Disk usage data not available."
MEMORY_UNAVAILABLE = "Memory usage data not available."
CPU_UNPARSABLE = "Could not parse CPU load."
NO_SMART_DEVICES = "No SMART capable devices found."
INTEGRITY_CLEAN = "All packages passed integrity verification."

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_SIZE_RE = re.compile(r"^\s*(?P<num>\d+(?:[.,]\d+)?)\s*(?P<unit>[BKMGTP]?)(?:i?B?)\s*$", re.IGNORECASE)
_LOAD_RE = re.compile(r"load average:\s*(?P<load>[^,\s]+)", re.IGNORECASE)
_UNIT_POWER = {"": 0, "B": 0, "K": 1, "M": 2, "G": 3, "T": 4, "P": 5}


def _p(text: str, cls: str | None = None) -> str:
    if cls:
        return f'<p class="{cls}">{escape(text)}</p>'
    return f"<p>{escape(text)}</p>"


def unavailable(failure: CollectorFailure) -> str:
    """Placeholder for a collector that could not run."""
    return _p(f"Data not available: {failure.reason}", "unavailable")


def _fmt_pct(value: float) -> str:
    return f"{round(value, 1):g}"


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def parse_percent(text: str) -> float:
    """Parse strings like '42%', '42' or '4x2%'; anything else is 0."""
    m = _NUMBER_RE.search(text or "")
    if not m:
        return 0.0
    return clamp_percent(float(m.group()))


def usage_bar(percent: float) -> str:
    """Horizontal bar filled to `percent` (clamped to 0..100)."""
    pct = clamp_percent(percent)
    level = "crit" if pct >= 90 else "warn" if pct >= 75 else "ok"
    return (
        f'<div class="bar"><div class="bar-fill {level}" '
        f'style="width: {_fmt_pct(pct)}%"></div></div>'
    )


def render_preformatted(text: str) -> str:
    return f"<pre>{escape(text)}</pre>"


def render_disk_usage(artifact: TextArtifact) -> str:
    """Render `df -hP` output as a table with usage bars."""
    if isinstance(artifact, CollectorFailure):
        return unavailable(artifact)
    lines = (artifact or "").splitlines()
    rows: list[str] = []
    for line in lines[1:]:
        cols = line.split(None, 5)
        if len(cols) < 6:
            continue
        fs, size, used, avail, use_pct, mount = cols
        pct = parse_percent(use_pct)
        rows.append(
            "<tr>"
            f"<td>{escape(fs)}</td><td>{escape(size)}</td><td>{escape(used)}</td>"
            f"<td>{escape(avail)}</td><td>{usage_bar(pct)} {_fmt_pct(pct)}%</td>"
            f"<td>{escape(mount)}</td>"
            "</tr>"
        )
    if not rows:
        return _p(DISK_UNAVAILABLE, "unavailable")
    return (
        "<table><thead><tr><th>Filesystem</th><th>Size</th><th>Used</th>"
        "<th>Avail</th><th>Use</th><th>Mounted on</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def parse_size(token: str) -> float | None:
    """Parse '16G', '15Gi', '900MiB', '2048' into a byte-like quantity."""
    m = _SIZE_RE.match(token)
    if not m:
        return None
    num = float(m.group("num").replace(",", "."))
    return num * 1024 ** _UNIT_POWER[m.group("unit").upper()]


def memory_usage_percent(text: str) -> float | None:
    """Used/total percentage from the `Mem:` line, or None when unavailable."""
    for line in text.splitlines():
        if not line.lstrip().startswith("Mem:"):
            continue
        cols = line.split()
        if len(cols) < 3:
            return None
        total = parse_size(cols[1])
        used = parse_size(cols[2])
        if total is None or used is None or total <= 0:
            return None
        return used / total * 100
    return None


def render_memory_usage(artifact: TextArtifact) -> str:
    """Render `free -h` output with a usage bar."""
    if isinstance(artifact, CollectorFailure):
        return unavailable(artifact)
    text = artifact or ""
    pct = memory_usage_percent(text)
    if pct is None:
        return _p(MEMORY_UNAVAILABLE, "unavailable")
    return (
        f"<p>Memory used: {_fmt_pct(clamp_percent(pct))}%</p>"
        f"{usage_bar(pct)}"
        f"{render_preformatted(text.strip())}"
    )


def parse_load_average(text: str) -> float | None:
    """First load-average figure from the first line of a `top` snapshot."""
    first = text.splitlines()[0] if text else ""
    m = _LOAD_RE.search(first)
    if not m:
        return None
    try:
        return float(m.group("load"))
    except ValueError:
        return None


def render_cpu_load(artifact: TextArtifact) -> str:
    """Render a `top -bn1` snapshot with a 1-minute load bar."""
    if isinstance(artifact, CollectorFailure):
        return unavailable(artifact)
    text = artifact or ""
    load = parse_load_average(text)
    if load is None:
        body = _p(CPU_UNPARSABLE, "unavailable")
    else:
        pct = min(max(load, 0.0), 1.0) * 100
        body = f"<p>Load average (1 min): {escape(str(load))}</p>{usage_bar(pct)}"
    if text.strip():
        body += render_preformatted(text.strip())
    return body


def render_smart_status(devices: Mapping[str, str] | CollectorFailure | None) -> str:
    if devices is None:
        return _p(SMART_SKIPPED_NOTICE, "skipped")
    if isinstance(devices, CollectorFailure):
        return unavailable(devices)
    if not devices:
        return _p(NO_SMART_DEVICES)
    parts = []
    for device, text in devices.items():
        parts.append(f"<h3>{escape(device)}</h3>{render_preformatted(text.strip())}")
    return "".join(parts)


def render_package_integrity(artifact: TextArtifact, failing: Sequence[str] = ()) -> str:
    if artifact is None:
        return _p(INTEGRITY_SKIPPED_NOTICE, "skipped")
    if isinstance(artifact, CollectorFailure):
        return unavailable(artifact)
    if not failing and not artifact.strip():
        return _p(INTEGRITY_CLEAN)
    parts = []
    if failing:
        items = "".join(f"<li>{escape(name)}</li>" for name in failing)
        parts.append(f"<p>Packages with modified or missing files:</p><ul>{items}</ul>")
    if artifact.strip():
        parts.append(render_preformatted(artifact.strip()))
    return "".join(parts)


def render_system_info(info: Mapping[str, str] | CollectorFailure, update_status: TextArtifact) -> str:
    if isinstance(info, CollectorFailure):
        rows = [("System", f"not available ({info.reason})")]
    else:
        rows = list(info.items())

    transcript = ""
    if update_status is None:
        rows.append(("Package update", UPDATE_SKIPPED_NOTICE))
    elif isinstance(update_status, CollectorFailure):
        rows.append(("Package update", f"Failed: {update_status.reason}"))
    else:
        rows.append(("Package update", "Completed"))
        tail = "\n".join(update_status.strip().splitlines()[-20:])
        if tail:
            transcript = f"<details><summary>Update output</summary>{render_preformatted(tail)}</details>"

    body = "".join(f"<tr><th>{escape(k)}</th><td>{escape(v)}</td></tr>" for k, v in rows)
    return f'<table class="kv">{body}</table>{transcript}'


def highlight_message(entry: LogEntry) -> Markup:
    """Escape the message and wrap error/fail/critical tokens."""
    msg = entry.message
    out: list[str] = []
    pos = 0
    for start, end in entry.message_highlights():
        out.append(escape(msg[pos:start]))
        out.append(Markup('<span class="hl">%s</span>') % msg[start:end])
        pos = end
    out.append(escape(msg[pos:]))
    return Markup("").join(out)


def render_log_table(entries: Sequence[LogEntry], classifier: Classifier, tz: tzinfo | None = None) -> str:
    """Render classified log entries as a table."""
    if not entries:
        return _p(NO_ERRORS_NOTICE)
    rows = []
    for e in entries:
        c = classifier.classify(e.process)
        sev = c.severity
        rows.append(
            "<tr>"
            f"<td>{escape(e.display_timestamp(tz))}</td>"
            f"<td>{escape(e.host)}</td>"
            f"<td>{escape(e.process)}</td>"
            f"<td>{highlight_message(e)}</td>"
            f'<td><span class="sev sev-{sev.value.lower()}" style="color: {sev.color}">'
            f"{sev.label}</span> {escape(c.explanation)}</td>"
            "</tr>"
        )
    return (
        '<table class="log"><thead><tr><th>Time</th><th>Host</th><th>Process</th>'
        "<th>Message</th><th>Explanation</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def render_error_log(artifact: TextArtifact, classifier: Classifier, tz: tzinfo | None = None) -> str:
    """Parse the filtered log lines and render the classified table."""
    if isinstance(artifact, CollectorFailure):
        return unavailable(artifact)
    text = artifact or ""
    entries = parse_lines(text.splitlines())
    body = render_log_table(entries, classifier, tz)
    if entries:
        body += f"<details><summary>Raw log lines</summary>{render_preformatted(text.strip())}</details>"
    return body


def render_all(
    artifacts: Artifacts,
    *,
    classifier: Classifier,
    tz: tzinfo | None = None,
) -> dict[SectionKind, str]:
    """Render every section; a renderer that raises only spoils its own section."""
    jobs: dict[SectionKind, Callable[[], str]] = {
        SectionKind.SYSTEM_INFO: lambda: render_system_info(artifacts.system_info, artifacts.update_status),
        SectionKind.DISK_USAGE: lambda: render_disk_usage(artifacts.disk),
        SectionKind.MEMORY_USAGE: lambda: render_memory_usage(artifacts.memory),
        SectionKind.CPU_LOAD: lambda: render_cpu_load(artifacts.cpu),
        SectionKind.SMART_STATUS: lambda: render_smart_status(artifacts.smart),
        SectionKind.SYSTEM_ERRORS: lambda: render_error_log(artifacts.error_log, classifier, tz),
        SectionKind.PACKAGE_INTEGRITY: lambda: render_package_integrity(
            artifacts.integrity, artifacts.failing_packages
        ),
    }
    out: dict[SectionKind, str] = {}
    for kind, job in jobs.items():
        try:
            out[kind] = job()
        except Exception:
            logger.exception("Rendering %s failed; using placeholder", kind.title)
            out[kind] = _p(f"{kind.title} could not be rendered.", "unavailable")
    return out
