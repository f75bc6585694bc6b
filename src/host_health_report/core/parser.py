"""Syslog line parser.

Lines look like ``<timestamp> <host> <process>: <message>`` (the output of
rsyslog's high-precision template or ``journalctl -o short-iso``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime

from ..errors import ParseError
from .models import LogEntry

logger = logging.getLogger(__name__)

HIGHLIGHT_RE = re.compile(r"error|fail|critical", re.IGNORECASE)
_TOKEN_RE = re.compile(r"\S+")


def find_highlights(text: str) -> tuple[tuple[int, int], ...]:
    """Return spans of the error/fail/critical tokens in `text`."""
    return tuple(m.span() for m in HIGHLIGHT_RE.finditer(text))


def parse_timestamp(token: str) -> datetime | None:
    """Parse an RFC 3339 style timestamp into an aware UTC datetime."""
    try:
        ts = datetime.fromisoformat(token.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def parse_line(line: str) -> LogEntry:
    """Parse one raw log line into a LogEntry.

    Raises ParseError only for blank input; an unparsable timestamp is kept
    verbatim and short lines degrade to a message-only entry.
    """
    raw = line.rstrip("\r\n")
    if not raw.strip():
        raise ParseError("empty log line")

    highlights = find_highlights(raw)
    tokens = list(_TOKEN_RE.finditer(raw))
    ts_token = tokens[0].group()
    timestamp = parse_timestamp(ts_token)

    if len(tokens) < 3:
        message = raw.strip()
        return LogEntry(
            timestamp=timestamp,
            timestamp_raw=ts_token,
            host="",
            process="",
            message=message,
            raw=raw,
            highlights=highlights,
            message_offset=raw.index(message),
        )

    host = tokens[1].group()
    rest_start = tokens[2].start()
    rest = raw[rest_start:]

    proc, sep, msg = rest.partition(":")
    if sep and proc:
        # "proc: msg" is the canonical shape; drop the single separator space.
        message = msg[1:] if msg.startswith(" ") else msg
        offset = rest_start + len(proc) + 1 + (len(msg) - len(message))
    else:
        proc = rest
        message = ""
        offset = None

    return LogEntry(
        timestamp=timestamp,
        timestamp_raw=ts_token,
        host=host,
        process=proc,
        message=message,
        raw=raw,
        highlights=highlights,
        message_offset=offset,
    )


def parse_lines(lines: Iterable[str]) -> list[LogEntry]:
    """Parse many lines, skipping blank ones."""
    out: list[LogEntry] = []
    for line_no, line in enumerate(lines, start=1):
        try:
            out.append(parse_line(line))
        except ParseError:
            logger.debug("Skipping blank log line %d", line_no)
    return out
