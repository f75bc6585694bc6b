from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

from host_health_report.core.parser import find_highlights, parse_line, parse_lines, parse_timestamp
from host_health_report.errors import ParseError


def test_parse_systemd_line() -> None:
    entry = parse_line("2024-12-06T10:51:23Z host1 systemd[1]: Failed to start foo.service")
    assert entry.timestamp == datetime(2024, 12, 6, 10, 51, 23, tzinfo=UTC)
    assert entry.timestamp_raw == "2024-12-06T10:51:23Z"
    assert entry.host == "host1"
    assert entry.process == "systemd[1]"
    assert entry.message == "Failed to start foo.service"


def test_parse_offset_timestamp_is_normalized_to_utc() -> None:
    entry = parse_line("2024-12-06T12:51:23.123456+02:00 host1 kernel: oops")
    assert entry.timestamp == datetime(2024, 12, 6, 10, 51, 23, 123456, tzinfo=UTC)


def test_unparsable_timestamp_keeps_raw_token() -> None:
    entry = parse_line("Dec-06 host1 cron[22]: job failed")
    assert entry.timestamp is None
    assert entry.display_timestamp() == "Dec-06"
    assert entry.process == "cron[22]"
    assert entry.message == "job failed"


def test_display_timestamp_converts_timezone() -> None:
    entry = parse_line("2024-12-06T10:51:23Z host1 systemd[1]: x")
    assert entry.display_timestamp(ZoneInfo("Europe/Berlin")) == "2024-12-06 11:51:23 CET"


def test_no_colon_means_whole_remainder_is_process() -> None:
    entry = parse_line("2024-12-06T10:51:23Z host1 something went wrong")
    assert entry.process == "something went wrong"
    assert entry.message == ""


def test_only_first_colon_splits() -> None:
    entry = parse_line("2024-12-06T10:51:23Z host1 sshd[9]: error: key: bad")
    assert entry.process == "sshd[9]"
    assert entry.message == "error: key: bad"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("2024-12-06T10:51:23Z", "2024-12-06T10:51:23Z"),
        ("lonely error", "lonely error"),
    ],
)
def test_short_lines_degrade_gracefully(line: str, expected: str) -> None:
    entry = parse_line(line)
    assert entry.host == ""
    assert entry.process == ""
    assert entry.message == expected


@pytest.mark.parametrize("line", ["", "   ", "\n"])
def test_blank_line_raises(line: str) -> None:
    with pytest.raises(ParseError):
        parse_line(line)


@pytest.mark.parametrize(
    "suffix",
    [
        "systemd[1]: Failed to start foo.service",
        "kernel: [  12.3] usb 1-1: device descriptor read/64, error -71",
        "NetworkManager[812]: <warn>  [1733482403.1] dhcp4 (wlan0): request timed out",
    ],
)
def test_process_and_message_recover_suffix(suffix: str) -> None:
    entry = parse_line(f"2024-12-06T10:51:23Z host1 {suffix}")
    assert f"{entry.process}: {entry.message}" == suffix


def test_highlights_are_case_insensitive() -> None:
    spans = find_highlights("ERROR then Failed then critical")
    assert spans == ((0, 5), (11, 15), (23, 31))


def test_message_highlights_map_into_message() -> None:
    entry = parse_line("2024-12-06T10:51:23Z host1 errord[1]: Failed hard")
    # "error" inside the process name is not part of the message
    assert entry.message_highlights() == [(0, 4)]
    assert entry.message[0:4] == "Fail"


def test_parse_timestamp_assumes_utc_for_naive() -> None:
    assert parse_timestamp("2024-12-06T10:51:23") == datetime(2024, 12, 6, 10, 51, 23, tzinfo=UTC)
    assert parse_timestamp("yesterday") is None


def test_parse_lines_skips_blank_lines() -> None:
    entries = parse_lines(["", "2024-12-06T10:51:23Z host1 cron: fail", "  "])
    assert len(entries) == 1
    assert entries[0].process == "cron"
