from __future__ import annotations

import pytest

from pomo.features.session_log.duration import format_duration, parse_duration


@pytest.mark.parametrize(
    "millisecs, expected",
    [
        (0, "00:00"),
        (999, "00:00"),
        (5 * 60_000, "05:00"),
        (25 * 60_000 + 30_000, "25:30"),
        (59 * 60_000 + 59_999, "59:59"),
        (60 * 60_000, "01:00:00"),
        (2 * 3_600_000 + 5 * 60_000 + 7_000, "02:05:07"),
        (123 * 3_600_000 + 4 * 60_000, "123:04:00"),
        (-5_000, "00:00"),
    ],
)
def test_format_duration(millisecs: int, expected: str) -> None:
    assert format_duration(millisecs) == expected


def test_parse_duration_accepts_both_forms() -> None:
    assert parse_duration("25:00") == 25 * 60_000
    assert parse_duration("1:05") == 65_000
    assert parse_duration("01:00:00") == 3_600_000
    assert parse_duration(" 02:05:07 ") == 7_507_000


@pytest.mark.parametrize("text", ["00:00", "05:00", "59:59", "01:00:00", "12:34:56", "100:00:01"])
def test_formatter_output_round_trips(text: str) -> None:
    assert format_duration(parse_duration(text)) == text


@pytest.mark.parametrize("text", ["", "5", "5:0", "abc", "1:2:3:4", "100:00", "1:5:00"])
def test_parse_duration_rejects_malformed_text(text: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(text)
