from __future__ import annotations

from datetime import date

from pomo.features.session_log import daily_summary
from pomo.features.session_log.domain import DailyTotals

TODAY = date(2026, 10, 19)
YESTERDAY = date(2026, 10, 18)


def _heading(work: str, brk: str, total: str, day: date = TODAY, weekday: str = "Monday") -> str:
    return f"## Pomodoro {day.isoformat()} ({weekday}) — 🍅 {work}, 🏖 {brk}, Σ {total}"


def test_format_heading() -> None:
    totals = DailyTotals(work_ms=45 * 60_000, break_ms=5 * 60_000)
    assert daily_summary.format_heading(TODAY, totals) == _heading("45:00", "05:00", "50:00")


def test_totals_from_two_pomos_and_a_break() -> None:
    content = ""
    for line in [
        "[🍅] 09:00:00–09:25:00 — 25:00",
        "[🏖] 09:25:00–09:30:00 — 05:00",
        "[🍅 Quit Early] 09:30:00–09:50:00 — 20:00",
    ]:
        content = daily_summary.add_entry(content, line, TODAY)

    lines = content.splitlines()
    assert lines[0] == _heading("45:00", "05:00", "50:00")
    assert lines[1:] == [
        "[🍅] 09:00:00–09:25:00 — 25:00",
        "[🏖] 09:25:00–09:30:00 — 05:00",
        "[🍅 Quit Early] 09:30:00–09:50:00 — 20:00",
    ]


def test_start_and_unsuccessful_lines_do_not_count() -> None:
    lines = [
        "[🍅 Start] 09:00:00",
        "[🍅 Overtime] 09:00:00–09:27:10 — 27:10 [[Projects/Thesis]]",
        "[🍅 Unsuccessful] 10:00:00 Reason: meeting — 10:00",
        "[🏖 Start] 09:27:10",
        "some free text — 99:00",
    ]
    totals = daily_summary.sum_entries(lines)
    assert totals.work_ms == (27 * 60 + 10) * 1000
    assert totals.break_ms == 0


def test_recompute_is_idempotent() -> None:
    content = daily_summary.add_entry("", "[🍅] 09:00:00–09:25:00 — 25:00", TODAY)
    once = daily_summary.refresh_heading(content, TODAY)
    twice = daily_summary.refresh_heading(once, TODAY)
    assert once == twice == content


def test_manual_edits_are_picked_up() -> None:
    content = daily_summary.add_entry("", "[🍅] 09:00:00–09:25:00 — 25:00", TODAY)
    edited = content.replace("— 25:00", "— 15:00")
    refreshed = daily_summary.refresh_heading(edited, TODAY)
    assert refreshed.splitlines()[0] == _heading("15:00", "00:00", "15:00")


def test_new_day_gets_its_own_section() -> None:
    content = (
        _heading("25:00", "00:00", "25:00", day=YESTERDAY, weekday="Sunday") + "\n"
        "[🍅] 09:00:00–09:25:00 — 25:00\n"
    )
    updated = daily_summary.add_entry(content, "[🏖] 10:00:00–10:05:00 — 05:00", TODAY)
    lines = updated.splitlines()

    assert lines[:2] == content.splitlines()
    assert lines[2] == ""
    assert lines[3] == _heading("00:00", "05:00", "05:00")
    assert lines[4] == "[🏖] 10:00:00–10:05:00 — 05:00"


def test_section_stops_at_next_heading() -> None:
    content = (
        _heading("25:00", "00:00", "25:00") + "\n"
        "[🍅] 09:00:00–09:25:00 — 25:00\n"
        "\n"
        "## Notes\n"
        "[🍅] 08:00:00–08:25:00 — 25:00\n"
    )
    updated = daily_summary.add_entry(content, "[🏖] 09:25:00–09:30:00 — 05:00", TODAY)

    assert updated.splitlines() == [
        _heading("25:00", "05:00", "30:00"),
        "[🍅] 09:00:00–09:25:00 — 25:00",
        "[🏖] 09:25:00–09:30:00 — 05:00",
        "",
        "## Notes",
        "[🍅] 08:00:00–08:25:00 — 25:00",
    ]


def test_subheadings_stay_inside_the_section() -> None:
    lines = [
        _heading("00:00", "00:00", "00:00"),
        "### Morning",
        "[🍅] 09:00:00–09:25:00 — 25:00",
        "# Next",
    ]
    assert daily_summary.find_section(lines, TODAY) == (0, 3)


def test_malformed_heading_is_rewritten() -> None:
    content = "## Pomodoro 2026-10-19 totals unknown\n[🍅] 09:00:00–09:25:00 — 25:00\n"
    refreshed = daily_summary.refresh_heading(content, TODAY)
    assert refreshed.splitlines()[0] == _heading("25:00", "00:00", "25:00")


def test_refresh_without_heading_leaves_content_alone() -> None:
    content = "# My notes\n"
    assert daily_summary.refresh_heading(content, TODAY) == content


def test_prepend_entry() -> None:
    assert daily_summary.prepend_entry("old\n", "new") == "new\nold\n"


def test_very_long_overtime_still_counts() -> None:
    lines = ["[🍅 Overtime] 09:00:00–13:00:00 — 101:00:00"]
    assert daily_summary.sum_entries(lines).work_ms == 101 * 3_600_000
