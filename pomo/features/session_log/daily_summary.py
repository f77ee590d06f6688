"""Daily summary maintenance.

A log is split into sections by headings. Today's section starts with a
heading line carrying three totals, which are always recomputed by scanning
the finished entries of the section rather than updated incrementally, so
manual edits to the log are picked up on the next write.
"""
import logging
import re
from datetime import date
from typing import List, Optional, Tuple

from pomo.features.session_log.domain import (
    BREAK_SYMBOL,
    DURATION_SEPARATOR,
    POMO_SYMBOL,
    QUALIFIER_KINDS,
    TOTAL_SYMBOL,
    DailyTotals,
)
from pomo.features.session_log.duration import DURATION_PATTERN, format_duration, parse_duration
from pomo.utils.datetime_helper import weekday_name

logger = logging.getLogger(__name__)

HEADING_PREFIX = "## Pomodoro "

# Any top-level or second-level heading closes a section
SECTION_BOUNDARY_RE = re.compile(r"^#{1,2}\s")

ENTRY_RE = re.compile(
    rf"^\[(?P<symbol>{POMO_SYMBOL}|{BREAK_SYMBOL})(?: (?P<qualifier>[^\]]+))?\] "
    rf".*?{DURATION_SEPARATOR}(?P<duration>{DURATION_PATTERN})(?=\s|$)"
)


def heading_date_prefix(day: date) -> str:
    return f"{HEADING_PREFIX}{day.isoformat()}"


def format_heading(day: date, totals: DailyTotals) -> str:
    """
    Build the heading line for a day.

    Example:
        ## Pomodoro 2026-10-19 (Monday) — 🍅 45:00, 🏖 05:00, Σ 50:00
    """
    return (
        f"{heading_date_prefix(day)} ({weekday_name(day)}){DURATION_SEPARATOR}"
        f"{POMO_SYMBOL} {format_duration(totals.work_ms)}, "
        f"{BREAK_SYMBOL} {format_duration(totals.break_ms)}, "
        f"{TOTAL_SYMBOL} {format_duration(totals.total_ms)}"
    )


def is_heading_for(line: str, day: date) -> bool:
    prefix = heading_date_prefix(day)
    return line == prefix or line.startswith(prefix + " ")


def find_section(lines: List[str], day: date) -> Optional[Tuple[int, int]]:
    """
    Locate a day's section.

    Returns (heading_index, end_index) where end_index is the index of the
    next heading or len(lines), or None if the day has no heading.
    """
    for index, line in enumerate(lines):
        if is_heading_for(line, day):
            end = index + 1
            while end < len(lines) and not SECTION_BOUNDARY_RE.match(lines[end]):
                end += 1
            return index, end
    return None


def sum_entries(lines: List[str]) -> DailyTotals:
    """Sum the durations of finished entries, ignoring start and unsuccessful lines."""
    totals = DailyTotals()

    for line in lines:
        match = ENTRY_RE.match(line.strip())
        if not match:
            continue

        kind = QUALIFIER_KINDS.get(match.group("qualifier"))
        if kind is None or not kind.is_finished:
            continue

        duration_ms = parse_duration(match.group("duration"))
        if match.group("symbol") == POMO_SYMBOL:
            totals.work_ms += duration_ms
        else:
            totals.break_ms += duration_ms

    return totals


def _split(content: str) -> List[str]:
    return content.splitlines()


def _join(lines: List[str]) -> str:
    return "\n".join(lines) + "\n" if lines else ""


def refresh_heading(content: str, day: date) -> str:
    """Rewrite only the heading line of the day's section with fresh totals."""
    lines = _split(content)
    section = find_section(lines, day)
    if section is None:
        return content

    start, end = section
    totals = sum_entries(lines[start + 1:end])
    lines[start] = format_heading(day, totals)
    logger.debug(
        f"Daily totals for {day.isoformat()}: work={totals.work_ms}ms break={totals.break_ms}ms"
    )
    return _join(lines)


def add_entry(content: str, entry_line: str, day: date) -> str:
    """
    Append an entry to the end of the day's section and refresh its heading.

    A fresh section is appended at the end of the log when the day has no
    heading yet.
    """
    lines = _split(content)
    section = find_section(lines, day)

    if section is None:
        while lines and not lines[-1].strip():
            lines.pop()
        if lines:
            lines.append("")
        lines.append(format_heading(day, DailyTotals()))
        lines.append(entry_line)
        logger.info(f"Created daily section for {day.isoformat()}")
    else:
        start, end = section
        insert_at = end
        # Keep blank lines that separate this section from the next one
        while insert_at > start + 1 and not lines[insert_at - 1].strip():
            insert_at -= 1
        lines.insert(insert_at, entry_line)

    return refresh_heading(_join(lines), day)


def prepend_entry(content: str, entry_line: str) -> str:
    """Put the entry on top of the log, used for destinations without daily sections."""
    return entry_line + "\n" + content
