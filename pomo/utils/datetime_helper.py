"""Date/time formatting helpers"""
from datetime import date, datetime

from pomo.features.timer.ports import Clock

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class SystemClock(Clock):
    """Wall clock in the local timezone"""

    def now(self) -> datetime:
        return datetime.now().astimezone()


def weekday_name(day: date) -> str:
    """
    English weekday name, independent of the process locale.

    Returns:
        str: e.g. "Monday"
    """
    return WEEKDAY_NAMES[day.weekday()]


def format_time_of_day(dt: datetime) -> str:
    """Time of day with seconds, e.g. "09:05:30" """
    return dt.strftime("%H:%M:%S")


def format_time_range(start: datetime, end: datetime) -> str:
    """Time range joined with an en dash, e.g. "09:00:00–09:25:00" """
    return f"{format_time_of_day(start)}–{format_time_of_day(end)}"


def millis_between(start: datetime, end: datetime) -> int:
    """Signed milliseconds from start to end"""
    return int((end - start).total_seconds() * 1000)
