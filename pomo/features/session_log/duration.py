"""Duration text used in log entries and daily headings.

The parser must accept everything the formatter emits; the daily totals are
re-derived from this text.
"""
import re

# mm:ss, or H:mm:ss with as many hour digits as needed
DURATION_PATTERN = r"(?:\d+:\d{2}|\d{1,2}):\d{2}"

_DURATION_RE = re.compile(rf"^{DURATION_PATTERN}$")

MILLISECS_IN_SECOND = 1000
SECONDS_IN_HOUR = 3600


def format_duration(millisecs: int) -> str:
    """Render mm:ss below one hour and HH:mm:ss from one hour up."""
    total_seconds = max(0, int(millisecs)) // MILLISECS_IN_SECOND
    hours, remainder = divmod(total_seconds, SECONDS_IN_HOUR)
    minutes, seconds = divmod(remainder, 60)

    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def parse_duration(text: str) -> int:
    """Parse mm:ss or HH:mm:ss into milliseconds."""
    text = text.strip()
    if not _DURATION_RE.match(text):
        raise ValueError(f"Malformed duration: {text!r}")

    parts = [int(part) for part in text.split(":")]
    if len(parts) == 2:
        hours, (minutes, seconds) = 0, parts
    else:
        hours, minutes, seconds = parts

    return ((hours * 60 + minutes) * 60 + seconds) * MILLISECS_IN_SECOND
