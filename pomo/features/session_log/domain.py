"""Log entry models"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from pomo.features.session_log.duration import format_duration
from pomo.features.timer.domain import Mode

POMO_SYMBOL = "🍅"
BREAK_SYMBOL = "🏖"
TOTAL_SYMBOL = "Σ"
DURATION_SEPARATOR = " — "


class EntryKind(str, Enum):
    """Kind of log line, rendered as the qualifier inside the tag"""
    START = "start"
    COMPLETED = "completed"
    QUIT_EARLY = "quit_early"
    OVERTIME = "overtime"
    UNSUCCESSFUL = "unsuccessful"

    @property
    def qualifier(self) -> Optional[str]:
        return _QUALIFIERS[self]

    @property
    def is_finished(self) -> bool:
        """Finished entries carry a duration that counts toward daily totals"""
        return self in (EntryKind.COMPLETED, EntryKind.QUIT_EARLY, EntryKind.OVERTIME)


_QUALIFIERS = {
    EntryKind.START: "Start",
    EntryKind.COMPLETED: None,
    EntryKind.QUIT_EARLY: "Quit Early",
    EntryKind.OVERTIME: "Overtime",
    EntryKind.UNSUCCESSFUL: "Unsuccessful",
}

QUALIFIER_KINDS = {qualifier: kind for kind, qualifier in _QUALIFIERS.items()}


def mode_symbol(mode: Mode) -> str:
    return POMO_SYMBOL if mode == Mode.POMO else BREAK_SYMBOL


class LogEntry(BaseModel):
    """A single line of the session log"""
    mode: Mode
    kind: EntryKind
    time_text: str
    duration_ms: Optional[int] = None
    reason: Optional[str] = None
    note_link: Optional[str] = None

    @property
    def tag(self) -> str:
        qualifier = self.kind.qualifier
        symbol = mode_symbol(self.mode)
        return f"[{symbol} {qualifier}]" if qualifier else f"[{symbol}]"

    def render(self) -> str:
        text = f"{self.tag} {self.time_text}"

        if self.duration_ms is not None and self.duration_ms >= 0:
            text = f"{text}{DURATION_SEPARATOR}{format_duration(self.duration_ms)}"

        if self.reason is not None:
            # Keep the entry on one line
            reason = " ".join(self.reason.split())
            text = f"{text} Reason: {reason}" if reason else f"{text} Reason: -"

        # Note link always goes last
        if self.note_link:
            text = f"{text} {self.note_link}"

        return text


class DailyTotals(BaseModel):
    """Totals for one daily section, in milliseconds"""
    work_ms: int = 0
    break_ms: int = 0

    @property
    def total_ms(self) -> int:
        return self.work_ms + self.break_ms
