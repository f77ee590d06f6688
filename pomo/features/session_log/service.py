"""Session logger - formats entries and keeps the daily summary current"""
import logging
from datetime import datetime
from typing import Optional

from pomo.config import LogDestination, TimerSettings
from pomo.features.session_log import daily_summary
from pomo.features.session_log.domain import EntryKind, LogEntry
from pomo.features.timer.domain import Mode
from pomo.features.timer.ports import Clock, LogStore, NoteResolver
from pomo.utils.datetime_helper import format_time_of_day, format_time_range

logger = logging.getLogger(__name__)

# Finished sessions within this distance of their nominal length count as completed
CLASSIFICATION_TOLERANCE_MS = 1000


def classify_session(elapsed_ms: int, nominal_ms: int) -> EntryKind:
    """Quit Early / Overtime / Completed from elapsed versus nominal duration"""
    difference = elapsed_ms - nominal_ms
    if difference < -CLASSIFICATION_TOLERANCE_MS:
        return EntryKind.QUIT_EARLY
    if difference > CLASSIFICATION_TOLERANCE_MS:
        return EntryKind.OVERTIME
    return EntryKind.COMPLETED


class SessionLogger:
    """Writes log entries to the configured destination"""

    def __init__(
        self,
        settings: TimerSettings,
        store: LogStore,
        clock: Clock,
        notes: Optional[NoteResolver] = None,
    ):
        self.settings = settings
        self.store = store
        self.clock = clock
        self.notes = notes

    @property
    def uses_daily_sections(self) -> bool:
        return self.settings.log_destination != LogDestination.FIXED_FILE

    def destination_path(self) -> str:
        """Path of the regular log for the current day"""
        destination = self.settings.log_destination

        if destination == LogDestination.CUSTOM_NOTE:
            return self.settings.log_note

        if destination == LogDestination.ACTIVE_DAILY_NOTE:
            if self.notes is None:
                raise ValueError("A note resolver is required for the active_daily_note destination")
            return self.notes.daily_note_path(self.clock.now().date())

        return self.settings.log_file

    async def log_start(self, mode: Mode, note_ref: Optional[str] = None) -> LogEntry:
        """Write a session-start line and refresh the daily heading"""
        entry = LogEntry(
            mode=mode,
            kind=EntryKind.START,
            time_text=format_time_of_day(self.clock.now()),
            note_link=self._note_link(note_ref),
        )
        await self._write(self.destination_path(), entry, self.uses_daily_sections)
        return entry

    async def log_session(
        self,
        mode: Mode,
        duration_ms: int,
        nominal_ms: int,
        started_at: Optional[datetime] = None,
        note_ref: Optional[str] = None,
    ) -> LogEntry:
        """
        Write a finished pomodoro or break.

        Args:
            mode: Mode of the session that ended
            duration_ms: Active time spent in the session
            nominal_ms: Configured length of the session
            started_at: Logical start of the session, defaults to now
            note_ref: Note that was active when the session started

        Returns:
            The written entry
        """
        if mode == Mode.NO_TIMER:
            raise ValueError("Cannot log a session for NO_TIMER")

        now = self.clock.now()
        entry = LogEntry(
            mode=mode,
            kind=classify_session(duration_ms, nominal_ms),
            time_text=format_time_range(started_at or now, now),
            duration_ms=max(0, duration_ms),
            note_link=self._note_link(note_ref),
        )
        await self._write(self.destination_path(), entry, self.uses_daily_sections)
        return entry

    async def log_unsuccessful(self, reason: str, note_ref: Optional[str] = None) -> LogEntry:
        """Write an unsuccessful pomodoro with its reason and no duration"""
        entry = LogEntry(
            mode=Mode.POMO,
            kind=EntryKind.UNSUCCESSFUL,
            time_text=format_time_of_day(self.clock.now()),
            reason=reason or "",
            note_link=self._note_link(note_ref),
        )

        if self.settings.unsuccessful_log_file:
            await self._write(self.settings.unsuccessful_log_file, entry, daily=False)
        else:
            await self._write(self.destination_path(), entry, self.uses_daily_sections)
        return entry

    async def refresh_daily_summary(self) -> Optional[str]:
        """Recompute today's heading from the log text; returns the heading if present"""
        if not self.uses_daily_sections:
            return None

        path = self.destination_path()
        if not await self.store.exists(path):
            return None

        today = self.clock.now().date()
        content = await self.store.read(path)
        updated = daily_summary.refresh_heading(content, today)
        if updated != content:
            await self.store.write(path, updated)

        lines = updated.splitlines()
        section = daily_summary.find_section(lines, today)
        return lines[section[0]] if section else None

    def _note_link(self, note_ref: Optional[str]) -> Optional[str]:
        if not self.settings.include_active_note_link or not note_ref or self.notes is None:
            return None
        return self.notes.render_link(note_ref)

    async def _get_or_create(self, path: str) -> str:
        if not await self.store.exists(path):
            logger.info(f"Creating pomodoro log file {path}")
            await self.store.create(path, "")
        return path

    async def _write(self, path: str, entry: LogEntry, daily: bool) -> None:
        path = await self._get_or_create(path)
        content = await self.store.read(path)
        line = entry.render()

        if daily:
            content = daily_summary.add_entry(content, line, self.clock.now().date())
        else:
            content = daily_summary.prepend_entry(content, line)

        await self.store.write(path, content)
        logger.info(f"Logged to {path}: {line}")
