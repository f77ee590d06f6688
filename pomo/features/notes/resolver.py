"""Note identity for log links and daily-note destinations"""
import logging
from datetime import date
from pathlib import PurePosixPath
from typing import Optional

from pomo.config import TimerSettings
from pomo.features.timer.ports import NoteResolver

logger = logging.getLogger(__name__)


class VaultNoteResolver(NoteResolver):
    """
    Tracks the note the client reports as active and names daily notes.

    Only the note path is kept; the note itself is never loaded.
    """

    def __init__(self, settings: TimerSettings):
        self.settings = settings
        self._active_note: Optional[str] = None

    def set_active_note(self, note_ref: Optional[str]) -> None:
        self._active_note = note_ref or None
        logger.debug(f"Active note set to {self._active_note}")

    def active_note(self) -> Optional[str]:
        return self._active_note

    def render_link(self, note_ref: str) -> str:
        """Wiki link without the .md extension, e.g. [[Projects/Thesis]]"""
        path = PurePosixPath(note_ref)
        if path.suffix == ".md":
            path = path.with_suffix("")
        return f"[[{path.as_posix()}]]"

    def daily_note_path(self, day: date) -> str:
        name = day.strftime(self.settings.daily_note_format) + ".md"
        folder = self.settings.daily_note_folder.strip("/")
        return f"{folder}/{name}" if folder else name
