"""Collaborator interfaces consumed by the timer and the session logger."""
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from pomo.features.timer.domain import EndChoice, Mode


class Clock(ABC):
    """Source of the current instant. All duration math is relative to it."""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware instant"""


class ConfirmationGateway(ABC):
    """
    Asks the user to approve transitions.

    Every call resolves exactly once. There is no timeout: an unanswered
    prompt keeps the caller suspended.
    """

    @abstractmethod
    async def confirm_start(self, candidate_mode: Mode) -> bool:
        """Binary start confirmation"""

    @abstractmethod
    async def confirm_end_of_session(
        self,
        candidate_next_mode: Mode,
        allow_unsuccessful: bool,
    ) -> EndChoice:
        """Multi-choice end-of-session prompt"""

    @abstractmethod
    async def prompt_unsuccessful_reason(self) -> str:
        """Free-form reason for an unsuccessful pomodoro, may be empty"""


class LogStore(ABC):
    """Named text blobs addressed by path"""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Whether the blob exists"""

    @abstractmethod
    async def create(self, path: str, text: str = "") -> None:
        """Create the blob with initial content"""

    @abstractmethod
    async def read(self, path: str) -> str:
        """Full content"""

    @abstractmethod
    async def write(self, path: str, text: str) -> None:
        """Replace full content"""


class NotificationSink(ABC):
    """Audio cues, system notifications and in-app notices"""

    @abstractmethod
    def play_sound(self) -> None:
        """End-of-session sound"""

    @abstractmethod
    def show_system_notification(self, mode: Mode, use_emoji: bool) -> None:
        """System notification for the mode that just ended"""

    @abstractmethod
    def notice(self, message: str) -> None:
        """Short user-visible message"""

    def start_ambient(self) -> None:
        """Start ambient audio (white noise); optional"""

    def stop_ambient(self) -> None:
        """Stop ambient audio; optional"""


class NoteResolver(ABC):
    """Resolves note identity for log annotation and daily-note destinations"""

    @abstractmethod
    def active_note(self) -> Optional[str]:
        """Identifier of the currently active note, if any"""

    @abstractmethod
    def render_link(self, note_ref: str) -> str:
        """Markdown link to the note"""

    @abstractmethod
    def daily_note_path(self, day: date) -> str:
        """Path of the daily note for the given day"""
