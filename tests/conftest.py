from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pomo.config import LogDestination, TimerSettings
from pomo.features.notes.resolver import VaultNoteResolver
from pomo.features.session_log.service import SessionLogger
from pomo.features.timer.domain import EndChoice, Mode
from pomo.features.timer.ports import Clock, ConfirmationGateway
from pomo.features.timer.service import TimerCore
from pomo.infra.storage.file_log_store import MemoryLogStore
from pomo.services.notification_service import LoggingNotificationSink

START = datetime(2026, 10, 19, 9, 0, 0, tzinfo=timezone.utc)  # a Monday
LOG = "Log.md"


class FakeClock(Clock):
    def __init__(self, start: datetime = START):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 0, minutes: float = 0) -> None:
        self.current += timedelta(seconds=seconds, minutes=minutes)


class FakeGateway(ConfirmationGateway):
    def __init__(self):
        self.start_answer = True
        self.end_choice = EndChoice.NEXT
        self.reason = ""
        self.start_calls: list[Mode] = []
        self.end_calls: list[tuple[Mode, bool]] = []
        self.reason_calls = 0

    async def confirm_start(self, candidate_mode: Mode) -> bool:
        self.start_calls.append(candidate_mode)
        return self.start_answer

    async def confirm_end_of_session(self, candidate_next_mode: Mode, allow_unsuccessful: bool) -> EndChoice:
        self.end_calls.append((candidate_next_mode, allow_unsuccessful))
        return self.end_choice

    async def prompt_unsuccessful_reason(self) -> str:
        self.reason_calls += 1
        return self.reason


class FlakyLogStore(MemoryLogStore):
    """Memory store whose writes can be switched to fail"""

    def __init__(self):
        super().__init__()
        self.fail = False

    async def write(self, path: str, text: str) -> None:
        if self.fail:
            raise OSError("disk full")
        await super().write(path, text)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def store() -> FlakyLogStore:
    return FlakyLogStore()


@pytest.fixture
def sink() -> LoggingNotificationSink:
    return LoggingNotificationSink()


@pytest.fixture
def make_settings():
    def _make(**overrides) -> TimerSettings:
        values = {"log_destination": LogDestination.CUSTOM_NOTE, "log_note": LOG}
        values.update(overrides)
        return TimerSettings(**values)

    return _make


@pytest.fixture
def make_timer(clock, gateway, store, sink, make_settings):
    def _make(**overrides) -> TimerCore:
        settings = make_settings(**overrides)
        notes = VaultNoteResolver(settings)
        session_logger = SessionLogger(settings, store, clock, notes)
        return TimerCore(settings, clock, gateway, session_logger, sink, notes)

    return _make


def notice_bodies(sink: LoggingNotificationSink, kind: str = "notice") -> list[str]:
    return [notice.body for notice in sink.recent() if notice.kind == kind]
