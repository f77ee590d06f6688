"""Timer state models"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

MILLISECS_IN_MINUTE = 60 * 1000


class Mode(str, Enum):
    """Timer mode"""
    POMO = "pomo"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    NO_TIMER = "no_timer"

    @property
    def is_break(self) -> bool:
        return self in (Mode.SHORT_BREAK, Mode.LONG_BREAK)


class EndChoice(str, Enum):
    """Answer to the end-of-session prompt"""
    CONTINUE = "continue"
    NEXT = "next"
    QUIT = "quit"
    UNSUCCESSFUL = "unsuccessful"


class TimerPhase(str, Enum):
    """Coarse state derived from TimerState"""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVERTIME = "overtime"
    AWAITING_END_DECISION = "awaiting_end_decision"


class NoActiveTimerError(RuntimeError):
    """Raised when a timing operation is asked of an idle timer"""


class TimerState(BaseModel):
    """Mutable session state, owned and mutated by a single TimerCore"""
    mode: Mode = Mode.NO_TIMER
    start_time: Optional[datetime] = None  # when the running stretch started
    end_time: Optional[datetime] = None  # nominal end if not paused
    paused: bool = False
    paused_time_ms: int = 0  # remaining time, or elapsed overtime when in overtime
    auto_paused: bool = False
    in_overtime: bool = False
    awaiting_end_decision: bool = False
    session_id: int = 0  # changes whenever a new session is set up; 0 while idle
    pomos_since_start: int = 0
    cycles_since_last_auto_stop: int = 0
    # True start of the logical session, survives pause/resume
    pomo_session_start_time: Optional[datetime] = None
    break_session_start_time: Optional[datetime] = None
    active_note_ref: Optional[str] = None
    is_custom: bool = False
    custom_pomo_minutes: Optional[float] = None
    custom_break_minutes: Optional[float] = None


class TimerSnapshot(BaseModel):
    """Read-only view of the timer for API clients"""
    phase: TimerPhase
    mode: Mode
    display: str
    paused: bool
    in_overtime: bool
    awaiting_end_decision: bool
    elapsed_ms: int
    pomos_since_start: int
    cycles_since_last_auto_stop: int
    is_custom: bool
    end_time: Optional[datetime] = None
    active_note_ref: Optional[str] = None
