"""Request and response schemas for the timer API"""

from typing import List, Optional

from pydantic import BaseModel, Field

from pomo.features.timer.domain import Mode, TimerSnapshot
from pomo.services.notification_service import Notice


class StartTimerRequest(BaseModel):
    """Mode to start; omitted means the next mode in the cycle"""
    mode: Optional[Mode] = None


class StartCustomRequest(BaseModel):
    """Custom pomodoro and break lengths in minutes"""
    pomo_minutes: Optional[float] = Field(default=None, gt=0)
    break_minutes: Optional[float] = Field(default=None, gt=0)


class TimerActionResponse(BaseModel):
    """Result of a timer action"""
    changed: bool
    timer: TimerSnapshot


class TimerStatusResponse(BaseModel):
    """Display string plus the full snapshot"""
    display: str
    timer: TimerSnapshot


class NoticesResponse(BaseModel):
    notices: List[Notice]


class DailySummaryResponse(BaseModel):
    heading: Optional[str] = None
