"""Domain models for confirmation prompts"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from pomo.features.timer.domain import EndChoice, Mode


class PromptKind(str, Enum):
    """Which question is being asked"""
    CONFIRM_START = "confirm_start"
    END_OF_SESSION = "end_of_session"
    UNSUCCESSFUL_REASON = "unsuccessful_reason"


class PromptStatus(str, Enum):
    """Prompt lifecycle"""
    PENDING = "pending"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


class PromptStateError(ValueError):
    """Raised when answering a prompt that is no longer pending"""


class Prompt(BaseModel):
    """A question waiting for the user"""
    id: int
    kind: PromptKind
    title: str
    candidate_mode: Optional[Mode] = None
    choices: List[EndChoice] = Field(default_factory=list)
    status: PromptStatus = PromptStatus.PENDING
    created_at: datetime
    resolved_at: Optional[datetime] = None

    def is_pending(self) -> bool:
        return self.status == PromptStatus.PENDING
