"""Request and response schemas for the prompts API"""

from typing import Optional

from pydantic import BaseModel

from pomo.features.prompts.domain import Prompt
from pomo.features.timer.domain import EndChoice


class ResolvePromptRequest(BaseModel):
    """Answer to a prompt; only the field matching the prompt kind is read"""
    approved: Optional[bool] = None
    choice: Optional[EndChoice] = None
    reason: Optional[str] = None


class ResolvePromptResponse(BaseModel):
    """Response model for a resolved prompt"""
    prompt: Prompt
    message: str
