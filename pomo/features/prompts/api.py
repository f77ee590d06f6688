"""Prompts API endpoints"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from pomo.dependencies import TimerServices, get_services
from pomo.features.prompts.domain import Prompt, PromptStateError
from pomo.features.prompts.schemas import ResolvePromptRequest, ResolvePromptResponse
from pomo.features.prompts.service import PromptBroker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompts", tags=["prompts"])


def _broker(services: TimerServices) -> PromptBroker:
    if services.prompts is None:
        raise HTTPException(status_code=404, detail="Prompts are answered automatically")
    return services.prompts


@router.get("", response_model=List[Prompt])
async def list_pending_prompts(services: TimerServices = Depends(get_services)):
    """Prompts waiting for an answer, oldest first"""
    if services.prompts is None:
        return []
    return services.prompts.pending()


@router.get("/{prompt_id}", response_model=Prompt)
async def get_prompt(prompt_id: int, services: TimerServices = Depends(get_services)):
    try:
        return _broker(services).get(prompt_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Prompt not found")


@router.post("/{prompt_id}/resolve", response_model=ResolvePromptResponse)
async def resolve_prompt(
    prompt_id: int,
    request: ResolvePromptRequest,
    services: TimerServices = Depends(get_services),
):
    """
    Answer a pending prompt.

    Raises:
        404: Prompt not found
        409: Prompt already answered or abandoned
        422: Answer does not fit the prompt
    """
    broker = _broker(services)
    try:
        prompt = broker.resolve(prompt_id, request)
    except KeyError:
        raise HTTPException(status_code=404, detail="Prompt not found")
    except PromptStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ResolvePromptResponse(prompt=prompt, message=f"Prompt {prompt_id} resolved")
