from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pomo.dependencies import TimerServices, get_services

router = APIRouter(prefix="/api/notes", tags=["notes"])


class ActiveNoteRequest(BaseModel):
    note: Optional[str] = None


class ActiveNoteResponse(BaseModel):
    note: Optional[str] = None
    link: Optional[str] = None


@router.get("/active", response_model=ActiveNoteResponse)
async def get_active_note(services: TimerServices = Depends(get_services)):
    note = services.notes.active_note()
    return ActiveNoteResponse(note=note, link=services.notes.render_link(note) if note else None)


@router.put("/active", response_model=ActiveNoteResponse)
async def set_active_note(request: ActiveNoteRequest, services: TimerServices = Depends(get_services)):
    """Report the note the user is working in; captured when a session starts"""
    services.notes.set_active_note(request.note)
    note = services.notes.active_note()
    return ActiveNoteResponse(note=note, link=services.notes.render_link(note) if note else None)
