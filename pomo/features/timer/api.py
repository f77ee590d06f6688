"""Timer API endpoints"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from pomo.dependencies import TimerServices, get_services
from pomo.features.timer.domain import Mode
from pomo.features.timer.schemas import (
    DailySummaryResponse,
    NoticesResponse,
    StartCustomRequest,
    StartTimerRequest,
    TimerActionResponse,
    TimerStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/timer", tags=["timer"])


def _action_response(services: TimerServices, changed: bool) -> TimerActionResponse:
    return TimerActionResponse(changed=changed, timer=services.timer.snapshot())


@router.get("/status", response_model=TimerStatusResponse)
async def get_status(services: TimerServices = Depends(get_services)):
    """
    Current display string.

    Clients should poll this about once per second: the end of a session is
    only detected here. When the end needs a decision, the request that
    detects it waits until the prompt is answered; other polls return 00:00
    meanwhile.
    """
    try:
        display = await services.timer.query_status()
        return TimerStatusResponse(display=display, timer=services.timer.snapshot())
    except Exception as e:
        logger.error(f"Error querying timer status: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to query timer status: {str(e)}")


@router.post("/start", response_model=TimerActionResponse)
async def start_timer(request: StartTimerRequest, services: TimerServices = Depends(get_services)):
    """Start the given mode, or the next one in the cycle"""
    if request.mode == Mode.NO_TIMER:
        raise HTTPException(status_code=422, detail="Cannot start NO_TIMER, use /quit instead")

    try:
        started = await services.timer.start(request.mode)
        return _action_response(services, started)
    except Exception as e:
        logger.error(f"Error starting timer: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to start timer: {str(e)}")


@router.post("/custom", response_model=TimerActionResponse)
async def start_custom_timer(request: StartCustomRequest, services: TimerServices = Depends(get_services)):
    """Start a pomodoro with custom lengths"""
    try:
        started = await services.timer.start_custom(request.pomo_minutes, request.break_minutes)
        return _action_response(services, started)
    except Exception as e:
        logger.error(f"Error starting custom timer: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to start custom timer: {str(e)}")


@router.post("/pause", response_model=TimerActionResponse)
async def pause_timer(services: TimerServices = Depends(get_services)):
    return _action_response(services, services.timer.pause())


@router.post("/resume", response_model=TimerActionResponse)
async def resume_timer(services: TimerServices = Depends(get_services)):
    try:
        resumed = await services.timer.resume()
        return _action_response(services, resumed)
    except Exception as e:
        logger.error(f"Error resuming timer: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to resume timer: {str(e)}")


@router.post("/toggle", response_model=TimerActionResponse)
async def toggle_timer(services: TimerServices = Depends(get_services)):
    """Start a pomodoro when idle, otherwise pause or resume"""
    try:
        changed = await services.timer.toggle()
        return _action_response(services, changed)
    except Exception as e:
        logger.error(f"Error toggling timer: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to toggle timer: {str(e)}")


@router.post("/quit", response_model=TimerActionResponse)
async def quit_timer(services: TimerServices = Depends(get_services)):
    """Log the current session and stop"""
    await services.timer.quit()
    return _action_response(services, True)


@router.post("/finish", response_model=TimerActionResponse)
async def finish_and_start_next(services: TimerServices = Depends(get_services)):
    """Log the current session now and start the next one"""
    try:
        finished = await services.timer.finish_and_start_next()
        return _action_response(services, finished)
    except Exception as e:
        logger.error(f"Error finishing session: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to finish session: {str(e)}")


@router.get("/notices", response_model=NoticesResponse)
async def get_notices(services: TimerServices = Depends(get_services)):
    """Recent notices, newest last"""
    return NoticesResponse(notices=services.notifications.recent())


@router.post("/summary/refresh", response_model=DailySummaryResponse)
async def refresh_daily_summary(services: TimerServices = Depends(get_services)):
    """Recompute today's totals from the log text, e.g. after manual edits"""
    try:
        heading = await services.session_logger.refresh_daily_summary()
        return DailySummaryResponse(heading=heading)
    except Exception as e:
        logger.error(f"Error refreshing daily summary: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to refresh daily summary: {str(e)}")
