"""Health check endpoints"""

from fastapi import APIRouter, Depends

from pomo.dependencies import TimerServices, get_services

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/")
async def health_check(services: TimerServices = Depends(get_services)):
    """Basic health check, including whether the log vault is reachable"""
    vault = services.store.root
    return {
        "status": "healthy" if vault.is_dir() else "degraded",
        "service": "pomo-timer",
        "vault": str(vault),
        "timer": services.timer.phase().value,
    }
