from fastapi import APIRouter
from pomo.api import health
from pomo.features.notes import api as notes
from pomo.features.prompts import api as prompts
from pomo.features.timer import api as timer

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(timer.router)
api_router.include_router(prompts.router)
api_router.include_router(notes.router)
