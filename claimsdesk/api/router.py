from __future__ import annotations

from fastapi import APIRouter

from claimsdesk.api.adjusters import router as adjusters_router
from claimsdesk.api.claims import router as claims_router
from claimsdesk.api.commissions import router as commissions_router
from claimsdesk.api.goals import router as goals_router
from claimsdesk.api.health import router as health_router
from claimsdesk.api.notifications import router as notifications_router
from claimsdesk.api.pipeline import router as pipeline_router
from claimsdesk.api.plans import router as plans_router
from claimsdesk.api.progress import router as progress_router
from claimsdesk.api.sandbox import router as sandbox_router
from claimsdesk.api.scenarios import router as scenarios_router
from claimsdesk.api.team import router as team_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(claims_router)
api_router.include_router(commissions_router)
api_router.include_router(adjusters_router)
api_router.include_router(scenarios_router)
api_router.include_router(progress_router)
api_router.include_router(pipeline_router)
api_router.include_router(sandbox_router)
api_router.include_router(goals_router)
api_router.include_router(plans_router)
api_router.include_router(team_router)
api_router.include_router(notifications_router)
