from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_goals_service, get_view_as_context, resolve_salesperson_id
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.goals import GoalFilters, GoalUpsertRequest, SalesGoal
from claimsdesk.services.goals_service import GoalsService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/goals", tags=["goals"])

SOURCE = "sales_goals"


@router.get("")
def list_goals(
    salesperson_id: Optional[str] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    context: ViewAsContext = Depends(get_view_as_context),
    service: GoalsService = Depends(get_goals_service),
) -> ResponseEnvelope[List[SalesGoal]]:
    filters = GoalFilters(salesperson_id=resolve_salesperson_id(salesperson_id, context), year=year)
    data = service.list_goals(filters)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE, str(year) if year else "all"))


@router.get("/team")
def team_goals(
    manager_id: Optional[str] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    context: ViewAsContext = Depends(get_view_as_context),
    service: GoalsService = Depends(get_goals_service),
) -> ResponseEnvelope[List[SalesGoal]]:
    target_year = year or date.today().year
    data = service.get_team_goals(resolve_salesperson_id(manager_id, context), target_year)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(f"{SOURCE},salespeople", str(target_year)))


@router.put("")
def upsert_goal(
    payload: GoalUpsertRequest,
    service: GoalsService = Depends(get_goals_service),
) -> ResponseEnvelope[SalesGoal]:
    return ResponseEnvelope(data=service.upsert_goal(payload), pagination=None, meta=build_meta(SOURCE))


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    service: GoalsService = Depends(get_goals_service),
) -> ResponseEnvelope[dict]:
    service.delete_goal(goal_id)
    return ResponseEnvelope(data={"deleted": True}, pagination=None, meta=build_meta(SOURCE))
