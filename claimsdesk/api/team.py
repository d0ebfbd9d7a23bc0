from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import (
    get_people_service,
    get_team_service,
    get_view_as_context,
    resolve_salesperson_id,
)
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.commissions import TeamMetrics
from claimsdesk.schemas.people import (
    RequestContext,
    Salesperson,
    TeamMemberCreateRequest,
    TeamMemberUpdateRequest,
)
from claimsdesk.services.people_service import PeopleService
from claimsdesk.services.team_service import TeamService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/team", tags=["team"])

SOURCE = "salespeople"


@router.get("/context")
def request_context(
    context: ViewAsContext = Depends(get_view_as_context),
) -> ResponseEnvelope[RequestContext]:
    data = PeopleService.to_request_context(context)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE, "now"))


@router.get("/salespeople")
def list_salespeople(
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[List[Salesperson]]:
    return ResponseEnvelope(data=service.list_salespeople(), pagination=None, meta=build_meta(SOURCE))


@router.get("/director")
def sales_director(
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[Salesperson]:
    return ResponseEnvelope(data=service.get_director(), pagination=None, meta=build_meta(SOURCE))


@router.get("/members")
def list_team_members(
    manager_id: Optional[str] = Query(default=None),
    context: ViewAsContext = Depends(get_view_as_context),
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[List[Salesperson]]:
    data = service.list_team_members(resolve_salesperson_id(manager_id, context))
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))


@router.post("/members", status_code=201)
def add_team_member(
    payload: TeamMemberCreateRequest,
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[Salesperson]:
    return ResponseEnvelope(data=service.add_team_member(payload), pagination=None, meta=build_meta(SOURCE))


@router.patch("/members/{salesperson_id}")
def update_team_member(
    salesperson_id: str,
    payload: TeamMemberUpdateRequest,
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[Salesperson]:
    data = service.update_team_member(salesperson_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))


@router.get("/metrics")
def team_metrics(
    manager_id: Optional[str] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    context: ViewAsContext = Depends(get_view_as_context),
    service: TeamService = Depends(get_team_service),
) -> ResponseEnvelope[TeamMetrics]:
    target_year = year or date.today().year
    data = service.get_team_metrics(resolve_salesperson_id(manager_id, context), target_year)
    meta = build_meta("salespeople,sales_plans,sales_commissions", str(target_year))
    return ResponseEnvelope(data=data, pagination=None, meta=meta)
