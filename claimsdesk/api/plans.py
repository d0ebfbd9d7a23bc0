from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_plans_service, get_view_as_context, resolve_salesperson_id
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.goals import (
    PendingPlanList,
    PlanReviewRequest,
    PlanSaveRequest,
    PlanSubmitRequest,
    SalesPlan,
)
from claimsdesk.services.plans_service import PlansService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/plans", tags=["plans"])

SOURCE = "sales_plans"


@router.get("")
def get_plan(
    salesperson_id: Optional[str] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    context: ViewAsContext = Depends(get_view_as_context),
    service: PlansService = Depends(get_plans_service),
) -> ResponseEnvelope[Optional[SalesPlan]]:
    target_year = year or date.today().year
    data = service.get_plan(resolve_salesperson_id(salesperson_id, context), target_year)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE, str(target_year)))


@router.put("")
def save_plan(
    payload: PlanSaveRequest,
    service: PlansService = Depends(get_plans_service),
) -> ResponseEnvelope[SalesPlan]:
    return ResponseEnvelope(data=service.save_plan(payload), pagination=None, meta=build_meta(SOURCE))


@router.get("/pending")
def pending_plans(
    service: PlansService = Depends(get_plans_service),
) -> ResponseEnvelope[PendingPlanList]:
    data = service.list_pending_approvals()
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(f"{SOURCE},salespeople"))


@router.post("/{plan_id}/submit")
def submit_plan(
    plan_id: str,
    payload: Optional[PlanSubmitRequest] = None,
    service: PlansService = Depends(get_plans_service),
) -> ResponseEnvelope[SalesPlan]:
    data = service.submit_plan(plan_id, payload or PlanSubmitRequest())
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(f"{SOURCE},notifications"))


@router.post("/{plan_id}/approve")
def approve_plan(
    plan_id: str,
    payload: PlanReviewRequest,
    service: PlansService = Depends(get_plans_service),
) -> ResponseEnvelope[SalesPlan]:
    data = service.approve_plan(plan_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(f"{SOURCE},notifications"))


@router.post("/{plan_id}/reject")
def reject_plan(
    plan_id: str,
    payload: PlanReviewRequest,
    service: PlansService = Depends(get_plans_service),
) -> ResponseEnvelope[SalesPlan]:
    data = service.reject_plan(plan_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(f"{SOURCE},notifications"))
