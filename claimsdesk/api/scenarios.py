from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_scenarios_service
from claimsdesk.schemas.roadmap import DealSizeAnalysis, RoadmapResponse
from claimsdesk.schemas.scenarios import (
    GoalScenarioRequest,
    GoalScenarioResponse,
    PlanInputs,
    PlanScenarioResponse,
)
from claimsdesk.services.scenarios_service import ScenariosService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


def get_plan_inputs(
    target_revenue: float = Query(default=55_000_000, gt=0),
    target_deals: int = Query(default=33, gt=0),
    target_commission: float = Query(default=825_000, ge=0),
    avg_fee_percent: float = Query(default=7.5, ge=0, le=100),
    commission_percent: float = Query(default=20, ge=0, le=100),
) -> PlanInputs:
    return PlanInputs(
        target_revenue=target_revenue,
        target_deals=target_deals,
        target_commission=target_commission,
        avg_fee_percent=avg_fee_percent,
        commission_percent=commission_percent,
    )


@router.post("/goals")
def goal_scenarios(
    payload: GoalScenarioRequest,
    service: ScenariosService = Depends(get_scenarios_service),
) -> ResponseEnvelope[GoalScenarioResponse]:
    data = service.get_goal_scenarios(payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("deal_mix_templates", "year"))


@router.get("/plan")
def plan_scenarios(
    inputs: PlanInputs = Depends(get_plan_inputs),
    selected_scenario: str = Query(default="balanced", pattern="^(conservative|balanced|commercial-heavy)$"),
    service: ScenariosService = Depends(get_scenarios_service),
) -> ResponseEnvelope[PlanScenarioResponse]:
    data = service.get_plan_scenarios(inputs, selected_scenario)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("plan_inputs", "year"))


@router.get("/roadmap")
def sales_roadmap(
    salesperson_id: Optional[str] = Query(default=None),
    target_revenue: float = Query(default=55_000_000, gt=0),
    service: ScenariosService = Depends(get_scenarios_service),
) -> ResponseEnvelope[RoadmapResponse]:
    data = service.get_roadmap(salesperson_id, target_revenue)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("sales_commissions", "all"))


@router.get("/deal-sizes")
def deal_size_analysis(
    salesperson_id: Optional[str] = Query(default=None),
    target_deals: Optional[int] = Query(default=None, gt=0),
    target_revenue: Optional[float] = Query(default=None, gt=0),
    service: ScenariosService = Depends(get_scenarios_service),
) -> ResponseEnvelope[DealSizeAnalysis]:
    data = service.get_deal_size_analysis(salesperson_id, target_deals, target_revenue)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("sales_commissions", "all"))
