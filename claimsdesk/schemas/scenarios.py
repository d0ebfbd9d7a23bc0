from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from claimsdesk.shared.base import BaseSchema


class DealMix(BaseSchema):
    large: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    small: int = Field(default=0, ge=0)


class QuarterlyMix(BaseSchema):
    q1: DealMix = Field(default_factory=DealMix)
    q2: DealMix = Field(default_factory=DealMix)
    q3: DealMix = Field(default_factory=DealMix)
    q4: DealMix = Field(default_factory=DealMix)


class DealMixScenario(BaseSchema):
    id: str
    name: str
    description: str
    quarters: QuarterlyMix
    total_volume: float
    total_deals: int
    is_template: bool = True
    is_active: bool = False


class CompletedDeal(BaseSchema):
    quarter: str = Field(pattern="^q[1-4]$")
    size: str = Field(pattern="^(large|medium|small)$")
    actual_value: Optional[float] = Field(default=None, ge=0)


class GoalScenarioRequest(BaseSchema):
    target_revenue: float = Field(default=55_000_000, gt=0)
    active_scenario_id: str = "steady-flow"
    custom_quarters: Optional[QuarterlyMix] = None
    completed_deals: List[CompletedDeal] = Field(default_factory=list)


class DealProgress(BaseSchema):
    planned: int
    completed: int


class QuarterProgress(BaseSchema):
    planned: float
    completed: float
    deals: DealProgress


class YtdProgress(BaseSchema):
    total_planned: float
    total_completed: float
    total_deals_planned: int
    total_deals_completed: int
    percent_complete: float
    gap_to_goal: float


class GoalScenarioResponse(BaseSchema):
    scenarios: List[DealMixScenario]
    active_scenario: DealMixScenario
    quarterly_progress: Dict[str, QuarterProgress]
    ytd_progress: YtdProgress


class PlanInputs(BaseSchema):
    target_revenue: float = Field(default=55_000_000, gt=0)
    target_deals: int = Field(default=33, gt=0)
    target_commission: float = Field(default=825_000, ge=0)
    avg_fee_percent: float = Field(default=7.5, ge=0, le=100)
    commission_percent: float = Field(default=20, ge=0, le=100)


class QuarterTarget(BaseSchema):
    deals: int
    volume: float


class ScenarioPath(BaseSchema):
    id: str
    name: str
    subtitle: str
    description: str
    risk_level: str
    deal_count: int
    avg_deal_size: float
    total_volume: float
    projected_commission: float
    quarterly_breakdown: Dict[str, QuarterTarget]
    key_assumptions: List[str]


class MonthlyProjectionPoint(BaseSchema):
    month: str
    cumulative_volume: Dict[str, float]


class PlanScenarioResponse(BaseSchema):
    inputs: PlanInputs
    scenarios: List[ScenarioPath]
    selected_scenario: ScenarioPath
    monthly_projections: List[MonthlyProjectionPoint]
