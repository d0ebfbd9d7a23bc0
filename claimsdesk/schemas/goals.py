from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from claimsdesk.shared.base import BaseSchema

GOAL_TYPE_PATTERN = "^(annual|quarterly|monthly)$"


class SalesGoal(BaseSchema):
    id: str
    salesperson_id: str
    year: int
    goal_type: str
    target_revenue: float
    target_deals: int
    notes: Optional[str] = None


class GoalFilters(BaseSchema):
    # Keep query parameter names in snake_case for API contract consistency.
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    salesperson_id: str
    year: Optional[int] = Field(default=None, ge=2000, le=2100)


class GoalUpsertRequest(BaseSchema):
    salesperson_id: str
    year: int = Field(ge=2000, le=2100)
    goal_type: str = Field(default="annual", pattern=GOAL_TYPE_PATTERN)
    target_revenue: float = Field(ge=0)
    target_deals: int = Field(default=0, ge=0)
    notes: Optional[str] = None


class SalesPlan(BaseSchema):
    id: str
    salesperson_id: str
    year: int
    target_revenue: float
    target_deals: int
    target_commission: float
    avg_fee_percent: float
    commission_percent: float
    selected_scenario: str
    is_active: bool
    approval_status: str
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None


class PlanSaveRequest(BaseSchema):
    salesperson_id: str
    year: int = Field(ge=2000, le=2100)
    target_revenue: float = Field(gt=0)
    target_deals: int = Field(gt=0)
    target_commission: float = Field(default=0, ge=0)
    avg_fee_percent: float = Field(default=7.5, ge=0, le=100)
    commission_percent: float = Field(default=20, ge=0, le=100)
    selected_scenario: str = Field(default="balanced", pattern="^(conservative|balanced|commercial-heavy)$")


class PlanSubmitRequest(BaseSchema):
    director_id: Optional[str] = None


class PlanReviewRequest(BaseSchema):
    reviewer_id: str
    notes: Optional[str] = None


class PendingPlan(BaseSchema):
    plan: SalesPlan
    salesperson_name: str


class PendingPlanList(BaseSchema):
    items: List[PendingPlan]
