from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from claimsdesk.shared.numbers import coerce_number


class SalesGoalRecord(BaseModel):
    id: str
    salesperson_id: str
    year: int
    goal_type: str = "annual"
    target_revenue: float = 0.0
    target_deals: int = 0
    notes: Optional[str] = None

    @field_validator("target_revenue", mode="before")
    @classmethod
    def _default_revenue(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("target_deals", mode="before")
    @classmethod
    def _default_deals(cls, value: Any) -> int:
        return int(coerce_number(value))


class SalesPlanRecord(BaseModel):
    id: str
    salesperson_id: str
    year: int
    target_revenue: float = 0.0
    target_deals: int = 0
    target_commission: float = 0.0
    avg_fee_percent: float = 0.0
    commission_percent: float = 0.0
    selected_scenario: str = "balanced"
    is_active: bool = True
    approval_status: Optional[str] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None

    @field_validator(
        "target_revenue", "target_commission", "avg_fee_percent", "commission_percent", mode="before"
    )
    @classmethod
    def _default_numeric(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("target_deals", mode="before")
    @classmethod
    def _default_deals(cls, value: Any) -> int:
        return int(coerce_number(value))


class PipelineDealRecord(BaseModel):
    id: str
    salesperson_id: str
    client_name: str
    expected_value: float = 0.0
    expected_close_date: Optional[date] = None
    stage: str = "prospect"
    probability: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("expected_value", mode="before")
    @classmethod
    def _default_value(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("stage", mode="before")
    @classmethod
    def _default_stage(cls, value: Any) -> str:
        return value or "prospect"


class AdjusterRatingRecord(BaseModel):
    id: str
    sales_commission_id: str
    salesperson_id: str
    adjuster: str
    rating: Optional[int] = None
    rating_communication: Optional[int] = None
    rating_settlement: Optional[int] = None
    rating_overall: Optional[int] = None
    claim_milestone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
