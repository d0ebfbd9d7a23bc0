from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import ConfigDict, Field, model_validator

from claimsdesk.shared.base import BaseSchema

SPLIT_TOLERANCE = 0.01


class CommissionSummary(BaseSchema):
    id: str
    salesperson_id: Optional[str] = None
    client_name: str
    adjuster: Optional[str] = None
    office: Optional[str] = None
    date_signed: Optional[date] = None
    year: Optional[int] = None
    initial_estimate: float
    revised_estimate: float
    percent_change: float
    insurance_checks_ytd: float
    old_remainder: float
    new_remainder: float
    split_percentage: float
    fee_percentage: float
    commission_percentage: float
    commissions_paid: float
    status: Optional[str] = None


class CommissionFilters(BaseSchema):
    # Keep query parameter names in snake_case for API contract consistency.
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    salesperson_id: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=2000, le=2100)


class YearSummary(BaseSchema):
    year: int
    total_deals: int
    total_initial_estimate: float
    total_revised_estimate: float
    avg_split_percentage: float
    avg_fee_percentage: float
    avg_commission_percentage: float
    total_commissions_paid: float
    projected_commission: float
    actual_commission: float


class MonthlyVolumePoint(BaseSchema):
    month: str
    volume: float
    deals: int


class ActualCommissions(BaseSchema):
    total_volume: float
    total_deals: int
    total_commission: float
    monthly_breakdown: List[MonthlyVolumePoint]


class TeamMetrics(BaseSchema):
    total_target_revenue: float
    total_target_commission: float
    avg_fee_percent: float
    commission_percent: float
    member_count: int
    actual_commissions: ActualCommissions


class CommissionCreateRequest(BaseSchema):
    salesperson_id: str
    client_name: str = Field(min_length=1)
    adjuster: Optional[str] = None
    office: Optional[str] = None
    date_signed: Optional[date] = None
    initial_estimate: float = Field(ge=0)
    fee_percentage: float = Field(default=7, ge=0, le=100)
    commission_percentage: float = Field(default=8, ge=0, le=100)
    split_percentage: float = Field(default=100, ge=0, le=100)


class SalespersonSplit(BaseSchema):
    salesperson_id: str = Field(min_length=1)
    split_percentage: float = Field(gt=0, le=100)


class SplitCommissionCreateRequest(BaseSchema):
    client_name: str = Field(min_length=1)
    adjuster: Optional[str] = None
    office: Optional[str] = None
    date_signed: Optional[date] = None
    initial_estimate: float = Field(ge=0)
    fee_percentage: float = Field(default=7, ge=0, le=100)
    commission_percentage: float = Field(default=8, ge=0, le=100)
    splits: List[SalespersonSplit] = Field(min_length=1)

    @model_validator(mode="after")
    def check_splits(self) -> "SplitCommissionCreateRequest":
        if not self.client_name.strip():
            raise ValueError("client_name must not be blank")
        ids = [split.salesperson_id for split in self.splits]
        if len(set(ids)) != len(ids):
            raise ValueError("each salesperson may appear only once in splits")
        total = sum(split.split_percentage for split in self.splits)
        if abs(total - 100) > SPLIT_TOLERANCE:
            raise ValueError(f"split percentages must total 100 (got {total:g})")
        return self


class EstimateUpdateRequest(BaseSchema):
    revised_estimate: float = Field(ge=0)


class CheckCreateRequest(BaseSchema):
    check_amount: float = Field(gt=0)
    received_date: date
    deposited_date: Optional[date] = None
    check_number: Optional[str] = None
    notes: Optional[str] = None


class CheckUpdateRequest(BaseSchema):
    check_amount: Optional[float] = Field(default=None, gt=0)
    received_date: Optional[date] = None
    deposited_date: Optional[date] = None
    check_number: Optional[str] = None
    notes: Optional[str] = None


class CommissionCheck(BaseSchema):
    id: str
    sales_commission_id: str
    check_amount: float
    commission_earned: float
    received_date: Optional[date] = None
    deposited_date: Optional[date] = None
    check_number: Optional[str] = None
    notes: Optional[str] = None
