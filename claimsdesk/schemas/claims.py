from __future__ import annotations

from datetime import date
from typing import List, Optional

from claimsdesk.shared.base import BaseSchema


class ClaimSummary(BaseSchema):
    id: str
    name: str
    adjuster: str
    office: Optional[str] = None
    date_signed: Optional[date] = None
    estimate_of_loss: float
    revised_estimate_of_loss: float
    percent_change: float
    dollar_difference: float
    change_indicator: Optional[str] = None


class AdjusterSummary(BaseSchema):
    adjuster: str
    office: Optional[str] = None
    total_claims: int
    total_estimate: float
    total_revised: float
    avg_percent_change: float
    total_dollar_difference: float
    positive_claims: int
    negative_claims: int
    positive_difference: float
    negative_difference: float


class OfficeSummary(BaseSchema):
    office: str
    adjusters: List[str]
    total_adjusters: int
    total_claims: int
    avg_percent_change: float
    total_estimate: float
    total_revised: float


class DashboardStats(BaseSchema):
    total_claims: int
    total_adjusters: int
    avg_percent_change: float
    office_count: int
    total_estimate: float
    total_revised: float
