from __future__ import annotations

from datetime import date
from typing import List, Optional

from claimsdesk.shared.base import BaseSchema
from claimsdesk.schemas.commissions import ActualCommissions
from claimsdesk.schemas.scenarios import ScenarioPath


class QuarterPacing(BaseSchema):
    quarter: str
    planned_deals: int
    planned_volume: float
    actual_deals: int
    actual_volume: float
    volume_progress: float


class ProgressSnapshot(BaseSchema):
    as_of: date
    months_passed: int
    current_quarter: int
    volume_progress: float
    deals_progress: float
    expected_volume: float
    expected_deals: float
    volume_vs_expected: float
    deals_vs_expected: float
    volume_status: str
    deals_status: str
    year_progress: float
    is_on_track: bool
    quarters: List[QuarterPacing]


class ProgressAlert(BaseSchema):
    level: str
    title: str
    message: str


class WeeklyPacing(BaseSchema):
    week_start: date
    week_end: date
    this_week_count: int
    this_week_value: float
    weekly_target: int
    mtd_deals: int
    mtd_expected: int
    mtd_pacing: float
    monthly_target: int
    pacing_status: str
    streak: int


class ProgressResponse(BaseSchema):
    year: int
    scenario: ScenarioPath
    actuals: ActualCommissions
    snapshot: ProgressSnapshot
    alert: Optional[ProgressAlert] = None
    weekly: WeeklyPacing
