from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from claimsdesk.shared.base import BaseSchema

MILESTONE_PATTERN = "^(2_weeks|3_months|6_months|completed)$"


class AdjusterRating(BaseSchema):
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


class RatingCreateRequest(BaseSchema):
    sales_commission_id: str
    salesperson_id: str
    adjuster: str = Field(min_length=1)
    rating_communication: int = Field(ge=1, le=5)
    rating_settlement: int = Field(ge=1, le=5)
    rating_overall: int = Field(ge=1, le=5)
    claim_milestone: str = Field(pattern=MILESTONE_PATTERN)
    notes: Optional[str] = None


class RatingUpdateRequest(BaseSchema):
    rating_communication: int = Field(ge=1, le=5)
    rating_settlement: int = Field(ge=1, le=5)
    rating_overall: int = Field(ge=1, le=5)
    notes: Optional[str] = None


class ClaimAlert(BaseSchema):
    id: str
    client_name: str
    adjuster: str
    date_signed: Optional[date] = None
    salesperson_id: str
    salesperson_name: Optional[str] = None
    status: Optional[str] = None
    milestone: str


class TeamClaimAlerts(BaseSchema):
    salesperson_id: str
    salesperson_name: str
    alerts: List[ClaimAlert]


class AggregatedAdjusterRating(BaseSchema):
    adjuster: str
    average_rating: float
    rating_count: int
    ratings: List[int]
    avg_communication: Optional[float] = None
    avg_settlement: Optional[float] = None
    avg_overall: Optional[float] = None
