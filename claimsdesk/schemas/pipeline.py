from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from claimsdesk.shared.base import BaseSchema

STAGE_PATTERN = "^(prospect|qualified|proposal|negotiation|closing)$"


class PipelineDeal(BaseSchema):
    id: str
    salesperson_id: str
    client_name: str
    expected_value: float
    expected_close_date: Optional[date] = None
    stage: str
    probability: int
    weighted_value: float
    notes: Optional[str] = None


class PipelineDealCreateRequest(BaseSchema):
    salesperson_id: str
    client_name: str = Field(min_length=1)
    expected_value: float = Field(ge=0)
    expected_close_date: date
    stage: str = Field(default="prospect", pattern=STAGE_PATTERN)
    probability: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None


class PipelineDealUpdateRequest(BaseSchema):
    client_name: Optional[str] = Field(default=None, min_length=1)
    expected_value: Optional[float] = Field(default=None, ge=0)
    expected_close_date: Optional[date] = None
    stage: Optional[str] = Field(default=None, pattern=STAGE_PATTERN)
    probability: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None


class PipelineStats(BaseSchema):
    total_deals: int
    total_value: float
    weighted_value: float


class PipelineGroups(BaseSchema):
    this_week: List[PipelineDeal]
    this_month: List[PipelineDeal]
    next_month: List[PipelineDeal]
    later: List[PipelineDeal]


class PipelineOverview(BaseSchema):
    deals: List[PipelineDeal]
    stats: PipelineStats
    groups: PipelineGroups


class PipelineConversionResult(BaseSchema):
    commission_id: str
    pipeline_deal_id: str
    pipeline_deal_removed: bool
