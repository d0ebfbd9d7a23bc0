from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import Field

from claimsdesk.shared.base import BaseSchema

CATEGORY_PATTERN = "^(residential|commercial|industrial|religious|school)$"


class HypotheticalDeal(BaseSchema):
    id: str
    client_name: str
    expected_value: float
    expected_close_date: date
    category: str = Field(pattern=CATEGORY_PATTERN)
    probability: int = Field(ge=0, le=100)
    notes: Optional[str] = None


class HypotheticalDealCreateRequest(BaseSchema):
    client_name: str = Field(min_length=1)
    expected_value: float = Field(ge=0)
    expected_close_date: date
    category: str = Field(default="residential", pattern=CATEGORY_PATTERN)
    probability: int = Field(default=50, ge=0, le=100)
    notes: Optional[str] = None


class HypotheticalDealUpdateRequest(BaseSchema):
    client_name: Optional[str] = Field(default=None, min_length=1)
    expected_value: Optional[float] = Field(default=None, ge=0)
    expected_close_date: Optional[date] = None
    category: Optional[str] = Field(default=None, pattern=CATEGORY_PATTERN)
    probability: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None


class SandboxState(BaseSchema):
    deals: List[HypotheticalDeal] = Field(default_factory=list)
    is_active: bool = False


class BucketTotals(BaseSchema):
    value: float = 0.0
    weighted: float = 0.0
    count: int = 0


class SandboxAggregates(BaseSchema):
    total_value: float
    weighted_value: float
    deal_count: int
    by_quarter: Dict[str, BucketTotals]
    by_category: Dict[str, BucketTotals]


class SandboxResponse(BaseSchema):
    state: SandboxState
    aggregates: SandboxAggregates
