from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from claimsdesk.shared.base import BaseSchema


class SizeBandStats(BaseSchema):
    min: float
    max: float
    avg_size: float
    count: int
    total_volume: float


class MonthlyPattern(BaseSchema):
    month: int
    month_name: str
    avg_deals: float
    avg_volume: float
    avg_deal_size: float


class QuarterlyPattern(BaseSchema):
    quarter: int
    avg_deals: float
    avg_volume: float
    percent_of_year: float


class YearlyPerformance(BaseSchema):
    year: int
    total_deals: int
    total_volume: float
    avg_deal_size: float


class OverallStats(BaseSchema):
    avg_deal_size: float
    median_deal_size: float
    avg_deals_per_year: float
    avg_volume_per_year: float
    best_year: int
    best_year_volume: float


class HistoricalPatterns(BaseSchema):
    size_bands: Dict[str, SizeBandStats]
    monthly_patterns: List[MonthlyPattern]
    quarterly_patterns: List[QuarterlyPattern]
    yearly_performance: List[YearlyPerformance]
    overall_stats: OverallStats


class RoadmapMonth(BaseSchema):
    month: int
    month_name: str
    projected_deals: int
    projected_volume: float
    cumulative_volume: float


class RoadmapSummary(BaseSchema):
    total_deals: int
    avg_deal_size: float
    total_volume: float
    key_assumptions: List[str]


class RoadmapProjection(BaseSchema):
    id: str
    name: str
    description: str
    is_historically_proven: bool
    monthly_projections: List[RoadmapMonth]
    summary: RoadmapSummary


class RoadmapResponse(BaseSchema):
    target_revenue: float
    historical_patterns: Optional[HistoricalPatterns] = None
    scenarios: List[RoadmapProjection] = Field(default_factory=list)


class DealBucket(BaseSchema):
    label: str
    min: float
    max: Optional[float] = None
    count: int
    avg_deal_size: float
    avg_fee_percent: float


class DealSizeInsight(BaseSchema):
    bucket: Optional[DealBucket] = None
    suggested_fee_percent: float
    is_realistic: bool
    historical_avg_for_bucket: float


class DealMixEstimate(BaseSchema):
    residential: int
    residential_plus: int
    mid_commercial: int
    large_commercial: int
    industrial: int
    mega: int
    avg_deal_size: float


class DealSizeAnalysis(BaseSchema):
    buckets: List[DealBucket]
    overall_avg_deal_size: float
    overall_avg_fee_percent: float
    total_deals: int
    insight: Optional[DealSizeInsight] = None
    deal_mix: Optional[DealMixEstimate] = None
