from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple

from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.schemas.roadmap import DealBucket, DealMixEstimate, DealSizeAnalysis, DealSizeInsight
from claimsdesk.shared.numbers import round_half_up, safe_div

DEAL_BUCKETS: List[Tuple[str, float, float]] = [
    ("Residential", 0, 350_000),
    ("Residential+", 350_000, 750_000),
    ("Mid-Commercial", 750_000, 1_500_000),
    ("Large Commercial", 1_500_000, 3_000_000),
    ("Industrial", 3_000_000, 7_500_000),
    ("Mega", 7_500_000, math.inf),
]

MIN_DEALS_FOR_CONFIDENCE = 5

MIX_KEYS = (
    "residential",
    "residential_plus",
    "mid_commercial",
    "large_commercial",
    "industrial",
    "mega",
)

# (upper bound on average deal size, weights in MIX_KEYS order)
MIX_WEIGHT_TABLES: List[Tuple[float, Tuple[float, ...]]] = [
    (350_000, (0.55, 0.25, 0.12, 0.05, 0.02, 0.01)),
    (750_000, (0.30, 0.40, 0.18, 0.08, 0.03, 0.01)),
    (1_500_000, (0.20, 0.25, 0.35, 0.12, 0.05, 0.03)),
    (3_000_000, (0.10, 0.15, 0.25, 0.30, 0.15, 0.05)),
    (7_500_000, (0.05, 0.10, 0.15, 0.25, 0.35, 0.10)),
    (math.inf, (0.03, 0.07, 0.10, 0.20, 0.30, 0.30)),
]


def _eligible(records: Sequence[CommissionRecord]) -> List[CommissionRecord]:
    return [r for r in records if r.initial_estimate > 0]


def build_buckets(records: Sequence[CommissionRecord]) -> List[DealBucket]:
    deals = _eligible(records)
    buckets: List[DealBucket] = []
    for label, lower, upper in DEAL_BUCKETS:
        in_bucket = [d for d in deals if lower <= d.initial_estimate < upper]
        count = len(in_bucket)
        buckets.append(
            DealBucket(
                label=label,
                min=lower,
                max=None if math.isinf(upper) else upper,
                count=count,
                avg_deal_size=safe_div(sum(d.initial_estimate for d in in_bucket), count),
                avg_fee_percent=safe_div(sum(d.fee_percentage for d in in_bucket), count),
            )
        )
    return buckets


def _bucket_for(buckets: Sequence[DealBucket], avg_deal_size: float) -> Optional[DealBucket]:
    for bucket in buckets:
        upper = math.inf if bucket.max is None else bucket.max
        if bucket.min <= avg_deal_size < upper:
            return bucket
    return None


def insights_for_target_deal_size(
    analysis: DealSizeAnalysis, avg_deal_size: float
) -> DealSizeInsight:
    bucket = _bucket_for(analysis.buckets, avg_deal_size)
    if bucket is None or bucket.count == 0:
        return DealSizeInsight(
            bucket=None,
            suggested_fee_percent=analysis.overall_avg_fee_percent,
            is_realistic=True,
            historical_avg_for_bucket=analysis.overall_avg_deal_size,
        )
    return DealSizeInsight(
        bucket=bucket,
        suggested_fee_percent=bucket.avg_fee_percent,
        is_realistic=bucket.count >= MIN_DEALS_FOR_CONFIDENCE,
        historical_avg_for_bucket=bucket.avg_deal_size,
    )


def deal_mix_estimate(target_deals: int, target_revenue: float) -> DealMixEstimate:
    avg_deal_size = target_revenue / (target_deals or 1)
    weights = next(w for upper, w in MIX_WEIGHT_TABLES if avg_deal_size < upper)
    counts: Dict[str, int] = {
        key: round_half_up(target_deals * weight) for key, weight in zip(MIX_KEYS, weights)
    }
    return DealMixEstimate(avg_deal_size=avg_deal_size, **counts)


def analyze_deal_sizes(
    records: Sequence[CommissionRecord],
    target_deals: Optional[int] = None,
    target_revenue: Optional[float] = None,
) -> DealSizeAnalysis:
    deals = _eligible(records)
    analysis = DealSizeAnalysis(
        buckets=build_buckets(deals),
        overall_avg_deal_size=safe_div(sum(d.initial_estimate for d in deals), len(deals)),
        overall_avg_fee_percent=safe_div(sum(d.fee_percentage for d in deals), len(deals)),
        total_deals=len(deals),
    )
    if target_deals and target_revenue:
        analysis.insight = insights_for_target_deal_size(analysis, target_revenue / target_deals)
        analysis.deal_mix = deal_mix_estimate(target_deals, target_revenue)
    return analysis
