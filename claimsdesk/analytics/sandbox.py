from __future__ import annotations

from typing import Dict, Sequence

from claimsdesk.schemas.sandbox import BucketTotals, HypotheticalDeal, SandboxAggregates
from claimsdesk.shared.time import quarter_of

SANDBOX_QUARTERS = ("Q1", "Q2", "Q3", "Q4")
SANDBOX_CATEGORIES = ("residential", "commercial", "industrial", "religious", "school")


def weighted_value(deal: HypotheticalDeal) -> float:
    return deal.expected_value * deal.probability / 100


def sandbox_aggregates(deals: Sequence[HypotheticalDeal]) -> SandboxAggregates:
    by_quarter: Dict[str, BucketTotals] = {key: BucketTotals() for key in SANDBOX_QUARTERS}
    by_category: Dict[str, BucketTotals] = {key: BucketTotals() for key in SANDBOX_CATEGORIES}
    for deal in deals:
        weighted = weighted_value(deal)
        for bucket in (
            by_quarter[f"Q{quarter_of(deal.expected_close_date)}"],
            by_category.get(deal.category),
        ):
            if bucket is None:
                continue
            bucket.value += deal.expected_value
            bucket.weighted += weighted
            bucket.count += 1
    return SandboxAggregates(
        total_value=sum(d.expected_value for d in deals),
        weighted_value=sum(weighted_value(d) for d in deals),
        deal_count=len(deals),
        by_quarter=by_quarter,
        by_category=by_category,
    )
