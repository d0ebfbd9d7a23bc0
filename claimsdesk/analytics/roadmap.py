from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.schemas.roadmap import (
    HistoricalPatterns,
    MonthlyPattern,
    OverallStats,
    QuarterlyPattern,
    RoadmapMonth,
    RoadmapProjection,
    RoadmapSummary,
    SizeBandStats,
    YearlyPerformance,
)
from claimsdesk.shared.numbers import round_half_up, safe_div
from claimsdesk.shared.time import MONTH_NAMES

# (key, min inclusive, max exclusive)
SIZE_BANDS = [
    ("large_residential", 350_000, 1_000_000),
    ("mid_commercial", 1_000_000, 5_000_000),
    ("large_commercial", 5_000_000, math.inf),
]
# Religious facilities are not tagged in commission data yet.
RELIGIOUS_BAND_PLACEHOLDER = SizeBandStats(
    min=1_000_000, max=5_000_000, avg_size=0, count=0, total_volume=0
)

QUARTER_END_SPLIT = (0.2, 0.3, 0.5)
RELATIONSHIP_MONTH_FACTORS = [0.03, 0.04, 0.05, 0.06, 0.07, 0.08, 0.10, 0.11, 0.12, 0.12, 0.11, 0.11]
QUARTERLY_IMPACT_SIZE_FACTOR = 1.5
RELATIONSHIP_SIZE_FACTOR = 2.0
HYBRID_Q4_BOOST = 1.15
HYBRID_SIZE_FACTOR = 1.1


def deal_size(record: CommissionRecord) -> float:
    return record.revised_estimate or record.initial_estimate or 0.0


def _band_stats(sizes: Sequence[float]) -> SizeBandStats:
    if not sizes:
        return SizeBandStats(min=0, max=0, avg_size=0, count=0, total_volume=0)
    total = sum(sizes)
    return SizeBandStats(
        min=min(sizes),
        max=max(sizes),
        avg_size=total / len(sizes),
        count=len(sizes),
        total_volume=total,
    )


def analyze_history(records: Sequence[CommissionRecord]) -> Optional[HistoricalPatterns]:
    if not records:
        return None

    band_sizes: Dict[str, List[float]] = {key: [] for key, _, _ in SIZE_BANDS}
    for record in records:
        size = deal_size(record)
        for key, lower, upper in SIZE_BANDS:
            if lower <= size < upper:
                band_sizes[key].append(size)
                break
    size_bands = {key: _band_stats(sizes) for key, sizes in band_sizes.items()}
    size_bands["religious"] = RELIGIOUS_BAND_PLACEHOLDER

    num_years = len({r.year for r in records if r.year}) or 1
    month_deals = [0] * 12
    month_volume = [0.0] * 12
    for record in records:
        if record.date_signed is None:
            continue
        index = record.date_signed.month - 1
        month_deals[index] += 1
        month_volume[index] += deal_size(record)

    monthly_patterns = [
        MonthlyPattern(
            month=index + 1,
            month_name=MONTH_NAMES[index],
            avg_deals=month_deals[index] / num_years,
            avg_volume=month_volume[index] / num_years,
            avg_deal_size=safe_div(month_volume[index], month_deals[index]),
        )
        for index in range(12)
    ]

    quarterly_patterns: List[QuarterlyPattern] = []
    for quarter in range(4):
        months = monthly_patterns[quarter * 3 : quarter * 3 + 3]
        quarterly_patterns.append(
            QuarterlyPattern(
                quarter=quarter + 1,
                avg_deals=sum(m.avg_deals for m in months),
                avg_volume=sum(m.avg_volume for m in months),
                percent_of_year=0.0,
            )
        )
    yearly_volume = sum(q.avg_volume for q in quarterly_patterns)
    for pattern in quarterly_patterns:
        pattern.percent_of_year = (
            pattern.avg_volume / yearly_volume * 100 if yearly_volume > 0 else 25.0
        )

    by_year: Dict[int, List[float]] = {}
    for record in records:
        if record.year:
            by_year.setdefault(record.year, []).append(deal_size(record))
    yearly_performance = [
        YearlyPerformance(
            year=year,
            total_deals=len(sizes),
            total_volume=sum(sizes),
            avg_deal_size=safe_div(sum(sizes), len(sizes)),
        )
        for year, sizes in sorted(by_year.items())
    ]

    sizes = sorted(s for s in (deal_size(r) for r in records) if s > 0)
    total_volume = sum(sizes)
    best = max(yearly_performance, key=lambda y: y.total_volume, default=None)
    overall = OverallStats(
        avg_deal_size=safe_div(total_volume, len(sizes)),
        median_deal_size=sizes[len(sizes) // 2] if sizes else 0.0,
        avg_deals_per_year=len(sizes) / num_years,
        avg_volume_per_year=total_volume / num_years,
        best_year=best.year if best and best.total_volume > 0 else 0,
        best_year_volume=best.total_volume if best else 0.0,
    )

    return HistoricalPatterns(
        size_bands=size_bands,
        monthly_patterns=monthly_patterns,
        quarterly_patterns=quarterly_patterns,
        yearly_performance=yearly_performance,
        overall_stats=overall,
    )


def _monthly_rows(deals: Sequence[int], volumes: Sequence[float]) -> List[RoadmapMonth]:
    rows: List[RoadmapMonth] = []
    cumulative = 0.0
    for index, (month_deals, volume) in enumerate(zip(deals, volumes)):
        cumulative += volume
        rows.append(
            RoadmapMonth(
                month=index + 1,
                month_name=MONTH_NAMES[index],
                projected_deals=month_deals,
                projected_volume=volume,
                cumulative_volume=cumulative,
            )
        )
    return rows


def _steady_residential(patterns: HistoricalPatterns, target: float) -> RoadmapProjection:
    stats = patterns.overall_stats
    scale = safe_div(target, stats.avg_volume_per_year)
    deals = [round_half_up(m.avg_deals * scale) for m in patterns.monthly_patterns]
    raw_volume = [d * stats.avg_deal_size for d in deals]
    volume_scale = safe_div(target, sum(raw_volume))
    volumes = [v * volume_scale for v in raw_volume]
    total_deals = sum(deals)
    return RoadmapProjection(
        id="steady-residential",
        name="Steady Residential + Commercial",
        description=(
            "Emphasizes large residential losses supported by mid-commercial opportunities with "
            "a smooth accumulation curve based on historical cadence."
        ),
        is_historically_proven=True,
        monthly_projections=_monthly_rows(deals, volumes),
        summary=RoadmapSummary(
            total_deals=total_deals,
            avg_deal_size=safe_div(target, total_deals),
            total_volume=target,
            key_assumptions=[
                "Follows historical monthly distribution",
                "Consistent deal flow throughout the year",
                "Mix of $350K-$750K residential and $1M-$2M commercial",
            ],
        ),
    )


def _quarterly_impact(patterns: HistoricalPatterns, target: float) -> RoadmapProjection:
    stats = patterns.overall_stats
    weights = [q.percent_of_year / 100 for q in patterns.quarterly_patterns]
    total_deals = math.ceil(safe_div(target, stats.avg_deal_size * QUARTERLY_IMPACT_SIZE_FACTOR))
    deals: List[int] = []
    volumes: List[float] = []
    for weight in weights:
        quarter_deals = round_half_up(total_deals * weight)
        quarter_volume = target * weight
        early, middle, late = QUARTER_END_SPLIT
        # Closings concentrate in the last month of the quarter.
        deals.extend(
            [
                math.floor(quarter_deals * early),
                math.floor(quarter_deals * middle),
                math.ceil(quarter_deals * late),
            ]
        )
        volumes.extend([quarter_volume * early, quarter_volume * middle, quarter_volume * late])
    projected_deals = sum(deals)
    return RoadmapProjection(
        id="quarterly-impact",
        name="Quarterly Impact",
        description=(
            "Fewer total opportunities with higher-value commercial or industrial losses. "
            "Step-function growth aligned with historical quarterly peaks."
        ),
        is_historically_proven=True,
        monthly_projections=_monthly_rows(deals, volumes),
        summary=RoadmapSummary(
            total_deals=projected_deals,
            avg_deal_size=safe_div(target, projected_deals),
            total_volume=target,
            key_assumptions=[
                "Focus on $5M+ commercial/industrial opportunities",
                "Concentrated closings at quarter-end",
                "Fewer but larger deals",
            ],
        ),
    )


def _relationship_driven(patterns: HistoricalPatterns, target: float) -> RoadmapProjection:
    stats = patterns.overall_stats
    total_deals = math.ceil(safe_div(target, stats.avg_deal_size * RELATIONSHIP_SIZE_FACTOR))
    deals = [round_half_up(total_deals * factor) for factor in RELATIONSHIP_MONTH_FACTORS]
    volumes = [target * factor for factor in RELATIONSHIP_MONTH_FACTORS]
    projected_deals = sum(deals)
    return RoadmapProjection(
        id="relationship-driven",
        name="Relationship-Driven / Pre-Loss",
        description=(
            "Higher percentage of positioned or pre-loss relationships. Larger average "
            "opportunity size with slower early accumulation but stronger later-year impact."
        ),
        is_historically_proven=False,
        monthly_projections=_monthly_rows(deals, volumes),
        summary=RoadmapSummary(
            total_deals=projected_deals,
            avg_deal_size=safe_div(target, projected_deals),
            total_volume=target,
            key_assumptions=[
                "Leverage existing relationships for larger opportunities",
                "Pre-positioned for losses before they occur",
                "Back-loaded volume trajectory",
                "* Modeled estimate - limited historical data",
            ],
        ),
    )


def _hybrid_adaptive(patterns: HistoricalPatterns, target: float) -> RoadmapProjection:
    stats = patterns.overall_stats
    weights = [
        safe_div(m.avg_volume, stats.avg_volume_per_year or 1)
        * (HYBRID_Q4_BOOST if m.month >= 10 else 1.0)
        for m in patterns.monthly_patterns
    ]
    total_weight = sum(weights)
    volumes = [target * safe_div(w, total_weight) for w in weights]
    avg_deal_size = stats.avg_deal_size * HYBRID_SIZE_FACTOR
    deals = [round_half_up(safe_div(v, avg_deal_size)) for v in volumes]
    return RoadmapProjection(
        id="hybrid-adaptive",
        name="Hybrid / Adaptive",
        description=(
            "Blended scenario weighted using historical seasonality and opportunity mix. "
            "Adjusts expectations by quarter rather than evenly across months."
        ),
        is_historically_proven=True,
        monthly_projections=_monthly_rows(deals, volumes),
        summary=RoadmapSummary(
            total_deals=sum(deals),
            avg_deal_size=avg_deal_size,
            total_volume=target,
            key_assumptions=[
                "Combines elements of all scenarios",
                "Weighted by historical seasonality",
                "Q4 conversion and positioning emphasis",
                "Most realistic path based on proven patterns",
            ],
        ),
    )


def build_roadmap(
    patterns: Optional[HistoricalPatterns], target_revenue: float
) -> List[RoadmapProjection]:
    if patterns is None:
        return []
    return [
        _steady_residential(patterns, target_revenue),
        _quarterly_impact(patterns, target_revenue),
        _relationship_driven(patterns, target_revenue),
        _hybrid_adaptive(patterns, target_revenue),
    ]
