from __future__ import annotations

import re
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from claimsdesk.models.claims import ClaimRecord
from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.models.planning import SalesPlanRecord
from claimsdesk.schemas.claims import AdjusterSummary, DashboardStats, OfficeSummary
from claimsdesk.schemas.commissions import (
    ActualCommissions,
    MonthlyVolumePoint,
    TeamMetrics,
    YearSummary,
)
from claimsdesk.shared.numbers import safe_div
from claimsdesk.shared.time import MONTH_NAMES

UNASSIGNED_OFFICE = "Unassigned"
DEFAULT_SPLIT_PERCENTAGE = 100.0
DEFAULT_FEE_PERCENT = 7.5
DEFAULT_COMMISSION_PERCENT = 20.0

_WHITESPACE = re.compile(r"\s+")


def percent_change(initial: float, revised: float) -> float:
    if initial <= 0:
        return 0.0
    return (revised - initial) / initial * 100


def group_key(value: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", (value or "").strip().lower())


def effective_split(record: CommissionRecord) -> float:
    return record.split_percentage or DEFAULT_SPLIT_PERCENTAGE


def commission_on(amount: float, record: CommissionRecord) -> float:
    return (
        amount
        * (effective_split(record) / 100)
        * (record.fee_percentage / 100)
        * (record.commission_percentage / 100)
    )


def record_year(record: CommissionRecord) -> Optional[int]:
    if record.year:
        return record.year
    if record.date_signed:
        return record.date_signed.year
    return None


def _claim_difference(claim: ClaimRecord) -> float:
    return claim.revised_estimate_of_loss - claim.estimate_of_loss


def _avg_claim_percent_change(claims: Sequence[ClaimRecord]) -> float:
    changes = [percent_change(c.estimate_of_loss, c.revised_estimate_of_loss) for c in claims]
    return safe_div(sum(changes), len(changes))


def summarize_adjusters(claims: Iterable[ClaimRecord]) -> List[AdjusterSummary]:
    grouped: Dict[str, List[ClaimRecord]] = {}
    for claim in claims:
        grouped.setdefault(group_key(claim.adjuster), []).append(claim)

    summaries: List[AdjusterSummary] = []
    for adjuster_claims in grouped.values():
        first = adjuster_claims[0]
        office = next((c.office for c in adjuster_claims if c.office), None)
        differences = [_claim_difference(c) for c in adjuster_claims]
        positives = [d for d in differences if d > 0]
        negatives = [d for d in differences if d < 0]
        summaries.append(
            AdjusterSummary(
                adjuster=first.adjuster.strip(),
                office=office,
                total_claims=len(adjuster_claims),
                total_estimate=sum(c.estimate_of_loss for c in adjuster_claims),
                total_revised=sum(c.revised_estimate_of_loss for c in adjuster_claims),
                avg_percent_change=_avg_claim_percent_change(adjuster_claims),
                total_dollar_difference=sum(differences),
                positive_claims=len(positives),
                negative_claims=len(negatives),
                positive_difference=sum(positives),
                negative_difference=sum(negatives),
            )
        )
    return summaries


def summarize_offices(claims: Iterable[ClaimRecord]) -> List[OfficeSummary]:
    grouped: Dict[str, List[ClaimRecord]] = {}
    for claim in claims:
        grouped.setdefault(claim.office or UNASSIGNED_OFFICE, []).append(claim)

    summaries: List[OfficeSummary] = []
    for office, office_claims in grouped.items():
        adjusters: Dict[str, str] = {}
        for claim in office_claims:
            adjusters.setdefault(group_key(claim.adjuster), claim.adjuster.strip())
        summaries.append(
            OfficeSummary(
                office=office,
                adjusters=list(adjusters.values()),
                total_adjusters=len(adjusters),
                total_claims=len(office_claims),
                avg_percent_change=_avg_claim_percent_change(office_claims),
                total_estimate=sum(c.estimate_of_loss for c in office_claims),
                total_revised=sum(c.revised_estimate_of_loss for c in office_claims),
            )
        )
    return summaries


def dashboard_stats(claims: Sequence[ClaimRecord]) -> DashboardStats:
    return DashboardStats(
        total_claims=len(claims),
        total_adjusters=len({group_key(c.adjuster) for c in claims}),
        avg_percent_change=_avg_claim_percent_change(claims),
        office_count=len({c.office for c in claims if c.office}),
        total_estimate=sum(c.estimate_of_loss for c in claims),
        total_revised=sum(c.revised_estimate_of_loss for c in claims),
    )


def summarize_commission_years(records: Iterable[CommissionRecord]) -> List[YearSummary]:
    by_year: Dict[int, List[CommissionRecord]] = defaultdict(list)
    for record in records:
        year = record_year(record)
        if year is not None:
            by_year[year].append(record)

    summaries: List[YearSummary] = []
    for year, year_records in by_year.items():
        count = len(year_records)
        summaries.append(
            YearSummary(
                year=year,
                total_deals=count,
                total_initial_estimate=sum(r.initial_estimate for r in year_records),
                total_revised_estimate=sum(r.revised_estimate for r in year_records),
                avg_split_percentage=safe_div(sum(effective_split(r) for r in year_records), count),
                avg_fee_percentage=safe_div(sum(r.fee_percentage for r in year_records), count),
                avg_commission_percentage=safe_div(
                    sum(r.commission_percentage for r in year_records), count
                ),
                total_commissions_paid=sum(r.commissions_paid for r in year_records),
                projected_commission=sum(commission_on(r.initial_estimate, r) for r in year_records),
                actual_commission=sum(commission_on(r.revised_estimate, r) for r in year_records),
            )
        )
    return sorted(summaries, key=lambda summary: summary.year, reverse=True)


def available_years(records: Iterable[CommissionRecord]) -> List[int]:
    years = {record_year(r) for r in records}
    return sorted((year for year in years if year), reverse=True)


def monthly_breakdown(records: Iterable[CommissionRecord]) -> List[MonthlyVolumePoint]:
    volume = [0.0] * 12
    deals = [0] * 12
    for record in records:
        if record.date_signed is None:
            continue
        index = record.date_signed.month - 1
        volume[index] += record.revised_estimate
        deals[index] += 1
    return [
        MonthlyVolumePoint(month=name, volume=volume[index], deals=deals[index])
        for index, name in enumerate(MONTH_NAMES)
    ]


def actual_commissions(records: Sequence[CommissionRecord]) -> ActualCommissions:
    return ActualCommissions(
        total_volume=sum(r.revised_estimate for r in records),
        total_deals=len(records),
        total_commission=sum(r.commissions_paid for r in records),
        monthly_breakdown=monthly_breakdown(records),
    )


def team_metrics(
    plans: Sequence[SalesPlanRecord],
    records: Sequence[CommissionRecord],
    member_count: int,
) -> TeamMetrics:
    if plans:
        avg_fee = sum(p.avg_fee_percent for p in plans) / len(plans)
        commission_pct = sum(p.commission_percent for p in plans) / len(plans)
    else:
        avg_fee = DEFAULT_FEE_PERCENT
        commission_pct = DEFAULT_COMMISSION_PERCENT
    return TeamMetrics(
        total_target_revenue=sum(p.target_revenue for p in plans),
        total_target_commission=sum(p.target_commission for p in plans),
        avg_fee_percent=avg_fee,
        commission_percent=commission_pct,
        member_count=member_count,
        actual_commissions=actual_commissions(records),
    )
