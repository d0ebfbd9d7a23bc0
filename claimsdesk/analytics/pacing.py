from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from claimsdesk.analytics.aggregation import record_year
from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.schemas.commissions import ActualCommissions
from claimsdesk.schemas.pacing import ProgressAlert, ProgressSnapshot, QuarterPacing, WeeklyPacing
from claimsdesk.schemas.scenarios import QuarterTarget, ScenarioPath
from claimsdesk.shared.numbers import round_half_up, safe_div
from claimsdesk.shared.time import QUARTER_KEYS, days_in_month, week_bounds

ON_TRACK = "on_track"
AT_RISK = "at_risk"
BEHIND = "behind"

ON_TRACK_TOLERANCE_PCT = 5.0
CRITICAL_VARIANCE_PCT = -15.0
WARNING_VARIANCE_PCT = -5.0
CELEBRATION_VARIANCE_PCT = 15.0
GOOD_VARIANCE_PCT = 5.0

WEEKS_IN_YEAR = 52
STREAK_LOOKBACK_WEEKS = 12
DEFAULT_WEEKLY_TARGET = 1
DEFAULT_MONTHLY_TARGET = 4


def expected_to_date(
    quarterly_breakdown: Dict[str, QuarterTarget], months_elapsed: int
) -> tuple[float, float]:
    """Planned volume and deals that should be closed after ``months_elapsed`` months."""
    expected_volume = 0.0
    expected_deals = 0.0
    for index, key in enumerate(QUARTER_KEYS):
        quarter = quarterly_breakdown[key]
        months_in_quarter = min(3, max(0, months_elapsed - index * 3))
        if months_in_quarter == 0:
            break
        share = months_in_quarter / 3
        expected_volume += quarter.volume * share
        expected_deals += quarter.deals * share
    return expected_volume, expected_deals


def variance_pct(actual: float, expected: float) -> float:
    if expected == 0:
        return 0.0
    return (actual - expected) / expected * 100


def classify_variance(
    variance: float,
    ahead_threshold: float = 5.0,
    behind_threshold: float = -5.0,
) -> str:
    if variance >= ahead_threshold:
        return ON_TRACK
    if variance >= behind_threshold:
        return AT_RISK
    return BEHIND


def _quarter_actuals(actuals: ActualCommissions) -> List[tuple[int, float]]:
    totals: List[tuple[int, float]] = []
    for quarter in range(4):
        months = actuals.monthly_breakdown[quarter * 3 : quarter * 3 + 3]
        totals.append((sum(m.deals for m in months), sum(m.volume for m in months)))
    return totals


def progress_snapshot(
    path: ScenarioPath,
    actuals: ActualCommissions,
    as_of: date,
    ahead_threshold: float = 5.0,
    behind_threshold: float = -5.0,
    months_passed: Optional[int] = None,
) -> ProgressSnapshot:
    """Progress against ``path`` as of ``as_of``.

    ``months_passed`` defaults to the month of ``as_of``; pass 0 for a year that
    has not started so nothing is expected yet.
    """
    if months_passed is None:
        months_passed = as_of.month
    year_progress = months_passed / 12
    expected_volume, expected_deals = expected_to_date(path.quarterly_breakdown, months_passed)

    volume_progress = safe_div(actuals.total_volume, path.total_volume) * 100
    deals_progress = safe_div(actuals.total_deals, path.deal_count) * 100
    volume_variance = variance_pct(actuals.total_volume, expected_volume)
    deals_variance = variance_pct(actuals.total_deals, expected_deals)

    quarters: List[QuarterPacing] = []
    for key, (actual_deals, actual_volume) in zip(QUARTER_KEYS, _quarter_actuals(actuals)):
        planned = path.quarterly_breakdown[key]
        quarters.append(
            QuarterPacing(
                quarter=key,
                planned_deals=planned.deals,
                planned_volume=planned.volume,
                actual_deals=actual_deals,
                actual_volume=actual_volume,
                volume_progress=min(safe_div(actual_volume, planned.volume) * 100, 100.0),
            )
        )

    return ProgressSnapshot(
        as_of=as_of,
        months_passed=months_passed,
        current_quarter=(as_of.month - 1) // 3 + 1,
        volume_progress=min(volume_progress, 100.0),
        deals_progress=min(deals_progress, 100.0),
        expected_volume=expected_volume,
        expected_deals=expected_deals,
        volume_vs_expected=volume_variance,
        deals_vs_expected=deals_variance,
        volume_status=classify_variance(volume_variance, ahead_threshold, behind_threshold),
        deals_status=classify_variance(deals_variance, ahead_threshold, behind_threshold),
        year_progress=year_progress * 100,
        is_on_track=volume_progress >= year_progress * 100 - ON_TRACK_TOLERANCE_PCT,
        quarters=quarters,
    )


def _direction(variance: float) -> str:
    return "behind" if variance < 0 else "ahead"


def progress_alert(volume_variance: float, deals_variance: float) -> Optional[ProgressAlert]:
    worst = min(volume_variance, deals_variance)
    if worst < CRITICAL_VARIANCE_PCT:
        return ProgressAlert(
            level="critical",
            title="You're significantly behind pace",
            message=(
                f"Volume is {abs(volume_variance):.0f}% {_direction(volume_variance)} and deals are "
                f"{abs(deals_variance):.0f}% {_direction(deals_variance)}. "
                "Review your pipeline for quick wins."
            ),
        )
    if worst < WARNING_VARIANCE_PCT:
        return ProgressAlert(
            level="warning",
            title="Slightly behind target",
            message=(
                f"You're {abs(worst):.0f}% behind pace. "
                "Consider focusing on closing pending deals."
            ),
        )
    if worst > CELEBRATION_VARIANCE_PCT:
        return ProgressAlert(
            level="celebration",
            title="Outstanding progress!",
            message=f"You're {worst:.0f}% ahead of pace. Keep up the great work!",
        )
    if worst > GOOD_VARIANCE_PCT:
        return ProgressAlert(
            level="good",
            title="On track!",
            message="You're ahead of pace. Great job!",
        )
    return None


def _signed_between(records: Sequence[CommissionRecord], start: date, end: date) -> List[CommissionRecord]:
    return [r for r in records if r.date_signed is not None and start <= r.date_signed <= end]


def _pacing_status(pacing: float) -> str:
    if pacing >= 100:
        return "on_pace"
    if pacing >= 75:
        return "slightly_behind"
    return "behind"


def weekly_pacing(
    records: Sequence[CommissionRecord], deal_count: Optional[int], as_of: date
) -> WeeklyPacing:
    year_records = [r for r in records if record_year(r) == as_of.year]
    week_start, week_end = week_bounds(as_of)
    this_week = _signed_between(year_records, week_start, week_end)
    mtd = _signed_between(year_records, as_of.replace(day=1), as_of)

    weekly_target = math.ceil(deal_count / WEEKS_IN_YEAR) if deal_count else DEFAULT_WEEKLY_TARGET
    monthly_target = math.ceil(deal_count / 12) if deal_count else DEFAULT_MONTHLY_TARGET
    mtd_expected = round_half_up(monthly_target * as_of.day / days_in_month(as_of))
    mtd_pacing = len(mtd) / mtd_expected * 100 if mtd_expected > 0 else 100.0

    streak = 0
    check_start = week_start - timedelta(days=7)
    for _ in range(STREAK_LOOKBACK_WEEKS):
        week_deals = _signed_between(year_records, check_start, check_start + timedelta(days=6))
        if len(week_deals) < weekly_target:
            break
        streak += 1
        check_start -= timedelta(days=7)

    return WeeklyPacing(
        week_start=week_start,
        week_end=week_end,
        this_week_count=len(this_week),
        this_week_value=sum(r.initial_estimate for r in this_week),
        weekly_target=weekly_target,
        mtd_deals=len(mtd),
        mtd_expected=mtd_expected,
        mtd_pacing=mtd_pacing,
        monthly_target=monthly_target,
        pacing_status=_pacing_status(mtd_pacing),
        streak=streak,
    )
