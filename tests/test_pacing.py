from __future__ import annotations

from datetime import date
from typing import List, Optional

import pytest

from claimsdesk.analytics.aggregation import record_year
from claimsdesk.analytics.pacing import (
    classify_variance,
    expected_to_date,
    progress_alert,
    variance_pct,
    weekly_pacing,
)
from claimsdesk.analytics.plan_scenarios import build_plan_scenarios
from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.models.planning import SalesPlanRecord
from claimsdesk.schemas.scenarios import PlanInputs
from claimsdesk.services.progress_service import ProgressService


class StubPlansRepository:
    def __init__(self, plan: Optional[SalesPlanRecord]) -> None:
        self.plan = plan

    def get_plan(self, salesperson_id: str, year: int) -> Optional[SalesPlanRecord]:
        _ = salesperson_id, year
        return self.plan


class StubCommissionsRepository:
    def __init__(self, records: List[CommissionRecord]) -> None:
        self.records = records

    def list_commissions(
        self, salesperson_ids: Optional[List[str]] = None, year: Optional[int] = None
    ) -> List[CommissionRecord]:
        return [r for r in self.records if year is None or record_year(r) == year]


def _signed(record_id: str, signed: date, value: float = 1_500_000) -> CommissionRecord:
    return CommissionRecord(
        id=record_id,
        salesperson_id="sp-1",
        client_name=f"Client {record_id}",
        date_signed=signed,
        year=signed.year,
        initial_estimate=value,
        revised_estimate=value,
    )


def _balanced_breakdown():
    return build_plan_scenarios(PlanInputs(target_revenue=10_000_000, target_deals=40))[1].quarterly_breakdown


def test_expected_to_date_prorates_current_quarter() -> None:
    volume, deals = expected_to_date(_balanced_breakdown(), 4)
    assert volume == pytest.approx(2_000_000 + 2_500_000 / 3)
    assert deals == pytest.approx(8 + 10 / 3)
    assert expected_to_date(_balanced_breakdown(), 0) == (0.0, 0.0)
    assert expected_to_date(_balanced_breakdown(), 12)[0] == pytest.approx(10_000_000)


def test_variance_is_zero_without_expectation() -> None:
    assert variance_pct(10, 0) == 0
    assert variance_pct(90, 100) == pytest.approx(-10)


@pytest.mark.parametrize(
    ("variance", "status"),
    [(5, "on_track"), (12, "on_track"), (0, "at_risk"), (-5, "at_risk"), (-6, "behind")],
)
def test_classify_variance(variance, status) -> None:
    assert classify_variance(variance) == status


@pytest.mark.parametrize(
    ("volume", "deals", "level"),
    [
        (-20, 0, "critical"),
        (-10, 2, "warning"),
        (20, 30, "celebration"),
        (10, 8, "good"),
        (0, 3, None),
    ],
)
def test_progress_alert_levels(volume, deals, level) -> None:
    alert = progress_alert(volume, deals)
    assert (alert.level if alert else None) == level


def test_weekly_pacing_streak_and_month_to_date() -> None:
    today = date(2025, 6, 11)  # Wednesday
    records = [
        _signed("this-week", date(2025, 6, 10), 400_000),
        _signed("last-week", date(2025, 6, 2)),
        _signed("two-weeks", date(2025, 5, 28)),
        _signed("old", date(2025, 4, 1)),
    ]
    pacing = weekly_pacing(records, 52, today)

    assert pacing.week_start == date(2025, 6, 9)
    assert pacing.week_end == date(2025, 6, 15)
    assert pacing.this_week_count == 1
    assert pacing.this_week_value == 400_000
    assert pacing.weekly_target == 1
    assert pacing.monthly_target == 5
    assert pacing.mtd_deals == 2
    assert pacing.mtd_expected == 2
    assert pacing.pacing_status == "on_pace"
    assert pacing.streak == 2


def test_weekly_pacing_defaults_without_plan() -> None:
    pacing = weekly_pacing([], None, date(2025, 6, 1))
    assert pacing.weekly_target == 1
    assert pacing.monthly_target == 4
    assert pacing.mtd_expected == 0
    assert pacing.mtd_pacing == 100
    assert pacing.streak == 0


def test_progress_service_uses_saved_plan() -> None:
    plan = SalesPlanRecord(
        id="plan-1",
        salesperson_id="sp-1",
        year=2025,
        target_revenue=10_000_000,
        target_deals=40,
        avg_fee_percent=7.5,
        commission_percent=20,
        selected_scenario="balanced",
    )
    records = [
        _signed("a", date(2025, 2, 3)),
        _signed("b", date(2025, 4, 8)),
        _signed("c", date(2025, 5, 19)),
    ]
    service = ProgressService(
        plans_repository=StubPlansRepository(plan),
        commissions_repository=StubCommissionsRepository(records),
    )

    progress = service.get_progress("sp-1", 2025, today=date(2025, 6, 30))

    snapshot = progress.snapshot
    assert progress.scenario.id == "balanced"
    assert progress.actuals.total_volume == 4_500_000
    assert snapshot.months_passed == 6
    assert snapshot.expected_volume == pytest.approx(4_500_000)
    assert snapshot.volume_status == "at_risk"
    assert snapshot.deals_status == "behind"
    assert snapshot.volume_progress == pytest.approx(45)
    assert snapshot.is_on_track is True
    assert snapshot.quarters[1].actual_deals == 2
    assert progress.alert is not None
    assert progress.alert.level == "critical"


def test_progress_for_past_year_measures_full_year() -> None:
    service = ProgressService(
        plans_repository=StubPlansRepository(None),
        commissions_repository=StubCommissionsRepository([]),
    )
    progress = service.get_progress("sp-1", 2024, today=date(2025, 3, 1))
    assert progress.snapshot.as_of == date(2024, 12, 31)
    assert progress.snapshot.months_passed == 12
    # Defaults apply when no plan has been saved.
    assert progress.scenario.total_volume == 55_000_000
    assert progress.snapshot.volume_status == "behind"


def test_progress_for_future_year_expects_nothing_yet() -> None:
    service = ProgressService(
        plans_repository=StubPlansRepository(None),
        commissions_repository=StubCommissionsRepository([]),
    )
    progress = service.get_progress("sp-1", 2026, today=date(2025, 6, 30))
    snapshot = progress.snapshot
    assert snapshot.months_passed == 0
    assert snapshot.expected_volume == 0
    assert snapshot.expected_deals == 0
    assert snapshot.year_progress == 0
    assert snapshot.is_on_track is True
    assert progress.alert is None


def test_rows_without_year_count_by_signing_date() -> None:
    undated_year = _signed("a", date(2025, 6, 10)).model_copy(update={"year": None})
    service = ProgressService(
        plans_repository=StubPlansRepository(None),
        commissions_repository=StubCommissionsRepository([undated_year, _signed("b", date(2024, 6, 10))]),
    )
    progress = service.get_progress("sp-1", 2025, today=date(2025, 6, 11))
    assert progress.actuals.total_deals == 1
    assert progress.weekly.this_week_count == 1
