from __future__ import annotations

from datetime import date

import pytest

from claimsdesk.analytics.adjuster_matching import names_match, normalize_office
from claimsdesk.analytics.aggregation import (
    actual_commissions,
    available_years,
    commission_on,
    dashboard_stats,
    percent_change,
    summarize_adjusters,
    summarize_offices,
    team_metrics,
)
from claimsdesk.core.context import build_view_as_context
from claimsdesk.core.errors import ForbiddenError
from claimsdesk.models.claims import ClaimRecord
from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.models.people import SalespersonRecord
from claimsdesk.models.planning import SalesPlanRecord
from claimsdesk.repositories.commissions_repository import CommissionsRepository


def _claim(claim_id: str, adjuster: str, office, estimate: float, revised: float) -> ClaimRecord:
    return ClaimRecord(
        id=claim_id,
        name=f"Insured {claim_id}",
        adjuster=adjuster,
        office=office,
        estimate_of_loss=estimate,
        revised_estimate_of_loss=revised,
    )


def test_percent_change_guards_non_positive_initial() -> None:
    assert percent_change(0, 50_000) == 0
    assert percent_change(-10, 50_000) == 0
    assert percent_change(100, 150) == 50
    assert percent_change(200, 150) == -25


def test_commission_on_defaults_missing_split_to_full() -> None:
    record = CommissionRecord(
        id="c1", client_name="Client", fee_percentage=10, commission_percentage=20, split_percentage=None
    )
    assert record.split_percentage == 0
    assert commission_on(100_000, record) == pytest.approx(2_000)
    half = record.model_copy(update={"split_percentage": 50})
    assert commission_on(100_000, half) == pytest.approx(1_000)


def test_adjusters_group_case_and_spacing_variants() -> None:
    claims = [
        _claim("1", "Jeff  Miller", "Houston", 100, 150),
        _claim("2", "jeff miller", None, 100, 50),
        _claim("3", "Pat Jones", "Dallas", 0, 10),
    ]
    summaries = {s.adjuster: s for s in summarize_adjusters(claims)}
    jeff = summaries["Jeff  Miller"]
    assert jeff.total_claims == 2
    assert jeff.office == "Houston"
    assert jeff.positive_claims == 1
    assert jeff.negative_claims == 1
    assert jeff.total_dollar_difference == 0
    assert jeff.avg_percent_change == 0
    assert summaries["Pat Jones"].avg_percent_change == 0


def test_offices_collect_unassigned_claims() -> None:
    claims = [
        _claim("1", "Jeff Miller", "Houston", 100, 150),
        _claim("2", "JEFF MILLER", "Houston", 100, 100),
        _claim("3", "Pat Jones", None, 100, 100),
    ]
    offices = {o.office: o for o in summarize_offices(claims)}
    assert offices["Houston"].total_adjusters == 1
    assert offices["Houston"].adjusters == ["Jeff Miller"]
    assert offices["Houston"].avg_percent_change == 25
    assert offices["Unassigned"].total_claims == 1


def test_dashboard_stats_on_empty_input() -> None:
    stats = dashboard_stats([])
    assert stats.total_claims == 0
    assert stats.total_adjusters == 0
    assert stats.avg_percent_change == 0
    assert stats.office_count == 0


def test_actual_commissions_monthly_breakdown() -> None:
    records = [
        CommissionRecord(
            id="a", client_name="A", date_signed=date(2025, 1, 5), revised_estimate=100, commissions_paid=10
        ),
        CommissionRecord(
            id="b", client_name="B", date_signed=date(2025, 1, 20), revised_estimate=200, commissions_paid=5
        ),
        CommissionRecord(id="c", client_name="C", revised_estimate=50),
    ]
    actuals = actual_commissions(records)
    assert actuals.total_volume == 350
    assert actuals.total_deals == 3
    assert actuals.total_commission == 15
    assert actuals.monthly_breakdown[0].volume == 300
    assert actuals.monthly_breakdown[0].deals == 2
    assert len(actuals.monthly_breakdown) == 12


def test_team_metrics_defaults_without_plans() -> None:
    metrics = team_metrics([], [], member_count=3)
    assert metrics.avg_fee_percent == 7.5
    assert metrics.commission_percent == 20
    assert metrics.total_target_revenue == 0
    assert metrics.member_count == 3


def test_team_metrics_average_plan_rates() -> None:
    plans = [
        SalesPlanRecord(
            id="p1", salesperson_id="sp-1", year=2025, target_revenue=10_000_000,
            target_commission=150_000, avg_fee_percent=7, commission_percent=20,
        ),
        SalesPlanRecord(
            id="p2", salesperson_id="sp-2", year=2025, target_revenue=5_000_000,
            target_commission=60_000, avg_fee_percent=8, commission_percent=15,
        ),
    ]
    metrics = team_metrics(plans, [], member_count=2)
    assert metrics.total_target_revenue == 15_000_000
    assert metrics.total_target_commission == 210_000
    assert metrics.avg_fee_percent == 7.5
    assert metrics.commission_percent == 17.5


@pytest.mark.parametrize(
    ("name", "registry_name", "full_name", "expected"),
    [
        ("Jeff Miller", "Jeff Miller", None, True),
        ("jeff  miller", "Jeff Miller", None, True),
        ("Jeffrey Miller", "Jeff Miller", None, True),
        ("Jeffrey Millar", "Jeff Miller", "Jeffrey Miller", True),
        ("Chris M.", "Chris Martinez", None, True),
        ("Chris", "Chris Martinez", None, True),
        ("Tom Brown", "Tom Green", None, False),
        ("Art Smith", "Artie Smith", None, False),
        ("", "Jeff Miller", None, False),
    ],
)
def test_names_match(name, registry_name, full_name, expected) -> None:
    assert names_match(name, registry_name, full_name) is expected


def test_normalize_office_codes() -> None:
    assert normalize_office("h") == "Houston"
    assert normalize_office("D") == "Dallas"
    assert normalize_office(" Austin ") == "Austin"
    assert normalize_office("  ") is None
    assert normalize_office(None) is None


def test_view_as_requires_director() -> None:
    rep = SalespersonRecord(id="sp-1", name="Riley Rep", role="sales_rep")
    other = SalespersonRecord(id="sp-2", name="Sam Seller", role="sales_rep")
    director = SalespersonRecord(id="dir-1", name="Dana Director", role="sales_director")

    with pytest.raises(ForbiddenError):
        build_view_as_context(rep, other)

    context = build_view_as_context(director, rep)
    assert context.is_director is True
    assert context.is_viewing_as_other is True
    assert context.effective_salesperson.id == "sp-1"

    own = build_view_as_context(rep, rep)
    assert own.is_viewing_as_other is False
    assert own.effective_salesperson.id == "sp-1"


def test_available_years_fall_back_to_signing_date() -> None:
    records = [
        CommissionRecord(id="c1", client_name="A", year=2024, initial_estimate=1, revised_estimate=1),
        CommissionRecord(
            id="c2", client_name="B", date_signed=date(2025, 3, 1), initial_estimate=1, revised_estimate=1
        ),
        CommissionRecord(id="c3", client_name="C", initial_estimate=1, revised_estimate=1),
    ]
    assert available_years(records) == [2025, 2024]


class CapturingClient:
    def __init__(self) -> None:
        self.filters = None

    def select(self, table, select, filters=None, limit=None, offset=None, order=None, count=False):
        _ = table, select, limit, offset, order, count
        self.filters = filters
        return [], None


def test_year_filter_includes_rows_dated_by_signing() -> None:
    repository = CommissionsRepository()
    repository.client = CapturingClient()
    repository.list_commissions(salesperson_ids=["sp-1"], year=2025)
    assert repository.client.filters == [
        ("salesperson_id", "in.(sp-1)"),
        (
            "or",
            "(year.eq.2025,and(year.is.null,date_signed.gte.2025-01-01,date_signed.lte.2025-12-31))",
        ),
    ]
