from __future__ import annotations

from datetime import date
from typing import Optional

from claimsdesk.analytics.aggregation import actual_commissions
from claimsdesk.analytics.pacing import progress_alert, progress_snapshot, weekly_pacing
from claimsdesk.analytics.plan_scenarios import DEFAULT_SELECTED_PATH, build_plan_scenarios, select_path
from claimsdesk.core.config import get_settings
from claimsdesk.models.planning import SalesPlanRecord
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.repositories.plans_repository import PlansRepository
from claimsdesk.schemas.pacing import ProgressResponse
from claimsdesk.schemas.scenarios import PlanInputs


def _plan_inputs(plan: Optional[SalesPlanRecord]) -> PlanInputs:
    if plan is None or plan.target_revenue <= 0 or plan.target_deals <= 0:
        return PlanInputs()
    return PlanInputs(
        target_revenue=plan.target_revenue,
        target_deals=plan.target_deals,
        target_commission=plan.target_commission,
        avg_fee_percent=plan.avg_fee_percent,
        commission_percent=plan.commission_percent,
    )


def _as_of_for_year(year: int, today: date) -> tuple[date, Optional[int]]:
    """Evaluation date and elapsed months for ``year``; a future year has none elapsed."""
    if year < today.year:
        return date(year, 12, 31), None
    if year > today.year:
        return date(year, 1, 1), 0
    return today, None


class ProgressService:
    def __init__(
        self,
        plans_repository: PlansRepository,
        commissions_repository: CommissionsRepository,
    ) -> None:
        self.plans_repository = plans_repository
        self.commissions_repository = commissions_repository

    def get_progress(
        self, salesperson_id: str, year: int, today: Optional[date] = None
    ) -> ProgressResponse:
        settings = get_settings()
        as_of, months_passed = _as_of_for_year(year, today or date.today())
        plan = self.plans_repository.get_plan(salesperson_id, year)
        inputs = _plan_inputs(plan)
        path = select_path(
            build_plan_scenarios(inputs),
            plan.selected_scenario if plan else DEFAULT_SELECTED_PATH,
        )

        records = self.commissions_repository.list_commissions(salesperson_ids=[salesperson_id], year=year)
        actuals = actual_commissions(records)
        snapshot = progress_snapshot(
            path,
            actuals,
            as_of,
            ahead_threshold=settings.pacing_ahead_threshold_pct,
            behind_threshold=settings.pacing_behind_threshold_pct,
            months_passed=months_passed,
        )
        return ProgressResponse(
            year=year,
            scenario=path,
            actuals=actuals,
            snapshot=snapshot,
            alert=progress_alert(snapshot.volume_vs_expected, snapshot.deals_vs_expected),
            weekly=weekly_pacing(records, path.deal_count, as_of),
        )
