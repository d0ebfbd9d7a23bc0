from __future__ import annotations

from typing import Optional

from claimsdesk.analytics.deal_size import analyze_deal_sizes
from claimsdesk.analytics.goal_scenarios import (
    active_scenario,
    build_goal_scenarios,
    quarterly_progress,
    ytd_progress,
)
from claimsdesk.analytics.plan_scenarios import build_plan_scenarios, monthly_projections, select_path
from claimsdesk.analytics.roadmap import analyze_history, build_roadmap
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.schemas.roadmap import DealSizeAnalysis, RoadmapResponse
from claimsdesk.schemas.scenarios import (
    GoalScenarioRequest,
    GoalScenarioResponse,
    PlanInputs,
    PlanScenarioResponse,
)


class ScenariosService:
    def __init__(self, commissions_repository: CommissionsRepository) -> None:
        self.commissions_repository = commissions_repository

    def get_goal_scenarios(self, request: GoalScenarioRequest) -> GoalScenarioResponse:
        scenarios = build_goal_scenarios(request.active_scenario_id, request.custom_quarters)
        active = active_scenario(scenarios)
        progress = quarterly_progress(active, request.completed_deals)
        return GoalScenarioResponse(
            scenarios=scenarios,
            active_scenario=active,
            quarterly_progress=progress,
            ytd_progress=ytd_progress(progress, request.target_revenue),
        )

    def get_plan_scenarios(self, inputs: PlanInputs, selected_scenario: str) -> PlanScenarioResponse:
        paths = build_plan_scenarios(inputs)
        return PlanScenarioResponse(
            inputs=inputs,
            scenarios=paths,
            selected_scenario=select_path(paths, selected_scenario),
            monthly_projections=monthly_projections(paths),
        )

    def get_roadmap(self, salesperson_id: Optional[str], target_revenue: float) -> RoadmapResponse:
        salesperson_ids = [salesperson_id] if salesperson_id else None
        records = self.commissions_repository.list_commissions(salesperson_ids=salesperson_ids)
        patterns = analyze_history(records)
        return RoadmapResponse(
            target_revenue=target_revenue,
            historical_patterns=patterns,
            scenarios=build_roadmap(patterns, target_revenue),
        )

    def get_deal_size_analysis(
        self,
        salesperson_id: Optional[str],
        target_deals: Optional[int] = None,
        target_revenue: Optional[float] = None,
    ) -> DealSizeAnalysis:
        salesperson_ids = [salesperson_id] if salesperson_id else None
        records = self.commissions_repository.list_commissions(salesperson_ids=salesperson_ids)
        return analyze_deal_sizes(records, target_deals, target_revenue)
