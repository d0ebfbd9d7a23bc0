from __future__ import annotations

from typing import Dict, List, Sequence

from claimsdesk.schemas.scenarios import (
    MonthlyProjectionPoint,
    PlanInputs,
    QuarterTarget,
    ScenarioPath,
)
from claimsdesk.shared.numbers import format_currency, round_half_up, safe_div
from claimsdesk.shared.time import MONTH_NAMES, QUARTER_KEYS

QUARTERLY_WEIGHTS: Dict[str, float] = {"q1": 0.20, "q2": 0.25, "q3": 0.30, "q4": 0.25}
# Share of a quarter's volume landing in each of its three months.
MONTH_IN_QUARTER_WEIGHTS = (0.30, 0.35, 0.35)
DEFAULT_SELECTED_PATH = "balanced"

PATH_DEFINITIONS = [
    {
        "id": "conservative",
        "name": "Conservative Path",
        "subtitle": "More Deals, Consistent Pipeline",
        "description": (
            "Focus on a higher number of smaller to medium deals. Lower individual risk with "
            "steadier cash flow throughout the year."
        ),
        "risk_level": "low",
        "multiplier": 1.3,
        "assumptions": [
            "Mix of residential and small commercial",
            "Consistent weekly prospecting activity",
            "Lower variance, steadier income",
        ],
    },
    {
        "id": "balanced",
        "name": "Balanced Path",
        "subtitle": "Moderate Deals, Solid Execution",
        "description": (
            "A balanced approach combining mid-size commercial opportunities with select large "
            "deals. Matches historical performance patterns."
        ),
        "risk_level": "medium",
        "multiplier": 1.0,
        "assumptions": [
            "Mix of commercial and institutional",
            "Quarterly impact deals required",
            "Moderate variance, proven approach",
        ],
    },
    {
        "id": "commercial-heavy",
        "name": "Commercial-Heavy Path",
        "subtitle": "Fewer Deals, Bigger Opportunities",
        "description": (
            "Pursue fewer but significantly larger commercial and industrial opportunities. "
            "Requires deep relationships and the ability to close high-value deals."
        ),
        "risk_level": "high",
        "multiplier": 0.7,
        "assumptions": [
            "Focus on large commercial and industrial",
            "Pre-loss relationship positioning",
            "Higher variance, higher potential",
        ],
    },
]


def projected_commission(volume: float, avg_fee_percent: float, commission_percent: float) -> float:
    company_fee = volume * (avg_fee_percent / 100)
    return company_fee * (commission_percent / 100)


def quarterly_breakdown(deal_count: int, target_revenue: float) -> Dict[str, QuarterTarget]:
    return {
        key: QuarterTarget(
            deals=round_half_up(deal_count * weight),
            volume=target_revenue * weight,
        )
        for key, weight in QUARTERLY_WEIGHTS.items()
    }


def build_plan_scenarios(inputs: PlanInputs) -> List[ScenarioPath]:
    commission = projected_commission(
        inputs.target_revenue, inputs.avg_fee_percent, inputs.commission_percent
    )
    paths: List[ScenarioPath] = []
    for definition in PATH_DEFINITIONS:
        deal_count = round_half_up(inputs.target_deals * definition["multiplier"])
        avg_deal_size = safe_div(inputs.target_revenue, deal_count)
        paths.append(
            ScenarioPath(
                id=definition["id"],
                name=definition["name"],
                subtitle=definition["subtitle"],
                description=definition["description"],
                risk_level=definition["risk_level"],
                deal_count=deal_count,
                avg_deal_size=avg_deal_size,
                total_volume=inputs.target_revenue,
                projected_commission=commission,
                quarterly_breakdown=quarterly_breakdown(deal_count, inputs.target_revenue),
                key_assumptions=[
                    f"{deal_count} deals averaging ~{format_currency(avg_deal_size)} each",
                    *definition["assumptions"],
                ],
            )
        )
    return paths


def select_path(paths: Sequence[ScenarioPath], path_id: str) -> ScenarioPath:
    for path in paths:
        if path.id == path_id:
            return path
    return next((p for p in paths if p.id == DEFAULT_SELECTED_PATH), paths[0])


def monthly_projections(paths: Sequence[ScenarioPath]) -> List[MonthlyProjectionPoint]:
    running = {path.id: 0.0 for path in paths}
    points: List[MonthlyProjectionPoint] = []
    for index, month in enumerate(MONTH_NAMES):
        quarter = QUARTER_KEYS[index // 3]
        weight = MONTH_IN_QUARTER_WEIGHTS[index % 3]
        for path in paths:
            running[path.id] += path.quarterly_breakdown[quarter].volume * weight
        points.append(MonthlyProjectionPoint(month=month, cumulative_volume=dict(running)))
    return points
