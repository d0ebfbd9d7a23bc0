from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from claimsdesk.schemas.scenarios import (
    CompletedDeal,
    DealMix,
    DealMixScenario,
    DealProgress,
    QuarterlyMix,
    QuarterProgress,
    YtdProgress,
)
from claimsdesk.shared.numbers import safe_div
from claimsdesk.shared.time import QUARTER_KEYS

DEAL_SIZES: Dict[str, Dict[str, float]] = {
    "large": {"min": 5_000_000, "max": 10_000_000, "avg": 7_000_000},
    "medium": {"min": 1_000_000, "max": 2_000_000, "avg": 1_500_000},
    "small": {"min": 350_000, "max": 750_000, "avg": 550_000},
}

CUSTOM_SCENARIO_ID = "custom"
DEFAULT_SCENARIO_ID = "steady-flow"


def _uniform(large: int, medium: int, small: int) -> QuarterlyMix:
    mix = DealMix(large=large, medium=medium, small=small)
    return QuarterlyMix(q1=mix, q2=mix, q3=mix, q4=mix)


# (id, name, description, quarters)
SCENARIO_TEMPLATES: List[Tuple[str, str, str, QuarterlyMix]] = [
    (
        "steady-flow",
        "Steady Flow",
        "1 large + 2 medium per quarter - consistent, predictable growth",
        _uniform(1, 2, 2),
    ),
    (
        "quarterly-impact",
        "Quarterly Impact",
        "1-2 large deals per quarter only - fewer deals, higher value",
        _uniform(2, 0, 0),
    ),
    (
        "heavy-h1",
        "Heavy H1",
        "Front-load the year with large deals in Q1 & Q2",
        QuarterlyMix(
            q1=DealMix(large=2, medium=2, small=1),
            q2=DealMix(large=2, medium=2, small=1),
            q3=DealMix(large=1, medium=1, small=2),
            q4=DealMix(large=1, medium=1, small=2),
        ),
    ),
    (
        "back-loaded",
        "Back-Loaded",
        "Light H1 for relationship building, heavy H2 for closing",
        QuarterlyMix(
            q1=DealMix(large=0, medium=2, small=3),
            q2=DealMix(large=1, medium=2, small=2),
            q3=DealMix(large=2, medium=2, small=1),
            q4=DealMix(large=2, medium=2, small=1),
        ),
    ),
    (CUSTOM_SCENARIO_ID, "Custom", "Build your own deal mix for each quarter", _uniform(0, 0, 0)),
]

DEFAULT_CUSTOM_QUARTERS = _uniform(1, 2, 2)


def quarter_volume(mix: DealMix) -> float:
    return (
        mix.large * DEAL_SIZES["large"]["avg"]
        + mix.medium * DEAL_SIZES["medium"]["avg"]
        + mix.small * DEAL_SIZES["small"]["avg"]
    )


def quarter_deals(mix: DealMix) -> int:
    return mix.large + mix.medium + mix.small


def compute_scenario_totals(quarters: QuarterlyMix) -> Tuple[float, int]:
    total_volume = 0.0
    total_deals = 0
    for key in QUARTER_KEYS:
        mix: DealMix = getattr(quarters, key)
        total_volume += quarter_volume(mix)
        total_deals += quarter_deals(mix)
    return total_volume, total_deals


def build_goal_scenarios(
    active_id: str = DEFAULT_SCENARIO_ID,
    custom_quarters: Optional[QuarterlyMix] = None,
) -> List[DealMixScenario]:
    scenarios: List[DealMixScenario] = []
    for scenario_id, name, description, template_quarters in SCENARIO_TEMPLATES:
        quarters = template_quarters
        if scenario_id == CUSTOM_SCENARIO_ID:
            quarters = custom_quarters or DEFAULT_CUSTOM_QUARTERS
        total_volume, total_deals = compute_scenario_totals(quarters)
        scenarios.append(
            DealMixScenario(
                id=scenario_id,
                name=name,
                description=description,
                quarters=quarters,
                total_volume=total_volume,
                total_deals=total_deals,
                is_template=True,
                is_active=scenario_id == active_id,
            )
        )
    return scenarios


def active_scenario(scenarios: Sequence[DealMixScenario]) -> DealMixScenario:
    return next((s for s in scenarios if s.is_active), scenarios[0])


def quarterly_progress(
    scenario: DealMixScenario, completed_deals: Sequence[CompletedDeal]
) -> Dict[str, QuarterProgress]:
    progress: Dict[str, QuarterProgress] = {}
    for key in QUARTER_KEYS:
        mix: DealMix = getattr(scenario.quarters, key)
        progress[key] = QuarterProgress(
            planned=quarter_volume(mix),
            completed=0.0,
            deals=DealProgress(planned=quarter_deals(mix), completed=0),
        )
    for deal in completed_deals:
        quarter = progress[deal.quarter]
        quarter.completed += deal.actual_value or DEAL_SIZES[deal.size]["avg"]
        quarter.deals.completed += 1
    return progress


def ytd_progress(progress: Dict[str, QuarterProgress], target_revenue: float) -> YtdProgress:
    total_planned = sum(q.planned for q in progress.values())
    total_completed = sum(q.completed for q in progress.values())
    return YtdProgress(
        total_planned=total_planned,
        total_completed=total_completed,
        total_deals_planned=sum(q.deals.planned for q in progress.values()),
        total_deals_completed=sum(q.deals.completed for q in progress.values()),
        percent_complete=safe_div(total_completed, total_planned) * 100,
        gap_to_goal=target_revenue - total_completed,
    )
