from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from claimsdesk.models.planning import PipelineDealRecord
from claimsdesk.schemas.pipeline import PipelineDeal, PipelineGroups, PipelineStats
from claimsdesk.shared.time import add_months, week_bounds

STAGE_PROBABILITIES = {
    "prospect": 20,
    "qualified": 40,
    "proposal": 60,
    "negotiation": 75,
    "closing": 90,
}
FALLBACK_PROBABILITY = 50


def default_probability(stage: Optional[str]) -> int:
    return STAGE_PROBABILITIES.get(stage or "", FALLBACK_PROBABILITY)


def to_pipeline_deal(record: PipelineDealRecord) -> PipelineDeal:
    probability = (
        record.probability if record.probability is not None else default_probability(record.stage)
    )
    return PipelineDeal(
        id=record.id,
        salesperson_id=record.salesperson_id,
        client_name=record.client_name,
        expected_value=record.expected_value,
        expected_close_date=record.expected_close_date,
        stage=record.stage,
        probability=probability,
        weighted_value=record.expected_value * probability / 100,
        notes=record.notes,
    )


def pipeline_stats(deals: Sequence[PipelineDeal]) -> PipelineStats:
    return PipelineStats(
        total_deals=len(deals),
        total_value=sum(d.expected_value for d in deals),
        weighted_value=sum(d.weighted_value for d in deals),
    )


def group_by_close_date(deals: Sequence[PipelineDeal], today: date) -> PipelineGroups:
    week_start, week_end = week_bounds(today)
    next_month = add_months(today, 1)
    groups = PipelineGroups(this_week=[], this_month=[], next_month=[], later=[])
    for deal in deals:
        close = deal.expected_close_date
        if close is None:
            groups.later.append(deal)
        elif week_start <= close <= week_end:
            groups.this_week.append(deal)
        elif (close.year, close.month) == (today.year, today.month):
            groups.this_month.append(deal)
        elif (close.year, close.month) == (next_month.year, next_month.month):
            groups.next_month.append(deal)
        else:
            groups.later.append(deal)
    return groups
