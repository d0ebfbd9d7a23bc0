from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.models.planning import AdjusterRatingRecord
from claimsdesk.schemas.ratings import AggregatedAdjusterRating, ClaimAlert, TeamClaimAlerts
from claimsdesk.shared.numbers import round_half_up, safe_div
from claimsdesk.shared.time import subtract_months

COMPLETED_STATUSES = frozenset({"paid", "released"})
UNKNOWN_SALESPERSON = "Unknown"


def survey_average(communication: int, settlement: int, overall: int) -> int:
    return round_half_up((communication + settlement + overall) / 3)


def rated_milestones(ratings: Iterable[AdjusterRatingRecord]) -> Dict[str, Set[str]]:
    rated: Dict[str, Set[str]] = defaultdict(set)
    for rating in ratings:
        if rating.claim_milestone:
            rated[rating.sales_commission_id].add(rating.claim_milestone)
    return rated


def due_milestone(
    record: CommissionRecord, rated: Set[str], today: date
) -> Optional[str]:
    if record.date_signed is None:
        return None
    if (record.status or "") in COMPLETED_STATUSES:
        return None if "completed" in rated else "completed"

    signed = record.date_signed
    if signed <= subtract_months(today, 6) and "6_months" not in rated:
        return "6_months"
    if signed <= subtract_months(today, 3) and not rated & {"3_months", "6_months"}:
        return "3_months"
    if signed <= today - timedelta(days=14) and not rated & {"2_weeks", "3_months", "6_months"}:
        return "2_weeks"
    return None


def claim_alerts(
    records: Sequence[CommissionRecord],
    ratings: Iterable[AdjusterRatingRecord],
    today: date,
    salesperson_names: Optional[Mapping[str, str]] = None,
) -> List[ClaimAlert]:
    rated = rated_milestones(ratings)
    alerts: List[ClaimAlert] = []
    for record in records:
        if not record.adjuster or not record.salesperson_id:
            continue
        milestone = due_milestone(record, rated.get(record.id, set()), today)
        if milestone is None:
            continue
        alerts.append(
            ClaimAlert(
                id=record.id,
                client_name=record.client_name,
                adjuster=record.adjuster,
                date_signed=record.date_signed,
                salesperson_id=record.salesperson_id,
                salesperson_name=(
                    salesperson_names.get(record.salesperson_id, UNKNOWN_SALESPERSON)
                    if salesperson_names is not None
                    else None
                ),
                status=record.status,
                milestone=milestone,
            )
        )
    return alerts


def group_team_alerts(alerts: Iterable[ClaimAlert]) -> List[TeamClaimAlerts]:
    grouped: Dict[str, TeamClaimAlerts] = {}
    for alert in alerts:
        if alert.salesperson_id not in grouped:
            grouped[alert.salesperson_id] = TeamClaimAlerts(
                salesperson_id=alert.salesperson_id,
                salesperson_name=alert.salesperson_name or UNKNOWN_SALESPERSON,
                alerts=[],
            )
        grouped[alert.salesperson_id].alerts.append(alert)
    return sorted(grouped.values(), key=lambda group: len(group.alerts), reverse=True)


def _mean(values: List[int]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def aggregate_ratings(ratings: Iterable[AdjusterRatingRecord]) -> List[AggregatedAdjusterRating]:
    scores: Dict[str, List[int]] = defaultdict(list)
    communication: Dict[str, List[int]] = defaultdict(list)
    settlement: Dict[str, List[int]] = defaultdict(list)
    overall: Dict[str, List[int]] = defaultdict(list)
    for rating in ratings:
        adjuster = rating.adjuster
        scores.setdefault(adjuster, [])
        score = rating.rating_overall or rating.rating
        if score:
            scores[adjuster].append(score)
        if rating.rating_communication:
            communication[adjuster].append(rating.rating_communication)
        if rating.rating_settlement:
            settlement[adjuster].append(rating.rating_settlement)
        if rating.rating_overall:
            overall[adjuster].append(rating.rating_overall)

    aggregated = [
        AggregatedAdjusterRating(
            adjuster=adjuster,
            average_rating=safe_div(sum(values), len(values)),
            rating_count=len(values),
            ratings=values,
            avg_communication=_mean(communication[adjuster]),
            avg_settlement=_mean(settlement[adjuster]),
            avg_overall=_mean(overall[adjuster]),
        )
        for adjuster, values in scores.items()
    ]
    return sorted(aggregated, key=lambda item: item.average_rating, reverse=True)
